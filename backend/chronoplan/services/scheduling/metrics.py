from __future__ import annotations

from chronoplan.schemas.generator import TimetableMetrics
from chronoplan.services.scheduling.chromosome import Chromosome
from chronoplan.services.scheduling.fitness import FitnessEvaluator


def calculate_metrics(chromosome: Chromosome, evaluator: FitnessEvaluator) -> TimetableMetrics:
    return TimetableMetrics(
        classroom_utilization=evaluator.utilization(chromosome) * 100,
        faculty_workload_balance=evaluator.workload_balance(chromosome) * 100,
        conflict_count=evaluator.checker.count(chromosome),
        preference_satisfaction=evaluator.preference_satisfaction(chromosome) * 100,
    )
