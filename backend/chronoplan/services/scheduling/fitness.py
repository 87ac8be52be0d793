from __future__ import annotations

import math
from collections import Counter
from collections.abc import Sequence
from dataclasses import dataclass

from chronoplan.schemas.generator import FitnessWeights
from chronoplan.services.scheduling.chromosome import Chromosome
from chronoplan.services.scheduling.constraints import ConstraintChecker
from chronoplan.services.scheduling.sessions import CourseSession
from chronoplan.services.scheduling.snapshot import SchedulingSnapshot


def _clamp(value: float) -> float:
    return max(0.0, min(1.0, value))


@dataclass(frozen=True)
class FitnessBreakdown:
    utilization: float
    balance: float
    preference: float
    penalty: float
    violation_count: int
    fitness: float


class FitnessEvaluator:
    def __init__(
        self,
        sessions: Sequence[CourseSession],
        snapshot: SchedulingSnapshot,
        checker: ConstraintChecker,
        weights: FitnessWeights | None = None,
    ) -> None:
        self.sessions = list(sessions)
        self.snapshot = snapshot
        self.checker = checker
        self.weights = weights or FitnessWeights()

    def utilization(self, chromosome: Chromosome) -> float:
        total_slots = len(self.snapshot.classrooms) * len(self.snapshot.timeslots)
        if total_slots == 0:
            return 0.0
        used = {(gene.timeslot_index, gene.classroom_index) for gene in chromosome}
        return _clamp(len(used) / total_slots)

    def faculty_hours(self, chromosome: Chromosome) -> Counter[str]:
        hours: Counter[str] = Counter()
        for index in range(len(chromosome)):
            for faculty_id in self.sessions[index].required_faculty_ids:
                hours[faculty_id] += 1
        return hours

    def workload_balance(self, chromosome: Chromosome) -> float:
        hours = list(self.faculty_hours(chromosome).values())
        if not hours:
            return 1.0
        mean = sum(hours) / len(hours)
        variance = sum((value - mean) ** 2 for value in hours) / len(hours)
        return _clamp(1.0 / (1.0 + math.sqrt(variance)))

    def preference_satisfaction(self, chromosome: Chromosome) -> float:
        satisfied = 0
        total = 0
        for index, gene in enumerate(chromosome):
            day = self.snapshot.timeslots[gene.timeslot_index].day
            for faculty_id in self.sessions[index].required_faculty_ids:
                total += 1
                faculty = self.snapshot.faculty_by_id.get(faculty_id)
                if faculty is not None and day in faculty.preferred_days:
                    satisfied += 1
        if total == 0:
            return 1.0
        return satisfied / total

    def penalty(self, violation_count: int) -> float:
        if not self.sessions:
            return 1.0
        return _clamp(1.0 - violation_count / (2 * len(self.sessions)))

    def breakdown(self, chromosome: Chromosome) -> FitnessBreakdown:
        utilization = self.utilization(chromosome)
        balance = self.workload_balance(chromosome)
        preference = self.preference_satisfaction(chromosome)
        violation_count = self.checker.count(chromosome)
        penalty = self.penalty(violation_count)
        weights = self.weights
        fitness = (
            weights.utilization * utilization
            + weights.balance * balance
            + weights.preference * preference
            + weights.penalty * penalty
        )
        return FitnessBreakdown(
            utilization=utilization,
            balance=balance,
            preference=preference,
            penalty=penalty,
            violation_count=violation_count,
            fitness=_clamp(fitness),
        )

    def evaluate(self, chromosome: Chromosome) -> float:
        return self.breakdown(chromosome).fitness
