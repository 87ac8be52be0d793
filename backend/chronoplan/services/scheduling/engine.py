from __future__ import annotations

import logging
import random
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from datetime import date
from enum import Enum

from chronoplan.core.exceptions import SchedulerError
from chronoplan.schemas.generator import GenerationSettings, TimetableMetrics
from chronoplan.services.scheduling.allocation import allocate_classrooms
from chronoplan.services.scheduling.chromosome import Chromosome, clone, initialize_population, random_chromosome
from chronoplan.services.scheduling.constraints import ConstraintChecker, ConstraintRepairer
from chronoplan.services.scheduling.fitness import FitnessEvaluator
from chronoplan.services.scheduling.metrics import calculate_metrics
from chronoplan.services.scheduling.operators import mutate, tournament_select, two_point_crossover
from chronoplan.services.scheduling.sessions import CourseSession, expand_sessions, subjects_without_faculty
from chronoplan.services.scheduling.snapshot import SchedulingSnapshot

logger = logging.getLogger(__name__)


class RunState(str, Enum):
    running = "running"
    converged = "converged"
    exhausted = "exhausted"


@dataclass
class EvolutionOutcome:
    best: Chromosome
    best_fitness: float
    generations: int
    state: RunState


class EvolutionController:
    def __init__(
        self,
        *,
        sessions: Sequence[CourseSession],
        snapshot: SchedulingSnapshot,
        settings: GenerationSettings,
        rng: random.Random,
        evaluator: FitnessEvaluator,
        repairer: ConstraintRepairer,
    ) -> None:
        self.sessions = list(sessions)
        self.settings = settings
        self.random = rng
        self.evaluator = evaluator
        self.repairer = repairer
        self.timeslot_count = len(snapshot.timeslots)
        self.classroom_count = len(snapshot.classrooms)

    def _random_individual(self) -> Chromosome:
        return random_chromosome(len(self.sessions), self.timeslot_count, self.classroom_count, self.random)

    def _evaluate(self, chromosome: Chromosome, position: int) -> float:
        try:
            return self.evaluator.evaluate(chromosome)
        except Exception:
            logger.warning("Fitness evaluation failed for chromosome %d; scoring it 0", position, exc_info=True)
            return 0.0

    def _repair(self, child: Chromosome) -> Chromosome:
        try:
            return self.repairer.repair(child).chromosome
        except Exception:
            logger.warning("Constraint repair failed; keeping unrepaired child", exc_info=True)
            return child

    def _breed(self, ranked_population: list[Chromosome], ranked_fitness: list[float]) -> list[Chromosome]:
        parent_a = tournament_select(
            ranked_population, ranked_fitness, self.random, tournament_size=self.settings.tournament_size
        )
        parent_b = tournament_select(
            ranked_population, ranked_fitness, self.random, tournament_size=self.settings.tournament_size
        )
        child_a, child_b, _ = two_point_crossover(parent_a, parent_b, self.settings.crossover_rate, self.random)
        children = []
        for child in (child_a, child_b):
            mutated = mutate(
                child,
                self.settings.mutation_rate,
                timeslot_count=self.timeslot_count,
                classroom_count=self.classroom_count,
                rng=self.random,
            )
            children.append(self._repair(mutated))
        return children

    def evolve(self, population: list[Chromosome] | None = None) -> EvolutionOutcome:
        settings = self.settings
        if population is None:
            population = initialize_population(
                settings.population_size,
                session_count=len(self.sessions),
                timeslot_count=self.timeslot_count,
                classroom_count=self.classroom_count,
                rng=self.random,
            )
        if not population:
            raise SchedulerError(message="Failed to initialize population for genetic algorithm")

        best: Chromosome | None = None
        best_fitness = 0.0
        stagnant = 0
        generation = 0
        state = RunState.running

        while generation < settings.max_generations:
            fitness = [self._evaluate(chromosome, position) for position, chromosome in enumerate(population)]
            ranked_indices = sorted(range(len(population)), key=lambda idx: fitness[idx], reverse=True)
            ranked_population = [population[idx] for idx in ranked_indices]
            ranked_fitness = [fitness[idx] for idx in ranked_indices]

            if ranked_fitness[0] > best_fitness:
                best_fitness = ranked_fitness[0]
                best = clone(ranked_population[0])
                stagnant = 0
            else:
                stagnant += 1

            logger.debug(
                "Generation %d: top fitness %.4f, incumbent %.4f, stagnant %d",
                generation,
                ranked_fitness[0],
                best_fitness,
                stagnant,
            )

            if best_fitness >= settings.convergence_threshold or stagnant >= settings.stagnation_limit:
                state = RunState.converged
                logger.info("Converged at generation %d with fitness %.4f", generation, best_fitness)
                break

            next_population = [clone(chromosome) for chromosome in ranked_population[: settings.elite_count]]
            while len(next_population) < settings.population_size:
                try:
                    children = self._breed(ranked_population, ranked_fitness)
                except Exception:
                    logger.warning("Offspring construction failed; inserting a random chromosome", exc_info=True)
                    next_population.append(self._random_individual())
                    continue
                for child in children:
                    if len(next_population) < settings.population_size:
                        next_population.append(child)

            population = next_population
            generation += 1

        if state is RunState.running:
            state = RunState.exhausted
            logger.info("Generation budget of %d exhausted with fitness %.4f", settings.max_generations, best_fitness)

        if best is None:
            raise SchedulerError(
                message="Failed to generate valid timetable. No solution found after optimization.",
                details={"generations": generation},
            )
        return EvolutionOutcome(best=clone(best), best_fitness=best_fitness, generations=generation, state=state)


@dataclass(frozen=True)
class TimetableEntryDraft:
    position: int
    entry_code: str
    faculty_id: str
    subject_id: str
    classroom_id: str
    timeslot_id: str
    semester: int
    department: str
    program: str


@dataclass
class OptimizationResult:
    sessions: list[CourseSession]
    chromosome: Chromosome
    fitness: float
    generations: int
    state: RunState
    metrics: TimetableMetrics
    snapshot: SchedulingSnapshot

    def to_entries(self, timetable_code: str) -> list[TimetableEntryDraft]:
        timeslots = self.snapshot.timeslots
        classrooms = self.snapshot.classrooms
        if not self.chromosome:
            raise SchedulerError(message="Invalid schedule: schedule is empty")
        if len(self.chromosome) != len(self.sessions):
            raise SchedulerError(
                message=(
                    f"Schedule length ({len(self.chromosome)}) does not match "
                    f"course sessions length ({len(self.sessions)})"
                ),
                details={"schedule_length": len(self.chromosome), "session_count": len(self.sessions)},
            )

        entries: list[TimetableEntryDraft] = []
        for index, gene in enumerate(self.chromosome):
            session = self.sessions[index]
            if not 0 <= gene.timeslot_index < len(timeslots):
                raise SchedulerError(
                    message=f"Invalid timeslot index {gene.timeslot_index}. Available timeslots: {len(timeslots)}",
                    details={"index": index, "missing_id": gene.timeslot_index, "available": len(timeslots)},
                )
            if not 0 <= gene.classroom_index < len(classrooms):
                raise SchedulerError(
                    message=f"Invalid classroom index {gene.classroom_index}. Available classrooms: {len(classrooms)}",
                    details={"index": index, "missing_id": gene.classroom_index, "available": len(classrooms)},
                )
            if not session.required_faculty_ids:
                raise SchedulerError(
                    message=f"Session at index {index} ({session.session_id}) has no assigned faculty",
                    details={"index": index, "session_id": session.session_id},
                )
            entries.append(
                TimetableEntryDraft(
                    position=index,
                    entry_code=f"{timetable_code}-{session.session_id}",
                    faculty_id=session.required_faculty_ids[0],
                    subject_id=session.subject_id,
                    classroom_id=classrooms[gene.classroom_index].id,
                    timeslot_id=timeslots[gene.timeslot_index].id,
                    semester=session.semester,
                    department=session.department,
                    program=session.program,
                )
            )
        return entries


class TimetableOptimizer:
    """Hybrid GA + constraint-repair timetable search over one snapshot.

    Every stochastic step draws from ``self.random``; passing a seeded
    ``random.Random`` (or setting ``settings.random_seed``) makes a run
    reproducible.
    """

    def __init__(
        self,
        snapshot: SchedulingSnapshot,
        settings: GenerationSettings | None = None,
        *,
        rng: random.Random | None = None,
        today: Callable[[], date] | None = None,
    ) -> None:
        self.snapshot = snapshot
        self.settings = settings or GenerationSettings()
        self.random = rng or random.Random(self.settings.random_seed)
        self.today = today or date.today

    def validate_snapshot(self) -> None:
        snapshot = self.snapshot
        department = snapshot.department or "all departments"
        missing: list[str] = []
        if not snapshot.subjects:
            scope = f'department "{department}"'
            if snapshot.semester is not None:
                scope += f" and semester {snapshot.semester}"
            missing.append(f"No active subjects found for {scope}")
        if not snapshot.faculty:
            missing.append(f'No active faculty found for department "{department}"')
        if not snapshot.classrooms:
            missing.append("No active classrooms found in the system")
        if not snapshot.timeslots:
            missing.append("No active timeslots found in the system")
        unstaffed = subjects_without_faculty(snapshot.subjects)
        if unstaffed:
            names = ", ".join(subject.name or subject.id for subject in unstaffed)
            missing.append(f"The following subjects have no assigned faculty: {names}")

        if missing:
            raise SchedulerError(
                message=(
                    "Insufficient data for timetable generation:\n"
                    + "\n".join(missing)
                    + "\n\nPlease add the required data before generating timetables."
                ),
                details={"causes": missing},
            )

    def optimize(self) -> OptimizationResult:
        self.validate_snapshot()
        snapshot = self.snapshot
        settings = self.settings

        sessions = expand_sessions(snapshot.subjects)
        checker = ConstraintChecker(sessions, snapshot, today=self.today)
        evaluator = FitnessEvaluator(sessions, snapshot, checker, settings.fitness_weights)
        repairer = ConstraintRepairer(checker, self.random, max_attempts=settings.repair_attempts)

        outcome = EvolutionController(
            sessions=sessions,
            snapshot=snapshot,
            settings=settings,
            rng=self.random,
            evaluator=evaluator,
            repairer=repairer,
        ).evolve()

        best = outcome.best
        if checker.check(best):
            best = repairer.repair(best).chromosome

        try:
            allocated = allocate_classrooms(best, sessions, snapshot.classrooms)
        except Exception as exc:
            raise SchedulerError(message=f"Classroom allocation failed: {exc}") from exc
        if len(allocated) != len(best):
            raise SchedulerError(
                message=(
                    f"Allocated schedule length ({len(allocated)}) does not match "
                    f"chromosome length ({len(best)})"
                ),
                details={"allocated_length": len(allocated), "chromosome_length": len(best)},
            )

        metrics = calculate_metrics(allocated, evaluator)
        logger.info(
            "Optimization finished (%s) after %d generations: fitness %.4f, %d conflict(s)",
            outcome.state.value,
            outcome.generations,
            outcome.best_fitness,
            metrics.conflict_count,
        )
        return OptimizationResult(
            sessions=sessions,
            chromosome=allocated,
            fitness=outcome.best_fitness,
            generations=outcome.generations,
            state=outcome.state,
            metrics=metrics,
            snapshot=snapshot,
        )
