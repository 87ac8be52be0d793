from __future__ import annotations

import logging
import random
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from datetime import date
from enum import Enum

from chronoplan.services.scheduling.chromosome import Chromosome, Gene, clone
from chronoplan.services.scheduling.sessions import CourseSession
from chronoplan.services.scheduling.snapshot import FacultyRecord, SchedulingSnapshot, TimeslotRecord

logger = logging.getLogger(__name__)

DEFAULT_REPAIR_ATTEMPTS = 100


class ViolationType(str, Enum):
    faculty_conflict = "faculty_conflict"
    room_conflict = "room_conflict"
    capacity_violation = "capacity_violation"
    faculty_unavailable = "faculty_unavailable"
    room_type_mismatch = "room_type_mismatch"


@dataclass(frozen=True)
class Violation:
    type: ViolationType
    session_id: str
    session_index: int
    message: str
    details: dict = field(default_factory=dict, compare=False, hash=False)


class ConstraintChecker:
    """Reports every hard-constraint breach in a chromosome.

    Violations come back grouped by type in a fixed order (faculty conflicts,
    room conflicts, capacity, faculty availability, room type), so the first
    entry is always the one the repairer works on next. Leave ranges are
    compared against ``today()``; sessions carry a weekday but no calendar
    date.
    """

    def __init__(
        self,
        sessions: Sequence[CourseSession],
        snapshot: SchedulingSnapshot,
        *,
        today: Callable[[], date] = date.today,
    ) -> None:
        self.sessions = list(sessions)
        self.snapshot = snapshot
        self.timeslots = snapshot.timeslots
        self.classrooms = snapshot.classrooms
        self.today = today

    def check(self, chromosome: Chromosome) -> list[Violation]:
        violations: list[Violation] = []
        violations.extend(self._faculty_conflicts(chromosome))
        violations.extend(self._room_conflicts(chromosome))
        violations.extend(self._capacity_violations(chromosome))
        violations.extend(self._faculty_unavailability(chromosome))
        violations.extend(self._room_type_mismatches(chromosome))
        return violations

    def count(self, chromosome: Chromosome) -> int:
        return len(self.check(chromosome))

    def _faculty_conflicts(self, chromosome: Chromosome) -> list[Violation]:
        found: list[Violation] = []
        booked: set[tuple[str, str, str]] = set()
        for index, gene in enumerate(chromosome):
            session = self.sessions[index]
            timeslot = self.timeslots[gene.timeslot_index]
            for faculty_id in session.required_faculty_ids:
                key = (faculty_id, timeslot.day, timeslot.start_time)
                if key not in booked:
                    booked.add(key)
                    continue
                found.append(
                    Violation(
                        type=ViolationType.faculty_conflict,
                        session_id=session.session_id,
                        session_index=index,
                        message=f"Faculty {faculty_id} double-booked at {timeslot.day} {timeslot.start_time}",
                        details={"faculty_id": faculty_id, "timeslot_id": timeslot.id},
                    )
                )
        return found

    def _room_conflicts(self, chromosome: Chromosome) -> list[Violation]:
        found: list[Violation] = []
        booked: set[tuple[str, str, str]] = set()
        for index, gene in enumerate(chromosome):
            timeslot = self.timeslots[gene.timeslot_index]
            classroom = self.classrooms[gene.classroom_index]
            key = (classroom.id, timeslot.day, timeslot.start_time)
            if key not in booked:
                booked.add(key)
                continue
            found.append(
                Violation(
                    type=ViolationType.room_conflict,
                    session_id=self.sessions[index].session_id,
                    session_index=index,
                    message=f"Classroom {classroom.name or classroom.id} double-booked at {timeslot.day} {timeslot.start_time}",
                    details={"classroom_id": classroom.id, "timeslot_id": timeslot.id},
                )
            )
        return found

    def _capacity_violations(self, chromosome: Chromosome) -> list[Violation]:
        found: list[Violation] = []
        for index, gene in enumerate(chromosome):
            session = self.sessions[index]
            classroom = self.classrooms[gene.classroom_index]
            if session.enrollment <= classroom.capacity:
                continue
            found.append(
                Violation(
                    type=ViolationType.capacity_violation,
                    session_id=session.session_id,
                    session_index=index,
                    message=f"Enrollment {session.enrollment} exceeds capacity {classroom.capacity}",
                    details={
                        "classroom_id": classroom.id,
                        "enrollment": session.enrollment,
                        "capacity": classroom.capacity,
                    },
                )
            )
        return found

    def _faculty_unavailability(self, chromosome: Chromosome) -> list[Violation]:
        found: list[Violation] = []
        for index, gene in enumerate(chromosome):
            session = self.sessions[index]
            timeslot = self.timeslots[gene.timeslot_index]
            for faculty_id in session.required_faculty_ids:
                faculty = self.snapshot.faculty_by_id.get(faculty_id)
                if faculty is None or self.is_faculty_available(faculty, timeslot):
                    continue
                found.append(
                    Violation(
                        type=ViolationType.faculty_unavailable,
                        session_id=session.session_id,
                        session_index=index,
                        message=f"Faculty {faculty.name or faculty.id} not available at {timeslot.day} {timeslot.start_time}",
                        details={"faculty_id": faculty.id, "timeslot_id": timeslot.id},
                    )
                )
        return found

    def _room_type_mismatches(self, chromosome: Chromosome) -> list[Violation]:
        found: list[Violation] = []
        for index, gene in enumerate(chromosome):
            session = self.sessions[index]
            if session.room_type is None:
                continue
            classroom = self.classrooms[gene.classroom_index]
            if classroom.room_type == session.room_type:
                continue
            found.append(
                Violation(
                    type=ViolationType.room_type_mismatch,
                    session_id=session.session_id,
                    session_index=index,
                    message=f"Room type mismatch: required {session.room_type}, got {classroom.room_type}",
                    details={
                        "classroom_id": classroom.id,
                        "required": session.room_type,
                        "assigned": classroom.room_type,
                    },
                )
            )
        return found

    def is_faculty_available(self, faculty: FacultyRecord, timeslot: TimeslotRecord) -> bool:
        today = self.today()
        if any(leave.is_active_on(today) for leave in faculty.leaves):
            return False

        if not faculty.availability:
            return True
        open_windows = [
            slot for slot in faculty.availability if slot.day == timeslot.day and slot.is_available
        ]
        if not open_windows:
            return False
        return any(slot.covers(timeslot.start_time, timeslot.end_time) for slot in open_windows)


@dataclass
class RepairResult:
    chromosome: Chromosome
    attempts: int
    reassignments: int
    remaining_violations: list[Violation]

    @property
    def resolved(self) -> bool:
        return not self.remaining_violations


class ConstraintRepairer:
    def __init__(
        self,
        checker: ConstraintChecker,
        rng: random.Random,
        *,
        max_attempts: int = DEFAULT_REPAIR_ATTEMPTS,
    ) -> None:
        self.checker = checker
        self.random = rng
        self.max_attempts = max_attempts
        classrooms = checker.classrooms
        self._rooms_by_type: dict[str, list[int]] = {}
        for room_index, room in enumerate(classrooms):
            self._rooms_by_type.setdefault(room.room_type, []).append(room_index)

    def repair(self, chromosome: Chromosome) -> RepairResult:
        repaired = clone(chromosome)
        attempts = 0
        reassignments = 0
        violations = self.checker.check(repaired)
        while violations and attempts < self.max_attempts:
            if self._apply_fix(repaired, violations[0]):
                reassignments += 1
            attempts += 1
            violations = self.checker.check(repaired)

        if violations:
            logger.debug(
                "Repair stopped after %d attempts with %d violation(s) left",
                attempts,
                len(violations),
            )
        return RepairResult(
            chromosome=repaired,
            attempts=attempts,
            reassignments=reassignments,
            remaining_violations=violations,
        )

    def _apply_fix(self, chromosome: Chromosome, violation: Violation) -> bool:
        index = violation.session_index
        gene = chromosome[index]
        session = self.checker.sessions[index]

        if violation.type in (ViolationType.faculty_conflict, ViolationType.room_conflict):
            chromosome[index] = Gene(
                timeslot_index=self.random.randrange(len(self.checker.timeslots)),
                classroom_index=gene.classroom_index,
            )
            return True

        if violation.type == ViolationType.capacity_violation:
            candidates = [
                room_index
                for room_index, room in enumerate(self.checker.classrooms)
                if room.capacity >= session.enrollment
            ]
        elif violation.type == ViolationType.room_type_mismatch:
            candidates = self._rooms_by_type.get(session.room_type or "", [])
        else:
            # faculty_unavailable has no fix path; the attempt is spent without a change.
            return False

        if not candidates:
            return False
        chromosome[index] = Gene(
            timeslot_index=gene.timeslot_index,
            classroom_index=self.random.choice(candidates),
        )
        return True
