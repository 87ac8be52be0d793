"""Greedy classroom refinement for the final schedule.

Runs once on the best chromosome after evolution and repair. Sessions that
share a timeslot compete for rooms: the hardest to place (large, equipment
heavy, laboratory) pick first, each taking the best-scoring free room that
satisfies its requirements. A session with no qualifying room keeps the room
it already had, which may leave a conflict in place.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Sequence

from chronoplan.services.scheduling.chromosome import Chromosome, Gene, clone
from chronoplan.services.scheduling.sessions import CourseSession
from chronoplan.services.scheduling.snapshot import LABORATORY_ROOM_TYPE, ClassroomRecord

logger = logging.getLogger(__name__)

CAPACITY_WEIGHT = 0.5
LOCATION_WEIGHT = 0.2
EQUIPMENT_WEIGHT = 0.3
# No building/department proximity data yet; every room scores the same.
DEFAULT_LOCATION_SCORE = 0.8


def session_priority(session: CourseSession) -> int:
    priority = session.enrollment * 10
    priority += len(session.required_equipment) * 50
    if session.room_type == LABORATORY_ROOM_TYPE:
        priority += 100
    return priority


def capacity_score(enrollment: int, capacity: int) -> float:
    if capacity <= 0:
        return 0.0
    ratio = enrollment / capacity
    if 0.8 <= ratio <= 1.0:
        return 1.0
    if ratio > 1.0:
        return 0.0
    return ratio


def equipment_score(session: CourseSession, classroom: ClassroomRecord) -> float:
    has_required = all(classroom.has_equipment(item) for item in session.required_equipment)
    score = 1.0 if has_required else 0.5
    if classroom.has_equipment("smart_board"):
        score += 0.1
    if classroom.has_equipment("projector"):
        score += 0.1
    if classroom.has_equipment("air_conditioning"):
        score += 0.05
    return score


def room_preference_score(session: CourseSession, classroom: ClassroomRecord) -> float:
    return (
        CAPACITY_WEIGHT * capacity_score(session.enrollment, classroom.capacity)
        + LOCATION_WEIGHT * DEFAULT_LOCATION_SCORE
        + EQUIPMENT_WEIGHT * min(1.0, equipment_score(session, classroom))
    )


def is_room_suitable(session: CourseSession, classroom: ClassroomRecord) -> bool:
    if classroom.capacity < session.enrollment:
        return False
    if session.room_type and classroom.room_type != session.room_type:
        return False
    if not all(classroom.has_equipment(item) for item in session.required_equipment):
        return False
    if session.accessibility_needed and not classroom.wheelchair_accessible:
        return False
    return True


def _allocate_bucket(
    members: list[int],
    chromosome: Chromosome,
    sessions: Sequence[CourseSession],
    classrooms: Sequence[ClassroomRecord],
) -> dict[int, int]:
    assignments: dict[int, int] = {}
    used_rooms: set[int] = set()
    # sorted() is stable, so equal priorities keep session order.
    ordered = sorted(members, key=lambda idx: session_priority(sessions[idx]), reverse=True)
    for session_index in ordered:
        session = sessions[session_index]
        candidates = [
            room_index
            for room_index, room in enumerate(classrooms)
            if room_index not in used_rooms and is_room_suitable(session, room)
        ]
        if not candidates:
            assignments[session_index] = chromosome[session_index].classroom_index
            logger.debug("No suitable classroom for %s; keeping original assignment", session.session_id)
            continue
        best_room = max(candidates, key=lambda room_index: room_preference_score(session, classrooms[room_index]))
        assignments[session_index] = best_room
        used_rooms.add(best_room)
    return assignments


def allocate_classrooms(
    chromosome: Chromosome,
    sessions: Sequence[CourseSession],
    classrooms: Sequence[ClassroomRecord],
) -> Chromosome:
    allocated = clone(chromosome)
    buckets: dict[int, list[int]] = defaultdict(list)
    for index, gene in enumerate(allocated):
        buckets[gene.timeslot_index].append(index)

    for members in buckets.values():
        for session_index, room_index in _allocate_bucket(members, chromosome, sessions, classrooms).items():
            allocated[session_index] = Gene(
                timeslot_index=allocated[session_index].timeslot_index,
                classroom_index=room_index,
            )
    return allocated
