from __future__ import annotations

import logging
import time
import uuid

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from chronoplan.models.classroom import Classroom
from chronoplan.models.faculty import Faculty
from chronoplan.models.subject import ProgramLevel, Subject
from chronoplan.models.timeslot import Timeslot
from chronoplan.models.timetable import Timetable, TimetableEntry, TimetableStatus
from chronoplan.schemas.generator import GenerateTimetableRequest
from chronoplan.services.scheduling.engine import OptimizationResult
from chronoplan.services.scheduling.snapshot import (
    EQUIPMENT_FLAGS,
    SchedulingSnapshot,
    make_classroom_record,
    make_faculty_record,
    make_subject_record,
    make_timeslot_record,
)

logger = logging.getLogger(__name__)


def load_snapshot(db: Session, department: str, semester: int) -> SchedulingSnapshot:
    subjects = (
        db.execute(
            select(Subject)
            .where(
                Subject.department == department,
                Subject.semester == semester,
                Subject.is_active.is_(True),
            )
            .options(selectinload(Subject.assigned_faculty))
            .order_by(Subject.subject_code)
        )
        .scalars()
        .all()
    )
    faculty = (
        db.execute(
            select(Faculty)
            .where(Faculty.department == department, Faculty.is_active.is_(True))
            .options(selectinload(Faculty.leaves))
            .order_by(Faculty.faculty_code)
        )
        .scalars()
        .all()
    )
    classrooms = (
        db.execute(select(Classroom).where(Classroom.is_active.is_(True)).order_by(Classroom.room_code))
        .scalars()
        .all()
    )
    timeslots = (
        db.execute(
            select(Timeslot)
            .where(Timeslot.is_active.is_(True))
            .order_by(Timeslot.slot_code)
        )
        .scalars()
        .all()
    )

    snapshot = SchedulingSnapshot(
        subjects=tuple(
            make_subject_record(
                subject,
                name=subject.name,
                department=subject.department,
                semester=subject.semester,
                assigned_faculty=subject.assigned_faculty,
                program=subject.program,
                classes_per_week=subject.classes_per_week,
                enrollment=subject.enrollment,
                room_type=subject.room_type,
                required_equipment=subject.required_equipment or [],
                accessibility_needed=subject.accessibility_needed,
            )
            for subject in subjects
        ),
        faculty=tuple(
            make_faculty_record(
                member,
                name=member.name,
                department=member.department,
                availability=member.availability or [],
                leaves=member.leaves,
                preferred_days=member.preferred_days or [],
            )
            for member in faculty
        ),
        classrooms=tuple(
            make_classroom_record(
                room,
                name=room.room_code,
                capacity=room.capacity,
                room_type=room.room_type,
                equipment={flag: getattr(room, flag) for flag in EQUIPMENT_FLAGS},
                specialized_equipment=room.specialized_equipment or [],
                wheelchair_accessible=room.wheelchair_accessible,
            )
            for room in classrooms
        ),
        timeslots=tuple(
            make_timeslot_record(slot, day=slot.day, start_time=slot.start_time, end_time=slot.end_time)
            for slot in timeslots
        ),
        department=department,
        semester=semester,
    )
    logger.info(
        "Loaded snapshot for %s semester %d: %d subjects, %d faculty, %d classrooms, %d timeslots",
        department,
        semester,
        len(snapshot.subjects),
        len(snapshot.faculty),
        len(snapshot.classrooms),
        len(snapshot.timeslots),
    )
    return snapshot


def build_timetable_code(
    academic_year: str,
    semester: int,
    department: str,
    *,
    now_ms: int | None = None,
    suffix: str | None = None,
) -> str:
    # Codes stay unique within a single millisecond.
    epoch_ms = now_ms if now_ms is not None else int(time.time() * 1000)
    suffix = suffix if suffix is not None else uuid.uuid4().hex[:8]
    return f"TT-{academic_year}-{semester}-{department}-{epoch_ms}-{suffix}"


def persist_timetable(
    db: Session,
    *,
    request: GenerateTimetableRequest,
    result: OptimizationResult,
    generated_by: str | None = None,
) -> Timetable:
    timetable_code = build_timetable_code(request.academic_year, request.semester, request.department)
    # Conversion runs before anything is added so a bad reference leaves the session untouched.
    drafts = result.to_entries(timetable_code)

    metrics = result.metrics
    timetable = Timetable(
        timetable_code=timetable_code,
        name=f"{request.department} - Semester {request.semester} ({request.academic_year})",
        academic_year=request.academic_year,
        semester=request.semester,
        department=request.department,
        status=TimetableStatus.generated,
        fitness=result.fitness,
        generations=result.generations,
        classroom_utilization=metrics.classroom_utilization,
        faculty_workload_balance=metrics.faculty_workload_balance,
        conflict_count=metrics.conflict_count,
        preference_satisfaction=metrics.preference_satisfaction,
        generated_by=generated_by,
    )
    timetable.entries = [
        TimetableEntry(
            position=draft.position,
            entry_code=draft.entry_code,
            faculty_id=draft.faculty_id,
            subject_id=draft.subject_id,
            classroom_id=draft.classroom_id,
            timeslot_id=draft.timeslot_id,
            semester=draft.semester,
            department=draft.department,
            program=ProgramLevel(draft.program),
        )
        for draft in drafts
    ]
    db.add(timetable)
    db.flush()
    logger.info("Stored timetable %s with %d entries", timetable_code, len(drafts))
    return timetable
