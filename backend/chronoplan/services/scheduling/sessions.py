from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from chronoplan.core.exceptions import SchedulerError
from chronoplan.services.scheduling.snapshot import SubjectRecord

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CourseSession:
    index: int
    session_id: str
    subject_id: str
    subject_name: str
    required_faculty_ids: tuple[str, ...]
    enrollment: int
    room_type: str | None
    required_equipment: tuple[str, ...]
    accessibility_needed: bool
    semester: int
    department: str
    program: str


def subjects_without_faculty(subjects: Iterable[SubjectRecord]) -> list[SubjectRecord]:
    return [subject for subject in subjects if not subject.assigned_faculty_ids]


def expand_sessions(subjects: Iterable[SubjectRecord]) -> list[CourseSession]:
    """One session per weekly class of each subject, ids S0..Sn in subject order."""
    subject_list = list(subjects)
    missing_faculty = subjects_without_faculty(subject_list)
    if missing_faculty:
        names = ", ".join(subject.name or subject.id for subject in missing_faculty)
        raise SchedulerError(
            message=(
                f"The following subjects have no assigned faculty: {names}. "
                "Please assign faculty to all subjects."
            ),
            details={"subjects_without_faculty": [subject.id for subject in missing_faculty]},
        )

    sessions: list[CourseSession] = []
    for subject in subject_list:
        for _ in range(max(0, subject.classes_per_week)):
            index = len(sessions)
            sessions.append(
                CourseSession(
                    index=index,
                    session_id=f"S{index}",
                    subject_id=subject.id,
                    subject_name=subject.name,
                    required_faculty_ids=subject.assigned_faculty_ids,
                    enrollment=subject.enrollment,
                    room_type=subject.room_type,
                    required_equipment=subject.required_equipment,
                    accessibility_needed=subject.accessibility_needed,
                    semester=subject.semester,
                    department=subject.department,
                    program=subject.program,
                )
            )

    if not sessions:
        raise SchedulerError(
            message="No course sessions generated. Please ensure subjects have classes_per_week > 0.",
            details={"subject_count": len(subject_list)},
        )

    logger.info("Generated %d course sessions from %d subjects", len(sessions), len(subject_list))
    return sessions
