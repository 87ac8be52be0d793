"""Immutable input records for one optimization run.

The record store hands the engine a snapshot of subjects, faculty,
classrooms and timeslots. Every reference is normalized to a plain string id
once, when the records are built, so the rest of the engine compares ids with
``==`` and never has to care whether a reference arrived as a raw id, a
mapping or a loaded ORM object.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import date
from typing import Any

DAY_SHORT_MAP = {
    "Mon": "Monday",
    "Tue": "Tuesday",
    "Wed": "Wednesday",
    "Thu": "Thursday",
    "Fri": "Friday",
    "Sat": "Saturday",
    "Sun": "Sunday",
}

EQUIPMENT_FLAGS = ("smart_board", "projector", "computer_lab", "air_conditioning", "wifi")
LABORATORY_ROOM_TYPE = "laboratory"


def normalize_ref(value: Any) -> str:
    if value is None:
        raise ValueError("Reference cannot be None")
    if isinstance(value, Mapping):
        for key in ("id", "_id"):
            if value.get(key) is not None:
                return str(value[key])
        raise ValueError(f"Mapping reference has no id: {dict(value)!r}")
    if isinstance(value, (str, int)):
        return str(value)
    ref_id = getattr(value, "id", None)
    if ref_id is not None:
        return str(ref_id)
    return str(value)


def same_ref(left: Any, right: Any) -> bool:
    return normalize_ref(left) == normalize_ref(right)


def normalize_day(value: str) -> str:
    day = value.strip()
    return DAY_SHORT_MAP.get(day, day)


def time_to_minutes(value: str) -> int:
    hours, minutes = value.strip().split(":")
    return int(hours) * 60 + int(minutes)


def _enum_value(value: Any) -> Any:
    return getattr(value, "value", value)


@dataclass(frozen=True)
class AvailabilitySlot:
    day: str
    start_time: str
    end_time: str
    is_available: bool = True

    def covers(self, start_time: str, end_time: str) -> bool:
        return (
            time_to_minutes(self.start_time) <= time_to_minutes(start_time)
            and time_to_minutes(end_time) <= time_to_minutes(self.end_time)
        )


@dataclass(frozen=True)
class LeaveRange:
    start_date: date
    end_date: date
    status: str = "pending"

    def is_active_on(self, day: date) -> bool:
        return self.status == "approved" and self.start_date <= day <= self.end_date


@dataclass(frozen=True)
class FacultyRecord:
    id: str
    name: str = ""
    department: str = ""
    availability: tuple[AvailabilitySlot, ...] = ()
    leaves: tuple[LeaveRange, ...] = ()
    preferred_days: frozenset[str] = frozenset()


@dataclass(frozen=True)
class ClassroomRecord:
    id: str
    name: str = ""
    capacity: int = 0
    room_type: str = "lecture"
    equipment: frozenset[str] = frozenset()
    specialized_equipment: tuple[str, ...] = ()
    wheelchair_accessible: bool = False

    def has_equipment(self, item: str) -> bool:
        return item in self.equipment or item in self.specialized_equipment


@dataclass(frozen=True)
class TimeslotRecord:
    id: str
    day: str
    start_time: str
    end_time: str


@dataclass(frozen=True)
class SubjectRecord:
    id: str
    name: str
    department: str
    semester: int
    program: str = "UG"
    classes_per_week: int = 1
    enrollment: int = 0
    room_type: str | None = None
    required_equipment: tuple[str, ...] = ()
    accessibility_needed: bool = False
    assigned_faculty_ids: tuple[str, ...] = ()


@dataclass(frozen=True)
class SchedulingSnapshot:
    subjects: tuple[SubjectRecord, ...] = ()
    faculty: tuple[FacultyRecord, ...] = ()
    classrooms: tuple[ClassroomRecord, ...] = ()
    timeslots: tuple[TimeslotRecord, ...] = ()
    department: str | None = None
    semester: int | None = None
    faculty_by_id: dict[str, FacultyRecord] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "faculty_by_id", {item.id: item for item in self.faculty})


def make_faculty_record(
    ref: Any,
    *,
    name: str = "",
    department: str = "",
    availability: Iterable[Mapping[str, Any]] = (),
    leaves: Iterable[Any] = (),
    preferred_days: Iterable[str] = (),
) -> FacultyRecord:
    slots = tuple(
        AvailabilitySlot(
            day=normalize_day(str(item["day"])),
            start_time=str(item["start_time"]),
            end_time=str(item["end_time"]),
            is_available=bool(item.get("is_available", True)),
        )
        for item in availability
    )
    leave_ranges = []
    for leave in leaves:
        if isinstance(leave, LeaveRange):
            leave_ranges.append(leave)
            continue
        leave_ranges.append(
            LeaveRange(
                start_date=leave.start_date,
                end_date=leave.end_date,
                status=str(_enum_value(leave.status)),
            )
        )
    return FacultyRecord(
        id=normalize_ref(ref),
        name=name,
        department=department,
        availability=slots,
        leaves=tuple(leave_ranges),
        preferred_days=frozenset(normalize_day(day) for day in preferred_days if day),
    )


def make_classroom_record(
    ref: Any,
    *,
    capacity: int,
    room_type: Any = "lecture",
    name: str = "",
    equipment: Mapping[str, bool] | Iterable[str] = (),
    specialized_equipment: Iterable[str] = (),
    wheelchair_accessible: bool = False,
) -> ClassroomRecord:
    if isinstance(equipment, Mapping):
        present = frozenset(key for key, flag in equipment.items() if flag)
    else:
        present = frozenset(equipment)
    return ClassroomRecord(
        id=normalize_ref(ref),
        name=name,
        capacity=int(capacity),
        room_type=str(_enum_value(room_type)),
        equipment=present,
        specialized_equipment=tuple(specialized_equipment),
        wheelchair_accessible=bool(wheelchair_accessible),
    )


def make_timeslot_record(ref: Any, *, day: str, start_time: str, end_time: str) -> TimeslotRecord:
    return TimeslotRecord(id=normalize_ref(ref), day=normalize_day(day), start_time=start_time, end_time=end_time)


def make_subject_record(
    ref: Any,
    *,
    name: str,
    department: str,
    semester: int,
    assigned_faculty: Iterable[Any] = (),
    program: Any = "UG",
    classes_per_week: int = 1,
    enrollment: int = 0,
    room_type: Any = None,
    required_equipment: Iterable[str] = (),
    accessibility_needed: bool = False,
) -> SubjectRecord:
    faculty_ids: list[str] = []
    for item in assigned_faculty:
        faculty_id = normalize_ref(item)
        if faculty_id not in faculty_ids:
            faculty_ids.append(faculty_id)
    return SubjectRecord(
        id=normalize_ref(ref),
        name=name,
        department=department,
        semester=int(semester),
        program=str(_enum_value(program)),
        classes_per_week=int(classes_per_week),
        enrollment=int(enrollment or 0),
        room_type=None if room_type is None else str(_enum_value(room_type)),
        required_equipment=tuple(required_equipment),
        accessibility_needed=bool(accessibility_needed),
        assigned_faculty_ids=tuple(faculty_ids),
    )
