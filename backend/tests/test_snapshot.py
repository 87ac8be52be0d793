from datetime import date
from types import SimpleNamespace

import pytest

from chronoplan.services.scheduling.snapshot import (
    LeaveRange,
    SchedulingSnapshot,
    make_classroom_record,
    make_faculty_record,
    make_timeslot_record,
    normalize_ref,
    same_ref,
    time_to_minutes,
)


def test_references_normalize_to_strings():
    assert normalize_ref("abc") == "abc"
    assert normalize_ref(42) == "42"
    assert normalize_ref({"_id": 7}) == "7"
    assert normalize_ref({"id": "x", "_id": "y"}) == "x"
    assert normalize_ref(SimpleNamespace(id="obj-1")) == "obj-1"
    assert same_ref({"id": 3}, "3")
    assert not same_ref("3", "4")


def test_missing_references_are_rejected():
    with pytest.raises(ValueError):
        normalize_ref(None)
    with pytest.raises(ValueError):
        normalize_ref({"name": "no id"})


def test_time_and_day_normalization():
    assert time_to_minutes("09:30") == 570
    assert make_timeslot_record(1, day="Wed", start_time="09:00", end_time="10:00").day == "Wednesday"
    assert make_faculty_record("f", preferred_days=["Fri", "Monday"]).preferred_days == frozenset({"Friday", "Monday"})


def test_leave_applies_only_when_approved_and_in_range():
    leave = LeaveRange(start_date=date(2025, 5, 1), end_date=date(2025, 5, 3), status="approved")

    assert leave.is_active_on(date(2025, 5, 1))
    assert leave.is_active_on(date(2025, 5, 3))
    assert not leave.is_active_on(date(2025, 5, 4))
    assert not LeaveRange(date(2025, 5, 1), date(2025, 5, 3), "pending").is_active_on(date(2025, 5, 2))


def test_classroom_equipment_from_flags_or_names():
    flagged = make_classroom_record("R", capacity=30, equipment={"projector": True, "wifi": False})
    named = make_classroom_record("S", capacity=30, equipment=["projector"], specialized_equipment=["oscilloscope"])

    assert flagged.has_equipment("projector")
    assert not flagged.has_equipment("wifi")
    assert named.has_equipment("oscilloscope")


def test_snapshot_indexes_faculty_by_id():
    snapshot = SchedulingSnapshot(faculty=(make_faculty_record({"id": 5}),))

    assert snapshot.faculty_by_id["5"].id == "5"
