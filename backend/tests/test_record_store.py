import random

import pytest
from sqlalchemy import func, select

from chronoplan.core.exceptions import SchedulerError
from chronoplan.models.timetable import Timetable, TimetableEntry, TimetableStatus
from chronoplan.schemas.generator import GenerateTimetableRequest, GenerationSettings
from chronoplan.services import record_store
from chronoplan.services.record_store import build_timetable_code, load_snapshot, persist_timetable
from chronoplan.services.scheduling.chromosome import Gene
from chronoplan.services.scheduling.engine import TimetableOptimizer

SMALL = GenerationSettings(population_size=10, max_generations=8, stagnation_limit=4)


def test_snapshot_holds_only_active_scoped_records(db_session, seeded_department):
    snapshot = load_snapshot(db_session, "Computer Science", 3)

    assert [subject.name for subject in snapshot.subjects] == [
        "Data Structures",
        "Operating Systems Lab",
        "Theory of Computation",
    ]
    assert {member.name for member in snapshot.faculty} == {"Ada Lovelace", "Alan Turing"}
    assert [room.name for room in snapshot.classrooms] == ["A101", "A102", "L201"]
    assert len(snapshot.timeslots) == 6
    assert snapshot.department == "Computer Science"
    assert snapshot.semester == 3


def test_snapshot_records_are_normalized(db_session, seeded_department):
    ada, alan = seeded_department["faculty"]

    snapshot = load_snapshot(db_session, "Computer Science", 3)

    structures, lab, _ = snapshot.subjects
    assert structures.assigned_faculty_ids == (ada.id,)
    assert lab.room_type == "laboratory"
    assert lab.required_equipment == ("computer_lab",)
    rooms = {room.name: room for room in snapshot.classrooms}
    assert rooms["A101"].has_equipment("projector")
    assert rooms["L201"].has_equipment("computer_lab")
    assert not rooms["A102"].has_equipment("projector")
    alan_record = snapshot.faculty_by_id[alan.id]
    assert len(alan_record.availability) == 2
    assert alan_record.leaves[0].status == "approved"
    assert snapshot.faculty_by_id[ada.id].preferred_days == frozenset({"Monday", "Tuesday"})


def test_timetable_code_format():
    code = build_timetable_code("2025-26", 3, "CSE", now_ms=1700000000123, suffix="a1b2c3d4")

    assert code == "TT-2025-26-3-CSE-1700000000123-a1b2c3d4"


def test_timetable_codes_differ_within_one_millisecond():
    first = build_timetable_code("2025-26", 3, "CSE", now_ms=1700000000123)
    second = build_timetable_code("2025-26", 3, "CSE", now_ms=1700000000123)

    assert first != second
    assert first.startswith("TT-2025-26-3-CSE-1700000000123-")
    assert len(first.rsplit("-", 1)[1]) == 8


def test_persist_stores_generated_timetable(db_session, seeded_department):
    request = GenerateTimetableRequest(academic_year="2025-26", semester=3, department="Computer Science")
    snapshot = load_snapshot(db_session, request.department, request.semester)
    result = TimetableOptimizer(snapshot, SMALL, rng=random.Random(5)).optimize()

    timetable = persist_timetable(db_session, request=request, result=result, generated_by="admin-1")
    db_session.commit()

    stored = db_session.get(Timetable, timetable.id)
    assert stored.status == TimetableStatus.generated
    assert stored.timetable_code.startswith("TT-2025-26-3-Computer Science-")
    assert stored.generated_by == "admin-1"
    assert stored.conflict_count == result.metrics.conflict_count
    assert [entry.position for entry in stored.entries] == [0, 1, 2, 3, 4]
    assert all(entry.entry_code.startswith(stored.timetable_code) for entry in stored.entries)
    assert stored.entries[2].subject_id == seeded_department["subjects"][1].id


def test_failed_conversion_persists_nothing(db_session, seeded_department):
    request = GenerateTimetableRequest(academic_year="2025-26", semester=3, department="Computer Science")
    snapshot = load_snapshot(db_session, request.department, request.semester)
    result = TimetableOptimizer(snapshot, SMALL, rng=random.Random(5)).optimize()
    result.chromosome[-1] = Gene(timeslot_index=0, classroom_index=17)

    with pytest.raises(SchedulerError, match="Invalid classroom index 17"):
        persist_timetable(db_session, request=request, result=result)
    db_session.rollback()

    assert db_session.scalar(select(func.count()).select_from(Timetable)) == 0
    assert db_session.scalar(select(func.count()).select_from(TimetableEntry)) == 0


def test_same_millisecond_runs_are_both_stored(db_session, seeded_department, monkeypatch):
    monkeypatch.setattr(record_store.time, "time", lambda: 1700000000.0)
    request = GenerateTimetableRequest(academic_year="2025-26", semester=3, department="Computer Science")
    snapshot = load_snapshot(db_session, request.department, request.semester)
    result = TimetableOptimizer(snapshot, SMALL, rng=random.Random(5)).optimize()

    first = persist_timetable(db_session, request=request, result=result)
    second = persist_timetable(db_session, request=request, result=result)
    db_session.commit()

    assert first.timetable_code != second.timetable_code
    assert first.timetable_code.startswith("TT-2025-26-3-Computer Science-1700000000000-")
    assert db_session.scalar(select(func.count()).select_from(Timetable)) == 2
    assert db_session.scalar(select(func.count()).select_from(TimetableEntry)) == 10
