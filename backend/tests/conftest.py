from datetime import date, timedelta

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from chronoplan.api.deps import get_db
from chronoplan.db.base import Base
from chronoplan.main import app
from chronoplan.models.classroom import Classroom, RoomType
from chronoplan.models.faculty import Faculty, FacultyLeave, LeaveStatus
from chronoplan.models.subject import Subject
from chronoplan.models.timeslot import Timeslot


@pytest.fixture()
def engine():
    # In-memory database shared across connections so the client and the test see the same rows.
    test_engine = create_engine(
        "sqlite+pysqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=test_engine)
    yield test_engine
    test_engine.dispose()


@pytest.fixture()
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture()
def db_session(session_factory):
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture()
def client(session_factory):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture()
def seeded_department(db_session):
    """Small Computer Science semester 3 catalogue: two faculty, three subjects, three rooms, six slots."""
    ada = Faculty(
        faculty_code="F001",
        name="Ada Lovelace",
        department="Computer Science",
        preferred_days=["Monday", "Tuesday"],
    )
    alan = Faculty(
        faculty_code="F002",
        name="Alan Turing",
        department="Computer Science",
        availability=[
            {"day": "Monday", "start_time": "09:00", "end_time": "17:00", "is_available": True},
            {"day": "Tuesday", "start_time": "09:00", "end_time": "17:00", "is_available": True},
        ],
    )
    retired = Faculty(faculty_code="F003", name="Inactive", department="Computer Science", is_active=False)
    elsewhere = Faculty(faculty_code="M001", name="Emmy Noether", department="Mathematics")
    alan.leaves.append(
        FacultyLeave(
            start_date=date.today() + timedelta(days=30),
            end_date=date.today() + timedelta(days=32),
            status=LeaveStatus.approved,
        )
    )
    db_session.add_all([ada, alan, retired, elsewhere])

    rooms = [
        Classroom(room_code="A101", building="A", capacity=60, room_type=RoomType.lecture, projector=True),
        Classroom(room_code="A102", building="A", capacity=40, room_type=RoomType.lecture, smart_board=True),
        Classroom(room_code="L201", building="L", capacity=35, room_type=RoomType.laboratory, computer_lab=True),
        Classroom(room_code="X999", building="X", capacity=500, room_type=RoomType.auditorium, is_active=False),
    ]
    db_session.add_all(rooms)

    slots = []
    for day_index, day in enumerate(("Monday", "Tuesday")):
        for slot_index, (start, end) in enumerate((("09:00", "10:00"), ("10:00", "11:00"), ("11:00", "12:00"))):
            slots.append(
                Timeslot(slot_code=f"TS{day_index}{slot_index}", day=day, start_time=start, end_time=end)
            )
    db_session.add_all(slots)

    subjects = [
        Subject(
            subject_code="CS301",
            name="Data Structures",
            department="Computer Science",
            semester=3,
            classes_per_week=2,
            enrollment=45,
            room_type=RoomType.lecture,
            assigned_faculty=[ada],
        ),
        Subject(
            subject_code="CS302",
            name="Operating Systems Lab",
            department="Computer Science",
            semester=3,
            classes_per_week=1,
            enrollment=30,
            room_type=RoomType.laboratory,
            required_equipment=["computer_lab"],
            assigned_faculty=[alan],
        ),
        Subject(
            subject_code="CS303",
            name="Theory of Computation",
            department="Computer Science",
            semester=3,
            classes_per_week=2,
            enrollment=35,
            assigned_faculty=[alan],
        ),
        Subject(
            subject_code="CS501",
            name="Compilers",
            department="Computer Science",
            semester=5,
            classes_per_week=2,
            enrollment=30,
            assigned_faculty=[ada],
        ),
    ]
    db_session.add_all(subjects)
    db_session.commit()
    return {"faculty": [ada, alan], "subjects": subjects[:3], "classrooms": rooms[:3], "timeslots": slots}
