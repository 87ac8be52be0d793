from sqlalchemy import select

from chronoplan.models.notification import (
    Notification,
    NotificationAudience,
    NotificationPriority,
    NotificationType,
)
from chronoplan.models.timetable import Timetable, TimetableStatus
from chronoplan.services.notifications import (
    notify_timetable_approved,
    notify_timetable_generated,
    notify_timetable_published,
)


def _timetable(db_session):
    timetable = Timetable(
        timetable_code="TT-2025-26-5-ECE-1",
        name="ECE - Semester 5 (2025-26)",
        academic_year="2025-26",
        semester=5,
        department="ECE",
        status=TimetableStatus.generated,
    )
    db_session.add(timetable)
    db_session.commit()
    return timetable


class BrokenSession:
    def __init__(self):
        self.rolled_back = False

    def add(self, record):
        raise RuntimeError("database is read-only")

    def rollback(self):
        self.rolled_back = True


def test_generated_notification_targets_admins(db_session):
    timetable = _timetable(db_session)

    assert notify_timetable_generated(db_session, timetable) == 1

    (record,) = db_session.execute(select(Notification)).scalars().all()
    assert record.audience == NotificationAudience.admin
    assert record.notification_type == NotificationType.timetable_generated
    assert "ECE - Semester 5 (2025-26)" in record.message
    assert record.is_read is False


def test_published_notification_reaches_faculty_and_students(db_session):
    timetable = _timetable(db_session)

    assert notify_timetable_published(db_session, timetable) == 2

    records = db_session.execute(select(Notification)).scalars().all()
    assert {record.audience for record in records} == {NotificationAudience.faculty, NotificationAudience.student}
    assert all(record.priority == NotificationPriority.high for record in records)
    assert all(record.related_timetable_id == timetable.id for record in records)


def test_notification_failures_are_swallowed(db_session):
    timetable = _timetable(db_session)
    broken = BrokenSession()

    assert notify_timetable_approved(broken, timetable) == 0
    assert broken.rolled_back
