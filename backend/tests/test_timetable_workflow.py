import pytest
from sqlalchemy import select

from chronoplan.models.notification import Notification, NotificationAudience, NotificationType
from chronoplan.models.timetable import Timetable, TimetableStatus


@pytest.fixture()
def make_timetable(db_session):
    def _make(status: TimetableStatus, *, code: str = "TT-2025-26-3-CSE-1", department: str = "CSE", semester: int = 3):
        timetable = Timetable(
            timetable_code=code,
            name=f"{department} - Semester {semester} (2025-26)",
            academic_year="2025-26",
            semester=semester,
            department=department,
            status=status,
        )
        db_session.add(timetable)
        db_session.commit()
        return timetable.id

    return _make


def _notifications(db_session, notification_type):
    db_session.expire_all()
    return db_session.execute(
        select(Notification).where(Notification.notification_type == notification_type)
    ).scalars().all()


@pytest.mark.parametrize("status", [TimetableStatus.draft, TimetableStatus.generated, TimetableStatus.review])
def test_approve_from_approvable_status(client, db_session, make_timetable, status):
    timetable_id = make_timetable(status)

    response = client.put(f"/api/timetables/{timetable_id}/approve", json={"actor_id": "admin-7"})

    assert response.status_code == 200, response.text
    body = response.json()
    assert body["status"] == "approved"
    assert body["approved_by"] == "admin-7"
    assert body["approved_at"] is not None
    audiences = {item.audience for item in _notifications(db_session, NotificationType.timetable_approved)}
    assert audiences == {NotificationAudience.faculty, NotificationAudience.student}


@pytest.mark.parametrize("status", [TimetableStatus.approved, TimetableStatus.published])
def test_approve_rejects_other_statuses(client, make_timetable, status):
    timetable_id = make_timetable(status)

    response = client.put(f"/api/timetables/{timetable_id}/approve", json={"actor_id": "admin-7"})

    assert response.status_code == 409
    assert response.json()["message"] == f"Cannot approve timetable with status: {status.value}"


def test_publishing_a_generated_timetable_auto_approves(client, db_session, make_timetable):
    timetable_id = make_timetable(TimetableStatus.generated)

    response = client.put(f"/api/timetables/{timetable_id}/publish", json={"actor_id": "admin-2"})

    assert response.status_code == 200, response.text
    body = response.json()
    assert body["status"] == "published"
    assert body["approved_by"] == "admin-2"
    assert body["approved_at"] is not None
    assert body["published_at"] is not None
    published = _notifications(db_session, NotificationType.timetable_published)
    assert len(published) == 2
    assert all(item.department == "CSE" for item in published)


def test_publishing_an_approved_timetable_keeps_approver(client, make_timetable):
    timetable_id = make_timetable(TimetableStatus.generated)
    client.put(f"/api/timetables/{timetable_id}/approve", json={"actor_id": "dean"})

    body = client.put(f"/api/timetables/{timetable_id}/publish").json()

    assert body["status"] == "published"
    assert body["approved_by"] == "dean"


@pytest.mark.parametrize("status", [TimetableStatus.draft, TimetableStatus.review, TimetableStatus.published])
def test_publish_requires_generated_or_approved(client, make_timetable, status):
    timetable_id = make_timetable(status)

    response = client.put(f"/api/timetables/{timetable_id}/publish")

    assert response.status_code == 409
    assert response.json()["details"]["status"] == status.value


def test_unknown_timetable_is_404(client):
    for response in (
        client.get("/api/timetables/missing"),
        client.put("/api/timetables/missing/approve"),
        client.put("/api/timetables/missing/publish"),
    ):
        assert response.status_code == 404
        assert response.json()["details"] == {"resource_type": "Timetable", "resource_id": "missing"}


def test_list_filters(client, make_timetable):
    make_timetable(TimetableStatus.generated, code="TT-A", department="CSE", semester=3)
    make_timetable(TimetableStatus.published, code="TT-B", department="CSE", semester=5)
    make_timetable(TimetableStatus.generated, code="TT-C", department="ECE", semester=3)

    def codes(**params):
        response = client.get("/api/timetables", params=params)
        assert response.status_code == 200
        return sorted(item["timetable_code"] for item in response.json())

    assert codes() == ["TT-A", "TT-B", "TT-C"]
    assert codes(department="CSE") == ["TT-A", "TT-B"]
    assert codes(semester=3) == ["TT-A", "TT-C"]
    assert codes(status="published") == ["TT-B"]
    assert codes(department="ECE", status="published") == []


def test_get_timetable_includes_entries(client, make_timetable):
    timetable_id = make_timetable(TimetableStatus.draft)

    body = client.get(f"/api/timetables/{timetable_id}").json()

    assert body["id"] == timetable_id
    assert body["entries"] == []
