from __future__ import annotations

import logging
from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from chronoplan.core.exceptions import ResourceNotFoundError, WorkflowError
from chronoplan.models.timetable import Timetable, TimetableStatus
from chronoplan.services.notifications import notify_timetable_approved, notify_timetable_published

logger = logging.getLogger(__name__)

APPROVABLE_STATUSES = frozenset({TimetableStatus.draft, TimetableStatus.generated, TimetableStatus.review})
PUBLISHABLE_STATUSES = frozenset({TimetableStatus.generated, TimetableStatus.approved})


def list_timetables(
    db: Session,
    *,
    department: str | None = None,
    semester: int | None = None,
    status: TimetableStatus | None = None,
) -> list[Timetable]:
    query = select(Timetable)
    if department is not None:
        query = query.where(Timetable.department == department)
    if semester is not None:
        query = query.where(Timetable.semester == semester)
    if status is not None:
        query = query.where(Timetable.status == status)
    return list(db.execute(query.order_by(Timetable.created_at.desc(), Timetable.timetable_code)).scalars().all())


def get_timetable(db: Session, timetable_id: str) -> Timetable:
    timetable = db.execute(
        select(Timetable).where(Timetable.id == timetable_id).options(selectinload(Timetable.entries))
    ).scalar_one_or_none()
    if timetable is None:
        raise ResourceNotFoundError("Timetable", timetable_id)
    return timetable


def _mark_approved(timetable: Timetable, actor_id: str | None) -> None:
    timetable.status = TimetableStatus.approved
    timetable.approved_by = actor_id
    timetable.approved_at = datetime.now(timezone.utc)


def approve_timetable(db: Session, timetable_id: str, *, actor_id: str | None = None) -> Timetable:
    timetable = get_timetable(db, timetable_id)
    if timetable.status not in APPROVABLE_STATUSES:
        raise WorkflowError(
            f"Cannot approve timetable with status: {timetable.status.value}",
            details={"timetable_id": timetable.id, "status": timetable.status.value},
        )
    _mark_approved(timetable, actor_id)
    db.commit()
    logger.info("Timetable %s approved by %s", timetable.timetable_code, actor_id or "unknown")

    notify_timetable_approved(db, timetable)
    db.refresh(timetable)
    return timetable


def publish_timetable(db: Session, timetable_id: str, *, actor_id: str | None = None) -> Timetable:
    timetable = get_timetable(db, timetable_id)
    if timetable.status not in PUBLISHABLE_STATUSES:
        raise WorkflowError(
            f"Timetable must be generated or approved before publishing (current status: {timetable.status.value})",
            details={"timetable_id": timetable.id, "status": timetable.status.value},
        )
    if timetable.status == TimetableStatus.generated:
        _mark_approved(timetable, actor_id)
    timetable.status = TimetableStatus.published
    timetable.published_at = datetime.now(timezone.utc)
    db.commit()
    logger.info("Timetable %s published", timetable.timetable_code)

    notify_timetable_published(db, timetable)
    db.refresh(timetable)
    return timetable
