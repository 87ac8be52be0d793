from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from chronoplan.models.notification import (
    Notification,
    NotificationAudience,
    NotificationPriority,
    NotificationType,
)
from chronoplan.models.timetable import Timetable

logger = logging.getLogger(__name__)


def create_notification(
    db: Session,
    *,
    audience: NotificationAudience,
    title: str,
    message: str,
    notification_type: NotificationType,
    department: str | None = None,
    priority: NotificationPriority = NotificationPriority.medium,
    related_timetable_id: str | None = None,
) -> Notification:
    record = Notification(
        audience=audience,
        department=department,
        title=title,
        message=message,
        notification_type=notification_type,
        priority=priority,
        related_timetable_id=related_timetable_id,
    )
    db.add(record)
    db.flush()
    return record


def notify_audiences(
    db: Session,
    *,
    audiences: tuple[NotificationAudience, ...],
    title: str,
    message: str,
    notification_type: NotificationType,
    department: str | None = None,
    priority: NotificationPriority = NotificationPriority.medium,
    related_timetable_id: str | None = None,
) -> int:
    """Best-effort fan-out committed on its own; failures are logged and reported as zero deliveries.

    Callers commit their own work first so a rollback here only drops the notifications.
    """
    try:
        for audience in audiences:
            create_notification(
                db,
                audience=audience,
                title=title,
                message=message,
                notification_type=notification_type,
                department=department,
                priority=priority,
                related_timetable_id=related_timetable_id,
            )
        db.commit()
    except Exception:
        db.rollback()
        logger.warning(
            "Failed to create %s notification for %s",
            notification_type.value,
            ", ".join(audience.value for audience in audiences),
            exc_info=True,
        )
        return 0
    return len(audiences)


def notify_timetable_generated(db: Session, timetable: Timetable) -> int:
    return notify_audiences(
        db,
        audiences=(NotificationAudience.admin,),
        title="Timetable Generated",
        message=(
            f"Timetable for {timetable.department} - Semester {timetable.semester} "
            f"({timetable.academic_year}) has been generated and is awaiting approval."
        ),
        notification_type=NotificationType.timetable_generated,
        department=timetable.department,
        related_timetable_id=timetable.id,
    )


def notify_timetable_approved(db: Session, timetable: Timetable) -> int:
    return notify_audiences(
        db,
        audiences=(NotificationAudience.faculty, NotificationAudience.student),
        title="Timetable Approved",
        message=(
            f"Timetable for {timetable.department} - Semester {timetable.semester} "
            f"({timetable.academic_year}) has been approved."
        ),
        notification_type=NotificationType.timetable_approved,
        department=timetable.department,
        related_timetable_id=timetable.id,
    )


def notify_timetable_published(db: Session, timetable: Timetable) -> int:
    return notify_audiences(
        db,
        audiences=(NotificationAudience.faculty, NotificationAudience.student),
        title="New Timetable Published",
        message=(
            f"Timetable for {timetable.department} - Semester {timetable.semester} "
            f"({timetable.academic_year}) is now available."
        ),
        notification_type=NotificationType.timetable_published,
        department=timetable.department,
        priority=NotificationPriority.high,
        related_timetable_id=timetable.id,
    )
