import uuid
from datetime import datetime
from enum import Enum

from sqlalchemy import Boolean, DateTime, Enum as SAEnum, String, Text
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from chronoplan.db.base import Base


class NotificationType(str, Enum):
    timetable_generated = "timetable_generated"
    timetable_approved = "timetable_approved"
    timetable_published = "timetable_published"


class NotificationAudience(str, Enum):
    admin = "admin"
    faculty = "faculty"
    student = "student"


class NotificationPriority(str, Enum):
    low = "low"
    medium = "medium"
    high = "high"


class Notification(Base):
    __tablename__ = "notifications"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    audience: Mapped[NotificationAudience] = mapped_column(
        SAEnum(NotificationAudience, name="notification_audience"),
        index=True,
        nullable=False,
    )
    department: Mapped[str | None] = mapped_column(String(200), index=True, nullable=True)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    notification_type: Mapped[NotificationType] = mapped_column(
        SAEnum(NotificationType, name="notification_type"),
        nullable=False,
    )
    priority: Mapped[NotificationPriority] = mapped_column(
        SAEnum(NotificationPriority, name="notification_priority"),
        nullable=False,
        default=NotificationPriority.medium,
    )
    related_timetable_id: Mapped[str | None] = mapped_column(String(36), nullable=True)
    is_read: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
