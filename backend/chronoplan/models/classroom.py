import uuid
from datetime import datetime
from enum import Enum

from sqlalchemy import Boolean, DateTime, Enum as SAEnum, Integer, JSON, String
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from chronoplan.db.base import Base


class RoomType(str, Enum):
    lecture = "lecture"
    laboratory = "laboratory"
    seminar = "seminar"
    auditorium = "auditorium"
    computer_lab = "computer_lab"


class Classroom(Base):
    __tablename__ = "classrooms"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    room_code: Mapped[str] = mapped_column(String(50), unique=True, index=True, nullable=False)
    building: Mapped[str] = mapped_column(String(200), nullable=False)
    floor: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    capacity: Mapped[int] = mapped_column(Integer, nullable=False, default=30)
    room_type: Mapped[RoomType] = mapped_column(
        SAEnum(RoomType, name="room_type"),
        nullable=False,
        default=RoomType.lecture,
    )
    smart_board: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    projector: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    computer_lab: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    air_conditioning: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    wifi: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    specialized_equipment: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    wheelchair_accessible: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), onupdate=func.now())
