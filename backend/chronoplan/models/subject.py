import uuid
from datetime import datetime
from enum import Enum

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Enum as SAEnum,
    ForeignKey,
    Integer,
    JSON,
    String,
    Table,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from chronoplan.db.base import Base
from chronoplan.models.classroom import RoomType
from chronoplan.models.faculty import Faculty


class ProgramLevel(str, Enum):
    ug = "UG"
    pg = "PG"


subject_faculty = Table(
    "subject_faculty",
    Base.metadata,
    Column("subject_id", ForeignKey("subjects.id", ondelete="CASCADE"), primary_key=True),
    Column("faculty_id", ForeignKey("faculty.id", ondelete="CASCADE"), primary_key=True),
)


class Subject(Base):
    __tablename__ = "subjects"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    subject_code: Mapped[str] = mapped_column(String(50), unique=True, index=True, nullable=False)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    department: Mapped[str] = mapped_column(String(200), index=True, nullable=False)
    program: Mapped[ProgramLevel] = mapped_column(
        SAEnum(ProgramLevel, name="program_level"),
        nullable=False,
        default=ProgramLevel.ug,
    )
    semester: Mapped[int] = mapped_column(Integer, index=True, nullable=False)
    credits: Mapped[int] = mapped_column(Integer, nullable=False, default=3)
    classes_per_week: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    duration_minutes: Mapped[int] = mapped_column(Integer, nullable=False, default=60)
    enrollment: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    room_type: Mapped[RoomType | None] = mapped_column(SAEnum(RoomType, name="room_type"), nullable=True)
    min_capacity: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    required_equipment: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    accessibility_needed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), onupdate=func.now())

    assigned_faculty: Mapped[list[Faculty]] = relationship(secondary=subject_faculty, order_by=Faculty.faculty_code)
