import uuid
from datetime import datetime
from enum import Enum

from sqlalchemy import DateTime, Enum as SAEnum, Float, ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from chronoplan.db.base import Base
from chronoplan.models.subject import ProgramLevel


class TimetableStatus(str, Enum):
    draft = "draft"
    generated = "generated"
    review = "review"
    approved = "approved"
    published = "published"


class Timetable(Base):
    __tablename__ = "timetables"
    __table_args__ = (Index("ix_timetables_scope", "academic_year", "semester", "department"),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    timetable_code: Mapped[str] = mapped_column(String(120), unique=True, index=True, nullable=False)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    academic_year: Mapped[str] = mapped_column(String(20), nullable=False)
    semester: Mapped[int] = mapped_column(Integer, nullable=False)
    department: Mapped[str | None] = mapped_column(String(200), nullable=True)
    status: Mapped[TimetableStatus] = mapped_column(
        SAEnum(TimetableStatus, name="timetable_status"),
        index=True,
        nullable=False,
        default=TimetableStatus.draft,
    )
    fitness: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    generations: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    classroom_utilization: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    faculty_workload_balance: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    conflict_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    preference_satisfaction: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    generated_by: Mapped[str | None] = mapped_column(String(36), nullable=True)
    approved_by: Mapped[str | None] = mapped_column(String(36), nullable=True)
    approved_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    published_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), onupdate=func.now())

    entries: Mapped[list["TimetableEntry"]] = relationship(
        back_populates="timetable",
        cascade="all, delete-orphan",
        order_by="TimetableEntry.position",
    )


class TimetableEntry(Base):
    __tablename__ = "timetable_entries"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    timetable_id: Mapped[str] = mapped_column(ForeignKey("timetables.id", ondelete="CASCADE"), index=True, nullable=False)
    position: Mapped[int] = mapped_column(Integer, nullable=False)
    entry_code: Mapped[str] = mapped_column(String(160), unique=True, nullable=False)
    faculty_id: Mapped[str] = mapped_column(ForeignKey("faculty.id"), nullable=False)
    subject_id: Mapped[str] = mapped_column(ForeignKey("subjects.id"), nullable=False)
    classroom_id: Mapped[str] = mapped_column(ForeignKey("classrooms.id"), nullable=False)
    timeslot_id: Mapped[str] = mapped_column(ForeignKey("timeslots.id"), nullable=False)
    semester: Mapped[int] = mapped_column(Integer, nullable=False)
    department: Mapped[str] = mapped_column(String(200), nullable=False)
    program: Mapped[ProgramLevel] = mapped_column(SAEnum(ProgramLevel, name="program_level"), nullable=False)

    timetable: Mapped[Timetable] = relationship(back_populates="entries")
