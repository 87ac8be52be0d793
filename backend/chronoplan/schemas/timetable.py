from datetime import datetime

from pydantic import BaseModel, Field

from chronoplan.models.subject import ProgramLevel
from chronoplan.models.timetable import TimetableStatus


class TimetableEntryOut(BaseModel):
    id: str
    entry_code: str
    position: int
    faculty_id: str
    subject_id: str
    classroom_id: str
    timeslot_id: str
    semester: int
    department: str
    program: ProgramLevel

    model_config = {"from_attributes": True}


class TimetableSummaryOut(BaseModel):
    id: str
    timetable_code: str
    name: str
    academic_year: str
    semester: int
    department: str | None = None
    status: TimetableStatus
    fitness: float
    generations: int
    classroom_utilization: float
    faculty_workload_balance: float
    conflict_count: int
    preference_satisfaction: float
    generated_by: str | None = None
    approved_by: str | None = None
    approved_at: datetime | None = None
    published_at: datetime | None = None
    version: int
    created_at: datetime | None = None

    model_config = {"from_attributes": True}


class TimetableOut(TimetableSummaryOut):
    entries: list[TimetableEntryOut] = Field(default_factory=list)


class TimetableStatusChange(BaseModel):
    actor_id: str | None = Field(default=None, max_length=36)
