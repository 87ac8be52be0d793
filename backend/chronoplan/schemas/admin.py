from pydantic import BaseModel


class AdminStatsOut(BaseModel):
    faculty: int
    subjects: int
    classrooms: int
    timeslots: int
    timetables: int
