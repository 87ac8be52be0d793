from fastapi import APIRouter, Depends
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from chronoplan.api.deps import get_db
from chronoplan.models.classroom import Classroom
from chronoplan.models.faculty import Faculty
from chronoplan.models.subject import Subject
from chronoplan.models.timeslot import Timeslot
from chronoplan.models.timetable import Timetable
from chronoplan.schemas.admin import AdminStatsOut

router = APIRouter()


@router.get("/admin/stats", response_model=AdminStatsOut)
def admin_stats(db: Session = Depends(get_db)) -> AdminStatsOut:
    # Timeslots and timetables are counted regardless of state.
    faculty = int(db.execute(select(func.count(Faculty.id)).where(Faculty.is_active.is_(True))).scalar_one() or 0)
    subjects = int(db.execute(select(func.count(Subject.id)).where(Subject.is_active.is_(True))).scalar_one() or 0)
    classrooms = int(
        db.execute(select(func.count(Classroom.id)).where(Classroom.is_active.is_(True))).scalar_one() or 0
    )
    timeslots = int(db.execute(select(func.count(Timeslot.id))).scalar_one() or 0)
    timetables = int(db.execute(select(func.count(Timetable.id))).scalar_one() or 0)
    return AdminStatsOut(
        faculty=faculty,
        subjects=subjects,
        classrooms=classrooms,
        timeslots=timeslots,
        timetables=timetables,
    )
