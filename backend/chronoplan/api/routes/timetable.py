from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from chronoplan.api.deps import get_db
from chronoplan.models.timetable import TimetableStatus
from chronoplan.schemas.timetable import TimetableOut, TimetableStatusChange, TimetableSummaryOut
from chronoplan.services.workflow import approve_timetable, get_timetable, list_timetables, publish_timetable

router = APIRouter()


@router.get("/timetables", response_model=list[TimetableSummaryOut])
def list_timetables_route(
    department: str | None = Query(default=None),
    semester: int | None = Query(default=None, ge=1, le=8),
    status: TimetableStatus | None = Query(default=None),
    db: Session = Depends(get_db),
) -> list[TimetableSummaryOut]:
    records = list_timetables(db, department=department, semester=semester, status=status)
    return [TimetableSummaryOut.model_validate(record) for record in records]


@router.get("/timetables/{timetable_id}", response_model=TimetableOut)
def get_timetable_route(timetable_id: str, db: Session = Depends(get_db)) -> TimetableOut:
    return TimetableOut.model_validate(get_timetable(db, timetable_id))


@router.put("/timetables/{timetable_id}/approve", response_model=TimetableOut)
def approve_timetable_route(
    timetable_id: str,
    payload: TimetableStatusChange | None = None,
    db: Session = Depends(get_db),
) -> TimetableOut:
    actor_id = payload.actor_id if payload is not None else None
    return TimetableOut.model_validate(approve_timetable(db, timetable_id, actor_id=actor_id))


@router.put("/timetables/{timetable_id}/publish", response_model=TimetableOut)
def publish_timetable_route(
    timetable_id: str,
    payload: TimetableStatusChange | None = None,
    db: Session = Depends(get_db),
) -> TimetableOut:
    actor_id = payload.actor_id if payload is not None else None
    return TimetableOut.model_validate(publish_timetable(db, timetable_id, actor_id=actor_id))
