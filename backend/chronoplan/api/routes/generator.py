import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from chronoplan.api.deps import get_db
from chronoplan.core.config import get_settings
from chronoplan.core.exceptions import SchedulerError
from chronoplan.schemas.generator import GenerateTimetableRequest, GenerateTimetableResponse
from chronoplan.services.generation import generate_timetable

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post(
    "/admin/generate-timetable",
    response_model=GenerateTimetableResponse,
    status_code=status.HTTP_201_CREATED,
)
def generate_timetable_route(
    payload: GenerateTimetableRequest,
    db: Session = Depends(get_db),
) -> GenerateTimetableResponse:
    try:
        return generate_timetable(db, payload, get_settings())
    except SchedulerError:
        logger.exception(
            "TIMETABLE GENERATION FAILED | department=%s | semester=%s | academic_year=%s",
            payload.department,
            payload.semester,
            payload.academic_year,
        )
        raise
