from __future__ import annotations

import logging
import random
from collections.abc import Callable
from datetime import date
from time import perf_counter

from sqlalchemy.orm import Session

from chronoplan.core.config import Settings
from chronoplan.schemas.generator import GenerateTimetableRequest, GenerateTimetableResponse, GenerationSettings
from chronoplan.schemas.timetable import TimetableOut
from chronoplan.services.notifications import notify_timetable_generated
from chronoplan.services.record_store import load_snapshot, persist_timetable
from chronoplan.services.scheduling.engine import TimetableOptimizer

logger = logging.getLogger(__name__)


def resolve_generation_settings(request: GenerateTimetableRequest, app_settings: Settings) -> GenerationSettings:
    resolved = GenerationSettings.model_validate(
        request.settings_override.model_dump() if request.settings_override is not None else {}
    )
    if resolved.random_seed is None and app_settings.scheduler_random_seed is not None:
        resolved = resolved.model_copy(update={"random_seed": app_settings.scheduler_random_seed})
    return resolved


def generate_timetable(
    db: Session,
    request: GenerateTimetableRequest,
    app_settings: Settings,
    *,
    today: Callable[[], date] | None = None,
) -> GenerateTimetableResponse:
    started = perf_counter()
    generation_settings = resolve_generation_settings(request, app_settings)
    logger.info(
        "TIMETABLE GENERATION START | department=%s | semester=%s | academic_year=%s | seed=%s",
        request.department,
        request.semester,
        request.academic_year,
        generation_settings.random_seed,
    )

    snapshot = load_snapshot(db, request.department, request.semester)
    optimizer = TimetableOptimizer(
        snapshot,
        generation_settings,
        rng=random.Random(generation_settings.random_seed),
        today=today,
    )
    result = optimizer.optimize()

    try:
        timetable = persist_timetable(db, request=request, result=result, generated_by=request.generated_by)
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(timetable)

    notify_timetable_generated(db, timetable)

    runtime_ms = int((perf_counter() - started) * 1000)
    logger.info(
        "TIMETABLE GENERATION DONE | timetable=%s | fitness=%.4f | generations=%d | termination=%s | runtime_ms=%d",
        timetable.timetable_code,
        result.fitness,
        result.generations,
        result.state.value,
        runtime_ms,
    )
    return GenerateTimetableResponse(
        timetable=TimetableOut.model_validate(timetable),
        fitness=result.fitness,
        generations=result.generations,
        termination=result.state.value,
        metrics=result.metrics,
        settings_used=generation_settings,
        runtime_ms=runtime_ms,
    )
