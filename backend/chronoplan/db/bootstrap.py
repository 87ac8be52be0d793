from __future__ import annotations

import logging

from sqlalchemy import inspect

from chronoplan.core.exceptions import ConfigurationError
from chronoplan.db.base import Base
from chronoplan.db.session import engine
import chronoplan.models  # noqa: F401

logger = logging.getLogger(__name__)

REQUIRED_TABLES = {
    "subjects",
    "subject_faculty",
    "faculty",
    "faculty_leaves",
    "classrooms",
    "timeslots",
    "timetables",
    "timetable_entries",
    "notifications",
}


def _assert_required_tables() -> None:
    with engine.begin() as connection:
        table_names = set(inspect(connection).get_table_names())
    missing_tables = sorted(REQUIRED_TABLES - table_names)
    if missing_tables:
        raise ConfigurationError(f"Missing required tables: {', '.join(missing_tables)}")


def ensure_schema() -> None:
    try:
        Base.metadata.create_all(bind=engine)
        _assert_required_tables()
    except Exception as exc:
        logger.exception("Schema bootstrap failed")
        raise ConfigurationError("Schema bootstrap failed") from exc
