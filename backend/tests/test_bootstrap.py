import pytest
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from chronoplan.core.exceptions import ConfigurationError
from chronoplan.db import bootstrap


def _raise_error(message: str):
    raise RuntimeError(message)


def test_schema_bootstrap_raises_on_validation_failure(monkeypatch):
    monkeypatch.setattr(bootstrap.Base.metadata, "create_all", lambda bind: None)
    monkeypatch.setattr(
        bootstrap,
        "_assert_required_tables",
        lambda: _raise_error("missing required schema"),
    )

    with pytest.raises(ConfigurationError, match="Schema bootstrap failed") as exc_info:
        bootstrap.ensure_schema()

    assert exc_info.value.status_code == 500
    assert isinstance(exc_info.value.__cause__, RuntimeError)


def test_missing_tables_are_reported_as_configuration_error(monkeypatch):
    empty_engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    monkeypatch.setattr(bootstrap, "engine", empty_engine)
    monkeypatch.setattr(bootstrap.Base.metadata, "create_all", lambda bind: None)

    with pytest.raises(ConfigurationError, match="Schema bootstrap failed") as exc_info:
        bootstrap.ensure_schema()

    cause = exc_info.value.__cause__
    assert isinstance(cause, ConfigurationError)
    assert cause.message.startswith("Missing required tables: classrooms, faculty")


def test_required_tables_cover_every_model():
    assert bootstrap.REQUIRED_TABLES == set(bootstrap.Base.metadata.tables)
