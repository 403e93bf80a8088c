"""Pytest fixtures."""

import tempfile
from collections.abc import Generator
from datetime import datetime, timezone
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from mustdo.core.deps import get_tz
from mustdo.db.session import build_engine, get_db, init_db
from mustdo.main import app

# Wednesday 2026-03-04 09:00 UTC
NOW = int(datetime(2026, 3, 4, 9, 0, tzinfo=timezone.utc).timestamp())


@pytest.fixture
def now() -> int:
    return NOW


@pytest.fixture
def test_engine() -> Generator:
    """Engine bound to a fresh temp SQLite file."""
    from mustdo.core.config import settings

    if not settings.database_url.startswith("sqlite"):
        pytest.skip(
            "client_with_test_db only supports SQLite (use test DB URL in CI)")

    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        test_db_path = Path(f.name)
    engine = build_engine(f"sqlite:///{test_db_path}")
    init_db(engine)
    try:
        yield engine
    finally:
        engine.dispose()
        try:
            test_db_path.unlink(missing_ok=True)
        except OSError:
            pass


@pytest.fixture
def client_with_test_db(test_engine) -> Generator[TestClient, None, None]:
    """
    FastAPI test client with get_db overridden to use an isolated SQLite DB.

    Each test gets a fresh temp DB file so tests don't share state. Calendar
    math runs in UTC; tests pass ``now`` explicitly as a query parameter.
    """

    def override_get_db() -> Generator[Session, None, None]:
        with Session(test_engine) as session:
            yield session

    # FastAPI's built-in way to swap a dependency in tests.
    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_tz] = lambda: timezone.utc

    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
