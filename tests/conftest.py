"""
Pytest configuration for the API service.

Provides fixtures for:
- Settings pointing at a per-test SQLite file
- An initialized record store
- The FastAPI app and a TestClient with its lifespan running
- A helper that holds an exclusive lock on the database
"""

import io
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Generator, Iterator

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from openpyxl import load_workbook

from services.api.app import create_app
from utils.config import Settings
from utils.db import RecordStore

ALLOWED_ORIGIN = "http://localhost:5173"


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    return tmp_path / "db" / "users.db"


@pytest.fixture
def test_settings(db_path: Path) -> Settings:
    """
    Settings fixture with test-specific overrides.

    A short lock timeout keeps the database-locked scenarios fast.
    """
    return Settings(
        _env_file=None,
        SQLITE_PATH=str(db_path),
        SQLITE_TIMEOUT=0.1,
        CORS_ORIGIN=ALLOWED_ORIGIN,
        LOG_LEVEL="DEBUG",
        ENVIRONMENT="test",
    )


@pytest.fixture
def store(test_settings: Settings) -> RecordStore:
    record_store = RecordStore(test_settings.SQLITE_PATH, timeout=test_settings.SQLITE_TIMEOUT)
    record_store.init_schema()
    return record_store


@pytest.fixture
def app(test_settings: Settings) -> FastAPI:
    return create_app(test_settings)


@pytest.fixture
def client(app: FastAPI) -> Generator[TestClient, None, None]:
    """TestClient used as a context manager so startup/shutdown run."""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def locked_database(db_path: Path):
    """
    Return a context manager that holds an exclusive lock on the database file.

    Any read or write by the store inside the block fails with "database is locked".
    """

    @contextmanager
    def _lock() -> Iterator[None]:
        blocker = sqlite3.connect(db_path, isolation_level=None)
        try:
            blocker.execute("BEGIN EXCLUSIVE")
            yield
        finally:
            blocker.execute("ROLLBACK")
            blocker.close()

    return _lock


def read_rows(content: bytes) -> list[tuple]:
    """Load an XLSX payload and return the rows of its active sheet."""
    workbook = load_workbook(io.BytesIO(content))
    return list(workbook.active.iter_rows(values_only=True))
