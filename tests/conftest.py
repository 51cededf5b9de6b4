"""
Pytest configuration to ensure paths are set up correctly for tests.

This allows imports like `from handlers import health_check` to work
when running tests, simulating the Lambda environment where code
is deployed from the src/ directory.

Repository and service tests run against an in-memory SQLite database
built from the same SQLAlchemy tables the API uses.
"""

import os
import sys
import uuid
from datetime import datetime, timezone
from pathlib import Path

import boto3
import pytest


def _ensure_paths_on_sys_path() -> None:
    """Add src/ to sys.path if missing.

    The src/ directory is added to simulate Lambda's import behavior,
    where the deployment package root is the contents of src/.
    """
    src_root = Path(__file__).resolve().parents[1] / "src"
    src_str = str(src_root)
    if src_str not in sys.path:
        sys.path.insert(0, src_str)


_ensure_paths_on_sys_path()

# Ensure boto3 has offline-friendly defaults so tests do not require AWS access.
os.environ.setdefault("AWS_REGION", "eu-west-2")
os.environ.setdefault("AWS_DEFAULT_REGION", "eu-west-2")
os.environ.setdefault("AWS_ACCESS_KEY_ID", "test")
os.environ.setdefault("AWS_SECRET_ACCESS_KEY", "test")
os.environ.setdefault("ENVIRONMENT", "dev")
os.environ.setdefault("AUTH_ENABLED", "false")

# Create a default boto3 session so clients do not error during import.
boto3.setup_default_session(region_name="eu-west-2")

from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from repositories import schema  # noqa: E402
from utils.database import reset_engine  # noqa: E402


@pytest.fixture
def engine():
    """Fresh in-memory database with every table created."""
    db = create_engine(
        "sqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    schema.metadata.create_all(db)
    yield db
    db.dispose()


@pytest.fixture(autouse=True)
def _no_cached_engine():
    """Never leak a lazily created engine between tests."""
    reset_engine()
    yield
    reset_engine()


def utc(*args) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


def insert_booking(engine, **values):
    """Insert a booking row directly; returns its id."""
    row = {
        "id": str(uuid.uuid4()),
        "booking_type": "flight",
        "status": "confirmed",
        "total_amount": 0,
        "currency": "XOF",
        "created_at": utc(2024, 1, 1),
        **values,
    }
    with engine.begin() as conn:
        conn.execute(schema.bookings.insert().values(**row))
    return row["id"]


def insert_payment(engine, booking_id, **values):
    created = values.pop("created_at", utc(2024, 1, 1))
    row = {
        "id": str(uuid.uuid4()),
        "booking_id": booking_id,
        "amount": 0,
        "currency": "XOF",
        "status": "pending",
        "created_at": created,
        "updated_at": created,
        **values,
    }
    with engine.begin() as conn:
        conn.execute(schema.payments.insert().values(**row))
    return row["id"]


def insert_row(engine, table, **values):
    """Insert into any table, generating an id when none is given."""
    row = {"id": str(uuid.uuid4()), **values}
    with engine.begin() as conn:
        conn.execute(table.insert().values(**row))
    return row["id"]
