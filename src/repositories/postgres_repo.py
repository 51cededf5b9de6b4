"""PostgreSQL repository base using SQLAlchemy Core."""

from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional

from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.sql import Executable

from utils.error_handling import DataUnavailableError
from utils.logging_config import get_logger

logger = get_logger(__name__)


class PostgresRepository:
    """Thin wrapper to keep statements parameterized and failures uniform."""

    def __init__(self, engine: Engine):
        self.engine = engine

    @contextmanager
    def _connect(self, write: bool = False) -> Iterator[Connection]:
        try:
            with (self.engine.begin() if write else self.engine.connect()) as conn:
                yield conn
        except SQLAlchemyError as exc:
            logger.error(
                "Database call failed",
                extra={"repository": type(self).__name__, "error": str(exc)},
            )
            raise DataUnavailableError() from exc

    def fetch_one(self, stmt: Executable) -> Optional[Dict[str, Any]]:
        """Execute a SELECT and return one row as dict."""
        with self._connect() as conn:
            row = conn.execute(stmt).fetchone()
            return dict(row._mapping) if row else None

    def fetch_all(self, stmt: Executable) -> List[Dict[str, Any]]:
        """Execute a SELECT and return every row as dict."""
        with self._connect() as conn:
            return [dict(row._mapping) for row in conn.execute(stmt)]

    def scalar(self, stmt: Executable) -> Any:
        """Execute a SELECT returning a single value."""
        with self._connect() as conn:
            return conn.execute(stmt).scalar()

    def execute(self, stmt: Executable) -> int:
        """Execute a write statement in its own transaction; returns rowcount."""
        with self._connect(write=True) as conn:
            return conn.execute(stmt).rowcount
