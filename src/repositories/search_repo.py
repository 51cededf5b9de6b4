"""Queries against the flight_searches log written by the booking site."""

from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import select

from repositories.postgres_repo import PostgresRepository
from repositories.schema import flight_searches


class SearchRepository(PostgresRepository):
    def list(
        self, start: Optional[datetime] = None, end: Optional[datetime] = None
    ) -> List[Dict[str, Any]]:
        stmt = select(flight_searches)
        if start is not None:
            stmt = stmt.where(flight_searches.c.created_at >= start)
        if end is not None:
            stmt = stmt.where(flight_searches.c.created_at <= end)
        return self.fetch_all(stmt.order_by(flight_searches.c.created_at.asc()))
