"""Queries against the payments table."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import func, select, update

from repositories.postgres_repo import PostgresRepository
from repositories.schema import bookings, payments


class PaymentRepository(PostgresRepository):
    """Payments joined with their booking for the payments table."""

    def list_page(
        self,
        page: int,
        limit: int,
        status: Optional[str] = None,
        date_from: Optional[datetime] = None,
        date_to: Optional[datetime] = None,
    ) -> Tuple[List[Dict[str, Any]], int]:
        conditions = []
        if status:
            conditions.append(payments.c.status == status)
        if date_from is not None:
            conditions.append(payments.c.created_at >= date_from)
        if date_to is not None:
            conditions.append(payments.c.created_at <= date_to)

        total = self.scalar(select(func.count()).select_from(payments).where(*conditions)) or 0
        rows = self.fetch_all(
            select(payments)
            .where(*conditions)
            .order_by(payments.c.created_at.desc())
            .offset((page - 1) * limit)
            .limit(limit)
        )
        self._attach_bookings(rows)
        return rows, total

    def get(self, payment_id: str) -> Optional[Dict[str, Any]]:
        row = self.fetch_one(select(payments).where(payments.c.id == payment_id))
        if row:
            self._attach_bookings([row])
        return row

    def list_since(
        self, since: Optional[datetime] = None, until: Optional[datetime] = None
    ) -> List[Dict[str, Any]]:
        stmt = select(payments)
        if since is not None:
            stmt = stmt.where(payments.c.created_at >= since)
        if until is not None:
            stmt = stmt.where(payments.c.created_at <= until)
        return self.fetch_all(stmt)

    def list_by_booking(self, booking_id: str) -> List[Dict[str, Any]]:
        stmt = (
            select(payments)
            .where(payments.c.booking_id == booking_id)
            .order_by(payments.c.created_at.desc())
        )
        return self.fetch_all(stmt)

    def insert(self, values: Dict[str, Any]) -> Dict[str, Any]:
        now = datetime.now(timezone.utc)
        values = {"id": str(uuid.uuid4()), "created_at": now, "updated_at": now, **values}
        self.execute(payments.insert().values(**values))
        return self.get(values["id"])

    def update(self, payment_id: str, values: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        values = {**values, "updated_at": datetime.now(timezone.utc)}
        stmt = update(payments).where(payments.c.id == payment_id).values(**values)
        if not self.execute(stmt):
            return None
        return self.get(payment_id)

    def _attach_bookings(self, rows: List[Dict[str, Any]]) -> None:
        if not rows:
            return
        ids = {row["booking_id"] for row in rows}
        found = {
            booking["id"]: booking
            for booking in self.fetch_all(select(bookings).where(bookings.c.id.in_(ids)))
        }
        for row in rows:
            row["booking"] = found.get(row["booking_id"])
