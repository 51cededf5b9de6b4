"""Queries against the bookings table (and its payments)."""

from __future__ import annotations

import uuid
from collections import defaultdict
from datetime import datetime, time, timezone
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import distinct, func, or_, select, update
from sqlalchemy.sql import Select

from models.booking import BookingFilters
from repositories.postgres_repo import PostgresRepository
from repositories.schema import bookings, payments


def _day_start(value) -> datetime:
    return datetime.combine(value, time.min, tzinfo=timezone.utc)


def _day_end(value) -> datetime:
    # Inclusive through the last microsecond of the day.
    return datetime.combine(value, time.max, tzinfo=timezone.utc)


def apply_booking_filters(stmt: Select, filters: Optional[BookingFilters]) -> Select:
    """Translate listing filters into WHERE clauses (package_subtype excluded)."""
    if filters is None:
        return stmt
    col = bookings.c
    if filters.status:
        stmt = stmt.where(col.status == filters.status.value)
    if filters.booking_type:
        stmt = stmt.where(col.booking_type == filters.booking_type.value)
    if filters.search:
        pattern = f"%{filters.search}%"
        stmt = stmt.where(or_(col.guest_email.ilike(pattern), col.guest_phone.ilike(pattern)))
    if filters.date_from:
        stmt = stmt.where(col.created_at >= _day_start(filters.date_from))
    if filters.date_to:
        stmt = stmt.where(col.created_at <= _day_end(filters.date_to))
    if filters.amount_min is not None:
        stmt = stmt.where(col.total_amount >= filters.amount_min)
    if filters.amount_max is not None:
        stmt = stmt.where(col.total_amount <= filters.amount_max)
    if filters.customer_email:
        stmt = stmt.where(col.guest_email.ilike(f"%{filters.customer_email}%"))
    return stmt


class BookingRepository(PostgresRepository):
    """Bookings are read newest first everywhere the dashboard lists them."""

    def list_page(
        self, page: int, limit: int, filters: Optional[BookingFilters] = None
    ) -> Tuple[List[Dict[str, Any]], int]:
        """One page of bookings with their payments, plus the exact total count."""
        count_stmt = apply_booking_filters(select(func.count()).select_from(bookings), filters)
        rows_stmt = (
            apply_booking_filters(select(bookings), filters)
            .order_by(bookings.c.created_at.desc())
            .offset((page - 1) * limit)
            .limit(limit)
        )
        total = self.scalar(count_stmt) or 0
        rows = self.fetch_all(rows_stmt)
        self._attach_payments(rows)
        return rows, total

    def list_all(self, search: Optional[str] = None) -> List[Dict[str, Any]]:
        """Every booking matching the email/phone search, newest first."""
        stmt = apply_booking_filters(select(bookings), BookingFilters(search=search))
        return self.fetch_all(stmt.order_by(bookings.c.created_at.desc()))

    def list_by_email(self, email: str) -> List[Dict[str, Any]]:
        stmt = (
            select(bookings)
            .where(bookings.c.guest_email == email)
            .order_by(bookings.c.created_at.desc())
        )
        return self.fetch_all(stmt)

    def get(self, booking_id: str, with_payments: bool = True) -> Optional[Dict[str, Any]]:
        row = self.fetch_one(select(bookings).where(bookings.c.id == booking_id))
        if row and with_payments:
            self._attach_payments([row])
        return row

    def insert(self, values: Dict[str, Any]) -> Dict[str, Any]:
        now = datetime.now(timezone.utc)
        values = {"id": str(uuid.uuid4()), "created_at": now, "updated_at": now, **values}
        self.execute(bookings.insert().values(**values))
        return self.get(values["id"], with_payments=False)

    def update(self, booking_id: str, values: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        stmt = update(bookings).where(bookings.c.id == booking_id).values(**values)
        if not self.execute(stmt):
            return None
        return self.get(booking_id)

    def count(self, since: Optional[datetime] = None) -> int:
        stmt = select(func.count()).select_from(bookings)
        if since is not None:
            stmt = stmt.where(bookings.c.created_at >= since)
        return self.scalar(stmt) or 0

    def count_distinct_emails(self) -> int:
        stmt = select(func.count(distinct(bookings.c.guest_email))).where(
            bookings.c.guest_email.is_not(None), bookings.c.guest_email != ""
        )
        return self.scalar(stmt) or 0

    def sum_amount(self, status: str, since: datetime) -> float:
        stmt = select(func.coalesce(func.sum(bookings.c.total_amount), 0)).where(
            bookings.c.status == status, bookings.c.created_at >= since
        )
        return float(self.scalar(stmt) or 0)

    def list_flight_bookings(
        self, start: Optional[datetime] = None, end: Optional[datetime] = None
    ) -> List[Dict[str, Any]]:
        stmt = select(bookings).where(bookings.c.booking_type == "flight")
        return self.fetch_all(_within(stmt, start, end))

    def list_since(self, since: datetime) -> List[Dict[str, Any]]:
        stmt = select(bookings).where(bookings.c.created_at >= since)
        return self.fetch_all(stmt.order_by(bookings.c.created_at.asc()))

    def _attach_payments(self, rows: List[Dict[str, Any]]) -> None:
        if not rows:
            return
        ids = [row["id"] for row in rows]
        stmt = (
            select(payments)
            .where(payments.c.booking_id.in_(ids))
            .order_by(payments.c.created_at.desc())
        )
        by_booking: Dict[str, List[Dict[str, Any]]] = defaultdict(list)
        for payment in self.fetch_all(stmt):
            by_booking[payment["booking_id"]].append(payment)
        for row in rows:
            row["payments"] = by_booking.get(row["id"], [])


def _within(stmt: Select, start: Optional[datetime], end: Optional[datetime]) -> Select:
    if start is not None:
        stmt = stmt.where(bookings.c.created_at >= start)
    if end is not None:
        stmt = stmt.where(bookings.c.created_at <= end)
    return stmt
