"""Queries against commission_settings and commission_history."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from sqlalchemy import select, update

from repositories.postgres_repo import PostgresRepository
from repositories.schema import bookings, commission_history, commission_settings


class CommissionRepository(PostgresRepository):
    """Commission rules plus the ledger of computed commissions."""

    def list_settings(self, active_only: bool = False) -> List[Dict[str, Any]]:
        stmt = select(commission_settings)
        if active_only:
            stmt = stmt.where(commission_settings.c.is_active.is_(True)).order_by(
                commission_settings.c.service_type.asc()
            )
        else:
            stmt = stmt.order_by(
                commission_settings.c.service_type.asc(),
                commission_settings.c.valid_from.desc(),
            )
        return self.fetch_all(stmt)

    def get_setting(self, setting_id: str) -> Optional[Dict[str, Any]]:
        return self.fetch_one(
            select(commission_settings).where(commission_settings.c.id == setting_id)
        )

    def insert_setting(self, values: Dict[str, Any]) -> Dict[str, Any]:
        now = datetime.now(timezone.utc)
        values = {"id": str(uuid.uuid4()), "created_at": now, "updated_at": now, **values}
        self.execute(commission_settings.insert().values(**values))
        return self.get_setting(values["id"])

    def update_setting(self, setting_id: str, values: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        values = {**values, "updated_at": datetime.now(timezone.utc)}
        stmt = (
            update(commission_settings)
            .where(commission_settings.c.id == setting_id)
            .values(**values)
        )
        if not self.execute(stmt):
            return None
        return self.get_setting(setting_id)

    def list_history(
        self,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        service_type: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        """Commission ledger, newest first, joined with a booking summary."""
        col = commission_history.c
        stmt = (
            select(
                commission_history,
                bookings.c.booking_type.label("booking_booking_type"),
                bookings.c.guest_email.label("booking_guest_email"),
                bookings.c.status.label("booking_status"),
                bookings.c.created_at.label("booking_created_at"),
            )
            .select_from(
                commission_history.outerjoin(bookings, col.booking_id == bookings.c.id)
            )
            .order_by(col.created_at.desc())
        )
        if start is not None:
            stmt = stmt.where(col.created_at >= start)
        if end is not None:
            stmt = stmt.where(col.created_at <= end)
        if service_type:
            stmt = stmt.where(col.service_type == service_type)
        if limit:
            stmt = stmt.limit(limit)

        rows = []
        for row in self.fetch_all(stmt):
            summary = {
                key[len("booking_"):]: row.pop(key)
                for key in list(row)
                if key.startswith("booking_") and key != "booking_id"
            }
            row["booking"] = (
                {"id": row["booking_id"], **summary} if row["booking_id"] else None
            )
            rows.append(row)
        return rows

