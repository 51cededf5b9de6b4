"""Queries against the notifications table."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from sqlalchemy import delete, func, or_, select, update

from models.notification import NotificationFilters
from repositories.postgres_repo import PostgresRepository
from repositories.schema import notifications


class NotificationRepository(PostgresRepository):
    """Bell-menu notifications; expired rows are hidden from listings."""

    def list(self, filters: NotificationFilters, now: datetime) -> List[Dict[str, Any]]:
        col = notifications.c
        stmt = select(notifications).where(
            or_(col.expires_at.is_(None), col.expires_at > now)
        )
        if not filters.is_archived:
            stmt = stmt.where(col.is_archived.is_(False))
        if filters.type:
            stmt = stmt.where(col.type == filters.type.value)
        if filters.category:
            stmt = stmt.where(col.category == filters.category.value)
        if filters.priority:
            stmt = stmt.where(col.priority == filters.priority.value)
        if filters.is_read is not None:
            stmt = stmt.where(col.is_read.is_(filters.is_read))
        if filters.start_date is not None:
            stmt = stmt.where(col.created_at >= filters.start_date)
        if filters.end_date is not None:
            stmt = stmt.where(col.created_at <= filters.end_date)
        return self.fetch_all(stmt.order_by(col.created_at.desc()))

    def get(self, notification_id: str) -> Optional[Dict[str, Any]]:
        return self.fetch_one(select(notifications).where(notifications.c.id == notification_id))

    def insert(self, values: Dict[str, Any]) -> Dict[str, Any]:
        values = {
            "id": str(uuid.uuid4()),
            "created_at": datetime.now(timezone.utc),
            "is_read": False,
            "is_archived": False,
            **values,
        }
        self.execute(notifications.insert().values(**values))
        return self.get(values["id"])

    def mark_read(self, ids: List[str], now: datetime) -> int:
        stmt = (
            update(notifications)
            .where(notifications.c.id.in_(ids))
            .values(is_read=True, read_at=now)
        )
        return self.execute(stmt)

    def mark_all_read(self, now: datetime) -> int:
        col = notifications.c
        stmt = (
            update(notifications)
            .where(col.is_read.is_(False), col.is_archived.is_(False))
            .values(is_read=True, read_at=now)
        )
        return self.execute(stmt)

    def archive(self, ids: List[str], now: datetime) -> int:
        stmt = (
            update(notifications)
            .where(notifications.c.id.in_(ids))
            .values(is_archived=True, archived_at=now)
        )
        return self.execute(stmt)

    def delete(self, notification_id: str) -> int:
        return self.execute(delete(notifications).where(notifications.c.id == notification_id))

    def count_unread(self) -> int:
        col = notifications.c
        stmt = (
            select(func.count())
            .select_from(notifications)
            .where(col.is_read.is_(False), col.is_archived.is_(False))
        )
        return self.scalar(stmt) or 0

    def list_active(self) -> List[Dict[str, Any]]:
        """Type/category/priority/read flags of every unarchived notification."""
        col = notifications.c
        stmt = select(col.type, col.category, col.priority, col.is_read).where(
            col.is_archived.is_(False)
        )
        return self.fetch_all(stmt)

    def list_by_ids(self, ids: List[str]) -> List[Dict[str, Any]]:
        return self.fetch_all(select(notifications).where(notifications.c.id.in_(ids)))
