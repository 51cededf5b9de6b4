"""Notification service for the dashboard bell menu."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import List, Optional

from models.notification import (
    Notification,
    NotificationCreate,
    NotificationFilters,
    NotificationStats,
)
from repositories.notification_repo import NotificationRepository
from utils.database import get_db_engine
from utils.error_handling import NotFoundError
from utils.logging_config import get_logger

logger = get_logger(__name__)


def _now() -> datetime:
    return datetime.now(timezone.utc)


class NotificationService:
    """Service for listing notifications and changing their read/archive state."""

    def __init__(self, repository: Optional[NotificationRepository] = None):
        self.repository = repository or NotificationRepository(get_db_engine())

    def list_notifications(
        self, filters: Optional[NotificationFilters] = None, now: Optional[datetime] = None
    ) -> List[Notification]:
        rows = self.repository.list(filters or NotificationFilters(), now or _now())
        return [Notification(**row) for row in rows]

    def get_notification(self, notification_id: str) -> Notification:
        row = self.repository.get(notification_id)
        if not row:
            raise NotFoundError(f"Notification {notification_id} not found")
        return Notification(**row)

    def create_notification(self, data: NotificationCreate) -> Notification:
        row = self.repository.insert(data.model_dump(mode="json"))
        logger.info(
            "Notification created",
            extra={"notification_id": row["id"], "category": row["category"]},
        )
        return Notification(**row)

    def mark_as_read(self, notification_id: str) -> Notification:
        if not self.repository.mark_read([notification_id], _now()):
            raise NotFoundError(f"Notification {notification_id} not found")
        return self.get_notification(notification_id)

    def mark_many_as_read(self, notification_ids: List[str]) -> List[Notification]:
        if not notification_ids:
            return []
        self.repository.mark_read(notification_ids, _now())
        return [Notification(**row) for row in self.repository.list_by_ids(notification_ids)]

    def mark_all_as_read(self) -> int:
        updated = self.repository.mark_all_read(_now())
        logger.info("Notifications marked read", extra={"updated": updated})
        return updated

    def archive(self, notification_id: str) -> Notification:
        if not self.repository.archive([notification_id], _now()):
            raise NotFoundError(f"Notification {notification_id} not found")
        return self.get_notification(notification_id)

    def archive_many(self, notification_ids: List[str]) -> List[Notification]:
        if not notification_ids:
            return []
        self.repository.archive(notification_ids, _now())
        return [Notification(**row) for row in self.repository.list_by_ids(notification_ids)]

    def delete_notification(self, notification_id: str) -> None:
        if not self.repository.delete(notification_id):
            raise NotFoundError(f"Notification {notification_id} not found")
        logger.info("Notification deleted", extra={"notification_id": notification_id})

    def get_unread_count(self) -> int:
        return self.repository.count_unread()

    def get_stats(self) -> NotificationStats:
        """Counts over unarchived notifications."""
        stats = NotificationStats()
        for row in self.repository.list_active():
            stats.total += 1
            if not row["is_read"]:
                stats.unread += 1
            for counter, key in (
                (stats.by_type, row["type"]),
                (stats.by_category, row["category"]),
                (stats.by_priority, row["priority"]),
            ):
                if key is not None:
                    counter[key] = counter.get(key, 0) + 1
        return stats
