"""Notification models."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, field_validator

from models.common import ensure_utc


class NotificationType(str, Enum):
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    SUCCESS = "success"
    ACTION_REQUIRED = "action_required"


class NotificationCategory(str, Enum):
    BOOKING = "booking"
    PAYMENT = "payment"
    CUSTOMER = "customer"
    SYSTEM = "system"
    COMMISSION = "commission"
    ALERT = "alert"


class NotificationPriority(str, Enum):
    LOW = "low"
    NORMAL = "normal"
    HIGH = "high"
    URGENT = "urgent"


class Notification(BaseModel):
    """An admin notification shown in the bell menu."""

    id: str
    user_id: Optional[str] = None
    type: NotificationType
    category: NotificationCategory
    title: str
    message: str
    action_url: Optional[str] = None
    action_label: Optional[str] = None
    related_entity_id: Optional[str] = None
    related_entity_type: Optional[str] = None
    priority: NotificationPriority = NotificationPriority.NORMAL
    is_read: bool = False
    is_archived: bool = False
    metadata: Optional[Dict[str, Any]] = None
    created_at: datetime
    read_at: Optional[datetime] = None
    archived_at: Optional[datetime] = None
    expires_at: Optional[datetime] = None

    @field_validator("created_at", "read_at", "archived_at", "expires_at")
    @classmethod
    def normalize_timestamps(cls, value: Optional[datetime]) -> Optional[datetime]:
        return ensure_utc(value)


class NotificationCreate(BaseModel):
    """New notifications always start unread and unarchived."""

    type: NotificationType
    category: NotificationCategory
    title: str = Field(min_length=1)
    message: str
    user_id: Optional[str] = None
    action_url: Optional[str] = None
    action_label: Optional[str] = None
    related_entity_id: Optional[str] = None
    related_entity_type: Optional[str] = None
    priority: NotificationPriority = NotificationPriority.NORMAL
    metadata: Optional[Dict[str, Any]] = None
    expires_at: Optional[datetime] = None


class NotificationFilters(BaseModel):
    type: Optional[NotificationType] = None
    category: Optional[NotificationCategory] = None
    priority: Optional[NotificationPriority] = None
    is_read: Optional[bool] = None
    is_archived: Optional[bool] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None


class NotificationStats(BaseModel):
    total: int = 0
    unread: int = 0
    by_type: Dict[str, int] = Field(
        default_factory=lambda: {item.value: 0 for item in NotificationType}
    )
    by_category: Dict[str, int] = Field(
        default_factory=lambda: {item.value: 0 for item in NotificationCategory}
    )
    by_priority: Dict[str, int] = Field(
        default_factory=lambda: {item.value: 0 for item in NotificationPriority}
    )
