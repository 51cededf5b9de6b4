"""Payment models."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, field_validator

from models.common import ensure_utc


class PaymentStatus(str, Enum):
    """Lifecycle of a PayTech payment attempt."""

    PENDING = "pending"
    SUCCESS = "success"
    FAILED = "failed"
    CANCELLED = "cancelled"


class Payment(BaseModel):
    """A payment row, optionally joined with its booking."""

    id: str
    booking_id: str
    paytech_transaction_id: Optional[str] = None
    amount: float
    currency: str = "XOF"
    status: PaymentStatus = PaymentStatus.PENDING
    payment_method: Optional[str] = None
    error_message: Optional[str] = None
    paytech_response: Optional[Dict[str, Any]] = None
    created_at: datetime
    updated_at: datetime
    booking: Optional[Dict[str, Any]] = None

    @field_validator("created_at", "updated_at")
    @classmethod
    def normalize_timestamps(cls, value: datetime) -> datetime:
        return ensure_utc(value)


class PaymentCreate(BaseModel):
    """Payload accepted when recording a payment."""

    booking_id: str
    amount: float
    currency: str = "XOF"
    status: PaymentStatus = PaymentStatus.PENDING
    paytech_transaction_id: Optional[str] = None
    payment_method: Optional[str] = None
    error_message: Optional[str] = None
    paytech_response: Optional[Dict[str, Any]] = None


class PaymentUpdate(BaseModel):
    """Partial update; only fields explicitly set are written."""

    amount: Optional[float] = None
    currency: Optional[str] = None
    status: Optional[PaymentStatus] = None
    paytech_transaction_id: Optional[str] = None
    payment_method: Optional[str] = None
    error_message: Optional[str] = None
    paytech_response: Optional[Dict[str, Any]] = None


class PaymentStats(BaseModel):
    """Counts per status plus success amounts for a period."""

    total: int = 0
    success: int = 0
    failed: int = 0
    pending: int = 0
    cancelled: int = 0
    total_amount: float = 0
    average_amount: float = 0
    success_rate: float = 0


class PaymentChartPoint(BaseModel):
    """Amounts for a single calendar day."""

    date: str
    success: float = 0
    failed: float = 0
    total: float = 0
