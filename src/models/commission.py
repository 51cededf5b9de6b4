"""Commission settings and history models."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, field_validator

from models.common import ensure_utc

SERVICE_TYPES = ("flight", "hotel", "package")


class CommissionSetting(BaseModel):
    """Commission rule for one service type over a validity window."""

    id: str
    service_type: str
    commission_percentage: float
    fixed_amount: Optional[float] = None
    currency: Optional[str] = None
    is_active: bool = True
    valid_from: Optional[datetime] = None
    valid_until: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("valid_from", "valid_until", "created_at", "updated_at")
    @classmethod
    def normalize_timestamps(cls, value: Optional[datetime]) -> Optional[datetime]:
        return ensure_utc(value)

    @field_validator("is_active", mode="before")
    @classmethod
    def null_is_active(cls, value: Any) -> Any:
        return True if value is None else value


class CommissionSettingCreate(BaseModel):
    service_type: str = Field(min_length=1)
    commission_percentage: float = Field(ge=0, le=100)
    fixed_amount: Optional[float] = None
    currency: Optional[str] = "XOF"
    is_active: bool = True
    valid_from: Optional[datetime] = None
    valid_until: Optional[datetime] = None


class CommissionSettingUpdate(BaseModel):
    service_type: Optional[str] = None
    commission_percentage: Optional[float] = None
    fixed_amount: Optional[float] = None
    currency: Optional[str] = None
    is_active: Optional[bool] = None
    valid_from: Optional[datetime] = None
    valid_until: Optional[datetime] = None


class CommissionRecord(BaseModel):
    """One computed commission, optionally joined with its booking summary."""

    id: str
    booking_id: Optional[str] = None
    service_type: str
    base_amount: float
    commission_percentage: float
    commission_amount: float
    total_amount: float
    currency: str
    exchange_rate: Optional[float] = None
    calculation_details: Optional[Dict[str, Any]] = None
    created_at: Optional[datetime] = None
    booking: Optional[Dict[str, Any]] = None

    @field_validator("created_at")
    @classmethod
    def normalize_timestamps(cls, value: Optional[datetime]) -> Optional[datetime]:
        return ensure_utc(value)


def _zero_by_type() -> Dict[str, float]:
    return {service_type: 0 for service_type in SERVICE_TYPES}


class CommissionStats(BaseModel):
    total: float = 0
    by_type: Dict[str, float] = Field(default_factory=_zero_by_type)
    count: Dict[str, int] = Field(default_factory=_zero_by_type)


class MonthlyCommission(BaseModel):
    month: int
    flight: float = 0
    hotel: float = 0
    package: float = 0
    total: float = 0
