"""Booking models."""

from __future__ import annotations

from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from models.common import ensure_utc
from models.payment import Payment


class BookingType(str, Enum):
    """Kind of travel service sold."""

    FLIGHT = "flight"
    HOTEL = "hotel"
    PACKAGE = "package"


class BookingStatus(str, Enum):
    """Booking lifecycle as stored by the booking site."""

    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    FAILED = "failed"


class PackageSubtype(str, Enum):
    """Display-only sub-classification of package bookings."""

    UMRA = "umra"
    CAN2025 = "can2025"
    VISA = "visa"
    GENERAL = "general"


class Booking(BaseModel):
    """A booking row. Loosely-structured JSON columns stay as dicts."""

    id: str
    user_id: Optional[str] = None
    booking_type: BookingType
    external_booking_id: Optional[str] = None
    status: BookingStatus = BookingStatus.PENDING
    total_amount: float
    currency: str = "XOF"
    passenger_details: Optional[Dict[str, Any]] = None
    flight_details: Optional[Dict[str, Any]] = None
    guest_email: Optional[str] = None
    guest_phone: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None
    base_amount: Optional[float] = None
    commission_percentage: Optional[float] = None
    commission_amount: Optional[float] = None
    display_currency: Optional[str] = None
    metadata: Dict[str, Any] = Field(default_factory=dict)
    payments: Optional[List[Payment]] = None

    @field_validator("created_at", "updated_at")
    @classmethod
    def normalize_timestamps(cls, value: Optional[datetime]) -> Optional[datetime]:
        return ensure_utc(value)

    @field_validator("metadata", mode="before")
    @classmethod
    def default_metadata(cls, value: Any) -> Any:
        return value if value is not None else {}


class BookingListing(Booking):
    """Booking plus the customer_* fields the dashboard tables expect."""

    customer_email: Optional[str] = None
    customer_name: str = "Client"
    customer_phone: Optional[str] = None
    type_label: Optional[str] = None


class BookingCreate(BaseModel):
    """Payload accepted when creating a booking from the back-office."""

    booking_type: BookingType
    total_amount: float
    status: BookingStatus = BookingStatus.PENDING
    currency: str = "XOF"
    user_id: Optional[str] = None
    external_booking_id: Optional[str] = None
    passenger_details: Optional[Dict[str, Any]] = None
    flight_details: Optional[Dict[str, Any]] = None
    guest_email: Optional[str] = None
    guest_phone: Optional[str] = None
    base_amount: Optional[float] = None
    commission_percentage: Optional[float] = None
    commission_amount: Optional[float] = None
    display_currency: Optional[str] = None
    metadata: Dict[str, Any] = Field(default_factory=dict)


class BookingUpdate(BaseModel):
    """Partial update; only fields explicitly set are written."""

    booking_type: Optional[BookingType] = None
    total_amount: Optional[float] = None
    status: Optional[BookingStatus] = None
    currency: Optional[str] = None
    external_booking_id: Optional[str] = None
    passenger_details: Optional[Dict[str, Any]] = None
    flight_details: Optional[Dict[str, Any]] = None
    guest_email: Optional[str] = None
    guest_phone: Optional[str] = None
    base_amount: Optional[float] = None
    commission_percentage: Optional[float] = None
    commission_amount: Optional[float] = None
    display_currency: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None


class BookingFilters(BaseModel):
    """
    Listing filters sent by the bookings table.

    The type dropdown sends values such as ``package:umra``; those are split
    into ``booking_type=package`` and ``package_subtype=umra`` on the way in.
    """

    status: Optional[BookingStatus] = None
    booking_type: Optional[BookingType] = None
    search: Optional[str] = None
    date_from: Optional[date] = None
    date_to: Optional[date] = None
    amount_min: Optional[float] = None
    amount_max: Optional[float] = None
    customer_email: Optional[str] = None
    package_subtype: Optional[PackageSubtype] = None

    @model_validator(mode="before")
    @classmethod
    def split_package_subtype(cls, data: Any) -> Any:
        if isinstance(data, dict):
            booking_type = data.get("booking_type")
            if isinstance(booking_type, str) and ":" in booking_type:
                data = dict(data)
                kind, subtype = booking_type.split(":", 1)
                data["booking_type"] = kind
                data["package_subtype"] = subtype
        return data

    @field_validator("search", "customer_email", mode="before")
    @classmethod
    def blank_is_unset(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value


class BookingGeneralStats(BaseModel):
    total_bookings: int = 0
    today_bookings: int = 0
    active_customers: int = 0


class BookingRevenueStats(BaseModel):
    today: float = 0
    week: float = 0
    month: float = 0


class BookingStats(BaseModel):
    """Headline numbers for the dashboard home page."""

    general: BookingGeneralStats
    revenue: BookingRevenueStats
