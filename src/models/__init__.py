"""Pydantic models for API payloads."""

from models.booking import (  # noqa: F401
    Booking,
    BookingCreate,
    BookingFilters,
    BookingListing,
    BookingStats,
    BookingStatus,
    BookingType,
    BookingUpdate,
    PackageSubtype,
)
from models.commission import CommissionRecord, CommissionSetting, CommissionStats  # noqa: F401
from models.common import Page  # noqa: F401
from models.customer import Customer, CustomerStats  # noqa: F401
from models.notification import Notification, NotificationStats  # noqa: F401
from models.payment import Payment, PaymentStats, PaymentStatus  # noqa: F401
from models.session import SessionContext  # noqa: F401
