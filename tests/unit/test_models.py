"""
Pydantic model validation tests.

Ensures models validate correctly and reject invalid data.
No database connection required.

Run with: pytest tests/unit/test_models.py -v
"""

from datetime import date, datetime, timezone

import pytest
from pydantic import ValidationError

from models.booking import Booking, BookingFilters, BookingType, PackageSubtype
from models.commission import CommissionSetting, CommissionSettingCreate, CommissionStats
from models.common import Page, ensure_utc, total_pages
from models.customer import Customer, TagRequest
from models.notification import NotificationCreate, NotificationStats
from models.session import SessionContext


class TestBookingFilters:
    def test_package_subtype_is_split_from_type(self):
        filters = BookingFilters(booking_type="package:can2025")
        assert filters.booking_type == BookingType.PACKAGE
        assert filters.package_subtype == PackageSubtype.CAN2025

    def test_blank_search_is_unset(self):
        assert BookingFilters(search="   ", customer_email="").search is None

    def test_dates_parse(self):
        filters = BookingFilters(date_from="2024-01-01", amount_min="100")
        assert filters.date_from == date(2024, 1, 1)
        assert filters.amount_min == 100

    def test_unknown_subtype_rejected(self):
        with pytest.raises(ValidationError):
            BookingFilters(booking_type="package:cruise")


class TestBooking:
    def test_null_metadata_becomes_empty(self):
        booking = Booking(
            id="b",
            booking_type="hotel",
            total_amount=1,
            created_at=datetime(2024, 1, 1),
            metadata=None,
        )
        assert booking.metadata == {}
        assert booking.created_at.tzinfo == timezone.utc

    def test_unknown_type_rejected(self):
        with pytest.raises(ValidationError):
            Booking(id="b", booking_type="train", total_amount=1, created_at=datetime(2024, 1, 1))


class TestPage:
    @pytest.mark.parametrize("count,limit,expected", [(0, 10, 0), (1, 10, 1), (10, 10, 1), (11, 10, 2)])
    def test_total_pages(self, count, limit, expected):
        assert total_pages(count, limit) == expected

    def test_alias_only_on_output(self):
        page = Page[Customer](data=[], count=0, page=1, total_pages=0)
        assert page.model_dump(by_alias=True)["totalPages"] == 0
        assert page.total_pages == 0

    def test_ensure_utc_keeps_aware(self):
        aware = datetime(2024, 1, 1, tzinfo=timezone.utc)
        assert ensure_utc(aware) is aware
        assert ensure_utc(None) is None


class TestOtherModels:
    def test_customer_defaults(self):
        customer = Customer(customer_email="a@x.com", customer_name="a")
        assert customer.booking_count == 0
        assert customer.tags == []
        assert customer.last_booking_date is None

    def test_tag_request_requires_text(self):
        with pytest.raises(ValidationError):
            TagRequest(tag="")

    def test_commission_setting_null_active(self):
        setting = CommissionSetting(id="c", service_type="flight", commission_percentage=5, is_active=None)
        assert setting.is_active is True

    @pytest.mark.parametrize("rate", [-1, 100.5])
    def test_commission_rate_bounds(self, rate):
        with pytest.raises(ValidationError):
            CommissionSettingCreate(service_type="flight", commission_percentage=rate)

    def test_commission_stats_zeroed(self):
        assert CommissionStats().by_type == {"flight": 0, "hotel": 0, "package": 0}

    def test_notification_requires_title(self):
        with pytest.raises(ValidationError):
            NotificationCreate(type="info", category="system", title="", message="m")

    def test_notification_stats_zeroed(self):
        stats = NotificationStats()
        assert stats.by_type["action_required"] == 0
        assert stats.by_category["commission"] == 0

    def test_session_actor(self):
        assert SessionContext().actor == "anonymous"
        assert SessionContext().is_admin is True
        assert SessionContext(user_id="u", email="e@x.com", role="viewer").actor == "e@x.com"
        assert SessionContext(role="viewer").is_admin is False
