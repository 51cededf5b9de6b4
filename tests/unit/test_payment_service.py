"""PaymentService tests against an in-memory database."""

import pytest

from conftest import insert_booking, insert_payment, utc
from models.payment import PaymentCreate, PaymentStatus
from repositories.payment_repo import PaymentRepository
from services.payment_service import PaymentService, period_start, shift_months
from utils.error_handling import NotFoundError, ValidationError


@pytest.fixture
def service(engine):
    return PaymentService(repository=PaymentRepository(engine))


@pytest.fixture
def booking_id(engine):
    return insert_booking(engine, guest_email="a@x.com", total_amount=1000)


class TestPaymentListing:
    def test_list_with_booking_attached(self, engine, service, booking_id):
        insert_payment(engine, booking_id, amount=100, status="success", created_at=utc(2024, 1, 2))
        insert_payment(engine, booking_id, amount=50, status="failed", created_at=utc(2024, 1, 1))

        page = service.list_payments(1, 10)

        assert page.count == 2
        assert [p.amount for p in page.data] == [100, 50]
        assert page.data[0].booking["guest_email"] == "a@x.com"

    def test_status_filter(self, engine, service, booking_id):
        insert_payment(engine, booking_id, amount=100, status="success")
        insert_payment(engine, booking_id, amount=50, status="failed")
        page = service.list_payments(1, 10, status=PaymentStatus.FAILED)
        assert [p.amount for p in page.data] == [50]

    def test_get_missing(self, service):
        with pytest.raises(NotFoundError):
            service.get_payment("missing")


class TestPaymentStats:
    def test_all_time(self, engine, service, booking_id):
        insert_payment(engine, booking_id, amount=100, status="success")
        insert_payment(engine, booking_id, amount=300, status="success")
        insert_payment(engine, booking_id, amount=70, status="failed")
        insert_payment(engine, booking_id, amount=10, status="pending")

        stats = service.get_stats()

        assert stats.total == 4
        assert (stats.success, stats.failed, stats.pending, stats.cancelled) == (2, 1, 1, 0)
        assert stats.total_amount == 400
        assert stats.average_amount == 200
        assert stats.success_rate == 50

    def test_period_window(self, engine, service, booking_id):
        now = utc(2024, 3, 31, 12)
        insert_payment(engine, booking_id, amount=100, status="success", created_at=utc(2024, 3, 31, 8))
        insert_payment(engine, booking_id, amount=100, status="success", created_at=utc(2024, 3, 1))
        insert_payment(engine, booking_id, amount=100, status="success", created_at=utc(2023, 6, 1))

        assert service.get_stats("day", now=now).total == 1
        assert service.get_stats("month", now=now).total == 2
        assert service.get_stats("year", now=now).total == 3

    def test_no_success_means_zero_rates(self, engine, service, booking_id):
        insert_payment(engine, booking_id, amount=100, status="failed")
        stats = service.get_stats()
        assert stats.average_amount == 0
        assert stats.success_rate == 0

    def test_unknown_period(self, service):
        with pytest.raises(ValidationError):
            service.get_stats("decade")

    def test_month_shift_clamps_day(self):
        assert shift_months(utc(2024, 3, 31), -1) == utc(2024, 2, 29)
        assert shift_months(utc(2024, 1, 15), -12) == utc(2023, 1, 15)
        assert period_start(None, utc(2024, 1, 1)) is None


class TestPaymentChart:
    def test_daily_buckets(self, engine, service, booking_id):
        now = utc(2024, 3, 10, 12)
        insert_payment(engine, booking_id, amount=100, status="success", created_at=utc(2024, 3, 9, 10))
        insert_payment(engine, booking_id, amount=40, status="failed", created_at=utc(2024, 3, 9, 11))
        insert_payment(engine, booking_id, amount=60, status="success", created_at=utc(2024, 3, 10, 9))

        points = service.get_chart_data(days=3, now=now)

        assert [p.date for p in points] == ["2024-03-07", "2024-03-08", "2024-03-09", "2024-03-10"]
        ninth = points[2]
        assert (ninth.success, ninth.failed, ninth.total) == (100, 40, 100)
        assert points[3].total == 60
        assert points[0].total == 0

    def test_days_must_be_positive(self, service):
        with pytest.raises(ValidationError):
            service.get_chart_data(days=0)


class TestPaymentCorrections:
    def test_create_and_retry(self, service, booking_id):
        payment = service.create_payment(
            PaymentCreate(booking_id=booking_id, amount=250, status=PaymentStatus.FAILED)
        )
        assert payment.status == PaymentStatus.FAILED

        retried = service.retry_payment(payment.id)
        assert retried.status == PaymentStatus.PENDING
        assert [p.id for p in service.list_by_booking(booking_id)] == [payment.id]

    def test_cancel(self, engine, service, booking_id):
        payment_id = insert_payment(engine, booking_id, amount=10, status="pending")
        assert service.cancel_payment(payment_id).status == PaymentStatus.CANCELLED

    def test_retry_missing(self, service):
        with pytest.raises(NotFoundError):
            service.retry_payment("missing")
