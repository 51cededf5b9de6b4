"""Payment service: listings, stats and back-office corrections."""

from __future__ import annotations

import calendar
from datetime import date, datetime, timedelta, timezone
from typing import Dict, List, Optional

from models.common import Page, ensure_utc, total_pages
from models.payment import (
    Payment,
    PaymentChartPoint,
    PaymentCreate,
    PaymentStats,
    PaymentStatus,
    PaymentUpdate,
)
from repositories.payment_repo import PaymentRepository
from utils.database import get_db_engine
from utils.error_handling import NotFoundError, ValidationError
from utils.logging_config import get_logger
from utils.validators import ensure_pagination

logger = get_logger(__name__)

PERIODS = ("day", "week", "month", "year")


def shift_months(value: datetime, months: int) -> datetime:
    """Move by whole months, clamping the day to the target month's length."""
    month_index = value.month - 1 + months
    year = value.year + month_index // 12
    month = month_index % 12 + 1
    day = min(value.day, calendar.monthrange(year, month)[1])
    return value.replace(year=year, month=month, day=day)


def period_start(period: Optional[str], now: datetime) -> Optional[datetime]:
    """Start of a stats window ending now; None means since the beginning."""
    if period is None:
        return None
    if period == "day":
        return now.replace(hour=0, minute=0, second=0, microsecond=0)
    if period == "week":
        return now - timedelta(days=7)
    if period == "month":
        return shift_months(now, -1)
    if period == "year":
        return shift_months(now, -12)
    raise ValidationError(f"period must be one of {', '.join(PERIODS)}")


class PaymentService:
    """Service for payment rows recorded by the PayTech callback."""

    def __init__(self, repository: Optional[PaymentRepository] = None):
        self.repository = repository or PaymentRepository(get_db_engine())

    def list_payments(
        self,
        page: int = 1,
        limit: int = 20,
        status: Optional[PaymentStatus] = None,
        date_from: Optional[datetime] = None,
        date_to: Optional[datetime] = None,
    ) -> Page[Payment]:
        ensure_pagination(page, limit)
        rows, count = self.repository.list_page(
            page, limit, status.value if status else None, date_from, date_to
        )
        return Page[Payment](
            data=[Payment(**row) for row in rows],
            count=count,
            page=page,
            total_pages=total_pages(count, limit),
        )

    def get_payment(self, payment_id: str) -> Payment:
        row = self.repository.get(payment_id)
        if not row:
            raise NotFoundError(f"Payment {payment_id} not found")
        return Payment(**row)

    def get_stats(self, period: Optional[str] = None, now: Optional[datetime] = None) -> PaymentStats:
        now = now or datetime.now(timezone.utc)
        rows = self.repository.list_since(period_start(period, now))

        stats = PaymentStats(total=len(rows))
        for row in rows:
            status = row["status"]
            if status in ("success", "failed", "pending", "cancelled"):
                setattr(stats, status, getattr(stats, status) + 1)
            if status == PaymentStatus.SUCCESS.value:
                stats.total_amount += row["amount"]

        if stats.success > 0:
            stats.average_amount = stats.total_amount / stats.success
            stats.success_rate = stats.success / stats.total * 100
        return stats

    def get_chart_data(self, days: int = 30, now: Optional[datetime] = None) -> List[PaymentChartPoint]:
        """Daily success/failed amounts for the last ``days`` days, oldest first."""
        if days < 1:
            raise ValidationError("days must be >= 1")
        now = now or datetime.now(timezone.utc)
        start = now - timedelta(days=days)

        buckets: Dict[date, PaymentChartPoint] = {}
        day = start.date()
        while day <= now.date():
            buckets[day] = PaymentChartPoint(date=day.isoformat())
            day += timedelta(days=1)

        for row in self.repository.list_since(start, now):
            point = buckets.get(ensure_utc(row["created_at"]).date())
            if point is None:
                continue
            if row["status"] == PaymentStatus.SUCCESS.value:
                point.success += row["amount"]
                point.total += row["amount"]
            elif row["status"] == PaymentStatus.FAILED.value:
                point.failed += row["amount"]

        return list(buckets.values())

    def create_payment(self, data: PaymentCreate) -> Payment:
        row = self.repository.insert(data.model_dump(mode="json"))
        logger.info("Payment recorded", extra={"payment_id": row["id"], "booking_id": row["booking_id"]})
        return Payment(**row)

    def update_payment(self, payment_id: str, updates: PaymentUpdate) -> Payment:
        row = self.repository.update(payment_id, updates.model_dump(mode="json", exclude_unset=True))
        if not row:
            raise NotFoundError(f"Payment {payment_id} not found")
        return Payment(**row)

    def cancel_payment(self, payment_id: str) -> Payment:
        return self.update_payment(payment_id, PaymentUpdate(status=PaymentStatus.CANCELLED))

    def retry_payment(self, payment_id: str) -> Payment:
        """Put a failed payment back to pending so PayTech can be asked again."""
        payment = self.update_payment(payment_id, PaymentUpdate(status=PaymentStatus.PENDING))
        logger.info("Payment retry requested", extra={"payment_id": payment_id})
        return payment

    def list_by_booking(self, booking_id: str) -> List[Payment]:
        return [Payment(**row) for row in self.repository.list_by_booking(booking_id)]
