"""
Booking service.

Listing, detail and back-office edits of bookings. Cancelling is a soft
delete: the row stays and its status becomes ``cancelled``.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

from models.booking import (
    Booking,
    BookingCreate,
    BookingFilters,
    BookingGeneralStats,
    BookingListing,
    BookingRevenueStats,
    BookingStats,
    BookingStatus,
    BookingType,
    BookingUpdate,
)
from models.common import Page, total_pages
from repositories.booking_repo import BookingRepository
from services.customer_aggregator import customer_name_for
from services.package_classifier import booking_type_label, classify_package
from utils.database import get_db_engine
from utils.error_handling import NotFoundError
from utils.logging_config import get_logger
from utils.validators import ensure_pagination

logger = get_logger(__name__)


def to_listing(row: Dict[str, Any]) -> BookingListing:
    """Add the customer_* compatibility fields and display label to a booking row."""
    return BookingListing(
        **row,
        customer_email=row.get("guest_email"),
        customer_name=customer_name_for(row),
        customer_phone=row.get("guest_phone"),
        type_label=booking_type_label(row),
    )


def start_of_day(now: datetime) -> datetime:
    return now.replace(hour=0, minute=0, second=0, microsecond=0)


def start_of_week(now: datetime) -> datetime:
    """Weeks start on Sunday."""
    days_since_sunday = (now.weekday() + 1) % 7
    return start_of_day(now) - timedelta(days=days_since_sunday)


def start_of_month(now: datetime) -> datetime:
    return start_of_day(now).replace(day=1)


class BookingService:
    """Service for booking listing and edits."""

    def __init__(self, repository: Optional[BookingRepository] = None):
        self.repository = repository or BookingRepository(get_db_engine())

    def list_bookings(
        self, page: int = 1, limit: int = 20, filters: Optional[BookingFilters] = None
    ) -> Page[BookingListing]:
        """
        One page of bookings, newest first.

        The package subtype is not stored, so that filter runs on the fetched
        page: non-package rows pass through and ``count`` becomes the number
        of rows left on the page.
        """
        ensure_pagination(page, limit)
        rows, count = self.repository.list_page(page, limit, filters)
        listings = [to_listing(row) for row in rows]

        if filters is not None and filters.package_subtype is not None:
            listings = [
                listing
                for listing in listings
                if listing.booking_type != BookingType.PACKAGE
                or classify_package(listing) == filters.package_subtype
            ]
            count = len(listings)

        return Page[BookingListing](
            data=listings,
            count=count,
            page=page,
            total_pages=total_pages(count, limit),
        )

    def get_booking(self, booking_id: str) -> Booking:
        row = self.repository.get(booking_id)
        if not row:
            raise NotFoundError(f"Booking {booking_id} not found")
        return Booking(**row)

    def create_booking(self, data: BookingCreate) -> Booking:
        row = self.repository.insert(data.model_dump(mode="json"))
        logger.info(
            "Booking created",
            extra={"booking_id": row["id"], "booking_type": row["booking_type"]},
        )
        return Booking(**row)

    def update_booking(self, booking_id: str, updates: BookingUpdate) -> Booking:
        values = updates.model_dump(mode="json", exclude_unset=True)
        values["updated_at"] = datetime.now(timezone.utc)
        row = self.repository.update(booking_id, values)
        if not row:
            raise NotFoundError(f"Booking {booking_id} not found")
        logger.info("Booking updated", extra={"booking_id": booking_id, "fields": sorted(values)})
        return Booking(**row)

    def update_status(self, booking_id: str, status: BookingStatus) -> Booking:
        return self.update_booking(booking_id, BookingUpdate(status=status))

    def cancel_booking(self, booking_id: str) -> Booking:
        return self.update_status(booking_id, BookingStatus.CANCELLED)

    def list_by_customer(self, email: str) -> List[BookingListing]:
        return [to_listing(row) for row in self.repository.list_by_email(email)]

    def get_stats(self, now: Optional[datetime] = None) -> BookingStats:
        """Booking counts plus confirmed revenue for today, this week and month."""
        now = now or datetime.now(timezone.utc)
        today = start_of_day(now)
        confirmed = BookingStatus.CONFIRMED.value

        return BookingStats(
            general=BookingGeneralStats(
                total_bookings=self.repository.count(),
                today_bookings=self.repository.count(since=today),
                active_customers=self.repository.count_distinct_emails(),
            ),
            revenue=BookingRevenueStats(
                today=self.repository.sum_amount(confirmed, today),
                week=self.repository.sum_amount(confirmed, start_of_week(now)),
                month=self.repository.sum_amount(confirmed, start_of_month(now)),
            ),
        )
