"""
Customer service.

Customers are not stored: every read loads the matching bookings and folds
them with the customer aggregator. Notes and tags live in the ``metadata``
JSON of the customer's most recent booking, so writes go there; clearing
notes or removing a tag also cleans the older bookings the fold would read.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional

from models.booking import Booking
from models.common import Page
from models.customer import Customer, CustomerStats
from repositories.booking_repo import BookingRepository
from services.booking_service import start_of_month
from services.customer_aggregator import (
    NOTES_KEY,
    TAGS_KEY,
    aggregate_customers,
    fold_customers,
)
from utils.database import get_db_engine
from utils.error_handling import NotFoundError
from utils.logging_config import get_logger
from utils.validators import ensure_present

logger = get_logger(__name__)


class CustomerService:
    """Service for the derived customer view."""

    def __init__(self, repository: Optional[BookingRepository] = None):
        self.repository = repository or BookingRepository(get_db_engine())

    def list_customers(
        self, page: int = 1, limit: int = 20, search: Optional[str] = None
    ) -> Page[Customer]:
        """
        One page of customers, most recently active first.

        All matching bookings are loaded before folding; the search term is
        pushed down to the query and is also what the aggregator filters on.
        """
        bookings = self.repository.list_all(search=search)
        result = aggregate_customers(bookings, page=page, limit=limit, search=search)
        logger.info(
            "Customers aggregated",
            extra={"bookings": len(bookings), "customers": result.count, "page": page},
        )
        return result

    def get_customer(self, email: str) -> Customer:
        bookings = self.repository.list_by_email(email)
        customers = fold_customers(bookings)
        if not customers:
            raise NotFoundError(f"Customer {email} not found")
        return customers[0]

    def get_stats(self, now: Optional[datetime] = None) -> CustomerStats:
        now = now or datetime.now(timezone.utc)
        bookings = [Booking(**row) for row in self.repository.list_all()]
        customers = fold_customers(bookings)

        total_revenue = sum(booking.total_amount for booking in bookings)
        recurring = sum(1 for customer in customers if customer.booking_count > 1)
        month_start = start_of_month(now)
        new_this_month = {
            booking.guest_email
            for booking in bookings
            if booking.guest_email and booking.created_at >= month_start
        }

        return CustomerStats(
            total_customers=len(customers),
            recurring_customers=recurring,
            average_order_value=total_revenue / (len(bookings) or 1),
            new_customers_this_month=len(new_this_month),
            conversion_rate=(recurring / len(customers) * 100) if customers else 0.0,
        )

    def update_notes(self, email: str, notes: str) -> Booking:
        def apply(metadata: Dict[str, Any]) -> Dict[str, Any]:
            return {**metadata, NOTES_KEY: notes}

        def clear(metadata: Dict[str, Any]) -> Dict[str, Any]:
            return {key: value for key, value in metadata.items() if key != NOTES_KEY}

        return self._update_metadata(email, apply, action="notes_updated", older=clear)

    def add_tag(self, email: str, tag: str) -> Booking:
        ensure_present(tag, "tag")

        def apply(metadata: Dict[str, Any]) -> Dict[str, Any]:
            tags = list(metadata.get(TAGS_KEY) or [])
            if tag not in tags:
                tags.append(tag)
            return {**metadata, TAGS_KEY: tags}

        return self._update_metadata(email, apply, action="tag_added")

    def remove_tag(self, email: str, tag: str) -> Booking:
        def apply(metadata: Dict[str, Any]) -> Dict[str, Any]:
            if TAGS_KEY not in metadata:
                return metadata
            tags = metadata[TAGS_KEY]
            if isinstance(tags, str):
                tags = [tags]
            return {**metadata, TAGS_KEY: [existing for existing in tags or [] if existing != tag]}

        return self._update_metadata(email, apply, action="tag_removed", older=apply)

    def _update_metadata(
        self,
        email: str,
        apply: Callable[[Dict[str, Any]], Dict[str, Any]],
        action: str,
        older: Optional[Callable[[Dict[str, Any]], Dict[str, Any]]] = None,
    ) -> Booking:
        """Apply ``apply`` to the latest booking and ``older`` to the rest."""
        rows = self.repository.list_by_email(email)
        if not rows:
            raise NotFoundError(f"Customer {email} not found")

        latest, previous = rows[0], rows[1:]
        touched = 0
        if older is not None:
            for row in previous:
                metadata = dict(row.get("metadata") or {})
                changed = older(metadata)
                if changed != metadata:
                    self.repository.update(row["id"], {"metadata": changed})
                    touched += 1

        metadata = apply(dict(latest.get("metadata") or {}))
        row = self.repository.update(latest["id"], {"metadata": metadata})
        if not row:
            raise NotFoundError(f"Customer {email} not found")
        logger.info(
            "Customer metadata changed",
            extra={
                "customer_email": email,
                "booking_id": latest["id"],
                "older_bookings_updated": touched,
                "action": action,
            },
        )
        return Booking(**row)
