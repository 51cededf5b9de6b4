"""
Customer aggregation.

There is no customers table: a customer is every booking sharing one guest
email. This module folds booking rows (already loaded, newest first when they
come from the repository) into one summary per email and pages the result.
It is pure; nothing here touches the database.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

from models.booking import Booking
from models.common import Page, ensure_utc, total_pages
from models.customer import Customer
from utils.validators import ensure_pagination

BookingLike = Union[Booking, Mapping[str, Any]]

FALLBACK_NAME = "Client"
NOTES_KEY = "customer_notes"
TAGS_KEY = "customer_tags"


def _field(booking: BookingLike, name: str) -> Any:
    if isinstance(booking, Mapping):
        return booking.get(name)
    return getattr(booking, name, None)


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def customer_name_for(booking: BookingLike) -> str:
    """First passenger's name, else the email local part, else 'Client'."""
    passengers = _as_dict(_field(booking, "passenger_details")).get("passengers")
    if isinstance(passengers, list) and passengers and isinstance(passengers[0], dict):
        name = passengers[0].get("name")
        if isinstance(name, str) and name.strip():
            return name.strip()

    email = _field(booking, "guest_email") or ""
    local_part = email.split("@")[0]
    return local_part or FALLBACK_NAME


def _matches(booking: BookingLike, needle: str) -> bool:
    for name in ("guest_email", "guest_phone"):
        value = _field(booking, name)
        if value and needle in str(value).lower():
            return True
    return False


def _created_at(booking: BookingLike) -> Optional[datetime]:
    value = _field(booking, "created_at")
    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return None
    return ensure_utc(value) if isinstance(value, datetime) else None


def _tags(metadata: Dict[str, Any]) -> List[str]:
    tags = metadata.get(TAGS_KEY)
    if isinstance(tags, str):
        return [tags]
    if isinstance(tags, list):
        return [tag for tag in tags if isinstance(tag, str) and tag]
    return []


def fold_customers(bookings: Iterable[BookingLike]) -> List[Customer]:
    """
    Fold bookings into customers keyed by guest email, in first-seen order.

    Count and total are order independent. Name comes from the first folded
    booking, phone from the last one that has a phone, notes from the first
    one that has notes.
    """
    customers: Dict[str, Customer] = {}

    for booking in bookings:
        email = _field(booking, "guest_email")
        if not email:
            continue

        amount = _field(booking, "total_amount") or 0
        created_at = _created_at(booking)
        phone = _field(booking, "guest_phone")
        metadata = _as_dict(_field(booking, "metadata"))

        customer = customers.get(email)
        if customer is None:
            customer = Customer(
                customer_email=email,
                customer_name=customer_name_for(booking),
            )
            customers[email] = customer

        customer.booking_count += 1
        customer.total_spent += amount
        if created_at is not None and (
            customer.last_booking_date is None or created_at > customer.last_booking_date
        ):
            customer.last_booking_date = created_at
        if phone:
            customer.customer_phone = phone
        for tag in _tags(metadata):
            if tag not in customer.tags:
                customer.tags.append(tag)
        notes = metadata.get(NOTES_KEY)
        if customer.notes is None and notes:
            customer.notes = notes

    return list(customers.values())


def sort_by_recency(customers: List[Customer]) -> List[Customer]:
    """Most recent booking first, undated customers last; ties keep order."""
    dated = [c for c in customers if c.last_booking_date is not None]
    undated = [c for c in customers if c.last_booking_date is None]
    dated.sort(key=lambda c: c.last_booking_date, reverse=True)
    return dated + undated


def aggregate_customers(
    bookings: Iterable[BookingLike],
    page: int = 1,
    limit: int = 20,
    search: Optional[str] = None,
) -> Page[Customer]:
    """
    Build one page of de-duplicated customers from raw booking rows.

    The search term is matched case-insensitively against each booking's email
    or phone before folding, so a customer appears when any of their bookings
    matches. ``count`` is the number of distinct customers before slicing.
    """
    ensure_pagination(page, limit)

    if search:
        needle = search.lower()
        bookings = [b for b in bookings if _matches(b, needle)]

    customers = sort_by_recency(fold_customers(bookings))
    start = (page - 1) * limit
    return Page[Customer](
        data=customers[start:start + limit],
        count=len(customers),
        page=page,
        total_pages=total_pages(len(customers), limit),
    )
