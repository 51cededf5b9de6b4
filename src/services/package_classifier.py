"""
Package subtype classifier.

Package bookings do not always record what kind of package was sold. This
guesses a display subtype with a priority-ordered heuristic chain: explicit
metadata, then destination keywords, then price per passenger. It is for
display and filtering only and never raises.
"""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional, Union

from models.booking import Booking, BookingType, PackageSubtype

BookingLike = Union[Booking, Mapping[str, Any]]

UMRA_TOKENS = ("mecca", "mecque", "medina", "médine", "saudi", "arabie")
CAN2025_TOKENS = ("abidjan", "côte", "ivoire", "can")

# Per-passenger price bands in XOF; checked in this order, first match wins.
PRICE_BANDS = (
    (1_100_000, 1_800_000, PackageSubtype.UMRA),
    (800_000, 1_200_000, PackageSubtype.CAN2025),
    (50_000, 300_000, PackageSubtype.VISA),
)

SUBTYPE_LABELS = {
    PackageSubtype.UMRA: "Umra",
    PackageSubtype.CAN2025: "CAN 2025",
    PackageSubtype.VISA: "Visa",
    PackageSubtype.GENERAL: "Package",
}
TYPE_LABELS = {
    BookingType.FLIGHT: "Vol",
    BookingType.HOTEL: "Hôtel",
}
SEJOUR_LABEL = "Séjour"
KNOWN_SUBTYPES = frozenset(subtype.value for subtype in PackageSubtype)


def _field(booking: BookingLike, name: str) -> Any:
    if isinstance(booking, Mapping):
        return booking.get(name)
    return getattr(booking, name, None)


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _from_destination(destination: Any) -> Optional[PackageSubtype]:
    if not isinstance(destination, str):
        return None
    lowered = destination.lower()
    if any(token in lowered for token in UMRA_TOKENS):
        return PackageSubtype.UMRA
    if any(token in lowered for token in CAN2025_TOKENS):
        return PackageSubtype.CAN2025
    return None


def _price_per_person(booking: BookingLike) -> float:
    passengers = _as_dict(_field(booking, "passenger_details")).get("passengers")
    count = len(passengers) if isinstance(passengers, list) else 0
    try:
        amount = float(_field(booking, "total_amount") or 0)
    except (TypeError, ValueError):
        amount = 0.0
    return amount / max(1, count)


def classify_package(booking: BookingLike) -> PackageSubtype:
    """Return the package subtype of a booking; unmatched input is GENERAL."""
    explicit = _as_dict(_field(booking, "passenger_details")).get("packageType")
    if isinstance(explicit, str) and explicit in KNOWN_SUBTYPES:
        return PackageSubtype(explicit)

    by_destination = _from_destination(
        _as_dict(_field(booking, "flight_details")).get("destination")
    )
    if by_destination is not None:
        return by_destination

    price = _price_per_person(booking)
    for low, high, subtype in PRICE_BANDS:
        if low <= price <= high:
            return subtype

    return PackageSubtype.GENERAL


def booking_type_label(booking: BookingLike) -> str:
    """Human label for the bookings table and exports."""
    booking_type = _field(booking, "booking_type")
    if booking_type in (BookingType.FLIGHT, BookingType.FLIGHT.value):
        return TYPE_LABELS[BookingType.FLIGHT]
    if booking_type in (BookingType.HOTEL, BookingType.HOTEL.value):
        return TYPE_LABELS[BookingType.HOTEL]

    if _as_dict(_field(booking, "passenger_details")).get("packageType") == "sejour":
        return SEJOUR_LABEL
    return SUBTYPE_LABELS[classify_package(booking)]
