"""Handlers for /bookings routes."""

from __future__ import annotations

from typing import Optional

from handlers.common import api_handler, json_body, pagination, path_param, query
from models.booking import BookingCreate, BookingFilters, BookingStatus, BookingUpdate
from utils.auth import require_admin
from utils.error_handling import ValidationError
from utils.logging_config import get_logger
from utils.responses import json_response

logger = get_logger(__name__)

# Lazy-loaded service to avoid import-time DB connections
_booking_service: Optional["BookingService"] = None

FILTER_PARAMS = (
    "status",
    "booking_type",
    "search",
    "date_from",
    "date_to",
    "amount_min",
    "amount_max",
    "customer_email",
    "package_subtype",
)


def _get_booking_service():
    """Lazy-load BookingService."""
    global _booking_service
    if _booking_service is None:
        from services.booking_service import BookingService
        _booking_service = BookingService()
    return _booking_service


@api_handler
def list_handler(event, context):
    """GET /bookings"""
    page, limit = pagination(event)
    params = query(event)
    filters = BookingFilters.model_validate(
        {name: params[name] for name in FILTER_PARAMS if params.get(name)}
    )
    return json_response(200, _get_booking_service().list_bookings(page, limit, filters))


@api_handler
def stats_handler(event, context):
    """GET /bookings/stats"""
    return json_response(200, _get_booking_service().get_stats())


@api_handler
def get_handler(event, context):
    """GET /bookings/{id}"""
    return json_response(200, _get_booking_service().get_booking(path_param(event, "id")))


@api_handler
def create_handler(event, context):
    """POST /bookings"""
    session = require_admin(event)
    booking = _get_booking_service().create_booking(BookingCreate.model_validate(json_body(event)))
    logger.info("Booking created via API", extra={"booking_id": booking.id, "actor": session.actor})
    return json_response(201, booking)


@api_handler
def update_handler(event, context):
    """PATCH /bookings/{id}"""
    session = require_admin(event)
    booking_id = path_param(event, "id")
    updates = BookingUpdate.model_validate(json_body(event))
    booking = _get_booking_service().update_booking(booking_id, updates)
    logger.info("Booking edited", extra={"booking_id": booking_id, "actor": session.actor})
    return json_response(200, booking)


@api_handler
def status_handler(event, context):
    """POST /bookings/{id}/status"""
    session = require_admin(event)
    booking_id = path_param(event, "id")
    status = json_body(event).get("status")
    if status not in {item.value for item in BookingStatus}:
        raise ValidationError("status must be one of pending, confirmed, cancelled, failed")
    booking = _get_booking_service().update_status(booking_id, BookingStatus(status))
    logger.info(
        "Booking status changed",
        extra={"booking_id": booking_id, "status": status, "actor": session.actor},
    )
    return json_response(200, booking)


@api_handler
def cancel_handler(event, context):
    """DELETE /bookings/{id}"""
    session = require_admin(event)
    booking_id = path_param(event, "id")
    booking = _get_booking_service().cancel_booking(booking_id)
    logger.info("Booking cancelled", extra={"booking_id": booking_id, "actor": session.actor})
    return json_response(200, booking)
