"""Handlers for /customers routes. Customers are addressed by guest email."""

from __future__ import annotations

from typing import Optional

from handlers.common import api_handler, json_body, pagination, path_param, query
from models.customer import NotesUpdate, TagRequest
from utils.auth import require_admin
from utils.logging_config import get_logger
from utils.responses import json_response

logger = get_logger(__name__)

# Lazy-loaded services to avoid import-time DB connections
_customer_service: Optional["CustomerService"] = None
_booking_service: Optional["BookingService"] = None


def _get_customer_service():
    """Lazy-load CustomerService."""
    global _customer_service
    if _customer_service is None:
        from services.customer_service import CustomerService
        _customer_service = CustomerService()
    return _customer_service


def _get_booking_service():
    """Lazy-load BookingService."""
    global _booking_service
    if _booking_service is None:
        from services.booking_service import BookingService
        _booking_service = BookingService()
    return _booking_service


def _email(event) -> str:
    return path_param(event, "email").strip()


@api_handler
def list_handler(event, context):
    """GET /customers"""
    page, limit = pagination(event)
    search = (query(event).get("search") or "").strip() or None
    return json_response(200, _get_customer_service().list_customers(page, limit, search))


@api_handler
def stats_handler(event, context):
    """GET /customers/stats"""
    return json_response(200, _get_customer_service().get_stats())


@api_handler
def get_handler(event, context):
    """GET /customers/{email}: the customer plus their bookings, newest first."""
    email = _email(event)
    customer = _get_customer_service().get_customer(email)
    bookings = _get_booking_service().list_by_customer(email)
    return json_response(
        200,
        {
            "customer": customer.model_dump(mode="json"),
            "bookings": [booking.model_dump(mode="json") for booking in bookings],
        },
    )


@api_handler
def notes_handler(event, context):
    """PUT /customers/{email}/notes"""
    session = require_admin(event)
    email = _email(event)
    update = NotesUpdate.model_validate(json_body(event))
    booking = _get_customer_service().update_notes(email, update.notes)
    logger.info("Customer notes saved", extra={"customer_email": email, "actor": session.actor})
    return json_response(200, booking)


@api_handler
def add_tag_handler(event, context):
    """POST /customers/{email}/tags"""
    session = require_admin(event)
    email = _email(event)
    request = TagRequest.model_validate(json_body(event))
    booking = _get_customer_service().add_tag(email, request.tag)
    logger.info(
        "Customer tag added",
        extra={"customer_email": email, "tag": request.tag, "actor": session.actor},
    )
    return json_response(200, booking)


@api_handler
def remove_tag_handler(event, context):
    """DELETE /customers/{email}/tags/{tag}"""
    session = require_admin(event)
    email = _email(event)
    tag = path_param(event, "tag")
    booking = _get_customer_service().remove_tag(email, tag)
    logger.info(
        "Customer tag removed",
        extra={"customer_email": email, "tag": tag, "actor": session.actor},
    )
    return json_response(200, booking)
