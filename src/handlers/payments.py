"""Handlers for /payments routes."""

from __future__ import annotations

from typing import Optional

from handlers.common import api_handler, pagination, parse_datetime, path_param, query
from models.payment import PaymentStatus
from utils.auth import require_admin
from utils.error_handling import ValidationError
from utils.logging_config import get_logger
from utils.responses import json_response
from utils.validators import parse_int

logger = get_logger(__name__)

# Lazy-loaded service to avoid import-time DB connections
_payment_service: Optional["PaymentService"] = None


def _get_payment_service():
    """Lazy-load PaymentService."""
    global _payment_service
    if _payment_service is None:
        from services.payment_service import PaymentService
        _payment_service = PaymentService()
    return _payment_service


def _status(value: Optional[str]) -> Optional[PaymentStatus]:
    if not value:
        return None
    try:
        return PaymentStatus(value)
    except ValueError:
        raise ValidationError(f"Unknown payment status: {value}")


@api_handler
def list_handler(event, context):
    """GET /payments"""
    page, limit = pagination(event)
    params = query(event)
    result = _get_payment_service().list_payments(
        page,
        limit,
        status=_status(params.get("status")),
        date_from=parse_datetime(params.get("date_from"), "date_from"),
        date_to=parse_datetime(params.get("date_to"), "date_to", end_of_day=True),
    )
    return json_response(200, result)


@api_handler
def stats_handler(event, context):
    """GET /payments/stats?period=day|week|month|year"""
    period = query(event).get("period") or None
    return json_response(200, _get_payment_service().get_stats(period))


@api_handler
def chart_handler(event, context):
    """GET /payments/chart?days=30"""
    days = parse_int(query(event).get("days"), "days", 30)
    return json_response(200, _get_payment_service().get_chart_data(days))


@api_handler
def get_handler(event, context):
    """GET /payments/{id}"""
    return json_response(200, _get_payment_service().get_payment(path_param(event, "id")))


@api_handler
def retry_handler(event, context):
    """POST /payments/{id}/retry"""
    session = require_admin(event)
    payment_id = path_param(event, "id")
    payment = _get_payment_service().retry_payment(payment_id)
    logger.info("Payment retry queued", extra={"payment_id": payment_id, "actor": session.actor})
    return json_response(200, payment)
