"""Handlers for /notifications routes."""

from __future__ import annotations

from typing import Optional

from handlers.common import api_handler, parse_datetime, path_param, query
from models.notification import NotificationFilters
from utils.auth import require_admin
from utils.logging_config import get_logger
from utils.responses import json_response
from utils.validators import parse_bool

logger = get_logger(__name__)

# Lazy-loaded service to avoid import-time DB connections
_notification_service: Optional["NotificationService"] = None


def _get_notification_service():
    """Lazy-load NotificationService."""
    global _notification_service
    if _notification_service is None:
        from services.notification_service import NotificationService
        _notification_service = NotificationService()
    return _notification_service


@api_handler
def list_handler(event, context):
    """GET /notifications"""
    params = query(event)
    filters = NotificationFilters(
        type=params.get("type") or None,
        category=params.get("category") or None,
        priority=params.get("priority") or None,
        is_read=parse_bool(params.get("is_read")),
        is_archived=parse_bool(params.get("is_archived")),
        start_date=parse_datetime(params.get("start_date"), "start_date"),
        end_date=parse_datetime(params.get("end_date"), "end_date", end_of_day=True),
    )
    return json_response(200, _get_notification_service().list_notifications(filters))


@api_handler
def stats_handler(event, context):
    """GET /notifications/stats"""
    return json_response(200, _get_notification_service().get_stats())


@api_handler
def unread_count_handler(event, context):
    """GET /notifications/unread-count"""
    return json_response(200, {"count": _get_notification_service().get_unread_count()})


@api_handler
def read_handler(event, context):
    """POST /notifications/{id}/read"""
    require_admin(event)
    return json_response(200, _get_notification_service().mark_as_read(path_param(event, "id")))


@api_handler
def read_all_handler(event, context):
    """POST /notifications/read-all"""
    session = require_admin(event)
    updated = _get_notification_service().mark_all_as_read()
    logger.info("Bell menu cleared", extra={"updated": updated, "actor": session.actor})
    return json_response(200, {"updated": updated})


@api_handler
def archive_handler(event, context):
    """POST /notifications/{id}/archive"""
    require_admin(event)
    return json_response(200, _get_notification_service().archive(path_param(event, "id")))


@api_handler
def delete_handler(event, context):
    """DELETE /notifications/{id}"""
    session = require_admin(event)
    notification_id = path_param(event, "id")
    _get_notification_service().delete_notification(notification_id)
    logger.info(
        "Notification removed", extra={"notification_id": notification_id, "actor": session.actor}
    )
    return json_response(200, {"status": "deleted", "id": notification_id})
