"""Handlers for /commissions routes."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from handlers.common import api_handler, json_body, parse_datetime, path_param, query
from models.commission import CommissionSettingCreate, CommissionSettingUpdate
from utils.auth import require_admin
from utils.logging_config import get_logger
from utils.responses import json_response
from utils.validators import parse_bool, parse_int

logger = get_logger(__name__)

# Lazy-loaded service to avoid import-time DB connections
_commission_service: Optional["CommissionService"] = None


def _get_commission_service():
    """Lazy-load CommissionService."""
    global _commission_service
    if _commission_service is None:
        from services.commission_service import CommissionService
        _commission_service = CommissionService()
    return _commission_service


@api_handler
def settings_handler(event, context):
    """GET /commissions/settings[?active=true]"""
    service = _get_commission_service()
    if parse_bool(query(event).get("active")):
        return json_response(200, service.get_active_settings())
    return json_response(200, service.get_settings())


@api_handler
def history_handler(event, context):
    """GET /commissions/history"""
    params = query(event)
    limit = parse_int(params.get("limit"), "limit", 0) or None
    records = _get_commission_service().get_history(
        start_date=parse_datetime(params.get("start_date"), "start_date"),
        end_date=parse_datetime(params.get("end_date"), "end_date", end_of_day=True),
        service_type=params.get("service_type") or None,
        limit=limit,
    )
    return json_response(200, records)


@api_handler
def stats_handler(event, context):
    """GET /commissions/stats"""
    params = query(event)
    stats = _get_commission_service().get_stats(
        start_date=parse_datetime(params.get("start_date"), "start_date"),
        end_date=parse_datetime(params.get("end_date"), "end_date", end_of_day=True),
    )
    return json_response(200, stats)


@api_handler
def monthly_handler(event, context):
    """GET /commissions/monthly?year=YYYY"""
    year = parse_int(query(event).get("year"), "year", datetime.now(timezone.utc).year)
    return json_response(200, _get_commission_service().get_monthly_revenue(year))


@api_handler
def create_setting_handler(event, context):
    """POST /commissions/settings"""
    session = require_admin(event)
    data = CommissionSettingCreate.model_validate(json_body(event))
    setting = _get_commission_service().create_setting(data)
    logger.info("Commission rule added", extra={"setting_id": setting.id, "actor": session.actor})
    return json_response(201, setting)


@api_handler
def update_setting_handler(event, context):
    """PATCH /commissions/settings/{id}"""
    session = require_admin(event)
    setting_id = path_param(event, "id")
    updates = CommissionSettingUpdate.model_validate(json_body(event))
    setting = _get_commission_service().update_setting(setting_id, updates)
    logger.info("Commission rule edited", extra={"setting_id": setting_id, "actor": session.actor})
    return json_response(200, setting)


@api_handler
def deactivate_setting_handler(event, context):
    """DELETE /commissions/settings/{id}"""
    session = require_admin(event)
    setting_id = path_param(event, "id")
    setting = _get_commission_service().deactivate_setting(setting_id)
    logger.info("Commission rule disabled", extra={"setting_id": setting_id, "actor": session.actor})
    return json_response(200, setting)
