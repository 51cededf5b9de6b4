"""Handlers for /analytics routes."""

from __future__ import annotations

from typing import Optional

from handlers.common import api_handler, parse_datetime, query
from utils.responses import json_response

# Lazy-loaded service to avoid import-time DB connections
_analytics_service: Optional["AnalyticsService"] = None


def _get_analytics_service():
    """Lazy-load AnalyticsService."""
    global _analytics_service
    if _analytics_service is None:
        from services.analytics_service import AnalyticsService
        _analytics_service = AnalyticsService()
    return _analytics_service


def _window(event):
    params = query(event)
    return (
        parse_datetime(params.get("start_date"), "start_date"),
        parse_datetime(params.get("end_date"), "end_date", end_of_day=True),
    )


@api_handler
def searches_handler(event, context):
    """GET /analytics/searches"""
    start, end = _window(event)
    return json_response(200, _get_analytics_service().get_search_stats(start, end))


@api_handler
def conversion_handler(event, context):
    """GET /analytics/conversion"""
    start, end = _window(event)
    return json_response(200, _get_analytics_service().get_conversion_rate(start, end))


@api_handler
def predictions_handler(event, context):
    """GET /analytics/predictions"""
    return json_response(200, _get_analytics_service().get_trend_predictions())
