"""
Single entrypoint Lambda that routes HTTP API requests to thin handler modules.

Routes are matched in order against ``METHOD /path``; literal segments such
as ``/bookings/stats`` are listed before their ``{id}`` siblings. Named
groups become ``pathParameters`` for the handler.
"""

import re
from typing import Callable, Dict, Optional, Pattern, Tuple
from urllib.parse import unquote

from utils.logging_config import get_logger
from utils.responses import json_response

from . import (
    analytics,
    bookings,
    commissions,
    customers,
    health_check,
    notifications,
    payments,
)

logger = get_logger(__name__)

_SEGMENT = r"[^/]+"


def _route(method: str, template: str, handler: Callable) -> Tuple[str, Pattern, Callable]:
    pattern = re.sub(r"\{(\w+)\}", lambda m: f"(?P<{m.group(1)}>{_SEGMENT})", template)
    return method, re.compile(f"^{pattern}/?$"), handler


ROUTES = (
    _route("GET", "/health", health_check.lambda_handler),
    _route("GET", "/bookings", bookings.list_handler),
    _route("POST", "/bookings", bookings.create_handler),
    _route("GET", "/bookings/stats", bookings.stats_handler),
    _route("GET", "/bookings/{id}", bookings.get_handler),
    _route("PATCH", "/bookings/{id}", bookings.update_handler),
    _route("DELETE", "/bookings/{id}", bookings.cancel_handler),
    _route("POST", "/bookings/{id}/status", bookings.status_handler),
    _route("GET", "/customers", customers.list_handler),
    _route("GET", "/customers/stats", customers.stats_handler),
    _route("GET", "/customers/{email}", customers.get_handler),
    _route("PUT", "/customers/{email}/notes", customers.notes_handler),
    _route("POST", "/customers/{email}/tags", customers.add_tag_handler),
    _route("DELETE", "/customers/{email}/tags/{tag}", customers.remove_tag_handler),
    _route("GET", "/payments", payments.list_handler),
    _route("GET", "/payments/stats", payments.stats_handler),
    _route("GET", "/payments/chart", payments.chart_handler),
    _route("GET", "/payments/{id}", payments.get_handler),
    _route("POST", "/payments/{id}/retry", payments.retry_handler),
    _route("GET", "/commissions/settings", commissions.settings_handler),
    _route("POST", "/commissions/settings", commissions.create_setting_handler),
    _route("PATCH", "/commissions/settings/{id}", commissions.update_setting_handler),
    _route("DELETE", "/commissions/settings/{id}", commissions.deactivate_setting_handler),
    _route("GET", "/commissions/history", commissions.history_handler),
    _route("GET", "/commissions/stats", commissions.stats_handler),
    _route("GET", "/commissions/monthly", commissions.monthly_handler),
    _route("GET", "/notifications", notifications.list_handler),
    _route("GET", "/notifications/stats", notifications.stats_handler),
    _route("GET", "/notifications/unread-count", notifications.unread_count_handler),
    _route("POST", "/notifications/read-all", notifications.read_all_handler),
    _route("POST", "/notifications/{id}/read", notifications.read_handler),
    _route("POST", "/notifications/{id}/archive", notifications.archive_handler),
    _route("DELETE", "/notifications/{id}", notifications.delete_handler),
    _route("GET", "/analytics/searches", analytics.searches_handler),
    _route("GET", "/analytics/conversion", analytics.conversion_handler),
    _route("GET", "/analytics/predictions", analytics.predictions_handler),
)


def resolve(method: str, path: str) -> Optional[Tuple[Callable, Dict[str, str]]]:
    """Find the handler for a request and the path parameters it captured."""
    for route_method, pattern, handler in ROUTES:
        if route_method != method:
            continue
        match = pattern.match(path)
        if match:
            return handler, {name: unquote(value) for name, value in match.groupdict().items()}
    return None


def lambda_handler(event, context):
    """Entry point invoked by API Gateway HTTP API."""
    http = event.get("requestContext", {}).get("http", {})
    method = http.get("method", "").upper()
    path = http.get("path") or event.get("rawPath", "")

    resolved = resolve(method, path)
    if resolved is None:
        logger.info("No route", extra={"method": method, "path": path})
        return json_response(
            404, {"message": "Route not found", "route": f"{method} {path}", "status": "error"}
        )

    handler, path_params = resolved
    event = {**event, "pathParameters": {**(event.get("pathParameters") or {}), **path_params}}
    return handler(event, context)
