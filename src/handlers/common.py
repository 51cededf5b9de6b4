"""Request parsing and error rendering shared by the route handlers."""

from __future__ import annotations

import functools
import json
import uuid
from datetime import date, datetime, time, timezone
from typing import Any, Callable, Dict, Optional, Tuple

from pydantic import ValidationError as PydanticValidationError

from config.settings import Settings
from utils.error_handling import AppError, ValidationError, to_response
from utils.logging_config import get_logger
from utils.responses import json_response
from utils.validators import ensure_pagination, parse_int

logger = get_logger(__name__)


def api_handler(func: Callable) -> Callable:
    """Render AppError and bad payloads as JSON errors; anything else is a 500."""

    @functools.wraps(func)
    def wrapper(event, context):
        try:
            return func(event, context)
        except AppError as exc:
            logger.warning(
                "Request rejected",
                extra={"handler": func.__name__, "status_code": exc.status_code, "error": str(exc)},
            )
            return to_response(exc)
        except PydanticValidationError as exc:
            return json_response(
                422,
                {
                    "message": "Invalid request",
                    "status": "error",
                    "errors": exc.errors(include_url=False, include_context=False),
                },
            )
        except Exception:
            correlation_id = str(uuid.uuid4())
            logger.exception(
                "Unhandled error", extra={"handler": func.__name__, "correlation_id": correlation_id}
            )
            return json_response(
                500,
                {"message": "Internal server error", "status": "error", "correlation_id": correlation_id},
            )

    return wrapper


def query(event: Dict[str, Any]) -> Dict[str, str]:
    return event.get("queryStringParameters") or {}


def path_param(event: Dict[str, Any], name: str) -> str:
    value = (event.get("pathParameters") or {}).get(name)
    if not value:
        raise ValidationError(f"{name} is required")
    return value


def json_body(event: Dict[str, Any]) -> Dict[str, Any]:
    """Decoded JSON object body; an absent body is an empty object."""
    try:
        payload = json.loads(event.get("body") or "{}")
    except json.JSONDecodeError:
        raise ValidationError("Request body must be valid JSON")
    if not isinstance(payload, dict):
        raise ValidationError("Request body must be a JSON object")
    return payload


def parse_datetime(value: Optional[str], field: str, end_of_day: bool = False) -> Optional[datetime]:
    """ISO date or datetime query parameter, in UTC. Bare dates span the whole day."""
    if value in (None, ""):
        return None
    try:
        if len(value) == 10:
            day = date.fromisoformat(value)
            return datetime.combine(day, time.max if end_of_day else time.min, tzinfo=timezone.utc)
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        raise ValidationError(f"{field} must be an ISO date")
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)


def pagination(event: Dict[str, Any], settings: Optional[Settings] = None) -> Tuple[int, int]:
    """``page``/``limit`` query parameters, bounded by the configured page size."""
    settings = settings or Settings.from_environment()
    params = query(event)
    page = parse_int(params.get("page"), "page", 1)
    limit = parse_int(params.get("limit"), "limit", settings.default_page_size)
    ensure_pagination(page, limit, settings.max_page_size)
    return page, limit
