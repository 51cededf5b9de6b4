"""Lightweight health check handler."""

from datetime import datetime, timezone

from config.settings import Settings
from utils.responses import json_response


def lambda_handler(event, context):
    """Return a simple 200 response to verify the API is alive."""
    settings = Settings.from_environment()
    return json_response(
        200,
        {
            "status": "ok",
            "environment": settings.environment,
            "auth_enabled": settings.auth_enabled,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        },
    )
