"""Helpers for API Gateway HTTP API proxy responses."""

import json
from typing import Any, Dict, List, Union

from pydantic import BaseModel


def json_response(status: int, body: Union[BaseModel, List[BaseModel], Dict[str, Any]]) -> Dict:
    """Format a JSON API Gateway HTTP API response."""
    if isinstance(body, BaseModel):
        payload = body.model_dump_json(by_alias=True)
    elif isinstance(body, list) and all(isinstance(item, BaseModel) for item in body):
        payload = json.dumps([item.model_dump(mode="json", by_alias=True) for item in body])
    else:
        payload = json.dumps(body, default=str)
    return {
        "statusCode": status,
        "headers": {"Content-Type": "application/json"},
        "body": payload,
    }
