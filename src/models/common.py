"""Shared model helpers: pagination envelope and timestamp normalization."""

from __future__ import annotations

import math
from datetime import datetime, timezone
from typing import Generic, List, Optional, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


def ensure_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Treat naive timestamps as UTC so they compare with aware ones."""
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def total_pages(count: int, limit: int) -> int:
    """ceil(count / limit); zero rows means zero pages."""
    return math.ceil(count / limit) if count else 0


class Page(BaseModel, Generic[T]):
    """Paginated result envelope returned by every listing."""

    data: List[T] = Field(default_factory=list)
    count: int
    page: int
    total_pages: int = Field(serialization_alias="totalPages")
