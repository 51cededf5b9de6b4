"""Lightweight validation helpers shared by services and handlers."""

from typing import Any, Optional

from utils.error_handling import ValidationError


def ensure_present(value: Any, field: str) -> None:
    """Raise ValidationError if value is falsy."""
    if value in (None, "", []):
        raise ValidationError(f"{field} is required")


def ensure_pagination(page: int, limit: int, max_limit: Optional[int] = None) -> None:
    """Pages are 1-based; limit must be positive and at most max_limit."""
    if page < 1:
        raise ValidationError("page must be >= 1")
    if limit < 1:
        raise ValidationError("limit must be >= 1")
    if max_limit is not None and limit > max_limit:
        raise ValidationError(f"limit must be <= {max_limit}")


def ensure_commission_rate(rate: float) -> None:
    """Commission percentages are expressed between 0 and 100."""
    if rate < 0 or rate > 100:
        raise ValidationError("commission_percentage must be between 0 and 100")


def parse_int(value: Optional[str], field: str, default: int) -> int:
    """Parse an integer query parameter, falling back to default when absent."""
    if value in (None, ""):
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field} must be an integer")


def parse_bool(value: Optional[str]) -> Optional[bool]:
    """Parse 'true'/'false' query flags; anything else means unset."""
    if value is None:
        return None
    lowered = value.strip().lower()
    if lowered in ("true", "1", "yes"):
        return True
    if lowered in ("false", "0", "no"):
        return False
    return None
