"""
Environment-specific configuration settings.

Defaults suit a single small agency database; prod widens the pool.
"""

from dataclasses import dataclass
import os
from typing import Optional


@dataclass
class Settings:
    """Application settings with conservative defaults."""

    # Environment
    environment: str = "dev"

    # Database Configuration
    database_url: Optional[str] = None
    db_secret_arn: Optional[str] = None
    db_pool_size: int = 1
    db_max_overflow: int = 2

    # Listing Configuration
    default_page_size: int = 20
    max_page_size: int = 100
    currency: str = "XOF"

    # Session Configuration
    # Disabled by default: the dashboard runs behind the agency VPN.
    auth_enabled: bool = False

    log_level: str = "INFO"

    @classmethod
    def from_environment(cls) -> "Settings":
        """Load settings from environment variables."""
        env = os.environ.get("ENVIRONMENT", "dev")
        common = dict(
            environment=env,
            database_url=os.environ.get("DATABASE_URL") or None,
            db_secret_arn=os.environ.get("DB_SECRET_ARN") or None,
            default_page_size=int(os.environ.get("DEFAULT_PAGE_SIZE", "20")),
            max_page_size=int(os.environ.get("MAX_PAGE_SIZE", "100")),
            auth_enabled=os.environ.get("AUTH_ENABLED", "false").lower() == "true",
            log_level=os.environ.get("LOG_LEVEL", "INFO").upper(),
        )

        # Production overrides
        if env == "prod":
            return cls(db_pool_size=2, db_max_overflow=5, **common)

        return cls(**common)
