"""
Database engine bootstrap.

The engine is created lazily and reused across warm Lambda invocations.
Credentials come from DATABASE_URL or, in deployed stacks, from the RDS
secret referenced by DB_SECRET_ARN.
"""

from __future__ import annotations

import json
from typing import Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.pool import QueuePool

from config.settings import Settings
from utils.error_handling import DataUnavailableError
from utils.logging_config import get_logger

logger = get_logger(__name__)

# Connection pooling for Lambda reuse.
_engine: Optional[Engine] = None


def get_db_engine(settings: Optional[Settings] = None) -> Engine:
    """Get or create SQLAlchemy engine with connection pooling."""
    global _engine
    if _engine is None:
        settings = settings or Settings.from_environment()
        db_url = settings.database_url
        if not db_url and settings.db_secret_arn:
            db_url = _secret_to_db_url(settings.db_secret_arn)
        if not db_url:
            logger.error("No database configured; set DATABASE_URL or DB_SECRET_ARN")
            raise DataUnavailableError("Database is not configured")
        _engine = create_engine(
            db_url,
            poolclass=QueuePool,
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_pre_ping=True,
            pool_recycle=300,
        )
    return _engine


def reset_engine() -> None:
    """Dispose the cached engine (tests and secret rotation)."""
    global _engine
    if _engine is not None:
        _engine.dispose()
    _engine = None


def _secret_to_db_url(secret_arn: str) -> Optional[str]:
    """Build a SQLAlchemy URL from an RDS secret."""
    try:
        sm = boto3.client("secretsmanager")
        secret_value = sm.get_secret_value(SecretId=secret_arn)["SecretString"]
        secret = json.loads(secret_value)
    except (BotoCoreError, ClientError, KeyError, ValueError) as exc:
        logger.warning("Failed to load DB secret", extra={"error": str(exc)})
        return None

    host = secret.get("host")
    port = secret.get("port", 5432)
    username = secret.get("username")
    password = secret.get("password")
    dbname = secret.get("dbname", "postgres")
    if not (host and username and password):
        return None
    return f"postgresql+psycopg2://{username}:{password}@{host}:{port}/{dbname}"
