"""Commission service: rules per service type and the commission ledger."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import List, Optional

from models.commission import (
    SERVICE_TYPES,
    CommissionRecord,
    CommissionSetting,
    CommissionSettingCreate,
    CommissionSettingUpdate,
    CommissionStats,
    MonthlyCommission,
)
from models.common import ensure_utc
from repositories.commission_repo import CommissionRepository
from utils.database import get_db_engine
from utils.error_handling import NotFoundError
from utils.logging_config import get_logger
from utils.validators import ensure_commission_rate

logger = get_logger(__name__)


class CommissionService:
    """Service for commission settings, history and revenue rollups."""

    def __init__(self, repository: Optional[CommissionRepository] = None):
        self.repository = repository or CommissionRepository(get_db_engine())

    def get_settings(self) -> List[CommissionSetting]:
        return [CommissionSetting(**row) for row in self.repository.list_settings()]

    def get_active_settings(self) -> List[CommissionSetting]:
        return [
            CommissionSetting(**row)
            for row in self.repository.list_settings(active_only=True)
        ]

    def create_setting(self, data: CommissionSettingCreate) -> CommissionSetting:
        ensure_commission_rate(data.commission_percentage)
        row = self.repository.insert_setting(data.model_dump())
        logger.info(
            "Commission setting created",
            extra={"setting_id": row["id"], "service_type": row["service_type"]},
        )
        return CommissionSetting(**row)

    def update_setting(self, setting_id: str, updates: CommissionSettingUpdate) -> CommissionSetting:
        values = updates.model_dump(exclude_unset=True)
        if values.get("commission_percentage") is not None:
            ensure_commission_rate(values["commission_percentage"])
        row = self.repository.update_setting(setting_id, values)
        if not row:
            raise NotFoundError(f"Commission setting {setting_id} not found")
        return CommissionSetting(**row)

    def deactivate_setting(self, setting_id: str) -> CommissionSetting:
        setting = self.update_setting(setting_id, CommissionSettingUpdate(is_active=False))
        logger.info("Commission setting deactivated", extra={"setting_id": setting_id})
        return setting

    def get_history(
        self,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
        service_type: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> List[CommissionRecord]:
        rows = self.repository.list_history(start_date, end_date, service_type, limit)
        return [CommissionRecord(**row) for row in rows]

    def get_stats(
        self, start_date: Optional[datetime] = None, end_date: Optional[datetime] = None
    ) -> CommissionStats:
        stats = CommissionStats()
        for record in self.get_history(start_date, end_date):
            stats.total += record.commission_amount
            if record.service_type in SERVICE_TYPES:
                stats.by_type[record.service_type] += record.commission_amount
                stats.count[record.service_type] += 1
        return stats

    def get_monthly_revenue(self, year: Optional[int] = None) -> List[MonthlyCommission]:
        """Twelve buckets for the year; unknown service types only add to total."""
        year = year or datetime.now(timezone.utc).year
        start = datetime(year, 1, 1, tzinfo=timezone.utc)
        end = datetime(year, 12, 31, 23, 59, 59, 999999, tzinfo=timezone.utc)

        months = [MonthlyCommission(month=month) for month in range(1, 13)]
        for row in self.repository.list_history(start, end):
            created = ensure_utc(row["created_at"])
            if created is None:
                continue
            bucket = months[created.month - 1]
            amount = row["commission_amount"] or 0
            if row["service_type"] in SERVICE_TYPES:
                setattr(bucket, row["service_type"], getattr(bucket, row["service_type"]) + amount)
            bucket.total += amount
        return months
