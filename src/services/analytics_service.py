"""
Analytics service.

Search statistics, search-to-booking conversion per route, and a naive
three-month forecast. Everything is computed in memory from the rows of the
requested window.
"""

from __future__ import annotations

import math
from collections import Counter, OrderedDict
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from models.analytics import (
    ConversionStats,
    DestinationCount,
    MonthCount,
    MonthlyActivity,
    MonthlyPrediction,
    RouteConversion,
    RouteCount,
    SearchStats,
    TrendPredictions,
)
from models.common import ensure_utc
from repositories.booking_repo import BookingRepository
from repositories.search_repo import SearchRepository
from services.payment_service import shift_months
from utils.database import get_db_engine
from utils.logging_config import get_logger

logger = get_logger(__name__)

TOP_N = 10
GROWTH_FACTOR = 1.1
FORECAST_MONTHS = 3


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _route(origin: Any, destination: Any) -> str:
    return f"{origin}-{destination}"


class AnalyticsService:
    """Service for search and conversion analytics."""

    def __init__(
        self,
        search_repository: Optional[SearchRepository] = None,
        booking_repository: Optional[BookingRepository] = None,
    ):
        if search_repository is None or booking_repository is None:
            engine = get_db_engine()
            search_repository = search_repository or SearchRepository(engine)
            booking_repository = booking_repository or BookingRepository(engine)
        self.search_repository = search_repository
        self.booking_repository = booking_repository

    def get_search_stats(
        self, start: Optional[datetime] = None, end: Optional[datetime] = None
    ) -> SearchStats:
        searches = self.search_repository.list(start, end)

        routes: Counter = Counter()
        destinations: Counter = Counter()
        monthly: Dict[str, int] = OrderedDict()
        for search in searches:
            routes[(search["from_airport"], search["to_airport"])] += 1
            destinations[search["to_airport"]] += 1
            month = ensure_utc(search["created_at"]).strftime("%Y-%m")
            monthly[month] = monthly.get(month, 0) + 1

        return SearchStats(
            total_searches=len(searches),
            top_routes=[
                RouteCount(from_airport=origin, to_airport=destination, count=count)
                for (origin, destination), count in routes.most_common(TOP_N)
            ],
            top_destinations=[
                DestinationCount(destination=destination, count=count)
                for destination, count in destinations.most_common(TOP_N)
            ],
            monthly_trend=[MonthCount(month=month, count=count) for month, count in monthly.items()],
        )

    def get_conversion_rate(
        self, start: Optional[datetime] = None, end: Optional[datetime] = None
    ) -> ConversionStats:
        """
        Bookings per search, globally and per route.

        Booking routes come from ``flight_details.departure``/``arrival``;
        flight bookings missing either still count towards the global rate.
        """
        searches = self.search_repository.list(start, end)
        flight_bookings = self.booking_repository.list_flight_bookings(start, end)

        per_route: Dict[str, Dict[str, int]] = OrderedDict()
        for search in searches:
            route = _route(search["from_airport"], search["to_airport"])
            per_route.setdefault(route, {"searches": 0, "bookings": 0})["searches"] += 1

        for booking in flight_bookings:
            details = booking.get("flight_details") or {}
            if details.get("departure") and details.get("arrival"):
                route = _route(details["departure"], details["arrival"])
                per_route.setdefault(route, {"searches": 0, "bookings": 0})["bookings"] += 1

        rates = [
            RouteConversion(
                route=route,
                searches=counts["searches"],
                bookings=counts["bookings"],
                conversion_rate=(
                    counts["bookings"] / counts["searches"] * 100 if counts["searches"] else 0
                ),
            )
            for route, counts in per_route.items()
        ]
        rates.sort(key=lambda rate: rate.conversion_rate, reverse=True)

        total_searches = len(searches)
        return ConversionStats(
            total_searches=total_searches,
            total_bookings=len(flight_bookings),
            conversion_rate=(
                len(flight_bookings) / total_searches * 100 if total_searches else 0
            ),
            route_conversion_rates=rates[:TOP_N],
        )

    def get_trend_predictions(self, now: Optional[datetime] = None) -> TrendPredictions:
        """
        Seasonal forecast for the next three calendar months.

        Activity of the last twelve months is bucketed by calendar month and
        each forecast is that month's history plus ten percent.
        """
        now = now or datetime.now(timezone.utc)
        since = shift_months(now, -12)

        activity: Dict[int, MonthlyActivity] = {}

        def bucket(created_at: datetime) -> MonthlyActivity:
            month = ensure_utc(created_at).month
            return activity.setdefault(month, MonthlyActivity(month=month))

        for search in self.search_repository.list(since):
            bucket(search["created_at"]).searches += 1
        for booking in self.booking_repository.list_since(since):
            current = bucket(booking["created_at"])
            current.bookings += 1
            current.revenue += booking["total_amount"] or 0

        predictions = []
        for offset in range(1, FORECAST_MONTHS + 1):
            month = (now.month - 1 + offset) % 12 + 1
            history = activity.get(month, MonthlyActivity(month=month))
            predictions.append(
                MonthlyPrediction(
                    month=month,
                    predicted_searches=_round_half_up(history.searches * GROWTH_FACTOR),
                    predicted_bookings=_round_half_up(history.bookings * GROWTH_FACTOR),
                    predicted_revenue=_round_half_up(history.revenue * GROWTH_FACTOR),
                )
            )

        logger.info("Trend predictions computed", extra={"months_with_data": len(activity)})
        return TrendPredictions(
            historical_data=[activity[month] for month in sorted(activity)],
            predictions=predictions,
        )
