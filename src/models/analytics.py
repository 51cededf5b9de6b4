"""Analytics result models."""

from typing import List

from pydantic import BaseModel, Field


class RouteCount(BaseModel):
    from_airport: str
    to_airport: str
    count: int


class DestinationCount(BaseModel):
    destination: str
    count: int


class MonthCount(BaseModel):
    month: str
    count: int


class SearchStats(BaseModel):
    total_searches: int = 0
    top_routes: List[RouteCount] = Field(default_factory=list)
    top_destinations: List[DestinationCount] = Field(default_factory=list)
    monthly_trend: List[MonthCount] = Field(default_factory=list)


class RouteConversion(BaseModel):
    route: str
    searches: int
    bookings: int
    conversion_rate: float


class ConversionStats(BaseModel):
    total_searches: int = 0
    total_bookings: int = 0
    conversion_rate: float = 0
    route_conversion_rates: List[RouteConversion] = Field(default_factory=list)


class MonthlyActivity(BaseModel):
    """Activity for a calendar month (1-12) across all years in the window."""

    month: int
    searches: int = 0
    bookings: int = 0
    revenue: float = 0


class MonthlyPrediction(BaseModel):
    month: int
    predicted_searches: int
    predicted_bookings: int
    predicted_revenue: int


class TrendPredictions(BaseModel):
    historical_data: List[MonthlyActivity] = Field(default_factory=list)
    predictions: List[MonthlyPrediction] = Field(default_factory=list)
