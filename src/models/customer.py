"""Customer models."""

from datetime import datetime
from typing import Optional, List

from pydantic import BaseModel, Field


class Customer(BaseModel):
    """A customer derived from the bookings sharing one guest email."""

    customer_email: str
    customer_name: str
    customer_phone: str = ""
    booking_count: int = 0
    total_spent: float = 0
    last_booking_date: Optional[datetime] = None
    tags: List[str] = Field(default_factory=list)
    notes: Optional[str] = None


class CustomerStats(BaseModel):
    """Headline numbers for the customers page."""

    total_customers: int
    recurring_customers: int
    average_order_value: float
    new_customers_this_month: int
    conversion_rate: float


class NotesUpdate(BaseModel):
    notes: str


class TagRequest(BaseModel):
    tag: str = Field(min_length=1)
