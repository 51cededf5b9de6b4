"""SQLAlchemy Core table definitions for the back-office tables."""

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    Float,
    ForeignKey,
    MetaData,
    String,
    Table,
    Text,
)

metadata = MetaData()

bookings = Table(
    "bookings",
    metadata,
    Column("id", String(36), primary_key=True),
    Column("user_id", String(36), nullable=True),
    Column("booking_type", String(16), nullable=False),
    Column("external_booking_id", String(128), nullable=True),
    Column("status", String(16), nullable=False, default="pending"),
    Column("total_amount", Float, nullable=False),
    Column("currency", String(8), nullable=False, default="XOF"),
    Column("passenger_details", JSON, nullable=True),
    Column("flight_details", JSON, nullable=True),
    Column("guest_email", String(255), nullable=True, index=True),
    Column("guest_phone", String(64), nullable=True),
    Column("created_at", DateTime(timezone=True), nullable=False, index=True),
    Column("updated_at", DateTime(timezone=True), nullable=True),
    Column("base_amount", Float, nullable=True),
    Column("commission_percentage", Float, nullable=True),
    Column("commission_amount", Float, nullable=True),
    Column("display_currency", String(8), nullable=True),
    Column("metadata", JSON, nullable=True),
)

payments = Table(
    "payments",
    metadata,
    Column("id", String(36), primary_key=True),
    Column("booking_id", String(36), ForeignKey("bookings.id"), nullable=False, index=True),
    Column("paytech_transaction_id", String(128), nullable=True),
    Column("amount", Float, nullable=False),
    Column("currency", String(8), nullable=False, default="XOF"),
    Column("status", String(16), nullable=False, default="pending"),
    Column("payment_method", String(64), nullable=True),
    Column("error_message", Text, nullable=True),
    Column("paytech_response", JSON, nullable=True),
    Column("created_at", DateTime(timezone=True), nullable=False),
    Column("updated_at", DateTime(timezone=True), nullable=False),
)

commission_settings = Table(
    "commission_settings",
    metadata,
    Column("id", String(36), primary_key=True),
    Column("service_type", String(32), nullable=False),
    Column("commission_percentage", Float, nullable=False),
    Column("fixed_amount", Float, nullable=True),
    Column("currency", String(8), nullable=True),
    Column("is_active", Boolean, nullable=True, default=True),
    Column("valid_from", DateTime(timezone=True), nullable=True),
    Column("valid_until", DateTime(timezone=True), nullable=True),
    Column("created_at", DateTime(timezone=True), nullable=True),
    Column("updated_at", DateTime(timezone=True), nullable=True),
)

commission_history = Table(
    "commission_history",
    metadata,
    Column("id", String(36), primary_key=True),
    Column("booking_id", String(36), ForeignKey("bookings.id"), nullable=True),
    Column("service_type", String(32), nullable=False),
    Column("base_amount", Float, nullable=False),
    Column("commission_percentage", Float, nullable=False),
    Column("commission_amount", Float, nullable=False),
    Column("total_amount", Float, nullable=False),
    Column("currency", String(8), nullable=False),
    Column("exchange_rate", Float, nullable=True),
    Column("calculation_details", JSON, nullable=True),
    Column("created_at", DateTime(timezone=True), nullable=True),
)

notifications = Table(
    "notifications",
    metadata,
    Column("id", String(36), primary_key=True),
    Column("user_id", String(36), nullable=True),
    Column("type", String(32), nullable=False),
    Column("category", String(32), nullable=False),
    Column("title", String(255), nullable=False),
    Column("message", Text, nullable=False),
    Column("action_url", String(512), nullable=True),
    Column("action_label", String(128), nullable=True),
    Column("related_entity_id", String(36), nullable=True),
    Column("related_entity_type", String(32), nullable=True),
    Column("priority", String(16), nullable=False, default="normal"),
    Column("is_read", Boolean, nullable=False, default=False),
    Column("is_archived", Boolean, nullable=False, default=False),
    Column("metadata", JSON, nullable=True),
    Column("created_at", DateTime(timezone=True), nullable=False),
    Column("read_at", DateTime(timezone=True), nullable=True),
    Column("archived_at", DateTime(timezone=True), nullable=True),
    Column("expires_at", DateTime(timezone=True), nullable=True),
)

flight_searches = Table(
    "flight_searches",
    metadata,
    Column("id", String(36), primary_key=True),
    Column("user_id", String(36), nullable=True),
    Column("from_airport", String(8), nullable=False),
    Column("to_airport", String(8), nullable=False),
    Column("departure_date", DateTime(timezone=True), nullable=True),
    Column("created_at", DateTime(timezone=True), nullable=False),
)
