"""Initial schema: users, events, vendor profiles/services and bookings.

Revision ID: 001
Revises: None
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    ]


def upgrade() -> None:
    # Users table (owned by the identity service, read here)
    op.create_table(
        "users",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("username", sa.String(100), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("first_name", sa.String(100), nullable=False),
        sa.Column("last_name", sa.String(100), nullable=False),
        sa.Column("phone", sa.String(50), nullable=True),
        sa.Column("profile_type", sa.String(20), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        *_timestamps(),
        sa.CheckConstraint(
            "profile_type IN ('customer', 'vendor', 'manager', 'admin')",
            name="check_user_profile_type",
        ),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)
    op.create_index("ix_users_username", "users", ["username"], unique=True)

    # Events table
    op.create_table(
        "events",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("event_type", sa.String(20), nullable=False, server_default=sa.text("'other'")),
        sa.Column("start_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("end_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("location", sa.String(255), nullable=True),
        sa.Column("max_guests", sa.Integer(), nullable=True),
        sa.Column("budget", sa.Numeric(10, 2), nullable=True),
        sa.Column("status", sa.String(20), nullable=False, server_default=sa.text("'planning'")),
        sa.Column("customer_id", sa.String(36), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("manager_id", sa.String(36), sa.ForeignKey("users.id"), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_events_customer_id", "events", ["customer_id"])
    op.create_index("ix_events_manager_id", "events", ["manager_id"])
    op.create_index("ix_events_start_date", "events", ["start_date"])

    # Vendor profiles and services
    op.create_table(
        "vendor_profiles",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("user_id", sa.String(36), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("business_name", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("vendor_type", sa.String(20), nullable=False),
        sa.Column("contact_person", sa.String(255), nullable=True),
        sa.Column("phone", sa.String(50), nullable=True),
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column("is_available", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        *_timestamps(),
    )
    op.create_index("ix_vendor_profiles_user_id", "vendor_profiles", ["user_id"])

    op.create_table(
        "vendor_services",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("vendor_id", sa.String(36), sa.ForeignKey("vendor_profiles.id"), nullable=False),
        sa.Column("service_name", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("base_price", sa.Numeric(10, 2), nullable=False),
        sa.Column("price_type", sa.String(20), nullable=False),
        sa.Column("capacity", sa.Integer(), nullable=True),
        sa.Column("unit", sa.String(50), nullable=True),
        sa.Column("is_available", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        *_timestamps(),
        sa.CheckConstraint("base_price >= 0", name="check_service_base_price_non_negative"),
        sa.CheckConstraint("capacity IS NULL OR capacity > 0", name="check_service_capacity_positive"),
    )
    op.create_index("ix_vendor_services_vendor_id", "vendor_services", ["vendor_id"])

    # Bookings table
    op.create_table(
        "bookings",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("event_id", sa.String(36), sa.ForeignKey("events.id"), nullable=False),
        sa.Column("vendor_id", sa.String(36), sa.ForeignKey("vendor_profiles.id"), nullable=False),
        sa.Column("service_id", sa.String(36), sa.ForeignKey("vendor_services.id"), nullable=False),
        sa.Column("customer_id", sa.String(36), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False, server_default=sa.text("1")),
        sa.Column("unit_price", sa.Numeric(10, 2), nullable=False),
        sa.Column("price_type", sa.String(20), nullable=False),
        sa.Column("total_cost", sa.Numeric(10, 2), nullable=False),
        sa.Column("booking_date", sa.Date(), nullable=False),
        sa.Column("start_time", sa.Time(), nullable=True),
        sa.Column("end_time", sa.Time(), nullable=True),
        sa.Column("special_requirements", sa.Text(), nullable=True),
        sa.Column("status", sa.String(20), nullable=False, server_default=sa.text("'pending'")),
        *_timestamps(),
        sa.CheckConstraint("quantity > 0", name="check_booking_quantity_positive"),
        sa.CheckConstraint("total_cost >= 0", name="check_booking_total_cost_non_negative"),
        sa.CheckConstraint(
            "status IN ('pending', 'confirmed', 'in_progress', 'completed', 'cancelled')",
            name="check_booking_status",
        ),
    )
    op.create_index("ix_bookings_event_id", "bookings", ["event_id"])
    op.create_index("ix_bookings_vendor_id", "bookings", ["vendor_id"])
    op.create_index("ix_bookings_customer_id", "bookings", ["customer_id"])
    # Scheduling-conflict lookup: active bookings for one service on one day
    op.create_index("ix_bookings_slot", "bookings", ["vendor_id", "service_id", "booking_date"])
    # Listing order: booking_date DESC, created_at DESC
    op.create_index("ix_bookings_date_created", "bookings", ["booking_date", "created_at"])


def downgrade() -> None:
    op.drop_table("bookings")
    op.drop_table("vendor_services")
    op.drop_table("vendor_profiles")
    op.drop_table("events")
    op.drop_table("users")
