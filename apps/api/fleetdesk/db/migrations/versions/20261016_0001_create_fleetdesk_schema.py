"""create customers, employees, vehicles, units, orders, tracking_events

Revision ID: 20261016_0001
Revises:
Create Date: 2026-10-16 00:00:00
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "20261016_0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

employee_status = sa.Enum("ACTIVE", "INACTIVE", "TERMINATED", "ON_LEAVE", name="employee_status")
vehicle_status = sa.Enum(
    "AVAILABLE", "IN_USE", "MAINTENANCE", "OUT_OF_SERVICE", name="vehicle_status"
)
unit_availability = sa.Enum("AVAILABLE", "BUSY", "NOT_AVAILABLE", name="unit_availability")
order_status = sa.Enum(
    "PENDING",
    "ASSIGNED",
    "IN_TRANSIT",
    "DELIVERED",
    "CANCELLED",
    "RETURNED",
    name="order_status",
)
order_priority = sa.Enum("LOW", "NORMAL", "HIGH", "URGENT", name="order_priority")
driver_kind = sa.Enum("USER", "EMPLOYEE", name="driver_kind")


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
    ]


def upgrade() -> None:
    op.create_table(
        "customers",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=True),
        sa.Column("phone", sa.String(length=50), nullable=True),
        sa.Column("address", sa.String(length=500), nullable=True),
        sa.Column("city", sa.String(length=100), nullable=True),
        sa.Column("state", sa.String(length=100), nullable=True),
        sa.Column("zip_code", sa.String(length=20), nullable=True),
        sa.Column("country", sa.String(length=100), nullable=True),
        sa.Column("created_by_id", sa.String(length=128), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_customers_created_by_id"), "customers", ["created_by_id"])

    op.create_table(
        "employees",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("employee_id", sa.String(length=64), nullable=False),
        sa.Column("first_name", sa.String(length=100), nullable=False),
        sa.Column("last_name", sa.String(length=100), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("phone", sa.String(length=50), nullable=True),
        sa.Column("position", sa.String(length=100), nullable=False),
        sa.Column("department", sa.String(length=100), nullable=True),
        sa.Column("hire_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("salary", sa.Float(), nullable=True),
        sa.Column("address", sa.Text(), nullable=True),
        sa.Column("emergency_contact", sa.String(length=255), nullable=True),
        sa.Column("status", employee_status, nullable=False),
        sa.Column("created_by_id", sa.String(length=128), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("employee_id", "created_by_id", name="uq_employees_employee_id_owner"),
        sa.UniqueConstraint("email", "created_by_id", name="uq_employees_email_owner"),
    )
    op.create_index(op.f("ix_employees_created_by_id"), "employees", ["created_by_id"])

    op.create_table(
        "vehicles",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("make", sa.String(length=100), nullable=False),
        sa.Column("model", sa.String(length=100), nullable=False),
        sa.Column("year", sa.Integer(), nullable=False),
        sa.Column("license_plate", sa.String(length=32), nullable=False),
        sa.Column("vin", sa.String(length=32), nullable=True),
        sa.Column("color", sa.String(length=50), nullable=True),
        sa.Column("capacity", sa.Float(), nullable=True),
        sa.Column("status", vehicle_status, nullable=False),
        sa.Column("driver_id", sa.Uuid(), nullable=True),
        sa.Column("unit_number", sa.String(length=64), nullable=True),
        sa.Column("driver_name", sa.String(length=255), nullable=True),
        sa.Column("dimensions", sa.String(length=255), nullable=True),
        sa.Column("payload", sa.String(length=255), nullable=True),
        sa.Column("registration_exp_date", sa.Date(), nullable=True),
        sa.Column("insurance_exp_date", sa.Date(), nullable=True),
        sa.Column("documents", sa.JSON(), nullable=False),
        sa.Column("created_by_id", sa.String(length=128), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(["driver_id"], ["employees.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("license_plate"),
        sa.UniqueConstraint("vin"),
    )
    op.create_index(op.f("ix_vehicles_driver_id"), "vehicles", ["driver_id"])
    op.create_index(op.f("ix_vehicles_created_by_id"), "vehicles", ["created_by_id"])

    op.create_table(
        "units",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("vehicle_id", sa.Uuid(), nullable=False),
        sa.Column("unit_number", sa.String(length=64), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("availability", unit_availability, nullable=False),
        sa.Column("location", sa.String(length=255), nullable=True),
        sa.Column("zip_code", sa.String(length=20), nullable=True),
        sa.Column("available_time", sa.String(length=100), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("dimensions", sa.String(length=255), nullable=True),
        sa.Column("payload", sa.String(length=255), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(["vehicle_id"], ["vehicles.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("vehicle_id"),
    )

    op.create_table(
        "orders",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("order_number", sa.String(length=32), nullable=False),
        sa.Column("customer_id", sa.Uuid(), nullable=False),
        sa.Column("vehicle_id", sa.Uuid(), nullable=True),
        sa.Column("driver_kind", driver_kind, nullable=True),
        sa.Column("driver_ref_id", sa.String(length=128), nullable=True),
        sa.Column("employee_id", sa.Uuid(), nullable=True),
        sa.Column("status", order_status, nullable=False),
        sa.Column("priority", order_priority, nullable=False),
        sa.Column("customer_load_number", sa.String(length=64), nullable=True),
        sa.Column("pickup_address", sa.String(length=500), nullable=False),
        sa.Column("delivery_address", sa.String(length=500), nullable=False),
        sa.Column("pickup_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("delivery_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("miles", sa.Float(), nullable=True),
        sa.Column("pieces", sa.Integer(), nullable=True),
        sa.Column("weight", sa.Float(), nullable=True),
        sa.Column("load_pay", sa.Float(), nullable=True),
        sa.Column("driver_pay", sa.Float(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("documents", sa.JSON(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(["customer_id"], ["customers.id"]),
        sa.ForeignKeyConstraint(["vehicle_id"], ["vehicles.id"]),
        sa.ForeignKeyConstraint(["employee_id"], ["employees.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_orders_order_number"), "orders", ["order_number"], unique=True)
    op.create_index(op.f("ix_orders_customer_id"), "orders", ["customer_id"])
    op.create_index(op.f("ix_orders_vehicle_id"), "orders", ["vehicle_id"])

    op.create_table(
        "tracking_events",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("order_id", sa.Uuid(), nullable=False),
        sa.Column("status", sa.String(length=32), nullable=False),
        sa.Column("location", sa.JSON(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("timestamp", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["order_id"], ["orders.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_tracking_events_order_id"), "tracking_events", ["order_id"])


def downgrade() -> None:
    op.drop_index(op.f("ix_tracking_events_order_id"), table_name="tracking_events")
    op.drop_table("tracking_events")

    op.drop_index(op.f("ix_orders_vehicle_id"), table_name="orders")
    op.drop_index(op.f("ix_orders_customer_id"), table_name="orders")
    op.drop_index(op.f("ix_orders_order_number"), table_name="orders")
    op.drop_table("orders")

    op.drop_table("units")

    op.drop_index(op.f("ix_vehicles_created_by_id"), table_name="vehicles")
    op.drop_index(op.f("ix_vehicles_driver_id"), table_name="vehicles")
    op.drop_table("vehicles")

    op.drop_index(op.f("ix_employees_created_by_id"), table_name="employees")
    op.drop_table("employees")

    op.drop_index(op.f("ix_customers_created_by_id"), table_name="customers")
    op.drop_table("customers")

    bind = op.get_bind()
    for enum_type in (
        driver_kind,
        order_priority,
        order_status,
        unit_availability,
        vehicle_status,
        employee_status,
    ):
        enum_type.drop(bind, checkfirst=True)
