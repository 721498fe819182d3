from __future__ import annotations

import enum
import uuid
from datetime import date, datetime
from typing import TYPE_CHECKING

from sqlalchemy import (
    JSON,
    Date,
    DateTime,
    Enum,
    Float,
    ForeignKey,
    Integer,
    String,
    Uuid,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from fleetdesk.db.base import Base
from fleetdesk.models._common import now_utc

if TYPE_CHECKING:
    from fleetdesk.models.employee import Employee
    from fleetdesk.models.order import Order
    from fleetdesk.models.unit import Unit


class VehicleStatus(str, enum.Enum):
    AVAILABLE = "AVAILABLE"
    IN_USE = "IN_USE"
    MAINTENANCE = "MAINTENANCE"
    OUT_OF_SERVICE = "OUT_OF_SERVICE"


class Vehicle(Base):
    __tablename__ = "vehicles"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    make: Mapped[str] = mapped_column(String(100), nullable=False)
    model: Mapped[str] = mapped_column(String(100), nullable=False)
    year: Mapped[int] = mapped_column(Integer, nullable=False)
    license_plate: Mapped[str] = mapped_column(String(32), unique=True, nullable=False)
    # NULLs never collide under a unique constraint, so absent VINs are fine.
    vin: Mapped[str | None] = mapped_column(String(32), unique=True, nullable=True)
    color: Mapped[str | None] = mapped_column(String(50), nullable=True)
    capacity: Mapped[float | None] = mapped_column(Float, nullable=True)
    status: Mapped[VehicleStatus] = mapped_column(
        Enum(VehicleStatus, name="vehicle_status"),
        nullable=False,
        default=VehicleStatus.AVAILABLE,
    )
    driver_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("employees.id", ondelete="SET NULL"), nullable=True, index=True
    )

    unit_number: Mapped[str | None] = mapped_column(String(64), nullable=True)
    driver_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    dimensions: Mapped[str | None] = mapped_column(String(255), nullable=True)
    payload: Mapped[str | None] = mapped_column(String(255), nullable=True)
    registration_exp_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    insurance_exp_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    documents: Mapped[list] = mapped_column(JSON, nullable=False, default=list)

    created_by_id: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=now_utc, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=now_utc,
        server_default=func.now(),
        onupdate=now_utc,
    )

    driver: Mapped[Employee | None] = relationship(back_populates="vehicles")
    unit: Mapped[Unit | None] = relationship(
        back_populates="vehicle", uselist=False, cascade="all, delete-orphan", passive_deletes=True
    )
    orders: Mapped[list[Order]] = relationship(back_populates="vehicle")

    @property
    def display_name(self) -> str:
        return f"{self.make} {self.model} ({self.license_plate})"

    @property
    def active_orders(self) -> list[Order]:
        from fleetdesk.models.order import OrderStatus

        active = (OrderStatus.ASSIGNED, OrderStatus.IN_TRANSIT)
        return [order for order in self.orders if order.status in active]
