from __future__ import annotations

import enum
import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import (
    JSON,
    DateTime,
    Enum,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    Uuid,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from fleetdesk.db.base import Base
from fleetdesk.models._common import now_utc

if TYPE_CHECKING:
    from fleetdesk.models.customer import Customer
    from fleetdesk.models.employee import Employee
    from fleetdesk.models.tracking_event import TrackingEvent
    from fleetdesk.models.vehicle import Vehicle


class OrderStatus(str, enum.Enum):
    PENDING = "PENDING"
    ASSIGNED = "ASSIGNED"
    IN_TRANSIT = "IN_TRANSIT"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"
    RETURNED = "RETURNED"


class OrderPriority(str, enum.Enum):
    LOW = "LOW"
    NORMAL = "NORMAL"
    HIGH = "HIGH"
    URGENT = "URGENT"


class DriverKind(str, enum.Enum):
    USER = "USER"
    EMPLOYEE = "EMPLOYEE"


@dataclass(frozen=True)
class DriverRef:
    kind: DriverKind
    id: str


class Order(Base):
    __tablename__ = "orders"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    order_number: Mapped[str] = mapped_column(String(32), unique=True, nullable=False, index=True)
    customer_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("customers.id"), nullable=False, index=True
    )
    vehicle_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("vehicles.id"), nullable=True, index=True
    )
    driver_kind: Mapped[DriverKind | None] = mapped_column(
        Enum(DriverKind, name="driver_kind"), nullable=True
    )
    driver_ref_id: Mapped[str | None] = mapped_column(String(128), nullable=True)
    employee_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("employees.id", ondelete="SET NULL"), nullable=True
    )

    status: Mapped[OrderStatus] = mapped_column(
        Enum(OrderStatus, name="order_status"), nullable=False, default=OrderStatus.PENDING
    )
    priority: Mapped[OrderPriority] = mapped_column(
        Enum(OrderPriority, name="order_priority"), nullable=False, default=OrderPriority.NORMAL
    )

    customer_load_number: Mapped[str | None] = mapped_column(String(64), nullable=True)
    pickup_address: Mapped[str] = mapped_column(String(500), nullable=False)
    delivery_address: Mapped[str] = mapped_column(String(500), nullable=False)
    pickup_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    delivery_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    miles: Mapped[float | None] = mapped_column(Float, nullable=True)
    pieces: Mapped[int | None] = mapped_column(Integer, nullable=True)
    weight: Mapped[float | None] = mapped_column(Float, nullable=True)
    load_pay: Mapped[float | None] = mapped_column(Float, nullable=True)
    driver_pay: Mapped[float | None] = mapped_column(Float, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    documents: Mapped[list] = mapped_column(JSON, nullable=False, default=list)

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

    customer: Mapped[Customer] = relationship(back_populates="orders")
    vehicle: Mapped[Vehicle | None] = relationship(back_populates="orders")
    employee: Mapped[Employee | None] = relationship()
    tracking_events: Mapped[list[TrackingEvent]] = relationship(
        back_populates="order",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="TrackingEvent.timestamp",
    )

    @property
    def driver(self) -> DriverRef | None:
        if self.driver_kind is None or self.driver_ref_id is None:
            return None
        return DriverRef(kind=self.driver_kind, id=self.driver_ref_id)

    @driver.setter
    def driver(self, ref: DriverRef | None) -> None:
        if ref is None:
            self.driver_kind = None
            self.driver_ref_id = None
            return
        self.driver_kind = ref.kind
        self.driver_ref_id = ref.id

    @property
    def latest_tracking_event(self) -> TrackingEvent | None:
        return self.tracking_events[-1] if self.tracking_events else None
