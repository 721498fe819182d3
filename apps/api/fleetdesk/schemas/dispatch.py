import uuid

from pydantic import AliasChoices, BaseModel, Field

from fleetdesk.schemas.common import ResponseModel
from fleetdesk.schemas.employee import EmployeeResponse
from fleetdesk.schemas.order import ActiveOrderResponse, OrderResponse
from fleetdesk.schemas.vehicle import VehicleResponse


class AssignOrderRequest(BaseModel):
    order_id: uuid.UUID = Field(validation_alias=AliasChoices("order_id", "orderId"))
    vehicle_id: uuid.UUID = Field(validation_alias=AliasChoices("vehicle_id", "vehicleId"))
    driver_id: uuid.UUID = Field(validation_alias=AliasChoices("driver_id", "driverId"))


class DashboardStats(ResponseModel):
    pending_count: int
    active_count: int
    available_vehicles_count: int
    available_drivers_count: int


class DashboardResponse(ResponseModel):
    pending_orders: list[OrderResponse]
    active_orders: list[ActiveOrderResponse]
    available_vehicles: list[VehicleResponse]
    available_drivers: list[EmployeeResponse]
    recent_dispatches: list[ActiveOrderResponse]
    stats: DashboardStats
