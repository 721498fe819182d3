from fleetdesk.schemas.common import (
    DocumentIn,
    DocumentOut,
    Envelope,
    MessageEnvelope,
    PageEnvelope,
    Pagination,
)
from fleetdesk.schemas.customer import (
    CustomerCreate,
    CustomerListItem,
    CustomerResponse,
    CustomerUpdate,
)
from fleetdesk.schemas.dispatch import AssignOrderRequest, DashboardResponse, DashboardStats
from fleetdesk.schemas.employee import (
    EmployeeCreate,
    EmployeeResponse,
    EmployeeStatusUpdate,
    EmployeeUpdate,
)
from fleetdesk.schemas.order import (
    ActiveOrderResponse,
    OrderCreate,
    OrderDetailResponse,
    OrderResponse,
    OrderStatusUpdate,
    OrderUpdate,
)
from fleetdesk.schemas.tracking import TrackingEventResponse, TrackingLocation
from fleetdesk.schemas.unit import UnitCreate, UnitResponse, UnitUpdate
from fleetdesk.schemas.vehicle import (
    AvailableVehicleResponse,
    VehicleCreate,
    VehicleDetailResponse,
    VehicleResponse,
    VehicleStatusUpdate,
    VehicleUpdate,
)

__all__ = [
    "ActiveOrderResponse",
    "AssignOrderRequest",
    "AvailableVehicleResponse",
    "CustomerCreate",
    "CustomerListItem",
    "CustomerResponse",
    "CustomerUpdate",
    "DashboardResponse",
    "DashboardStats",
    "DocumentIn",
    "DocumentOut",
    "EmployeeCreate",
    "EmployeeResponse",
    "EmployeeStatusUpdate",
    "EmployeeUpdate",
    "Envelope",
    "MessageEnvelope",
    "OrderCreate",
    "OrderDetailResponse",
    "OrderResponse",
    "OrderStatusUpdate",
    "OrderUpdate",
    "PageEnvelope",
    "Pagination",
    "TrackingEventResponse",
    "TrackingLocation",
    "UnitCreate",
    "UnitResponse",
    "UnitUpdate",
    "VehicleCreate",
    "VehicleDetailResponse",
    "VehicleResponse",
    "VehicleStatusUpdate",
    "VehicleUpdate",
]
