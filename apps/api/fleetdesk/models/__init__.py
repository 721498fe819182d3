# Import SQLAlchemy models so they register on Base.metadata
from fleetdesk.models.customer import Customer  # noqa: F401
from fleetdesk.models.employee import Employee, EmployeeStatus  # noqa: F401
from fleetdesk.models.order import (  # noqa: F401
    DriverKind,
    DriverRef,
    Order,
    OrderPriority,
    OrderStatus,
)
from fleetdesk.models.tracking_event import TrackingEvent  # noqa: F401
from fleetdesk.models.unit import Unit, UnitAvailability  # noqa: F401
from fleetdesk.models.vehicle import Vehicle, VehicleStatus  # noqa: F401
