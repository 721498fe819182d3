from fleetdesk.config import settings
from fleetdesk.errors import conflict
from fleetdesk.models.order import OrderStatus
from fleetdesk.observability import log_event

ORDER_STATE_TRANSITIONS: dict[OrderStatus, set[OrderStatus]] = {
    OrderStatus.PENDING: {OrderStatus.ASSIGNED, OrderStatus.CANCELLED},
    OrderStatus.ASSIGNED: {OrderStatus.IN_TRANSIT, OrderStatus.PENDING, OrderStatus.CANCELLED},
    OrderStatus.IN_TRANSIT: {OrderStatus.DELIVERED, OrderStatus.RETURNED, OrderStatus.CANCELLED},
    OrderStatus.DELIVERED: {OrderStatus.RETURNED},
    OrderStatus.RETURNED: {OrderStatus.PENDING},
    OrderStatus.CANCELLED: set(),
}

DELETABLE_STATUSES = frozenset({OrderStatus.PENDING, OrderStatus.ASSIGNED})
ACTIVE_STATUSES = (OrderStatus.ASSIGNED, OrderStatus.IN_TRANSIT)


def is_valid_transition(current: OrderStatus, next_status: OrderStatus) -> bool:
    if next_status == current:
        return True
    return next_status in ORDER_STATE_TRANSITIONS.get(current, set())


def check_transition(
    current: OrderStatus,
    next_status: OrderStatus,
    *,
    order_id: str | None = None,
    enforce: bool | None = None,
) -> None:
    """Consult the transition table before a status change.

    Illegal moves are always logged. They are only rejected when enforcement is
    switched on, either per call or through ``enforce_order_transitions``.
    """
    if is_valid_transition(current, next_status):
        return

    if enforce is None:
        enforce = settings.enforce_order_transitions

    log_event(
        "order_status_transition_unchecked",
        order_id=order_id,
    )
    if enforce:
        raise conflict(f"Invalid status transition: {current.value} -> {next_status.value}")


def can_delete(status: OrderStatus) -> bool:
    return status in DELETABLE_STATUSES
