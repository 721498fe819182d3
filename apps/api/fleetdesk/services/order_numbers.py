import re
import time

from sqlalchemy import select
from sqlalchemy.orm import Session

from fleetdesk.config import settings
from fleetdesk.models.order import Order
from fleetdesk.observability import log_event

_NUMERIC_ORDER_NUMBER = re.compile(r"\d+", re.ASCII)


def _next_sequential_number(db: Session) -> str:
    numbers = db.scalars(select(Order.order_number))
    highest = max(
        (int(value) for value in numbers if _NUMERIC_ORDER_NUMBER.fullmatch(value)),
        default=0,
    )
    return str(highest + 1)


def _fallback_order_number() -> str:
    return f"ORD-{int(time.time() * 1000)}"


def allocate_order_number(db: Session, max_attempts: int | None = None) -> str:
    """Return the next free order number.

    Numbers are small sequential integers ("1", "2", ...). Non-numeric legacy
    numbers are ignored when computing the maximum. Every attempt rescans the
    table, so this is best effort under concurrent allocation; the unique
    constraint on ``orders.order_number`` stays the final guard.
    """
    attempts = max_attempts if max_attempts is not None else settings.order_number_max_attempts
    for _ in range(attempts):
        candidate = _next_sequential_number(db)
        taken = db.scalar(select(Order.id).where(Order.order_number == candidate))
        if taken is None:
            return candidate

    fallback = _fallback_order_number()
    log_event("order_number_fallback", order_id=fallback)
    return fallback
