"""Order lifecycle rules: the status state machine, totals and order numbers.

Status moves forward one stage at a time through placed, preparing, ready
and delivered. Any non-terminal order may be cancelled. Delivered and
cancelled orders accept no further transitions.
"""

import secrets
from collections.abc import Iterable
from datetime import datetime
from decimal import Decimal

from restaurant_manager.errors import InvalidTransitionError
from restaurant_manager.models.common import round_money
from restaurant_manager.models.order_models import OrderLine, OrderStatus

ORDER_NUMBER_PREFIX = "ORD"

ALLOWED_TRANSITIONS: dict[OrderStatus, frozenset[OrderStatus]] = {
    OrderStatus.PLACED: frozenset({OrderStatus.PREPARING, OrderStatus.CANCELLED}),
    OrderStatus.PREPARING: frozenset({OrderStatus.READY, OrderStatus.CANCELLED}),
    OrderStatus.READY: frozenset({OrderStatus.DELIVERED, OrderStatus.CANCELLED}),
    OrderStatus.DELIVERED: frozenset(),
    OrderStatus.CANCELLED: frozenset(),
}

TERMINAL_STATUSES = frozenset(
    status for status, targets in ALLOWED_TRANSITIONS.items() if not targets
)


def allowed_next_statuses(current: OrderStatus) -> frozenset[OrderStatus]:
    """Statuses an order in ``current`` may move to."""
    return ALLOWED_TRANSITIONS[current]


def is_terminal(status: OrderStatus) -> bool:
    return status in TERMINAL_STATUSES


def ensure_transition_allowed(current: OrderStatus, requested: OrderStatus) -> None:
    """Reject any transition missing from the table.

    Raises:
        InvalidTransitionError: If ``requested`` is not reachable from ``current``
    """
    if requested not in allowed_next_statuses(current):
        raise InvalidTransitionError(current.value, requested.value)


def line_total(line: OrderLine) -> Decimal:
    """Quantity times unit price plus customization surcharges."""
    surcharge = sum((c.additional_price for c in line.customizations), Decimal("0"))
    return (line.price + surcharge) * line.quantity


def compute_total(items: Iterable[OrderLine]) -> Decimal:
    """Order total for a list of lines, rounded to cents.

    This is the only place an order total is computed; client-supplied
    totals are never stored.
    """
    return round_money(sum((line_total(line) for line in items), Decimal("0")))


def generate_order_number(now: datetime) -> str:
    """Build an order number such as ``ORD-1705312200000-042``.

    Args:
        now: Creation instant; contributes its epoch milliseconds

    Returns:
        str: Prefix, creation timestamp and a random 3 digit disambiguator
    """
    millis = int(now.timestamp() * 1000)
    return f"{ORDER_NUMBER_PREFIX}-{millis}-{secrets.randbelow(1000):03d}"
