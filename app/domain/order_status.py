# app/domain/order_status.py
from enum import Enum


class OrderStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


#dozwolone przejscia, delivered i cancelled sa terminalne
ALLOWED_TRANSITIONS: dict[OrderStatus, frozenset[OrderStatus]] = {
    OrderStatus.PENDING: frozenset({OrderStatus.CONFIRMED, OrderStatus.CANCELLED}),
    OrderStatus.CONFIRMED: frozenset({OrderStatus.SHIPPED, OrderStatus.CANCELLED}),
    OrderStatus.SHIPPED: frozenset({OrderStatus.DELIVERED}),
    OrderStatus.DELIVERED: frozenset(),
    OrderStatus.CANCELLED: frozenset(),
}


def can_transition(current: OrderStatus | str, new: OrderStatus | str) -> bool:
    """
    Sprawdza czy zamowienie moze przejsc ze statusu current do new.
    Nieznany status zawsze daje False.
    """
    try:
        current = OrderStatus(current)
        new = OrderStatus(new)
    except ValueError:
        return False
    return new in ALLOWED_TRANSITIONS[current]


def is_terminal(status: OrderStatus | str) -> bool:
    return not ALLOWED_TRANSITIONS[OrderStatus(status)]
