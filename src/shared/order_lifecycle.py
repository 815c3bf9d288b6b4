"""Order status lifecycle shared by the marketplace API and the storefront client.

State Machine:
    PENDING → CONFIRMED → PREPARING → READY → DELIVERED
    CANCELLED (from PENDING only)

Only the immediate successor is a legal forward move; DELIVERED and
CANCELLED are terminal. Status changes are performed by the shopkeeper who
owns the order's shop. Everything here is pure so it can be evaluated on
either side of the wire.
"""

from dataclasses import dataclass
from enum import Enum


class OrderStatus(Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    PREPARING = "preparing"
    READY = "ready"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class ActorRole(Enum):
    CUSTOMER = "customer"
    SHOPKEEPER = "shopkeeper"


class DenialReason(Enum):
    NOT_SHOPKEEPER = "not_shopkeeper"
    WRONG_SHOP = "wrong_shop"
    ILLEGAL_TRANSITION = "illegal_transition"
    UNKNOWN_STATUS = "unknown_status"


STATUS_FLOW = (
    OrderStatus.PENDING,
    OrderStatus.CONFIRMED,
    OrderStatus.PREPARING,
    OrderStatus.READY,
    OrderStatus.DELIVERED,
)

TERMINAL_STATES = frozenset({OrderStatus.DELIVERED, OrderStatus.CANCELLED})

# States from which cancellation is allowed
CANCELLABLE_STATES = frozenset({OrderStatus.PENDING})


@dataclass(frozen=True)
class Decision:
    allowed: bool
    reason: DenialReason | None = None
    message: str = ""

    def __bool__(self):
        return self.allowed


ALLOWED = Decision(allowed=True)


def _coerce(status):
    if isinstance(status, OrderStatus):
        return status
    try:
        return OrderStatus(status)
    except ValueError:
        return None


def next_status(status):
    """Return the successor of ``status`` in the forward flow, or None."""
    current = _coerce(status)
    if current is None or current in TERMINAL_STATES:
        return None
    index = STATUS_FLOW.index(current)
    return STATUS_FLOW[index + 1]


def legal_targets(status):
    """All statuses reachable from ``status`` in one step."""
    current = _coerce(status)
    if current is None:
        return frozenset()
    targets = set()
    successor = next_status(current)
    if successor is not None:
        targets.add(successor)
    if current in CANCELLABLE_STATES:
        targets.add(OrderStatus.CANCELLED)
    return frozenset(targets)


def is_terminal(status):
    return _coerce(status) in TERMINAL_STATES


def check_transition(current, target):
    """Validate a status change independent of who performs it."""
    current_status, target_status = _coerce(current), _coerce(target)
    if current_status is None or target_status is None:
        return Decision(False, DenialReason.UNKNOWN_STATUS, "Invalid status")
    if target_status not in legal_targets(current_status):
        return Decision(
            False,
            DenialReason.ILLEGAL_TRANSITION,
            f"Cannot transition from {current_status.value} to {target_status.value}",
        )
    return ALLOWED


def can_transition(actor_role, actor_shop_id, order, target):
    """Decide whether an actor may move ``order`` to ``target``.

    Args:
        actor_role: ``ActorRole`` or its string value.
        actor_shop_id: The shop linked to the actor, if any.
        order: Anything exposing ``shop_id`` and ``status`` (attribute or mapping key).
        target: ``OrderStatus`` or its string value.
    """
    role = actor_role.value if isinstance(actor_role, ActorRole) else actor_role
    if role != ActorRole.SHOPKEEPER.value:
        return Decision(False, DenialReason.NOT_SHOPKEEPER, "Only shopkeepers can update order status")

    shop_id = _field(order, "shop_id")
    if not actor_shop_id or str(shop_id) != str(actor_shop_id):
        return Decision(False, DenialReason.WRONG_SHOP, "Not authorized to update this order")

    return check_transition(_field(order, "status"), target)


def _field(order, name):
    if isinstance(order, dict):
        return order.get(name)
    return getattr(order, name, None)
