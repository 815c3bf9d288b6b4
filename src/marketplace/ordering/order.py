"""Order aggregate — a customer's purchase from a single shop.

State Machine (see ``shared.order_lifecycle``):
    PENDING → CONFIRMED → PREPARING → READY → DELIVERED
    CANCELLED (from PENDING only)

The total is derived from the submitted lines when the order is placed and
never recomputed. Orders are never deleted.
"""

import json
from datetime import UTC, datetime

from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, HasMany, Identifier, Integer, String

from marketplace.domain import marketplace
from marketplace.exceptions import NotAuthorized
from marketplace.ordering.events import OrderPlaced, OrderStatusChanged
from shared.order_lifecycle import DenialReason, OrderStatus, can_transition

DEFAULT_PAYMENT_METHOD = "cod"

CONTACT_FIELDS = (
    "customer_name",
    "customer_email",
    "customer_phone",
    "customer_address",
    "customer_city",
    "customer_pincode",
)


@marketplace.entity(part_of="Order")
class OrderLine:
    """A product and quantity as it was priced at checkout."""

    product_id = Identifier(required=True)
    product_name = String(required=True, max_length=255)
    quantity = Integer(required=True, min_value=1)
    price = Float(required=True, min_value=0.0)


@marketplace.aggregate
class Order:
    customer_id = Identifier(required=True)
    customer_name = String(required=True, max_length=100)
    customer_email = String(required=True, max_length=255)
    customer_phone = String(required=True, max_length=30)
    customer_address = String(required=True, max_length=255)
    customer_city = String(required=True, max_length=100)
    customer_pincode = String(required=True, max_length=20)
    shop_id = Identifier(required=True)
    shop_name = String(max_length=255)
    items = HasMany(OrderLine)
    total = Float(default=0.0)
    status = String(choices=OrderStatus, default=OrderStatus.PENDING.value)
    payment_method = String(max_length=50, default=DEFAULT_PAYMENT_METHOD)
    created_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def place(cls, customer_id, shop_id, shop_name, items_data, contact, payment_method=None):
        """Create a pending order.

        Args:
            customer_id: The customer placing the order.
            shop_id: The shop fulfilling every line.
            shop_name: Display name captured at checkout.
            items_data: List of dicts with product_id, product_name, quantity, price.
            contact: Dict with the ``CONTACT_FIELDS`` keys.
            payment_method: Defaults to cash on delivery.
        """
        if not items_data:
            raise ValidationError({"items": ["At least one item is required"]})

        now = datetime.now(UTC)
        order = cls(
            customer_id=customer_id,
            shop_id=shop_id,
            shop_name=shop_name,
            status=OrderStatus.PENDING.value,
            payment_method=payment_method or DEFAULT_PAYMENT_METHOD,
            created_at=now,
            updated_at=now,
            **{field: contact.get(field) for field in CONTACT_FIELDS},
        )
        for item in items_data:
            order.add_items(
                OrderLine(
                    product_id=item.get("product_id"),
                    product_name=item.get("product_name"),
                    quantity=item.get("quantity"),
                    price=item.get("price"),
                )
            )
        order.total = sum(line.price * line.quantity for line in order.items)

        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                customer_id=str(customer_id),
                shop_id=str(shop_id),
                items=json.dumps(items_data),
                total=order.total,
                payment_method=order.payment_method,
                placed_at=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # Status transitions
    # -------------------------------------------------------------------
    def change_status(self, actor, target_status):
        """Move the order to ``target_status`` on behalf of ``actor``.

        Nothing is mutated when the change is rejected.
        """
        decision = can_transition(actor.role, actor.shop_id, self, target_status)
        if not decision:
            if decision.reason in (DenialReason.NOT_SHOPKEEPER, DenialReason.WRONG_SHOP):
                raise NotAuthorized(decision.message)
            raise ValidationError({"status": [decision.message]})

        previous = self.status
        now = datetime.now(UTC)
        self.status = OrderStatus(target_status).value
        self.updated_at = now

        self.raise_(
            OrderStatusChanged(
                order_id=str(self.id),
                shop_id=str(self.shop_id),
                previous_status=previous,
                new_status=self.status,
                changed_by=str(actor.id),
                changed_at=now,
            )
        )

    def visible_to(self, user):
        if user.is_shopkeeper:
            return bool(user.shop_id) and str(self.shop_id) == str(user.shop_id)
        return str(self.customer_id) == str(user.id)
