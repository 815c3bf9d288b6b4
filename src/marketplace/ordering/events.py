"""Domain events for the Order aggregate."""

from protean.fields import DateTime, Float, Identifier, String, Text

from marketplace.domain import marketplace


@marketplace.event(part_of="Order")
class OrderPlaced:
    """A customer placed an order with a shop."""

    __version__ = 1

    order_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    shop_id = Identifier(required=True)
    items = Text(required=True)  # JSON list of line dicts
    total = Float(required=True)
    payment_method = String(max_length=50)
    placed_at = DateTime(required=True)


@marketplace.event(part_of="Order")
class OrderStatusChanged:
    """The owning shopkeeper moved the order to a new status."""

    __version__ = 1

    order_id = Identifier(required=True)
    shop_id = Identifier(required=True)
    previous_status = String(required=True, max_length=20)
    new_status = String(required=True, max_length=20)
    changed_by = Identifier(required=True)
    changed_at = DateTime(required=True)
