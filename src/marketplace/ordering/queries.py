"""Read-side helpers for orders, filtered by who is asking."""

from protean.utils.globals import current_domain

from marketplace.exceptions import NotAuthorized
from marketplace.ordering.order import Order
from marketplace.utils.repository import load


def orders_for(user):
    """Shopkeepers see their shop's orders, customers see their own."""
    repo = current_domain.repository_for(Order)
    if user.is_shopkeeper:
        if not user.shop_id:
            return []
        orders = repo._dao.query.filter(shop_id=str(user.shop_id)).all().items
    else:
        orders = repo._dao.query.filter(customer_id=str(user.id)).all().items
    return sorted(orders, key=lambda order: order.created_at, reverse=True)


def order_for(user, order_id):
    order = load(Order, order_id, "Order")
    if not order.visible_to(user):
        raise NotAuthorized("Not authorized")
    return order
