"""Turn the cart into a single order and empty the ordered lines afterwards."""

import structlog

from storefront.validation import validate_checkout_form

logger = structlog.get_logger(__name__)

DEFAULT_PAYMENT_METHOD = "cod"

CONTACT_FIELDS = {
    "name": "customer_name",
    "email": "customer_email",
    "phone": "customer_phone",
    "address": "customer_address",
    "city": "customer_city",
    "pincode": "customer_pincode",
}


class CheckoutError(Exception):
    """Checkout refused locally; nothing was sent."""

    def __init__(self, message, field_errors=None):
        super().__init__(message)
        self.message = message
        self.field_errors = list(field_errors or [])

    def field_messages(self):
        return {error["field"]: error["message"] for error in reversed(self.field_errors)}


class Checkout:
    def __init__(self, api, cart):
        self.api = api
        self.cart = cart

    def items_for(self, shop_id=None):
        """Cart lines of ``shop_id``, or of the only shop in the cart."""
        if not len(self.cart):
            raise CheckoutError("Cart is empty")

        groups = self.cart.by_shop()
        if shop_id is None:
            if len(groups) > 1:
                raise CheckoutError("Cart contains items from several shops; choose one shop to check out")
            shop_id = next(iter(groups))

        group = groups.get(shop_id)
        if group is None:
            raise CheckoutError("No items from this shop in the cart")
        return group["items"]

    def build_order(self, items, details, payment_method=DEFAULT_PAYMENT_METHOD):
        first = items[0]
        order = {
            "items": [
                {
                    "product_id": item.product_id,
                    "product_name": item.product_name,
                    "quantity": item.quantity,
                    "price": item.price,
                }
                for item in items
            ],
            "shop_id": first.shop_id,
            "shop_name": first.shop_name,
            "payment_method": payment_method,
        }
        for field, key in CONTACT_FIELDS.items():
            order[key] = str(details.get(field) or "").strip()
        return order

    async def place_order(self, details, *, shop_id=None, payment_method=DEFAULT_PAYMENT_METHOD, signal=None):
        """Send one order for the selected cart lines and return the created order.

        The lines leave the cart only once the server has accepted the order.
        """
        items = self.items_for(shop_id)

        errors = validate_checkout_form(details)
        if errors:
            raise CheckoutError("Please fix the errors in the form", errors)

        data = await self.api.orders.create(self.build_order(items, details, payment_method), signal=signal)
        self.cart.remove_items(item.id for item in items)

        order = data.get("order", {})
        logger.info("order_placed", order_id=order.get("id"), shop_id=items[0].shop_id)
        return order
