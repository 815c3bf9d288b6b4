"""Order placement — command and handler."""

import json

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from marketplace.account.user import User, normalize_email
from marketplace.domain import logger, marketplace
from marketplace.exceptions import NotAuthorized, NotFound
from marketplace.ordering.order import Order
from marketplace.shop.shop import Shop
from marketplace.utils.repository import load


@marketplace.command(part_of="Order")
class PlaceOrder:
    customer_id = Identifier(required=True)
    shop_id = Identifier(required=True)
    shop_name = String(max_length=255)
    items = Text(required=True)  # JSON: list of line dicts
    customer_name = String(required=True, max_length=100)
    customer_email = String(required=True, max_length=255)
    customer_phone = String(required=True, max_length=30)
    customer_address = String(required=True, max_length=255)
    customer_city = String(required=True, max_length=100)
    customer_pincode = String(required=True, max_length=20)
    payment_method = String(max_length=50)


@marketplace.command_handler(part_of=Order)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        customer = load(User, command.customer_id, "User")
        if not customer.is_customer:
            raise NotAuthorized("Only customers can create orders")

        try:
            shop = load(Shop, command.shop_id, "Shop")
        except NotFound:
            raise ValidationError({"shop_id": ["Shop not found"]}) from None

        items_data = json.loads(command.items) if isinstance(command.items, str) else command.items
        order = Order.place(
            customer_id=str(customer.id),
            shop_id=command.shop_id,
            shop_name=command.shop_name or shop.shop_name,
            items_data=items_data,
            contact={
                "customer_name": command.customer_name,
                "customer_email": normalize_email(command.customer_email),
                "customer_phone": command.customer_phone,
                "customer_address": command.customer_address,
                "customer_city": command.customer_city,
                "customer_pincode": command.customer_pincode,
            },
            payment_method=command.payment_method,
        )
        current_domain.repository_for(Order).add(order)

        logger.info("order_placed", order_id=str(order.id), shop_id=str(order.shop_id), total=order.total)
        return str(order.id)
