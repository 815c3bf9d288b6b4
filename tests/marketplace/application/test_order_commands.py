"""Application tests for placing orders and changing their status."""

import json

import pytest
from protean import current_domain
from protean.exceptions import ValidationError

from marketplace.account.user import User
from marketplace.exceptions import NotAuthorized
from marketplace.ordering.order import Order
from marketplace.ordering.placement import PlaceOrder
from marketplace.ordering.queries import order_for, orders_for
from marketplace.ordering.status import UpdateOrderStatus


def _place_order(customer, shop_id, **overrides):
    fields = {
        "customer_id": str(customer.id),
        "shop_id": shop_id,
        "items": json.dumps(
            [
                {"product_id": "p1", "product_name": "Fresh Tomatoes", "quantity": 2, "price": 40.0},
                {"product_id": "p2", "product_name": "Basmati Rice", "quantity": 1, "price": 350.0},
            ]
        ),
        "customer_name": "Asha",
        "customer_email": "Asha@Example.com",
        "customer_phone": "+91 98765 43210",
        "customer_address": "12 Lake Road",
        "customer_city": "Delhi",
        "customer_pincode": "110001",
    }
    fields.update(overrides)
    return current_domain.process(PlaceOrder(**fields), asynchronous=False)


def _set_status(actor, order_id, status):
    current_domain.process(
        UpdateOrderStatus(actor_id=str(actor.id), order_id=order_id, status=status),
        asynchronous=False,
    )


class TestPlaceOrder:
    def test_place_order_persists_pending_order(self, customer, shop_id):
        order_id = _place_order(customer, shop_id)

        order = current_domain.repository_for(Order).get(order_id)
        assert order.status == "pending"
        assert order.total == 430.0
        assert order.shop_name == "Vijay Grocery Store"
        assert order.customer_email == "asha@example.com"

    def test_shopkeeper_cannot_place_orders(self, shopkeeper, shop_id):
        with pytest.raises(NotAuthorized) as exc_info:
            _place_order(shopkeeper, shop_id)

        assert exc_info.value.message == "Only customers can create orders"

    def test_unknown_shop(self, customer):
        with pytest.raises(ValidationError) as exc_info:
            _place_order(customer, "no-such-shop")

        assert exc_info.value.messages == {"shop_id": ["Shop not found"]}

    def test_empty_items(self, customer, shop_id):
        with pytest.raises(ValidationError):
            _place_order(customer, shop_id, items="[]")


class TestUpdateOrderStatus:
    def test_owner_advances_order(self, customer, shopkeeper, shop_id):
        order_id = _place_order(customer, shop_id)

        _set_status(shopkeeper, order_id, "confirmed")
        _set_status(shopkeeper, order_id, "preparing")

        assert current_domain.repository_for(Order).get(order_id).status == "preparing"

    def test_customer_is_forbidden(self, customer, shop_id):
        order_id = _place_order(customer, shop_id)

        with pytest.raises(NotAuthorized):
            _set_status(customer, order_id, "confirmed")

        assert current_domain.repository_for(Order).get(order_id).status == "pending"

    def test_rival_shopkeeper_is_forbidden(self, customer, shop_id, register):
        order_id = _place_order(customer, shop_id)
        rival = register("rival@example.com", role="shopkeeper")

        with pytest.raises(NotAuthorized) as exc_info:
            _set_status(rival, order_id, "confirmed")

        assert exc_info.value.message == "Not authorized to update this order"

    def test_illegal_transition_leaves_order_untouched(self, customer, shopkeeper, shop_id):
        order_id = _place_order(customer, shop_id)
        before = current_domain.repository_for(Order).get(order_id)

        with pytest.raises(ValidationError):
            _set_status(shopkeeper, order_id, "delivered")

        after = current_domain.repository_for(Order).get(order_id)
        assert after.status == "pending"
        assert after.updated_at == before.updated_at


class TestOrderQueries:
    def test_customer_sees_own_orders_newest_first(self, customer, shop_id):
        placed = {_place_order(customer, shop_id), _place_order(customer, shop_id)}

        orders = orders_for(customer)
        assert {str(o.id) for o in orders} == placed
        assert orders[0].created_at >= orders[1].created_at

    def test_shopkeeper_sees_shop_orders(self, customer, shopkeeper, shop_id, register):
        _place_order(customer, shop_id)
        other_customer = register("other@example.com")
        _place_order(other_customer, shop_id)

        shopkeeper = current_domain.repository_for(User).get(shopkeeper.id)
        assert len(orders_for(shopkeeper)) == 2
        assert len(orders_for(other_customer)) == 1

    def test_shopkeeper_without_shop_sees_nothing(self, register):
        assert orders_for(register("new@example.com", role="shopkeeper")) == []

    def test_order_for_hides_other_customers_orders(self, customer, shop_id, register):
        order_id = _place_order(customer, shop_id)
        stranger = register("stranger@example.com")

        with pytest.raises(NotAuthorized):
            order_for(stranger, order_id)
        assert str(order_for(customer, order_id).id) == order_id
