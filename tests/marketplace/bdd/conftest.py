"""Shared BDD fixtures and step definitions for the order status lifecycle."""

import pytest
from protean.exceptions import ValidationError
from pytest_bdd import given, parsers, then

from marketplace.account.user import User
from marketplace.exceptions import NotAuthorized
from marketplace.ordering.events import OrderStatusChanged
from marketplace.ordering.order import Order
from shared.order_lifecycle import next_status


@pytest.fixture()
def error():
    """Container for the exception raised by the last When step."""
    return {"exc": None}


def _actor(role, shop_id=None):
    user = User.register(email=f"{role}@example.com", password="secret123", name=role.title(), role=role)
    user.shop_id = shop_id
    return user


@pytest.fixture()
def make_actor():
    return _actor


@pytest.fixture()
def attempt(error):
    """Try a status change, capturing a rejection instead of raising it."""

    def _attempt(order, actor, status):
        try:
            order.change_status(actor, status)
        except (ValidationError, NotAuthorized) as exc:
            error["exc"] = exc

    return _attempt


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.parse('a pending order for shop "{shop_id}"'), target_fixture="order")
def _(shop_id, contact, order_lines):
    order = Order.place(
        customer_id="cust-001",
        shop_id=shop_id,
        shop_name="Vijay Grocery Store",
        items_data=order_lines,
        contact=contact,
    )
    order._events.clear()
    return order


@given(parsers.parse('the shopkeeper of "{shop_id}" has moved the order to "{status}"'))
def _(order, shop_id, status):
    order.change_status(_actor("shopkeeper", shop_id), status)
    order._events.clear()


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.parse('the order status is "{status}"'))
def _(order, status):
    assert order.status == status


@then("an OrderStatusChanged event is raised")
def _(order):
    assert any(isinstance(event, OrderStatusChanged) for event in order._events)


@then("the order offers no further step")
def _(order):
    assert next_status(order.status) is None


@then(parsers.parse('the change is rejected with "{message}"'))
def _(error, message):
    assert isinstance(error["exc"], ValidationError)
    assert error["exc"].messages["status"] == [message]


@then(parsers.parse('the change is forbidden with "{message}"'))
def _(error, message):
    assert isinstance(error["exc"], NotAuthorized)
    assert error["exc"].message == message
