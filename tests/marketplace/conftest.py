import pytest

from marketplace.account.user import User


@pytest.fixture()
def customer():
    return User.register(email="asha@example.com", password="secret123", name="Asha", role="customer")


@pytest.fixture()
def shopkeeper():
    user = User.register(email="vijay@example.com", password="secret123", name="Vijay Kumar", role="shopkeeper")
    user.shop_id = "shop-001"
    return user


@pytest.fixture()
def contact():
    return {
        "customer_name": "Asha",
        "customer_email": "asha@example.com",
        "customer_phone": "+91 98765 43210",
        "customer_address": "12 Lake Road",
        "customer_city": "Delhi",
        "customer_pincode": "110001",
    }


@pytest.fixture()
def order_lines():
    return [
        {"product_id": "p1", "product_name": "Fresh Tomatoes", "quantity": 2, "price": 40.0},
        {"product_id": "p2", "product_name": "Basmati Rice", "quantity": 1, "price": 350.0},
    ]
