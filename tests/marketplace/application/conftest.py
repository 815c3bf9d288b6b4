import pytest
from protean import current_domain

from marketplace.account.lookup import user_for_token
from marketplace.account.registration import RegisterUser
from marketplace.catalogue.management import CreateProduct
from marketplace.shop.management import CreateShop


def _register(email, role="customer", name="Test User", password="secret123"):
    token = current_domain.process(
        RegisterUser(email=email, password=password, name=name, role=role),
        asynchronous=False,
    )
    return user_for_token(token)


@pytest.fixture()
def customer():
    return _register("asha@example.com", name="Asha")


@pytest.fixture()
def shopkeeper():
    return _register("vijay@example.com", role="shopkeeper", name="Vijay Kumar")


@pytest.fixture()
def shop_id(shopkeeper):
    return current_domain.process(
        CreateShop(
            actor_id=str(shopkeeper.id),
            shop_name="Vijay Grocery Store",
            category="Grocery",
            address="123 Main Street",
            city="Delhi",
            phone="+91 98765 43210",
        ),
        asynchronous=False,
    )


@pytest.fixture()
def product_id(shopkeeper, shop_id):
    return current_domain.process(
        CreateProduct(
            actor_id=str(shopkeeper.id),
            shop_id=shop_id,
            name="Fresh Tomatoes",
            description="Fresh red tomatoes, 1kg pack",
            price=40.0,
            category="Vegetables",
            stock=50,
        ),
        asynchronous=False,
    )


@pytest.fixture()
def register():
    """Register a user through the command and return the stored aggregate."""
    return _register
