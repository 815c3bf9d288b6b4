import pytest
from fastapi.testclient import TestClient

from marketplace.api.app import create_app


@pytest.fixture()
def client():
    return TestClient(create_app())


def _signup(client, email, role="customer", name="Test User"):
    response = client.post(
        "/api/auth/register",
        json={"email": email, "password": "secret123", "name": name, "role": role},
    )
    assert response.status_code == 201
    return {"Authorization": f"Bearer {response.json()['token']}"}


@pytest.fixture()
def signup(client):
    """Register through the API and return bearer headers for the new user."""
    return lambda email, role="customer", name="Test User": _signup(client, email, role, name)


@pytest.fixture()
def customer_headers(signup):
    return signup("asha@example.com", name="Asha")


@pytest.fixture()
def shopkeeper_headers(signup):
    return signup("vijay@example.com", role="shopkeeper", name="Vijay Kumar")


@pytest.fixture()
def shop(client, shopkeeper_headers):
    response = client.post(
        "/api/shops",
        json={
            "shop_name": "Vijay Grocery Store",
            "category": "Grocery",
            "address": "123 Main Street",
            "city": "Delhi",
            "phone": "+91 98765 43210",
        },
        headers=shopkeeper_headers,
    )
    assert response.status_code == 201
    return response.json()["shop"]


@pytest.fixture()
def product(client, shopkeeper_headers, shop):
    response = client.post(
        "/api/products",
        json={
            "name": "Fresh Tomatoes",
            "description": "Fresh red tomatoes, 1kg pack",
            "price": 40,
            "category": "Vegetables",
            "shop_id": shop["id"],
            "stock": 50,
        },
        headers=shopkeeper_headers,
    )
    assert response.status_code == 201
    return response.json()["product"]


@pytest.fixture()
def order_payload(shop):
    return {
        "items": [
            {"product_id": "p1", "product_name": "Fresh Tomatoes", "quantity": 2, "price": 40},
            {"product_id": "p2", "product_name": "Basmati Rice", "quantity": 1, "price": 350},
        ],
        "shop_id": shop["id"],
        "customer_name": "Asha",
        "customer_email": "asha@example.com",
        "customer_phone": "+91 98765 43210",
        "customer_address": "12 Lake Road",
        "customer_city": "Delhi",
        "customer_pincode": "110001",
    }


@pytest.fixture()
def order(client, customer_headers, order_payload):
    response = client.post("/api/orders", json=order_payload, headers=customer_headers)
    assert response.status_code == 201
    return response.json()["order"]
