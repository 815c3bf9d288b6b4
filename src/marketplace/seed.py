"""Demo data for a freshly started in-memory marketplace.

Everything is created through the regular commands so the same ownership
rules apply as for API traffic. Must run inside the domain context.
"""

from protean.utils.globals import current_domain

from marketplace.account.registration import RegisterUser
from marketplace.account.lookup import user_for_token
from marketplace.catalogue.management import CreateProduct
from marketplace.domain import logger
from marketplace.shop.management import CreateShop

DEMO_PASSWORD = "demo123"

DEMO_CUSTOMER = {"email": "asha@localmart.test", "name": "Asha Verma"}

DEMO_SHOPS = [
    {
        "owner": {"email": "vijay@localmart.test", "name": "Vijay Kumar"},
        "shop": {
            "shop_name": "Vijay Grocery Store",
            "category": "Grocery",
            "address": "123 Main Street",
            "city": "Delhi",
            "phone": "+91 98765 43210",
            "timings": "9:00 AM - 9:00 PM",
            "description": "Fresh vegetables, fruits, and daily essentials. Home delivery available.",
        },
        "products": [
            {
                "name": "Fresh Tomatoes",
                "description": "Fresh red tomatoes, 1kg pack",
                "price": 40.0,
                "category": "Vegetables",
                "stock": 50,
            },
            {
                "name": "Basmati Rice",
                "description": "Premium basmati rice, 5kg pack",
                "price": 350.0,
                "category": "Grains",
                "stock": 30,
            },
            {
                "name": "Fresh Milk",
                "description": "Pure cow milk, 1 liter",
                "price": 60.0,
                "category": "Dairy",
                "stock": 100,
            },
        ],
    },
    {
        "owner": {"email": "rajesh@localmart.test", "name": "Rajesh Singh"},
        "shop": {
            "shop_name": "Raj Electronics",
            "category": "Electronics",
            "address": "456 Market Road",
            "city": "Delhi",
            "phone": "+91 98765 43211",
            "timings": "10:00 AM - 8:00 PM",
            "description": "Mobile phones, accessories, and electronic gadgets. Best prices guaranteed.",
        },
        "products": [
            {
                "name": "Wireless Earbuds",
                "description": "Bluetooth 5.0, 20hr battery life",
                "price": 1299.0,
                "category": "Audio",
                "stock": 25,
            },
            {
                "name": "Phone Case",
                "description": "Shockproof phone case for all models",
                "price": 299.0,
                "category": "Accessories",
                "stock": 50,
            },
            {
                "name": "Power Bank 10000mAh",
                "description": "Fast charging power bank",
                "price": 899.0,
                "category": "Accessories",
                "stock": 40,
            },
        ],
    },
]


def _register(email, name, role):
    token = current_domain.process(
        RegisterUser(email=email, password=DEMO_PASSWORD, name=name, role=role),
        asynchronous=False,
    )
    return user_for_token(token)


def seed_demo_data():
    """Create the demo customer, shopkeepers, shops and products.

    Returns a summary dict of the created ids.
    """
    summary = {"customer_id": None, "shops": []}

    customer = _register(DEMO_CUSTOMER["email"], DEMO_CUSTOMER["name"], "customer")
    summary["customer_id"] = str(customer.id)

    for entry in DEMO_SHOPS:
        owner = _register(entry["owner"]["email"], entry["owner"]["name"], "shopkeeper")
        shop_id = current_domain.process(CreateShop(actor_id=str(owner.id), **entry["shop"]), asynchronous=False)

        product_ids = [
            current_domain.process(
                CreateProduct(actor_id=str(owner.id), shop_id=shop_id, **product),
                asynchronous=False,
            )
            for product in entry["products"]
        ]
        summary["shops"].append({"shop_id": shop_id, "product_ids": product_ids})

    logger.info("demo_data_seeded", shops=len(summary["shops"]))
    return summary
