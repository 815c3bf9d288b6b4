"""Tests for the client-side shopping cart."""

import pytest

from storefront.cart import CART_KEY, CartItem, CartStore
from storefront.storage import FileStorage, MemoryStorage


def tomatoes(**overrides):
    return {
        "product_id": "p1",
        "product_name": "Fresh Tomatoes",
        "price": 40.0,
        "shop_id": "s1",
        "shop_name": "Vijay Grocery Store",
        **overrides,
    }


def rice(**overrides):
    return {
        "product_id": "p2",
        "product_name": "Basmati Rice",
        "price": 350.0,
        "shop_id": "s1",
        "shop_name": "Vijay Grocery Store",
        **overrides,
    }


def earbuds(**overrides):
    return {
        "product_id": "p3",
        "product_name": "Wireless Earbuds",
        "price": 1299.0,
        "shop_id": "s2",
        "shop_name": "Raj Electronics",
        **overrides,
    }


@pytest.fixture()
def cart():
    return CartStore(MemoryStorage())


class TestAdding:
    def test_totals_follow_quantities(self, cart):
        cart.add_item(tomatoes())
        cart.add_item(tomatoes())
        cart.add_item(rice())

        assert cart.total() == 430
        assert cart.count() == 3
        assert len(cart) == 2

    def test_same_product_merges_into_one_line(self, cart):
        first = cart.add_item(tomatoes())
        second = cart.add_item(tomatoes(price=45.0))

        assert second is first
        assert first.quantity == 2
        assert first.price == 40.0

    def test_added_quantity_is_always_one(self, cart):
        line = cart.add_item(tomatoes(quantity=7))

        assert line.quantity == 1

    def test_generated_line_ids_are_unique(self, cart):
        a = cart.add_item(tomatoes())
        b = cart.add_item(rice())

        assert a.id != b.id
        assert a.id.startswith("p1-")

    def test_accepts_cart_items(self, cart):
        item = CartItem.from_dict({**tomatoes(), "id": "line-1"})

        cart.add_item(item)

        assert cart.get("line-1") is item

    def test_stock_is_not_checked(self, cart):
        for _ in range(60):
            cart.add_item(tomatoes(stock=50))

        assert cart.count() == 60


class TestChanging:
    def test_set_quantity(self, cart):
        line = cart.add_item(tomatoes())

        cart.set_quantity(line.id, 5)

        assert cart.get(line.id).quantity == 5
        assert cart.total() == 200

    def test_zero_quantity_removes_line(self, cart):
        line = cart.add_item(tomatoes())

        cart.set_quantity(line.id, 0)

        assert len(cart) == 0

    def test_remove_item(self, cart):
        line = cart.add_item(tomatoes())
        cart.add_item(rice())

        cart.remove_item(line.id)

        assert [item.product_id for item in cart] == ["p2"]

    def test_remove_items_and_clear(self, cart):
        a = cart.add_item(tomatoes())
        b = cart.add_item(rice())
        cart.add_item(earbuds())

        cart.remove_items([a.id, b.id])
        assert [item.product_id for item in cart] == ["p3"]

        cart.clear()
        assert cart.total() == 0
        assert cart.count() == 0


class TestGrouping:
    def test_by_shop_in_first_added_order(self, cart):
        cart.add_item(earbuds())
        cart.add_item(tomatoes())
        cart.add_item(tomatoes())
        cart.add_item(rice())

        groups = cart.by_shop()

        assert list(groups) == ["s2", "s1"]
        assert groups["s1"]["shop_name"] == "Vijay Grocery Store"
        assert groups["s1"]["total"] == 430
        assert [item.product_id for item in groups["s1"]["items"]] == ["p1", "p2"]
        assert groups["s2"]["total"] == 1299


class TestPersistence:
    def test_cart_survives_reload(self):
        storage = MemoryStorage()
        cart = CartStore(storage)
        line = cart.add_item(tomatoes())
        cart.set_quantity(line.id, 3)

        reloaded = CartStore(storage)

        assert reloaded.get(line.id).quantity == 3
        assert reloaded.total() == 120

    def test_cart_survives_restart_on_disk(self, tmp_path):
        path = tmp_path / "storage.json"
        CartStore(FileStorage(path)).add_item(rice())

        assert CartStore(FileStorage(path)).total() == 350

    def test_corrupt_cart_loads_empty(self):
        storage = MemoryStorage({CART_KEY: [{"unexpected": True}]})

        assert len(CartStore(storage)) == 0

    @pytest.mark.parametrize(
        "overrides",
        [
            {"price": "40"},
            {"price": -1.0},
            {"price": float("nan")},
            {"price": True},
            {"quantity": "2"},
            {"quantity": 0},
            {"quantity": -3},
            {"quantity": 1.5},
            {"product_id": ""},
        ],
    )
    def test_unpriceable_line_loads_empty(self, overrides):
        storage = MemoryStorage({CART_KEY: [{**rice(), "id": "ok"}, {**tomatoes(), "id": "bad", **overrides}]})

        cart = CartStore(storage)

        assert len(cart) == 0
        assert cart.total() == 0
        assert cart.count() == 0

    @pytest.mark.parametrize("raw", [{"p1": 1}, "cart", 42, [["p1", 2]]])
    def test_wrong_shape_loads_empty(self, raw):
        assert len(CartStore(MemoryStorage({CART_KEY: raw}))) == 0

    def test_duplicate_product_lines_are_merged(self):
        storage = MemoryStorage(
            {CART_KEY: [{**tomatoes(), "id": "x", "quantity": 2}, {**tomatoes(), "id": "y", "quantity": 3}]}
        )

        cart = CartStore(storage)

        assert [(item.id, item.quantity) for item in cart] == [("x", 5)]
        assert cart.total() == 200

    def test_unknown_fields_are_ignored(self):
        storage = MemoryStorage({CART_KEY: [{**tomatoes(), "id": "x", "quantity": 2, "stock": 9}]})

        assert CartStore(storage).get("x").quantity == 2

    def test_snapshot_and_restore(self, cart):
        cart.add_item(tomatoes())
        saved = cart.snapshot()
        cart.add_item(earbuds())

        cart.restore(saved)

        assert [item.product_id for item in cart] == ["p1"]
        assert cart.storage.get(CART_KEY) == saved
