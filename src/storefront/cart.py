"""Shopping cart held on the client and mirrored to durable storage.

One line per product: adding a product that is already in the cart bumps its
quantity by one. Quantities are not checked against stock.
"""

import math
import uuid
from dataclasses import asdict, dataclass, fields

import structlog

logger = structlog.get_logger(__name__)

CART_KEY = "localmart-cart"


@dataclass
class CartItem:
    id: str
    product_id: str
    product_name: str
    price: float
    shop_id: str
    shop_name: str = ""
    quantity: int = 1
    image: str | None = None

    @classmethod
    def from_dict(cls, data):
        known = {f.name for f in fields(cls)}
        values = {key: value for key, value in data.items() if key in known}
        values.setdefault("id", f"{values.get('product_id')}-{uuid.uuid4().hex[:8]}")
        return cls(**values)

    def validated(self):
        """Return self, or raise ValueError when the line cannot be priced."""
        if not isinstance(self.product_id, str) or not self.product_id:
            raise ValueError(f"Invalid product_id {self.product_id!r}")
        if isinstance(self.price, bool) or not isinstance(self.price, (int, float)):
            raise ValueError(f"Invalid price {self.price!r}")
        if not math.isfinite(self.price) or self.price < 0:
            raise ValueError(f"Invalid price {self.price!r}")
        if isinstance(self.quantity, bool) or not isinstance(self.quantity, int) or self.quantity < 1:
            raise ValueError(f"Invalid quantity {self.quantity!r}")
        return self

    @property
    def subtotal(self):
        return self.price * self.quantity


class CartStore:
    def __init__(self, storage, key=CART_KEY):
        self.storage = storage
        self.key = key
        self._items = self._load()

    def _load(self):
        raw = self.storage.get(self.key)
        if raw is None:
            return []
        try:
            items = [CartItem.from_dict(entry).validated() for entry in raw]
        except (TypeError, ValueError, AttributeError) as exc:
            logger.warning("cart_unreadable", key=self.key, error=str(exc))
            return []

        lines = {}
        for item in items:
            line = lines.get(item.product_id)
            if line is None:
                lines[item.product_id] = item
            else:
                line.quantity += item.quantity
        if len(lines) != len(items):
            logger.warning("cart_lines_merged", key=self.key, lines=len(items), products=len(lines))
        return list(lines.values())

    def _save(self):
        self.storage.set(self.key, [asdict(item) for item in self._items])

    @property
    def items(self):
        return list(self._items)

    def get(self, item_id):
        return next((item for item in self._items if item.id == item_id), None)

    def add_item(self, item):
        """Add one unit of ``item`` (a ``CartItem`` or a dict without quantity)."""
        if isinstance(item, dict):
            item = CartItem.from_dict({**item, "quantity": 1})

        existing = next((line for line in self._items if line.product_id == item.product_id), None)
        if existing is not None:
            existing.quantity += 1
        else:
            item.quantity = 1
            self._items.append(item)
        self._save()
        return existing or item

    def remove_item(self, item_id):
        self._items = [item for item in self._items if item.id != item_id]
        self._save()

    def set_quantity(self, item_id, quantity):
        if quantity <= 0:
            self.remove_item(item_id)
            return
        for item in self._items:
            if item.id == item_id:
                item.quantity = quantity
        self._save()

    def remove_items(self, item_ids):
        item_ids = set(item_ids)
        self._items = [item for item in self._items if item.id not in item_ids]
        self._save()

    def clear(self):
        self._items = []
        self._save()

    def total(self):
        return sum(item.subtotal for item in self._items)

    def count(self):
        return sum(item.quantity for item in self._items)

    def by_shop(self):
        """``{shop_id: {"shop_name", "items", "total"}}`` in first-added order."""
        groups = {}
        for item in self._items:
            group = groups.setdefault(item.shop_id, {"shop_name": item.shop_name, "items": [], "total": 0})
            group["items"].append(item)
            group["total"] += item.subtotal
        return groups

    def snapshot(self):
        return [asdict(item) for item in self._items]

    def restore(self, snapshot):
        self._items = [CartItem.from_dict(entry) for entry in snapshot]
        self._save()

    def __len__(self):
        return len(self._items)

    def __iter__(self):
        return iter(list(self._items))
