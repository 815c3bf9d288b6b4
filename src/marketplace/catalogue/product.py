"""Product aggregate — an item a shop offers for sale."""

from datetime import UTC, datetime

from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Float, Identifier, Integer, String, Text

from marketplace.domain import marketplace

PLACEHOLDER_IMAGE = "https://images.unsplash.com/photo-1441986300917-64674bd600d8?w=400&auto=format&fit=crop"

EDITABLE_FIELDS = ("name", "description", "price", "category", "image", "stock")


@marketplace.aggregate
class Product:
    name = String(required=True, max_length=255)
    description = Text(required=True)
    price = Float(required=True, min_value=0.0)
    category = String(required=True, max_length=100)
    shop_id = Identifier(required=True)
    image = String(max_length=1000, default=PLACEHOLDER_IMAGE)
    stock = Integer(min_value=0)
    in_stock = Boolean(default=True)
    created_at = DateTime()
    updated_at = DateTime()

    @classmethod
    def list_item(cls, shop_id, name, description, price, category, image=None, stock=None):
        now = datetime.now(UTC)
        return cls(
            name=name,
            description=description,
            price=price,
            category=category,
            shop_id=shop_id,
            image=image or PLACEHOLDER_IMAGE,
            stock=stock,
            in_stock=_in_stock(stock),
            created_at=now,
            updated_at=now,
        )

    def update_details(self, **changes):
        unknown = set(changes) - set(EDITABLE_FIELDS)
        if unknown:
            raise ValidationError({field: ["Field cannot be updated"] for field in sorted(unknown)})

        for field, value in changes.items():
            setattr(self, field, value)
        if "stock" in changes:
            self.in_stock = _in_stock(self.stock)
        self.updated_at = datetime.now(UTC)


def _in_stock(stock):
    # Unknown stock is treated as available
    return True if stock is None else stock > 0
