"""Shop aggregate — a local storefront run by one shopkeeper."""

from datetime import UTC, datetime

from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Float, Identifier, Integer, String, Text

from marketplace.domain import marketplace

DEFAULT_TIMINGS = "9:00 AM - 9:00 PM"

# Fields an owner may change after creation
EDITABLE_FIELDS = ("shop_name", "category", "address", "city", "phone", "timings", "description", "logo")
_REQUIRED_TEXT = ("shop_name", "category", "address", "city", "phone")


@marketplace.aggregate
class Shop:
    shop_name = String(required=True, max_length=255)
    owner_name = String(max_length=100)
    owner_id = Identifier(required=True)
    category = String(required=True, max_length=100)
    address = String(required=True, max_length=255)
    city = String(required=True, max_length=100)
    phone = String(required=True, max_length=30)
    timings = String(max_length=100, default=DEFAULT_TIMINGS)
    description = Text()
    logo = String(max_length=1000)
    rating = Float()
    review_count = Integer(default=0)
    is_verified = Boolean(default=False)
    created_at = DateTime()
    updated_at = DateTime()

    @classmethod
    def open(cls, owner, shop_name, category, address, city, phone, timings=None, description=None, logo=None):
        now = datetime.now(UTC)
        shop = cls(
            shop_name=shop_name,
            owner_name=owner.name,
            owner_id=str(owner.id),
            category=category,
            address=address,
            city=city,
            phone=phone,
            timings=timings or DEFAULT_TIMINGS,
            description=description or "",
            logo=logo,
            created_at=now,
            updated_at=now,
        )
        shop._require_text(_REQUIRED_TEXT)
        return shop

    def is_owned_by(self, user):
        return str(self.owner_id) == str(user.id)

    def update_details(self, **changes):
        unknown = set(changes) - set(EDITABLE_FIELDS)
        if unknown:
            raise ValidationError({field: ["Field cannot be updated"] for field in sorted(unknown)})

        for field, value in changes.items():
            setattr(self, field, value.strip() if isinstance(value, str) else value)
        self._require_text([f for f in changes if f in _REQUIRED_TEXT])
        self.updated_at = datetime.now(UTC)

    def _require_text(self, fields):
        errors = {}
        for field in fields:
            value = getattr(self, field)
            if value is None or not str(value).strip():
                errors[field] = [f"{field.replace('_', ' ').capitalize()} is required"]
        if errors:
            raise ValidationError(errors)
