"""User aggregate — customers and shopkeepers with an opaque bearer session.

Passwords are stored as salted PBKDF2 digests. A user holds at most one
active session token; logging in again replaces it.
"""

import hashlib
import hmac
import re
import secrets
from datetime import UTC, datetime

from protean.exceptions import ValidationError
from protean.fields import DateTime, Identifier, String

from marketplace.domain import marketplace
from shared.order_lifecycle import ActorRole

_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
_PBKDF2_ROUNDS = 120_000
MIN_PASSWORD_LENGTH = 6


def hash_password(password, salt=None):
    salt = salt or secrets.token_hex(16)
    digest = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt.encode("utf-8"), _PBKDF2_ROUNDS)
    return f"{salt}${digest.hex()}"


def _check_password(password, stored):
    salt, _, _ = stored.partition("$")
    return hmac.compare_digest(hash_password(password, salt), stored)


def normalize_email(email):
    email = (email or "").strip().lower()
    if not _EMAIL_RE.match(email):
        raise ValidationError({"email": ["Please enter a valid email address"]})
    return email


def _validate_password(password, field="password"):
    if not password or len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError({field: [f"Password must be at least {MIN_PASSWORD_LENGTH} characters"]})


@marketplace.aggregate
class User:
    email = String(required=True, max_length=255)
    name = String(required=True, max_length=100)
    role = String(choices=ActorRole, default=ActorRole.CUSTOMER.value)
    shop_id = Identifier()
    password_hash = String(required=True, max_length=255)
    session_token = String(max_length=128)
    created_at = DateTime()
    updated_at = DateTime()

    @classmethod
    def register(cls, email, password, name, role=ActorRole.CUSTOMER.value):
        _validate_password(password)
        now = datetime.now(UTC)
        return cls(
            email=normalize_email(email),
            name=(name or "").strip(),
            role=role or ActorRole.CUSTOMER.value,
            password_hash=hash_password(password),
            created_at=now,
            updated_at=now,
        )

    @property
    def is_shopkeeper(self):
        return self.role == ActorRole.SHOPKEEPER.value

    @property
    def is_customer(self):
        return self.role == ActorRole.CUSTOMER.value

    def verify_password(self, password):
        return bool(password) and _check_password(password, self.password_hash)

    # -------------------------------------------------------------------
    # Sessions
    # -------------------------------------------------------------------
    def start_session(self):
        self.session_token = secrets.token_urlsafe(32)
        self.updated_at = datetime.now(UTC)
        return self.session_token

    def end_session(self):
        self.session_token = None
        self.updated_at = datetime.now(UTC)

    # -------------------------------------------------------------------
    # Profile
    # -------------------------------------------------------------------
    def update_profile(self, name=None, email=None):
        if name is not None:
            if not name.strip():
                raise ValidationError({"name": ["Name is required"]})
            self.name = name.strip()
        if email is not None:
            self.email = normalize_email(email)
        self.updated_at = datetime.now(UTC)

    def change_password(self, current_password, new_password):
        if not self.verify_password(current_password):
            raise ValidationError({"current_password": ["Current password is incorrect"]})
        _validate_password(new_password, field="new_password")
        self.password_hash = hash_password(new_password)
        self.updated_at = datetime.now(UTC)

    def link_shop(self, shop_id):
        """Attach the shop this shopkeeper manages."""
        if not self.is_shopkeeper:
            raise ValidationError({"role": ["Only shopkeepers can own a shop"]})
        self.shop_id = shop_id
        self.updated_at = datetime.now(UTC)
