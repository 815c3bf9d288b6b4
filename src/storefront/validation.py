"""Local form checks, run before anything is sent to the server.

Each validator returns a message or ``None``; form validators return a list
of ``{"field", "message"}`` dicts, the same shape the API uses.
"""

import re

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PHONE_RE = re.compile(r"^[\d\s+\-()]+$")
PINCODE_RE = re.compile(r"^\d{6}$")
MIN_PHONE_DIGITS = 10


def validate_required(value, field_name):
    if value is None or not str(value).strip():
        return f"{field_name} is required"
    return None


def validate_email(email):
    if not email:
        return "Email is required"
    if not EMAIL_RE.match(email):
        return "Please enter a valid email address"
    return None


def validate_phone(phone):
    if not phone:
        return "Phone number is required"
    if not PHONE_RE.match(phone):
        return "Please enter a valid phone number"
    if len(re.sub(r"\D", "", phone)) < MIN_PHONE_DIGITS:
        return f"Phone number must be at least {MIN_PHONE_DIGITS} digits"
    return None


def validate_price(price):
    try:
        value = float(price)
    except (TypeError, ValueError):
        value = None
    if value is None or value != value or value <= 0:
        return "Price must be a positive number"
    return None


def sanitize_input(text):
    return text.strip().replace("<", "").replace(">", "")


def _collect(checks):
    return [{"field": field, "message": message} for field, message in checks if message]


def validate_checkout_form(details):
    pincode = details.get("pincode")
    pincode_error = validate_required(pincode, "Pincode")
    if pincode_error is None and not PINCODE_RE.match(str(pincode).strip()):
        pincode_error = "Pincode must be 6 digits"

    return _collect(
        [
            ("name", validate_required(details.get("name"), "Name")),
            ("email", validate_email(details.get("email"))),
            ("phone", validate_phone(details.get("phone"))),
            ("address", validate_required(details.get("address"), "Address")),
            ("city", validate_required(details.get("city"), "City")),
            ("pincode", pincode_error),
        ]
    )


def validate_shop_form(data):
    return _collect(
        [
            ("shop_name", validate_required(data.get("shop_name"), "Shop name")),
            ("category", validate_required(data.get("category"), "Category")),
            ("address", validate_required(data.get("address"), "Address")),
            ("city", validate_required(data.get("city"), "City")),
            ("phone", validate_phone(data.get("phone"))),
        ]
    )


def validate_product_form(data):
    return _collect(
        [
            ("name", validate_required(data.get("name"), "Product name")),
            ("description", validate_required(data.get("description"), "Description")),
            ("price", validate_price(data.get("price"))),
            ("category", validate_required(data.get("category"), "Category")),
        ]
    )
