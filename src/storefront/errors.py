"""Failures a storefront call can raise, and their user-facing summaries.

Every failure derives from ``RequestFailed``. ``RequestCancelled`` does not:
an aborted call is the caller's own decision, not an error to report.
"""

from dataclasses import dataclass

GENERIC_MESSAGE = "An error occurred"


class RequestFailed(Exception):
    title = "Error"

    def __init__(self, message=GENERIC_MESSAGE, status_code=None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class AuthenticationRequired(RequestFailed):
    """No session token is stored; raised before any network activity."""

    title = "Authentication required"

    def __init__(self, message="Authentication required"):
        super().__init__(message)


class ConnectionUnreachable(RequestFailed):
    title = "Connection error"

    @classmethod
    def for_base_url(cls, base_url):
        root = base_url.rstrip("/")
        if root.endswith("/api"):
            root = root[: -len("/api")]
        return cls(
            f"Cannot connect to backend server at {root}. "
            "Please make sure the backend server is running. "
            "Run: python src/manage.py serve"
        )


class RemoteValidationError(RequestFailed):
    """The server rejected the request (any 4xx)."""

    title = "Request rejected"

    def __init__(self, message=GENERIC_MESSAGE, status_code=400, field_errors=None):
        super().__init__(message, status_code)
        self.field_errors = list(field_errors or [])

    def field_messages(self):
        """``{field: message}`` for forms; the first message per field wins."""
        messages = {}
        for error in self.field_errors:
            messages.setdefault(error.get("field", ""), error.get("message", ""))
        return messages


class RemoteServerError(RequestFailed):
    title = "Server error"


class RequestCancelled(Exception):
    def __init__(self, message="Request cancelled"):
        super().__init__(message)
        self.message = message


def error_from_response(status_code, body):
    """Map a non-2xx status and its decoded JSON body (or None) to a failure."""
    if not isinstance(body, dict):
        return RemoteServerError(GENERIC_MESSAGE, status_code)

    message = body.get("message") or f"Server error: {status_code}"
    if 400 <= status_code < 500:
        errors = body.get("errors")
        return RemoteValidationError(message, status_code, errors if isinstance(errors, list) else None)
    return RemoteServerError(message, status_code)


@dataclass(frozen=True)
class Notice:
    title: str
    message: str


def notice_for(exc):
    """Summarize ``exc`` for a transient notification; ``None`` for cancellations."""
    if isinstance(exc, RequestCancelled):
        return None
    if isinstance(exc, RequestFailed):
        return Notice(exc.title, exc.message)
    return Notice("Error", str(exc) or GENERIC_MESSAGE)
