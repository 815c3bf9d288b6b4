"""Access-control and lookup failures raised by marketplace command handlers.

Field-level problems use ``protean.exceptions.ValidationError`` instead.
"""


class MarketplaceError(Exception):
    status_code = 500

    def __init__(self, message):
        super().__init__(message)
        self.message = message


class NotAuthenticated(MarketplaceError):
    status_code = 401


class NotAuthorized(MarketplaceError):
    status_code = 403


class NotFound(MarketplaceError):
    status_code = 404
