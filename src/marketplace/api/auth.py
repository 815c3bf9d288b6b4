"""Bearer-token dependencies for FastAPI routes."""

from fastapi import Header

from marketplace.account.lookup import find_by_token, user_for_token


def _bearer(authorization):
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


async def current_user(authorization: str | None = Header(default=None)):
    """Resolve the caller or fail with 401."""
    return user_for_token(_bearer(authorization))


async def optional_user(authorization: str | None = Header(default=None)):
    """Resolve the caller when a valid token is sent; anonymous otherwise."""
    return find_by_token(_bearer(authorization))
