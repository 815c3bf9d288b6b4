"""Queries over the User repository used by handlers and the API layer."""

from protean.utils.globals import current_domain

from marketplace.account.user import User
from marketplace.exceptions import NotAuthenticated


def find_by_email(email):
    repo = current_domain.repository_for(User)
    matches = repo._dao.query.filter(email=email).all().items
    return matches[0] if matches else None


def find_by_token(token):
    if not token:
        return None
    repo = current_domain.repository_for(User)
    matches = repo._dao.query.filter(session_token=token).all().items
    return matches[0] if matches else None


def user_for_token(token):
    """Resolve a bearer token to its user or fail authentication."""
    if not token:
        raise NotAuthenticated("Access token required")
    user = find_by_token(token)
    if user is None:
        raise NotAuthenticated("Invalid or expired token")
    return user
