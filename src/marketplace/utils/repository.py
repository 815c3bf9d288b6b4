from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from marketplace.exceptions import NotFound


def load(aggregate_cls, identifier, label=None):
    """Fetch an aggregate by id, translating a miss into a 404 with a readable message."""
    label = label or aggregate_cls.__name__
    if not identifier:
        raise NotFound(f"{label} not found")
    try:
        return current_domain.repository_for(aggregate_cls).get(identifier)
    except ObjectNotFoundError:
        raise NotFound(f"{label} not found") from None
