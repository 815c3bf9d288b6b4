"""Marketplace bounded context — accounts, shops, product catalogue and orders.

Everything lives in Protean's in-memory provider: state does not survive a
restart. The order status lifecycle is enforced here on every write.
"""

from protean.domain import Domain

from marketplace.utils.logging import configure_logging, get_logger

# Configure logging for the application
configure_logging()

# Get logger for this module
logger = get_logger(__name__)

# Domain Composition Root
marketplace = Domain(name="marketplace")
