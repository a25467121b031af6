"""Point-of-sale bounded context — menu catalog, table orders and payments.

Holds the Protean domain that every aggregate, entity, value object and
event of the POS core registers with.
"""

from protean.domain import Domain

from pos.utils.logging import configure_logging, get_logger

# Configure logging for the application
configure_logging()

# Get logger for this module
logger = get_logger(__name__)

# Domain Composition Root
pos = Domain(name="pos")
