"""Shopping bounded context — Cart and Checkout.

Owns the shopping cart (line items and derived totals) and the checkout
flow that hands a cart snapshot to the remote order-management service.
"""

from protean.domain import Domain

from shopping.utils.logging import configure_logging, get_logger

configure_logging()

logger = get_logger(__name__)

shopping = Domain(name="shopping")
