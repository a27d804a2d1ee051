"""Merchandising bounded context — product pricing, discounts and stock status.

Owns the Product aggregate (with its variants) and the stock alert inbox.
Prices and stock statuses are derived through the ``merchandising.pricing``
engine on every write and by the periodic re-evaluation sweep.
"""

from protean.domain import Domain

from merchandising.pricing.policy import PricingPolicy
from merchandising.utils.logging import configure_logging, get_logger

configure_logging(log_dir="logs", log_file_prefix="storefront")

logger = get_logger(__name__)

# Read once here, passed explicitly into every engine call
pricing_policy = PricingPolicy.from_env()

logger.debug(
    "Pricing policy loaded",
    low_stock_threshold=pricing_policy.default_low_stock_threshold,
    currency_places=pricing_policy.currency_places,
    rounding=pricing_policy.rounding,
    sweep_interval_minutes=pricing_policy.sweep_interval_minutes,
)

merchandising = Domain(name="merchandising")
