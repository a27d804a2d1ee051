"""Pricing and stock-status engine.

Pure functions with no I/O: callers hand in fully materialized products and
variants plus the moment to evaluate at, and persist whatever comes back.
"""

from merchandising.pricing.discount import (
    UNSET,
    DiscountTerms,
    DiscountType,
    DiscountWindowState,
    Explicit,
    discount_setting,
    evaluate_discount_terms,
    evaluate_discount_window,
    validate_discount_window,
)
from merchandising.pricing.errors import InvalidDiscountWindow, InvalidQuantity, NotificationPublishFailure
from merchandising.pricing.policy import DEFAULT_POLICY, PricingPolicy
from merchandising.pricing.resolver import PriceResolution, resolve_product_price, resolve_variant_price
from merchandising.pricing.stock import StockStatus, aggregate_stock, classify_stock_status
from merchandising.pricing.transitions import (
    StockAlertType,
    StockEntityRef,
    StockNotice,
    on_stock_status_transition,
)

__all__ = [
    "DEFAULT_POLICY",
    "UNSET",
    "DiscountTerms",
    "DiscountType",
    "DiscountWindowState",
    "Explicit",
    "InvalidDiscountWindow",
    "InvalidQuantity",
    "NotificationPublishFailure",
    "PriceResolution",
    "PricingPolicy",
    "StockAlertType",
    "StockEntityRef",
    "StockNotice",
    "StockStatus",
    "aggregate_stock",
    "classify_stock_status",
    "discount_setting",
    "evaluate_discount_terms",
    "evaluate_discount_window",
    "on_stock_status_transition",
    "resolve_product_price",
    "resolve_variant_price",
    "validate_discount_window",
]
