"""Stock status classification."""

from collections.abc import Iterable
from enum import Enum

from merchandising.pricing.errors import InvalidQuantity


class StockStatus(Enum):
    IN_STOCK = "in_stock"
    LOW_STOCK = "low_stock"
    OUT_OF_STOCK = "out_of_stock"
    PRE_ORDER = "pre_order"


def validate_quantity(quantity, field="stock") -> int:
    if isinstance(quantity, bool) or not isinstance(quantity, int):
        raise InvalidQuantity({field: [f"Stock must be an integer, got {quantity!r}"]})
    if quantity < 0:
        raise InvalidQuantity({field: ["Stock cannot be negative"]})
    return quantity


def validate_threshold(threshold, field="low_stock_threshold") -> int:
    if isinstance(threshold, bool) or not isinstance(threshold, int) or threshold < 1:
        raise InvalidQuantity({field: ["Low stock threshold must be a positive integer"]})
    return threshold


def classify_stock_status(quantity: int, threshold: int, pre_order: bool = False) -> StockStatus:
    """Classify a stock level.

    ``pre_order`` wins regardless of quantity. Otherwise zero is out of
    stock, anything up to and including ``threshold`` is low stock, and the
    rest is in stock.
    """
    validate_quantity(quantity)
    validate_threshold(threshold)

    if pre_order:
        return StockStatus.PRE_ORDER
    if quantity <= 0:
        return StockStatus.OUT_OF_STOCK
    if quantity <= threshold:
        return StockStatus.LOW_STOCK
    return StockStatus.IN_STOCK


def aggregate_stock(variant_quantities: Iterable[int], own_quantity: int = 0) -> int:
    """Product-level quantity: the variants' total when there are any, else the product's own stock."""
    quantities = [validate_quantity(q) for q in variant_quantities]
    if quantities:
        return sum(quantities)
    return validate_quantity(own_quantity or 0)
