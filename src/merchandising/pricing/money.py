"""Money and percentage primitives.

Prices are persisted as floats on the aggregates but every computation goes
through ``Decimal``. Floats are converted via ``str`` so that ``99.99`` stays
``Decimal("99.99")`` rather than its binary approximation.
"""

from decimal import Decimal, InvalidOperation

from protean.exceptions import ValidationError

from merchandising.pricing.errors import InvalidDiscountWindow
from merchandising.pricing.policy import DEFAULT_POLICY, PricingPolicy

ZERO = Decimal("0")
HUNDRED = Decimal("100")


def to_decimal(value, field="amount") -> Decimal:
    """Convert a number (or numeric string) to ``Decimal``."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool) or value is None:
        raise ValidationError({field: [f"Expected a number, got {value!r}"]})
    try:
        result = Decimal(str(value))
    except InvalidOperation:
        raise ValidationError({field: [f"Expected a number, got {value!r}"]}) from None
    if not result.is_finite():
        raise ValidationError({field: ["Value must be finite"]})
    return result


def money(value, field="base_price") -> Decimal:
    """A non-negative monetary amount."""
    amount = to_decimal(value, field)
    if amount < ZERO:
        raise ValidationError({field: ["Price cannot be negative"]})
    return amount


def percentage(value, field="discount_percentage") -> Decimal:
    """A discount percentage in ``[0, 100]``."""
    pct = to_decimal(value, field)
    if pct < ZERO or pct > HUNDRED:
        raise InvalidDiscountWindow({field: ["Discount percentage must be between 0 and 100"]})
    return pct


def discount_amount(value, field="discount_amount") -> Decimal:
    """A non-negative fixed discount amount."""
    amount = to_decimal(value, field)
    if amount < ZERO:
        raise InvalidDiscountWindow({field: ["Discount amount cannot be negative"]})
    return amount


def round_money(amount: Decimal, policy: PricingPolicy = DEFAULT_POLICY) -> Decimal:
    return amount.quantize(policy.quantum, rounding=policy.rounding)


def apply_percentage_discount(base: Decimal, pct: Decimal, policy: PricingPolicy = DEFAULT_POLICY) -> Decimal:
    """Discounted amount, rounded to the currency's minor unit and kept within ``[0, base]``."""
    discounted = round_money(base * (HUNDRED - pct) / HUNDRED, policy)
    return min(max(discounted, ZERO), base)


def apply_fixed_discount(base: Decimal, amount: Decimal, policy: PricingPolicy = DEFAULT_POLICY) -> Decimal:
    """``base`` less a fixed amount, never below zero."""
    return min(round_money(max(base - amount, ZERO), policy), base)


def as_float(amount: Decimal) -> float:
    """Convert a rounded ``Decimal`` back to the float stored on aggregates."""
    return float(amount)
