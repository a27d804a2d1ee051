"""Discount settings and the discount window evaluator.

A discount is either a percentage (the default) or a fixed amount off the
base price, and applies only inside its ``[start, end]`` window.

A variant's discount value is three-valued: not set at all (inherit the
product's discount), explicitly zero (suppress inheritance) or positive.
``UNSET`` and ``Explicit`` make that distinction a type rather than a
falsy-zero convention.
"""

from dataclasses import dataclass
from datetime import UTC, datetime
from decimal import Decimal
from enum import Enum

from merchandising.pricing.errors import InvalidDiscountWindow
from merchandising.pricing.money import ZERO, discount_amount, percentage, to_decimal


class DiscountType(Enum):
    PERCENTAGE = "percentage"
    FIXED = "fixed"


class _Unset:
    """Marker for a discount field that carries no value."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self):
        return "UNSET"

    def __bool__(self):
        return False


UNSET = _Unset()


@dataclass(frozen=True)
class Explicit:
    """A discount value that was explicitly provided, zero included."""

    value: Decimal


DiscountSetting = _Unset | Explicit


def discount_type(value, field="discount_type") -> DiscountType:
    """Coerce a stored discount type; absent means percentage."""
    if value is None:
        return DiscountType.PERCENTAGE
    if isinstance(value, DiscountType):
        return value
    try:
        return DiscountType(value)
    except ValueError:
        raise InvalidDiscountWindow({field: [f"Unknown discount type: {value}"]}) from None


def discount_setting(value, kind=DiscountType.PERCENTAGE) -> DiscountSetting:
    """Lift a stored field (``None`` meaning "not provided") into a ``DiscountSetting``."""
    if value is None or value is UNSET:
        return UNSET
    if isinstance(value, Explicit):
        return value
    if kind is DiscountType.FIXED:
        return Explicit(discount_amount(value))
    return Explicit(percentage(value))


@dataclass(frozen=True)
class DiscountTerms:
    """A discount together with the window it applies in."""

    percentage: Decimal = ZERO
    start: datetime | None = None
    end: datetime | None = None
    kind: DiscountType = DiscountType.PERCENTAGE
    amount: Decimal = ZERO

    @property
    def value(self) -> Decimal:
        return self.amount if self.kind is DiscountType.FIXED else self.percentage


@dataclass(frozen=True)
class DiscountWindowState:
    active: bool


def as_utc(moment: datetime | None) -> datetime | None:
    """Normalize a timestamp for comparison; naive values are taken to be UTC."""
    if moment is None:
        return None
    if moment.tzinfo is None:
        return moment.replace(tzinfo=UTC)
    return moment.astimezone(UTC)


def _within(start, end, now) -> bool:
    if start is None or end is None:
        return False
    return as_utc(start) <= as_utc(now) <= as_utc(end)


def evaluate_discount_window(pct, start, end, now) -> DiscountWindowState:
    """Decide whether a percentage discount applies at ``now``.

    Fails closed: a non-positive or missing percentage, a missing endpoint, or
    ``now`` strictly outside ``[start, end]`` all yield an inactive window.
    """
    if isinstance(pct, Explicit):
        pct = pct.value
    if pct is None or pct is UNSET or to_decimal(pct, "discount_percentage") <= ZERO:
        return DiscountWindowState(active=False)
    percentage(pct)
    return DiscountWindowState(active=_within(start, end, now))


def evaluate_discount_terms(terms: DiscountTerms | None, now) -> DiscountWindowState:
    """``evaluate_discount_window`` for either discount type."""
    if terms is None or terms.value <= ZERO:
        return DiscountWindowState(active=False)
    return DiscountWindowState(active=_within(terms.start, terms.end, now))


def validate_discount_window(pct, start, end, field_prefix="", kind=None, amount=None) -> None:
    """Reject a discount that cannot be evaluated meaningfully.

    Only the value matching ``kind`` is checked: the percentage for
    percentage discounts, ``amount`` for fixed ones.

    Raises:
        InvalidDiscountWindow: percentage outside ``[0, 100]``, negative
            amount, unknown type, or a positive discount whose window is
            incomplete or has ``end <= start``.
    """
    kind = discount_type(kind, f"{field_prefix}discount_type")
    if kind is DiscountType.FIXED:
        raw, coerce, field = amount, discount_amount, f"{field_prefix}discount_amount"
    else:
        raw, coerce, field = pct, percentage, f"{field_prefix}discount_percentage"

    if raw is None or raw is UNSET:
        return
    value = coerce(raw.value if isinstance(raw, Explicit) else raw, field)
    if value <= ZERO:
        return

    if start is None or end is None:
        raise InvalidDiscountWindow(
            {f"{field_prefix}discount_window": ["Discount start and end time are required when a discount is set"]}
        )
    if as_utc(end) <= as_utc(start):
        raise InvalidDiscountWindow({f"{field_prefix}discount_window": ["Discount end time must be after start time"]})


def normalize_discount_terms(pct, start, end, kind=None, amount=None) -> DiscountTerms | None:
    """Validate a discount and drop the window when no discount applies.

    Returns ``None`` when the value for the discount type is absent,
    otherwise terms whose window is cleared when that value is zero.
    The value of the other type is ignored.
    """
    kind = discount_type(kind)
    validate_discount_window(pct, start, end, kind=kind, amount=amount)

    setting = discount_setting(amount if kind is DiscountType.FIXED else pct, kind)
    if setting is UNSET:
        return None

    if kind is DiscountType.FIXED:
        terms = {"kind": kind, "amount": setting.value}
    else:
        terms = {"kind": kind, "percentage": setting.value}
    if setting.value <= ZERO:
        return DiscountTerms(**terms)
    return DiscountTerms(start=start, end=end, **terms)
