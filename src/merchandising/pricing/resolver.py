"""Variant price resolver.

Works on anything exposing the persisted pricing fields (``base_price``,
``discount_percentage``, ``discount_start_time``, ``discount_end_time`` and
optionally ``discount_type`` and ``discount_amount``): the ``Product``
aggregate and its ``Variant`` entities, or plain objects in tests and
scripts.
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from merchandising.pricing.discount import (
    UNSET,
    DiscountTerms,
    DiscountType,
    discount_setting,
    discount_type,
    evaluate_discount_terms,
)
from merchandising.pricing.money import ZERO, apply_fixed_discount, apply_percentage_discount, money
from merchandising.pricing.policy import DEFAULT_POLICY, PricingPolicy


@dataclass(frozen=True)
class PriceResolution:
    effective_price: Decimal
    discount_active: bool
    applied_discount_percentage: Decimal
    applied_discount_amount: Decimal = ZERO
    discount_type: DiscountType | None = None


def _terms_of(subject) -> DiscountTerms | None:
    kind = discount_type(getattr(subject, "discount_type", None))
    if kind is DiscountType.FIXED:
        setting = discount_setting(getattr(subject, "discount_amount", None), kind)
    else:
        setting = discount_setting(getattr(subject, "discount_percentage", None), kind)
    if setting is UNSET:
        return None

    window = {
        "start": getattr(subject, "discount_start_time", None),
        "end": getattr(subject, "discount_end_time", None),
    }
    if kind is DiscountType.FIXED:
        return DiscountTerms(kind=kind, amount=setting.value, **window)
    return DiscountTerms(kind=kind, percentage=setting.value, **window)


def _resolve(base: Decimal, terms: DiscountTerms | None, now: datetime, policy: PricingPolicy) -> PriceResolution:
    if not evaluate_discount_terms(terms, now).active:
        return PriceResolution(
            effective_price=base,
            discount_active=False,
            applied_discount_percentage=ZERO,
        )

    if terms.kind is DiscountType.FIXED:
        effective = apply_fixed_discount(base, terms.amount, policy)
        applied_pct = ZERO
    else:
        effective = apply_percentage_discount(base, terms.percentage, policy)
        applied_pct = terms.percentage

    return PriceResolution(
        effective_price=effective,
        discount_active=True,
        applied_discount_percentage=applied_pct,
        applied_discount_amount=base - effective,
        discount_type=terms.kind,
    )


def resolve_product_price(product, now: datetime, policy: PricingPolicy = DEFAULT_POLICY) -> PriceResolution:
    """Effective product-level price from the product's own base price and discount."""
    return _resolve(money(product.base_price), _terms_of(product), now, policy)


def resolve_variant_price(product, variant, now: datetime, policy: PricingPolicy = DEFAULT_POLICY) -> PriceResolution:
    """Effective price of one variant.

    The variant's base price wins when set (an explicit ``0`` included). The
    variant's discount is used whenever the value for its discount type is
    set, even to ``0`` which suppresses the product discount; otherwise the
    product's discount and window are inherited, applied to the variant's
    base.
    """
    variant_base = getattr(variant, "base_price", None)
    base = money(product.base_price if variant_base is None else variant_base)

    terms = _terms_of(variant)
    if terms is None:
        terms = _terms_of(product)

    return _resolve(base, terms, now, policy)
