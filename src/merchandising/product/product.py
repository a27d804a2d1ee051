"""Product aggregate root with its Variant entities.

Pricing and stock fields on both the product and its variants are derived:
every mutating method finishes by running ``_recalculate``, which feeds the
current state through the pricing engine and emits ``PriceRecalculated`` and
``StockStatusChanged`` for whatever actually changed.

Variant overrides are stored with ``None`` meaning "not set". A variant
``discount_percentage`` of ``0.0`` is an explicit override that suppresses
the product discount, while ``None`` inherits it.
"""

import random
import re
from datetime import UTC, datetime

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Float, HasMany, Integer, String, Text

from merchandising.domain import merchandising
from merchandising.pricing.discount import DiscountType, normalize_discount_terms, validate_discount_window
from merchandising.pricing.money import as_float, money
from merchandising.pricing.policy import DEFAULT_POLICY
from merchandising.pricing.resolver import resolve_product_price, resolve_variant_price
from merchandising.pricing.stock import (
    StockStatus,
    aggregate_stock,
    classify_stock_status,
    validate_quantity,
    validate_threshold,
)
from merchandising.pricing.transitions import StockEntityRef, on_stock_status_transition
from merchandising.product.events import (
    LowStockThresholdChanged,
    PreOrderToggled,
    PriceRecalculated,
    ProductCreated,
    ProductPricingUpdated,
    ProductStockUpdated,
    StockStatusChanged,
    VariantAdded,
    VariantPricingUpdated,
    VariantRemoved,
    VariantStockUpdated,
)


def slugify(title: str) -> str:
    """Lower-case, hyphen-separated slug derived from a title."""
    slug = re.sub(r"[^a-z0-9]+", "-", title.lower()).strip("-")
    return slug or "product"


def generate_product_code() -> str:
    """Random 6-digit variant code."""
    return str(random.randint(100000, 999999))


def _discount_fields(terms) -> dict:
    """Persisted discount fields for normalized terms; all ``None`` when no discount is set."""
    if terms is None:
        return dict.fromkeys(
            ("discount_type", "discount_percentage", "discount_amount", "discount_start_time", "discount_end_time")
        )

    fixed = terms.kind is DiscountType.FIXED
    return {
        "discount_type": terms.kind.value,
        "discount_percentage": None if fixed else as_float(terms.percentage),
        "discount_amount": as_float(terms.amount) if fixed else None,
        "discount_start_time": terms.start,
        "discount_end_time": terms.end,
    }


@merchandising.entity(part_of="Product")
class Variant:
    """A color/size combination of a product with its own stock and optional pricing overrides."""

    product_code: String(required=True, max_length=20)
    color_code: String(required=True, max_length=20)
    color_name: String(required=True, max_length=100)
    size: String(required=True, max_length=50)
    stock: Integer(default=0, min_value=0)
    pre_order: Boolean(default=False)
    stock_status: String(choices=StockStatus)

    # Overrides (None = inherit from the product)
    base_price: Float(min_value=0.0)
    discount_type: String(choices=DiscountType)
    discount_percentage: Float(min_value=0.0, max_value=100.0)
    discount_amount: Float(min_value=0.0)
    discount_start_time: DateTime()
    discount_end_time: DateTime()

    # Derived
    price: Float(min_value=0.0)
    discount_active: Boolean(default=False)
    applied_discount_percentage: Float(default=0.0)
    applied_discount_amount: Float(default=0.0)


@merchandising.aggregate
class Product:
    """Product aggregate root."""

    title: String(required=True, max_length=255)
    slug: String(required=True, max_length=255)
    brand: String(max_length=100)
    description: Text()

    base_price: Float(required=True, min_value=0.0)
    discount_type: String(choices=DiscountType)
    discount_percentage: Float(min_value=0.0, max_value=100.0)
    discount_amount: Float(min_value=0.0)
    discount_start_time: DateTime()
    discount_end_time: DateTime()

    stock: Integer(default=0, min_value=0)
    low_stock_threshold: Integer(default=10, min_value=1)
    pre_order: Boolean(default=False)
    is_active: Boolean(default=True)
    variants: HasMany(Variant)

    # Derived
    price: Float(min_value=0.0)
    discount_active: Boolean(default=False)
    applied_discount_percentage: Float(default=0.0)
    applied_discount_amount: Float(default=0.0)
    stock_status: String(choices=StockStatus)
    priced_at: DateTime()

    created_at: DateTime()
    updated_at: DateTime()

    @invariant.post
    def discount_windows_must_be_valid(self):
        validate_discount_window(
            self.discount_percentage,
            self.discount_start_time,
            self.discount_end_time,
            kind=self.discount_type,
            amount=self.discount_amount,
        )
        for variant in self.variants or []:
            validate_discount_window(
                variant.discount_percentage,
                variant.discount_start_time,
                variant.discount_end_time,
                field_prefix="variant_",
                kind=variant.discount_type,
                amount=variant.discount_amount,
            )

    @invariant.post
    def stock_must_equal_sum_of_variant_stocks(self):
        if self.variants and self.stock != sum(v.stock for v in self.variants):
            raise ValidationError({"stock": ["Product stock must equal the sum of its variant stocks"]})

    @invariant.post
    def price_cannot_exceed_base_price(self):
        if self.price is not None and self.price > self.base_price:
            raise ValidationError({"price": ["Effective price cannot exceed the base price"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(
        cls,
        title,
        base_price,
        slug=None,
        brand=None,
        description=None,
        discount_percentage=None,
        discount_start_time=None,
        discount_end_time=None,
        discount_type=None,
        discount_amount=None,
        stock=0,
        low_stock_threshold=None,
        pre_order=False,
        now=None,
        policy=DEFAULT_POLICY,
    ):
        moment = now or datetime.now(UTC)
        base = money(base_price)
        terms = normalize_discount_terms(
            discount_percentage, discount_start_time, discount_end_time, kind=discount_type, amount=discount_amount
        )
        threshold = validate_threshold(
            policy.default_low_stock_threshold if low_stock_threshold is None else low_stock_threshold
        )
        validate_quantity(stock)

        product = cls(
            title=title,
            slug=slug or slugify(title),
            brand=brand,
            description=description,
            base_price=as_float(base),
            **_discount_fields(terms),
            stock=stock,
            low_stock_threshold=threshold,
            pre_order=bool(pre_order),
            created_at=moment,
            updated_at=moment,
        )

        with atomic_change(product):
            derived = product._recalculate(moment, policy)

        product.raise_(
            ProductCreated(
                product_id=product.id,
                title=product.title,
                slug=product.slug,
                base_price=product.base_price,
                price=product.price,
                stock=product.stock,
                stock_status=product.stock_status,
                created_at=moment,
            )
        )
        product._raise_all(derived)
        return product

    # -------------------------------------------------------------------
    # Product-level pricing and stock
    # -------------------------------------------------------------------
    def update_pricing(
        self,
        base_price,
        discount_percentage=None,
        discount_start_time=None,
        discount_end_time=None,
        discount_type=None,
        discount_amount=None,
        now=None,
        policy=DEFAULT_POLICY,
    ):
        moment = now or datetime.now(UTC)
        base = money(base_price)
        terms = normalize_discount_terms(
            discount_percentage, discount_start_time, discount_end_time, kind=discount_type, amount=discount_amount
        )

        with atomic_change(self):
            self.base_price = as_float(base)
            for name, value in _discount_fields(terms).items():
                setattr(self, name, value)
            self.updated_at = moment
            derived = self._recalculate(moment, policy)

        self.raise_(
            ProductPricingUpdated(
                product_id=self.id,
                base_price=self.base_price,
                discount_type=self.discount_type,
                discount_percentage=self.discount_percentage,
                discount_amount=self.discount_amount,
                discount_start_time=self.discount_start_time,
                discount_end_time=self.discount_end_time,
                updated_at=moment,
            )
        )
        self._raise_all(derived)

    def update_stock(self, stock, now=None, policy=DEFAULT_POLICY):
        """Set the stock of a product that has no variants."""
        if self.variants:
            raise ValidationError({"stock": ["Stock of a product with variants is the sum of its variant stocks"]})
        validate_quantity(stock)

        moment = now or datetime.now(UTC)
        previous = self.stock
        with atomic_change(self):
            self.stock = stock
            self.updated_at = moment
            derived = self._recalculate(moment, policy)

        self.raise_(
            ProductStockUpdated(
                product_id=self.id,
                previous_stock=previous,
                new_stock=stock,
                updated_at=moment,
            )
        )
        self._raise_all(derived)

    def set_low_stock_threshold(self, threshold, now=None, policy=DEFAULT_POLICY):
        validate_threshold(threshold)
        moment = now or datetime.now(UTC)
        previous = self.low_stock_threshold
        with atomic_change(self):
            self.low_stock_threshold = threshold
            self.updated_at = moment
            derived = self._recalculate(moment, policy)

        self.raise_(
            LowStockThresholdChanged(
                product_id=self.id,
                previous_threshold=previous,
                new_threshold=threshold,
            )
        )
        self._raise_all(derived)

    def set_pre_order(self, pre_order, variant_id=None, now=None, policy=DEFAULT_POLICY):
        """Toggle pre-order on the product, or on one variant when ``variant_id`` is given."""
        target = self._get_variant(variant_id) if variant_id is not None else self
        moment = now or datetime.now(UTC)
        with atomic_change(self):
            target.pre_order = bool(pre_order)
            self.updated_at = moment
            derived = self._recalculate(moment, policy)

        self.raise_(
            PreOrderToggled(
                product_id=self.id,
                variant_id=variant_id,
                pre_order=bool(pre_order),
            )
        )
        self._raise_all(derived)

    # -------------------------------------------------------------------
    # Variants
    # -------------------------------------------------------------------
    def add_variant(
        self,
        color_code,
        color_name,
        size,
        stock=0,
        product_code=None,
        base_price=None,
        discount_percentage=None,
        discount_start_time=None,
        discount_end_time=None,
        discount_type=None,
        discount_amount=None,
        pre_order=False,
        now=None,
        policy=DEFAULT_POLICY,
    ):
        validate_quantity(stock)
        if base_price is not None:
            money(base_price)
        terms = normalize_discount_terms(
            discount_percentage, discount_start_time, discount_end_time, kind=discount_type, amount=discount_amount
        )

        if any(v.color_code == color_code and v.size == size for v in self.variants):
            raise ValidationError({"variants": [f"A {color_name} / {size} variant already exists"]})

        moment = now or datetime.now(UTC)
        variant = Variant(
            product_code=product_code or generate_product_code(),
            color_code=color_code,
            color_name=color_name,
            size=size,
            stock=stock,
            pre_order=bool(pre_order),
            base_price=as_float(money(base_price)) if base_price is not None else None,
            **_discount_fields(terms),
        )

        with atomic_change(self):
            self.add_variants(variant)
            self.updated_at = moment
            derived = self._recalculate(moment, policy)

        self.raise_(
            VariantAdded(
                product_id=self.id,
                variant_id=variant.id,
                product_code=variant.product_code,
                color_code=color_code,
                color_name=color_name,
                size=size,
                stock=stock,
                price=variant.price,
                stock_status=variant.stock_status,
                created_at=moment,
            )
        )
        self._raise_all(derived)
        return variant

    def remove_variant(self, variant_id, now=None, policy=DEFAULT_POLICY):
        variant = self._get_variant(variant_id)
        moment = now or datetime.now(UTC)
        with atomic_change(self):
            self.remove_variants(variant)
            self.updated_at = moment
            derived = self._recalculate(moment, policy)

        self.raise_(VariantRemoved(product_id=self.id, variant_id=variant_id))
        self._raise_all(derived)

    def update_variant_pricing(
        self,
        variant_id,
        base_price=None,
        discount_percentage=None,
        discount_start_time=None,
        discount_end_time=None,
        discount_type=None,
        discount_amount=None,
        now=None,
        policy=DEFAULT_POLICY,
    ):
        """Replace a variant's pricing overrides; ``None`` reverts a field to inheriting."""
        variant = self._get_variant(variant_id)
        base = money(base_price) if base_price is not None else None
        terms = normalize_discount_terms(
            discount_percentage, discount_start_time, discount_end_time, kind=discount_type, amount=discount_amount
        )

        moment = now or datetime.now(UTC)
        with atomic_change(self):
            variant.base_price = as_float(base) if base is not None else None
            for name, value in _discount_fields(terms).items():
                setattr(variant, name, value)
            self.updated_at = moment
            derived = self._recalculate(moment, policy)

        self.raise_(
            VariantPricingUpdated(
                product_id=self.id,
                variant_id=variant_id,
                base_price=variant.base_price,
                discount_type=variant.discount_type,
                discount_percentage=variant.discount_percentage,
                discount_amount=variant.discount_amount,
                discount_start_time=variant.discount_start_time,
                discount_end_time=variant.discount_end_time,
                updated_at=moment,
            )
        )
        self._raise_all(derived)

    def update_variant_stock(self, variant_id, stock, now=None, policy=DEFAULT_POLICY):
        variant = self._get_variant(variant_id)
        validate_quantity(stock)

        moment = now or datetime.now(UTC)
        previous = variant.stock
        with atomic_change(self):
            variant.stock = stock
            self.updated_at = moment
            derived = self._recalculate(moment, policy)

        self.raise_(
            VariantStockUpdated(
                product_id=self.id,
                variant_id=variant_id,
                previous_stock=previous,
                new_stock=stock,
                updated_at=moment,
            )
        )
        self._raise_all(derived)

    # -------------------------------------------------------------------
    # Re-evaluation and quotes
    # -------------------------------------------------------------------
    def reevaluate(self, now=None, policy=DEFAULT_POLICY) -> int:
        """Recompute derived fields at ``now`` without any edit.

        Used by the periodic sweep so that time-boxed discounts start and
        expire on their own. Returns the number of derived changes.
        """
        moment = now or datetime.now(UTC)
        with atomic_change(self):
            derived = self._recalculate(moment, policy)
            if derived:
                self.updated_at = moment

        self._raise_all(derived)
        return len(derived)

    def quote_price(self, variant_id=None, now=None, policy=DEFAULT_POLICY):
        """Live price resolution for the product or one variant; nothing is persisted."""
        moment = now or datetime.now(UTC)
        if variant_id is None:
            return resolve_product_price(self, moment, policy)
        return resolve_variant_price(self, self._get_variant(variant_id), moment, policy)

    # -------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------
    def _get_variant(self, variant_id):
        variant = next((v for v in self.variants if str(v.id) == str(variant_id)), None)
        if variant is None:
            raise ValidationError({"variants": [f"Variant {variant_id} not found"]})
        return variant

    def _raise_all(self, events):
        for event in events:
            self.raise_(event)

    def _recalculate(self, now, policy):
        """Refresh prices, aggregate stock and statuses; return the events describing the changes."""
        events = []

        for variant in self.variants:
            events.extend(self._apply_price(variant, resolve_variant_price(self, variant, now, policy), now, variant))
            status = classify_stock_status(variant.stock, self.low_stock_threshold, variant.pre_order)
            ref = StockEntityRef(
                product_id=str(self.id),
                product_title=self.title,
                quantity=variant.stock,
                variant_id=str(variant.id),
                color_code=variant.color_code,
                color_name=variant.color_name,
                size=variant.size,
            )
            events.extend(self._apply_status(variant, status, ref, now))

        events.extend(self._apply_price(self, resolve_product_price(self, now, policy), now))

        self.stock = aggregate_stock([v.stock for v in self.variants], self.stock)
        status = classify_stock_status(self.stock, self.low_stock_threshold, self.pre_order)
        ref = StockEntityRef(product_id=str(self.id), product_title=self.title, quantity=self.stock)
        events.extend(self._apply_status(self, status, ref, now))

        self.priced_at = now
        return events

    def _apply_price(self, target, resolution, now, variant=None):
        new_price = as_float(resolution.effective_price)
        applied = as_float(resolution.applied_discount_percentage)
        saved = as_float(resolution.applied_discount_amount)
        if (
            target.price == new_price
            and target.discount_active == resolution.discount_active
            and target.applied_discount_percentage == applied
            and target.applied_discount_amount == saved
        ):
            return []

        previous = target.price
        target.price = new_price
        target.discount_active = resolution.discount_active
        target.applied_discount_percentage = applied
        target.applied_discount_amount = saved

        # First pricing is reported by ProductCreated / VariantAdded
        if previous is None:
            return []

        return [
            PriceRecalculated(
                product_id=self.id,
                variant_id=variant.id if variant is not None else None,
                previous_price=previous,
                new_price=new_price,
                discount_active=resolution.discount_active,
                applied_discount_percentage=applied,
                applied_discount_amount=saved,
                recalculated_at=now,
            )
        ]

    def _apply_status(self, target, status, ref, now):
        previous = target.stock_status
        target.stock_status = status.value

        notice = on_stock_status_transition(ref, previous, status)
        if notice is None:
            return []

        return [
            StockStatusChanged(
                product_id=self.id,
                product_title=self.title,
                variant_id=ref.variant_id,
                color_code=ref.color_code,
                color_name=ref.color_name,
                size=ref.size,
                previous_status=notice.previous_status.value if notice.previous_status else None,
                current_status=notice.current_status.value,
                alert_type=notice.alert_type.value,
                remaining_stock=ref.quantity,
                message=notice.message,
                changed_at=now,
            )
        ]
