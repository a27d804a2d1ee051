"""Domain events for the Product aggregate."""

from protean.fields import Boolean, DateTime, Float, Identifier, Integer, String

from merchandising.domain import merchandising


@merchandising.event(part_of="Product")
class ProductCreated:
    """A new product was added with its initial price and stock status."""

    __version__ = "v1"

    product_id: Identifier(required=True)
    title: String(required=True)
    slug: String(required=True)
    base_price: Float(required=True)
    price: Float(required=True)
    stock: Integer(required=True)
    stock_status: String(required=True)
    created_at: DateTime(required=True)


@merchandising.event(part_of="Product")
class ProductPricingUpdated:
    """The product's base price or product-level discount was changed."""

    __version__ = "v1"

    product_id: Identifier(required=True)
    base_price: Float(required=True)
    discount_type: String()
    discount_percentage: Float()
    discount_amount: Float()
    discount_start_time: DateTime()
    discount_end_time: DateTime()
    updated_at: DateTime(required=True)


@merchandising.event(part_of="Product")
class ProductStockUpdated:
    """Stock of a product without variants was set."""

    __version__ = "v1"

    product_id: Identifier(required=True)
    previous_stock: Integer(required=True)
    new_stock: Integer(required=True)
    updated_at: DateTime(required=True)


@merchandising.event(part_of="Product")
class LowStockThresholdChanged:
    __version__ = "v1"

    product_id: Identifier(required=True)
    previous_threshold: Integer(required=True)
    new_threshold: Integer(required=True)


@merchandising.event(part_of="Product")
class PreOrderToggled:
    """Pre-order was switched on or off for the product or one variant."""

    __version__ = "v1"

    product_id: Identifier(required=True)
    variant_id: Identifier()
    pre_order: Boolean(required=True)


@merchandising.event(part_of="Product")
class VariantAdded:
    """A new color/size variant was added to a product."""

    __version__ = "v1"

    product_id: Identifier(required=True)
    variant_id: Identifier(required=True)
    product_code: String(required=True)
    color_code: String(required=True)
    color_name: String(required=True)
    size: String(required=True)
    stock: Integer(required=True)
    price: Float(required=True)
    stock_status: String(required=True)
    created_at: DateTime(required=True)


@merchandising.event(part_of="Product")
class VariantRemoved:
    __version__ = "v1"

    product_id: Identifier(required=True)
    variant_id: Identifier(required=True)


@merchandising.event(part_of="Product")
class VariantPricingUpdated:
    """A variant's price override or discount override was changed.

    ``None`` values mean the variant inherits the product-level setting.
    """

    __version__ = "v1"

    product_id: Identifier(required=True)
    variant_id: Identifier(required=True)
    base_price: Float()
    discount_type: String()
    discount_percentage: Float()
    discount_amount: Float()
    discount_start_time: DateTime()
    discount_end_time: DateTime()
    updated_at: DateTime(required=True)


@merchandising.event(part_of="Product")
class VariantStockUpdated:
    __version__ = "v1"

    product_id: Identifier(required=True)
    variant_id: Identifier(required=True)
    previous_stock: Integer(required=True)
    new_stock: Integer(required=True)
    updated_at: DateTime(required=True)


# Derived-state events, raised by recalculation


@merchandising.event(part_of="Product")
class PriceRecalculated:
    """The effective price (or discount activity) of the product or a variant changed."""

    __version__ = "v1"

    product_id: Identifier(required=True)
    variant_id: Identifier()
    previous_price: Float()
    new_price: Float(required=True)
    discount_active: Boolean(required=True)
    applied_discount_percentage: Float(required=True)
    applied_discount_amount: Float(default=0.0)
    recalculated_at: DateTime(required=True)


@merchandising.event(part_of="Product")
class StockStatusChanged:
    """A stock status transition worth alerting operations about."""

    __version__ = "v1"

    product_id: Identifier(required=True)
    product_title: String(required=True)
    variant_id: Identifier()
    color_code: String()
    color_name: String()
    size: String()
    previous_status: String()
    current_status: String(required=True)
    alert_type: String(required=True)
    remaining_stock: Integer(required=True)
    message: String(required=True, max_length=500)
    changed_at: DateTime(required=True)
