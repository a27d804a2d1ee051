"""Product and variant pricing — commands and handler."""

from protean import handle
from protean.fields import DateTime, Float, Identifier, String
from protean.utils.globals import current_domain

from merchandising.domain import merchandising, pricing_policy
from merchandising.product.product import Product


@merchandising.command(part_of="Product")
class UpdateProductPricing:
    """Replace the product's base price and product-level discount.

    Omitting the discount value for ``discount_type`` (percentage by
    default) removes the discount.
    """

    product_id: Identifier(required=True)
    base_price: Float(required=True)
    discount_type: String(max_length=20)
    discount_percentage: Float()
    discount_amount: Float()
    discount_start_time: DateTime()
    discount_end_time: DateTime()


@merchandising.command(part_of="Product")
class UpdateVariantPricing:
    """Replace a variant's overrides; omitted fields fall back to the product's."""

    product_id: Identifier(required=True)
    variant_id: Identifier(required=True)
    base_price: Float()
    discount_type: String(max_length=20)
    discount_percentage: Float()
    discount_amount: Float()
    discount_start_time: DateTime()
    discount_end_time: DateTime()


@merchandising.command_handler(part_of=Product)
class ManagePricingHandler:
    @handle(UpdateProductPricing)
    def update_product_pricing(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.update_pricing(
            base_price=command.base_price,
            discount_type=command.discount_type,
            discount_percentage=command.discount_percentage,
            discount_amount=command.discount_amount,
            discount_start_time=command.discount_start_time,
            discount_end_time=command.discount_end_time,
            policy=pricing_policy,
        )
        repo.add(product)

    @handle(UpdateVariantPricing)
    def update_variant_pricing(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.update_variant_pricing(
            variant_id=command.variant_id,
            base_price=command.base_price,
            discount_type=command.discount_type,
            discount_percentage=command.discount_percentage,
            discount_amount=command.discount_amount,
            discount_start_time=command.discount_start_time,
            discount_end_time=command.discount_end_time,
            policy=pricing_policy,
        )
        repo.add(product)
