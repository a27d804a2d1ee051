"""Variant management — commands and handler."""

from protean import handle
from protean.fields import Boolean, DateTime, Float, Identifier, Integer, String
from protean.utils.globals import current_domain

from merchandising.domain import merchandising, pricing_policy
from merchandising.product.product import Product


@merchandising.command(part_of="Product")
class AddVariant:
    product_id: Identifier(required=True)
    color_code: String(required=True, max_length=20)
    color_name: String(required=True, max_length=100)
    size: String(required=True, max_length=50)
    stock: Integer(default=0)
    product_code: String(max_length=20)
    base_price: Float()
    discount_type: String(max_length=20)
    discount_percentage: Float()
    discount_amount: Float()
    discount_start_time: DateTime()
    discount_end_time: DateTime()
    pre_order: Boolean(default=False)


@merchandising.command(part_of="Product")
class RemoveVariant:
    product_id: Identifier(required=True)
    variant_id: Identifier(required=True)


@merchandising.command_handler(part_of=Product)
class ManageVariantsHandler:
    @handle(AddVariant)
    def add_variant(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)

        variant = product.add_variant(
            color_code=command.color_code,
            color_name=command.color_name,
            size=command.size,
            stock=command.stock or 0,
            product_code=command.product_code,
            base_price=command.base_price,
            discount_type=command.discount_type,
            discount_percentage=command.discount_percentage,
            discount_amount=command.discount_amount,
            discount_start_time=command.discount_start_time,
            discount_end_time=command.discount_end_time,
            pre_order=command.pre_order or False,
            policy=pricing_policy,
        )
        repo.add(product)
        return str(variant.id)

    @handle(RemoveVariant)
    def remove_variant(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.remove_variant(command.variant_id, policy=pricing_policy)
        repo.add(product)
