"""Stock, low-stock threshold and pre-order — commands and handler."""

from protean import handle
from protean.fields import Boolean, Identifier, Integer
from protean.utils.globals import current_domain

from merchandising.domain import merchandising, pricing_policy
from merchandising.product.product import Product


@merchandising.command(part_of="Product")
class UpdateProductStock:
    product_id: Identifier(required=True)
    stock: Integer(required=True)


@merchandising.command(part_of="Product")
class UpdateVariantStock:
    product_id: Identifier(required=True)
    variant_id: Identifier(required=True)
    stock: Integer(required=True)


@merchandising.command(part_of="Product")
class SetLowStockThreshold:
    product_id: Identifier(required=True)
    threshold: Integer(required=True)


@merchandising.command(part_of="Product")
class SetPreOrder:
    product_id: Identifier(required=True)
    variant_id: Identifier()
    pre_order: Boolean(required=True)


@merchandising.command_handler(part_of=Product)
class ManageInventoryHandler:
    @handle(UpdateProductStock)
    def update_product_stock(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.update_stock(command.stock, policy=pricing_policy)
        repo.add(product)

    @handle(UpdateVariantStock)
    def update_variant_stock(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.update_variant_stock(command.variant_id, command.stock, policy=pricing_policy)
        repo.add(product)

    @handle(SetLowStockThreshold)
    def set_low_stock_threshold(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.set_low_stock_threshold(command.threshold, policy=pricing_policy)
        repo.add(product)

    @handle(SetPreOrder)
    def set_pre_order(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.set_pre_order(command.pre_order, variant_id=command.variant_id, policy=pricing_policy)
        repo.add(product)
