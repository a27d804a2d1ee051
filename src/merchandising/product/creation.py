"""Product creation — command and handler."""

import structlog
from protean import handle
from protean.fields import Boolean, DateTime, Float, Integer, String, Text
from protean.utils.globals import current_domain

from merchandising.domain import merchandising, pricing_policy
from merchandising.product.product import Product, slugify

logger = structlog.get_logger(__name__)


@merchandising.command(part_of="Product")
class CreateProduct:
    title: String(required=True, max_length=255)
    base_price: Float(required=True)
    brand: String(max_length=100)
    description: Text()
    slug: String(max_length=255)
    discount_type: String(max_length=20)
    discount_percentage: Float()
    discount_amount: Float()
    discount_start_time: DateTime()
    discount_end_time: DateTime()
    stock: Integer(default=0)
    low_stock_threshold: Integer()
    pre_order: Boolean(default=False)


def unique_slug(base_slug: str) -> str:
    """First free slug among ``base``, ``base-1``, ``base-2`` ..."""
    repo = current_domain.repository_for(Product)

    candidate, counter = base_slug, 1
    while repo._dao.query.filter(slug=candidate).all().items:
        candidate = f"{base_slug}-{counter}"
        counter += 1
    return candidate


@merchandising.command_handler(part_of=Product)
class CreateProductHandler:
    @handle(CreateProduct)
    def create_product(self, command):
        product = Product.create(
            title=command.title,
            base_price=command.base_price,
            slug=unique_slug(command.slug or slugify(command.title)),
            brand=command.brand,
            description=command.description,
            discount_type=command.discount_type,
            discount_percentage=command.discount_percentage,
            discount_amount=command.discount_amount,
            discount_start_time=command.discount_start_time,
            discount_end_time=command.discount_end_time,
            stock=command.stock or 0,
            low_stock_threshold=command.low_stock_threshold,
            pre_order=command.pre_order or False,
            policy=pricing_policy,
        )
        current_domain.repository_for(Product).add(product)

        logger.info(
            "Product created",
            product_id=str(product.id),
            slug=product.slug,
            price=product.price,
            stock_status=product.stock_status,
        )
        return str(product.id)
