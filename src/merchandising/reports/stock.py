"""Stock report: active products ordered by stock, lowest first.

Summary counts always cover every active product; the ``status`` and
``low_stock_only`` filters narrow the listed (and paged) rows only.
"""

from dataclasses import dataclass, field

from protean.exceptions import ValidationError
from protean.utils.globals import current_domain

from merchandising.pricing.stock import StockStatus
from merchandising.product.product import Product
from merchandising.utils.paging import fetch_page

_ORDER = ["stock", "title"]


@dataclass
class VariantStockRow:
    variant_id: str
    product_code: str
    color_name: str
    size: str
    stock: int
    stock_status: str


@dataclass
class ProductStockRow:
    product_id: str
    title: str
    slug: str
    stock: int
    stock_status: str
    low_stock_threshold: int
    pre_order: bool
    variants: list[VariantStockRow] = field(default_factory=list)


@dataclass
class StockReport:
    products: list[ProductStockRow]
    summary: dict[str, int]
    total: int
    page: int
    page_size: int
    pages: int


def _row(product) -> ProductStockRow:
    return ProductStockRow(
        product_id=str(product.id),
        title=product.title,
        slug=product.slug,
        stock=product.stock,
        stock_status=product.stock_status,
        low_stock_threshold=product.low_stock_threshold,
        pre_order=product.pre_order,
        variants=[
            VariantStockRow(
                variant_id=str(v.id),
                product_code=v.product_code,
                color_name=v.color_name,
                size=v.size,
                stock=v.stock,
                stock_status=v.stock_status,
            )
            for v in sorted(product.variants, key=lambda v: v.stock)
        ],
    )


def _summary(repo) -> dict[str, int]:
    summary = {}
    for status in StockStatus:
        _, summary[status.value] = fetch_page(repo, _ORDER, page_size=1, is_active=True, stock_status=status.value)
    _, summary["total"] = fetch_page(repo, _ORDER, page_size=1, is_active=True)
    return summary


def build_stock_report(
    status: str | None = None,
    low_stock_only: bool = False,
    page: int = 1,
    page_size: int = 10,
) -> StockReport:
    """One page of the stock report.

    ``low_stock_only`` lists ``low_stock`` products only and takes precedence
    over ``status``.
    """
    if status is not None and status not in {s.value for s in StockStatus}:
        raise ValidationError({"status": [f"Unknown stock status: {status}"]})
    if page < 1 or page_size < 1:
        raise ValidationError({"page": ["Page and page size must be positive"]})

    filters = {"is_active": True}
    if low_stock_only:
        filters["stock_status"] = StockStatus.LOW_STOCK.value
    elif status is not None:
        filters["stock_status"] = status

    repo = current_domain.repository_for(Product)
    products, total = fetch_page(repo, _ORDER, page=page, page_size=page_size, **filters)

    return StockReport(
        products=[_row(product) for product in products],
        summary=_summary(repo),
        total=total,
        page=page,
        page_size=page_size,
        pages=max(1, -(-total // page_size)),
    )
