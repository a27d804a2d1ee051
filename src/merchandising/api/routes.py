"""FastAPI endpoints for the Merchandising domain.

Writes translate request schemas into commands; reads go straight to the
repositories.
"""

from dataclasses import asdict
from datetime import UTC, datetime

from fastapi import APIRouter
from protean.utils.globals import current_domain

from merchandising.alerts.management import MarkAllStockAlertsRead, MarkStockAlertRead
from merchandising.alerts.queries import list_stock_alerts
from merchandising.api.schemas import (
    AddVariantRequest,
    CreateProductRequest,
    MarkedReadResponse,
    PriceQuoteResponse,
    ProductIdResponse,
    ProductResponse,
    ReevaluatePricingRequest,
    ReevaluationResponse,
    SetPreOrderRequest,
    SetThresholdRequest,
    StatusResponse,
    StockAlertListResponse,
    StockAlertResponse,
    StockReportResponse,
    UpdatePricingRequest,
    UpdateStockRequest,
    UpdateVariantPricingRequest,
    VariantIdResponse,
    VariantResponse,
)
from merchandising.domain import pricing_policy
from merchandising.pricing.money import as_float
from merchandising.product.creation import CreateProduct
from merchandising.product.inventory import SetLowStockThreshold, SetPreOrder, UpdateProductStock, UpdateVariantStock
from merchandising.product.pricing import UpdateProductPricing, UpdateVariantPricing
from merchandising.product.product import Product
from merchandising.product.sweep import reevaluate_all_products
from merchandising.product.variants import AddVariant, RemoveVariant
from merchandising.reports.stock import build_stock_report

product_router = APIRouter(prefix="/products", tags=["products"])
pricing_router = APIRouter(prefix="/pricing", tags=["pricing"])
alert_router = APIRouter(prefix="/stock-alerts", tags=["stock-alerts"])
report_router = APIRouter(prefix="/stock-reports", tags=["stock-reports"])


def _product_response(product) -> ProductResponse:
    return ProductResponse(
        product_id=str(product.id),
        title=product.title,
        slug=product.slug,
        brand=product.brand,
        base_price=product.base_price,
        price=product.price,
        discount_type=product.discount_type,
        discount_percentage=product.discount_percentage,
        discount_amount=product.discount_amount,
        discount_start_time=product.discount_start_time,
        discount_end_time=product.discount_end_time,
        discount_active=product.discount_active,
        applied_discount_amount=product.applied_discount_amount,
        stock=product.stock,
        stock_status=product.stock_status,
        low_stock_threshold=product.low_stock_threshold,
        pre_order=product.pre_order,
        variants=[
            VariantResponse(
                variant_id=str(v.id),
                product_code=v.product_code,
                color_code=v.color_code,
                color_name=v.color_name,
                size=v.size,
                stock=v.stock,
                stock_status=v.stock_status,
                pre_order=v.pre_order,
                base_price=v.base_price,
                discount_type=v.discount_type,
                discount_percentage=v.discount_percentage,
                discount_amount=v.discount_amount,
                price=v.price,
                discount_active=v.discount_active,
                applied_discount_amount=v.applied_discount_amount,
            )
            for v in product.variants
        ],
    )


# --- Product endpoints ---


@product_router.post("", status_code=201, response_model=ProductIdResponse)
async def create_product(body: CreateProductRequest) -> ProductIdResponse:
    command = CreateProduct(
        title=body.title,
        base_price=body.base_price,
        brand=body.brand,
        description=body.description,
        slug=body.slug,
        discount_type=body.discount_type,
        discount_percentage=body.discount_percentage,
        discount_amount=body.discount_amount,
        discount_start_time=body.discount_start_time,
        discount_end_time=body.discount_end_time,
        stock=body.stock,
        low_stock_threshold=body.low_stock_threshold,
        pre_order=body.pre_order,
    )
    result = current_domain.process(command, asynchronous=False)
    return ProductIdResponse(product_id=result)


@product_router.get("/{product_id}", response_model=ProductResponse)
async def get_product(product_id: str) -> ProductResponse:
    product = current_domain.repository_for(Product).get(product_id)
    return _product_response(product)


@product_router.get("/{product_id}/price", response_model=PriceQuoteResponse)
async def quote_price(product_id: str, variant_id: str | None = None) -> PriceQuoteResponse:
    """Live effective price as of now; nothing is persisted."""
    product = current_domain.repository_for(Product).get(product_id)
    now = datetime.now(UTC)
    resolution = product.quote_price(variant_id=variant_id, now=now, policy=pricing_policy)
    return PriceQuoteResponse(
        product_id=product_id,
        variant_id=variant_id,
        effective_price=as_float(resolution.effective_price),
        discount_active=resolution.discount_active,
        applied_discount_percentage=as_float(resolution.applied_discount_percentage),
        applied_discount_amount=as_float(resolution.applied_discount_amount),
        discount_type=resolution.discount_type.value if resolution.discount_type else None,
        as_of=now,
    )


@product_router.put("/{product_id}/pricing", response_model=StatusResponse)
async def update_pricing(product_id: str, body: UpdatePricingRequest) -> StatusResponse:
    command = UpdateProductPricing(
        product_id=product_id,
        base_price=body.base_price,
        discount_type=body.discount_type,
        discount_percentage=body.discount_percentage,
        discount_amount=body.discount_amount,
        discount_start_time=body.discount_start_time,
        discount_end_time=body.discount_end_time,
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@product_router.put("/{product_id}/stock", response_model=StatusResponse)
async def update_stock(product_id: str, body: UpdateStockRequest) -> StatusResponse:
    current_domain.process(UpdateProductStock(product_id=product_id, stock=body.stock), asynchronous=False)
    return StatusResponse()


@product_router.put("/{product_id}/low-stock-threshold", response_model=StatusResponse)
async def set_low_stock_threshold(product_id: str, body: SetThresholdRequest) -> StatusResponse:
    current_domain.process(
        SetLowStockThreshold(product_id=product_id, threshold=body.threshold),
        asynchronous=False,
    )
    return StatusResponse()


@product_router.put("/{product_id}/pre-order", response_model=StatusResponse)
async def set_pre_order(product_id: str, body: SetPreOrderRequest) -> StatusResponse:
    command = SetPreOrder(
        product_id=product_id,
        variant_id=body.variant_id,
        pre_order=body.pre_order,
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@product_router.post("/{product_id}/variants", status_code=201, response_model=VariantIdResponse)
async def add_variant(product_id: str, body: AddVariantRequest) -> VariantIdResponse:
    command = AddVariant(
        product_id=product_id,
        color_code=body.color_code,
        color_name=body.color_name,
        size=body.size,
        stock=body.stock,
        product_code=body.product_code,
        base_price=body.base_price,
        discount_type=body.discount_type,
        discount_percentage=body.discount_percentage,
        discount_amount=body.discount_amount,
        discount_start_time=body.discount_start_time,
        discount_end_time=body.discount_end_time,
        pre_order=body.pre_order,
    )
    result = current_domain.process(command, asynchronous=False)
    return VariantIdResponse(variant_id=result)


@product_router.delete("/{product_id}/variants/{variant_id}", response_model=StatusResponse)
async def remove_variant(product_id: str, variant_id: str) -> StatusResponse:
    current_domain.process(RemoveVariant(product_id=product_id, variant_id=variant_id), asynchronous=False)
    return StatusResponse()


@product_router.put("/{product_id}/variants/{variant_id}/pricing", response_model=StatusResponse)
async def update_variant_pricing(
    product_id: str, variant_id: str, body: UpdateVariantPricingRequest
) -> StatusResponse:
    command = UpdateVariantPricing(
        product_id=product_id,
        variant_id=variant_id,
        base_price=body.base_price,
        discount_type=body.discount_type,
        discount_percentage=body.discount_percentage,
        discount_amount=body.discount_amount,
        discount_start_time=body.discount_start_time,
        discount_end_time=body.discount_end_time,
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@product_router.put("/{product_id}/variants/{variant_id}/stock", response_model=StatusResponse)
async def update_variant_stock(product_id: str, variant_id: str, body: UpdateStockRequest) -> StatusResponse:
    command = UpdateVariantStock(
        product_id=product_id,
        variant_id=variant_id,
        stock=body.stock,
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


# --- Pricing maintenance ---


@pricing_router.post("/reevaluate", response_model=ReevaluationResponse)
async def reevaluate_pricing(body: ReevaluatePricingRequest | None = None) -> ReevaluationResponse:
    """Run the periodic price/stock-status sweep now."""
    result = reevaluate_all_products(as_of=body.as_of if body else None)
    return ReevaluationResponse(**result)


# --- Stock alert inbox ---


@alert_router.get("", response_model=StockAlertListResponse)
async def get_stock_alerts(page: int = 1, page_size: int = 20, unread_only: bool = False) -> StockAlertListResponse:
    result = list_stock_alerts(page=max(page, 1), page_size=min(max(page_size, 1), 100), unread_only=unread_only)
    return StockAlertListResponse(
        alerts=[
            StockAlertResponse(
                alert_id=str(a.id),
                product_id=str(a.product_id),
                product_title=a.product_title,
                variant_id=str(a.variant_id) if a.variant_id else None,
                color_name=a.color_name,
                size=a.size,
                alert_type=a.alert_type,
                message=a.message,
                remaining_stock=a.remaining_stock,
                is_read=a.is_read,
                notified_at=a.notified_at,
            )
            for a in result.alerts
        ],
        total=result.total,
        unread=result.unread,
        page=result.page,
        pages=result.pages,
    )


@alert_router.put("/read-all", response_model=MarkedReadResponse)
async def mark_all_alerts_read(product_id: str | None = None) -> MarkedReadResponse:
    marked = current_domain.process(MarkAllStockAlertsRead(product_id=product_id), asynchronous=False)
    return MarkedReadResponse(marked=marked or 0)


@alert_router.put("/{alert_id}/read", response_model=StatusResponse)
async def mark_alert_read(alert_id: str) -> StatusResponse:
    current_domain.process(MarkStockAlertRead(alert_id=alert_id), asynchronous=False)
    return StatusResponse()


# --- Stock report ---


@report_router.get("", response_model=StockReportResponse)
async def get_stock_report(
    status: str | None = None, low_stock_only: bool = False, page: int = 1, page_size: int = 10
) -> StockReportResponse:
    report = build_stock_report(
        status=status, low_stock_only=low_stock_only, page=max(page, 1), page_size=min(max(page_size, 1), 100)
    )
    return StockReportResponse(**asdict(report))
