"""Pydantic request/response schemas for the Merchandising API.

API schemas are separate from Protean commands. Range checks on prices,
discounts and quantities are left to the domain so that every rejection
surfaces the same way (400 with a field -> messages body).
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

# --- Product Request Schemas ---


class CreateProductRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "title": "Linen Summer Shirt",
                    "base_price": 59.9,
                    "brand": "Northwind",
                    "discount_percentage": 20,
                    "discount_start_time": "2026-06-01T00:00:00Z",
                    "discount_end_time": "2026-06-30T23:59:59Z",
                    "low_stock_threshold": 5,
                }
            ]
        }
    }

    title: str = Field(..., max_length=255)
    base_price: float
    brand: str | None = Field(None, max_length=100)
    description: str | None = None
    slug: str | None = Field(None, max_length=255)
    discount_type: str | None = None
    discount_percentage: float | None = None
    discount_amount: float | None = None
    discount_start_time: datetime | None = None
    discount_end_time: datetime | None = None
    stock: int = 0
    low_stock_threshold: int | None = None
    pre_order: bool = False


class UpdatePricingRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "base_price": 49.9,
                    "discount_percentage": 15,
                    "discount_start_time": "2026-07-01T00:00:00Z",
                    "discount_end_time": "2026-07-15T00:00:00Z",
                }
            ]
        }
    }

    base_price: float
    discount_type: str | None = None
    discount_percentage: float | None = None
    discount_amount: float | None = None
    discount_start_time: datetime | None = None
    discount_end_time: datetime | None = None


class UpdateStockRequest(BaseModel):
    stock: int


class SetThresholdRequest(BaseModel):
    threshold: int


class SetPreOrderRequest(BaseModel):
    pre_order: bool
    variant_id: str | None = None


class AddVariantRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "color_code": "#1F3A93",
                    "color_name": "Navy",
                    "size": "M",
                    "stock": 12,
                    "discount_percentage": 0,
                }
            ]
        }
    }

    color_code: str = Field(..., max_length=20)
    color_name: str = Field(..., max_length=100)
    size: str = Field(..., max_length=50)
    stock: int = 0
    product_code: str | None = Field(None, max_length=20)
    base_price: float | None = None
    discount_type: str | None = None
    discount_percentage: float | None = None
    discount_amount: float | None = None
    discount_start_time: datetime | None = None
    discount_end_time: datetime | None = None
    pre_order: bool = False


class UpdateVariantPricingRequest(BaseModel):
    """Omitted fields revert the variant to the product's setting."""

    base_price: float | None = None
    discount_type: str | None = None
    discount_percentage: float | None = None
    discount_amount: float | None = None
    discount_start_time: datetime | None = None
    discount_end_time: datetime | None = None


class ReevaluatePricingRequest(BaseModel):
    as_of: datetime | None = None


# --- Response Schemas ---


class ProductIdResponse(BaseModel):
    product_id: str


class VariantIdResponse(BaseModel):
    variant_id: str


class StatusResponse(BaseModel):
    status: str = "ok"


class VariantResponse(BaseModel):
    variant_id: str
    product_code: str
    color_code: str
    color_name: str
    size: str
    stock: int
    stock_status: str | None = None
    pre_order: bool
    base_price: float | None = None
    discount_type: str | None = None
    discount_percentage: float | None = None
    discount_amount: float | None = None
    price: float | None = None
    discount_active: bool
    applied_discount_amount: float = 0.0


class ProductResponse(BaseModel):
    product_id: str
    title: str
    slug: str
    brand: str | None = None
    base_price: float
    price: float | None = None
    discount_type: str | None = None
    discount_percentage: float | None = None
    discount_amount: float | None = None
    discount_start_time: datetime | None = None
    discount_end_time: datetime | None = None
    discount_active: bool
    stock: int
    stock_status: str | None = None
    low_stock_threshold: int
    pre_order: bool
    variants: list[VariantResponse] = []


class PriceQuoteResponse(BaseModel):
    product_id: str
    variant_id: str | None = None
    effective_price: float
    discount_active: bool
    applied_discount_percentage: float
    applied_discount_amount: float
    discount_type: str | None = None
    as_of: datetime


class ReevaluationResponse(BaseModel):
    evaluated: int
    changed: int
    failed: int


class StockAlertResponse(BaseModel):
    alert_id: str
    product_id: str
    product_title: str
    variant_id: str | None = None
    color_name: str | None = None
    size: str | None = None
    alert_type: str
    message: str
    remaining_stock: int
    is_read: bool
    notified_at: datetime | None = None


class StockAlertListResponse(BaseModel):
    alerts: list[StockAlertResponse]
    total: int
    unread: int
    page: int
    pages: int


class MarkedReadResponse(BaseModel):
    status: str = "ok"
    marked: int


class VariantStockResponse(BaseModel):
    variant_id: str
    product_code: str
    color_name: str
    size: str
    stock: int
    stock_status: str | None = None


class ProductStockResponse(BaseModel):
    product_id: str
    title: str
    slug: str
    stock: int
    stock_status: str | None = None
    low_stock_threshold: int
    pre_order: bool
    variants: list[VariantStockResponse] = []


class StockReportResponse(BaseModel):
    products: list[ProductStockResponse]
    summary: dict[str, int]
    total: int
    page: int
    page_size: int
    pages: int
