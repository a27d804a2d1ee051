"""Merchandising domain API package."""

from merchandising.api.routes import alert_router, pricing_router, product_router, report_router

__all__ = ["product_router", "pricing_router", "alert_router", "report_router"]
