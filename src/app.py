"""Storefront merchandising FastAPI application.

Processes commands synchronously via HTTP. Each request to a merchandising
route is wrapped in the domain context.

Usage:
    uvicorn src.app:app --host 0.0.0.0 --port 8000 --reload
"""

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# PROTEAN_ENV controls which config overlay is applied:
#   - default      → sync event processing (alerts recorded in the request)
#   - "production" → async event processing (alerts recorded via Engine)
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from merchandising.domain import merchandising  # noqa: E402
from protean.integrations.fastapi import register_exception_handlers

merchandising.init()

_DOMAIN_PREFIXES = ("/products", "/pricing", "/stock-alerts", "/stock-reports")


# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="Storefront Merchandising API",
    description="Product pricing, time-boxed discounts and stock status",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)


@app.middleware("http")
async def domain_context_middleware(request: Request, call_next):
    """Push the merchandising domain context for domain routes."""
    if request.url.path.startswith(_DOMAIN_PREFIXES):
        with merchandising.domain_context():
            response = await call_next(request)
        return response
    # Health check, docs, etc.
    return await call_next(request)


# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
from merchandising.api import alert_router, pricing_router, product_router, report_router  # noqa: E402

app.include_router(product_router)
app.include_router(pricing_router)
app.include_router(alert_router)
app.include_router(report_router)


# ---------------------------------------------------------------------------
# Health / root
# ---------------------------------------------------------------------------
@app.get("/health")
async def health():
    return JSONResponse(
        content={
            "status": "ok",
            "domain": merchandising.name,
        }
    )
