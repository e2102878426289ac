"""
FastAPI Application Entry Point

Mock Food Ordering API - static catalog plus in-memory carts and orders.

Endpoints:
    - GET /outlets, GET /outlets/{id}: Outlet catalog
    - GET /menus/{id}: Menu with items (falls back to the first menu)
    - POST /carts, GET /carts/{cartId}: Cart lifecycle
    - POST/PATCH/DELETE /carts/{cartId}/items[/{lineId}]: Line items
    - POST /orders, GET /orders/{id}: Orders with simulated status timeline
    - GET /health: System health check

Run:
    python -m food_ordering.main
    uvicorn food_ordering.main:app --port 3001

Version: 1.0.0
"""

import asyncio
import contextlib
import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional

import uvicorn
from fastapi import Body, Depends, FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from food_ordering.catalog import CatalogStore, get_catalog
from food_ordering.core.config import get_settings, setup_logging
from food_ordering.core.errors import InvalidReferenceError, NotFoundError
from food_ordering.models import OptionSnapshot
from food_ordering.schemas import (
    AddLineRequest,
    CartResponse,
    CreateOrderRequest,
    ErrorResponse,
    HealthResponse,
    Menu,
    OrderResponse,
    Outlet,
    UpdateLineRequest,
)
from food_ordering.services import get_cart_service, get_order_service
from food_ordering.services.carts import CartService
from food_ordering.services.orders import OrderService

# Initialize configuration and logging
settings = get_settings()
setup_logging()
logger = logging.getLogger(__name__)


# =============================================================================
# APPLICATION LIFECYCLE
# =============================================================================

async def run_status_ticker(orders: OrderService, interval: float) -> None:
    """Fire due order transitions periodically so orders progress unread."""
    while True:
        await asyncio.sleep(interval)
        orders.advance()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application startup and shutdown events.
    """
    logger.info("=" * 60)
    logger.info(f"🚀 Starting {settings.app_name}")
    logger.info(f"   Version: {settings.app_version}")
    logger.info(f"   Environment: {settings.env_mode.value}")
    logger.info(f"   Debug: {settings.debug}")
    logger.info("=" * 60)

    catalog = get_catalog()
    logger.info(f"✅ Catalog: {len(catalog.outlets)} outlets, {len(catalog.menus)} menus")

    ticker = asyncio.create_task(
        run_status_ticker(get_order_service(), settings.scheduler_tick_seconds)
    )
    logger.info(f"✅ Status ticker every {settings.scheduler_tick_seconds}s")
    logger.info(f"Mock API running on port {settings.api_port}")

    yield  # Application runs

    logger.info("Shutting down...")
    ticker.cancel()
    with contextlib.suppress(asyncio.CancelledError):
        await ticker
    logger.info("✅ Cleanup complete")


# =============================================================================
# APPLICATION INSTANCE
# =============================================================================

app = FastAPI(
    title=settings.app_name,
    description=(
        "Mock food-ordering backend: static outlets and menus, "
        "in-memory carts, and orders with a simulated delivery timeline."
    ),
    version=settings.app_version,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# ROOT & HEALTH ENDPOINTS
# =============================================================================

@app.get("/", tags=["Root"])
async def root() -> dict[str, str]:
    """API root with navigation links."""
    return {
        "message": f"Welcome to {settings.app_name}",
        "version": settings.app_version,
        "environment": settings.env_mode.value,
        "documentation": "/docs",
        "health": "/health",
    }


@app.get(
    "/health",
    response_model=HealthResponse,
    tags=["Health"],
    summary="System Health Check",
)
async def health_check(
    carts: CartService = Depends(get_cart_service),
    orders: OrderService = Depends(get_order_service),
) -> HealthResponse:
    """Report in-memory registry sizes."""
    return HealthResponse(
        status="operational",
        carts=len(carts),
        orders=len(orders),
        pending_transitions=len(orders.scheduler),
        timestamp=datetime.now(timezone.utc),
    )


# =============================================================================
# CATALOG ENDPOINTS
# =============================================================================

@app.get(
    "/outlets",
    response_model=list[Outlet],
    tags=["Catalog"],
)
async def list_outlets(catalog: CatalogStore = Depends(get_catalog)) -> list[Outlet]:
    return catalog.list_outlets()


@app.get(
    "/outlets/{outlet_id}",
    response_model=Outlet,
    tags=["Catalog"],
)
async def get_outlet(
    outlet_id: str,
    catalog: CatalogStore = Depends(get_catalog),
) -> Outlet:
    return catalog.get_outlet(outlet_id)


@app.get(
    "/menus/{menu_id}",
    response_model=Menu,
    response_model_exclude_none=True,
    tags=["Catalog"],
)
async def get_menu(
    menu_id: str,
    catalog: CatalogStore = Depends(get_catalog),
) -> Menu:
    """Get a menu; unknown ids fall back to the first menu."""
    return catalog.get_menu(menu_id)


# =============================================================================
# CART ENDPOINTS
# =============================================================================

@app.post(
    "/carts",
    response_model=CartResponse,
    response_model_exclude_none=True,
    status_code=201,
    tags=["Carts"],
)
async def create_cart(carts: CartService = Depends(get_cart_service)) -> CartResponse:
    return CartResponse.model_validate(carts.create_cart())


@app.get(
    "/carts/{cart_id}",
    response_model=CartResponse,
    response_model_exclude_none=True,
    tags=["Carts"],
)
async def get_cart(
    cart_id: str,
    carts: CartService = Depends(get_cart_service),
) -> CartResponse:
    return CartResponse.model_validate(carts.get_cart(cart_id))


@app.post(
    "/carts/{cart_id}/items",
    response_model=CartResponse,
    response_model_exclude_none=True,
    status_code=201,
    responses={400: {"model": ErrorResponse}},
    tags=["Carts"],
    summary="Add Line Item",
)
async def add_line(
    cart_id: str,
    payload: Optional[AddLineRequest] = Body(default=None),
    carts: CartService = Depends(get_cart_service),
) -> CartResponse:
    """
    Add a catalog item to the cart.

    Item name and price are copied onto the new line, along with the
    chosen options, so later catalog changes never alter the line.
    """
    payload = payload or AddLineRequest()
    options = [
        OptionSnapshot(id=o.id, price=o.price, name=o.name)
        for o in payload.options or []
    ]
    cart = carts.add_line(cart_id, payload.item_id, payload.qty, options)
    return CartResponse.model_validate(cart)


@app.patch(
    "/carts/{cart_id}/items/{line_id}",
    response_model=CartResponse,
    response_model_exclude_none=True,
    tags=["Carts"],
    summary="Update Line Quantity",
)
async def update_line(
    cart_id: str,
    line_id: str,
    payload: Optional[UpdateLineRequest] = Body(default=None),
    carts: CartService = Depends(get_cart_service),
) -> CartResponse:
    payload = payload or UpdateLineRequest()
    cart = carts.update_line_qty(cart_id, line_id, payload.qty)
    return CartResponse.model_validate(cart)


@app.delete(
    "/carts/{cart_id}/items/{line_id}",
    status_code=204,
    response_class=Response,
    tags=["Carts"],
    summary="Remove Line Item",
)
async def remove_line(
    cart_id: str,
    line_id: str,
    carts: CartService = Depends(get_cart_service),
) -> Response:
    """Remove a line; removing a line that is not there still succeeds."""
    carts.remove_line(cart_id, line_id)
    return Response(status_code=204)


# =============================================================================
# ORDER ENDPOINTS
# =============================================================================

@app.post(
    "/orders",
    response_model=OrderResponse,
    status_code=201,
    responses={400: {"model": ErrorResponse}},
    tags=["Orders"],
    summary="Create Order",
)
async def create_order(
    payload: Optional[CreateOrderRequest] = Body(default=None),
    orders: OrderService = Depends(get_order_service),
) -> OrderResponse:
    """
    Place an order from a cart.

    The cart's current totals are copied into the order amount. The order
    then moves through preparing, out_for_delivery and delivered on its own.
    """
    payload = payload or CreateOrderRequest()
    order = orders.create_order(
        cart_id=payload.cart_id,
        outlet_id=payload.outlet_id,
        fulfillment=payload.fulfillment,
        payment_method=payload.payment.method if payload.payment else None,
    )
    return OrderResponse.model_validate(order)


@app.get(
    "/orders/{order_id}",
    response_model=OrderResponse,
    tags=["Orders"],
)
async def get_order(
    order_id: str,
    orders: OrderService = Depends(get_order_service),
) -> OrderResponse:
    return OrderResponse.model_validate(orders.get_order(order_id))


# =============================================================================
# ERROR HANDLERS
# =============================================================================

@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError) -> Response:
    """Unknown ids answer with an empty 404."""
    logger.debug(f"{request.method} {request.url.path}: {exc}")
    return Response(status_code=404)


@app.exception_handler(InvalidReferenceError)
async def invalid_reference_handler(request: Request, exc: InvalidReferenceError) -> JSONResponse:
    logger.debug(f"{request.method} {request.url.path}: {exc.message}")
    return JSONResponse(status_code=400, content={"error": exc.message})


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Unparseable bodies (e.g. malformed JSON) answer 400 like other bad input."""
    logger.debug(f"{request.method} {request.url.path}: {exc.errors()}")
    return JSONResponse(status_code=400, content={"error": "Invalid request body"})


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all exception handler."""
    logger.exception(f"Unhandled exception: {exc}")

    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "error": "Internal Server Error",
            "detail": str(exc) if settings.debug else "An unexpected error occurred",
        },
    )


if __name__ == "__main__":
    uvicorn.run(app, host=settings.api_host, port=settings.api_port)
