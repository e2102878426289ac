"""
Service Factories

Provides a single entry point for obtaining the cart and order services.
Both are process-wide singletons built from the application settings;
the order service shares the cart registry so orders can be placed from
carts created through the API.

Usage:
    from food_ordering.services import get_order_service

    orders = get_order_service()
    order = orders.create_order(cart_id="c_a1b2c3")

The factories double as FastAPI dependencies, so tests can swap in
instances built on a ``ManualClock`` through ``app.dependency_overrides``.
"""

import logging
from functools import lru_cache

from food_ordering.catalog import get_catalog
from food_ordering.core.config import get_settings
from food_ordering.services.carts import CartService
from food_ordering.services.clock import BaseClock, ManualClock, SystemClock
from food_ordering.services.orders import OrderService

logger = logging.getLogger(__name__)


@lru_cache()
def get_cart_service() -> CartService:
    """Get the process-wide cart registry."""
    settings = get_settings()
    return CartService(
        catalog=get_catalog(),
        currency=settings.currency,
        tax_rate=settings.tax_rate,
        delivery_fee=settings.delivery_fee,
    )


@lru_cache()
def get_order_service() -> OrderService:
    """Get the process-wide order registry, backed by the system clock."""
    settings = get_settings()
    service = OrderService(
        carts=get_cart_service(),
        clock=SystemClock(),
        confirm_after=settings.confirm_after_seconds,
        dispatch_after=settings.dispatch_after_seconds,
        deliver_after=settings.deliver_after_seconds,
    )
    logger.info(f"Order Service: using {service.clock.provider_name} clock")
    return service


def reset_services() -> None:
    """
    Drop the cached services so the next call builds fresh, empty ones.

    Useful for testing; all carts and orders are discarded.
    """
    get_order_service.cache_clear()
    get_cart_service.cache_clear()
    logger.debug("Service caches cleared")


__all__ = [
    "get_cart_service",
    "get_order_service",
    "reset_services",
    "BaseClock",
    "CartService",
    "ManualClock",
    "OrderService",
    "SystemClock",
]
