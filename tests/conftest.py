import pytest
from fastapi.testclient import TestClient

from food_ordering.catalog import CatalogStore
from food_ordering.main import app
from food_ordering.services import get_cart_service, get_order_service
from food_ordering.services.carts import CartService
from food_ordering.services.clock import ManualClock
from food_ordering.services.orders import OrderService


@pytest.fixture()
def clock():
    return ManualClock()


@pytest.fixture()
def catalog():
    return CatalogStore()


@pytest.fixture()
def cart_service(catalog):
    return CartService(catalog, currency="USD", tax_rate=0.09, delivery_fee=2.0)


@pytest.fixture()
def order_service(cart_service, clock):
    return OrderService(
        cart_service,
        clock=clock,
        confirm_after=2,
        dispatch_after=5,
        deliver_after=9,
    )


@pytest.fixture()
def api(cart_service, order_service):
    """The application wired to fresh services on a manual clock."""
    app.dependency_overrides[get_cart_service] = lambda: cart_service
    app.dependency_overrides[get_order_service] = lambda: order_service
    yield app
    app.dependency_overrides.clear()


@pytest.fixture()
def client(api):
    return TestClient(api)
