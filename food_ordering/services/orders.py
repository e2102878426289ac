"""
Order Lifecycle Manager

Turns a cart into an order snapshot and walks it through the simulated
delivery timeline:

    created ──(+2s)──▶ preparing ──(+5s)──▶ out_for_delivery ──(+9s)──▶ delivered

Delays are measured from the order's creation time. The transitions are
not tied to any kitchen or courier signal; they are a pure simulation
driven by a clock and a ``StatusScheduler``.
"""

import logging
from datetime import datetime
from typing import Any, Optional

from food_ordering.core.errors import InvalidReferenceError, NotFoundError
from food_ordering.models import (
    CONFIRMED_AT,
    CREATED_AT,
    DELIVERED_AT,
    DISPATCHED_AT,
    Amount,
    Order,
    OrderStatus,
    PaymentInfo,
)
from food_ordering.services.carts import CartService
from food_ordering.services.clock import BaseClock, SystemClock
from food_ordering.services.ids import ORDER_PREFIX, generate_id
from food_ordering.services.scheduler import StatusScheduler

logger = logging.getLogger(__name__)

DEFAULT_PAYMENT_METHOD = "dummy"
DEFAULT_FULFILLMENT_TYPE = "delivery"


class OrderService:
    """
    In-memory order registry with timed status progression.

    Every read first fires any transitions that have come due, so an
    order is never reported in a stale state even if the background
    ticker has not run yet.

    Attributes:
        carts: Cart registry orders are placed from
        clock: Time source for timestamps and transitions
        scheduler: Pending status transitions
        confirm_after: Seconds until "preparing"
        dispatch_after: Seconds until "out_for_delivery"
        deliver_after: Seconds until "delivered"
    """

    def __init__(
        self,
        carts: CartService,
        clock: Optional[BaseClock] = None,
        confirm_after: float = 2.0,
        dispatch_after: float = 5.0,
        deliver_after: float = 9.0,
    ):
        if not 0 < confirm_after < dispatch_after < deliver_after:
            raise ValueError("status delays must be positive and strictly increasing")

        self.carts = carts
        self.clock = clock or SystemClock()
        self.scheduler = StatusScheduler(self.clock)
        self.confirm_after = confirm_after
        self.dispatch_after = dispatch_after
        self.deliver_after = deliver_after
        self._orders: dict[str, Order] = {}

    def __len__(self) -> int:
        return len(self._orders)

    @property
    def transitions(self) -> tuple[tuple[float, OrderStatus, str], ...]:
        """(delay, target status, timeline key) for each step after creation."""
        return (
            (self.confirm_after, OrderStatus.PREPARING, CONFIRMED_AT),
            (self.dispatch_after, OrderStatus.OUT_FOR_DELIVERY, DISPATCHED_AT),
            (self.deliver_after, OrderStatus.DELIVERED, DELIVERED_AT),
        )

    def create_order(
        self,
        cart_id: Optional[str],
        outlet_id: Optional[str] = None,
        fulfillment: Optional[dict[str, Any]] = None,
        payment_method: Optional[str] = None,
    ) -> Order:
        """
        Snapshot a cart's current totals into a new order.

        Raises:
            InvalidReferenceError: ``cart_id`` does not match a cart
        """
        cart = self.carts.find_cart(cart_id)
        if cart is None:
            logger.debug(f"Order rejected: unknown cart {cart_id!r}")
            raise InvalidReferenceError("Invalid cartId")

        created_at = self.clock.now()
        order = Order(
            id=generate_id(ORDER_PREFIX, 6, taken=self._orders),
            cart_id=cart.id,
            outlet_id=outlet_id,
            amount=Amount.from_totals(cart.currency, cart.totals),
            fulfillment=dict(fulfillment) if fulfillment else {"type": DEFAULT_FULFILLMENT_TYPE},
            payment=PaymentInfo(method=payment_method or DEFAULT_PAYMENT_METHOD),
            status=OrderStatus.CREATED,
            timeline={CREATED_AT: created_at},
        )
        self._orders[order.id] = order

        for delay, status, timeline_key in self.transitions:
            self.scheduler.schedule_after(
                created_at,
                delay,
                self._transition(order.id, status, timeline_key),
            )

        logger.info(
            f"Order {order.id} created from cart {cart.id} "
            f"- {order.amount.total:.2f} {order.amount.currency}"
        )
        return order

    def _transition(self, order_id: str, status: OrderStatus, timeline_key: str):
        def apply(due: datetime) -> None:
            order = self._orders.get(order_id)
            if order is None:
                return
            order.status = status
            order.timeline.setdefault(timeline_key, due)
            logger.info(f"Order {order_id} → {status.value}")

        return apply

    def advance(self) -> int:
        """Fire every status transition that has come due."""
        return self.scheduler.run_due()

    def get_order(self, order_id: str) -> Order:
        self.advance()
        order = self._orders.get(order_id)
        if order is None:
            raise NotFoundError("order", order_id)
        return order
