"""
In-Memory Domain Models

Carts and orders live only for the lifetime of the process. Lines and
order amounts hold copies of catalog values taken at the time they were
created, so later catalog changes never reach back into them.

Version: 1.0.0
"""

import enum
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional


class OrderStatus(str, enum.Enum):
    """Order status workflow (strictly linear)."""
    CREATED = "created"
    PREPARING = "preparing"
    OUT_FOR_DELIVERY = "out_for_delivery"
    DELIVERED = "delivered"

    @property
    def is_terminal(self) -> bool:
        return self is OrderStatus.DELIVERED


# Timeline event names, in the order they are recorded
CREATED_AT = "createdAt"
CONFIRMED_AT = "confirmedAt"
DISPATCHED_AT = "dispatchedAt"
DELIVERED_AT = "deliveredAt"


@dataclass(frozen=True)
class OptionSnapshot:
    """An option as chosen when the line was added."""
    id: Optional[str] = None
    price: float = 0.0
    name: Optional[str] = None


@dataclass
class CartLine:
    """
    One item-plus-options-plus-quantity entry within a cart.

    ``name`` and ``unit_price`` are copied from the catalog item when
    the line is created.
    """
    id: str
    item_id: str
    name: str
    qty: int
    unit_price: float
    options: list[OptionSnapshot] = field(default_factory=list)


@dataclass(frozen=True)
class Totals:
    """Monetary breakdown derived from a cart's lines."""
    subtotal: float = 0.0
    tax: float = 0.0
    delivery_fee: float = 0.0
    total: float = 0.0


@dataclass
class Cart:
    id: str
    currency: str
    lines: list[CartLine] = field(default_factory=list)
    totals: Totals = field(default_factory=Totals)

    def find_line(self, line_id: str) -> Optional[CartLine]:
        return next((line for line in self.lines if line.id == line_id), None)


@dataclass(frozen=True)
class Amount:
    """Order amount: currency plus totals copied at order creation."""
    currency: str
    subtotal: float
    tax: float
    delivery_fee: float
    total: float

    @classmethod
    def from_totals(cls, currency: str, totals: Totals) -> "Amount":
        return cls(
            currency=currency,
            subtotal=totals.subtotal,
            tax=totals.tax,
            delivery_fee=totals.delivery_fee,
            total=totals.total,
        )


@dataclass
class PaymentInfo:
    method: str = "dummy"
    status: str = "pending"


@dataclass
class Order:
    """
    An order placed from a cart.

    ``timeline`` maps event names (createdAt, confirmedAt, dispatchedAt,
    deliveredAt) to the time each was recorded. Entries are only ever
    added, never overwritten.
    """
    id: str
    cart_id: str
    outlet_id: Optional[str]
    amount: Amount
    fulfillment: dict[str, Any]
    payment: PaymentInfo
    status: OrderStatus = OrderStatus.CREATED
    timeline: dict[str, datetime] = field(default_factory=dict)
