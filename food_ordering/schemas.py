"""
Pydantic Schemas for Request/Response Validation

Wire names are camelCase (``itemId``, ``unitPrice``, ``deliveryFee`` ...)
to stay compatible with existing front-end clients of the mock API.
Requests accept either camelCase or the snake_case field names.

Version: 1.0.0
"""

import math
import re
from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from food_ordering.models import OrderStatus


_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def parse_quantity(value: Any) -> Optional[int]:
    """
    Parse a client supplied quantity the lenient way browsers send it.

    Strings are read up to the first non-digit ("3" → 3, "2.7" → 2),
    floats are truncated, and anything non-numeric yields None.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else None
    if isinstance(value, str):
        match = _LEADING_INT.match(value)
        return int(match.group(1)) if match else None
    return None


class CamelModel(BaseModel):
    """Base model emitting and accepting camelCase field names."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class FrozenCamelModel(CamelModel):
    """Read-only variant used by the static catalog."""
    model_config = ConfigDict(frozen=True)


# =============================================================================
# CATALOG
# =============================================================================

class Option(FrozenCamelModel):
    id: str
    name: str
    price: float


class OptionGroup(FrozenCamelModel):
    """A group of selectable options with min/max selection counts."""
    id: str
    name: str
    min: int = 0
    max: int
    options: tuple[Option, ...]


class Item(FrozenCamelModel):
    id: str
    name: str
    price: float
    desc: Optional[str] = None
    option_groups: Optional[tuple[OptionGroup, ...]] = None


class MenuSummary(FrozenCamelModel):
    id: str
    title: str


class Menu(FrozenCamelModel):
    id: str
    title: str
    items: tuple[Item, ...]


class Location(FrozenCamelModel):
    lat: float
    lng: float


class Outlet(FrozenCamelModel):
    """A vendor location offering one or more menus."""
    id: str
    name: str
    rating: float
    eta_minutes: int
    is_open: bool
    location: Location
    address: str
    menus: tuple[MenuSummary, ...]


# =============================================================================
# REQUEST SCHEMAS
# =============================================================================
#
# Request bodies are read leniently: a value of the wrong type is treated as
# absent rather than rejected, so a bad reference surfaces as the 400
# ``Invalid itemId`` / ``Invalid cartId`` answer instead of a schema error.

def _str_or_none(v: Any) -> Optional[str]:
    return v if isinstance(v, str) else None


class RequestModel(CamelModel):
    """Base for request bodies; a non-object body reads as ``{}``."""
    model_config = ConfigDict(extra="ignore")

    @model_validator(mode="before")
    @classmethod
    def coerce_object(cls, data: Any) -> Any:
        return data if isinstance(data, (dict, BaseModel)) else {}


class OptionSelection(RequestModel):
    """An option chosen by the client, snapshotted onto the cart line."""
    id: Optional[str] = Field(default=None, examples=["op1"])
    price: float = Field(default=0.0, examples=[0.5])
    name: Optional[str] = Field(default=None, examples=["Maple Syrup"])

    @field_validator("id", "name", mode="before")
    @classmethod
    def coerce_text(cls, v: Any) -> Optional[str]:
        if v is None or isinstance(v, bool):
            return None
        if isinstance(v, (int, float)):
            return str(v)
        return _str_or_none(v)

    @field_validator("price", mode="before")
    @classmethod
    def default_missing_price(cls, v: Any) -> Any:
        if isinstance(v, bool) or not isinstance(v, (int, float, str)):
            return 0.0
        try:
            price = float(v)
        except ValueError:
            return 0.0
        return price if math.isfinite(price) else 0.0


class AddLineRequest(RequestModel):
    """Body of POST /carts/{cartId}/items."""
    item_id: Optional[str] = Field(default=None, examples=["i101"])
    qty: Optional[int] = Field(default=None, examples=[2])
    options: Optional[List[OptionSelection]] = None

    @field_validator("item_id", mode="before")
    @classmethod
    def validate_item_id(cls, v: Any) -> Optional[str]:
        return _str_or_none(v)

    @field_validator("qty", mode="before")
    @classmethod
    def validate_qty(cls, v: Any) -> Optional[int]:
        return parse_quantity(v)

    @field_validator("options", mode="before")
    @classmethod
    def validate_options(cls, v: Any) -> Optional[list]:
        if not isinstance(v, list):
            return None
        return [o for o in v if isinstance(o, (dict, BaseModel))]


class UpdateLineRequest(RequestModel):
    """
    Body of PATCH /carts/{cartId}/items/{lineId}.

    A falsy qty (absent, null, 0, "") means "leave the line alone". Any
    other numeric value is floored at 1, so ``0.5`` or ``"0"`` become 1.
    """
    qty: Optional[int] = Field(default=None, examples=[3])

    @field_validator("qty", mode="before")
    @classmethod
    def validate_qty(cls, v: Any) -> Optional[int]:
        if not v:
            return None
        qty = parse_quantity(v)
        return None if qty is None else max(1, qty)


class PaymentSelection(RequestModel):
    method: Optional[str] = Field(default=None, examples=["card"])

    @field_validator("method", mode="before")
    @classmethod
    def validate_method(cls, v: Any) -> Optional[str]:
        return _str_or_none(v) or None


class CreateOrderRequest(RequestModel):
    """Body of POST /orders."""
    cart_id: Optional[str] = Field(default=None, examples=["c_a1b2c3"])
    outlet_id: Optional[str] = Field(default=None, examples=["o1"])
    fulfillment: Optional[dict[str, Any]] = Field(
        default=None,
        examples=[{"type": "delivery"}],
    )
    payment: Optional[PaymentSelection] = None

    @field_validator("cart_id", "outlet_id", mode="before")
    @classmethod
    def validate_ids(cls, v: Any) -> Optional[str]:
        return _str_or_none(v)

    @field_validator("fulfillment", mode="before")
    @classmethod
    def validate_fulfillment(cls, v: Any) -> Optional[dict]:
        return v if isinstance(v, dict) else None

    @field_validator("payment", mode="before")
    @classmethod
    def validate_payment(cls, v: Any) -> Any:
        return v if isinstance(v, (dict, PaymentSelection)) else None


# =============================================================================
# RESPONSE SCHEMAS
# =============================================================================

class LineOptionResponse(CamelModel):
    id: Optional[str] = None
    price: float
    name: Optional[str] = None


class CartLineResponse(CamelModel):
    id: str
    item_id: str
    name: str
    qty: int
    unit_price: float
    options: List[LineOptionResponse]


class TotalsResponse(CamelModel):
    subtotal: float
    tax: float
    delivery_fee: float
    total: float


class CartResponse(CamelModel):
    """A cart with its lines and freshly computed totals."""
    id: str
    currency: str
    lines: List[CartLineResponse]
    totals: TotalsResponse


class AmountResponse(TotalsResponse):
    currency: str


class PaymentResponse(CamelModel):
    method: str
    status: str


class OrderResponse(CamelModel):
    """An order snapshot with its status timeline."""
    id: str
    cart_id: str
    outlet_id: Optional[str]
    status: OrderStatus
    timeline: dict[str, datetime]
    amount: AmountResponse
    fulfillment: dict[str, Any]
    payment: PaymentResponse


class ErrorResponse(BaseModel):
    """Error body for invalid references."""
    error: str


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    carts: int
    orders: int
    pending_transitions: int
    timestamp: datetime
