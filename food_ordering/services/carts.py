"""
Cart Lifecycle Manager

Creates carts and applies line-item mutations. Every mutation recomputes
the cart totals before returning, so ``cart.totals`` always matches the
current lines.

Quantity rules:
    - add: a missing or zero qty becomes 1, anything else is floored at 1
    - update: a missing or zero qty leaves the line untouched, anything
      else is floored at 1
"""

import logging
from typing import Iterable, Optional

from food_ordering.catalog import CatalogStore
from food_ordering.core.errors import InvalidReferenceError, NotFoundError
from food_ordering.models import Cart, CartLine, OptionSnapshot
from food_ordering.services.ids import CART_PREFIX, LINE_PREFIX, generate_id
from food_ordering.services.pricing import (
    DEFAULT_DELIVERY_FEE,
    DEFAULT_TAX_RATE,
    compute_totals,
)

logger = logging.getLogger(__name__)


class CartService:
    """
    In-memory cart registry.

    Attributes:
        catalog: Catalog used to resolve item ids
        currency: Currency code stamped on every new cart
        tax_rate: Tax rate passed to the pricing engine
        delivery_fee: Flat fee passed to the pricing engine
    """

    def __init__(
        self,
        catalog: CatalogStore,
        currency: str = "USD",
        tax_rate: float = DEFAULT_TAX_RATE,
        delivery_fee: float = DEFAULT_DELIVERY_FEE,
    ):
        self.catalog = catalog
        self.currency = currency
        self.tax_rate = tax_rate
        self.delivery_fee = delivery_fee
        self._carts: dict[str, Cart] = {}
        self._line_ids: set[str] = set()

    def __len__(self) -> int:
        return len(self._carts)

    def _recompute(self, cart: Cart) -> Cart:
        cart.totals = compute_totals(
            cart.lines,
            tax_rate=self.tax_rate,
            delivery_fee=self.delivery_fee,
        )
        return cart

    def create_cart(self) -> Cart:
        cart_id = generate_id(CART_PREFIX, 6, taken=self._carts)
        cart = Cart(id=cart_id, currency=self.currency)
        self._recompute(cart)
        self._carts[cart_id] = cart
        logger.info(f"Cart {cart_id} created")
        return cart

    def find_cart(self, cart_id: Optional[str]) -> Optional[Cart]:
        if cart_id is None:
            return None
        return self._carts.get(cart_id)

    def get_cart(self, cart_id: str) -> Cart:
        cart = self.find_cart(cart_id)
        if cart is None:
            raise NotFoundError("cart", cart_id)
        return cart

    def add_line(
        self,
        cart_id: str,
        item_id: Optional[str],
        qty: Optional[int] = None,
        options: Optional[Iterable[OptionSnapshot]] = None,
    ) -> Cart:
        """
        Append a new line for ``item_id`` to the cart.

        Raises:
            NotFoundError: Unknown cart
            InvalidReferenceError: ``item_id`` is not in the catalog; the
                cart is left untouched
        """
        cart = self.get_cart(cart_id)
        item = self.catalog.get_item(item_id)
        if item is None:
            logger.debug(f"Cart {cart_id}: rejected unknown item {item_id!r}")
            raise InvalidReferenceError("Invalid itemId")

        line_id = generate_id(LINE_PREFIX, 5, taken=self._line_ids)
        line = CartLine(
            id=line_id,
            item_id=item.id,
            name=item.name,
            qty=max(1, qty or 1),
            unit_price=item.price,
            options=list(options or []),
        )
        self._line_ids.add(line_id)
        cart.lines.append(line)
        self._recompute(cart)

        logger.info(
            f"Cart {cart_id}: added {line.qty} x {item.name} ({line_id}) "
            f"- total {cart.totals.total:.2f} {cart.currency}"
        )
        return cart

    def update_line_qty(self, cart_id: str, line_id: str, qty: Optional[int]) -> Cart:
        """
        Change the quantity of a line.

        Raises:
            NotFoundError: Unknown cart or line
        """
        cart = self.get_cart(cart_id)
        line = cart.find_line(line_id)
        if line is None:
            raise NotFoundError("line", line_id)

        if qty:
            line.qty = max(1, qty)
            logger.info(f"Cart {cart_id}: line {line_id} qty set to {line.qty}")
        self._recompute(cart)
        return cart

    def remove_line(self, cart_id: str, line_id: str) -> None:
        """
        Remove a line from the cart. Removing an absent line is a no-op.

        Raises:
            NotFoundError: Unknown cart
        """
        cart = self.get_cart(cart_id)
        before = len(cart.lines)
        cart.lines = [line for line in cart.lines if line.id != line_id]
        self._recompute(cart)
        if len(cart.lines) != before:
            logger.info(f"Cart {cart_id}: removed line {line_id}")
