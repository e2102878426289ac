"""
Catalog Store

Static, read-only registry of outlets, menus, items and option groups.
Built once at import time; there is no mutation API.
"""

import logging
from functools import lru_cache
from typing import Optional

from food_ordering.core.errors import NotFoundError
from food_ordering.schemas import (
    Item,
    Location,
    Menu,
    MenuSummary,
    Option,
    OptionGroup,
    Outlet,
)

logger = logging.getLogger(__name__)


# =============================================================================
# SEED DATA
# =============================================================================

TOPPINGS = OptionGroup(
    id="g1",
    name="Toppings",
    min=0,
    max=3,
    options=(
        Option(id="op1", name="Maple Syrup", price=0.5),
        Option(id="op2", name="Blueberries", price=0.8),
        Option(id="op3", name="Whipped Cream", price=0.4),
    ),
)

ITEMS = (
    Item(
        id="i101",
        name="Pancakes",
        price=5.5,
        desc="Fluffy stack with butter",
        option_groups=(TOPPINGS,),
    ),
    Item(id="i102", name="Omelette", price=6.5),
)

MENUS = (
    Menu(id="m1", title="Breakfast", items=ITEMS),
)

OUTLETS = (
    Outlet(
        id="o1",
        name="Central Cafe",
        rating=4.6,
        eta_minutes=15,
        is_open=True,
        location=Location(lat=12.97, lng=77.59),
        address="12 Market St",
        menus=tuple(MenuSummary(id=m.id, title=m.title) for m in MENUS),
    ),
    Outlet(
        id="o2",
        name="Riverside Deli",
        rating=4.4,
        eta_minutes=20,
        is_open=False,
        location=Location(lat=12.99, lng=77.6),
        address="44 Park Ave",
        menus=(MenuSummary(id="m1", title="All Day"),),
    ),
)


class CatalogStore:
    """
    Read-only lookup over outlets, menus and items.

    Attributes:
        outlets: All outlets, in display order
        menus: All menus; the first one is the fallback for unknown ids
    """

    def __init__(
        self,
        outlets: tuple[Outlet, ...] = OUTLETS,
        menus: tuple[Menu, ...] = MENUS,
    ):
        if not menus:
            raise ValueError("catalog needs at least one menu")
        self.outlets = tuple(outlets)
        self.menus = tuple(menus)
        self._outlets_by_id = {o.id: o for o in self.outlets}
        self._menus_by_id = {m.id: m for m in self.menus}
        self._items_by_id: dict[str, Item] = {}
        for menu in self.menus:
            for item in menu.items:
                self._items_by_id.setdefault(item.id, item)

        logger.debug(
            f"CatalogStore loaded ({len(self.outlets)} outlets, "
            f"{len(self.menus)} menus, {len(self._items_by_id)} items)"
        )

    def list_outlets(self) -> list[Outlet]:
        return list(self.outlets)

    def get_outlet(self, outlet_id: str) -> Outlet:
        outlet = self._outlets_by_id.get(outlet_id)
        if outlet is None:
            raise NotFoundError("outlet", outlet_id)
        return outlet

    def get_menu(self, menu_id: str) -> Menu:
        """Return the menu with ``menu_id``, or the first menu if unknown."""
        return self._menus_by_id.get(menu_id, self.menus[0])

    def get_item(self, item_id: Optional[str]) -> Optional[Item]:
        if item_id is None:
            return None
        return self._items_by_id.get(item_id)


@lru_cache()
def get_catalog() -> CatalogStore:
    """Process-wide catalog instance."""
    return CatalogStore()
