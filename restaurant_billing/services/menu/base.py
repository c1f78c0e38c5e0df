"""
Menu Source Abstract Base Class

Defines the interface contract for every source of the restaurant's
price list. Both MockMenuSource and HttpMenuSource implement these
methods, so MenuClient behaves the same regardless of which source is
active.

Use Cases:
    - Loading the price list once at startup
    - Pricing every food and drink id on a bill
    - Health reporting
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Iterable, Optional

from restaurant_billing.core.exceptions import UnknownMenuItem

FOOD = "food"
DRINK = "drink"


@dataclass(frozen=True)
class MenuItem:
    """
    A single priced menu entry.

    Attributes:
        id: Item identifier shared with the ordering services
        price: Unit price
    """
    id: int
    price: float


@dataclass
class Menu:
    """
    The restaurant's price list, split into food and drinks.

    Treated as immutable once loaded. Lookups go through a per-category
    index built on construction; the lists keep the source's order.

    Attributes:
        food: Food items in source order
        drinks: Drink items in source order
    """
    food: list[MenuItem] = field(default_factory=list)
    drinks: list[MenuItem] = field(default_factory=list)
    _index: dict[str, dict[int, float]] = field(
        init=False, repr=False, compare=False
    )

    def __post_init__(self) -> None:
        self._index = {
            FOOD: {item.id: item.price for item in self.food},
            DRINK: {item.id: item.price for item in self.drinks},
        }

    @classmethod
    def from_items(
        cls,
        food: Iterable[tuple[int, float]],
        drinks: Iterable[tuple[int, float]],
    ) -> "Menu":
        """Build a menu from (id, price) pairs."""
        return cls(
            food=[MenuItem(int(i), float(p)) for i, p in food],
            drinks=[MenuItem(int(i), float(p)) for i, p in drinks],
        )

    def find_price(self, category: str, item_id: int) -> Optional[float]:
        """Return the price of an item, or None if it is not on the menu."""
        return self._index[category].get(item_id)

    def price_of(self, category: str, item_id: int) -> float:
        """
        Return the price of an item.

        Raises:
            UnknownMenuItem: If the id is not on the menu
        """
        price = self.find_price(category, item_id)
        if price is None:
            raise UnknownMenuItem(category, item_id)
        return price

    def to_dict(self) -> dict:
        """Convert to the pricing service's JSON shape."""
        return {
            "food": [{"id": i.id, "price": i.price} for i in self.food],
            "drinks": [{"id": i.id, "price": i.price} for i in self.drinks],
        }


class BaseMenuSource(ABC):
    """
    Abstract base class for price list sources.

    Example:
        >>> source = get_menu_source()
        >>> menu = await source.fetch_menu(timeout=5.0)
        >>> menu.price_of("food", 101)
        5.0
    """

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """
        Return the name of the menu provider.

        Returns:
            str: Provider name (e.g., "mock", "http")
        """
        pass

    @abstractmethod
    async def fetch_menu(self, timeout: float) -> Menu:
        """
        Fetch the complete price list.

        Args:
            timeout: Seconds allowed for this single attempt

        Returns:
            Menu: The parsed price list

        Raises:
            MenuUnavailable: On network error, timeout or malformed payload
        """
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """
        Verify connectivity to the price list.

        Returns:
            bool: True if the source answers
        """
        pass
