"""
Mock Menu Source Implementation

Serves a built-in price list without calling the pricing service.
Used in development mode (ENV_MODE=development) to:
    - Run the billing flow locally without the other restaurant services
    - Exercise the retry schedule through simulated outages

Behavior:
    - Simulates latency (configurable)
    - Fails with MenuUnavailable at the configured failure rate
    - Fails with MenuUnavailable when latency exceeds the timeout
"""

import asyncio
import logging
import random
from typing import Optional

from restaurant_billing.core.exceptions import MenuUnavailable
from restaurant_billing.services.menu.base import BaseMenuSource, Menu

logger = logging.getLogger(__name__)


DEFAULT_FOOD = [
    (101, 5.0),   # Bruschetta
    (102, 7.0),   # Caesar Salad
    (103, 14.5),  # Pizza Margherita
    (104, 16.0),  # Pasta Carbonara
    (105, 21.0),  # Grilled Salmon
    (106, 6.5),   # Tiramisu
]

DEFAULT_DRINKS = [
    (201, 3.0),   # Sparkling Water
    (202, 3.5),   # Cola
    (203, 4.5),   # Lemonade
    (204, 6.0),   # House Wine
    (205, 5.0),   # Draft Beer
]


class MockMenuSource(BaseMenuSource):
    """
    Mock implementation of the menu source.

    Attributes:
        menu: Price list served on success
        failure_rate: Probability of a simulated outage (0.0-1.0)
        latency: Simulated response time in seconds

    Example:
        >>> source = MockMenuSource(failure_rate=0.5)
        >>> menu = await source.fetch_menu(timeout=5.0)  # fails half the time
    """

    def __init__(
        self,
        menu: Optional[Menu] = None,
        failure_rate: float = 0.0,
        latency: float = 0.1,
    ):
        self.menu = menu or Menu.from_items(DEFAULT_FOOD, DEFAULT_DRINKS)
        self.failure_rate = failure_rate
        self.latency = latency

        logger.info(
            f"MockMenuSource initialized "
            f"(failure_rate={failure_rate:.0%}, latency={latency}s)"
        )

    @property
    def provider_name(self) -> str:
        """Return the provider name."""
        return "mock"

    def _should_fail(self) -> bool:
        """Determine if this request should simulate an outage."""
        return random.random() < self.failure_rate

    async def fetch_menu(self, timeout: float) -> Menu:
        if self.latency > timeout:
            await asyncio.sleep(timeout)
            raise MenuUnavailable(f"Mock menu timed out after {timeout}s")

        await asyncio.sleep(self.latency)

        if self._should_fail():
            logger.debug("MockMenuSource: simulated outage")
            raise MenuUnavailable("Simulated pricing service outage")

        return self.menu

    async def health_check(self) -> bool:
        return True
