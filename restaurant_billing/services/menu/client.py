"""
Menu Client

Loads the price list once and keeps it for the lifetime of the process.
Menu changes require a restart.

Retry policy while the menu source is unavailable:
    - the k-th consecutive failure (k = 1..max_short_retries) waits
      fib(k) seconds: 1, 1, 2, 3, 5
    - the failure after that waits the cooldown (60s by default) and
      starts the short schedule again
    - each attempt is cut off after fetch_timeout (5s by default)
    - the loop never gives up; any error from the source counts as a
      failed attempt and it runs until the source answers
"""

import asyncio
import contextlib
import logging
from typing import Optional

from restaurant_billing.core.exceptions import (
    MenuLoadInProgress,
    MenuNotReady,
    MenuUnavailable,
)
from restaurant_billing.services.menu.base import BaseMenuSource, Menu

logger = logging.getLogger(__name__)


def fibonacci_sequence(length: int) -> list[int]:
    """Return the first ``length`` Fibonacci numbers, starting 1, 1."""
    sequence = []
    a, b = 1, 1
    for _ in range(length):
        sequence.append(a)
        a, b = b, a + b
    return sequence


class MenuClient:
    """
    Caches the menu and retries the source with a Fibonacci backoff.

    Attributes:
        source: Where the price list comes from
        fetch_timeout: Seconds allowed per attempt
        max_short_retries: Length of the Fibonacci schedule
        cooldown_seconds: Pause once the schedule is exhausted

    Example:
        >>> client = MenuClient(get_menu_source())
        >>> client.start()                      # background task
        >>> await client.wait_until_ready(10)
        >>> client.price_of("drink", 201)
        3.0
    """

    def __init__(
        self,
        source: BaseMenuSource,
        fetch_timeout: float = 5.0,
        max_short_retries: int = 5,
        cooldown_seconds: float = 60.0,
    ):
        self.source = source
        self.fetch_timeout = fetch_timeout
        self.max_short_retries = max_short_retries
        self.cooldown_seconds = cooldown_seconds
        self.backoff_schedule = fibonacci_sequence(max_short_retries)

        self._menu: Optional[Menu] = None
        self._ready = asyncio.Event()
        self._loading = False
        self._task: Optional[asyncio.Task] = None
        self.failed_attempts = 0

    # =========================================================================
    # STATE
    # =========================================================================

    @property
    def is_ready(self) -> bool:
        return self._menu is not None

    @property
    def is_loading(self) -> bool:
        return self._loading

    @property
    def menu(self) -> Menu:
        """
        The cached menu.

        Raises:
            MenuNotReady: If the menu has not been loaded yet
        """
        if self._menu is None:
            raise MenuNotReady()
        return self._menu

    def price_of(self, category: str, item_id: int) -> float:
        """Price of a food or drink id (raises MenuNotReady / UnknownMenuItem)."""
        return self.menu.price_of(category, item_id)

    # =========================================================================
    # LOADING
    # =========================================================================

    def next_delay(self, attempt: int) -> tuple[float, int]:
        """
        Delay before the next try after a failure.

        Args:
            attempt: Short retries already used since the last reset

        Returns:
            (seconds to wait, attempt counter for the next failure)
        """
        if attempt < self.max_short_retries:
            return float(self.backoff_schedule[attempt]), attempt + 1
        return self.cooldown_seconds, 0

    async def _wait(self, seconds: float) -> None:
        await asyncio.sleep(seconds)

    async def _fetch_once(self) -> Menu:
        """
        One attempt, bounded by fetch_timeout as a whole.

        Raises:
            MenuUnavailable: On timeout or any error from the source
        """
        try:
            return await asyncio.wait_for(
                self.source.fetch_menu(self.fetch_timeout), self.fetch_timeout
            )
        except asyncio.TimeoutError as e:
            raise MenuUnavailable(
                f"No answer within {self.fetch_timeout:g}s"
            ) from e
        except MenuUnavailable:
            raise
        except Exception as e:
            logger.exception(
                f"Cashier: Unexpected error from {self.source.provider_name}"
            )
            raise MenuUnavailable(f"Unexpected error: {e}") from e

    async def load(self) -> Menu:
        """
        Fetch the menu, retrying until the source answers.

        Returns:
            Menu: The loaded (and now cached) menu

        Raises:
            MenuLoadInProgress: If another load is still running
        """
        if self._loading:
            raise MenuLoadInProgress()

        self._loading = True
        attempt = 0
        try:
            while True:
                logger.info(
                    f"Cashier: Trying to get the menu from {self.source.provider_name}"
                )
                try:
                    menu = await self._fetch_once()
                except MenuUnavailable as e:
                    self.failed_attempts += 1
                    delay, attempt = self.next_delay(attempt)
                    if attempt == 0:
                        logger.warning(
                            f"Cashier: Menu still unavailable ({e.message}). "
                            f"Waiting {delay:g}s before asking again."
                        )
                    else:
                        logger.warning(
                            f"Cashier: Couldn't get the menu ({e.message}). "
                            f"Retry {attempt}/{self.max_short_retries} in {delay:g}s."
                        )
                    await self._wait(delay)
                    continue

                self._menu = menu
                self._ready.set()
                logger.info(
                    f"Cashier: Got the menu "
                    f"({len(menu.food)} food, {len(menu.drinks)} drinks)"
                )
                return menu
        finally:
            self._loading = False

    async def wait_until_ready(self, timeout: float) -> Menu:
        """
        Wait for the menu to be loaded.

        Args:
            timeout: Seconds to wait; 0 checks without waiting

        Raises:
            MenuNotReady: If the menu is not loaded within the timeout
        """
        if self._menu is None and timeout > 0:
            try:
                await asyncio.wait_for(self._ready.wait(), timeout)
            except asyncio.TimeoutError:
                raise MenuNotReady(f"Menu not loaded after {timeout:g}s")
        return self.menu

    # =========================================================================
    # BACKGROUND TASK
    # =========================================================================

    def start(self) -> Optional[asyncio.Task]:
        """Start loading in the background (no-op if started or loaded)."""
        if self._task is None and not self.is_ready:
            self._task = asyncio.create_task(self.load(), name="menu-loader")
            self._task.add_done_callback(self._log_task_result)
        return self._task

    @staticmethod
    def _log_task_result(task: asyncio.Task) -> None:
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("Cashier: Menu loader stopped", exc_info=exc)

    async def stop(self) -> None:
        """Cancel a load that is still retrying."""
        if self._task is not None and not self._task.done():
            self._task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._task
        self._task = None
