"""
Menu Service Factory

Provides a single entry point for obtaining a menu source and the
menu client that caches its price list. Automatically selects the
mock or HTTP source based on ENV_MODE configuration.

Usage:
    from restaurant_billing.services.menu import get_menu_client

    menu_client = get_menu_client()
    menu_client.start()
"""

import logging
from functools import lru_cache

from restaurant_billing.core.config import get_settings
from restaurant_billing.services.menu.base import (
    DRINK,
    FOOD,
    BaseMenuSource,
    Menu,
    MenuItem,
)
from restaurant_billing.services.menu.client import MenuClient, fibonacci_sequence
from restaurant_billing.services.menu.http import HttpMenuSource
from restaurant_billing.services.menu.mock import MockMenuSource

logger = logging.getLogger(__name__)


@lru_cache()
def get_menu_source() -> BaseMenuSource:
    """
    Get the configured menu source instance.

    Returns:
        BaseMenuSource: MockMenuSource in development, HttpMenuSource otherwise
    """
    settings = get_settings()

    if settings.is_development:
        logger.info("Menu Source: Using MockMenuSource (development mode)")
        return MockMenuSource(
            failure_rate=settings.mock_menu_failure_rate,
            latency=settings.mock_menu_latency,
        )
    else:
        logger.info(
            f"Menu Source: Using HttpMenuSource "
            f"({settings.env_mode.value} mode)"
        )
        return HttpMenuSource(settings.prices_url)


@lru_cache()
def get_menu_client() -> MenuClient:
    """Get the process-wide menu client."""
    settings = get_settings()
    return MenuClient(
        get_menu_source(),
        fetch_timeout=settings.menu_fetch_timeout,
        max_short_retries=settings.menu_max_short_retries,
        cooldown_seconds=settings.menu_cooldown_seconds,
    )


def reset_menu_source() -> None:
    """
    Clear the cached menu source and client.

    Useful for testing or when configuration changes at runtime.
    """
    get_menu_client.cache_clear()
    get_menu_source.cache_clear()
    logger.debug("Menu source cache cleared")


__all__ = [
    "get_menu_source",
    "get_menu_client",
    "reset_menu_source",
    "fibonacci_sequence",
    "BaseMenuSource",
    "HttpMenuSource",
    "Menu",
    "MenuClient",
    "MenuItem",
    "MockMenuSource",
    "FOOD",
    "DRINK",
]
