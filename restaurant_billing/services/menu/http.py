"""
HTTP Menu Source Implementation

Fetches the price list from the pricing service (GET {endpoint}/prices).
Used in staging and production.

Expected response body:
    {"food": [{"id": 101, "price": 5.0}, ...],
     "drinks": [{"id": 201, "price": 3.0}, ...]}

Every transport error, timeout, non-2xx status or malformed body is
reported as MenuUnavailable so MenuClient can retry it.
"""

import logging
import time
from typing import Optional

import httpx
from pydantic import ValidationError

from restaurant_billing.core.config import get_settings
from restaurant_billing.core.exceptions import MenuUnavailable
from restaurant_billing.schemas import MenuPayload
from restaurant_billing.services.menu.base import BaseMenuSource, Menu

logger = logging.getLogger(__name__)


class HttpMenuSource(BaseMenuSource):
    """
    Menu source backed by the pricing service.

    Attributes:
        prices_url: Full URL of the price list
        transport: Optional httpx transport (tests use httpx.MockTransport)
    """

    def __init__(
        self,
        prices_url: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.prices_url = prices_url or get_settings().prices_url
        self.transport = transport

        logger.info(f"HttpMenuSource initialized (url={self.prices_url})")

    @property
    def provider_name(self) -> str:
        return "http"

    async def fetch_menu(self, timeout: float) -> Menu:
        """
        Fetch and parse the price list.

        Args:
            timeout: Seconds allowed for this attempt

        Returns:
            Menu: Parsed price list

        Raises:
            MenuUnavailable: On any failure
        """
        start_time = time.time()

        try:
            async with httpx.AsyncClient(
                timeout=timeout, transport=self.transport
            ) as client:
                response = await client.get(self.prices_url)
                response.raise_for_status()
                payload = MenuPayload.model_validate(response.json())

        except httpx.TimeoutException as e:
            raise MenuUnavailable(
                f"Pricing service timed out after {timeout}s", str(e)
            ) from e
        except httpx.HTTPStatusError as e:
            raise MenuUnavailable(
                f"Pricing service answered {e.response.status_code}", str(e)
            ) from e
        except httpx.HTTPError as e:
            raise MenuUnavailable("Pricing service unreachable", str(e)) from e
        except httpx.InvalidURL as e:
            raise MenuUnavailable(
                f"Invalid pricing URL {self.prices_url!r}", str(e)
            ) from e
        except (ValidationError, ValueError) as e:
            raise MenuUnavailable("Malformed price list", str(e)) from e

        elapsed_ms = (time.time() - start_time) * 1000
        logger.debug(f"Price list fetched in {elapsed_ms:.0f}ms")

        return Menu.from_items(
            ((item.id, item.price) for item in payload.food),
            ((item.id, item.price) for item in payload.drinks),
        )

    async def health_check(self) -> bool:
        try:
            async with httpx.AsyncClient(
                timeout=2.0, transport=self.transport
            ) as client:
                response = await client.get(self.prices_url)
            return response.status_code == 200
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.warning(f"Pricing service health check failed: {e}")
            return False
