import asyncio

import pytest
from fastapi.testclient import TestClient

from restaurant_billing.core.exceptions import MenuUnavailable
from restaurant_billing.main import app
from restaurant_billing.services.billing import BillingService, get_billing_service
from restaurant_billing.services.menu import BaseMenuSource, Menu, MenuClient, MockMenuSource


class FlakyMenuSource(BaseMenuSource):
    """Fails a fixed number of times, then serves the menu."""

    def __init__(self, menu: Menu, failures: int):
        self.menu = menu
        self.failures = failures
        self.calls = 0

    @property
    def provider_name(self) -> str:
        return "flaky"

    async def fetch_menu(self, timeout: float) -> Menu:
        self.calls += 1
        if self.calls <= self.failures:
            raise MenuUnavailable(f"outage #{self.calls}")
        return self.menu

    async def health_check(self) -> bool:
        return self.calls > self.failures


@pytest.fixture
def menu():
    """Prices used throughout the tests."""
    return Menu.from_items(
        food=[(101, 5.0), (102, 7.0), (103, 12.5)],
        drinks=[(201, 3.0), (202, 4.5)],
    )


@pytest.fixture
def make_flaky_source(menu):
    def factory(failures: int) -> FlakyMenuSource:
        return FlakyMenuSource(menu, failures)
    return factory


@pytest.fixture
def menu_client(menu):
    """A menu client that has not loaded anything yet."""
    return MenuClient(MockMenuSource(menu=menu, latency=0))


@pytest.fixture
def loaded_menu_client(menu_client):
    asyncio.run(menu_client.load())
    return menu_client


@pytest.fixture
def billing(loaded_menu_client):
    return BillingService(loaded_menu_client)


@pytest.fixture
def unready_billing(menu):
    """Billing service whose menu source never answers."""
    return BillingService(MenuClient(FlakyMenuSource(menu, failures=10**6)))


@pytest.fixture
def test_client(billing):
    """Fixture for FastAPI test client bound to a fresh billing service."""
    app.dependency_overrides[get_billing_service] = lambda: billing
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()
