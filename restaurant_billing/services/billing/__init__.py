"""
Billing Service Factory

Provides a single entry point for obtaining the process-wide billing
service, built around the configured menu client.

Usage:
    from restaurant_billing.services.billing import get_billing_service

    billing = get_billing_service()
    billing.register_delivered_items(guest=1, order=1, food=[101])
"""

import logging
from functools import lru_cache

from restaurant_billing.core.config import get_settings
from restaurant_billing.services.billing.bills import BillBook, calculate_total
from restaurant_billing.services.billing.ledger import DeliveryLedger
from restaurant_billing.services.billing.models import (
    Bill,
    GuestBill,
    LedgerEntry,
    OrderLine,
    PaidBill,
    PaidOrder,
    PaymentMethod,
)
from restaurant_billing.services.billing.options import get_payment_option
from restaurant_billing.services.billing.payments import PaymentProcessor
from restaurant_billing.services.billing.service import BillingService
from restaurant_billing.services.menu import get_menu_client

logger = logging.getLogger(__name__)


@lru_cache()
def get_billing_service() -> BillingService:
    """
    Get the billing service instance.

    The instance is cached so every request sees the same ledger and
    open bills.
    """
    settings = get_settings()
    logger.info("Billing Service: Using in-memory ledger and bill book")
    return BillingService(
        get_menu_client(),
        card_threshold=settings.card_payment_threshold,
    )


def reset_billing_service() -> None:
    """
    Clear the cached billing service.

    Drops every ledger entry and open bill; meant for tests.
    """
    get_billing_service.cache_clear()
    logger.debug("Billing service cache cleared")


__all__ = [
    "get_billing_service",
    "reset_billing_service",
    "get_payment_option",
    "calculate_total",
    "Bill",
    "BillBook",
    "BillingService",
    "DeliveryLedger",
    "GuestBill",
    "LedgerEntry",
    "OrderLine",
    "PaidBill",
    "PaidOrder",
    "PaymentMethod",
    "PaymentProcessor",
]
