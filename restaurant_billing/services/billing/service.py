"""
Billing Service

The cashier. Wires the delivery ledger, the bill book and the payment
processor to one menu client, and is the only object the API talks to.
"""

import logging
from typing import Iterable, Optional

from restaurant_billing.core.exceptions import GuestNotFound
from restaurant_billing.services.billing.bills import BillBook
from restaurant_billing.services.billing.ledger import DeliveryLedger
from restaurant_billing.services.billing.models import (
    Bill,
    GuestBill,
    LedgerEntry,
    PaidBill,
    PaymentMethod,
)
from restaurant_billing.services.billing.options import (
    CARD_PAYMENT_THRESHOLD,
    get_payment_option,
)
from restaurant_billing.services.billing.payments import PaymentProcessor
from restaurant_billing.services.menu import MenuClient

logger = logging.getLogger(__name__)


class BillingService:
    """
    Example:
        >>> billing = BillingService(menu_client)
        >>> billing.register_delivered_items(1, 1, food=[101, 102], drinks=[201])
        >>> billing.generate_bill_for_guest(1).total_sum
        15.0
        >>> billing.register_payment(1).total_sum
        15.0
    """

    def __init__(
        self,
        menu_client: MenuClient,
        card_threshold: float = CARD_PAYMENT_THRESHOLD,
    ):
        self.menu_client = menu_client
        self.card_threshold = card_threshold
        self.ledger = DeliveryLedger()
        self.bill_book = BillBook(menu_client)
        self.payments = PaymentProcessor(self.ledger, self.bill_book)

    # =========================================================================
    # DELIVERIES
    # =========================================================================

    def register_delivered_items(
        self,
        guest: int,
        order: int,
        food: Iterable[int] = (),
        drinks: Iterable[int] = (),
        delivery_id: Optional[int] = None,
    ) -> None:
        self.ledger.register_delivered_items(guest, order, food, drinks, delivery_id)

    def get_ledger_entry(self, guest: int) -> LedgerEntry:
        """
        Raises:
            GuestNotFound: If nothing was delivered to the guest
        """
        entry = self.ledger.snapshot(guest)
        if entry is None:
            raise GuestNotFound(int(guest))
        return entry

    # =========================================================================
    # BILLS
    # =========================================================================

    def generate_bill(self, guest_entry: LedgerEntry) -> GuestBill:
        return self.bill_book.generate_bill(guest_entry)

    def generate_bill_for_guest(self, guest: int) -> GuestBill:
        """Generate the guest's bill from what the ledger currently holds."""
        return self.bill_book.generate_bill(self.get_ledger_entry(guest))

    def get_bill(self, bill_id: int) -> Optional[Bill]:
        return self.bill_book.get(bill_id)

    # =========================================================================
    # PAYMENTS
    # =========================================================================

    def register_payment(self, bill_id: int) -> PaidBill:
        return self.payments.register_payment(bill_id)

    def get_payment_option(self, amount: float) -> list[PaymentMethod]:
        return get_payment_option(amount, self.card_threshold)
