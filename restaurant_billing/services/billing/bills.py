"""
Bill Book

Holds the open bill of every guest. A bill is (re)built from the
guest's current ledger entry each time it is requested:

    - an open bill keeps its id; its lines are copied as the base
    - every ledger order line overwrites the bill line with the same
      order id, or is appended
    - the total is recomputed from scratch with the cached menu

Bill ids come from a sequence owned by the instance and are never
reused.
"""

import itertools
import logging
from typing import Optional

from restaurant_billing.services.billing.models import (
    Bill,
    GuestBill,
    LedgerEntry,
    OrderLine,
)
from restaurant_billing.services.menu import DRINK, FOOD, Menu, MenuClient

logger = logging.getLogger(__name__)


def calculate_total(orders: list[OrderLine], menu: Menu) -> float:
    """
    Sum the menu price of every drink and food id.

    Raises:
        UnknownMenuItem: If an id is not on the menu
    """
    total = 0.0
    for line in orders:
        for drink_id in line.drinks:
            total += menu.price_of(DRINK, drink_id)
        for food_id in line.food:
            total += menu.price_of(FOOD, food_id)
    return total


class BillBook:
    """
    Open bills, at most one per guest.

    Attributes:
        menu_client: Source of prices; bills cannot be generated before
            its menu has loaded
    """

    def __init__(self, menu_client: MenuClient, first_bill_id: int = 1):
        self.menu_client = menu_client
        self._bill_ids = itertools.count(first_bill_id)
        self._bills: dict[int, Bill] = {}
        self._bill_by_guest: dict[int, int] = {}

    def generate_bill(self, guest_entry: LedgerEntry) -> GuestBill:
        """
        Build or refresh the guest's bill from a ledger entry.

        Args:
            guest_entry: The guest's delivered, unpaid order lines

        Returns:
            GuestBill: Flattened bill for the guest

        Raises:
            MenuNotReady: If the menu has not been loaded yet
            UnknownMenuItem: If an id has no price; no bill is changed
        """
        menu = self.menu_client.menu
        guest = int(guest_entry.guest)

        existing = self.find_by_guest(guest)
        if existing is not None:
            orders = [line.copy() for line in existing.orders]
        else:
            orders = []

        for ledger_line in guest_entry.orders:
            order = int(ledger_line.order)
            line = next((c for c in orders if c.order == order), None)
            if line is not None:
                line.food = list(ledger_line.food)
                line.drinks = list(ledger_line.drinks)
            else:
                orders.append(
                    OrderLine(order, list(ledger_line.food), list(ledger_line.drinks))
                )

        total_sum = calculate_total(orders, menu)

        if existing is not None:
            bill_id = existing.bill
        else:
            bill_id = next(self._bill_ids)

        bill = Bill(bill=bill_id, guest=guest, orders=orders, total_sum=total_sum)
        self._bills[bill_id] = bill
        self._bill_by_guest[guest] = bill_id

        logger.info(
            f"Cashier: Bill #{bill_id} for guest {guest} totals {total_sum:g}"
        )
        return GuestBill.from_bill(bill)

    def get(self, bill_id: int) -> Optional[Bill]:
        return self._bills.get(int(bill_id))

    def find_by_guest(self, guest: int) -> Optional[Bill]:
        bill_id = self._bill_by_guest.get(int(guest))
        if bill_id is None:
            return None
        return self._bills[bill_id]

    def remove(self, bill_id: int) -> Optional[Bill]:
        """Close a bill; returns it, or None if it was not open."""
        bill = self._bills.pop(int(bill_id), None)
        if bill is not None:
            self._bill_by_guest.pop(bill.guest, None)
        return bill

    def __contains__(self, bill_id: int) -> bool:
        return int(bill_id) in self._bills

    def __len__(self) -> int:
        return len(self._bills)
