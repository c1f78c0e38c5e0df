"""
Delivery Ledger

Per-guest record of items delivered to a table but not yet paid.

Rules:
    - first delivery for a guest creates the guest's entry
    - first delivery for an order adds a new order line
    - a further delivery for the same order appends to that line, so a
      dish delivered twice is owed twice
    - payment removes exactly the paid quantities and drops lines that
      end up empty

All methods are synchronous; each call completes before any other
coroutine on the event loop can touch the ledger.
"""

import logging
from typing import Iterable, Optional

from restaurant_billing.services.billing.models import LedgerEntry, OrderLine

logger = logging.getLogger(__name__)


def remove_one_each(items: list[int], paid: Iterable[int]) -> list[int]:
    """
    Multiset difference: remove one occurrence of every paid id.

    Paid ids that are not (or no longer) present are skipped.
    """
    remaining = list(items)
    for item_id in paid:
        if item_id in remaining:
            remaining.remove(item_id)
    return remaining


class DeliveryLedger:
    """
    In-memory ledger keyed by guest id.

    Example:
        >>> ledger = DeliveryLedger()
        >>> ledger.register_delivered_items(guest=2, order=5, food=[101])
        >>> ledger.register_delivered_items(guest=2, order=5, food=[101])
        >>> ledger.get_entry(2).orders[0].food
        [101, 101]
    """

    def __init__(self):
        self._entries: dict[int, LedgerEntry] = {}

    def register_delivered_items(
        self,
        guest: int,
        order: int,
        food: Iterable[int] = (),
        drinks: Iterable[int] = (),
        delivery_id: Optional[int] = None,
    ) -> LedgerEntry:
        """
        Record items that reached a guest.

        Args:
            guest: Guest (table) id
            order: Order id the items belong to
            food: Delivered food ids
            drinks: Delivered drink ids
            delivery_id: Delivery id from the delivery service; an id
                already recorded for this guest since the guest last
                settled in full is ignored

        Returns:
            LedgerEntry: The guest's entry after the update
        """
        guest, order = int(guest), int(order)
        food = [int(i) for i in food]
        drinks = [int(i) for i in drinks]

        entry = self._entries.get(guest)

        if delivery_id is not None:
            delivery_id = int(delivery_id)
            if entry is not None and delivery_id in entry.delivery_ids:
                logger.warning(
                    f"Cashier: Delivery #{delivery_id} for guest {guest} "
                    f"was already registered, ignoring it"
                )
                return entry

        if entry is None:
            logger.info(f"Cashier: Adding new guest {guest} with order {order}")
            entry = LedgerEntry(guest, [OrderLine(order, food, drinks)])
            self._entries[guest] = entry
        else:
            line = entry.find_order(order)
            if line is None:
                logger.info(f"Cashier: Adding order {order} to guest {guest}")
                entry.orders.append(OrderLine(order, food, drinks))
            else:
                logger.info(f"Cashier: Adding items to order {order} of guest {guest}")
                line.food.extend(food)
                line.drinks.extend(drinks)

        if delivery_id is not None:
            entry.delivery_ids.add(delivery_id)
        return entry

    def get_entry(self, guest: int) -> Optional[LedgerEntry]:
        return self._entries.get(int(guest))

    def snapshot(self, guest: int) -> Optional[LedgerEntry]:
        """Deep copy of a guest's entry, safe to hand to callers."""
        entry = self.get_entry(guest)
        return entry.copy() if entry is not None else None

    def settle(self, guest: int, paid_lines: Iterable[OrderLine]) -> LedgerEntry:
        """
        Remove paid items from a guest's entry.

        For every paid line, one occurrence per paid id is removed from
        the ledger line with the same order id. Lines left without food
        and drinks are dropped afterwards.

        Raises:
            KeyError: If the guest has no entry
        """
        entry = self._entries[int(guest)]

        for paid in paid_lines:
            line = entry.find_order(paid.order)
            if line is None:
                continue
            line.drinks = remove_one_each(line.drinks, paid.drinks)
            line.food = remove_one_each(line.food, paid.food)

        entry.orders = [line for line in entry.orders if not line.is_empty]
        if not entry.orders:
            entry.delivery_ids.clear()
        return entry

    def __contains__(self, guest: int) -> bool:
        return int(guest) in self._entries

    def __len__(self) -> int:
        return len(self._entries)
