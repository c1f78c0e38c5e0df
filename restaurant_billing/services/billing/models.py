"""
Billing domain objects.

Plain dataclasses shared by the ledger, the bill book and the payment
processor. Identifiers are always ints; the API layer normalizes them
before they get here.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class PaymentMethod(str, Enum):
    CASH = "Cash"
    DEBIT_CARD = "DebitCard"
    CREDIT_CARD = "CreditCard"


@dataclass
class OrderLine:
    """
    Food and drink ids belonging to one order.

    Ids may repeat: a dish delivered twice appears twice.
    """
    order: int
    food: list[int] = field(default_factory=list)
    drinks: list[int] = field(default_factory=list)

    def copy(self) -> "OrderLine":
        return OrderLine(self.order, list(self.food), list(self.drinks))

    @property
    def is_empty(self) -> bool:
        return not self.food and not self.drinks


@dataclass
class LedgerEntry:
    """
    Delivered but unpaid order lines of one guest.

    delivery_ids holds the delivery ids recorded since the guest last
    settled everything; it is emptied once no order line is left.
    """
    guest: int
    orders: list[OrderLine] = field(default_factory=list)
    delivery_ids: set[int] = field(default_factory=set, repr=False, compare=False)

    def find_order(self, order: int) -> Optional[OrderLine]:
        for line in self.orders:
            if line.order == order:
                return line
        return None

    def copy(self) -> "LedgerEntry":
        return LedgerEntry(
            self.guest,
            [line.copy() for line in self.orders],
            set(self.delivery_ids),
        )


@dataclass
class Bill:
    """
    An open bill of one guest.

    total_sum is the sum of menu prices over every id in orders at the
    time it was last computed.
    """
    bill: int
    guest: int
    orders: list[OrderLine] = field(default_factory=list)
    total_sum: float = 0.0


@dataclass
class GuestBill:
    """Flattened view of a bill handed to the guest."""
    bill: int
    ordered_food: list[int]
    ordered_drinks: list[int]
    total_sum: float

    @classmethod
    def from_bill(cls, bill: Bill) -> "GuestBill":
        return cls(
            bill=bill.bill,
            ordered_food=[i for line in bill.orders for i in line.food],
            ordered_drinks=[i for line in bill.orders for i in line.drinks],
            total_sum=bill.total_sum,
        )


@dataclass
class PaidOrder:
    order: int
    paid_food: list[int]
    paid_drinks: list[int]


@dataclass
class PaidBill:
    """Receipt returned when a bill is settled."""
    bill: int
    paid_orders: list[PaidOrder]
    total_sum: float
