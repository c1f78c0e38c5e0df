"""
Payment Processor

Settles an open bill: issues the receipt, removes exactly the paid
quantities from the delivery ledger and closes the bill.
"""

import logging

from restaurant_billing.core.exceptions import BillNotFound, GuestNotFound
from restaurant_billing.services.billing.bills import BillBook
from restaurant_billing.services.billing.ledger import DeliveryLedger
from restaurant_billing.services.billing.models import PaidBill, PaidOrder

logger = logging.getLogger(__name__)


class PaymentProcessor:
    def __init__(self, ledger: DeliveryLedger, bill_book: BillBook):
        self.ledger = ledger
        self.bill_book = bill_book

    def register_payment(self, bill_id: int) -> PaidBill:
        """
        Register the payment of a bill.

        Args:
            bill_id: Id of an open bill

        Returns:
            PaidBill: Receipt listing the paid items per order

        Raises:
            BillNotFound: If no open bill has this id
            GuestNotFound: If the bill's guest has no ledger entry. Bills
                only exist for guests with deliveries, so this is a bug;
                ledger and bill are left untouched.
        """
        bill_id = int(bill_id)
        logger.info(f"Cashier: Received a payment for bill #{bill_id}")

        bill = self.bill_book.get(bill_id)
        if bill is None:
            logger.warning(f"Cashier: Bill #{bill_id} is not open")
            raise BillNotFound(bill_id)

        receipt = PaidBill(
            bill=bill.bill,
            paid_orders=[
                PaidOrder(
                    order=line.order,
                    paid_food=list(line.food),
                    paid_drinks=list(line.drinks),
                )
                for line in bill.orders
            ],
            total_sum=bill.total_sum,
        )

        if bill.guest not in self.ledger:
            logger.error(
                f"Cashier: Bill #{bill_id} belongs to guest {bill.guest}, "
                f"who has no delivered items on record"
            )
            raise GuestNotFound(
                bill.guest, detail=f"Inconsistent state while settling bill #{bill_id}"
            )

        entry = self.ledger.settle(bill.guest, bill.orders)
        self.bill_book.remove(bill_id)

        logger.info(
            f"Cashier: Bill #{bill_id} paid ({bill.total_sum:g}); "
            f"guest {bill.guest} has {len(entry.orders)} unpaid order(s) left"
        )
        return receipt
