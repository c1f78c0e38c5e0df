"""
Tests for payment settlement through the billing service.

Covers:
- Receipt contents
- Multiset settlement (un-billed duplicates survive)
- Pruning of empty order lines
- Closing the bill (second payment fails)
- Missing ledger entry for a bill's guest
"""

import pytest

from restaurant_billing.core.exceptions import BillNotFound, GuestNotFound
from restaurant_billing.services.billing import (
    LedgerEntry,
    OrderLine,
    PaidBill,
    PaidOrder,
)


def test_end_to_end_scenario(billing):
    billing.register_delivered_items(guest=1, order=1, food=[101, 102], drinks=[201])

    guest_bill = billing.generate_bill_for_guest(1)
    assert guest_bill.ordered_food == [101, 102]
    assert guest_bill.ordered_drinks == [201]
    assert guest_bill.total_sum == 15.0

    receipt = billing.register_payment(guest_bill.bill)

    assert receipt == PaidBill(
        bill=1,
        paid_orders=[PaidOrder(order=1, paid_food=[101, 102], paid_drinks=[201])],
        total_sum=15.0,
    )
    assert billing.get_ledger_entry(1).orders == []


def test_only_billed_quantities_are_removed(billing):
    billing.register_delivered_items(guest=1, order=1, food=[101], drinks=[201])
    guest_bill = billing.generate_bill_for_guest(1)

    # a second plate arrives after the bill was printed
    billing.register_delivered_items(guest=1, order=1, food=[101], drinks=[201])

    receipt = billing.register_payment(guest_bill.bill)

    assert receipt.total_sum == 8.0
    assert billing.get_ledger_entry(1).orders == [OrderLine(1, [101], [201])]


def test_fully_paid_orders_are_pruned(billing):
    billing.register_delivered_items(guest=1, order=1, food=[101])
    guest_bill = billing.generate_bill_for_guest(1)
    billing.register_delivered_items(guest=1, order=2, drinks=[202])

    billing.register_payment(guest_bill.bill)

    assert billing.get_ledger_entry(1).orders == [OrderLine(2, [], [202])]


def test_paid_bill_is_closed(billing):
    billing.register_delivered_items(guest=1, order=1, food=[101])
    guest_bill = billing.generate_bill_for_guest(1)

    billing.register_payment(guest_bill.bill)

    assert billing.get_bill(guest_bill.bill) is None
    with pytest.raises(BillNotFound):
        billing.register_payment(guest_bill.bill)


def test_new_bill_after_payment_gets_new_id(billing):
    billing.register_delivered_items(guest=1, order=1, food=[101])
    first = billing.generate_bill_for_guest(1)
    billing.register_payment(first.bill)

    billing.register_delivered_items(guest=1, order=2, food=[102])
    second = billing.generate_bill_for_guest(1)

    assert second.bill == first.bill + 1
    assert second.ordered_food == [102]
    assert second.total_sum == 7.0


def test_unknown_bill_id(billing):
    with pytest.raises(BillNotFound) as exc_info:
        billing.register_payment(404)

    assert exc_info.value.bill_id == 404


def test_bill_for_guest_without_ledger_entry(billing, caplog):
    # a bill generated from a caller-supplied entry that was never delivered
    guest_bill = billing.generate_bill(LedgerEntry(7, [OrderLine(1, [101], [])]))

    with pytest.raises(GuestNotFound) as exc_info:
        billing.register_payment(guest_bill.bill)

    assert exc_info.value.guest == 7
    assert billing.get_bill(guest_bill.bill) is not None
    assert "no delivered items on record" in caplog.text


def test_generate_bill_for_unknown_guest(billing):
    with pytest.raises(GuestNotFound):
        billing.generate_bill_for_guest(3)


def test_settlement_leaves_other_guests_untouched(billing):
    billing.register_delivered_items(guest=1, order=1, food=[101])
    billing.register_delivered_items(guest=2, order=1, food=[101])
    guest_bill = billing.generate_bill_for_guest(1)

    billing.register_payment(guest_bill.bill)

    assert billing.get_ledger_entry(2).orders == [OrderLine(1, [101], [])]
