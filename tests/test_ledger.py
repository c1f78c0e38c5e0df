"""
Tests for the delivery ledger.

Covers:
- First delivery creates the guest entry
- New orders are appended per guest
- Re-delivery to the same order appends (no dedupe)
- Id normalization
- Duplicate delivery ids
- Multiset settlement and pruning
"""

from restaurant_billing.services.billing import DeliveryLedger, OrderLine
from restaurant_billing.services.billing.ledger import remove_one_each


def test_first_delivery_creates_entry():
    ledger = DeliveryLedger()

    ledger.register_delivered_items(guest=1, order=1, food=[101, 102], drinks=[201])

    entry = ledger.get_entry(1)
    assert entry.guest == 1
    assert entry.orders == [OrderLine(1, [101, 102], [201])]


def test_new_order_is_appended_for_existing_guest():
    ledger = DeliveryLedger()

    ledger.register_delivered_items(guest=1, order=1, food=[101])
    ledger.register_delivered_items(guest=1, order=2, drinks=[202])

    orders = ledger.get_entry(1).orders
    assert [line.order for line in orders] == [1, 2]
    assert orders[1] == OrderLine(2, [], [202])


def test_redelivery_to_same_order_is_not_deduplicated():
    ledger = DeliveryLedger()

    ledger.register_delivered_items(guest=2, order=5, food=[101])
    ledger.register_delivered_items(guest=2, order=5, food=[101])

    entry = ledger.get_entry(2)
    assert len(entry.orders) == 1
    assert entry.orders[0].food == [101, 101]


def test_ids_are_normalized_to_int():
    ledger = DeliveryLedger()

    ledger.register_delivered_items(guest="3", order="7", food=["101"], drinks=[201])
    ledger.register_delivered_items(guest=3, order=7, food=[102], drinks=["201"])

    assert len(ledger) == 1
    entry = ledger.get_entry("3")
    assert entry.orders == [OrderLine(7, [101, 102], [201, 201])]


def test_guests_are_kept_apart():
    ledger = DeliveryLedger()

    ledger.register_delivered_items(guest=1, order=1, food=[101])
    ledger.register_delivered_items(guest=2, order=1, food=[102])

    assert ledger.get_entry(1).orders[0].food == [101]
    assert ledger.get_entry(2).orders[0].food == [102]


def test_duplicate_delivery_id_is_ignored():
    ledger = DeliveryLedger()

    ledger.register_delivered_items(guest=1, order=1, food=[101], delivery_id=9)
    ledger.register_delivered_items(guest=1, order=1, food=[101], delivery_id=9)
    ledger.register_delivered_items(guest=1, order=1, food=[101], delivery_id=10)

    assert ledger.get_entry(1).orders[0].food == [101, 101]


def test_snapshot_is_independent_copy():
    ledger = DeliveryLedger()
    ledger.register_delivered_items(guest=1, order=1, food=[101])

    snapshot = ledger.snapshot(1)
    snapshot.orders[0].food.append(999)

    assert ledger.get_entry(1).orders[0].food == [101]
    assert ledger.snapshot(42) is None


def test_remove_one_each_is_multiset_difference():
    assert remove_one_each([101, 101, 102], [101]) == [101, 102]
    assert remove_one_each([101, 102], [101, 101, 103]) == [102]
    assert remove_one_each([], [101]) == []


def test_settle_removes_paid_quantities_and_prunes_empty_lines():
    ledger = DeliveryLedger()
    ledger.register_delivered_items(guest=1, order=1, food=[101, 101], drinks=[201])
    ledger.register_delivered_items(guest=1, order=2, food=[102])

    entry = ledger.settle(1, [OrderLine(1, [101], [201]), OrderLine(2, [102], [])])

    # one 101 was never billed and survives; order 2 is fully paid
    assert entry.orders == [OrderLine(1, [101], [])]


def test_settle_ignores_orders_missing_from_ledger():
    ledger = DeliveryLedger()
    ledger.register_delivered_items(guest=1, order=1, food=[101])

    entry = ledger.settle(1, [OrderLine(99, [101], [])])

    assert entry.orders == [OrderLine(1, [101], [])]


def test_delivery_ids_are_tracked_per_guest():
    ledger = DeliveryLedger()

    ledger.register_delivered_items(guest=1, order=1, food=[101], delivery_id=9)
    ledger.register_delivered_items(guest=2, order=1, food=[102], delivery_id=9)

    assert ledger.get_entry(2).orders[0].food == [102]


def test_delivery_ids_are_released_when_guest_settles_in_full():
    ledger = DeliveryLedger()
    ledger.register_delivered_items(guest=1, order=1, food=[101], delivery_id=9)

    ledger.settle(1, [OrderLine(1, [101], [])])

    assert ledger.get_entry(1).delivery_ids == set()


def test_delivery_ids_survive_partial_settlement():
    ledger = DeliveryLedger()
    ledger.register_delivered_items(guest=1, order=1, food=[101, 102], delivery_id=9)

    ledger.settle(1, [OrderLine(1, [101], [])])
    ledger.register_delivered_items(guest=1, order=1, food=[102], delivery_id=9)

    entry = ledger.get_entry(1)
    assert entry.delivery_ids == {9}
    assert entry.orders == [OrderLine(1, [102], [])]
