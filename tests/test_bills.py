import pytest

from restaurant_billing.core.exceptions import MenuNotReady, UnknownMenuItem
from restaurant_billing.services.billing import (
    BillBook,
    LedgerEntry,
    OrderLine,
    calculate_total,
)


def test_generate_bill_flattens_and_totals(loaded_menu_client):
    book = BillBook(loaded_menu_client)
    entry = LedgerEntry(1, [OrderLine(1, [101, 102], [201])])

    guest_bill = book.generate_bill(entry)

    assert guest_bill.bill == 1
    assert guest_bill.ordered_food == [101, 102]
    assert guest_bill.ordered_drinks == [201]
    assert guest_bill.total_sum == 15.0


def test_flattened_view_keeps_duplicates_across_orders(loaded_menu_client):
    book = BillBook(loaded_menu_client)
    entry = LedgerEntry(
        1, [OrderLine(1, [101, 101], [201]), OrderLine(2, [101], [201, 202])]
    )

    guest_bill = book.generate_bill(entry)

    assert guest_bill.ordered_food == [101, 101, 101]
    assert guest_bill.ordered_drinks == [201, 201, 202]
    assert guest_bill.total_sum == 15.0 + 3.0 + 3.0 + 4.5


def test_regeneration_is_idempotent(loaded_menu_client):
    book = BillBook(loaded_menu_client)
    entry = LedgerEntry(1, [OrderLine(1, [101, 103], [202])])

    first = book.generate_bill(entry)
    second = book.generate_bill(entry)

    assert second == first
    assert len(book) == 1


def test_regeneration_overwrites_order_lines(loaded_menu_client):
    book = BillBook(loaded_menu_client)
    book.generate_bill(LedgerEntry(1, [OrderLine(1, [101], [])]))

    guest_bill = book.generate_bill(
        LedgerEntry(1, [OrderLine(1, [101, 102], []), OrderLine(2, [], [201])])
    )

    assert guest_bill.bill == 1
    assert guest_bill.ordered_food == [101, 102]
    assert guest_bill.ordered_drinks == [201]
    assert guest_bill.total_sum == 15.0
    assert [line.order for line in book.find_by_guest(1).orders] == [1, 2]


def test_regeneration_keeps_lines_missing_from_new_snapshot(loaded_menu_client):
    book = BillBook(loaded_menu_client)
    book.generate_bill(LedgerEntry(1, [OrderLine(1, [101], []), OrderLine(2, [102], [])]))

    guest_bill = book.generate_bill(LedgerEntry(1, [OrderLine(2, [103], [])]))

    assert guest_bill.ordered_food == [101, 103]
    assert guest_bill.total_sum == 17.5


def test_bill_ids_are_per_guest_and_increasing(loaded_menu_client):
    book = BillBook(loaded_menu_client)

    first = book.generate_bill(LedgerEntry(1, [OrderLine(1, [101], [])]))
    second = book.generate_bill(LedgerEntry(2, [OrderLine(1, [102], [])]))

    assert (first.bill, second.bill) == (1, 2)
    assert book.find_by_guest(2).bill == 2


def test_bill_ids_are_never_reused(loaded_menu_client):
    book = BillBook(loaded_menu_client)
    book.generate_bill(LedgerEntry(1, [OrderLine(1, [101], [])]))
    book.remove(1)

    again = book.generate_bill(LedgerEntry(1, [OrderLine(1, [101], [])]))

    assert again.bill == 2
    assert book.get(1) is None


def test_separate_bill_books_have_separate_sequences(loaded_menu_client):
    entry = LedgerEntry(1, [OrderLine(1, [101], [])])

    assert BillBook(loaded_menu_client).generate_bill(entry).bill == 1
    assert BillBook(loaded_menu_client).generate_bill(entry).bill == 1


def test_unknown_item_fails_without_changing_bills(loaded_menu_client):
    book = BillBook(loaded_menu_client)
    book.generate_bill(LedgerEntry(1, [OrderLine(1, [101], [])]))

    with pytest.raises(UnknownMenuItem) as exc_info:
        book.generate_bill(LedgerEntry(1, [OrderLine(1, [101], [299])]))

    assert exc_info.value.category == "drink"
    assert exc_info.value.item_id == 299
    assert book.find_by_guest(1).total_sum == 5.0


def test_unknown_item_on_new_guest_does_not_consume_bill_id(loaded_menu_client):
    book = BillBook(loaded_menu_client)

    with pytest.raises(UnknownMenuItem):
        book.generate_bill(LedgerEntry(1, [OrderLine(1, [999], [])]))

    assert len(book) == 0
    assert book.generate_bill(LedgerEntry(1, [OrderLine(1, [101], [])])).bill == 1


def test_generate_bill_before_menu_loaded_fails_fast(menu_client):
    book = BillBook(menu_client)

    with pytest.raises(MenuNotReady):
        book.generate_bill(LedgerEntry(1, [OrderLine(1, [101], [])]))

    assert len(book) == 0


def test_calculate_total_matches_menu_prices(menu):
    orders = [OrderLine(1, [101, 102, 103], [201, 202]), OrderLine(2, [101], [])]

    assert calculate_total(orders, menu) == 5.0 + 7.0 + 12.5 + 3.0 + 4.5 + 5.0
    assert calculate_total([], menu) == 0.0
