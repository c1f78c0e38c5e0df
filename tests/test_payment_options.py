import pytest

from restaurant_billing.services.billing import PaymentMethod, get_payment_option


@pytest.mark.parametrize("amount", [-3, 0, 5.5, 19.99])
def test_small_amounts_are_cash_only(amount):
    assert get_payment_option(amount) == [PaymentMethod.CASH]


@pytest.mark.parametrize("amount", [20, 20.01, 250])
def test_cards_from_threshold(amount):
    assert get_payment_option(amount) == [
        PaymentMethod.CASH,
        PaymentMethod.DEBIT_CARD,
        PaymentMethod.CREDIT_CARD,
    ]


def test_custom_threshold():
    assert get_payment_option(15, card_threshold=10) == [
        PaymentMethod.CASH,
        PaymentMethod.DEBIT_CARD,
        PaymentMethod.CREDIT_CARD,
    ]
    assert get_payment_option(9.99, card_threshold=10) == [PaymentMethod.CASH]


def test_method_names_match_wire_format():
    assert [m.value for m in get_payment_option(20)] == ["Cash", "DebitCard", "CreditCard"]
