"""Payment methods accepted for a given amount."""

from restaurant_billing.services.billing.models import PaymentMethod

CARD_PAYMENT_THRESHOLD = 20.0


def get_payment_option(
    amount: float,
    card_threshold: float = CARD_PAYMENT_THRESHOLD,
) -> list[PaymentMethod]:
    """
    Cash is always accepted; cards only from ``card_threshold`` upwards.

    Example:
        >>> get_payment_option(19.99)
        [<PaymentMethod.CASH: 'Cash'>]
    """
    methods = [PaymentMethod.CASH]

    if amount < card_threshold:
        return methods

    return methods + [PaymentMethod.DEBIT_CARD, PaymentMethod.CREDIT_CARD]
