"""
                Restaurant Billing Service

The cashier of the restaurant simulation: keeps track of delivered but
unpaid items per guest, generates bills from the pricing service's menu
and settles payments.
"""

__version__ = "1.0.0"
