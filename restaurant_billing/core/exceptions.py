"""
Billing exceptions.

Every failure the billing service reports to a caller derives from
BillingError. Each class carries the HTTP status and machine-readable
error code the API layer renders, so services raise plain exceptions
and never touch FastAPI.
"""

from typing import Optional


class BillingError(Exception):
    """Base class for billing failures."""

    status_code: int = 500
    error_code: str = "billing_error"

    def __init__(self, message: str, detail: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.detail = detail


class MenuUnavailable(BillingError):
    """The price list could not be fetched (network error, timeout, bad payload)."""

    status_code = 503
    error_code = "menu_unavailable"


class MenuNotReady(BillingError):
    """The price list has not been loaded yet."""

    status_code = 503
    error_code = "menu_not_ready"

    def __init__(self, detail: Optional[str] = None):
        super().__init__("The menu has not been loaded yet", detail)


class MenuLoadInProgress(BillingError):
    """A second menu load was started while one is still running."""

    error_code = "menu_load_in_progress"

    def __init__(self):
        super().__init__("A menu load is already in progress")


class UnknownMenuItem(BillingError):
    """A delivered item id has no price on the menu."""

    error_code = "unknown_menu_item"

    def __init__(self, category: str, item_id: int):
        super().__init__(f"Unknown {category} item: {item_id}")
        self.category = category
        self.item_id = item_id


class BillNotFound(BillingError):
    """No open bill exists with the requested id."""

    status_code = 404
    error_code = "bill_not_found"

    def __init__(self, bill_id: int):
        super().__init__(f"Bill #{bill_id} not found")
        self.bill_id = bill_id


class GuestNotFound(BillingError):
    """No delivered items are recorded for the guest."""

    status_code = 404
    error_code = "guest_not_found"

    def __init__(self, guest: int, detail: Optional[str] = None):
        super().__init__(f"Guest {guest} has no delivered items", detail)
        self.guest = guest
