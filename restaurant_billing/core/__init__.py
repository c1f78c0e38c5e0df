"""
Core module initialization.
Exports configuration, logging utilities and the billing exceptions.
"""

from restaurant_billing.core.config import get_settings, Settings, EnvironmentMode
from restaurant_billing.core.exceptions import BillingError

__all__ = ["get_settings", "Settings", "EnvironmentMode", "BillingError"]
