"""
Application Configuration Module

Centralizes all configuration using environment variables with Pydantic Settings.
Supports two kinds of menu source:
    - DEVELOPMENT: Uses the in-process mock price list (no pricing service needed)
    - PRODUCTION / STAGING: Fetches the price list from the pricing service

The ENV_MODE variable controls which menu source is instantiated, enabling
seamless switching between local testing and running next to the other
restaurant services.

Usage:
    from restaurant_billing.core.config import get_settings

    settings = get_settings()
    if settings.is_development:
        # Use the mock menu source
    else:
        # Ask the pricing service
"""

import logging
import sys
from enum import Enum
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class EnvironmentMode(str, Enum):
    """
    Application environment modes.

    Attributes:
        DEVELOPMENT: Local testing with the mock menu source
        PRODUCTION: Live environment fetching prices over HTTP
        STAGING: Pre-production, same wiring as production
    """
    DEVELOPMENT = "development"
    PRODUCTION = "production"
    STAGING = "staging"


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings can be overridden via environment variables or .env file.

    Attributes:
        env_mode: Current environment (development/production/staging)
        debug: Enable verbose logging and error details

        # API Configuration
        api_host: Host to bind the API server
        api_port: Port for the API server

        # Pricing source
        pricing_endpoint: Base URL of the service exposing GET /prices
        menu_fetch_timeout: Per-attempt timeout for the price list request
        menu_max_short_retries: Length of the Fibonacci retry schedule
        menu_cooldown_seconds: Pause after the short retries are exhausted
        bill_menu_wait_seconds: How long bill generation waits for the menu

        # Business Configuration
        card_payment_threshold: Amount from which cards are accepted
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ==========================================================================
    # ENVIRONMENT
    # ==========================================================================

    env_mode: EnvironmentMode = Field(
        default=EnvironmentMode.DEVELOPMENT,
        description="Application environment mode"
    )
    debug: bool = Field(
        default=False,
        description="Enable debug mode with verbose logging"
    )

    # ==========================================================================
    # APPLICATION
    # ==========================================================================

    app_name: str = Field(
        default="Restaurant Billing Service",
        description="Application display name"
    )
    app_version: str = Field(
        default="1.0.0",
        description="Application version"
    )
    api_host: str = Field(
        default="0.0.0.0",
        description="API server host"
    )
    api_port: int = Field(
        default=8083,
        description="API server port"
    )

    # ==========================================================================
    # PRICING SOURCE
    # ==========================================================================

    pricing_endpoint: str = Field(
        default="http://GuestExperience:8081",
        description="Base URL of the service serving GET /prices"
    )
    menu_fetch_timeout: float = Field(
        default=5.0,
        gt=0,
        description="Timeout in seconds for a single price list request"
    )
    menu_max_short_retries: int = Field(
        default=5,
        ge=1,
        description="Number of Fibonacci-spaced retries before the cooldown"
    )
    menu_cooldown_seconds: float = Field(
        default=60.0,
        ge=0,
        description="Pause in seconds once the short retries are exhausted"
    )
    bill_menu_wait_seconds: float = Field(
        default=0.0,
        ge=0,
        description="Seconds a bill request waits for the menu (0 = fail fast)"
    )

    # ==========================================================================
    # MOCK MENU SOURCE
    # ==========================================================================

    mock_menu_failure_rate: float = Field(
        default=0.0,
        ge=0,
        le=1,
        description="Probability that the mock price list request fails"
    )
    mock_menu_latency: float = Field(
        default=0.1,
        ge=0,
        description="Simulated latency of the mock price list in seconds"
    )

    # ==========================================================================
    # BUSINESS CONFIGURATION
    # ==========================================================================

    card_payment_threshold: float = Field(
        default=20.0,
        ge=0,
        description="Bills at or above this amount may be paid by card"
    )

    # ==========================================================================
    # VALIDATORS
    # ==========================================================================

    @field_validator("env_mode", mode="before")
    @classmethod
    def validate_env_mode(cls, v: str) -> EnvironmentMode:
        """Convert string to EnvironmentMode enum."""
        if isinstance(v, EnvironmentMode):
            return v
        try:
            return EnvironmentMode(v.lower())
        except ValueError:
            valid = [e.value for e in EnvironmentMode]
            raise ValueError(f"Invalid env_mode. Must be one of: {valid}")

    @field_validator("pricing_endpoint")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    # ==========================================================================
    # COMPUTED PROPERTIES
    # ==========================================================================

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.env_mode == EnvironmentMode.DEVELOPMENT

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.env_mode == EnvironmentMode.PRODUCTION

    @property
    def use_real_services(self) -> bool:
        """Check if the real pricing service should be used."""
        return self.env_mode in (EnvironmentMode.PRODUCTION, EnvironmentMode.STAGING)

    @property
    def prices_url(self) -> str:
        """Full URL of the price list."""
        return f"{self.pricing_endpoint}/prices"

    # ==========================================================================
    # VALIDATION METHODS
    # ==========================================================================

    def validate_production_config(self) -> list[str]:
        """
        Validate that all required production settings are configured.

        Returns:
            List of missing configuration keys (empty if all present)
        """
        missing = []

        if self.use_real_services:
            if not self.pricing_endpoint:
                missing.append("PRICING_ENDPOINT")

        return missing


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached application settings.

    Returns:
        Settings: Configured application settings

    Example:
        >>> settings = get_settings()
        >>> print(settings.env_mode)
        EnvironmentMode.DEVELOPMENT
    """
    return Settings()


# =============================================================================
# LOGGING CONFIGURATION
# =============================================================================

def setup_logging(level: int = logging.INFO) -> logging.Logger:
    """
    Configure application-wide logging.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR)

    Returns:
        Configured package logger
    """
    settings = get_settings()

    if settings.debug:
        level = logging.DEBUG

    log_format = "%(asctime)s │ %(levelname)-8s │ %(name)-25s │ %(message)s"
    date_format = "%Y-%m-%d %H:%M:%S"

    logging.basicConfig(
        level=level,
        format=log_format,
        datefmt=date_format,
        handlers=[logging.StreamHandler(sys.stdout)],
    )

    # Reduce noise from third-party libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)

    return logging.getLogger("restaurant_billing")

