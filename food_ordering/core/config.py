"""
Application Configuration Module

Centralizes all configuration using environment variables with Pydantic Settings.
The mock backend has no external services to switch between, so the settings
cover the HTTP listener, the pricing constants and the timing of the simulated
order status timeline.

Usage:
    from food_ordering.core.config import get_settings

    settings = get_settings()
    print(settings.api_port)

Version: 1.0.0
"""

import logging
import sys
from enum import Enum
from functools import lru_cache

from pydantic import AliasChoices, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class EnvironmentMode(str, Enum):
    """
    Application environment modes.

    Attributes:
        DEVELOPMENT: Local testing
        PRODUCTION: Deployed demo instance
        STAGING: Pre-production demo instance
    """
    DEVELOPMENT = "development"
    PRODUCTION = "production"
    STAGING = "staging"


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings can be overridden via environment variables or .env file.
    The listen port honours the plain ``PORT`` variable used by most hosting
    platforms as well as ``API_PORT``.

    Attributes:
        env_mode: Current environment (development/production/staging)
        debug: Enable verbose logging and error details
        api_host: Host to bind the API server
        api_port: Port for the API server
        currency: Currency code used for every cart and order
        tax_rate: Tax rate applied to the subtotal (decimal)
        delivery_fee: Flat delivery charge for non-empty carts
        confirm_after_seconds: Delay before an order moves to "preparing"
        dispatch_after_seconds: Delay before an order moves to "out_for_delivery"
        deliver_after_seconds: Delay before an order moves to "delivered"
        scheduler_tick_seconds: How often the background ticker fires due transitions
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
        default="Mock Food Ordering API",
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
        default=3001,
        validation_alias=AliasChoices("PORT", "API_PORT", "api_port"),
        description="API server port"
    )
    cors_origins: str = Field(
        default="*",
        description="Comma-separated list of allowed CORS origins"
    )

    # ==========================================================================
    # PRICING
    # ==========================================================================

    currency: str = Field(
        default="USD",
        description="Currency code for carts and orders"
    )
    tax_rate: float = Field(
        default=0.09,
        ge=0,
        description="Tax rate as decimal (9%)"
    )
    delivery_fee: float = Field(
        default=2.00,
        ge=0,
        description="Flat delivery fee charged when the subtotal is positive"
    )

    # ==========================================================================
    # ORDER STATUS SIMULATION
    # ==========================================================================

    confirm_after_seconds: float = Field(
        default=2.0,
        gt=0,
        description="Seconds after creation when an order starts preparing"
    )
    dispatch_after_seconds: float = Field(
        default=5.0,
        gt=0,
        description="Seconds after creation when an order goes out for delivery"
    )
    deliver_after_seconds: float = Field(
        default=9.0,
        gt=0,
        description="Seconds after creation when an order is delivered"
    )
    scheduler_tick_seconds: float = Field(
        default=0.25,
        gt=0,
        description="Polling interval of the background status ticker"
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

    @field_validator("currency")
    @classmethod
    def validate_currency(cls, v: str) -> str:
        """Currency codes are upper-case three-letter strings."""
        v = v.strip().upper()
        if len(v) != 3 or not v.isalpha():
            raise ValueError("currency must be a three-letter code")
        return v

    @model_validator(mode="after")
    def validate_status_delays(self) -> "Settings":
        """Status transitions must fire in timeline order."""
        if not (
            self.confirm_after_seconds
            < self.dispatch_after_seconds
            < self.deliver_after_seconds
        ):
            raise ValueError(
                "Status delays must be strictly increasing: "
                "confirm < dispatch < deliver"
            )
        return self

    # ==========================================================================
    # COMPUTED PROPERTIES
    # ==========================================================================

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.env_mode == EnvironmentMode.DEVELOPMENT

    @property
    def cors_origins_list(self) -> list[str]:
        """Get allowed CORS origins as a list."""
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached application settings.

    Settings are loaded only once so every module sees the same values
    for the lifetime of the process.

    Returns:
        Settings: Configured application settings

    Example:
        >>> settings = get_settings()
        >>> print(settings.tax_rate)
        0.09
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

    return logging.getLogger("food_ordering")


def get_logger(name: str) -> logging.Logger:
    """
    Get a named logger instance.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured logger instance
    """
    return logging.getLogger(name)
