"""Credential and configuration validators."""

from predict_orders.constants import ADDRESSES_BY_CHAIN_ID
from predict_orders.exceptions import ConfigError


def validate_signer_credentials() -> None:
    """Raise ConfigError if order-signing credentials are missing."""
    from config.settings import settings
    if not settings.PREDICT_PRIVATE_KEY:
        raise ConfigError("PREDICT_PRIVATE_KEY is required")


def validate_chain() -> None:
    """Raise ConfigError if the configured chain has no known exchange addresses."""
    from config.settings import settings
    if settings.PREDICT_CHAIN_ID not in ADDRESSES_BY_CHAIN_ID:
        raise ConfigError(f"Unsupported PREDICT_CHAIN_ID: {settings.PREDICT_CHAIN_ID}")
