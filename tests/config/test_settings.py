from unittest.mock import patch

import pytest
from eth_account import Account

from config.settings import Settings
from config.validators import validate_chain, validate_signer_credentials
from predict_orders.exceptions import ConfigError
from predict_orders.orders.builder import OrderBuilder
from predict_orders.orders.signers import EOASigner, KernelSigner

PRIVATE_KEY = "0x4c0883a69102937d6231471b5dbb6204fe5129617082792ae468d01a3f362318"
SMART_ACCOUNT = "0x1111111111111111111111111111111111111111"


def test_settings_defaults():
    s = Settings(_env_file=None)
    assert s.PREDICT_CHAIN_ID == 81_457
    assert s.PREDICT_FEE_RATE_BPS == 0
    assert s.PREDICT_PRECISION_DECIMALS == 18
    assert s.PREDICT_BOOK_STALE_SECONDS == 300.0


def test_settings_env_override(monkeypatch):
    monkeypatch.setenv("PREDICT_CHAIN_ID", "168587773")
    monkeypatch.setenv("PREDICT_FEE_RATE_BPS", "25")
    s = Settings(_env_file=None)
    assert s.PREDICT_CHAIN_ID == 168_587_773
    assert s.PREDICT_FEE_RATE_BPS == 25


def test_validate_signer_credentials_missing_key():
    with patch("config.settings.settings", Settings(_env_file=None, PREDICT_PRIVATE_KEY="")):
        with pytest.raises(ConfigError):
            validate_signer_credentials()


def test_validate_chain_unknown():
    with patch("config.settings.settings", Settings(_env_file=None, PREDICT_CHAIN_ID=1)):
        with pytest.raises(ConfigError):
            validate_chain()


def test_builder_from_settings_eoa():
    s = Settings(_env_file=None, PREDICT_PRIVATE_KEY=PRIVATE_KEY, PREDICT_FEE_RATE_BPS=10)
    with patch("config.settings.settings", s):
        builder = OrderBuilder.from_settings()
    assert isinstance(builder.signer, EOASigner)
    assert builder.signer.address == Account.from_key(PRIVATE_KEY).address
    assert builder.order_config.fee_rate_bps == "10"


def test_builder_from_settings_without_key_has_no_signer():
    with patch("config.settings.settings", Settings(_env_file=None)):
        builder = OrderBuilder.from_settings()
    assert builder.signer is None


def test_builder_from_settings_smart_account():
    owner = Account.from_key(PRIVATE_KEY).address
    s = Settings(_env_file=None, PREDICT_PRIVATE_KEY=PRIVATE_KEY, PREDICT_ACCOUNT_ADDRESS=SMART_ACCOUNT)
    with patch("config.settings.settings", s):
        builder = OrderBuilder.from_settings(owner_lookup=lambda _: owner)
    assert isinstance(builder.signer, KernelSigner)
    assert builder.uses_smart_account
    assert builder.signer.address == SMART_ACCOUNT


def test_builder_from_settings_unknown_chain():
    s = Settings(_env_file=None, PREDICT_PRIVATE_KEY=PRIVATE_KEY, PREDICT_CHAIN_ID=1)
    with patch("config.settings.settings", s):
        with pytest.raises(ConfigError, match="PREDICT_CHAIN_ID"):
            OrderBuilder.from_settings()
