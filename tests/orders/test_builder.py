# tests/orders/test_builder.py
import time
from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

import pytest
from eth_account import Account
from structlog.testing import capture_logs

from predict_orders.constants import (
    ADDRESSES_BY_CHAIN_ID,
    NO_EXPIRATION_TIMESTAMP,
    ZERO_ADDRESS,
    ChainId,
    Side,
    SignatureType,
)
from predict_orders.exceptions import (
    ConfigError,
    FailedOrderSignError,
    FailedTypedDataEncoderError,
    InvalidExpirationError,
    InvalidMultiOutcomeConfigError,
    MakerSignerMismatchError,
    MissingSignerError,
)
from predict_orders.orders.builder import OrderBuilder, OrderBuilderOptions, generate_order_salt
from predict_orders.orders.models import Addresses, BuildOrderInput, OrderConfig
from predict_orders.orders.signers import EOASigner, KernelSigner

WEI = 10**18
PRIVATE_KEY = "0x4c0883a69102937d6231471b5dbb6204fe5129617082792ae468d01a3f362318"
SEPOLIA = ADDRESSES_BY_CHAIN_ID[ChainId.BLAST_SEPOLIA]


def generate_salt():
    return "1234"


@pytest.fixture
def account():
    return Account.from_key(PRIVATE_KEY)


@pytest.fixture
def builder(account):
    return OrderBuilder(
        ChainId.BLAST_SEPOLIA,
        EOASigner(account),
        OrderBuilderOptions(generate_salt=generate_salt),
    )


def order_input(**overrides):
    data = dict(
        side=Side.BUY,
        signer=ZERO_ADDRESS,
        token_id="123",
        maker_amount=10 * WEI,
        taker_amount=5 * WEI,
    )
    data.update(overrides)
    return BuildOrderInput(**data)


# -- build_order -------------------------------------------------------------

def test_build_limit_order(builder):
    order = builder.build_order("LIMIT", order_input(signer="0xsigner"))

    assert order.salt == "1234"
    assert order.side == Side.BUY
    assert order.nonce == "0"
    assert order.maker == "0xsigner"
    assert order.signer == "0xsigner"
    assert order.taker == ZERO_ADDRESS
    assert order.token_id == "123"
    assert order.maker_amount == str(10 * WEI)
    assert order.taker_amount == str(5 * WEI)
    assert order.expiration == str(NO_EXPIRATION_TIMESTAMP) == "4102444800"
    assert order.fee_rate_bps == "0"
    assert order.signature_type == SignatureType.EOA


def test_build_limit_order_with_future_expiration(builder):
    expires_at = datetime.now(timezone.utc) + timedelta(hours=1)
    order = builder.build_order("LIMIT", order_input(expires_at=expires_at))
    assert order.expiration == str(int(expires_at.timestamp()))


def test_build_market_order(builder):
    before = int(time.time())
    order = builder.build_order(
        "MARKET",
        order_input(side=Side.SELL, nonce="2", token_id="456", maker_amount=5 * WEI, taker_amount=10 * WEI),
    )
    assert order.side == Side.SELL
    assert order.nonce == "2"
    assert order.token_id == "456"
    assert order.maker_amount == str(5 * WEI)
    assert before <= int(order.expiration) <= int(time.time()) + 5 * 60


def test_build_market_order_ignores_expiration(builder):
    past = datetime(2024, 1, 1, tzinfo=timezone.utc)
    with capture_logs() as logs:
        order = builder.build_order("MARKET", order_input(expires_at=past))
    assert int(order.expiration) > int(time.time())
    ignored = [log for log in logs if log["event"] == "market_order_expiration_ignored"]
    assert len(ignored) == 1
    assert ignored[0]["log_level"] == "warning"


def test_build_limit_order_past_expiration_raises(builder):
    with pytest.raises(InvalidExpirationError):
        builder.build_order("LIMIT", order_input(nonce="1", expires_at=datetime(2024, 1, 1, tzinfo=timezone.utc)))


def test_build_order_defaults_signer_from_identity(builder, account):
    order = builder.build_order("LIMIT", order_input(signer=None))
    assert order.signer == account.address
    assert order.maker == account.address


def test_build_order_maker_signer_mismatch(builder):
    with pytest.raises(MakerSignerMismatchError):
        builder.build_order("LIMIT", order_input(signer="0xaaa", maker="0xbbb"))


def test_build_order_maker_matches_signer_case_insensitively(builder):
    order = builder.build_order("LIMIT", order_input(signer="0xABC", maker="0xabc"))
    assert order.maker == "0xabc"


def test_build_order_explicit_signer_differs_from_key_warns(builder, account):
    with capture_logs() as logs:
        order = builder.build_order("LIMIT", order_input(signer="0xaaa"))

    assert order.signer == "0xaaa"
    warnings = [log for log in logs if log["event"] == "order_signer_differs_from_key"]
    assert len(warnings) == 1
    assert warnings[0]["log_level"] == "warning"
    assert warnings[0]["signer"] == "0xaaa"
    assert warnings[0]["key_address"] == account.address


def test_build_order_signer_matching_key_does_not_warn(builder, account):
    with capture_logs() as logs:
        builder.build_order("LIMIT", order_input(signer=account.address.lower()))
    assert not any(log["event"] == "order_signer_differs_from_key" for log in logs)


def test_build_order_without_key_does_not_warn_on_explicit_signer():
    builder = OrderBuilder(ChainId.BLAST_SEPOLIA)
    with capture_logs() as logs:
        builder.build_order("LIMIT", order_input(signer="0xaaa"))
    assert logs == []


def test_unknown_chain_without_addresses_raises():
    with pytest.raises(ConfigError, match="Unsupported chain id 1"):
        OrderBuilder(1)


def test_unknown_chain_with_explicit_addresses(account):
    builder = OrderBuilder(1, EOASigner(account), OrderBuilderOptions(addresses=Addresses(**SEPOLIA)))
    assert builder.addresses.CTF_EXCHANGE == SEPOLIA["CTF_EXCHANGE"]
    assert builder.order_config.fee_rate_bps == "0"
    assert builder.build_typed_data(builder.build_order("LIMIT", order_input())).domain["chainId"] == 1


def test_build_order_without_any_signer_raises():
    builder = OrderBuilder(ChainId.BLAST_SEPOLIA)
    with pytest.raises(MissingSignerError):
        builder.build_order("LIMIT", order_input(signer=None))


def test_build_order_explicit_fields_stringified(builder):
    order = builder.build_order(
        "LIMIT",
        order_input(salt=99, nonce=3, fee_rate_bps=200, taker="0xtaker", signature_type=SignatureType.POLY_PROXY),
    )
    assert order.salt == "99"
    assert order.nonce == "3"
    assert order.fee_rate_bps == "200"
    assert order.taker == "0xtaker"
    assert order.signature_type == SignatureType.POLY_PROXY


def test_build_order_uses_configured_fee_rate(account):
    builder = OrderBuilder(
        ChainId.BLAST_MAINNET,
        EOASigner(account),
        OrderBuilderOptions(order_config=OrderConfig(fee_rate_bps="150")),
    )
    assert builder.build_order("LIMIT", order_input()).fee_rate_bps == "150"


def test_build_order_smart_account_forces_identity(account):
    smart_account = "0x1111111111111111111111111111111111111111"
    signer = KernelSigner(account, smart_account, ChainId.BLAST_SEPOLIA, lambda _: account.address)
    builder = OrderBuilder(ChainId.BLAST_SEPOLIA, signer)

    with capture_logs() as logs:
        order = builder.build_order("LIMIT", order_input(signer=account.address))

    assert order.maker == smart_account
    assert order.signer == smart_account
    assert logs[0]["event"] == "order_identity_overridden"


def test_generate_order_salt_range():
    for _ in range(100):
        assert 0 <= int(generate_order_salt()) < 2**31


# -- typed data ------------------------------------------------------------------

def test_build_typed_data(builder):
    order = builder.build_order("LIMIT", order_input(nonce="1"))
    typed_data = builder.build_typed_data(order, is_neg_risk=False)

    assert typed_data.primary_type == "Order"
    assert typed_data.domain["name"] == "predict.fun CTF Exchange"
    assert typed_data.domain["version"] == "1"
    assert typed_data.domain["chainId"] == ChainId.BLAST_SEPOLIA
    assert typed_data.domain["verifyingContract"] == SEPOLIA["CTF_EXCHANGE"]
    assert typed_data.message == order.to_dict()


def test_build_typed_data_neg_risk_exchange(builder):
    order = builder.build_order("LIMIT", order_input())
    typed_data = builder.build_typed_data(order, is_neg_risk=True)
    assert typed_data.domain["verifyingContract"] == SEPOLIA["NEG_RISK_CTF_EXCHANGE"]


def test_build_typed_data_hash(builder):
    order = builder.build_order("LIMIT", order_input(nonce="1"))
    order_hash = builder.build_typed_data_hash(builder.build_typed_data(order))

    assert order_hash.startswith("0x")
    assert len(order_hash) == 66


def test_build_typed_data_hash_is_deterministic(builder):
    hashes = {
        builder.build_typed_data_hash(builder.build_typed_data(builder.build_order("LIMIT", order_input())))
        for _ in range(3)
    }
    assert len(hashes) == 1


def test_build_typed_data_hash_depends_on_exchange(builder):
    order = builder.build_order("LIMIT", order_input())
    plain = builder.build_typed_data_hash(builder.build_typed_data(order, is_neg_risk=False))
    neg_risk = builder.build_typed_data_hash(builder.build_typed_data(order, is_neg_risk=True))
    assert plain != neg_risk


def test_build_typed_data_hash_malformed_raises(builder):
    order = builder.build_order("LIMIT", order_input(signer="0xsigner"))
    with pytest.raises(FailedTypedDataEncoderError) as exc_info:
        builder.build_typed_data_hash(builder.build_typed_data(order))
    assert exc_info.value.cause is not None
    assert exc_info.value.__cause__ is exc_info.value.cause


# -- signing -----------------------------------------------------------------

@pytest.mark.asyncio
async def test_sign_typed_data_order(builder):
    order = builder.build_order("LIMIT", order_input(nonce="1"))
    typed_data = builder.build_typed_data(order)

    signed = await builder.sign_typed_data_order(typed_data)

    assert signed.order == order
    assert signed.signature.startswith("0x")
    assert len(signed.signature) == 132
    assert signed.hash == builder.build_typed_data_hash(typed_data)
    assert signed.to_dict()["signature"] == signed.signature


@pytest.mark.asyncio
async def test_sign_typed_data_order_missing_signer():
    builder = OrderBuilder(ChainId.BLAST_SEPOLIA)
    order = builder.build_order("LIMIT", order_input(nonce="1"))

    with pytest.raises(MissingSignerError):
        await builder.sign_typed_data_order(builder.build_typed_data(order))


@pytest.mark.asyncio
async def test_sign_typed_data_order_wraps_signer_failure():
    signer = MagicMock()
    signer.address = ZERO_ADDRESS
    signer.sign.side_effect = RuntimeError("hardware wallet disconnected")
    builder = OrderBuilder(ChainId.BLAST_SEPOLIA, signer)
    order = builder.build_order("LIMIT", order_input())

    with pytest.raises(FailedOrderSignError) as exc_info:
        await builder.sign_typed_data_order(builder.build_typed_data(order))
    assert isinstance(exc_info.value.cause, RuntimeError)


# -- cancellation ------------------------------------------------------------

def test_prepare_cancel_returns_selected_exchange(builder):
    order = builder.build_order("LIMIT", order_input())
    exchange, orders = builder.prepare_cancel([order], is_neg_risk=True, token_registry=lambda ex, tid: True)
    assert exchange == SEPOLIA["NEG_RISK_CTF_EXCHANGE"]
    assert orders == [order.to_dict()]


def test_prepare_cancel_unregistered_token_raises(builder):
    order = builder.build_order("LIMIT", order_input(token_id="999"))
    registry = MagicMock(return_value=False)

    with pytest.raises(InvalidMultiOutcomeConfigError) as exc_info:
        builder.prepare_cancel([order], is_neg_risk=False, token_registry=registry)

    registry.assert_called_once_with(SEPOLIA["CTF_EXCHANGE"], "999")
    assert exc_info.value.token_ids == ["999"]
