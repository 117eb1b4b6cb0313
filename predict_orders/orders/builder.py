"""OrderBuilder: prices, assembles, hashes, and signs exchange orders."""

from __future__ import annotations

import asyncio
import random
import time
from dataclasses import dataclass
from typing import Callable, Iterable, Optional, Union

import structlog

from predict_orders.constants import (
    ADDRESSES_BY_CHAIN_ID,
    FEE_RATE_BPS_BY_CHAIN_ID,
    FIVE_MINUTES_SECONDS,
    MAX_SALT,
    NO_EXPIRATION_TIMESTAMP,
    ZERO_ADDRESS,
    SignatureType,
)
from predict_orders.exceptions import (
    ConfigError,
    FailedOrderSignError,
    InvalidExpirationError,
    InvalidMultiOutcomeConfigError,
    MakerSignerMismatchError,
    MissingSignerError,
)
from predict_orders.orders.amounts import (
    limit_order_amounts,
    market_order_amounts,
    market_order_amounts_by_value,
)
from predict_orders.orders.book import warn_if_stale
from predict_orders.orders.models import (
    Addresses,
    Book,
    BuildOrderInput,
    EIP712TypedData,
    LimitHelperInput,
    MarketHelperInput,
    MarketHelperValueInput,
    Order,
    OrderAmounts,
    OrderConfig,
    OrderStrategy,
    SignedOrder,
)
from predict_orders.orders.signers import EOASigner, KernelSigner, OrderSigner, OwnerLookup
from predict_orders.orders.typed_data import build_order_typed_data, hash_typed_data

logger = structlog.get_logger()

# (exchange_address, token_id) -> whether the token is registered on that exchange.
TokenRegistry = Callable[[str, str], bool]


def generate_order_salt() -> str:
    """Random salt in ``[0, 2**31)`` as a decimal string."""
    return str(random.randrange(MAX_SALT))


@dataclass(slots=True)
class OrderBuilderOptions:
    """Overrides for the per-chain defaults.

    ``precision`` is the number of decimals of the fixed-point domain (18 for wei).
    """

    addresses: Optional[Addresses] = None
    order_config: Optional[OrderConfig] = None
    precision: Optional[int] = None
    generate_salt: Optional[Callable[[], Union[str, int]]] = None
    book_stale_seconds: float = FIVE_MINUTES_SECONDS


class OrderBuilder:
    """Helper to price, build, hash, and sign orders for one chain.

    Without a signer the builder can still compute amounts, build orders
    (given an explicit ``signer`` in the input) and hash them; signing
    raises ``MissingSignerError``.
    """

    def __init__(
        self,
        chain_id: int,
        signer: Optional[OrderSigner] = None,
        options: Optional[OrderBuilderOptions] = None,
    ) -> None:
        options = options or OrderBuilderOptions()
        self.chain_id = int(chain_id)
        self._signer = signer
        if options.addresses is None and self.chain_id not in ADDRESSES_BY_CHAIN_ID:
            raise ConfigError(f"Unsupported chain id {self.chain_id}; pass options.addresses")
        self.addresses = options.addresses or Addresses(**ADDRESSES_BY_CHAIN_ID[self.chain_id])
        self.order_config = options.order_config or OrderConfig(
            fee_rate_bps=FEE_RATE_BPS_BY_CHAIN_ID.get(self.chain_id, "0")
        )
        self.decimals = options.precision if options.precision else 18
        self.precision = 10**self.decimals
        self._generate_salt = options.generate_salt or generate_order_salt
        self._book_stale_seconds = options.book_stale_seconds

    @classmethod
    def from_settings(cls, owner_lookup: Optional[OwnerLookup] = None) -> "OrderBuilder":
        """Build from global settings.

        A configured ``PREDICT_ACCOUNT_ADDRESS`` selects Kernel signing, which
        needs ``owner_lookup`` to verify the key owns the account.
        """
        from eth_account import Account

        from config.settings import settings
        from config.validators import validate_chain
        validate_chain()

        signer: Optional[OrderSigner] = None
        if settings.PREDICT_PRIVATE_KEY:
            account = Account.from_key(settings.PREDICT_PRIVATE_KEY)
            if settings.PREDICT_ACCOUNT_ADDRESS:
                if owner_lookup is None:
                    raise ValueError("owner_lookup is required when PREDICT_ACCOUNT_ADDRESS is set")
                signer = KernelSigner(
                    account,
                    settings.PREDICT_ACCOUNT_ADDRESS,
                    settings.PREDICT_CHAIN_ID,
                    owner_lookup,
                    validator_address=settings.PREDICT_ECDSA_VALIDATOR,
                )
            else:
                signer = EOASigner(account)

        return cls(
            settings.PREDICT_CHAIN_ID,
            signer,
            OrderBuilderOptions(
                order_config=OrderConfig(fee_rate_bps=str(settings.PREDICT_FEE_RATE_BPS)),
                precision=settings.PREDICT_PRECISION_DECIMALS,
                book_stale_seconds=settings.PREDICT_BOOK_STALE_SECONDS,
            ),
        )

    @property
    def signer(self) -> Optional[OrderSigner]:
        return self._signer

    @property
    def uses_smart_account(self) -> bool:
        return isinstance(self._signer, KernelSigner)

    # ------------------------
    # Amounts
    # ------------------------
    def get_limit_order_amounts(self, data: LimitHelperInput) -> OrderAmounts:
        """Amounts for a LIMIT order.

        Raises:
            InvalidQuantityError: quantity_wei is below 1e16.
        """
        return limit_order_amounts(data, self.precision)

    def get_market_order_amounts(
        self,
        data: Union[MarketHelperInput, MarketHelperValueInput],
        book: Book,
    ) -> OrderAmounts:
        """Amounts for a MARKET order against a book snapshot.

        ``MarketHelperValueInput`` prices a BUY by collateral to spend;
        ``MarketHelperInput`` prices by share quantity. A stale book is
        logged and used anyway.

        Raises:
            InvalidQuantityError: quantity below 1e16 or value below 1e18.
        """
        warn_if_stale(book, self._book_stale_seconds)

        if isinstance(data, MarketHelperValueInput):
            return market_order_amounts_by_value(data, book, self.precision, self.decimals)
        return market_order_amounts(data, book, self.precision, self.decimals)

    # ------------------------
    # Order assembly
    # ------------------------
    def _resolve_identity(self, data: BuildOrderInput) -> tuple[str, str]:
        if self.uses_smart_account:
            account = self._signer.address
            conflicting = [
                value for value in (data.maker, data.signer)
                if value is not None and value.lower() != account.lower()
            ]
            if conflicting:
                logger.warning(
                    "order_identity_overridden",
                    account=account,
                    maker=data.maker,
                    signer=data.signer,
                )
            return account, account

        configured = self._signer.address if self._signer else None
        if data.signer and configured and data.signer.lower() != configured.lower():
            logger.warning(
                "order_signer_differs_from_key",
                signer=data.signer,
                key_address=configured,
            )
        signer = data.signer or configured
        if not signer:
            raise MissingSignerError()
        maker = data.maker or signer
        if maker.lower() != signer.lower():
            raise MakerSignerMismatchError(maker, signer)
        return maker, signer

    def build_order(self, strategy: OrderStrategy, data: BuildOrderInput) -> Order:
        """Build an order for ``strategy`` from partial input.

        LIMIT orders without ``expires_at`` never expire; MARKET orders always
        expire five minutes from now and ignore ``expires_at``.

        Raises:
            InvalidExpirationError: LIMIT ``expires_at`` is not in the future.
            MakerSignerMismatchError: explicit maker differs from the signer.
            MissingSignerError: no signer in the input and none configured.
        """
        now = time.time()

        if strategy == "MARKET":
            if data.expires_at is not None:
                logger.warning("market_order_expiration_ignored", expires_at=data.expires_at.isoformat())
            expiration = int(now + FIVE_MINUTES_SECONDS)
        else:
            if data.expires_at is None:
                expiration = NO_EXPIRATION_TIMESTAMP
            elif data.expires_at.timestamp() <= now:
                raise InvalidExpirationError()
            else:
                expiration = int(data.expires_at.timestamp())

        maker, signer = self._resolve_identity(data)
        salt = data.salt if data.salt is not None else self._generate_salt()
        fee_rate_bps = data.fee_rate_bps if data.fee_rate_bps is not None else self.order_config.fee_rate_bps

        return Order(
            salt=str(salt),
            maker=maker,
            signer=signer,
            taker=data.taker or ZERO_ADDRESS,
            token_id=str(data.token_id),
            maker_amount=str(data.maker_amount),
            taker_amount=str(data.taker_amount),
            expiration=str(expiration),
            nonce=str(data.nonce if data.nonce is not None else 0),
            fee_rate_bps=str(fee_rate_bps),
            side=data.side,
            signature_type=data.signature_type if data.signature_type is not None else SignatureType.EOA,
        )

    # ------------------------
    # Typed data & signing
    # ------------------------
    def build_typed_data(self, order: Order, is_neg_risk: bool = False) -> EIP712TypedData:
        """Typed data for ``order``; ``is_neg_risk`` selects the multi-outcome exchange."""
        return build_order_typed_data(order, self.chain_id, self.addresses, is_neg_risk)

    def build_typed_data_hash(self, typed_data: EIP712TypedData) -> str:
        """0x-prefixed EIP-712 digest of ``typed_data``.

        Raises:
            FailedTypedDataEncoderError: the typed data could not be encoded.
        """
        return hash_typed_data(typed_data)

    async def sign_typed_data_order(self, typed_data: EIP712TypedData) -> SignedOrder:
        """Sign the order in ``typed_data`` with the configured signer.

        Raises:
            MissingSignerError: the builder has no signer.
            FailedTypedDataEncoderError: the typed data could not be hashed.
            FailedOrderSignError: the signer failed; see ``cause``.
        """
        if self._signer is None:
            raise MissingSignerError()

        order = Order.from_dict(typed_data.message)
        order_hash = self.build_typed_data_hash(typed_data)

        try:
            signature = await asyncio.to_thread(self._signer.sign, typed_data)
        except Exception as exc:
            logger.error("order_sign_failed", order_hash=order_hash, error=str(exc))
            raise FailedOrderSignError(exc) from exc

        logger.info("order_signed", order_hash=order_hash, signer=self._signer.address)
        return SignedOrder(order=order, signature=signature, hash=order_hash)

    # ------------------------
    # Cancellation
    # ------------------------
    def prepare_cancel(
        self,
        orders: Iterable[Order],
        is_neg_risk: bool,
        token_registry: TokenRegistry,
    ) -> tuple[str, list[dict]]:
        """Validate orders for an on-chain cancel and return ``(exchange, wire_orders)``.

        Every token must be registered on the exchange implied by ``is_neg_risk``.

        Raises:
            InvalidMultiOutcomeConfigError: a token is not registered there.
        """
        exchange = self.addresses.NEG_RISK_CTF_EXCHANGE if is_neg_risk else self.addresses.CTF_EXCHANGE
        orders = list(orders)
        unregistered = [o.token_id for o in orders if not token_registry(exchange, o.token_id)]
        if unregistered:
            raise InvalidMultiOutcomeConfigError(unregistered)
        return exchange, [o.to_dict() for o in orders]
