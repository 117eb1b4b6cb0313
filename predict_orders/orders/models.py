"""Value objects for order pricing, assembly, and signing."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import Any, Literal, Optional, Union

from predict_orders.constants import Side, SignatureType
from predict_orders.utils.precision import DecimalLike

OrderStrategy = Literal["MARKET", "LIMIT"]

# (price, quantity) of one order-book tier.
DepthLevel = tuple[DecimalLike, DecimalLike]

IntLike = Union[int, str]


@dataclass(slots=True)
class Book:
    """Order book snapshot.

    Asks are best (lowest) first and bids best (highest) first; the walker
    consumes levels from index 0 and never re-sorts them.
    """

    update_timestamp_ms: int
    asks: list[DepthLevel] = field(default_factory=list)
    bids: list[DepthLevel] = field(default_factory=list)
    market_id: Optional[int] = None

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "Book":
        """Parse the ``GET /orderbook/{marketId}`` payload shape."""
        return cls(
            update_timestamp_ms=int(raw.get("updateTimestampMs", 0)),
            asks=[(price, qty) for price, qty in raw.get("asks", [])],
            bids=[(price, qty) for price, qty in raw.get("bids", [])],
            market_id=raw.get("marketId"),
        )


@dataclass(slots=True)
class ProcessedBookAmounts:
    """Result of walking book depth for a target quantity."""

    quantity_wei: int = 0
    price_wei: int = 0  # cumulative cost
    last_price_wei: int = 0


@dataclass(slots=True)
class LimitHelperInput:
    side: Side
    price_per_share_wei: int
    quantity_wei: int


@dataclass(slots=True)
class MarketHelperInput:
    side: Side
    quantity_wei: int


@dataclass(slots=True)
class MarketHelperValueInput:
    """Market buy sized by collateral to spend rather than shares."""

    side: Side
    value_wei: int


@dataclass(slots=True)
class OrderAmounts:
    price_per_share: int
    maker_amount: int
    taker_amount: int
    last_price: int = 0


@dataclass(slots=True)
class OrderConfig:
    fee_rate_bps: str = "0"


@dataclass(frozen=True, slots=True)
class Addresses:
    CTF_EXCHANGE: str
    NEG_RISK_CTF_EXCHANGE: str
    NEG_RISK_ADAPTER: str
    CONDITIONAL_TOKENS: str
    USDB: str


@dataclass(slots=True)
class BuildOrderInput:
    """Partial order input; omitted fields are filled in by the builder."""

    side: Side
    token_id: IntLike
    maker_amount: IntLike
    taker_amount: IntLike
    signer: Optional[str] = None
    maker: Optional[str] = None
    taker: Optional[str] = None
    nonce: Optional[IntLike] = None
    salt: Optional[IntLike] = None
    signature_type: Optional[SignatureType] = None
    fee_rate_bps: Optional[IntLike] = None
    expires_at: Optional[datetime] = None


@dataclass(frozen=True, slots=True)
class Order:
    """Canonical order. Numeric fields are decimal-string integers."""

    salt: str
    maker: str
    signer: str
    taker: str
    token_id: str
    maker_amount: str
    taker_amount: str
    expiration: str
    nonce: str
    fee_rate_bps: str
    side: Side
    signature_type: SignatureType

    def to_dict(self) -> dict[str, Any]:
        """Wire/EIP-712 message form (camelCase keys)."""
        return {
            "salt": self.salt,
            "maker": self.maker,
            "signer": self.signer,
            "taker": self.taker,
            "tokenId": self.token_id,
            "makerAmount": self.maker_amount,
            "takerAmount": self.taker_amount,
            "expiration": self.expiration,
            "nonce": self.nonce,
            "feeRateBps": self.fee_rate_bps,
            "side": int(self.side),
            "signatureType": int(self.signature_type),
        }

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "Order":
        return cls(
            salt=str(raw["salt"]),
            maker=raw["maker"],
            signer=raw["signer"],
            taker=raw["taker"],
            token_id=str(raw["tokenId"]),
            maker_amount=str(raw["makerAmount"]),
            taker_amount=str(raw["takerAmount"]),
            expiration=str(raw["expiration"]),
            nonce=str(raw["nonce"]),
            fee_rate_bps=str(raw["feeRateBps"]),
            side=Side(int(raw["side"])),
            signature_type=SignatureType(int(raw["signatureType"])),
        )


@dataclass(frozen=True, slots=True)
class SignedOrder:
    order: Order
    signature: str
    hash: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        data = {**self.order.to_dict(), "signature": self.signature}
        if self.hash is not None:
            data["hash"] = self.hash
        return data


@dataclass(slots=True)
class EIP712TypedData:
    types: dict[str, list[dict[str, str]]]
    domain: dict[str, Any]
    message: dict[str, Any]
    primary_type: str = "Order"

    def to_dict(self) -> dict[str, Any]:
        """Full-message form accepted by eth-account's ``encode_typed_data``."""
        data = asdict(self)
        data["primaryType"] = data.pop("primary_type")
        return data
