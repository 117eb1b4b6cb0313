"""EIP-712 typed-data assembly and hashing for exchange orders."""

from __future__ import annotations

from typing import Any, Union

from eth_abi import encode
from eth_account.messages import encode_typed_data
from eth_utils import keccak, to_bytes

from predict_orders.constants import (
    EIP712_DOMAIN,
    ORDER_STRUCTURE,
    PROTOCOL_NAME,
    PROTOCOL_VERSION,
)
from predict_orders.exceptions import FailedTypedDataEncoderError
from predict_orders.orders.models import Addresses, EIP712TypedData, Order

HexOrBytes = Union[str, bytes]

EIP712_DOMAIN_TYPEHASH = keccak(
    text="EIP712Domain(string name,string version,uint256 chainId,address verifyingContract)"
)
KERNEL_MESSAGE_TYPEHASH = keccak(text="Kernel(bytes32 hash)")


def build_order_typed_data(
    order: Order,
    chain_id: int,
    addresses: Addresses,
    is_neg_risk: bool = False,
) -> EIP712TypedData:
    """Typed data for ``order``, verified by the plain or neg-risk exchange."""
    verifying_contract = addresses.NEG_RISK_CTF_EXCHANGE if is_neg_risk else addresses.CTF_EXCHANGE
    return EIP712TypedData(
        types={
            "EIP712Domain": [dict(p) for p in EIP712_DOMAIN],
            "Order": [dict(p) for p in ORDER_STRUCTURE],
        },
        domain={
            "name": PROTOCOL_NAME,
            "version": PROTOCOL_VERSION,
            "chainId": int(chain_id),
            "verifyingContract": verifying_contract,
        },
        message=order.to_dict(),
        primary_type="Order",
    )


def _normalize_value(type_: str, value: Any) -> Any:
    # Wire format carries integers as decimal strings.
    if type_.startswith(("uint", "int")) and isinstance(value, str):
        return int(value, 0) if value.startswith("0x") else int(value)
    return value


def encodable_typed_data(typed_data: EIP712TypedData) -> dict[str, Any]:
    """Full-message dict with integer fields converted to native ints."""
    full_message = typed_data.to_dict()
    fields = {p["name"]: p["type"] for p in typed_data.types.get(typed_data.primary_type, [])}
    full_message["message"] = {
        key: _normalize_value(fields.get(key, ""), value)
        for key, value in typed_data.message.items()
    }
    domain_fields = {p["name"]: p["type"] for p in typed_data.types.get("EIP712Domain", [])}
    full_message["domain"] = {
        key: _normalize_value(domain_fields.get(key, ""), value)
        for key, value in typed_data.domain.items()
    }
    return full_message


def hash_typed_data(typed_data: EIP712TypedData) -> str:
    """EIP-712 digest ``keccak(0x1901 || domainSeparator || structHash)``.

    Raises:
        FailedTypedDataEncoderError: the structure could not be encoded.
    """
    try:
        signable = encode_typed_data(full_message=encodable_typed_data(typed_data))
        digest = keccak(b"\x19" + signable.version + signable.header + signable.body)
    except Exception as exc:
        raise FailedTypedDataEncoderError(exc) from exc
    return "0x" + digest.hex()


def hash_domain(domain: dict[str, Any]) -> bytes:
    """Domain separator for a full ``{name, version, chainId, verifyingContract}`` domain."""
    return keccak(
        encode(
            ["bytes32", "bytes32", "bytes32", "uint256", "address"],
            [
                EIP712_DOMAIN_TYPEHASH,
                keccak(text=domain["name"]),
                keccak(text=domain["version"]),
                int(domain["chainId"]),
                domain["verifyingContract"],
            ],
        )
    )


def _as_bytes(value: HexOrBytes) -> bytes:
    return value if isinstance(value, bytes) else to_bytes(hexstr=value)


def hash_kernel_message(message_hash: HexOrBytes) -> bytes:
    """Struct hash of ``Kernel(bytes32 hash)`` for ``message_hash``."""
    return keccak(encode(["bytes32", "bytes32"], [KERNEL_MESSAGE_TYPEHASH, _as_bytes(message_hash)]))


def eip712_wrap_hash(message_hash: HexOrBytes, domain: dict[str, Any]) -> str:
    """Re-wrap an existing digest in the Kernel account's EIP-712 domain."""
    digest = keccak(b"\x19\x01" + hash_domain(domain) + hash_kernel_message(message_hash))
    return "0x" + digest.hex()
