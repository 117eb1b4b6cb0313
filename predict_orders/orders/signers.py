"""Signing strategies: direct EOA and Kernel smart-account signing."""

from __future__ import annotations

from typing import Any, Callable, Protocol, runtime_checkable

import structlog
from eth_account.messages import encode_defunct
from eth_utils import to_bytes, to_hex

from predict_orders.constants import (
    KERNEL_DOMAIN_NAME,
    KERNEL_DOMAIN_VERSION,
    KERNEL_ECDSA_VALIDATOR,
    KERNEL_VALIDATOR_MODE,
)
from predict_orders.exceptions import InvalidSignerError
from predict_orders.orders.models import EIP712TypedData
from predict_orders.orders.typed_data import eip712_wrap_hash, encodable_typed_data, hash_typed_data

logger = structlog.get_logger()

# Reads the owner registered for an account on the ECDSA validator contract.
OwnerLookup = Callable[[str], str]


@runtime_checkable
class AccountProtocol(Protocol):
    """Key holder that signs on our behalf. eth-account's LocalAccount satisfies it."""

    address: str

    def sign_typed_data(
        self,
        domain_data: Any = None,
        message_types: Any = None,
        message_data: Any = None,
        full_message: Any = None,
    ) -> Any: ...

    def sign_message(self, signable_message: Any) -> Any: ...


@runtime_checkable
class OrderSigner(Protocol):
    """Strategy the builder signs orders through."""

    @property
    def address(self) -> str: ...

    def sign(self, typed_data: EIP712TypedData) -> str: ...


def _same_address(a: str, b: str) -> bool:
    return a.lower() == b.lower()


class EOASigner:
    """Signs the order's typed data directly with the account key."""

    def __init__(self, account: AccountProtocol) -> None:
        self._account = account

    @property
    def address(self) -> str:
        return self._account.address

    def sign(self, typed_data: EIP712TypedData) -> str:
        signed = self._account.sign_typed_data(full_message=encodable_typed_data(typed_data))
        return to_hex(signed.signature)


class KernelSigner:
    """Signs on behalf of a Kernel smart account owned by ``account``.

    The order digest is re-wrapped in the Kernel domain, signed as a
    personal message, and prefixed with the validation mode byte and the
    ECDSA validator address.
    """

    def __init__(
        self,
        account: AccountProtocol,
        account_address: str,
        chain_id: int,
        owner_lookup: OwnerLookup,
        validator_address: str = KERNEL_ECDSA_VALIDATOR,
    ) -> None:
        owner = owner_lookup(account_address)
        if not _same_address(owner, account.address):
            raise InvalidSignerError(account.address, owner)

        self._account = account
        self._account_address = account_address
        self._chain_id = int(chain_id)
        self._validator_address = validator_address
        logger.info(
            "kernel_signer_verified",
            account=account_address,
            owner=owner,
            chain_id=self._chain_id,
        )

    @property
    def address(self) -> str:
        return self._account_address

    @property
    def owner(self) -> str:
        return self._account.address

    def kernel_domain(self) -> dict[str, Any]:
        return {
            "name": KERNEL_DOMAIN_NAME,
            "version": KERNEL_DOMAIN_VERSION,
            "chainId": self._chain_id,
            "verifyingContract": self._account_address,
        }

    def sign(self, typed_data: EIP712TypedData) -> str:
        message_hash = hash_typed_data(typed_data)
        wrapped = eip712_wrap_hash(message_hash, self.kernel_domain())
        signed = self._account.sign_message(encode_defunct(hexstr=wrapped))
        return to_hex(
            KERNEL_VALIDATOR_MODE
            + to_bytes(hexstr=self._validator_address)
            + bytes(signed.signature)
        )
