"""Custom exceptions for the predict-orders library."""

from __future__ import annotations

from typing import Optional


class PredictError(Exception):
    """Base exception for all predict-orders errors."""


class ConfigError(PredictError):
    """Missing or invalid configuration."""


class OrderBuilderError(PredictError):
    """Error building, pricing, or signing an order."""


class MissingSignerError(OrderBuilderError):
    def __init__(self) -> None:
        super().__init__("A signer is required to sign the order")


class InvalidQuantityError(OrderBuilderError):
    def __init__(self, message: str = "Invalid quantityWei. Must be greater than 1e16.") -> None:
        super().__init__(message)


class InvalidExpirationError(OrderBuilderError):
    def __init__(self) -> None:
        super().__init__("Invalid expiration. Must be in the future.")


class MakerSignerMismatchError(OrderBuilderError):
    def __init__(self, maker: str, signer: str) -> None:
        super().__init__(f"The maker ({maker}) must match the signer ({signer})")
        self.maker = maker
        self.signer = signer


class InvalidSignerError(OrderBuilderError):
    """The signer does not own the abstracted account it signs for."""

    def __init__(self, signer: str, owner: str) -> None:
        super().__init__(
            f"The signer ({signer}) is not the owner ({owner}) of the account's ECDSA validator"
        )
        self.signer = signer
        self.owner = owner


class FailedOrderSignError(OrderBuilderError):
    def __init__(self, cause: Optional[BaseException] = None) -> None:
        super().__init__("Failed to EIP-712 sign the order via sign_typed_data")
        self.cause = cause


class FailedTypedDataEncoderError(OrderBuilderError):
    def __init__(self, cause: Optional[BaseException] = None) -> None:
        super().__init__("Failed to hash the order's typed data")
        self.cause = cause


class InvalidMultiOutcomeConfigError(OrderBuilderError):
    def __init__(self, token_ids: Optional[list[str]] = None) -> None:
        super().__init__(
            "The token ID of one or more orders is not registered in the selected contract. "
            "Use is_neg_risk=True for multi-outcome markets, False otherwise."
        )
        self.token_ids = token_ids or []
