"""Protocol constants: chains, enums, contract addresses, EIP-712 structures."""

from __future__ import annotations

from enum import IntEnum

MAX_SALT = 2_147_483_648
FIVE_MINUTES_SECONDS = 60 * 5

# Arbitrary far-future date standing in for "no expiration" (2100-01-01T00:00:00Z).
NO_EXPIRATION_TIMESTAMP = 4_102_444_800

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"

# Dust threshold and value floor, in the 1e18 precision domain.
MIN_QUANTITY_WEI = 10**16
MIN_VALUE_WEI = 10**18

PRICE_SIGNIFICANT_DIGITS = 3
QUANTITY_SIGNIFICANT_DIGITS = 5


class ChainId(IntEnum):
    BLAST_MAINNET = 81_457
    BLAST_SEPOLIA = 168_587_773


class SignatureType(IntEnum):
    """Signature scheme discriminator. EOA also covers EIP-1271."""

    EOA = 0
    POLY_PROXY = 1
    POLY_GNOSIS_SAFE = 2


class Side(IntEnum):
    BUY = 0
    SELL = 1


ADDRESSES_BY_CHAIN_ID: dict[int, dict[str, str]] = {
    ChainId.BLAST_MAINNET: {
        "CTF_EXCHANGE": "0x739f0331594029064C252559436eDce0E468E37a",
        "NEG_RISK_CTF_EXCHANGE": "0x6a3796C21e733a3016Bc0bA41edF763016247e72",
        "NEG_RISK_ADAPTER": "0xc55687812285D05b74815EE2716D046fAF61B003",
        "CONDITIONAL_TOKENS": "0x8F9C9f888A4268Ab0E2DDa03A291769479bAc285",
        "USDB": "0x4300000000000000000000000000000000000003",
    },
    ChainId.BLAST_SEPOLIA: {
        "CTF_EXCHANGE": "0xba9605D6d0108ed3787fD9423F6d28BF8c7dE2DD",
        "NEG_RISK_CTF_EXCHANGE": "0xd95787e7146204037704eCCCB3fA3A67801fea10",
        "NEG_RISK_ADAPTER": "0xd21Ce3f6A0e9351bF47b9045200410f55F74f9CC",
        "CONDITIONAL_TOKENS": "0xD6EBc6E01a282A3803920DE31227D8a6687e2F8F",
        "USDB": "0x4200000000000000000000000000000000000022",
    },
}

FEE_RATE_BPS_BY_CHAIN_ID: dict[int, str] = {
    ChainId.BLAST_MAINNET: "0",
    ChainId.BLAST_SEPOLIA: "0",
}

PROTOCOL_NAME = "predict.fun CTF Exchange"
PROTOCOL_VERSION = "1"

# Kernel smart-account domain used to wrap hashes signed on behalf of the account.
KERNEL_DOMAIN_NAME = "Kernel"
KERNEL_DOMAIN_VERSION = "0.3.1"
# Kernel v3 validation-mode prefix for a plain validator.
KERNEL_VALIDATOR_MODE = b"\x01"
KERNEL_ECDSA_VALIDATOR = "0x845ADb2C711129d4f3966735eD98a9F09fC4cE57"

EIP712_DOMAIN = [
    {"name": "name", "type": "string"},
    {"name": "version", "type": "string"},
    {"name": "chainId", "type": "uint256"},
    {"name": "verifyingContract", "type": "address"},
]

ORDER_STRUCTURE = [
    {"name": "salt", "type": "uint256"},
    {"name": "maker", "type": "address"},
    {"name": "signer", "type": "address"},
    {"name": "taker", "type": "address"},
    {"name": "tokenId", "type": "uint256"},
    {"name": "makerAmount", "type": "uint256"},
    {"name": "takerAmount", "type": "uint256"},
    {"name": "expiration", "type": "uint256"},
    {"name": "nonce", "type": "uint256"},
    {"name": "feeRateBps", "type": "uint256"},
    {"name": "side", "type": "uint8"},
    {"name": "signatureType", "type": "uint8"},
]
