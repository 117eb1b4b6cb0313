"""
predict-orders: order pricing, assembly, and EIP-712 signing for the
predict.fun CTF exchange.

Components:
- Precision: significant-digit truncation for fixed-point amounts
- Book walker: depth and value walking over order-book snapshots
- Amount calculator: maker/taker amounts for LIMIT and MARKET orders
- OrderBuilder: order assembly, typed data, hashing, and signing
"""

__version__ = "0.1.0"

from predict_orders.constants import ChainId, Side, SignatureType
from predict_orders.orders import OrderBuilder, OrderBuilderOptions

__all__ = [
    "ChainId",
    "Side",
    "SignatureType",
    "OrderBuilder",
    "OrderBuilderOptions",
]
