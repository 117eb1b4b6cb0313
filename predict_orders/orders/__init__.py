from predict_orders.orders.models import (
    Addresses,
    Book,
    BuildOrderInput,
    DepthLevel,
    EIP712TypedData,
    LimitHelperInput,
    MarketHelperInput,
    MarketHelperValueInput,
    Order,
    OrderAmounts,
    OrderConfig,
    ProcessedBookAmounts,
    SignedOrder,
)
from predict_orders.orders.book import process_book, process_book_by_value, is_book_stale
from predict_orders.orders.builder import OrderBuilder, OrderBuilderOptions, generate_order_salt
from predict_orders.orders.signers import EOASigner, KernelSigner, OrderSigner
from predict_orders.orders.typed_data import eip712_wrap_hash, hash_kernel_message

__all__ = [
    "Addresses",
    "Book",
    "BuildOrderInput",
    "DepthLevel",
    "EIP712TypedData",
    "LimitHelperInput",
    "MarketHelperInput",
    "MarketHelperValueInput",
    "Order",
    "OrderAmounts",
    "OrderConfig",
    "ProcessedBookAmounts",
    "SignedOrder",
    "process_book",
    "process_book_by_value",
    "is_book_stale",
    "OrderBuilder",
    "OrderBuilderOptions",
    "generate_order_salt",
    "EOASigner",
    "KernelSigner",
    "OrderSigner",
    "eip712_wrap_hash",
    "hash_kernel_message",
]
