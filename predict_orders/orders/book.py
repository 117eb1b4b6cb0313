"""Order book depth walking for MARKET order pricing."""

from __future__ import annotations

import time
from typing import Iterable, Optional

import structlog

from predict_orders.constants import FIVE_MINUTES_SECONDS
from predict_orders.orders.models import Book, DepthLevel, ProcessedBookAmounts
from predict_orders.utils.precision import to_wei

logger = structlog.get_logger()


def process_book(
    depths: Iterable[DepthLevel],
    quantity_wei: int,
    precision: int,
    decimals: int = 18,
) -> ProcessedBookAmounts:
    """Walk depth levels until ``quantity_wei`` is filled.

    Levels are consumed in the given order. The level that satisfies the
    remaining need is only partially consumed; later levels contribute
    nothing. Cost is accumulated per level (``price * qty // precision``)
    and ``last_price_wei`` is the price of the last level that filled.

    An empty or shallow book yields a partial (possibly zero) fill; the
    caller decides whether that is acceptable.
    """
    acc = ProcessedBookAmounts()

    for price, qty in depths:
        remaining_wei = quantity_wei - acc.quantity_wei
        if remaining_wei <= 0:
            continue

        price_wei = to_wei(price, decimals)
        qty_wei = to_wei(qty, decimals)
        filled_wei = remaining_wei if remaining_wei < qty_wei else qty_wei

        acc.quantity_wei += filled_wei
        acc.price_wei += (price_wei * filled_wei) // precision
        acc.last_price_wei = price_wei

    return acc


def process_book_by_value(
    depths: Iterable[DepthLevel],
    value_wei: int,
    precision: int,
    decimals: int = 18,
) -> int:
    """Return the number of shares (wei) that ``value_wei`` of collateral buys.

    Whole tiers are taken while their cost fits the remaining budget; the
    tier that exhausts the budget contributes ``remaining * precision // price``.
    """
    remaining_wei = value_wei
    shares_wei = 0

    for price, qty in depths:
        if remaining_wei <= 0:
            continue

        price_wei = to_wei(price, decimals)
        qty_wei = to_wei(qty, decimals)
        cost_wei = (price_wei * qty_wei) // precision

        if cost_wei <= remaining_wei:
            shares_wei += qty_wei
            remaining_wei -= cost_wei
        else:
            shares_wei += (remaining_wei * precision) // price_wei
            remaining_wei = 0

    return shares_wei


def is_book_stale(
    book: Book,
    max_age_seconds: float = FIVE_MINUTES_SECONDS,
    now_ms: Optional[float] = None,
) -> bool:
    """True when the snapshot is older than ``max_age_seconds``."""
    now_ms = time.time() * 1000 if now_ms is None else now_ms
    return now_ms - book.update_timestamp_ms > max_age_seconds * 1000


def warn_if_stale(book: Book, max_age_seconds: float = FIVE_MINUTES_SECONDS) -> bool:
    """Log a warning for a stale book. Never blocks the computation."""
    stale = is_book_stale(book, max_age_seconds)
    if stale:
        logger.warning(
            "order_book_stale",
            market_id=book.market_id,
            update_timestamp_ms=book.update_timestamp_ms,
            max_age_seconds=max_age_seconds,
        )
    return stale
