"""Maker/taker amount calculation for LIMIT and MARKET orders."""

from __future__ import annotations

from predict_orders.constants import (
    MIN_QUANTITY_WEI,
    MIN_VALUE_WEI,
    PRICE_SIGNIFICANT_DIGITS,
    QUANTITY_SIGNIFICANT_DIGITS,
    Side,
)
from predict_orders.exceptions import InvalidQuantityError
from predict_orders.orders.book import process_book, process_book_by_value
from predict_orders.orders.models import (
    Book,
    LimitHelperInput,
    MarketHelperInput,
    MarketHelperValueInput,
    OrderAmounts,
)
from predict_orders.utils.precision import retain_significant_digits


def limit_order_amounts(data: LimitHelperInput, precision: int) -> OrderAmounts:
    """Amounts for a LIMIT order at a fixed price.

    BUY offers ``price * quantity`` collateral for ``quantity`` shares;
    SELL offers ``quantity`` shares for ``price * quantity`` collateral.
    """
    if data.quantity_wei < MIN_QUANTITY_WEI:
        raise InvalidQuantityError()

    price_wei = retain_significant_digits(data.price_per_share_wei, PRICE_SIGNIFICANT_DIGITS)
    quantity_wei = retain_significant_digits(data.quantity_wei, QUANTITY_SIGNIFICANT_DIGITS)
    collateral_wei = (price_wei * quantity_wei) // precision

    if data.side == Side.BUY:
        return OrderAmounts(
            price_per_share=price_wei,
            maker_amount=collateral_wei,
            taker_amount=quantity_wei,
            last_price=price_wei,
        )
    if data.side == Side.SELL:
        return OrderAmounts(
            price_per_share=price_wei,
            maker_amount=quantity_wei,
            taker_amount=collateral_wei,
            last_price=price_wei,
        )
    raise ValueError(f"Invalid side: {data.side}")


def market_order_amounts(
    data: MarketHelperInput,
    book: Book,
    precision: int,
    decimals: int = 18,
) -> OrderAmounts:
    """Amounts for a MARKET order sized in shares.

    The collateral side is bounded at the worst price touched while walking
    the book, so the order cannot fill above (BUY) or below (SELL) it.
    """
    quantity_wei = retain_significant_digits(data.quantity_wei, QUANTITY_SIGNIFICANT_DIGITS)
    if quantity_wei < MIN_QUANTITY_WEI:
        raise InvalidQuantityError()

    if data.side == Side.BUY:
        depths = book.asks
    elif data.side == Side.SELL:
        depths = book.bids
    else:
        raise ValueError(f"Invalid side: {data.side}")

    processed = process_book(depths, quantity_wei, precision, decimals)
    filled_wei = processed.quantity_wei
    last_price_wei = processed.last_price_wei
    price_per_share = (processed.price_wei * precision) // filled_wei if filled_wei > 0 else 0
    collateral_wei = (last_price_wei * filled_wei) // precision

    if data.side == Side.BUY:
        return OrderAmounts(
            price_per_share=price_per_share,
            maker_amount=collateral_wei,
            taker_amount=filled_wei,
            last_price=last_price_wei,
        )
    return OrderAmounts(
        price_per_share=price_per_share,
        maker_amount=filled_wei,
        taker_amount=collateral_wei,
        last_price=last_price_wei,
    )


def market_order_amounts_by_value(
    data: MarketHelperValueInput,
    book: Book,
    precision: int,
    decimals: int = 18,
) -> OrderAmounts:
    """Amounts for a MARKET BUY sized by collateral to spend.

    The share count bought with ``value_wei`` is truncated and then priced
    through the by-quantity path, so both paths share one slippage bound.
    """
    if data.side != Side.BUY:
        raise ValueError("Value-based market orders are only supported for BUY")
    if data.value_wei < MIN_VALUE_WEI:
        raise InvalidQuantityError("Invalid valueWei. Must be greater than 1e18.")

    shares_wei = process_book_by_value(book.asks, data.value_wei, precision, decimals)
    shares_wei = retain_significant_digits(shares_wei, QUANTITY_SIGNIFICANT_DIGITS)

    amounts = market_order_amounts(
        MarketHelperInput(side=Side.BUY, quantity_wei=shares_wei), book, precision, decimals
    )
    return OrderAmounts(
        price_per_share=amounts.price_per_share,
        maker_amount=(amounts.last_price * shares_wei) // precision,
        taker_amount=shares_wei,
        last_price=amounts.last_price,
    )
