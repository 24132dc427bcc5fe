"""Valuation of holdings against market prices.

Converts a quantity-held mapping into a monetary-value mapping. Assets that
have no price are dropped; cash is valued at its own amount.
"""

from decimal import Decimal

from rebalancer.portfolio.base import (
    Capital,
    Cash,
    Holdings,
    Prices,
    validate_holdings,
    validate_prices,
)
from rebalancer.utils.logging import get_logger, log_with_context

logger = get_logger(__name__)


def capitalize(holdings: Holdings, prices: Prices) -> Capital:
    """Value each holding at its current price.

    Args:
        holdings: Current holdings {asset: quantity}; the Cash entry holds
            the cash amount
        prices: Current prices {asset: price per unit}

    Returns:
        Capital {asset: price * quantity} in holdings order. Holdings with no
        price are omitted; Cash is passed through without consulting prices.

    Raises:
        ValidationError: If holdings or prices violate their contract

    Example:
        >>> capitalize({Equity("AAPL"): 5}, {Equity("AAPL"): Decimal("37.25")})
        {Equity(ticker='AAPL'): Decimal('186.25')}
    """
    validate_holdings(holdings)
    validate_prices(prices)

    capital: Capital = {}
    for asset, quantity in holdings.items():
        if isinstance(asset, Cash):
            capital[asset] = Decimal(quantity)
            continue

        price = prices.get(asset)
        if price is None:
            log_with_context(logger, "debug", "Dropping unpriced holding", asset=asset)
            continue

        capital[asset] = Decimal(price) * quantity

    return capital
