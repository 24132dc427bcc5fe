"""YAML portfolio file loader.

A portfolio file holds the three inputs of a rebalance:

    holdings:
      AAPL: 15
      CASH: "650.00"
    prices:
      AAPL: "78.25"
    strategy:
      AAPL: 0.86
      CASH: 0.14

The key ``CASH`` (any case) refers to the cash position; every other key is an
equity ticker. Monetary values are read into Decimal from their text form so
no binary float rounding reaches the rebalancer.
"""

from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any

import yaml

from rebalancer.portfolio.base import CASH, Asset, Equity, Holdings, Prices, Strategy
from rebalancer.utils.exceptions import PortfolioFileError
from rebalancer.utils.logging import get_logger

logger = get_logger(__name__)

CASH_KEY = "CASH"


@dataclass
class PortfolioInput:
    """Inputs for one rebalance computation.

    Attributes:
        holdings: Current holdings {asset: quantity}
        prices: Current prices {asset: price}
        strategy: Target fractions {asset: fraction}
    """

    holdings: Holdings = field(default_factory=dict)
    prices: Prices = field(default_factory=dict)
    strategy: Strategy = field(default_factory=dict)


def parse_asset(key: Any) -> Asset:
    """Map a portfolio-file key to an Asset.

    Raises:
        PortfolioFileError: If the key is not a usable ticker
    """
    if isinstance(key, bool) or key is None:
        raise PortfolioFileError(
            f"Invalid asset key {key!r}; quote tickers such as 'ON' or 'NO' in YAML"
        )

    name = str(key).strip()
    if not name:
        raise PortfolioFileError("Empty asset key")
    if name.upper() == CASH_KEY:
        return CASH
    return Equity(name)


def parse_decimal(value: Any, what: str) -> Decimal:
    """Read a YAML scalar as an exact Decimal.

    Raises:
        PortfolioFileError: If the value is not a number
    """
    if isinstance(value, bool) or not isinstance(value, (int, float, str)):
        raise PortfolioFileError(f"{what} must be a number, got {value!r}")
    try:
        result = Decimal(str(value).strip())
    except InvalidOperation as e:
        raise PortfolioFileError(f"{what} must be a number, got {value!r}") from e
    if not result.is_finite():
        raise PortfolioFileError(f"{what} must be finite, got {value!r}")
    return result


def _section(document: dict, name: str) -> dict:
    section = document.get(name)
    if section is None:
        return {}
    if not isinstance(section, dict):
        raise PortfolioFileError(f"Section '{name}' must be a mapping")
    return section


def parse_portfolio(document: Any) -> PortfolioInput:
    """Build rebalance inputs from a parsed YAML document.

    Args:
        document: Result of ``yaml.safe_load`` (None for an empty file)

    Returns:
        PortfolioInput with holdings, prices and strategy in file order

    Raises:
        PortfolioFileError: If the document structure or a value is invalid
    """
    if document is None:
        return PortfolioInput()
    if not isinstance(document, dict):
        raise PortfolioFileError("Portfolio file must contain a mapping")

    holdings: Holdings = {}
    for key, value in _section(document, "holdings").items():
        asset = parse_asset(key)
        amount = parse_decimal(value, f"holding for {asset}")
        if asset == CASH:
            holdings[asset] = amount
        elif amount != amount.to_integral_value():
            raise PortfolioFileError(f"holding for {asset} must be whole units, got {value!r}")
        else:
            holdings[asset] = int(amount)

    prices: Prices = {
        parse_asset(key): parse_decimal(value, f"price for {key}")
        for key, value in _section(document, "prices").items()
    }

    strategy: Strategy = {
        parse_asset(key): parse_decimal(value, f"fraction for {key}")
        for key, value in _section(document, "strategy").items()
    }

    return PortfolioInput(holdings=holdings, prices=prices, strategy=strategy)


def load_portfolio_file(filepath: str | Path) -> PortfolioInput:
    """Load rebalance inputs from a YAML portfolio file.

    Args:
        filepath: Path to the portfolio file

    Returns:
        PortfolioInput

    Raises:
        FileNotFoundError: If the file doesn't exist
        PortfolioFileError: If the file is not valid YAML or has invalid content
    """
    path = Path(filepath)
    if not path.exists():
        raise FileNotFoundError(f"Portfolio file not found: {filepath}")

    with open(path, "r", encoding="utf-8") as f:
        try:
            document = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise PortfolioFileError(f"Invalid YAML in {filepath}: {e}") from e

    portfolio = parse_portfolio(document)
    logger.debug(
        "Loaded portfolio file %s: %d holdings, %d prices, %d strategy entries",
        path,
        len(portfolio.holdings),
        len(portfolio.prices),
        len(portfolio.strategy),
    )
    return portfolio
