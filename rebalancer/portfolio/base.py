"""Core data structures for portfolio rebalancing.

This module defines the asset identities, the transaction produced by the
rebalancer, and the report types used to surface assets the rebalancer could
not act on.

Data model:
- Asset: closed variant set, Equity(ticker) or the Cash singleton
- Holdings: {Asset: quantity} (the Cash quantity is the cash amount itself)
- Prices: {Asset: Decimal price per unit}
- Capital: {Asset: Decimal monetary value}
- Strategy: {Asset: target fraction of total capital}
"""

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Dict, List, Union

from rebalancer.utils.exceptions import ValidationError


class Asset:
    """Base class for tradable identities.

    Only ``Equity`` and ``Cash`` derive from it. Identity is structural:
    two assets are equal when their variant and payload match.
    """

    __slots__ = ()


@dataclass(frozen=True)
class Equity(Asset):
    """An equity position identified by its ticker symbol.

    Attributes:
        ticker: Stock ticker symbol (e.g., "AAPL")
    """

    ticker: str

    def __post_init__(self):
        """Validate ticker."""
        if not isinstance(self.ticker, str) or not self.ticker:
            raise ValueError(f"ticker must be a non-empty string, got {self.ticker!r}")

    def __str__(self) -> str:
        return self.ticker


@dataclass(frozen=True)
class Cash(Asset):
    """The cash position.

    Carries no payload: every Cash instance equals every other, so the amount
    of cash lives in the holdings mapping rather than in the identity.
    """

    def __str__(self) -> str:
        return "CASH"


CASH = Cash()

Quantity = Union[int, Decimal]
Holdings = Dict[Asset, Quantity]
Prices = Dict[Asset, Decimal]
Capital = Dict[Asset, Decimal]
Strategy = Dict[Asset, Union[Decimal, float, int, str]]


class TransactionAction(Enum):
    """Transaction direction."""

    BUY = "BUY"
    SELL = "SELL"


@dataclass(frozen=True)
class Transaction:
    """A signed whole-unit trade for one asset.

    Attributes:
        asset: Asset to trade
        units: Units to buy (positive) or sell (negative); never zero
    """

    asset: Asset
    units: int

    def __post_init__(self):
        """Validate transaction fields."""
        if isinstance(self.units, bool) or not isinstance(self.units, int):
            raise ValueError(f"units must be an int, got {self.units!r}")
        if self.units == 0:
            raise ValueError("units must be non-zero")

    @property
    def action(self) -> TransactionAction:
        """BUY for positive units, SELL for negative units."""
        return TransactionAction.BUY if self.units > 0 else TransactionAction.SELL

    @property
    def abs_units(self) -> int:
        return abs(self.units)


class NoteReason(Enum):
    """Why an asset was omitted or adjusted during rebalancing."""

    CASH = "cash"
    MISSING_PRICE = "missing_price"
    NON_REPRESENTABLE = "non_representable"
    CLAMPED_SELL = "clamped_sell"


_NOT_SKIPPED = (NoteReason.CASH, NoteReason.CLAMPED_SELL)


@dataclass(frozen=True)
class AssetNote:
    """A data-quality note about one asset.

    Attributes:
        asset: Asset the note refers to
        reason: Why the asset was omitted or adjusted
        detail: Human readable explanation
    """

    asset: Asset
    reason: NoteReason
    detail: str = ""


@dataclass
class RebalanceReport:
    """Result of a rebalance computation.

    Attributes:
        transactions: Ordered transactions (held assets first, then new assets)
        notes: Assets omitted or adjusted, with reasons
        current_capital: Valuation of current holdings
        target_capital: Target value per strategy asset
        total: Total current capital the targets were computed from
    """

    transactions: List[Transaction]
    notes: List[AssetNote] = field(default_factory=list)
    current_capital: Capital = field(default_factory=dict)
    target_capital: Capital = field(default_factory=dict)
    total: Decimal = Decimal("0")

    @property
    def skipped(self) -> List[AssetNote]:
        """Notes for tradable assets that produced no transaction."""
        return [n for n in self.notes if n.reason not in _NOT_SKIPPED]

    @property
    def cash_notes(self) -> List[AssetNote]:
        """Notes for cash, which is held or targeted but never traded in units."""
        return [n for n in self.notes if n.reason == NoteReason.CASH]

    @property
    def clamped(self) -> List[AssetNote]:
        """Notes for sells that were reduced to the quantity held."""
        return [n for n in self.notes if n.reason == NoteReason.CLAMPED_SELL]


def _is_number(value) -> bool:
    return isinstance(value, (int, Decimal)) and not isinstance(value, bool)


def _check_asset(asset) -> None:
    if not isinstance(asset, Asset):
        raise ValidationError(f"expected an Asset key, got {asset!r}")


def validate_holdings(holdings: Holdings) -> None:
    """Check holdings against their structural contract.

    Equity quantities must be non-negative ints. The cash amount must be a
    non-negative int or finite Decimal.

    Raises:
        ValidationError: On the first violating entry
    """
    for asset, quantity in holdings.items():
        _check_asset(asset)
        if isinstance(asset, Cash):
            if not _is_number(quantity) or not Decimal(quantity).is_finite():
                raise ValidationError(
                    f"cash amount must be an int or finite Decimal, got {quantity!r}"
                )
            if quantity < 0:
                raise ValidationError(f"cash amount must be non-negative, got {quantity}")
        else:
            if isinstance(quantity, bool) or not isinstance(quantity, int):
                raise ValidationError(
                    f"quantity for {asset} must be an int, got {quantity!r}"
                )
            if quantity < 0:
                raise ValidationError(
                    f"quantity for {asset} must be non-negative, got {quantity}"
                )


def validate_prices(prices: Prices) -> None:
    """Check prices against their structural contract.

    Prices must be non-negative ints or finite Decimals. Floats are rejected.
    A zero price passes: the rebalancer skips that asset and notes it as
    non-representable.

    Raises:
        ValidationError: On the first violating entry
    """
    for asset, price in prices.items():
        _check_asset(asset)
        if not _is_number(price) or not Decimal(price).is_finite():
            raise ValidationError(
                f"price for {asset} must be an int or finite Decimal, got {price!r}"
            )
        if price < 0:
            raise ValidationError(f"price for {asset} must be non-negative, got {price}")
