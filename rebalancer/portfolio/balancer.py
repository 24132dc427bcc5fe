"""Two-pass rebalancer.

Diffs the current valuation of a portfolio against the target allocation of a
strategy and quantizes each monetary difference into whole units at the
current price.

Algorithm:
1. Value current holdings (assets without a price drop out)
2. Compute target capital from the strategy and the current total
3. Pass 1: for every currently valued asset, trade toward its target
   (zero when the strategy no longer holds it)
4. Pass 2: for every strategy asset not currently held, buy toward its target
5. Unit counts are truncated toward zero; zero-unit trades are not emitted
"""

from decimal import Decimal
from typing import Dict, List, Optional

from rebalancer.portfolio.allocation import get_target_capital
from rebalancer.portfolio.base import (
    CASH,
    Asset,
    AssetNote,
    Capital,
    Cash,
    Holdings,
    NoteReason,
    Prices,
    RebalanceReport,
    Strategy,
    Transaction,
)
from rebalancer.portfolio.valuation import capitalize
from rebalancer.utils.exceptions import ConfigurationError, RebalanceError
from rebalancer.utils.logging import get_logger, log_with_context

logger = get_logger(__name__)

ZERO = Decimal("0")


class Rebalancer:
    """Computes the transactions that move holdings toward a strategy.

    Configuration Parameters:
        clamp_sells: Reduce sells that exceed the quantity held to the
            quantity held and report the mismatch (default False)

    Example:
        >>> rebalancer = Rebalancer()
        >>> report = rebalancer.rebalance(
        ...     holdings={Equity("AAPL"): 15},
        ...     prices={Equity("AAPL"): Decimal("78.25")},
        ...     strategy={CASH: 1.0},
        ... )
        >>> report.transactions
        [Transaction(asset=Equity(ticker='AAPL'), units=-15)]
    """

    def __init__(self, config: Optional[Dict] = None):
        """Initialize rebalancer with configuration.

        Args:
            config: Configuration dictionary. Uses defaults if not provided.
        """
        config = config or {}

        self.clamp_sells = config.get("clamp_sells", False)

        self._validate_config()

    def _validate_config(self) -> None:
        """Validate configuration parameters."""
        if not isinstance(self.clamp_sells, bool):
            raise ConfigurationError(
                f"clamp_sells must be a boolean, got {self.clamp_sells!r}"
            )

    def rebalance(
        self,
        holdings: Holdings,
        prices: Prices,
        strategy: Strategy,
    ) -> RebalanceReport:
        """Compute rebalancing transactions with a report of omitted assets.

        Args:
            holdings: Current holdings {asset: quantity}
            prices: Current prices {asset: price}
            strategy: Target fractions {asset: fraction}

        Returns:
            RebalanceReport with transactions (held assets first, then newly
            introduced assets), notes, current and target capital

        Raises:
            ValidationError: If an input violates its structural contract
        """
        current = capitalize(holdings, prices)
        total = sum(current.values(), ZERO)
        target = get_target_capital(strategy, total)

        # Held assets consume their target; what is left is new to the portfolio
        remaining_target: Capital = dict(target)

        transactions: List[Transaction] = []
        notes: List[AssetNote] = []

        for asset, current_value in current.items():
            target_value = remaining_target.pop(asset, ZERO)
            transaction = self._reconcile(
                asset, current_value, target_value, holdings, prices, notes
            )
            if transaction is not None:
                transactions.append(transaction)

        for asset, target_value in remaining_target.items():
            transaction = self._reconcile(
                asset, ZERO, target_value, holdings, prices, notes
            )
            if transaction is not None:
                transactions.append(transaction)

        report = RebalanceReport(
            transactions=transactions,
            notes=notes,
            current_capital=current,
            target_capital=target,
            total=total,
        )

        log_with_context(
            logger,
            "info",
            "Rebalance computed",
            total=total,
            transactions=len(transactions),
            skipped=len(report.skipped),
        )

        return report

    def _reconcile(
        self,
        asset: Asset,
        current_value: Decimal,
        target_value: Decimal,
        holdings: Holdings,
        prices: Prices,
        notes: List[AssetNote],
    ) -> Optional[Transaction]:
        """Quantize one asset's value gap into a transaction, if any."""
        if isinstance(asset, Cash):
            self._note(notes, asset, NoteReason.CASH, "cash is not traded in units")
            return None

        price = prices.get(asset)
        if price is None:
            self._note(notes, asset, NoteReason.MISSING_PRICE, "no price available")
            return None

        units = quantize_units(target_value - current_value, price)
        if units is None:
            self._note(
                notes,
                asset,
                NoteReason.NON_REPRESENTABLE,
                f"cannot convert {target_value - current_value} / {price} to units",
            )
            return None

        if self.clamp_sells and units < 0:
            held = holdings.get(asset, 0)
            if -units > held:
                self._note(
                    notes,
                    asset,
                    NoteReason.CLAMPED_SELL,
                    f"sell of {-units} reduced to {held} held",
                )
                units = -held

        if units == 0:
            return None

        return Transaction(asset=asset, units=units)

    @staticmethod
    def _note(
        notes: List[AssetNote], asset: Asset, reason: NoteReason, detail: str
    ) -> None:
        log_with_context(
            logger, "debug", "Asset note", asset=asset, reason=reason, detail=detail
        )
        notes.append(AssetNote(asset=asset, reason=reason, detail=detail))


def quantize_units(value_delta: Decimal, price: Decimal) -> Optional[int]:
    """Convert a monetary difference into whole units, truncating toward zero.

    Args:
        value_delta: Target value minus current value
        price: Price per unit

    Returns:
        Signed unit count, or None when the quotient is not a finite number
    """
    try:
        return int(Decimal(value_delta) / Decimal(price))
    except (ArithmeticError, ValueError):
        # decimal signals (InvalidOperation, DivisionByZero, Overflow) and
        # int() of NaN / Infinity
        return None


def balance(holdings: Holdings, prices: Prices, strategy: Strategy) -> List[Transaction]:
    """Compute the transactions that move holdings toward a strategy.

    Args:
        holdings: Current holdings {asset: quantity}
        prices: Current prices {asset: price}
        strategy: Target fractions {asset: fraction}

    Returns:
        Ordered transactions: assets currently held first (holdings order),
        then assets introduced by the strategy (strategy order)

    Example:
        >>> balance(
        ...     {Equity("A"): 15},
        ...     {Equity("A"): Decimal("78.25"), Equity("B"): Decimal("24.312")},
        ...     {Equity("A"): 0.86, Equity("B"): 0.14},
        ... )
        [Transaction(asset=Equity(ticker='A'), units=-2), Transaction(asset=Equity(ticker='B'), units=6)]
    """
    return Rebalancer().rebalance(holdings, prices, strategy).transactions


def apply_transactions(
    holdings: Holdings,
    transactions: List[Transaction],
    prices: Prices,
) -> Holdings:
    """Return the holdings that result from executing transactions.

    Equity quantities change by each transaction's units. When cash is held,
    its amount is debited for buys and credited for sells at the given price.
    The input mapping is not modified.

    Args:
        holdings: Holdings before trading
        transactions: Transactions to execute
        prices: Execution prices {asset: price}

    Returns:
        New holdings mapping

    Raises:
        RebalanceError: If a transaction's asset has no price
    """
    result: Holdings = dict(holdings)

    for transaction in transactions:
        price = prices.get(transaction.asset)
        if price is None:
            raise RebalanceError(f"No price to execute transaction for {transaction.asset}")

        result[transaction.asset] = result.get(transaction.asset, 0) + transaction.units
        if CASH in result:
            result[CASH] = Decimal(result[CASH]) - Decimal(price) * transaction.units

    return result
