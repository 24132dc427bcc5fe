"""Portfolio Rebalancing Layer.

This layer values current holdings, translates a strategy into target
amounts, and quantizes the difference into whole-unit transactions.

Components:
- capitalize: Valuation of holdings at current prices
- get_target_capital: Target amounts per strategy asset
- Rebalancer / balance: Two-pass transaction computation
- Equity, Cash, CASH: Asset identities
- Transaction: Signed whole-unit trade
"""

from rebalancer.portfolio.allocation import get_target_capital, to_decimal
from rebalancer.portfolio.balancer import (
    Rebalancer,
    apply_transactions,
    balance,
    quantize_units,
)
from rebalancer.portfolio.base import (
    CASH,
    Asset,
    AssetNote,
    Capital,
    Cash,
    Equity,
    Holdings,
    NoteReason,
    Prices,
    RebalanceReport,
    Strategy,
    Transaction,
    TransactionAction,
    validate_holdings,
    validate_prices,
)
from rebalancer.portfolio.summary import calculate_plan_metrics, summarize_transactions
from rebalancer.portfolio.valuation import capitalize

__all__ = [
    "Asset",
    "Equity",
    "Cash",
    "CASH",
    "Holdings",
    "Prices",
    "Capital",
    "Strategy",
    "Transaction",
    "TransactionAction",
    "AssetNote",
    "NoteReason",
    "RebalanceReport",
    "validate_holdings",
    "validate_prices",
    "capitalize",
    "to_decimal",
    "get_target_capital",
    "Rebalancer",
    "balance",
    "quantize_units",
    "apply_transactions",
    "summarize_transactions",
    "calculate_plan_metrics",
]
