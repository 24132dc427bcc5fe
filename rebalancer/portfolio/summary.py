"""Tabular summary and metrics for a rebalance plan."""

from decimal import Decimal
from typing import Dict, List

import pandas as pd

from rebalancer.portfolio.base import (
    Prices,
    RebalanceReport,
    Transaction,
    TransactionAction,
)

SUMMARY_COLUMNS = ["asset", "action", "units", "price", "estimated_value"]


def summarize_transactions(
    transactions: List[Transaction],
    prices: Prices,
) -> pd.DataFrame:
    """Build a table of transactions with their estimated values.

    Args:
        transactions: Ordered transactions
        prices: Prices used to estimate each trade's value

    Returns:
        DataFrame with columns asset, action, units, price, estimated_value.
        Monetary columns hold Decimal objects; rows follow transaction order.
    """
    rows = []
    for transaction in transactions:
        price = prices.get(transaction.asset)
        rows.append(
            {
                "asset": str(transaction.asset),
                "action": transaction.action.value,
                "units": transaction.units,
                "price": price,
                "estimated_value": (
                    Decimal(price) * transaction.abs_units if price is not None else None
                ),
            }
        )

    return pd.DataFrame(rows, columns=SUMMARY_COLUMNS)


def calculate_plan_metrics(report: RebalanceReport, prices: Prices) -> Dict:
    """Calculate metrics for a rebalance plan.

    Args:
        report: Rebalance result
        prices: Prices the plan was computed with

    Returns:
        Dictionary with transaction counts, traded values (Decimal), net cash
        impact (positive when the plan frees cash) and turnover
    """
    buy_value = Decimal("0")
    sell_value = Decimal("0")
    buy_count = 0
    sell_count = 0

    for transaction in report.transactions:
        value = Decimal(prices[transaction.asset]) * transaction.abs_units
        if transaction.action == TransactionAction.BUY:
            buy_value += value
            buy_count += 1
        else:
            sell_value += value
            sell_count += 1

    traded = buy_value + sell_value
    turnover = traded / report.total if report.total > 0 else Decimal("0")

    return {
        "transaction_count": len(report.transactions),
        "buy_count": buy_count,
        "sell_count": sell_count,
        "buy_value": buy_value,
        "sell_value": sell_value,
        "net_cash_impact": sell_value - buy_value,
        "turnover": turnover,
        "skipped_count": len(report.skipped),
        "clamped_count": len(report.clamped),
    }
