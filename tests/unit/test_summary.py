"""Unit tests for rebalance plan summaries."""

from decimal import Decimal

from rebalancer.portfolio.balancer import Rebalancer
from rebalancer.portfolio.base import CASH, Equity, RebalanceReport, Transaction
from rebalancer.portfolio.summary import (
    SUMMARY_COLUMNS,
    calculate_plan_metrics,
    summarize_transactions,
)

A = Equity("tickerA")
B = Equity("tickerB")
PRICES = {A: Decimal("78.25"), B: Decimal("24.312")}


class TestSummarizeTransactions:
    """Test cases for summarize_transactions."""

    def test_rows_follow_transaction_order(self) -> None:
        """Test one row per transaction with estimated values."""
        df = summarize_transactions([Transaction(A, -2), Transaction(B, 6)], PRICES)

        assert list(df.columns) == SUMMARY_COLUMNS
        assert list(df["asset"]) == ["tickerA", "tickerB"]
        assert list(df["action"]) == ["SELL", "BUY"]
        assert list(df["units"]) == [-2, 6]
        assert list(df["estimated_value"]) == [Decimal("156.50"), Decimal("145.872")]

    def test_empty(self) -> None:
        """Test no transactions gives an empty frame with the summary columns."""
        df = summarize_transactions([], PRICES)

        assert df.empty
        assert list(df.columns) == SUMMARY_COLUMNS


class TestCalculatePlanMetrics:
    """Test cases for calculate_plan_metrics."""

    def test_metrics(self) -> None:
        """Test counts, values, net cash impact and turnover."""
        report = Rebalancer().rebalance({A: 15}, PRICES, {A: 0.86, B: 0.14})

        metrics = calculate_plan_metrics(report, PRICES)

        assert metrics["transaction_count"] == 2
        assert metrics["buy_count"] == 1
        assert metrics["sell_count"] == 1
        assert metrics["buy_value"] == Decimal("145.872")
        assert metrics["sell_value"] == Decimal("156.50")
        assert metrics["net_cash_impact"] == Decimal("10.628")
        assert metrics["turnover"] == Decimal("302.372") / Decimal("1173.75")
        assert metrics["skipped_count"] == 0
        assert metrics["clamped_count"] == 0

    def test_zero_total(self) -> None:
        """Test turnover is zero for an empty portfolio."""
        metrics = calculate_plan_metrics(RebalanceReport(transactions=[]), {})

        assert metrics["transaction_count"] == 0
        assert metrics["turnover"] == Decimal("0")

    def test_skipped_counted(self) -> None:
        """Test skipped assets are counted and cash is not."""
        report = Rebalancer().rebalance({CASH: Decimal("100")}, {}, {CASH: 1, B: 0})

        metrics = calculate_plan_metrics(report, {})

        assert metrics["skipped_count"] == 1
