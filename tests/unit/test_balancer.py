"""Unit tests for the Rebalancer."""

import logging
from decimal import Decimal

import pytest

from rebalancer.portfolio.balancer import (
    Rebalancer,
    apply_transactions,
    balance,
    quantize_units,
)
from rebalancer.portfolio.base import (
    CASH,
    AssetNote,
    Equity,
    NoteReason,
    Transaction,
)
from rebalancer.utils.exceptions import ConfigurationError, RebalanceError

A = Equity("tickerA")
B = Equity("tickerB")
C = Equity("tickerC")


class TestRebalancerConfig:
    """Test cases for Rebalancer configuration."""

    def test_default_config(self) -> None:
        """Test rebalancer defaults to emitting raw deltas."""
        assert Rebalancer().clamp_sells is False

    def test_custom_config(self) -> None:
        """Test clamp_sells can be enabled."""
        assert Rebalancer({"clamp_sells": True}).clamp_sells is True

    def test_invalid_clamp_sells(self) -> None:
        """Test non-boolean clamp_sells is rejected."""
        with pytest.raises(ConfigurationError, match="clamp_sells must be a boolean"):
            Rebalancer({"clamp_sells": "yes"})


class TestQuantizeUnits:
    """Test cases for quantize_units."""

    def test_truncates_toward_zero(self) -> None:
        """Test fractional units are truncated, never rounded."""
        assert quantize_units(Decimal("-164.325"), Decimal("78.25")) == -2
        assert quantize_units(Decimal("164.325"), Decimal("24.312")) == 6

    @pytest.mark.parametrize("delta", [Decimal("0.9"), Decimal("-0.9"), Decimal("0")])
    def test_less_than_one_unit(self, delta: Decimal) -> None:
        """Test deltas strictly between -1 and 1 units give zero."""
        assert quantize_units(delta, Decimal("1")) == 0

    def test_exact_units(self) -> None:
        """Test exact multiples are not reduced."""
        assert quantize_units(Decimal("-1173.75"), Decimal("78.25")) == -15

    def test_overflow_is_not_representable(self) -> None:
        """Test a quotient outside the decimal range gives None."""
        assert quantize_units(Decimal("1E+999999"), Decimal("1E-999999")) is None

    @pytest.mark.parametrize("delta", [Decimal("NaN"), Decimal("Infinity")])
    def test_non_finite_is_not_representable(self, delta: Decimal) -> None:
        """Test non-finite quotients give None."""
        assert quantize_units(delta, Decimal("1")) is None


class TestBalance:
    """Test cases for balance."""

    def test_empty_inputs(self) -> None:
        """Test nothing held and no strategy gives no transactions."""
        assert balance({}, {}, {}) == []

    def test_full_exit_to_cash(self) -> None:
        """Test moving everything to cash sells the whole position."""
        transactions = balance({A: 15}, {A: Decimal("78.25")}, {CASH: 1.0})

        assert transactions == [Transaction(A, -15)]

    def test_exit_asset_missing_from_strategy(self) -> None:
        """Test held assets absent from the strategy are sold."""
        transactions = balance(
            {A: 4, CASH: Decimal("100")},
            {A: Decimal("25")},
            {CASH: 1},
        )

        assert transactions == [Transaction(A, -4)]

    def test_cross_asset_reallocation(self) -> None:
        """Test selling part of a holding funds a new asset, held asset first."""
        transactions = balance(
            {A: 15},
            {A: Decimal("78.25"), B: Decimal("24.312")},
            {A: 0.86, B: 0.14},
        )

        assert transactions == [Transaction(A, -2), Transaction(B, 6)]

    def test_no_op_when_on_target(self) -> None:
        """Test an already balanced portfolio gives no transactions."""
        transactions = balance(
            {A: 10, B: 5},
            {A: Decimal("10"), B: Decimal("20")},
            {A: 0.5, B: 0.5},
        )

        assert transactions == []

    def test_sub_unit_drift_is_ignored(self) -> None:
        """Test drift worth less than one unit produces nothing."""
        transactions = balance(
            {A: 10, B: 10},
            {A: Decimal("10"), B: Decimal("10")},
            {A: Decimal("0.545"), B: Decimal("0.455")},
        )

        assert transactions == []

    def test_order_held_then_new(self) -> None:
        """Test held assets come first in holdings order, then new assets in strategy order."""
        z, m, n = Equity("Z"), Equity("M"), Equity("N")
        prices = {
            z: Decimal("10"),
            A: Decimal("10"),
            m: Decimal("5"),
            n: Decimal("5"),
        }

        transactions = balance(
            {z: 10, A: 10},
            prices,
            {m: 0.25, A: 0.25, n: 0.25, z: 0.25},
        )

        assert transactions == [
            Transaction(z, -5),
            Transaction(A, -5),
            Transaction(m, 10),
            Transaction(n, 10),
        ]

    def test_new_asset_without_price_is_skipped(self) -> None:
        """Test strategy assets with no price produce no transaction."""
        transactions = balance(
            {A: 10},
            {A: Decimal("10")},
            {A: 0.5, B: 0.5},
        )

        assert transactions == [Transaction(A, -5)]

    def test_unpriced_holding_is_excluded_from_total(self) -> None:
        """Test holdings without a price contribute nothing to the total."""
        transactions = balance(
            {A: 10, B: 5},
            {A: Decimal("10")},
            {A: 0.5, B: 0.5},
        )

        assert transactions == [Transaction(A, -5)]

    def test_zero_price_outside_strategy_is_ignored(self) -> None:
        """Test a zero price for an unrelated asset does not stop the plan."""
        transactions = balance(
            {A: 15},
            {A: Decimal("78.25"), B: Decimal("0")},
            {CASH: 1.0},
        )

        assert transactions == [Transaction(A, -15)]

    def test_zero_priced_asset_is_skipped(self) -> None:
        """Test a zero-priced strategy asset is skipped while others still trade."""
        transactions = balance(
            {A: 15},
            {A: Decimal("78.25"), B: Decimal("0")},
            {A: 0.5, B: 0.5},
        )

        assert transactions == [Transaction(A, -7)]

    def test_oversell_not_clamped_by_default(self) -> None:
        """Test sells larger than the holding are emitted unchanged."""
        transactions = balance(
            {A: 10, CASH: Decimal("0")},
            {A: Decimal("10")},
            {A: Decimal("-0.5"), CASH: Decimal("1.5")},
        )

        assert transactions == [Transaction(A, -15)]

    def test_does_not_mutate_inputs(self) -> None:
        """Test inputs are left untouched."""
        holdings = {A: 15}
        prices = {A: Decimal("78.25"), B: Decimal("24.312")}
        strategy = {A: 0.86, B: 0.14}

        balance(holdings, prices, strategy)

        assert holdings == {A: 15}
        assert prices == {A: Decimal("78.25"), B: Decimal("24.312")}
        assert strategy == {A: 0.86, B: 0.14}


class TestRebalanceReport:
    """Test cases for Rebalancer.rebalance reports."""

    def test_report_capital(self) -> None:
        """Test the report carries current capital, targets and total."""
        report = Rebalancer().rebalance(
            {A: 15},
            {A: Decimal("78.25"), B: Decimal("24.312")},
            {A: 0.86, B: 0.14},
        )

        assert report.total == Decimal("1173.75")
        assert report.current_capital == {A: Decimal("1173.75")}
        assert report.target_capital == {
            A: Decimal("1009.425"),
            B: Decimal("164.325"),
        }
        assert report.notes == []

    def test_missing_price_noted(self) -> None:
        """Test unpriced strategy assets are reported as skipped."""
        report = Rebalancer().rebalance({A: 10}, {A: Decimal("10")}, {A: 0.5, B: 0.5})

        assert report.skipped == [
            AssetNote(B, NoteReason.MISSING_PRICE, "no price available")
        ]

    def test_zero_price_noted_as_non_representable(self) -> None:
        """Test held and new zero-priced assets are noted, not traded."""
        report = Rebalancer().rebalance(
            {A: 15, B: 4},
            {A: Decimal("78.25"), B: Decimal("0"), C: Decimal("0")},
            {A: 0.5, B: 0.25, C: 0.25},
        )

        assert report.transactions == [Transaction(A, -7)]
        assert [(n.asset, n.reason) for n in report.skipped] == [
            (B, NoteReason.NON_REPRESENTABLE),
            (C, NoteReason.NON_REPRESENTABLE),
        ]

    def test_cash_noted(self) -> None:
        """Test cash is reported as not traded in units."""
        report = Rebalancer().rebalance(
            {CASH: Decimal("100")},
            {},
            {CASH: 1},
        )

        assert report.transactions == []
        assert [n.reason for n in report.notes] == [NoteReason.CASH]
        assert report.cash_notes == report.notes
        assert report.skipped == []

    def test_clamped_sell(self) -> None:
        """Test clamping limits sells to the quantity held and reports it."""
        report = Rebalancer({"clamp_sells": True}).rebalance(
            {A: 10, CASH: Decimal("0")},
            {A: Decimal("10")},
            {A: Decimal("-0.5"), CASH: Decimal("1.5")},
        )

        assert report.transactions == [Transaction(A, -10)]
        assert report.clamped == [
            AssetNote(A, NoteReason.CLAMPED_SELL, "sell of 15 reduced to 10 held")
        ]

    def test_clamp_on_unheld_asset_emits_nothing(self) -> None:
        """Test a sell of an asset not held clamps to zero units."""
        report = Rebalancer({"clamp_sells": True}).rebalance(
            {A: 10},
            {A: Decimal("10"), B: Decimal("5")},
            {A: Decimal("1.1"), B: Decimal("-0.1")},
        )

        assert report.transactions == [Transaction(A, 1)]
        assert [n.asset for n in report.clamped] == [B]

    def test_clamp_leaves_feasible_sells(self) -> None:
        """Test clamping does not touch sells within the holding."""
        report = Rebalancer({"clamp_sells": True}).rebalance(
            {A: 15},
            {A: Decimal("78.25")},
            {CASH: 1.0},
        )

        assert report.transactions == [Transaction(A, -15)]
        assert report.clamped == []

    def test_logs_summary(self, caplog: pytest.LogCaptureFixture) -> None:
        """Test the rebalance logs a summary line."""
        with caplog.at_level(logging.INFO, logger="rebalancer.portfolio.balancer"):
            Rebalancer().rebalance({A: 15}, {A: Decimal("78.25")}, {CASH: 1.0})

        messages = [r.message for r in caplog.records]
        assert any(
            "Rebalance computed" in m and "transactions=1" in m and "skipped=0" in m
            for m in messages
        )


class TestApplyTransactions:
    """Test cases for apply_transactions."""

    def test_updates_quantities_and_cash(self) -> None:
        """Test holdings and cash move by the executed transactions."""
        holdings = {A: 15, CASH: Decimal("10.00")}
        prices = {A: Decimal("78.25"), B: Decimal("24.312")}

        result = apply_transactions(
            holdings, [Transaction(A, -2), Transaction(B, 6)], prices
        )

        assert result == {A: 13, CASH: Decimal("20.628"), B: 6}
        assert holdings == {A: 15, CASH: Decimal("10.00")}

    def test_without_cash(self) -> None:
        """Test cash is not introduced when it is not held."""
        result = apply_transactions({A: 15}, [Transaction(A, -15)], {A: Decimal("78.25")})

        assert result == {A: 0}

    def test_missing_price(self) -> None:
        """Test executing without a price raises RebalanceError."""
        with pytest.raises(RebalanceError, match="No price"):
            apply_transactions({A: 1}, [Transaction(B, 1)], {A: Decimal("1")})


class TestIdempotence:
    """Re-running on post-trade holdings only leaves rounding residue."""

    def test_rerun_after_trades(self) -> None:
        """Test a second rebalance emits no transaction larger than one unit."""
        holdings = {A: 15, B: 3, CASH: Decimal("500.00")}
        prices = {
            A: Decimal("78.25"),
            B: Decimal("243.12"),
            C: Decimal("41.07"),
        }
        strategy = {A: 0.3, B: 0.3, C: 0.3, CASH: 0.1}

        first = balance(holdings, prices, strategy)
        assert first == [Transaction(A, -5), Transaction(C, 17)]

        traded = apply_transactions(holdings, first, prices)
        assert traded[CASH] == Decimal("193.06")

        second = balance(traded, prices, strategy)
        assert all(t.abs_units <= 1 for t in second)
        assert second == []
