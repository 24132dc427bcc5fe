"""User-friendly Rebalance API.

This module provides a simple, high-level interface that runs a rebalance and
packages the transactions together with a summary table and plan metrics.
"""

from pathlib import Path
from typing import Dict, Optional

from rebalancer.data.portfolio_file import load_portfolio_file
from rebalancer.portfolio.balancer import Rebalancer
from rebalancer.portfolio.base import Holdings, Prices, Strategy
from rebalancer.portfolio.summary import calculate_plan_metrics, summarize_transactions
from rebalancer.utils.config import Config, get_clamp_sells
from rebalancer.utils.logging import get_logger

logger = get_logger(__name__)


class RebalanceAPI:
    """High-level API for computing rebalance plans.

    Example:
        >>> from rebalancer.api.rebalance_api import RebalanceAPI
        >>> from rebalancer.utils.config import load_config
        >>>
        >>> api = RebalanceAPI(config=load_config())
        >>> plan = api.rebalance_file("portfolio.yaml")
        >>> print(plan["summary"])
    """

    def __init__(
        self,
        config: Optional[Config] = None,
        rebalancer: Optional[Rebalancer] = None,
    ):
        """Initialize RebalanceAPI.

        Args:
            config: Application configuration (defaults to empty configuration)
            rebalancer: Rebalancer instance (defaults to one built from config)
        """
        self.config = config or Config({})
        self.rebalancer = rebalancer or Rebalancer(
            {"clamp_sells": get_clamp_sells(self.config)}
        )

        logger.debug(
            "RebalanceAPI initialized with clamp_sells=%s", self.rebalancer.clamp_sells
        )

    def rebalance(
        self,
        holdings: Holdings,
        prices: Prices,
        strategy: Strategy,
    ) -> Dict:
        """Compute a rebalance plan.

        Args:
            holdings: Current holdings {asset: quantity}
            prices: Current prices {asset: price}
            strategy: Target fractions {asset: fraction}

        Returns:
            Dictionary with:
                - transactions: Ordered list of Transaction objects
                - report: RebalanceReport (notes, current/target capital, total)
                - summary: DataFrame of transactions with estimated values
                - metrics: Plan metrics
        """
        logger.info(
            "Rebalancing %d holdings toward %d strategy assets",
            len(holdings),
            len(strategy),
        )

        report = self.rebalancer.rebalance(holdings, prices, strategy)

        return {
            "transactions": report.transactions,
            "report": report,
            "summary": summarize_transactions(report.transactions, prices),
            "metrics": calculate_plan_metrics(report, prices),
        }

    def rebalance_file(self, filepath: str | Path) -> Dict:
        """Compute a rebalance plan from a YAML portfolio file.

        Args:
            filepath: Path to the portfolio file

        Returns:
            Same dictionary as ``rebalance``
        """
        portfolio = load_portfolio_file(filepath)
        return self.rebalance(portfolio.holdings, portfolio.prices, portfolio.strategy)
