"""User-friendly APIs for the portfolio rebalancer.

Components:
- RebalanceAPI: Rebalance plans from in-memory inputs or portfolio files
"""

from rebalancer.api.rebalance_api import RebalanceAPI

__all__ = [
    "RebalanceAPI",
]
