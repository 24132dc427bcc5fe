"""Portfolio rebalancer: trades that move holdings toward a target allocation."""

__version__ = "0.1.0"
