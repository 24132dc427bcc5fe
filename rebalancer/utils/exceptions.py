"""Custom exceptions for the portfolio rebalancer.

This module defines the exception hierarchy for the application.
"""


class RebalancerError(Exception):
    """Base exception for all rebalancer errors.

    All custom exceptions in the application should inherit from this class.
    """

    pass


class ConfigurationError(RebalancerError):
    """Raised when configuration is invalid or missing.

    Examples:
        - Invalid value for rebalance.clamp_sells
        - Configuration file not found
    """

    pass


class DataError(RebalancerError):
    """Base exception for data layer errors.

    Parent class for all data-related exceptions.
    """

    pass


class PortfolioFileError(DataError):
    """Raised when a portfolio file cannot be interpreted.

    Examples:
        - Top-level document is not a mapping
        - A section (holdings, prices, strategy) is not a mapping
        - A price or quantity is not a number
    """

    pass


class PortfolioError(RebalancerError):
    """Base exception for portfolio layer errors.

    Parent class for all portfolio-related exceptions.
    """

    pass


class ValidationError(PortfolioError):
    """Raised when portfolio inputs violate their structural contract.

    These are caller bugs, not runtime conditions the rebalancer recovers from.

    Examples:
        - Negative or fractional equity quantity
        - Zero or negative price
        - Strategy fraction that is not a finite decimal
        - Mapping key that is not an Asset
    """

    pass


class RebalanceError(PortfolioError):
    """Raised when a rebalancing helper cannot complete.

    Examples:
        - Applying a transaction for an asset with no price
    """

    pass
