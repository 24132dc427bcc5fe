"""Target allocation: strategy fractions to target monetary amounts."""

from decimal import Decimal, InvalidOperation

from rebalancer.portfolio.base import Capital, Strategy
from rebalancer.utils.exceptions import ValidationError


def to_decimal(value) -> Decimal:
    """Convert a fraction or amount to an exact Decimal.

    Floats are converted through their shortest round-trip repr so that
    ``0.86`` becomes ``Decimal("0.86")`` rather than its binary expansion.

    Args:
        value: Decimal, int, float or numeric string

    Returns:
        Finite Decimal

    Raises:
        ValidationError: If the value is not a finite decimal number
    """
    if isinstance(value, bool):
        raise ValidationError(f"expected a decimal number, got {value!r}")

    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, int):
        result = Decimal(value)
    elif isinstance(value, (float, str)):
        try:
            result = Decimal(str(value).strip())
        except InvalidOperation as e:
            raise ValidationError(f"not a decimal number: {value!r}") from e
    else:
        raise ValidationError(
            f"expected Decimal, int, float or str, got {type(value).__name__}"
        )

    if not result.is_finite():
        raise ValidationError(f"expected a finite decimal, got {value!r}")

    return result


def get_target_capital(strategy: Strategy, total: Decimal) -> Capital:
    """Translate a strategy into target monetary amounts.

    Fractions are not required to sum to 1; each target is simply
    ``total * fraction``.

    Args:
        strategy: Target fractions {asset: fraction}
        total: Total monetary amount to allocate

    Returns:
        Capital with one entry per strategy entry, in strategy order

    Raises:
        ValidationError: If a fraction is not a finite decimal

    Example:
        >>> get_target_capital({Equity("AAPL"): 0.25, CASH: 0.75}, Decimal("1000"))
        {Equity(ticker='AAPL'): Decimal('250.00'), Cash(): Decimal('750.00')}
    """
    total = to_decimal(total)
    return {asset: total * to_decimal(fraction) for asset, fraction in strategy.items()}
