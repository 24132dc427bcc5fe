"""Logging setup for the portfolio rebalancer.

All output goes to stdout through the root logger. The rebalancer writes one
INFO line per computed plan and one DEBUG line per asset it skips or adjusts,
with context appended as key=value pairs:

    Rebalance computed | total=1173.75 transactions=2 skipped=1
    Asset note | asset=MSFT reason=missing_price detail=no price available
"""

import logging
import sys
from enum import Enum
from typing import Any

DEFAULT_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(
    level: str = "INFO",
    log_format: str | None = None,
) -> None:
    """Configure the root logger.

    Args:
        level: Logging level name, case-insensitive. Unknown names fall back
            to INFO.
        log_format: Format string. If None, DEFAULT_LOG_FORMAT is used.

    Example:
        >>> from rebalancer.utils.logging import setup_logging
        >>> setup_logging(level="DEBUG")  # show per-asset notes
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    # Replaces handlers left by an earlier call
    logging.basicConfig(
        level=numeric_level,
        format=log_format or DEFAULT_LOG_FORMAT,
        stream=sys.stdout,
        force=True,
    )


def setup_logging_from_config(config, level: str | None = None) -> None:
    """Configure logging from the ``logging`` section of a Config.

    Args:
        config: Config providing ``logging.level`` and ``logging.format``
        level: Level that overrides the configured one (e.g. from --log-level)
    """
    setup_logging(
        level=level or config.get("logging.level", "INFO"),
        log_format=config.get("logging.format"),
    )


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance for a module.

    Args:
        name: Logger name (typically __name__ of the module)

    Returns:
        Logger instance
    """
    return logging.getLogger(name)


def _format_value(value: Any) -> str:
    if isinstance(value, Enum):
        return str(value.value)
    return str(value)


def log_with_context(
    logger: logging.Logger,
    level: str,
    message: str,
    **context: Any,
) -> None:
    """Log a message with key=value context appended.

    Assets render as their ticker (or CASH), Decimals as their exact value and
    enum members as their value.

    Args:
        logger: Logger instance
        level: Log level name (debug, info, warning, error, critical)
        message: Log message
        **context: Context fields, in the order given

    Example:
        >>> log_with_context(
        ...     logger, "info", "Rebalance computed",
        ...     total=Decimal("1173.75"), transactions=2, skipped=0,
        ... )
        # Logs: "Rebalance computed | total=1173.75 transactions=2 skipped=0"
    """
    log_func = getattr(logger, level.lower())

    if context:
        context_str = " ".join(f"{k}={_format_value(v)}" for k, v in context.items())
        log_func(f"{message} | {context_str}")
    else:
        log_func(message)
