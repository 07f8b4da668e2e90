"""Observability module for the Teko faucet client."""

from .logging import configure_logging, get_logger, set_account_label
from .metrics import (
    FAUCET_RUNS,
    MINT_REQUESTS,
    RETRY_ATTEMPTS,
    TRANSACTION_DURATION,
    TRANSACTIONS,
)

__all__ = [
    # Logging
    "configure_logging",
    "get_logger",
    "set_account_label",
    # Metrics
    "FAUCET_RUNS",
    "MINT_REQUESTS",
    "RETRY_ATTEMPTS",
    "TRANSACTION_DURATION",
    "TRANSACTIONS",
]
