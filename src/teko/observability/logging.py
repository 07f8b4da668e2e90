"""Structured logging for the Teko faucet client.

Every line a faucet run emits should say which wallet it belongs to. The
account label (``TEKO_ACCOUNT_LABEL``) is kept in a context variable and
stamped on each event as ``account`` unless a component already bound one.
Key material never reaches the output: events carrying a private key, key
file path, seed or signed raw transaction have that value masked.
"""

import logging
import sys
from contextvars import ContextVar, Token
from typing import Any

import structlog

# Label of the wallet the current run acts for
account_label_var: ContextVar[str | None] = ContextVar("account_label", default=None)

# Event keys whose values are masked. "token" is not here: it names the
# faucet token being minted (tkETH, tkUSDC, ...).
REDACTED_FIELDS = frozenset(
    {
        "private_key",
        "private_key_file",
        "secret",
        "password",
        "api_key",
        "mnemonic",
        "seed",
        "raw_transaction",
    }
)


def _add_account_label(
    _logger: logging.Logger,
    _method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """Stamp the active account label, keeping an explicitly bound one."""
    account_label = account_label_var.get()
    if account_label and "account" not in event_dict:
        event_dict["account"] = account_label
    return event_dict


def _redact_sensitive(
    _logger: logging.Logger,
    _method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """Mask wallet secrets and signed payloads."""
    for key in event_dict:
        if key.lower() in REDACTED_FIELDS:
            event_dict[key] = "[REDACTED]"
    return event_dict


def configure_logging(
    level: str = "INFO",
    log_format: str = "text",
) -> None:
    """Route structlog through stdlib logging on stdout.

    Text output is meant for an operator watching a claim loop in a
    terminal (colours only when stdout is a tty). JSON output is one
    object per line for log shippers.

    Parameters
    ----------
    level : str
        Log level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
    log_format : str
        ``json`` or ``text``.

    Raises
    ------
    ValueError
        If ``level`` is not a stdlib level name.
    """
    try:
        log_level = getattr(logging, level.upper())
    except AttributeError:
        raise ValueError(
            f"Invalid log level: {level!r}. "
            "Valid levels are: DEBUG, INFO, WARNING, ERROR, CRITICAL."
        ) from None

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=log_level,
    )

    processors: list[structlog.typing.Processor] = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
        _add_account_label,
        _redact_sensitive,
    ]

    if log_format.lower() == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty()))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structlog logger. Components take one by injection and fall back to this."""
    return structlog.get_logger(name)


def set_account_label(label: str) -> Token:
    """Make ``label`` the account stamped on every event in this context.

    Returns
    -------
    Token
        Token for ``account_label_var.reset`` to restore the previous label.
    """
    return account_label_var.set(label)
