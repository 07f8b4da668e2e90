"""Exception taxonomy for Teko faucet operations.

- TransportError: node unreachable or RPC call failed (retried)
- FatalError: never retried (wrong network, malformed input)
- MintFailedError: transaction mined but reverted on-chain
- RetryExhaustedError: retry budget spent, wraps the last failure
"""

from typing import Any


class TekoError(Exception):
    """Base exception for Teko operations."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class TransportError(TekoError):
    """RPC call failed or node unreachable."""


class FatalError(TekoError):
    """Error that must abort the operation without retrying."""


class NetworkMismatchError(FatalError):
    """Connected node reports an unexpected chain ID."""

    def __init__(self, expected: int, actual: int):
        super().__init__(
            f"Connected to wrong network. Expected chain ID {expected}, but got {actual}",
            {"expected": expected, "actual": actual},
        )
        self.expected = expected
        self.actual = actual


class ValidationError(FatalError):
    """Malformed credential, address or configuration value."""


class MintFailedError(TekoError):
    """Mint transaction was included but reverted."""

    def __init__(self, token: str):
        super().__init__(f"Transaction failed for {token}", {"token": token})
        self.token = token


class RetryExhaustedError(TekoError):
    """All retry attempts failed.

    Parameters
    ----------
    label : str
        Identity label of the retried operation.
    attempts : int
        Number of attempts made.
    last_error : BaseException
        Failure raised by the final attempt.
    """

    def __init__(self, label: str, attempts: int, last_error: BaseException):
        super().__init__(
            f"{label} | Max attempts reached: {last_error}",
            {"label": label, "attempts": attempts},
        )
        self.label = label
        self.attempts = attempts
        self.last_error = last_error
