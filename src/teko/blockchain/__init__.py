"""Blockchain integration for Teko."""

from .address import to_checksum, validate_address
from .networks import EXPECTED_CHAIN_ID, NetworkInfo
from .provider import ChainProvider
from .transaction import GasParams, TransactionOutcome, TransactionRequest, TransactionStatus

__all__ = [
    "EXPECTED_CHAIN_ID",
    "ChainProvider",
    "GasParams",
    "NetworkInfo",
    "TransactionOutcome",
    "TransactionRequest",
    "TransactionStatus",
    "to_checksum",
    "validate_address",
]
