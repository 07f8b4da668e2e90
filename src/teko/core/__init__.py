"""Core Teko components."""

from .executor import TransactionExecutor
from .retry import RetryPolicy
from .signer import LocalSigner, PendingTransaction, Signer
from .wallet import EnvironmentWallet, WalletProvider

__all__ = [
    "EnvironmentWallet",
    "LocalSigner",
    "PendingTransaction",
    "RetryPolicy",
    "Signer",
    "TransactionExecutor",
    "WalletProvider",
]
