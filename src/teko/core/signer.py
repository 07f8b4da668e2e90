"""Transaction signers.

A signer turns a TransactionRequest into a broadcast transaction and hands
back a pending handle that can be awaited for its receipt.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, replace

from eth_typing import ChecksumAddress
from web3.types import TxReceipt

from teko.blockchain.provider import ChainProvider
from teko.blockchain.transaction import TransactionRequest

from .wallet import WalletProvider


@dataclass(frozen=True)
class PendingTransaction:
    """A submitted transaction awaiting confirmation."""

    hash: str
    provider: ChainProvider
    receipt_timeout: float | None = None

    async def wait(self) -> TxReceipt:
        """Suspend until the node returns a receipt."""
        return await self.provider.wait_for_receipt(self.hash, timeout=self.receipt_timeout)


class Signer(ABC):
    """Holds a signing credential and submits transactions with it."""

    @property
    @abstractmethod
    def address(self) -> ChecksumAddress: ...

    @abstractmethod
    async def send_transaction(self, request: TransactionRequest) -> PendingTransaction:
        """Sign and broadcast a transaction.

        Parameters
        ----------
        request : TransactionRequest
            Request with gas limit and chain ID set.

        Returns
        -------
        PendingTransaction
            Handle carrying the transaction hash.
        """
        ...


class LocalSigner(Signer):
    """Signs with a locally held key and broadcasts through a ChainProvider.

    Fills in the nonce and, if the request carries none, the fee parameters.

    Parameters
    ----------
    wallet : WalletProvider
        Source of the signing account.
    provider : ChainProvider
        Provider used for nonce, fee data and broadcast.
    receipt_timeout : float | None
        Timeout applied to ``PendingTransaction.wait``. None waits indefinitely.
    """

    def __init__(
        self,
        wallet: WalletProvider,
        provider: ChainProvider,
        receipt_timeout: float | None = None,
    ):
        self._wallet = wallet
        self._provider = provider
        self._receipt_timeout = receipt_timeout

    @property
    def address(self) -> ChecksumAddress:
        return self._wallet.get_account().address

    async def send_transaction(self, request: TransactionRequest) -> PendingTransaction:
        if request.gas_limit is None:
            raise ValueError("Transaction request has no gas limit")
        if request.gas_params is None:
            request = replace(request, gas_params=await self._provider.resolve_gas_params())

        tx = request.to_tx_params(include_from=False)
        tx["nonce"] = await self._provider.get_transaction_count(self.address)

        signed = self._wallet.get_account().sign_transaction(tx)
        tx_hash = await self._provider.send_raw_transaction(signed.raw_transaction)
        return PendingTransaction(tx_hash, self._provider, self._receipt_timeout)
