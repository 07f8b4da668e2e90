"""Single-transaction execution: estimate, submit, confirm."""

import time
from dataclasses import replace

import structlog

from teko.blockchain.provider import ChainProvider
from teko.blockchain.transaction import TransactionOutcome, TransactionRequest, TransactionStatus
from teko.errors import NetworkMismatchError
from teko.observability.logging import get_logger
from teko.observability.metrics import TRANSACTION_DURATION, TRANSACTIONS

from .signer import Signer


class TransactionExecutor:
    """Builds, submits and confirms one transaction.

    Parameters
    ----------
    provider : ChainProvider
        Provider used for gas estimation.
    logger : structlog.stdlib.BoundLogger | None
        Logger for transaction events.
    """

    def __init__(
        self,
        provider: ChainProvider,
        logger: structlog.stdlib.BoundLogger | None = None,
    ):
        self._provider = provider
        self._logger = logger or get_logger(__name__)

    async def execute(
        self,
        request: TransactionRequest,
        signer: Signer,
        chain_id: int,
        explorer_url: str,
        label: str = "",
    ) -> TransactionOutcome | None:
        """Execute a transaction and wait for its receipt.

        Parameters
        ----------
        request : TransactionRequest
            The call to submit. Gas limit and chain ID are filled in here.
        signer : Signer
            Signs and broadcasts the transaction.
        chain_id : int
            Chain ID to sign for. Must match the provider's expected chain.
        explorer_url : str
            Prefix prepended to the hash for explorer links.
        label : str
            Operation label (account and token) prefixed to failure lines.

        Returns
        -------
        TransactionOutcome | None
            The outcome if the receipt reports success, None if the
            transaction reverted.

        Raises
        ------
        NetworkMismatchError
            If ``chain_id`` is not the expected chain. Nothing is submitted.
        TransportError
            If estimation, submission or receipt polling fails.
        """
        if chain_id != self._provider.expected_chain_id:
            raise NetworkMismatchError(self._provider.expected_chain_id, chain_id)
        prefix = f"{label} | " if label else ""

        try:
            gas_limit = await self._provider.estimate_gas(request)
            self._logger.info(f"Estimated gas limit: {gas_limit}", gas_limit=gas_limit)

            start = time.monotonic()
            pending = await signer.send_transaction(
                replace(request, gas_limit=gas_limit, chain_id=chain_id)
            )
            url = f"{explorer_url}{pending.hash}"
            self._logger.info(f"Transaction sent: {url}", tx_hash=pending.hash, url=url)

            receipt = await pending.wait()
        except Exception as e:
            self._logger.error(
                f"{prefix}Transaction execution failed: {e}",
                label=label,
                error=str(e),
            )
            raise
        TRANSACTION_DURATION.labels(operation="mint").observe(time.monotonic() - start)

        gas_used = receipt.get("gasUsed")
        if receipt.get("status") == 1:
            TRANSACTIONS.labels(status=TransactionStatus.SUCCESS.value).inc()
            self._logger.info(
                f"{url} | Transaction successful (Gas used: {gas_used})",
                tx_hash=pending.hash,
                url=url,
                gas_used=gas_used,
            )
            return TransactionOutcome(pending.hash, TransactionStatus.SUCCESS, gas_used)

        TRANSACTIONS.labels(status=TransactionStatus.REVERTED.value).inc()
        self._logger.error(
            f"{prefix}Transaction failed: {url}",
            label=label,
            tx_hash=pending.hash,
            url=url,
            status=TransactionStatus.REVERTED.value,
        )
        return None
