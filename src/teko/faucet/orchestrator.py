"""Faucet orchestrator for Teko.

Mints every faucet token to a wallet in one run:
- Builds one mint payload per token
- Shuffles the submission order per run
- Wraps each mint in the retry policy
- Aborts the run on the first mint whose retries are exhausted
"""

import random
from collections.abc import Mapping, MutableSequence
from dataclasses import dataclass
from functools import partial
from typing import TypeVar

import structlog
from eth_typing import ChecksumAddress

from teko.blockchain.address import to_checksum
from teko.blockchain.networks import NetworkInfo
from teko.blockchain.transaction import TransactionOutcome, TransactionRequest
from teko.core.executor import TransactionExecutor
from teko.core.retry import RetryPolicy
from teko.core.signer import Signer
from teko.errors import MintFailedError
from teko.observability.logging import get_logger
from teko.observability.metrics import FAUCET_RUNS, MINT_REQUESTS

from .tokens import (
    FAUCET_TOKENS,
    AmountPayload,
    FaucetToken,
    build_mint_payload,
    contract_addresses,
)

T = TypeVar("T")


def shuffle(items: MutableSequence[T], rng: random.Random) -> MutableSequence[T]:
    """Shuffle ``items`` in place (Fisher-Yates) and return it."""
    for i in range(len(items) - 1, 0, -1):
        j = rng.randint(0, i)
        items[i], items[j] = items[j], items[i]
    return items


@dataclass(frozen=True)
class FaucetOperation:
    """One mint call in a faucet run."""

    token: FaucetToken
    payload: AmountPayload


@dataclass(frozen=True)
class FaucetRun:
    """Ordered mint operations for a single run."""

    recipient: ChecksumAddress
    operations: tuple[FaucetOperation, ...]

    @property
    def order(self) -> list[str]:
        return [op.token.label for op in self.operations]


@dataclass
class ClaimSummary:
    """Aggregate result of repeated faucet runs."""

    requested: int
    succeeded: int = 0
    failed: int = 0

    @property
    def all_succeeded(self) -> bool:
        return self.succeeded == self.requested


class FaucetOrchestrator:
    """Mints all faucet tokens to a wallet.

    Parameters
    ----------
    executor : TransactionExecutor
        Executes individual mint transactions.
    retry_policy : RetryPolicy
        Retry policy applied to each mint.
    network : NetworkInfo
        Target network (chain ID and explorer links).
    account_label : str
        Identity label used in log lines and as the retry label.
    tokens : tuple[FaucetToken, ...]
        Tokens minted per run.
    max_attempts : int
        Attempts per mint before the run is aborted.
    backoff_range : tuple[int, int]
        Inclusive pause range in seconds between attempts.
    rng : random.Random | None
        Randomness for the per-run ordering.
    logger : structlog.stdlib.BoundLogger | None
        Logger for faucet events.
    """

    def __init__(
        self,
        executor: TransactionExecutor,
        retry_policy: RetryPolicy,
        network: NetworkInfo,
        account_label: str = "1",
        tokens: tuple[FaucetToken, ...] = FAUCET_TOKENS,
        max_attempts: int = 3,
        backoff_range: tuple[int, int] = (5, 10),
        rng: random.Random | None = None,
        logger: structlog.stdlib.BoundLogger | None = None,
    ):
        self._executor = executor
        self._retry = retry_policy
        self._network = network
        self._account_label = account_label
        self._tokens = tokens
        self._max_attempts = max_attempts
        self._backoff_range = backoff_range
        self._rng = rng or random.Random()
        self._logger = (logger or get_logger(__name__)).bind(account=account_label)
        self._contracts = contract_addresses(tokens)

    @property
    def contracts(self) -> Mapping[str, ChecksumAddress]:
        """Read-only mapping of token label to contract address."""
        return self._contracts

    @property
    def account_label(self) -> str:
        return self._account_label

    def _operation_label(self, token: str) -> str:
        return f"{self._account_label} | {token}"

    def build_run(self, recipient: str) -> FaucetRun:
        """Build the mint operations for a run in randomized order."""
        checksum_recipient = to_checksum(recipient)
        operations = [
            FaucetOperation(token, build_mint_payload(token, checksum_recipient))
            for token in self._tokens
        ]
        shuffle(operations, self._rng)
        return FaucetRun(recipient=checksum_recipient, operations=tuple(operations))

    async def run(self, signer: Signer) -> bool:
        """Mint every faucet token to the signer's address.

        Parameters
        ----------
        signer : Signer
            Wallet that receives the tokens and pays for the transactions.

        Returns
        -------
        bool
            True if every mint succeeded, False once one exhausts its retries.
        """
        faucet_run = self.build_run(signer.address)
        self._logger.debug("Faucet run order", order=faucet_run.order)

        for operation in faucet_run.operations:
            token = operation.token.label
            try:
                await self._retry.execute(
                    partial(self._request_faucet_token, operation, signer),
                    max_attempts=self._max_attempts,
                    backoff_range=self._backoff_range,
                    label=self._operation_label(token),
                )
            except Exception as e:
                MINT_REQUESTS.labels(token=token, status="failed").inc()
                FAUCET_RUNS.labels(result="failed").inc()
                self._logger.error(
                    f"{self._account_label} | Faucet failed on {token}: {e}",
                    token=token,
                    error=str(e),
                )
                return False

        FAUCET_RUNS.labels(result="success").inc()
        return True

    async def claim(self, signer: Signer, count: int) -> ClaimSummary:
        """Run the faucet ``count`` times in sequence.

        Parameters
        ----------
        signer : Signer
            Wallet that receives the tokens.
        count : int
            Number of runs. Must be positive.

        Returns
        -------
        ClaimSummary
            Counts of succeeded and failed runs.
        """
        if count <= 0:
            raise ValueError("count must be a positive number")

        summary = ClaimSummary(requested=count)
        for i in range(1, count + 1):
            self._logger.info(f"Claim attempt {i} of {count}", claim=i, total=count)
            if await self.run(signer):
                summary.succeeded += 1
                self._logger.info(f"Faucet claim {i} completed successfully!", claim=i)
            else:
                summary.failed += 1
                self._logger.error(f"Faucet claim {i} failed.", claim=i)
        return summary

    async def _request_faucet_token(
        self, operation: FaucetOperation, signer: Signer
    ) -> TransactionOutcome:
        token = operation.token.label
        self._logger.info(
            f"{self._account_label} | Requesting Teko Finance faucet token: {token}",
            token=token,
        )

        request = TransactionRequest(
            to=operation.token.contract,
            data=operation.payload.data,
            from_=signer.address,
            chain_id=self._network.chain_id,
        )
        outcome = await self._executor.execute(
            request,
            signer,
            self._network.chain_id,
            self._network.tx_url_prefix,
            label=self._operation_label(token),
        )

        if outcome is None:
            self._logger.error(f"{self._operation_label(token)} | Transaction failed.", token=token)
            raise MintFailedError(token)

        MINT_REQUESTS.labels(token=token, status="success").inc()
        self._logger.info(
            f"{self._account_label} | Teko Finance {token} minted successfully!",
            token=token,
            tx_hash=outcome.tx_hash,
        )
        return outcome
