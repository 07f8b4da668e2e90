"""AsyncWeb3 provider wrapper for Teko faucet operations."""

import asyncio
import time
from decimal import Decimal

import structlog
from eth_typing import ChecksumAddress
from web3 import AsyncWeb3, Web3
from web3.exceptions import TransactionNotFound
from web3.types import TxReceipt

from teko.errors import NetworkMismatchError, TransportError
from teko.observability.logging import get_logger

from .address import to_checksum
from .networks import EXPECTED_CHAIN_ID
from .transaction import GasParams, TransactionRequest

# Minimal ERC20 ABI for balance checks
ERC20_BALANCE_ABI = [
    {
        "constant": True,
        "inputs": [{"name": "_owner", "type": "address"}],
        "name": "balanceOf",
        "outputs": [{"name": "balance", "type": "uint256"}],
        "type": "function",
    },
]

FALLBACK_GAS_PRICE_GWEI = 20


class ChainProvider:
    """Single point of contact with the remote node.

    Parameters
    ----------
    rpc_endpoint : str
        The JSON-RPC endpoint URL.
    expected_chain_id : int
        Chain ID the node must report.
    logger : structlog.stdlib.BoundLogger | None
        Logger for provider events.
    w3 : AsyncWeb3 | None
        Pre-built AsyncWeb3 instance. Built from ``rpc_endpoint`` if omitted.
    fallback_gas_price_gwei : int
        Legacy gas price used when EIP-1559 fee data is unavailable.
    """

    def __init__(
        self,
        rpc_endpoint: str,
        expected_chain_id: int = EXPECTED_CHAIN_ID,
        logger: structlog.stdlib.BoundLogger | None = None,
        w3: AsyncWeb3 | None = None,
        fallback_gas_price_gwei: int = FALLBACK_GAS_PRICE_GWEI,
    ):
        self._w3 = w3 or AsyncWeb3(AsyncWeb3.AsyncHTTPProvider(rpc_endpoint))
        self._rpc_endpoint = rpc_endpoint
        self._expected_chain_id = expected_chain_id
        self._logger = logger or get_logger(__name__)
        self._fallback_gas_price = Web3.to_wei(fallback_gas_price_gwei, "gwei")

    @property
    def expected_chain_id(self) -> int:
        """Chain ID every transaction must be signed for."""
        return self._expected_chain_id

    @property
    def rpc_endpoint(self) -> str:
        return self._rpc_endpoint

    async def get_chain_id(self) -> int:
        """Get the chain ID reported by the connected node."""
        return await self._w3.eth.chain_id

    async def initialize(self, max_retries: int = 3, retry_delay: float = 5) -> None:
        """Poll the node until it answers a chain ID query.

        Parameters
        ----------
        max_retries : int
            Number of attempts before giving up.
        retry_delay : float
            Fixed delay in seconds between attempts.

        Raises
        ------
        ValueError
            If ``max_retries`` is less than 1.
        TransportError
            If the node is unreachable after all attempts.
        """
        if max_retries < 1:
            raise ValueError(f"max_retries must be at least 1, got {max_retries}")
        for attempt in range(1, max_retries + 1):
            try:
                await self.get_chain_id()
                self._logger.info("Provider initialized successfully", rpc=self._rpc_endpoint)
                return
            except Exception as e:
                self._logger.warning(
                    f"Provider initialization attempt {attempt} failed: {e}",
                    attempt=attempt,
                    error=str(e),
                )
                if attempt == max_retries:
                    raise TransportError(
                        "Failed to initialize provider after max retries",
                        {"attempts": attempt},
                    ) from e
                await asyncio.sleep(retry_delay)

    async def check_network(self) -> None:
        """Verify the node is on the expected network.

        Raises
        ------
        TransportError
            If the chain ID cannot be fetched.
        NetworkMismatchError
            If the node reports a different chain ID.
        """
        try:
            chain_id = await self.get_chain_id()
        except Exception as e:
            raise TransportError(f"Failed to connect to network: {e}") from e

        if chain_id != self._expected_chain_id:
            raise NetworkMismatchError(self._expected_chain_id, chain_id)
        self._logger.info(f"Connected to MegaETH network (chain ID: {chain_id})", chain_id=chain_id)

    async def get_balance(self, address: str) -> Decimal:
        """Get native balance.

        Parameters
        ----------
        address : str
            The address to query.

        Returns
        -------
        Decimal
            Balance in ether units.
        """
        checksum_address = to_checksum(address)
        try:
            wei = await self._w3.eth.get_balance(checksum_address)
        except Exception as e:
            raise TransportError(f"Failed to get balance: {e}") from e
        return Decimal(str(Web3.from_wei(wei, "ether")))

    async def get_token_balance(self, token_address: str, owner: str, decimals: int) -> Decimal:
        """Get an ERC20 token balance scaled by the token's decimals.

        Parameters
        ----------
        token_address : str
            The token contract address.
        owner : str
            The holder address.
        decimals : int
            Token decimals.

        Returns
        -------
        Decimal
            Balance in whole token units.
        """
        contract = self._w3.eth.contract(address=to_checksum(token_address), abi=ERC20_BALANCE_ABI)
        try:
            raw = await contract.functions.balanceOf(to_checksum(owner)).call()
        except Exception as e:
            raise TransportError(f"Failed to get token balance: {e}") from e
        return Decimal(raw) / Decimal(10**decimals)

    async def estimate_gas(self, request: TransactionRequest) -> int:
        """Ask the node for a gas limit.

        Raises
        ------
        TransportError
            If the node rejects the call (for example, it would revert).
        """
        try:
            return await self._w3.eth.estimate_gas(request.to_tx_params())
        except Exception as e:
            raise TransportError(f"Failed to estimate gas: {e}") from e

    async def resolve_gas_params(self) -> GasParams:
        """Get fee parameters for the next transaction.

        Uses EIP-1559 fees when the node provides both a base fee and a
        priority fee, otherwise the fixed legacy gas price. Never raises.

        Returns
        -------
        GasParams
            EIP-1559 or legacy fee parameters.
        """
        try:
            block = await self._w3.eth.get_block("latest")
            base_fee = block.get("baseFeePerGas")
            priority_fee = await self._w3.eth.max_priority_fee if base_fee is not None else None
        except Exception as e:
            self._logger.error(f"Failed to get gas parameters: {e}", error=str(e))
            return GasParams.legacy(self._fallback_gas_price)

        if base_fee is not None and priority_fee is not None:
            return GasParams.eip1559(
                max_fee_per_gas=base_fee * 2 + priority_fee,
                max_priority_fee_per_gas=priority_fee,
            )
        self._logger.warning("EIP-1559 data not available, using fallback gas price.")
        return GasParams.legacy(self._fallback_gas_price)

    async def get_transaction_count(self, address: ChecksumAddress) -> int:
        """Get the pending nonce for an address."""
        try:
            return await self._w3.eth.get_transaction_count(address, "pending")
        except Exception as e:
            raise TransportError(f"Failed to get transaction count: {e}") from e

    async def send_raw_transaction(self, raw_transaction: bytes) -> str:
        """Broadcast a signed transaction.

        Returns
        -------
        str
            The 0x-prefixed transaction hash.
        """
        try:
            tx_hash = await self._w3.eth.send_raw_transaction(raw_transaction)
        except Exception as e:
            raise TransportError(f"Failed to send transaction: {e}") from e
        return Web3.to_hex(tx_hash)

    async def wait_for_receipt(
        self,
        tx_hash: str,
        timeout: float | None = None,
        poll_interval: float = 1.0,
    ) -> TxReceipt:
        """Wait for a transaction receipt.

        Parameters
        ----------
        tx_hash : str
            The transaction hash to wait for.
        timeout : float | None
            Maximum time to wait in seconds. None waits indefinitely.
        poll_interval : float
            Seconds between receipt polls.

        Returns
        -------
        TxReceipt
            The transaction receipt.

        Raises
        ------
        TransportError
            If polling fails or the timeout elapses.
        """
        deadline = None if timeout is None else time.monotonic() + timeout
        while True:
            try:
                return await self._w3.eth.get_transaction_receipt(tx_hash)
            except TransactionNotFound:
                pass  # still pending
            except Exception as e:
                raise TransportError(f"Failed to get transaction receipt: {e}") from e

            if deadline is not None and time.monotonic() >= deadline:
                raise TransportError(
                    f"Transaction {tx_hash} not mined within {timeout}s",
                    {"tx_hash": tx_hash},
                )
            await asyncio.sleep(poll_interval)
