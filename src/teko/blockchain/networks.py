"""Network configuration for Teko.

The faucet only runs against the MegaETH testnet; the chain ID is fixed
and any node reporting a different one is rejected.
"""

from dataclasses import dataclass

from teko.config import DEFAULT_BLOCK_EXPLORER_URL, DEFAULT_RPC_ENDPOINT

# MegaETH testnet
EXPECTED_CHAIN_ID = 6342


@dataclass(frozen=True)
class NetworkInfo:
    """Network information for the faucet target chain.

    Attributes
    ----------
    rpc_endpoint : str
        The RPC endpoint URL.
    chain_id : int
        The chain ID every transaction is signed for.
    block_explorer_url : str | None
        Optional block explorer URL for transaction links.
    """

    rpc_endpoint: str = DEFAULT_RPC_ENDPOINT
    chain_id: int = EXPECTED_CHAIN_ID
    block_explorer_url: str | None = DEFAULT_BLOCK_EXPLORER_URL

    @property
    def tx_url_prefix(self) -> str:
        """Prefix that turns a transaction hash into an explorer link.

        Returns
        -------
        str
            ``<explorer>/tx/``, or an empty string if no explorer is configured.
        """
        if self.block_explorer_url:
            return f"{self.block_explorer_url.rstrip('/')}/tx/"
        return ""
