"""CLI subcommands for the Teko faucet client.

Provides command-line interface for:
- Wallet address
- Network check
- Native and faucet token balances
- Faucet claims (one or more runs)
"""

import argparse
import json
import random
import sys
from decimal import Decimal

import structlog
from pydantic import ValidationError as SettingsError

from teko.blockchain.networks import EXPECTED_CHAIN_ID, NetworkInfo
from teko.blockchain.provider import ChainProvider
from teko.config import TekoConfig
from teko.core.executor import TransactionExecutor
from teko.core.retry import RetryPolicy
from teko.core.signer import LocalSigner
from teko.core.wallet import EnvironmentWallet
from teko.faucet.orchestrator import FaucetOrchestrator
from teko.faucet.tokens import FAUCET_TOKENS
from teko.observability.logging import get_logger


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="teko",
        description="Teko - Teko Finance faucet client for MegaETH",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "--json",
        action="store_true",
        help="Output in JSON format",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser("address", help="Show wallet address")
    subparsers.add_parser("network", help="Check the RPC node is on the expected network")
    subparsers.add_parser("balances", help="Show native and faucet token balances")

    claim_parser = subparsers.add_parser("claim", help="Mint every faucet token to the wallet")
    claim_parser.add_argument(
        "--count",
        type=int,
        default=1,
        help="Number of faucet runs (default: 1)",
    )

    return parser


class CLIContext:
    """Shared context for CLI commands."""

    def __init__(self, config: TekoConfig, json_output: bool = False):
        self.config = config
        self.json_output = json_output
        self.logger = self.get_logger("teko.cli")
        self.network = NetworkInfo(
            rpc_endpoint=config.rpc_endpoint,
            chain_id=EXPECTED_CHAIN_ID,
            block_explorer_url=config.block_explorer_url,
        )
        self._wallet: EnvironmentWallet | None = None
        self._provider: ChainProvider | None = None
        self._signer: LocalSigner | None = None
        self._orchestrator: FaucetOrchestrator | None = None

    def get_logger(self, name: str) -> structlog.stdlib.BoundLogger:
        """Get a logger bound to the configured account label."""
        return get_logger(name).bind(account=self.config.account_label)

    @property
    def wallet(self) -> EnvironmentWallet:
        """Get wallet (lazy loaded)."""
        if self._wallet is None:
            if self.config.wallet_private_key:
                self._wallet = EnvironmentWallet(private_key=self.config.wallet_private_key)
            elif self.config.wallet_private_key_file:
                self._wallet = EnvironmentWallet(
                    private_key_file=self.config.wallet_private_key_file
                )
            else:
                raise ValueError(
                    "No wallet configured. "
                    "Set TEKO_WALLET_PRIVATE_KEY or TEKO_WALLET_PRIVATE_KEY_FILE"
                )
        return self._wallet

    @property
    def provider(self) -> ChainProvider:
        """Get chain provider (lazy loaded)."""
        if self._provider is None:
            self._provider = ChainProvider(
                self.config.rpc_endpoint,
                expected_chain_id=self.network.chain_id,
                logger=self.get_logger("teko.blockchain.provider"),
                fallback_gas_price_gwei=self.config.fallback_gas_price_gwei,
            )
        return self._provider

    @property
    def signer(self) -> LocalSigner:
        """Get signer (lazy loaded)."""
        if self._signer is None:
            self._signer = LocalSigner(
                self.wallet,
                self.provider,
                receipt_timeout=self.config.receipt_timeout_seconds,
            )
        return self._signer

    @property
    def orchestrator(self) -> FaucetOrchestrator:
        """Get faucet orchestrator (lazy loaded)."""
        if self._orchestrator is None:
            self._orchestrator = FaucetOrchestrator(
                executor=TransactionExecutor(
                    self.provider, logger=self.get_logger("teko.core.executor")
                ),
                retry_policy=RetryPolicy(logger=self.get_logger("teko.core.retry")),
                network=self.network,
                account_label=self.config.account_label,
                max_attempts=self.config.max_attempts,
                backoff_range=self.config.pause_range,
                rng=random.SystemRandom(),
                logger=get_logger("teko.faucet.orchestrator"),
            )
        return self._orchestrator

    async def connect(self) -> None:
        """Wait for the node and verify its network."""
        await self.provider.initialize(
            max_retries=self.config.provider_init_retries,
            retry_delay=self.config.provider_init_delay_seconds,
        )
        await self.provider.check_network()

    def output(self, data: dict) -> None:
        """Output data in the appropriate format."""
        if self.json_output:

            def decimal_default(obj):
                if isinstance(obj, Decimal):
                    return str(obj)
                raise TypeError(f"Object of type {type(obj)} is not JSON serializable")

            print(json.dumps(data, default=decimal_default, indent=2))
        else:
            self._print_formatted(data)

    def _print_formatted(self, data: dict, indent: int = 0) -> None:
        """Print data in human-readable format."""
        prefix = "  " * indent
        for key, value in data.items():
            if isinstance(value, dict):
                print(f"{prefix}{key}:")
                self._print_formatted(value, indent + 1)
            else:
                print(f"{prefix}{key}: {value}")


async def cmd_address(ctx: CLIContext) -> int:
    """Show wallet address."""
    try:
        ctx.output({"address": ctx.wallet.address})
        return 0
    except Exception as e:
        ctx.output({"error": str(e)})
        return 1


async def cmd_network(ctx: CLIContext) -> int:
    """Check the connected network."""
    try:
        await ctx.connect()
        ctx.output(
            {
                "rpc": ctx.config.rpc_endpoint,
                "chain_id": ctx.network.chain_id,
                "explorer": ctx.network.block_explorer_url,
            }
        )
        return 0
    except Exception as e:
        ctx.output({"error": str(e)})
        return 1


async def cmd_balances(ctx: CLIContext) -> int:
    """Show native and faucet token balances."""
    try:
        address = ctx.wallet.address
        await ctx.connect()

        tokens = {}
        for token in FAUCET_TOKENS:
            tokens[token.label] = await ctx.provider.get_token_balance(
                token.contract, address, token.decimals
            )
        ctx.output(
            {
                "address": address,
                "native": await ctx.provider.get_balance(address),
                "tokens": tokens,
            }
        )
        return 0
    except Exception as e:
        ctx.output({"error": str(e)})
        return 1


async def cmd_claim(ctx: CLIContext, count: int) -> int:
    """Run the faucet ``count`` times."""
    if count <= 0:
        ctx.output({"error": "Please enter a valid positive number."})
        return 1

    try:
        signer = ctx.signer
        await ctx.connect()
    except Exception as e:
        ctx.output({"error": str(e)})
        return 1

    ctx.logger.info(f"Starting faucet claim for {count} time(s)...", address=signer.address)
    summary = await ctx.orchestrator.claim(signer, count)
    ctx.output(
        {
            "address": signer.address,
            "requested": summary.requested,
            "succeeded": summary.succeeded,
            "failed": summary.failed,
        }
    )
    return 0 if summary.all_succeeded else 1


async def run_cli(args: argparse.Namespace, config: TekoConfig | None = None) -> int:
    """Run CLI command and return exit code.

    Parameters
    ----------
    args : argparse.Namespace
        Parsed command line arguments.
    config : TekoConfig | None
        Loaded configuration. Read from the environment if omitted.

    Returns
    -------
    int
        Exit code (0 = success, 1 = error, -1 = show help).
    """
    try:
        config = config or TekoConfig()
    except SettingsError as e:
        if args.json:
            print(json.dumps({"error": f"Configuration error: {e}"}))
        else:
            print(f"Configuration error: {e}", file=sys.stderr)
        return 1

    ctx = CLIContext(config, json_output=args.json)

    if args.command == "address":
        return await cmd_address(ctx)
    elif args.command == "network":
        return await cmd_network(ctx)
    elif args.command == "balances":
        return await cmd_balances(ctx)
    elif args.command == "claim":
        return await cmd_claim(ctx, args.count)
    else:
        return -1
