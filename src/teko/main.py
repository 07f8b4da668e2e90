#!/usr/bin/env python3
"""Teko - Teko Finance faucet client for MegaETH.

Entry point for the ``teko`` command.
"""

import asyncio
import sys

from prometheus_client import start_http_server
from pydantic import ValidationError as SettingsError

from teko.cli import create_parser, run_cli
from teko.config import TekoConfig
from teko.observability.logging import configure_logging, get_logger, set_account_label


def parse_args(argv: list[str] | None = None):
    """Parse command line arguments."""
    return create_parser().parse_args(argv)


def setup(config: TekoConfig) -> None:
    """Configure logging and, if enabled, the metrics endpoint."""
    configure_logging(level=config.log_level, log_format=config.log_format)
    set_account_label(config.account_label)

    if config.metrics_port:
        start_http_server(config.metrics_port)
        get_logger(__name__).info(f"Metrics server started on port {config.metrics_port}")


def main(argv: list[str] | None = None) -> None:
    """Main entry point for Teko."""
    args = parse_args(argv)
    if args.command is None:
        create_parser().print_help()
        sys.exit(0)

    try:
        config = TekoConfig()
    except SettingsError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        sys.exit(1)

    setup(config)
    sys.exit(asyncio.run(run_cli(args, config)))


if __name__ == "__main__":
    main()
