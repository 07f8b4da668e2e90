"""Teko - resilient faucet client for Teko Finance on MegaETH."""

__version__ = "0.1.0"
