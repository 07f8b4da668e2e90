"""Faucet components for Teko."""

from .orchestrator import ClaimSummary, FaucetOrchestrator, FaucetRun
from .tokens import FAUCET_TOKENS, AmountPayload, FaucetToken, build_mint_payload

__all__ = [
    "AmountPayload",
    "ClaimSummary",
    "FAUCET_TOKENS",
    "FaucetOrchestrator",
    "FaucetRun",
    "FaucetToken",
    "build_mint_payload",
]
