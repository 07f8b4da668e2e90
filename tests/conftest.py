"""Pytest configuration and fixtures for Teko tests."""

import os
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

from teko.blockchain.networks import EXPECTED_CHAIN_ID
from teko.blockchain.provider import ChainProvider


class FakeEth:
    """Stand-in for ``AsyncWeb3.eth``.

    ``chain_id`` and ``max_priority_fee`` are awaitable properties on the
    real object, so they are backed by AsyncMocks called on each access.
    """

    def __init__(self):
        self.chain_id_mock = AsyncMock(return_value=EXPECTED_CHAIN_ID)
        self.max_priority_fee_mock = AsyncMock(return_value=1_000_000)
        self.get_balance = AsyncMock(return_value=5 * 10**18)
        self.estimate_gas = AsyncMock(return_value=60_000)
        self.get_block = AsyncMock(return_value={"baseFeePerGas": 2_000_000})
        self.get_transaction_count = AsyncMock(return_value=7)
        self.send_raw_transaction = AsyncMock(return_value=bytes.fromhex("ab" * 32))
        self.get_transaction_receipt = AsyncMock(return_value={"status": 1, "gasUsed": 50_000})
        self.contract = MagicMock()

    @property
    def chain_id(self):
        return self.chain_id_mock()

    @property
    def max_priority_fee(self):
        return self.max_priority_fee_mock()


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Clear Teko-related environment variables before each test."""
    for key in list(os.environ.keys()):
        if key.startswith("TEKO_"):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture
def mock_logger():
    """Logger double whose ``bind`` returns itself."""
    logger = MagicMock()
    logger.bind.return_value = logger
    return logger


@pytest.fixture
def fake_eth():
    """Create a fake AsyncWeb3 eth namespace."""
    return FakeEth()


@pytest.fixture
def provider(fake_eth, mock_logger):
    """ChainProvider backed by the fake eth namespace."""
    return ChainProvider(
        "http://localhost:8545",
        logger=mock_logger,
        w3=SimpleNamespace(eth=fake_eth),
    )
