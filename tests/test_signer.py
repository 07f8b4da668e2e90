"""Tests for transaction signers."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from eth_account import Account
from pydantic import SecretStr

from teko.blockchain.transaction import GasParams, TransactionRequest
from teko.core.signer import LocalSigner, PendingTransaction, Signer
from teko.core.wallet import EnvironmentWallet

# Test private key (DO NOT USE IN PRODUCTION - this is a well-known test key)
TEST_PRIVATE_KEY = "0x0123456789abcdef0123456789abcdef0123456789abcdef0123456789abcdef"
TEST_ADDRESS = "0xFCAd0B19bB29D4674531d6f115237E16AfCE377c"
TOKEN_ADDRESS = "0x176735870dc6C22B4EBFBf519DE2ce758de78d94"
TX_HASH = "0x" + "ef" * 32


@pytest.fixture
def wallet():
    return EnvironmentWallet(private_key=SecretStr(TEST_PRIVATE_KEY))


@pytest.fixture
def mock_provider():
    """Create a mock ChainProvider."""
    provider = MagicMock()
    provider.resolve_gas_params = AsyncMock(
        return_value=GasParams.eip1559(max_fee_per_gas=5_000_000, max_priority_fee_per_gas=1_000_000)
    )
    provider.get_transaction_count = AsyncMock(return_value=3)
    provider.send_raw_transaction = AsyncMock(return_value=TX_HASH)
    provider.wait_for_receipt = AsyncMock(return_value={"status": 1})
    return provider


def make_request(**overrides) -> TransactionRequest:
    fields = {
        "to": TOKEN_ADDRESS,
        "data": bytes.fromhex("40c10f19" + "00" * 64),
        "from_": TEST_ADDRESS,
        "chain_id": 6342,
        "gas_limit": 90_000,
    }
    fields.update(overrides)
    return TransactionRequest(**fields)


class TestSigner:
    """Tests for the Signer abstract class."""

    def test_signer_is_abstract(self):
        """Signer cannot be instantiated directly."""
        with pytest.raises(TypeError):
            Signer()  # type: ignore


class TestLocalSigner:
    """Tests for LocalSigner."""

    def test_address(self, wallet, mock_provider):
        """Address comes from the wallet."""
        assert LocalSigner(wallet, mock_provider).address == TEST_ADDRESS

    @pytest.mark.asyncio
    async def test_send_eip1559(self, wallet, mock_provider):
        """Signs a type-2 transaction and broadcasts it."""
        signer = LocalSigner(wallet, mock_provider)

        pending = await signer.send_transaction(make_request())

        assert pending.hash == TX_HASH
        mock_provider.get_transaction_count.assert_awaited_once_with(TEST_ADDRESS)
        raw = mock_provider.send_raw_transaction.await_args.args[0]
        assert raw[0] == 2  # EIP-1559 typed transaction

        decoded = Account.recover_transaction(raw)
        assert decoded == TEST_ADDRESS

    @pytest.mark.asyncio
    async def test_send_legacy(self, wallet, mock_provider):
        """Legacy gas params produce a legacy transaction."""
        signer = LocalSigner(wallet, mock_provider)

        await signer.send_transaction(make_request(gas_params=GasParams.legacy(20 * 10**9)))

        mock_provider.resolve_gas_params.assert_not_awaited()
        raw = mock_provider.send_raw_transaction.await_args.args[0]
        assert raw[0] >= 0xC0  # RLP list, untyped
        assert Account.recover_transaction(raw) == TEST_ADDRESS

    @pytest.mark.asyncio
    async def test_resolves_gas_params_when_missing(self, wallet, mock_provider):
        """Fee data is fetched when the request has none."""
        signer = LocalSigner(wallet, mock_provider)

        await signer.send_transaction(make_request())

        mock_provider.resolve_gas_params.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_requires_gas_limit(self, wallet, mock_provider):
        """A request without gas limit is rejected before signing."""
        signer = LocalSigner(wallet, mock_provider)

        with pytest.raises(ValueError, match="gas limit"):
            await signer.send_transaction(make_request(gas_limit=None))

        mock_provider.send_raw_transaction.assert_not_awaited()


class TestPendingTransaction:
    """Tests for PendingTransaction."""

    @pytest.mark.asyncio
    async def test_wait_uses_timeout(self, mock_provider):
        """wait() polls the provider with the configured timeout."""
        pending = PendingTransaction(TX_HASH, mock_provider, receipt_timeout=30)

        receipt = await pending.wait()

        assert receipt == {"status": 1}
        mock_provider.wait_for_receipt.assert_awaited_once_with(TX_HASH, timeout=30)

    @pytest.mark.asyncio
    async def test_wait_unbounded_by_default(self, mock_provider):
        """Without a timeout the wait is unbounded."""
        await PendingTransaction(TX_HASH, mock_provider).wait()

        mock_provider.wait_for_receipt.assert_awaited_once_with(TX_HASH, timeout=None)
