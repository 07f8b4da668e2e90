"""Teko Finance faucet tokens and mint payload encoding.

Each token contract exposes ``mint(address,uint256)``. The faucet mints a
fixed amount per token; amounts are protocol constants, not user input.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from decimal import Decimal
from types import MappingProxyType

from eth_abi import encode
from eth_typing import ChecksumAddress

from teko.blockchain.address import to_checksum
from teko.errors import ValidationError

# keccak("mint(address,uint256)")[:4]
MINT_SELECTOR = bytes.fromhex("40c10f19")


@dataclass(frozen=True)
class FaucetToken:
    """A mintable faucet token."""

    label: str
    contract: ChecksumAddress
    decimals: int
    mint_amount: int

    @property
    def display_amount(self) -> Decimal:
        """Mint amount in whole token units."""
        return Decimal(self.mint_amount) / Decimal(10**self.decimals)


@dataclass(frozen=True)
class AmountPayload:
    """Encoded mint call for one (token, recipient) pair."""

    token: str
    recipient: ChecksumAddress
    amount: int
    data: bytes

    @property
    def hex(self) -> str:
        return "0x" + self.data.hex()


def build_mint_payload(token: FaucetToken, recipient: str) -> AmountPayload:
    """Encode ``mint(recipient, token.mint_amount)``.

    Parameters
    ----------
    token : FaucetToken
        Token whose fixed mint amount is encoded.
    recipient : str
        Address that receives the minted tokens.

    Returns
    -------
    AmountPayload
        Selector followed by the zero-padded address and the 32-byte
        big-endian amount.
    """
    checksum_recipient = to_checksum(recipient)
    data = MINT_SELECTOR + encode(["address", "uint256"], [checksum_recipient, token.mint_amount])
    return AmountPayload(
        token=token.label,
        recipient=checksum_recipient,
        amount=token.mint_amount,
        data=data,
    )


def load_faucet_tokens(
    raw_tokens: list[tuple[str, str, int, int]],
) -> tuple[FaucetToken, ...]:
    """Validate raw token definitions and normalize their addresses.

    Parameters
    ----------
    raw_tokens : list[tuple[str, str, int, int]]
        ``(label, contract address, decimals, mint amount)`` entries.

    Returns
    -------
    tuple[FaucetToken, ...]
        Validated tokens in definition order.

    Raises
    ------
    ValidationError
        If an address is malformed, a label repeats, or an amount is not positive.
    """
    tokens = []
    seen: set[str] = set()
    for label, address, decimals, mint_amount in raw_tokens:
        if label in seen:
            raise ValidationError(f"Duplicate faucet token: {label}")
        try:
            contract = to_checksum(address)
        except ValidationError as e:
            raise ValidationError(f"Invalid address for {label}: {address} - {e}") from e
        if mint_amount <= 0 or mint_amount >= 2**256:
            raise ValidationError(f"Invalid mint amount for {label}: {mint_amount}")
        seen.add(label)
        tokens.append(FaucetToken(label, contract, decimals, mint_amount))
    return tuple(tokens)


FAUCET_TOKENS = load_faucet_tokens(
    [
        ("tkETH", "0x176735870dc6c22b4ebfbf519de2ce758de78d94", 18, 1 * 10**18),
        ("tkUSDC", "0xfaf334e157175ff676911adcf0964d7f54f2c424", 6, 2_000 * 10**6),
        ("tkWBTC", "0xf82ff0799448630eb56ce747db840a2e02cde4d8", 8, 2 * 10**6),
        ("cUSD", "0xe9b6e75c243b6100ffcb1c66e8f78f96feea727f", 18, 1_000 * 10**18),
    ]
)


def contract_addresses(
    tokens: tuple[FaucetToken, ...] = FAUCET_TOKENS,
) -> Mapping[str, ChecksumAddress]:
    """Read-only mapping of token label to contract address."""
    return MappingProxyType({token.label: token.contract for token in tokens})
