"""Address validation and normalization."""

import re

from eth_typing import ChecksumAddress
from web3 import Web3

from teko.errors import ValidationError

# Ethereum address pattern: 0x followed by 40 hex characters
ADDRESS_PATTERN = re.compile(r"^0x[0-9a-fA-F]{40}$")


def validate_address(address: str) -> bool:
    """Validate Ethereum address format.

    Parameters
    ----------
    address : str
        Address to validate.

    Returns
    -------
    bool
        True if valid Ethereum address format.
    """
    return bool(ADDRESS_PATTERN.match(address))


def to_checksum(address: str) -> ChecksumAddress:
    """Normalize an address to its EIP-55 checksummed form.

    Parameters
    ----------
    address : str
        Address in any letter case.

    Returns
    -------
    ChecksumAddress
        The canonical checksummed address.

    Raises
    ------
    ValidationError
        If the address is not 20 hex-encoded bytes.
    """
    if not isinstance(address, str) or not validate_address(address):
        raise ValidationError(f"Invalid address format: {address}", {"address": address})
    return Web3.to_checksum_address(address)


def same_address(a: str, b: str) -> bool:
    """Compare two addresses by their canonical form."""
    return to_checksum(a) == to_checksum(b)
