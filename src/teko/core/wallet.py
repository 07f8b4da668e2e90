"""Wallet provider abstraction for signing transactions."""

import re
from abc import ABC, abstractmethod
from pathlib import Path

from eth_account import Account
from eth_account.signers.local import LocalAccount
from pydantic import SecretStr

from teko.errors import ValidationError

# 32-byte private key: 0x followed by 64 hex characters
PRIVATE_KEY_PATTERN = re.compile(r"^0x[a-fA-F0-9]{64}$")


def normalize_private_key(private_key: str) -> str:
    """Check a private key's format and add the 0x prefix if missing.

    Parameters
    ----------
    private_key : str
        Hex-encoded private key, with or without ``0x``.

    Returns
    -------
    str
        The 0x-prefixed private key.

    Raises
    ------
    ValidationError
        If the key is not 32 hex-encoded bytes.
    """
    key = private_key.strip()
    if not key.startswith("0x"):
        key = f"0x{key}"
    if not PRIVATE_KEY_PATTERN.match(key):
        raise ValidationError(
            "Invalid private key format. It should be a 64-character hexadecimal string."
        )
    return key


class WalletProvider(ABC):
    """Abstract wallet provider for signing transactions."""

    @abstractmethod
    def get_account(self) -> LocalAccount:
        """Get the wallet account for signing.

        Returns
        -------
        LocalAccount
            The account instance for transaction signing.
        """
        ...

    @property
    def address(self) -> str:
        """Get the wallet address.

        Returns
        -------
        str
            The checksummed wallet address.
        """
        return self.get_account().address


class EnvironmentWallet(WalletProvider):
    """Load private key from environment variable or file.

    Parameters
    ----------
    private_key : SecretStr, optional
        The private key as a SecretStr (from env var).
    private_key_file : str, optional
        Path to a file containing the private key.

    Raises
    ------
    ValueError
        If neither private_key nor private_key_file is provided.
    FileNotFoundError
        If private_key_file does not exist.
    ValidationError
        If the key is malformed.
    """

    def __init__(
        self,
        private_key: SecretStr | None = None,
        private_key_file: str | None = None,
    ):
        if private_key is not None:
            key = private_key.get_secret_value()
        elif private_key_file is not None:
            key_path = Path(private_key_file).expanduser()
            if not key_path.exists():
                raise FileNotFoundError(f"Private key file not found: {private_key_file}")
            key = key_path.read_text()
        else:
            raise ValueError("Either private_key or private_key_file must be provided")

        self._account = Account.from_key(normalize_private_key(key))

    def get_account(self) -> LocalAccount:
        return self._account
