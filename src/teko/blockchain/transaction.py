"""Transaction value types shared by the provider, signer and executor."""

from dataclasses import dataclass, field
from enum import Enum

from eth_typing import ChecksumAddress
from web3 import Web3
from web3.types import TxParams


@dataclass(frozen=True)
class GasParams:
    """Fee parameters for a transaction.

    Either both EIP-1559 fields are set, or only ``gas_price``.
    """

    max_fee_per_gas: int | None = None
    max_priority_fee_per_gas: int | None = None
    gas_price: int | None = None

    @classmethod
    def eip1559(cls, max_fee_per_gas: int, max_priority_fee_per_gas: int) -> "GasParams":
        return cls(max_fee_per_gas=max_fee_per_gas, max_priority_fee_per_gas=max_priority_fee_per_gas)

    @classmethod
    def legacy(cls, gas_price: int) -> "GasParams":
        return cls(gas_price=gas_price)

    @property
    def is_eip1559(self) -> bool:
        return self.max_fee_per_gas is not None and self.max_priority_fee_per_gas is not None

    def as_tx_fields(self) -> TxParams:
        """Render the fee fields using web3 transaction keys."""
        if self.is_eip1559:
            return {
                "maxFeePerGas": self.max_fee_per_gas,
                "maxPriorityFeePerGas": self.max_priority_fee_per_gas,
            }
        return {"gasPrice": self.gas_price}


@dataclass(frozen=True)
class TransactionRequest:
    """An unsigned contract call. Built fresh for every attempt."""

    to: ChecksumAddress
    data: bytes
    from_: ChecksumAddress
    chain_id: int
    value: int = 0
    gas_limit: int | None = None
    gas_params: GasParams | None = field(default=None)

    def to_tx_params(self, include_from: bool = True) -> TxParams:
        """Render the request as a web3 transaction dict.

        Parameters
        ----------
        include_from : bool
            Include the ``from`` field. Signing does not need it.

        Returns
        -------
        TxParams
            Transaction dict with only the fields that are set.
        """
        tx: TxParams = {
            "to": self.to,
            "data": Web3.to_hex(self.data),
            "value": self.value,
            "chainId": self.chain_id,
        }
        if include_from:
            tx["from"] = self.from_
        if self.gas_limit is not None:
            tx["gas"] = self.gas_limit
        if self.gas_params is not None:
            tx.update(self.gas_params.as_tx_fields())
        return tx


class TransactionStatus(str, Enum):
    """Receipt status of a mined transaction."""

    SUCCESS = "success"
    REVERTED = "reverted"


@dataclass(frozen=True)
class TransactionOutcome:
    """Terminal result of a confirmed transaction."""

    tx_hash: str
    status: TransactionStatus
    gas_used: int | None = None

    @property
    def succeeded(self) -> bool:
        return self.status is TransactionStatus.SUCCESS
