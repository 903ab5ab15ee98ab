"""Chain adapters: explorer JSON to typed raw records."""

from typing import Any, Callable, Mapping

from chaintrack.adapters.evm import parse_evm_record, validate_evm_address
from chaintrack.adapters.fuel import parse_fuel_record, validate_fuel_address
from chaintrack.adapters.kaspa import (
    normalize_kaspa_address,
    parse_kaspa_record,
    validate_kaspa_address,
)
from chaintrack.domain.chains import ChainContext
from chaintrack.domain.entities import AccountingModel, CoinRecord, EvmRecord, UtxoRecord
from chaintrack.domain.errors import ValidationError

_PARSERS: Mapping[AccountingModel, Callable[[Mapping[str, Any]], Any]] = {
    AccountingModel.ACCOUNT: parse_evm_record,
    AccountingModel.UTXO: parse_kaspa_record,
    AccountingModel.COIN: parse_fuel_record,
}

_VALIDATORS: Mapping[AccountingModel, Callable[[str], bool]] = {
    AccountingModel.ACCOUNT: validate_evm_address,
    AccountingModel.UTXO: validate_kaspa_address,
    AccountingModel.COIN: validate_fuel_address,
}


def unwrap_records(payload: Any) -> list[Any]:
    """Extract the list of raw items from a saved explorer response.

    Accepts a bare JSON array, an Etherscan-style ``{"result": [...]}``
    envelope, or a Fuel GraphQL response
    (``{"data": {"transactionsByOwner": {"nodes": [...]}}}``).

    Raises:
        ValidationError: If no record list can be found
    """
    if isinstance(payload, list):
        return payload
    if isinstance(payload, Mapping):
        if isinstance(payload.get("result"), list):
            return payload["result"]
        data = payload.get("data")
        if isinstance(data, Mapping):
            connection = data.get("transactionsByOwner") or {}
            if isinstance(connection.get("nodes"), list):
                return connection["nodes"]
        if isinstance(payload.get("nodes"), list):
            return payload["nodes"]
    raise ValidationError("Expected a JSON array of records or an explorer response envelope")


def parse_record(chain: ChainContext, raw: Mapping[str, Any]) -> EvmRecord | UtxoRecord | CoinRecord:
    """Parse a raw explorer item with the adapter for the chain's model."""
    return _PARSERS[chain.model](raw)


def validate_address(chain: ChainContext, address: str) -> bool:
    """Check an address against the chain's address format."""
    return _VALIDATORS[chain.model](address)


def normalize_address(chain: ChainContext, address: str) -> str:
    """Canonical form of a user address for the chain."""
    if chain.model == AccountingModel.UTXO:
        return normalize_kaspa_address(address)
    return address.strip()


__all__ = [
    "normalize_address",
    "normalize_kaspa_address",
    "parse_evm_record",
    "parse_fuel_record",
    "parse_kaspa_record",
    "parse_record",
    "unwrap_records",
    "validate_address",
    "validate_evm_address",
    "validate_fuel_address",
    "validate_kaspa_address",
]
