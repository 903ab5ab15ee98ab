"""Adapter for Blockscout/Etherscan-style account explorers.

Covers Creditcoin, Humanity Protocol and Celo. Both ``txlist`` and
``tokentx`` items are accepted; token items are recognised by an explicit
``isTokenTransfer`` flag or by the presence of ``tokenSymbol``.
"""

import re
from typing import Any, Mapping

from chaintrack.domain.entities import EvmRecord
from chaintrack.domain.errors import ValidationError

_EVM_ADDRESS_RE = re.compile(r"^0x[a-fA-F0-9]{40}$")


def validate_evm_address(address: str) -> bool:
    """Return True for a 0x-prefixed 20-byte hex address."""
    return bool(address) and _EVM_ADDRESS_RE.match(address.strip()) is not None


def _text(raw: Mapping[str, Any], key: str, default: str = "") -> str:
    value = raw.get(key)
    if value is None:
        return default
    return str(value).strip()


def _optional_text(raw: Mapping[str, Any], key: str) -> str | None:
    value = raw.get(key)
    if value is None or str(value).strip() == "":
        return None
    return str(value).strip()


def parse_evm_record(raw: Mapping[str, Any]) -> EvmRecord:
    """Parse one explorer transaction item into an EvmRecord.

    Args:
        raw: Decoded JSON object from the explorer's ``result`` array

    Returns:
        EvmRecord with numeric fields kept as strings

    Raises:
        ValidationError: If the item is not a JSON object
    """
    if not isinstance(raw, Mapping):
        raise ValidationError(f"Expected a JSON object, got {type(raw).__name__}")

    token_symbol = _optional_text(raw, "tokenSymbol")
    is_token_transfer = bool(raw.get("isTokenTransfer")) or token_symbol is not None

    return EvmRecord(
        hash=_text(raw, "hash"),
        from_address=_text(raw, "from"),
        to_address=_optional_text(raw, "to"),
        value=_text(raw, "value", "0"),
        input=_text(raw, "input", "0x"),
        timestamp=_text(raw, "timeStamp", "0"),
        gas_used=_text(raw, "gasUsed"),
        gas_price=_text(raw, "gasPrice"),
        txreceipt_status=_optional_text(raw, "txreceipt_status"),
        is_error=_optional_text(raw, "isError"),
        is_token_transfer=is_token_transfer,
        token_symbol=token_symbol,
        token_decimal=_optional_text(raw, "tokenDecimal"),
        contract_address=_optional_text(raw, "contractAddress"),
    )
