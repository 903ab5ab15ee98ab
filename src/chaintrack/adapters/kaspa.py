"""Adapter for the Kaspa REST API (``api.kaspa.org``).

The API has answered with both snake_case and camelCase keys over time, so
every field is looked up under either spelling.
"""

import re
from typing import Any, Iterable, Mapping

from chaintrack.domain.entities import UtxoInput, UtxoOutput, UtxoRecord
from chaintrack.domain.errors import ValidationError
from chaintrack.utils.amount_parser import parse_minor_units

KASPA_ADDRESS_PREFIX = "kaspa:"

_KASPA_BODY_RE = re.compile(r"^[a-z0-9]+$")


def validate_kaspa_address(address: str) -> bool:
    """Check the ``kaspa:`` prefix and the shape of the bech32 body."""
    if not address:
        return False
    lowered = address.strip().lower()
    if not lowered.startswith(KASPA_ADDRESS_PREFIX):
        return False
    body = lowered[len(KASPA_ADDRESS_PREFIX):]
    return _KASPA_BODY_RE.match(body) is not None and 50 <= len(body) <= 70


def normalize_kaspa_address(address: str) -> str:
    """Lower-case an address and add the ``kaspa:`` prefix when missing."""
    lowered = address.strip().lower()
    if lowered.startswith(KASPA_ADDRESS_PREFIX):
        return lowered
    return KASPA_ADDRESS_PREFIX + lowered


def _first(raw: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        value = raw.get(key)
        if value is not None:
            return value
    return None


def _require_list(items: Any, where: str) -> list[Any]:
    if items is None:
        return []
    if not isinstance(items, list):
        raise ValidationError(f"Expected a JSON array in {where}, got {type(items).__name__}")
    return items


def _require_object(item: Any, where: str) -> Mapping[str, Any]:
    if not isinstance(item, Mapping):
        raise ValidationError(f"Expected a JSON object in {where}, got {type(item).__name__}")
    return item


def _parse_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() == "true"
    return bool(value)


def _parse_inputs(items: Iterable[Mapping[str, Any]] | None) -> tuple[UtxoInput, ...]:
    inputs = []
    for item in _require_list(items, "inputs"):
        item = _require_object(item, "inputs")
        owner = _first(item, "previous_outpoint_address", "previousOutpointAddress", "owner")
        inputs.append(
            UtxoInput(
                previous_outpoint_hash=str(
                    _first(item, "previous_outpoint_hash", "previousOutpointHash") or ""
                ),
                previous_outpoint_index=parse_minor_units(
                    _first(item, "previous_outpoint_index", "previousOutpointIndex")
                ),
                owner=str(owner).lower() if owner else None,
            )
        )
    return tuple(inputs)


def _parse_outputs(items: Iterable[Mapping[str, Any]] | None) -> tuple[UtxoOutput, ...]:
    outputs = []
    for item in _require_list(items, "outputs"):
        item = _require_object(item, "outputs")
        address = _first(item, "script_public_key_address", "scriptPublicKeyAddress") or ""
        amount = _first(item, "amount", "value")
        outputs.append(
            UtxoOutput(
                address=str(address).lower(),
                amount="0" if amount is None else str(amount),
            )
        )
    return tuple(outputs)


def parse_kaspa_record(raw: Mapping[str, Any]) -> UtxoRecord:
    """Parse one Kaspa API transaction into a UtxoRecord.

    Raises:
        ValidationError: If the item is not a JSON object
    """
    if not isinstance(raw, Mapping):
        raise ValidationError(f"Expected a JSON object, got {type(raw).__name__}")

    block_time = _first(raw, "block_time", "blockTime", "accepting_block_time")
    subnetwork_id = _first(raw, "subnetwork_id", "subnetworkId")

    return UtxoRecord(
        transaction_id=str(_first(raw, "transaction_id", "transactionId") or "").strip(),
        block_time=parse_minor_units(block_time),
        is_accepted=_parse_bool(_first(raw, "is_accepted", "isAccepted")),
        subnetwork_id="0" if subnetwork_id is None else str(subnetwork_id),
        payload=_first(raw, "payload") or None,
        inputs=_parse_inputs(raw.get("inputs")),
        outputs=_parse_outputs(raw.get("outputs")),
    )
