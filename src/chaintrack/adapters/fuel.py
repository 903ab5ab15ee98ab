"""Adapter for Fuel GraphQL ``transactionsByOwner`` nodes."""

import re
from typing import Any, Iterable, Mapping

from chaintrack.domain.entities import CoinInput, CoinOutput, CoinRecord
from chaintrack.domain.errors import ValidationError
from chaintrack.utils.date_parser import parse_chain_time

_FUEL_HEX_RE = re.compile(r"^0x[a-fA-F0-9]{64}$")
_FUEL_BECH32_RE = re.compile(r"^fuel1[a-z0-9]{38,}$")


def validate_fuel_address(address: str) -> bool:
    """Accept a 32-byte 0x hex address or a ``fuel1`` bech32 address."""
    if not address:
        return False
    candidate = address.strip()
    return bool(_FUEL_HEX_RE.match(candidate) or _FUEL_BECH32_RE.match(candidate))


def _coins(
    items: Iterable[Mapping[str, Any]] | None, owner_key: str, where: str
) -> list[tuple[str, str, Any]]:
    # Contract inputs/outputs carry no owner or amount and are skipped.
    if items is not None and not isinstance(items, list):
        raise ValidationError(f"Expected a JSON array in {where}, got {type(items).__name__}")
    coins = []
    for item in items or ():
        if not isinstance(item, Mapping):
            raise ValidationError(f"Expected a JSON object in {where}, got {type(item).__name__}")
        owner = item.get(owner_key)
        amount = item.get("amount")
        if not owner or amount is None:
            continue
        coins.append((str(owner), str(amount), item.get("assetId")))
    return coins


def parse_fuel_record(raw: Mapping[str, Any]) -> CoinRecord:
    """Parse one Fuel transaction node into a CoinRecord.

    ``status.__typename`` decides success when present. Without it, a
    ``reason`` means failure and a bare ``time`` means success.

    Raises:
        ValidationError: If the node is not a JSON object
    """
    if not isinstance(raw, Mapping):
        raise ValidationError(f"Expected a JSON object, got {type(raw).__name__}")

    status = raw.get("status") or {}
    if not isinstance(status, Mapping):
        raise ValidationError(f"Expected a JSON object in status, got {type(status).__name__}")
    typename = status.get("__typename")
    failure_reason = status.get("reason") or None
    time = parse_chain_time(status.get("time"))

    if typename:
        succeeded = typename == "SuccessStatus"
    else:
        succeeded = failure_reason is None and time is not None

    return CoinRecord(
        id=str(raw.get("id") or "").strip(),
        time=time,
        succeeded=succeeded,
        failure_reason=failure_reason,
        inputs=tuple(
            CoinInput(owner=owner, amount=amount, asset_id=asset_id)
            for owner, amount, asset_id in _coins(raw.get("inputs"), "owner", "inputs")
        ),
        outputs=tuple(
            CoinOutput(to=to, amount=amount, asset_id=asset_id)
            for to, amount, asset_id in _coins(raw.get("outputs"), "to", "outputs")
        ),
    )
