"""Direction and net-flow resolution.

Each accounting model answers "did the user send or receive, and how much"
differently:

- account chains compare the record's ``from`` with the user address,
- UTXO chains sum outputs paid to the user against outputs paid to others,
- coin-ownership chains (Fuel) net the user's spent inputs against the
  outputs paid back to them.

UTXO change policy
------------------
When a UTXO transaction pays others *and* returns change to the user, the
default ``UtxoChangePolicy.COLLAPSE_TO_SEND`` reports a single send of the
amount paid to others and drops the change.
``UtxoChangePolicy.REPORT_CHANGE`` keeps the change as a separate receive
leg.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Collection, Iterable, Mapping, Optional

from chaintrack.domain.entities import CoinRecord, EvmRecord, UtxoRecord
from chaintrack.domain.errors import OutpointLookupError
from chaintrack.logging_setup import get_logger
from chaintrack.utils.amount_parser import parse_minor_units

logger = get_logger(__name__)

# (previous_outpoint_hash, previous_outpoint_index) -> amount, or None if untraced
OutpointLookup = Callable[[str, int], Optional[int]]


class Direction(str, Enum):
    """Which way value moved from the user's point of view."""

    SENT = "sent"
    RECEIVED = "received"
    NONE = "none"


class UtxoChangePolicy(str, Enum):
    """How change returned to the sender is reported."""

    COLLAPSE_TO_SEND = "collapse_to_send"
    REPORT_CHANGE = "report_change"


@dataclass(frozen=True)
class DirectionResult:
    """Resolved direction with minor-unit amounts."""

    direction: Direction
    sent_amount: int = 0
    received_amount: int = 0

    @property
    def is_sender(self) -> bool:
        return self.direction == Direction.SENT


def same_address(left: Optional[str], right: Optional[str]) -> bool:
    """Case-insensitive address comparison; empty addresses never match."""
    if not left or not right:
        return False
    return left.strip().lower() == right.strip().lower()


def resolve_account_direction(record: EvmRecord, user_address: str) -> DirectionResult:
    """Resolve direction for an account-based (or token event) record.

    The user is the sender when they are the record's ``from``; otherwise the
    same value is seen as received.
    """
    amount = parse_minor_units(record.value)
    if same_address(record.from_address, user_address):
        return DirectionResult(Direction.SENT, sent_amount=amount)
    return DirectionResult(Direction.RECEIVED, received_amount=amount)


def _funded_by_others(record: UtxoRecord, user_address: str) -> bool:
    """True when input owners are known and none of them is the user."""
    owners = [spent.owner for spent in record.inputs if spent.owner]
    return bool(owners) and not any(same_address(owner, user_address) for owner in owners)


def resolve_utxo_direction(
    record: UtxoRecord,
    user_address: str,
    policy: UtxoChangePolicy = UtxoChangePolicy.COLLAPSE_TO_SEND,
) -> DirectionResult:
    """Resolve direction for a UTXO record from its outputs.

    A record that pays both the user and others is a send with change,
    unless its inputs name their owners and none of them is the user: then
    a counterparty paid the user and kept its own change.

    Args:
        record: Parsed UTXO record
        user_address: Address whose history is being exported
        policy: What to do with change when the user also paid others

    Returns:
        DirectionResult; ``received_amount`` on a SENT result is only set
        under ``UtxoChangePolicy.REPORT_CHANGE``
    """
    received_to_self = 0
    sent_to_others = 0
    for output in record.outputs:
        amount = parse_minor_units(output.amount)
        if same_address(output.address, user_address):
            received_to_self += amount
        else:
            sent_to_others += amount

    if sent_to_others > 0 and received_to_self == 0:
        return DirectionResult(Direction.SENT, sent_amount=sent_to_others)

    if sent_to_others == 0 and received_to_self > 0:
        return DirectionResult(Direction.RECEIVED, received_amount=received_to_self)

    if sent_to_others > 0 and received_to_self > 0:
        if _funded_by_others(record, user_address):
            return DirectionResult(Direction.RECEIVED, received_amount=received_to_self)
        if policy == UtxoChangePolicy.REPORT_CHANGE:
            return DirectionResult(
                Direction.SENT, sent_amount=sent_to_others, received_amount=received_to_self
            )
        return DirectionResult(Direction.SENT, sent_amount=sent_to_others)

    return DirectionResult(Direction.NONE)


def _is_base_asset(asset_id: Optional[str], base_asset_ids: Collection[str]) -> bool:
    if not base_asset_ids or not asset_id:
        return True
    return asset_id.strip().lower() in base_asset_ids


def resolve_coin_direction(
    record: CoinRecord, user_address: str, base_asset_ids: Collection[str] = frozenset()
) -> DirectionResult:
    """Resolve the net flow of a coin-ownership (Fuel) record.

    Only coins of the native asset count. With ``base_asset_ids`` empty, or
    for coins without an asset id, every coin is treated as native.
    """
    spent = 0
    for coin in record.inputs:
        if not same_address(coin.owner, user_address):
            continue
        if _is_base_asset(coin.asset_id, base_asset_ids):
            spent += parse_minor_units(coin.amount)
        else:
            logger.debug("Ignoring non-native input asset %s in %s", coin.asset_id, record.id)

    returned = 0
    for coin in record.outputs:
        if not same_address(coin.to, user_address):
            continue
        if _is_base_asset(coin.asset_id, base_asset_ids):
            returned += parse_minor_units(coin.amount)
        else:
            logger.debug("Ignoring non-native output asset %s in %s", coin.asset_id, record.id)

    if returned > spent:
        return DirectionResult(Direction.RECEIVED, received_amount=returned - spent)
    if spent > returned:
        return DirectionResult(Direction.SENT, sent_amount=spent - returned)
    return DirectionResult(Direction.NONE)


def compute_utxo_fee(record: UtxoRecord, lookup: Optional[OutpointLookup]) -> Optional[int]:
    """Compute a UTXO fee as sum(inputs) - sum(outputs).

    Every input must be traced to the output it spends. If the lookup is
    missing, an input cannot be traced, the lookup fails, or the difference
    is not positive, the fee is left unreported (None).
    """
    if lookup is None or not record.inputs:
        return None

    total_inputs = 0
    for spent in record.inputs:
        try:
            amount = lookup(spent.previous_outpoint_hash, spent.previous_outpoint_index)
        except (OutpointLookupError, TimeoutError) as e:
            logger.warning(
                "Could not trace input %s:%s of %s: %s",
                spent.previous_outpoint_hash,
                spent.previous_outpoint_index,
                record.transaction_id,
                e,
            )
            return None
        if amount is None:
            logger.warning(
                "Input %s:%s of %s is untraceable; fee omitted",
                spent.previous_outpoint_hash,
                spent.previous_outpoint_index,
                record.transaction_id,
            )
            return None
        total_inputs += amount

    total_outputs = sum(parse_minor_units(output.amount) for output in record.outputs)
    fee = total_inputs - total_outputs
    return fee if fee > 0 else None


def outpoint_lookup_from_records(records: Iterable[UtxoRecord]) -> OutpointLookup:
    """Build an outpoint lookup over previously fetched UTXO records."""
    by_id: Mapping[str, UtxoRecord] = {record.transaction_id: record for record in records}

    def lookup(previous_hash: str, index: int) -> Optional[int]:
        previous = by_id.get(previous_hash)
        if previous is None or not 0 <= index < len(previous.outputs):
            return None
        return parse_minor_units(previous.outputs[index].amount)

    return lookup
