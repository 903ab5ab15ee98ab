"""Canonical transaction builder.

Turns one typed raw record plus the user's address into canonical
``Transaction`` entities: direction, intent, formatted amounts, coarse type,
status, fee, notes, tax tag and explorer link. Pure functions over immutable
inputs; safe to run concurrently across records.
"""

from datetime import UTC, datetime
from types import MappingProxyType
from typing import Optional

from chaintrack.domain.chains import ChainContext
from chaintrack.domain.direction import (
    Direction,
    DirectionResult,
    OutpointLookup,
    UtxoChangePolicy,
    compute_utxo_fee,
    resolve_account_direction,
    resolve_coin_direction,
    resolve_utxo_direction,
)
from chaintrack.domain.entities import (
    ActionType,
    CoinRecord,
    EvmRecord,
    Transaction,
    TransactionStatus,
    UtxoRecord,
)
from chaintrack.domain.errors import MissingIdentityError, ValidationError, missing_transaction_hash
from chaintrack.domain.intent import (
    IntentKind,
    classify_coin_intent,
    classify_evm_intent,
    classify_utxo_intent,
    is_swap,
    is_transfer,
    kind_value,
)
from chaintrack.domain.tax_labels import map_to_tax_label
from chaintrack.logging_setup import get_logger
from chaintrack.utils.amount_parser import format_amount, parse_minor_units
from chaintrack.utils.date_parser import from_unix_millis, from_unix_seconds

logger = get_logger(__name__)

RawRecord = EvmRecord | UtxoRecord | CoinRecord

NOTE_LABELS = MappingProxyType(
    {
        IntentKind.TOKEN_TRANSFER.value: "Token Transfer",
        IntentKind.TOKEN_TRANSFER_FROM.value: "Token Transfer From",
        IntentKind.TOKEN_APPROVE.value: "Token Approval",
        IntentKind.TOKEN_MINT.value: "Token Mint",
        IntentKind.TOKEN_BURN.value: "Token Burn",
        IntentKind.SWAP.value: "Swap",
        IntentKind.SWAP_EXACT_INPUT_SINGLE.value: "Swap (Exact Input Single)",
        IntentKind.SWAP_EXACT_INPUT.value: "Swap (Exact Input)",
        IntentKind.SWAP_EXACT_OUTPUT_SINGLE.value: "Swap (Exact Output Single)",
        IntentKind.SWAP_EXACT_OUTPUT.value: "Swap (Exact Output)",
        IntentKind.SWAP_EXACT_TOKENS_FOR_TOKENS.value: "Swap (Exact Tokens For Tokens)",
        IntentKind.SWAP_TOKENS_FOR_EXACT_TOKENS.value: "Swap (Tokens For Exact Tokens)",
        IntentKind.SWAP_EXACT_ETH_FOR_TOKENS.value: "Swap (Exact Native For Tokens)",
        IntentKind.SWAP_TOKENS_FOR_EXACT_ETH.value: "Swap (Tokens For Exact Native)",
        IntentKind.SWAP_EXACT_TOKENS_FOR_ETH.value: "Swap (Exact Tokens For Native)",
        IntentKind.SWAP_ETH_FOR_EXACT_TOKENS.value: "Swap (Native For Exact Tokens)",
        IntentKind.MULTICALL.value: "Multicall",
        IntentKind.ADD_LIQUIDITY.value: "Add Liquidity",
        IntentKind.REMOVE_LIQUIDITY.value: "Remove Liquidity",
        IntentKind.SUPPLY.value: "Supply",
        IntentKind.BORROW.value: "Borrow",
        IntentKind.REPAY.value: "Repay",
        IntentKind.WITHDRAW.value: "Withdraw",
        IntentKind.DEPOSIT.value: "Deposit",
        IntentKind.STAKE.value: "Stake",
        IntentKind.CLAIM.value: "Claim",
        IntentKind.GET_REWARD.value: "Get Reward",
        IntentKind.EXIT.value: "Exit",
        IntentKind.CLAIM_REWARDS.value: "Claim Rewards",
        IntentKind.MINT.value: "Mint",
        IntentKind.TRANSFER_SUBSTRATE.value: "Transfer Substrate",
        IntentKind.CELO_TRANSFER.value: "CELO Transfer",
        IntentKind.GOVERNANCE_PROPOSE.value: "Governance Proposal",
        IntentKind.GOVERNANCE_VOTE.value: "Governance Vote",
        IntentKind.CONTRACT_CREATION.value: "Contract Creation",
        IntentKind.CONTRACT_CALL.value: "Contract Interaction",
    }
)

_DEFAULT_TOKEN_DECIMALS = 18


def build_transactions(
    record: RawRecord,
    user_address: str,
    chain: ChainContext,
    *,
    index: int = 0,
    outpoint_lookup: Optional[OutpointLookup] = None,
    change_policy: UtxoChangePolicy = UtxoChangePolicy.COLLAPSE_TO_SEND,
) -> list[Transaction]:
    """Build every canonical transaction leg for one raw record.

    Most records produce one leg. A UTXO record under
    ``UtxoChangePolicy.REPORT_CHANGE`` that also returned change to the user
    produces a second, receive leg.

    Args:
        record: Typed record produced by a chain adapter
        user_address: Address whose history is being normalized
        chain: Chain settings (symbols, decimals, selectors, explorer)
        index: Position of the record in its batch, used in ``Transaction.id``
        outpoint_lookup: Resolves spent UTXO outputs for fee computation
        change_policy: How UTXO change is reported

    Returns:
        List of Transaction entities, primary leg first

    Raises:
        MissingIdentityError: If the record has no transaction hash
    """
    if isinstance(record, EvmRecord):
        _require_hash(record.hash, chain)
        return [_build_account_transaction(record, user_address, chain, index)]
    if isinstance(record, UtxoRecord):
        _require_hash(record.transaction_id, chain)
        return _build_utxo_transactions(
            record, user_address, chain, index, outpoint_lookup, change_policy
        )
    if isinstance(record, CoinRecord):
        _require_hash(record.id, chain)
        return [_build_coin_transaction(record, user_address, chain, index)]
    raise ValidationError(f"Unsupported record type: {type(record).__name__}")


def build_transaction(
    record: RawRecord,
    user_address: str,
    chain: ChainContext,
    *,
    index: int = 0,
    outpoint_lookup: Optional[OutpointLookup] = None,
    change_policy: UtxoChangePolicy = UtxoChangePolicy.COLLAPSE_TO_SEND,
) -> Transaction:
    """Build the primary canonical transaction for one raw record."""
    return build_transactions(
        record,
        user_address,
        chain,
        index=index,
        outpoint_lookup=outpoint_lookup,
        change_policy=change_policy,
    )[0]


def derive_action_type(intent: str | IntentKind, direction: Direction) -> ActionType:
    """Coarse type: swaps, then directional transfers, then contract interactions."""
    if is_swap(intent):
        return ActionType.SWAP
    if is_transfer(intent):
        if direction == Direction.SENT:
            return ActionType.SEND
        if direction == Direction.RECEIVED:
            return ActionType.RECEIVE
        return ActionType.UNKNOWN
    return ActionType.CONTRACT


def map_evm_status(record: EvmRecord, chain: ChainContext) -> TransactionStatus:
    """Map ``txreceipt_status`` (preferred) or ``isError`` to a status."""
    if record.txreceipt_status == "1":
        return TransactionStatus.SUCCESS
    if record.txreceipt_status == "0":
        return TransactionStatus.FAILED
    if record.is_error == "0":
        return TransactionStatus.SUCCESS
    if record.is_error == "1":
        return TransactionStatus.FAILED
    if chain.assume_success_without_receipt:
        return TransactionStatus.SUCCESS
    return TransactionStatus.UNKNOWN


def map_utxo_status(record: UtxoRecord) -> TransactionStatus:
    """Accepted UTXO transactions succeeded; the rest are still pending."""
    return TransactionStatus.SUCCESS if record.is_accepted else TransactionStatus.PENDING


def map_coin_status(record: CoinRecord) -> TransactionStatus:
    if record.failure_reason:
        return TransactionStatus.FAILED
    if record.succeeded:
        return TransactionStatus.SUCCESS
    if record.time is not None:
        return TransactionStatus.PENDING
    return TransactionStatus.UNKNOWN


def directional_note(is_sender: bool, symbol: str) -> str:
    return f"Sent {symbol}" if is_sender else f"Received {symbol}"


def _require_hash(tx_hash: Optional[str], chain: ChainContext) -> None:
    if not tx_hash or not str(tx_hash).strip():
        raise MissingIdentityError(missing_transaction_hash(chain.key))


def _normalize_token_symbol(symbol: Optional[str], chain: ChainContext) -> str:
    if not symbol:
        return "TOKEN"
    if symbol in chain.known_tokens.values():
        return symbol
    return symbol.upper()


def _token_decimals(raw: Optional[str]) -> int:
    if raw is None or str(raw).strip() == "":
        return _DEFAULT_TOKEN_DECIMALS
    text = str(raw).strip()
    if not text.isdigit():
        logger.debug("Malformed token decimals %r; using %d", raw, _DEFAULT_TOKEN_DECIMALS)
        return _DEFAULT_TOKEN_DECIMALS
    return int(text)


def _split_amount(
    quantity: str, currency: str, direction: Direction
) -> dict[str, str]:
    """Place a quantity into the sent or received pair."""
    if direction == Direction.SENT:
        return {"sent_quantity": quantity, "sent_currency": currency}
    if direction == Direction.RECEIVED:
        return {"received_quantity": quantity, "received_currency": currency}
    return {}


def _build_account_transaction(
    record: EvmRecord, user_address: str, chain: ChainContext, index: int
) -> Transaction:
    result = resolve_account_direction(record, user_address)
    intent = classify_evm_intent(record, chain.selectors)
    is_sender = result.is_sender

    known_symbol = None
    if record.is_token_transfer:
        currency = _normalize_token_symbol(record.token_symbol, chain)
        decimals = _token_decimals(record.token_decimal)
    else:
        currency = chain.native_symbol
        if intent == IntentKind.TOKEN_TRANSFER:
            known_symbol = chain.known_token_symbol(
                record.contract_address
            ) or chain.known_token_symbol(record.to_address)
            if known_symbol:
                currency = known_symbol
            elif chain.known_tokens:
                # transfer() call on a token outside the registry
                currency = "TOKEN"
        decimals = chain.native_decimals

    raw_amount = result.sent_amount if is_sender else result.received_amount
    action_type = derive_action_type(intent, result.direction)

    amounts: dict[str, str] = {}
    if action_type != ActionType.CONTRACT or raw_amount > 0:
        amounts = _split_amount(format_amount(raw_amount, decimals), currency, result.direction)

    fee: dict[str, str] = {}
    if is_sender and not record.is_token_transfer and record.gas_used and record.gas_price:
        fee_raw = parse_minor_units(record.gas_used) * parse_minor_units(record.gas_price)
        fee = {
            "fee_amount": format_amount(fee_raw, chain.native_decimals),
            "fee_currency": chain.native_symbol,
        }

    if record.is_token_transfer and record.token_symbol:
        notes = directional_note(is_sender, record.token_symbol)
    elif known_symbol:
        notes = directional_note(is_sender, known_symbol)
    elif intent == IntentKind.NATIVE_TRANSFER:
        notes = directional_note(is_sender, chain.native_symbol)
    else:
        notes = NOTE_LABELS.get(kind_value(intent)) or directional_note(is_sender, currency)

    return Transaction(
        id=f"{record.hash}_{index}",
        date=from_unix_seconds(record.timestamp),
        hash=record.hash,
        notes=notes,
        status=map_evm_status(record, chain),
        type=action_type,
        link=chain.link_for(record.hash),
        tag=map_to_tax_label(intent, intent == IntentKind.NATIVE_TRANSFER, is_sender),
        intent=kind_value(intent),
        **amounts,
        **fee,
    )


def _utxo_notes(
    intent: IntentKind, result: DirectionResult, chain: ChainContext
) -> str:
    symbol = chain.native_symbol
    if intent == IntentKind.NATIVE_TRANSFER:
        if result.direction == Direction.SENT:
            return f"Sent {format_amount(result.sent_amount, chain.native_decimals)} {symbol}"
        if result.direction == Direction.RECEIVED:
            return f"Received {format_amount(result.received_amount, chain.native_decimals)} {symbol}"
        return f"{symbol} Transfer"
    if intent == IntentKind.CONTRACT_CALL:
        return f"{chain.name} Contract Interaction"
    if intent == IntentKind.DATA_ATTACHMENT:
        return f"{symbol} with Data"
    return f"{chain.name} {kind_value(intent)}"


def _build_utxo_transactions(
    record: UtxoRecord,
    user_address: str,
    chain: ChainContext,
    index: int,
    outpoint_lookup: Optional[OutpointLookup],
    change_policy: UtxoChangePolicy,
) -> list[Transaction]:
    result = resolve_utxo_direction(record, user_address, change_policy)
    intent = classify_utxo_intent(record)
    is_sender = result.is_sender
    symbol = chain.native_symbol
    decimals = chain.native_decimals

    action_type = derive_action_type(intent, result.direction)

    amounts: dict[str, str] = {}
    if action_type in (ActionType.SEND, ActionType.RECEIVE):
        raw_amount = result.sent_amount if is_sender else result.received_amount
        amounts = _split_amount(format_amount(raw_amount, decimals), symbol, result.direction)

    fee: dict[str, str] = {}
    if is_sender:
        fee_raw = compute_utxo_fee(record, outpoint_lookup)
        if fee_raw is not None:
            fee = {"fee_amount": format_amount(fee_raw, decimals), "fee_currency": symbol}

    tag = ""
    if result.direction != Direction.NONE:
        tag = map_to_tax_label(intent, intent == IntentKind.NATIVE_TRANSFER, is_sender)

    date = from_unix_millis(record.block_time)
    status = map_utxo_status(record)
    link = chain.link_for(record.transaction_id)

    legs = [
        Transaction(
            id=f"{record.transaction_id}_{index}",
            date=date,
            hash=record.transaction_id,
            notes=_utxo_notes(intent, result, chain),
            status=status,
            type=action_type,
            link=link,
            tag=tag,
            intent=kind_value(intent),
            **amounts,
            **fee,
        )
    ]

    if is_sender and action_type == ActionType.SEND and result.received_amount > 0:
        change = format_amount(result.received_amount, decimals)
        legs.append(
            Transaction(
                id=f"{record.transaction_id}_{index}_1",
                date=date,
                hash=record.transaction_id,
                notes=f"Received {change} {symbol} change",
                status=status,
                type=ActionType.RECEIVE,
                link=link,
                received_quantity=change,
                received_currency=symbol,
                tag=map_to_tax_label(intent, intent == IntentKind.NATIVE_TRANSFER, False),
                intent=kind_value(intent),
            )
        )

    return legs


def _build_coin_transaction(
    record: CoinRecord, user_address: str, chain: ChainContext, index: int
) -> Transaction:
    result = resolve_coin_direction(record, user_address, chain.base_asset_ids)
    intent = classify_coin_intent(result.direction != Direction.NONE)
    is_sender = result.is_sender

    amounts: dict[str, str] = {}
    if result.direction != Direction.NONE:
        raw_amount = result.sent_amount if is_sender else result.received_amount
        amounts = _split_amount(
            format_amount(raw_amount, chain.native_decimals), chain.native_symbol, result.direction
        )
        notes = directional_note(is_sender, chain.native_symbol)
    else:
        notes = f"{chain.name} Contract Interaction"

    date = record.time
    if date is None:
        logger.warning("Fuel transaction %s has no timestamp; using epoch", record.id)
        date = datetime.fromtimestamp(0, UTC)

    return Transaction(
        id=f"{record.id}_{index}",
        date=date,
        hash=record.id,
        notes=notes,
        status=map_coin_status(record),
        type=derive_action_type(intent, result.direction),
        link=chain.link_for(record.id),
        tag=map_to_tax_label(intent, intent == IntentKind.NATIVE_TRANSFER, is_sender),
        intent=kind_value(intent),
        **amounts,
    )
