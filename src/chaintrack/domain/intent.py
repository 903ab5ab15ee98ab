"""Transaction intent classification.

Account-based (EVM) records are classified by the 4-byte method selector at
the start of their call data. UTXO records have no call data, so they are
classified from structural signals (subnetwork id, payload).

The selector tables are a best-effort heuristic: a hit tells us which
function was called, not what it did.
"""

from enum import Enum
from types import MappingProxyType
from typing import Mapping

from chaintrack.domain.entities import EvmRecord, UtxoRecord
from chaintrack.logging_setup import get_logger

logger = get_logger(__name__)


class IntentKind(str, Enum):
    """Fine-grained intent of a transaction."""

    NATIVE_TRANSFER = "native_transfer"
    CONTRACT_CALL = "contract_call"
    CONTRACT_CREATION = "contract_creation"
    DATA_ATTACHMENT = "data_attachment"

    # ERC-20
    TOKEN_TRANSFER = "token_transfer"
    TOKEN_TRANSFER_FROM = "token_transferFrom"
    TOKEN_APPROVE = "token_approve"
    TOKEN_BALANCE_OF = "token_balanceOf"
    TOKEN_ALLOWANCE = "token_allowance"
    TOKEN_NAME = "token_name"
    TOKEN_SYMBOL = "token_symbol"
    TOKEN_DECIMALS = "token_decimals"
    TOKEN_MINT = "token_mint"
    TOKEN_BURN = "token_burn"

    # DEX
    SWAP = "swap"
    SWAP_EXACT_INPUT_SINGLE = "swap_exact_input_single"
    SWAP_EXACT_INPUT = "swap_exact_input"
    SWAP_EXACT_OUTPUT_SINGLE = "swap_exact_output_single"
    SWAP_EXACT_OUTPUT = "swap_exact_output"
    SWAP_EXACT_TOKENS_FOR_TOKENS = "swap_exact_tokens_for_tokens"
    SWAP_TOKENS_FOR_EXACT_TOKENS = "swap_tokens_for_exact_tokens"
    SWAP_EXACT_ETH_FOR_TOKENS = "swap_exact_eth_for_tokens"
    SWAP_TOKENS_FOR_EXACT_ETH = "swap_tokens_for_exact_eth"
    SWAP_EXACT_TOKENS_FOR_ETH = "swap_exact_tokens_for_eth"
    SWAP_ETH_FOR_EXACT_TOKENS = "swap_eth_for_exact_tokens"
    MULTICALL = "multicall"
    ADD_LIQUIDITY = "add_liquidity"
    REMOVE_LIQUIDITY = "remove_liquidity"

    # Lending
    SUPPLY = "supply"
    BORROW = "borrow"
    REPAY = "repay"
    WITHDRAW = "withdraw"
    DEPOSIT = "deposit"

    # Staking and rewards
    STAKE = "stake"
    CLAIM = "claim"
    GET_REWARD = "get_reward"
    EXIT = "exit"
    CLAIM_REWARDS = "claim_rewards"
    MINT = "mint"

    # Chain specific
    TRANSFER_SUBSTRATE = "transfer_substrate"
    CELO_TRANSFER = "celo_transfer"
    GOVERNANCE_PROPOSE = "governance_propose"
    GOVERNANCE_VOTE = "governance_vote"


SelectorTable = Mapping[str, IntentKind]


def build_selector_table(*tables: Mapping[str, IntentKind]) -> SelectorTable:
    """Merge selector tables left to right into a read-only mapping.

    Later tables override earlier ones, so chain overlays are passed after
    ``BASE_SELECTORS``.
    """
    merged: dict[str, IntentKind] = {}
    for table in tables:
        for selector, kind in table.items():
            merged[selector.lower()] = kind
    return MappingProxyType(merged)


# ERC-20 and Uniswap V2/V3 router methods shared by every EVM chain.
BASE_SELECTORS = build_selector_table(
    {
        "0xa9059cbb": IntentKind.TOKEN_TRANSFER,
        "0x23b872dd": IntentKind.TOKEN_TRANSFER_FROM,
        "0x095ea7b3": IntentKind.TOKEN_APPROVE,
        "0x70a08231": IntentKind.TOKEN_BALANCE_OF,
        "0xdd62ed3e": IntentKind.TOKEN_ALLOWANCE,
        "0x06fdde03": IntentKind.TOKEN_NAME,
        "0x95d89b41": IntentKind.TOKEN_SYMBOL,
        "0x313ce567": IntentKind.TOKEN_DECIMALS,
        "0x40c10f19": IntentKind.TOKEN_MINT,
        "0x42966c68": IntentKind.TOKEN_BURN,
        # Uniswap V3 SwapRouter
        "0x414bf389": IntentKind.SWAP_EXACT_INPUT_SINGLE,
        "0xc04b8d59": IntentKind.SWAP_EXACT_INPUT,
        "0xdb3e2198": IntentKind.SWAP_EXACT_OUTPUT_SINGLE,
        "0xf28c0498": IntentKind.SWAP_EXACT_OUTPUT,
        # Uniswap SwapRouter02
        "0x04e45aaf": IntentKind.SWAP_EXACT_INPUT_SINGLE,
        "0xb858183f": IntentKind.SWAP_EXACT_INPUT,
        "0x5023b4df": IntentKind.SWAP_EXACT_OUTPUT_SINGLE,
        "0x09b81346": IntentKind.SWAP_EXACT_OUTPUT,
        "0x128acb08": IntentKind.SWAP,
        "0xac9650d8": IntentKind.MULTICALL,
        "0x5ae401dc": IntentKind.MULTICALL,
        # Uniswap V2 router
        "0x38ed1739": IntentKind.SWAP_EXACT_TOKENS_FOR_TOKENS,
        "0x8803dbee": IntentKind.SWAP_TOKENS_FOR_EXACT_TOKENS,
        "0x7ff36ab5": IntentKind.SWAP_EXACT_ETH_FOR_TOKENS,
        "0x4a25d94a": IntentKind.SWAP_TOKENS_FOR_EXACT_ETH,
        "0x18cbafe5": IntentKind.SWAP_EXACT_TOKENS_FOR_ETH,
        "0xfb3bdb41": IntentKind.SWAP_ETH_FOR_EXACT_TOKENS,
        "0xe8e33700": IntentKind.ADD_LIQUIDITY,
        "0xf305d719": IntentKind.ADD_LIQUIDITY,
        "0xbaa2abde": IntentKind.REMOVE_LIQUIDITY,
        "0x02751cec": IntentKind.REMOVE_LIQUIDITY,
        # Uniswap V3 position manager
        "0x88316456": IntentKind.ADD_LIQUIDITY,
        "0x219f5d17": IntentKind.ADD_LIQUIDITY,
        "0x0c49ccbe": IntentKind.REMOVE_LIQUIDITY,
    }
)

# Aave-style lending pools, WETH wrappers and staking reward contracts.
DEFI_SELECTORS = build_selector_table(
    {
        "0x617ba037": IntentKind.SUPPLY,
        "0xa415bcad": IntentKind.BORROW,
        "0x573ade81": IntentKind.REPAY,
        "0x69328dec": IntentKind.WITHDRAW,
        "0x2e1a7d4d": IntentKind.WITHDRAW,
        "0xe8eda9df": IntentKind.DEPOSIT,
        "0xd0e30db0": IntentKind.DEPOSIT,
        "0xa694fc3a": IntentKind.STAKE,
        "0x4e71d92d": IntentKind.CLAIM,
        "0x3d18b912": IntentKind.GET_REWARD,
        "0xe9fad8ee": IntentKind.EXIT,
    }
)

# Substrate-backed EVM chains (Creditcoin, Humanity Protocol).
SUBSTRATE_EVM_SELECTORS = build_selector_table(
    {
        "0xddde0930": IntentKind.TRANSFER_SUBSTRATE,
        "0x469451e0": IntentKind.CLAIM,
        "0x6a627842": IntentKind.MINT,
        "0x9012c4a8": IntentKind.CLAIM_REWARDS,
        "0x751fd179": IntentKind.STAKE,
    }
)

CELO_SELECTORS = build_selector_table(
    {
        "0x00f55d9d": IntentKind.CELO_TRANSFER,
        "0x7d5e81e2": IntentKind.GOVERNANCE_PROPOSE,
        "0x56781388": IntentKind.GOVERNANCE_VOTE,
        "0x7b3c71d3": IntentKind.GOVERNANCE_VOTE,
    }
)

_SWAP_KINDS = frozenset(kind.value for kind in IntentKind if kind.value.startswith("swap"))
_TRANSFER_KINDS = frozenset(
    {
        IntentKind.NATIVE_TRANSFER.value,
        IntentKind.TOKEN_TRANSFER.value,
        IntentKind.DATA_ATTACHMENT.value,
    }
)

_ZERO_SUBNETWORK_IDS = frozenset({"", "0"})


def method_selector(call_data: str | None) -> str:
    """Return the lower-cased ``0x`` + 8 hex char selector of call data."""
    return (call_data or "0x")[:10].lower()


def has_call_data(call_data: str | None) -> bool:
    """True when call data carries anything beyond the ``0x`` prefix."""
    return bool(call_data) and call_data != "0x" and len(call_data) > 2


def classify_evm_intent(record: EvmRecord, selectors: SelectorTable = BASE_SELECTORS) -> IntentKind:
    """Classify an account-based record.

    Decision order: no recipient means contract creation, empty call data
    means a native transfer, otherwise the method selector is looked up with
    ``contract_call`` as the fallback. Token event records fall back to
    ``token_transfer`` instead, since the event itself is a token movement.
    """
    if not record.to_address:
        return IntentKind.CONTRACT_CREATION

    fallback = IntentKind.TOKEN_TRANSFER if record.is_token_transfer else IntentKind.CONTRACT_CALL

    if not has_call_data(record.input):
        if record.is_token_transfer:
            return IntentKind.TOKEN_TRANSFER
        return IntentKind.NATIVE_TRANSFER

    selector = method_selector(record.input)
    kind = selectors.get(selector)
    if kind is None:
        logger.debug("Unknown method selector %s in %s", selector, record.hash)
        return fallback
    return kind


def is_zero_subnetwork(subnetwork_id: str | None) -> bool:
    """True for the native (transfer) subnetwork id: empty, "0" or all zeros."""
    value = (subnetwork_id or "").strip()
    return value in _ZERO_SUBNETWORK_IDS or set(value) == {"0"}


def classify_utxo_intent(record: UtxoRecord) -> IntentKind:
    """Classify a UTXO record from its structure."""
    if not is_zero_subnetwork(record.subnetwork_id):
        return IntentKind.CONTRACT_CALL
    if record.payload:
        return IntentKind.DATA_ATTACHMENT
    return IntentKind.NATIVE_TRANSFER


def classify_coin_intent(moves_value: bool) -> IntentKind:
    """Classify a coin-model (Fuel) record from whether the user's balance moved."""
    return IntentKind.NATIVE_TRANSFER if moves_value else IntentKind.CONTRACT_CALL


def classify_intent(
    record: EvmRecord | UtxoRecord, selectors: SelectorTable = BASE_SELECTORS
) -> IntentKind:
    """Classify an EVM or UTXO record."""
    if isinstance(record, UtxoRecord):
        return classify_utxo_intent(record)
    return classify_evm_intent(record, selectors)


def kind_value(kind: str | IntentKind) -> str:
    """Return the plain string of an intent kind."""
    return kind.value if isinstance(kind, IntentKind) else (kind or "")


def is_swap(kind: str) -> bool:
    """True for any DEX swap variant."""
    return kind_value(kind) in _SWAP_KINDS


def is_transfer(kind: str) -> bool:
    """True for plain native, token or data-carrying transfers."""
    return kind_value(kind) in _TRANSFER_KINDS
