"""Domain model entities for chaintrack.

Pure data classes: the canonical ``Transaction`` emitted by the builder, the
typed raw records produced by the chain adapters, and the export history
entry. All are frozen; a ``Transaction`` is built once per raw record and
never mutated afterwards.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional


class TransactionStatus(str, Enum):
    """Outcome of a transaction as reported by the chain."""

    SUCCESS = "Success"
    FAILED = "Failed"
    PENDING = "Pending"
    UNKNOWN = "Unknown"


class ActionType(str, Enum):
    """Coarse category used by the table view and filters."""

    SEND = "send"
    RECEIVE = "receive"
    SWAP = "swap"
    CONTRACT = "contract_interaction"
    UNKNOWN = "unknown"


class AccountingModel(str, Enum):
    """How a chain records value movement."""

    ACCOUNT = "account"
    UTXO = "utxo"
    COIN = "coin"


@dataclass(frozen=True)
class Transaction:
    """Canonical transaction entity."""

    id: str
    date: datetime
    hash: str
    notes: str
    status: TransactionStatus
    type: ActionType
    link: str
    received_quantity: str = ""
    received_currency: str = ""
    sent_quantity: str = ""
    sent_currency: str = ""
    fee_amount: str = ""
    fee_currency: str = ""
    tag: str = ""
    intent: str = ""


@dataclass(frozen=True)
class EvmRecord:
    """Explorer ``txlist``/``tokentx`` item for an account-based chain.

    Numeric fields stay as the explorer's integer strings; the builder
    treats malformed values as zero.
    """

    hash: str
    from_address: str
    to_address: Optional[str]
    value: str
    input: str
    timestamp: str
    gas_used: str = ""
    gas_price: str = ""
    txreceipt_status: Optional[str] = None
    is_error: Optional[str] = None
    is_token_transfer: bool = False
    token_symbol: Optional[str] = None
    token_decimal: Optional[str] = None
    contract_address: Optional[str] = None


@dataclass(frozen=True)
class UtxoInput:
    """Reference to the output being spent."""

    previous_outpoint_hash: str
    previous_outpoint_index: int
    owner: Optional[str] = None


@dataclass(frozen=True)
class UtxoOutput:
    """Output of a UTXO transaction."""

    address: str
    amount: str


@dataclass(frozen=True)
class UtxoRecord:
    """Transaction from a UTXO chain explorer (Kaspa)."""

    transaction_id: str
    block_time: int
    is_accepted: bool
    subnetwork_id: str = "0"
    payload: Optional[str] = None
    inputs: tuple[UtxoInput, ...] = field(default_factory=tuple)
    outputs: tuple[UtxoOutput, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class CoinInput:
    """Coin input of a Fuel transaction."""

    owner: str
    amount: str
    asset_id: Optional[str] = None


@dataclass(frozen=True)
class CoinOutput:
    """Coin or change output of a Fuel transaction."""

    to: str
    amount: str
    asset_id: Optional[str] = None


@dataclass(frozen=True)
class CoinRecord:
    """Node from a Fuel ``transactionsByOwner`` query."""

    id: str
    time: Optional[datetime]
    succeeded: bool = False
    failure_reason: Optional[str] = None
    inputs: tuple[CoinInput, ...] = field(default_factory=tuple)
    outputs: tuple[CoinOutput, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class ExportRecord:
    """Export history entry."""

    id: int
    blockchain: str
    wallet_address: str
    transaction_count: int
    digest: str
    file_path: Optional[str]
    created_at: datetime
