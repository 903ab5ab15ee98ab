"""Transaction filtering."""

from dataclasses import dataclass, field
from datetime import UTC, date, datetime, time
from typing import Iterable, Optional

from chaintrack.domain.entities import ActionType, Transaction


@dataclass(frozen=True)
class TransactionFilter:
    """Filter criteria; empty criteria match everything.

    Date bounds are whole UTC days, both inclusive.
    """

    types: frozenset[ActionType] = field(default_factory=frozenset)
    date_from: Optional[date] = None
    date_to: Optional[date] = None
    asset: Optional[str] = None

    def matches(self, txn: Transaction) -> bool:
        if self.types and txn.type not in self.types:
            return False

        when = txn.date if txn.date.tzinfo else txn.date.replace(tzinfo=UTC)
        if self.date_from and when < datetime.combine(self.date_from, time.min, UTC):
            return False
        if self.date_to and when > datetime.combine(self.date_to, time.max, UTC):
            return False

        if self.asset:
            needle = self.asset.strip().lower()
            currencies = (txn.received_currency, txn.sent_currency, txn.fee_currency)
            if not any(needle in currency.lower() for currency in currencies):
                return False

        return True


def apply_filters(
    transactions: Iterable[Transaction], criteria: Optional[TransactionFilter]
) -> list[Transaction]:
    """Return the transactions matching ``criteria``, keeping their order."""
    if criteria is None:
        return list(transactions)
    return [txn for txn in transactions if criteria.matches(txn)]
