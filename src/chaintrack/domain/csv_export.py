"""Awaken CSV export domain service."""

import csv
import hashlib
import io
import json
from pathlib import Path
from typing import Any, Iterable, Optional, Sequence

from chaintrack.database.base import Database
from chaintrack.domain.entities import Transaction
from chaintrack.domain.export_history import ExportHistoryService
from chaintrack.logging_setup import get_logger
from chaintrack.utils.date_parser import format_export_date

logger = get_logger(__name__)

EXPORT_HEADERS = (
    "Date",
    "Received Quantity",
    "Received Currency",
    "Sent Quantity",
    "Sent Currency",
    "Fee Amount",
    "Fee Currency",
    "Notes",
    "Tag",
    "Transaction Hash",
)


def transaction_to_row(txn: Transaction) -> list[str]:
    """Convert a transaction to one CSV row in ``EXPORT_HEADERS`` order."""
    return [
        format_export_date(txn.date),
        txn.received_quantity,
        txn.received_currency,
        txn.sent_quantity,
        txn.sent_currency,
        txn.fee_amount,
        txn.fee_currency,
        f"{txn.notes} | Link: {txn.link}",
        txn.tag,
        txn.hash,
    ]


def render_csv(transactions: Iterable[Transaction]) -> str:
    """Render transactions as Awaken CSV text, header first."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(EXPORT_HEADERS)
    for txn in transactions:
        writer.writerow(transaction_to_row(txn))
    return buffer.getvalue()


def write_csv(transactions: Iterable[Transaction], path: str | Path) -> Path:
    """Write transactions to a CSV file, creating parent directories."""
    output = Path(path)
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(render_csv(transactions), encoding="utf-8")
    return output


def export_digest(transactions: Sequence[Transaction], blockchain: str, wallet_address: str) -> str:
    """Content digest of an export: ``0x`` + sha256 over canonical JSON.

    Notes, links and tags are not part of the digest.
    """
    payload = {
        "blockchain": blockchain,
        "wallet": wallet_address.lower(),
        "transactions": [
            {
                "hash": txn.hash,
                "date": txn.date.isoformat(),
                "received": [txn.received_quantity, txn.received_currency],
                "sent": [txn.sent_quantity, txn.sent_currency],
                "fee": [txn.fee_amount, txn.fee_currency],
                "type": txn.type.value,
            }
            for txn in transactions
        ],
    }
    canonical = json.dumps(payload, sort_keys=True, separators=(",", ":"))
    return "0x" + hashlib.sha256(canonical.encode("utf-8")).hexdigest()


class CSVExportService:
    """Service for exporting transactions as Awaken CSV."""

    def __init__(self, db: Optional[Database] = None):
        """Initialize CSV export service.

        Args:
            db: Database used to record export history. Without one, exports
                are not recorded.
        """
        self.db = db
        self.history_service = ExportHistoryService(db) if db is not None else None

    def export(
        self,
        transactions: Sequence[Transaction],
        blockchain: str,
        wallet_address: str,
        output_path: Optional[str | Path] = None,
    ) -> dict[str, Any]:
        """Export transactions.

        Args:
            transactions: Transactions in the order they should be written
            blockchain: Chain key
            wallet_address: Address whose history is exported
            output_path: CSV destination; None renders to a string only

        Returns:
            Dict with export results:
            - csv: rendered CSV text
            - path: written path, or None
            - digest: content digest
            - export: recorded ExportRecord, or None without a database
        """
        text = render_csv(transactions)
        path = None
        if output_path is not None:
            path = write_csv(transactions, output_path)
            logger.info("Wrote %d rows to %s", len(transactions), path)

        digest = export_digest(transactions, blockchain, wallet_address)

        record = None
        if self.history_service is not None:
            record = self.history_service.record_export(
                blockchain=blockchain,
                wallet_address=wallet_address,
                transaction_count=len(transactions),
                digest=digest,
                file_path=str(path) if path is not None else None,
            )

        return {"csv": text, "path": path, "digest": digest, "export": record}
