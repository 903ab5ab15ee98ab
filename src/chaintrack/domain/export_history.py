"""Export history domain service."""

from typing import Any, Optional

from chaintrack.database.base import Database
from chaintrack.domain.entities import ExportRecord
from chaintrack.domain.errors import NotFoundError, ValidationError, export_not_found
from chaintrack.logging_setup import get_logger

logger = get_logger(__name__)


class ExportHistoryService:
    """Service for recording and querying CSV exports."""

    def __init__(self, db: Database):
        """Initialize export history service.

        Args:
            db: Database instance
        """
        self.db = db

    def record_export(
        self,
        blockchain: str,
        wallet_address: str,
        transaction_count: int,
        digest: str,
        file_path: Optional[str] = None,
    ) -> ExportRecord:
        """Record a completed export.

        Args:
            blockchain: Chain key the export was built for
            wallet_address: Address whose history was exported
            transaction_count: Number of rows written
            digest: Content digest of the exported transactions
            file_path: Where the CSV was written, if anywhere

        Returns:
            Created ExportRecord

        Raises:
            ValidationError: If the count is negative or the digest is empty
        """
        if transaction_count < 0:
            raise ValidationError("Transaction count cannot be negative")
        if not digest:
            raise ValidationError("Export digest cannot be empty")

        export_id = self.db.create_export_record(
            blockchain=blockchain,
            wallet_address=wallet_address,
            transaction_count=transaction_count,
            digest=digest,
            file_path=file_path,
        )
        logger.info("Recorded export %d: %d %s transactions", export_id, transaction_count, blockchain)
        return self.get_export(export_id)

    def get_export(self, export_id: int) -> ExportRecord:
        """Get an export by ID.

        Raises:
            NotFoundError: If the export doesn't exist
        """
        record = self.db.get_export_record(export_id)
        if record is None:
            raise NotFoundError(export_not_found(export_id))
        return record

    def list_exports(
        self, blockchain: Optional[str] = None, wallet_address: Optional[str] = None
    ) -> list[ExportRecord]:
        """List exports, newest first."""
        return self.db.list_export_records(blockchain=blockchain, wallet_address=wallet_address)

    def summarize(
        self, blockchain: Optional[str] = None, wallet_address: Optional[str] = None
    ) -> dict[str, Any]:
        """Summarize export history.

        Returns:
            Dict with:
            - exports: number of exports
            - transactions: total transactions exported
            - by_chain: export count per chain key
        """
        records = self.list_exports(blockchain=blockchain, wallet_address=wallet_address)
        by_chain: dict[str, int] = {}
        for record in records:
            by_chain[record.blockchain] = by_chain.get(record.blockchain, 0) + 1
        return {
            "exports": len(records),
            "transactions": sum(record.transaction_count for record in records),
            "by_chain": dict(sorted(by_chain.items())),
        }
