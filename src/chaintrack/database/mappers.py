"""Mapper functions to convert SQLAlchemy models to domain entities."""

from datetime import UTC

from chaintrack.domain import entities as domain
from chaintrack.database.models import ExportRecord as ORMExportRecord


def export_record_to_domain(orm_record: ORMExportRecord) -> domain.ExportRecord:
    """Convert SQLAlchemy ExportRecord model to domain ExportRecord entity.

    SQLite drops timezone information, so naive timestamps are read back
    as UTC.
    """
    created_at = orm_record.created_at
    if created_at is not None and created_at.tzinfo is None:
        created_at = created_at.replace(tzinfo=UTC)
    return domain.ExportRecord(
        id=orm_record.id,
        blockchain=orm_record.blockchain,
        wallet_address=orm_record.wallet_address,
        transaction_count=orm_record.transaction_count,
        digest=orm_record.digest,
        file_path=orm_record.file_path,
        created_at=created_at,
    )
