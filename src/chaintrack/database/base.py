"""Abstract database interface."""

from abc import ABC, abstractmethod
from typing import Optional

from chaintrack.domain.entities import ExportRecord


class Database(ABC):
    """Abstract database interface for chaintrack."""

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    # Export history operations
    @abstractmethod
    def create_export_record(
        self,
        blockchain: str,
        wallet_address: str,
        transaction_count: int,
        digest: str,
        file_path: Optional[str] = None,
    ) -> int:
        """Record a CSV export. Returns export ID."""
        pass

    @abstractmethod
    def get_export_record(self, export_id: int) -> Optional[ExportRecord]:
        """Get export record by ID."""
        pass

    @abstractmethod
    def list_export_records(
        self,
        blockchain: Optional[str] = None,
        wallet_address: Optional[str] = None,
    ) -> list[ExportRecord]:
        """List export records, newest first, optionally filtered."""
        pass
