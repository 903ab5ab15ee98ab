"""SQLAlchemy models for chaintrack database."""

from datetime import UTC, datetime

from sqlalchemy import Column, DateTime, Index, Integer, String, create_engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker

Base = declarative_base()


class ExportRecord(Base):
    """CSV export history model."""

    __tablename__ = "export_history"

    id = Column(Integer, primary_key=True)
    blockchain = Column(String, nullable=False)
    wallet_address = Column(String, nullable=False)
    transaction_count = Column(Integer, nullable=False)
    digest = Column(String, nullable=False)
    file_path = Column(String, nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    __table_args__ = (Index("idx_export_history_created_at", "created_at"),)


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
