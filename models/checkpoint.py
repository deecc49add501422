from sqlalchemy import Column, Integer, String, DateTime, BigInteger
from datetime import datetime, timezone
from models.base import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class MigrationCheckpoint(Base):
    """
    Persisted pagination cursor.

    Purpose:
    - Resume the migration after the last committed page
    - Record how many documents have been processed so far

    Design:
    - One row per source (source_name)
    - checkpoint_value is the natural key (_id) of the last committed document
    - Written in the same transaction as the page it describes
    """
    __tablename__ = "migration_checkpoints"

    id = Column(Integer, primary_key=True, autoincrement=True)
    source_name = Column(String(100), nullable=False, unique=True)
    checkpoint_value = Column(String(255), nullable=True)
    records_processed = Column(BigInteger, nullable=False, default=0)

    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow)
