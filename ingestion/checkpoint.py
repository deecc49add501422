"""
Persisted pagination cursor for resume-after-crash
"""

from typing import Optional
from datetime import datetime, timezone
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from models.checkpoint import MigrationCheckpoint
from core.database import dialect_insert
from core.exceptions import CheckpointError
import logging

logger = logging.getLogger(__name__)


async def get_checkpoint(db: AsyncSession, source_name: str) -> Optional[MigrationCheckpoint]:
    """Retrieve the stored checkpoint for this source"""
    try:
        result = await db.execute(
            select(MigrationCheckpoint).where(MigrationCheckpoint.source_name == source_name)
        )
        return result.scalar_one_or_none()
    except SQLAlchemyError as e:
        raise CheckpointError(
            "Failed to read migration checkpoint",
            context={"source_name": source_name, "operation": "read"},
            original_exception=e
        )


async def stage_checkpoint(
    db: AsyncSession,
    source_name: str,
    checkpoint_value: str,
    records_processed: int
):
    """
    Upsert the checkpoint inside the caller's transaction.

    Does not commit: the checkpoint becomes visible together with the page
    rows it describes.
    """
    now = datetime.now(timezone.utc)
    insert = dialect_insert(db)

    stmt = insert(MigrationCheckpoint.__table__).values(
        source_name=source_name,
        checkpoint_value=checkpoint_value,
        records_processed=records_processed,
        created_at=now,
        updated_at=now,
    )
    stmt = stmt.on_conflict_do_update(
        index_elements=["source_name"],
        set_={
            "checkpoint_value": stmt.excluded.checkpoint_value,
            "records_processed": stmt.excluded.records_processed,
            "updated_at": stmt.excluded.updated_at,
        }
    )

    try:
        await db.execute(stmt)
    except SQLAlchemyError as e:
        raise CheckpointError(
            "Failed to write migration checkpoint",
            context={
                "source_name": source_name,
                "checkpoint_value": checkpoint_value,
                "operation": "write"
            },
            original_exception=e
        )

    logger.debug(f"Checkpoint {source_name} staged at {checkpoint_value!r} ({records_processed} records)")
