"""
Owner lookup table, loaded once before pagination starts
"""

from typing import Dict
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from models.profile import Profile
from schemas.snippets import OwnerProfile
from core.exceptions import DatabaseError
import logging

logger = logging.getLogger(__name__)


async def load_owner_profiles(db: AsyncSession) -> Dict[str, OwnerProfile]:
    """
    Read the whole profile table into a map keyed by snippets_api_id.

    Raises:
        DatabaseError: If the query fails; there is no partial result
    """
    try:
        result = await db.execute(
            select(Profile.user_id, Profile.snippets_api_id, Profile.username)
        )
        rows = result.all()
    except (SQLAlchemyError, OSError) as e:
        raise DatabaseError(
            "Failed to load owner profiles",
            context={"operation": "SELECT", "table_name": Profile.__tablename__},
            original_exception=e
        )

    profiles = {
        row.snippets_api_id: OwnerProfile(
            user_id=row.user_id,
            api_id=row.snippets_api_id,
            username=row.username
        )
        for row in rows
    }

    logger.info(f"Loaded {len(profiles)} owner profiles")
    return profiles
