from sqlalchemy import Column, String
from models.base import Base, BigIntegerKey


class Profile(Base):
    """
    Owner lookup table, maintained outside the migration.

    snippets_api_id is the owner reference stored on every CouchDB document.
    The migration only reads this table.
    """
    __tablename__ = "profile"

    user_id = Column(BigIntegerKey, primary_key=True)
    snippets_api_id = Column(String(255), nullable=False, unique=True)
    username = Column(String(255), nullable=False)
