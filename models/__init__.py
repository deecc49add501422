"""
SQLAlchemy ORM models for the destination schema.

Models:
    base: Base declarative class and the Language enum
    profile: Owner lookup table (read only)
    code_snippet: Migrated snippet rows
    code_file: Files attached to snippets
    checkpoint: Persisted pagination cursor

Relationships:
    - Profile → CodeSnippet (one-to-many, nullable)
    - CodeSnippet → CodeFile (one-to-many, same transaction)

Usage:
    from models import Base, CodeSnippet, CodeFile
"""

from models.base import Base, Language
from models.profile import Profile
from models.code_snippet import CodeSnippet
from models.code_file import CodeFile
from models.checkpoint import MigrationCheckpoint

__all__ = [
    "Base",
    "Language",
    "Profile",
    "CodeSnippet",
    "CodeFile",
    "MigrationCheckpoint",
]
