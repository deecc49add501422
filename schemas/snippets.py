"""
Pydantic schemas for rows written to the destination database
"""

from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime
from models.base import Language


class OwnerProfile(BaseModel):
    """Row of the profile lookup table, keyed by api_id"""

    user_id: int
    api_id: str
    username: str

    class Config:
        frozen = True


class CodeFileCreate(BaseModel):
    """File row; code_snippet_id is assigned on insert of the parent"""

    name: str
    content: bytes


class CodeSnippetCreate(BaseModel):
    """
    Snippet row ready to insert.

    Ensures:
    - language is one of the Language enum values
    - created / modified are offset-aware
    """

    slug: str = Field(..., min_length=1)
    language: Language
    title: str
    public: bool
    user_id: Optional[int] = None
    created: datetime
    modified: datetime
    files: List[CodeFileCreate] = Field(default_factory=list)

    def row(self) -> dict:
        """Column values for the code_snippet insert"""
        return self.dict(exclude={"files"})
