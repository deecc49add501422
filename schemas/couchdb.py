"""
Pydantic schemas for the CouchDB _all_docs listing
"""

from pydantic import BaseModel, Field, validator
from typing import List


class AttachedFile(BaseModel):
    """A file embedded in a snippet document"""

    name: str
    content: bytes

    @validator("content", pre=True)
    def decode_content(cls, v):
        """Accept the content as a JSON string or as an array of byte values"""
        if isinstance(v, str):
            return v.encode("utf-8")
        if isinstance(v, list):
            try:
                return bytes(v)
            except TypeError as e:
                raise ValueError(f"file content is not a list of byte values: {e}")
        return v

    class Config:
        frozen = True


class SourceDocument(BaseModel):
    """
    Snippet document as stored in CouchDB.

    Fields other than the ones below (_rev, ...) are ignored. Timestamps are
    kept as strings; they are parsed (and rejected) during transformation.
    """

    id: str = Field(..., alias="_id")
    created: str
    modified: str
    language: str
    title: str
    public: bool
    owner: str
    files: List[AttachedFile]

    class Config:
        frozen = True
        populate_by_name = True


class AllDocsRow(BaseModel):
    """One row of _all_docs?include_docs=true"""

    doc: SourceDocument


class AllDocsResponse(BaseModel):
    """
    One page of the _all_docs listing.

    total_rows is a hint: it counts every document in the database, including
    the design document skipped on the first page.
    """

    total_rows: int
    offset: int = 0
    rows: List[AllDocsRow] = Field(default_factory=list)

    @property
    def documents(self) -> List[SourceDocument]:
        return [row.doc for row in self.rows]
