"""
Pydantic schemas for data validation.

Schemas:
    couchdb: Source side, the _all_docs page and the snippet documents in it
    snippets: Destination side, owner profiles and rows to insert

Usage:
    from schemas.couchdb import AllDocsResponse, SourceDocument
    from schemas.snippets import CodeSnippetCreate, OwnerProfile

Example:
    page = AllDocsResponse.model_validate(response.json())
    for document in page.documents:
        print(document.id, document.language)
"""

__all__ = [
    "AttachedFile",
    "SourceDocument",
    "AllDocsRow",
    "AllDocsResponse",
    "OwnerProfile",
    "CodeFileCreate",
    "CodeSnippetCreate",
]
