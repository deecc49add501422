"""
Transform CouchDB snippet documents into destination rows
"""

from typing import Dict
from datetime import datetime
from pydantic import AwareDatetime, TypeAdapter, ValidationError
from schemas.couchdb import SourceDocument
from schemas.snippets import CodeSnippetCreate, CodeFileCreate, OwnerProfile
from ingestion.transformers.normalizer import normalize_language, strip_null_bytes
from core.exceptions import DataFormatError

_AWARE_DATETIME = TypeAdapter(AwareDatetime)


class SnippetTransformer:
    """
    Convert one SourceDocument into a CodeSnippetCreate with its files.

    Handles:
    - Owner re-keying through the profile map (unknown owner -> NULL)
    - Language normalization
    - NUL byte removal from title and file names
    - Timestamp parsing (offset required)
    """

    def __init__(self, profiles: Dict[str, OwnerProfile]):
        self.profiles = profiles

    def transform(self, document: SourceDocument) -> CodeSnippetCreate:
        """
        Raises:
            DataFormatError: If created or modified is not an offset-aware timestamp
        """
        profile = self.profiles.get(document.owner)

        return CodeSnippetCreate(
            slug=document.id,
            language=normalize_language(document.language),
            title=strip_null_bytes(document.title),
            public=document.public,
            user_id=profile.user_id if profile else None,
            created=parse_timestamp(document.created, "created", document.id),
            modified=parse_timestamp(document.modified, "modified", document.id),
            files=[
                CodeFileCreate(name=strip_null_bytes(f.name), content=f.content)
                for f in document.files
            ],
        )


def parse_timestamp(value: str, field_name: str, slug: str) -> datetime:
    """Parse an RFC 3339 timestamp, keeping its UTC offset"""
    context = {"slug": slug, "field_name": field_name, "field_value": value}

    # Only date-time strings; numbers and numeric strings would parse as unix timestamps
    if not isinstance(value, str) or len(value) <= 10 or value[10] not in "Tt ":
        raise DataFormatError(f"Invalid {field_name} timestamp", context=context)

    try:
        return _AWARE_DATETIME.validate_python(value)
    except ValidationError as e:
        raise DataFormatError(
            f"Invalid {field_name} timestamp",
            context={**context, "reason": e.errors()[0]["type"]},
            original_exception=e
        )
