"""
Normalize free-text snippet fields into the destination vocabulary
"""

from typing import Dict
from models.base import Language
import logging

logger = logging.getLogger(__name__)

FALLBACK_LANGUAGE = Language.PLAINTEXT

# Alternate spellings found in the document store
LANGUAGE_ALIASES: Dict[str, Language] = {
    "perl6": Language.RAKU,
}

_CANONICAL_LANGUAGES: Dict[str, Language] = {member.value: member for member in Language}


def normalize_language(value: str) -> Language:
    """
    Map an arbitrary language tag onto the Language enum.

    Matching is case-insensitive. Unknown tags are logged and fall back to
    plaintext, so every input has a defined output.
    """
    language = value.lower()

    if language in _CANONICAL_LANGUAGES:
        return _CANONICAL_LANGUAGES[language]

    if language in LANGUAGE_ALIASES:
        return LANGUAGE_ALIASES[language]

    logger.warning(f"Invalid language '{language}', changing to '{FALLBACK_LANGUAGE.value}'")
    return FALLBACK_LANGUAGE


def strip_null_bytes(value: str) -> str:
    """Remove NUL characters, which PostgreSQL text columns reject"""
    return value.replace("\0", "")
