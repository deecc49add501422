"""
Custom exceptions for the snippet migration with structured error context.

Every failure the migration can hit is fatal: these exceptions propagate to
the single top-level handler in scripts/run_migration.py, which logs them and
exits with a non-zero status. Non-fatal degradation (unknown language,
unknown owner, already migrated snippet) never raises.

Exception Hierarchy:
    MigrationError (base)
    ├── ConfigurationError
    ├── ExtractionError
    │   ├── APIExtractionError
    │   │   ├── AuthenticationError
    │   │   └── ResourceNotFoundError
    │   ├── NetworkError
    │   └── ResponseDecodeError
    ├── TransformationError
    │   └── DataFormatError
    ├── LoadError
    │   └── DatabaseError
    │       └── DatabaseConnectionError
    └── CheckpointError
"""

from typing import Optional, Dict, Any
from datetime import datetime, timezone


class MigrationError(Exception):
    """
    Base exception for all migration errors.

    Attributes:
        message: Human-readable error message
        context: Additional context information (url, slug, page, etc.)
        original_exception: The original exception that was caught (if any)
    """

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        original_exception: Optional[Exception] = None
    ):
        self.message = message
        self.context = context or {}
        self.original_exception = original_exception
        self.timestamp = datetime.now(timezone.utc)

        self.context["error_timestamp"] = self.timestamp.isoformat()

        super().__init__(message)
        if original_exception:
            self.__cause__ = original_exception

    def __str__(self) -> str:
        """Format error message with context."""
        base_msg = f"{self.__class__.__name__}: {self.message}"

        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            base_msg += f" | Context: {context_str}"

        if self.original_exception:
            base_msg += f" | Caused by: {type(self.original_exception).__name__}: {str(self.original_exception)}"

        return base_msg

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "context": self.context,
            "timestamp": self.timestamp.isoformat(),
            "original_error": str(self.original_exception) if self.original_exception else None
        }


class ConfigurationError(MigrationError):
    """
    Raised at startup when a required setting is missing or invalid.

    Context should include:
        - fields: Names of the offending settings
    """
    pass


# ============================================================================
# Extraction Errors
# ============================================================================

class ExtractionError(MigrationError):
    """Base exception for document store failures."""
    pass


class APIExtractionError(ExtractionError):
    """
    Raised when the document store answers with a non-success status.

    Context should include:
        - api_url: The endpoint that failed
        - status_code: HTTP status code
        - response_body: Response body (truncated)
        - start_key: Cursor of the failed page (if any)
    """
    pass


class AuthenticationError(APIExtractionError):
    """Authentication failures (HTTP 401, 403)."""
    pass


class ResourceNotFoundError(APIExtractionError):
    """Database or view not found (HTTP 404)."""
    pass


class NetworkError(ExtractionError):
    """The document store could not be reached."""
    pass


class ResponseDecodeError(ExtractionError):
    """The response body is not JSON or does not have the _all_docs shape."""
    pass


# ============================================================================
# Transformation Errors
# ============================================================================

class TransformationError(MigrationError):
    """Base exception for document transformation failures."""
    pass


class DataFormatError(TransformationError):
    """
    Raised when a document field cannot be converted (e.g. a timestamp).

    Context should include:
        - slug: Natural key of the document
        - field_name: Name of the field
        - field_value: Value that failed to parse
    """
    pass


# ============================================================================
# Load Errors
# ============================================================================

class LoadError(MigrationError):
    """Base exception for data loading failures."""
    pass


class DatabaseError(LoadError):
    """
    Raised when database operations fail.

    Context should include:
        - operation: Type of database operation (SELECT, INSERT, COMMIT)
        - table_name: Name of the table
    """
    pass


class DatabaseConnectionError(DatabaseError):
    """The destination database could not be reached."""
    pass


# ============================================================================
# Checkpoint Errors
# ============================================================================

class CheckpointError(MigrationError):
    """
    Raised when the persisted cursor cannot be read or written.

    Context should include:
        - source_name: Checkpoint name
        - operation: read or write
    """
    pass
