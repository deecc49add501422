"""
Core utilities and configuration for the snippet migration.

Modules:
    config: Settings loaded from the environment (PSQL_*, COUCHDB_*)
    database: Async engine, session factory and connectivity check
    exceptions: Exception hierarchy for fatal migration errors
    logging: Logging configuration

Usage:
    from core.config import get_settings
    from core.database import create_engine, create_session_maker
    from core.exceptions import MigrationError, DataFormatError
    from core.logging import setup_logging
"""

__all__ = [
    "Settings",
    "get_settings",
    "create_engine",
    "create_session_maker",
    "check_connection",
    "setup_logging",
    # Exceptions
    "MigrationError",
    "ConfigurationError",
    "ExtractionError",
    "APIExtractionError",
    "AuthenticationError",
    "ResourceNotFoundError",
    "NetworkError",
    "ResponseDecodeError",
    "TransformationError",
    "DataFormatError",
    "LoadError",
    "DatabaseError",
    "DatabaseConnectionError",
    "CheckpointError",
]
