"""
Migration pipeline components.

Modules:
    lookup: Owner profile map, loaded once per run
    checkpoint: Persisted pagination cursor
    runner: Pagination driver (fetch -> transform -> load until exhausted)

Subpackages:
    extractors: CouchDB _all_docs page fetcher
    transformers: Language normalization and document -> row transformation
    loaders: Transactional page writer

Architecture:
    Pages are processed strictly in sequence:

    1. Extract - Fetch the page after the cursor from CouchDB
    2. Transform - Re-key owners, normalize language, strip NUL bytes, parse timestamps
    3. Load - Insert snippets and files in one transaction, commit, advance the cursor

    A failure anywhere aborts the run; the page being loaded is rolled back.

Usage:
    from ingestion.extractors.couchdb_extractor import CouchDBExtractor
    from ingestion.runner import MigrationRunner

Example:
    extractor = CouchDBExtractor(base_url="http://localhost:5984")
    runner = MigrationRunner(session, extractor, page_size=1000)
    result = await runner.run()

    print(f"Migrated {result['records_processed']} documents")
"""

__all__ = [
    "CouchDBExtractor",
    "SnippetTransformer",
    "PostgresLoader",
    "MigrationRunner",
    "load_owner_profiles",
    "normalize_language",
]
