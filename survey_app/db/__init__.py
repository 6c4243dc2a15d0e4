"""Database bootstrap utilities for the survey service.

Exposes engine construction, the injected storage client and the SQL
migrations runner. Route handlers never import SQLAlchemy directly; they go
through the catalog, assembler and aggregator, which talk to `StorageClient`.
"""

from survey_app.db.base import dispose_engine, get_engine
from survey_app.db.migrations_runner import apply_migrations
from survey_app.db.storage import StorageClient

__all__ = [
    "get_engine",
    "dispose_engine",
    "apply_migrations",
    "StorageClient",
]
