"""Repository layer for database operations.

Repositories encapsulate all database queries, keeping services focused on
catalog rules and routes focused on HTTP handling. This separation provides:
- Single source of truth for database operations
- Easier testing (repositories can be mocked)
- Atomic counter updates in one place
"""

from repositories.catalog_repository import CatalogRepository
from repositories.journal_repository import JournalRepository
from repositories.query_builder import (
    JOURNAL_QUERY,
    THESIS_QUERY,
    CatalogQuery,
    ListingRules,
    build_catalog_query,
)
from repositories.thesis_repository import ThesisRepository
from repositories.utils import log_slow_query

__all__ = [
    "JOURNAL_QUERY",
    "THESIS_QUERY",
    "CatalogQuery",
    "ListingRules",
    "CatalogRepository",
    "JournalRepository",
    "ThesisRepository",
    "build_catalog_query",
    "log_slow_query",
]
