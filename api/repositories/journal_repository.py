"""Journal repository for database operations."""

from models import Journal
from repositories.catalog_repository import CatalogRepository


class JournalRepository(CatalogRepository[Journal]):
    """Repository for Journal database operations."""

    model = Journal
