"""Thesis repository for database operations."""

from models import Thesis
from repositories.catalog_repository import CatalogRepository


class ThesisRepository(CatalogRepository[Thesis]):
    """Repository for Thesis database operations."""

    model = Thesis
