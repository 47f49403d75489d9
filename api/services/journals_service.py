"""Journal catalog operations."""

from collections.abc import Mapping
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from core.errors import NotFoundError
from repositories.journal_repository import JournalRepository
from repositories.query_builder import JOURNAL_QUERY
from schemas import DownloadInfo, JournalCreate, JournalUpdate, ServiceResult
from services import catalog_service
from services.catalog_service import CatalogEntity, service_operation
from services.file_store import UploadedFile
from services.record_mapper import to_journal_detail, to_journal_list_item

JOURNAL = CatalogEntity(
    key="journal",
    label="Journal",
    plural="Journals",
    repository=JournalRepository,
    query=JOURNAL_QUERY,
    create_schema=JournalCreate,
    update_schema=JournalUpdate,
    to_list_item=to_journal_list_item,
    to_detail=to_journal_detail,
    required_fields=("title", "year"),
)


@service_operation("journals.list")
async def list_journals(
    db: AsyncSession, params: Mapping[str, str | None]
) -> ServiceResult:
    return await catalog_service.list_records(db, JOURNAL, params)


@service_operation("journals.get")
async def get_journal(db: AsyncSession, journal_id: str | int) -> ServiceResult:
    return await catalog_service.get_record(db, JOURNAL, journal_id)


@service_operation("journals.create")
async def create_journal(
    db: AsyncSession,
    payload: Mapping[str, Any],
    files: Mapping[str, UploadedFile] | None = None,
) -> ServiceResult:
    return await catalog_service.create_record(db, JOURNAL, payload, files)


@service_operation("journals.update")
async def update_journal(
    db: AsyncSession,
    journal_id: str | int,
    payload: Mapping[str, Any],
    files: Mapping[str, UploadedFile] | None = None,
) -> ServiceResult:
    return await catalog_service.update_record(db, JOURNAL, journal_id, payload, files)


@service_operation("journals.delete")
async def delete_journal(db: AsyncSession, journal_id: str | int) -> ServiceResult:
    return await catalog_service.delete_record(db, JOURNAL, journal_id)


@service_operation("journals.download")
async def download_journal(db: AsyncSession, journal_id: str | int) -> ServiceResult:
    """Count a download and return where to fetch the PDF.

    A missing journal and a journal without a PDF look the same to callers.
    """
    missing = NotFoundError("Journal PDF not found")
    try:
        record_id = catalog_service.parse_record_id(JOURNAL, journal_id)
    except NotFoundError:
        raise missing from None

    journal = await JournalRepository(db).get_by_id(record_id)
    if journal is None or not journal.pdf_url:
        raise missing

    info = await catalog_service.record_download(db, JOURNAL, journal)
    return ServiceResult.ok(DownloadInfo(**info))


@service_operation("journals.view")
async def increment_journal_view(
    db: AsyncSession, journal_id: str | int
) -> ServiceResult:
    return await catalog_service.increment_view(db, JOURNAL, journal_id)
