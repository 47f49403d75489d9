"""Thesis catalog operations.

Theses differ from journals in three places: tags are normalized into a
list, a successful delete has no body (204), and a download distinguishes
an unknown thesis from one without a PDF.
"""

import json
from collections.abc import Iterable, Mapping
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from core.errors import NotFoundError, PdfUnavailableError
from models import Thesis
from repositories.query_builder import THESIS_QUERY
from repositories.thesis_repository import ThesisRepository
from schemas import DownloadInfo, ServiceResult, ThesisCreate, ThesisUpdate
from services import catalog_service
from services.catalog_service import CatalogEntity, service_operation
from services.file_store import UploadedFile
from services.record_mapper import to_thesis_detail, to_thesis_list_item


def parse_tags(raw: str | Iterable[Any] | None) -> list[str]:
    """Normalize tag input into a list of distinct, non-empty strings.

    Accepts a list, JSON array text (``'["ai", "nlp"]'``) or comma-delimited
    text (``"ai, nlp"``). First occurrence order is kept.
    """
    if raw is None:
        return []

    if isinstance(raw, str):
        text = raw.strip()
        items: Iterable[Any]
        if text.startswith("["):
            try:
                decoded = json.loads(text)
            except json.JSONDecodeError:
                decoded = None
            items = (
                decoded if isinstance(decoded, list) else text.strip("[]").split(",")
            )
        else:
            items = text.split(",")
    else:
        items = raw

    tags: list[str] = []
    for item in items:
        # Nested arrays and objects are not tags
        if not isinstance(item, (str, int, float)):
            continue
        tag = str(item).strip()
        if tag and tag not in tags:
            tags.append(tag)
    return tags


def _prepare_fields(fields: dict[str, Any], existing: Thesis | None) -> dict[str, Any]:
    if existing is None:
        fields["tags"] = parse_tags(fields.get("tags"))
    elif fields.get("tags") is None:
        # Unsent or blank tags keep what the thesis already has
        fields.pop("tags", None)
    else:
        fields["tags"] = parse_tags(fields["tags"])
    return fields


THESIS = CatalogEntity(
    key="thesis",
    label="Thesis",
    plural="Theses",
    repository=ThesisRepository,
    query=THESIS_QUERY,
    create_schema=ThesisCreate,
    update_schema=ThesisUpdate,
    to_list_item=to_thesis_list_item,
    to_detail=to_thesis_detail,
    required_fields=("title", "author", "year"),
    delete_status_code=204,
    prepare_fields=_prepare_fields,
)


@service_operation("theses.list")
async def list_theses(
    db: AsyncSession, params: Mapping[str, str | None]
) -> ServiceResult:
    return await catalog_service.list_records(db, THESIS, params)


@service_operation("theses.get")
async def get_thesis(db: AsyncSession, thesis_id: str | int) -> ServiceResult:
    return await catalog_service.get_record(db, THESIS, thesis_id)


@service_operation("theses.create")
async def create_thesis(
    db: AsyncSession,
    payload: Mapping[str, Any],
    files: Mapping[str, UploadedFile] | None = None,
) -> ServiceResult:
    return await catalog_service.create_record(db, THESIS, payload, files)


@service_operation("theses.update")
async def update_thesis(
    db: AsyncSession,
    thesis_id: str | int,
    payload: Mapping[str, Any],
    files: Mapping[str, UploadedFile] | None = None,
) -> ServiceResult:
    return await catalog_service.update_record(db, THESIS, thesis_id, payload, files)


@service_operation("theses.delete")
async def delete_thesis(db: AsyncSession, thesis_id: str | int) -> ServiceResult:
    return await catalog_service.delete_record(db, THESIS, thesis_id)


@service_operation("theses.download")
async def download_thesis(db: AsyncSession, thesis_id: str | int) -> ServiceResult:
    record_id = catalog_service.parse_record_id(THESIS, thesis_id)
    thesis = await ThesisRepository(db).get_by_id(record_id)
    if thesis is None:
        raise NotFoundError(THESIS.not_found_message)
    if not thesis.pdf_url:
        raise PdfUnavailableError("PDF not available")

    info = await catalog_service.record_download(db, THESIS, thesis)
    return ServiceResult.ok(DownloadInfo(**info))


@service_operation("theses.view")
async def increment_thesis_view(
    db: AsyncSession, thesis_id: str | int
) -> ServiceResult:
    return await catalog_service.increment_view(db, THESIS, thesis_id)
