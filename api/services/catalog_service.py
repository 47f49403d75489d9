"""Operations shared by the journal and thesis services.

Every public operation returns a ``ServiceResult``. Classified failures are
raised internally as ``core.errors.CatalogError`` and converted by
``service_operation``; nothing else escapes the service boundary.
"""

from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass
from functools import wraps
from typing import Any, Concatenate, ParamSpec

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import DataError, IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from core.errors import CatalogError, NotFoundError, ValidationError
from core.logger import get_logger
from repositories.catalog_repository import CatalogRepository
from repositories.query_builder import ListingRules, build_catalog_query
from schemas import PaginationMeta, ServiceResult
from services import file_store
from services.file_store import UploadedFile

logger = get_logger(__name__)

P = ParamSpec("P")

GENERIC_ERROR_MESSAGE = "An unexpected error occurred. Please try again."

# Attachment field name -> (storage category, model column)
ATTACHMENTS: dict[str, tuple[str, str]] = {
    "cover": (file_store.COVERS, "cover_url"),
    "pdf": (file_store.PDFS, "pdf_url"),
}


@dataclass(frozen=True)
class CatalogEntity:
    """Everything the shared operations need to know about one record kind."""

    key: str
    label: str
    plural: str
    repository: type[CatalogRepository]
    query: ListingRules
    create_schema: type[BaseModel]
    update_schema: type[BaseModel]
    to_list_item: Callable[[Any], BaseModel]
    to_detail: Callable[[Any], BaseModel]
    required_fields: tuple[str, ...]
    delete_status_code: int = 200
    prepare_fields: Callable[[dict[str, Any], Any | None], dict[str, Any]] | None = None

    @property
    def not_found_message(self) -> str:
        return f"{self.label} not found"


def service_operation(
    operation_name: str,
) -> Callable[
    [Callable[Concatenate[AsyncSession, P], Awaitable[ServiceResult]]],
    Callable[Concatenate[AsyncSession, P], Awaitable[ServiceResult]],
]:
    """Convert failures inside a service call into error envelopes.

    The wrapped function takes the session as its first argument; the session
    is rolled back on any failure so the request dependency never commits a
    half-applied change.
    """

    def decorator(
        func: Callable[Concatenate[AsyncSession, P], Awaitable[ServiceResult]],
    ) -> Callable[Concatenate[AsyncSession, P], Awaitable[ServiceResult]]:
        @wraps(func)
        async def wrapper(
            db: AsyncSession, *args: P.args, **kwargs: P.kwargs
        ) -> ServiceResult:
            try:
                return await func(db, *args, **kwargs)
            except CatalogError as e:
                await db.rollback()
                log = logger.error if e.status_code >= 500 else logger.info
                log(
                    "service.operation.rejected",
                    operation=operation_name,
                    status_code=e.status_code,
                    error_code=e.error_code,
                    reason=e.message,
                )
                return ServiceResult.fail(e.message, e.status_code, e.error_code)
            except (IntegrityError, DataError) as e:
                await db.rollback()
                logger.info(
                    "service.operation.constraint_violation",
                    operation=operation_name,
                    error=str(e.orig),
                )
                return ServiceResult.fail(
                    "Invalid data: the record violates a database constraint",
                    400,
                    ValidationError.error_code,
                )
            except Exception:
                await db.rollback()
                logger.exception("service.operation.failed", operation=operation_name)
                return ServiceResult.fail(GENERIC_ERROR_MESSAGE, 500)

        return wrapper

    return decorator


def parse_record_id(entity: CatalogEntity, raw_id: str | int) -> int:
    """Path identifiers that aren't integers can't name a record."""
    try:
        record_id = int(raw_id)
    except (TypeError, ValueError):
        raise NotFoundError(entity.not_found_message) from None
    if record_id < 1:
        raise NotFoundError(entity.not_found_message)
    return record_id


def validate_payload(
    schema: type[BaseModel], payload: Mapping[str, Any], *, partial: bool
) -> dict[str, Any]:
    """Validate a write payload into column-name keyed fields.

    With ``partial`` only the keys the caller actually sent are returned.
    """
    try:
        model = schema.model_validate(dict(payload))
    except PydanticValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in err['loc']) or 'body'}: {err['msg']}"
            for err in e.errors()
        )
        raise ValidationError(f"Validation failed: {problems}") from None
    return model.model_dump(exclude_unset=partial)


def _validate_attachments(files: Mapping[str, UploadedFile]) -> None:
    for name, upload in files.items():
        if name not in ATTACHMENTS:
            raise ValidationError(f"Unexpected file field {name!r}")
        file_store.validate_upload(ATTACHMENTS[name][0], upload)


async def _store_attachments(
    files: Mapping[str, UploadedFile],
) -> tuple[dict[str, Any], list[str]]:
    """Save every attachment; returns the column values and saved references."""
    fields: dict[str, Any] = {}
    saved: list[str] = []
    try:
        for name, upload in files.items():
            category, column = ATTACHMENTS[name]
            reference = await file_store.save(category, upload.content, upload.filename)
            saved.append(reference)
            fields[column] = reference
            if name == "pdf":
                fields["file_size"] = file_store.human_size(upload.size)
    except Exception:
        await _discard(saved)
        raise
    return fields, saved


async def _discard(references: list[str]) -> None:
    for reference in references:
        await file_store.delete(reference)


async def list_records(
    db: AsyncSession, entity: CatalogEntity, params: Mapping[str, str | None]
) -> ServiceResult:
    query = build_catalog_query(entity.query, params)
    rows, total = await entity.repository(db).list_page(query)
    return ServiceResult.ok(
        [entity.to_list_item(row) for row in rows],
        f"{entity.plural} retrieved successfully",
        pagination=PaginationMeta.build(query.page, query.limit, total),
    )


async def get_record(
    db: AsyncSession, entity: CatalogEntity, raw_id: str | int
) -> ServiceResult:
    record = await _require(db, entity, raw_id)
    return ServiceResult.ok(entity.to_detail(record))


async def _require(db: AsyncSession, entity: CatalogEntity, raw_id: str | int) -> Any:
    record_id = parse_record_id(entity, raw_id)
    record = await entity.repository(db).get_by_id(record_id)
    if record is None:
        raise NotFoundError(entity.not_found_message)
    return record


async def create_record(
    db: AsyncSession,
    entity: CatalogEntity,
    payload: Mapping[str, Any],
    files: Mapping[str, UploadedFile] | None = None,
) -> ServiceResult:
    files = files or {}
    fields = validate_payload(entity.create_schema, payload, partial=False)
    if entity.prepare_fields is not None:
        fields = entity.prepare_fields(fields, None)
    _validate_attachments(files)

    file_fields, saved = await _store_attachments(files)
    try:
        record = await entity.repository(db).create({**fields, **file_fields})
    except Exception:
        await _discard(saved)
        raise

    logger.info(f"{entity.key}.created", record_id=record.id, files=sorted(files))
    return ServiceResult.ok(
        entity.to_detail(record), f"{entity.label} created successfully", 201
    )


async def update_record(
    db: AsyncSession,
    entity: CatalogEntity,
    raw_id: str | int,
    payload: Mapping[str, Any],
    files: Mapping[str, UploadedFile] | None = None,
) -> ServiceResult:
    files = files or {}
    record = await _require(db, entity, raw_id)

    fields = validate_payload(entity.update_schema, payload, partial=True)
    cleared = [
        name
        for name in entity.required_fields
        if name in fields and fields[name] is None
    ]
    if cleared:
        raise ValidationError(
            f"Required fields cannot be empty: {', '.join(cleared)}"
        )
    if entity.prepare_fields is not None:
        fields = entity.prepare_fields(fields, record)
    _validate_attachments(files)

    file_fields, saved = await _store_attachments(files)

    # Old files go before the write; file_store.delete never raises
    for name in files:
        await file_store.delete(getattr(record, ATTACHMENTS[name][1]))

    try:
        record = await entity.repository(db).update(record, {**fields, **file_fields})
    except Exception:
        await _discard(saved)
        raise

    logger.info(
        f"{entity.key}.updated",
        record_id=record.id,
        fields=sorted(fields),
        files=sorted(files),
    )
    return ServiceResult.ok(
        entity.to_detail(record), f"{entity.label} updated successfully"
    )


async def delete_record(
    db: AsyncSession, entity: CatalogEntity, raw_id: str | int
) -> ServiceResult:
    record = await _require(db, entity, raw_id)

    await file_store.delete(record.cover_url)
    await file_store.delete(record.pdf_url)

    await entity.repository(db).delete(record.id)
    logger.info(f"{entity.key}.deleted", record_id=record.id)
    return ServiceResult.ok(
        None, f"{entity.label} deleted successfully", entity.delete_status_code
    )


async def increment_view(
    db: AsyncSession, entity: CatalogEntity, raw_id: str | int
) -> ServiceResult:
    record_id = parse_record_id(entity, raw_id)
    if not await entity.repository(db).increment(record_id, "views"):
        raise NotFoundError(entity.not_found_message)
    return ServiceResult.ok(None, "View count updated")


async def record_download(db: AsyncSession, entity: CatalogEntity, record: Any) -> dict:
    """Count a download of a record known to have a PDF and describe the file."""
    await entity.repository(db).increment(record.id, "downloads")
    logger.info(f"{entity.key}.downloaded", record_id=record.id)
    return {
        "download_url": record.pdf_url,
        "file_name": f"{record.title}.pdf",
        "file_size": record.file_size,
    }
