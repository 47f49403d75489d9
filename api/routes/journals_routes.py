"""Journal catalog endpoints."""

from fastapi import APIRouter, Request, Response

from core.database import DbSession
from core.ratelimit import COUNTER_LIMIT, READ_LIMIT, WRITE_LIMIT, limiter
from routes.payload import read_payload
from services.journals_service import (
    create_journal,
    delete_journal,
    download_journal,
    get_journal,
    increment_journal_view,
    list_journals,
    update_journal,
)

router = APIRouter(prefix="/api/journals", tags=["journals"])

_NOT_FOUND = {404: {"description": "Journal not found"}}


@router.get("")
@limiter.limit(READ_LIMIT)
async def list_journals_endpoint(request: Request, db: DbSession) -> Response:
    """List journals.

    Query parameters: ``page``, ``limit``, ``category``, ``year``, ``issn``,
    ``search``, ``sortBy``, ``order``.
    """
    result = await list_journals(db, dict(request.query_params))
    return result.to_response()


@router.get("/{journal_id}", responses=_NOT_FOUND)
@limiter.limit(READ_LIMIT)
async def get_journal_endpoint(
    request: Request, journal_id: str, db: DbSession
) -> Response:
    result = await get_journal(db, journal_id)
    return result.to_response()


@router.post("", status_code=201, responses={400: {"description": "Invalid input"}})
@limiter.limit(WRITE_LIMIT)
async def create_journal_endpoint(request: Request, db: DbSession) -> Response:
    """Create a journal from JSON or a multipart form with ``cover``/``pdf`` files."""
    fields, files = await read_payload(request)
    result = await create_journal(db, fields, files)
    return result.to_response()


@router.put("/{journal_id}", responses=_NOT_FOUND)
@limiter.limit(WRITE_LIMIT)
async def update_journal_endpoint(
    request: Request, journal_id: str, db: DbSession
) -> Response:
    fields, files = await read_payload(request)
    result = await update_journal(db, journal_id, fields, files)
    return result.to_response()


@router.delete("/{journal_id}", responses=_NOT_FOUND)
@limiter.limit(WRITE_LIMIT)
async def delete_journal_endpoint(
    request: Request, journal_id: str, db: DbSession
) -> Response:
    result = await delete_journal(db, journal_id)
    return result.to_response()


@router.get(
    "/{journal_id}/download",
    responses={404: {"description": "Journal or its PDF not found"}},
)
@limiter.limit(COUNTER_LIMIT)
async def download_journal_endpoint(
    request: Request, journal_id: str, db: DbSession
) -> Response:
    """Count a download and return the PDF location."""
    result = await download_journal(db, journal_id)
    return result.to_response()


@router.post("/{journal_id}/view", responses=_NOT_FOUND)
@limiter.limit(COUNTER_LIMIT)
async def view_journal_endpoint(
    request: Request, journal_id: str, db: DbSession
) -> Response:
    result = await increment_journal_view(db, journal_id)
    return result.to_response()
