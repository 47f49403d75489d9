"""Thesis catalog endpoints."""

from fastapi import APIRouter, Request, Response

from core.database import DbSession
from core.ratelimit import COUNTER_LIMIT, READ_LIMIT, WRITE_LIMIT, limiter
from routes.payload import read_payload
from services.theses_service import (
    create_thesis,
    delete_thesis,
    download_thesis,
    get_thesis,
    increment_thesis_view,
    list_theses,
    update_thesis,
)

router = APIRouter(prefix="/api/theses", tags=["theses"])

_NOT_FOUND = {404: {"description": "Thesis not found"}}


@router.get("")
@limiter.limit(READ_LIMIT)
async def list_theses_endpoint(request: Request, db: DbSession) -> Response:
    """List theses.

    Query parameters: ``page``, ``limit``, ``category``, ``year``,
    ``university``, ``type``, ``language``, ``search``, ``sortBy``, ``order``.
    """
    result = await list_theses(db, dict(request.query_params))
    return result.to_response()


@router.get("/{thesis_id}", responses=_NOT_FOUND)
@limiter.limit(READ_LIMIT)
async def get_thesis_endpoint(
    request: Request, thesis_id: str, db: DbSession
) -> Response:
    result = await get_thesis(db, thesis_id)
    return result.to_response()


@router.post("", status_code=201, responses={400: {"description": "Invalid input"}})
@limiter.limit(WRITE_LIMIT)
async def create_thesis_endpoint(request: Request, db: DbSession) -> Response:
    """Create a thesis.

    ``tags`` may be repeated form fields, JSON array text or comma-separated text.
    """
    fields, files = await read_payload(request)
    result = await create_thesis(db, fields, files)
    return result.to_response()


@router.put("/{thesis_id}", responses=_NOT_FOUND)
@limiter.limit(WRITE_LIMIT)
async def update_thesis_endpoint(
    request: Request, thesis_id: str, db: DbSession
) -> Response:
    fields, files = await read_payload(request)
    result = await update_thesis(db, thesis_id, fields, files)
    return result.to_response()


@router.delete("/{thesis_id}", status_code=204, responses=_NOT_FOUND)
@limiter.limit(WRITE_LIMIT)
async def delete_thesis_endpoint(
    request: Request, thesis_id: str, db: DbSession
) -> Response:
    result = await delete_thesis(db, thesis_id)
    return result.to_response()


@router.get(
    "/{thesis_id}/download",
    responses={404: {"description": "Thesis not found, or it has no PDF"}},
)
@limiter.limit(COUNTER_LIMIT)
async def download_thesis_endpoint(
    request: Request, thesis_id: str, db: DbSession
) -> Response:
    result = await download_thesis(db, thesis_id)
    return result.to_response()


@router.post("/{thesis_id}/view", responses=_NOT_FOUND)
@limiter.limit(COUNTER_LIMIT)
async def view_thesis_endpoint(
    request: Request, thesis_id: str, db: DbSession
) -> Response:
    result = await increment_thesis_view(db, thesis_id)
    return result.to_response()
