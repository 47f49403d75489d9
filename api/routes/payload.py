"""Read write-request bodies from multipart forms or JSON."""

from typing import Any

from fastapi import Request
from starlette.datastructures import UploadFile

from core.errors import ValidationError
from services.file_store import UploadedFile

_FORM_TYPES = ("multipart/form-data", "application/x-www-form-urlencoded")


async def read_payload(
    request: Request,
) -> tuple[dict[str, Any], dict[str, UploadedFile]]:
    """Split a request body into plain fields and attached files.

    Repeated form fields (e.g. several ``tags``) become lists. File parts
    without a file name are browsers' empty inputs and are skipped.
    """
    content_type = request.headers.get("content-type", "")

    if not content_type.startswith(_FORM_TYPES):
        body = await request.body()
        if not body:
            return {}, {}
        try:
            payload = await request.json()
        except ValueError:
            raise ValidationError("Request body is not valid JSON") from None
        if not isinstance(payload, dict):
            raise ValidationError("Request body must be a JSON object")
        return payload, {}

    fields: dict[str, Any] = {}
    files: dict[str, UploadedFile] = {}
    async with request.form() as form:
        for key, value in form.multi_items():
            if isinstance(value, UploadFile):
                if value.filename:
                    files[key] = UploadedFile(
                        content=await value.read(),
                        filename=value.filename,
                        content_type=value.content_type,
                    )
                continue
            existing = fields.get(key)
            if existing is None:
                fields[key] = value
            elif isinstance(existing, list):
                existing.append(value)
            else:
                fields[key] = [existing, value]
    return fields, files
