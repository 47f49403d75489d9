"""Local filesystem storage for uploaded covers and PDFs.

Stored references look like ``/uploads/pdfs/pdf-1718000000000-9f1c2ab4.pdf``:
the public URL prefix, the category directory and a generated file name.
Saving never overwrites an existing file. Deleting is best-effort: a missing
file is fine and any other failure is logged, never raised.
"""

import asyncio
import os
import secrets
import time
from dataclasses import dataclass
from pathlib import Path, PurePosixPath

from core.config import get_settings
from core.errors import StorageIOError, ValidationError
from core.logger import get_logger

logger = get_logger(__name__)

COVERS = "covers"
PDFS = "pdfs"

ALLOWED_EXTENSIONS: dict[str, frozenset[str]] = {
    COVERS: frozenset({".jpg", ".jpeg", ".png", ".gif", ".webp"}),
    PDFS: frozenset({".pdf"}),
}

_FILE_PREFIX = {COVERS: "cover", PDFS: "pdf"}

_SIZE_UNITS = ("Bytes", "KB", "MB", "GB", "TB")


@dataclass(frozen=True)
class UploadedFile:
    """An attachment already read from the request."""

    content: bytes
    filename: str
    content_type: str | None = None

    @property
    def size(self) -> int:
        return len(self.content)


def human_size(byte_count: int) -> str:
    """Format a byte count using 1024-based units, e.g. ``1536 -> "1.5 KB"``."""
    if byte_count <= 0:
        return "0 Bytes"
    value = float(byte_count)
    exponent = 0
    while value >= 1024 and exponent < len(_SIZE_UNITS) - 1:
        value /= 1024
        exponent += 1
    value = round(value, 2)
    # Drop trailing zeros: 2.0 -> "2", 1.50 -> "1.5"
    return f"{value:g} {_SIZE_UNITS[exponent]}"


def _extension(original_name: str) -> str:
    return PurePosixPath(original_name.replace("\\", "/")).suffix.lower()


def _generate_name(category: str, extension: str) -> str:
    millis = int(time.time() * 1000)
    return f"{_FILE_PREFIX[category]}-{millis}-{secrets.token_hex(6)}{extension}"


def validate_upload(category: str, upload: UploadedFile) -> None:
    """Reject uploads with the wrong extension, no content, or over the size limit."""
    if category not in ALLOWED_EXTENSIONS:
        raise ValidationError(f"Unknown upload category {category!r}")

    extension = _extension(upload.filename)
    if extension not in ALLOWED_EXTENSIONS[category]:
        allowed = ", ".join(sorted(ALLOWED_EXTENSIONS[category]))
        raise ValidationError(
            f"File {upload.filename!r} is not allowed for {category}. "
            f"Allowed: {allowed}"
        )
    if upload.size == 0:
        raise ValidationError(f"File {upload.filename!r} is empty")

    max_bytes = get_settings().max_upload_bytes
    if upload.size > max_bytes:
        raise ValidationError(
            f"File {upload.filename!r} exceeds the {human_size(max_bytes)} limit"
        )


def _write_exclusive(path: Path, content: bytes) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    # "xb" fails instead of clobbering an existing file
    with path.open("xb") as fh:
        fh.write(content)


async def save(category: str, content: bytes, original_name: str) -> str:
    """Store ``content`` under the category directory and return its reference."""
    if category not in ALLOWED_EXTENSIONS:
        raise ValidationError(f"Unknown upload category {category!r}")

    settings = get_settings()
    name = _generate_name(category, _extension(original_name))
    path = settings.upload_root / category / name

    try:
        await asyncio.to_thread(_write_exclusive, path, content)
    except OSError as e:
        logger.error(
            "file.save.failed",
            category=category,
            original_name=original_name,
            error=str(e),
        )
        raise StorageIOError("Failed to store uploaded file") from e

    reference = f"{settings.upload_url_prefix.rstrip('/')}/{category}/{name}"
    logger.info("file.saved", reference=reference, size=len(content))
    return reference


def ensure_directories() -> None:
    """Create the category directories under the upload root."""
    root = get_settings().upload_root
    for category in ALLOWED_EXTENSIONS:
        (root / category).mkdir(parents=True, exist_ok=True)


def storage_writable() -> bool:
    root = get_settings().upload_root
    return all(os.access(root / category, os.W_OK) for category in ALLOWED_EXTENSIONS)


def resolve_reference(reference: str) -> Path | None:
    """Map a stored reference back to a path inside the upload root.

    Returns None for references outside the upload root.
    """
    settings = get_settings()
    prefix = settings.upload_url_prefix.rstrip("/") + "/"
    relative = reference[len(prefix):] if reference.startswith(prefix) else reference
    root = settings.upload_root
    candidate = (root / relative.lstrip("/")).resolve()
    if not candidate.is_relative_to(root):
        return None
    return candidate


async def delete(reference: str | None) -> None:
    """Remove a stored file. Missing files and I/O errors never raise."""
    if not reference:
        return

    path = resolve_reference(reference)
    if path is None:
        logger.warning("file.delete.refused", reference=reference)
        return

    try:
        await asyncio.to_thread(path.unlink)
    except FileNotFoundError:
        logger.debug("file.delete.missing", reference=reference)
        return
    except OSError as e:
        logger.warning("file.delete.failed", reference=reference, error=str(e))
        return
    logger.info("file.deleted", reference=reference)
