"""Classified failures raised inside the service layer.

Services raise these; ``services.catalog_service.service_operation`` turns
them into error envelopes so nothing escapes the service boundary.
"""


class CatalogError(Exception):
    """Base class for caller-visible failures."""

    status_code: int = 500
    error_code: str | None = None

    def __init__(self, message: str, *, error_code: str | None = None):
        super().__init__(message)
        self.message = message
        if error_code is not None:
            self.error_code = error_code


class NotFoundError(CatalogError):
    """Identifier does not resolve to a record."""

    status_code = 404
    error_code = "NOT_FOUND"


class PdfUnavailableError(NotFoundError):
    """Record exists but has no PDF attached."""

    error_code = "PDF_NOT_FOUND"


class ValidationError(CatalogError):
    """Malformed input or a persistence constraint violation."""

    status_code = 400
    error_code = "VALIDATION_ERROR"


class StorageIOError(CatalogError):
    """Filesystem save/delete failure."""

    status_code = 500
    error_code = "STORAGE_ERROR"
