"""Pydantic schemas for API request/response validation."""

import math
from datetime import date as calendar_date
from datetime import datetime
from typing import Any

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Accepts snake_case or camelCase input, serializes as camelCase."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# =============================================================================
# Response envelope
# =============================================================================


class PaginationMeta(CamelModel):
    """Pagination metadata for list endpoints."""

    current_page: int
    total_pages: int
    total_count: int
    limit: int
    has_next: bool
    has_previous: bool

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> "PaginationMeta":
        total_pages = math.ceil(total / limit) if total else 0
        return cls(
            current_page=page,
            total_pages=total_pages,
            total_count=total,
            limit=limit,
            has_next=page < total_pages,
            has_previous=page > 1,
        )


class ServiceResult(BaseModel):
    """Outcome of a service operation: a success or an error envelope.

    Success: ``{"success": true, "message", "data", "pagination"?}``
    Error: ``{"success": false, "message", "errorCode"?}``
    """

    success: bool
    message: str
    status_code: int = 200
    data: Any = None
    pagination: PaginationMeta | None = None
    error_code: str | None = None

    @classmethod
    def ok(
        cls,
        data: Any = None,
        message: str = "Success",
        status_code: int = 200,
        pagination: PaginationMeta | None = None,
    ) -> "ServiceResult":
        return cls(
            success=True,
            message=message,
            status_code=status_code,
            data=data,
            pagination=pagination,
        )

    @classmethod
    def fail(
        cls, message: str, status_code: int, error_code: str | None = None
    ) -> "ServiceResult":
        return cls(
            success=False,
            message=message,
            status_code=status_code,
            error_code=error_code,
        )

    def body(self) -> dict[str, Any]:
        if not self.success:
            content: dict[str, Any] = {"success": False, "message": self.message}
            if self.error_code:
                content["errorCode"] = self.error_code
            return content

        content = {
            "success": True,
            "message": self.message,
            "data": jsonable_encoder(self.data, by_alias=True),
        }
        if self.pagination is not None:
            content["pagination"] = self.pagination.model_dump(by_alias=True)
        return content

    def to_response(self) -> Response:
        if self.status_code == 204:
            return Response(status_code=204)
        return JSONResponse(status_code=self.status_code, content=self.body())


# =============================================================================
# Journal schemas
# =============================================================================


class JournalListItem(CamelModel):
    """Journal as shown in list views."""

    id: str
    title: str
    title_kh: str | None = None
    author: str | None = None
    date: calendar_date | None = None
    year: str
    cover: str | None = None
    category: str | None = None
    pages: int | None = None
    volume: str | None = None
    issn: str | None = None
    abstract: str | None = None
    downloads: int = 0
    views: int = 0


class JournalDetail(JournalListItem):
    """Journal with every field, returned by detail/create/update."""

    pdf_url: str | None = None
    file_size: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class _CatalogInput(CamelModel):
    """Base for write payloads coming from JSON or multipart forms."""

    model_config = ConfigDict(extra="ignore")

    @field_validator("*", mode="before")
    @classmethod
    def _blank_to_none(cls, value: Any) -> Any:
        # Form fields can't express null; an empty field clears the value.
        if isinstance(value, str) and not value.strip():
            return None
        return value


class JournalCreate(_CatalogInput):
    title: str = Field(..., min_length=1, max_length=500)
    title_kh: str | None = Field(default=None, max_length=500)
    author: str | None = Field(default=None, max_length=255)
    date: calendar_date | None = None
    year: int = Field(..., ge=1000, le=9999)
    category: str | None = Field(default=None, max_length=100)
    pages: int | None = Field(default=None, ge=0)
    volume: str | None = Field(default=None, max_length=50)
    issn: str | None = Field(default=None, max_length=20)
    abstract: str | None = None


class JournalUpdate(_CatalogInput):
    """Partial update: only fields present in the payload are applied.

    ``model_dump(exclude_unset=True)`` tells absent fields (kept) apart from
    explicit nulls (cleared). Required columns can't be cleared.
    """

    title: str | None = Field(default=None, min_length=1, max_length=500)
    title_kh: str | None = Field(default=None, max_length=500)
    author: str | None = Field(default=None, max_length=255)
    date: calendar_date | None = None
    year: int | None = Field(default=None, ge=1000, le=9999)
    category: str | None = Field(default=None, max_length=100)
    pages: int | None = Field(default=None, ge=0)
    volume: str | None = Field(default=None, max_length=50)
    issn: str | None = Field(default=None, max_length=20)
    abstract: str | None = None


# =============================================================================
# Thesis schemas
# =============================================================================


class ThesisListItem(CamelModel):
    """Thesis as shown in list views."""

    id: str
    title: str
    title_kh: str | None = None
    author: str
    author_kh: str | None = None
    university: str | None = None
    university_kh: str | None = None
    year: str
    cover: str | None = None
    category: str | None = None
    category_kh: str | None = None
    tags: list[str] = Field(default_factory=list)
    downloads: int = 0
    views: int = 0
    created_at: datetime | None = None
    updated_at: datetime | None = None


class ThesisDetail(ThesisListItem):
    """Thesis with every field, returned by detail/create/update."""

    supervisor: str | None = None
    supervisor_kh: str | None = None
    major: str | None = None
    major_kh: str | None = None
    type: str | None = None
    abstract: str | None = None
    abstract_kh: str | None = None
    description: str | None = None
    description_kh: str | None = None
    pdf_url: str | None = None
    language: str | None = None
    pages: int | None = None
    file_size: str | None = None


class ThesisCreate(_CatalogInput):
    title: str = Field(..., min_length=1, max_length=500)
    title_kh: str | None = Field(default=None, max_length=500)
    author: str = Field(..., min_length=1, max_length=255)
    author_kh: str | None = Field(default=None, max_length=255)
    university: str | None = Field(default=None, max_length=255)
    university_kh: str | None = Field(default=None, max_length=255)
    supervisor: str | None = Field(default=None, max_length=255)
    supervisor_kh: str | None = Field(default=None, max_length=255)
    major: str | None = Field(default=None, max_length=255)
    major_kh: str | None = Field(default=None, max_length=255)
    type: str | None = Field(default=None, max_length=50)
    year: int = Field(..., ge=1000, le=9999)
    abstract: str | None = None
    abstract_kh: str | None = None
    description: str | None = None
    description_kh: str | None = None
    category: str | None = Field(default=None, max_length=100)
    category_kh: str | None = Field(default=None, max_length=100)
    # Raw tag input; the service normalizes it into a list of strings
    tags: list[str] | str | None = None
    language: str | None = Field(default=None, max_length=50)
    pages: int | None = Field(default=None, ge=0)


class ThesisUpdate(_CatalogInput):
    """Partial update; see JournalUpdate for unset-vs-null semantics."""

    title: str | None = Field(default=None, min_length=1, max_length=500)
    title_kh: str | None = Field(default=None, max_length=500)
    author: str | None = Field(default=None, min_length=1, max_length=255)
    author_kh: str | None = Field(default=None, max_length=255)
    university: str | None = Field(default=None, max_length=255)
    university_kh: str | None = Field(default=None, max_length=255)
    supervisor: str | None = Field(default=None, max_length=255)
    supervisor_kh: str | None = Field(default=None, max_length=255)
    major: str | None = Field(default=None, max_length=255)
    major_kh: str | None = Field(default=None, max_length=255)
    type: str | None = Field(default=None, max_length=50)
    year: int | None = Field(default=None, ge=1000, le=9999)
    abstract: str | None = None
    abstract_kh: str | None = None
    description: str | None = None
    description_kh: str | None = None
    category: str | None = Field(default=None, max_length=100)
    category_kh: str | None = Field(default=None, max_length=100)
    tags: list[str] | str | None = None
    language: str | None = Field(default=None, max_length=50)
    pages: int | None = Field(default=None, ge=0)


# =============================================================================
# Download / health
# =============================================================================


class DownloadInfo(CamelModel):
    download_url: str
    file_name: str
    file_size: str | None = None


class HealthResponse(BaseModel):
    """Health check response schema."""

    status: str
    service: str
