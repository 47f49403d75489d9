"""Tests for the thesis service."""

from pathlib import Path

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from services.file_store import UploadedFile
from services.theses_service import (
    create_thesis,
    delete_thesis,
    download_thesis,
    get_thesis,
    increment_thesis_view,
    list_theses,
    parse_tags,
    update_thesis,
)
from tests.factories import ThesisFactory, create_async


@pytest.mark.unit
class TestParseTags:
    """Tests for parse_tags."""

    def test_comma_delimited_text(self):
        """Should split on commas and strip whitespace."""
        assert parse_tags(" ai , nlp,  khmer ") == ["ai", "nlp", "khmer"]

    def test_json_array_text(self):
        """Should decode JSON array text."""
        assert parse_tags('["machine learning", "nlp"]') == ["machine learning", "nlp"]

    def test_list_input(self):
        """Should accept an already-split list."""
        assert parse_tags(["ai", " nlp "]) == ["ai", "nlp"]

    def test_drops_empty_and_duplicate_tags(self):
        """Should keep the first occurrence of each non-empty tag."""
        assert parse_tags("ai,,nlp, ai ,") == ["ai", "nlp"]

    def test_malformed_json_falls_back_to_commas(self):
        """Should still produce tags from bracketed text that isn't JSON."""
        assert parse_tags("[ai, nlp]") == ["ai", "nlp"]

    @pytest.mark.parametrize("raw", [None, "", "   ", "[]", []])
    def test_empty_inputs(self, raw):
        """Should normalize empty input to an empty list."""
        assert parse_tags(raw) == []

    def test_non_string_json_items_are_stringified(self):
        """Should never keep non-string tags."""
        assert parse_tags("[2024, null, \"ai\"]") == ["2024", "ai"]

    def test_nested_json_items_are_skipped(self):
        """Should drop arrays and objects instead of stringifying them."""
        assert parse_tags('[["a"], {"b": 1}, "c"]') == ["c"]
        assert parse_tags([["a"], "nlp"]) == ["nlp"]


@pytest.mark.integration
class TestCreateThesis:
    """Tests for create_thesis."""

    async def test_round_trip_through_get(self, db_session: AsyncSession):
        """Should return the created fields from get with zero counters."""
        payload = {
            "title": "Rice Yield Forecasting",
            "author": "Sok Dara",
            "authorKh": "សុខ ដារា",
            "university": "RUPP",
            "supervisor": "Dr. Chan",
            "major": "Computer Science",
            "type": "Master",
            "year": 2022,
            "language": "English",
            "pages": 120,
            "tags": "agriculture, ml",
        }

        created = await create_thesis(db_session, payload)
        assert created.status_code == 201
        assert created.message == "Thesis created successfully"

        detail = (await get_thesis(db_session, created.data.id)).data
        assert detail.title == "Rice Yield Forecasting"
        assert detail.author_kh == "សុខ ដារា"
        assert detail.supervisor == "Dr. Chan"
        assert detail.year == "2022"
        assert detail.pages == 120
        assert detail.tags == ["agriculture", "ml"]
        assert detail.downloads == 0
        assert detail.views == 0

    async def test_tags_default_to_empty_list(self, db_session: AsyncSession):
        """Should store [] when no tags are supplied."""
        result = await create_thesis(
            db_session, {"title": "T", "author": "A", "year": 2020}
        )
        assert result.data.tags == []

    async def test_author_is_required(self, db_session: AsyncSession):
        """Should reject a thesis without an author."""
        result = await create_thesis(db_session, {"title": "T", "year": 2020})

        assert result.status_code == 400
        assert "author" in result.message


@pytest.mark.integration
class TestUpdateThesis:
    """Tests for update_thesis."""

    async def test_tags_kept_when_not_supplied(self, db_session: AsyncSession):
        """Should retain stored tags when the update omits them."""
        thesis = await create_async(ThesisFactory, db_session, tags=["ai", "nlp"])

        result = await update_thesis(db_session, thesis.id, {"major": "Statistics"})

        assert result.data.tags == ["ai", "nlp"]
        assert result.data.major == "Statistics"

    async def test_blank_tags_keep_previous_value(self, db_session: AsyncSession):
        """Should treat an empty tags form field as not supplied."""
        thesis = await create_async(ThesisFactory, db_session, tags=["ai"])

        result = await update_thesis(db_session, thesis.id, {"tags": ""})

        assert result.data.tags == ["ai"]

    async def test_supplied_tags_are_renormalized(self, db_session: AsyncSession):
        """Should replace tags with the parsed new value."""
        thesis = await create_async(ThesisFactory, db_session, tags=["old"])

        result = await update_thesis(
            db_session, thesis.id, {"tags": '["new", "new", " other "]'}
        )

        assert result.data.tags == ["new", "other"]

    async def test_explicit_empty_array_clears_tags(self, db_session: AsyncSession):
        """Should allow clearing tags with an empty JSON array."""
        thesis = await create_async(ThesisFactory, db_session, tags=["old"])

        result = await update_thesis(db_session, thesis.id, {"tags": "[]"})

        assert result.data.tags == []

    async def test_clearing_author_is_rejected(self, db_session: AsyncSession):
        """Should refuse to null a required column."""
        thesis = await create_async(ThesisFactory, db_session)

        result = await update_thesis(db_session, thesis.id, {"author": None})

        assert result.status_code == 400
        assert "author" in result.message

    async def test_replacing_cover_keeps_pdf(
        self, db_session: AsyncSession, upload_dir: Path
    ):
        """Should only touch the attachment that was uploaded."""
        thesis = await create_async(
            ThesisFactory,
            db_session,
            pdf_url="/uploads/pdfs/pdf-1-a.pdf",
            file_size="2 MB",
        )

        result = await update_thesis(
            db_session,
            thesis.id,
            {},
            {"cover": UploadedFile(b"\xff\xd8 jpeg", "front.jpg", "image/jpeg")},
        )

        assert result.data.cover.startswith("/uploads/covers/cover-")
        assert result.data.cover.endswith(".jpg")
        assert result.data.pdf_url == "/uploads/pdfs/pdf-1-a.pdf"
        assert result.data.file_size == "2 MB"


@pytest.mark.integration
class TestDeleteThesis:
    """Tests for delete_thesis."""

    async def test_delete_returns_no_content(self, db_session: AsyncSession):
        """Thesis delete succeeds with 204 and no data, unlike journals."""
        thesis = await create_async(ThesisFactory, db_session)

        result = await delete_thesis(db_session, thesis.id)

        assert result.success is True
        assert result.status_code == 204
        assert result.data is None

    async def test_delete_twice_is_not_found(self, db_session: AsyncSession):
        """Should report NotFound for an already-deleted thesis."""
        thesis = await create_async(ThesisFactory, db_session)

        await delete_thesis(db_session, thesis.id)
        second = await delete_thesis(db_session, thesis.id)

        assert second.status_code == 404
        assert second.message == "Thesis not found"


@pytest.mark.integration
class TestThesisCounters:
    """Tests for download and view counters."""

    async def test_download_counts_and_describes_file(self, db_session: AsyncSession):
        """Should increment downloads and name the file after the title."""
        thesis = await create_async(
            ThesisFactory,
            db_session,
            title="Rice Yield Forecasting",
            pdf_url="/uploads/pdfs/pdf-9-z.pdf",
            file_size="4.5 MB",
        )

        result = await download_thesis(db_session, thesis.id)

        assert result.data.download_url == "/uploads/pdfs/pdf-9-z.pdf"
        assert result.data.file_name == "Rice Yield Forecasting.pdf"
        assert result.data.file_size == "4.5 MB"
        assert (await get_thesis(db_session, thesis.id)).data.downloads == 1

    async def test_download_missing_thesis_is_thesis_not_found(
        self, db_session: AsyncSession
    ):
        """Thesis download: an unknown id is reported as a missing thesis."""
        result = await download_thesis(db_session, 5050)

        assert result.status_code == 404
        assert result.message == "Thesis not found"
        assert result.error_code == "NOT_FOUND"

    async def test_download_without_pdf_is_pdf_not_available(
        self, db_session: AsyncSession
    ):
        """Thesis download: a thesis without a PDF gets its own error code.

        Journals answer both cases with "Journal PDF not found".
        """
        thesis = await create_async(ThesisFactory, db_session, pdf_url=None)

        result = await download_thesis(db_session, thesis.id)

        assert result.status_code == 404
        assert result.message == "PDF not available"
        assert result.error_code == "PDF_NOT_FOUND"

    async def test_view_increments_views(self, db_session: AsyncSession):
        """Should add one view per call."""
        thesis = await create_async(ThesisFactory, db_session)

        result = await increment_thesis_view(db_session, thesis.id)

        assert result.message == "View count updated"
        assert (await get_thesis(db_session, thesis.id)).data.views == 1


@pytest.mark.integration
class TestListTheses:
    """Tests for list_theses."""

    async def test_filters_by_university_and_type(self, db_session: AsyncSession):
        """Should combine thesis-specific filters."""
        await create_async(ThesisFactory, db_session, university="ITC", type="Master")
        await create_async(ThesisFactory, db_session, university="ITC", type="PhD")
        await create_async(ThesisFactory, db_session, university="RUPP", type="Master")

        result = await list_theses(db_session, {"university": "ITC", "type": "Master"})

        assert result.message == "Theses retrieved successfully"
        assert result.pagination.total_count == 1
        assert result.data[0].university == "ITC"
