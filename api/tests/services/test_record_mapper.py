"""Tests for record mapping to the public representation."""

from datetime import UTC, date, datetime

import pytest

from services.record_mapper import (
    to_journal_detail,
    to_journal_list_item,
    to_thesis_detail,
    to_thesis_list_item,
)
from tests.factories import JournalFactory, ThesisFactory

pytestmark = pytest.mark.unit


def _journal(**overrides):
    defaults = {
        "id": 7,
        "title": "Mekong Review",
        "year": 2021,
        "date": date(2021, 3, 1),
        "pages": 12,
        "cover_url": "/uploads/covers/cover-1-abc.png",
        "pdf_url": "/uploads/pdfs/pdf-1-abc.pdf",
        "file_size": "1.5 MB",
        "downloads": 3,
        "views": 9,
        "created_at": datetime(2024, 1, 1, tzinfo=UTC),
        "updated_at": datetime(2024, 1, 2, tzinfo=UTC),
    }
    return JournalFactory.build(**{**defaults, **overrides})


class TestJournalMapping:
    """Tests for journal mapping."""

    def test_id_and_year_become_strings(self):
        """Should render identifiers and years as strings."""
        item = to_journal_list_item(_journal())
        assert item.id == "7"
        assert item.year == "2021"

    def test_other_types_pass_through(self):
        """Should keep pages, counters and dates as they are."""
        item = to_journal_list_item(_journal())
        assert item.pages == 12
        assert item.downloads == 3
        assert item.views == 9
        assert item.date == date(2021, 3, 1)

    def test_list_item_exposes_cover_but_not_pdf(self):
        """Should use the reduced field set for list views."""
        dumped = to_journal_list_item(_journal()).model_dump(by_alias=True)
        assert dumped["cover"] == "/uploads/covers/cover-1-abc.png"
        assert "pdfUrl" not in dumped
        assert "fileSize" not in dumped

    def test_detail_adds_file_fields_in_camel_case(self):
        """Should include the PDF reference and size on the detail view."""
        dumped = to_journal_detail(_journal()).model_dump(by_alias=True)
        assert dumped["pdfUrl"] == "/uploads/pdfs/pdf-1-abc.pdf"
        assert dumped["fileSize"] == "1.5 MB"
        assert dumped["titleKh"] is None
        assert dumped["createdAt"] == datetime(2024, 1, 1, tzinfo=UTC)

    def test_mapping_is_deterministic(self):
        """Should produce equal output for the same record."""
        journal = _journal()
        assert to_journal_detail(journal) == to_journal_detail(journal)


class TestThesisMapping:
    """Tests for thesis mapping."""

    def test_list_item_fields(self):
        """Should map tags as a list and stringify id/year."""
        thesis = ThesisFactory.build(id=3, year=2019, tags=["ai", "nlp"])
        item = to_thesis_list_item(thesis)

        assert item.id == "3"
        assert item.year == "2019"
        assert item.tags == ["ai", "nlp"]

    def test_missing_tags_map_to_empty_list(self):
        """Should never expose null tags."""
        thesis = ThesisFactory.build(id=3, year=2019, tags=None)
        assert to_thesis_list_item(thesis).tags == []

    def test_detail_includes_bilingual_and_file_fields(self):
        """Should include supervisor, abstracts and the PDF fields."""
        thesis = ThesisFactory.build(
            id=1,
            year=2020,
            supervisor_kh="លោក សុខ",
            pdf_url="/uploads/pdfs/pdf-2-def.pdf",
            file_size="800 KB",
            pages=120,
        )
        dumped = to_thesis_detail(thesis).model_dump(by_alias=True)

        assert dumped["supervisorKh"] == "លោក សុខ"
        assert dumped["pdfUrl"] == "/uploads/pdfs/pdf-2-def.pdf"
        assert dumped["fileSize"] == "800 KB"
        assert dumped["pages"] == 120
