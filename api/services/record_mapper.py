"""Map persisted catalog records to their public representation.

Pure functions: identifiers and years become strings, everything else
passes through unchanged.
"""

from models import Journal, Thesis
from schemas import JournalDetail, JournalListItem, ThesisDetail, ThesisListItem


def to_journal_list_item(journal: Journal) -> JournalListItem:
    return JournalListItem(
        id=str(journal.id),
        title=journal.title,
        title_kh=journal.title_kh,
        author=journal.author,
        date=journal.date,
        year=str(journal.year),
        cover=journal.cover_url,
        category=journal.category,
        pages=journal.pages,
        volume=journal.volume,
        issn=journal.issn,
        abstract=journal.abstract,
        downloads=journal.downloads,
        views=journal.views,
    )


def to_journal_detail(journal: Journal) -> JournalDetail:
    return JournalDetail(
        **to_journal_list_item(journal).model_dump(),
        pdf_url=journal.pdf_url,
        file_size=journal.file_size,
        created_at=journal.created_at,
        updated_at=journal.updated_at,
    )


def to_thesis_list_item(thesis: Thesis) -> ThesisListItem:
    return ThesisListItem(
        id=str(thesis.id),
        title=thesis.title,
        title_kh=thesis.title_kh,
        author=thesis.author,
        author_kh=thesis.author_kh,
        university=thesis.university,
        university_kh=thesis.university_kh,
        year=str(thesis.year),
        cover=thesis.cover_url,
        category=thesis.category,
        category_kh=thesis.category_kh,
        tags=list(thesis.tags or []),
        downloads=thesis.downloads,
        views=thesis.views,
        created_at=thesis.created_at,
        updated_at=thesis.updated_at,
    )


def to_thesis_detail(thesis: Thesis) -> ThesisDetail:
    return ThesisDetail(
        **to_thesis_list_item(thesis).model_dump(),
        supervisor=thesis.supervisor,
        supervisor_kh=thesis.supervisor_kh,
        major=thesis.major,
        major_kh=thesis.major_kh,
        type=thesis.type,
        abstract=thesis.abstract,
        abstract_kh=thesis.abstract_kh,
        description=thesis.description,
        description_kh=thesis.description_kh,
        pdf_url=thesis.pdf_url,
        language=thesis.language,
        pages=thesis.pages,
        file_size=thesis.file_size,
    )
