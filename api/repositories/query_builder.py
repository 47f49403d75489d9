"""Translate list-endpoint query parameters into SQLAlchemy statements.

Parameters arrive as raw strings (or None when absent). Everything is
validated here so a bad ``page``/``limit``/``sortBy`` is reported to the
caller instead of being silently corrected.
"""

import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

from sqlalchemy import ColumnElement, Select, func, or_, select
from sqlalchemy.orm import InstrumentedAttribute

from core.config import get_settings
from core.errors import ValidationError
from models import Journal, Thesis

_LIKE_ESCAPE = "\\"
_ORDER_DIRECTIONS = ("ASC", "DESC")
# Largest OFFSET a signed 64-bit database integer can hold
_MAX_OFFSET = 2**63 - 1


def _camel_to_snake(name: str) -> str:
    return re.sub(r"(?<!^)(?=[A-Z])", "_", name).lower()


def parse_positive_int(name: str, raw: str | int | None, default: int) -> int:
    """Coerce a pagination value; absent means default, anything else must be > 0."""
    if raw is None or raw == "":
        return default
    try:
        value = int(raw)
    except (TypeError, ValueError):
        raise ValidationError(
            f"'{name}' must be a positive integer, got {raw!r}"
        ) from None
    if value < 1:
        raise ValidationError(f"'{name}' must be a positive integer, got {raw!r}")
    return value


def _parse_int_filter(name: str, raw: str) -> int:
    try:
        return int(raw)
    except (TypeError, ValueError):
        raise ValidationError(f"'{name}' must be an integer, got {raw!r}") from None


def _parse_str_filter(name: str, raw: str) -> str:
    return raw


def escape_like(term: str) -> str:
    """Escape LIKE wildcards so the search term matches literally."""
    return (
        term.replace(_LIKE_ESCAPE, _LIKE_ESCAPE * 2)
        .replace("%", f"{_LIKE_ESCAPE}%")
        .replace("_", f"{_LIKE_ESCAPE}_")
    )


@dataclass(frozen=True)
class ListingRules:
    """What a list endpoint may filter, search and sort on for one model."""

    model: type
    filters: Mapping[str, Callable[[str, str], Any]]
    search_columns: tuple[str, ...]
    sortable: frozenset[str]
    default_sort: str = "created_at"

    def column(self, name: str) -> InstrumentedAttribute:
        return getattr(self.model, name)

    def resolve_sort(self, sort_by: str | None) -> InstrumentedAttribute:
        if not sort_by:
            return self.column(self.default_sort)
        name = _camel_to_snake(sort_by.strip())
        if name not in self.sortable:
            allowed = ", ".join(sorted(self.sortable))
            raise ValidationError(
                f"Unknown sortBy field {sort_by!r}. Allowed: {allowed}"
            )
        return self.column(name)


_COMMON_SORTABLE = frozenset(
    {
        "id",
        "title",
        "author",
        "year",
        "category",
        "downloads",
        "views",
        "created_at",
        "updated_at",
    }
)

JOURNAL_QUERY = ListingRules(
    model=Journal,
    filters={
        "category": _parse_str_filter,
        "year": _parse_int_filter,
        "issn": _parse_str_filter,
    },
    search_columns=("title", "title_kh", "author"),
    sortable=_COMMON_SORTABLE | {"date", "pages", "volume", "issn"},
)

THESIS_QUERY = ListingRules(
    model=Thesis,
    filters={
        "category": _parse_str_filter,
        "year": _parse_int_filter,
        "university": _parse_str_filter,
        "type": _parse_str_filter,
        "language": _parse_str_filter,
    },
    search_columns=("title", "title_kh", "author", "author_kh"),
    sortable=_COMMON_SORTABLE | {"university", "type", "language", "pages"},
)


@dataclass
class CatalogQuery:
    """A paginated list query plus its window-independent count."""

    statement: Select
    count_statement: Select
    page: int
    limit: int

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


def _search_condition(rules: ListingRules, term: str) -> ColumnElement[bool]:
    pattern = f"%{escape_like(term)}%"
    if get_settings().search_unaccent:
        return or_(
            *(
                func.unaccent(rules.column(name)).ilike(
                    func.unaccent(pattern), escape=_LIKE_ESCAPE
                )
                for name in rules.search_columns
            )
        )
    return or_(
        *(
            rules.column(name).ilike(pattern, escape=_LIKE_ESCAPE)
            for name in rules.search_columns
        )
    )


def build_catalog_query(
    rules: ListingRules, params: Mapping[str, str | None]
) -> CatalogQuery:
    """Build the filtered, sorted, paginated select for ``rules.model``.

    Recognised params: ``page``, ``limit``, ``search``, ``sortBy``, ``order``
    and every key in ``rules.filters``. Absent or empty values are ignored.
    """
    settings = get_settings()
    page = parse_positive_int("page", params.get("page"), 1)
    limit = parse_positive_int("limit", params.get("limit"), settings.default_page_size)
    if limit > settings.max_page_size:
        raise ValidationError(
            f"'limit' must not exceed {settings.max_page_size}, got {limit}"
        )
    if (page - 1) * limit > _MAX_OFFSET:
        raise ValidationError(f"'page' is too large for limit {limit}, got {page}")

    conditions: list[ColumnElement[bool]] = []
    for name, parse in rules.filters.items():
        raw = params.get(name)
        if raw is None or raw == "":
            continue
        conditions.append(rules.column(name) == parse(name, raw))

    search = (params.get("search") or "").strip()
    if search:
        conditions.append(_search_condition(rules, search))

    sort_column = rules.resolve_sort(params.get("sortBy"))
    order = (params.get("order") or "DESC").strip().upper()
    if order not in _ORDER_DIRECTIONS:
        raise ValidationError(
            f"'order' must be ASC or DESC, got {params.get('order')!r}"
        )

    id_column = rules.column("id")
    if order == "ASC":
        ordering = (sort_column.asc(), id_column.asc())
    else:
        ordering = (sort_column.desc(), id_column.desc())

    statement = (
        select(rules.model)
        .where(*conditions)
        .order_by(*ordering)
        .limit(limit)
        .offset((page - 1) * limit)
    )
    count_statement = select(func.count()).select_from(rules.model).where(*conditions)

    return CatalogQuery(
        statement=statement,
        count_statement=count_statement,
        page=page,
        limit=limit,
    )
