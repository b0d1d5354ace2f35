"""Template list filters and the sortable-column allowlist.

Every condition is a SQLAlchemy expression that carries its own bound
parameter. Placeholders ($1, $2, ... for asyncpg) are numbered by the
compiler when the statement runs, so conditions can be appended in any
branch order without bookkeeping, and client values never reach the SQL
text.
"""
import logging
from enum import Enum
from typing import Optional
from uuid import UUID

from sqlalchemy import ColumnElement, Text, bindparam, exists, or_

from db.models import Template, TemplateFavorite, TemplatePerformance
from schemas.template import TemplateListQuery

logger = logging.getLogger(__name__)

LIKE_ESCAPE = "/"

# Categorical filters that map 1:1 onto an equality test on templates.
_EQUALITY_FILTERS = (
    "category",
    "persona",
    "industry",
    "company_size",
    "sales_stage",
    "campaign_type",
    "tone",
    "status",
    "access_level",
    "created_by",
)


def contains_pattern(value: str) -> str:
    """Wrap value for a LIKE "contains" match, escaping its own wildcards."""
    escaped = (
        value.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )
    return f"%{escaped}%"


def favorited_by(user_id: UUID) -> ColumnElement[bool]:
    """EXISTS test for a favorite row linking the outer template to user_id."""
    return exists().where(
        TemplateFavorite.template_id == Template.id,
        TemplateFavorite.user_id == user_id,
    )


def build_conditions(
    workspace_id: UUID,
    user_id: UUID,
    filters: TemplateListQuery,
) -> list[ColumnElement[bool]]:
    """Return the WHERE conditions for a template list query.

    The workspace predicate is always first and always present. Reply-rate
    bounds reference template_performance, so the caller must outer-join it.
    """
    conditions: list[ColumnElement[bool]] = [Template.workspace_id == workspace_id]

    if filters.search:
        pattern = bindparam("search_pattern", contains_pattern(filters.search), type_=Text)
        conditions.append(
            or_(
                Template.name.ilike(pattern, escape=LIKE_ESCAPE),
                Template.description.ilike(pattern, escape=LIKE_ESCAPE),
                Template.subject_line.ilike(pattern, escape=LIKE_ESCAPE),
            )
        )

    for field in _EQUALITY_FILTERS:
        value = getattr(filters, field)
        if value is not None:
            conditions.append(getattr(Template, field) == value)

    if filters.tags:
        conditions.append(Template.tags.overlap(filters.tags))

    if filters.min_reply_rate is not None:
        conditions.append(TemplatePerformance.reply_rate >= filters.min_reply_rate)

    if filters.max_reply_rate is not None:
        conditions.append(TemplatePerformance.reply_rate <= filters.max_reply_rate)

    if filters.is_favorite:
        conditions.append(favorited_by(user_id))

    return conditions


# ---------------------------------------------------------------------------
# Sorting
# ---------------------------------------------------------------------------


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"

    @classmethod
    def parse(cls, value: Optional[str]) -> "SortDirection":
        if not value:
            return cls.DESC
        try:
            return cls(value.lower())
        except ValueError:
            logger.warning("Unknown sort direction %r, using desc", value)
            return cls.DESC


class TemplateSortField(str, Enum):
    NAME = "name"
    CREATED_AT = "created_at"
    UPDATED_AT = "updated_at"
    LAST_USED_AT = "last_used_at"
    USE_COUNT = "use_count"
    REPLY_RATE = "reply_rate"

    @classmethod
    def parse(cls, value: Optional[str]) -> "TemplateSortField":
        if not value:
            return cls.CREATED_AT
        try:
            return cls(value)
        except ValueError:
            logger.warning(
                "Unknown template sort key %r, ordering by %s", value, cls.CREATED_AT.value
            )
            return cls.CREATED_AT


SORT_COLUMNS = {
    TemplateSortField.NAME: Template.name,
    TemplateSortField.CREATED_AT: Template.created_at,
    TemplateSortField.UPDATED_AT: Template.updated_at,
    TemplateSortField.LAST_USED_AT: Template.last_used_at,
    TemplateSortField.USE_COUNT: Template.use_count,
    TemplateSortField.REPLY_RATE: TemplatePerformance.reply_rate,
}


def resolve_sort(
    sort_by: Optional[str], sort_order: Optional[str]
) -> tuple[TemplateSortField, SortDirection]:
    return TemplateSortField.parse(sort_by), SortDirection.parse(sort_order)


def order_by_clause(sort_by: Optional[str], sort_order: Optional[str]) -> list:
    """ORDER BY expressions: the sort column with NULLS LAST, then id.

    Nulls go last in both directions and the id tie-break keeps page
    boundaries stable when sort values repeat.
    """
    field, direction = resolve_sort(sort_by, sort_order)
    column = SORT_COLUMNS[field]
    ordered = column.asc() if direction is SortDirection.ASC else column.desc()
    return [ordered.nulls_last(), Template.id.asc()]
