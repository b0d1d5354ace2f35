"""Template repository — CRUD, filtered listing, favorites and performance reads."""
import logging
import uuid
from typing import Optional
from uuid import UUID

from sqlalchemy import Text, delete, distinct, func, insert, literal, select, update
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.ext.asyncio import AsyncSession

from db.errors import NoFieldsToUpdateError
from db.models import Template, TemplateFavorite, TemplatePerformance
from db.pagination import fetch_page
from db.repositories.template_filters import (
    build_conditions,
    favorited_by,
    order_by_clause,
)
from schemas.template import (
    TemplateCreate,
    TemplateListQuery,
    TemplatePage,
    TemplateRead,
    TemplateUpdate,
    TemplateWithPerformance,
)

logger = logging.getLogger(__name__)

_PERFORMANCE_COLUMNS = (
    TemplatePerformance.open_rate,
    TemplatePerformance.click_rate,
    TemplatePerformance.reply_rate,
    TemplatePerformance.sends,
    TemplatePerformance.replies,
)

# Content and categorisation carried over by duplicate_template.
_COPIED_COLUMNS = (
    "description",
    "subject_line",
    "body_html",
    "body_plain",
    "category",
    "tags",
    "persona",
    "industry",
    "company_size",
    "sales_stage",
    "campaign_type",
    "tone",
    "language",
    "access_level",
    "custom_fields",
)


def _enriched_select(user_id: UUID):
    """SELECT template + performance metrics + is_favorite for user_id."""
    return select(
        Template,
        *_PERFORMANCE_COLUMNS,
        favorited_by(user_id).label("is_favorite"),
    ).outerjoin(TemplatePerformance, TemplatePerformance.template_id == Template.id)


def _to_item(row) -> TemplateWithPerformance:
    base = TemplateRead.model_validate(row.Template).model_dump()
    return TemplateWithPerformance(
        **base,
        open_rate=row.open_rate,
        click_rate=row.click_rate,
        reply_rate=row.reply_rate,
        sends=row.sends,
        replies=row.replies,
        is_favorite=bool(getattr(row, "is_favorite", False)),
    )


# ---------------------------------------------------------------------------
# CRUD
# ---------------------------------------------------------------------------


async def create_template(
    session: AsyncSession,
    workspace_id: UUID,
    user_id: UUID,
    data: TemplateCreate,
) -> Template:
    """Insert a template and return the stored row (defaults filled in)."""
    stmt = (
        insert(Template)
        .values(workspace_id=workspace_id, created_by=user_id, **data.model_dump())
        .returning(Template)
    )
    result = await session.execute(stmt, execution_options={"populate_existing": True})
    await session.flush()
    return result.scalar_one()


async def get_template(
    session: AsyncSession, template_id: UUID, user_id: UUID
) -> Optional[TemplateWithPerformance]:
    """Return the template enriched with metrics and is_favorite, or None."""
    result = await session.execute(
        _enriched_select(user_id).where(Template.id == template_id)
    )
    row = result.one_or_none()
    if row is None:
        return None
    return _to_item(row)


async def list_templates(
    session: AsyncSession,
    workspace_id: UUID,
    user_id: UUID,
    filters: Optional[TemplateListQuery] = None,
) -> TemplatePage:
    """Return one page of workspace templates plus the total match count.

    The count is over distinct template ids with the same join and
    conditions as the page query.
    """
    filters = filters or TemplateListQuery()
    conditions = build_conditions(workspace_id, user_id, filters)

    count_stmt = (
        select(func.count(distinct(Template.id)))
        .select_from(Template)
        .outerjoin(TemplatePerformance, TemplatePerformance.template_id == Template.id)
        .where(*conditions)
    )
    data_stmt = (
        _enriched_select(user_id)
        .where(*conditions)
        .order_by(*order_by_clause(filters.sort_by, filters.sort_order))
    )

    rows, total = await fetch_page(session, count_stmt, data_stmt, filters.page, filters.limit)
    return TemplatePage(items=[_to_item(row) for row in rows], total=total)


async def update_template(
    session: AsyncSession, template_id: UUID, data: TemplateUpdate
) -> Optional[Template]:
    """Apply the fields explicitly set on data. Returns None if the id is unknown.

    Raises NoFieldsToUpdateError, without touching the database, when data
    sets nothing.
    """
    changes = data.changes()
    if not changes:
        raise NoFieldsToUpdateError("template")

    result = await session.execute(
        update(Template)
        .where(Template.id == template_id)
        .values(**changes, updated_at=func.now())
        .returning(Template),
        execution_options={"populate_existing": True},
    )
    await session.flush()
    return result.scalar_one_or_none()


async def delete_template(session: AsyncSession, template_id: UUID) -> None:
    """Hard-delete a template. Favorites, metrics and collection items cascade."""
    result = await session.execute(delete(Template).where(Template.id == template_id))
    await session.flush()
    if result.rowcount:
        logger.info("Deleted template %s", template_id)


async def duplicate_template(
    session: AsyncSession, template_id: UUID, user_id: UUID, new_name: str
) -> Optional[Template]:
    """Copy a template's content under a new name, owned by user_id.

    The copy starts with fresh status, version and usage counters and points
    back at its source through parent_template_id. Returns None if the
    source does not exist.
    """
    if not new_name or not new_name.strip():
        raise ValueError("new_name must not be empty")

    source = select(
        literal(uuid.uuid4(), PG_UUID(as_uuid=True)),
        Template.workspace_id,
        literal(user_id, PG_UUID(as_uuid=True)),
        literal(new_name, Text),
        *(getattr(Template, name) for name in _COPIED_COLUMNS),
        Template.id,
    ).where(Template.id == template_id)

    stmt = (
        insert(Template)
        .from_select(
            ["id", "workspace_id", "created_by", "name", *_COPIED_COLUMNS, "parent_template_id"],
            source,
        )
        .returning(Template)
    )
    result = await session.execute(stmt, execution_options={"populate_existing": True})
    await session.flush()
    copy = result.scalar_one_or_none()
    if copy is not None:
        logger.info("Duplicated template %s as %s", template_id, copy.id)
    return copy


# ---------------------------------------------------------------------------
# Favorites
# ---------------------------------------------------------------------------


async def add_favorite(session: AsyncSession, user_id: UUID, template_id: UUID) -> None:
    """Mark a template as favorite for a user. Idempotent, safe to call twice."""
    stmt = (
        pg_insert(TemplateFavorite)
        .values(user_id=user_id, template_id=template_id)
        .on_conflict_do_nothing(index_elements=["user_id", "template_id"])
    )
    await session.execute(stmt)
    await session.flush()


async def remove_favorite(session: AsyncSession, user_id: UUID, template_id: UUID) -> None:
    """Remove a favorite. Removing one that does not exist is a no-op."""
    result = await session.execute(
        delete(TemplateFavorite)
        .where(TemplateFavorite.user_id == user_id)
        .where(TemplateFavorite.template_id == template_id)
    )
    await session.flush()
    if result.rowcount:
        logger.info("User %s unfavorited template %s", user_id, template_id)


# ---------------------------------------------------------------------------
# Performance
# ---------------------------------------------------------------------------


async def get_template_performance(
    session: AsyncSession, template_id: UUID
) -> Optional[TemplatePerformance]:
    result = await session.execute(
        select(TemplatePerformance).where(TemplatePerformance.template_id == template_id)
    )
    return result.scalar_one_or_none()


async def get_top_performers(
    session: AsyncSession,
    workspace_id: UUID,
    limit: int = 10,
    min_sends: int = 10,
) -> list[TemplateWithPerformance]:
    """Return the workspace's best templates by reply rate.

    Only templates with at least min_sends sends are ranked, so a single
    lucky reply does not put a template on top.
    """
    if limit < 1:
        raise ValueError(f"limit must be at least 1, got {limit}")
    if min_sends < 0:
        raise ValueError(f"min_sends must not be negative, got {min_sends}")

    result = await session.execute(
        select(Template, *_PERFORMANCE_COLUMNS)
        .join(TemplatePerformance, TemplatePerformance.template_id == Template.id)
        .where(Template.workspace_id == workspace_id)
        .where(TemplatePerformance.sends >= min_sends)
        .order_by(TemplatePerformance.reply_rate.desc().nulls_last(), Template.id)
        .limit(limit)
    )
    return [_to_item(row) for row in result.all()]
