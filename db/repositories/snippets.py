"""Snippet repository — reusable template fragments."""
import logging
from typing import Optional
from uuid import UUID

from sqlalchemy import delete, func, insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from db.errors import NoFieldsToUpdateError
from db.models import TemplateSnippet
from schemas.library import SnippetCreate, SnippetUpdate

logger = logging.getLogger(__name__)


async def create_snippet(
    session: AsyncSession, workspace_id: UUID, user_id: UUID, data: SnippetCreate
) -> TemplateSnippet:
    stmt = (
        insert(TemplateSnippet)
        .values(workspace_id=workspace_id, created_by=user_id, **data.model_dump())
        .returning(TemplateSnippet)
    )
    result = await session.execute(stmt, execution_options={"populate_existing": True})
    await session.flush()
    return result.scalar_one()


async def list_snippets(
    session: AsyncSession, workspace_id: UUID, snippet_type: Optional[str] = None
) -> list[TemplateSnippet]:
    """Return workspace snippets, most used first, optionally of one type."""
    stmt = select(TemplateSnippet).where(TemplateSnippet.workspace_id == workspace_id)
    if snippet_type:
        stmt = stmt.where(TemplateSnippet.snippet_type == snippet_type)
    result = await session.execute(
        stmt.order_by(TemplateSnippet.use_count.desc(), TemplateSnippet.name.asc())
    )
    return list(result.scalars().all())


async def update_snippet(
    session: AsyncSession, snippet_id: UUID, data: SnippetUpdate
) -> Optional[TemplateSnippet]:
    changes = data.changes()
    if not changes:
        raise NoFieldsToUpdateError("snippet")

    result = await session.execute(
        update(TemplateSnippet)
        .where(TemplateSnippet.id == snippet_id)
        .values(**changes, updated_at=func.now())
        .returning(TemplateSnippet),
        execution_options={"populate_existing": True},
    )
    await session.flush()
    return result.scalar_one_or_none()


async def delete_snippet(session: AsyncSession, snippet_id: UUID) -> None:
    result = await session.execute(
        delete(TemplateSnippet).where(TemplateSnippet.id == snippet_id)
    )
    await session.flush()
    if result.rowcount:
        logger.info("Deleted snippet %s", snippet_id)
