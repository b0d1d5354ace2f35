"""Template collection repository — named groupings and their membership."""
import logging
from uuid import UUID

from sqlalchemy import delete, insert, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.ext.asyncio import AsyncSession

from db.models import TemplateCollection, TemplateCollectionItem
from schemas.library import CollectionCreate

logger = logging.getLogger(__name__)


async def create_collection(
    session: AsyncSession, workspace_id: UUID, user_id: UUID, data: CollectionCreate
) -> TemplateCollection:
    stmt = (
        insert(TemplateCollection)
        .values(workspace_id=workspace_id, created_by=user_id, **data.model_dump())
        .returning(TemplateCollection)
    )
    result = await session.execute(stmt, execution_options={"populate_existing": True})
    await session.flush()
    return result.scalar_one()


async def list_collections(
    session: AsyncSession, workspace_id: UUID
) -> list[TemplateCollection]:
    result = await session.execute(
        select(TemplateCollection)
        .where(TemplateCollection.workspace_id == workspace_id)
        .order_by(TemplateCollection.name.asc())
    )
    return list(result.scalars().all())


async def add_template_to_collection(
    session: AsyncSession, collection_id: UUID, template_id: UUID
) -> None:
    """Add a template to a collection. Idempotent, safe to call twice."""
    stmt = (
        pg_insert(TemplateCollectionItem)
        .values(collection_id=collection_id, template_id=template_id)
        .on_conflict_do_nothing(index_elements=["collection_id", "template_id"])
    )
    await session.execute(stmt)
    await session.flush()


async def remove_template_from_collection(
    session: AsyncSession, collection_id: UUID, template_id: UUID
) -> None:
    """Remove a template from a collection. No-op if it was not a member."""
    result = await session.execute(
        delete(TemplateCollectionItem)
        .where(TemplateCollectionItem.collection_id == collection_id)
        .where(TemplateCollectionItem.template_id == template_id)
    )
    await session.flush()
    if result.rowcount:
        logger.info("Removed template %s from collection %s", template_id, collection_id)
