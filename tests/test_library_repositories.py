"""Unit tests for the snippet and collection repositories."""
import uuid
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.dialects import postgresql

import db.repositories.snippets as snippet_repo
import db.repositories.template_collections as collection_repo
from db.errors import NoFieldsToUpdateError
from schemas.library import CollectionCreate, SnippetCreate, SnippetUpdate


def _sql(stmt) -> str:
    return str(stmt.compile(dialect=postgresql.dialect()))


def _session(result=None):
    session = MagicMock()
    session.execute = AsyncMock(return_value=result or MagicMock())
    session.flush = AsyncMock()
    return session


def _executed(session):
    return session.execute.await_args.args[0]


class TestSnippets:
    @pytest.mark.asyncio
    async def test_create_returns_inserted_row(self):
        result = MagicMock()
        result.scalar_one.return_value = "snippet"
        session = _session(result)

        created = await snippet_repo.create_snippet(
            session, uuid.uuid4(), uuid.uuid4(), SnippetCreate(name="CTA", content="Book a call?")
        )

        assert created == "snippet"
        assert _sql(_executed(session)).startswith("INSERT INTO crm.template_snippets")

    @pytest.mark.asyncio
    async def test_list_orders_by_use_count_then_name(self):
        result = MagicMock()
        result.scalars.return_value.all.return_value = []
        session = _session(result)

        assert await snippet_repo.list_snippets(session, uuid.uuid4()) == []

        sql = _sql(_executed(session))
        assert "snippet_type" not in sql.split("WHERE")[1]
        assert sql.endswith(
            "ORDER BY crm.template_snippets.use_count DESC, crm.template_snippets.name ASC"
        )

    @pytest.mark.asyncio
    async def test_list_filters_by_type(self):
        result = MagicMock()
        result.scalars.return_value.all.return_value = []
        session = _session(result)

        await snippet_repo.list_snippets(session, uuid.uuid4(), snippet_type="cta")

        assert "crm.template_snippets.snippet_type = " in _sql(_executed(session))

    @pytest.mark.asyncio
    async def test_empty_update_is_rejected_without_a_query(self):
        session = _session()
        with pytest.raises(NoFieldsToUpdateError, match="snippet"):
            await snippet_repo.update_snippet(session, uuid.uuid4(), SnippetUpdate())
        session.execute.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_update_writes_only_given_fields(self):
        result = MagicMock()
        result.scalar_one_or_none.return_value = None
        session = _session(result)

        assert await snippet_repo.update_snippet(
            session, uuid.uuid4(), SnippetUpdate(content="New body")
        ) is None

        set_clause = _sql(_executed(session)).split("WHERE")[0]
        assert "content=" in set_clause
        assert "name=" not in set_clause

    @pytest.mark.asyncio
    async def test_delete(self):
        session = _session(MagicMock(rowcount=1))
        await snippet_repo.delete_snippet(session, uuid.uuid4())
        assert _sql(_executed(session)).startswith("DELETE FROM crm.template_snippets")


class TestCollections:
    @pytest.mark.asyncio
    async def test_create(self):
        result = MagicMock()
        result.scalar_one.return_value = "collection"
        session = _session(result)

        created = await collection_repo.create_collection(
            session, uuid.uuid4(), uuid.uuid4(), CollectionCreate(name="Q4")
        )

        assert created == "collection"
        assert _sql(_executed(session)).startswith("INSERT INTO crm.template_collections")

    @pytest.mark.asyncio
    async def test_list_is_scoped_and_sorted_by_name(self):
        result = MagicMock()
        result.scalars.return_value.all.return_value = []
        session = _session(result)

        await collection_repo.list_collections(session, uuid.uuid4())

        sql = _sql(_executed(session))
        assert "crm.template_collections.workspace_id = " in sql
        assert sql.endswith("ORDER BY crm.template_collections.name ASC")

    @pytest.mark.asyncio
    async def test_add_is_idempotent(self):
        session = _session()
        await collection_repo.add_template_to_collection(session, uuid.uuid4(), uuid.uuid4())
        assert "ON CONFLICT (collection_id, template_id) DO NOTHING" in _sql(_executed(session))

    @pytest.mark.asyncio
    async def test_remove_absent_member_is_not_an_error(self):
        session = _session(MagicMock(rowcount=0))
        await collection_repo.remove_template_from_collection(session, uuid.uuid4(), uuid.uuid4())
        assert _sql(_executed(session)).startswith("DELETE FROM crm.template_collection_items")
