"""Unit tests for the operator CLI — repository calls are patched."""
import json
import uuid
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from pydantic import ValidationError

from cli import _build_arg_parser, build_list_query, run_command
from schemas.template import TemplatePage

WORKSPACE = str(uuid.uuid4())
USER = str(uuid.uuid4())


def _parse(*argv):
    return _build_arg_parser().parse_args(list(argv))


def _database():
    database = MagicMock()
    session = MagicMock()
    database.session.return_value.__aenter__.return_value = session
    database.session.return_value.__aexit__.return_value = False
    return database, session


def test_list_arguments_become_a_list_query():
    args = _parse(
        "list", "--workspace", WORKSPACE, "--user", USER,
        "--search", "enterprise", "--tag", "intro", "--tag", "saas",
        "--company-size", "enterprise", "--min-reply-rate", "2.5",
        "--favorites", "--page", "2", "--limit", "10", "--sort-by", "reply_rate",
    )
    query = build_list_query(args)

    assert query.search == "enterprise"
    assert query.tags == ["intro", "saas"]
    assert query.company_size == "enterprise"
    assert query.min_reply_rate == 2.5
    assert query.is_favorite is True
    assert (query.page, query.limit, query.sort_by) == (2, 10, "reply_rate")


def test_omitted_list_arguments_keep_schema_defaults():
    query = build_list_query(_parse("list", "--workspace", WORKSPACE, "--user", USER))
    assert (query.page, query.limit) == (1, 20)
    assert query.tags is None
    assert query.is_favorite is False


def test_invalid_filter_is_a_validation_error():
    args = _parse("list", "--workspace", WORKSPACE, "--user", USER, "--category", "spam")
    with pytest.raises(ValidationError):
        build_list_query(args)


@pytest.mark.asyncio
async def test_list_prints_items_and_total():
    database, session = _database()
    args = _parse("list", "--workspace", WORKSPACE, "--user", USER)

    with patch("cli.template_repo.list_templates", new=AsyncMock(return_value=TemplatePage(items=[], total=0))) as list_templates:
        output = await run_command(database, args)

    assert json.loads(output) == {"items": [], "total": 0}
    call = list_templates.await_args
    assert call.args[0] is session
    assert call.args[1] == uuid.UUID(WORKSPACE)


@pytest.mark.asyncio
async def test_show_missing_template():
    database, _ = _database()
    template = str(uuid.uuid4())
    args = _parse("show", "--template", template, "--user", USER)

    with patch("cli.template_repo.get_template", new=AsyncMock(return_value=None)):
        output = await run_command(database, args)

    assert json.loads(output) == {"error": f"template {template} not found"}


@pytest.mark.asyncio
async def test_favorite_and_unfavorite():
    database, session = _database()
    template = str(uuid.uuid4())

    with patch("cli.template_repo.add_favorite", new=AsyncMock()) as add, \
            patch("cli.template_repo.remove_favorite", new=AsyncMock()) as remove:
        await run_command(database, _parse("favorite", "--user", USER, "--template", template))
        await run_command(database, _parse("unfavorite", "--user", USER, "--template", template))

    add.assert_awaited_once_with(session, uuid.UUID(USER), uuid.UUID(template))
    remove.assert_awaited_once_with(session, uuid.UUID(USER), uuid.UUID(template))


@pytest.mark.asyncio
async def test_invalid_list_query_opens_no_session():
    database, _ = _database()
    args = _parse("list", "--workspace", WORKSPACE, "--user", USER, "--page", "0")
    with pytest.raises(ValidationError):
        await run_command(database, args)
    database.session.assert_not_called()


@pytest.mark.parametrize("argv", [
    ("--limit", "0"),
    ("--limit", "-1"),
    ("--min-sends", "-5"),
])
def test_top_rejects_out_of_range_numbers(argv):
    with pytest.raises(SystemExit):
        _parse("top", "--workspace", WORKSPACE, *argv)


def test_top_accepts_zero_min_sends():
    args = _parse("top", "--workspace", WORKSPACE, "--limit", "3", "--min-sends", "0")
    assert (args.limit, args.min_sends) == (3, 0)
