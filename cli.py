"""Reachbase template library — operator command line.

Usage:
  # List a workspace's templates (same filters as the list endpoint)
  python cli.py list --workspace <uuid> --user <uuid> --search enterprise \
      --tag intro --tag saas --sort-by reply_rate --page 2 --limit 10

  # Show one template with metrics and favorite flag
  python cli.py show --template <uuid> --user <uuid>

  # Best templates by reply rate
  python cli.py top --workspace <uuid> --limit 5

  # Toggle a favorite
  python cli.py favorite --user <uuid> --template <uuid>
  python cli.py unfavorite --user <uuid> --template <uuid>

Output is JSON on stdout. DATABASE_URL must point at PostgreSQL (asyncpg).
"""
import argparse
import asyncio
import json
import logging
import sys
import uuid

from pydantic import ValidationError

import db.repositories.templates as template_repo
from db.connection import Database
from schemas.template import TemplateListQuery


def build_list_query(args: argparse.Namespace) -> TemplateListQuery:
    """Translate `list` arguments into a validated TemplateListQuery."""
    raw = {
        "page": args.page,
        "limit": args.limit,
        "sort_by": args.sort_by,
        "sort_order": args.sort_order,
        "search": args.search,
        "category": args.category,
        "persona": args.persona,
        "industry": args.industry,
        "company_size": args.company_size,
        "sales_stage": args.sales_stage,
        "campaign_type": args.campaign_type,
        "tone": args.tone,
        "status": args.status,
        "access_level": args.access_level,
        "tags": args.tag or None,
        "created_by": args.created_by,
        "min_reply_rate": args.min_reply_rate,
        "max_reply_rate": args.max_reply_rate,
        "is_favorite": args.favorites,
    }
    return TemplateListQuery(**{k: v for k, v in raw.items() if v is not None})


async def run_command(database: Database, args: argparse.Namespace) -> str:
    """Execute one sub-command and return its JSON output."""
    # Validate list filters before a session is opened.
    list_query = build_list_query(args) if args.command == "list" else None

    async with database.session() as session:
        if list_query is not None:
            page = await template_repo.list_templates(
                session, args.workspace, args.user, list_query
            )
            return page.model_dump_json(indent=2)

        if args.command == "show":
            item = await template_repo.get_template(session, args.template, args.user)
            if item is None:
                return json.dumps({"error": f"template {args.template} not found"})
            return item.model_dump_json(indent=2)

        if args.command == "top":
            items = await template_repo.get_top_performers(
                session, args.workspace, limit=args.limit, min_sends=args.min_sends
            )
            return json.dumps([item.model_dump(mode="json") for item in items], indent=2)

        if args.command == "favorite":
            await template_repo.add_favorite(session, args.user, args.template)
            return json.dumps({"favorited": str(args.template)})

        if args.command == "unfavorite":
            await template_repo.remove_favorite(session, args.user, args.template)
            return json.dumps({"unfavorited": str(args.template)})

    raise ValueError(f"Unknown command: {args.command}")


def _positive_int(value: str) -> int:
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {number}")
    return number


def _non_negative_int(value: str) -> int:
    number = int(value)
    if number < 0:
        raise argparse.ArgumentTypeError(f"must not be negative, got {number}")
    return number


def _build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Reachbase template library")
    sub = parser.add_subparsers(dest="command")

    lst = sub.add_parser("list", help="List templates in a workspace")
    lst.add_argument("--workspace", type=uuid.UUID, required=True)
    lst.add_argument("--user", type=uuid.UUID, required=True, help="Viewing user (for favorites)")
    lst.add_argument("--page", type=int)
    lst.add_argument("--limit", type=int)
    lst.add_argument("--sort-by")
    lst.add_argument("--sort-order")
    lst.add_argument("--search")
    lst.add_argument("--category")
    lst.add_argument("--persona")
    lst.add_argument("--industry")
    lst.add_argument("--company-size")
    lst.add_argument("--sales-stage")
    lst.add_argument("--campaign-type")
    lst.add_argument("--tone")
    lst.add_argument("--status")
    lst.add_argument("--access-level")
    lst.add_argument("--tag", action="append", help="Repeatable; matches any of the given tags")
    lst.add_argument("--created-by", type=uuid.UUID)
    lst.add_argument("--min-reply-rate", type=float)
    lst.add_argument("--max-reply-rate", type=float)
    lst.add_argument(
        "--favorites",
        action="store_true",
        default=None,
        help="Only templates the viewing user has favorited",
    )

    show = sub.add_parser("show", help="Show one template")
    show.add_argument("--template", type=uuid.UUID, required=True)
    show.add_argument("--user", type=uuid.UUID, required=True)

    top = sub.add_parser("top", help="Top templates by reply rate")
    top.add_argument("--workspace", type=uuid.UUID, required=True)
    top.add_argument("--limit", type=_positive_int, default=10)
    top.add_argument("--min-sends", type=_non_negative_int, default=10)

    for name, help_text in (("favorite", "Favorite a template"), ("unfavorite", "Remove a favorite")):
        fav = sub.add_parser(name, help=help_text)
        fav.add_argument("--user", type=uuid.UUID, required=True)
        fav.add_argument("--template", type=uuid.UUID, required=True)

    return parser


async def _main(args: argparse.Namespace) -> None:
    database = Database.from_env()
    try:
        print(await run_command(database, args))
    finally:
        await database.dispose()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")
    parser = _build_arg_parser()
    args = parser.parse_args()

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    try:
        asyncio.run(_main(args))
    except ValidationError as exc:
        parser.error(str(exc))
