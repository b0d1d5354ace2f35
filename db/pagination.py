"""Count + page execution shared by list repositories."""
import logging
from typing import Any, Sequence

from sqlalchemy import Row, Select
from sqlalchemy.ext.asyncio import AsyncSession

logger = logging.getLogger(__name__)


def page_offset(page: int, limit: int) -> int:
    if page < 1:
        raise ValueError(f"page must be >= 1, got {page}")
    if limit < 1:
        raise ValueError(f"limit must be >= 1, got {limit}")
    return (page - 1) * limit


async def fetch_page(
    session: AsyncSession,
    count_stmt: Select,
    data_stmt: Select,
    page: int,
    limit: int,
) -> tuple[Sequence[Row[Any]], int]:
    """Run count_stmt then data_stmt sliced to one page.

    Both statements must be built from the same condition list so the total
    and the rows cannot drift. count_stmt must select a single integer.
    Errors from the database propagate unchanged.
    """
    offset = page_offset(page, limit)

    total = (await session.execute(count_stmt)).scalar_one()
    result = await session.execute(data_stmt.limit(limit).offset(offset))
    rows = result.all()

    logger.debug("Fetched page %d (limit %d): %d of %d rows", page, limit, len(rows), total)
    return rows, int(total)
