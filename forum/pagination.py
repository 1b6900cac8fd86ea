"""
Forum — Offset Pagination
==========================

What:  Turns a SELECT statement into one page of results plus the totals a
       pager needs (page count, previous/next links).
Why:   List screens show numbered pages ("page 3 of 7"), so offset pagination
       with a COUNT(*) is the right shape here.
How:   paginate() wraps the statement in a COUNT subquery for the total, then
       applies OFFSET/LIMIT for the items.

The page size is always supplied by the caller from configuration; only the
page number comes from the request, and parse_page() makes any bad value 1.
"""

import math
from dataclasses import dataclass, field
from typing import Any, Generic, List, Optional, TypeVar

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

T = TypeVar("T")


@dataclass
class Page(Generic[T]):
    """One page of results. An empty page is well-formed (pages == 1)."""

    items: List[T] = field(default_factory=list)
    page: int = 1
    per_page: int = 10
    total: int = 0

    @property
    def pages(self) -> int:
        return max(1, math.ceil(self.total / self.per_page))

    @property
    def has_previous(self) -> bool:
        return self.page > 1

    @property
    def has_next(self) -> bool:
        return self.page < self.pages

    @property
    def previous_page(self) -> Optional[int]:
        return self.page - 1 if self.has_previous else None

    @property
    def next_page(self) -> Optional[int]:
        return self.page + 1 if self.has_next else None

    def __iter__(self):
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)


def parse_page(raw: Any) -> int:
    """Positive page number from a query-string value; anything else is 1."""
    try:
        page = int(raw)
    except (TypeError, ValueError):
        return 1
    return page if page >= 1 else 1


async def paginate(
    session: AsyncSession,
    statement: Select,
    page: int,
    per_page: int,
) -> Page:
    """
    Execute `statement` for one page.

    Args:
        session:   Request-scoped async session
        statement: ORM select in its final order
        page:      1-based page number (already sanitized by parse_page)
        per_page:  Fixed page size for the entity type

    Returns:
        Page with the items and the unpaged total. A page past the end has no
        items but keeps the real total, so the pager can link back.
    """
    count_statement = select(func.count()).select_from(
        statement.order_by(None).subquery()
    )
    total = (await session.execute(count_statement)).scalar() or 0

    # Past the end: no query, and no OFFSET too large for the driver
    offset = (page - 1) * per_page
    if offset >= total:
        return Page(items=[], page=page, per_page=per_page, total=total)

    result = await session.execute(statement.offset(offset).limit(per_page))
    items = list(result.scalars().all())

    return Page(items=items, page=page, per_page=per_page, total=total)
