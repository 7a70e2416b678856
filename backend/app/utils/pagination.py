"""
Pagination Utility Module

Length-aware pagination shared by every list endpoint. The page shape
(`data`, `current_page`, `per_page`, `total`, `last_page`, `from`, `to`) is
what the admin UI tables consume.
"""
from typing import Generic, List, Optional, Any, TypeVar
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import Select

T = TypeVar('T')


class Page(BaseModel, Generic[T]):
    """One page of results"""
    model_config = ConfigDict(populate_by_name=True)

    data: List[T]
    current_page: int
    per_page: int
    total: int
    last_page: int
    # 1-based positions of the first and last item shown; None on an empty page
    from_: Optional[int] = Field(None, alias="from")
    to: Optional[int] = None


def last_page_for(total: int, per_page: int) -> int:
    """Number of the last page; 1 when there are no records"""
    return max(1, (total + per_page - 1) // per_page)


def build_page(items: List[Any], total: int, page: int, per_page: int) -> dict:
    """
    Create a page dictionary.

    Args:
        items: Items for the current page (empty when page is past the end)
        total: Total count of matching items
        page: Current page number (1-based)
        per_page: Items per page

    Returns:
        Page dictionary with `from`/`to` set to None when `items` is empty
    """
    offset = (page - 1) * per_page
    return {
        "data": items,
        "current_page": page,
        "per_page": per_page,
        "total": total,
        "last_page": last_page_for(total, per_page),
        "from": offset + 1 if items else None,
        "to": offset + len(items) if items else None,
    }


async def paginate(
    db: AsyncSession,
    query: Select,
    page: int = 1,
    per_page: int = 10,
    count_query: Optional[Select] = None
) -> dict:
    """
    Apply pagination to a SQLAlchemy query.

    A page past `last_page` is not an error: it yields no items while
    `total` and `last_page` still describe the full result set.

    Args:
        db: Database session
        query: Filtered and ordered query
        page: Page number (1-based, already normalized by the caller)
        per_page: Items per page (already allow-listed by the caller)
        count_query: Optional custom count query

    Returns:
        Page dictionary (see build_page)
    """
    if count_query is None:
        # Ordering is irrelevant for the count
        count_query = select(func.count()).select_from(query.order_by(None).subquery())

    total = await db.scalar(count_query) or 0

    items: List[Any] = []
    if page <= last_page_for(total, per_page) and total > 0:
        offset = (page - 1) * per_page
        result = await db.execute(query.offset(offset).limit(per_page))
        items = list(result.scalars().unique().all())

    return build_page(items, total, page, per_page)
