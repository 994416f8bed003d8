from typing import Any

from pydantic import BaseModel, Field
from pymongo.asynchronous.collection import AsyncCollection

from finpilot.core.db import MongoModel


class PaginationResult[T](BaseModel):
    """One page of a per-user listing, newest first."""

    items: list[T] = Field(..., description="Items on this page")
    total: int = Field(..., description="Items matching the query across all pages", ge=0)
    limit: int = Field(..., description="Page size", ge=1)
    offset: int = Field(..., description="Items skipped before this page", ge=0)
    next_offset: int | None = Field(None, description="Offset of the following page, or null on the last page")


async def paginate[M: MongoModel](
    collection: AsyncCollection[dict[str, Any]],
    model: type[M],
    query: dict[str, Any],
    limit: int,
    offset: int,
    sort_field: str = "created_at",
) -> PaginationResult[M]:
    """Count and fetch one page of `query`, sorted by `sort_field` descending."""
    total = await collection.count_documents(query)
    cursor = collection.find(query).sort(sort_field, -1).skip(offset).limit(limit)
    items = await model.list_cursor(cursor)
    next_offset = offset + len(items) if offset + len(items) < total else None
    return PaginationResult(items=items, total=total, limit=limit, offset=offset, next_offset=next_offset)
