"""Shared model building blocks: camelCase wire format, money and paging."""

import math
from collections.abc import Sequence
from decimal import ROUND_HALF_UP, Decimal
from typing import Annotated, Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, PlainSerializer
from pydantic.alias_generators import to_camel

# Decimal in Python and DynamoDB, plain JSON number on the wire
Number = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]
Money = Number

CENT = Decimal("0.01")

T = TypeVar("T")


def round_money(value: Decimal | int) -> Decimal:
    """Round a monetary amount to whole cents."""
    return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


class CamelModel(BaseModel):
    """Base model exposing camelCase field names in JSON."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_response(self) -> dict[str, Any]:
        """Serialize for an API response body."""
        return self.model_dump(mode="json", by_alias=True)


class Pagination(CamelModel):
    """Paging metadata returned alongside every list response."""

    current_page: int
    total_pages: int
    total_items: int
    has_next_page: bool
    has_prev_page: bool


class Page(CamelModel, Generic[T]):
    """One page of records plus its paging metadata."""

    records: list[T]
    pagination: Pagination


def paginate(records: Sequence[T], page: int, limit: int) -> Page[T]:
    """Slice an already filtered and sorted sequence into a page.

    Args:
        records: Every matching record, in final order
        page: 1-based page number
        limit: Page size

    Returns:
        Page holding at most ``limit`` records
    """
    total = len(records)
    total_pages = math.ceil(total / limit) if total else 0
    start = (page - 1) * limit
    return Page(
        records=list(records[start : start + limit]),
        pagination=Pagination(
            current_page=page,
            total_pages=total_pages,
            total_items=total,
            has_next_page=page < total_pages,
            has_prev_page=page > 1,
        ),
    )
