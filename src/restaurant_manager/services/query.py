"""Validation and list-shaping helpers shared by the services."""

from collections.abc import Callable, Iterable
from datetime import UTC, datetime
from typing import Any, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from restaurant_manager.errors import ValidationError

ModelT = TypeVar("ModelT", bound=BaseModel)
RecordT = TypeVar("RecordT")

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100


def field_messages(error: PydanticValidationError) -> list[str]:
    """Flatten a pydantic error into one message per failing field."""
    messages = []
    for detail in error.errors():
        location = ".".join(str(part) for part in detail["loc"])
        messages.append(f"{location}: {detail['msg']}" if location else detail["msg"])
    return messages


def validate_model(model: type[ModelT], data: Any, message: str = "Validation error") -> ModelT:
    """Validate raw input against a model.

    Raises:
        ValidationError: Listing every failing field
    """
    try:
        return model.model_validate(data)
    except PydanticValidationError as e:
        raise ValidationError(message, field_messages(e)) from e


def check_paging(page: int, limit: int) -> tuple[int, int]:
    """Validate paging input and cap the page size.

    Returns:
        tuple: (page, limit) with limit capped at MAX_PAGE_SIZE

    Raises:
        ValidationError: If page or limit is below 1
    """
    errors = []
    if page < 1:
        errors.append("page: must be at least 1")
    if limit < 1:
        errors.append("limit: must be at least 1")
    if errors:
        raise ValidationError("Invalid pagination parameters", errors)
    return page, min(limit, MAX_PAGE_SIZE)


def sort_records(
    records: Iterable[RecordT],
    sort_by: str,
    sort_order: str,
    sort_keys: dict[str, Callable[[RecordT], Any]],
) -> list[RecordT]:
    """Sort records by one of the allowed fields.

    Args:
        records: Records to sort
        sort_by: Public field name, a key of ``sort_keys``
        sort_order: "asc" or "desc"
        sort_keys: Allowed field names mapped to key functions

    Raises:
        ValidationError: For an unknown field or direction
    """
    errors = []
    if sort_by not in sort_keys:
        errors.append(f"sortBy: must be one of {', '.join(sorted(sort_keys))}")
    if sort_order not in ("asc", "desc"):
        errors.append("sortOrder: must be 'asc' or 'desc'")
    if errors:
        raise ValidationError("Invalid sort parameters", errors)

    return sorted(records, key=sort_keys[sort_by], reverse=sort_order == "desc")


def as_aware(value: datetime) -> datetime:
    """Treat naive datetimes as UTC so they compare with stored instants."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value
