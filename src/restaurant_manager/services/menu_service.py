"""Menu catalog service: search, create, update and soft delete."""

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Any

from restaurant_manager.clock import Clock, utc_now
from restaurant_manager.errors import NotFoundError, ValidationError
from restaurant_manager.models.common import Page, paginate
from restaurant_manager.models.menu_models import MenuCategory, MenuItem, MenuItemAttributes
from restaurant_manager.observability import traced
from restaurant_manager.repositories.menu_repository import MenuItemRepository
from restaurant_manager.services.query import (
    DEFAULT_PAGE_SIZE,
    check_paging,
    sort_records,
    validate_model,
)

logger = logging.getLogger(__name__)

MENU_SORT_KEYS = {
    "name": lambda item: item.name.lower(),
    "price": lambda item: item.price,
    "category": lambda item: item.category.value,
    "createdAt": lambda item: item.created_at,
    "updatedAt": lambda item: item.updated_at,
}

# Accepted input keys (camelCase alias or field name) -> field name
_ATTRIBUTE_KEYS = {
    key: name
    for name, field in MenuItemAttributes.model_fields.items()
    for key in (name, field.alias or name)
}


@dataclass
class MenuSearchFilters:
    """Catalog search criteria; all filters combine with AND.

    Attributes:
        search: Free text matched case-insensitively against name and description
        category: Exact category
        tags: Item must carry at least one of these tags
        min_price: Inclusive lower price bound
        max_price: Inclusive upper price bound
        availability: Availability flag to match; unavailable items are hidden by default
    """

    search: str | None = None
    category: str | None = None
    tags: list[str] | None = None
    min_price: Decimal | None = None
    max_price: Decimal | None = None
    availability: bool = True
    page: int = 1
    limit: int = DEFAULT_PAGE_SIZE
    sort_by: str = "name"
    sort_order: str = "asc"


def _parse_category(value: str | None) -> MenuCategory | None:
    if value is None:
        return None
    try:
        return MenuCategory(value)
    except ValueError as e:
        allowed = ", ".join(c.value for c in MenuCategory)
        raise ValidationError(
            "Invalid search parameters", [f"category: must be one of {allowed}"]
        ) from e


def new_menu_item(attributes: dict[str, Any], now: datetime) -> MenuItem:
    """Validate caller-supplied attributes into a new, unsaved menu item.

    Raises:
        ValidationError: Listing every failing field
    """
    validated = validate_model(MenuItemAttributes, attributes)
    return MenuItem(
        **validated.model_dump(),
        id=f"item_{uuid.uuid4().hex}",
        created_at=now,
        updated_at=now,
    )


def matches(item: MenuItem, filters: MenuSearchFilters, category: MenuCategory | None) -> bool:
    """Whether a menu item satisfies every given filter."""
    if item.availability != filters.availability:
        return False
    if category is not None and item.category != category:
        return False
    if filters.tags and not set(filters.tags) & set(item.tags):
        return False
    if filters.min_price is not None and item.price < filters.min_price:
        return False
    if filters.max_price is not None and item.price > filters.max_price:
        return False
    if filters.search:
        text = f"{item.name} {item.description}".lower()
        if not any(term in text for term in filters.search.lower().split()):
            return False
    return True


class MenuService:
    """Service for the menu catalog.

    Items are never physically removed; deleting an item marks it
    unavailable so historical orders keep a valid reference.
    """

    def __init__(self, menu_repository: MenuItemRepository, clock: Clock = utc_now) -> None:
        """Initialize the MenuService.

        Args:
            menu_repository: Repository for menu items
            clock: Source of the current instant
        """
        self.menu_repository = menu_repository
        self.clock = clock

    @traced("menu.search")
    async def search(self, filters: MenuSearchFilters) -> Page[MenuItem]:
        """Filter, sort and paginate the catalog.

        Args:
            filters: Search criteria

        Returns:
            Page of matching menu items

        Raises:
            ValidationError: For an unknown category, sort field or bad paging
        """
        page, limit = check_paging(filters.page, filters.limit)
        category = _parse_category(filters.category)

        found = [
            item
            for item in self.menu_repository.list_items()
            if matches(item, filters, category)
        ]
        ordered = sort_records(found, filters.sort_by, filters.sort_order, MENU_SORT_KEYS)
        return paginate(ordered, page, limit)

    async def get_item(self, item_id: str) -> MenuItem:
        """Get a menu item by id.

        Raises:
            NotFoundError: If no item has that id
        """
        menu_item = self.menu_repository.get_item(item_id)
        if menu_item is None:
            raise NotFoundError("Menu item", item_id)
        return menu_item

    @traced("menu.create")
    async def create_item(self, attributes: dict[str, Any]) -> MenuItem:
        """Validate and store a new menu item.

        Args:
            attributes: Caller-supplied fields (camelCase or snake_case keys)

        Returns:
            The stored MenuItem with its assigned id and timestamps

        Raises:
            ValidationError: Listing every failing field
        """
        menu_item = new_menu_item(attributes, self.clock())
        self.menu_repository.save_item(menu_item)

        logger.info(f"Created menu item {menu_item.id} ({menu_item.name})")
        return menu_item

    @traced("menu.update")
    async def update_item(self, item_id: str, changes: dict[str, Any]) -> MenuItem:
        """Merge the given fields into an item and re-validate the result.

        Unknown keys and server-owned fields (id, timestamps) are ignored.

        Raises:
            NotFoundError: If no item has that id
            ValidationError: If the merged item is invalid
        """
        existing = await self.get_item(item_id)

        # Merge changes over the stored item, then re-validate the whole
        merged = existing.model_dump(exclude={"id", "created_at", "updated_at"})
        merged.update(
            {_ATTRIBUTE_KEYS[key]: value for key, value in changes.items() if key in _ATTRIBUTE_KEYS}
        )
        validated = validate_model(MenuItemAttributes, merged)

        menu_item = MenuItem(
            **validated.model_dump(),
            id=existing.id,
            created_at=existing.created_at,
            updated_at=self.clock(),
        )
        self.menu_repository.save_item(menu_item)

        logger.info(f"Updated menu item {item_id}")
        return menu_item

    @traced("menu.soft_delete")
    async def soft_delete_item(self, item_id: str) -> MenuItem:
        """Mark an item unavailable. Repeating the call is harmless.

        Raises:
            NotFoundError: If no item has that id
        """
        menu_item = self.menu_repository.set_availability(item_id, False, self.clock())
        if menu_item is None:
            raise NotFoundError("Menu item", item_id)

        logger.info(f"Marked menu item {item_id} unavailable")
        return menu_item
