"""Menu catalog models.

``MenuItemAttributes`` holds the caller-editable fields and their validation
rules; ``MenuItem`` adds the server-assigned identity and record metadata and
knows how to round-trip itself through a DynamoDB item.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any

from pydantic import ConfigDict, Field

from restaurant_manager.models.common import CamelModel, Money, Number


class MenuCategory(str, Enum):
    """Fixed set of menu sections."""

    APPETIZER = "appetizer"
    MAIN = "main"
    DESSERT = "dessert"
    BEVERAGE = "beverage"
    SALAD = "salad"


class NutritionalInfo(CamelModel):
    """Per-serving nutrition facts; every figure is optional."""

    calories: Number | None = Field(None, ge=0)
    protein: Number | None = Field(None, ge=0)
    carbs: Number | None = Field(None, ge=0)
    fat: Number | None = Field(None, ge=0)


class CustomizationOption(CamelModel):
    """A choice the customer can make for an item, e.g. "Size"."""

    name: str = Field(..., min_length=1)
    options: list[str] = Field(default_factory=list)
    additional_price: Money = Field(default=Decimal("0"), ge=0)


class MenuItemAttributes(CamelModel):
    """Caller-supplied menu item fields."""

    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=1, max_length=100, description="Item name")
    description: str = Field(..., min_length=1, max_length=500, description="Item description")
    category: MenuCategory = Field(..., description="Menu section")
    price: Money = Field(..., ge=0, description="Item price")
    ingredients: list[str] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    availability: bool = Field(default=True, description="Whether item can be ordered")
    image_url: str | None = Field(None, description="URL to item image")
    nutritional_info: NutritionalInfo | None = None
    customization_options: list[CustomizationOption] = Field(default_factory=list)


class MenuItem(MenuItemAttributes):
    """Stored menu item."""

    id: str = Field(..., description="Unique identifier for the menu item")
    created_at: datetime
    updated_at: datetime

    def to_dynamodb_item(self) -> dict[str, Any]:
        """Convert to DynamoDB item format.

        Returns:
            dict: DynamoDB-compatible representation
        """
        item: dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "category": self.category.value,
            "price": self.price,
            "ingredients": list(self.ingredients),
            "tags": list(self.tags),
            "availability": self.availability,
            "customization_options": [
                {
                    "name": option.name,
                    "options": list(option.options),
                    "additional_price": option.additional_price,
                }
                for option in self.customization_options
            ],
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }

        if self.image_url is not None:
            item["image_url"] = self.image_url

        if self.nutritional_info is not None:
            item["nutritional_info"] = self.nutritional_info.model_dump(exclude_none=True)

        return item

    @classmethod
    def from_dynamodb_item(cls, item: dict[str, Any]) -> "MenuItem":
        """Create MenuItem from DynamoDB item.

        Args:
            item: DynamoDB item dictionary

        Returns:
            MenuItem: Parsed model instance
        """
        data: dict[str, Any] = {
            "id": item["id"],
            "name": item["name"],
            "description": item["description"],
            "category": MenuCategory(item["category"]),
            "price": item["price"],
            "ingredients": item.get("ingredients", []),
            "tags": item.get("tags", []),
            "availability": item.get("availability", True),
            "customization_options": item.get("customization_options", []),
            "created_at": datetime.fromisoformat(item["created_at"]),
            "updated_at": datetime.fromisoformat(item["updated_at"]),
        }

        if "image_url" in item:
            data["image_url"] = item["image_url"]

        if "nutritional_info" in item:
            data["nutritional_info"] = item["nutritional_info"]

        return cls.model_validate(data)


class MenuItemSummary(CamelModel):
    """Catalog fields attached to order lines for display."""

    id: str
    name: str
    price: Money
    category: MenuCategory

    @classmethod
    def from_menu_item(cls, menu_item: MenuItem) -> "MenuItemSummary":
        return cls(
            id=menu_item.id,
            name=menu_item.name,
            price=menu_item.price,
            category=menu_item.category,
        )
