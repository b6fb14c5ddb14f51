"""Core data models for Shopping List."""

from datetime import datetime
from enum import Enum
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator

CUSTOM_KEY_PREFIX = "custom_"


class CategoryKey(str, Enum):
    """Built-in category keys, in display order."""

    PRODUCE = "produce"
    DAIRY = "dairy"
    MEAT = "meat"
    BAKERY = "bakery"
    FROZEN = "frozen"
    PANTRY = "pantry"
    BEVERAGES = "beverages"
    SNACKS = "snacks"
    CONDIMENTS = "condiments"
    HOUSEHOLD = "household"
    PERSONAL_CARE = "personal_care"
    OTHER = "other"


class Category(BaseModel):
    """A built-in grocery category."""

    model_config = ConfigDict(frozen=True)

    key: str
    label: str
    color: str
    keywords: tuple[str, ...] = ()


class CustomCategory(BaseModel):
    """A user-defined category layered over the built-in taxonomy."""

    id: UUID = Field(default_factory=uuid4)
    key: str
    name: str
    color: str = "#9e9e9e"
    keywords: list[str] = Field(default_factory=list)
    order: int = 0

    @field_validator("key")
    @classmethod
    def validate_key(cls, v: str) -> str:
        builtin = {k.value for k in CategoryKey}
        if v in builtin:
            raise ValueError(f"Custom category key '{v}' collides with a built-in category")
        if not v.startswith(CUSTOM_KEY_PREFIX) or len(v) == len(CUSTOM_KEY_PREFIX):
            raise ValueError(f"Custom category key must start with '{CUSTOM_KEY_PREFIX}'")
        return v

    @field_validator("keywords")
    @classmethod
    def clean_keywords(cls, v: list[str]) -> list[str]:
        return [kw.strip() for kw in v if kw.strip()]


class ShoppingItem(BaseModel):
    """An item on a shopping list."""

    id: UUID = Field(default_factory=uuid4)
    name: str
    category: str = CategoryKey.OTHER.value
    is_checked: bool = False
    store: UUID | None = None
    aisle: str | None = None
    added_at: datetime = Field(default_factory=datetime.now)


class ShoppingList(BaseModel):
    """A named shopping list."""

    id: UUID = Field(default_factory=uuid4)
    name: str
    created_at: datetime = Field(default_factory=datetime.now)
    items: list[ShoppingItem] = Field(default_factory=list)

    @property
    def item_count(self) -> int:
        """Number of items still to buy."""
        return sum(1 for item in self.items if not item.is_checked)


class HistoryEntry(BaseModel):
    """A past addition of an item to any list."""

    name: str
    added_at: datetime = Field(default_factory=datetime.now)


class Store(BaseModel):
    """A store with its ordered aisles."""

    id: UUID = Field(default_factory=uuid4)
    name: str
    color: str = "#607d8b"
    aisles: list[str] = Field(default_factory=list)
    order: int = 0


class RecipeTemplate(BaseModel):
    """A curated, read-only ingredient list."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    description: str
    ingredients: tuple[str, ...]


class ParsedItem(BaseModel):
    """An item produced from recipe text or a template."""

    id: UUID = Field(default_factory=uuid4)
    name: str
    category: str = CategoryKey.OTHER.value
    is_checked: bool = False


class Suggestion(BaseModel):
    """A suggested item with the reason it was suggested."""

    name: str
    reason: str
    category: str
