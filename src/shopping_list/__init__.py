"""Shopping List - categorized shopping lists with suggestions and recipe import."""

from .categories import (
    BUILTIN_CATEGORIES,
    categorize,
    merge_colors,
    merge_labels,
    merged_key_order,
    new_custom_category_key,
)
from .config import ConfigManager
from .data_store import DataStore, DataStoreError
from .list_manager import (
    AisleNotFoundError,
    CategoryNotFoundError,
    ItemNotFoundError,
    ListManager,
    ListNotFoundError,
    StoreNotFoundError,
)
from .models import (
    Category,
    CategoryKey,
    CustomCategory,
    HistoryEntry,
    ParsedItem,
    RecipeTemplate,
    ShoppingItem,
    ShoppingList,
    Store,
    Suggestion,
)
from .output_formatter import OutputFormatter
from .recipes import (
    RECIPE_TEMPLATES,
    TemplateNotFoundError,
    get_template,
    parse_recipe_text,
    template_to_items,
)
from .suggestions import suggest

__version__ = "0.1.0"

__all__ = [
    "AisleNotFoundError",
    "BUILTIN_CATEGORIES",
    "Category",
    "CategoryKey",
    "CategoryNotFoundError",
    "categorize",
    "ConfigManager",
    "CustomCategory",
    "DataStore",
    "DataStoreError",
    "get_template",
    "HistoryEntry",
    "ItemNotFoundError",
    "ListManager",
    "ListNotFoundError",
    "merge_colors",
    "merge_labels",
    "merged_key_order",
    "new_custom_category_key",
    "OutputFormatter",
    "parse_recipe_text",
    "ParsedItem",
    "RECIPE_TEMPLATES",
    "RecipeTemplate",
    "ShoppingItem",
    "ShoppingList",
    "Store",
    "StoreNotFoundError",
    "suggest",
    "Suggestion",
    "template_to_items",
    "TemplateNotFoundError",
]
