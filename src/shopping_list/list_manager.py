"""Shopping list management operations."""

from collections.abc import Iterable
from typing import Any
from uuid import UUID

import structlog

from .categories import (
    BUILTIN_KEYS,
    categorize,
    merge_colors,
    merge_labels,
    merged_key_order,
    new_custom_category_key,
)
from .data_store import DataStore
from .models import (
    CategoryKey,
    CustomCategory,
    ParsedItem,
    ShoppingItem,
    ShoppingList,
    Store,
)
from .recipes import capitalize_first, get_template, parse_recipe_text, template_to_items
from .suggestions import DEFAULT_MAX_SUGGESTIONS, suggest

logger = structlog.get_logger()


class ListNotFoundError(Exception):
    """Raised when a shopping list is not found."""

    def __init__(self, list_ref: UUID | str):
        self.list_ref = list_ref
        super().__init__(f"List '{list_ref}' not found")


class ItemNotFoundError(Exception):
    """Raised when an item is not found."""

    def __init__(self, item_id: UUID | str):
        self.item_id = item_id
        super().__init__(f"Item with ID '{item_id}' not found")


class CategoryNotFoundError(Exception):
    """Raised when a category key or custom category is not found."""

    def __init__(self, category_ref: UUID | str):
        self.category_ref = category_ref
        super().__init__(f"Category '{category_ref}' not found")


class StoreNotFoundError(Exception):
    """Raised when a store is not found."""

    def __init__(self, store_ref: UUID | str):
        self.store_ref = store_ref
        super().__init__(f"Store '{store_ref}' not found")


class AisleNotFoundError(Exception):
    """Raised when an aisle does not belong to the item's store."""

    def __init__(self, aisle: str, store_name: str | None = None):
        self.aisle = aisle
        self.store_name = store_name
        if store_name is None:
            super().__init__(f"Aisle '{aisle}' needs a store")
        else:
            super().__init__(f"Aisle '{aisle}' not found in store '{store_name}'")


def _matches(ref: UUID | str, record_id: UUID, name: str) -> bool:
    if isinstance(ref, UUID):
        return ref == record_id
    return ref == str(record_id) or ref.lower() == name.lower()


class ListManager:
    """Manages shopping lists, items, custom categories and stores."""

    def __init__(
        self,
        data_store: DataStore | None = None,
        max_suggestions: int = DEFAULT_MAX_SUGGESTIONS,
    ):
        """Initialize list manager.

        Args:
            data_store: DataStore instance. Creates new one if not provided.
            max_suggestions: Default suggestion count for get_suggestions
        """
        self.data_store = data_store or DataStore()
        self.max_suggestions = max_suggestions

    # --- Lookups ---

    def _find_list(self, lists: list[ShoppingList], list_ref: UUID | str) -> ShoppingList:
        for lst in lists:
            if _matches(list_ref, lst.id, lst.name):
                return lst
        raise ListNotFoundError(list_ref)

    def _find_item(self, lst: ShoppingList, item_id: UUID | str) -> ShoppingItem:
        for item in lst.items:
            if str(item.id) == str(item_id):
                return item
        raise ItemNotFoundError(item_id)

    def _find_store(self, stores: list[Store], store_ref: UUID | str) -> Store:
        for store in stores:
            if _matches(store_ref, store.id, store.name):
                return store
        raise StoreNotFoundError(store_ref)

    def _find_custom_category(
        self, categories: list[CustomCategory], category_ref: UUID | str
    ) -> CustomCategory:
        for cat in categories:
            if str(category_ref) in (str(cat.id), cat.key):
                return cat
        raise CategoryNotFoundError(category_ref)

    def _check_aisle(self, stores: list[Store], store_id: UUID | None, aisle: str) -> None:
        if store_id is None:
            raise AisleNotFoundError(aisle)
        store = self._find_store(stores, store_id)
        if aisle not in store.aisles:
            raise AisleNotFoundError(aisle, store.name)

    def resolve_list(
        self, list_ref: UUID | str | None = None, default_name: str = "My List"
    ) -> ShoppingList:
        """Find a list by id or name, or the first list when no reference is given.

        A list named default_name is created when there are no lists yet.

        Raises:
            ListNotFoundError: If list_ref names no list
        """
        lists = self.data_store.load_lists()
        if list_ref is not None:
            return self._find_list(lists, list_ref)
        if lists:
            return lists[0]
        lst = ShoppingList(name=default_name)
        self.data_store.save_lists([lst])
        logger.info("list_created", list_id=str(lst.id), name=lst.name)
        return lst

    # --- Lists ---

    def create_list(self, name: str) -> dict:
        """Create a new, empty shopping list."""
        name = name.strip()
        if not name:
            raise ValueError("List name cannot be empty")

        lists = self.data_store.load_lists()
        lst = ShoppingList(name=name)
        lists.append(lst)
        self.data_store.save_lists(lists)
        logger.info("list_created", list_id=str(lst.id), name=name)

        return {
            "success": True,
            "message": f"Created list {name}",
            "data": {"shopping_list": self._list_summary(lst)},
        }

    def rename_list(self, list_ref: UUID | str, name: str) -> dict:
        """Rename a shopping list."""
        name = name.strip()
        if not name:
            raise ValueError("List name cannot be empty")

        lists = self.data_store.load_lists()
        lst = self._find_list(lists, list_ref)
        old_name = lst.name
        lst.name = name
        self.data_store.save_lists(lists)

        return {
            "success": True,
            "message": f"Renamed {old_name} to {name}",
            "data": {"shopping_list": self._list_summary(lst)},
        }

    def delete_list(self, list_ref: UUID | str) -> dict:
        """Delete a shopping list and all its items."""
        lists = self.data_store.load_lists()
        lst = self._find_list(lists, list_ref)
        self.data_store.save_lists([other for other in lists if other.id != lst.id])
        logger.info("list_deleted", list_id=str(lst.id))

        return {
            "success": True,
            "message": f"Deleted list {lst.name}",
            "data": {"shopping_list": self._list_summary(lst)},
        }

    def get_lists(self) -> dict:
        """Get a summary of every shopping list."""
        lists = self.data_store.load_lists()
        return {
            "success": True,
            "data": {"lists": [self._list_summary(lst) for lst in lists]},
        }

    def get_list(self, list_ref: UUID | str) -> ShoppingList:
        """Get a shopping list by id or name.

        Raises:
            ListNotFoundError: If list not found
        """
        return self._find_list(self.data_store.load_lists(), list_ref)

    def get_grouped_list(self, list_ref: UUID | str) -> dict:
        """Get a list with unchecked items grouped by category.

        Groups follow the merged category order (custom categories just
        before Other). Items whose category key is unknown are grouped after
        the known ones. Checked items are returned separately.
        """
        lst = self.get_list(list_ref)
        custom = self.data_store.load_custom_categories()
        labels = merge_labels(custom)
        colors = merge_colors(custom)

        grouped: dict[str, list[dict]] = {}
        for item in lst.items:
            if not item.is_checked:
                grouped.setdefault(item.category, []).append(item.model_dump(mode="json"))

        order = merged_key_order(custom)
        order += [key for key in grouped if key not in order]

        groups = [
            {
                "key": key,
                "label": labels.get(key, key),
                "color": colors.get(key, "#9e9e9e"),
                "items": grouped[key],
            }
            for key in order
            if grouped.get(key)
        ]
        checked = [item.model_dump(mode="json") for item in lst.items if item.is_checked]

        return {
            "success": True,
            "data": {
                "grouped": {
                    "id": str(lst.id),
                    "name": lst.name,
                    "groups": groups,
                    "checked": checked,
                    "item_count": lst.item_count,
                    "total_items": len(lst.items),
                }
            },
        }

    def _list_summary(self, lst: ShoppingList) -> dict:
        return {
            "id": str(lst.id),
            "name": lst.name,
            "created_at": lst.created_at.isoformat(),
            "item_count": lst.item_count,
            "total_items": len(lst.items),
        }

    # --- Items ---

    def add_item(
        self,
        list_ref: UUID | str,
        name: str,
        store: UUID | str | None = None,
        aisle: str | None = None,
    ) -> dict:
        """Add an item to a shopping list.

        The name is capitalized and categorized using custom categories, and a
        history entry is recorded.

        Args:
            list_ref: List id or name
            name: Item name
            store: Store id or name
            aisle: Aisle within the store

        Returns:
            Dict with success status and item data

        Raises:
            ListNotFoundError: If the list doesn't exist
            StoreNotFoundError: If the store doesn't exist
            AisleNotFoundError: If the aisle isn't one of the store's aisles
        """
        name = capitalize_first(name.strip())
        if not name:
            raise ValueError("Item name cannot be empty")

        lists = self.data_store.load_lists()
        lst = self._find_list(lists, list_ref)

        store_id = None
        if store is not None or aisle is not None:
            stores = self.data_store.load_stores()
            if store is not None:
                store_id = self._find_store(stores, store).id
            if aisle is not None:
                self._check_aisle(stores, store_id, aisle)

        item = ShoppingItem(
            name=name,
            category=categorize(name, self.data_store.load_custom_categories()),
            store=store_id,
            aisle=aisle,
        )
        lst.items.append(item)
        self.data_store.save_lists(lists)
        self.data_store.append_history([name])
        logger.info("item_added", list_id=str(lst.id), name=name, category=item.category)

        return {
            "success": True,
            "message": f"Added {name} to {lst.name}",
            "data": {"item": item.model_dump(mode="json")},
        }

    def add_items(self, list_ref: UUID | str, items: Iterable[ParsedItem | dict[str, Any]]) -> dict:
        """Add several items at once.

        Items keep a category they already carry; the rest are categorized
        with custom categories.
        """
        lists = self.data_store.load_lists()
        lst = self._find_list(lists, list_ref)
        custom = self.data_store.load_custom_categories()

        added = []
        for raw in items:
            data = raw.model_dump() if isinstance(raw, ParsedItem) else dict(raw)
            name = capitalize_first(data["name"].strip())
            if not name:
                continue
            added.append(
                ShoppingItem(
                    name=name,
                    category=data.get("category") or categorize(name, custom),
                    store=data.get("store"),
                    aisle=data.get("aisle"),
                )
            )

        lst.items.extend(added)
        self.data_store.save_lists(lists)
        self.data_store.append_history([item.name for item in added])
        logger.info("items_added", list_id=str(lst.id), count=len(added))

        return {
            "success": True,
            "message": f"Added {len(added)} items to {lst.name}",
            "data": {"items": [item.model_dump(mode="json") for item in added]},
        }

    def toggle_item(self, list_ref: UUID | str, item_id: UUID | str) -> dict:
        """Flip an item between checked and unchecked."""
        lists = self.data_store.load_lists()
        lst = self._find_list(lists, list_ref)
        item = self._find_item(lst, item_id)
        item.is_checked = not item.is_checked
        self.data_store.save_lists(lists)

        state = "Checked" if item.is_checked else "Unchecked"
        return {
            "success": True,
            "message": f"{state} {item.name}",
            "data": {"item": item.model_dump(mode="json")},
        }

    def remove_item(self, list_ref: UUID | str, item_id: UUID | str) -> dict:
        """Remove an item from a shopping list.

        Raises:
            ItemNotFoundError: If item not found
        """
        lists = self.data_store.load_lists()
        lst = self._find_list(lists, list_ref)
        item = self._find_item(lst, item_id)
        lst.items.remove(item)
        self.data_store.save_lists(lists)

        return {
            "success": True,
            "message": f"Removed {item.name} from {lst.name}",
            "data": {"item": item.model_dump(mode="json")},
        }

    def update_item(
        self,
        list_ref: UUID | str,
        item_id: UUID | str,
        name: str | None = None,
        category: str | None = None,
        store: UUID | str | None = None,
        aisle: str | None = None,
        clear_store: bool = False,
    ) -> dict:
        """Update an item's name, category, store or aisle.

        Moving an item to a different store clears its aisle unless a new
        aisle is given in the same call. An aisle must belong to the item's
        store.

        Args:
            list_ref: List id or name
            item_id: Item id
            name: New name
            category: New category key (built-in or custom)
            store: New store id or name
            aisle: New aisle
            clear_store: Remove the store and aisle assignment

        Raises:
            ItemNotFoundError: If item not found
            CategoryNotFoundError: If category key is unknown
            StoreNotFoundError: If store not found
            AisleNotFoundError: If the aisle doesn't belong to the store
        """
        lists = self.data_store.load_lists()
        lst = self._find_list(lists, list_ref)
        item = self._find_item(lst, item_id)

        if name is not None:
            name = capitalize_first(name.strip())
            if not name:
                raise ValueError("Item name cannot be empty")
            item.name = name

        if category is not None:
            if category not in merged_key_order(self.data_store.load_custom_categories()):
                raise CategoryNotFoundError(category)
            item.category = category

        needs_stores = store is not None or aisle is not None or clear_store
        stores = self.data_store.load_stores() if needs_stores else []
        if clear_store:
            item.store = None
            item.aisle = None
        elif store is not None:
            new_store = self._find_store(stores, store)
            if new_store.id != item.store:
                item.store = new_store.id
                item.aisle = None

        if aisle is not None:
            self._check_aisle(stores, item.store, aisle)
            item.aisle = aisle

        self.data_store.save_lists(lists)
        return {
            "success": True,
            "message": f"Updated {item.name}",
            "data": {"item": item.model_dump(mode="json")},
        }

    def clear_checked(self, list_ref: UUID | str) -> dict:
        """Remove all checked items from a list.

        Returns:
            Dict with count of removed items
        """
        lists = self.data_store.load_lists()
        lst = self._find_list(lists, list_ref)
        original_count = len(lst.items)

        lst.items = [item for item in lst.items if not item.is_checked]

        removed_count = original_count - len(lst.items)
        self.data_store.save_lists(lists)

        return {
            "success": True,
            "message": f"Cleared {removed_count} checked items",
            "data": {"removed_count": removed_count},
        }

    # --- Suggestions and recipes ---

    def get_suggestions(self, list_ref: UUID | str, max_suggestions: int | None = None) -> dict:
        """Suggest items for a list from pairings and purchase history."""
        lst = self.get_list(list_ref)
        limit = self.max_suggestions if max_suggestions is None else max_suggestions
        suggestions = suggest(self.data_store.load_history(), lst.items, limit)

        return {
            "success": True,
            "data": {"suggestions": [s.model_dump() for s in suggestions]},
        }

    def preview_recipe_text(self, text: str) -> dict:
        """Parse recipe text without adding anything."""
        items = parse_recipe_text(text)
        return {
            "success": True,
            "data": {"parsed": [item.model_dump(mode="json") for item in items]},
        }

    def import_recipe_text(self, list_ref: UUID | str, text: str) -> dict:
        """Parse recipe text and add the ingredients to a list."""
        return self.add_items(list_ref, parse_recipe_text(text))

    def import_template(self, list_ref: UUID | str, template_id: str) -> dict:
        """Add a bundled recipe template's ingredients to a list.

        Raises:
            TemplateNotFoundError: If template id is unknown
        """
        return self.add_items(list_ref, template_to_items(get_template(template_id)))

    # --- Custom categories ---

    def get_categories(self) -> dict:
        """Get all categories in display order with labels and colors."""
        custom = self.data_store.load_custom_categories()
        labels = merge_labels(custom)
        colors = merge_colors(custom)
        keywords = {cat.key: cat.keywords for cat in custom}

        return {
            "success": True,
            "data": {
                "categories": [
                    {
                        "key": key,
                        "label": labels[key],
                        "color": colors[key],
                        "custom": key not in BUILTIN_KEYS,
                        "keywords": keywords.get(key, []),
                    }
                    for key in merged_key_order(custom)
                ]
            },
        }

    def add_custom_category(
        self, name: str, color: str = "#9e9e9e", keywords: list[str] | None = None
    ) -> dict:
        """Create a custom category placed after the existing ones."""
        name = name.strip()
        if not name:
            raise ValueError("Category name cannot be empty")

        categories = self.data_store.load_custom_categories()
        category = CustomCategory(
            key=new_custom_category_key(),
            name=name,
            color=color,
            keywords=keywords or [],
            order=len(categories),
        )
        categories.append(category)
        self.data_store.save_custom_categories(categories)
        logger.info("custom_category_created", key=category.key, name=name)

        return {
            "success": True,
            "message": f"Created category {name}",
            "data": {"category": category.model_dump(mode="json")},
        }

    def update_custom_category(
        self,
        category_ref: UUID | str,
        name: str | None = None,
        color: str | None = None,
        keywords: list[str] | None = None,
    ) -> dict:
        """Update a custom category's name, color or keywords."""
        categories = self.data_store.load_custom_categories()
        category = self._find_custom_category(categories, category_ref)

        if name is not None:
            category.name = name.strip() or category.name
        if color is not None:
            category.color = color
        if keywords is not None:
            category.keywords = [kw.strip() for kw in keywords if kw.strip()]

        self.data_store.save_custom_categories(categories)
        return {
            "success": True,
            "message": f"Updated category {category.name}",
            "data": {"category": category.model_dump(mode="json")},
        }

    def delete_custom_category(self, category_ref: UUID | str) -> dict:
        """Delete a custom category; its items move to Other."""
        categories = self.data_store.load_custom_categories()
        category = self._find_custom_category(categories, category_ref)
        remaining = [cat for cat in categories if cat.id != category.id]
        for index, cat in enumerate(remaining):
            cat.order = index
        self.data_store.save_custom_categories(remaining)

        lists = self.data_store.load_lists()
        moved = 0
        for lst in lists:
            for item in lst.items:
                if item.category == category.key:
                    item.category = CategoryKey.OTHER.value
                    moved += 1
        if moved:
            self.data_store.save_lists(lists)
        logger.info("custom_category_deleted", key=category.key, items_moved=moved)

        return {
            "success": True,
            "message": f"Deleted category {category.name}",
            "data": {"category": category.model_dump(mode="json"), "items_moved": moved},
        }

    def reorder_custom_categories(self, category_refs: list[UUID | str]) -> dict:
        """Put custom categories in the given order.

        Categories not mentioned keep their relative order after the listed ones.
        A category listed more than once keeps its first position.
        """
        categories = self.data_store.load_custom_categories()
        ordered: list[CustomCategory] = []
        ordered_ids = set()
        for ref in category_refs:
            cat = self._find_custom_category(categories, ref)
            if cat.id not in ordered_ids:
                ordered.append(cat)
                ordered_ids.add(cat.id)
        ordered += [cat for cat in categories if cat.id not in ordered_ids]

        for index, cat in enumerate(ordered):
            cat.order = index
        self.data_store.save_custom_categories(ordered)

        return {
            "success": True,
            "message": "Reordered categories",
            "data": {"custom_categories": [cat.model_dump(mode="json") for cat in ordered]},
        }

    # --- Stores ---

    def get_stores(self) -> dict:
        """Get all stores in display order."""
        stores = self.data_store.load_stores()
        return {
            "success": True,
            "data": {"stores": [store.model_dump(mode="json") for store in stores]},
        }

    def add_store(self, name: str, color: str = "#607d8b") -> dict:
        """Create a store placed after the existing ones."""
        name = name.strip()
        if not name:
            raise ValueError("Store name cannot be empty")

        stores = self.data_store.load_stores()
        store = Store(name=name, color=color, order=len(stores))
        stores.append(store)
        self.data_store.save_stores(stores)
        logger.info("store_created", store_id=str(store.id), name=name)

        return {
            "success": True,
            "message": f"Added store {name}",
            "data": {"store": store.model_dump(mode="json")},
        }

    def update_store(
        self, store_ref: UUID | str, name: str | None = None, color: str | None = None
    ) -> dict:
        """Rename or recolor a store."""
        stores = self.data_store.load_stores()
        store = self._find_store(stores, store_ref)
        if name is not None:
            store.name = name.strip() or store.name
        if color is not None:
            store.color = color
        self.data_store.save_stores(stores)

        return {
            "success": True,
            "message": f"Updated store {store.name}",
            "data": {"store": store.model_dump(mode="json")},
        }

    def delete_store(self, store_ref: UUID | str) -> dict:
        """Delete a store; items assigned to it lose their store and aisle."""
        stores = self.data_store.load_stores()
        store = self._find_store(stores, store_ref)
        remaining = [s for s in stores if s.id != store.id]
        for index, s in enumerate(remaining):
            s.order = index
        self.data_store.save_stores(remaining)

        lists = self.data_store.load_lists()
        cleared = 0
        for lst in lists:
            for item in lst.items:
                if item.store == store.id:
                    item.store = None
                    item.aisle = None
                    cleared += 1
        if cleared:
            self.data_store.save_lists(lists)

        return {
            "success": True,
            "message": f"Deleted store {store.name}",
            "data": {"store": store.model_dump(mode="json"), "items_cleared": cleared},
        }

    def reorder_stores(self, store_refs: list[UUID | str]) -> dict:
        """Put stores in the given order; unlisted stores follow.

        A store listed more than once keeps its first position.
        """
        stores = self.data_store.load_stores()
        ordered: list[Store] = []
        ordered_ids = set()
        for ref in store_refs:
            store = self._find_store(stores, ref)
            if store.id not in ordered_ids:
                ordered.append(store)
                ordered_ids.add(store.id)
        ordered += [s for s in stores if s.id not in ordered_ids]

        for index, s in enumerate(ordered):
            s.order = index
        self.data_store.save_stores(ordered)

        return {
            "success": True,
            "message": "Reordered stores",
            "data": {"stores": [s.model_dump(mode="json") for s in ordered]},
        }

    def add_aisle(self, store_ref: UUID | str, aisle: str) -> dict:
        """Append an aisle to a store."""
        aisle = aisle.strip()
        if not aisle:
            raise ValueError("Aisle name cannot be empty")

        stores = self.data_store.load_stores()
        store = self._find_store(stores, store_ref)
        if aisle not in store.aisles:
            store.aisles.append(aisle)
            self.data_store.save_stores(stores)

        return {
            "success": True,
            "message": f"Added aisle {aisle} to {store.name}",
            "data": {"store": store.model_dump(mode="json")},
        }

    def remove_aisle(self, store_ref: UUID | str, aisle: str) -> dict:
        """Remove an aisle from a store and from items placed in it."""
        stores = self.data_store.load_stores()
        store = self._find_store(stores, store_ref)
        if aisle not in store.aisles:
            raise AisleNotFoundError(aisle, store.name)
        store.aisles.remove(aisle)
        self.data_store.save_stores(stores)

        lists = self.data_store.load_lists()
        cleared = 0
        for lst in lists:
            for item in lst.items:
                if item.store == store.id and item.aisle == aisle:
                    item.aisle = None
                    cleared += 1
        if cleared:
            self.data_store.save_lists(lists)

        return {
            "success": True,
            "message": f"Removed aisle {aisle} from {store.name}",
            "data": {"store": store.model_dump(mode="json"), "items_cleared": cleared},
        }
