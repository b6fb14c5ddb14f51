"""CLI entry point for Shopping List."""

from pathlib import Path
from typing import Annotated, NoReturn

import structlog
import typer

from .categories import categorize, merge_labels
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
from .logging_config import configure_logging
from .output_formatter import OutputFormatter
from .recipes import RECIPE_TEMPLATES, TemplateNotFoundError

app = typer.Typer(
    name="shop",
    help="Shopping lists with automatic categories, suggestions and recipe import",
    no_args_is_help=True,
)

logger = structlog.get_logger()

# Global state for formatter and config (set by callback)
formatter: OutputFormatter = OutputFormatter()
config: ConfigManager | None = None
data_store: DataStore | None = None
list_manager: ListManager | None = None

ERROR_CODES: dict[type[Exception], str] = {
    ListNotFoundError: "LIST_NOT_FOUND",
    ItemNotFoundError: "ITEM_NOT_FOUND",
    CategoryNotFoundError: "CATEGORY_NOT_FOUND",
    StoreNotFoundError: "STORE_NOT_FOUND",
    AisleNotFoundError: "AISLE_NOT_FOUND",
    TemplateNotFoundError: "TEMPLATE_NOT_FOUND",
    DataStoreError: "DATA_ERROR",
    ValueError: "INVALID_INPUT",
}

ListOption = Annotated[
    str | None, typer.Option("--list", "-l", help="List name or ID (defaults to the first list)")
]


def get_config() -> ConfigManager:
    """Get or create ConfigManager instance."""
    global config
    if config is None:
        config = ConfigManager()
    return config


def get_data_store() -> DataStore:
    """Get or create DataStore instance using config values."""
    global data_store
    if data_store is None:
        cfg = get_config()
        data_store = DataStore(
            data_dir=cfg.data.storage_dir, history_limit=cfg.suggestions.history_limit
        )
    return data_store


def get_list_manager() -> ListManager:
    """Get or create ListManager instance."""
    global list_manager
    if list_manager is None:
        list_manager = ListManager(
            get_data_store(), max_suggestions=get_config().suggestions.max_suggestions
        )
    return list_manager


def resolve_list_id(list_ref: str | None) -> str:
    """Resolve a --list option to a list ID, creating the default list if needed."""
    manager = get_list_manager()
    lst = manager.resolve_list(list_ref, default_name=get_config().defaults.list_name)
    return str(lst.id)


def fail(e: Exception) -> NoReturn:
    """Report an error and exit with status 1."""
    code = next((c for exc, c in ERROR_CODES.items() if isinstance(e, exc)), None)
    if code is None:
        logger.exception("command_failed")
    formatter.error(str(e), error_code=code)
    raise typer.Exit(code=1)


def read_text(text: str | None, file: Path | None) -> str:
    """Recipe text from an argument, a file, or stdin."""
    if text is not None:
        return text
    if file is not None:
        return file.read_text()
    return typer.get_text_stream("stdin").read()


@app.callback()
def main(
    json_output: Annotated[
        bool, typer.Option("--json", help="Output as JSON for programmatic use")
    ] = False,
    data_dir: Annotated[Path | None, typer.Option("--data-dir", help="Data directory path")] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Debug logging")] = False,
) -> None:
    """Shopping List CLI - categorized lists, suggestions and recipe import."""
    global formatter, config, data_store, list_manager

    formatter = OutputFormatter(json_mode=json_output)

    config = ConfigManager()
    configure_logging(
        level="DEBUG" if verbose else config.logging.level,
        json_output=config.logging.json,
    )

    # CLI --data-dir overrides config, which overrides default
    effective_data_dir = data_dir if data_dir else config.data.storage_dir

    data_store = DataStore(
        data_dir=effective_data_dir, history_limit=config.suggestions.history_limit
    )
    list_manager = ListManager(data_store, max_suggestions=config.suggestions.max_suggestions)


# --- Lists ---


@app.command(name="lists")
def show_lists() -> None:
    """Show all shopping lists."""
    try:
        result = get_list_manager().get_lists()
        formatter.output(result)
    except Exception as e:
        fail(e)


@app.command(name="new-list")
def new_list(
    name: Annotated[str, typer.Argument(help="Name of the new list")],
) -> None:
    """Create a shopping list."""
    try:
        result = get_list_manager().create_list(name)
        formatter.output(result, result["message"])
    except Exception as e:
        fail(e)


@app.command(name="rename-list")
def rename_list(
    list_ref: Annotated[str, typer.Argument(help="List name or ID")],
    name: Annotated[str, typer.Argument(help="New name")],
) -> None:
    """Rename a shopping list."""
    try:
        result = get_list_manager().rename_list(list_ref, name)
        formatter.output(result, result["message"])
    except Exception as e:
        fail(e)


@app.command(name="delete-list")
def delete_list(
    list_ref: Annotated[str, typer.Argument(help="List name or ID")],
) -> None:
    """Delete a shopping list and its items."""
    try:
        result = get_list_manager().delete_list(list_ref)
        formatter.output(result, result["message"])
    except Exception as e:
        fail(e)


# --- Items ---


@app.command()
def add(
    item: Annotated[str, typer.Argument(help="Item name to add")],
    list_ref: ListOption = None,
    store: Annotated[str | None, typer.Option("--store", "-s", help="Store name or ID")] = None,
    aisle: Annotated[str | None, typer.Option("--aisle", "-a", help="Aisle in the store")] = None,
) -> None:
    """Add an item; its category is detected from the name."""
    try:
        result = get_list_manager().add_item(
            resolve_list_id(list_ref), item, store=store, aisle=aisle
        )
        formatter.output(result, result["message"])
    except Exception as e:
        fail(e)


@app.command()
def remove(
    item_id: Annotated[str, typer.Argument(help="Item ID to remove")],
    list_ref: ListOption = None,
) -> None:
    """Remove an item from a list."""
    try:
        result = get_list_manager().remove_item(resolve_list_id(list_ref), item_id)
        formatter.output(result, result["message"])
    except Exception as e:
        fail(e)


@app.command()
def toggle(
    item_id: Annotated[str, typer.Argument(help="Item ID to check or uncheck")],
    list_ref: ListOption = None,
) -> None:
    """Check or uncheck an item."""
    try:
        result = get_list_manager().toggle_item(resolve_list_id(list_ref), item_id)
        formatter.output(result, result["message"])
    except Exception as e:
        fail(e)


@app.command()
def show(list_ref: ListOption = None) -> None:
    """Show a list grouped by category."""
    try:
        result = get_list_manager().get_grouped_list(resolve_list_id(list_ref))
        formatter.output(result)
    except Exception as e:
        fail(e)


@app.command(name="clear-checked")
def clear_checked(list_ref: ListOption = None) -> None:
    """Remove all checked items from a list."""
    try:
        result = get_list_manager().clear_checked(resolve_list_id(list_ref))
        formatter.output(result, result["message"])
    except Exception as e:
        fail(e)


@app.command(name="set-category")
def set_category(
    item_id: Annotated[str, typer.Argument(help="Item ID")],
    category: Annotated[str, typer.Argument(help="Category key")],
    list_ref: ListOption = None,
) -> None:
    """Override an item's category."""
    try:
        result = get_list_manager().update_item(
            resolve_list_id(list_ref), item_id, category=category
        )
        formatter.output(result, result["message"])
    except Exception as e:
        fail(e)


@app.command(name="set-store")
def set_store(
    item_id: Annotated[str, typer.Argument(help="Item ID")],
    store: Annotated[str | None, typer.Argument(help="Store name or ID")] = None,
    aisle: Annotated[str | None, typer.Option("--aisle", "-a", help="Aisle in the store")] = None,
    clear: Annotated[bool, typer.Option("--clear", help="Remove store and aisle")] = False,
    list_ref: ListOption = None,
) -> None:
    """Assign an item to a store and aisle."""
    try:
        result = get_list_manager().update_item(
            resolve_list_id(list_ref), item_id, store=store, aisle=aisle, clear_store=clear
        )
        formatter.output(result, result["message"])
    except Exception as e:
        fail(e)


# --- Intelligence ---


@app.command()
def suggest(
    list_ref: ListOption = None,
    max_suggestions: Annotated[
        int | None, typer.Option("--max", "-m", help="Maximum number of suggestions")
    ] = None,
) -> None:
    """Suggest items from pairings and purchase history."""
    try:
        result = get_list_manager().get_suggestions(
            resolve_list_id(list_ref), max_suggestions=max_suggestions
        )
        formatter.output(result)
    except Exception as e:
        fail(e)


@app.command(name="categorize")
def categorize_name(
    name: Annotated[str, typer.Argument(help="Item name to classify")],
) -> None:
    """Show which category an item name falls into."""
    try:
        custom = get_data_store().load_custom_categories()
        key = categorize(name, custom)
        label = merge_labels(custom).get(key, key)
        result = {
            "success": True,
            "data": {"categorized": {"name": name, "category": key, "label": label}},
        }
        formatter.output(result, f"{name} → {label}")
    except Exception as e:
        fail(e)


# Recipe subcommand group
recipe_app = typer.Typer(help="Recipe import commands")
app.add_typer(recipe_app, name="recipe")

RecipeText = Annotated[str | None, typer.Argument(help="Recipe text (reads stdin if omitted)")]
RecipeFile = Annotated[Path | None, typer.Option("--file", "-f", help="Read recipe from file")]


@recipe_app.command("parse")
def recipe_parse(text: RecipeText = None, file: RecipeFile = None) -> None:
    """Preview the ingredients found in recipe text."""
    try:
        result = get_list_manager().preview_recipe_text(read_text(text, file))
        formatter.output(result)
    except Exception as e:
        fail(e)


@recipe_app.command("import")
def recipe_import(
    text: RecipeText = None, file: RecipeFile = None, list_ref: ListOption = None
) -> None:
    """Add the ingredients found in recipe text to a list."""
    try:
        recipe = read_text(text, file)
        result = get_list_manager().import_recipe_text(resolve_list_id(list_ref), recipe)
        formatter.output(result, result["message"])
    except Exception as e:
        fail(e)


@recipe_app.command("templates")
def recipe_templates() -> None:
    """Show the bundled recipe templates."""
    result = {
        "success": True,
        "data": {"templates": [t.model_dump(mode="json") for t in RECIPE_TEMPLATES]},
    }
    formatter.output(result)


@recipe_app.command("use-template")
def recipe_use_template(
    template_id: Annotated[str, typer.Argument(help="Template ID")],
    list_ref: ListOption = None,
) -> None:
    """Add a recipe template's ingredients to a list."""
    try:
        result = get_list_manager().import_template(resolve_list_id(list_ref), template_id)
        formatter.output(result, result["message"])
    except Exception as e:
        fail(e)


# Category subcommand group
category_app = typer.Typer(help="Custom category commands")
app.add_typer(category_app, name="category")


@category_app.command("list")
def category_list() -> None:
    """Show all categories in display order."""
    try:
        formatter.output(get_list_manager().get_categories())
    except Exception as e:
        fail(e)


@category_app.command("add")
def category_add(
    name: Annotated[str, typer.Argument(help="Category name")],
    color: Annotated[str, typer.Option("--color", help="Display color")] = "#9e9e9e",
    keyword: Annotated[
        list[str] | None, typer.Option("--keyword", "-k", help="Keyword (repeatable)")
    ] = None,
) -> None:
    """Create a custom category."""
    try:
        result = get_list_manager().add_custom_category(name, color=color, keywords=keyword)
        formatter.output(result, result["message"])
    except Exception as e:
        fail(e)


@category_app.command("delete")
def category_delete(
    category: Annotated[str, typer.Argument(help="Category key or ID")],
) -> None:
    """Delete a custom category; its items move to Other."""
    try:
        result = get_list_manager().delete_custom_category(category)
        formatter.output(result, result["message"])
    except Exception as e:
        fail(e)


@category_app.command("reorder")
def category_reorder(
    categories: Annotated[list[str], typer.Argument(help="Category keys in the new order")],
) -> None:
    """Reorder custom categories."""
    try:
        result = get_list_manager().reorder_custom_categories(categories)
        formatter.output(result, result["message"])
    except Exception as e:
        fail(e)


# Store subcommand group
store_app = typer.Typer(help="Store and aisle commands")
app.add_typer(store_app, name="store")


@store_app.command("list")
def store_list() -> None:
    """Show all stores with their aisles."""
    try:
        formatter.output(get_list_manager().get_stores())
    except Exception as e:
        fail(e)


@store_app.command("add")
def store_add(
    name: Annotated[str, typer.Argument(help="Store name")],
    color: Annotated[str, typer.Option("--color", help="Display color")] = "#607d8b",
) -> None:
    """Add a store."""
    try:
        result = get_list_manager().add_store(name, color=color)
        formatter.output(result, result["message"])
    except Exception as e:
        fail(e)


@store_app.command("delete")
def store_delete(
    store: Annotated[str, typer.Argument(help="Store name or ID")],
) -> None:
    """Delete a store; its items lose their store and aisle."""
    try:
        result = get_list_manager().delete_store(store)
        formatter.output(result, result["message"])
    except Exception as e:
        fail(e)


@store_app.command("add-aisle")
def store_add_aisle(
    store: Annotated[str, typer.Argument(help="Store name or ID")],
    aisle: Annotated[str, typer.Argument(help="Aisle name")],
) -> None:
    """Add an aisle to a store."""
    try:
        result = get_list_manager().add_aisle(store, aisle)
        formatter.output(result, result["message"])
    except Exception as e:
        fail(e)


@store_app.command("remove-aisle")
def store_remove_aisle(
    store: Annotated[str, typer.Argument(help="Store name or ID")],
    aisle: Annotated[str, typer.Argument(help="Aisle name")],
) -> None:
    """Remove an aisle from a store."""
    try:
        result = get_list_manager().remove_aisle(store, aisle)
        formatter.output(result, result["message"])
    except Exception as e:
        fail(e)


if __name__ == "__main__":
    app()
