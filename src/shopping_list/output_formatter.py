"""Output formatting for CLI and programmatic use."""

import json
from datetime import datetime
from typing import Any
from uuid import UUID

from rich.console import Console
from rich.table import Table


class JSONEncoder(json.JSONEncoder):
    """Custom JSON encoder for output."""

    def default(self, obj: Any) -> Any:
        if isinstance(obj, UUID):
            return str(obj)
        if isinstance(obj, datetime):
            return obj.isoformat()
        return super().default(obj)


class OutputFormatter:
    """Formats output for both Rich terminal and JSON modes."""

    def __init__(self, json_mode: bool = False):
        """Initialize formatter.

        Args:
            json_mode: If True, output JSON instead of Rich formatting
        """
        self.json_mode = json_mode
        self.console = Console()

    def output(self, data: dict[str, Any], message: str = "") -> None:
        """Output data in appropriate format.

        Args:
            data: Data to output
            message: Optional message for Rich mode
        """
        if self.json_mode:
            self._output_json(data)
        else:
            self._output_rich(data, message)

    def _output_json(self, data: dict[str, Any]) -> None:
        """Output as JSON to stdout."""
        print(json.dumps(data, cls=JSONEncoder, indent=2))

    def _output_rich(self, data: dict[str, Any], message: str) -> None:
        """Output with Rich formatting."""
        if message:
            self.console.print(f"[green]✓[/green] {message}")

        payload = data.get("data", {})
        if "grouped" in payload:
            self._render_grouped_list(payload["grouped"])
        elif "lists" in payload:
            self._render_lists(payload["lists"])
        elif "suggestions" in payload:
            self._render_suggestions(payload["suggestions"])
        elif "parsed" in payload:
            self._render_parsed(payload["parsed"])
        elif "items" in payload:
            self._render_parsed(payload["items"])
        elif "templates" in payload:
            self._render_templates(payload["templates"])
        elif "categories" in payload:
            self._render_categories(payload["categories"])
        elif "stores" in payload:
            self._render_stores(payload["stores"])
        elif "item" in payload:
            self._render_item(payload["item"])

    def _render_grouped_list(self, grouped: dict) -> None:
        """Render a list grouped by category."""
        self.console.print(f"\n[bold]{grouped['name']}[/bold]")

        if not grouped["groups"] and not grouped["checked"]:
            self.console.print("[dim]Your list is empty.[/dim]")
            return

        for group in grouped["groups"]:
            color = group["color"]
            self.console.print(
                f"\n[{color}]●[/] [bold]{group['label']}[/bold] "
                f"[dim]({len(group['items'])})[/dim]"
            )
            for item in group["items"]:
                aisle = f" [dim]aisle {item['aisle']}[/dim]" if item.get("aisle") else ""
                self.console.print(f"  ○ {item['name']}{aisle}  [dim]{item['id']}[/dim]")

        if grouped["checked"]:
            self.console.print(f"\n[bold]Checked ({len(grouped['checked'])})[/bold]")
            for item in grouped["checked"]:
                self.console.print(f"  [green]✓[/green] [dim]{item['name']}[/dim]")

        self.console.print(f"\nItems to buy: {grouped['item_count']}")

    def _render_lists(self, lists: list[dict]) -> None:
        """Render list summaries."""
        if not lists:
            self.console.print("[dim]No lists yet[/dim]")
            return

        table = Table(title="Shopping Lists", show_header=True, header_style="bold cyan")
        table.add_column("Name", style="cyan")
        table.add_column("To buy", style="magenta", justify="right")
        table.add_column("Total", justify="right")
        table.add_column("ID", style="dim")

        for lst in lists:
            table.add_row(lst["name"], str(lst["item_count"]), str(lst["total_items"]), lst["id"])

        self.console.print(table)

    def _render_suggestions(self, suggestions: list[dict]) -> None:
        """Render item suggestions."""
        if not suggestions:
            self.console.print("[dim]No suggestions at this time[/dim]")
            return

        self.console.print("\n[bold]Suggestions[/bold]")
        for s in suggestions:
            self.console.print(
                f"  • [bold]{s['name']}[/bold] [dim]({s['category']})[/dim]: {s['reason']}"
            )

    def _render_parsed(self, items: list[dict]) -> None:
        """Render items parsed from a recipe."""
        if not items:
            self.console.print("[dim]No ingredients found[/dim]")
            return

        table = Table(title="Ingredients", show_header=True, header_style="bold cyan")
        table.add_column("Item", style="cyan")
        table.add_column("Category", style="yellow")

        for item in items:
            table.add_row(item["name"], item["category"])

        self.console.print(table)

    def _render_templates(self, templates: list[dict]) -> None:
        """Render bundled recipe templates."""
        table = Table(title="Recipe Templates", show_header=True, header_style="bold cyan")
        table.add_column("ID", style="dim")
        table.add_column("Name", style="cyan")
        table.add_column("Description")
        table.add_column("Ingredients", justify="right")

        for t in templates:
            table.add_row(t["id"], t["name"], t["description"], str(len(t["ingredients"])))

        self.console.print(table)

    def _render_categories(self, categories: list[dict]) -> None:
        """Render categories in display order."""
        table = Table(title="Categories", show_header=True, header_style="bold cyan")
        table.add_column("Key", style="dim")
        table.add_column("Label", style="cyan")
        table.add_column("Keywords")

        for cat in categories:
            label = f"[{cat['color']}]●[/] {cat['label']}"
            if cat["custom"]:
                label += " [dim](custom)[/dim]"
            table.add_row(cat["key"], label, ", ".join(cat["keywords"]))

        self.console.print(table)

    def _render_stores(self, stores: list[dict]) -> None:
        """Render stores with their aisles."""
        if not stores:
            self.console.print("[dim]No stores yet[/dim]")
            return

        table = Table(title="Stores", show_header=True, header_style="bold cyan")
        table.add_column("Name", style="cyan")
        table.add_column("Aisles")
        table.add_column("ID", style="dim")

        for store in stores:
            table.add_row(store["name"], ", ".join(store["aisles"]) or "-", store["id"])

        self.console.print(table)

    def _render_item(self, item: dict) -> None:
        """Render a single item."""
        self.console.print(f"  [dim]Category:[/dim] {item['category']}")
        self.console.print(f"  [dim]ID:[/dim] {item['id']}")

    def error(self, message: str, error_code: str | None = None) -> None:
        """Output error message.

        Args:
            message: Error message
            error_code: Optional error code
        """
        if self.json_mode:
            output = {"success": False, "error": message}
            if error_code:
                output["error_code"] = error_code
            print(json.dumps(output))
        else:
            self.console.print(f"[red]✗ Error:[/red] {message}")
