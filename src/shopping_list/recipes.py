"""Recipe parsing: turn recipe text or templates into shopping list items."""

import re

import structlog

from .categories import categorize
from .models import ParsedItem, RecipeTemplate

logger = structlog.get_logger()

UNITS = (
    r"cups?",
    r"tbsp",
    r"tablespoons?",
    r"tsp",
    r"teaspoons?",
    r"oz",
    r"ounces?",
    r"lbs?",
    r"pounds?",
    r"grams?",
    r"g",
    r"kg",
    r"ml",
    r"liters?",
    r"quarts?",
    r"pints?",
    r"gallons?",
    r"cloves?",
    r"slices?",
    r"pieces?",
    r"cans?",
    r"packages?",
    r"bunches?",
    r"heads?",
    r"stalks?",
    r"sprigs?",
    r"pinch(?:es)?",
    r"dash(?:es)?",
    r"handfuls?",
)

_BULLET = re.compile(r"^[-*•]\s*")
_SECTION_HEADER = re.compile(r"^(instructions|directions|steps|method)", re.IGNORECASE)
_PARENTHETICAL = re.compile(r"\(.*?\)")
_AFTER_COMMA = re.compile(r",.*$")
_QUANTITY = re.compile(r"^[\d./\s¼-¾⅐-⅞-]+")
_UNIT = re.compile(rf"^(?:{'|'.join(UNITS)})\s+(?:of(?:\s+|$))?", re.IGNORECASE)

MIN_NAME_LENGTH = 2


class TemplateNotFoundError(Exception):
    """Raised when a recipe template id is unknown."""

    def __init__(self, template_id: str):
        self.template_id = template_id
        super().__init__(f"Recipe template '{template_id}' not found")


RECIPE_TEMPLATES: tuple[RecipeTemplate, ...] = (
    RecipeTemplate(
        id="spaghetti-bolognese",
        name="Spaghetti Bolognese",
        description="Classic Italian pasta with meat sauce",
        ingredients=(
            "spaghetti", "ground beef", "tomato sauce", "onion", "garlic",
            "olive oil", "parmesan", "salt", "pepper", "basil",
        ),
    ),
    RecipeTemplate(
        id="chicken-stir-fry",
        name="Chicken Stir Fry",
        description="Quick and easy weeknight dinner",
        ingredients=(
            "chicken breast", "broccoli", "bell pepper", "soy sauce", "garlic",
            "ginger", "rice", "vegetable oil", "sesame oil",
        ),
    ),
    RecipeTemplate(
        id="tacos",
        name="Tacos",
        description="Build-your-own taco night",
        ingredients=(
            "ground beef", "tortillas", "cheese", "lettuce", "tomatoes",
            "sour cream", "salsa", "onion", "cilantro", "lime",
        ),
    ),
    RecipeTemplate(
        id="caesar-salad",
        name="Caesar Salad",
        description="Classic caesar with homemade dressing",
        ingredients=(
            "romaine lettuce", "parmesan", "croutons", "lemon", "garlic",
            "olive oil", "anchovy paste", "eggs",
        ),
    ),
    RecipeTemplate(
        id="pancakes",
        name="Pancakes",
        description="Fluffy breakfast pancakes",
        ingredients=(
            "flour", "eggs", "milk", "butter", "sugar", "baking powder",
            "salt", "vanilla", "maple syrup",
        ),
    ),
    RecipeTemplate(
        id="grilled-salmon",
        name="Grilled Salmon",
        description="Simple grilled salmon with vegetables",
        ingredients=(
            "salmon", "lemon", "garlic", "olive oil", "asparagus", "salt",
            "pepper", "butter", "dill",
        ),
    ),
)


def get_template(template_id: str) -> RecipeTemplate:
    """Look up a bundled recipe template by id.

    Raises:
        TemplateNotFoundError: If no template has that id
    """
    for template in RECIPE_TEMPLATES:
        if template.id == template_id:
            return template
    raise TemplateNotFoundError(template_id)


def capitalize_first(name: str) -> str:
    """Uppercase the first character, leaving the rest untouched."""
    return name[:1].upper() + name[1:]


def strip_quantity(line: str) -> str:
    """Strip quantity, unit and prep notes from an ingredient line.

    "2 cups flour" -> "flour", "1/2 lb ground beef, minced" -> "ground beef".
    """
    cleaned = _PARENTHETICAL.sub("", line)
    cleaned = _AFTER_COMMA.sub("", cleaned).strip()
    cleaned = _QUANTITY.sub("", cleaned).strip()
    cleaned = _UNIT.sub("", cleaned).strip()

    if not cleaned:
        cleaned = _QUANTITY.sub("", line).strip()

    return cleaned


def _ingredient_lines(text: str) -> list[str]:
    lines = []
    for raw in text.splitlines():
        line = _BULLET.sub("", raw.strip()).strip()
        # Only the header line itself is dropped; later lines still parse.
        if not line or _SECTION_HEADER.match(line):
            continue
        lines.append(line)
    return lines


def _to_item(name: str) -> ParsedItem:
    return ParsedItem(name=capitalize_first(name), category=categorize(name))


def parse_recipe_text(text: str) -> list[ParsedItem]:
    """Parse free-form recipe text into list items.

    One ingredient per line. Bullets, quantities, units, parenthetical notes
    and anything after a comma are removed. Duplicate ingredients
    (case-insensitive) and names shorter than two characters are skipped.

    Args:
        text: Raw recipe text

    Returns:
        Items in line order, unchecked, each with a fresh id
    """
    if not text or not text.strip():
        return []

    items: list[ParsedItem] = []
    seen: set[str] = set()

    for line in _ingredient_lines(text):
        name = strip_quantity(line)
        key = name.lower()
        if len(key) < MIN_NAME_LENGTH or key in seen:
            continue
        seen.add(key)
        items.append(_to_item(name))

    logger.debug("recipe_parsed", items=len(items))
    return items


def template_to_items(template: RecipeTemplate) -> list[ParsedItem]:
    """Convert every template ingredient into an item, in order."""
    return [_to_item(ingredient) for ingredient in template.ingredients]
