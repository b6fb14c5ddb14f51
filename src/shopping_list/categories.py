"""Category registry and keyword-based item categorization.

Built-in categories form a fixed, ordered taxonomy with ``other`` as the last
entry and the fallback. User-defined custom categories are layered on top:
their keywords are checked before the built-in ones, and their keys are
spliced into the display order just before ``other``.
"""

from collections.abc import Sequence
from uuid import uuid4

import structlog

from .models import CUSTOM_KEY_PREFIX, Category, CategoryKey, CustomCategory

logger = structlog.get_logger()

_LABELS: dict[str, str] = {
    CategoryKey.PRODUCE: "Produce",
    CategoryKey.DAIRY: "Dairy & Eggs",
    CategoryKey.MEAT: "Meat & Seafood",
    CategoryKey.BAKERY: "Bakery",
    CategoryKey.FROZEN: "Frozen",
    CategoryKey.PANTRY: "Pantry & Dry Goods",
    CategoryKey.BEVERAGES: "Beverages",
    CategoryKey.SNACKS: "Snacks",
    CategoryKey.CONDIMENTS: "Condiments & Sauces",
    CategoryKey.HOUSEHOLD: "Household",
    CategoryKey.PERSONAL_CARE: "Personal Care",
    CategoryKey.OTHER: "Other",
}

_COLORS: dict[str, str] = {
    CategoryKey.PRODUCE: "#4caf50",
    CategoryKey.DAIRY: "#2196f3",
    CategoryKey.MEAT: "#e53935",
    CategoryKey.BAKERY: "#ff9800",
    CategoryKey.FROZEN: "#00bcd4",
    CategoryKey.PANTRY: "#795548",
    CategoryKey.BEVERAGES: "#9c27b0",
    CategoryKey.SNACKS: "#ffc107",
    CategoryKey.CONDIMENTS: "#ff5722",
    CategoryKey.HOUSEHOLD: "#607d8b",
    CategoryKey.PERSONAL_CARE: "#e91e63",
    CategoryKey.OTHER: "#9e9e9e",
}


def _group(key: CategoryKey, *keywords: str) -> tuple[tuple[str, str], ...]:
    return tuple((kw, key.value) for kw in keywords)


# Declaration order matters: phrase matching returns the first hit.
KEYWORDS: tuple[tuple[str, str], ...] = (
    *_group(
        CategoryKey.PRODUCE,
        "apple", "apples", "banana", "bananas", "lettuce", "tomato", "tomatoes",
        "onion", "onions", "garlic", "potato", "potatoes", "carrot", "carrots",
        "broccoli", "spinach", "avocado", "avocados", "cucumber", "peppers",
        "pepper", "celery", "mushroom", "mushrooms", "lemon", "lemons", "lime",
        "limes", "orange", "oranges", "berries", "strawberries", "blueberries",
        "grapes", "kale", "zucchini", "corn", "ginger", "cilantro", "parsley",
        "basil", "mint", "jalapeño", "jalapeno",
    ),
    *_group(
        CategoryKey.DAIRY,
        "milk", "cheese", "yogurt", "butter", "cream", "eggs", "egg",
        "sour cream", "cream cheese", "cottage cheese", "mozzarella",
        "parmesan", "cheddar",
    ),
    *_group(
        CategoryKey.MEAT,
        "chicken", "beef", "pork", "steak", "salmon", "shrimp", "turkey",
        "bacon", "sausage", "ground beef", "ground turkey", "fish", "tuna",
        "lamb", "ham",
    ),
    *_group(
        CategoryKey.BAKERY,
        "bread", "bagel", "bagels", "tortilla", "tortillas", "rolls", "buns",
        "croissant", "muffin", "muffins", "pita",
    ),
    *_group(
        CategoryKey.FROZEN,
        "ice cream", "frozen pizza", "frozen vegetables", "frozen fruit",
        "frozen berries",
    ),
    *_group(
        CategoryKey.PANTRY,
        "rice", "pasta", "flour", "sugar", "salt", "oil", "olive oil",
        "vegetable oil", "coconut oil", "beans", "lentils", "oats", "cereal",
        "peanut butter", "canned tomatoes", "tomato paste", "tomato sauce",
        "chicken broth", "broth", "noodles", "quinoa", "baking soda",
        "baking powder", "vanilla", "honey", "vinegar", "nuts", "almonds",
        "walnuts",
    ),
    *_group(
        CategoryKey.BEVERAGES,
        "water", "juice", "coffee", "tea", "soda", "wine", "beer",
    ),
    *_group(
        CategoryKey.SNACKS,
        "chips", "crackers", "cookies", "popcorn", "granola", "granola bars",
        "pretzels", "chocolate",
    ),
    *_group(
        CategoryKey.CONDIMENTS,
        "ketchup", "mustard", "mayo", "mayonnaise", "soy sauce", "hot sauce",
        "salsa", "salad dressing", "bbq sauce", "sriracha",
    ),
    *_group(
        CategoryKey.HOUSEHOLD,
        "paper towels", "toilet paper", "trash bags", "dish soap",
        "laundry detergent", "sponge", "aluminum foil", "plastic wrap",
    ),
    *_group(
        CategoryKey.PERSONAL_CARE,
        "shampoo", "conditioner", "soap", "toothpaste", "deodorant", "lotion",
    ),
)

_KEYWORD_LOOKUP: dict[str, str] = {}
for _kw, _key in KEYWORDS:
    _KEYWORD_LOOKUP.setdefault(_kw, _key)

_PHRASES: tuple[tuple[str, str], ...] = tuple((kw, key) for kw, key in KEYWORDS if " " in kw)

BUILTIN_CATEGORIES: tuple[Category, ...] = tuple(
    Category(
        key=key.value,
        label=_LABELS[key],
        color=_COLORS[key],
        keywords=tuple(kw for kw, k in KEYWORDS if k == key.value),
    )
    for key in CategoryKey
)

BUILTIN_KEYS: tuple[str, ...] = tuple(c.key for c in BUILTIN_CATEGORIES)


def is_builtin_key(key: str) -> bool:
    """Check whether a key names a built-in category."""
    return key in BUILTIN_KEYS


def new_custom_category_key() -> str:
    """Generate a fresh custom category key, disjoint from built-in keys."""
    return f"{CUSTOM_KEY_PREFIX}{uuid4().hex}"


def _normalize(item_name: str) -> str:
    return item_name.lower().strip()


def _match_custom(normalized: str, custom_categories: Sequence[CustomCategory]) -> str | None:
    lowered = [(cat.key, [kw.lower() for kw in cat.keywords]) for cat in custom_categories]

    for key, keywords in lowered:
        if normalized in keywords:
            return key

    for key, keywords in lowered:
        for kw in keywords:
            if " " in kw and kw in normalized:
                return key

    for word in normalized.split():
        for key, keywords in lowered:
            if word in keywords:
                return key

    return None


def _match_builtin(normalized: str) -> str | None:
    if normalized in _KEYWORD_LOOKUP:
        return _KEYWORD_LOOKUP[normalized]

    for phrase, key in _PHRASES:
        if phrase in normalized:
            return key

    for word in normalized.split():
        if word in _KEYWORD_LOOKUP:
            return _KEYWORD_LOOKUP[word]

    return None


def categorize(item_name: str, custom_categories: Sequence[CustomCategory] = ()) -> str:
    """Map an item name to a category key.

    Custom category keywords always win over built-in keywords. Within each
    set the precedence is exact name, then multi-word phrase containment, then
    single-word match. Names matching nothing land in ``other``.

    Args:
        item_name: Item name as typed by the user
        custom_categories: User categories, checked in the given order

    Returns:
        Category key
    """
    normalized = _normalize(item_name)

    key = _match_custom(normalized, custom_categories) if custom_categories else None
    if key is None:
        key = _match_builtin(normalized)
    if key is None:
        key = CategoryKey.OTHER.value

    logger.debug("item_categorized", name=item_name, category=key)
    return key


def merge_labels(custom_categories: Sequence[CustomCategory] = ()) -> dict[str, str]:
    """Built-in labels merged with custom category names."""
    merged = {c.key: c.label for c in BUILTIN_CATEGORIES}
    for cat in custom_categories:
        merged[cat.key] = cat.name
    return merged


def merge_colors(custom_categories: Sequence[CustomCategory] = ()) -> dict[str, str]:
    """Built-in colors merged with custom category colors."""
    merged = {c.key: c.color for c in BUILTIN_CATEGORIES}
    for cat in custom_categories:
        merged[cat.key] = cat.color
    return merged


def merged_key_order(custom_categories: Sequence[CustomCategory] = ()) -> list[str]:
    """All category keys in display order, custom keys just before ``other``."""
    builtin = list(BUILTIN_KEYS)
    other_index = builtin.index(CategoryKey.OTHER.value)
    custom_keys = [cat.key for cat in custom_categories]
    return builtin[:other_index] + custom_keys + builtin[other_index:]


def sort_custom_categories(custom_categories: Sequence[CustomCategory]) -> list[CustomCategory]:
    """Custom categories sorted by their persisted ``order``."""
    return sorted(custom_categories, key=lambda c: c.order)
