"""Suggestion engine driven by item pairings and purchase history."""

from collections.abc import Iterable, Mapping
from typing import Any

import structlog

from .categories import categorize
from .models import Suggestion

logger = structlog.get_logger()

DEFAULT_MAX_SUGGESTIONS = 8
FREQUENCY_TOP_N = 20
FREQUENCY_MIN_COUNT = 2
RECENT_WINDOW = 30

REASON_PAIRING = "Often bought together"
REASON_RECENT = "Recently purchased"

# Each pair is bidirectional.
ITEM_PAIRINGS: tuple[tuple[str, str], ...] = (
    ("bread", "butter"),
    ("pasta", "tomato sauce"),
    ("chips", "salsa"),
    ("hamburger buns", "ground beef"),
    ("hot dog buns", "hot dogs"),
    ("cereal", "milk"),
    ("peanut butter", "jelly"),
    ("eggs", "bacon"),
    ("lettuce", "tomatoes"),
    ("tortillas", "cheese"),
    ("rice", "beans"),
    ("spaghetti", "parmesan"),
    ("coffee", "cream"),
    ("crackers", "cheese"),
    ("avocado", "lime"),
    ("chicken", "rice"),
    ("salmon", "lemon"),
    ("steak", "potatoes"),
)


def _name_of(record: Any) -> str:
    if isinstance(record, Mapping):
        return record["name"]
    return record.name


def frequency_reason(count: int) -> str:
    return f"Purchased {count} times before"


def item_frequency(history: Iterable[Any]) -> dict[str, int]:
    """Count purchases per lowercased name, in first-seen order."""
    freq: dict[str, int] = {}
    for entry in history:
        key = _name_of(entry).lower()
        freq[key] = freq.get(key, 0) + 1
    return freq


def pairing_suggestions(current_names: set[str]) -> list[str]:
    """Names paired with something on the list but not on it themselves."""
    suggestions = []
    for a, b in ITEM_PAIRINGS:
        if a in current_names and b not in current_names:
            suggestions.append(b)
        if b in current_names and a not in current_names:
            suggestions.append(a)
    return suggestions


def suggest(
    history: Iterable[Any],
    current_items: Iterable[Any],
    max_suggestions: int = DEFAULT_MAX_SUGGESTIONS,
) -> list[Suggestion]:
    """Rank item suggestions for a list.

    Pairings come first, then frequently purchased items, then recently
    purchased ones. Names already on the list or already suggested are
    skipped (case-insensitive).

    Args:
        history: History entries, oldest first (records or dicts with ``name``)
        current_items: Items on the list (records or dicts with ``name``)
        max_suggestions: Maximum number of suggestions to return

    Returns:
        Ordered suggestions, never more than max_suggestions
    """
    if max_suggestions <= 0:
        return []

    entries = list(history)
    current_names = {_name_of(item).lower() for item in current_items}
    suggestions: list[Suggestion] = []
    seen: set[str] = set()

    def add(name: str, reason: str) -> None:
        key = name.lower()
        if key in current_names or key in seen:
            return
        seen.add(key)
        suggestions.append(Suggestion(name=name, reason=reason, category=categorize(name)))

    for name in pairing_suggestions(current_names):
        add(name, REASON_PAIRING)

    # sorted() is stable, so equal counts keep first-seen order
    ranked = sorted(item_frequency(entries).items(), key=lambda kv: kv[1], reverse=True)
    for name, count in ranked[:FREQUENCY_TOP_N]:
        if count >= FREQUENCY_MIN_COUNT:
            add(name, frequency_reason(count))

    recent = [_name_of(entry) for entry in reversed(entries[-RECENT_WINDOW:])]
    for name in dict.fromkeys(recent):
        add(name, REASON_RECENT)

    logger.debug("suggestions_built", candidates=len(suggestions), limit=max_suggestions)
    return suggestions[:max_suggestions]
