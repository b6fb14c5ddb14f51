"""Tests for the suggestion engine."""

from shopping_list.models import HistoryEntry, ShoppingItem
from shopping_list.suggestions import (
    ITEM_PAIRINGS,
    REASON_PAIRING,
    REASON_RECENT,
    item_frequency,
    pairing_suggestions,
    suggest,
)


def history_of(*names):
    return [HistoryEntry(name=name) for name in names]


class TestPairings:
    """Tests for pairing-based suggestions."""

    def test_pairing_table_size(self):
        """The pairing table has 18 entries."""
        assert len(ITEM_PAIRINGS) == 18

    def test_forward_pairing(self):
        """Bread on the list suggests butter."""
        result = suggest([], [{"name": "bread"}])
        assert result[0].name == "butter"
        assert result[0].reason == REASON_PAIRING
        assert result[0].category == "dairy"

    def test_reverse_pairing(self):
        """Pairs work in both directions."""
        result = suggest([], [{"name": "Tomato sauce"}])
        assert [s.name for s in result] == ["pasta"]

    def test_pairing_skipped_when_both_present(self):
        """No pairing suggestion when both halves are on the list."""
        assert suggest([], [{"name": "Bread"}, {"name": "Butter"}]) == []

    def test_pairing_case_insensitive(self):
        """Current item names match pairs case-insensitively."""
        assert pairing_suggestions({"chips"}) == ["salsa"]
        result = suggest([], [ShoppingItem(name="CHIPS")])
        assert [s.name for s in result] == ["salsa"]

    def test_shared_partner_suggested_once(self):
        """An item paired with two list items appears once."""
        result = suggest([], [{"name": "tortillas"}, {"name": "crackers"}])
        assert [s.name for s in result] == ["cheese"]

    def test_pairing_ranked_before_history(self, sample_history):
        """Pairings come before frequency and recency suggestions."""
        result = suggest(sample_history, [{"name": "Bread"}])
        assert result[0].name == "butter"
        assert result[0].reason == REASON_PAIRING
        assert all(s.reason != REASON_PAIRING for s in result[1:])


class TestFrequency:
    """Tests for frequency-based suggestions."""

    def test_item_frequency_counts_lowercased(self):
        """Counts merge names case-insensitively in first-seen order."""
        freq = item_frequency(history_of("Milk", "eggs", "milk", "MILK"))
        assert freq == {"milk": 3, "eggs": 1}
        assert list(freq) == ["milk", "eggs"]

    def test_frequency_reason(self, sample_history):
        """Items bought at least twice are suggested with their count."""
        result = suggest(sample_history, [])
        assert result[0].name == "milk"
        assert result[0].reason == "Purchased 3 times before"
        assert result[1].name == "eggs"
        assert result[1].reason == "Purchased 2 times before"

    def test_single_purchase_not_frequent(self):
        """Items bought once only show up as recent."""
        result = suggest(history_of("Kale"), [])
        assert [(s.name, s.reason) for s in result] == [("Kale", REASON_RECENT)]

    def test_ties_keep_first_seen_order(self):
        """Equal counts keep the order items were first seen."""
        history = history_of("Rice", "Beans", "Rice", "Beans")
        result = suggest(history, [])
        assert [s.name for s in result[:2]] == ["rice", "beans"]

    def test_only_top_twenty_counted(self):
        """Frequency suggestions only look at the top 20 names."""
        names = [f"Item {i}" for i in range(25) for _ in range(2)]
        result = suggest(history_of(*names), [], max_suggestions=50)
        frequent = [s for s in result if s.reason.startswith("Purchased")]
        assert len(frequent) == 20
        assert frequent[-1].name == "item 19"


class TestRecency:
    """Tests for recency-based suggestions."""

    def test_most_recent_first(self):
        """Recent items are suggested newest first."""
        result = suggest(history_of("Apples", "Bananas", "Cereal"), [])
        assert [s.name for s in result] == ["Cereal", "Bananas", "Apples"]
        assert all(s.reason == REASON_RECENT for s in result)

    def test_only_last_thirty_entries(self):
        """Entries older than the last 30 are ignored."""
        names = [f"Item {i}" for i in range(40)]
        result = suggest(history_of(*names), [], max_suggestions=100)
        assert len(result) == 30
        assert result[0].name == "Item 39"
        assert result[-1].name == "Item 10"


class TestSuggest:
    """Tests for the combined engine."""

    def test_empty_inputs(self):
        """No history and no items gives no suggestions."""
        assert suggest([], []) == []

    def test_excludes_current_items(self, sample_history):
        """Nothing already on the list is suggested."""
        current = [{"name": "MILK"}, {"name": "bananas"}]
        names = {s.name.lower() for s in suggest(sample_history, current)}
        assert "milk" not in names
        assert "bananas" not in names

    def test_no_duplicates(self, sample_history):
        """A name is suggested at most once, ignoring case."""
        result = suggest(sample_history, [{"name": "Cereal"}])
        names = [s.name.lower() for s in result]
        assert len(names) == len(set(names))

    def test_respects_max(self, sample_history):
        """Result never exceeds max_suggestions."""
        assert len(suggest(sample_history, [], max_suggestions=2)) == 2
        assert len(suggest(sample_history, [])) <= 8

    def test_default_max_is_eight(self):
        """At most eight suggestions by default."""
        history = history_of(*[f"Thing {i}" for i in range(20)])
        assert len(suggest(history, [])) == 8

    def test_zero_max(self, sample_history):
        """A non-positive limit gives nothing."""
        assert suggest(sample_history, [], max_suggestions=0) == []

    def test_never_padded(self):
        """Fewer candidates than the limit gives fewer suggestions."""
        assert len(suggest(history_of("Tea"), [], max_suggestions=8)) == 1

    def test_categories_assigned(self, sample_history):
        """Every suggestion is categorized with built-in categories."""
        by_name = {s.name: s.category for s in suggest(sample_history, [])}
        assert by_name["milk"] == "dairy"
        assert by_name["Coffee"] == "beverages"

    def test_inputs_not_mutated(self, sample_history):
        """The history list is left as it was."""
        before = [entry.name for entry in sample_history]
        suggest(sample_history, [{"name": "Bread"}])
        assert [entry.name for entry in sample_history] == before

    def test_accepts_dict_history(self):
        """History can be plain dicts."""
        result = suggest([{"name": "Soda"}, {"name": "Soda"}], [])
        assert result[0].name == "soda"
        assert result[0].reason == "Purchased 2 times before"
