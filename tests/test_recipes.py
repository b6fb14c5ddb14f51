"""Tests for recipe parsing and templates."""

import pytest
from pydantic import ValidationError

from shopping_list.models import RecipeTemplate
from shopping_list.recipes import (
    RECIPE_TEMPLATES,
    TemplateNotFoundError,
    capitalize_first,
    get_template,
    parse_recipe_text,
    strip_quantity,
    template_to_items,
)


def names(items):
    return [item.name for item in items]


class TestStripQuantity:
    """Tests for quantity and unit stripping."""

    @pytest.mark.parametrize(
        ("line", "expected"),
        [
            ("2 cups flour", "flour"),
            ("1/2 lb ground beef", "ground beef"),
            ("3 cloves garlic, minced", "garlic"),
            ("1 can of tomatoes", "tomatoes"),
            ("2 tbsp olive oil (extra virgin)", "olive oil"),
            ("1.5 kg potatoes", "potatoes"),
            ("2-3 sprigs thyme", "thyme"),
            ("½ cup sugar", "sugar"),
            ("Pinch of salt", "salt"),
            ("salt", "salt"),
            ("4 eggs", "eggs"),
        ],
    )
    def test_strip(self, line, expected):
        """Quantity, unit and notes are removed."""
        assert strip_quantity(line) == expected

    def test_unit_requires_following_word(self):
        """Words that merely start like a unit are kept."""
        assert strip_quantity("2 green onions") == "green onions"
        assert strip_quantity("1 cantaloupe") == "cantaloupe"

    def test_trailing_of_is_a_unit_word(self):
        """A unit followed by a bare "of" never leaves "of" as the name."""
        assert strip_quantity("2 cups of") == "cups of"
        assert strip_quantity("1 cup of rice") == "rice"
        assert [item.name for item in parse_recipe_text("1 cup of\n2 cups offal")] == [
            "Cup of",
            "Offal",
        ]

    def test_fallback_when_everything_stripped(self):
        """If only notes remain, fall back to the quantity-stripped line."""
        assert strip_quantity("(to taste)") == "(to taste)"


class TestParseRecipeText:
    """Tests for parse_recipe_text()."""

    def test_basic_recipe(self):
        """Quantities, units and bullets are stripped in line order."""
        items = parse_recipe_text("2 cups flour\n1/2 lb ground beef, minced\n- 3 cloves garlic")
        assert names(items) == ["Flour", "Ground beef", "Garlic"]
        assert all(item.is_checked is False for item in items)
        assert len({item.id for item in items}) == 3

    def test_categories(self):
        """Ingredients are categorized with built-in categories."""
        items = parse_recipe_text("2 cups flour\n1 lb ground beef\n1 cup milk")
        assert [item.category for item in items] == ["pantry", "meat", "dairy"]

    @pytest.mark.parametrize("text", ["", "   ", "\n\n"])
    def test_empty_input(self, text):
        """Blank input gives no items."""
        assert parse_recipe_text(text) == []

    def test_bullet_markers(self):
        """Dash, star and dot bullets are removed."""
        items = parse_recipe_text("- rice\n* beans\n• corn")
        assert names(items) == ["Rice", "Beans", "Corn"]

    def test_header_lines_dropped(self):
        """Section headers are removed but following lines are still parsed."""
        text = "2 cups rice\nInstructions\nDirections:\n1. Boil water"
        items = parse_recipe_text(text)
        assert names(items) == ["Rice", "Boil water"]

    @pytest.mark.parametrize("header", ["Steps", "METHOD", "instructions:"])
    def test_header_case_insensitive(self, header):
        """Headers are matched regardless of case."""
        assert names(parse_recipe_text(f"{header}\n1 onion")) == ["Onion"]

    def test_duplicates_skipped(self):
        """Repeated ingredients are kept once, first occurrence wins."""
        items = parse_recipe_text("1 cup sugar\n2 tbsp Sugar\n1 egg")
        assert names(items) == ["Sugar", "Egg"]

    def test_short_names_skipped(self):
        """Names shorter than two characters are dropped."""
        assert names(parse_recipe_text("2 x\n3\n1 cup oats")) == ["Oats"]

    def test_windows_line_endings(self):
        """CRLF input parses like LF input."""
        assert names(parse_recipe_text("1 lemon\r\n2 limes\r\n")) == ["Lemon", "Limes"]

    def test_preserves_rest_of_name(self):
        """Only the first character is capitalized."""
        assert names(parse_recipe_text("1 tsp BBQ rub")) == ["BBQ rub"]


class TestTemplates:
    """Tests for bundled recipe templates."""

    def test_bundled_templates(self):
        """Six templates are bundled."""
        assert [t.id for t in RECIPE_TEMPLATES] == [
            "spaghetti-bolognese",
            "chicken-stir-fry",
            "tacos",
            "caesar-salad",
            "pancakes",
            "grilled-salmon",
        ]

    def test_get_template(self):
        """Templates are found by id."""
        assert get_template("tacos").name == "Tacos"

    def test_get_unknown_template(self):
        """Unknown ids raise TemplateNotFoundError."""
        with pytest.raises(TemplateNotFoundError) as exc_info:
            get_template("lasagna")
        assert exc_info.value.template_id == "lasagna"

    def test_template_to_items(self):
        """One item per ingredient, in order, categorized."""
        template = get_template("pancakes")
        items = template_to_items(template)
        assert len(items) == len(template.ingredients)
        assert items[0].name == "Flour"
        assert items[0].category == "pantry"
        assert items[-1].name == "Maple syrup"
        assert all(not item.is_checked for item in items)

    def test_template_keeps_duplicates(self):
        """Templates are not deduplicated."""
        template = RecipeTemplate(
            id="double",
            name="Double",
            description="Twice the garlic",
            ingredients=("garlic", "Garlic", "onion"),
        )
        items = template_to_items(template)
        assert names(items) == ["Garlic", "Garlic", "Onion"]
        assert len({item.id for item in items}) == 3

    def test_templates_are_frozen(self):
        """Bundled templates can't be modified."""
        with pytest.raises(ValidationError):
            RECIPE_TEMPLATES[0].name = "Changed"


def test_capitalize_first():
    """Only the first character changes."""
    assert capitalize_first("ground beef") == "Ground beef"
    assert capitalize_first("") == ""
