"""Tests for keyword categorization."""

from finboard.core.categories import CATEGORY_KEYWORDS, CATEGORY_NAMES
from finboard.engine.categorizer import categorize


class TestCategorize:
    """Tests for categorize function."""

    def test_groceries(self) -> None:
        """A grocery store description is Groceries."""
        assert categorize("Kroger weekly run") == "Groceries"

    def test_case_insensitive(self) -> None:
        """Matching ignores case."""
        assert categorize("WHOLE FOODS") == "Groceries"

    def test_empty_is_other(self) -> None:
        """Empty descriptions fall back to Other."""
        assert categorize("") == "Other"

    def test_unmatched_is_other(self) -> None:
        """Descriptions without any keyword fall back to Other."""
        assert categorize("zzz") == "Other"

    def test_first_match_wins(self) -> None:
        """'gas bill' hits Transportation's 'gas' before Utilities."""
        assert categorize("gas bill") == "Transportation"

    def test_entertainment_before_subscriptions(self) -> None:
        """Netflix is Entertainment even though it is a subscription."""
        assert categorize("Netflix") == "Entertainment"

    def test_salary(self) -> None:
        """Payroll deposits are Salary."""
        assert categorize("Payroll ACME") == "Salary"

    def test_custom_table(self) -> None:
        """A caller-supplied table is scanned in its own order."""
        table = (("Coffee", ("latte",)), ("Drinks", ("latte", "tea")))
        assert categorize("Oat latte", table) == "Coffee"
        assert categorize("green tea", table) == "Drinks"


class TestTaxonomy:
    """Tests for the category table itself."""

    def test_names_unique(self) -> None:
        """Every category appears once."""
        assert len(CATEGORY_NAMES) == len(set(CATEGORY_NAMES))

    def test_keywords_lowercase(self) -> None:
        """Keywords are stored lowercase."""
        for _, keywords in CATEGORY_KEYWORDS:
            assert all(k == k.lower() for k in keywords)
