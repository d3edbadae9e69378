"""Keyword-based transaction categorization."""

from finboard.core.categories import CATEGORY_KEYWORDS, OTHER_CATEGORY


def categorize(
    description: str,
    table: tuple[tuple[str, tuple[str, ...]], ...] = CATEGORY_KEYWORDS,
) -> str:
    """Suggest a category for a transaction description.

    The description is lowercased and the table is scanned in order; the
    first category with a keyword occurring as a substring wins. Plain
    substring matching is intended: "gas bill" matches Transportation via
    "gas" before Utilities is checked.

    Args:
        description: Free-text transaction description.
        table: Ordered (category, keywords) table. Defaults to the built-in
            taxonomy.

    Returns:
        Category name, or "Other" when nothing matches.
    """
    text = (description or "").lower()
    if not text:
        return OTHER_CATEGORY

    for category, keywords in table:
        if any(keyword in text for keyword in keywords):
            return category

    return OTHER_CATEGORY
