"""
Keyword Classifier
==================

Decides the category of a document from its lowercased text.
Categories are tried in list order and the first match wins.
"""

from typing import List, Sequence

from pdf_organizer.config.categories import Category

UNCLASSIFIED = ""


def category_matches(text_lower: str, category: Category, match_all: bool = False) -> bool:
    """Check a single category against lowercased text.

    Args:
        text_lower: Extracted text, already lowercased.
        category: Category to test.
        match_all: Require every keyword instead of any.

    Returns:
        True if the category's match predicate holds.
    """
    if not category.keywords:
        return False
    if match_all:
        return all(keyword in text_lower for keyword in category.keywords)
    return any(keyword in text_lower for keyword in category.keywords)


def classify(text_lower: str, categories: Sequence[Category], match_all: bool = False) -> str:
    """Return the name of the first category matching the text.

    ``text_lower`` is not lowercased again; callers pass the output of
    ``str.lower()``.

    Args:
        text_lower: Extracted text, already lowercased.
        categories: Categories in precedence order.
        match_all: Require every keyword of a category to be present.

    Returns:
        The matching category name, or ``UNCLASSIFIED`` (empty string).
    """
    for category in categories:
        if category_matches(text_lower, category, match_all):
            return category.name
    return UNCLASSIFIED


def matched_keywords(text_lower: str, category: Category) -> List[str]:
    """List the keywords of ``category`` present in the text."""
    return [keyword for keyword in category.keywords if keyword in text_lower]
