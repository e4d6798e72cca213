"""Classification module for PDF Organizer."""

from .keyword_classifier import (
    UNCLASSIFIED,
    classify,
    category_matches,
    matched_keywords,
)

__all__ = [
    "UNCLASSIFIED",
    "classify",
    "category_matches",
    "matched_keywords",
]
