"""Actions module for file operations."""

from .relocator import relocate, disambiguated_name, ensure_category_folder

__all__ = [
    "relocate",
    "disambiguated_name",
    "ensure_category_folder",
]
