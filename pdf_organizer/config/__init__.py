"""Configuration module for PDF Organizer."""

from .settings import Config, OrganizerConfig
from .categories import Category, parse_categories, load_categories

__all__ = [
    "Config",
    "OrganizerConfig",
    "Category",
    "parse_categories",
    "load_categories",
]
