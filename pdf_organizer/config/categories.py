"""
Category Definitions
====================

Classification rules as an ordered list of named keyword groups,
and the loader for the keyword-grouped ``categories.conf`` format::

    # comment line
    [Invoices]
    invoice
    amount due

    [Contracts]
    agreement
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Optional, Tuple

from pdf_organizer.utils.exceptions import ConfigurationError
from pdf_organizer.utils.logging_config import get_logger

logger = get_logger(__name__)

COMMENT_PREFIX = "#"


@dataclass(frozen=True)
class Category:
    """A named classification bucket.

    Attributes:
        name: Unique identifier, also used as the destination folder name.
        keywords: Ordered lowercase substrings that trigger the category.
            An empty tuple means the category can never match.
    """
    name: str
    keywords: Tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self):
        if not self.name or not self.name.strip():
            raise ConfigurationError(
                "Category name must not be empty",
                config_key="name",
            )
        # the name becomes a single folder directly under the destination root
        separators = [sep for sep in (os.sep, os.altsep, "/") if sep]
        if self.name in (".", "..") or any(sep in self.name for sep in separators):
            raise ConfigurationError(
                f"Category name is not a valid folder name: {self.name!r}",
                config_key="name",
            )
        object.__setattr__(
            self, "keywords", tuple(keyword.lower() for keyword in self.keywords)
        )


def _header_name(line: str) -> Optional[str]:
    """Return the category name if ``line`` is a ``[Name]`` header."""
    if line.startswith("[") and line.endswith("]"):
        return line.strip("[]").strip()
    return None


def parse_categories(lines: Iterable[str]) -> List[Category]:
    """Parse category definitions from text lines.

    Lines before the first header are ignored, as is everything under a
    header with an empty name.

    Args:
        lines: Raw lines of a categories file.

    Returns:
        Categories in file order.
    """
    categories: List[Category] = []
    current_name = ""
    current_keywords: List[str] = []

    def close_current() -> None:
        if current_name:
            categories.append(Category(current_name, tuple(current_keywords)))

    for raw in lines:
        line = raw.strip()

        if not line or line.startswith(COMMENT_PREFIX):
            continue

        name = _header_name(line)
        if name is not None:
            close_current()
            current_name = name
            current_keywords = []
        elif current_name:
            current_keywords.append(line.lower())

    close_current()
    return categories


def load_categories(config_path: Path) -> List[Category]:
    """Load categories from a ``categories.conf`` file.

    Args:
        config_path: Path to the categories file.

    Returns:
        Categories in file order.

    Raises:
        ConfigurationError: If the file cannot be read or decoded, or a
            category name is not a valid folder name.
    """
    config_path = Path(config_path)
    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            categories = parse_categories(f)
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigurationError(
            f"Error opening config file: {config_path}",
            config_key="categories_file",
            cause=e,
        )

    names = [category.name for category in categories]
    duplicates = sorted({name for name in names if names.count(name) > 1})
    if duplicates:
        # first occurrence always wins, later ones are unreachable
        logger.warning(f"Duplicate category names in {config_path}: {', '.join(duplicates)}")

    for category in categories:
        if not category.keywords:
            logger.warning(f"Category '{category.name}' has no keywords and will never match")

    logger.debug(f"Loaded {len(categories)} categories from {config_path}")
    return categories
