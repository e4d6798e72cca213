"""
Shared fixtures for the PDF Organizer tests.
"""

import logging
from pathlib import Path

import pytest

from pdf_organizer.config.categories import Category
from pdf_organizer.config.settings import OrganizerConfig
from pdf_organizer.utils.exceptions import ExtractionError
from pdf_organizer.utils.logging_config import ROOT_LOGGER_NAME


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Undo handlers and propagation changes made by setup_logging."""
    yield
    package_logger = logging.getLogger(ROOT_LOGGER_NAME)
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
    package_logger.setLevel(logging.NOTSET)
    package_logger.propagate = True


@pytest.fixture
def categories():
    """Categories used across the traversal and orchestrator tests."""
    return [
        Category("Invoices", ("invoice",)),
        Category("Contracts", ("agreement", "signature")),
    ]


@pytest.fixture
def tree(tmp_path):
    """Empty source root and destination root."""
    root = tmp_path / "inbox"
    dest = tmp_path / "sorted"
    root.mkdir()
    dest.mkdir()
    return root, dest


@pytest.fixture
def make_config(tree):
    """Build an OrganizerConfig bound to the temporary tree."""
    root, dest = tree

    def _make(**kwargs):
        kwargs.setdefault("root_path", root)
        kwargs.setdefault("destination_root", dest)
        return OrganizerConfig(**kwargs)

    return _make


class TextFileExtractor:
    """Extraction service stand-in: the "PDF" holds its own text.

    Records every call, and raises ExtractionError for any file whose
    content starts with ``!fail``.
    """

    def __init__(self):
        self.calls = []

    def __call__(self, path: Path, language: str) -> str:
        self.calls.append((Path(path), language))
        text = Path(path).read_text(encoding="utf-8")
        if text.startswith("!fail"):
            raise ExtractionError("pdftoppm error", file_path=str(path))
        return text


@pytest.fixture
def extractor():
    return TextFileExtractor()
