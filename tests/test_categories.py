"""
Unit tests for the category model and loader.
"""

import pytest

from pdf_organizer.config.categories import Category, parse_categories, load_categories
from pdf_organizer.utils.exceptions import ConfigurationError, ErrorCode


SAMPLE_CONFIG = """
# Document categories
stray keyword before any header

[Invoices]
Invoice
  Amount Due

# contracts need both words in match-all mode
[Contracts]
agreement
signature

[Empty]
"""


class TestCategory:
    """Tests for the Category dataclass."""

    def test_keywords_stored_lowercase(self):
        """Test keywords are lowercased on construction."""
        category = Category("Invoices", ("Invoice", "TOTAL"))

        assert category.keywords == ("invoice", "total")

    def test_default_keywords_empty(self):
        """Test a category without keywords."""
        category = Category("Misc")

        assert category.keywords == ()

    def test_empty_name_rejected(self):
        """Test empty names are not valid categories."""
        with pytest.raises(ConfigurationError) as exc_info:
            Category("", ("invoice",))

        assert exc_info.value.error_code == ErrorCode.CONFIGURATION_ERROR

    def test_blank_name_rejected(self):
        """Test whitespace-only names are not valid categories."""
        with pytest.raises(ConfigurationError):
            Category("   ")

    @pytest.mark.parametrize("name", [".", "..", "a/b", "../Invoices"])
    def test_path_like_name_rejected(self, name):
        """Test names must be a single folder under the destination root."""
        with pytest.raises(ConfigurationError) as exc_info:
            Category(name, ("invoice",))

        assert exc_info.value.details["config_key"] == "name"

    def test_name_with_spaces_and_dots(self):
        """Test ordinary folder names with dots are still accepted."""
        assert Category("Bank Statements v2.1").name == "Bank Statements v2.1"


class TestParseCategories:
    """Tests for parse_categories."""

    def test_parse_sample(self):
        """Test categories keep file order and lowercase keywords."""
        categories = parse_categories(SAMPLE_CONFIG.splitlines())

        assert [c.name for c in categories] == ["Invoices", "Contracts", "Empty"]
        assert categories[0].keywords == ("invoice", "amount due")
        assert categories[1].keywords == ("agreement", "signature")

    def test_lines_before_header_ignored(self):
        """Test keywords outside any category are dropped."""
        categories = parse_categories(["orphan", "[Bills]", "bill"])

        assert len(categories) == 1
        assert categories[0].keywords == ("bill",)

    def test_comments_and_blank_lines_ignored(self):
        """Test comment and blank lines never become keywords."""
        categories = parse_categories(["[Bills]", "", "# not a keyword", "   ", "bill"])

        assert categories[0].keywords == ("bill",)

    def test_category_without_keywords_kept(self):
        """Test an empty keyword list still yields a category."""
        categories = parse_categories(SAMPLE_CONFIG.splitlines())

        assert categories[-1].name == "Empty"
        assert categories[-1].keywords == ()

    def test_empty_header_drops_following_keywords(self):
        """Test an empty header closes the current category."""
        categories = parse_categories(["[Bills]", "bill", "[]", "ignored", "[Tax]", "irs"])

        assert [c.name for c in categories] == ["Bills", "Tax"]
        assert categories[0].keywords == ("bill",)
        assert categories[1].keywords == ("irs",)

    def test_header_name_trimmed(self):
        """Test brackets and surrounding spaces are stripped from names."""
        categories = parse_categories(["  [ Bank Statements ]  ", "statement"])

        assert categories[0].name == "Bank Statements"

    def test_no_categories(self):
        """Test input without headers."""
        assert parse_categories(["# only a comment", "word"]) == []


class TestLoadCategories:
    """Tests for load_categories."""

    def test_load_from_file(self, tmp_path):
        """Test loading a categories file."""
        path = tmp_path / "categories.conf"
        path.write_text(SAMPLE_CONFIG, encoding="utf-8")

        categories = load_categories(path)

        assert [c.name for c in categories] == ["Invoices", "Contracts", "Empty"]

    def test_missing_file(self, tmp_path):
        """Test a missing file is a configuration error."""
        with pytest.raises(ConfigurationError) as exc_info:
            load_categories(tmp_path / "missing.conf")

        assert exc_info.value.details["config_key"] == "categories_file"
        assert isinstance(exc_info.value.cause, FileNotFoundError)

    def test_directory_instead_of_file(self, tmp_path):
        """Test a directory path is a configuration error."""
        with pytest.raises(ConfigurationError):
            load_categories(tmp_path)

    def test_parent_folder_header_rejected(self, tmp_path):
        """Test a [..] header fails loading instead of escaping the destination."""
        path = tmp_path / "categories.conf"
        path.write_text("[..]\ninvoice\n", encoding="utf-8")

        with pytest.raises(ConfigurationError):
            load_categories(path)

    def test_duplicate_names_warned(self, tmp_path, caplog):
        """Test duplicate category names are reported."""
        path = tmp_path / "categories.conf"
        path.write_text("[Bills]\nbill\n[Bills]\ninvoice\n", encoding="utf-8")

        with caplog.at_level("WARNING", logger="pdf_organizer"):
            categories = load_categories(path)

        assert len(categories) == 2
        assert "Duplicate category names" in caplog.text
