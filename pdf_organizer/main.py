"""
PDF Organizer - Main Application
================================

Main entry point and orchestration: loads settings and categories,
validates the paths, runs one traversal and reports the outcome.
"""

import argparse
import sys
from dataclasses import replace
from pathlib import Path
from typing import List, Optional, Sequence

from pdf_organizer import __version__
from pdf_organizer.config import Config, Category, load_categories
from pdf_organizer.extraction import OCREngine
from pdf_organizer.traversal import TraversalEngine, TraversalSummary, Extractor
from pdf_organizer.utils.exceptions import (
    ConfigurationError,
    PdfOrganizerError,
)
from pdf_organizer.utils.logging_config import (
    Timer,
    get_logger,
    new_correlation_id,
    set_correlation_id,
    setup_logging,
)

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_CONFIG_ERROR = 2
EXIT_INTERRUPTED = 130


class PdfOrganizer:
    """Main orchestrator for the PDF Organizer.

    Wires settings, categories and the extraction service into a single
    traversal run.
    """

    def __init__(self, config: Config, extractor: Optional[Extractor] = None):
        """Initialize the organizer.

        Args:
            config: Loaded configuration.
            extractor: Text extraction service. Defaults to the OCR engine.
        """
        self.config = config
        self.ocr_engine = OCREngine(config.ocr)
        self.extract = extractor or self.ocr_engine.extract_first_page
        self._uses_ocr_engine = extractor is None

    def load_categories(self) -> List[Category]:
        """Load the category list.

        Raises:
            ConfigurationError: If the categories file cannot be read.
        """
        categories = load_categories(self.config.organizer.categories_file)
        logger.debug(f"Loaded {len(categories)} categories")
        return categories

    def validate_paths(self) -> None:
        """Check the root and destination directories before any work.

        Raises:
            ConfigurationError: If either directory does not exist.
        """
        settings = self.config.organizer
        if not _is_directory(settings.root_path, "root_path"):
            raise ConfigurationError(
                f"Specified folder doesn't exist: {settings.root_path}",
                config_key="root_path",
            )
        if not _is_directory(settings.destination_root, "destination_root"):
            raise ConfigurationError(
                f"Destination folder doesn't exist: {settings.destination_root}",
                config_key="destination_root",
            )

    def run(self) -> TraversalSummary:
        """Organize the configured root path.

        Returns:
            Summary of the traversal.

        Raises:
            ConfigurationError: Before traversal, for configuration problems.
            TraversalError: If the root directory cannot be listed.
        """
        categories = self.load_categories()
        self.validate_paths()

        if self._uses_ocr_engine and not self.ocr_engine.is_available():
            logger.warning("Tesseract not found or not accessible; every file will fail extraction")

        engine = TraversalEngine(self.config.organizer, categories, self.extract)
        with Timer(logger, "organize"):
            summary = engine.run(self.config.organizer.root_path)

        self._log_stats(summary)
        return summary

    def test_ocr(self, file_path: Path) -> str:
        """Extract and return the first-page text of a single file.

        Raises:
            ConfigurationError: If the file does not exist.
            ExtractionError: If extraction fails.
        """
        file_path = Path(file_path)
        if not file_path.is_file():
            raise ConfigurationError(
                f"File not found for OCR test: {file_path}",
                config_key="test_ocr",
            )
        return self.extract(file_path, self.config.organizer.language)

    def _log_stats(self, summary: TraversalSummary) -> None:
        """Log processing statistics."""
        logger.info("Statistics:")
        logger.info(f"  Directories: {summary.directories_visited}")
        logger.info(f"  Scanned: {summary.files_scanned}")
        logger.info(f"  Organized: {len(summary.organized)}")
        logger.info(f"  Unclassified: {len(summary.unclassified)}")
        logger.info(f"  Already organized: {len(summary.in_place)}")
        logger.info(f"  Errors: {len(summary.errors)}")


def _is_directory(path: Path, config_key: str) -> bool:
    """``Path.is_dir`` that reports unreachable paths as configuration errors."""
    try:
        return path.is_dir()
    except OSError as e:
        raise ConfigurationError(
            f"Cannot access folder: {path}",
            config_key=config_key,
            cause=e,
        )


def build_parser() -> argparse.ArgumentParser:
    """Create the command-line parser."""
    parser = argparse.ArgumentParser(
        prog="pdf-organizer",
        description=(
            "Organizes PDF files by content using OCR and defined categories. "
            "Unclassified documents remain in their original location. "
            "If a file with the same name already exists at the destination, "
            "it is renamed (e.g. 'file (1).pdf')."
        ),
        epilog=(
            "Keyword matching is case-insensitive. Requires Tesseract OCR with "
            "the selected language data and the poppler utilities."
        ),
    )
    parser.add_argument(
        '--path', '-p',
        help='Path to PDF folder to organize (default: current directory)'
    )
    parser.add_argument(
        '--dest', '-d',
        help='Folder receiving the category folders (default: current directory)'
    )
    parser.add_argument(
        '--lang', '-l',
        help='OCR language (e.g. por, eng, spa; default: por)'
    )
    parser.add_argument(
        '--config', '-c',
        help='Path to categories config (default: categories.conf)'
    )
    parser.add_argument(
        '--settings', '-s',
        help='Path to a YAML settings file'
    )
    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Enable verbose mode (shows OCR output)'
    )
    parser.add_argument(
        '--matchall', '-m',
        action='store_true',
        help='Require ALL keywords of a category to be present (default: ANY keyword)'
    )
    parser.add_argument(
        '--test-ocr', '-t',
        metavar='FILE',
        help='Extract and print the OCR text of a single PDF, then exit'
    )
    parser.add_argument(
        '--json-logs',
        action='store_true',
        help='Emit log records as JSON'
    )
    parser.add_argument(
        '--version',
        action='version',
        version=f"%(prog)s {__version__}"
    )
    return parser


def load_config(args: argparse.Namespace) -> Config:
    """Merge the settings file and command-line flags."""
    config = Config.load(Path(args.settings) if args.settings else None)
    config = config.with_overrides(
        root_path=args.path,
        destination_root=args.dest,
        categories_file=args.config,
        language=args.lang,
        match_all=True if args.matchall else None,
        verbose=True if args.verbose else None,
    )

    logging_config = config.logging
    if config.organizer.verbose:
        logging_config = replace(logging_config, level="DEBUG")
    if args.json_logs:
        logging_config = replace(logging_config, json_format=True)
    return replace(config, logging=logging_config)


def _log_settings(config: Config) -> None:
    settings = config.organizer
    logger.debug(f"PDF Organizer {__version__} starting in verbose mode")
    logger.debug(f"Base path: {settings.root_path}")
    logger.debug(f"Destination: {settings.destination_root}")
    logger.debug(f"OCR Language: {settings.language}")
    logger.debug(f"Categories config: {settings.categories_file}")
    logger.debug(f"Match All Keywords: {settings.match_all}")


def run_ocr_test(organizer: PdfOrganizer, file_path: str) -> int:
    """Print the OCR text of one file."""
    print(f"\n=== Testing OCR for: {file_path} ===")
    text = organizer.test_ocr(Path(file_path))
    print("\n--- OCR Extracted Text ---")
    print(text)
    print("--------------------------")
    print(f"Extracted {len(text)} characters.")
    return EXIT_OK


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point with CLI support."""
    args = build_parser().parse_args(argv)

    try:
        config = load_config(args)
    except ConfigurationError as e:
        print(f"✗ {e}", file=sys.stderr)
        return EXIT_CONFIG_ERROR

    setup_logging(config.logging)
    set_correlation_id(new_correlation_id())
    _log_settings(config)

    organizer = PdfOrganizer(config)

    try:
        if args.test_ocr:
            return run_ocr_test(organizer, args.test_ocr)

        print("\n=== PDF Content Organizer with OCR ===")
        summary = organizer.run()
    except ConfigurationError as e:
        logger.error(f"Configuration error: {e}")
        return EXIT_CONFIG_ERROR
    except PdfOrganizerError as e:
        logger.error(f"Organization error: {e}")
        return EXIT_FAILURE
    except KeyboardInterrupt:
        logger.warning("Interrupted")
        return EXIT_INTERRUPTED

    if summary.errors:
        print(f"\n✓ Organization completed with {len(summary.errors)} error(s).")
    else:
        print("\n✓ Organization completed successfully!")
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
