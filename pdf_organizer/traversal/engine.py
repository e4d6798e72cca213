"""
Traversal Engine
================

Depth-first, pre-order walk over a directory tree. Every regular file
with the recognized extension is extracted, classified and, on a match,
relocated into the destination root.

Failures are isolated: an unreadable directory only loses its own
subtree, and a file that cannot be extracted or moved stays where it is.
"""

import logging
import os
from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Sequence

from pdf_organizer.actions.relocator import relocate
from pdf_organizer.classification.keyword_classifier import (
    UNCLASSIFIED,
    classify,
    matched_keywords,
)
from pdf_organizer.config.categories import Category
from pdf_organizer.config.settings import OrganizerConfig
from pdf_organizer.utils.exceptions import (
    ErrorCode,
    ExtractionError,
    PdfOrganizerError,
    RelocationError,
    TraversalError,
)
from pdf_organizer.utils.logging_config import LogContext, get_logger

logger = get_logger(__name__)

# extract(path, language) -> text, raising ExtractionError on failure
Extractor = Callable[[Path, str], str]


@dataclass(frozen=True)
class FileCandidate:
    """A document found during traversal.

    Attributes:
        path: Full path of the file.
        name: File name as listed.
        size: Size in bytes at listing time.
    """
    path: Path
    name: str
    size: int

    @classmethod
    def from_entry(cls, entry: os.DirEntry) -> "FileCandidate":
        """Build a candidate from a directory listing entry."""
        return cls(
            path=Path(entry.path),
            name=entry.name,
            size=entry.stat(follow_symlinks=False).st_size,
        )


@dataclass
class OrganizedFile:
    """Record of a completed move."""
    source: str
    destination: str
    category: str


@dataclass
class TraversalSummary:
    """Outcome of one traversal run.

    Attributes:
        directories_visited: Directories successfully listed.
        files_scanned: Candidates handed to the extraction service.
        organized: Files moved into a category folder.
        unclassified: Files no category matched (left in place).
        in_place: Files already inside their category folder.
        errors: Serialized per-entry and per-directory errors.
        succeeded: True once the walk of the root completed.
    """
    directories_visited: int = 0
    files_scanned: int = 0
    organized: List[OrganizedFile] = field(default_factory=list)
    unclassified: List[str] = field(default_factory=list)
    in_place: List[str] = field(default_factory=list)
    errors: List[Dict[str, Any]] = field(default_factory=list)
    succeeded: bool = False

    def record_error(self, error: PdfOrganizerError) -> None:
        self.errors.append(error.to_dict())

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class TraversalEngine:
    """Walks a directory tree and files classified documents.

    All run settings come from the ``OrganizerConfig`` passed in; the
    engine holds no other state between runs.
    """

    def __init__(
        self,
        config: OrganizerConfig,
        categories: Sequence[Category],
        extract: Extractor,
    ):
        """Initialize the engine.

        Args:
            config: Run-scoped organizer settings.
            categories: Categories in precedence order.
            extract: Text extraction service for one document.
        """
        self.config = config
        self.categories = list(categories)
        self.extract = extract

    def run(self, root: Optional[Path] = None) -> TraversalSummary:
        """Organize every document under ``root``.

        Args:
            root: Directory to walk. Defaults to ``config.root_path``.

        Returns:
            Summary of the run.

        Raises:
            TraversalError: If the root itself does not exist or cannot
                be listed. Errors below the root are only recorded.
        """
        root = Path(root) if root is not None else self.config.root_path
        summary = TraversalSummary()
        self._walk(root, summary)
        summary.succeeded = True
        return summary

    def _scandir(self, directory: Path) -> List[os.DirEntry]:
        """List a directory sorted by entry name."""
        with os.scandir(directory) as it:
            return sorted(it, key=lambda entry: entry.name)

    def _walk(self, directory: Path, summary: TraversalSummary) -> None:
        """Process one directory, recursing into subdirectories.

        Raises:
            TraversalError: If ``directory`` is missing or unreadable.
        """
        try:
            entries = self._scandir(directory)
        except FileNotFoundError as e:
            raise TraversalError(
                f"Specified folder doesn't exist: {directory}",
                directory=str(directory),
                error_code=ErrorCode.ROOT_NOT_FOUND,
                cause=e,
            )
        except OSError as e:
            raise TraversalError(
                f"Cannot read directory: {directory}",
                directory=str(directory),
                cause=e,
            )

        summary.directories_visited += 1

        for entry in entries:
            entry_path = Path(entry.path)

            try:
                if entry.is_symlink():
                    logger.debug(f"Skipping symbolic link: {entry_path}")
                    continue
                is_dir = entry.is_dir(follow_symlinks=False)
                is_candidate = (
                    not is_dir
                    and entry.is_file(follow_symlinks=False)
                    and self._is_recognized(entry.name)
                )
                candidate = FileCandidate.from_entry(entry) if is_candidate else None
            except OSError as e:
                error = TraversalError(
                    f"Cannot inspect entry: {entry_path}",
                    directory=str(directory),
                    cause=e,
                )
                logger.error(f"Error processing {entry_path}: {error}")
                summary.record_error(error)
                continue

            if is_dir:
                logger.debug(f"Entering directory: {entry_path}")
                try:
                    self._walk(entry_path, summary)
                except TraversalError as e:
                    logger.error(f"Error processing directory {entry_path}: {e}")
                    summary.record_error(e)
            elif candidate is not None:
                self._process(candidate, summary)

    def _is_recognized(self, name: str) -> bool:
        return os.path.splitext(name)[1].lower() == self.config.extension

    def _process(self, candidate: FileCandidate, summary: TraversalSummary) -> None:
        """Extract, classify and relocate a single document."""
        summary.files_scanned += 1

        with LogContext(file_path=str(candidate.path)):
            logger.debug(f"Processing file: {candidate.name}")
            logger.debug(f"Full path: {candidate.path}")
            logger.debug(f"Size: {candidate.size} bytes")

            try:
                content = self.extract(candidate.path, self.config.language)
            except ExtractionError as e:
                logger.error(f"Error processing {candidate.name}: {e}")
                summary.record_error(e)
                return
            except Exception as e:
                error = ExtractionError(
                    f"Extraction failed: {e}",
                    file_path=str(candidate.path),
                    cause=e,
                )
                logger.error(f"Error processing {candidate.name}: {error}")
                summary.record_error(error)
                return

            logger.debug(f"OCR output:\n{content}")
            logger.debug(f"Extracted {len(content)} characters")

            content_lower = content.lower()
            category_name = classify(content_lower, self.categories, self.config.match_all)

            if category_name == UNCLASSIFIED:
                logger.info(f"Unclassified: {candidate.name} (remains in original location)")
                summary.unclassified.append(str(candidate.path))
                return

            self._relocate(candidate, category_name, content_lower, summary)

    def _relocate(
        self,
        candidate: FileCandidate,
        category_name: str,
        content_lower: str,
        summary: TraversalSummary,
    ) -> None:
        with LogContext(category=category_name):
            if logger.isEnabledFor(logging.DEBUG):
                category = next(c for c in self.categories if c.name == category_name)
                keywords = ", ".join(matched_keywords(content_lower, category))
                logger.debug(f"Assigned category: {category_name} (keywords: {keywords})")

            category_path = self.config.destination_root / category_name
            if _same_directory(candidate.path.parent, category_path):
                logger.info(f"Already organized: {candidate.name} (in {category_path})")
                summary.in_place.append(str(candidate.path))
                return

            try:
                destination = relocate(
                    candidate.path,
                    self.config.destination_root,
                    category_name,
                    candidate.name,
                )
            except RelocationError as e:
                logger.error(f"Error organizing {candidate.name}: {e}")
                summary.record_error(e)
                return

            logger.info(f"Organized: {candidate.name} -> {destination}")
            summary.organized.append(
                OrganizedFile(
                    source=str(candidate.path),
                    destination=str(destination),
                    category=category_name,
                )
            )


def _same_directory(first: Path, second: Path) -> bool:
    try:
        return os.path.samefile(first, second)
    except OSError:
        return False
