"""
Relocator
=========

Collision-safe move of a classified file into its category folder.
Existing files are never overwritten: the incoming file is renamed
``name (1).pdf``, ``name (2).pdf``, ... until a free name is found.
"""

import os
from pathlib import Path

from pdf_organizer.utils.logging_config import get_logger
from pdf_organizer.utils.exceptions import ErrorCode, RelocationError

logger = get_logger(__name__)

CATEGORY_FOLDER_MODE = 0o755


def disambiguated_name(original_name: str, counter: int) -> str:
    """Build the candidate name for a collision counter.

    Args:
        original_name: File name as found at the source.
        counter: Collision counter; 0 returns the original name.

    Returns:
        ``"<base> (<counter>)<ext>"`` split at the last extension.
    """
    if counter == 0:
        return original_name
    base, ext = os.path.splitext(original_name)
    return f"{base} ({counter}){ext}"


def ensure_category_folder(destination_root: Path, category_name: str) -> Path:
    """Create ``destination_root/category_name`` if missing.

    Returns:
        Path of the category folder.

    Raises:
        RelocationError: If the folder cannot be created.
    """
    category_path = Path(destination_root) / category_name

    try:
        if category_path.is_dir():
            return category_path
        category_path.mkdir(mode=CATEGORY_FOLDER_MODE, exist_ok=True)
    except OSError as e:
        raise RelocationError(
            f"Error creating folder {category_name} in {destination_root}",
            destination=str(category_path),
            error_code=ErrorCode.FOLDER_CREATION_FAILED,
            cause=e,
        )

    logger.debug(f"Created category folder: {category_path}")
    return category_path


def _exists(path: Path) -> bool:
    """Existence test that only treats "not found" as absent.

    Raises:
        RelocationError: If the check fails for any other reason.
    """
    try:
        os.lstat(path)
    except FileNotFoundError:
        return False
    except OSError as e:
        raise RelocationError(
            f"Error checking destination file {path}",
            destination=str(path),
            error_code=ErrorCode.DESTINATION_CHECK_FAILED,
            cause=e,
        )
    return True


def relocate(
    source_path: Path,
    destination_root: Path,
    category_name: str,
    original_name: str
) -> Path:
    """Move a file into its category folder without overwriting anything.

    The collision counter is unbounded.

    Args:
        source_path: Current location of the file.
        destination_root: Directory holding the category folders.
        category_name: Folder to move the file into.
        original_name: File name used to derive candidate names.

    Returns:
        Final path of the moved file.

    Raises:
        RelocationError: If the folder cannot be created, a destination
            check fails, or the rename fails. The file stays at
            ``source_path`` in every case.
    """
    source_path = Path(source_path)
    category_path = ensure_category_folder(destination_root, category_name)

    counter = 0
    target_path = category_path / original_name
    while _exists(target_path):
        counter += 1
        target_path = category_path / disambiguated_name(original_name, counter)
        logger.debug(f"Duplicate found, trying new name: {target_path.name}")

    try:
        os.rename(source_path, target_path)
    except OSError as e:
        raise RelocationError(
            f"Error moving {original_name} to {target_path}",
            file_path=str(source_path),
            destination=str(target_path),
            error_code=ErrorCode.MOVE_FAILED,
            cause=e,
        )

    return target_path
