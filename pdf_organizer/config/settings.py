"""
Configuration Management System
===============================

Provides dataclass-based configuration with YAML file loading support.
All sections are immutable once a run starts and are passed explicitly
to the components that need them.
"""

from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Optional, Any, Dict
import yaml

from pdf_organizer.extraction.ocr_engine import OCRConfig
from pdf_organizer.utils.exceptions import ConfigurationError
from pdf_organizer.utils.logging_config import LoggingConfig, get_logger

logger = get_logger(__name__)

DEFAULT_CATEGORIES_FILE = "categories.conf"
DEFAULT_LANGUAGE = "por"
PDF_EXTENSION = ".pdf"


def _normalize_extension(extension: str) -> str:
    extension = extension.strip().lower()
    if extension and not extension.startswith("."):
        extension = "." + extension
    return extension


def _section(data: Dict[str, Any], name: str) -> Dict[str, Any]:
    """Return one settings section, rejecting anything but a mapping."""
    section = data.get(name) or {}
    if not isinstance(section, dict):
        raise ConfigurationError(
            f"Settings section '{name}' must be a mapping",
            config_key=name,
            expected_type="mapping",
        )
    return section


def _check_flags(section_cls, data: Dict[str, Any], section: str) -> None:
    """Reject non-boolean values (such as a quoted ``"false"``) for boolean fields."""
    for f in fields(section_cls):
        if f.type is bool and f.name in data and not isinstance(data[f.name], bool):
            raise ConfigurationError(
                f"Setting '{section}.{f.name}' must be true or false, got {data[f.name]!r}",
                config_key=f"{section}.{f.name}",
                expected_type="bool",
            )


@dataclass(frozen=True)
class OrganizerConfig:
    """Run-scoped organizer settings.

    Attributes:
        root_path: Directory tree to organize.
        destination_root: Directory receiving the category folders.
        categories_file: Path to the ``categories.conf`` file.
        language: Tesseract language code (e.g. "por", "eng", "eng+fra").
        match_all: Require every keyword of a category instead of any.
        verbose: Log OCR output and per-step details.
        extension: Recognized document extension, lowercase with the dot.
    """
    root_path: Path = field(default_factory=Path.cwd)
    destination_root: Path = field(default_factory=Path.cwd)
    categories_file: Path = Path(DEFAULT_CATEGORIES_FILE)
    language: str = DEFAULT_LANGUAGE
    match_all: bool = False
    verbose: bool = False
    extension: str = PDF_EXTENSION

    def __post_init__(self):
        object.__setattr__(self, "root_path", Path(self.root_path).expanduser())
        object.__setattr__(self, "destination_root", Path(self.destination_root).expanduser())
        object.__setattr__(self, "categories_file", Path(self.categories_file).expanduser())
        object.__setattr__(self, "extension", _normalize_extension(self.extension))
        if not self.language:
            raise ConfigurationError("OCR language must not be empty", config_key="language")
        if not self.extension:
            raise ConfigurationError("Document extension must not be empty", config_key="extension")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "OrganizerConfig":
        """Create OrganizerConfig from dictionary."""
        _check_flags(cls, data or {}, "organizer")
        if not data:
            return cls()
        defaults = cls()
        return cls(
            root_path=data.get("root_path", defaults.root_path),
            destination_root=data.get("destination_root", defaults.destination_root),
            categories_file=data.get("categories_file", defaults.categories_file),
            language=str(data.get("language", defaults.language)),
            match_all=data.get("match_all", defaults.match_all),
            verbose=data.get("verbose", defaults.verbose),
            extension=str(data.get("extension", defaults.extension)),
        )


@dataclass
class Config:
    """Main configuration container.

    Aggregates all configuration sections and provides loading from YAML.
    """
    organizer: OrganizerConfig = field(default_factory=OrganizerConfig)
    ocr: OCRConfig = field(default_factory=OCRConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> "Config":
        """Load configuration from YAML file.

        Args:
            config_path: Path to the settings file. If None, defaults are used.

        Returns:
            Config instance with loaded settings.

        Raises:
            ConfigurationError: If the file is not valid YAML or holds
                invalid values.
        """
        if config_path is None:
            return cls()

        config_path = Path(config_path).expanduser()
        if not config_path.exists():
            logger.warning(f"Settings file not found at {config_path}, using defaults")
            return cls()

        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(
                f"Failed to parse settings file: {config_path}",
                cause=e,
            )
        except OSError as e:
            raise ConfigurationError(
                f"Failed to read settings file: {config_path}",
                cause=e,
            )

        if not isinstance(data, dict):
            raise ConfigurationError(
                f"Settings file must contain a mapping: {config_path}",
                expected_type="mapping",
            )

        try:
            config = cls._from_dict(data)
        except (TypeError, ValueError) as e:
            raise ConfigurationError(
                f"Invalid value in settings file: {config_path}",
                cause=e,
            )

        logger.info(f"Loaded configuration from {config_path}")
        return config

    @classmethod
    def _from_dict(cls, data: Dict[str, Any]) -> "Config":
        """Create Config from dictionary."""
        organizer = _section(data, "organizer")
        ocr = _section(data, "ocr")
        logging_section = _section(data, "logging")
        _check_flags(OCRConfig, ocr, "ocr")
        _check_flags(LoggingConfig, logging_section, "logging")
        return cls(
            organizer=OrganizerConfig.from_dict(organizer),
            ocr=OCRConfig.from_dict(ocr),
            logging=LoggingConfig.from_dict(logging_section),
        )

    def with_overrides(self, **overrides: Any) -> "Config":
        """Return a copy with organizer fields replaced.

        ``None`` values are ignored so unset command-line flags keep the
        file or default value.
        """
        changes = {key: value for key, value in overrides.items() if value is not None}
        if not changes:
            return self
        return replace(self, organizer=replace(self.organizer, **changes))
