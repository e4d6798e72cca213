"""Utilities module for PDF Organizer."""

from .logging_config import setup_logging, get_logger, LoggingConfig
from .exceptions import (
    ErrorCode,
    PdfOrganizerError,
    ConfigurationError,
    TraversalError,
    ExtractionError,
    RelocationError,
)

__all__ = [
    "setup_logging",
    "get_logger",
    "LoggingConfig",
    "ErrorCode",
    "PdfOrganizerError",
    "ConfigurationError",
    "TraversalError",
    "ExtractionError",
    "RelocationError",
]
