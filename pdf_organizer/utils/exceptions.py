"""
Custom Exceptions
=================

Defines custom exception classes for the PDF Organizer.
All exceptions include error codes for programmatic handling.
"""

from enum import Enum
from typing import Optional


class ErrorCode(Enum):
    """Error codes for programmatic error handling."""

    # General errors (1000-1099)
    UNKNOWN_ERROR = 1000
    CONFIGURATION_ERROR = 1001

    # Traversal errors (1100-1199)
    ROOT_NOT_FOUND = 1100
    DIRECTORY_READ_FAILED = 1101

    # Extraction errors (1200-1299)
    OCR_FAILED = 1202
    EXTRACTION_FAILED = 1203

    # Relocation errors (1300-1399)
    FOLDER_CREATION_FAILED = 1300
    DESTINATION_CHECK_FAILED = 1301
    MOVE_FAILED = 1302


class PdfOrganizerError(Exception):
    """Base exception for all PDF Organizer errors.

    Attributes:
        message: Human-readable error message.
        error_code: Programmatic error code.
        details: Additional error context.
        cause: Original exception that caused this error.
    """

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.UNKNOWN_ERROR,
        details: Optional[dict] = None,
        cause: Optional[Exception] = None
    ):
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Programmatic error code.
            details: Additional context as key-value pairs.
            cause: Original exception if wrapping another error.
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        self.cause = cause

    def __str__(self) -> str:
        """Return a formatted error string."""
        result = f"[{self.error_code.name}] {self.message}"
        if self.details:
            result += f" | Details: {self.details}"
        if self.cause:
            result += f" | Caused by: {type(self.cause).__name__}: {self.cause}"
        return result

    def to_dict(self) -> dict:
        """Convert exception to dictionary for logging/serialization."""
        return {
            "error_type": type(self).__name__,
            "message": self.message,
            "error_code": self.error_code.value,
            "error_name": self.error_code.name,
            "details": self.details,
            "cause": str(self.cause) if self.cause else None,
        }


class ConfigurationError(PdfOrganizerError):
    """Raised when there's a configuration problem.

    Fatal for the run: raised before any file is touched.

    Examples:
        - Category file missing or unreadable
        - Invalid settings file
        - Root path that does not exist
    """

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        expected_type: Optional[str] = None,
        **kwargs
    ):
        details = kwargs.pop("details", {})
        if config_key:
            details["config_key"] = config_key
        if expected_type:
            details["expected_type"] = expected_type
        super().__init__(
            message,
            error_code=ErrorCode.CONFIGURATION_ERROR,
            details=details,
            **kwargs
        )


class TraversalError(PdfOrganizerError):
    """Raised when a directory cannot be walked.

    The subtree is skipped; siblings continue.
    """

    def __init__(
        self,
        message: str,
        directory: Optional[str] = None,
        error_code: ErrorCode = ErrorCode.DIRECTORY_READ_FAILED,
        **kwargs
    ):
        details = kwargs.pop("details", {})
        if directory:
            details["directory"] = directory
        super().__init__(
            message,
            error_code=error_code,
            details=details,
            **kwargs
        )


class ExtractionError(PdfOrganizerError):
    """Raised when text extraction fails.

    Examples:
        - PDF cannot be rasterized
        - OCR failure
        - Missing poppler/Tesseract binaries
    """

    def __init__(
        self,
        message: str,
        file_path: Optional[str] = None,
        extractor_type: Optional[str] = None,
        error_code: ErrorCode = ErrorCode.EXTRACTION_FAILED,
        **kwargs
    ):
        details = kwargs.pop("details", {})
        if file_path:
            details["file_path"] = file_path
        if extractor_type:
            details["extractor_type"] = extractor_type
        super().__init__(
            message,
            error_code=error_code,
            details=details,
            **kwargs
        )


class RelocationError(PdfOrganizerError):
    """Raised when a classified file cannot be moved.

    The file stays at its source location.
    """

    def __init__(
        self,
        message: str,
        file_path: Optional[str] = None,
        destination: Optional[str] = None,
        error_code: ErrorCode = ErrorCode.MOVE_FAILED,
        **kwargs
    ):
        details = kwargs.pop("details", {})
        if file_path:
            details["file_path"] = file_path
        if destination:
            details["destination"] = destination
        super().__init__(
            message,
            error_code=error_code,
            details=details,
            **kwargs
        )
