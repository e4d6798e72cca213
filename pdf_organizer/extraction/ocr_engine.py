"""
OCR Engine
==========

First-page text extraction for PDF documents.
The page is rasterized with poppler (via pdf2image) and recognized
with Tesseract (via pytesseract).
"""

from pathlib import Path
from dataclasses import dataclass
from typing import Any, Dict, Optional

from pdf_organizer.utils.logging_config import get_logger
from pdf_organizer.utils.exceptions import ErrorCode, ExtractionError

logger = get_logger(__name__)

# Lazy imports for heavy libraries
pytesseract = None
Image = None
cv2 = None
np = None
pdf2image = None


def _import_tesseract():
    """Lazy import pytesseract."""
    global pytesseract
    if pytesseract is None:
        import pytesseract as _pytesseract

        pytesseract = _pytesseract
    return pytesseract


def _import_pil():
    """Lazy import PIL."""
    global Image
    if Image is None:
        from PIL import Image as _Image

        Image = _Image
    return Image


def _import_cv2():
    """Lazy import OpenCV."""
    global cv2, np
    if cv2 is None:
        import cv2 as _cv2
        import numpy as _np

        cv2 = _cv2
        np = _np
    return cv2, np


def _import_pdf2image():
    """Lazy import pdf2image."""
    global pdf2image
    if pdf2image is None:
        import pdf2image as _pdf2image

        pdf2image = _pdf2image
    return pdf2image


@dataclass(frozen=True)
class OCRConfig:
    """OCR engine configuration.

    Attributes:
        dpi: DPI for PDF to image conversion.
        psm: Page segmentation mode (0-13).
        oem: OCR Engine Mode (0-3).
        timeout: Seconds allowed per external call; 0 waits forever.
        enable_preprocessing: Apply image preprocessing before OCR.
    """

    dpi: int = 300
    psm: int = 3  # Fully automatic page segmentation, no OSD
    oem: int = 3  # Default, based on what is available
    timeout: int = 0
    enable_preprocessing: bool = False

    def to_tesseract_config(self) -> str:
        """Convert to Tesseract config string."""
        return f"--psm {self.psm} --oem {self.oem}"

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "OCRConfig":
        """Create OCRConfig from dictionary."""
        if not data:
            return cls()
        defaults = cls()
        return cls(
            dpi=int(data.get("dpi", defaults.dpi)),
            psm=int(data.get("psm", defaults.psm)),
            oem=int(data.get("oem", defaults.oem)),
            timeout=int(data.get("timeout", defaults.timeout)),
            enable_preprocessing=bool(data.get("enable_preprocessing", defaults.enable_preprocessing)),
        )


class ImagePreprocessor:
    """Image preprocessing for improved OCR accuracy on noisy scans."""

    @staticmethod
    def preprocess(image) -> "np.ndarray":
        """Apply preprocessing pipeline to image.

        Args:
            image: OpenCV image array (BGR or grayscale).

        Returns:
            Preprocessed image (grayscale).
        """
        cv2, np = _import_cv2()

        if len(image.shape) == 3:
            gray = cv2.cvtColor(image, cv2.COLOR_BGR2GRAY)
        else:
            gray = image.copy()

        # Gaussian blur to reduce noise
        blurred = cv2.GaussianBlur(gray, (3, 3), 0)

        # Adaptive thresholding for varying lighting conditions
        binary = cv2.adaptiveThreshold(
            blurred, 255, cv2.ADAPTIVE_THRESH_GAUSSIAN_C, cv2.THRESH_BINARY, 11, 2
        )

        return cv2.fastNlMeansDenoising(binary, None, 10, 7, 21)


class OCREngine:
    """OCR engine using poppler and Tesseract.

    Any engine exposing ``extract_first_page(path, language) -> str`` and
    raising ``ExtractionError`` on failure can stand in for this one.
    """

    def __init__(self, config: Optional[OCRConfig] = None):
        """Initialize OCR engine.

        Args:
            config: OCR configuration. Uses defaults if not provided.
        """
        self.config = config or OCRConfig()
        self.preprocessor = ImagePreprocessor()

    def extract_first_page(self, pdf_path: Path, language: str) -> str:
        """Extract the text found on the first page of a PDF.

        Args:
            pdf_path: Path to PDF file.
            language: Tesseract language code.

        Returns:
            Recognized text, unmodified apart from surrounding whitespace.

        Raises:
            ExtractionError: If rasterization or recognition fails.
        """
        pdf2image = _import_pdf2image()
        pytesseract = _import_tesseract()

        try:
            images = pdf2image.convert_from_path(
                str(pdf_path),
                dpi=self.config.dpi,
                first_page=1,
                last_page=1,
                timeout=self.config.timeout or None,
            )
        except Exception as e:
            raise ExtractionError(
                f"PDF conversion failed: {e}",
                file_path=str(pdf_path),
                extractor_type="pdf2image",
                cause=e,
            )

        if not images:
            raise ExtractionError(
                "No page image generated",
                file_path=str(pdf_path),
                extractor_type="pdf2image",
            )

        page = images[0]
        if self.config.enable_preprocessing:
            page = self._preprocess_page(page)

        try:
            text = pytesseract.image_to_string(
                page,
                lang=language,
                timeout=self.config.timeout,
                config=self.config.to_tesseract_config(),
            )
        except Exception as e:
            raise ExtractionError(
                f"OCR failed: {e}",
                file_path=str(pdf_path),
                extractor_type="tesseract",
                error_code=ErrorCode.OCR_FAILED,
                cause=e,
            )

        return text.strip()

    def _preprocess_page(self, pil_image):
        """Run the OpenCV pipeline on a PIL page image."""
        cv2, np = _import_cv2()
        Image = _import_pil()

        cv_image = cv2.cvtColor(np.array(pil_image.convert("RGB")), cv2.COLOR_RGB2BGR)
        return Image.fromarray(self.preprocessor.preprocess(cv_image))

    def is_available(self) -> bool:
        """Check if OCR engine is available.

        Returns:
            True if Tesseract is installed and accessible.
        """
        try:
            pytesseract = _import_tesseract()
            pytesseract.get_tesseract_version()
            return True
        except Exception:
            return False
