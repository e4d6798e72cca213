"""Content extraction module."""

from .ocr_engine import OCREngine, OCRConfig, ImagePreprocessor

__all__ = [
    "OCREngine",
    "OCRConfig",
    "ImagePreprocessor",
]
