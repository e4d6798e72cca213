"""
Unit tests for the OCR engine.

poppler and Tesseract are replaced by in-process fakes so the tests
run without either binary installed.
"""

from types import SimpleNamespace

import pytest

from pdf_organizer.extraction import ocr_engine
from pdf_organizer.extraction.ocr_engine import OCRConfig, OCREngine
from pdf_organizer.utils.exceptions import ErrorCode, ExtractionError


class FakePage:
    """Stand-in for a rendered PIL page."""


@pytest.fixture
def fake_backends(monkeypatch):
    """Install fake pdf2image and pytesseract modules."""
    state = SimpleNamespace(
        pages=[FakePage()],
        text="  Invoice #123\n\n",
        convert_error=None,
        ocr_error=None,
        convert_calls=[],
        ocr_calls=[],
    )

    def convert_from_path(path, **kwargs):
        state.convert_calls.append((path, kwargs))
        if state.convert_error:
            raise state.convert_error
        return state.pages

    def image_to_string(image, **kwargs):
        state.ocr_calls.append((image, kwargs))
        if state.ocr_error:
            raise state.ocr_error
        return state.text

    monkeypatch.setattr(ocr_engine, "pdf2image", SimpleNamespace(convert_from_path=convert_from_path))
    monkeypatch.setattr(
        ocr_engine,
        "pytesseract",
        SimpleNamespace(image_to_string=image_to_string, get_tesseract_version=lambda: "5.3.0"),
    )
    return state


class TestExtractFirstPage:
    """Tests for OCREngine.extract_first_page."""

    def test_returns_stripped_text(self, fake_backends, tmp_path):
        """Test recognized text is returned without surrounding whitespace."""
        text = OCREngine().extract_first_page(tmp_path / "a.pdf", "por")

        assert text == "Invoice #123"

    def test_only_first_page_rendered(self, fake_backends, tmp_path):
        """Test rasterization is limited to page one at the configured DPI."""
        OCREngine(OCRConfig(dpi=200)).extract_first_page(tmp_path / "a.pdf", "por")

        path, kwargs = fake_backends.convert_calls[0]
        assert path == str(tmp_path / "a.pdf")
        assert kwargs["first_page"] == 1
        assert kwargs["last_page"] == 1
        assert kwargs["dpi"] == 200
        assert kwargs["timeout"] is None

    def test_language_and_options_passed(self, fake_backends, tmp_path):
        """Test the language and Tesseract options reach the OCR call."""
        engine = OCREngine(OCRConfig(psm=6, timeout=30))

        engine.extract_first_page(tmp_path / "a.pdf", "eng+fra")

        image, kwargs = fake_backends.ocr_calls[0]
        assert image is fake_backends.pages[0]
        assert kwargs["lang"] == "eng+fra"
        assert kwargs["config"] == "--psm 6 --oem 3"
        assert kwargs["timeout"] == 30
        assert fake_backends.convert_calls[0][1]["timeout"] == 30

    def test_empty_page_text(self, fake_backends, tmp_path):
        """Test a page without text yields an empty string."""
        fake_backends.text = "   \n"

        assert OCREngine().extract_first_page(tmp_path / "a.pdf", "por") == ""

    def test_conversion_failure(self, fake_backends, tmp_path):
        """Test rasterization errors become ExtractionError."""
        fake_backends.convert_error = RuntimeError("Unable to get page count")

        with pytest.raises(ExtractionError) as exc_info:
            OCREngine().extract_first_page(tmp_path / "a.pdf", "por")

        error = exc_info.value
        assert error.error_code == ErrorCode.EXTRACTION_FAILED
        assert error.details["extractor_type"] == "pdf2image"
        assert error.details["file_path"] == str(tmp_path / "a.pdf")
        assert fake_backends.ocr_calls == []

    def test_no_pages(self, fake_backends, tmp_path):
        fake_backends.pages = []

        with pytest.raises(ExtractionError):
            OCREngine().extract_first_page(tmp_path / "a.pdf", "por")

    def test_ocr_failure(self, fake_backends, tmp_path):
        """Test recognition errors become ExtractionError."""
        fake_backends.ocr_error = RuntimeError("Failed loading language 'xyz'")

        with pytest.raises(ExtractionError) as exc_info:
            OCREngine().extract_first_page(tmp_path / "a.pdf", "xyz")

        assert exc_info.value.error_code == ErrorCode.OCR_FAILED
        assert exc_info.value.details["extractor_type"] == "tesseract"

    def test_preprocessing_applied(self, fake_backends, tmp_path, monkeypatch):
        """Test the page goes through preprocessing when enabled."""
        processed = FakePage()
        monkeypatch.setattr(OCREngine, "_preprocess_page", lambda self, page: processed)

        OCREngine(OCRConfig(enable_preprocessing=True)).extract_first_page(tmp_path / "a.pdf", "por")

        assert fake_backends.ocr_calls[0][0] is processed


class TestAvailability:
    """Tests for OCREngine.is_available."""

    def test_available(self, fake_backends):
        assert OCREngine().is_available() is True

    def test_unavailable(self, monkeypatch):
        """Test a missing Tesseract binary is reported, not raised."""
        def missing():
            raise OSError("tesseract is not installed")

        monkeypatch.setattr(ocr_engine, "pytesseract", SimpleNamespace(get_tesseract_version=missing))

        assert OCREngine().is_available() is False


class TestImagePreprocessor:
    """Tests for the OpenCV preprocessing pipeline."""

    def test_color_image_becomes_grayscale(self):
        """Test a BGR image comes out single-channel with the same size."""
        pytest.importorskip("cv2")
        np = pytest.importorskip("numpy")
        image = np.full((40, 60, 3), 255, dtype=np.uint8)
        image[10:30, 20:40] = 0

        result = ocr_engine.ImagePreprocessor.preprocess(image)

        assert result.shape == (40, 60)

    def test_preprocess_pil_page(self):
        """Test PIL pages round-trip through the pipeline."""
        pytest.importorskip("cv2")
        Image = pytest.importorskip("PIL.Image")
        page = Image.new("RGB", (60, 40), "white")

        result = OCREngine()._preprocess_page(page)

        assert result.size == (60, 40)
