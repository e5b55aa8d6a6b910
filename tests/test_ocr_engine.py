"""Tests for the Tesseract backend and OCREngine, with pytesseract mocked out."""
from unittest.mock import patch

import pytesseract
import pytest
from PIL import Image

from config import ConfigurationManager
from src.ocr_engine import OCREngine, TesseractBackend
from src.utils.exceptions import OCREngineNotAvailableError, OCRProcessingError


@pytest.fixture
def mock_tesseract():
    with patch("src.ocr_engine.tesseract_backend.pytesseract") as mocked:
        mocked.TesseractError = pytesseract.TesseractError
        mocked.TesseractNotFoundError = pytesseract.TesseractNotFoundError
        mocked.get_tesseract_version.return_value = "5.3.0"
        mocked.image_to_string.return_value = "  Customer: John Jerrime\nBike: Trek  \n"
        yield mocked


class TestTesseractBackend:
    def test_reads_config(self, mock_tesseract):
        backend = TesseractBackend()

        assert backend.language == "eng"
        assert backend.psm == 4
        assert backend.oem == 3

    def test_missing_binary(self, mock_tesseract):
        mock_tesseract.get_tesseract_version.side_effect = pytesseract.TesseractNotFoundError()

        with pytest.raises(OCREngineNotAvailableError):
            TesseractBackend()

    def test_extract_text(self, mock_tesseract):
        image = Image.new("RGB", (20, 20), "white")
        text = TesseractBackend().extract_text(image)

        assert text == "Customer: John Jerrime\nBike: Trek"
        mock_tesseract.image_to_string.assert_called_once_with(
            image, lang="eng", config="--psm 4 --oem 3", timeout=60
        )

    def test_converts_unsupported_modes(self, mock_tesseract):
        TesseractBackend().extract_text(Image.new("RGBA", (20, 20)))

        passed = mock_tesseract.image_to_string.call_args[0][0]
        assert passed.mode == "RGB"

    def test_tesseract_failure(self, mock_tesseract):
        mock_tesseract.image_to_string.side_effect = pytesseract.TesseractError(1, "bad image")

        with pytest.raises(OCRProcessingError) as exc_info:
            TesseractBackend().extract_text(Image.new("L", (20, 20)), source="sheet.jpg")

        assert exc_info.value.details["source"] == "sheet.jpg"

    def test_tesseract_timeout(self, mock_tesseract):
        mock_tesseract.image_to_string.side_effect = RuntimeError("Tesseract process timeout")

        with pytest.raises(OCRProcessingError):
            TesseractBackend().extract_text(Image.new("L", (20, 20)))

    def test_timeout_disabled(self, mock_tesseract, tmp_path):
        custom = tmp_path / "settings.yaml"
        custom.write_text("ocr:\n  workers:\n    timeout: 0\n", encoding="utf-8")
        ConfigurationManager(str(custom))

        TesseractBackend().extract_text(Image.new("L", (20, 20)))

        assert mock_tesseract.image_to_string.call_args[1]["timeout"] == 0

    def test_languages_exclude_osd(self, mock_tesseract):
        mock_tesseract.get_languages.return_value = ["eng", "osd"]
        assert TesseractBackend().get_available_languages() == ["eng"]


class TestOCREngine:
    def test_extract_from_path(self, mock_tesseract, tmp_path):
        path = tmp_path / "sheet.png"
        Image.new("RGB", (20, 20), "white").save(path)

        text = OCREngine().extract_text(path)

        assert text == "Customer: John Jerrime\nBike: Trek"

    def test_missing_file(self, mock_tesseract, tmp_path):
        with pytest.raises(OCRProcessingError):
            OCREngine().extract_text(tmp_path / "missing.jpg")

    def test_not_an_image(self, mock_tesseract, tmp_path):
        path = tmp_path / "sheet.jpg"
        path.write_text("Customer: John")

        with pytest.raises(OCRProcessingError):
            OCREngine().extract_text(str(path))

    def test_invalid_input(self, mock_tesseract):
        with pytest.raises(OCRProcessingError):
            OCREngine().extract_text(42)

    def test_uses_given_backend(self, mock_tesseract):
        backend = TesseractBackend()
        assert OCREngine(backend=backend).backend is backend

    def test_backend_info(self, mock_tesseract):
        mock_tesseract.get_languages.return_value = ["eng", "osd"]

        info = OCREngine().get_backend_info()

        assert info == {"backend": "tesseract", "languages": ["eng"]}
