"""
Tesseract OCR Backend.

This module provides OCR functionality using Tesseract (pytesseract).
Job sheets are read as plain text; word positions are not used.

Requirements:
    - Tesseract OCR installed on the system
    - pytesseract Python package

Author: Workshop Tools Team
"""

from typing import List

import pytesseract
from PIL import Image

from config import get_config
from src.utils.logger import get_logger
from src.utils.exceptions import OCREngineNotAvailableError, OCRProcessingError

logger = get_logger(__name__)


class TesseractBackend:
    """
    Tesseract OCR backend implementation.

    Attributes:
        language: Tesseract language code (e.g., "eng")
        psm: Page Segmentation Mode (1-13)
        oem: OCR Engine Mode (0-3)
        extra_config: Additional Tesseract configuration

    Example:
        >>> backend = TesseractBackend()
        >>> text = backend.extract_text(image)
    """

    def __init__(self) -> None:
        """Initialize the Tesseract backend with configuration."""
        self.language = get_config("ocr.tesseract.lang", "eng")
        self.psm = get_config("ocr.tesseract.psm", 4)
        self.oem = get_config("ocr.tesseract.oem", 3)
        self.extra_config = get_config("ocr.tesseract.config", "")
        # Tesseract is killed after this many seconds; 0 means no limit
        self.timeout = get_config("ocr.workers.timeout", 0) or 0

        self._check_dependencies()

        logger.debug(
            f"TesseractBackend initialized (lang={self.language}, "
            f"psm={self.psm}, oem={self.oem})"
        )

    def _check_dependencies(self) -> None:
        """
        Check that the Tesseract binary is reachable.

        Raises:
            OCREngineNotAvailableError: If Tesseract is not installed.
        """
        try:
            version = pytesseract.get_tesseract_version()
            logger.info(f"Tesseract version: {version}")
        except pytesseract.TesseractNotFoundError as e:
            raise OCREngineNotAvailableError(
                f"Tesseract OCR (not installed or not in PATH): {e}"
            )

    def _build_config(self) -> str:
        """
        Build Tesseract configuration string.

        Returns:
            Configuration string for Tesseract.
        """
        config_parts = [
            f"--psm {self.psm}",
            f"--oem {self.oem}"
        ]

        if self.extra_config:
            config_parts.append(self.extra_config)

        return ' '.join(config_parts)

    def extract_text(self, image: Image.Image, source: str = "image") -> str:
        """
        Recognize the text content of an image.

        Args:
            image: PIL Image to process.
            source: Label used in error messages.

        Returns:
            Recognized text, stripped of surrounding whitespace.

        Raises:
            OCRProcessingError: If Tesseract fails on the image or runs
                                past the timeout.
        """
        try:
            if image.mode not in ('RGB', 'L'):
                image = image.convert('RGB')

            config = self._build_config()
            logger.debug(f"Running Tesseract OCR (config: {config})")

            text = pytesseract.image_to_string(
                image,
                lang=self.language,
                config=config,
                timeout=self.timeout
            )
        except (pytesseract.TesseractError, OSError, RuntimeError) as e:
            logger.error(f"OCR processing failed: {e}")
            raise OCRProcessingError(source, str(e))

        text = text.strip()
        logger.info(f"OCR completed: {len(text)} chars from {source}")
        return text

    def get_available_languages(self) -> List[str]:
        """
        Get list of available Tesseract languages.

        Returns:
            List of language codes.
        """
        try:
            langs = pytesseract.get_languages()
            return [lang for lang in langs if lang != 'osd']
        except pytesseract.TesseractError as e:
            logger.debug(f"Could not get languages: {e}")
            return [self.language]
