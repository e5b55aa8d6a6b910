"""
Main OCR Engine Module.

This module provides the OCREngine class, the boundary between the scan
workflow and the OCR collaborator: one image in, recognized text out.

Usage:
    from src.ocr_engine import OCREngine

    engine = OCREngine()
    text = engine.extract_text("job_sheet.jpg")

Author: Workshop Tools Team
"""

from pathlib import Path
from typing import Any, Dict, Optional, Union

from PIL import Image, UnidentifiedImageError

from src.utils.logger import get_logger
from src.utils.exceptions import OCRProcessingError
from .tesseract_backend import TesseractBackend

logger = get_logger(__name__)

ImageSource = Union[Image.Image, str, Path]


class OCREngine:
    """
    OCR engine providing a unified interface for text recognition.

    Attributes:
        backend: TesseractBackend doing the recognition

    Example:
        >>> engine = OCREngine()
        >>> text = engine.extract_text("job_sheet.jpg")
    """

    def __init__(self, backend: Optional[TesseractBackend] = None) -> None:
        """
        Initialize the OCR engine.

        Args:
            backend: Backend instance to use. If None, a TesseractBackend is
                    created from configuration.
        """
        self.backend = backend or TesseractBackend()

        logger.info("OCR Engine initialized with Tesseract backend")

    def extract_text(self, image: ImageSource) -> str:
        """
        Recognize the text of one job sheet image.

        Args:
            image: PIL Image or path to an image file.

        Returns:
            Recognized text.

        Raises:
            OCRProcessingError: If the image cannot be loaded or recognized.
        """
        source = "image"

        if isinstance(image, (str, Path)):
            source = str(image)
            logger.debug(f"Loading image from: {source}")
            try:
                with Image.open(source) as opened:
                    opened.load()
                    image = opened.copy()
            except (OSError, UnidentifiedImageError) as e:
                raise OCRProcessingError(source, f"Failed to load image: {e}")

        if not isinstance(image, Image.Image):
            raise OCRProcessingError(source, "Invalid image input")

        return self.backend.extract_text(image, source=source)

    def get_backend_info(self) -> Dict[str, Any]:
        """
        Get information about the current OCR backend.

        Returns:
            Dictionary with backend details.
        """
        return {
            'backend': 'tesseract',
            'languages': self.backend.get_available_languages()
        }
