"""
OCR Engine Module for Job Sheet Extraction System.

This module wraps the external OCR collaborator:
    - Image loading (path or PIL image)
    - Text recognition with Tesseract

Author: Workshop Tools Team
"""

from .engine import OCREngine
from .tesseract_backend import TesseractBackend

__all__ = ['OCREngine', 'TesseractBackend']
