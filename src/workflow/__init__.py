"""
Workflow Module for Job Sheet Extraction System.

Async scan workflow around the OCR collaborator and the extraction core.

Author: Workshop Tools Team
"""

from .scanner import JobSheetScanner, OCRWorker, OCRWorkerPool

__all__ = ['JobSheetScanner', 'OCRWorker', 'OCRWorkerPool']
