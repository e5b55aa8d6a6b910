"""
Job Sheet Extraction System - Source Package.

This package contains the modules of the job sheet extraction system,
which turns photographed workshop job sheets into structured job drafts.

Modules:
    - ocr_engine: Text recognition (Tesseract)
    - extraction: Field patterns, sections and draft assembly
    - postprocessor: Cost and date normalization
    - workflow: Async scan workflow with OCR worker leasing
    - output_handler: SQLite job store
    - utils: Logging, exceptions, helpers

Architecture:
    Image → OCR → Extraction (patterns / sections → normalizers) → Draft
                                                                   ↓
                                                             Job store
"""

__version__ = "1.0.0"
__author__ = "Workshop Tools Team"

__all__ = [
    'ocr_engine',
    'extraction',
    'postprocessor',
    'workflow',
    'output_handler',
    'utils'
]
