"""
Utility Module for Job Sheet Extraction System.

This module provides common utilities used across all other modules:
    - Logging configuration
    - Custom exceptions
    - Common helpers
"""

from .logger import setup_logger, get_logger
from .helpers import ensure_directory, normalize_line_endings

__all__ = [
    'setup_logger',
    'get_logger',
    'ensure_directory',
    'normalize_line_endings'
]
