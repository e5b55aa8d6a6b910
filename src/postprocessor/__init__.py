"""
Post-Processing Module for Job Sheet Extraction System.

This module provides normalization of captured values:
    - Cost normalization (labour, parts) to non-negative Decimals
    - "Date In" normalization to ISO dates

Author: Workshop Tools Team
"""

from .normalizers import CostNormalizer, DateNormalizer

__all__ = [
    'CostNormalizer',
    'DateNormalizer'
]
