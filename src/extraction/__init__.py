"""
Extraction Module for Job Sheet Extraction System.

This module recovers structured job data from noisy OCR text of
photographed paper job sheets.

Components:
    - PatternMatcherChain: ordered first-success matching per field
    - SectionExtractor: multi-line sections bounded by other headers
    - JobDraftAssembler: runs every field, normalizes costs, derives the
      total and reports completeness

Author: Workshop Tools Team
"""

from .field_spec import FieldKind, FieldMatch, FieldPattern, FieldSpec, SectionSpec, build_field_specs
from .matcher import PatternMatcherChain
from .sections import SectionExtractor
from .job_draft import ExtractedJobDraft, ExtractionOutcome, ExtractionState
from .assembler import JobDraftAssembler

__all__ = [
    'FieldKind',
    'FieldMatch',
    'FieldPattern',
    'FieldSpec',
    'SectionSpec',
    'build_field_specs',
    'PatternMatcherChain',
    'SectionExtractor',
    'ExtractedJobDraft',
    'ExtractionOutcome',
    'ExtractionState',
    'JobDraftAssembler',
]
