"""
Job Draft Assembler Module.

This module provides the JobDraftAssembler class that turns raw OCR text
from a job sheet into an ExtractedJobDraft plus a completeness signal.

Pipeline per call:
    1. Single-line fields through their PatternMatcherChain
    2. Multi-line sections through the SectionExtractor
    3. Cost fields through CostNormalizer, "date in" through DateNormalizer
    4. total_cost derived from labour + parts
    5. COMPLETE / INCOMPLETE decided from the required fields

The assembler holds only immutable configuration, so one instance can
serve any number of calls, concurrently or not.

Author: Workshop Tools Team
"""

from typing import Dict, Iterable, List, Optional, Sequence

from config import get_config
from src.utils.exceptions import FieldSpecError
from src.utils.helpers import normalize_line_endings
from src.utils.logger import get_logger
from src.postprocessor.normalizers import CostNormalizer, DateNormalizer
from .field_spec import (
    REQUIRED_FIELDS,
    FieldKind,
    FieldMatch,
    FieldSpec,
    SectionSpec,
    build_field_specs,
    token_to_label,
)
from .job_draft import ExtractedJobDraft, ExtractionOutcome, ExtractionState
from .matcher import PatternMatcherChain
from .sections import SectionExtractor

logger = get_logger(__name__)

DRAFT_FIELDS: List[str] = [
    'customer_name',
    'customer_phone',
    'bike_model',
    'work_required',
    'work_done',
    'labor_cost',
    'parts_cost',
    'notes',
    'date_in',
]


class JobDraftAssembler:
    """
    Orchestrates field extraction for a job sheet.

    Attributes:
        chains: One PatternMatcherChain per single-line field
        section_extractor: Extractor for multi-line sections
        required_fields: Fields that must be recovered for COMPLETE
        cost_normalizer: CostNormalizer instance
        date_normalizer: DateNormalizer instance

    Example:
        >>> assembler = JobDraftAssembler()
        >>> outcome = assembler.extract(ocr_text)
        >>> outcome.draft.total_cost
        Decimal('290.00')
        >>> outcome.is_complete
        True
    """

    def __init__(
        self,
        field_specs: Optional[Sequence[FieldSpec]] = None,
        section_specs: Optional[Sequence[SectionSpec]] = None,
        required_fields: Optional[Iterable[str]] = None,
        boundary_headers: Optional[Iterable[str]] = None,
        cost_normalizer: Optional[CostNormalizer] = None,
        date_normalizer: Optional[DateNormalizer] = None
    ) -> None:
        """
        Initialize the assembler.

        Args:
            field_specs: Single-line field specs. If None, built from
                        configuration.
            section_specs: Section specs. If None, built from configuration.
            required_fields: Names that decide completeness. If None, uses
                            ``extraction.required_fields``.
            boundary_headers: Extra plain-word headers that end a section.
                             If None, uses ``extraction.boundary_headers``.
            cost_normalizer: Normalizer for cost fields.
            date_normalizer: Normalizer for date fields.

        Raises:
            FieldSpecError: If configuration names unknown fields or holds
                            invalid patterns.
        """
        if field_specs is None or section_specs is None:
            configured_fields, configured_sections = build_field_specs(
                get_config("extraction.fields", {}) or {}
            )
            field_specs = configured_fields if field_specs is None else field_specs
            section_specs = configured_sections if section_specs is None else section_specs

        if required_fields is None:
            required_fields = get_config("extraction.required_fields", list(REQUIRED_FIELDS))
        if boundary_headers is None:
            boundary_headers = get_config("extraction.boundary_headers", []) or []

        self.field_specs = list(field_specs)
        self.section_specs = list(section_specs)

        known = {s.name for s in self.field_specs} | {s.name for s in self.section_specs}
        self.required_fields = tuple(required_fields)
        unknown = [name for name in self.required_fields if name not in known]
        if unknown:
            raise FieldSpecError(", ".join(unknown), "required field is not defined")

        extra_headers = [label for spec in self.field_specs for label in spec.labels]
        extra_headers.extend(token_to_label(str(h)) for h in boundary_headers)
        self.section_extractor = SectionExtractor(self.section_specs, extra_headers)

        # A single-line value stops where any other header starts inline
        stop_labels = extra_headers + [h for s in self.section_specs for h in s.headers]
        self.chains = [PatternMatcherChain(spec, stop_labels) for spec in self.field_specs]

        self.cost_normalizer = cost_normalizer or CostNormalizer()
        self.date_normalizer = date_normalizer or DateNormalizer()

        logger.info(
            f"JobDraftAssembler initialized ({len(self.chains)} fields, "
            f"{len(self.section_specs)} sections)"
        )

    def extract(self, text: str, source: Optional[str] = None) -> ExtractionOutcome:
        """
        Extract a job draft from raw OCR text.

        Never raises for partial or garbled input: unmatched fields take
        their defaults, unreadable costs become zero, and missing required
        fields are reported through the outcome state.

        Args:
            text: Raw OCR text of one job sheet.
            source: Optional label (e.g. image filename) carried on the
                    outcome.

        Returns:
            ExtractionOutcome with the draft and completeness signal.
        """
        state = ExtractionState.PENDING
        text = normalize_line_endings(text or "")
        logger.debug(f"Extracting job draft ({len(text)} chars, state={state.value})")

        matches: Dict[str, FieldMatch] = {}
        for chain in self.chains:
            matches[chain.name] = chain.resolve(text)
        matches.update(self.section_extractor.resolve_all(text))

        values = self._normalize(matches)
        draft = ExtractedJobDraft(**values)
        state = ExtractionState.EXTRACTED
        logger.debug(f"state={state.value}: {draft!r}")

        matched = tuple(name for name, m in matches.items() if m.matched)
        missing = tuple(
            name for name in self.required_fields
            if not matches[name].matched
        )
        state = ExtractionState.INCOMPLETE if missing else ExtractionState.COMPLETE

        if missing:
            logger.info(f"Job sheet incomplete, defaulted: {', '.join(missing)}")
        else:
            logger.info(
                f"Job sheet complete: {draft.customer_name} / {draft.bike_model}, "
                f"total {draft.total_cost}"
            )

        return ExtractionOutcome(
            draft=draft,
            state=state,
            matched_fields=matched,
            missing_required=missing,
            source=source
        )

    def _normalize(self, matches: Dict[str, FieldMatch]) -> Dict[str, object]:
        """Apply cost/date normalization and keep only draft fields."""
        kinds = {spec.name: spec.kind for spec in self.field_specs}
        values = {}

        for name, match in matches.items():
            kind = kinds.get(name, FieldKind.TEXT)

            if kind == FieldKind.COST:
                values[name] = self.cost_normalizer.normalize(
                    str(match.value) if match.value is not None else None
                )
            elif kind == FieldKind.DATE:
                raw = str(match.value or "")
                values[name] = self.date_normalizer.normalize(raw) or raw
            else:
                values[name] = "" if match.value is None else str(match.value)

        return {k: v for k, v in values.items() if k in DRAFT_FIELDS}
