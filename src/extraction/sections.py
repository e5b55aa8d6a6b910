"""
Section Extractor Module.

Multi-line fields (work required, work done, notes) have no fixed end
delimiter: a section ends where the next recognized header begins. The
extractor keeps a registry of every header token on the sheet and, when
resolving one section, stops at the nearest following occurrence of any
header that does not belong to that section.

Author: Workshop Tools Team
"""

import re
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from src.utils.logger import get_logger
from .field_spec import FieldMatch, SectionSpec, PATTERN_FLAGS, header_regex

logger = get_logger(__name__)


class SectionExtractor:
    """
    Captures text from a section header up to the next known header.

    Attributes:
        sections: Section specs in resolution order.
        registry: (label, compiled header regex) for every known header,
                  section headers and single-line field labels alike.

    Example:
        >>> extractor = SectionExtractor(sections, extra_headers=["Labor"])
        >>> extractor.resolve(text, extractor.sections[1]).value
        'Fork Service\\nHub clean'
    """

    def __init__(
        self,
        sections: Sequence[SectionSpec],
        extra_headers: Iterable[str] = ()
    ) -> None:
        """
        Initialize the extractor.

        Args:
            sections: Multi-line section specs.
            extra_headers: Label regexes that end a section without being
                          sections themselves (single-line field labels,
                          totals, signatures).
        """
        self.sections = list(sections)

        self.registry: List[Tuple[str, "re.Pattern"]] = []
        seen = set()
        labels = [h for s in self.sections for h in s.headers] + list(extra_headers)
        for label in labels:
            if label in seen:
                continue
            seen.add(label)
            self.registry.append((label, re.compile(header_regex(label), PATTERN_FLAGS)))

        logger.debug(f"SectionExtractor initialized with {len(self.registry)} headers")

    def resolve(self, text: str, section: SectionSpec) -> FieldMatch:
        """
        Resolve one section.

        Headers are tried in the section's declared order; the first one
        present in the text wins. Content runs to the nearest following
        header of another field, or end of text. A header followed
        directly by another header yields an empty string, which is a
        match, not a miss.

        Args:
            text: Raw OCR text.
            section: Section to resolve.

        Returns:
            FieldMatch with the captured (trimmed) section body or default.
        """
        own = set(section.headers)

        for index, header in enumerate(section.headers):
            found = self._find_header(text, header)
            if found is None:
                continue

            start = found.end()
            end = self._next_boundary(text, start, exclude=own)
            value = text[start:end].strip()

            logger.debug(
                f"{section.name}: header {index} at {found.start()}, "
                f"captured {len(value)} chars"
            )
            return FieldMatch(section.name, value, True, index)

        logger.debug(f"{section.name}: no header found, using default")
        return FieldMatch(section.name, section.default, False)

    def resolve_all(self, text: str) -> Dict[str, FieldMatch]:
        """Resolve every registered section."""
        return {s.name: self.resolve(text, s) for s in self.sections}

    def _find_header(self, text: str, header: str) -> Optional["re.Match"]:
        for label, regex in self.registry:
            if label == header:
                return regex.search(text)
        return None

    def _next_boundary(self, text: str, start: int, exclude: set) -> int:
        """
        Offset of the nearest header occurrence at or after ``start``.

        Args:
            text: Raw OCR text.
            start: Offset where the section body begins.
            exclude: Labels belonging to the section being resolved.

        Returns:
            Start offset of the closest other header, or len(text).
        """
        end = len(text)
        for label, regex in self.registry:
            if label in exclude:
                continue
            found = regex.search(text, start)
            if found is not None and found.start() < end:
                end = found.start()
        return end
