"""
Pattern Matcher Chain Module.

Resolves one single-line field by trying its recognition patterns in
priority order. Different job sheet templates label the same thing
differently ("Customer", "Name", "Client"); supporting a new template
means appending a pattern, not changing this logic.

Author: Workshop Tools Team
"""

import re
from typing import Iterable, Optional

from src.utils.logger import get_logger
from .field_spec import FieldMatch, FieldSpec, PATTERN_FLAGS

logger = get_logger(__name__)


class PatternMatcherChain:
    """
    Ordered first-success matcher for a single field.

    Each pattern is searched against the full text. The first pattern
    that captures a non-empty value wins and later patterns are never
    evaluated. If every pattern fails the field default is returned,
    flagged as not recovered.

    When several fields share one line ("Customer: Jo Phone: 0411 ..."),
    a captured value is cut where another field's ``<label>:`` starts.

    Example:
        >>> chain = PatternMatcherChain(spec, stop_labels=["Phone"])
        >>> chain.resolve("Customer: John Jerrime Phone: 0411 056 876").value
        'John Jerrime'
    """

    def __init__(self, spec: FieldSpec, stop_labels: Iterable[str] = ()) -> None:
        """
        Initialize the chain.

        Args:
            spec: Field to resolve.
            stop_labels: Label regexes of other fields. Labels belonging to
                        ``spec`` itself are ignored.
        """
        self.spec = spec

        own = set(spec.labels)
        others = []
        for label in stop_labels:
            if label not in own and label not in others:
                others.append(label)

        self._stop: Optional["re.Pattern"] = None
        if others:
            alternatives = '|'.join(f'(?:{label})' for label in others)
            self._stop = re.compile(rf'\b(?:{alternatives})[ \t]*:', PATTERN_FLAGS)

    @property
    def name(self) -> str:
        return self.spec.name

    def resolve(self, text: str) -> FieldMatch:
        """
        Resolve the field against raw text.

        Args:
            text: Raw OCR text.

        Returns:
            FieldMatch holding the captured value, or the default with
            ``matched=False``.
        """
        for index, pattern in enumerate(self.spec.patterns):
            value = self._cut_at_inline_label(pattern.match(text))
            if value is not None:
                logger.debug(f"{self.name}: pattern {index} matched '{value}'")
                return FieldMatch(self.name, value, True, index)

        logger.debug(f"{self.name}: no pattern matched, using default")
        return FieldMatch(self.name, self.spec.default, False)

    def _cut_at_inline_label(self, value: Optional[str]) -> Optional[str]:
        if value is None or self._stop is None:
            return value

        found = self._stop.search(value)
        if found is None:
            return value

        # A value that is nothing but another field's label is a miss
        return value[:found.start()].strip() or None
