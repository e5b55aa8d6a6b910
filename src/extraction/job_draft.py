"""
Extracted Job Draft Data Classes.

This module defines the structured record produced from one job sheet
scan, and the outcome object that pairs it with the completeness signal.

Author: Workshop Tools Team
"""

import json
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from src.utils.exceptions import IncompleteJobSheetError


class ExtractionState(str, Enum):
    """
    Assembler states.

    PENDING -> EXTRACTED -> {COMPLETE, INCOMPLETE}. Only the last two are
    ever seen on a returned outcome.
    """
    PENDING = "pending"
    EXTRACTED = "extracted"
    COMPLETE = "complete"
    INCOMPLETE = "incomplete"


@dataclass(frozen=True)
class ExtractedJobDraft:
    """
    Structured job sheet data ready for manual correction or persistence.

    Every field is always populated; anything not recovered from text
    holds its configured default. ``total_cost`` is derived and never read
    from the sheet.

    Attributes:
        customer_name: Customer's name
        customer_phone: Contact number as written
        bike_model: Bike make/model
        work_required: Work requested by the customer (multi-line)
        work_done: Work performed by the mechanic (multi-line)
        labor_cost: Labour charge
        parts_cost: Parts charge
        notes: Free-text notes (multi-line)
        date_in: Date the bike was dropped off, ISO format when readable

    Example:
        >>> draft = ExtractedJobDraft(labor_cost=Decimal("80"), parts_cost=Decimal("210"))
        >>> draft.total_cost
        Decimal('290')
    """
    customer_name: str = "Unknown Customer"
    customer_phone: str = "No Phone"
    bike_model: str = "Unknown Model"
    work_required: str = "No work description"
    work_done: str = ""
    labor_cost: Decimal = Decimal("0.00")
    parts_cost: Decimal = Decimal("0.00")
    notes: str = ""
    date_in: str = ""

    @property
    def total_cost(self) -> Decimal:
        """Labour plus parts."""
        return self.labor_cost + self.parts_cost

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert to dictionary format.

        Costs are rendered as floats so the result is JSON-serializable.
        """
        return {
            'customer_name': self.customer_name,
            'customer_phone': self.customer_phone,
            'bike_model': self.bike_model,
            'work_required': self.work_required,
            'work_done': self.work_done,
            'labor_cost': float(self.labor_cost),
            'parts_cost': float(self.parts_cost),
            'total_cost': float(self.total_cost),
            'notes': self.notes,
            'date_in': self.date_in,
        }

    def __repr__(self) -> str:
        return (
            f"ExtractedJobDraft("
            f"customer={self.customer_name}, "
            f"bike={self.bike_model}, "
            f"total={self.total_cost})"
        )


@dataclass(frozen=True)
class ExtractionOutcome:
    """
    A draft plus its completeness signal.

    Attributes:
        draft: The extracted job draft.
        state: COMPLETE or INCOMPLETE.
        matched_fields: Fields recovered from text, in resolution order.
        missing_required: Required fields that fell back to defaults.
        source: Optional label for where the text came from.
    """
    draft: ExtractedJobDraft
    state: ExtractionState
    matched_fields: Tuple[str, ...] = field(default_factory=tuple)
    missing_required: Tuple[str, ...] = field(default_factory=tuple)
    source: Optional[str] = None

    @property
    def is_complete(self) -> bool:
        return self.state == ExtractionState.COMPLETE

    def raise_if_incomplete(self) -> 'ExtractionOutcome':
        """
        Apply the strict policy: fail when a required field was defaulted.

        Returns:
            self, so calls can be chained.

        Raises:
            IncompleteJobSheetError: If the outcome is INCOMPLETE.
        """
        if not self.is_complete:
            raise IncompleteJobSheetError(list(self.missing_required), self.source)
        return self

    def to_dict(self) -> Dict[str, Any]:
        result = self.draft.to_dict()
        result.update({
            'state': self.state.value,
            'complete': self.is_complete,
            'matched_fields': list(self.matched_fields),
            'missing_required': list(self.missing_required),
            'source': self.source,
        })
        return result

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent)
