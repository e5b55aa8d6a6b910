"""
Custom Exceptions Module.

This module defines all custom exceptions used throughout the job sheet
extraction system. The extraction core itself never raises for partial
information; these exceptions belong to configuration, the OCR and
persistence boundaries, and caller-side completeness policy.

Exception Hierarchy:
    JobSheetExtractionError (base)
    ├── ConfigurationError
    │   └── FieldSpecError
    ├── OCRError
    │   ├── OCREngineNotAvailableError
    │   ├── OCRProcessingError
    │   └── OCRTimeoutError
    ├── IncompleteJobSheetError
    └── OutputError
        └── DatabaseError
"""

from typing import List, Optional


class JobSheetExtractionError(Exception):
    """
    Base exception for all job sheet extraction errors.

    Attributes:
        message: Human-readable error message.
        details: Optional dictionary with additional error details.
    """

    def __init__(self, message: str, details: dict = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        """Return string representation of the error."""
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


# =============================================================================
# CONFIGURATION ERRORS
# =============================================================================

class ConfigurationError(JobSheetExtractionError):
    """Base exception for configuration errors."""
    pass


class FieldSpecError(ConfigurationError):
    """
    Raised when a field spec cannot be built from configuration.

    Example:
        >>> raise FieldSpecError("customer_name", "unbalanced parenthesis")
    """

    def __init__(self, field_name: str, reason: str = None):
        message = f"Invalid field spec: '{field_name}'"
        details = {"field": field_name, "reason": reason}
        super().__init__(message, details)


# =============================================================================
# OCR ERRORS
# =============================================================================

class OCRError(JobSheetExtractionError):
    """Base exception for OCR-related errors."""
    pass


class OCREngineNotAvailableError(OCRError):
    """Raised when the configured OCR engine is not available."""

    def __init__(self, engine_name: str):
        message = f"OCR engine not available: {engine_name}"
        details = {"engine": engine_name}
        super().__init__(message, details)


class OCRProcessingError(OCRError):
    """Raised when OCR processing fails."""

    def __init__(self, source: str, reason: str = None):
        message = f"OCR processing failed for: {source}"
        details = {"source": source, "reason": reason}
        super().__init__(message, details)


class OCRTimeoutError(OCRError):
    """Raised when recognition does not finish within the configured timeout."""

    def __init__(self, source: str, timeout: float):
        message = f"OCR timed out after {timeout}s for: {source}"
        details = {"source": source, "timeout": timeout}
        super().__init__(message, details)


# =============================================================================
# COMPLETENESS POLICY
# =============================================================================

class IncompleteJobSheetError(JobSheetExtractionError):
    """
    Raised by callers that treat a missing required field as a hard failure.

    Attributes:
        missing_fields: Required field names that fell back to defaults.
    """

    def __init__(self, missing_fields: List[str], source: Optional[str] = None):
        self.missing_fields = list(missing_fields)
        message = (
            "Could not read required fields from job sheet: "
            + ", ".join(self.missing_fields)
        )
        details = {"missing_fields": self.missing_fields}
        if source:
            details["source"] = source
        super().__init__(message, details)


# =============================================================================
# OUTPUT ERRORS
# =============================================================================

class OutputError(JobSheetExtractionError):
    """Base exception for output handling errors."""
    pass


class DatabaseError(OutputError):
    """Raised when database operations fail."""

    def __init__(self, operation: str, reason: str = None):
        message = f"Database operation failed: {operation}"
        details = {"operation": operation, "reason": reason}
        super().__init__(message, details)


__all__ = [
    'JobSheetExtractionError',
    'ConfigurationError',
    'FieldSpecError',
    'OCRError',
    'OCREngineNotAvailableError',
    'OCRProcessingError',
    'OCRTimeoutError',
    'IncompleteJobSheetError',
    'OutputError',
    'DatabaseError',
]
