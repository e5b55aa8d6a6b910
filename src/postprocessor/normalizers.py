"""
Data Normalizers Module.

This module provides normalization for values captured from job sheets:
    - Cost figures (labour, parts)
    - "Date In" dates

Both normalizers are total: they never raise on bad input.

Author: Workshop Tools Team
"""

import re
from datetime import datetime
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Optional, List

from dateutil import parser as date_parser

from config import get_config
from src.utils.logger import get_logger

logger = get_logger(__name__)

ZERO = Decimal("0.00")
CENTS = Decimal("0.01")


class CostNormalizer:
    """
    Normalizes captured cost text to a non-negative monetary value.

    Currency symbols and codes are stripped, thousand separators and
    European decimal commas are handled, and the first number in the text
    is parsed as a Decimal rounded to cents. Anything that cannot be read
    as a non-negative number becomes zero.

    Example:
        >>> normalizer = CostNormalizer()
        >>> normalizer.normalize("$80")
        Decimal('80.00')
        >>> normalizer.normalize("free")
        Decimal('0.00')
    """

    CURRENCY_SYMBOLS = ['$', '€', '£', '¥', '₹']
    CURRENCY_CODES = ['AUD', 'USD', 'NZD', 'EUR', 'GBP', 'CAD']

    NUMBER_PATTERN = re.compile(r'(-?)(\d[\d.,]*)')

    def __init__(self, currencies: Optional[List[str]] = None) -> None:
        """
        Initialize the cost normalizer.

        Args:
            currencies: Symbols and codes to strip. If None, uses
                       configuration, falling back to the built-in lists.
        """
        if currencies is None:
            currencies = get_config(
                "postprocessing.amount.currencies",
                self.CURRENCY_SYMBOLS + self.CURRENCY_CODES
            )

        # Longest first so "AU$" style tokens go before "$"
        self.currencies = sorted(set(currencies), key=len, reverse=True)

        logger.debug("CostNormalizer initialized")

    def normalize(self, amount_str: Optional[str]) -> Decimal:
        """
        Normalize a cost string to a Decimal.

        Args:
            amount_str: Captured cost text (e.g., "$80", "80.00", "1.234,50"),
                       or None when no pattern matched.

        Returns:
            Non-negative Decimal with two decimal places; zero on failure.
        """
        if not amount_str:
            return ZERO

        cleaned = self._clean_amount_string(amount_str)

        match = self.NUMBER_PATTERN.search(cleaned)
        if match is None:
            logger.debug(f"No number in cost text: '{amount_str}'")
            return ZERO

        sign, number = match.groups()
        if sign:
            logger.debug(f"Negative cost normalized to zero: '{amount_str}'")
            return ZERO

        number = self._handle_european_format(number.rstrip('.,'))
        number = number.replace(',', '')

        try:
            value = Decimal(number)
        except InvalidOperation:
            logger.debug(f"Could not parse cost: '{amount_str}'")
            return ZERO

        if not value.is_finite() or value < 0:
            return ZERO

        try:
            return value.quantize(CENTS, rounding=ROUND_HALF_UP)
        except InvalidOperation:
            # More digits than the decimal context can hold at cent precision
            logger.debug(f"Cost out of range: '{amount_str}'")
            return ZERO

    def _clean_amount_string(self, amount_str: str) -> str:
        """Collapse whitespace and drop currency symbols and codes."""
        amount_str = ' '.join(amount_str.split())

        for currency in self.currencies:
            if currency.isalpha():
                amount_str = re.sub(
                    rf'\b{re.escape(currency)}\b', '', amount_str, flags=re.IGNORECASE
                )
            else:
                amount_str = amount_str.replace(currency, '')

        return amount_str.strip()

    def _handle_european_format(self, amount_str: str) -> str:
        """
        Convert European format (comma decimal) to dot decimal.

        Args:
            amount_str: Amount string.

        Returns:
            Amount string with '.' as the decimal separator.
        """
        if amount_str.count(',') == 1:
            comma_pos = amount_str.rfind(',')
            dot_pos = amount_str.rfind('.')

            if comma_pos > dot_pos:
                after_comma = amount_str[comma_pos + 1:]
                if len(after_comma) <= 2 and after_comma.isdigit():
                    amount_str = amount_str.replace('.', '')
                    amount_str = amount_str.replace(',', '.')

        return amount_str


class DateNormalizer:
    """
    Normalizes date strings to a standard format.

    Job sheets are Australian, so ambiguous numeric dates are read
    day-first unless configured otherwise.

    Example:
        >>> normalizer = DateNormalizer()
        >>> normalizer.normalize("14/6/2023")
        '2023-06-14'
        >>> normalizer.normalize("when ready") is None
        True
    """

    DATE_PATTERNS = [
        # DD/MM/YYYY or MM/DD/YYYY
        r'\b\d{1,2}[/\-.]\d{1,2}[/\-.]\d{2,4}\b',
        # YYYY-MM-DD
        r'\b\d{4}[/\-.]\d{1,2}[/\-.]\d{1,2}\b',
        # DD Month YYYY
        r'\b\d{1,2}(?:st|nd|rd|th)?\s+(?:Jan|Feb|Mar|Apr|May|Jun|Jul|Aug|Sep|Oct|Nov|Dec)[a-z]*\.?,?\s+\d{2,4}\b',
        # Month DD, YYYY
        r'\b(?:Jan|Feb|Mar|Apr|May|Jun|Jul|Aug|Sep|Oct|Nov|Dec)[a-z]*\.?\s+\d{1,2}(?:st|nd|rd|th)?,?\s+\d{2,4}\b',
    ]

    INPUT_FORMATS = [
        "%d/%m/%Y",
        "%d/%m/%y",
        "%d-%m-%Y",
        "%d.%m.%Y",
        "%Y-%m-%d",
    ]

    def __init__(self, dayfirst: Optional[bool] = None) -> None:
        """Initialize the date normalizer with configuration."""
        self.output_format = get_config("postprocessing.date.output_format", "%Y-%m-%d")
        self.dayfirst = (
            dayfirst if dayfirst is not None
            else get_config("postprocessing.date.dayfirst", True)
        )

        logger.debug(f"DateNormalizer initialized (output: {self.output_format})")

    def normalize(self, date_str: Optional[str]) -> Optional[str]:
        """
        Normalize the first date found in a string.

        Args:
            date_str: Captured date text.

        Returns:
            Date in the configured output format, or None if no date
            could be read.
        """
        if not date_str:
            return None

        candidate = self._find_date(date_str)
        if candidate is None:
            logger.debug(f"No date in text: '{date_str}'")
            return None

        parsed = self._try_explicit_formats(candidate) if self.dayfirst else None
        if parsed is None:
            parsed = self._try_dateutil_parser(candidate)

        if parsed is None:
            logger.debug(f"Could not parse date: '{candidate}'")
            return None

        return parsed.strftime(self.output_format)

    def _find_date(self, text: str) -> Optional[str]:
        """Return the first date-shaped substring, ordinal suffixes removed."""
        for pattern in self.DATE_PATTERNS:
            match = re.search(pattern, text, re.IGNORECASE)
            if match:
                return re.sub(
                    r'(\d+)(st|nd|rd|th)', r'\1', match.group(0), flags=re.IGNORECASE
                )
        return None

    def _try_explicit_formats(self, date_str: str) -> Optional[datetime]:
        for fmt in self.INPUT_FORMATS:
            try:
                return datetime.strptime(date_str, fmt)
            except ValueError:
                continue
        return None

    def _try_dateutil_parser(self, date_str: str) -> Optional[datetime]:
        try:
            return date_parser.parse(date_str, dayfirst=self.dayfirst)
        except (ValueError, OverflowError):
            return None
