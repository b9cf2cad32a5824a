"""
Post-processing modifiers for strings, numbers, dates and arrays.

Every modifier is a pure function that returns its input unchanged when the
input has the wrong type. Optional parameters also accept None, which means
"use the default".
"""

import logging
import math
import re
from datetime import date, datetime, timedelta
from typing import Any, List, Optional

from babel.core import UnknownLocaleError
from babel.numbers import UnknownCurrencyError, format_currency

from .converter import ValueConverter, stringify, to_iso_string

logger = logging.getLogger(__name__)

SLUG_STRIP = re.compile(r"[^\s\w-]", re.ASCII)
SLUG_SEPARATORS = re.compile(r"[\s_-]+")


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _pad(value: str, length: Any, char: Any) -> str:
    """Fill to length with char repeated and truncated, like padStart/padEnd."""
    char = " " if char is None else str(char)
    if not char or length is None:
        return ""
    missing = int(length) - len(value)
    if missing <= 0:
        return ""
    return (char * (missing // len(char) + 1))[:missing]


class StringModifiers:
    """String transformation utilities."""

    @staticmethod
    def uppercase(value: Any) -> Any:
        return value.upper() if isinstance(value, str) else value

    @staticmethod
    def lowercase(value: Any) -> Any:
        return value.lower() if isinstance(value, str) else value

    @staticmethod
    def capitalize(value: Any) -> Any:
        """First letter upper case, the rest lower case."""
        if not isinstance(value, str) or not value:
            return value
        return value[0].upper() + value[1:].lower()

    @staticmethod
    def trim(value: Any) -> Any:
        return value.strip() if isinstance(value, str) else value

    @staticmethod
    def reverse(value: Any) -> Any:
        return value[::-1] if isinstance(value, str) else value

    @staticmethod
    def slugify(value: Any) -> Any:
        """
        URL-friendly slug.

        Examples:
            'Hello World!' -> 'hello-world'
            'Test___Value' -> 'test-value'
        """
        if not isinstance(value, str):
            return value
        slug = SLUG_STRIP.sub("", value.lower().strip())
        slug = SLUG_SEPARATORS.sub("-", slug)
        return slug.strip("-")

    @staticmethod
    def pad_left(value: Any, length: Optional[int] = None, char: Optional[str] = " ") -> Any:
        """pad_left('5', 3, '0') -> '005'"""
        if not isinstance(value, str):
            return value
        return _pad(value, length, char) + value

    @staticmethod
    def pad_right(value: Any, length: Optional[int] = 10, char: Optional[str] = " ") -> Any:
        if not isinstance(value, str):
            return value
        return value + _pad(value, 10 if length is None else length, char)


class NumberModifiers:
    """Number transformation utilities."""

    @staticmethod
    def round(value: Any, decimals: Optional[int] = 0) -> Any:
        """Half-up rounding: round(2.5) -> 3, round(3.456, 2) -> 3.46."""
        if not _is_number(value) or not math.isfinite(value):
            return value
        decimals = int(decimals or 0)
        multiplier = 10 ** decimals
        rounded = math.floor(value * multiplier + 0.5)
        if decimals <= 0:
            return int(rounded / multiplier) if decimals < 0 else rounded
        return rounded / multiplier

    @staticmethod
    def round2(value: Any) -> Any:
        return NumberModifiers.round(value, 2)

    @staticmethod
    def floor(value: Any) -> Any:
        if not _is_number(value) or not math.isfinite(value):
            return value
        return math.floor(value)

    @staticmethod
    def ceil(value: Any) -> Any:
        if not _is_number(value) or not math.isfinite(value):
            return value
        return math.ceil(value)

    @staticmethod
    def abs(value: Any) -> Any:
        return abs(value) if _is_number(value) else value

    @staticmethod
    def format_currency(
        value: Any,
        currency: Optional[str] = "$",
        locale: Optional[str] = "en-US",
    ) -> Any:
        """
        Format a number as currency.

        Examples:
            format_currency(1234.56) -> '$1234.56'
            format_currency(1234.56, 'EUR', 'de-DE') -> '1.234,56 €'
        """
        if not _is_number(value):
            return value

        currency = currency or "$"
        locale = locale or "en-US"

        if currency in ("$", "USD"):
            return f"${value:.2f}"

        try:
            return format_currency(value, currency, locale=locale.replace("-", "_"))
        except (UnknownLocaleError, UnknownCurrencyError, ValueError, TypeError) as e:
            logger.debug(f"Falling back to plain currency format for {currency}/{locale}: {e}")
            return f"{currency}{value:.2f}"

    @staticmethod
    def pow(value: Any, exponent: Optional[float] = 2) -> Any:
        if not _is_number(value):
            return value
        try:
            return math.pow(value, 2 if exponent is None else exponent)
        except ValueError:
            return math.nan
        except OverflowError:
            return math.inf

    @staticmethod
    def sqrt(value: Any) -> Any:
        if not _is_number(value):
            return value
        return math.sqrt(value) if value >= 0 else math.nan

    @staticmethod
    def log(value: Any, base: Optional[float] = 10) -> Any:
        """Logarithm, base 10 unless another base is given."""
        if not _is_number(value):
            return value
        if value == 0:
            return -math.inf
        if value < 0:
            return math.nan
        if base is None or base == 10:
            return math.log10(value)
        return math.log(value, base)

    @staticmethod
    def percentage(
        value: Any,
        total: Optional[float] = None,
        decimals: Optional[int] = 2,
    ) -> Any:
        """
        Examples:
            percentage(0.5) -> 50
            percentage(25, 100) -> 25
            percentage(1 / 3) -> 33.33
        """
        if not _is_number(value):
            return value
        if total and _is_number(total):
            value = value / total * 100
        else:
            value = value * 100
        return NumberModifiers.round(value, 2 if decimals is None else decimals)


def _as_date(value: Any) -> Optional[datetime]:
    if isinstance(value, (str, date)):
        return ValueConverter.to_date(value)
    return None


class DateModifiers:
    """Date transformation utilities. Unparsable values pass through."""

    @staticmethod
    def format_date(value: Any, date_format: Optional[str] = None) -> Any:
        """Locale date string (M/D/YYYY) or a strftime pattern when given."""
        parsed = _as_date(value)
        if parsed is None:
            return value
        if date_format:
            return parsed.strftime(date_format)
        return f"{parsed.month}/{parsed.day}/{parsed.year}"

    @staticmethod
    def date_only(value: Any) -> Any:
        """'2023-01-15T10:30:00Z' -> '2023-01-15'"""
        parsed = _as_date(value)
        return value if parsed is None else to_iso_string(parsed).split("T")[0]

    @staticmethod
    def time_only(value: Any) -> Any:
        """'2023-01-15T10:30:00Z' -> '10:30:00.000Z'"""
        parsed = _as_date(value)
        return value if parsed is None else to_iso_string(parsed).split("T")[1]

    @staticmethod
    def to_timestamp(value: Any) -> Any:
        """Unix timestamp in whole seconds."""
        parsed = _as_date(value)
        return value if parsed is None else math.floor(parsed.timestamp())

    @staticmethod
    def add_days(value: Any, days: Optional[float] = 1) -> Any:
        parsed = _as_date(value)
        if parsed is None:
            return value
        return parsed + timedelta(days=1 if days is None else days)

    @staticmethod
    def subtract_days(value: Any, days: Optional[float] = 1) -> Any:
        return DateModifiers.add_days(value, -(1 if days is None else days))

    @staticmethod
    def extract_year(value: Any) -> Any:
        parsed = _as_date(value)
        return value if parsed is None else parsed.year

    @staticmethod
    def extract_month(value: Any) -> Any:
        """Month number, 1-12."""
        parsed = _as_date(value)
        return value if parsed is None else parsed.month

    @staticmethod
    def extract_day(value: Any) -> Any:
        parsed = _as_date(value)
        return value if parsed is None else parsed.day

    @staticmethod
    def extract_hour(value: Any) -> Any:
        parsed = _as_date(value)
        return value if parsed is None else parsed.hour

    @staticmethod
    def extract_minute(value: Any) -> Any:
        parsed = _as_date(value)
        return value if parsed is None else parsed.minute


class ArrayModifiers:
    """Array transformation utilities."""

    @staticmethod
    def first(value: Any) -> Any:
        return value[0] if isinstance(value, list) and value else None

    @staticmethod
    def last(value: Any) -> Any:
        return value[-1] if isinstance(value, list) and value else None

    @staticmethod
    def unique(value: Any) -> Any:
        """De-duplicate, keeping first occurrences in order."""
        if not isinstance(value, list):
            return value
        seen: List[Any] = []
        for item in value:
            if item not in seen:
                seen.append(item)
        return seen

    @staticmethod
    def size(value: Any) -> int:
        return len(value) if isinstance(value, list) else 0

    @staticmethod
    def reverse(value: Any) -> Any:
        return list(reversed(value)) if isinstance(value, list) else value

    @staticmethod
    def join(value: Any, separator: Optional[str] = ",") -> str:
        if not isinstance(value, list):
            return ""
        separator = "," if separator is None else str(separator)
        return separator.join(stringify(item) for item in value)

    @staticmethod
    def slice(value: Any, start: Optional[int] = 0, end: Optional[int] = None) -> Any:
        if not isinstance(value, list):
            return value
        return value[int(start or 0):None if end is None else int(end)]

    @staticmethod
    def length(value: Any) -> Any:
        """Length of a list or string; anything else passes through."""
        return len(value) if isinstance(value, (list, str)) else value
