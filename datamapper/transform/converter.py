"""Best-effort value coercion between common data types."""
import math
import re
from datetime import date, datetime, timezone
from typing import Any, List, Optional

from dateutil import parser as date_parser

DATA_TYPES = ("string", "number", "boolean", "date", "array", "object")

# Leading numeric prefix, the way parseFloat reads it
NUMBER_PREFIX = re.compile(
    r"^\s*([+-]?(?:Infinity|\d+\.?\d*(?:[eE][+-]?\d+)?|\.\d+(?:[eE][+-]?\d+)?))"
)


def to_iso_string(value: datetime) -> str:
    """ISO 8601 in UTC with millisecond precision: 2023-01-15T00:00:00.000Z"""
    utc = value.astimezone(timezone.utc)
    return utc.strftime("%Y-%m-%dT%H:%M:%S.") + f"{utc.microsecond // 1000:03d}Z"


def stringify(value: Any) -> str:
    """Stringify the way serialized JSON data reads: true/false, 42 not 42.0."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, datetime):
        return to_iso_string(value)
    if isinstance(value, list):
        return ",".join(stringify(item) for item in value)
    return str(value)


def _is_empty(value: Any) -> bool:
    return value is None or (isinstance(value, (str, list, dict)) and len(value) == 0)


class ValueConverter:
    """Conversions never raise; they return None when a value cannot be coerced."""

    @staticmethod
    def to_boolean(value: Any) -> Optional[bool]:
        """
        Convert to bool.

        Examples:
            "true" -> True, "false" -> False, 1 -> True, 0 -> False, False -> None, None -> None
        """
        if _is_empty(value):
            return None

        if isinstance(value, bool):
            return value or None

        if isinstance(value, str):
            return value.lower() == "true"

        if isinstance(value, (int, float)):
            return value != 0 and not math.isnan(value)

        return bool(value)

    @staticmethod
    def to_number(value: Any) -> Optional[float]:
        """
        Convert to a number. ``$`` and ``,`` are stripped from strings first.

        Examples:
            "123" -> 123, "$1,234.56" -> 1234.56, "abc" -> None
        """
        if _is_empty(value):
            return None

        if isinstance(value, bool):
            return 1 if value else None

        if isinstance(value, (int, float)):
            return None if math.isnan(value) else value

        if isinstance(value, str):
            cleaned = value.replace("$", "").replace(",", "")
            match = NUMBER_PREFIX.match(cleaned)
            if not match:
                return None
            text = match.group(1)
            if "Infinity" in text:
                return -math.inf if text.startswith("-") else math.inf
            if any(c in text for c in ".eE"):
                return float(text)
            return int(text)

        return None

    @staticmethod
    def to_date(value: Any) -> Optional[datetime]:
        """
        Convert to an aware datetime. Naive values are taken as UTC and numbers
        as epoch milliseconds.
        """
        if _is_empty(value) or isinstance(value, bool):
            return None

        if isinstance(value, datetime):
            return value if value.tzinfo else value.replace(tzinfo=timezone.utc)

        if isinstance(value, date):
            return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)

        if isinstance(value, (int, float)):
            try:
                return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
            except (OverflowError, OSError, ValueError):
                return None

        if isinstance(value, str):
            try:
                parsed = date_parser.isoparse(value.strip())
            except (ValueError, OverflowError):
                try:
                    parsed = date_parser.parse(value)
                except (ValueError, OverflowError):
                    return None
            return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)

        return None

    @staticmethod
    def to_date_string(value: Any) -> Optional[str]:
        """Convert to an ISO 8601 string, e.g. '2023-01-15T00:00:00.000Z'."""
        parsed = ValueConverter.to_date(value)
        return to_iso_string(parsed) if parsed else None

    @staticmethod
    def to_string(value: Any) -> str:
        if _is_empty(value) or value is False or value == 0:
            return ""
        return stringify(value)

    @staticmethod
    def to_array(value: Any) -> List[Any]:
        if isinstance(value, list):
            return value
        return [value] if value else []

    @staticmethod
    def convert(value: Any, data_type: str) -> Any:
        """
        Convert value to the given data type.

        Example:
            >>> ValueConverter.convert("123", "number")
            123
        """
        if data_type == "boolean":
            return ValueConverter.to_boolean(value)
        if data_type == "number":
            return ValueConverter.to_number(value)
        if data_type == "date":
            return ValueConverter.to_date(value)
        if data_type == "string":
            return ValueConverter.to_string(value)
        if data_type == "array":
            return ValueConverter.to_array(value)
        if data_type == "object":
            return value if isinstance(value, (dict, list)) else None
        return value
