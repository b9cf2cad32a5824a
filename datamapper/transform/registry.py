"""Modifier registry: name -> function lookup for modifier chains."""
import logging
from typing import Any, Callable, Dict, List, Optional, Tuple

from datamapper.diagnostics import Diagnostics, MODIFIER_ERROR, UNKNOWN_MODIFIER
from datamapper.schema.models import ParameterizedModifier
from datamapper.transform import paths
from datamapper.transform.converter import ValueConverter
from datamapper.transform.modifiers import (
    ArrayModifiers,
    DateModifiers,
    NumberModifiers,
    StringModifiers,
)

logger = logging.getLogger(__name__)

# Positional parameter order for parameterized modifiers
PARAMETER_ORDER: Dict[str, Tuple[str, ...]] = {
    "padLeft": ("length", "padChar"),
    "padRight": ("length", "padChar"),
    "round": ("decimals",),
    "formatCurrency": ("currency", "locale"),
    "pow": ("exponent",),
    "log": ("base",),
    "percentage": ("total", "decimals"),
    "formatDate": ("dateFormat",),
    "addDays": ("days",),
    "subtractDays": ("days",),
    "join": ("separator",),
    "slice": ("start", "end"),
}

# Not part of the registry; only reachable through parameterized modifiers
FALLBACK_MODIFIERS: Dict[str, Callable] = {
    "extractHour": DateModifiers.extract_hour,
    "extractMinute": DateModifiers.extract_minute,
    "length": ArrayModifiers.length,
    "arrayReverse": ArrayModifiers.reverse,
    "padRight": StringModifiers.pad_right,
}


class ModifierRegistry:
    """Registry of available modifiers."""

    def __init__(self, default_locale: str = "en-US"):
        """Initialize registry."""
        # Parameter values used when a parameterized modifier leaves them unset
        self.parameter_defaults: Dict[str, Dict[str, Any]] = {
            "formatCurrency": {"locale": default_locale},
        }
        self.modifiers: Dict[str, Callable] = {
            # String
            "uppercase": StringModifiers.uppercase,
            "lowercase": StringModifiers.lowercase,
            "capitalize": StringModifiers.capitalize,
            "trim": StringModifiers.trim,
            "reverse": StringModifiers.reverse,
            "slugify": StringModifiers.slugify,
            "padLeft": StringModifiers.pad_left,
            # Number
            "round": NumberModifiers.round,
            "round2": NumberModifiers.round2,
            "floor": NumberModifiers.floor,
            "ceil": NumberModifiers.ceil,
            "abs": NumberModifiers.abs,
            "formatCurrency": NumberModifiers.format_currency,
            "pow": NumberModifiers.pow,
            "sqrt": NumberModifiers.sqrt,
            "log": NumberModifiers.log,
            "percentage": NumberModifiers.percentage,
            # Date
            "formatDate": DateModifiers.format_date,
            "dateOnly": DateModifiers.date_only,
            "timeOnly": DateModifiers.time_only,
            "toTimestamp": DateModifiers.to_timestamp,
            "addDays": DateModifiers.add_days,
            "subtractDays": DateModifiers.subtract_days,
            "extractYear": DateModifiers.extract_year,
            "extractMonth": DateModifiers.extract_month,
            "extractDay": DateModifiers.extract_day,
            # Array
            "first": ArrayModifiers.first,
            "last": ArrayModifiers.last,
            "unique": ArrayModifiers.unique,
            "size": ArrayModifiers.size,
            "arraySize": ArrayModifiers.size,
            "reverseArray": ArrayModifiers.reverse,
            "join": ArrayModifiers.join,
            "slice": ArrayModifiers.slice,
            # Paths
            "getNestedValue": paths.get_value,
            "getArrayValues": paths.get_array_item_values,
            "hasPath": paths.has_path,
            # Converters
            "toBoolean": ValueConverter.to_boolean,
            "toNumber": ValueConverter.to_number,
            "toDate": ValueConverter.to_date,
            "toDateString": ValueConverter.to_date_string,
            "toString": ValueConverter.to_string,
        }

    def get(self, name: str) -> Optional[Callable]:
        """Get modifier by name, or None if unknown."""
        return self.modifiers.get(name)

    def names(self) -> List[str]:
        return list(self.modifiers)

    def apply_all(
        self,
        value: Any,
        names: List[str],
        diagnostics: Optional[Diagnostics] = None,
    ) -> Any:
        """Apply modifiers in order. Unknown names leave the value unchanged."""
        diagnostics = diagnostics or Diagnostics()
        result = value

        for name in names:
            modifier = self.get(name)
            if modifier is None:
                diagnostics.warn(UNKNOWN_MODIFIER, f"Unknown modifier: {name}")
                continue
            result = modifier(result)

        return result

    def apply_parameterized(
        self,
        value: Any,
        modifiers: List[ParameterizedModifier],
        diagnostics: Optional[Diagnostics] = None,
    ) -> Any:
        """
        Apply modifiers with runtime parameters.

        Parameters are passed positionally in PARAMETER_ORDER for the modifier
        type. A modifier that fails leaves the value as it was.
        """
        diagnostics = diagnostics or Diagnostics()
        result = value

        for modifier in modifiers:
            function = self.get(modifier.type) or FALLBACK_MODIFIERS.get(modifier.type)
            if function is None:
                diagnostics.warn(UNKNOWN_MODIFIER, f"Unknown modifier: {modifier.type}")
                continue

            params = dict(self.parameter_defaults.get(modifier.type, {}))
            params.update({k: v for k, v in modifier.params.items() if v is not None})
            args = [params.get(name) for name in PARAMETER_ORDER.get(modifier.type, ())]
            try:
                result = function(result, *args)
            except (TypeError, ValueError, OverflowError) as e:
                diagnostics.warn(
                    MODIFIER_ERROR,
                    f"Error applying modifier '{modifier.type}': {e}",
                )

        return result
