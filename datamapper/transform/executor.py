"""
Transform executor - runs one transform kind plus its modifier chain

Kinds:
- direct: first source value
- convert: coerce to options.data_type (element-wise for lists)
- combine: join non-empty values with options.combine_with
- split: split the first value on options.split_on
- expression: evaluate options.expression through the expression bridge
- default: substitute options.default_value for null/empty input
- conditional: advanced condition tree, switch cases or flat comparison
- lookup: look the first value up in options.lookup_table
"""

import asyncio
import logging
import math
from typing import Any, Callable, Dict, List, Optional

from datamapper.diagnostics import Diagnostics, UNKNOWN_TRANSFORM
from datamapper.schema.models import (
    ConditionalLogic,
    SourceField,
    SwitchCase,
    TransformConfig,
    TransformOptions,
    TransformType,
)
from datamapper.transform.converter import ValueConverter, stringify
from datamapper.transform.expression import ExpressionBridge
from datamapper.transform.registry import ModifierRegistry

logger = logging.getLogger(__name__)


def _js_number(value: Any) -> float:
    """Numeric coercion used by loose comparisons. NaN when not numeric."""
    if isinstance(value, bool):
        return float(value)
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return 0.0
        try:
            return float(text)
        except ValueError:
            return math.nan
    return math.nan


def loose_equals(left: Any, right: Any) -> bool:
    """
    Loose equality between JSON-shaped values

    None only equals None; numbers compare with numeric strings and booleans
    by value ("42" equals 42, True equals 1); everything else compares with ==.
    """
    if left is None or right is None:
        return left is None and right is None

    if isinstance(left, str) and isinstance(right, str):
        return left == right

    scalar = (str, int, float, bool)
    if isinstance(left, scalar) and isinstance(right, scalar):
        if isinstance(left, bool) and isinstance(right, bool):
            return left == right
        return _js_number(left) == _js_number(right)

    return left == right


def _ordered(left: Any, right: Any, compare: Callable[[Any, Any], bool]) -> bool:
    if left is None or right is None:
        return False
    if isinstance(left, str) and isinstance(right, str):
        return compare(left, right)
    a, b = _js_number(left), _js_number(right)
    if math.isnan(a) or math.isnan(b):
        return False
    return compare(a, b)


def _is_blank(value: Any) -> bool:
    return value is None or value == ""


def evaluate_condition(value: Any, operator: Optional[str], compare_value: Any) -> bool:
    """Evaluate one comparison. Unknown operators are false."""
    if operator == "equals":
        return loose_equals(value, compare_value)
    if operator == "notEquals":
        return not loose_equals(value, compare_value)
    if operator == "greaterThan":
        return _ordered(value, compare_value, lambda a, b: a > b)
    if operator == "lessThan":
        return _ordered(value, compare_value, lambda a, b: a < b)
    if operator == "contains":
        return isinstance(value, str) and isinstance(compare_value, str) and compare_value in value
    if operator == "isEmpty":
        return _is_blank(value)
    if operator == "isNotEmpty":
        return not _is_blank(value)
    return False


def evaluate_logic(value: Any, logic: ConditionalLogic) -> bool:
    """Evaluate a leaf comparison or an AND/OR group of nested conditions."""
    if logic.operator:
        return evaluate_condition(value, logic.operator, logic.value)

    if logic.logical_operator and logic.conditions:
        results = [evaluate_logic(value, condition) for condition in logic.conditions]
        if logic.logical_operator == "AND":
            return all(results)
        if logic.logical_operator == "OR":
            return any(results)

    return False


def evaluate_switch(value: Any, cases: List[SwitchCase], default: Any) -> Any:
    for case in cases:
        if loose_equals(value, case.condition):
            return case.value
    return default


class TransformExecutor:
    """
    Applies a TransformConfig to resolved source values

    Usage:
    ```python
    executor = TransformExecutor()
    config = TransformConfig(type="combine", modifiers=["uppercase"])
    value = await executor.transform(config, ["John", None, "Doe"])
    # Returns: "JOHN DOE"
    ```
    """

    def __init__(
        self,
        registry: Optional[ModifierRegistry] = None,
        bridge: Optional[ExpressionBridge] = None,
    ):
        self.registry = registry or ModifierRegistry()
        self.bridge = bridge or ExpressionBridge(registry=self.registry)

        self.transforms: Dict[TransformType, Callable] = {
            TransformType.DIRECT: self._direct,
            TransformType.CONVERT: self._convert,
            TransformType.COMBINE: self._combine,
            TransformType.SPLIT: self._split,
            TransformType.EXPRESSION: self._expression,
            TransformType.DEFAULT: self._default,
            TransformType.CONDITIONAL: self._conditional,
            TransformType.LOOKUP: self._lookup,
        }

    async def transform(
        self,
        config: TransformConfig,
        values: List[Any],
        sources: Optional[List[SourceField]] = None,
        diagnostics: Optional[Diagnostics] = None,
    ) -> Any:
        """
        Run the primary transform, then modifiers, then parameterized modifiers.

        Args:
            config: Transform configuration
            values: Resolved source values, one per source field
            sources: Source fields the values came from (used by expressions)
            diagnostics: Warning channel

        Returns:
            Transformed value
        """
        diagnostics = diagnostics or Diagnostics()
        sources = sources or []

        handler = self.transforms.get(config.type)
        if handler is None:
            diagnostics.warn(UNKNOWN_TRANSFORM, f"Unknown transform type: {config.type}")
            result = values[0] if values else None
        else:
            result = handler(values, config.options, sources)
            if asyncio.iscoroutine(result):
                result = await result

        if config.modifiers:
            result = self.registry.apply_all(result, config.modifiers, diagnostics)

        if config.parameterized_modifiers:
            result = self.registry.apply_parameterized(
                result, config.parameterized_modifiers, diagnostics
            )

        return result

    @staticmethod
    def _first(values: List[Any]) -> Any:
        return values[0] if values else None

    def _direct(self, values, options: TransformOptions, sources) -> Any:
        return self._first(values)

    def _convert(self, values, options: TransformOptions, sources) -> Any:
        data_type = options.data_type or "string"
        value = self._first(values)
        if isinstance(value, list):
            return [ValueConverter.convert(item, data_type) for item in value]
        return ValueConverter.convert(value, data_type)

    def _combine(self, values, options: TransformOptions, sources) -> str:
        separator = options.combine_with or " "
        return separator.join(stringify(v) for v in values if not _is_blank(v))

    def _split(self, values, options: TransformOptions, sources) -> List[str]:
        return stringify(self._first(values)).split(options.split_on or ",")

    async def _expression(self, values, options: TransformOptions, sources) -> Any:
        if not options.expression:
            raise ValueError("Expression is required for expression transform")
        return await self.bridge.evaluate(options.expression, sources, values)

    def _default(self, values, options: TransformOptions, sources) -> Any:
        value = self._first(values)
        apply_on_null = options.apply_on_null is not False
        apply_on_empty = bool(options.apply_on_empty)

        if apply_on_null and value is None:
            return options.default_value
        if apply_on_empty and value == "":
            return options.default_value
        return value

    def _conditional(self, values, options: TransformOptions, sources) -> Any:
        value = self._first(values)

        if options.advanced_condition is not None:
            met = evaluate_logic(value, options.advanced_condition)
        elif options.switch_cases:
            return evaluate_switch(value, options.switch_cases, options.switch_default)
        else:
            operator = options.condition_operator or "equals"
            met = evaluate_condition(value, operator, options.condition_value)

        return options.true_value if met else options.false_value

    def _lookup(self, values, options: TransformOptions, sources) -> Any:
        value = self._first(values)
        table = options.lookup_table or {}
        key = stringify(value) if value is not None else "null"

        if key in table:
            return table[key]
        if options.lookup_default is not None:
            return options.lookup_default
        return value
