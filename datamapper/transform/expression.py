"""
Expression bridge - evaluates JSONata expressions for the ``expression`` transform

Provides:
- ExpressionEvaluator: the capability the engine needs from an expression language
- JsonataEvaluator: default evaluator backed by jsonata-python
- ExpressionBridge: builds the data context and registers every modifier,
  path function and converter as a callable ``$function``
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, List, Optional

import jsonata

from datamapper.schema.models import SourceField
from datamapper.transform.registry import ModifierRegistry

logger = logging.getLogger(__name__)

CURRENT_SOURCE = "$source"
ALL_SOURCES = "$all"


class ExpressionEvaluator(ABC):
    """Compile, extend and evaluate expressions of some expression language."""

    @abstractmethod
    def compile(self, expression: str) -> Any:
        """Compile an expression string into a program."""

    @abstractmethod
    def register_function(self, program: Any, name: str, function: Callable) -> None:
        """Make function callable as ``$name`` inside program."""

    @abstractmethod
    def bind_variable(self, program: Any, name: str, value: Any) -> None:
        """Make value readable as the variable ``name`` (``$``-prefixed) inside program."""

    @abstractmethod
    async def evaluate(self, program: Any, context: Dict[str, Any]) -> Any:
        """Evaluate program against a data context."""


class JsonataEvaluator(ExpressionEvaluator):
    """JSONata via jsonata-python."""

    def compile(self, expression: str) -> Any:
        return jsonata.Jsonata(expression)

    def register_function(self, program: Any, name: str, function: Callable) -> None:
        program.register_lambda(name, function)

    def bind_variable(self, program: Any, name: str, value: Any) -> None:
        program.assign(name.lstrip("$"), value)

    async def evaluate(self, program: Any, context: Dict[str, Any]) -> Any:
        # jsonata-python evaluates synchronously
        return await asyncio.to_thread(program.evaluate, context)


class ExpressionBridge:
    """
    Runs expression transforms

    Usage:
    ```python
    bridge = ExpressionBridge()
    value = await bridge.evaluate(
        "$uppercase(firstName) & ' ' & lastName",
        sources=[SourceField("firstName"), SourceField("lastName")],
        values=["john", "doe"],
    )
    # Returns: "JOHN doe"
    ```
    """

    def __init__(
        self,
        evaluator: Optional[ExpressionEvaluator] = None,
        registry: Optional[ModifierRegistry] = None,
    ):
        self.evaluator = evaluator or JsonataEvaluator()
        self.registry = registry or ModifierRegistry()

    def functions(self) -> Dict[str, Callable]:
        """Functions exposed to expressions, keyed by name."""
        return dict(self.registry.modifiers)

    @staticmethod
    def build_context(sources: List[SourceField], values: List[Any]) -> Dict[str, Any]:
        """
        Build the data context for one evaluation

        Each source value sits under its source key. A single source is also
        exposed as ``$source``; ``$all`` holds every keyed source value.
        """
        context: Dict[str, Any] = {}

        for source, value in zip(sources, values):
            context[source.key] = value

        keyed = dict(context)

        if len(sources) == 1:
            context[CURRENT_SOURCE] = values[0] if values else None

        context[ALL_SOURCES] = keyed
        return context

    async def evaluate(
        self,
        expression: str,
        sources: List[SourceField],
        values: List[Any],
    ) -> Any:
        """Compile expression, register functions and evaluate it."""
        program = self.evaluator.compile(expression)

        for name, function in self.functions().items():
            self.evaluator.register_function(program, name, function)

        context = self.build_context(sources, values)
        for name in (CURRENT_SOURCE, ALL_SOURCES):
            if name in context:
                self.evaluator.bind_variable(program, name, context[name])

        logger.debug(f"Evaluating expression {expression!r} with keys {sorted(context)}")
        return await self.evaluator.evaluate(program, context)
