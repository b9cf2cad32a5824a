"""
Mapping rule applier - runs one rule against one source record

Pipeline:
1. Resolve each source value (direct key first, then path)
2. Pre-transform validation of the first source value
3. Transform and modifiers
4. Post-transform validation of the transformed value

Any error is turned into a failed MappingResult.
"""

import logging
from typing import Any, Optional

from datamapper.diagnostics import Diagnostics
from datamapper.schema.models import MappingResult, MappingRule, SourceField
from datamapper.transform.executor import TransformExecutor
from datamapper.transform.paths import ARRAY_MARKER, get_array_item_values, get_value
from datamapper.validator.data_validator import DataValidator

logger = logging.getLogger(__name__)


def resolve_source(source: SourceField, source_data: Any) -> Any:
    """
    Resolve a source field against a record

    A top-level key equal to the whole address wins over dotted traversal,
    so a record like ``{"a.b": 1}`` resolves ``a.b`` to 1.
    """
    if source_data is None:
        return None

    address = source.address

    if ARRAY_MARKER in address:
        return get_array_item_values(source_data, address)

    if isinstance(source_data, dict) and address in source_data:
        return source_data[address]

    return get_value(source_data, address)


class MappingRuleApplier:
    """Applies a single mapping rule."""

    def __init__(
        self,
        executor: Optional[TransformExecutor] = None,
        validator: Optional[DataValidator] = None,
    ):
        self.executor = executor or TransformExecutor()
        self.validator = validator or DataValidator()

    async def apply_mapping(self, rule: MappingRule, source_data: Any) -> MappingResult:
        """
        Apply rule to source_data.

        Args:
            rule: Mapping rule
            source_data: Source record

        Returns:
            MappingResult; success is False and value None when anything failed
        """
        diagnostics = Diagnostics(rule_id=rule.id)

        try:
            value = await self._run(rule, source_data, diagnostics)
        except Exception as e:
            message = str(e) or type(e).__name__
            logger.debug(f"Rule {rule.id} failed: {message}")
            return MappingResult(
                destination_key=rule.destination.key,
                value=None,
                success=False,
                error=message,
                warnings=diagnostics.messages(),
            )

        return MappingResult(
            destination_key=rule.destination.key,
            value=value,
            warnings=diagnostics.messages(),
        )

    async def _run(self, rule: MappingRule, source_data: Any, diagnostics: Diagnostics) -> Any:
        transform = rule.transform
        sources = rule.sources
        values = [resolve_source(source, source_data) for source in sources]

        rules = transform.validation_rules
        timing = transform.validation_timing

        if rules and timing.runs_before:
            errors = self.validator.validate(values[0] if values else None, rules, diagnostics)
            if errors:
                raise ValueError(f"Pre-transform validation failed: {', '.join(errors)}")

        value = await self.executor.transform(transform, values, sources, diagnostics)

        if rules and timing.runs_after:
            errors = self.validator.validate(value, rules, diagnostics)
            if errors:
                raise ValueError(f"Post-transform validation failed: {', '.join(errors)}")

        return value
