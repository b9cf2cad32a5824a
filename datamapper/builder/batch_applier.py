"""
Batch applier - builds a destination record from a list of mapping rules

Rules run strictly in order, so when two rules write the same destination
path the last one wins. A failing rule never stops the batch; its error
strategy decides what happens:
- fail: "<destination name>: <error>" is added to the error list
- skip: the rule is dropped silently
- default: error_default is written at the destination, if set
"""

import logging
from typing import Any, Dict, Iterable, List, Optional

from datamapper.schema.models import BatchResult, ErrorStrategy, MappingRule
from datamapper.builder.rule_applier import MappingRuleApplier
from datamapper.transform.paths import set_value

logger = logging.getLogger(__name__)


class DataMapper:
    """
    Applies mapping rules to source records

    Usage:
    ```python
    mapper = DataMapper()
    batch = await mapper.apply_all_mappings(rules, {"age_str": "42"})
    # batch.result == {"age": 42}, batch.errors == []
    ```
    """

    def __init__(self, applier: Optional[MappingRuleApplier] = None):
        self.applier = applier or MappingRuleApplier()

    async def apply_mapping(self, rule: MappingRule, source_data: Any):
        """Apply one rule. See MappingRuleApplier.apply_mapping."""
        return await self.applier.apply_mapping(rule, source_data)

    async def apply_all_mappings(self, rules: List[MappingRule], source_data: Any) -> BatchResult:
        """
        Apply every enabled rule to one source record.

        Returns:
            BatchResult holding the destination record and collected errors
        """
        result: Dict[str, Any] = {}
        errors: List[str] = []
        warnings: List[str] = []
        applied = 0

        for rule in rules:
            if not rule.enabled:
                continue

            outcome = await self.applier.apply_mapping(rule, source_data)
            warnings.extend(outcome.warnings)
            applied += 1

            if outcome.success:
                set_value(result, rule.destination.address, outcome.value)
                continue

            if rule.error_strategy is ErrorStrategy.SKIP:
                logger.debug(f"Skipping failed rule {rule.id}: {outcome.error}")
            elif rule.error_strategy is ErrorStrategy.DEFAULT:
                if rule.error_default is not None:
                    set_value(result, rule.destination.address, rule.error_default)
            else:
                errors.append(f"{rule.destination.label}: {outcome.error}")

        logger.info(f"Applied {applied} rules: {len(errors)} errors, {len(warnings)} warnings")
        return BatchResult(result=result, errors=errors, warnings=warnings)

    async def apply_to_records(
        self,
        rules: List[MappingRule],
        records: Iterable[Any],
    ) -> List[BatchResult]:
        """Apply the rules to each record in turn."""
        return [await self.apply_all_mappings(rules, record) for record in records]
