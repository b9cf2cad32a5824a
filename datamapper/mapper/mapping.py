"""
Rule editing helpers.

Every helper returns a new rule list. Rules that change are replaced by new
MappingRule objects; the rules passed in are never mutated.
"""
import logging
import time
import uuid
from dataclasses import replace
from typing import List, Optional

from datamapper.schema.models import (
    DestinationField,
    MappingRule,
    SourceField,
    TransformConfig,
    TransformOptions,
    TransformType,
)

logger = logging.getLogger(__name__)


def generate_id() -> str:
    """Unique rule id, e.g. ``mapping_1700000000000_3f2a9c1b0``."""
    return f"mapping_{int(time.time() * 1000)}_{uuid.uuid4().hex[:9]}"


def _combine_transform() -> TransformConfig:
    return TransformConfig(type=TransformType.COMBINE, options=TransformOptions(combine_with=" "))


def _find_index(rules: List[MappingRule], destination_key: str) -> Optional[int]:
    for index, rule in enumerate(rules):
        if rule.destination.key == destination_key:
            return index
    return None


def create_mapping(
    source: SourceField,
    destination: DestinationField,
    rules: List[MappingRule],
) -> List[MappingRule]:
    """
    Map source to destination.

    If a rule already targets the destination key, source is added to it
    (unless a source with the same key is already there). A rule that ends up
    with several sources and still uses the direct transform switches to
    combine with a single-space separator. Otherwise a new direct rule is
    appended.
    """
    index = _find_index(rules, destination.key)

    if index is None:
        rule = MappingRule(id=generate_id(), source=source, destination=destination)
        logger.debug(f"Created mapping {rule.id}: {source.key} -> {destination.key}")
        return [*rules, rule]

    existing = rules[index]
    sources = existing.sources

    if any(s.key == source.key for s in sources):
        return list(rules)

    sources.append(source)
    transform = existing.transform
    if transform.type is TransformType.DIRECT:
        transform = _combine_transform()

    updated = replace(existing, source=sources, transform=transform)
    logger.debug(f"Added source {source.key} to mapping {existing.id}")
    return [*rules[:index], updated, *rules[index + 1:]]


def remove_mapping(rule_id: str, rules: List[MappingRule]) -> List[MappingRule]:
    """Remove the rule with rule_id."""
    return [rule for rule in rules if rule.id != rule_id]


def remove_source_from_mapping(
    mapping: MappingRule,
    source: SourceField,
    rules: List[MappingRule],
) -> List[MappingRule]:
    """
    Remove one source from a rule.

    Removing the only source removes the whole rule. When a single source
    remains the rule goes back to a scalar source and a direct transform.
    """
    sources = mapping.sources

    if len(sources) == 1:
        return remove_mapping(mapping.id, rules)

    remaining = [s for s in sources if s.key != source.key]

    if len(remaining) == 1:
        updated = replace(mapping, source=remaining[0], transform=TransformConfig())
    else:
        updated = replace(mapping, source=remaining)

    return [updated if rule.id == mapping.id else rule for rule in rules]
