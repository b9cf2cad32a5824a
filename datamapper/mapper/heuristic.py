"""Heuristic mapping engine for auto-generating field mappings."""
import logging
from difflib import SequenceMatcher
from typing import List, Optional

from datamapper.mapper.mapping import generate_id
from datamapper.schema.models import DestinationField, MappingRule, SourceField

logger = logging.getLogger(__name__)


def normalize(name: Optional[str]) -> str:
    """Lower-case and drop ``_``/``-``: 'First_Name' -> 'firstname'."""
    if not name:
        return ""
    return name.lower().replace("_", "").replace("-", "")


class HeuristicMapper:
    """Auto-map source fields to destination fields by name."""

    def __init__(self, fuzzy_threshold: Optional[float] = None):
        """
        Args:
            fuzzy_threshold: If set, fall back to the closest source field whose
                similarity ratio exceeds this value (0-1) when no exact match exists
        """
        self.fuzzy_threshold = fuzzy_threshold

    @staticmethod
    def names_match(source: Optional[str], destination: Optional[str]) -> bool:
        """Normalized comparison. Empty names never match."""
        left, right = normalize(source), normalize(destination)
        return bool(left) and left == right

    def auto_generate_mappings(
        self,
        source_fields: List[SourceField],
        destination_fields: List[DestinationField],
    ) -> List[MappingRule]:
        """
        Create a direct mapping for every destination field with a matching source.

        A source matches when its normalized name equals the destination's
        normalized name, or its normalized key equals the destination's key.
        Unmatched destinations stay unmapped.
        """
        rules = []

        for destination in destination_fields:
            source = self._find_source(source_fields, destination)
            if source is None:
                logger.debug(f"No source field for {destination.key}")
                continue

            rules.append(MappingRule(id=generate_id(), source=source, destination=destination))

        logger.info(f"Auto-mapped {len(rules)} of {len(destination_fields)} destination fields")
        return rules

    def _find_source(
        self,
        source_fields: List[SourceField],
        destination: DestinationField,
    ) -> Optional[SourceField]:
        for source in source_fields:
            if self.names_match(source.name, destination.name) or self.names_match(
                source.key, destination.key
            ):
                return source

        if self.fuzzy_threshold is None:
            return None

        # Fuzzy match
        best_match = None
        best_ratio = self.fuzzy_threshold
        target = normalize(destination.name or destination.key)

        for source in source_fields:
            candidate = normalize(source.name or source.key)
            ratio = SequenceMatcher(None, candidate, target).ratio()
            if ratio > best_ratio:
                best_ratio = ratio
                best_match = source

        return best_match
