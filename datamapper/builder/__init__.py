"""
Mapping Builder Module

Builds destination records from source records with:
- Per-rule source resolution, validation and transform
- Ordered batch application with fail/skip/default error strategies
- Array-flatten destination paths
"""

from .rule_applier import MappingRuleApplier, resolve_source
from .batch_applier import DataMapper

__all__ = [
    "MappingRuleApplier",
    "DataMapper",
    "resolve_source",
]
