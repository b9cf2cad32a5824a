"""Declarative record mapping engine."""

from .builder import DataMapper, MappingRuleApplier
from .diagnostics import Diagnostics
from .schema.models import (
    BatchResult,
    DestinationField,
    MappingResult,
    MappingRule,
    SourceField,
    TransformConfig,
)

__version__ = "0.1.0"

__all__ = [
    "DataMapper",
    "MappingRuleApplier",
    "Diagnostics",
    "BatchResult",
    "DestinationField",
    "MappingResult",
    "MappingRule",
    "SourceField",
    "TransformConfig",
]
