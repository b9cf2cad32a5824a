from .heuristic import HeuristicMapper
from .mapping import create_mapping, remove_mapping, remove_source_from_mapping

__all__ = [
    "HeuristicMapper",
    "create_mapping",
    "remove_mapping",
    "remove_source_from_mapping",
]
