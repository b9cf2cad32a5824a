"""
Transform Module

Value-level building blocks:
- Path resolution with dot paths and [] array flattening
- Best-effort type conversion
- Modifier library and name registry
- JSONata expression bridge
- Transform executor for the eight transform kinds
"""

from .converter import ValueConverter
from .executor import TransformExecutor
from .expression import ExpressionBridge, ExpressionEvaluator, JsonataEvaluator
from .registry import ModifierRegistry

__all__ = [
    "ValueConverter",
    "TransformExecutor",
    "ExpressionBridge",
    "ExpressionEvaluator",
    "JsonataEvaluator",
    "ModifierRegistry",
]
