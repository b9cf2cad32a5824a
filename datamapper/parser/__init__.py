from .rule_loader import RuleLoader

__all__ = ["RuleLoader"]
