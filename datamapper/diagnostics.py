"""Structured warnings raised while applying mappings."""
import logging
from dataclasses import dataclass, field
from typing import List, Optional

logger = logging.getLogger(__name__)

UNKNOWN_MODIFIER = "unknown_modifier"
MODIFIER_ERROR = "modifier_error"
UNKNOWN_TRANSFORM = "unknown_transform"
CUSTOM_VALIDATION_SKIPPED = "custom_validation_skipped"


@dataclass
class DiagnosticWarning:
    """One diagnostic entry."""

    code: str
    message: str
    rule_id: Optional[str] = None

    def __str__(self) -> str:
        if self.rule_id:
            return f"[{self.rule_id}] {self.message}"
        return self.message


@dataclass
class Diagnostics:
    """Collects warnings so callers can inspect them instead of reading logs."""

    rule_id: Optional[str] = None
    warnings: List[DiagnosticWarning] = field(default_factory=list)

    def warn(self, code: str, message: str) -> None:
        entry = DiagnosticWarning(code=code, message=message, rule_id=self.rule_id)
        self.warnings.append(entry)
        logger.warning(str(entry))

    def codes(self) -> List[str]:
        return [w.code for w in self.warnings]

    def messages(self) -> List[str]:
        return [str(w) for w in self.warnings]
