"""Value validation against declarative validation rules."""
import logging
import re
from typing import Any, Callable, Dict, List, Optional
from urllib.parse import urlparse

from datamapper.diagnostics import CUSTOM_VALIDATION_SKIPPED, Diagnostics
from datamapper.schema.models import ValidationRule

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

# Signature: validator(value, config) -> bool
CustomValidator = Callable[[Any, Dict[str, Any]], bool]


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_url(value: str) -> bool:
    try:
        parsed = urlparse(value)
    except ValueError:
        return False
    return bool(parsed.scheme) and bool(parsed.netloc or parsed.path)


class DataValidator:
    """Validates values against validation rules."""

    def __init__(self, custom_validators: Optional[Dict[str, CustomValidator]] = None):
        self.custom_validators: Dict[str, CustomValidator] = dict(custom_validators or {})

    def register(self, name: str, validator: CustomValidator) -> None:
        """Register a named function for ``custom`` rules."""
        self.custom_validators[name] = validator

    def validate(
        self,
        value: Any,
        rules: List[ValidationRule],
        diagnostics: Optional[Diagnostics] = None,
    ) -> List[str]:
        """
        Validate a value.

        Rules that do not apply to the value's type pass. Disabled rules are
        skipped.

        Returns:
            Error messages, empty if the value is valid
        """
        diagnostics = diagnostics or Diagnostics()
        errors = []

        for rule in rules:
            if not rule.enabled:
                continue

            message = self._check(value, rule, diagnostics)
            if message is not None:
                errors.append(rule.error_message or message)

        return errors

    def _check(self, value: Any, rule: ValidationRule, diagnostics: Diagnostics) -> Optional[str]:
        """Returns the default error message when value fails rule, else None."""
        config = rule.config or {}

        if rule.type == "required":
            if value is None or value == "":
                return "This field is required"

        elif rule.type in ("minLength", "maxLength"):
            if isinstance(value, (str, list)):
                length = config.get("length") or 0
                if rule.type == "minLength" and len(value) < length:
                    return f"Minimum length is {length}"
                if rule.type == "maxLength" and len(value) > length:
                    return f"Maximum length is {length}"

        elif rule.type in ("min", "max"):
            if _is_number(value):
                limit = config.get("value") or 0
                if rule.type == "min" and value < limit:
                    return f"Minimum value is {limit}"
                if rule.type == "max" and value > limit:
                    return f"Maximum value is {limit}"

        elif rule.type == "pattern":
            pattern = config.get("pattern")
            if isinstance(value, str) and pattern:
                try:
                    if not re.search(pattern, value):
                        return "Value does not match required pattern"
                except re.error as e:
                    logger.debug(f"Ignoring invalid pattern {pattern!r}: {e}")

        elif rule.type == "email":
            if isinstance(value, str) and not EMAIL_PATTERN.match(value):
                return "Invalid email address"

        elif rule.type == "url":
            if isinstance(value, str) and not _is_url(value):
                return "Invalid URL"

        elif rule.type == "custom":
            name = config.get("customFunction")
            validator = self.custom_validators.get(name) if name else None
            if validator is None:
                diagnostics.warn(
                    CUSTOM_VALIDATION_SKIPPED,
                    f"Custom validation function not registered: {name}",
                )
            elif not validator(value, config):
                return "Custom validation failed"

        return None
