"""Models for mapping rules, fields and transform configuration."""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Union


class TransformType(str, Enum):
    """Transform kinds available for a mapping rule."""

    DIRECT = "direct"
    CONVERT = "convert"
    COMBINE = "combine"
    SPLIT = "split"
    EXPRESSION = "expression"
    DEFAULT = "default"
    CONDITIONAL = "conditional"
    LOOKUP = "lookup"

    @classmethod
    def parse(cls, value: Any) -> Union["TransformType", str]:
        """Return the enum member for value, or value itself if unknown."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            return value


class ErrorStrategy(str, Enum):
    """How a batch reacts when a rule fails."""

    FAIL = "fail"
    SKIP = "skip"
    DEFAULT = "default"


class ValidationTiming(str, Enum):
    """When validation rules run relative to the transform."""

    PRE_TRANSFORM = "pre-transform"
    POST_TRANSFORM = "post-transform"
    BOTH = "both"

    @property
    def runs_before(self) -> bool:
        return self in (ValidationTiming.PRE_TRANSFORM, ValidationTiming.BOTH)

    @property
    def runs_after(self) -> bool:
        return self in (ValidationTiming.POST_TRANSFORM, ValidationTiming.BOTH)


@dataclass
class SourceField:
    """A field that values are read from."""

    key: str
    type: str = "string"
    name: Optional[str] = None
    path: Optional[str] = None  # dot path, may contain "[]" markers
    sample_value: Any = None
    is_array_item: bool = False
    level: int = 0

    @property
    def address(self) -> str:
        return self.path or self.key

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SourceField":
        return cls(
            key=data["key"],
            type=data.get("type", "string"),
            name=data.get("name"),
            path=data.get("path"),
            sample_value=data.get("sampleValue"),
            is_array_item=data.get("isArrayItem", False),
            level=data.get("level", 0),
        )

    def to_dict(self) -> Dict[str, Any]:
        data = {"key": self.key, "type": self.type}
        if self.name is not None:
            data["name"] = self.name
        if self.path is not None:
            data["path"] = self.path
        if self.sample_value is not None:
            data["sampleValue"] = self.sample_value
        if self.is_array_item:
            data["isArrayItem"] = True
        if self.level:
            data["level"] = self.level
        return data


@dataclass
class DestinationField:
    """A field that mapped values are written to."""

    key: str
    type: str = "string"
    name: Optional[str] = None
    path: Optional[str] = None
    required: bool = False

    @property
    def address(self) -> str:
        return self.path or self.key

    @property
    def label(self) -> str:
        return self.name or self.key

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DestinationField":
        return cls(
            key=data["key"],
            type=data.get("type", "string"),
            name=data.get("name"),
            path=data.get("path"),
            required=data.get("required", False),
        )

    def to_dict(self) -> Dict[str, Any]:
        data = {"key": self.key, "type": self.type, "required": self.required}
        if self.name is not None:
            data["name"] = self.name
        if self.path is not None:
            data["path"] = self.path
        return data


@dataclass
class ConditionalLogic:
    """Leaf comparison or AND/OR group of nested conditions."""

    operator: Optional[str] = None
    value: Any = None
    logical_operator: Optional[str] = None  # "AND" | "OR"
    conditions: List["ConditionalLogic"] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ConditionalLogic":
        return cls(
            operator=data.get("operator"),
            value=data.get("value"),
            logical_operator=data.get("logicalOperator"),
            conditions=[cls.from_dict(c) for c in data.get("conditions") or []],
        )

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {}
        if self.operator is not None:
            data["operator"] = self.operator
            data["value"] = self.value
        if self.logical_operator is not None:
            data["logicalOperator"] = self.logical_operator
            data["conditions"] = [c.to_dict() for c in self.conditions]
        return data


@dataclass
class SwitchCase:
    condition: Any
    value: Any


# camelCase option name -> attribute name
_OPTION_FIELDS = {
    "dataType": "data_type",
    "combineWith": "combine_with",
    "splitOn": "split_on",
    "expression": "expression",
    "defaultValue": "default_value",
    "applyOnNull": "apply_on_null",
    "applyOnEmpty": "apply_on_empty",
    "conditionOperator": "condition_operator",
    "conditionValue": "condition_value",
    "trueValue": "true_value",
    "falseValue": "false_value",
    "switchDefault": "switch_default",
    "lookupTable": "lookup_table",
    "lookupDefault": "lookup_default",
}


@dataclass
class TransformOptions:
    """Kind-specific transform options. Unset options stay None."""

    # convert
    data_type: Optional[str] = None
    # combine / split
    combine_with: Optional[str] = None
    split_on: Optional[str] = None
    # expression
    expression: Optional[str] = None
    # default
    default_value: Any = None
    apply_on_null: Optional[bool] = None
    apply_on_empty: Optional[bool] = None
    # conditional
    condition_operator: Optional[str] = None
    condition_value: Any = None
    true_value: Any = None
    false_value: Any = None
    advanced_condition: Optional[ConditionalLogic] = None
    switch_cases: List[SwitchCase] = field(default_factory=list)
    switch_default: Any = None
    # lookup
    lookup_table: Optional[Dict[str, Any]] = None
    lookup_default: Any = None

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "TransformOptions":
        data = data or {}
        kwargs = {attr: data.get(name) for name, attr in _OPTION_FIELDS.items()}
        if data.get("advancedCondition"):
            kwargs["advanced_condition"] = ConditionalLogic.from_dict(data["advancedCondition"])
        kwargs["switch_cases"] = [
            SwitchCase(condition=case.get("condition"), value=case.get("value"))
            for case in data.get("switchCases") or []
        ]
        return cls(**kwargs)

    def to_dict(self) -> Dict[str, Any]:
        data = {
            name: getattr(self, attr)
            for name, attr in _OPTION_FIELDS.items()
            if getattr(self, attr) is not None
        }
        if self.advanced_condition is not None:
            data["advancedCondition"] = self.advanced_condition.to_dict()
        if self.switch_cases:
            data["switchCases"] = [
                {"condition": case.condition, "value": case.value} for case in self.switch_cases
            ]
        return data


@dataclass
class ParameterizedModifier:
    """A modifier name plus its runtime parameters (camelCase keys)."""

    type: str
    params: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ParameterizedModifier":
        return cls(type=data["type"], params=dict(data.get("params") or {}))

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"type": self.type}
        if self.params:
            data["params"] = dict(self.params)
        return data


@dataclass
class ValidationRule:
    """Declarative check applied to a value before or after transform."""

    type: str
    config: Dict[str, Any] = field(default_factory=dict)
    error_message: Optional[str] = None
    enabled: bool = True

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ValidationRule":
        return cls(
            type=data["type"],
            config=dict(data.get("config") or {}),
            error_message=data.get("errorMessage"),
            enabled=data.get("enabled") is not False,
        )

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"type": self.type}
        if self.config:
            data["config"] = dict(self.config)
        if self.error_message is not None:
            data["errorMessage"] = self.error_message
        if not self.enabled:
            data["enabled"] = False
        return data


@dataclass
class TransformConfig:
    """Transform kind, its options, modifiers and validation."""

    type: Union[TransformType, str] = TransformType.DIRECT
    options: TransformOptions = field(default_factory=TransformOptions)
    modifiers: List[str] = field(default_factory=list)
    parameterized_modifiers: List[ParameterizedModifier] = field(default_factory=list)
    validation_rules: List[ValidationRule] = field(default_factory=list)
    validation_timing: ValidationTiming = ValidationTiming.BOTH

    def __post_init__(self):
        self.type = TransformType.parse(self.type)
        self.validation_timing = ValidationTiming(self.validation_timing)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TransformConfig":
        return cls(
            type=data.get("type", "direct"),
            options=TransformOptions.from_dict(data.get("options")),
            modifiers=list(data.get("modifiers") or []),
            parameterized_modifiers=[
                ParameterizedModifier.from_dict(m) for m in data.get("parameterizedModifiers") or []
            ],
            validation_rules=[
                ValidationRule.from_dict(r) for r in data.get("validationRules") or []
            ],
            validation_timing=data.get("validationTiming") or ValidationTiming.BOTH,
        )

    def to_dict(self) -> Dict[str, Any]:
        type_value = self.type.value if isinstance(self.type, TransformType) else self.type
        data: Dict[str, Any] = {"type": type_value}
        options = self.options.to_dict()
        if options:
            data["options"] = options
        if self.modifiers:
            data["modifiers"] = list(self.modifiers)
        if self.parameterized_modifiers:
            data["parameterizedModifiers"] = [m.to_dict() for m in self.parameterized_modifiers]
        if self.validation_rules:
            data["validationRules"] = [r.to_dict() for r in self.validation_rules]
            data["validationTiming"] = self.validation_timing.value
        return data


@dataclass
class MappingRule:
    """Maps one or more source fields to a destination field."""

    id: str
    source: Union[SourceField, List[SourceField]]
    destination: DestinationField
    transform: TransformConfig = field(default_factory=TransformConfig)
    enabled: bool = True
    error_strategy: ErrorStrategy = ErrorStrategy.FAIL
    error_default: Any = None
    tags: List[str] = field(default_factory=list)
    description: str = ""

    def __post_init__(self):
        self.error_strategy = ErrorStrategy(self.error_strategy)

    @property
    def sources(self) -> List[SourceField]:
        """Source fields as a list, whatever shape the rule holds."""
        if isinstance(self.source, list):
            return list(self.source)
        return [self.source]

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MappingRule":
        raw_source = data["source"]
        if isinstance(raw_source, list):
            source = [SourceField.from_dict(s) for s in raw_source]
        else:
            source = SourceField.from_dict(raw_source)

        return cls(
            id=data["id"],
            source=source,
            destination=DestinationField.from_dict(data["destination"]),
            transform=TransformConfig.from_dict(data.get("transform") or {}),
            enabled=data.get("enabled") is not False,
            error_strategy=data.get("errorStrategy") or ErrorStrategy.FAIL,
            error_default=data.get("errorDefault"),
            tags=list(data.get("tags") or []),
            description=data.get("description", ""),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        if isinstance(self.source, list):
            source = [s.to_dict() for s in self.source]
        else:
            source = self.source.to_dict()

        data = {
            "id": self.id,
            "source": source,
            "destination": self.destination.to_dict(),
            "transform": self.transform.to_dict(),
            "enabled": self.enabled,
            "errorStrategy": self.error_strategy.value,
        }
        if self.error_default is not None:
            data["errorDefault"] = self.error_default
        if self.tags:
            data["tags"] = list(self.tags)
        if self.description:
            data["description"] = self.description
        return data


@dataclass
class MappingResult:
    """Outcome of applying one rule to one record."""

    destination_key: str
    value: Any = None
    success: bool = True
    error: Optional[str] = None
    warnings: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "destinationKey": self.destination_key,
            "value": self.value,
            "success": self.success,
        }
        if self.error is not None:
            data["error"] = self.error
        return data


@dataclass
class BatchResult:
    """Destination record plus the errors collected while building it."""

    result: Dict[str, Any] = field(default_factory=dict)
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors

    def to_dict(self) -> Dict[str, Any]:
        return {"result": self.result, "errors": list(self.errors)}
