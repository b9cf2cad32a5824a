"""
Unit tests for ModifierRegistry
"""

import pytest

from datamapper.diagnostics import MODIFIER_ERROR, UNKNOWN_MODIFIER, Diagnostics
from datamapper.schema.models import ParameterizedModifier
from datamapper.transform.registry import ModifierRegistry


@pytest.fixture
def registry():
    return ModifierRegistry()


class TestModifierChain:
    """Tests for plain modifier chains"""

    def test_applies_in_order(self, registry):
        """Test that modifiers run left to right"""
        assert registry.apply_all("  hello  ", ["trim", "uppercase", "reverse"]) == "OLLEH"

    def test_unknown_modifier_passes_through(self, registry):
        """Test that an unknown name leaves the value and records a warning"""
        diagnostics = Diagnostics(rule_id="r1")

        result = registry.apply_all("abc", ["shout", "uppercase"], diagnostics)

        assert result == "ABC"
        assert diagnostics.codes() == [UNKNOWN_MODIFIER]
        assert "shout" in diagnostics.messages()[0]
        assert diagnostics.warnings[0].rule_id == "r1"

    def test_aliases(self, registry):
        """Test alias names"""
        assert registry.apply_all([1, 2, 3], ["arraySize"]) == 3
        assert registry.apply_all([1, 2, 3], ["size"]) == 3
        assert registry.apply_all([1, 2], ["reverseArray"]) == [2, 1]

    def test_converters_as_modifiers(self, registry):
        """Test that converters are addressable by name"""
        assert registry.apply_all("$1,200", ["toNumber", "round2"]) == 1200
        assert registry.apply_all("TRUE", ["toBoolean"]) is True

    def test_names(self, registry):
        """Test the name listing"""
        names = registry.names()
        assert "slugify" in names
        assert "getNestedValue" in names
        assert "extractHour" not in names


class TestParameterizedModifiers:
    """Tests for parameterized modifiers"""

    def test_positional_parameters(self, registry):
        """Test parameters are passed in declared order"""
        modifiers = [ParameterizedModifier("padLeft", {"padChar": "0", "length": 5})]
        assert registry.apply_parameterized("42", modifiers) == "00042"

    def test_slice_and_join(self, registry):
        """Test chaining array modifiers with parameters"""
        modifiers = [
            ParameterizedModifier("slice", {"start": 1, "end": 3}),
            ParameterizedModifier("join", {"separator": "-"}),
        ]
        assert registry.apply_parameterized(["a", "b", "c", "d"], modifiers) == "b-c"

    def test_missing_parameters_use_defaults(self, registry):
        """Test that absent parameters fall back to defaults"""
        modifiers = [ParameterizedModifier("round")]
        assert registry.apply_parameterized(2.5, modifiers) == 3

    def test_fallback_modifiers(self, registry):
        """Test modifiers only reachable with parameters"""
        assert registry.apply_parameterized("2023-07-04T13:45:00Z", [ParameterizedModifier("extractHour")]) == 13
        assert registry.apply_parameterized("abc", [ParameterizedModifier("length")]) == 3
        assert registry.apply_parameterized([1, 2], [ParameterizedModifier("arrayReverse")]) == [2, 1]
        padded = registry.apply_parameterized("ab", [ParameterizedModifier("padRight", {"length": 4, "padChar": "*"})])
        assert padded == "ab**"

    def test_failing_modifier_keeps_value(self, registry):
        """Test that a modifier error is recorded and the value kept"""
        diagnostics = Diagnostics()
        modifiers = [ParameterizedModifier("padLeft", {"length": "wide"})]

        result = registry.apply_parameterized("x", modifiers, diagnostics)

        assert result == "x"
        assert diagnostics.codes() == [MODIFIER_ERROR]

    def test_unknown_parameterized_modifier(self, registry):
        """Test unknown names are skipped with a warning"""
        diagnostics = Diagnostics()
        result = registry.apply_parameterized(1, [ParameterizedModifier("explode")], diagnostics)
        assert result == 1
        assert diagnostics.codes() == [UNKNOWN_MODIFIER]

    def test_default_locale(self):
        """Test that the registry locale is used when none is given"""
        registry = ModifierRegistry(default_locale="de-DE")
        modifiers = [ParameterizedModifier("formatCurrency", {"currency": "EUR"})]
        assert "1.234,56" in registry.apply_parameterized(1234.56, modifiers)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
