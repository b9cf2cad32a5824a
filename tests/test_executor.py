"""
Unit tests for TransformExecutor

Tests:
- Each transform kind
- Conditional helpers (loose equality, condition trees, switch)
- Modifier chains after the transform
"""

import asyncio

import pytest

from datamapper.diagnostics import UNKNOWN_TRANSFORM, Diagnostics
from datamapper.schema.models import (
    ConditionalLogic,
    ParameterizedModifier,
    SourceField,
    SwitchCase,
    TransformConfig,
    TransformOptions,
)
from datamapper.transform.executor import (
    TransformExecutor,
    evaluate_condition,
    evaluate_logic,
    loose_equals,
)
from datamapper.transform.expression import ExpressionBridge, ExpressionEvaluator


# ============================================================================
# FIXTURES
# ============================================================================


class EchoEvaluator(ExpressionEvaluator):
    """Returns the context so tests can see what was evaluated."""

    def compile(self, expression):
        return expression

    def register_function(self, program, name, function):
        pass

    def bind_variable(self, program, name, value):
        pass

    async def evaluate(self, program, context):
        return {"expression": program, "context": context}


@pytest.fixture
def executor():
    return TransformExecutor(bridge=ExpressionBridge(evaluator=EchoEvaluator()))


def run(executor, transform_type, values, modifiers=None, **options):
    config = TransformConfig(
        type=transform_type,
        options=TransformOptions(**options),
        modifiers=modifiers or [],
    )
    return asyncio.run(executor.transform(config, values))


# ============================================================================
# TEST: transform kinds
# ============================================================================


class TestTransformKinds:
    """Tests for each transform kind"""

    @pytest.mark.parametrize("value", [None, 0, "", "x", [1, 2], {"a": {"b": None}}, False])
    def test_direct_is_identity(self, executor, value):
        """Test direct returns the first value unchanged"""
        assert run(executor, "direct", [value]) == value

    def test_convert_number(self, executor):
        """Test convert to number"""
        assert run(executor, "convert", ["42"], data_type="number") == 42

    def test_convert_defaults_to_string(self, executor):
        """Test convert without a data type"""
        assert run(executor, "convert", [42]) == "42"

    def test_convert_each_list_item(self, executor):
        """Test convert is applied element by element"""
        assert run(executor, "convert", [["1", "2.5", "x"]], data_type="number") == [1, 2.5, None]

    def test_combine_filters_blanks(self, executor):
        """Test combine skips None and empty strings"""
        assert run(executor, "combine", ["John", None, "", "Doe"]) == "John Doe"

    def test_combine_separator(self, executor):
        """Test a custom separator and non-string values"""
        assert run(executor, "combine", ["a", 1, True], combine_with="-") == "a-1-true"

    def test_split(self, executor):
        """Test split on the default and a custom delimiter"""
        assert run(executor, "split", ["a,b,c"]) == ["a", "b", "c"]
        assert run(executor, "split", ["a|b"], split_on="|") == ["a", "b"]
        assert run(executor, "split", [None]) == [""]

    def test_expression(self, executor):
        """Test the expression is handed to the bridge"""
        config = TransformConfig(type="expression", options=TransformOptions(expression="$source"))
        result = asyncio.run(executor.transform(config, [5], [SourceField("n")]))

        assert result["expression"] == "$source"
        assert result["context"]["n"] == 5

    def test_expression_required(self, executor):
        """Test a missing expression is an error"""
        with pytest.raises(ValueError, match="Expression is required"):
            run(executor, "expression", [1])

    def test_default_on_null(self, executor):
        """Test default replaces None"""
        assert run(executor, "default", [None], default_value="N/A") == "N/A"

    def test_default_keeps_empty_string(self, executor):
        """Test empty strings are kept unless apply_on_empty is set"""
        assert run(executor, "default", [""], default_value="N/A") == ""
        assert run(executor, "default", [""], default_value="N/A", apply_on_empty=True) == "N/A"

    def test_default_apply_on_null_disabled(self, executor):
        """Test apply_on_null=False keeps None"""
        assert run(executor, "default", [None], default_value="N/A", apply_on_null=False) is None

    def test_lookup_hit(self, executor):
        """Test a table hit"""
        assert run(executor, "lookup", ["US"], lookup_table={"US": "United States"}) == "United States"

    def test_lookup_miss_returns_source_value(self, executor):
        """Test a miss without default returns the original value"""
        assert run(executor, "lookup", ["CA"], lookup_table={"US": "United States"}) == "CA"

    def test_lookup_miss_with_default(self, executor):
        """Test a miss with default"""
        result = run(executor, "lookup", ["CA"], lookup_table={"US": "United States"}, lookup_default="Other")
        assert result == "Other"

    def test_lookup_numeric_key(self, executor):
        """Test numbers are looked up by their string form"""
        assert run(executor, "lookup", [1], lookup_table={"1": "one"}) == "one"

    def test_unknown_kind_passes_through(self, executor):
        """Test an unknown kind returns the first value with a warning"""
        diagnostics = Diagnostics()
        config = TransformConfig(type="teleport")

        result = asyncio.run(executor.transform(config, ["x"], diagnostics=diagnostics))

        assert result == "x"
        assert diagnostics.codes() == [UNKNOWN_TRANSFORM]


class TestConditional:
    """Tests for the conditional transform"""

    def test_flat_condition(self, executor):
        """Test the flat operator comparison"""
        options = dict(condition_operator="greaterThan", condition_value=18, true_value="adult", false_value="minor")
        assert run(executor, "conditional", [21], **options) == "adult"
        assert run(executor, "conditional", [12], **options) == "minor"

    def test_flat_defaults_to_equals(self, executor):
        """Test equals is the default operator"""
        assert run(executor, "conditional", ["1"], condition_value=1, true_value="yes", false_value="no") == "yes"

    def test_switch_cases(self, executor):
        """Test the first matching switch case wins"""
        cases = [SwitchCase("A", "Active"), SwitchCase("I", "Inactive"), SwitchCase("A", "Again")]
        assert run(executor, "conditional", ["A"], switch_cases=cases, switch_default="?") == "Active"
        assert run(executor, "conditional", ["Z"], switch_cases=cases, switch_default="?") == "?"

    def test_advanced_condition_wins(self, executor):
        """Test the condition tree takes priority over switch cases"""
        logic = ConditionalLogic(
            logical_operator="AND",
            conditions=[
                ConditionalLogic(operator="greaterThan", value=10),
                ConditionalLogic(operator="lessThan", value=20),
            ],
        )
        options = dict(
            advanced_condition=logic,
            switch_cases=[SwitchCase(15, "switch")],
            true_value="in range",
            false_value="out of range",
        )
        assert run(executor, "conditional", [15], **options) == "in range"
        assert run(executor, "conditional", [25], **options) == "out of range"


class TestConditionHelpers:
    """Tests for loose equality and condition evaluation"""

    def test_loose_equals(self):
        """Test loose equality rules"""
        assert loose_equals("42", 42)
        assert loose_equals(True, 1)
        assert loose_equals(None, None)
        assert not loose_equals(None, 0)
        assert not loose_equals("a", "b")

    @pytest.mark.parametrize(
        "value,operator,compare,expected",
        [
            ("abc", "contains", "b", True),
            (123, "contains", "2", False),
            ("", "isEmpty", None, True),
            (None, "isEmpty", None, True),
            (0, "isEmpty", None, False),
            ("x", "isNotEmpty", None, True),
            ("b", "greaterThan", "a", True),
            (None, "lessThan", 5, False),
            ("5", "notEquals", 5, False),
            (1, "unknownOp", 1, False),
        ],
    )
    def test_operators(self, value, operator, compare, expected):
        """Test each flat operator"""
        assert evaluate_condition(value, operator, compare) is expected

    def test_or_group(self):
        """Test OR groups and nesting"""
        logic = ConditionalLogic(
            logical_operator="OR",
            conditions=[
                ConditionalLogic(operator="equals", value="x"),
                ConditionalLogic(
                    logical_operator="AND",
                    conditions=[
                        ConditionalLogic(operator="contains", value="a"),
                        ConditionalLogic(operator="contains", value="b"),
                    ],
                ),
            ],
        )
        assert evaluate_logic("x", logic) is True
        assert evaluate_logic("cab", logic) is True
        assert evaluate_logic("ca", logic) is False

    def test_invalid_tree(self):
        """Test a node without operator or conditions is false"""
        assert evaluate_logic(1, ConditionalLogic(logical_operator="AND")) is False


class TestModifierPipeline:
    """Tests for modifiers after the transform"""

    def test_modifiers_then_parameterized(self, executor):
        """Test modifiers run before parameterized modifiers"""
        config = TransformConfig(
            type="combine",
            modifiers=["uppercase"],
            parameterized_modifiers=[ParameterizedModifier("padLeft", {"length": 10, "padChar": "."})],
        )
        result = asyncio.run(executor.transform(config, ["john", "doe"]))
        assert result == "..JOHN DOE"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
