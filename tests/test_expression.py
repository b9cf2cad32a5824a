"""
Unit tests for the expression bridge

Most tests use a recording evaluator so they only exercise what the bridge
feeds in and reads back. A couple run real JSONata.
"""

import asyncio

import pytest

from datamapper.schema.models import SourceField
from datamapper.transform.expression import (
    ALL_SOURCES,
    CURRENT_SOURCE,
    ExpressionBridge,
    ExpressionEvaluator,
)


class RecordingEvaluator(ExpressionEvaluator):
    """Evaluator that records registrations and returns a canned result."""

    def __init__(self, result=None):
        self.result = result
        self.compiled = []
        self.functions = {}
        self.contexts = []
        self.variables = {}

    def compile(self, expression):
        self.compiled.append(expression)
        return {"expression": expression}

    def register_function(self, program, name, function):
        self.functions[name] = function

    def bind_variable(self, program, name, value):
        self.variables[name] = value

    async def evaluate(self, program, context):
        self.contexts.append(context)
        if callable(self.result):
            return self.result(context, self.functions)
        return self.result


class TestBuildContext:
    """Tests for ExpressionBridge.build_context"""

    def test_single_source(self):
        """Test a single source is also exposed as the current source"""
        context = ExpressionBridge.build_context([SourceField("price")], [10])

        assert context["price"] == 10
        assert context[CURRENT_SOURCE] == 10
        assert context[ALL_SOURCES] == {"price": 10}

    def test_multiple_sources(self):
        """Test several sources are keyed and no current source is set"""
        sources = [SourceField("first"), SourceField("last")]
        context = ExpressionBridge.build_context(sources, ["Ada", None])

        assert context["first"] == "Ada"
        assert context["last"] is None
        assert CURRENT_SOURCE not in context
        assert context[ALL_SOURCES] == {"first": "Ada", "last": None}


class TestEvaluate:
    """Tests for ExpressionBridge.evaluate"""

    def test_result_is_returned(self):
        """Test the evaluator result becomes the value"""
        evaluator = RecordingEvaluator(result=42)
        bridge = ExpressionBridge(evaluator=evaluator)

        result = asyncio.run(bridge.evaluate("price * 2", [SourceField("price")], [21]))

        assert result == 42
        assert evaluator.compiled == ["price * 2"]
        assert evaluator.contexts[0]["price"] == 21

    def test_functions_registered(self):
        """Test modifiers, path functions and converters are registered"""
        evaluator = RecordingEvaluator()
        bridge = ExpressionBridge(evaluator=evaluator)

        asyncio.run(bridge.evaluate("$x", [SourceField("a")], [1]))

        for name in [
            "uppercase", "slugify", "padLeft", "round", "round2", "formatCurrency",
            "formatDate", "addDays", "unique", "arraySize", "reverseArray", "join",
            "getNestedValue", "getArrayValues", "hasPath",
            "toBoolean", "toNumber", "toDate", "toDateString", "toString",
        ]:
            assert name in evaluator.functions

    def test_registered_functions_are_usable(self):
        """Test the registered callables behave like the modifiers"""
        def run(context, functions):
            return functions["round2"](functions["toNumber"](context["amount"]))

        bridge = ExpressionBridge(evaluator=RecordingEvaluator(result=run))
        result = asyncio.run(bridge.evaluate("$round2($toNumber(amount))", [SourceField("amount")], ["$3.14159"]))

        assert result == 3.14

    def test_source_variables_bound(self):
        """Test $source and $all are bound as variables"""
        evaluator = RecordingEvaluator()
        bridge = ExpressionBridge(evaluator=evaluator)

        asyncio.run(bridge.evaluate("$source", [SourceField("price")], [10]))

        assert evaluator.variables == {CURRENT_SOURCE: 10, ALL_SOURCES: {"price": 10}}

    def test_no_current_source_for_many(self):
        """Test only $all is bound when there are several sources"""
        evaluator = RecordingEvaluator()
        bridge = ExpressionBridge(evaluator=evaluator)

        asyncio.run(bridge.evaluate("$all", [SourceField("a"), SourceField("b")], [1, 2]))

        assert evaluator.variables == {ALL_SOURCES: {"a": 1, "b": 2}}


class TestJsonata:
    """Tests against the default JSONata evaluator"""

    def test_arithmetic(self):
        """Test a plain JSONata expression"""
        bridge = ExpressionBridge()
        result = asyncio.run(bridge.evaluate("price * 2", [SourceField("price")], [21]))
        assert result == 42

    def test_string_concatenation(self):
        """Test combining several sources"""
        bridge = ExpressionBridge()
        sources = [SourceField("firstName"), SourceField("lastName")]
        result = asyncio.run(bridge.evaluate("firstName & ' ' & lastName", sources, ["Ada", "Lovelace"]))
        assert result == "Ada Lovelace"

    def test_current_source_variable(self):
        """Test $source reads the single source value"""
        bridge = ExpressionBridge()
        result = asyncio.run(bridge.evaluate("$source * 2", [SourceField("price")], [21]))
        assert result == 42

    def test_all_sources_variable(self):
        """Test $all exposes every source by key"""
        bridge = ExpressionBridge()
        sources = [SourceField("name"), SourceField("age")]
        result = asyncio.run(bridge.evaluate("$all.name", sources, ["Ada", 36]))
        assert result == "Ada"

    def test_uppercase_function(self):
        """Test calling a registered string modifier"""
        bridge = ExpressionBridge()
        result = asyncio.run(bridge.evaluate("$uppercase(name)", [SourceField("name")], ["ada"]))
        assert result == "ADA"

    def test_round_function(self):
        """Test calling round with a decimals argument"""
        bridge = ExpressionBridge()
        result = asyncio.run(bridge.evaluate("$round(price, 2)", [SourceField("price")], [3.456]))
        assert result == pytest.approx(3.46)

    def test_pad_left_function(self):
        """Test calling padLeft with length and pad character"""
        bridge = ExpressionBridge()
        result = asyncio.run(bridge.evaluate("$padLeft(n, 3, '0')", [SourceField("n")], ["5"]))
        assert result == "005"

    def test_get_nested_value_function(self):
        """Test calling a path function"""
        bridge = ExpressionBridge()
        result = asyncio.run(bridge.evaluate("$getNestedValue(o, 'a.b')", [SourceField("o")], [{"a": {"b": 1}}]))
        assert result == 1

    def test_deadline_interrupts_evaluation(self):
        """Test a slow expression does not hold the loop past its deadline"""
        bridge = ExpressionBridge()

        async def run():
            return await asyncio.wait_for(
                bridge.evaluate("$sum([1..1000000])", [SourceField("a")], [1]),
                timeout=0.01,
            )

        with pytest.raises(asyncio.TimeoutError):
            asyncio.run(run())


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
