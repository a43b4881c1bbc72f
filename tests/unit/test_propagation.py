"""Unit tests for the call graph and complexity propagation."""

import textwrap

from fixtures.algorithms import (
    CALL_CHAIN,
    CALLS_LINEAR_HELPER,
    HIGH_CONFIDENCE_CALLER,
    MUTUAL_RECURSION,
    N_QUEENS,
)

from bigo_mcp.features.complexity.call_graph import build_call_hierarchy
from bigo_mcp.features.complexity.propagation import ComplexityPropagator
from bigo_mcp.features.complexity.space_detectors import default_space
from bigo_mcp.features.complexity.syntax import find_functions, function_name, parse_python
from bigo_mcp.features.complexity.vocabulary import describe_time, rating_for
from bigo_mcp.models.complexity import MethodAnalysis, Notation, TimeComplexity


def hierarchy_of(code, max_depth=100):
    root = parse_python(textwrap.dedent(code)).root_node
    functions = [(function_name(node), node) for node in find_functions(root)]
    return build_call_hierarchy(functions, max_depth)


def make_method(name, notation, confidence=90):
    return MethodAnalysis(
        name=name,
        line_start=1,
        line_end=2,
        time_complexity=TimeComplexity(notation, confidence, describe_time(notation), rating_for(notation)),
        space_complexity=default_space(),
        explanation="",
    )


class TestCallHierarchy:
    """Test call graph construction."""

    def test_resolves_self_and_plain_calls(self):
        """self.parse() and helper() resolve; other.parse() does not."""
        hierarchy = hierarchy_of(CALL_CHAIN)
        assert hierarchy == {
            "load": ["parse", "helper"],
            "parse": ["helper"],
            "helper": [],
        }

    def test_drops_self_edges_and_unknown_callees(self):
        """Recursion and calls to undefined names are not edges."""
        hierarchy = hierarchy_of("""
def countdown(n):
    print(n)
    return countdown(n - 1)
""")
        assert hierarchy == {"countdown": []}

    def test_callees_deduplicated_in_first_call_order(self):
        """Repeated calls appear once, in order of first call."""
        hierarchy = hierarchy_of("""
def main():
    second()
    first()
    second()


def first():
    pass


def second():
    pass
""")
        assert hierarchy["main"] == ["second", "first"]

    def test_nested_function_calls_belong_to_nested_function(self):
        """place() is called by solve_n_queens and place calls is_safe."""
        hierarchy = hierarchy_of(N_QUEENS)
        assert hierarchy["solve_n_queens"] == ["place"]
        assert hierarchy["place"] == ["is_safe"]


class TestComplexityPropagator:
    """Test propagation through the call graph."""

    def test_caller_raised_to_callee(self):
        """A constant caller of a linear callee becomes linear."""
        methods = [make_method("a", Notation.CONSTANT, 60), make_method("b", Notation.LINEAR)]
        events = ComplexityPropagator({"a": ["b"], "b": []}).propagate(methods)
        assert methods[0].time_complexity.notation == Notation.LINEAR
        assert methods[0].time_complexity.confidence == 60
        assert "b(O(n))" in methods[0].time_complexity.description
        assert "includes function calls: b(O(n))" in methods[0].explanation
        assert [e.kind for e in events] == ["complexity_raised"]
        assert events[0].callee == "b"

    def test_transitive_chain(self):
        """Complexity flows through intermediate callers."""
        methods = [
            make_method("a", Notation.CONSTANT),
            make_method("b", Notation.LINEAR),
            make_method("c", Notation.QUADRATIC),
        ]
        ComplexityPropagator({"a": ["b"], "b": ["c"], "c": []}).propagate(methods)
        assert [m.time_complexity.notation for m in methods] == [Notation.QUADRATIC] * 3

    def test_never_lowers(self):
        """A worse caller keeps its own complexity."""
        methods = [make_method("a", Notation.CUBIC), make_method("b", Notation.LINEAR)]
        ComplexityPropagator({"a": ["b"], "b": []}).propagate(methods)
        assert methods[0].time_complexity.notation == Notation.CUBIC
        assert methods[0].time_complexity.confidence == 90

    def test_confidence_cap(self):
        """A raised method's confidence is capped."""
        methods = [make_method("a", Notation.CONSTANT, 100), make_method("b", Notation.LINEAR)]
        ComplexityPropagator({"a": ["b"], "b": []}, confidence_cap=85).propagate(methods)
        assert methods[0].time_complexity.confidence == 85

    def test_cycle_terminates(self):
        """Mutually recursive methods converge and report the cycle."""
        methods = [make_method("a", Notation.CONSTANT), make_method("b", Notation.LINEAR)]
        events = ComplexityPropagator({"a": ["b"], "b": ["a"]}).propagate(methods)
        assert methods[0].time_complexity.notation == Notation.LINEAR
        assert methods[1].time_complexity.notation == Notation.LINEAR
        assert "cycle_detected" in [e.kind for e in events]

    def test_cycle_independent_of_visit_order(self):
        """Either visit order gives the same notations."""
        forward = [make_method("a", Notation.CONSTANT), make_method("b", Notation.LINEAR)]
        backward = [make_method("b", Notation.LINEAR), make_method("a", Notation.CONSTANT)]
        hierarchy = {"a": ["b"], "b": ["a"]}
        ComplexityPropagator(hierarchy).propagate(forward)
        ComplexityPropagator(hierarchy).propagate(backward)
        assert {m.name: m.time_complexity.notation for m in forward} == \
            {m.name: m.time_complexity.notation for m in backward}

    def test_cycle_sees_callee_outside_cycle(self):
        """Every member of a cycle reaches the cycle's outside callees, whichever is visited first."""
        hierarchy = {"a": ["b", "c"], "b": ["a"], "c": []}
        a_first = [
            make_method("a", Notation.CONSTANT),
            make_method("b", Notation.CONSTANT),
            make_method("c", Notation.CUBIC),
        ]
        b_first = [
            make_method("b", Notation.CONSTANT),
            make_method("a", Notation.CONSTANT),
            make_method("c", Notation.CUBIC),
        ]
        ComplexityPropagator(hierarchy).propagate(a_first)
        ComplexityPropagator(hierarchy).propagate(b_first)
        expected = {"a": Notation.CUBIC, "b": Notation.CUBIC, "c": Notation.CUBIC}
        assert {m.name: m.time_complexity.notation for m in a_first} == expected
        assert {m.name: m.time_complexity.notation for m in b_first} == expected

    def test_longer_cycle_shares_worst_notation(self):
        """A three-function cycle with one quadratic member is quadratic throughout."""
        methods = [
            make_method("x", Notation.CONSTANT),
            make_method("y", Notation.QUADRATIC),
            make_method("z", Notation.LINEAR),
        ]
        ComplexityPropagator({"x": ["y"], "y": ["z"], "z": ["x"]}).propagate(methods)
        assert [m.time_complexity.notation for m in methods] == [Notation.QUADRATIC] * 3

    def test_raised_description_keeps_own_reason(self):
        """Propagation appends the callee clause to the function's own description."""
        methods = [make_method("a", Notation.CONSTANT), make_method("b", Notation.LINEAR)]
        ComplexityPropagator({"a": ["b"], "b": []}).propagate(methods)
        description = methods[0].time_complexity.description
        assert description == f"{describe_time(Notation.CONSTANT)}; Calls functions with complexities: b(O(n))"
        assert describe_time(Notation.CONSTANT) in methods[0].explanation

    def test_same_name_methods_do_not_raise_each_other(self):
        """Two definitions sharing a name keep their own complexities."""
        methods = [make_method("helper", Notation.LINEAR), make_method("helper", Notation.CONSTANT)]
        ComplexityPropagator({"helper": []}).propagate(methods)
        assert methods[1].time_complexity.notation == Notation.CONSTANT

    def test_event_sink_receives_events(self):
        """Every decision is sent to the sink."""
        received = []
        methods = [make_method("a", Notation.CONSTANT), make_method("b", Notation.LINEAR)]
        events = ComplexityPropagator({"a": ["b"], "b": []}, event_sink=received.append).propagate(methods)
        assert received == events


class TestPropagationEndToEnd:
    """Test propagation through analyze_source."""

    def test_constant_caller_of_linear_callee(self, analyze):
        """a calls the linear b and is reported as O(n) naming b."""
        result = analyze(CALLS_LINEAR_HELPER)
        a = next(m for m in result.methods if m.name == "a")
        assert a.time_complexity.notation == Notation.LINEAR
        assert a.time_complexity.confidence <= 85
        assert "b" in a.explanation
        assert result.call_hierarchy == {"a": ["b"], "b": []}

    def test_confidence_capped_at_85(self, method_of):
        """A high-confidence constant caller is capped at 85 once raised."""
        method = method_of(HIGH_CONFIDENCE_CALLER, "get_price")
        assert method.time_complexity.notation == Notation.LINEAR
        assert method.time_complexity.confidence == 85

    def test_mutual_recursion(self, analyze):
        """Both functions of a call cycle end up linear."""
        result = analyze(MUTUAL_RECURSION)
        assert {m.name: m.time_complexity.notation for m in result.methods} == {
            "walk_a": Notation.LINEAR,
            "walk_b": Notation.LINEAR,
        }

    def test_nested_caller_raised(self, method_of):
        """solve_n_queens inherits the factorial complexity of place."""
        method = method_of(N_QUEENS, "solve_n_queens")
        assert method.time_complexity.notation == Notation.FACTORIAL
