"""Unit tests for feature extraction."""

import textwrap

import pytest
from fixtures.algorithms import FIBONACCI, MEMO_FIBONACCI, NO_SIGNAL

from bigo_mcp.core.exceptions import TraversalLimitError
from bigo_mcp.features.complexity.extractor import FeatureExtractor
from bigo_mcp.features.complexity.syntax import find_functions, function_name, parse_python
from bigo_mcp.models.complexity import FeatureArena
from bigo_mcp.models.config import AnalysisConfig


def extract(code, config=None):
    """Extract the first function of code into a fresh arena."""
    root = parse_python(textwrap.dedent(code)).root_node
    arena = FeatureArena()
    extractor = FeatureExtractor(arena, config or AnalysisConfig())
    node = find_functions(root)[0]
    return arena, extractor.extract(node, function_name(node))


NESTED = """
def outer(items):
    total = 0
    for x in items:
        for y in items:
            total += x * y

    def inner(values):
        return [v for v in values]

    return total
"""


class TestLoopFeatures:
    """Test loop counting and nesting depth."""

    def test_nested_loops(self):
        """Two nested scaling loops give raw and effective depth 2."""
        _, record = extract(NESTED)
        assert record.for_loop_count == 2
        assert record.max_loop_depth == 2
        assert record.effective_loop_depth == 2
        assert record.is_nested is True

    def test_constant_range_not_scaling(self):
        """range(8) counts toward raw depth only."""
        _, record = extract("""
def reset(values):
    for i in range(8):
        values[i] = 0
""")
        assert record.max_loop_depth == 1
        assert record.effective_loop_depth == 0

    def test_comprehension_counts_toward_effective_depth(self):
        """A comprehension over the input is one scaling level."""
        _, record = extract("""
def squares(xs):
    return [x * x for x in xs]
""")
        assert record.comprehension_count == 1
        assert record.max_loop_depth == 0
        assert record.effective_loop_depth == 1

    def test_while_loop_counted(self):
        """While loops are counted separately from for loops."""
        _, record = extract("""
def drain(queue):
    while queue:
        queue.pop()
""")
        assert record.while_loop_count == 1
        assert record.loop_count == 1


class TestNestedFunctions:
    """Test child records for nested definitions."""

    def test_nested_function_gets_own_record(self):
        """inner is a child of outer and owns its comprehension."""
        arena, record = extract(NESTED)
        children = arena.children_of(record)
        assert [child.function_name for child in children] == ["inner"]
        assert children[0].comprehension_count == 1
        assert children[0].depth == 1
        assert arena.parent_of(children[0]) is record

    def test_nested_body_excluded_from_parent(self):
        """The parent's counts leave out the nested function body."""
        _, record = extract(NESTED)
        assert record.comprehension_count == 0


class TestLexicalFeatures:
    """Test keywords, decorators, recursion and statement counts."""

    def test_recursive_calls_counted(self):
        """fibonacci calls itself twice."""
        _, record = extract(FIBONACCI)
        assert record.recursive_call_count == 2
        assert "fibonacci" in record.keywords

    def test_decorators(self):
        """The lru_cache decorator name is recorded."""
        _, record = extract(MEMO_FIBONACCI)
        assert record.decorators == ["lru_cache"]

    def test_statement_count(self):
        """Each assignment statement is counted."""
        _, record = extract(NO_SIGNAL)
        assert record.statement_count == 6

    def test_docstring_not_counted(self):
        """A docstring is not a statement."""
        _, record = extract('''
def documented():
    """Nothing to see."""
    return 1
''')
        assert record.statement_count == 1

    def test_camel_case_keywords(self):
        """camelCase identifiers are split into vocabulary terms."""
        _, record = extract("""
def mergeSort(arr):
    return arr
""")
        assert {"merge", "sort"} <= record.keywords


class TestDepthLimit:
    """Test the traversal depth cap."""

    def test_deep_function_raises(self):
        """A function deeper than the cap raises TraversalLimitError."""
        code = "def deep(x):\n    return " + "(" * 30 + "x" + ")" * 30 + "\n"
        with pytest.raises(TraversalLimitError):
            extract(code, AnalysisConfig(max_traversal_depth=10))

    def test_failed_extraction_leaves_arena_empty(self):
        """No half-built record is left behind."""
        code = "def deep(x):\n    return " + "(" * 30 + "x" + ")" * 30 + "\n"
        root = parse_python(code).root_node
        arena = FeatureArena()
        extractor = FeatureExtractor(arena, AnalysisConfig(max_traversal_depth=10))
        with pytest.raises(TraversalLimitError):
            extractor.extract(find_functions(root)[0], "deep")
        assert len(arena) == 0
