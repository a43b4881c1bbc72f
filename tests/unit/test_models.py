"""Unit tests for data models, vocabulary helpers and AnalysisConfig."""

import pytest
from pydantic import ValidationError

from bigo_mcp.features.complexity.vocabulary import (
    explain,
    identifier_terms,
    parse_notation,
    rating_for,
    split_identifier,
    text_terms,
)
from bigo_mcp.models.complexity import (
    ComplexityVerdict,
    FeatureArena,
    Notation,
    Rating,
    clamp_confidence,
    worst_notation,
)
from bigo_mcp.models.config import AnalysisConfig


class TestNotation:
    """Test the notation order and helpers."""

    def test_rank_order(self):
        """Ranks run from O(1) to O(n!)."""
        assert Notation.CONSTANT.rank == 0
        assert Notation.LINEAR.rank < Notation.LINEARITHMIC.rank < Notation.QUADRATIC.rank
        assert Notation.EXPONENTIAL.rank < Notation.EXPONENTIAL_K.rank < Notation.FACTORIAL.rank
        assert Notation.FACTORIAL.rank == 8

    def test_worst_notation(self):
        """The most severe notation wins."""
        assert worst_notation([Notation.LINEAR, Notation.CUBIC, Notation.LOGARITHMIC]) == Notation.CUBIC

    def test_worst_notation_empty(self):
        """An empty iterable gives the default."""
        assert worst_notation([]) == Notation.CONSTANT
        assert worst_notation([], default=Notation.LINEAR) == Notation.LINEAR

    def test_str(self):
        """A notation prints as its value."""
        assert str(Notation.QUADRATIC) == "O(n²)"


class TestConfidence:
    """Test confidence clamping."""

    def test_clamp(self):
        """Confidence is clamped to 0..100."""
        assert clamp_confidence(-5) == 0
        assert clamp_confidence(140) == 100
        assert clamp_confidence(70) == 70

    def test_verdict_clamps(self):
        """A verdict never carries a confidence outside 0..100."""
        verdict = ComplexityVerdict(Notation.LINEAR, 120, ["single_loop"], ["one loop"])
        assert verdict.confidence == 100
        assert verdict.matched_patterns == ("single_loop",)
        assert verdict.description == "one loop"


class TestFeatureArena:
    """Test record ownership and relations."""

    def test_relations(self):
        """Parents, children, ancestors and siblings resolve through ids."""
        arena = FeatureArena()
        root = arena.create("outer", node=None)
        first = arena.create("first", node=None, parent=root.id)
        second = arena.create("second", node=None, parent=root.id)
        leaf = arena.create("leaf", node=None, parent=first.id)

        assert len(arena) == 4
        assert arena.get(first.id) is first
        assert arena.parent_of(leaf) is first
        assert arena.parent_of(root) is None
        assert arena.children_of(root) == [first, second]
        assert arena.ancestors_of(leaf) == [first, root]
        assert arena.siblings_of(first) == [second]
        assert leaf.depth == 2

    def test_top_level_siblings(self):
        """Top-level records are siblings of each other."""
        arena = FeatureArena()
        a = arena.create("a", node=None)
        b = arena.create("b", node=None)
        assert arena.siblings_of(a) == [b]
        assert [r.function_name for r in arena] == ["a", "b"]


class TestVocabulary:
    """Test notation parsing, ratings and identifier matching."""

    @pytest.mark.parametrize("value,expected", [
        ("O(n^2)", Notation.QUADRATIC),
        ("O(n**2)", Notation.QUADRATIC),
        ("O(n²)", Notation.QUADRATIC),
        ("o(N LOG N)", Notation.LINEARITHMIC),
        ("O(n^3)", Notation.CUBIC),
        (" O(1) ", Notation.CONSTANT),
        ("O(n!)", Notation.FACTORIAL),
    ])
    def test_parse_notation(self, value, expected):
        """Unicode and ASCII spellings parse."""
        assert parse_notation(value) == expected

    def test_parse_notation_invalid(self):
        """Unknown notations raise ValueError."""
        with pytest.raises(ValueError, match="Unknown notation"):
            parse_notation("O(n^4)")

    @pytest.mark.parametrize("notation,rating", [
        (Notation.CONSTANT, Rating.EXCELLENT),
        (Notation.LOGARITHMIC, Rating.GOOD),
        (Notation.LINEARITHMIC, Rating.FAIR),
        (Notation.CUBIC, Rating.POOR),
        (Notation.EXPONENTIAL, Rating.BAD),
        (Notation.FACTORIAL, Rating.TERRIBLE),
    ])
    def test_rating_for(self, notation, rating):
        """Each notation maps to its rating."""
        assert rating_for(notation) == rating

    def test_split_identifier(self):
        """snake_case and camelCase are both split."""
        assert split_identifier("quickSort_helper") == ["quick", "sort", "helper"]
        assert split_identifier("__init__") == ["init"]

    def test_identifier_terms_plural(self):
        """A plural part matches the singular term."""
        assert "permutation" in identifier_terms("all_permutations")
        assert "queen" in identifier_terms("solveQueens")

    def test_identifier_terms_no_partial_match(self):
        """Terms must match a whole part."""
        assert "sort" not in identifier_terms("resort")

    def test_text_terms(self):
        """Algorithm words in prose are picked up."""
        assert text_terms("Classic merge sort, see Fibonacci") >= {"merge", "sort", "fibonacci"}

    def test_explain(self):
        """The explanation names both verdicts and the detail."""
        assert explain(Notation.LINEAR, Notation.CONSTANT) == "Time: O(n), Space: O(1)"
        assert explain(Notation.LINEAR, Notation.LINEAR, "one loop") == "Time: O(n), Space: O(n) - one loop"


class TestAnalysisConfig:
    """Test AnalysisConfig validation."""

    def test_defaults(self):
        """Defaults match the engine constants."""
        config = AnalysisConfig()
        assert config.max_traversal_depth == 100
        assert config.propagation_confidence_cap == 85
        assert config.default_confidence == 30
        assert config.threshold_for("linear", 60) == 60

    def test_threshold_override(self):
        """A configured threshold replaces the default."""
        config = AnalysisConfig(min_confidence={"quadratic": 90})
        assert config.threshold_for("quadratic", 70) == 90

    def test_unknown_detector_rejected(self):
        """Unknown detector keys are rejected."""
        with pytest.raises(ValidationError):
            AnalysisConfig(min_confidence={"quartic": 70})

    def test_threshold_out_of_range_rejected(self):
        """Thresholds above 100 are rejected."""
        with pytest.raises(ValidationError):
            AnalysisConfig(min_confidence={"linear": 150})

    def test_depth_minimum(self):
        """The traversal cap cannot go below 10."""
        with pytest.raises(ValidationError):
            AnalysisConfig(max_traversal_depth=5)

    def test_extra_fields_forbidden(self):
        """Unknown settings are rejected."""
        with pytest.raises(ValidationError):
            AnalysisConfig(unknown_setting=True)
