"""
Big-O analysis of a Python source unit.

This module runs the whole pipeline for one unit of source code:
extract a feature record per function, classify each function with the
time and space detector chains, build the intra-unit call graph and
propagate complexities through it.

Nothing here raises to the caller for bad input. Empty or unparseable
source yields a whole-result default, and a function that cannot be
analyzed degrades to a low-confidence O(1) verdict while the rest of
the unit is analyzed normally.
"""

from typing import Dict, List, Optional, Set, Tuple

from bigo_mcp.constants import AnalysisDefaults
from bigo_mcp.core.config import get_analysis_config
from bigo_mcp.core.exceptions import SourceReadError, TraversalLimitError
from bigo_mcp.core.logging import get_logger
from bigo_mcp.models.complexity import (
    AnalysisContext,
    AnalysisResult,
    ComplexityVerdict,
    EventSink,
    FeatureArena,
    FeatureRecord,
    MethodAnalysis,
    Notation,
    SpaceComplexity,
    TimeComplexity,
    worst_notation,
)
from bigo_mcp.models.config import AnalysisConfig

from .call_graph import build_call_hierarchy
from .detectors import run_time_chain
from .extractor import FeatureExtractor
from .propagation import ComplexityPropagator
from .space_detectors import analyze_space, default_space
from .syntax import SyntaxNode, enclosing_function, find_functions, function_name, line_span, parse_python
from .vocabulary import describe_time, explain, rating_for

__all__ = [
    "FunctionAnalyzer",
    "analyze_source",
    "analyze_file",
    "default_result",
]

logger = get_logger("complexity.analyzer")


class FunctionAnalyzer:
    """Extracts and classifies the functions of one unit.

    One instance serves one analysis run: it owns the feature arena and
    the verdicts computed so far, which later functions read through the
    analysis context.
    """

    def __init__(self, config: Optional[AnalysisConfig] = None) -> None:
        self.config = config or get_analysis_config()
        self.arena = FeatureArena()
        self.extractor = FeatureExtractor(self.arena, self.config)
        self.verdicts: Dict[int, ComplexityVerdict] = {}
        self.spaces: Dict[int, SpaceComplexity] = {}
        # Explanation per record id for functions that fell back to the safe default
        self.failures: Dict[int, str] = {}
        self.global_keywords: Set[str] = set()

    def analyze(self, node: SyntaxNode, name: str, parent: Optional[FeatureRecord] = None) -> ComplexityVerdict:
        """Extract and classify a function and its nested functions.

        Args:
            node: function_definition node
            name: Function name
            parent: Record of the enclosing function, if any

        Returns:
            Time complexity verdict of the function itself

        Raises:
            TraversalLimitError: If the function is deeper than the traversal cap
        """
        record = self.extractor.extract(node, name, parent)
        self.global_keywords |= self._keywords()
        self.classify_tree(record)
        return self.verdicts[record.id]

    def extract_all(self, function_nodes: List[SyntaxNode]) -> Dict[int, str]:
        """Extract records for top-level functions.

        Returns:
            Explanation per start_byte of each function that could not be extracted
        """
        failed: Dict[int, str] = {}
        for node in function_nodes:
            name = function_name(node)
            try:
                self.extractor.extract(node, name)
            except TraversalLimitError as e:
                logger.warning("function_depth_limit", function=name, error=str(e))
                failed[node.start_byte] = AnalysisDefaults.TRAVERSAL_LIMIT_MESSAGE
            except Exception as e:
                logger.warning("function_extraction_failed", function=name, error=str(e))
                failed[node.start_byte] = f"Analysis failed: {e}"
        failed.update(self.extractor.failures)
        self.global_keywords |= self._keywords()
        return failed

    def classify_tree(self, record: FeatureRecord) -> None:
        """Classify nested functions first so their verdicts are visible to the parent."""
        for child in self.arena.children_of(record):
            self.classify_tree(child)
        try:
            self.classify(record)
        except TraversalLimitError as e:
            logger.warning("function_depth_limit", function=record.function_name, error=str(e))
            self._fail(record, AnalysisDefaults.TRAVERSAL_LIMIT_MESSAGE)
        except Exception as e:
            logger.warning("function_analysis_failed", function=record.function_name, error=str(e))
            self._fail(record, f"Analysis failed: {e}")

    def classify(self, record: FeatureRecord) -> ComplexityVerdict:
        context = self.context_for(record)
        verdict = run_time_chain(context)
        space = analyze_space(context)

        record.time_notation = verdict.notation
        record.space_notation = space.notation
        record.confidence = verdict.confidence
        self.verdicts[record.id] = verdict
        self.spaces[record.id] = space

        logger.debug(
            "function_classified",
            function=record.function_name,
            notation=verdict.notation.value,
            confidence=verdict.confidence,
            patterns=list(verdict.matched_patterns),
            space=space.notation.value,
        )
        return verdict

    def context_for(self, record: FeatureRecord) -> AnalysisContext:
        return AnalysisContext(
            record=record,
            config=self.config,
            ancestor_complexities=_notations(self.arena.ancestors_of(record)),
            sibling_complexities=_notations(self.arena.siblings_of(record)),
            child_complexities=_notations(self.arena.children_of(record)),
            global_keywords=set(self.global_keywords),
        )

    def method_for(self, record: FeatureRecord) -> MethodAnalysis:
        """Build the reported result for a classified or failed record."""
        start, end = line_span(record.node)
        parent = self.arena.parent_of(record)
        parent_name = parent.function_name if parent is not None else None

        if record.id in self.failures:
            return failed_method(record.function_name, start, end, self.failures[record.id], parent_name)

        verdict = self.verdicts[record.id]
        space = self.spaces[record.id]
        return MethodAnalysis(
            name=record.function_name,
            line_start=start,
            line_end=end,
            time_complexity=TimeComplexity(
                notation=verdict.notation,
                confidence=verdict.confidence,
                description=describe_time(verdict.notation),
                rating=rating_for(verdict.notation),
            ),
            space_complexity=space,
            explanation=explain(verdict.notation, space.notation, verdict.description),
            matched_patterns=list(verdict.matched_patterns),
            parent_name=parent_name,
        )

    def _fail(self, record: FeatureRecord, message: str) -> None:
        record.time_notation = Notation.CONSTANT
        record.space_notation = Notation.CONSTANT
        record.confidence = AnalysisDefaults.FAILURE_CONFIDENCE
        self.failures[record.id] = message
        self.verdicts[record.id] = ComplexityVerdict(
            notation=Notation.CONSTANT,
            confidence=AnalysisDefaults.FAILURE_CONFIDENCE,
            matched_patterns=("default",),
            reasons=(message,),
        )
        self.spaces[record.id] = default_space()

    def _keywords(self) -> Set[str]:
        keywords: Set[str] = set()
        for record in self.arena:
            keywords |= record.keywords
        return keywords


def _notations(records: List[FeatureRecord]) -> Dict[str, Notation]:
    return {r.function_name: r.time_notation for r in records if r.time_notation is not None}


def failed_method(
    name: str,
    line_start: int,
    line_end: int,
    message: str,
    parent_name: Optional[str] = None,
) -> MethodAnalysis:
    """Safe O(1) result for a function that could not be analyzed."""
    return MethodAnalysis(
        name=name,
        line_start=line_start,
        line_end=line_end,
        time_complexity=TimeComplexity(
            notation=Notation.CONSTANT,
            confidence=AnalysisDefaults.FAILURE_CONFIDENCE,
            description=describe_time(Notation.CONSTANT),
            rating=rating_for(Notation.CONSTANT),
        ),
        space_complexity=default_space(),
        explanation=message,
        matched_patterns=["default"],
        parent_name=parent_name,
    )


def default_result(
    config: AnalysisConfig,
    error: str,
    file_path: Optional[str] = None,
) -> AnalysisResult:
    """Whole-result default for empty or unparseable input."""
    return AnalysisResult(
        methods=[],
        call_hierarchy={},
        summary=TimeComplexity(
            notation=Notation.CONSTANT,
            confidence=config.result_default_confidence,
            description="",
            rating=rating_for(Notation.CONSTANT),
        ),
        file_path=file_path,
        error=error,
    )


def _summarize(methods: List[MethodAnalysis]) -> TimeComplexity:
    """Worst time complexity in the unit, first in source order on ties."""
    worst = worst_notation(m.time_complexity.notation for m in methods)
    return next(m.time_complexity for m in methods if m.time_complexity.notation == worst)


def _summarize_module(analyzer: FunctionAnalyzer, root: SyntaxNode) -> TimeComplexity:
    """Classify top-level code of a unit without functions as a pseudo-function."""
    name = AnalysisDefaults.MODULE_PSEUDO_FUNCTION
    try:
        verdict = analyzer.analyze(root, name)
    except TraversalLimitError as e:
        logger.warning("function_depth_limit", function=name, error=str(e))
        return TimeComplexity(Notation.CONSTANT, AnalysisDefaults.FAILURE_CONFIDENCE,
                              AnalysisDefaults.TRAVERSAL_LIMIT_MESSAGE, rating_for(Notation.CONSTANT))
    except Exception as e:
        logger.warning("function_analysis_failed", function=name, error=str(e))
        return TimeComplexity(Notation.CONSTANT, AnalysisDefaults.FAILURE_CONFIDENCE,
                              f"Analysis failed: {e}", rating_for(Notation.CONSTANT))
    record = next(iter(analyzer.arena))
    return TimeComplexity(
        notation=verdict.notation,
        confidence=verdict.confidence,
        description=analyzer.failures.get(record.id, describe_time(verdict.notation)),
        rating=rating_for(verdict.notation),
    )


def _outermost_function(node: SyntaxNode) -> SyntaxNode:
    current = node
    while True:
        enclosing = enclosing_function(current)
        if enclosing is None:
            return current
        current = enclosing


def analyze_source(
    code: str,
    config: Optional[AnalysisConfig] = None,
    event_sink: Optional[EventSink] = None,
    file_path: Optional[str] = None,
) -> AnalysisResult:
    """Analyze a unit of Python source.

    Args:
        code: Python source text
        config: Analysis settings (active server config by default)
        event_sink: Receives each propagation decision (logged at debug by default)
        file_path: Path reported in the result, if the code came from a file

    Returns:
        Methods in source order, the call hierarchy, the worst-case summary
        and the propagation events
    """
    config = config or get_analysis_config()

    if not code.strip():
        logger.info("analysis_skipped", file_path=file_path, reason="empty_source")
        return default_result(config, "Empty source", file_path)

    root = parse_python(code).root_node
    if root.has_error:
        logger.info("analysis_skipped", file_path=file_path, reason="parse_error")
        return default_result(config, "Source contains syntax errors", file_path)

    analyzer = FunctionAnalyzer(config)
    function_nodes = find_functions(root)

    if not function_nodes:
        summary = _summarize_module(analyzer, root)
        return AnalysisResult(methods=[], call_hierarchy={}, summary=summary, file_path=file_path)

    top_level = [node for node in function_nodes if enclosing_function(node) is None]
    failed = analyzer.extract_all(top_level)
    for record in list(analyzer.arena):
        if record.parent is None:
            analyzer.classify_tree(record)

    by_node = {record.node.start_byte: record for record in analyzer.arena}
    methods: List[MethodAnalysis] = []
    for node in function_nodes:
        record = by_node.get(node.start_byte)
        if record is not None:
            methods.append(analyzer.method_for(record))
            continue
        start, end = line_span(node)
        message = failed.get(node.start_byte) or failed.get(
            _outermost_function(node).start_byte, AnalysisDefaults.TRAVERSAL_LIMIT_MESSAGE
        )
        parent = enclosing_function(node)
        methods.append(failed_method(
            function_name(node), start, end, message, function_name(parent) if parent is not None else None
        ))

    functions: List[Tuple[str, SyntaxNode]] = [(function_name(node), node) for node in function_nodes]
    hierarchy = build_call_hierarchy(functions, config.max_traversal_depth)

    propagator = ComplexityPropagator(hierarchy, config.propagation_confidence_cap, event_sink)
    events = propagator.propagate(methods)

    summary = _summarize(methods)
    logger.info(
        "source_analyzed",
        file_path=file_path,
        functions=len(methods),
        failed=len(failed) + len(analyzer.failures),
        worst=summary.notation.value,
    )
    return AnalysisResult(
        methods=methods,
        call_hierarchy=hierarchy,
        summary=summary,
        events=events,
        file_path=file_path,
    )


def analyze_file(
    file_path: str,
    config: Optional[AnalysisConfig] = None,
    event_sink: Optional[EventSink] = None,
) -> AnalysisResult:
    """Read and analyze one Python file.

    Raises:
        SourceReadError: If the file cannot be read as UTF-8 text
    """
    try:
        with open(file_path, "r", encoding="utf-8") as f:
            code = f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise SourceReadError(file_path, str(e)) from e
    return analyze_source(code, config=config, event_sink=event_sink, file_path=file_path)
