"""Intra-unit call graph."""

from typing import Dict, Iterable, List, Tuple

from bigo_mcp.core.exceptions import TraversalLimitError
from bigo_mcp.core.logging import get_logger
from bigo_mcp.models.complexity import CallHierarchy

from .syntax import SyntaxNode, callee_name, walk

logger = get_logger("complexity.call_graph")


def build_call_hierarchy(functions: Iterable[Tuple[str, SyntaxNode]], max_depth: int) -> CallHierarchy:
    """Map each function name to the same-unit functions it calls.

    Only callees defined in the unit are kept and self calls are
    dropped. Definitions sharing a name are merged into one vertex. Each
    callee list is in first-call order without duplicates.

    Args:
        functions: (name, function_definition node) pairs
        max_depth: Traversal depth cap per function

    Returns:
        Adjacency list with an entry, possibly empty, for every name
    """
    functions = list(functions)
    defined = {name for name, _ in functions}
    hierarchy: Dict[str, List[str]] = {name: [] for name, _ in functions}

    for name, node in functions:
        callees = hierarchy[name]
        try:
            for current in walk(node, max_depth):
                if current.type != "call":
                    continue
                callee = callee_name(current)
                if callee in defined and callee != name and callee not in callees:
                    callees.append(callee)
        except TraversalLimitError as e:
            logger.warning("call_graph_truncated", function=name, error=str(e))

    logger.debug(
        "call_hierarchy_built",
        functions=len(hierarchy),
        edges=sum(len(callees) for callees in hierarchy.values()),
    )
    return hierarchy
