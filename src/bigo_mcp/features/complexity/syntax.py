"""tree-sitter access layer for the complexity engine.

The engine never touches tree-sitter types directly. Nodes are read
through the small ``SyntaxNode`` surface below and every walk goes
through ``walk``, which enforces the traversal depth cap and keeps
nested function bodies out of the enclosing function's view.
"""

from typing import Any, Callable, Iterator, List, Optional, Protocol, Sequence, Set, Tuple

import tree_sitter_python as tspython
from tree_sitter import Language, Parser

from bigo_mcp.core.exceptions import TraversalLimitError

from .vocabulary import CONSTANT_COLLECTION_HINTS

PY_LANGUAGE = Language(tspython.language())

FUNCTION_TYPES = ("function_definition",)
LOOP_TYPES = ("for_statement", "while_statement")
COMPREHENSION_TYPES = (
    "list_comprehension",
    "set_comprehension",
    "dictionary_comprehension",
    "generator_expression",
)
STRING_TYPES = ("string", "concatenated_string")
LITERAL_COLLECTION_TYPES = ("list", "tuple", "set", "dictionary", "string", "concatenated_string")


class SyntaxNode(Protocol):
    """The part of a tree-sitter node the engine relies on."""

    type: str
    text: Optional[bytes]
    start_byte: int
    start_point: Tuple[int, int]
    end_point: Tuple[int, int]
    child_count: int
    children: List[Any]
    parent: Optional[Any]
    has_error: bool
    is_named: bool

    def child(self, index: int) -> Optional[Any]: ...

    def child_by_field_name(self, name: str) -> Optional[Any]: ...


def parse_python(source: str) -> Any:
    """Parse Python source into a tree-sitter tree."""
    parser = Parser()
    parser.language = PY_LANGUAGE
    return parser.parse(source.encode("utf-8", errors="replace"))


def node_text(node: Optional[SyntaxNode]) -> str:
    if node is None or node.text is None:
        return ""
    return node.text.decode("utf-8", errors="replace")


def line_span(node: SyntaxNode) -> Tuple[int, int]:
    """Return 1-based (start, end) lines of a node."""
    return node.start_point[0] + 1, node.end_point[0] + 1


def field(node: Optional[SyntaxNode], name: str) -> Optional[SyntaxNode]:
    if node is None:
        return None
    return node.child_by_field_name(name)


def walk(
    node: SyntaxNode,
    max_depth: int,
    skip_nested_functions: bool = True,
) -> Iterator[SyntaxNode]:
    """Yield node and its descendants in pre-order.

    Nested function definitions below ``node`` are not entered when
    ``skip_nested_functions`` is set; their bodies belong to their own
    feature record.

    Raises:
        TraversalLimitError: If the tree is deeper than max_depth below node
    """
    stack = [(node, 0)]
    while stack:
        current, depth = stack.pop()
        if depth > max_depth:
            raise TraversalLimitError(max_depth, current.type)
        yield current
        for index in range(current.child_count - 1, -1, -1):
            child = current.child(index)
            if child is None:
                continue
            if skip_nested_functions and child.type in FUNCTION_TYPES:
                continue
            stack.append((child, depth + 1))


def contains(node: SyntaxNode, predicate: Callable[[SyntaxNode], bool], max_depth: int) -> bool:
    return any(predicate(n) for n in walk(node, max_depth))


def find_functions(root: SyntaxNode) -> List[SyntaxNode]:
    """Return every function definition under root in source order, nested ones included.

    Discovery is not depth capped: it only collects nodes, and the cap is
    enforced when each function is walked on its own.
    """
    found = []
    stack = [root]
    while stack:
        current = stack.pop()
        if current.type in FUNCTION_TYPES:
            found.append(current)
        stack.extend(reversed(current.children))
    return found


def enclosing_function(node: SyntaxNode) -> Optional[SyntaxNode]:
    current = node.parent
    while current is not None:
        if current.type in FUNCTION_TYPES:
            return current
        current = current.parent
    return None


def function_name(func: SyntaxNode) -> str:
    return node_text(field(func, "name")) or "<anonymous>"


def decorator_names(func: SyntaxNode) -> List[str]:
    """Return the last name segment of each decorator on a function."""
    parent = func.parent
    if parent is None or parent.type != "decorated_definition":
        return []
    names = []
    for child in parent.children:
        if child.type != "decorator":
            continue
        expression = next((c for c in child.children if c.is_named), None)
        if expression is not None and expression.type == "call":
            expression = field(expression, "function")
        name = _last_segment(expression)
        if name:
            names.append(name)
    return names


def _last_segment(node: Optional[SyntaxNode]) -> Optional[str]:
    if node is None:
        return None
    if node.type == "identifier":
        return node_text(node)
    if node.type == "attribute":
        return node_text(field(node, "attribute"))
    return None


def callee_name(call: SyntaxNode) -> Optional[str]:
    """Name of a call target that may refer to a function in the same unit.

    ``name(...)``, ``self.name(...)`` and ``cls.name(...)`` resolve to
    ``name``; calls on any other object do not resolve.
    """
    target = field(call, "function")
    if target is None:
        return None
    if target.type == "identifier":
        return node_text(target)
    if target.type == "attribute":
        owner = field(target, "object")
        if owner is not None and owner.type == "identifier" and node_text(owner) in ("self", "cls"):
            return node_text(field(target, "attribute"))
    return None


def call_name(call: SyntaxNode) -> Optional[str]:
    """Last name segment of any call target, e.g. ``sort`` for ``arr.sort()``."""
    return _last_segment(field(call, "function"))


def is_method_call(call: SyntaxNode) -> bool:
    target = field(call, "function")
    return target is not None and target.type == "attribute"


def call_arguments(call: SyntaxNode) -> List[SyntaxNode]:
    arguments = field(call, "arguments")
    if arguments is None:
        return []
    return [c for c in arguments.children if c.is_named and c.type != "comment"]


def positional_arguments(call: SyntaxNode) -> List[SyntaxNode]:
    return [a for a in call_arguments(call) if a.type not in ("keyword_argument", "dictionary_splat")]


def is_self_call(node: SyntaxNode, name: str) -> bool:
    return node.type == "call" and callee_name(node) == name


def identifiers_in(node: SyntaxNode, max_depth: int) -> Set[str]:
    return {node_text(n) for n in walk(node, max_depth) if n.type == "identifier"}


def binary_operator(node: SyntaxNode) -> str:
    return node_text(field(node, "operator"))


def integer_value(node: Optional[SyntaxNode]) -> Optional[int]:
    """Value of an integer literal, allowing a leading minus."""
    if node is None:
        return None
    if node.type == "integer":
        try:
            return int(node_text(node).replace("_", ""), 0)
        except ValueError:
            return None
    if node.type == "unary_operator" and node_text(node).startswith("-"):
        inner = integer_value(field(node, "argument"))
        return -inner if inner is not None else None
    if node.type == "parenthesized_expression":
        inner = next((c for c in node.children if c.is_named), None)
        return integer_value(inner)
    return None


def subscript_depth(node: SyntaxNode) -> int:
    """Number of chained subscripts: ``a[i][j]`` is 2."""
    depth = 0
    current: Optional[SyntaxNode] = node
    while current is not None and current.type == "subscript":
        depth += 1
        current = field(current, "value")
    return depth


def is_collection_subscript(node: SyntaxNode) -> bool:
    """True for indexing, False for slicing."""
    if node.type != "subscript":
        return False
    index = field(node, "subscript")
    return index is not None and index.type != "slice"


def assignment_targets(node: SyntaxNode) -> List[str]:
    """Plain names assigned by an assignment or augmented assignment."""
    if node.type not in ("assignment", "augmented_assignment"):
        return []
    left = field(node, "left")
    if left is None:
        return []
    if left.type == "identifier":
        return [node_text(left)]
    if left.type in ("pattern_list", "tuple_pattern", "expression_list"):
        return [node_text(c) for c in left.children if c.type == "identifier"]
    return []


def is_constant_iterable(expression: Optional[SyntaxNode], range_limit: int) -> bool:
    """True when a loop over expression runs a fixed, small number of times.

    Recognized shapes: literal collections, ``range`` over integer
    literals spanning at most range_limit, ALL_CAPS names and names that
    read as a fixed keyword/pattern/direction table.
    """
    if expression is None:
        return False
    if expression.type in LITERAL_COLLECTION_TYPES:
        return True
    if expression.type == "call":
        name = call_name(expression)
        if name == "range" and not is_method_call(expression):
            return _literal_range_span(expression, range_limit)
        if name in ("items", "keys", "values") and is_method_call(expression):
            return _is_constant_name(field(field(expression, "function"), "object"))
        return False
    return _is_constant_name(expression)


def _literal_range_span(call: SyntaxNode, range_limit: int) -> bool:
    values = [integer_value(a) for a in positional_arguments(call)]
    if not values or any(v is None for v in values):
        return False
    if len(values) == 1:
        span = values[0]
    else:
        step = values[2] if len(values) > 2 and values[2] else 1
        span = (values[1] - values[0]) // step
    return span <= range_limit


def _is_constant_name(node: Optional[SyntaxNode]) -> bool:
    if node is None:
        return False
    if node.type == "attribute":
        node = field(node, "attribute")
    if node is None or node.type != "identifier":
        return False
    name = node_text(node)
    if len(name) > 1 and name.isupper():
        return True
    lowered = name.lower()
    return any(hint in lowered for hint in CONSTANT_COLLECTION_HINTS)


def is_division_by_two(node: SyntaxNode) -> bool:
    """``x // 2``, ``x / 2`` or ``x >> 1``."""
    if node.type != "binary_operator":
        return False
    operator = binary_operator(node)
    value = integer_value(field(node, "right"))
    if operator in ("//", "/"):
        return value == 2
    if operator == ">>":
        return value == 1
    return False


def is_midpoint_expression(expression: Optional[SyntaxNode], max_depth: int) -> bool:
    if expression is None:
        return False
    return contains(expression, is_division_by_two, max_depth)


def midpoint_assignments(scope: SyntaxNode, max_depth: int) -> List[Tuple[str, SyntaxNode]]:
    """Return (name, assignment) pairs like ``mid = (lo + hi) // 2``."""
    found = []
    for node in walk(scope, max_depth):
        if node.type != "assignment":
            continue
        left = field(node, "left")
        if left is None or left.type != "identifier":
            continue
        if is_midpoint_expression(field(node, "right"), max_depth):
            found.append((node_text(left), node))
    return found


def is_geometric_update(node: SyntaxNode) -> bool:
    """An assignment that scales a name by a constant factor.

    Covers ``n //= 2``, ``n = n // 10``, ``i *= 2`` and ``n >>= 1``.
    """
    if node.type == "augmented_assignment":
        operator = node_text(field(node, "operator"))
        value = integer_value(field(node, "right"))
        if value is None:
            return False
        if operator in ("//=", "/=", "*="):
            return value >= 2
        if operator in (">>=", "<<="):
            return value >= 1
        return False
    if node.type == "assignment":
        left = field(node, "left")
        right = field(node, "right")
        if left is None or right is None or left.type != "identifier":
            return False
        if right.type == "call" and call_name(right) == "int":
            args = positional_arguments(right)
            right = args[0] if args else None
        if right is None or right.type != "binary_operator":
            return False
        operator = binary_operator(right)
        value = integer_value(field(right, "right"))
        operand = field(right, "left")
        if value is None or operand is None or node_text(operand) != node_text(left):
            return False
        if operator in ("//", "/", "*"):
            return value >= 2
        if operator in (">>", "<<"):
            return value >= 1
    return False


def loop_condition_names(loop: SyntaxNode, max_depth: int) -> Set[str]:
    condition = field(loop, "condition")
    if condition is None:
        return set()
    return identifiers_in(condition, max_depth)


def is_halving_loop(loop: SyntaxNode, max_depth: int) -> bool:
    """A while loop whose controlling name shrinks or grows geometrically."""
    if loop.type != "while_statement":
        return False
    controls = loop_condition_names(loop, max_depth)
    body = field(loop, "body")
    if body is None:
        return False
    for node in walk(body, max_depth):
        if is_geometric_update(node) and set(assignment_targets(node)) & controls:
            return True
    return False


def is_binary_search_loop(loop: SyntaxNode, max_depth: int) -> bool:
    """``while lo <= hi`` with a midpoint and a pointer moved to it."""
    if loop.type != "while_statement":
        return False
    condition = field(loop, "condition")
    if condition is None or condition.type != "comparison_operator":
        return False
    operands = [c for c in condition.children if c.is_named]
    if len(operands) != 2 or not all(o.type in ("identifier", "attribute") for o in operands):
        return False
    pointers = {node_text(o) for o in operands}
    body = field(loop, "body")
    if body is None:
        return False
    midpoints = {name for name, _ in midpoint_assignments(body, max_depth)}
    if not midpoints:
        return False
    for node in walk(body, max_depth):
        if node.type != "assignment":
            continue
        left = field(node, "left")
        if left is None or node_text(left) not in pointers:
            continue
        if identifiers_in(field(node, "right") or node, max_depth) & midpoints:
            return True
    return False


def is_tree_descent_assignment(node: SyntaxNode) -> bool:
    """``node = node.left`` or ``cur = cur.right if x else cur.left``."""
    if node.type != "assignment":
        return False
    left = field(node, "left")
    right = field(node, "right")
    if left is None or right is None or left.type != "identifier":
        return False
    target = node_text(left)
    stack = [right]
    while stack:
        current = stack.pop()
        if current.type == "attribute":
            owner = field(current, "object")
            branch = node_text(field(current, "attribute"))
            if node_text(owner) == target and branch in ("left", "right"):
                return True
        stack.extend(current.children)
    return False


def is_tree_descent_loop(loop: SyntaxNode, max_depth: int) -> bool:
    if loop.type != "while_statement":
        return False
    body = field(loop, "body")
    return body is not None and contains(body, is_tree_descent_assignment, max_depth)


def is_logarithmic_loop(loop: SyntaxNode, max_depth: int) -> bool:
    return (
        is_halving_loop(loop, max_depth)
        or is_binary_search_loop(loop, max_depth)
        or is_tree_descent_loop(loop, max_depth)
    )


def is_scaling_loop(loop: SyntaxNode, range_limit: int, max_depth: int) -> bool:
    """True when the number of iterations grows linearly with the input."""
    if loop.type == "for_statement":
        return not is_constant_iterable(field(loop, "right"), range_limit)
    if loop.type == "while_statement":
        return not is_logarithmic_loop(loop, max_depth)
    return False


def comprehension_clauses(node: SyntaxNode) -> List[SyntaxNode]:
    return [c for c in node.children if c.type == "for_in_clause"]


def loop_target_names(loop: SyntaxNode, max_depth: int) -> Set[str]:
    target = field(loop, "left")
    if target is None:
        return set()
    return identifiers_in(target, max_depth)


def ancestors_within(node: SyntaxNode, stop: SyntaxNode) -> Iterator[SyntaxNode]:
    """Yield ancestors of node up to, but excluding, stop."""
    current = node.parent
    while current is not None and current != stop:
        yield current
        current = current.parent


def enclosing_loops(node: SyntaxNode, stop: SyntaxNode) -> List[SyntaxNode]:
    return [a for a in ancestors_within(node, stop) if a.type in LOOP_TYPES]


def statement_nodes(nodes: Sequence[SyntaxNode]) -> List[SyntaxNode]:
    """Statements among nodes, docstrings excluded."""
    statements = []
    for node in nodes:
        if not node.type.endswith("_statement"):
            continue
        if node.type == "expression_statement":
            named = [c for c in node.children if c.is_named]
            if len(named) == 1 and named[0].type in STRING_TYPES:
                continue
        statements.append(node)
    return statements
