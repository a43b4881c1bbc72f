"""Keyword vocabulary, built-in call tables and notation descriptions.

Every lexical signal the detectors use is declared here so the rules
stay in one place. Terms are lowercase single tokens; identifiers are
split into parts before matching (see ``identifier_terms``).
"""

import re
from typing import Dict, FrozenSet, Iterable, List, Set

from bigo_mcp.models.complexity import Notation, Rating

SORTING_TERMS = frozenset({
    "sort", "sorted", "sorting", "merge", "quick", "quicksort", "mergesort",
    "heapsort", "partition", "pivot",
})
SEARCH_TERMS = frozenset({"search", "find", "binary", "bisect", "bisection", "lookup"})
HEAP_TERMS = frozenset({"heap", "heappush", "heappop", "heapify", "heapq", "priority"})
TREE_TERMS = frozenset({
    "tree", "root", "node", "left", "right", "parent", "child", "children", "bst",
    "leaf", "subtree", "val",
})
MATH_TERMS = frozenset({
    "sum", "max", "min", "len", "count", "index", "range", "enumerate", "log", "log2",
    "log10", "pow", "sqrt",
})
COLLECTION_TERMS = frozenset({"append", "pop", "push", "insert", "remove", "extend"})
DIVIDE_TERMS = frozenset({"divide", "conquer", "mid", "middle", "half", "halve", "recursive"})
BACKTRACK_TERMS = frozenset({
    "backtrack", "backtracking", "visited", "seen", "mark", "unmark", "undo", "restore",
    "choose", "explore",
})
FACTORIAL_TERMS = frozenset({
    "permutation", "permute", "arrangement", "factorial", "tsp", "salesman", "traveling",
    "travelling", "queen",
})
TSP_TERMS = frozenset({"tsp", "salesman", "traveling", "travelling"})
K_WAY_TERMS = frozenset({"sudoku", "coloring", "colouring", "k_way", "kway", "decision_tree"})
BOARD_TERMS = frozenset({"board", "queen", "safe", "place"})
ROUTE_TERMS = frozenset({"route", "path", "city", "cities", "tour", "distance", "cost"})
EXPONENTIAL_TERMS = frozenset({
    "fibonacci", "fib", "hanoi", "subset", "powerset", "backtrack", "exhaustive", "brute",
    "knapsack", "exponential",
})
COMBINATION_TERMS = frozenset({"combination", "subset", "powerset"})
EXHAUSTIVE_TERMS = frozenset({"exhaustive", "brute", "knapsack", "subset_sum"})
HANOI_TERMS = frozenset({"hanoi", "tower"})
CUBIC_TERMS = frozenset({"triple", "triplet", "cubic"})
MATRIX_TERMS = frozenset({"matrix", "grid", "multiply"})
QUADRATIC_TERMS = frozenset({"pair", "pairwise", "quadratic"})
SWAP_SORT_TERMS = frozenset({"bubble", "selection", "insertion", "swap"})
LINEARITHMIC_TERMS = frozenset({"mergesort", "quicksort", "heapsort", "nlogn", "linearithmic"})
LOGARITHMIC_TERMS = frozenset({"binary", "bisect", "bisection", "logarithmic", "halve"})
LINEAR_TERMS = frozenset({"linear", "scan", "traverse", "iterate"})
CONSTANT_TERMS = frozenset({"constant", "hash", "lookup", "fixed", "direct", "get"})
MEMO_TERMS = frozenset({"memo", "memoize", "memoization", "cache", "lru_cache", "dp"})
VISITED_TERMS = frozenset({"visited", "seen"})

VOCABULARY: FrozenSet[str] = frozenset().union(
    SORTING_TERMS, SEARCH_TERMS, HEAP_TERMS, TREE_TERMS, MATH_TERMS, COLLECTION_TERMS,
    DIVIDE_TERMS, BACKTRACK_TERMS, FACTORIAL_TERMS, TSP_TERMS, K_WAY_TERMS, BOARD_TERMS,
    ROUTE_TERMS, EXPONENTIAL_TERMS, COMBINATION_TERMS, EXHAUSTIVE_TERMS, HANOI_TERMS,
    CUBIC_TERMS, MATRIX_TERMS, QUADRATIC_TERMS, SWAP_SORT_TERMS, LINEARITHMIC_TERMS,
    LOGARITHMIC_TERMS, LINEAR_TERMS, CONSTANT_TERMS, MEMO_TERMS, VISITED_TERMS,
)

# Terms worth picking out of string literals and comments.
TEXT_TERMS = frozenset({
    "fibonacci", "merge", "quick", "heap", "binary", "sort", "search", "factorial",
    "exponential", "linear", "constant", "permutation", "subset", "hanoi", "queen",
    "salesman", "tsp", "knapsack", "backtrack", "logarithmic", "quadratic", "cubic",
})

# Built-in calls that walk their whole argument. Names marked in
# ITERABLE_ARGUMENT_BUILTINS only count when called with a single
# iterable argument: max(a, b) is constant work.
LINEAR_BUILTINS = frozenset({
    "sum", "max", "min", "any", "all", "count", "index", "remove", "insert", "extend",
    "reverse", "reversed", "copy", "join", "find", "replace", "split", "list", "tuple",
    "set", "frozenset", "dict", "filter", "map",
})
ITERABLE_ARGUMENT_BUILTINS = frozenset({
    "sum", "max", "min", "any", "all", "list", "tuple", "set", "frozenset", "dict",
    "reversed", "filter", "map",
})
STACK_OPERATIONS = frozenset({
    "append", "pop", "add", "get", "appendleft", "popleft", "push", "discard", "setdefault",
})
HEAP_OPERATIONS = frozenset({"heappush", "heappop", "heapify", "heapreplace", "heappushpop"})
LOG_FUNCTIONS = frozenset({"log", "log2", "log10", "log1p"})
SORT_CALLS = frozenset({"sorted", "sort"})
BISECT_CALLS = frozenset({
    "bisect", "bisect_left", "bisect_right", "insort", "insort_left", "insort_right",
})
MERGE_HELPERS = frozenset({"merge", "combine", "merge_halves", "merge_sorted"})
GROWTH_CALLS = frozenset({
    "append", "add", "insert", "extend", "appendleft", "update", "setdefault", "push",
    "heappush",
})
COPY_CALLS = frozenset({"copy", "deepcopy", "list", "sorted", "dict", "set", "tuple"})
CACHE_DECORATORS = frozenset({"lru_cache", "cache", "memoize", "memoized", "cached"})
SAFETY_CHECK_PREFIXES = ("is_safe", "is_valid", "safe", "valid", "can_place")
CONSTANT_COLLECTION_HINTS = ("keyword", "pattern", "direction", "dirs", "delta", "offset", "neighbor_steps")

CONSTRUCTOR_KINDS: Dict[str, str] = {
    "list": "list",
    "dict": "dict",
    "set": "set",
    "frozenset": "set",
    "deque": "deque",
    "defaultdict": "dict",
    "Counter": "dict",
    "OrderedDict": "dict",
}
LITERAL_KINDS: Dict[str, str] = {
    "list": "list",
    "list_comprehension": "list",
    "dictionary": "dict",
    "dictionary_comprehension": "dict",
    "set": "set",
    "set_comprehension": "set",
}

TIME_DESCRIPTIONS: Dict[Notation, str] = {
    Notation.CONSTANT: "Constant time - excellent performance",
    Notation.LOGARITHMIC: "Logarithmic time - very good performance",
    Notation.LINEAR: "Linear time - good performance",
    Notation.LINEARITHMIC: "Linearithmic time - acceptable performance",
    Notation.QUADRATIC: "Quadratic time - poor performance for large inputs",
    Notation.CUBIC: "Cubic time - very poor performance",
    Notation.EXPONENTIAL: "Exponential time - impractical for large inputs",
    Notation.EXPONENTIAL_K: "Exponential k^n time - extremely impractical for large inputs",
    Notation.FACTORIAL: "Factorial time - only suitable for very small inputs",
}

SPACE_DESCRIPTIONS: Dict[Notation, str] = {
    Notation.CONSTANT: "Constant space - uses fixed amount of memory",
    Notation.LOGARITHMIC: "Logarithmic space - memory grows slowly with input",
    Notation.LINEAR: "Linear space - memory usage grows with input size",
    Notation.LINEARITHMIC: "Linearithmic space - memory grows faster than input",
    Notation.QUADRATIC: "Quadratic space - memory grows with the square of input size",
    Notation.CUBIC: "Cubic space - memory grows with the cube of input size",
    Notation.EXPONENTIAL: "Exponential space - memory doubles with each input element",
    Notation.EXPONENTIAL_K: "Exponential k^n space - memory explodes with input size",
    Notation.FACTORIAL: "Factorial space - only feasible for tiny inputs",
}

RATINGS: Dict[Notation, Rating] = {
    Notation.CONSTANT: Rating.EXCELLENT,
    Notation.LOGARITHMIC: Rating.GOOD,
    Notation.LINEAR: Rating.GOOD,
    Notation.LINEARITHMIC: Rating.FAIR,
    Notation.QUADRATIC: Rating.POOR,
    Notation.CUBIC: Rating.POOR,
    Notation.EXPONENTIAL: Rating.BAD,
    Notation.EXPONENTIAL_K: Rating.TERRIBLE,
    Notation.FACTORIAL: Rating.TERRIBLE,
}

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")
_WORD = re.compile(r"[A-Za-z][A-Za-z0-9_]*")


def describe_time(notation: Notation) -> str:
    return TIME_DESCRIPTIONS[notation]


def describe_space(notation: Notation) -> str:
    return SPACE_DESCRIPTIONS[notation]


def rating_for(notation: Notation) -> Rating:
    return RATINGS[notation]


def parse_notation(value: str) -> Notation:
    """Parse a notation string, accepting ASCII spellings like O(n^2).

    Raises:
        ValueError: If the value names no known notation
    """
    normalized = value.strip().replace(" ", "").lower()
    aliases = {
        "o(n^2)": Notation.QUADRATIC,
        "o(n**2)": Notation.QUADRATIC,
        "o(n^3)": Notation.CUBIC,
        "o(n**3)": Notation.CUBIC,
    }
    if normalized in aliases:
        return aliases[normalized]
    for notation in Notation:
        if notation.value.replace(" ", "").lower() == normalized:
            return notation
    raise ValueError(f"Unknown notation '{value}'. Valid: {', '.join(n.value for n in Notation)}")


def split_identifier(name: str) -> List[str]:
    """Split snake_case and camelCase identifiers into lowercase parts."""
    parts: List[str] = []
    for chunk in name.split("_"):
        if chunk:
            parts.extend(piece.lower() for piece in _CAMEL_BOUNDARY.split(chunk) if piece)
    return parts


def identifier_terms(name: str, vocabulary: Iterable[str] = VOCABULARY) -> Set[str]:
    """Return vocabulary terms hit by an identifier.

    A term hits when it equals the whole lowercase identifier, one of its
    parts, or a part with a trailing plural ``s``.
    """
    lowered = name.lower()
    candidates = {lowered}
    for part in split_identifier(name):
        candidates.add(part)
        if len(part) > 3 and part.endswith("s"):
            candidates.add(part[:-1])
    return {term for term in vocabulary if term in candidates}


def text_terms(text: str) -> Set[str]:
    """Return algorithm terms mentioned in a string literal or comment."""
    hits: Set[str] = set()
    for word in _WORD.findall(text):
        hits.update(identifier_terms(word, TEXT_TERMS))
    return hits


def explain(time: Notation, space: Notation, detail: str = "") -> str:
    """One-line explanation of a function's verdicts."""
    summary = f"Time: {time}, Space: {space}"
    return f"{summary} - {detail}" if detail else summary
