"""
Time complexity rule engine.

Each rule inspects a FeatureSet and contributes zero or more candidates
tagged with a source id. The dominant candidate is the highest ranked one,
except that a recognized domain pattern (PRIORITY_SOURCES) beats generic
structural matches (GENERIC_SOURCES) even at a lower rank.
"""

from typing import Callable, Iterable, List, NamedTuple

from complexity_engine.analysis import complexity_class as cc
from complexity_engine.analysis.models import FeatureSet, TimeEstimate

AMORTIZED_NOTE = (
    "Although nested loops may appear, this is amortized O(n) because each pointer "
    "or element advances monotonically and is processed a bounded number of times."
)
UPPER_BOUND_NOTE = (
    "This is a worst-case upper bound. Pruning, constraints, or early termination "
    "may reduce runtime for specific inputs."
)
NUMBER_THEORY_NOTE = (
    "This complexity relies on well-known mathematical properties "
    "(e.g., number-theoretic bounds), not just loop structure."
)

PRIORITY_SOURCES = frozenset(
    [
        "divide_conquer_nlogn",
        "divide_conquer_linear",
        "divide_conquer_tree",
        "gcd",
        "graph_traversal",
        "sieve",
        "binary_search",
        "monotonic_stack",
        "sliding_window",
        "heap_usage",
        "sorting",
        "backtracking_permutation",
        "backtracking_subsets",
    ]
)
GENERIC_SOURCES = frozenset(
    [
        "tree_recursion",
        "nested_loops",
        "backtracking_generic",
        "hash_map_usage",
        "hash_based",
        "recursion_inside_loop_linear",
        "single_loop",
        "two_pointers",
    ]
)


class Candidate(NamedTuple):
    complexity: str
    explanation: str
    source: str


def _has_loop(f: FeatureSet) -> bool:
    return f.loops.single_loops > 0 or f.loops.nested_loops > 0


def _is_2d(f: FeatureSet) -> bool:
    dimensions = f.metrics.dp_dimensions
    return dimensions == 2 or (dimensions == 0 and f.loops.max_nesting_depth >= 2)


def _branches(f: FeatureSet) -> bool:
    return f.metrics.recursion_args == "step" or f.metrics.recursion_branching >= 2


# Special cases


def early_exit(f: FeatureSet) -> Iterable[Candidate]:
    if f.loops.early_exit:
        yield Candidate(
            cc.O_1,
            "Loop terminates immediately (unconditional break/return or sequence jump).",
            "early_exit",
        )


def recursion_inside_loop(f: FeatureSet) -> Iterable[Candidate]:
    if not f.algorithms.recursion_inside_loop:
        return
    if f.algorithms.is_permutation:
        yield Candidate(cc.O_N_FACT, "Backtracking/Permutation logic inside loop.", "recursion_inside_loop_perm")
    elif f.metrics.recursion_branching >= 2:
        yield Candidate("O(n · 2^n)", "Tree recursion inside a linear loop.", "recursion_inside_loop_tree")
    else:
        yield Candidate(cc.O_N2, "Linear recursion called n times in a loop.", "recursion_inside_loop_linear")


def sorting_inside_loop(f: FeatureSet) -> Iterable[Candidate]:
    if f.algorithms.sorting_inside_loop and not f.loops.early_exit:
        yield Candidate(
            cc.O_N2_LOG_N,
            "Sorting O(n log n) is performed inside a loop of n iterations.",
            "sorting_inside_loop",
        )


def string_concat_loop(f: FeatureSet) -> Iterable[Candidate]:
    if (
        f.algorithms.string_concat_loop
        and not f.loops.early_exit
        and not f.data_structures.string_builder
    ):
        yield Candidate(
            cc.O_N2,
            "Repeated string concatenation inside a loop creates O(n²) copy overhead.",
            "string_concat_loop",
        )


def sieve(f: FeatureSet) -> Iterable[Candidate]:
    if f.algorithms.sieve:
        yield Candidate(
            cc.O_N_LOG_LOG_N,
            f"Sieve of Eratosthenes detected. {NUMBER_THEORY_NOTE}",
            "sieve",
        )


# Data structures


def heap(f: FeatureSet) -> Iterable[Candidate]:
    if not f.data_structures.heap:
        return
    if _has_loop(f):
        yield Candidate(cc.O_N_LOG_N, "n Heap operations at O(log n) each.", "heap_usage")
    else:
        yield Candidate(cc.O_LOG_N, "Heap operations take O(log n).", "heap_single")


def hash_map_usage(f: FeatureSet) -> Iterable[Candidate]:
    hashed = f.data_structures.hash_map or f.data_structures.hash_set
    if hashed and _has_loop(f):
        yield Candidate(
            cc.O_N,
            "n Hash Table lookups/insertions (average-case O(1); worst-case degrades with collisions).",
            "hash_map_usage",
        )


# Loop shapes


def loop_growth(f: FeatureSet) -> Iterable[Candidate]:
    growth = f.loops.growth_type
    if growth == "sqrt" and not f.loops.early_exit:
        yield Candidate(
            cc.O_SQRT_N,
            "Loop condition (i * i < n) implies i increments until it reaches √n.",
            "sqrt_loop",
        )
    elif growth == "logarithmic":
        if f.loops.nested_loops > 0:
            yield Candidate(
                cc.O_N_LOG_N,
                "Inner loop runs O(log n) times (multiplicative update) inside an O(n) outer loop.",
                "nested_log_loop",
            )
        else:
            yield Candidate(
                cc.O_LOG_N,
                "Loop variable updates multiplicatively (e.g. i *= 2), taking log₂(n) steps to reach n.",
                "log_loop",
            )


def monotonic_stack(f: FeatureSet) -> Iterable[Candidate]:
    if f.algorithms.monotonic_stack:
        yield Candidate(cc.O_N, f"Monotonic Stack pattern. {AMORTIZED_NOTE}", "monotonic_stack")


def nested_loops(f: FeatureSet) -> Iterable[Candidate]:
    loops = f.loops
    if not (loops.nested_loops > 0 and loops.max_nesting_depth >= 2 and loops.growth_type == "linear"):
        return
    if f.pointers.sliding_window and f.pointers.left_right:
        return
    if f.algorithms.monotonic_stack:
        return

    if len(loops.bounds) >= 2:
        yield Candidate(
            f"O({' * '.join(sorted(loops.bounds))})",
            "Nested loops iterate over independent input sizes, so total operations are multiplicative.",
            "nested_loops_symbolic",
        )
    elif loops.max_nesting_depth >= 3:
        yield Candidate(
            cc.O_N3,
            "Three nested loops each run O(n) times. Total = n × n × n = O(n³). "
            "Time complexity is reported for the worst-case execution path.",
            "nested_loops",
        )
    else:
        yield Candidate(
            cc.O_N2,
            "Two nested loops each run O(n) times. Total = n × n = O(n²). "
            "Time complexity is reported for the worst-case execution path.",
            "nested_loops",
        )


# Algorithms


def sorting(f: FeatureSet) -> Iterable[Candidate]:
    if f.algorithms.sorting:
        yield Candidate(
            cc.O_N_LOG_N,
            "Sorting takes O(n log n) time for comparison-based sorts.",
            "sorting",
        )


def binary_search(f: FeatureSet) -> Iterable[Candidate]:
    if not f.algorithms.binary_search:
        return
    # the search has its own while loop; a separate for loop means it runs n times
    if f.algorithms.search_inside_loop or (f.loops.for_loops > 0 and f.loops.while_loops > 0):
        yield Candidate(
            cc.O_N_LOG_N,
            "Binary search O(log n) is performed inside a loop of n iterations.",
            "binary_search_in_loop",
        )
    else:
        yield Candidate(cc.O_LOG_N, "Binary search halves the search space each iteration.", "binary_search")


def backtracking(f: FeatureSet) -> Iterable[Candidate]:
    a = f.algorithms
    explores = a.backtracking or a.recursion_inside_loop or (a.recursion and _branches(f))
    if not explores or a.divide_conquer:
        return
    if a.is_permutation:
        yield Candidate(cc.O_N_FACT, f"Permutation backtracking. {UPPER_BOUND_NOTE}", "backtracking_permutation")
    elif _branches(f):
        if a.accumulates_results:
            yield Candidate(
                "O(n · 2^n)",
                "Subset generation explores 2^n branches, and each subset copy costs O(n) in the worst case.",
                "backtracking_subsets",
            )
        else:
            yield Candidate(cc.O_2_N, "Subset/Choice backtracking explores 2^n branches.", "backtracking_subsets")
    else:
        yield Candidate(cc.O_K_N, f"Backtracking exploration. {UPPER_BOUND_NOTE}", "backtracking_generic")


def recursion(f: FeatureSet) -> Iterable[Candidate]:
    a = f.algorithms
    if not a.recursion or a.memoization or a.dp:
        return
    branching = f.metrics.recursion_branching

    if a.gcd:
        yield Candidate(cc.O_LOG_N, f"Euclidean algorithm. {NUMBER_THEORY_NOTE}", "gcd")
    elif f.metrics.recursion_args == "divide":
        if branching <= 1:
            yield Candidate(
                cc.O_LOG_N,
                "Recursive step divides input by constant factor with single branch.",
                "divide_conquer_linear",
            )
        elif f.loops.single_loops > 0:
            yield Candidate(
                cc.O_N_LOG_N,
                "Divide and conquer with linear work at each step (e.g. Merge Sort).",
                "divide_conquer_nlogn",
            )
        else:
            yield Candidate(cc.O_N, "Recursive tree traversal (visiting each node once).", "divide_conquer_tree")
    elif branching >= 2:
        yield Candidate(
            cc.O_2_N,
            "Recursive calls branch into multiple paths without caching (Tree Recursion).",
            "tree_recursion",
        )
    else:
        yield Candidate(cc.O_N, "Linear recursion depth O(n).", "recursion_linear")


def dynamic_programming(f: FeatureSet) -> Iterable[Candidate]:
    if not (f.algorithms.dp or f.algorithms.memoization):
        return
    if _is_2d(f):
        yield Candidate(
            cc.O_N2,
            "Time = (O(m × n) States) × (O(1) Work per State). Total O(m × n) "
            "(reported as O(n²) when m and n are on the same order).",
            "dp",
        )
    else:
        yield Candidate(cc.O_N, "Time = (O(n) States) × (O(1) Work per State). Total O(n).", "dp")


def graph_traversal(f: FeatureSet) -> Iterable[Candidate]:
    traverses = f.algorithms.bfs or f.algorithms.dfs
    if traverses and (f.data_structures.graph or f.data_structures.tree):
        yield Candidate(cc.O_V_E, "Graph traversal visits each vertex and edge exactly once.", "graph_traversal")


def pointers(f: FeatureSet) -> Iterable[Candidate]:
    p = f.pointers
    if p.sliding_window and p.left_right:
        yield Candidate(cc.O_N, f"Sliding Window. {AMORTIZED_NOTE}", "sliding_window")
    elif p.two_pointers and p.left_right:
        yield Candidate(cc.O_N, f"Two Pointers. {AMORTIZED_NOTE}", "two_pointers")


def hash_based(f: FeatureSet) -> Iterable[Candidate]:
    hashed = f.data_structures.hash_map or f.data_structures.hash_set
    if hashed and f.loops.nested_loops == 0 and f.loops.single_loops > 0:
        yield Candidate(
            cc.O_N,
            "Average-case O(1) per operation under standard hashing assumptions.",
            "hash_based",
        )


RULES: List[Callable[[FeatureSet], Iterable[Candidate]]] = [
    early_exit,
    recursion_inside_loop,
    sorting_inside_loop,
    string_concat_loop,
    sieve,
    heap,
    hash_map_usage,
    loop_growth,
    monotonic_stack,
    nested_loops,
    sorting,
    binary_search,
    backtracking,
    recursion,
    dynamic_programming,
    graph_traversal,
    pointers,
    hash_based,
]


def collect_candidates(features: FeatureSet) -> List[Candidate]:
    candidates: List[Candidate] = []
    for rule in RULES:
        candidates.extend(rule(features))
    loops = features.loops
    # the linear pass stays a floor under sublinear candidates from other rules
    if loops.single_loops > 0 and loops.nested_loops == 0 and loops.growth_type == "linear" and not loops.early_exit:
        candidates.append(
            Candidate(
                cc.O_N,
                "Single loop iterates through n elements with constant work per iteration.",
                "single_loop",
            )
        )
    return candidates


def select_dominant(candidates: List[Candidate]) -> Candidate:
    """Highest ranked candidate, letting priority sources beat generic ones."""
    ordered = sorted(candidates, key=lambda c: cc.rank(c.complexity), reverse=True)
    has_priority = any(c.source in PRIORITY_SOURCES for c in ordered)
    has_generic = any(c.source in GENERIC_SOURCES for c in ordered)
    if has_priority and has_generic:
        specific = [c for c in ordered if c.source not in GENERIC_SOURCES]
        if specific:
            return specific[0]
    return ordered[0]


def derive_time(features: FeatureSet) -> TimeEstimate:
    candidates = collect_candidates(features)
    if not candidates:
        return TimeEstimate(
            complexity=cc.O_1,
            explanation="The algorithm performs a fixed number of operations regardless of input size.",
        )

    dominant = select_dominant(candidates)
    explanation = dominant.explanation
    others = [
        f"{c.source}: {c.complexity}"
        for c in sorted(candidates, key=lambda c: cc.rank(c.complexity), reverse=True)
        if c is not dominant and c.complexity != dominant.complexity
    ][:2]
    if others:
        explanation = f"{explanation} (Other factors: {', '.join(others)} - dominated by {dominant.source})"

    return TimeEstimate(
        complexity=dominant.complexity,
        explanation=explanation,
        source=dominant.source,
        candidates=[(c.source, c.complexity) for c in candidates],
    )


def confidence(features: FeatureSet) -> float:
    """Confidence of a rule-engine verdict for these features."""
    a = features.algorithms
    value = 1.0
    if a.binary_search:
        value = 0.95
    if features.pointers.sliding_window:
        value = 0.95
    if a.sorting:
        value = 0.98
    if a.backtracking:
        value = 0.80 if a.accumulates_results else 0.75
    if a.recursion and not a.memoization:
        value = 0.85 if features.metrics.recursion_args == "divide" else 0.70
    if features.loops.max_nesting_depth > 3:
        value *= 0.8
    return round(value, 2)
