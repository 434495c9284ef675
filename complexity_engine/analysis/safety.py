"""
Safety layer: clamps rule-engine output against domain sanity constraints.

Each clamp reads the running (already corrected) time complexity, so
applying the layer to its own output changes nothing.
"""

from typing import Callable, List, NamedTuple, Optional

from complexity_engine.analysis import complexity_class as cc
from complexity_engine.analysis.models import ComplexityResult, Correction, FeatureSet
from complexity_engine.core.logging import log_info


class Clamp(NamedTuple):
    name: str
    rule: Callable[[str, FeatureSet], Optional[str]]
    reason: str


def valid_backtracking(f: FeatureSet) -> bool:
    a = f.algorithms
    branches = f.metrics.recursion_args == "step" or f.metrics.recursion_branching >= 2
    return a.is_permutation or (a.recursion and branches) or a.backtracking


def _sorting(tc: str, f: FeatureSet) -> Optional[str]:
    a = f.algorithms
    if (a.sorting or a.sorting_inside_loop) and cc.is_exponential(tc):
        return cc.O_N_LOG_N
    return None


def _searching(tc: str, f: FeatureSet) -> Optional[str]:
    a = f.algorithms
    traversal = (a.bfs or a.dfs) and not f.data_structures.graph
    if (a.binary_search or traversal) and cc.is_exponential(tc):
        return cc.O_LOG_N if a.binary_search else cc.O_N
    return None


def _divide_conquer(tc: str, f: FeatureSet) -> Optional[str]:
    a = f.algorithms
    if a.divide_conquer and cc.is_exponential(tc) and not a.accumulates_results:
        return cc.O_N_LOG_N
    return None


def _dynamic_programming(tc: str, f: FeatureSet) -> Optional[str]:
    a = f.algorithms
    if (a.dp or a.memoization) and cc.is_exponential(tc):
        return cc.O_N2 if f.metrics.dp_dimensions == 2 else cc.O_N
    return None


def _graph(tc: str, f: FeatureSet) -> Optional[str]:
    a = f.algorithms
    if f.data_structures.graph and (a.bfs or a.dfs) and cc.is_exponential(tc):
        return cc.O_V_E
    return None


def _backtracking(tc: str, f: FeatureSet) -> Optional[str]:
    if cc.is_exponential(tc) and not valid_backtracking(f):
        return cc.O_N2
    return None


def _sliding_window(tc: str, f: FeatureSet) -> Optional[str]:
    if f.pointers.sliding_window and not cc.same_complexity(tc, cc.O_N):
        return cc.O_N
    return None


def _two_pointers(tc: str, f: FeatureSet) -> Optional[str]:
    p = f.pointers
    if p.two_pointers and p.left_right and not p.sliding_window and not cc.same_complexity(tc, cc.O_N):
        return cc.O_N
    return None


CLAMPS: List[Clamp] = [
    Clamp(
        "sorting",
        _sorting,
        "Correction: Sorting algorithms cannot be exponential. Standard sorting is O(n log n).",
    ),
    Clamp(
        "searching",
        _searching,
        "Correction: Search algorithms on standard structures cannot be exponential.",
    ),
    Clamp(
        "divide_conquer",
        _divide_conquer,
        "Correction: Divide & Conquer algorithms (like QuickSort/MergeSort) are typically "
        "O(n log n), not exponential.",
    ),
    Clamp(
        "dynamic_programming",
        _dynamic_programming,
        "Correction: Dynamic Programming optimizes exponential problems to polynomial time.",
    ),
    Clamp(
        "graph_traversal",
        _graph,
        "Correction: Graph traversal (BFS/DFS) is linear with respect to vertices and edges.",
    ),
    Clamp(
        "backtracking",
        _backtracking,
        "Correction: Exponential complexity detected without backtracking structure. "
        "Re-evaluating as polynomial.",
    ),
    Clamp(
        "sliding_window",
        _sliding_window,
        "Correction: Sliding Window pattern guarantees linear time complexity.",
    ),
    Clamp(
        "two_pointers",
        _two_pointers,
        "Correction: Two Pointers pattern guarantees linear time complexity.",
    ),
]


def verify(result: ComplexityResult, features: FeatureSet) -> ComplexityResult:
    """
    Apply every clamp in order to the result's time complexity.

    Each change is recorded in ``corrections_applied`` and its reason is
    appended to the time reason. Idempotent: verify(verify(r)) == verify(r).
    """
    for clamp in CLAMPS:
        current = result.time_complexity
        corrected = clamp.rule(current, features)
        if corrected is None or cc.same_complexity(corrected, current):
            continue
        log_info(f"Safety clamp '{clamp.name}': {current} -> {corrected}", layer="safety")
        result = result.with_correction(
            Correction(
                approach=result.approach,
                field="time_complexity",
                old_value=current,
                new_value=corrected,
                reason=clamp.reason,
            ),
            time_complexity=corrected,
            time_complexity_reason=f"{clamp.reason} {result.time_complexity_reason}".strip(),
        )
    return result
