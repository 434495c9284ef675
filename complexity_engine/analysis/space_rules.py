"""
Space complexity rule engine.

Contributions only ever raise the running complexity. Enumeration
problems report their total output size as the primary figure, with the
per-call stack footprint kept as the peak.
"""

from typing import List, NamedTuple

from complexity_engine.analysis import complexity_class as cc
from complexity_engine.analysis.models import FeatureSet, SpaceEstimate, SpaceMetrics

OUTPUT_STORAGE = (
    "Space complexity includes output storage, which can be exponential in the "
    "worst case for enumeration problems"
)


class Contribution(NamedTuple):
    peak: str
    total: str
    explanation: str
    kind: str


def _contributions(f: FeatureSet) -> List[Contribution]:
    a, ds, usage = f.algorithms, f.data_structures, f.space_usage
    found: List[Contribution] = []

    if usage.hidden_allocations:
        found.append(
            Contribution(
                cc.O_N,
                cc.O_N,
                "Hidden allocations (e.g., slicing or substring creation) increase auxiliary "
                "space, even when no explicit data structure is declared",
                "allocation",
            )
        )
    if a.string_concat_loop and not ds.string_builder:
        found.append(
            Contribution(
                cc.O_N,
                cc.O_N2,
                "String concatenation generates O(n²) total garbage, with O(n) peak string size",
                "concat",
            )
        )
    if usage.aux_arrays > 0:
        found.append(Contribution(cc.O_N, cc.O_N, "An auxiliary array/vector of size n is allocated", "allocation"))
    if ds.hash_map or ds.hash_set:
        found.append(
            Contribution(cc.O_N, cc.O_N, "A hash map/set is used which may store up to n elements", "hash")
        )
    if a.dp:
        dimensions = f.metrics.dp_dimensions
        if dimensions == 2 or (dimensions == 0 and f.loops.max_nesting_depth >= 2):
            found.append(
                Contribution(
                    cc.O_N2,
                    cc.O_N2,
                    "A 2D DP table is used with m×n dimensions (reported as O(n²) when m and n "
                    "are on the same order)",
                    "dp",
                )
            )
        else:
            found.append(Contribution(cc.O_N, cc.O_N, "A 1D DP array is used with n elements", "dp"))
    if a.accumulates_results:
        if a.is_permutation:
            total = "O(n · n!)"
        elif f.metrics.recursion_args == "step" or f.metrics.recursion_branching >= 2:
            total = "O(n · 2^n)"
        else:
            total = "O(n · k^n)"
        found.append(Contribution(cc.O_N, total, OUTPUT_STORAGE, "output"))
    if a.recursion and not a.memoization:
        if a.binary_search or a.divide_conquer or f.metrics.recursion_args == "divide":
            found.append(
                Contribution(
                    cc.O_LOG_N,
                    cc.O_LOG_N,
                    "Recursive calls use O(log n) stack space due to divide and conquer",
                    "stack",
                )
            )
        else:
            found.append(Contribution(cc.O_N, cc.O_N, "Recursive calls use O(n) stack space", "stack"))
    if ds.heap:
        found.append(Contribution(cc.O_N, cc.O_N, "Heap stores n elements", "heap"))
    if ds.queue or ds.stack:
        found.append(
            Contribution(cc.O_N, cc.O_N, "A queue/stack is used which may store up to n elements", "container")
        )
    return found


def derive_space(features: FeatureSet) -> SpaceEstimate:
    found = _contributions(features)

    # a window over hashed keys is bounded by the key domain, not the input
    if features.pointers.sliding_window and (
        features.data_structures.hash_map or features.data_structures.hash_set
    ):
        found = [c for c in found if c.kind not in ("hash", "allocation")]
        found.insert(
            0,
            Contribution(
                "O(k)",
                "O(k)",
                "Space is bounded by the distinct keys in the window (e.g. alphabet size k), treated as O(k)",
                "window",
            )
        )

    if not found:
        return SpaceEstimate(
            complexity=cc.O_1,
            explanation="The algorithm operates in-place using only constant extra space.",
            metrics=SpaceMetrics(peak=cc.O_1, total=cc.O_1),
        )

    peak = cc.max_complexity(c.peak for c in found)
    total = cc.max_complexity(c.total for c in found)
    output = [c for c in found if c.kind == "output"]
    # enumeration reports its output size; otherwise the peak footprint is the answer
    complexity = output[0].total if output else peak
    explanation = ". ".join(c.explanation for c in found) + "."
    return SpaceEstimate(
        complexity=complexity,
        explanation=explanation,
        metrics=SpaceMetrics(peak=peak, total=total),
    )
