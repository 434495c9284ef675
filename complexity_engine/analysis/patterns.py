"""
Pattern detector: an independent, keyword-level cross-check of the rule
engine.

Every detector reports a fixed confidence. ``infer_complexity`` turns the
detections for one snippet into a single estimate, combining patterns
that are known to compose (sort + hash, binary search per element,
graph DP).
"""

import re
from types import MappingProxyType
from typing import Callable, List, Mapping, NamedTuple, Optional, Set

from complexity_engine.analysis import complexity_class as cc
from complexity_engine.analysis.detection import in_order, strip_comments
from complexity_engine.analysis.languages import get_profile
from complexity_engine.analysis.models import PatternDetection, PatternInference
from complexity_engine.core.logging import log_debug, log_warning


class Bound(NamedTuple):
    average: str
    worst: str


class PatternProfile(NamedTuple):
    time: Bound
    space: Bound
    description: str
    guaranteed: bool = True
    amortized: bool = False


class StructureProfile(NamedTuple):
    operations: Mapping[str, Bound]
    space: Bound
    note: str = ""


def _same(label: str) -> Bound:
    return Bound(label, label)


PATTERN_COMPLEXITIES: Mapping[str, PatternProfile] = MappingProxyType(
    {
        "single_loop": PatternProfile(_same(cc.O_N), _same(cc.O_1), "Single iteration through array"),
        "nested_loops_2": PatternProfile(_same(cc.O_N2), _same(cc.O_1), "Two nested loops"),
        "nested_loops_3": PatternProfile(_same(cc.O_N3), _same(cc.O_1), "Three nested loops"),
        "binary_search": PatternProfile(_same(cc.O_LOG_N), _same(cc.O_1), "Binary search on sorted array"),
        "merge_sort": PatternProfile(_same(cc.O_N_LOG_N), _same(cc.O_N), "Divide and conquer sorting"),
        "quick_sort": PatternProfile(
            Bound(cc.O_N_LOG_N, cc.O_N2),
            Bound(cc.O_LOG_N, cc.O_N),
            "Quick sort (worst case with bad pivots)",
            guaranteed=False,
        ),
        "heap_sort": PatternProfile(_same(cc.O_N_LOG_N), _same(cc.O_1), "In-place heap sort"),
        "sliding_window": PatternProfile(
            _same(cc.O_N), _same("O(k)"), "Sliding window pattern", amortized=True
        ),
        "two_pointers": PatternProfile(
            _same(cc.O_N), _same(cc.O_1), "Two pointers moving in same direction", amortized=True
        ),
        "monotonic_stack": PatternProfile(
            _same(cc.O_N), _same(cc.O_N), "Monotonic stack for next greater/smaller", amortized=True
        ),
        "dfs_bfs": PatternProfile(_same(cc.O_V_E), _same("O(V)"), "Graph traversal"),
        "dijkstra": PatternProfile(_same("O((V + E) log V)"), _same("O(V)"), "Dijkstra with min-heap"),
        "floyd_warshall": PatternProfile(_same("O(V³)"), _same("O(V²)"), "All-pairs shortest path"),
        "dp_1d": PatternProfile(_same(cc.O_N), _same(cc.O_N), "1D dynamic programming"),
        "dp_2d": PatternProfile(_same("O(n·m)"), _same("O(n·m)"), "2D dynamic programming"),
        "backtracking_subsets": PatternProfile(_same(cc.O_2_N), _same(cc.O_N), "Generate all subsets"),
        "backtracking_permutations": PatternProfile(
            _same(cc.O_N_FACT), _same(cc.O_N), "Generate all permutations"
        ),
        "kadane": PatternProfile(_same(cc.O_N), _same(cc.O_1), "Kadane's algorithm for max subarray"),
        "sieve": PatternProfile(_same(cc.O_N_LOG_LOG_N), _same(cc.O_N), "Sieve of Eratosthenes"),
        "gcd": PatternProfile(
            _same("O(log min(a,b))"), Bound(cc.O_1, cc.O_LOG_N), "GCD using Euclidean algorithm"
        ),
    }
)

DATA_STRUCTURE_COMPLEXITIES: Mapping[str, StructureProfile] = MappingProxyType(
    {
        "hash_map": StructureProfile(
            MappingProxyType({"operation": Bound(cc.O_1, cc.O_N)}),
            _same(cc.O_N),
            "Worst case occurs with hash collisions",
        ),
        "hash_set": StructureProfile(
            MappingProxyType({"operation": Bound(cc.O_1, cc.O_N)}),
            _same(cc.O_N),
            "Worst case occurs with hash collisions",
        ),
        "array": StructureProfile(
            MappingProxyType(
                {
                    "access": _same(cc.O_1),
                    "append": Bound(cc.O_1, cc.O_N),
                    "insert": _same(cc.O_N),
                }
            ),
            _same(cc.O_N),
            "Append is amortized O(1), but resize is O(n)",
        ),
        "balanced_tree": StructureProfile(
            MappingProxyType({"operation": _same(cc.O_LOG_N)}),
            _same(cc.O_N),
            "Guaranteed logarithmic time",
        ),
        "heap": StructureProfile(
            MappingProxyType({"insert": _same(cc.O_LOG_N), "extract_min": _same(cc.O_LOG_N)}),
            _same(cc.O_N),
            "Guaranteed logarithmic time",
        ),
        "stack": StructureProfile(
            MappingProxyType({"push": _same(cc.O_1), "pop": _same(cc.O_1)}),
            _same(cc.O_N),
        ),
        "queue": StructureProfile(
            MappingProxyType({"enqueue": _same(cc.O_1), "dequeue": _same(cc.O_1)}),
            _same(cc.O_N),
        ),
        "trie": StructureProfile(
            MappingProxyType({"insert": _same("O(L)"), "search": _same("O(L)")}),
            _same("O(N·L)"),
            "L = word length, N = number of words",
        ),
        "union_find": StructureProfile(
            MappingProxyType({"union": Bound("O(α(n))", cc.O_LOG_N), "find": Bound("O(α(n))", cc.O_LOG_N)}),
            _same(cc.O_N),
            "α = inverse Ackermann function (≈ constant for practical n)",
        ),
    }
)

GRAPH_CONTEXT = re.compile(r"graph|adj|adjacency|edges|vertices|neighbors", re.IGNORECASE)
TREE_CONTEXT = re.compile(r"treenode|node\.left|node\.right|root\.|binary[\w\s]{0,40}tree", re.IGNORECASE)


def _any(code: str, *patterns: str, flags: int = 0) -> bool:
    return any(re.search(p, code, flags) for p in patterns)


def _loop_count(code: str) -> int:
    return len(re.findall(r"\bfor\s*\(|\bfor\s+\w+(?:\s*,\s*\w+)?\s+(?:in|of)\b", code))


def _detection(name: str, confidence: float, time: str, space: str, reason: str) -> PatternDetection:
    return PatternDetection(
        name=name,
        confidence=confidence,
        time_complexity=time,
        space_complexity=space,
        reason=reason,
    )


def detect_context(code: str) -> Set[str]:
    """Graph/tree context markers; they refine traversals but carry no verdict."""
    context = set()
    if GRAPH_CONTEXT.search(code):
        context.add("graph")
    if TREE_CONTEXT.search(code):
        context.add("tree")
    return context


def detect_sorting(code: str, context: Set[str]) -> Optional[PatternDetection]:
    if _any(code, r"\.sort\s*\(", r"\bsorted\s*\(") or _any(
        code, r"arrays\.sort", r"collections\.sort", r"merge\s*sort", r"quick\s*sort", r"heap\s*sort",
        flags=re.IGNORECASE,
    ):
        return _detection("sorting", 0.98, cc.O_N_LOG_N, cc.O_1, "Sorting")
    return None


def detect_hashing(code: str, context: Set[str]) -> Optional[PatternDetection]:
    markers = (
        r"hashmap|map\s*<",
        r"hashset|set\s*<",
        r"new\s+map\s*\(",
        r"new\s+set\s*\(",
        r"\bdict\s*\(",
        r"defaultdict",
        r"counter",
        r"\bset\s*\(\s*\)",
    )
    if _any(code, *markers, flags=re.IGNORECASE) or re.search(r"=\s*\{\s*\}", code):
        space = DATA_STRUCTURE_COMPLEXITIES["hash_map"].space.average
        time = cc.O_N if _loop_count(code) <= 1 else cc.O_N2
        return _detection("hashing", 0.95, time, space, "Hash Map/Set")
    return None


def detect_two_pointer(code: str, context: Set[str]) -> Optional[PatternDetection]:
    flat = re.sub(r"\s+", " ", code.lower())
    pairs = (
        (r"\b(?:left|right)\b", r"\b(?:left|right)\b"),
        (r"\b(?:start|end)\b", r"\b(?:start|end)\b"),
        (r"\b(?:slow|fast)\b", r"\b(?:slow|fast)\b"),
        (r"\b(?:i|j)\b", r"while", r"\b(?:i|j)\b"),
    )
    if not any(in_order(flat, *parts) for parts in pairs):
        return None
    resets = re.search(r"\b(?:left|start|slow)\s*=\s*0\b", code)
    nested = in_order(code, r"for", r"for", per_line=True)
    profile = PATTERN_COMPLEXITIES["two_pointers"]
    time = profile.time.average if not (resets and nested) else cc.O_N2
    return _detection("two_pointer", 0.92, time, profile.space.average, "Two Pointers")


def detect_sliding_window(code: str, context: Set[str]) -> Optional[PatternDetection]:
    width = in_order(
        code, r"maxlen", r"=", r"(?:right|end)\s*-\s*(?:left|start)", flags=re.IGNORECASE, per_line=True
    )
    if width or _any(code, r"window", flags=re.IGNORECASE) or _any(
        code, r"(?:right|end)\s*-\s*(?:left|start)", r"\[\s*left\s*:\s*right\s*\]"
    ):
        profile = PATTERN_COMPLEXITIES["sliding_window"]
        return _detection(
            "sliding_window", 0.93, profile.time.average, profile.space.average, "Sliding Window"
        )
    return None


def detect_binary_search(code: str, context: Set[str]) -> Optional[PatternDetection]:
    midpoint = in_order(
        code,
        r"mid\s*=",
        r"\(",
        r"left|lo|low",
        r"\+",
        r"right|hi|high",
        r"\)\s*(?:/{1,2}\s*2|>>\s*1)",
        per_line=True,
    )
    named = in_order(code, r"binary", r"search", flags=re.IGNORECASE, per_line=True)
    if not (midpoint or named or re.search(r"\[\s*mid\s*\]", code)):
        return None
    indexed = re.search(r"\b(?:arr|nums|array|a)\[\s*mid\s*\]", code)
    profile = PATTERN_COMPLEXITIES["binary_search"]
    return _detection(
        "binary_search",
        0.97 if indexed else 0.85,
        profile.time.average,
        profile.space.average,
        "Binary Search",
    )


def _traversal_time(context: Set[str]) -> str:
    return PATTERN_COMPLEXITIES["dfs_bfs"].time.average if "graph" in context else cc.O_N


def detect_dfs(code: str, context: Set[str]) -> Optional[PatternDetection]:
    if (
        _any(code, r"def\s+dfs|function\s+dfs", flags=re.IGNORECASE)
        or in_order(code, r"depth", r"first", flags=re.IGNORECASE, per_line=True)
        or re.search(r"\bdfs\s*\(", code)
        or in_order(code, r"visited", r"\[", r"\]", r"=\s*(?:true|True)", per_line=True)
    ):
        return _detection("dfs", 0.90, _traversal_time(context), "O(h)", "Depth-First Search")
    return None


def detect_bfs(code: str, context: Set[str]) -> Optional[PatternDetection]:
    flat = re.sub(r"\s+", " ", code)
    markers = (("queue", "while", "queue"), ("breadth", "first"), ("level", "order"), ("deque", "popleft"))
    if any(in_order(flat, *parts, flags=re.IGNORECASE) for parts in markers):
        return _detection("bfs", 0.91, _traversal_time(context), "O(w)", "Breadth-First Search")
    return None


def detect_dp(code: str, context: Set[str]) -> Optional[PatternDetection]:
    if not (
        _any(code, r"\bdp\s*\[", r"\bmemo\s*\[", r"@lru_cache|@cache\b")
        or re.search(r"memoization|tabulation", code, re.IGNORECASE)
    ):
        return None
    if re.search(r"\bdp\s*\[\s*[\w+\-\s]+\]\s*\[\s*[\w+\-\s]+\]", code):
        profile = PATTERN_COMPLEXITIES["dp_2d"]
    else:
        profile = PATTERN_COMPLEXITIES["dp_1d"]
    return _detection("dp", 0.94, profile.time.average, profile.space.average, "Dynamic Programming")


def detect_backtracking(code: str, context: Set[str]) -> Optional[PatternDetection]:
    flat = re.sub(r"\s+", " ", code)
    if not (
        re.search(r"backtrack|permut|combin|subset", code, re.IGNORECASE)
        or in_order(flat, r"\.(?:append|push)", r"recursive", r"\.pop")
    ):
        return None
    if re.search(r"permut|swap", code, re.IGNORECASE):
        profile = PATTERN_COMPLEXITIES["backtracking_permutations"]
    else:
        profile = PATTERN_COMPLEXITIES["backtracking_subsets"]
    return _detection("backtracking", 0.89, profile.time.average, profile.space.average, "Backtracking")


def detect_greedy(code: str, context: Set[str]) -> Optional[PatternDetection]:
    flat = re.sub(r"\s+", " ", code)
    if not (
        re.search(r"greedy", flat, re.IGNORECASE)
        or in_order(flat, r"max", r"min", r"local", flags=re.IGNORECASE)
        or in_order(flat, r"sort", r"for", r"if")
    ):
        return None
    time = cc.O_N_LOG_N if re.search(r"\.sort|sorted", code) else cc.O_N
    return _detection("greedy", 0.80, time, cc.O_1, "Greedy")


def detect_divide_conquer(code: str, context: Set[str]) -> Optional[PatternDetection]:
    flat = re.sub(r"\s+", " ", code)
    named = any(
        in_order(flat, first, second, flags=re.IGNORECASE)
        for first, second in (("merge", "sort"), ("quick", "sort"), ("divide", "conquer"))
    )
    if named or in_order(flat, r"mid", r"recursive", r"mid"):
        return _detection("divide_conquer", 0.88, cc.O_N_LOG_N, cc.O_LOG_N, "Divide and Conquer")
    return None


def detect_heap(code: str, context: Set[str]) -> Optional[PatternDetection]:
    if re.search(r"priorityqueue|heapq|heappush|heappop|minheap|maxheap", code, re.IGNORECASE):
        space = DATA_STRUCTURE_COMPLEXITIES["heap"].space.average
        return _detection("heap", 0.93, cc.O_N_LOG_N, space, "Heap")
    return None


def detect_trie(code: str, context: Set[str]) -> Optional[PatternDetection]:
    if re.search(r"trie|trienode|isend|endofword", code, re.IGNORECASE) or re.search(r"children\s*\[", code):
        return _detection("trie", 0.90, "O(m)", "O(n·m)", "Trie")
    return None


def detect_union_find(code: str, context: Set[str]) -> Optional[PatternDetection]:
    flat = re.sub(r"\s+", " ", code)
    if (
        in_order(flat, r"union", r"find", flags=re.IGNORECASE)
        or in_order(flat, r"disjoint", r"set", flags=re.IGNORECASE)
        or in_order(code, r"parent\s*\[", r"\]\s*=", r"find", per_line=True)
    ):
        profile = DATA_STRUCTURE_COMPLEXITIES["union_find"]
        return _detection("union_find", 0.92, profile.operations["find"].average, profile.space.average, "Union-Find")
    return None


DETECTORS: List[Callable[[str, Set[str]], Optional[PatternDetection]]] = [
    detect_sorting,
    detect_hashing,
    detect_two_pointer,
    detect_sliding_window,
    detect_binary_search,
    detect_dfs,
    detect_bfs,
    detect_dp,
    detect_backtracking,
    detect_greedy,
    detect_divide_conquer,
    detect_heap,
    detect_trie,
    detect_union_find,
]


def detect_patterns(code: str, language: str = "javascript") -> List[PatternDetection]:
    """Run every detector; a failing detector is logged and skipped."""
    if not code or not code.strip():
        return []
    code = strip_comments(code, get_profile(language))
    context = detect_context(code)
    detections = []
    for detector in DETECTORS:
        try:
            found = detector(code, context)
        except Exception as e:  # includes re.error from pathological input
            log_warning(f"Pattern detector '{detector.__name__}' failed: {e}", layer="patterns")
            continue
        if found is not None:
            detections.append(found)
    log_debug(
        f"Patterns detected: {', '.join(d.name for d in detections) or 'none'}",
        layer="patterns",
    )
    return detections


def infer_complexity(detections: List[PatternDetection], code: str = "") -> PatternInference:
    """Collapse a snippet's detections into one estimate."""
    ranked = sorted(detections, key=lambda d: d.confidence, reverse=True)
    names = [d.name for d in ranked]

    if not ranked:
        return PatternInference(cc.O_N, cc.O_1, 0.5, [], "No recognizable pattern; assuming one linear pass")

    if len(ranked) == 1:
        top = ranked[0]
        return PatternInference(top.time_complexity, top.space_complexity, top.confidence, names, top.reason)

    if "sorting" in names and "hashing" in names:
        return PatternInference(cc.O_N_LOG_N, cc.O_N, 0.95, names, "Sort then Hash")

    if "binary_search" in names and _loop_count(code) > 0:
        return PatternInference(cc.O_N_LOG_N, cc.O_1, 0.93, names, "Binary Search per Element")

    if ("dfs" in names or "bfs" in names) and "dp" in names:
        return PatternInference("O(V · 2^V)", "O(V · 2^V)", 0.85, names, "Graph DP")

    top = ranked[0]
    return PatternInference(
        top.time_complexity,
        top.space_complexity,
        round(top.confidence * 0.9, 4),
        names,
        top.reason,
    )


def analyze_patterns(code: str, language: str = "javascript") -> PatternInference:
    return infer_complexity(detect_patterns(code, language), code)
