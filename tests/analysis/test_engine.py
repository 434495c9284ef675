import time

import pytest

from complexity_engine.analysis import analyze, validate_against_claim
from complexity_engine.core.config import EngineConfig

NO_TRUTH = EngineConfig.from_dict({"ground_truth": False})

SUM = """
def total(nums):
    s = 0
    for x in nums:
        s += x
    return s
"""

PAIRS = """
def has_duplicate(nums):
    for i in range(len(nums)):
        for j in range(i + 1, len(nums)):
            if nums[i] == nums[j]:
                return True
    return False
"""

SEARCH = """
def find(nums, target):
    lo, hi = 0, len(nums) - 1
    while lo <= hi:
        mid = (lo + hi) // 2
        if nums[mid] == target:
            return mid
        if nums[mid] < target:
            lo = mid + 1
        else:
            hi = mid - 1
    return -1
"""

SORT_AND_SUM = """
def sort_and_sum(values):
    ordered = sorted(values)
    total = 0
    for v in ordered:
        total += v
    return total
"""

MERGE_SORT = """
def merge_sort(arr):
    if len(arr) <= 1:
        return arr
    mid = len(arr) // 2
    left = merge_sort(arr[:mid])
    right = merge_sort(arr[mid:])
    return merge(left, right)
"""

WARMER = """
def next_warmer(temps):
    answer = [0] * len(temps)
    stack = []
    for i, t in enumerate(temps):
        while stack and temps[stack[-1]] < t:
            j = stack.pop()
            answer[j] = i - j
        stack.append(i)
    return answer
"""

IS_PAL = """
function isPal(s) {
  let left = 0, right = s.length - 1;
  while (left < right) {
    if (s[left] !== s[right]) return false;
    left++;
    right--;
  }
  return true;
}
"""

FIB = """
def fib(n):
    if n < 2:
        return n
    return fib(n - 1) + fib(n - 2)
"""

PAIR_INDICES = """
def pair_indices(nums, target):
    seen = {}
    for i, x in enumerate(nums):
        if target - x in seen:
            return [seen[target - x], i]
        seen[x] = i
    return []
"""


# analyze


def test_single_loop():
    result = analyze(SUM, language="python")
    assert result.time_complexity == "O(n)"
    assert result.space_complexity == "O(1)"
    assert result.source == "ruleEngine"
    assert result.pattern == "single_loop"
    assert result.confidence == 1.0


def test_nested_loops():
    result = analyze(PAIRS, language="python")
    assert result.time_complexity == "O(n²)"
    assert result.space_complexity == "O(1)"
    assert result.pattern == "nested_loops"


def test_binary_search():
    result = analyze(SEARCH, language="python")
    assert result.time_complexity == "O(log n)"
    assert result.space_complexity == "O(1)"
    assert result.confidence == 0.95


def test_sorting_dominates_loop():
    result = analyze(SORT_AND_SUM, language="python")
    assert result.time_complexity == "O(n log n)"
    assert result.pattern == "sorting"
    assert result.confidence == 0.98


def test_monotonic_stack_is_linear():
    result = analyze(WARMER, language="python")
    assert result.time_complexity == "O(n)"
    assert result.space_complexity == "O(n)"
    assert "Monotonic Stack" in result.time_complexity_reason


def test_two_pointers_javascript():
    result = analyze(IS_PAL, language="javascript")
    assert result.time_complexity == "O(n)"
    assert result.space_complexity == "O(1)"
    assert result.pattern == "two_pointers"


def test_tree_recursion():
    result = analyze(FIB, language="python")
    assert result.time_complexity == "O(2^n)"
    assert result.space_complexity == "O(n)"
    assert result.confidence == 0.7


def test_memoization_clamped_to_linear():
    code = "from functools import lru_cache\n\n@lru_cache(maxsize=None)" + FIB
    result = analyze(code, language="python")
    assert result.time_complexity == "O(n)"
    assert result.space_complexity == "O(n)"
    assert len(result.corrections_applied) == 1
    assert result.corrections_applied[0].reason.startswith("Correction: Dynamic Programming")


def test_hazard_is_terminal():
    result = analyze(MERGE_SORT, language="python")
    assert result.time_complexity == "O(n log n)"
    assert result.space_complexity == "O(n)"
    assert result.source == "hazard:merge_sort"
    assert result.confidence == 0.96


def test_hazards_can_be_disabled():
    config = EngineConfig.from_dict({"hazards_enabled": False})
    result = analyze(MERGE_SORT, language="python", config=config)
    assert result.source == "ruleEngine"


def test_empty_code_uses_default():
    for code in ("", "   ", "x = 1"):
        result = analyze(code, language="python")
        assert result.time_complexity == "O(n)"
        assert result.space_complexity == "O(1)"
        assert result.source == "default"
        assert result.confidence == 0.5


def test_unknown_language_does_not_raise():
    result = analyze("let y = 2;", language="cobol")
    assert result.source == "default"


def test_ground_truth_title_keeps_matching_approach():
    result = analyze(SEARCH, language="python", problem_title="Binary Search")
    assert result.source == "groundTruth"
    assert result.approach == "optimal"
    assert result.time_complexity == "O(log n)"
    assert result.confidence == 1.0
    assert result.corrections_applied == []


def test_ground_truth_picks_implemented_approach():
    result = analyze(PAIRS, language="python", problem_title="Two Sum")
    assert result.source == "groundTruth"
    assert result.approach == "brute_force"
    assert result.time_complexity == "O(n²)"
    assert result.note.startswith("No intermediate approach")


def test_ground_truth_overrides_engine():
    result = analyze(PAIRS, language="python", problem_title="Binary Search")
    assert result.time_complexity == "O(log n)"
    assert result.approach == "optimal"
    correction = result.corrections_applied[0]
    assert correction.field == "time_complexity"
    assert correction.old_value == "O(n²)"
    assert correction.new_value == "O(log n)"
    assert correction.reason == "Ground truth: Binary search on sorted array"


def test_ground_truth_fingerprint():
    result = analyze(PAIR_INDICES, language="python")
    assert result.source == "groundTruth"
    assert result.confidence == 0.95
    assert result.time_complexity == "O(n)"
    assert result.space_complexity == "O(n)"


def test_ground_truth_can_be_disabled():
    config = EngineConfig.from_dict({"ground_truth": False})
    result = analyze(PAIR_INDICES, language="python", config=config)
    assert result.source == "ruleEngine"
    assert result.time_complexity == "O(n)"


def test_title_overrides_hazard():
    result = analyze(MERGE_SORT, language="python", problem_title="Binary Search")
    assert result.source == "groundTruth"
    assert result.time_complexity == "O(log n)"


# rule engine scenarios

WEIGHTED = """
def weighted_total(nums, w):
    total = 0
    for i in range(len(nums)):
        total += nums[i] * w
    return total
"""

DOT = """
int dot(int[] a, int[] b, int n) {
    int c = 0;
    for (int i = 0; i < n; i++) {
        for (int j = 0; j < n; j++) {
            c += a[i] * a[j];
        }
    }
    return c;
}
"""

WIDEST_GAP = """
def widest_gap(nums, k):
    nums.sort()
    left = 0
    best = 0
    for right in range(len(nums)):
        while nums[right] - nums[left] > k:
            left += 1
        width = right - left + 1
        best = max(best, width)
    return best
"""

BISECT_IN_LOOP = """
import bisect

def count_smaller(sorted_nums, nums):
    out = 0
    for x in nums:
        out += bisect.bisect_left(sorted_nums, x)
    return out
"""

SPLIT_AND_JOIN = """
def sort_range(nums, first, last):
    if last - first <= 1:
        return nums[first:last]
    mid = (first + last) // 2
    head = sort_range(nums, first, mid)
    tail = sort_range(nums, mid, last)
    out = []
    p = q = 0
    while p < len(head) and q < len(tail):
        if head[p] <= tail[q]:
            out.append(head[p])
            p += 1
        else:
            out.append(tail[q])
            q += 1
    out.extend(head[p:])
    out.extend(tail[q:])
    return out
"""

FIRST_ITEM = """
def first_item(nums):
    for x in nums:
        return x
    return None
"""

MARK_PRIMES = """
def prime_total(n):
    is_prime = [True] * (n + 1)
    total = 0
    for i in range(2, n + 1):
        if is_prime[i]:
            total += 1
            for j in range(i * i, n + 1, i):
                is_prime[j] = False
    return total
"""

JOIN_WORDS = """
def join_words(words):
    text = ""
    for w in words:
        text += w
    return text
"""

SMALLEST_FACTOR = """
def smallest_factor(num):
    d = 2
    while d * d <= num:
        if num % d == 0:
            return d
        d += 1
    return num
"""

CHAIN = """
def chain_length(values, pos):
    if pos >= len(values):
        return 0
    best = 0
    for nxt in range(pos + 2, len(values)):
        best = max(best, chain_length(values, nxt))
    return best + 1
"""


def test_indexed_product_is_not_an_allocation():
    result = analyze(WEIGHTED, language="python", config=NO_TRUTH)
    assert result.time_complexity == "O(n)"
    assert result.space_complexity == "O(1)"


def test_java_nested_product_space():
    result = analyze(DOT, language="java", config=NO_TRUTH)
    assert result.time_complexity == "O(n²)"
    assert result.space_complexity == "O(1)"


def test_window_after_sort_is_linear():
    result = analyze(WIDEST_GAP, language="python", config=NO_TRUTH)
    assert result.source == "ruleEngine"
    assert result.time_complexity == "O(n)"
    assert result.pattern == "sliding_window"
    assert result.corrections_applied[0].reason.startswith("Correction: Sliding Window")


def test_library_search_in_loop():
    result = analyze(BISECT_IN_LOOP, language="python", config=NO_TRUTH)
    assert result.time_complexity == "O(n log n)"
    assert result.space_complexity == "O(1)"
    assert result.pattern == "binary_search"


@pytest.mark.parametrize(
    "code, time_complexity, space_complexity",
    [
        (SPLIT_AND_JOIN, "O(n log n)", "O(n)"),
        (FIRST_ITEM, "O(1)", "O(1)"),
        (MARK_PRIMES, "O(n log log n)", "O(n)"),
        (JOIN_WORDS, "O(n²)", "O(n)"),
        (SMALLEST_FACTOR, "O(√n)", "O(1)"),
        (CHAIN, "O(n²)", "O(n)"),
    ],
)
def test_rule_engine_scenarios(code, time_complexity, space_complexity):
    result = analyze(code, language="python", config=NO_TRUTH)
    assert result.source == "ruleEngine"
    assert result.time_complexity == time_complexity
    assert result.space_complexity == space_complexity


def test_concatenation_total_space():
    result = analyze(JOIN_WORDS, language="python", config=NO_TRUTH)
    assert result.space_metrics.peak == "O(n)"
    assert result.space_metrics.total == "O(n²)"


def test_large_input_is_bounded():
    code = "\n".join(IS_PAL.replace("isPal", f"isPal{i}") for i in range(80))
    assert len(code) > 10_000
    started = time.perf_counter()
    result = analyze(code, language="javascript")
    assert time.perf_counter() - started < 5.0
    assert result.source != "default"


# validate_against_claim


def test_claim_confirmed():
    validation = validate_against_claim(SUM, "python", "o(n)", "O(1)")
    assert validation.valid
    assert not validation.should_override
    assert validation.critical_errors == []
    assert validation.corrected_result.source == "claim"


def test_deterministic_pattern_overrides_claim():
    validation = validate_against_claim(PAIRS, "python", "O(n)", "O(1)")
    assert not validation.valid
    assert validation.should_override
    assert not validation.time_match
    assert validation.space_match
    result = validation.corrected_result
    assert result.time_complexity == "O(n²)"
    assert [c.field for c in result.corrections_applied] == ["time_complexity"]
    assert result.corrections_applied[0].reason == "Engine analysis (nested_loops)"


def test_non_deterministic_claim_is_kept():
    validation = validate_against_claim(SUM, "python", "O(n log n)", "O(1)")
    assert not validation.valid
    assert not validation.should_override
    assert validation.corrected_result.time_complexity == "O(n log n)"
    assert validation.corrected_result.source == "claim"


def test_sorting_ignored_is_critical():
    validation = validate_against_claim(SORT_AND_SUM, "python", "O(n)", "O(1)")
    assert validation.critical_errors == ["Sorting operation ignored in complexity"]
    assert validation.should_override
    assert validation.corrected_result.time_complexity == "O(n log n)"


def test_two_pointers_quadratic_claim_is_critical():
    validation = validate_against_claim(IS_PAL, "javascript", "O(n^2)", "O(1)")
    assert "Two pointers incorrectly marked as O(n²)" in validation.critical_errors
    assert validation.corrected_result.time_complexity == "O(n)"


def test_ignored_auxiliary_space_is_critical():
    validation = validate_against_claim(WARMER, "python", "O(n)", "O(1)")
    assert validation.critical_errors == [
        "Auxiliary space usage ignored (Stack/Queue/Recursion/Map detected)"
    ]
    result = validation.corrected_result
    assert result.space_complexity == "O(n)"
    assert [c.field for c in result.corrections_applied] == ["space_complexity"]


def test_hazard_verdict_is_authoritative():
    validation = validate_against_claim(MERGE_SORT, "python", "O(n^2)", "O(n)")
    assert validation.should_override
    assert validation.corrected_result.time_complexity == "O(n log n)"
    assert validation.corrected_result.source == "hazard:merge_sort"
