import time

from complexity_engine.analysis.hazards import HAZARDS, HazardPattern, match_hazard

MERGE_SORT = """
def merge_sort(arr):
    if len(arr) <= 1:
        return arr
    mid = len(arr) // 2
    left = merge_sort(arr[:mid])
    right = merge_sort(arr[mid:])
    return merge(left, right)
"""

SUM = """
def total(nums):
    s = 0
    for x in nums:
        s += x
    return s
"""


def test_merge_sort_recognized():
    result = match_hazard(MERGE_SORT)
    assert result is not None
    assert result.time_complexity == "O(n log n)"
    assert result.space_complexity == "O(n)"
    assert result.source == "hazard:merge_sort"
    assert result.pattern == "merge_sort"
    assert result.confidence == 0.96


def test_named_function_recognized():
    result = match_hazard("function reverseArray(a) { return a; }")
    assert result.source == "hazard:reverse_array"
    assert result.time_complexity == "O(n)"
    assert result.space_complexity == "O(1)"


def test_plain_code_not_matched():
    assert match_hazard(SUM) is None
    assert match_hazard("") is None
    assert match_hazard("   ") is None


def test_first_match_wins():
    first = HazardPattern("first", lambda c: "x" in c, "O(1)", "first", "O(1)", "first", 0.9)
    second = HazardPattern("second", lambda c: True, "O(n)", "second", "O(n)", "second", 0.9)
    assert match_hazard("x = 1", [first, second]).source == "hazard:first"
    assert match_hazard("y = 1", [first, second]).source == "hazard:second"


def test_failing_recognizer_is_skipped():
    def broken(code):
        raise ValueError("boom")

    hazards = [
        HazardPattern("broken", broken, "O(1)", "", "O(1)", "", 0.9),
        HazardPattern("fallback", lambda c: True, "O(n)", "linear", "O(1)", "constant", 0.8),
    ]
    result = match_hazard("anything", hazards)
    assert result.source == "hazard:fallback"
    assert result.space_metrics.peak == "O(1)"


TRIPLETS = """
function triplets(nums) {
  nums.sort((a, b) => a - b);
  const out = [];
  for (let i = 0; i < nums.length; i++) {
    let left = i + 1, right = nums.length - 1;
    while (left < right) {
      const s = nums[i] + nums[left] + nums[right];
      if (s === 0) { out.push([nums[i], nums[left], nums[right]]); left++; right--; }
      else if (s < 0) left++;
      else right--;
    }
  }
  return out;
}
"""

WALK = """
function walk(matrix) {
  const out = [];
  let top = 0, bottom = matrix.length - 1;
  let left = 0, right = matrix[0].length - 1;
  while (top <= bottom && left <= right) {
    for (let j = left; j <= right; j++) out.push(matrix[top][j]);
    top++;
    for (let i = top; i <= bottom; i++) out.push(matrix[i][right]);
    right--;
  }
  return out;
}
"""

WEIGHT = """
function hammingWeight(n) {
  let count = 0, i = 0;
  while (n > 0 && i < 32) {
    count += n & 1;
    n >>>= 1;
    i++;
  }
  return count;
}
"""


def test_table_is_immutable():
    assert isinstance(HAZARDS, tuple)


def test_names_are_unique():
    names = [hazard.name for hazard in HAZARDS]
    assert len(set(names)) == len(names)


def test_three_sum_shape():
    result = match_hazard(TRIPLETS)
    assert result.source == "hazard:three_sum"
    assert result.time_complexity == "O(n²)"


def test_spiral_walk():
    assert match_hazard(WALK).source == "hazard:spiral_matrix"


def test_bit_count_variants_are_told_apart():
    fixed = match_hazard(WEIGHT)
    assert fixed.source == "hazard:bit_count_fixed_width"
    assert fixed.time_complexity == "O(1)"

    unbounded = match_hazard(WEIGHT.replace(" && i < 32", ""))
    assert unbounded.source == "hazard:bit_count"
    assert unbounded.time_complexity == "O(log n)"


def test_large_input_finishes_quickly():
    chunk = "for (let i = 0; i < n; i++) { while (left < n) { left++; } }\n"
    code = chunk * 300
    start = time.perf_counter()
    match_hazard(code)
    match_hazard(code.replace("\n", " "))
    assert time.perf_counter() - start < 5.0
