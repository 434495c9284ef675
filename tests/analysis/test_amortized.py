from complexity_engine.analysis.amortized import (
    MONOTONIC_STACK,
    QUEUE_TRAVERSAL,
    SLIDING_WINDOW_HASHSET,
    TWO_POINTERS,
    detect_amortized,
)


def test_monotonic_stack():
    code = """
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
    result = detect_amortized(code, "python")
    assert result.pattern == MONOTONIC_STACK
    assert result.time_complexity == "O(n)"
    assert result.space_complexity == "O(n)"


def test_queue_traversal():
    code = """
function visit(start, adj) {
  const queue = [start];
  const seen = new Set([start]);
  while (queue.length) {
    const node = queue.shift();
    for (const next of adj[node]) {
      if (!seen.has(next)) { seen.add(next); queue.push(next); }
    }
  }
}
"""
    assert detect_amortized(code, "javascript").pattern == QUEUE_TRAVERSAL


def test_two_pointers():
    code = """
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
    result = detect_amortized(code, "javascript")
    assert result.pattern == TWO_POINTERS
    assert result.space_complexity == "O(1)"


def test_hash_set_window():
    code = """
def longest_unique(s):
    window = set()
    best = left = 0
    for right in range(len(s)):
        while s[right] in window:
            window.remove(s[left])
            left += 1
        window.add(s[right])
        best = max(best, right - left + 1)
    return best
"""
    result = detect_amortized(code, "python")
    assert result.pattern == SLIDING_WINDOW_HASHSET
    assert result.space_complexity == "O(k)"


def test_no_shape():
    assert detect_amortized("def f(x):\n    return x + 1\n", "python") is None
    assert detect_amortized("", "python") is None
