"""
Amortized cost detector.

Recognizes loops whose total work is linear even though they are nested:
monotonic stacks, queue traversals, two pointers and hash-set windows.
"""

import re
from typing import Optional

from complexity_engine.analysis import detection
from complexity_engine.analysis.detection import CodeScan
from complexity_engine.analysis.languages import get_profile
from complexity_engine.analysis.models import AmortizedResult
from complexity_engine.core.logging import log_debug

MONOTONIC_STACK = "MONOTONIC_STACK"
QUEUE_TRAVERSAL = "QUEUE_TRAVERSAL"
TWO_POINTERS = "TWO_POINTERS"
SLIDING_WINDOW_HASHSET = "SLIDING_WINDOW_HASHSET"

_PUSH = re.compile(
    r"stack\.push|stack\.add|\.append\s*\(|\.push_back\s*\(|\.push\s*\(|\.addLast\s*\("
)
_POP = re.compile(r"stack\.pop|\.pop\s*\(\s*\)|\.pop_back\s*\(|\.removeLast\s*\(")
_ENQUEUE = re.compile(
    r"queue\.(?:push|add|append)|enqueue|\.offer\s*\(|deque\.append|\bq\.(?:append|push)"
)
_DEQUEUE = re.compile(
    r"queue\.(?:pop|shift)|dequeue|\.poll\s*\(|\.popleft\s*\(|\.shift\s*\(|\bq\.(?:pop|shift)"
)
_QUEUE_NAMES = re.compile(r"\b(?:queue|q|dq|deque|frontier)\b", re.IGNORECASE)


def _line_count(pattern, code: str) -> int:
    return sum(1 for line in code.split("\n") if pattern.search(line))


def _monotonic_stack(scan: CodeScan) -> bool:
    pushes = _line_count(_PUSH, scan.code)
    pops = _line_count(_POP, scan.code)
    drains = any(detection.drains_stack(b) for b in scan.while_blocks())
    return bool(pushes and pops and drains and detection.forward_only(scan))


def _queue_traversal(scan: CodeScan) -> bool:
    enqueues = _line_count(_ENQUEUE, scan.code)
    dequeues = _line_count(_DEQUEUE, scan.code)
    drains = any(_QUEUE_NAMES.search(b.header) for b in scan.while_blocks())
    return bool(enqueues and dequeues and drains)


def _two_pointers(scan: CodeScan) -> bool:
    left = _line_count(detection.LEFT_MOVE, scan.code)
    right = _line_count(detection.RIGHT_MOVE, scan.code)
    return bool(left and right and detection.forward_only(scan))


def _hash_set_window(scan: CodeScan) -> bool:
    return detection.hash_set_window(scan) and detection.forward_only(scan)


SHAPES = [
    (
        MONOTONIC_STACK,
        _monotonic_stack,
        "O(n)",
        "O(n)",
        "Each element is pushed and popped at most once, so the inner loop is amortized O(1).",
    ),
    (
        QUEUE_TRAVERSAL,
        _queue_traversal,
        "O(n)",
        "O(n)",
        "Each element is enqueued and dequeued once.",
    ),
    (
        TWO_POINTERS,
        _two_pointers,
        "O(n)",
        "O(1)",
        "Both pointers only move forward, so together they take at most n steps.",
    ),
    (
        SLIDING_WINDOW_HASHSET,
        _hash_set_window,
        "O(n)",
        "O(k)",
        "Each element enters and leaves the window set at most once.",
    ),
]


def detect_amortized(
    code: str, language: str = "javascript", scan: Optional[CodeScan] = None
) -> Optional[AmortizedResult]:
    """Return the first amortized shape found in code, or None."""
    if not code or not code.strip():
        return None
    if scan is None:
        scan = detection.build_scan(code, get_profile(language))

    for name, check, time_complexity, space_complexity, reason in SHAPES:
        if detection.isolated(f"amortized.{name.lower()}", check, scan):
            log_debug(f"Amortized shape detected: {name}", layer="amortized")
            return AmortizedResult(
                amortized=True,
                pattern=name,
                time_complexity=time_complexity,
                space_complexity=space_complexity,
                reason=reason,
            )
    return None
