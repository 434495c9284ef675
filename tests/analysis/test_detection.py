import time

from complexity_engine.analysis.detection import CodeScan, build_scan, in_order
from complexity_engine.analysis.languages import get_profile

PAIRS = """
def has_duplicate(nums):
    for i in range(len(nums)):
        for j in range(i + 1, len(nums)):
            if nums[i] == nums[j]:
                return True
    return False
"""


def test_in_order_follows_sequence():
    assert in_order("for a\nwhile b\nleft right", r"for", r"while", r"left", r"right")
    assert not in_order("right left", r"left", r"right")


def test_in_order_per_line():
    assert not in_order("left\nright", r"left", r"right", per_line=True)
    assert in_order("x\nleft = right", r"left", r"right", per_line=True)


def test_in_order_is_linear():
    text = "for while left " * 20_000
    started = time.perf_counter()
    assert not in_order(text, r"for", r"while", r"left", r"right")
    assert time.perf_counter() - started < 1.0


def test_enclosed_blocks():
    scan = build_scan(PAIRS, get_profile("python"))
    outer = next(b for b in scan.blocks if b.depth == 1)
    inner = next(b for b in scan.blocks if b.depth == 2)
    assert scan.enclosed(outer) == [inner]
    assert scan.enclosed(inner) == []
    assert scan.enclosing(inner) == [outer]


def test_scan_keeps_only_source():
    assert not hasattr(CodeScan, "lower")
