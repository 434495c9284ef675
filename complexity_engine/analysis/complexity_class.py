"""
Canonical Big-O classes and the total order used for every dominance
comparison in the engine.
"""

import re
from typing import Iterable, Optional

O_1 = "O(1)"
O_LOG_LOG_N = "O(log log n)"
O_LOG_N = "O(log n)"
O_SQRT_N = "O(√n)"
O_N = "O(n)"
O_V_E = "O(V + E)"
O_N_LOG_LOG_N = "O(n log log n)"
O_N_LOG_N = "O(n log n)"
O_N2 = "O(n²)"
O_N2_LOG_N = "O(n² log n)"
O_N3 = "O(n³)"
O_2_N = "O(2^n)"
O_K_N = "O(k^n)"
O_N_FACT = "O(n!)"

# Lowest to highest
ORDER = (
    O_1,
    O_LOG_LOG_N,
    O_LOG_N,
    O_SQRT_N,
    O_N,
    O_V_E,
    O_N_LOG_LOG_N,
    O_N_LOG_N,
    O_N2,
    O_N2_LOG_N,
    O_N3,
    O_2_N,
    O_K_N,
    O_N_FACT,
)

_SEPARATORS = re.compile(r"[\s*·×]+")
_PRODUCT_OF_SYMBOLS = re.compile(r"o\(([a-z])([a-z])\)")


def normalize(label: Optional[str]) -> str:
    """
    Comparison key for a complexity label.

    "O(n^2)", "o(n²)" and "O( n * n )" do not all collapse, but spelling
    variants of the same class do: case, whitespace, multiplication signs,
    "^2"/"^3" exponents and "sqrt(n)".
    """
    if not label:
        return ""
    text = _SEPARATORS.sub("", str(label).strip()).lower()
    if not text.startswith("o("):
        text = f"o({text})"
    text = text.replace("^2", "²").replace("^3", "³")
    text = re.sub(r"sqrt\((\w+)\)", r"√\1", text)
    return text


_RANKS = {normalize(label): index for index, label in enumerate(ORDER)}


def canonical(label: Optional[str]) -> str:
    """Return the canonical spelling of a label, or the label itself."""
    key = normalize(label)
    if key in _RANKS:
        return ORDER[_RANKS[key]]
    return (label or "").strip()


def is_known(label: Optional[str]) -> bool:
    return normalize(label) in _RANKS


def rank(label: Optional[str]) -> int:
    """Position of a label in ORDER; unknown labels rank as O(n)."""
    key = normalize(label)
    if key in _RANKS:
        return _RANKS[key]
    if "!" in key:
        return _RANKS[normalize(O_N_FACT)]
    if "2^n" in key:
        return _RANKS[normalize(O_2_N)]
    if re.search(r"(\d|k)\^", key):
        return _RANKS[normalize(O_K_N)]
    if _PRODUCT_OF_SYMBOLS.fullmatch(key):
        return _RANKS[normalize(O_N2)]
    return _RANKS[normalize(O_N)]


def is_exponential(label: Optional[str]) -> bool:
    key = normalize(label)
    return bool(re.search(r"(\d|k)\^", key)) or "!" in key


def compare(a: Optional[str], b: Optional[str]) -> int:
    """-1, 0 or 1 as a ranks below, equal to or above b."""
    rank_a, rank_b = rank(a), rank(b)
    return (rank_a > rank_b) - (rank_a < rank_b)


def same_complexity(a: Optional[str], b: Optional[str]) -> bool:
    return normalize(a) == normalize(b)


def max_complexity(labels: Iterable[str]) -> str:
    """Highest ranked label; the first one wins ties."""
    best = None
    for label in labels:
        if best is None or rank(label) > rank(best):
            best = label
    return best if best is not None else O_1
