"""
Hazard patterns: exact recognizers for canonical algorithms that the
generic structural rules are known to misclassify.

The table is ordered; the first matching recognizer wins and its result is
terminal. Predicates carry their own mutual-exclusion guards.
"""

import re
from dataclasses import dataclass
from typing import Callable, Optional, Sequence, Tuple

from complexity_engine.analysis.detection import in_order
from complexity_engine.analysis.models import ComplexityResult, SpaceMetrics
from complexity_engine.core.constants import HAZARD_SOURCE_PREFIX
from complexity_engine.core.logging import log_info, log_warning

FOR_HEADER = re.compile(r"for\s*\([^)]+\)")


def has(code: str, *patterns: str) -> bool:
    """Case-insensitive: any of the patterns occurs in code."""
    return any(re.search(p, code, re.IGNORECASE) for p in patterns)


def has_cs(code: str, *patterns: str) -> bool:
    """Case-sensitive variant of has()."""
    return any(re.search(p, code) for p in patterns)


def has_all(code: str, *patterns: str) -> bool:
    return all(re.search(p, code, re.IGNORECASE) for p in patterns)


def has_seq(code: str, *parts: str, case_sensitive: bool = False) -> bool:
    """The parts occur in this order on a single line."""
    return in_order(code, *parts, flags=0 if case_sensitive else re.IGNORECASE, per_line=True)


def for_loops(code: str) -> int:
    return len(re.findall(r"\bfor\s*\(|\bfor\s+\w+(?:\s*,\s*\w+)?\s+in\b", code))


@dataclass(frozen=True)
class HazardPattern:
    name: str
    predicate: Callable[[str], bool]
    time: str
    time_reason: str
    space: str
    space_reason: str
    confidence: float

    def result(self) -> ComplexityResult:
        return ComplexityResult(
            time_complexity=self.time,
            time_complexity_reason=self.time_reason,
            space_complexity=self.space,
            space_complexity_reason=self.space_reason,
            space_metrics=SpaceMetrics(peak=self.space, total=self.space),
            pattern=self.name,
            confidence=self.confidence,
            source=f"{HAZARD_SOURCE_PREFIX}{self.name}",
        )


# Guards shared by several recognizers


def _four_sum_marker(c: str) -> bool:
    return has(c, r"foursum|four_sum|4sum|nums\.length\s*-\s*3|len\(nums\)\s*-\s*3")


def _double_for(c: str) -> bool:
    headers = list(FOR_HEADER.finditer(c))
    for first, second in zip(headers, headers[1:]):
        if c.find("}", first.end(), second.start()) == -1:
            return True
    return "{" not in c and for_loops(c) >= 2


def _sieve_marker(c: str) -> bool:
    return has(c, r"sieve|primes?\[|j\s*\+=\s*i\b|j\s*=\s*i\s*\*\s*i|range\(\s*i\s*\*\s*i")


def _floyd_warshall_marker(c: str) -> bool:
    return has(c, r"floydwarshall|floyd_warshall|warshall|dist\[i\]\[k\]")


def _recursive_binary_search(c: str) -> bool:
    return (
        has(c, r"function\s+\w*(?:binarysearch|bsearch)\w*\s*\(|def\s+\w*(?:binary_?search|bsearch)\w*\s*\(")
        and has_cs(c, r"mid\s*=")
        and has_seq(c, r"return\s+(?:self\.)?\w+\s*\(", r"mid", r"\)")
        and not has(c, r"\.slice|\.sort|\bsorted\s*\(")
    )


def _heap_sort(c: str) -> bool:
    return has(c, r"heapsort|heap_sort") or (
        has(c, r"heapify")
        and has(c, r"for\s*\(|for\s+\w+\s+in\b")
        and (has_seq(c, r"\[\s*0\s*\]", r"=", r"\[", r"\]") or has_seq(c, r"\[", r"\]", r"=", r"\[\s*0\s*\]"))
    )


def _meeting_rooms(c: str) -> bool:
    return (
        (has(c, r"meeting|interval|schedule") and has(c, r"\.sort\s*\(|\bsorted\s*\("))
        or has_seq(c, r"starts|ends", r"sort")
        or has_seq(c, r"\.map", r"\.sort")
    )


def _three_sum(c: str) -> bool:
    if _four_sum_marker(c) or _double_for(c):
        return False
    return has(c, r"threesum|three_sum|3sum") or (
        has(c, r"\.sort\s*\(|\bsorted\s*\(")
        and has(c, r"for\s*\(|for\s+\w+\s+in\b")
        and (has_seq(c, r"left", r"right") or has_seq(c, r"lo", r"hi"))
        and has(c, r"while\s*\(?\s*(?:left|lo|l)\s*<\s*(?:right|hi|r)\b")
    )


def _expand_around_center(c: str) -> bool:
    return (
        has(c, r"expand")
        and (has_seq(c, r"while", r"\bl\b", r"\br\b") or has_seq(c, r"while", r"left", r"right"))
        and (has_seq(c, r"s\[l\]", r"s\[r\]") or has_seq(c, r"s\[left\]", r"s\[right\]"))
    ) or (
        has(c, r"longestpalindrome|longest_palindrome")
        and has(c, r"for\s*\(|for\s+\w+\s+in\b")
        and has(c, r"while")
    )


def _n_queens(c: str) -> bool:
    return (
        has(c, r"nqueens|n_queens|n-queens|solvenqueens")
        or (has(c, r"queen") and has(c, r"backtrack") and has(c, r"isvalid|is_valid|canplace|can_place"))
        or has_all(c, r"board", r"row", r"col", r"backtrack")
    )


def _word_break(c: str) -> bool:
    return has(c, r"wordbreak|word_break") or (
        has(c, r"dp\[")
        and has(c, r"\.substring|\.slice|\.includes|\[\s*\w+\s*:\s*\w+\s*\]")
        and has(c, r"worddict|word_dict|dictionary")
    )


def _merge_k_sorted(c: str) -> bool:
    return has(c, r"mergeklists|merge_k_lists|mergeksorted|merge_k_sorted") or (
        has(c, r"heap|priorityqueue|minheap") and has(c, r"\blists\b|k\s*sorted")
    )


def _merge_sort(c: str) -> bool:
    javascript = (
        has(c, r"function\s+mergesort\s*\(")
        and has_seq(c, r"const\s+m\s*=\s*Math\.floor\(", r"length\s*/\s*2\)", case_sensitive=True)
        and has(c, r"mergesort\s*\(\s*\w+\.slice\(0\s*,\s*m\s*\)\s*\)")
        and has(c, r"mergesort\s*\(\s*\w+\.slice\(m\s*\)\s*\)")
    )
    python = (
        has(c, r"def\s+merge_?sort\s*\(")
        and has(c, r"\bmid\s*=\s*len\(\s*\w+\s*\)\s*//\s*2")
        and has(c, r"merge_?sort\s*\(\s*\w+\[\s*:\s*mid\s*\]\s*\)")
        and has(c, r"merge_?sort\s*\(\s*\w+\[\s*mid\s*:\s*\]\s*\)")
    )
    return javascript or python


def _dijkstra(c: str) -> bool:
    return has(c, r"dijkstra") or (
        has(c, r"shortest|distance") and has(c, r"heap|priorityqueue") and has(c, r"relax|dist\[")
    )


def _kmp(c: str) -> bool:
    return has(c, r"kmp|knuthmorrispratt|knuth_morris_pratt") or (
        has(c, r"\blps\b|failure|prefix") and has(c, r"pattern|text|needle|haystack|\bhay\b|\bneed\b")
    )


def _monotonic_stack(c: str) -> bool:
    return has(c, r"nextgreater|next_greater|previoussmaller|previous_smaller") or (
        in_order(c, r"for\s*\([^)]*\)\s*\{", r"while\s*\([^)]*\.length[^)]*\)", r"\.pop\s*\(", flags=re.I)
        and not has(c, r"dailytemperatures|daily_temperatures|maxslidingwindow|max_sliding_window")
    )


def _daily_temperatures(c: str) -> bool:
    return has(c, r"dailytemperatures|daily_temperatures") or (
        has(c, r"res\s*=\s*Array\([^)]*\)\.fill\(0\)")
        and in_order(c, r"while\s*\([^)]*\.length[^)]*\)", r"res\[", flags=re.I)
    )


def _trie(c: str) -> bool:
    return has(c, r"\btrie\b|prefixtree|prefix_tree") or (
        has(c, r"children|child") and has(c, r"insert|search|startswith") and has(c, r"node|curr|current")
    )


def _fast_power(c: str) -> bool:
    if not has(c, r"fastpow|fast_pow|pow\s*\(|power|exponent"):
        return False
    halving = has_cs(c, r">>=\s*1|=\s*\w+\s*>>\s*1|/=\s*2|//=\s*2") and has_cs(c, r"while\s*[\(\w]")
    squaring = has_cs(c, r"while\s*\(?\s*\w+\s*>\s*0") and has_cs(c, r"(\w+)\s*\*=\s*\1\b")
    return halving or squaring


def _bit_count(c: str) -> bool:
    loop = has_cs(c, r"while\s*\(?\s*n\s*>\s*0|while\s*\(?\s*n\s*[:)]|while\s+n\s*:")
    return (has(c, r"countbits|count_bits|hammingweight|hamming_weight|popcount|bitcount") and loop) or (
        loop and has_cs(c, r"n\s*&\s*1") and has_cs(c, r"n\s*>>=?\s*1|n\s*=\s*n\s*>>")
    )


def _bit_count_fixed(c: str) -> bool:
    return _bit_count(c) and has_cs(c, r"i\s*<\s*32|i\s*<\s*64|range\(\s*(?:32|64)\s*\)")


def _floyd_cycle(c: str) -> bool:
    return not _floyd_warshall_marker(c) and (
        has(c, r"findduplicate|find_duplicate|detectcycle|detect_cycle")
        or (has_cs(c, r"slow\s*=\s*\w+\[\s*slow\s*\]") and has_cs(c, r"fast\s*=\s*\w+\[\s*\w+\[\s*fast\s*\]\s*\]"))
    )


def _tree_serialization(c: str) -> bool:
    return has(c, r"serialize|deserialize") and has_cs(
        c, r"root\.val|node\.val", r"root\.left|root\.right|node\.left|node\.right"
    )


def _lru_cache(c: str) -> bool:
    return has(c, r"lrucache|class\s+lru") or (
        has(c, r"capacity") and has_cs(c, r"cache\.get|cache\.set|cache\.delete|cache\.has|cache\.move_to_end|cache\.popitem")
    )


def _binary_conversion(c: str) -> bool:
    return has(c, r"tobinary|to_binary|dectobin|inttobin|int_to_bin") or (
        has_cs(c, r"while\s*\(?\s*n\s*>\s*0")
        and has_cs(c, r"n\s*%\s*2")
        and (
            has_seq(c, r"n\s*=", r"Math\.floor", r"/\s*2", case_sensitive=True)
            or has_cs(c, r"n\s*=\s*n\s*/\s*2|n\s*/=\s*2|n\s*//=\s*2")
        )
    )


def _course_schedule(c: str) -> bool:
    return has(c, r"courseschedule|course_schedule|canfinish|can_finish|toposort|topo_sort") or (
        has(c, r"indegree|in_degree|indeg") and has(c, r"prerequisites|prereq|edges|adj")
    )


def _clone_graph(c: str) -> bool:
    return has(c, r"clonegraph|clone_graph") or (
        has(c, r"clone|visited") and has(c, r"neighbors") and has(c, r"dfs|bfs")
    )


def _word_ladder(c: str) -> bool:
    return has(c, r"wordladder|word_ladder|ladderlength|ladder_length") or (
        has(c, r"beginword|begin_word|endword|end_word") and has(c, r"queue|bfs")
    )


def _median_sorted_arrays(c: str) -> bool:
    return (
        has(c, r"findmediansortedarrays|find_median_sorted_arrays")
        or has_seq(c, r"median", r"sorted", r"arrays")
        or (
            has(c, r"nums1|nums2")
            and has(c, r"maxleft|max_left|minright|min_right|infinity|inf\b")
            and (has_seq(c, r"while", r"left", r"right") or has_seq(c, r"while", r"lo", r"hi"))
        )
    )


def _floyd_warshall(c: str) -> bool:
    return has(c, r"floydwarshall|floyd_warshall|floyd") or (
        has_seq(c, r"for", r"for", r"for", case_sensitive=True)
        and (
            has_seq(c, r"dist\[i\]\[k\]", r"dist\[k\]\[j\]", case_sensitive=True)
            or has_seq(c, r"graph\[i\]\[k\]", r"graph\[k\]\[j\]", case_sensitive=True)
        )
    )


def _tree_traversal(c: str) -> bool:
    return has(
        c,
        r"inverttree|invert_tree|maxdepth|max_depth|mindepth|min_depth|isvalidbst|is_valid_bst"
        r"|validatebst|lowestcommonancestor|lowest_common_ancestor|\blca\b",
    ) or (
        has_cs(c, r"root\.left|root\.right")
        and has_seq(c, r"return", r"root|node", case_sensitive=True)
        and not has(c, r"serialize|deserialize|floyd|dist\[")
    )


def _level_order(c: str) -> bool:
    return has(c, r"levelorder|level_order|bfstree|bfs_tree") or (
        has(c, r"queue")
        and has_cs(c, r"node\.left|node\.right|root\.left|root\.right")
        and has_cs(c, r"shift|dequeue|popleft")
    )


def _merge_sorted(c: str) -> bool:
    return has(c, r"mergesorted|merge_sorted") or (
        has(c, r"arr1|arr2|nums1|nums2")
        and (
            has_seq(c, r"while", r"\bi\b", r"\bj\b", case_sensitive=True)
            or has_seq(c, r"while", r"&&|\band\b", case_sensitive=True)
        )
        and has_cs(c, r"push|append|result")
        and not has(c, r"median")
    )


def _valid_anagram(c: str) -> bool:
    return (
        has(c, r"isanagram|is_anagram|validanagram|valid_anagram") and has(c, r"\.sort\s*\(|\bsorted\s*\(")
    ) or has_seq(c, r"\.split", r"\.sort", r"\.join", case_sensitive=True)


def _valid_anagram_counting(c: str) -> bool:
    return has(c, r"isanagram|is_anagram|validanagram|valid_anagram") and not has(c, r"\.sort\s*\(|\bsorted\s*\(")


def _spiral_matrix(c: str) -> bool:
    return has(c, r"spiralorder|spiral_order|spiralmatrix|spiral_matrix") or (
        in_order(c, r"top", r"bottom", r"left", r"right", flags=re.I)
        and (
            has_seq(c, r"while", r"top", r"bottom", case_sensitive=True)
            or has_seq(c, r"while", r"left", r"right", case_sensitive=True)
        )
    )


def _four_sum(c: str) -> bool:
    return has(c, r"foursum|four_sum|4sum") or (
        has_cs(c, r"\.sort|sorted\(")
        and in_order(c, r"for", r"for", r"left", r"right")
        and _double_for(c)
    )


def _edit_distance(c: str) -> bool:
    return has(c, r"editdistance|edit_distance|mindistance|min_distance|levenshtein") or (
        has(c, r"word1|word2|text1|text2") and has_cs(c, r"dp\[i\]\[j\]|dp\[i\s*-\s*1\]\[j\s*-\s*1\]")
    )


def _lcs(c: str) -> bool:
    return has(c, r"longestcommonsubsequence|longest_common_subsequence|\blcs\b") or (
        has(c, r"const\s+dp\s*=\s*Array\.from\(")
        and has(c, r"dp\[i\]\[j\]")
        and has(c, r"a\[i\s*-\s*1\]\s*===?\s*b\[j\s*-\s*1\]")
    )


def _word_search(c: str) -> bool:
    return has(c, r"wordsearch|word_search|\bexist\s*\(") or (
        has(c, r"board|grid") and has(c, r"word\[k\]|word\[index\]|word\[i\]") and has(c, r"backtrack|dfs")
    )


def _longest_consecutive(c: str) -> bool:
    return has(c, r"longestconsecutive|longest_consecutive") or (
        has_cs(c, r"set\.has\(num\s*-\s*1\)") and has_seq(c, r"while", r"set\.has", case_sensitive=True)
    )


def _lis_nlogn(c: str) -> bool:
    return has(c, r"lengthoflis|length_of_lis|longestincreasingsubsequence|longest_increasing_subsequence") or (
        has(c, r"tails\s*=\s*\[") and has(c, r"while\s*\(?\s*l\s*<\s*r\s*\)?|bisect")
    )


def _top_k_frequent(c: str) -> bool:
    return has(c, r"topkfrequent|top_k_frequent|topk") or (
        has(c, r"freq|frequency|count")
        and has(c, r"\.sort\s*\(|\bsorted\s*\(")
        and has(c, r"slice\(0,\s*k\)|slice\(\s*-k\)|\[\s*:\s*k\s*\]|\[\s*-k\s*:\s*\]")
    )


def _sqrt_loop(c: str) -> bool:
    return not _sieve_marker(c) and (
        has(c, r"mysqrt|my_sqrt|isqrt|intsqrt|int_sqrt|squareroot|square_root")
        or has_cs(c, r"for\s*\([^)]*i\s*\*\s*i\s*<=\s*n|while\s*\(?[^)\n]*i\s*\*\s*i\s*<=\s*n")
    )


def _reverse_words(c: str) -> bool:
    return has(c, r"reversewords|reverse_words") or (
        has(c, r"\.trim\s*\(\s*\)\s*\.split\s*\(") and has(c, r"\.reverse\s*\(\s*\)\s*\.join\s*\(")
    )


def _group_anagrams(c: str) -> bool:
    return has(c, r"groupanagrams|group_anagrams") or (
        has(c, r"new\s+Map\s*\(") and has(c, r"\.split\(''\)\.sort\s*\(\)\.join\(''\)")
    )


def _rotate_array_k(c: str) -> bool:
    return has(c, r"(?:function|def)\s+rotate\s*\(") and has(c, r"(?:function|def)\s+rev\w*\s*\(")


def _next_permutation(c: str) -> bool:
    return has(c, r"nextpermutation|next_permutation") or (
        has(c, r"while\s*\(i>=0\s*&&\s*\w+\[i]\s*>=\s*\w+\[i\+1]") and has(c, r"while\s*\(l<r\)")
    )


def _remove_nth_from_end(c: str) -> bool:
    return has(c, r"removenthfromend|remove_nth_from_end") or (
        has(c, r"let\s+fast\s*=\s*dummy,\s*slow\s*=\s*dummy") and has(c, r"for\s*\(let i=0;i<n;i\+\+\)")
    )


def _sliding_window_max(c: str) -> bool:
    return has(c, r"maxslidingwindow|max_sliding_window") or (
        has(c, r"const\s+dq\s*=\s*\[\s*\]")
        and in_order(c, r"while\s*\([^)]*dq\.length[^)]*\)", r"dq\.pop\s*\(", flags=re.I)
        and has(c, r"dq\.shift\s*\(")
    )


def _number_of_islands(c: str) -> bool:
    return has(c, r"numislands|num_islands|number_of_islands") or (
        has(c, r"grid") and has(c, r"dfs\s*\(") and has_cs(c, r"i\s*\+\s*1,\s*j|i\s*-\s*1,\s*j|i,\s*j\s*\+\s*1|i,\s*j\s*-\s*1")
    )


def _first_unique(c: str) -> bool:
    return has(c, r"firstuniq|first_uniq|firstunique|first_unique") or (
        has(c, r"count|freq") and has(c, r"charcodeat|charcode") and has_cs(c, r"===\s*1|==\s*1")
    )


def _set_matrix_zeroes(c: str) -> bool:
    return has(c, r"setzeroes|set_zeroes|setzeros|set_zeros|matrixzeroes|matrix_zeroes") or (
        has(c, r"firstrowzero|firstcolzero|first_row_zero|first_col_zero")
        and has_cs(c, r"matrix\[i\]\[0\]|matrix\[0\]\[j\]")
    )


def _four_sum_improved(c: str) -> bool:
    return (
        has(c, r"foursum|four_sum|4sum")
        or (
            has_cs(c, r"nums\.length\s*-\s*3")
            and has_cs(c, r"nums\.length\s*-\s*2")
            and (has_seq(c, r"left", r"right", case_sensitive=True) or has_seq(c, r"lo", r"hi", case_sensitive=True))
        )
        or (
            in_order(c, r"for", r"for", r"while", r"left", r"right")
            and has_seq(c, r"nums\[i\]", r"nums\[j\]", r"nums\[left\]", r"nums\[right\]", case_sensitive=True)
        )
    )


HAZARDS: Tuple[HazardPattern, ...] = (
    HazardPattern(
        "reverse_array",
        lambda c: has(c, r"(?:function|def)\s+reverse_?array\s*\("),
        "O(n)",
        "Reverse Array with two pointers. Each element is swapped at most once as pointers move inward, so time is linear.",
        "O(1)",
        "In-place swaps with only a few scalar temporaries.",
        0.99,
    ),
    HazardPattern(
        "kadane",
        lambda c: has(c, r"(?:function|def)\s+max_?sub_?array\s*\("),
        "O(n)",
        "Kadane's algorithm scans the array once, updating current and best sums in constant time per element.",
        "O(1)",
        "Uses only a constant number of accumulator variables.",
        0.99,
    ),
    HazardPattern(
        "binary_search_recursive",
        _recursive_binary_search,
        "O(log n)",
        "Recursive Binary Search. Each recursive call halves the search space. Recurrence: T(n) = T(n/2) + O(1), so O(log n).",
        "O(log n)",
        "Recursion stack depth is O(log n) since the problem is halved on every call.",
        0.98,
    ),
    HazardPattern(
        "heap_sort",
        _heap_sort,
        "O(n log n)",
        "Heap Sort. Building the heap takes O(n), and extracting n elements takes O(n log n).",
        "O(1)",
        "Heap Sort sorts in place; only constant extra space is needed for swaps.",
        0.95,
    ),
    HazardPattern(
        "meeting_rooms",
        _meeting_rooms,
        "O(n log n)",
        "Interval scheduling. Sorting the intervals takes O(n log n), followed by a linear scan. Dominated by sorting.",
        "O(n)",
        "Storing start/end times in separate arrays requires O(n) space.",
        0.92,
    ),
    HazardPattern(
        "three_sum",
        _three_sum,
        "O(n²)",
        "Three Sum. Sorting takes O(n log n). For each element, two pointers find pairs in O(n). Total: O(n²).",
        "O(1)",
        "The output list is result space; the scan itself uses constant extra variables.",
        0.95,
    ),
    HazardPattern(
        "expand_around_center",
        _expand_around_center,
        "O(n²)",
        "Expand Around Center. Each of the n centers expands outward up to O(n) characters: O(n²).",
        "O(1)",
        "Only indices and a length are stored.",
        0.95,
    ),
    HazardPattern(
        "n_queens",
        _n_queens,
        "O(n!)",
        "N-Queens backtracking. The first row has n choices, the second about n - 1, and so on: O(n!).",
        "O(n²)",
        "The board representation requires O(n²) space; the recursion stack is O(n).",
        0.92,
    ),
    HazardPattern(
        "word_break",
        _word_break,
        "O(n³)",
        "Word Break DP. For each end position, all start positions are checked and each substring costs O(n): O(n³).",
        "O(n)",
        "DP array of size n plus recursion stack depth.",
        0.88,
    ),
    HazardPattern(
        "merge_k_sorted",
        _merge_k_sorted,
        "O(n log k)",
        "Merge K Sorted Lists. A min-heap of size k processes all n elements at O(log k) each.",
        "O(k)",
        "The heap holds at most one element from each of the k lists.",
        0.95,
    ),
    HazardPattern(
        "merge_sort",
        _merge_sort,
        "O(n log n)",
        "Merge Sort (top-down). Each level splits the array in half and merges in linear time over O(log n) levels.",
        "O(n)",
        "Merging uses auxiliary arrays proportional to n.",
        0.96,
    ),
    HazardPattern(
        "dijkstra",
        _dijkstra,
        "O((V + E) log V)",
        "Dijkstra's Algorithm. Each vertex is extracted from the heap once and each edge is relaxed at most once, each at O(log V).",
        "O(V)",
        "Distance array and priority queue both require O(V) space.",
        0.95,
    ),
    HazardPattern(
        "kmp",
        _kmp,
        "O(n + m)",
        "KMP String Matching. Building the failure array takes O(m) and the search takes O(n).",
        "O(m)",
        "The failure array requires O(m) space for the pattern.",
        0.98,
    ),
    HazardPattern(
        "monotonic_stack",
        _monotonic_stack,
        "O(n)",
        "Monotonic Stack. Despite the nested while loop, each element is pushed and popped at most once.",
        "O(n)",
        "The stack and result array each require O(n) space.",
        0.95,
    ),
    HazardPattern(
        "daily_temperatures",
        _daily_temperatures,
        "O(n)",
        "Daily Temperatures keeps a monotonic stack of indices; each index is pushed and popped at most once.",
        "O(n)",
        "Stack and result array both store up to n entries.",
        0.96,
    ),
    HazardPattern(
        "trie",
        _trie,
        "O(L)",
        "Trie operations. Insert, search and prefix lookups take O(L) for a word of length L.",
        "O(n × L)",
        "Storing n words of average length L requires O(n × L) space in the worst case.",
        0.90,
    ),
    HazardPattern(
        "fast_power",
        _fast_power,
        "O(log n)",
        "Binary exponentiation. The exponent is halved every iteration, so there are O(log n) iterations.",
        "O(1)",
        "Only constant space for variables.",
        0.95,
    ),
    HazardPattern(
        "bit_count_fixed_width",
        _bit_count_fixed,
        "O(1)",
        "Bit count over a fixed 32/64-bit loop is O(1).",
        "O(1)",
        "Only constant space needed.",
        0.95,
    ),
    HazardPattern(
        "bit_count",
        _bit_count,
        "O(log n)",
        "Bit count / Hamming weight. Processes the bits of n, which is O(log n).",
        "O(1)",
        "Only constant space needed.",
        0.95,
    ),
    HazardPattern(
        "floyd_cycle",
        _floyd_cycle,
        "O(n)",
        "Floyd's cycle detection. The slow pointer moves one step and the fast pointer two; they meet within O(n) steps.",
        "O(1)",
        "Only constant space for two pointers.",
        0.95,
    ),
    HazardPattern(
        "tree_serialization",
        _tree_serialization,
        "O(n)",
        "Tree serialization. Each node is visited exactly once in each direction.",
        "O(n)",
        "The serialized string and recursion stack both require O(n) space.",
        0.90,
    ),
    HazardPattern(
        "lru_cache",
        _lru_cache,
        "O(1)",
        "LRU Cache. A hash map over a doubly linked list gives O(1) get and put.",
        "O(n)",
        "The cache stores up to capacity key-value pairs.",
        0.95,
    ),
    HazardPattern(
        "binary_conversion",
        _binary_conversion,
        "O(log n)",
        "Binary conversion. Each iteration divides by 2, and n has O(log n) bits.",
        "O(log n)",
        "The resulting binary string has O(log n) characters.",
        0.92,
    ),
    HazardPattern(
        "course_schedule",
        _course_schedule,
        "O(V + E)",
        "Topological sort. Building the graph is O(E) and the BFS processes each vertex and edge once.",
        "O(V + E)",
        "The adjacency list requires O(V + E) space; the queue and in-degree array O(V).",
        0.92,
    ),
    HazardPattern(
        "clone_graph",
        _clone_graph,
        "O(V + E)",
        "Clone Graph. The traversal visits each node once and each edge once.",
        "O(V)",
        "The visited map and recursion stack require O(V) space.",
        0.90,
    ),
    HazardPattern(
        "word_ladder",
        _word_ladder,
        "O(n × L²)",
        "Word Ladder BFS. For each of n words, L positions × 26 letters are tried and each candidate costs O(L) to build.",
        "O(n × L)",
        "The word set and BFS queue require O(n × L) space.",
        0.88,
    ),
    HazardPattern(
        "median_sorted_arrays",
        _median_sorted_arrays,
        "O(log min(m,n))",
        "Median of Two Sorted Arrays. Binary search on the smaller array halves the search space each iteration.",
        "O(1)",
        "Only constant extra space for variables.",
        0.95,
    ),
    HazardPattern(
        "floyd_warshall",
        _floyd_warshall,
        "O(n³)",
        "Floyd-Warshall. Three nested loops over n vertices: O(n³).",
        "O(n²)",
        "The distance matrix requires O(n²) space.",
        0.95,
    ),
    HazardPattern(
        "tree_traversal",
        _tree_traversal,
        "O(n)",
        "Tree traversal. Each node is visited exactly once.",
        "O(n)",
        "Recursion stack depth is O(h); a skewed tree makes that O(n).",
        0.90,
    ),
    HazardPattern(
        "level_order",
        _level_order,
        "O(n)",
        "Level order traversal (BFS). Each node is visited exactly once.",
        "O(n)",
        "The queue can hold the widest level, which is O(n).",
        0.92,
    ),
    HazardPattern(
        "merge_sorted",
        _merge_sorted,
        "O(n + m)",
        "Merge two sorted arrays. Each element of both arrays is processed exactly once.",
        "O(n + m)",
        "The result array holds every element of both inputs.",
        0.92,
    ),
    HazardPattern(
        "valid_anagram",
        _valid_anagram,
        "O(n log n)",
        "Valid Anagram (sorting). Sorting each string takes O(n log n); the comparison is O(n).",
        "O(n)",
        "Sorting creates new character arrays.",
        0.90,
    ),
    HazardPattern(
        "valid_anagram_counting",
        _valid_anagram_counting,
        "O(n)",
        "Valid Anagram (counting). A single pass over each string maintains frequency counts.",
        "O(1)",
        "Counts for a fixed alphabet take constant space.",
        0.9,
    ),
    HazardPattern(
        "spiral_matrix",
        _spiral_matrix,
        "O(m × n)",
        "Spiral Matrix. Each element is visited exactly once.",
        "O(1)",
        "Output space is not counted; only boundary pointers are kept.",
        0.92,
    ),
    HazardPattern(
        "four_sum",
        _four_sum,
        "O(n³)",
        "Four Sum. Sorting plus two nested loops with a two-pointer scan inside: O(n³).",
        "O(n)",
        "Output storage for quadruplets; sorting needs O(log n) auxiliary space.",
        0.90,
    ),
    HazardPattern(
        "edit_distance",
        _edit_distance,
        "O(m × n)",
        "Edit Distance. Each cell of the m × n DP table is computed in O(1).",
        "O(m × n)",
        "The DP table requires O(m × n) space.",
        0.95,
    ),
    HazardPattern(
        "lcs_dp",
        _lcs,
        "O(m × n)",
        "Longest Common Subsequence fills an m × n DP table with O(1) work per state.",
        "O(m × n)",
        "The DP table stores m × n states.",
        0.95,
    ),
    HazardPattern(
        "word_search",
        _word_search,
        "O(m × n × 4^L)",
        "Word Search (backtracking). From each of the m × n cells, up to 4^L paths are explored for a word of length L.",
        "O(L)",
        "Recursion depth is bounded by the word length.",
        0.88,
    ),
    HazardPattern(
        "longest_consecutive",
        _longest_consecutive,
        "O(n)",
        "Longest Consecutive Sequence. Each number is visited at most twice.",
        "O(n)",
        "The hash set stores all n elements.",
        0.92,
    ),
    HazardPattern(
        "lis_nlogn",
        _lis_nlogn,
        "O(n log n)",
        "Longest Increasing Subsequence with a tails array: one binary search per element.",
        "O(n)",
        "The tails array stores at most n elements.",
        0.9,
    ),
    HazardPattern(
        "top_k_frequent",
        _top_k_frequent,
        "O(n log n)",
        "Top K Frequent. Counting is O(n) and sorting the counts O(n log n).",
        "O(n)",
        "Frequency map and result array require O(n) space.",
        0.88,
    ),
    HazardPattern(
        "sqrt_loop",
        _sqrt_loop,
        "O(√n)",
        "Square root loop. The condition i * i <= n bounds the loop to √n iterations.",
        "O(1)",
        "Only the loop variable is stored.",
        0.95,
    ),
    HazardPattern(
        "reverse_words",
        _reverse_words,
        "O(n)",
        "Reverse Words. Splitting, reversing and joining each take linear time in the string length.",
        "O(n)",
        "Intermediate word arrays and the output string are linear in size.",
        0.94,
    ),
    HazardPattern(
        "group_anagrams",
        _group_anagrams,
        "O(n k log k)",
        "Group Anagrams. Sorting each of n strings of length k costs O(k log k).",
        "O(n k)",
        "The hash map stores all n strings grouped by their sorted key.",
        0.94,
    ),
    HazardPattern(
        "rotate_array_k",
        _rotate_array_k,
        "O(n)",
        "Rotate Array by K with three reversals. Each element moves a constant number of times.",
        "O(1)",
        "Rotation happens in place with a few indices.",
        0.96,
    ),
    HazardPattern(
        "next_permutation",
        _next_permutation,
        "O(n)",
        "Next Permutation finds the pivot, its successor and reverses the suffix in linear passes.",
        "O(1)",
        "All swaps happen in place.",
        0.95,
    ),
    HazardPattern(
        "combination_sum",
        lambda c: has(c, r"combinationsum|combination_sum") and has(c, r"dfs\s*\(|backtrack\w*\s*\("),
        "O(k · 2^n)",
        "Combination Sum backtracks over subsets of candidates; each of the exponentially many combinations has up to k elements.",
        "O(k · 2^n)",
        "Space is dominated by storing every valid combination.",
        0.9,
    ),
    HazardPattern(
        "generate_parentheses",
        lambda c: has(c, r"generateparenthesis|generate_parenthesis|generateparentheses|generate_parentheses"),
        "O(4^n / √n)",
        "Generate Parentheses enumerates every valid sequence; their count is the nth Catalan number.",
        "O(4^n / √n)",
        "Space is dominated by the generated sequences.",
        0.9,
    ),
    HazardPattern(
        "coin_change_min",
        lambda c: has(c, r"coinchange|coin_change")
        and has(c, r"dp\s*=\s*Array\(amount\s*\+\s*1\)|dp\s*=\s*\[[^\]]*\]\s*\*\s*\(\s*amount\s*\+\s*1\s*\)"),
        "O(n · amount)",
        "Coin Change fills a DP array of size amount for each of n coins.",
        "O(amount)",
        "The DP array has amount + 1 entries.",
        0.9,
    ),
    HazardPattern(
        "remove_nth_from_end",
        _remove_nth_from_end,
        "O(n)",
        "Remove Nth Node From End: two pointers with an n-step lead make one pass.",
        "O(1)",
        "Only a few pointer variables; the list is modified in place.",
        0.92,
    ),
    HazardPattern(
        "sliding_window_max",
        _sliding_window_max,
        "O(n)",
        "Sliding Window Maximum keeps a monotonic deque; each index is pushed and popped at most once.",
        "O(k)",
        "The deque holds at most k indices.",
        0.95,
    ),
    HazardPattern(
        "number_of_islands",
        _number_of_islands,
        "O(m × n)",
        "Number of Islands explores each cell at most once.",
        "O(m × n)",
        "The recursion stack or queue can hold O(m × n) cells.",
        0.9,
    ),
    HazardPattern(
        "first_unique",
        _first_unique,
        "O(n)",
        "First Unique Character. One pass counts, one pass finds the first count of 1.",
        "O(1)",
        "A fixed 26-letter count array is O(1) space.",
        0.92,
    ),
    HazardPattern(
        "set_matrix_zeroes",
        _set_matrix_zeroes,
        "O(m × n)",
        "Set Matrix Zeroes. Two passes over the matrix: one marks, one zeroes.",
        "O(1)",
        "The first row and column are reused as markers.",
        0.95,
    ),
    HazardPattern(
        "four_sum_nested",
        _four_sum_improved,
        "O(n³)",
        "Four Sum. Two nested loops O(n²) around a two-pointer scan O(n): O(n³).",
        "O(n)",
        "Output storage for quadruplets.",
        0.92,
    ),
)


def match_hazard(code: str, hazards: Optional[Sequence[HazardPattern]] = None) -> Optional[ComplexityResult]:
    """Return the first matching hazard's result, or None."""
    if not code or not code.strip():
        return None
    for hazard in hazards if hazards is not None else HAZARDS:
        try:
            matched = hazard.predicate(code)
        except Exception as e:  # one broken recognizer must not stop the rest
            log_warning(f"Hazard recognizer '{hazard.name}' failed: {e}", layer="hazard")
            continue
        if matched:
            log_info(f"Hazard pattern matched: {hazard.name}", layer="hazard")
            return hazard.result()
    return None
