"""
Feature extraction: scans source text and reports loops, pointer idioms,
data structures, algorithm shapes and space indicators as a FeatureSet.

Every detector runs in isolation; one failing detector only leaves its own
flag unset.
"""

import re
from typing import List, Optional, Set

from complexity_engine.analysis import detection
from complexity_engine.analysis.amortized import (
    MONOTONIC_STACK,
    SLIDING_WINDOW_HASHSET,
    TWO_POINTERS,
    detect_amortized,
)
from complexity_engine.analysis.detection import CodeScan, in_order, isolated, search
from complexity_engine.analysis.languages import get_profile
from complexity_engine.analysis.models import (
    AlgorithmFeatures,
    DataStructureFeatures,
    FeatureSet,
    LoopFeatures,
    Metrics,
    PointerFeatures,
    SpaceUsage,
)
from complexity_engine.core.logging import log_debug

ICASE = re.IGNORECASE

FOR_PATTERNS = [
    r"\bfor\s*\(",
    r"\bfor\s+\w+\s+in\s+",
    r"\bfor\s+\w+\s*,\s*\w+\s+in\s+",
    r"\bfor\s+(?:const|let|var)\s+\w+\s+of\s+",
    r"\bfor\s+\w+\s*(?:,\s*\w+\s*)?:=",
    r"\bfor\s*\{",
    r"\.forEach\s*\(",
    r"\.map\s*\(",
    r"\.filter\s*\(",
    r"\.reduce\s*\(",
]
WHILE_PATTERNS = [r"\bwhile\s*\(", r"\bwhile\s+\w"]

BOUND_PATTERNS = [
    r"\bwhile\s*\([^)]*?[<≤]=?\s*(\w+)",
    r"\bfor\s*\([^;]*;[^;]*?[<≤]=?\s*(\w+)",
    r"\bwhile\s+[^:\n(]*?[<≤]=?\s*([A-Za-z_]\w*)",
    r"\brange\(\s*(?:[^,()]*,\s*)?([A-Za-z_]\w*)\s*[,)]",
]
BOUND_EXCLUDE = re.compile(
    r"^(?:length|size|count|start|end|left|right|i|j|k|len|mid|lo|hi)$", ICASE
)

DATA_STRUCTURES = {
    "hash_map": (
        r"\bHashMap\b|\bMap\s*<|new\s+Map\s*\(|\bdict\s*\(|\bdefaultdict\b|\bCounter\s*\("
        r"|unordered_map|\bDictionary\s*<|\bmap\s*\[\s*\w+\s*\]\s*\w+",
        r"\.getOrDefault\s*\(|\.put\s*\(|\.containsKey\s*\(|\.get\s*\([^()\n]*,"
        r"|\.set\s*\([^()\n]*,|\.items\s*\(\s*\)",
    ),
    "hash_set": (
        r"\bHashSet\b|\bSet\s*<|new\s+Set\s*\(|\bset\s*\(|unordered_set",
        r"\.has\s*\(|\.contains\s*\(|\.add\s*\("
        r"|\b(?:if|elif|while|and|or|not|return)\s+[\w.\[\]+\-]+\s+(?:not\s+)?in\s+(?!range\b)\w+",
    ),
    "array": (
        r"\[\s*\]|new\s+\w+\s*\[|\bArray\b|\bArrayList\b|\bList\s*<|\bvector\s*<|\blist\s*\(",
        r"\.push\s*\(|\.append\s*\(|\.push_back\s*\(",
    ),
    "heap": (
        r"PriorityQueue|\bheapq\b|MinHeap|MaxHeap|priority_queue|\bheapify\b",
        r"heappush|heappop|\bheap\s*\.",
    ),
    "stack": (
        r"\bStack\b|\bstack\b|\bstk\b|Deque[^\n]*stack",
        r"\bstack\s*\.|\.push\s*\([^\n]*\.pop\s*\(",
    ),
    "queue": (
        r"\bQueue\b|\bDeque\b|\bArrayDeque\b|\bdeque\b|\bqueue\b|LinkedList[^\n]*offer",
        r"\.offer\s*\(|\.poll\s*\(|\.popleft\s*\(|\.shift\s*\(\s*\)",
    ),
    "tree": (
        r"TreeNode|BinaryTree|\bBST\b|\broot\s*\.|\.left\b|\.right\b",
        r"inorder|preorder|postorder",
    ),
    "graph": (
        r"\bgraph\b|adjacency|\bneighbou?rs\b|\bedges\b|\bvertices\b",
        r"\badj\s*\[|adj_list|adjList",
    ),
    "linked_list": (r"ListNode|LinkedList|\.next\b|\bhead\s*\.", r"\.next\s*=\s*"),
    "trie": (r"\bTrie\b|TrieNode", r"\.children\b|\bis_?end\w*|\bis_?word\b"),
    "union_find": (
        r"UnionFind|DisjointSet|\bunion_?find\b",
        r"\bparent\s*\[\s*\w+\s*\]\s*=\s*find\s*\(|\bfind\s*\([^)]*\)\s*[!=]=\s*find\s*\(",
    ),
    "string_builder": (
        r"StringBuilder|StringBuffer|strings\.Builder|stringstream",
        r"['\"]{2}\.join\s*\(",
    ),
}
# Matched case-insensitively, like the keyword sets they come from
_CASE_INSENSITIVE_STRUCTURES = {"heap", "tree", "graph", "union_find"}

SORT_CALL = re.compile(
    r"\w\s*\.sort\s*\(|\)\s*\.sort\s*\(|Arrays\.sort|Collections\.sort|\bsorted\s*\(\s*[\w\[(]"
    r"|(?:std::)?\bsort\s*\(\s*\w+\s*\.\s*begin|\bsort\.(?:Ints|Slice|Strings)\s*\("
)
MIDPOINT = re.compile(
    r"\b(?:mid|m|middle)\b\s*=\s*[^=\n][^\n]*(?:floor|trunc|>>|//\s*2|/\s*2\b|\b2\b)"
)
BOUND_TO_MID = re.compile(
    r"\b(?:left|right|l|r|low|high|lo|hi|start|end)\b\s*=\s*\b(?:mid|m|middle)\b"
)
SEARCH_KEYWORDS = re.compile(
    r"binarySearch|binary_search|\bbisect(?:_left|_right)?\b|lower_bound|upper_bound"
    r"|binary_exponentiation|binaryExponentiation|modPow|mod_pow"
)
SEARCH_CALL = re.compile(rf"(?:{SEARCH_KEYWORDS.pattern})\s*\(")
HIDDEN_ALLOCATION = re.compile(
    r"\.slice\s*\(|\.substring\s*\(|\.substr\s*\(|\.split\s*\(|\.concat\s*\("
    r"|new\s+String\s*\(|\.toCharArray\s*\("
)
PYTHON_SLICE = re.compile(r"\w\s*\[\s*[\w+\-\s()]*:\s*[\w+\-\s()]*\]")
DYNAMIC_ALLOCATION = re.compile(
    r"new\s+\w+\s*\[\s*[A-Za-z_][^\]]*\]|(?:new\s+)?Array\s*\(\s*[A-Za-z_][^)]*\)"
    r"|(?:[=(,\[+]|\breturn)\s*\[[^\[\]\n]*\]\s*\*\s*\(?\s*[A-Za-z_]|\bmake\s*\(\s*\[\]\w+\s*,\s*[A-Za-z_]"
    r"|vector\s*<[^>]*>\s*\w+\s*\(\s*[A-Za-z_]"
    r"|\[[^\[\]\n]+\s+for\s+\w+(?:\s*,\s*\w+)?\s+in\s+"
)
ACCUMULATE = re.compile(
    r"\w+\.(?:push|add|append)\s*\(\s*(?:new\b|Arrays\.copyOf|\.\.\.|\[|list\s*\("
    r"|\w+\s*\[\s*:\s*\]|\w+\.copy\s*\(|\w+\.slice\s*\(|\w+\s*\+\s*\[)"
)
SWAP = re.compile(
    r"\[[^\]\n]*,[^\]\n]*\]\s*=\s*\[[^\]\n]*,[^\]\n]*\]"
    r"|(\w+\[[^\]\n]+\])\s*,\s*(\w+\[[^\]\n]+\])\s*=\s*\2\s*,\s*\1"
    r"|\bswap\s*\("
)
STRING_CONCAT = re.compile(
    r"(\w+)\s*\+=\s*['\"`]|(\w+)\s*=\s*\2\s*\+\s*['\"`]|(\w+)\s*=\s*['\"][^;\n]*\+\s*\3\b"
)
STRING_DECLARATION = re.compile(
    r"(?:\bString|\bstring|\bstr|let|var)\s+(\w+)\s*=\s*['\"`]|^\s*(\w+)\s*=\s*['\"]{2}\s*$",
    re.MULTILINE,
)

DOMINANT_ORDER = [
    ("binary_search", lambda f: f.algorithms.binary_search),
    ("dynamic_programming", lambda f: f.algorithms.dp),
    ("backtracking", lambda f: f.algorithms.backtracking),
    ("bfs", lambda f: f.algorithms.bfs),
    ("dfs", lambda f: f.algorithms.dfs),
    ("sliding_window", lambda f: f.pointers.sliding_window and f.pointers.left_right),
    ("two_pointers", lambda f: f.pointers.two_pointers and f.pointers.left_right),
    ("slow_fast_pointers", lambda f: f.pointers.slow_fast),
    ("nested_loops", lambda f: f.loops.nested_loops > 0),
    ("sorting", lambda f: f.algorithms.sorting),
    ("hash_based", lambda f: f.data_structures.hash_map or f.data_structures.hash_set),
    ("heap", lambda f: f.data_structures.heap),
    ("single_loop", lambda f: f.loops.single_loops > 0),
    ("recursion", lambda f: f.algorithms.recursion),
]


# Loops


def _loop_bounds(scan: CodeScan) -> Set[str]:
    bounds = set()
    for pattern in BOUND_PATTERNS:
        for symbol in re.findall(pattern, scan.code):
            if symbol.isdigit() or BOUND_EXCLUDE.match(symbol):
                continue
            bounds.add(symbol)
    return bounds


def _growth_type(scan: CodeScan) -> str:
    for block in scan.blocks:
        if re.search(r"\b(\w+)\s*\*\s*\1\b\s*[<≤]", block.header) or re.search(
            r"[<≤]=?\s*(?:\w+\.)?(?:isqrt|sqrt)\s*\(|\*\*\s*0\.5", block.header
        ):
            return "sqrt"
    for block in scan.blocks:
        header = re.match(
            r"for\s*\([^;]*;\s*(\w+)\s*[<>≤≥!=][^;]*;\s*(\w+)\s*"
            r"(?:(?:\*=|/=|<<=|>>=)\s*[1-9]|=\s*\2\s*(?:\*|/|<<|>>)\s*[1-9])",
            block.header,
        )
        if header and header.group(1) == header.group(2):
            return "logarithmic"
        variable = detection.condition_variable(block)
        if not variable:
            continue
        v = re.escape(variable)
        update = (
            rf"\b{v}\s*(?:\*=|/=|//=)\s*[2-9]|\b{v}\s*(?:<<=|>>=)\s*[1-9]"
            rf"|\b{v}\s*=\s*{v}\s*(?:\*|/|//)\s*[2-9]|\b{v}\s*=\s*{v}\s*(?:>>|<<)"
            rf"|\b{v}\s*=\s*(?:Math\.floor|Math\.trunc|int)\s*\(\s*{v}\s*/+\s*[2-9]"
        )
        if re.search(update, block.body):
            return "logarithmic"
    return "linear"


def _early_exit(scan: CodeScan) -> bool:
    for block in scan.blocks:
        if re.match(r"(?:break|return)\b", detection.first_statement(block.body)):
            return True
        variable = detection.condition_variable(block)
        bound = detection.compared_bound(block)
        if variable and bound and variable != bound:
            saturate = rf"\b{re.escape(variable)}\s*=\s*{re.escape(bound)}\s*(?:;|$)"
            if re.search(saturate, block.body, re.MULTILINE):
                return True
    return False


def _loop_features(scan: CodeScan) -> LoopFeatures:
    code = scan.code
    for_loops = sum(len(re.findall(p, code)) for p in FOR_PATTERNS)
    while_loops = sum(len(re.findall(p, code)) for p in WHILE_PATTERNS)
    depth = max((b.depth for b in scan.blocks), default=0)
    if depth == 0 and for_loops + while_loops:
        depth = 1
    return LoopFeatures(
        single_loops=for_loops + while_loops,
        nested_loops=1 if depth > 1 else 0,
        max_nesting_depth=depth,
        growth_type=isolated("growth_type", _growth_type, scan, default="linear"),
        bounds=isolated("loop_bounds", _loop_bounds, scan, default=set()),
        early_exit=isolated("early_exit", _early_exit, scan),
        for_loops=for_loops,
        while_loops=while_loops,
    )


# Data structures


def _structure(name: str):
    declaration, operations = DATA_STRUCTURES[name]
    flags = ICASE if name in _CASE_INSENSITIVE_STRUCTURES else 0

    def detect(scan: CodeScan) -> bool:
        return search(declaration, scan.code, flags) or search(operations, scan.code, flags)

    return detect


def _literal_map(scan: CodeScan) -> bool:
    """An empty object/dict literal later indexed by a non-literal key."""
    declarations = re.findall(
        r"(?:(?:const|let|var)\s+|^[ \t]*)(\w+)\s*=\s*\{\s*\}", scan.code, re.MULTILINE
    )
    for name in declarations:
        if re.search(rf"\b{re.escape(name)}\s*\[\s*[A-Za-z_][^\]]*\]", scan.code):
            return True
    return False


def _appended_array(scan: CodeScan) -> bool:
    """An empty sequence literal later grown through append calls."""
    declarations = re.findall(
        r"(?:(?:const|let|var)\s+|^[ \t]*)(\w+)\s*(?::\s*[\w\[\], ]+)?=\s*(?:\[\s*\]|new\s+ArrayList\s*<[^>]*>\s*\(\s*\))",
        scan.code,
        re.MULTILINE,
    )
    declarations += re.findall(r"\bList\s*<[^>]*>\s+(\w+)\s*=\s*new\b", scan.code)
    for name in declarations:
        if re.search(rf"\b{re.escape(name)}\s*\.\s*(?:push|append|add)\s*\(", scan.code):
            return True
    return False


def _graph_composition(scan: CodeScan, structures: DataStructureFeatures) -> bool:
    names = re.search(r"\badj\w*|\bneighbou?rs\b|\bedges\b|\bvertices\b|\bgraph\b", scan.code, ICASE)
    containers = structures.hash_map or structures.linked_list or structures.array
    return bool(names and containers)


def _data_structures(scan: CodeScan) -> DataStructureFeatures:
    structures = DataStructureFeatures()
    for name in DATA_STRUCTURES:
        setattr(structures, name, isolated(name, _structure(name), scan))
    if isolated("literal_map", _literal_map, scan):
        structures.hash_map = True
    if not structures.graph and isolated(
        "graph_composition", _graph_composition, scan, structures
    ):
        structures.graph = True
    return structures


# Algorithms


def _sorting(scan: CodeScan) -> bool:
    return search(SORT_CALL, scan.code)


def _binary_search(scan: CodeScan) -> bool:
    if search(SEARCH_KEYWORDS, scan.code):
        return True
    for block in scan.while_blocks():
        if MIDPOINT.search(block.body) or BOUND_TO_MID.search(block.body):
            return True
    return False


def _recursive_functions(scan: CodeScan) -> List[str]:
    """Functions that call themselves, most calls first."""
    recursive = [
        (detection.calls(name, body), index, name)
        for index, (name, body) in enumerate(scan.functions.items())
        if detection.calls(name, body) >= 1
    ]
    recursive.sort(key=lambda item: (-item[0], item[1]))
    return [name for _, _, name in recursive]


def _branching(name: str, body: str) -> int:
    branches = detection.calls(name, body)
    escaped = re.escape(name)
    call = rf"\b{escaped}\s*\("
    if in_order(body, r"return", call, r"[+\-*]", call, per_line=True):
        branches = max(branches, 2)
    return branches


def _memoization(scan: CodeScan) -> bool:
    return search(
        r"\bmemo\w*\b|\bcache\b|@(?:functools\.)?lru_cache|@(?:functools\.)?cache\b"
        r"|\bin\s+memo\b|memo\.(?:has|containsKey|get)\s*\(",
        scan.code,
    )


def _dp(scan: CodeScan) -> bool:
    return search(r"\bdp\s*\[|\bdp\s*=|\bmemo\s*\[|\bmemo\s*=|\btable\s*\[\s*\w", scan.code)


def _dp_dimensions(scan: CodeScan) -> int:
    code = scan.code
    if re.search(r"\b(?:dp|memo|table)\s*\[[^\]\n]+\]\s*\[", code):
        return 2
    if re.search(r"\b(?:dp|memo)\s*\[\s*\(?\s*\w+\s*,\s*\w+", code):
        return 2
    if re.search(r"\bdp\s*=\s*\[\s*\[", code):
        return 2
    decorated = re.search(
        r"@(?:functools\.)?(?:lru_cache|cache)[^\n]*\n\s*def\s+\w+\s*\(([^)]*)\)", code
    )
    if decorated:
        params = [p for p in decorated.group(1).split(",") if p.strip() and p.strip() != "self"]
        return 2 if len(params) >= 2 else 1
    return 1


def _backtracking(scan: CodeScan, recursion: bool) -> bool:
    code = scan.code
    if re.search(r"backtrack", code, ICASE):
        return True
    if not recursion:
        return False
    if in_order(code, r"\bpath\.(?:append|push)\b", r"\bpath\.pop\b"):
        return True
    if re.search(r"\bres(?:ult)?\.(?:append|push|add)\([^)\n]*(?:copy|\[:\]|list\(|\.slice\(|\.\.\.|new\s)", code):
        return True
    for name in set(re.findall(r"\b(\w+)\.(?:push|append|add)\s*\(", code)):
        if re.search(rf"\b{re.escape(name)}\.(?:pop|removeLast|remove)\s*\(", code):
            return True
    return False


def _bfs(scan: CodeScan) -> bool:
    if re.search(r"\bbfs\b|breadth.?first|level.?order", scan.code, ICASE):
        return True
    for block in scan.while_blocks():
        if re.search(r"\b(?:queue|q|deque|dq|frontier)\b", block.header, ICASE) and re.search(
            r"popleft|\.shift\s*\(|\.poll\s*\(|\.pop\s*\(\s*0\s*\)|\.front\s*\(", block.body
        ):
            return True
    return False


def _dfs(scan: CodeScan) -> bool:
    if re.search(r"\bdfs\b|depth.?first|def\s+dfs|function\s+dfs", scan.code, ICASE):
        return True
    for block in scan.while_blocks():
        if detection.STACK_NAMES.search(block.header) and re.search(
            r"neighbou?r|children|\badj|graph|\.left\b|\.right\b", block.body
        ):
            return True
    return False


def _sieve(scan: CodeScan) -> bool:
    for block in scan.blocks:
        header = block.header
        if re.search(r"=\s*(\w+)\s*\*\s*\1\b", header) or re.search(
            r"range\(\s*(\w+)\s*\*\s*\1\s*,", header
        ):
            if scan.enclosing(block):
                return True
    return False


def _sorting_inside_loop(scan: CodeScan) -> bool:
    return any(SORT_CALL.search(b.body) for b in scan.blocks)


def _search_inside_loop(scan: CodeScan) -> bool:
    return any(SEARCH_CALL.search(b.body) for b in scan.blocks)


def _string_concat_loop(scan: CodeScan) -> bool:
    candidates = set()
    for match in STRING_CONCAT.finditer(scan.code):
        candidates.update(g for g in match.groups() if g)
    for match in STRING_DECLARATION.finditer(scan.code):
        candidates.update(g for g in match.groups() if g)
    for name in candidates:
        grow = rf"\b{re.escape(name)}\s*\+=|\b{re.escape(name)}\s*=\s*{re.escape(name)}\s*\+"
        if any(re.search(grow, b.body) for b in scan.blocks):
            return True
    return False


def _divide_markers(name: str, body: str) -> bool:
    escaped = re.escape(name)
    return bool(
        re.search(r"\bmid\w*\s*=|length\s*/\s*2|len\([^)]*\)\s*//\s*2|>>\s*1", body)
        or re.search(
            r"\.slice\s*\(\s*0\s*,\s*mid|\.slice\s*\(\s*mid|\[\s*:\s*mid\s*\]|\[\s*mid\s*(?:\+\s*1\s*)?:\s*\]",
            body,
        )
        or re.search(r"partition\s*\(|\bpivot\b|\blo\s*<\s*hi\b|\blow\s*<\s*high\b", body)
        or re.search(rf"\b{escaped}\s*\([^\n]*(?:/\s*2|>>\s*1|//\s*2)", body)
        or (
            re.search(rf"\b{escaped}\s*\([^\n]*,\s*mid\s*\)", body)
            and re.search(rf"\b{escaped}\s*\([^\n]*mid\s*\+\s*1", body)
        )
    )


def _algorithms(scan: CodeScan, structures: DataStructureFeatures, metrics: Metrics) -> AlgorithmFeatures:
    algorithms = AlgorithmFeatures()
    algorithms.sorting = isolated("sorting", _sorting, scan)
    algorithms.binary_search = isolated("binary_search", _binary_search, scan)

    recursive = isolated("recursion", _recursive_functions, scan, default=[])
    primary: Optional[str] = recursive[0] if recursive else None
    body = scan.functions.get(primary, "") if primary else ""
    algorithms.recursion = algorithms.has_recursive_call = primary is not None
    if primary:
        metrics.recursion_branching = isolated(
            "recursion_branching", _branching, primary, body, default=1
        )

    algorithms.memoization = isolated("memoization", _memoization, scan)
    algorithms.dp = algorithms.memoization or isolated("dp", _dp, scan)
    if algorithms.dp:
        metrics.dp_dimensions = isolated("dp_dimensions", _dp_dimensions, scan, default=1)

    algorithms.backtracking = isolated("backtracking", _backtracking, scan, algorithms.recursion)
    algorithms.bfs = isolated("bfs", _bfs, scan)
    algorithms.dfs = isolated("dfs", _dfs, scan)
    algorithms.sieve = isolated("sieve", _sieve, scan)
    algorithms.monotonic_stack = isolated("monotonic_stack", detection.monotonic_stack, scan)
    algorithms.sorting_inside_loop = isolated("sorting_inside_loop", _sorting_inside_loop, scan)
    if algorithms.binary_search:
        algorithms.search_inside_loop = isolated("search_inside_loop", _search_inside_loop, scan)
    if not structures.string_builder:
        algorithms.string_concat_loop = isolated("string_concat_loop", _string_concat_loop, scan)

    if primary:
        escaped = re.escape(primary)
        algorithms.recursion_inside_loop = any(
            detection.calls(primary, b.body) for b in scan.blocks
        )
        markers = isolated("divide_markers", _divide_markers, primary, body)
        branching = metrics.recursion_branching
        if markers and branching >= 2:
            algorithms.divide_conquer = True
            metrics.recursion_args = "divide"
        elif markers and branching == 1 and not algorithms.recursion_inside_loop:
            metrics.recursion_args = "divide"
        elif search(rf"\b{escaped}\s*\([^\n]*[+\-]\s*1\b", body):
            metrics.recursion_args = "step"

        swap = isolated("swap", search, SWAP, scan.code)
        keyword = search(r"backtrack|permut", scan.code, ICASE)
        algorithms.is_permutation = bool(
            (swap and (keyword or algorithms.recursion_inside_loop))
            or (search(r"permut", scan.code, ICASE) and algorithms.recursion_inside_loop)
        )
        algorithms.accumulates_results = isolated("accumulation", search, ACCUMULATE, scan.code)
        algorithms.gcd = (
            "%" in body and not algorithms.divide_conquer and branching == 1
        )
    if not algorithms.gcd:
        algorithms.gcd = isolated(
            "iterative_gcd",
            search,
            r"(\w+)\s*,\s*(\w+)\s*=\s*\2\s*,\s*\1\s*%\s*\2|\bgcd\b|__gcd",
            scan.code,
        )
    return algorithms


# Pointers


# Each entry is a sequence of parts that must appear in this order
SLIDING_WINDOW_PATTERNS = [
    ((r"window|slide",), ICASE),
    ((r"\[\s*left\s*:\s*right\s*\+?\s*1?\s*\]|\[left,\s*right\]",), 0),
    ((r"right\s*-\s*left[^\n]*(?:===|==|>=|<=|>|<)",), 0),
    ((r"\bend\s*-\s*start\b",), 0),
    ((r"for[^\n]*right", r"while", r"left\s*(?:\+\+|\+=)"), 0),
    ((r"for", r"while", r"set", r"delete|remove|discard"), 0),
    ((r"max\w*\s*(?:=|\()[^\n]*right\s*-\s*left",), ICASE),
    ((r"\[i\]\s*-\s*\w+\[i\s*-\s*(?:k|\d+)\]",), 0),
    ((r"curr\w*\s*-=[^\n]*\w+\[[^\]]*\]",), 0),
]


def _sliding_window(scan: CodeScan) -> bool:
    if detection.midpoint_indexing(scan.code):
        return False
    if detection.hash_set_window(scan):
        return True
    return any(in_order(scan.code, *parts, flags=flags) for parts, flags in SLIDING_WINDOW_PATTERNS)


def _two_pointers(scan: CodeScan) -> bool:
    if detection.midpoint_indexing(scan.code):
        return False
    moves = detection.LEFT_MOVE.search(scan.code) or detection.RIGHT_MOVE.search(scan.code)
    moves = moves or re.search(
        r"\b(?:lo|hi|low|high|i|j)\s*(?:\+\+|--|[+\-]=\s*1\b)", scan.code
    )
    return bool(moves and detection.POINTER_PAIRS.search(scan.code))


def _pointers(scan: CodeScan, algorithms: AlgorithmFeatures) -> PointerFeatures:
    pointers = PointerFeatures()
    if algorithms.binary_search:
        pointers.slow_fast = isolated("slow_fast", _slow_fast, scan)
        return pointers
    pointers.two_pointers = isolated("two_pointers", _two_pointers, scan)
    pointers.sliding_window = isolated("sliding_window", _sliding_window, scan)
    pointers.slow_fast = isolated("slow_fast", _slow_fast, scan)
    if pointers.two_pointers or pointers.sliding_window:
        pointers.left_right = isolated("forward_only", detection.forward_only, scan)
    return pointers


def _slow_fast(scan: CodeScan) -> bool:
    return in_order(scan.code, r"slow\s*=", r"fast\s*=") or in_order(scan.code, r"fast\s*=", r"slow\s*=")


# Space


def _space_usage(scan: CodeScan, structures: DataStructureFeatures) -> SpaceUsage:
    usage = SpaceUsage()
    if isolated("dynamic_allocation", search, DYNAMIC_ALLOCATION, scan.code):
        usage.aux_arrays += 1
    if isolated("appended_array", _appended_array, scan):
        usage.aux_arrays += 1
    hidden = isolated("hidden_allocation", search, HIDDEN_ALLOCATION, scan.code)
    if not hidden and scan.python:
        hidden = isolated("python_slice", search, PYTHON_SLICE, scan.code)
    usage.hidden_allocations = hidden
    if isolated("literal_map", _literal_map, scan) or structures.hash_map or structures.hash_set:
        usage.aux_maps = 1
    return usage


def _dominant_pattern(features: FeatureSet) -> str:
    for name, check in DOMINANT_ORDER:
        if check(features):
            return name
    return "constant"


def _apply_amortized(features: FeatureSet, scan: CodeScan) -> None:
    result = detect_amortized(scan.code, scan.profile.name, scan=scan)
    if result is None:
        return
    features.metrics.is_amortized = True
    features.metrics.amortized_pattern = result.pattern
    if result.pattern == MONOTONIC_STACK and features.loops.nested_loops:
        features.algorithms.monotonic_stack = True
    elif result.pattern == SLIDING_WINDOW_HASHSET:
        features.pointers.sliding_window = True
        features.pointers.left_right = True
    elif result.pattern == TWO_POINTERS and not features.algorithms.binary_search:
        features.pointers.two_pointers = True
        features.pointers.left_right = True


def extract(code: str, language: str, amortized_feedback: bool = True) -> FeatureSet:
    """
    Extract a FeatureSet from source text.

    Never raises: empty input yields an empty FeatureSet and a failing
    detector only leaves its own flag unset.
    """
    features = FeatureSet()
    if not code or not code.strip():
        return features

    scan = detection.build_scan(code, get_profile(language))
    features.metrics.line_count = len(code.splitlines())

    features.loops = isolated("loops", _loop_features, scan, default=LoopFeatures())
    features.data_structures = _data_structures(scan)
    features.algorithms = _algorithms(scan, features.data_structures, features.metrics)
    features.pointers = _pointers(scan, features.algorithms)
    features.space_usage = _space_usage(scan, features.data_structures)

    if amortized_feedback:
        isolated("amortized_feedback", _apply_amortized, features, scan, default=None)

    if features.algorithms.monotonic_stack and features.loops.nested_loops:
        features.loops.nested_loops = 0
        features.loops.max_nesting_depth = max(1, features.loops.max_nesting_depth - 1)
    if features.algorithms.recursion:
        features.space_usage.in_place = False
    if (features.pointers.sliding_window or features.pointers.two_pointers) and features.pointers.left_right:
        features.metrics.is_amortized = True

    features.metrics.dominant_pattern = _dominant_pattern(features)
    log_debug(
        f"Extracted features: dominant={features.metrics.dominant_pattern}, "
        f"depth={features.loops.max_nesting_depth}",
        layer="features",
    )
    return features
