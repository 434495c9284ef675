"""
Structural scanning shared by the feature extractor and the amortized
detector.

Both consumers read the same loop blocks, function bodies and pointer/stack
idioms from here, so they cannot disagree about what a monotonic stack or
a forward-only window looks like.
"""

import re
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Tuple

from complexity_engine.analysis.languages import LanguageProfile
from complexity_engine.core.logging import log_warning

# Pointer movement idioms
LEFT_MOVE = re.compile(
    r"\b(?:left|l|start)\s*(?:\+\+|\+=\s*1\b|=\s*(?:left|l|start)\s*\+\s*1\b)"
    r"|\+\+\s*(?:left|l|start)\b"
)
RIGHT_MOVE = re.compile(
    r"\b(?:right|r|end)\s*(?:\+\+|--|[+\-]=\s*1\b|=\s*(?:right|r|end)\s*[+\-]\s*1\b)"
    r"|(?:\+\+|--)\s*(?:right|r|end)\b"
)
POINTER_PAIRS = re.compile(
    r"\bleft\b[^\n]*\bright\b|\bright\b[^\n]*\bleft\b"
    r"|\bstart\b[^\n]*\bend\b|\blo\b[^\n]*\bhi\b|\blow\b[^\n]*\bhigh\b"
    r"|\bwhile\b[^\n]*\bi\b[^\n]*\bj\b"
)
# Re-initialising a pointer (not a unit step) inside an enclosing loop
POINTER_REINIT = re.compile(
    r"\b(?:left|right|l|r|lo|hi|low|high|start|end)\b(?:\s*,\s*\w+)*\s*=(?!=)"
    r"(?!\s*(?:left|right|l|r|lo|hi|low|high|start|end)\s*[+\-]\s*1\b)(?!\s*max\s*\()"
)
MIDPOINT_INDEX = re.compile(r"\w+\[\s*mid\s*\]", re.IGNORECASE)

STACK_NAMES = re.compile(r"\b(?:stack|stk|st|mono\w*|deque|dq)\b", re.IGNORECASE)
STACK_POP = re.compile(r"\.pop\s*\(\s*\)|\.pop_back\s*\(|\.removeLast\s*\(|\.pollLast\s*\(")

_PY_LOOP = re.compile(r"^([ \t]*)(?:async\s+)?(for|while)\b")
_BRACE_LOOP = re.compile(r"\b(for|while)\b")


@dataclass
class Block:
    """A loop (or function) with its header and body text."""

    keyword: str
    header: str
    body: str
    start: int
    end: int
    depth: int = 1


@dataclass
class CodeScan:
    """Comment-stripped source plus the blocks found in it."""

    code: str
    profile: LanguageProfile
    blocks: List[Block] = field(default_factory=list)
    functions: Dict[str, str] = field(default_factory=dict)

    @property
    def python(self) -> bool:
        return self.profile.indentation_blocks

    def while_blocks(self) -> List[Block]:
        return [b for b in self.blocks if b.keyword == "while"]

    def enclosing(self, inner: Block) -> List[Block]:
        return [
            b
            for b in self.blocks
            if b is not inner and b.start <= inner.start and b.end >= inner.end
        ]

    def enclosed(self, outer: Block) -> List[Block]:
        return [
            b
            for b in self.blocks
            if b is not outer and outer.start <= b.start and outer.end >= b.end
        ]


def isolated(name: str, detector: Callable, *args, default: Any = False) -> Any:
    """Run one detector; a failure counts as "not detected" for it alone."""
    try:
        return detector(*args)
    except Exception as e:  # includes re.error from pathological input
        log_warning(f"Detector '{name}' failed: {e}", layer="features")
        return default


def search(pattern, text: str, flags: int = 0) -> bool:
    if isinstance(pattern, str):
        return re.search(pattern, text, flags) is not None
    return pattern.search(text) is not None


def count(pattern: str, text: str, flags: int = 0) -> int:
    return len(re.findall(pattern, text, flags))


def in_order(text: str, *parts: str, flags: int = 0, per_line: bool = False) -> bool:
    """
    True when every part matches, each one after the end of the previous match.

    Parts are searched one at a time from left to right, so the cost stays
    linear in the length of the text. With per_line the whole sequence has
    to occur on a single line.
    """
    compiled = [re.compile(part, flags) for part in parts]
    for chunk in text.split("\n") if per_line else (text,):
        pos = 0
        for pattern in compiled:
            match = pattern.search(chunk, pos)
            if match is None:
                break
            pos = match.end()
        else:
            return True
    return False


def midpoint_indexing(code: str) -> bool:
    """A midpoint variable used as an index, the mark of a binary search."""
    if MIDPOINT_INDEX.search(code):
        return True
    return in_order(code, r"\bmid\w*\s*=", r"\[", r"\bmid\w*", r"\]", flags=re.IGNORECASE, per_line=True)


def strip_comments(code: str, profile: LanguageProfile) -> str:
    if profile.indentation_blocks:
        return re.sub(r"(?m)#.*$", "", code)
    code = re.sub(r"/\*.*?\*/", "", code, flags=re.S)
    return re.sub(r"(?m)(?<!:)//.*$", "", code)


def _indent(line: str) -> int:
    return len(line.expandtabs(4)) - len(line.expandtabs(4).lstrip())


def _indented_body(lines: List[str], index: int) -> Tuple[str, int]:
    """Lines after lines[index] that are indented deeper; returns (body, last index)."""
    base = _indent(lines[index])
    body = []
    head = lines[index]
    # one-line suite: "for x in y: total += x"
    colon = head.rfind(":")
    if colon != -1 and head[colon + 1 :].strip():
        body.append(head[colon + 1 :].strip())
    last = index
    for j in range(index + 1, len(lines)):
        line = lines[j]
        if not line.strip():
            continue
        if _indent(line) <= base:
            break
        body.append(line)
        last = j
    return "\n".join(body), last


def _match_close(code: str, open_index: int, opening: str, closing: str) -> int:
    level = 0
    for i in range(open_index, len(code)):
        if code[i] == opening:
            level += 1
        elif code[i] == closing:
            level -= 1
            if level == 0:
                return i
    return len(code) - 1


def _python_loop_blocks(code: str) -> List[Block]:
    lines = code.split("\n")
    offsets = []
    position = 0
    for line in lines:
        offsets.append(position)
        position += len(line) + 1

    blocks = []
    for i, line in enumerate(lines):
        match = _PY_LOOP.match(line)
        if not match:
            continue
        body, last = _indented_body(lines, i)
        end = offsets[last] + len(lines[last])
        blocks.append(Block(match.group(2), line.strip(), body, offsets[i], end))
    return blocks


def _brace_loop_blocks(code: str, go_style: bool) -> List[Block]:
    blocks = []
    for match in _BRACE_LOOP.finditer(code):
        keyword = match.group(1)
        pos = match.end()
        while pos < len(code) and code[pos] in " \t\r\n":
            pos += 1
        if pos < len(code) and code[pos] == "(":
            header_end = _match_close(code, pos, "(", ")")
        elif go_style and keyword == "for":
            brace = code.find("{", pos)
            if brace == -1:
                continue
            header_end = brace - 1
        else:
            continue
        header = code[match.start() : header_end + 1]
        pos = header_end + 1
        while pos < len(code) and code[pos] in " \t\r\n":
            pos += 1
        if pos < len(code) and code[pos] == "{":
            close = _match_close(code, pos, "{", "}")
            body = code[pos + 1 : close]
            end = close
        elif pos < len(code) and code[pos] == ";":
            # trailing "while (...);" of a do-while
            continue
        else:
            stop = code.find(";", pos)
            end = len(code) - 1 if stop == -1 else stop
            body = code[pos : end + 1]
        blocks.append(Block(keyword, header, body, match.start(), end))
    return blocks


def loop_blocks(code: str, profile: LanguageProfile) -> List[Block]:
    """All for/while blocks with their structural nesting depth."""
    if profile.indentation_blocks:
        blocks = _python_loop_blocks(code)
    else:
        blocks = _brace_loop_blocks(code, go_style=profile.name == "go")
    for block in blocks:
        block.depth = 1 + sum(
            1
            for other in blocks
            if other is not block and other.start < block.start and other.end >= block.end
        )
    return blocks


def function_bodies(code: str, profile: LanguageProfile) -> Dict[str, str]:
    """Map each defined function name to its body text."""
    bodies: Dict[str, str] = {}
    if profile.indentation_blocks:
        lines = code.split("\n")
        for i, line in enumerate(lines):
            match = re.match(r"\s*(?:async\s+)?def\s+(\w+)\s*\(", line)
            if match and match.group(1) not in bodies:
                body, _ = _indented_body(lines, i)
                bodies[match.group(1)] = body
        return bodies

    names = profile.function_names(code)
    for match in re.finditer(profile.function_pattern, code, re.MULTILINE):
        name = next((g for g in match.groups() if g), None)
        if name not in names or name in bodies:
            continue
        brace = code.find("{", match.end() - 1)
        line_end = code.find("\n", match.end())
        line_end = len(code) if line_end == -1 else line_end
        semicolon = code.find(";", match.end())
        if brace == -1 or (semicolon != -1 and semicolon < brace and line_end < brace):
            bodies[name] = code[match.end() : line_end]
            continue
        close = _match_close(code, brace, "{", "}")
        bodies[name] = code[brace + 1 : close]
    return bodies


def build_scan(code: str, profile: LanguageProfile) -> CodeScan:
    source = isolated("comments", strip_comments, code, profile, default=code)
    scan = CodeScan(code=source, profile=profile)
    scan.blocks = isolated("loop_blocks", loop_blocks, source, profile, default=[])
    scan.functions = isolated(
        "function_bodies", function_bodies, source, profile, default={}
    )
    return scan


def calls(name: str, text: str) -> int:
    """Number of call sites of name in text."""
    return count(rf"(?<![\w$]){re.escape(name)}\s*\(", text)


def forward_only(scan: CodeScan) -> bool:
    """No pointer is re-initialised inside a loop that encloses another loop."""
    for block in scan.blocks:
        inner = scan.enclosed(block)
        if not inner:
            continue
        prefix = block.body
        for other in inner:
            prefix = prefix.replace(other.body, "")
        if POINTER_REINIT.search(prefix) or re.search(
            r"\b(?:left|right|l|r|start)\s*=\s*0\b", prefix
        ):
            return False
    return True


def drains_stack(block: Block) -> bool:
    """A while loop that pops a stack-like structure."""
    text = f"{block.header}\n{block.body}"
    if block.keyword != "while" or not STACK_POP.search(text):
        return False
    return bool(
        STACK_NAMES.search(block.header)
        or re.search(r"\.length|\blen\s*\(|\.size\s*\(|\.empty\s*\(|\.isEmpty\s*\(", block.header)
    )


def monotonic_stack(scan: CodeScan) -> bool:
    """An outer loop containing an inner while loop that drains a stack."""
    for block in scan.blocks:
        if drains_stack(block) and scan.enclosing(block):
            return True
    return False


def hash_set_window(scan: CodeScan) -> bool:
    """Outer loop adding to a set, inner while removing from it."""
    for block in scan.blocks:
        if block.keyword != "while" or not scan.enclosing(block):
            continue
        outer_text = scan.enclosing(block)[0].body
        removes = re.search(r"\.remove\s*\(|\.discard\s*\(|\.delete\s*\(|\.erase\s*\(", block.body)
        adds = re.search(r"\.add\s*\(|\.insert\s*\(", outer_text)
        if removes and adds and LEFT_MOVE.search(block.body):
            return True
    return False


def first_statement(body: str) -> str:
    for line in body.split("\n"):
        text = line.strip().lstrip("{").strip()
        if text:
            return text
    return ""


def condition_variable(block: Block) -> Optional[str]:
    """The variable compared in a loop condition."""
    header = block.header
    match = re.match(r"for\s*\([^;]*;\s*(\w+)\s*[<>≤≥!=]", header)
    if match:
        return match.group(1)
    match = re.match(r"while\s*\(?\s*(?:not\s+|!\s*)?(\w+)\s*(?:[<>≤≥!=]|\)|:|$|>>|&)", header)
    if match:
        return match.group(1)
    return None


def compared_bound(block: Block) -> Optional[str]:
    match = re.search(r"[<≤]=?\s*([A-Za-z_]\w*)", block.header)
    return match.group(1) if match else None
