"""
Language profiles: how to find function definitions and whether blocks are
delimited by indentation or braces.
"""

import re
from dataclasses import dataclass
from typing import Dict, List, Tuple

from complexity_engine.core import constants
from complexity_engine.core.exceptions import LanguageError

CONTROL_KEYWORDS = frozenset(
    ["if", "for", "while", "switch", "catch", "return", "else", "function", "new"]
)


@dataclass(frozen=True)
class LanguageProfile:
    name: str
    aliases: Tuple[str, ...]
    function_pattern: str
    indentation_blocks: bool = False
    comment_prefix: str = "//"

    def function_names(self, code: str) -> List[str]:
        """Names of functions defined in code, in definition order."""
        names = []
        for match in re.finditer(self.function_pattern, code, re.MULTILINE):
            name = next((g for g in match.groups() if g), None)
            if name and name not in CONTROL_KEYWORDS and name not in names:
                names.append(name)
        return names


_PROFILES: Dict[str, LanguageProfile] = {}


def register_language(profile: LanguageProfile) -> None:
    """Register a profile and update the global language tables."""
    _PROFILES[profile.name] = profile
    constants.SUPPORTED_LANGUAGES.add(profile.name)
    for alias in profile.aliases:
        constants.LANGUAGE_ALIASES[alias] = profile.name


def resolve_language(tag: str, strict: bool = False) -> str:
    """Resolve language alias to standard name."""
    lowered = (tag or "").strip().lower()

    if lowered in constants.SUPPORTED_LANGUAGES:
        return lowered

    resolved = constants.LANGUAGE_ALIASES.get(lowered)
    if resolved:
        return resolved

    if not strict:
        return constants.FALLBACK_LANGUAGE

    supported = ", ".join(sorted(constants.SUPPORTED_LANGUAGES))
    aliases = ", ".join(sorted(constants.LANGUAGE_ALIASES.keys()))
    raise LanguageError(
        f"Unsupported language: '{tag}'. "
        f"Supported languages: {supported}. "
        f"Aliases: {aliases}"
    )


def get_profile(tag: str) -> LanguageProfile:
    return _PROFILES[resolve_language(tag)]


def list_profiles() -> List[LanguageProfile]:
    return [_PROFILES[name] for name in sorted(_PROFILES)]


register_language(
    LanguageProfile(
        name="python",
        aliases=("py", "python3"),
        function_pattern=r"def\s+(\w+)\s*\(",
        indentation_blocks=True,
        comment_prefix="#",
    )
)
register_language(
    LanguageProfile(
        name="javascript",
        aliases=("js", "node", "typescript", "ts"),
        function_pattern=(
            r"function\s+(\w+)\s*\("
            r"|(?:const|let|var)\s+(\w+)\s*=\s*(?:async\s*)?(?:function\s*)?\("
            r"|^\s*(\w+)\s*\([^()]*\)\s*\{"
        ),
    )
)
register_language(
    LanguageProfile(
        name="java",
        aliases=("jdk",),
        function_pattern=(
            r"(?:public|private|protected|static|final|\s)*"
            r"[\w<>\[\],]+\s+(\w+)\s*\([^()]*\)\s*(?:throws\s+[\w\s,]+)?\{"
        ),
    )
)
register_language(
    LanguageProfile(
        name="cpp",
        aliases=("c++", "c", "cc", "cxx"),
        function_pattern=r"[\w:<>,\*&]+\s+[\*&]?(\w+)\s*\([^;{()]*\)\s*(?:const\s*)?\{",
    )
)
register_language(
    LanguageProfile(
        name="go",
        aliases=("golang",),
        function_pattern=r"func\s+(?:\([^)]*\)\s*)?(\w+)\s*\(",
    )
)
register_language(
    LanguageProfile(
        name="csharp",
        aliases=("c#", "cs"),
        function_pattern=(
            r"(?:public|private|protected|internal|static|\s)*"
            r"[\w<>\[\],]+\s+(\w+)\s*\([^()]*\)\s*\{"
        ),
    )
)
