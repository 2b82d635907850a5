"""
Pattern compilation for literal and regular-expression searches.

Literal patterns are escaped and compiled by the same ``re`` engine as regex
patterns, so both modes share one execution path for locating, line/column
mapping and whole-word checks.
"""

import logging
import re
import threading
from dataclasses import dataclass
from functools import lru_cache
from typing import Dict, Optional, Pattern, Tuple

from .errors import (
    EmptyPatternError,
    InvalidPatternError,
    InvalidReplacementError,
    PathologicalPatternError,
)

logger = logging.getLogger("findexa.search.pattern_matcher")

_QUANTIFIER_BRACE = re.compile(r"\{(\d*)(,?)(\d*)\}")
_DOLLAR_TOKEN = re.compile(r"\$(?:(\$)|(\d+)|\{(\w+)\})")


@dataclass(frozen=True)
class Matcher:
    """A compiled pattern ready for scanning."""
    regex: Pattern
    pattern: str
    is_regex: bool

    def expand(self, match: "re.Match", replacement: str) -> str:
        """
        Build the replacement text for one match.

        Regex mode understands ``$1``, ``${1}``, ``${name}`` and ``$$`` as well
        as Python's ``\\1`` and ``\\g<name>``; literal mode inserts the text verbatim.
        """
        if not self.is_regex:
            return replacement
        try:
            return match.expand(_translate_replacement(replacement))
        except (re.error, IndexError) as e:
            raise InvalidReplacementError(replacement, str(e)) from e


class PatternMatcher:
    """Compiles search patterns and caches the resulting matchers."""

    def __init__(self, guard_pathological: bool = True, cache_size: int = 128):
        self.guard_pathological = guard_pathological
        self.cache_size = cache_size
        self.compiled_patterns: Dict[Tuple[str, bool, bool, bool], Matcher] = {}
        self._lock = threading.RLock()

    def compile(self,
                pattern: str,
                is_regex: bool = False,
                case_sensitive: bool = False,
                dot_matches_newline: bool = False) -> Matcher:
        """
        Compile a pattern into a matcher.

        Args:
            pattern: Literal text or regular expression
            is_regex: Interpret ``pattern`` as a regular expression
            case_sensitive: Match letter case exactly
            dot_matches_newline: Let ``.`` match ``\\n``

        Returns:
            Matcher wrapping the compiled expression

        Raises:
            EmptyPatternError: ``pattern`` is empty
            InvalidPatternError: the regular expression does not parse
            PathologicalPatternError: the expression nests unbounded quantifiers
        """
        if not pattern:
            raise EmptyPatternError()

        cache_key = (pattern, is_regex, case_sensitive, dot_matches_newline)
        with self._lock:
            cached = self.compiled_patterns.get(cache_key)
        if cached is not None:
            return cached

        source = pattern if is_regex else re.escape(pattern)
        flags = re.MULTILINE
        if not case_sensitive:
            flags |= re.IGNORECASE
        if dot_matches_newline:
            flags |= re.DOTALL

        try:
            compiled = re.compile(source, flags)
        except re.error as e:
            raise InvalidPatternError(pattern, str(e)) from e

        if is_regex and self.guard_pathological and has_nested_quantifier(pattern):
            raise PathologicalPatternError(pattern)

        matcher = Matcher(regex=compiled, pattern=pattern, is_regex=is_regex)
        with self._lock:
            if len(self.compiled_patterns) >= self.cache_size:
                self.compiled_patterns.pop(next(iter(self.compiled_patterns)))
            self.compiled_patterns[cache_key] = matcher
        logger.debug("Compiled %s pattern %r", "regex" if is_regex else "literal", pattern)
        return matcher

    def clear_cache(self) -> None:
        with self._lock:
            self.compiled_patterns.clear()


_default_matcher = PatternMatcher()


def compile_pattern(pattern: str,
                    is_regex: bool = False,
                    case_sensitive: bool = False,
                    dot_matches_newline: bool = False,
                    matcher: Optional[PatternMatcher] = None) -> Matcher:
    """Compile ``pattern`` with the shared (or the given) ``PatternMatcher``."""
    return (matcher or _default_matcher).compile(
        pattern, is_regex, case_sensitive, dot_matches_newline
    )


def has_nested_quantifier(pattern: str) -> bool:
    """
    Detect repeated groups whose body ends in an unbounded item, e.g. ``(a+)+``.

    A literal after the inner quantifier that the quantified item cannot
    consume ends the body, so ``(\\w+\\.)+`` is accepted while ``(a+)+`` and
    ``(a+a)+`` are not.
    """
    # One frame per open group: [start, open tail, open tail of an earlier alternative]
    stack = [[0, None, None]]
    i = 0
    n = len(pattern)

    while i < n:
        ch = pattern[i]
        frame = stack[-1]
        if ch == "(":
            stack.append([i, None, None])
            i = _skip_group_prefix(pattern, i + 1)
            continue
        if ch == "|":
            frame[2] = frame[2] or frame[1]
            frame[1] = None
            i += 1
            continue
        if ch in "^$*+?{":
            i += 1
            continue

        tail = None
        literal = None
        if ch == ")":
            if len(stack) == 1:
                i += 1
                continue
            start, tail, earlier = stack.pop()
            tail = tail or earlier
            i += 1
            atom = pattern[start:i]
            frame = stack[-1]
        elif ch == "\\":
            atom = pattern[i:i + 2]
            if i + 1 < n and not pattern[i + 1].isalnum():
                literal = pattern[i + 1]
            i += 2
        elif ch == "[":
            end = _class_end(pattern, i)
            atom = pattern[i:end]
            i = end
        else:
            atom = ch
            if ch != ".":
                literal = ch
            i += 1

        end, unbounded = _read_quantifier(pattern, i)
        quantified = end > i
        i = end

        if unbounded:
            if tail is not None:
                return True
            frame[1] = atom
        elif tail is not None:
            frame[1] = tail
        elif literal is not None and not quantified and frame[1] is not None:
            if not _can_consume(frame[1], literal):
                frame[1] = None

    return False


def _skip_group_prefix(pattern: str, index: int) -> int:
    if not pattern.startswith("?", index):
        return index
    index += 1
    if pattern.startswith(("<=", "<!"), index):
        return index + 2
    if pattern.startswith(("P<", "<"), index):
        return pattern.find(">", index) + 1 or len(pattern)
    if index < len(pattern) and pattern[index] in ":=!>":
        return index + 1
    return index


def _class_end(pattern: str, index: int) -> int:
    n = len(pattern)
    index += 1
    if index < n and pattern[index] == "^":
        index += 1
    if index < n and pattern[index] == "]":
        index += 1
    while index < n and pattern[index] != "]":
        if pattern[index] == "\\":
            index += 1
        index += 1
    return index + 1


def _read_quantifier(pattern: str, index: int) -> Tuple[int, bool]:
    """Return the end of the quantifier at ``index`` and whether it is unbounded."""
    if index >= len(pattern):
        return index, False
    ch = pattern[index]
    if ch in "*+?":
        end = index + 1
        unbounded = ch != "?"
    elif ch == "{":
        brace = _QUANTIFIER_BRACE.match(pattern, index)
        if brace is None:
            return index, False
        end = brace.end()
        unbounded = bool(brace.group(2)) and not brace.group(3)
    else:
        return index, False
    # lazy or possessive suffix
    if end < len(pattern) and pattern[end] in "?+":
        end += 1
    return end, unbounded


def _can_consume(atom: str, literal: str) -> bool:
    try:
        return re.fullmatch(atom, literal, re.IGNORECASE) is not None
    except re.error:
        return True


@lru_cache(maxsize=64)
def _translate_replacement(replacement: str) -> str:
    """
    Rewrite editor-style ``$`` tokens into a template for ``re.Match.expand``.

    Only ``\\1``..``\\99`` and ``\\g<...>`` keep their meaning; any other
    backslash is literal, so ``C:\\temp\\$1`` stays a path.
    """
    parts = []
    i = 0
    n = len(replacement)

    while i < n:
        ch = replacement[i]
        if ch == "\\":
            following = replacement[i + 1:i + 2]
            if following and following in "123456789":
                parts.append(ch + following)
                i += 2
            elif replacement.startswith("g<", i + 1):
                parts.append("\\g")
                i += 2
            else:
                parts.append("\\\\")
                i += 1
            continue
        if ch == "$":
            token = _DOLLAR_TOKEN.match(replacement, i)
            if token:
                dollar, number, name = token.groups()
                if dollar:
                    parts.append("$")
                else:
                    parts.append(f"\\g<{number or name}>")
                i = token.end()
                continue
        parts.append(ch)
        i += 1

    return "".join(parts)
