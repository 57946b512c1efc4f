# -*- coding: utf-8 -*-
"""
Filtering logic for treedump. Decides whether a relative path is excluded
from the tree and from the file contents section.
"""

import os
import re
from typing import Callable, Dict, Iterable, Optional, Pattern, Sequence, Tuple

# Compiled glob patterns, keyed by pattern text. None marks a malformed glob.
_COMPILED_REGEX_CACHE: Dict[str, Optional[Pattern[str]]] = {}


def _translate_glob(pattern: str, sep: str = os.sep) -> str:
    """
    Translate a glob into a regex. Unlike fnmatch, '*' and '?' never match
    the path separator, so 'src/*' does not reach into 'src/a/b'.
    """
    not_sep = f"[^{re.escape(sep)}]"
    i, n = 0, len(pattern)
    res = []
    while i < n:
        c = pattern[i]
        i += 1
        if c == '*':
            res.append(not_sep + '*')
        elif c == '?':
            res.append(not_sep)
        elif c == '\\' and i < n:
            res.append(re.escape(pattern[i]))
            i += 1
        elif c == '[':
            parsed = _translate_class(pattern, i)
            if parsed is None:
                res.append(re.escape(c))
            else:
                cls, i = parsed
                res.append(cls)
        else:
            res.append(re.escape(c))
    return '(?s:' + ''.join(res) + r')\Z'


# Characters escaped inside a regex class so that the class text is never
# read as a nested set, a set operation, a range or a negation.
_CLASS_SPECIAL = frozenset('\\[]^-&~|')


def _class_literal(ch: str) -> str:
    return '\\' + ch if ch in _CLASS_SPECIAL else ch


def _class_char(pattern: str, j: int) -> Tuple[Optional[str], int]:
    """Reads one class member at ``j``; a backslash escapes the next character."""
    if pattern[j] == '\\':
        if j + 1 >= len(pattern):
            return None, j
        return pattern[j + 1], j + 2
    return pattern[j], j + 1


def _translate_class(pattern: str, start: int) -> Optional[Tuple[str, int]]:
    """
    Translate the character class whose '[' sits just before ``start``.

    Returns the regex class and the index after the closing ']', or None when
    the class is unterminated (the '[' is then taken literally). A ']' right
    after the opening bracket (or its negation) is a member, not the end.
    """
    n = len(pattern)
    j = start
    negate = j < n and pattern[j] in '!^'
    if negate:
        j += 1
    items = []
    first = True
    while True:
        if j >= n:
            return None
        if pattern[j] == ']' and not first:
            break
        first = False
        lo, j = _class_char(pattern, j)
        if lo is None:
            return None
        if j + 1 < n and pattern[j] == '-' and pattern[j + 1] != ']':
            hi, j = _class_char(pattern, j + 1)
            if hi is None:
                return None
            items.append(f"{_class_literal(lo)}-{_class_literal(hi)}")
        else:
            items.append(_class_literal(lo))
    return '[' + ('^' if negate else '') + ''.join(items) + ']', j + 1


def _compile_pattern(pattern: str) -> Optional[Pattern[str]]:
    """Compile a glob pattern to regex, caching the result."""
    if pattern in _COMPILED_REGEX_CACHE:
        return _COMPILED_REGEX_CACHE[pattern]
    try:
        compiled = re.compile(_translate_glob(pattern))
    except re.error:
        compiled = None # e.g. a reversed range like [z-a]; never matches
    _COMPILED_REGEX_CACHE[pattern] = compiled
    return compiled


def glob_match(pattern: str, text: str) -> bool:
    """Case-sensitive glob match of ``text`` against ``pattern``."""
    regex = _compile_pattern(pattern)
    return regex is not None and regex.match(text) is not None


def is_hidden_path(relative_path: str) -> bool:
    """True if any segment of the path starts with '.'."""
    return any(part.startswith('.') for part in relative_path.split(os.sep))


def matches_pattern(relative_path: str, pattern: str) -> bool:
    """Checks a single exclusion pattern against a relative path."""
    sep = os.sep
    if len(pattern) > 1 and pattern.startswith('/') and pattern.endswith('/'):
        inner = pattern[1:-1]
        return relative_path == inner or relative_path.startswith(inner + sep)
    if pattern.endswith('/'):
        return relative_path == pattern[:-1] or relative_path.startswith(pattern)
    if pattern.startswith('/'):
        anchored = pattern[1:]
        return relative_path == anchored or relative_path.startswith(anchored + sep)

    if glob_match(pattern, relative_path):
        return True
    return any(glob_match(pattern, part) for part in relative_path.split(sep))


def is_excluded(
    relative_path: str,
    patterns: Iterable[str],
    show_hidden: bool = False,
    log_func: Optional[Callable] = None
) -> bool:
    """
    Checks whether a relative path is excluded.

    Args:
        relative_path: Path relative to the scan root, using the OS separator.
        patterns: The exclusion pattern set. Iteration order does not matter.
        show_hidden: If False, any path with a segment starting with '.' is excluded.
        log_func: Optional function for logging filter decisions.

    Returns:
        True if the path must be left out of both the tree and the contents.
    """
    if not show_hidden and is_hidden_path(relative_path):
        if log_func:
            log_func(f"Filter: Excluding hidden path '{relative_path}'", "debug")
        return True

    for pattern in patterns:
        if matches_pattern(relative_path, pattern):
            if log_func:
                log_func(f"Filter: Excluding '{relative_path}' (matches pattern '{pattern}')", "debug")
            return True
    return False


def matches_file_types(name: str, file_types: Sequence[str]) -> bool:
    """
    Check if a file name ends with one of the requested suffixes.

    An empty ``file_types`` means every file matches.
    """
    if not file_types:
        return True
    return any(name.endswith(ext) for ext in file_types)
