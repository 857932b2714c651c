"""Exclusion patterns: shell-style globs tested anywhere inside a path."""

from __future__ import annotations

import fnmatch
import re
from dataclasses import dataclass
from typing import TYPE_CHECKING

from flatten_xml.exceptions import PatternError

if TYPE_CHECKING:
    from collections.abc import Iterable


@dataclass(frozen=True)
class CompiledPattern:
    """An exclusion pattern compiled once for repeated matching.

    Attributes:
        source: The pattern text as given, used verbatim (no escape character).
        regex: Compiled expression that finds the pattern anywhere in a path.
    """

    source: str
    regex: re.Pattern[str]

    def matches(self, path: str) -> bool:
        """Return True if any substring of `path` matches the pattern.

        `*` and `?` also match `/`, so `*.log` excludes nested files and `build`
        excludes every path containing a `build` segment.
        """
        return self.regex.match(path) is not None


def compile_pattern(pattern: str) -> CompiledPattern:
    """Compile one exclusion pattern.

    Matching anywhere in the path is expressed by wrapping the pattern in `*`,
    then anchoring the translated expression as `fnmatch` does.

    Args:
        pattern (str): shell-style glob (`*`, `?`, `[...]`)

    Raises:
        PatternError: if the pattern is empty.

    Returns:
        CompiledPattern: the reusable matcher
    """
    if not pattern:
        raise PatternError(pattern=pattern, reason="empty pattern")
    return CompiledPattern(source=pattern, regex=re.compile(fnmatch.translate(f"*{pattern}*")))


def compile_patterns(patterns: Iterable[str]) -> list[CompiledPattern]:
    """Compile every pattern, failing on the first malformed one."""
    return [compile_pattern(p) for p in patterns]

