"""Expand path arguments into the ordered, deduplicated list of files to export."""

from __future__ import annotations

import glob
import os
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from flatten_xml.exceptions import GlobExpansionError
from flatten_xml.file_manipulation import is_regular_file, relpath
from flatten_xml.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator, Sequence

    import structlog

    from flatten_xml.patterns import CompiledPattern
    from flatten_xml.settings import Settings
    from flatten_xml.vcs import IgnoreOracle


@dataclass(frozen=True)
class ExclusionRule:
    """One predicate of the filter chain; a candidate is dropped when it returns True."""

    name: str
    predicate: Callable[[str], bool]

    def excludes(self, path: str) -> bool:
        return self.predicate(path)


def build_filter_chain(patterns: Sequence[CompiledPattern], oracle: IgnoreOracle) -> list[ExclusionRule]:
    """Order the exclusion predicates: exclusion patterns first, then VCS ignore rules.

    Args:
        patterns (Sequence[CompiledPattern]): compiled exclusion patterns, in configuration order
        oracle (IgnoreOracle): VCS ignore oracle (possibly the null oracle)

    Returns:
        list[ExclusionRule]: the chain evaluated for every candidate
    """
    rules = [ExclusionRule(name=f"pattern:{p.source}", predicate=p.matches) for p in patterns]
    rules.append(ExclusionRule(name="vcs-ignore", predicate=oracle.is_ignored))
    return rules


def first_exclusion(rules: Sequence[ExclusionRule], path: str) -> ExclusionRule | None:
    """Return the first rule excluding `path`, or None when it survives the chain."""
    for rule in rules:
        if rule.excludes(path):
            return rule
    return None


def validate_glob(pattern: str) -> None:
    """Reject glob syntax that cannot be expanded as intended.

    `**` must be a whole path component and every `[` must open a terminated
    character class (a `]` right after `[`, `[!` or `[^` is a member).

    Args:
        pattern (str): the glob to check

    Raises:
        GlobExpansionError: if the pattern is malformed.
    """
    for component in pattern.replace("\\", "/").split("/"):
        if "**" in component and component != "**":
            raise GlobExpansionError(pattern=pattern, reason="'**' must be a whole path component")

    i, n = 0, len(pattern)
    while i < n:
        if pattern[i] == "[":
            j = i + 1
            if j < n and pattern[j] in "!^":
                j += 1
            if j < n and pattern[j] == "]":
                j += 1
            close = pattern.find("]", j)
            if close < 0:
                raise GlobExpansionError(pattern=pattern, reason=f"unterminated character class at {i}")
            i = close
        i += 1


def walk_directory(directory: str, *, logger: structlog.BoundLogger) -> Iterator[str]:
    """Yield every non-directory entry below `directory`, at any depth, hidden ones included.

    A subdirectory that cannot be listed is logged and skipped. Symlinked
    directories are not descended into.

    Args:
        directory (str): the directory to walk
        logger (structlog.BoundLogger): diagnostics sink

    Yields:
        Iterator[str]: entry paths joined onto `directory`, in enumeration order
    """

    def on_error(e: OSError) -> None:
        logger.debug("skip_unreadable_dir", path=e.filename, error=e.strerror or str(e))

    for root, _dirs, files in os.walk(directory, onerror=on_error):
        for name in files:
            yield os.path.join(root, name)


def expand_entry(entry: str, *, recursive: bool, logger: structlog.BoundLogger) -> Iterator[str]:
    """Yield the regular files named by one path argument, in enumeration order.

    A directory is walked to every depth when `recursive` is set. An entry
    naming an existing file is yielded as is, without glob expansion. Anything
    else is expanded as a glob; `*` and `?` match hidden entries and `**` spans
    directories. A match that cannot be stat'ed is logged and skipped.

    Args:
        entry (str): a path or glob from the settings
        recursive (bool): expand directories recursively
        logger (structlog.BoundLogger): diagnostics sink

    Raises:
        GlobExpansionError: if the entry is not a valid glob.

    Yields:
        Iterator[str]: matched regular file paths, as produced by the expansion
    """
    if recursive and os.path.isdir(entry):
        logger.debug("recursive_walk", entry=entry)
        matches = walk_directory(entry, logger=logger)
    elif os.path.isfile(entry):
        yield entry
        return
    else:
        validate_glob(entry)
        matches = glob.iglob(entry, recursive=True, include_hidden=True)

    for match in matches:
        try:
            regular = is_regular_file(match)
        except OSError as e:
            logger.debug("skip_match_error", path=match, error=str(e))
            continue
        if not regular:
            logger.debug("skip_non_file", path=match)
            continue
        yield match


def discover_files(
    settings: Settings,
    patterns: Sequence[CompiledPattern],
    oracle: IgnoreOracle,
    *,
    root: Path | None = None,
    logger: structlog.BoundLogger | None = None,
) -> list[str]:
    """Collect the files to export, in discovery order.

    Entries are processed in the configured order and each one appends its
    matches as they are enumerated (no sorting). The first occurrence of a
    relative path wins; later duplicates are dropped. A candidate matched by
    any rule of the filter chain is dropped.

    Args:
        settings (Settings): run settings (`paths`, `recursive`)
        patterns (Sequence[CompiledPattern]): compiled exclusion patterns
        oracle (IgnoreOracle): VCS ignore oracle
        root (Path | None): directory paths are made relative to; defaults to the working directory
        logger (structlog.BoundLogger | None): diagnostics sink

    Raises:
        GlobExpansionError: if an entry is not a valid glob.

    Returns:
        list[str]: unique relative file paths
    """
    log = logger or get_logger()
    base = root or Path.cwd()
    rules = build_filter_chain(patterns, oracle)
    seen: set[str] = set()
    files: list[str] = []

    for entry in settings.paths:
        log.debug("processing_entry", entry=entry)
        for candidate in expand_entry(entry, recursive=settings.recursive, logger=log):
            rel = relpath(candidate, base)
            if rel in seen:
                log.debug("skip_duplicate", path=rel)
                continue
            rule = first_exclusion(rules, rel)
            if rule is not None:
                log.debug("excluded", path=rel, rule=rule.name)
                continue
            log.debug("included", path=rel)
            seen.add(rel)
            files.append(rel)

    return files
