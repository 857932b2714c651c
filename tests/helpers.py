from __future__ import annotations

import shutil
import subprocess  # noqa: S404
from typing import TYPE_CHECKING

import pytest

if TYPE_CHECKING:
    from pathlib import Path

requires_git = pytest.mark.skipif(shutil.which("git") is None, reason="git executable not available")


def git_init(path: Path) -> None:
    subprocess.run(["git", "init", "--quiet", str(path)], check=True, capture_output=True)  # noqa: S603, S607


class StaticOracle:
    """Ignore oracle answering from a fixed set of paths."""

    def __init__(self, ignored: set[str] | None = None) -> None:
        self.ignored = ignored or set()
        self.queries: list[str] = []

    def is_ignored(self, path: str) -> bool:
        self.queries.append(path)
        return path in self.ignored
