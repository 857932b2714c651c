"""Read-only access to version-control ignore rules."""

from __future__ import annotations

import subprocess  # noqa: S404
from pathlib import Path, PurePath
from typing import TYPE_CHECKING, Protocol

from flatten_xml.config import VCS_METADATA_DIRS
from flatten_xml.exceptions import GitCommandError, NotAGitRepositoryError
from flatten_xml.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Sequence

    import structlog


class IgnoreOracle(Protocol):
    """Answers whether a path relative to the working directory is ignored by the VCS."""

    def is_ignored(self, path: str) -> bool: ...


class NullIgnoreOracle:
    """Oracle used outside any working tree: nothing is ignored."""

    def is_ignored(self, path: str) -> bool:  # noqa: ARG002, PLR6301
        return False

    def __repr__(self) -> str:
        return "NullIgnoreOracle()"


def run_git(args: Sequence[str], cwd: Path) -> subprocess.CompletedProcess[str]:
    """Run a git command without raising on a non-zero exit status.

    Args:
        args (Sequence[str]): arguments following `git`
        cwd (Path): directory to run in

    Raises:
        FileNotFoundError: if the git executable is not available.

    Returns:
        subprocess.CompletedProcess[str]: the finished process with captured output
    """
    return subprocess.run(
        ["git", *args],  # noqa: S607
        cwd=str(cwd),
        text=True,
        capture_output=True,
        check=False,
    )


def git_toplevel(start: Path) -> Path:
    """Locate the working tree enclosing `start` by walking upward.

    Args:
        start (Path): directory to search from

    Raises:
        NotAGitRepositoryError: if `start` is not inside a working tree or git is unavailable.

    Returns:
        Path: the root of the working tree
    """
    try:
        out = run_git(["rev-parse", "--show-toplevel"], start)
    except OSError as e:
        raise NotAGitRepositoryError(folder=start, message=f"git unavailable: {e}") from e
    if out.returncode != 0 or not out.stdout.strip():
        raise NotAGitRepositoryError(folder=start)
    return Path(out.stdout.strip())


class GitIgnoreOracle:
    """Oracle backed by `git check-ignore`, evaluated from the working directory.

    Ignore rules are evaluated as written, whether or not a path is tracked, so
    nested `.gitignore` files, negations and directory rules all apply. Paths
    inside the repository metadata directory are always ignored. Any failure of
    the query answers False.
    """

    def __init__(self, toplevel: Path, cwd: Path, *, logger: structlog.BoundLogger | None = None) -> None:
        self.toplevel = toplevel
        self.cwd = cwd
        self.logger = logger or get_logger()

    def __repr__(self) -> str:
        return f"GitIgnoreOracle(toplevel={str(self.toplevel)!r})"

    def check_ignore(self, path: str) -> bool:
        """Query git for `path`.

        Raises:
            GitCommandError: if git reports anything other than ignored / not ignored.
        """
        args = ["check-ignore", "--quiet", "--no-index", "--", path]
        out = run_git(args, self.cwd)
        if out.returncode == 0:
            return True
        if out.returncode == 1:
            return False
        raise GitCommandError(
            command="git " + " ".join(args),
            returncode=out.returncode,
            stdout=out.stdout,
            stderr=out.stderr,
        )

    def is_ignored(self, path: str) -> bool:
        if any(part in VCS_METADATA_DIRS for part in PurePath(path).parts):
            return True
        try:
            return self.check_ignore(path)
        except (GitCommandError, OSError) as e:
            self.logger.debug("vcs_query_failed", path=path, error=str(e))
            return False


def detect_ignore_oracle(
    start: Path | None = None,
    *,
    logger: structlog.BoundLogger | None = None,
) -> IgnoreOracle:
    """Find the working tree enclosing `start` (default: the current directory).

    Args:
        start (Path | None): directory to search from and to evaluate paths against
        logger (structlog.BoundLogger | None): diagnostics sink

    Returns:
        IgnoreOracle: a git-backed oracle, or a null oracle when no working tree is found
    """
    log = logger or get_logger()
    cwd = start or Path.cwd()
    try:
        toplevel = git_toplevel(cwd)
    except NotAGitRepositoryError as e:
        log.debug("vcs_not_found", folder=str(cwd), reason=e.message)
        return NullIgnoreOracle()
    log.debug("vcs_detected", toplevel=str(toplevel))
    return GitIgnoreOracle(toplevel, cwd, logger=log)
