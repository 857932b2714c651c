from __future__ import annotations

import os
from typing import TYPE_CHECKING, Any

from dotenv import dotenv_values, find_dotenv
from pydantic import BaseModel, ConfigDict, Field, field_validator

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

ENV_FILE = find_dotenv(usecwd=True)
LOG_FILE_VAR = "FLATTEN_XML_LOG_FILE"


def default_log_file() -> str:
    """Resolve the log file from the environment, then from the nearest `.env` file.

    The `.env` file is only read, the process environment is left untouched.

    Returns:
        str: the configured log file path, or an empty string for stderr.
    """
    if value := os.environ.get(LOG_FILE_VAR):
        return value
    if ENV_FILE:
        return dotenv_values(ENV_FILE).get(LOG_FILE_VAR) or ""
    return ""


def read_path_lines(lines: Iterable[str]) -> list[str]:
    """Collect one path per line, dropping surrounding whitespace and blank lines."""
    return [s for s in (ln.strip() for ln in lines) if s]


class Settings(BaseModel):
    """Configuration settings for one flatten_xml run."""

    model_config = ConfigDict(frozen=True)

    recursive: bool = Field(default=False, description="Recursively process directories.")
    verbose: bool = Field(default=False, description="Trace discovery decisions on stderr.")
    ignore_patterns: tuple[str, ...] = Field(
        default=(),
        description="Exclusion patterns, matched anywhere in a path.",
    )
    paths: tuple[str, ...] = Field(default=(".",), description="File paths or globs to process.")
    log_file: str = Field(default_factory=default_log_file, description="Log file path.")

    @field_validator("paths", mode="before")
    @classmethod
    def default_to_cwd(cls, value: Any) -> Any:  # noqa: ANN401
        """Fall back to the current directory when no path was given."""
        if value is None or (not isinstance(value, str) and len(value) == 0):
            return (".",)
        return value

    @classmethod
    def from_sources(
        cls,
        positional: Sequence[str],
        extra_lines: Iterable[str] = (),
        **flags: Any,  # noqa: ANN401
    ) -> Settings:
        """Build settings from positional paths followed by newline-delimited extra paths.

        Args:
            positional (Sequence[str]): paths given on the command line, kept first
            extra_lines (Iterable[str]): raw lines from an auxiliary input stream
            **flags: remaining settings fields (recursive, verbose, ignore_patterns, log_file)

        Returns:
            Settings: the merged, frozen settings
        """
        paths = [*positional, *read_path_lines(extra_lines)]
        return cls(paths=tuple(paths), **flags)
