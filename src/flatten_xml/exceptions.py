from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class FlattenXmlError(Exception):
    """Base exception for errors in the flatten_xml module."""

    def __str__(self) -> str:
        return self.__class__.__name__


@dataclass(frozen=True)
class InitializationError(FlattenXmlError):
    """Raised when the pipeline cannot be set up from its settings."""


@dataclass(frozen=True)
class GenerationError(FlattenXmlError):
    """Raised when the document cannot be produced."""


@dataclass(frozen=True)
class PatternError(InitializationError):
    """Raised when an exclusion pattern cannot be compiled."""

    pattern: str
    reason: str

    def __str__(self) -> str:
        return f"invalid exclusion pattern {self.pattern!r}: {self.reason}"


@dataclass(frozen=True)
class GlobExpansionError(GenerationError):
    """Raised when a path argument is not a valid glob."""

    pattern: str
    reason: str

    def __str__(self) -> str:
        return f"invalid glob {self.pattern!r}: {self.reason}"


@dataclass(frozen=True)
class FileReadError(GenerationError):
    """Raised when a discovered file cannot be read."""

    path: str
    reason: str

    def __str__(self) -> str:
        return f"cannot read {self.path}: {self.reason}"


@dataclass(frozen=True)
class XmlSerializationError(GenerationError):
    """Raised when the XML document cannot be written."""

    reason: str

    def __str__(self) -> str:
        return f"cannot serialize document: {self.reason}"


@dataclass(frozen=True)
class GitCommandError(FlattenXmlError):
    """Raised when a git command fails."""

    command: str
    returncode: int
    stdout: str
    stderr: str

    def __str__(self) -> str:
        return f"{self.command} exited with {self.returncode}: {self.stderr.strip()}"


@dataclass(frozen=True)
class NotAGitRepositoryError(FlattenXmlError):
    """Raised when the specified directory is not inside a Git working tree."""

    folder: Path
    message: str = "The specified directory is not a Git repository."

    def __str__(self) -> str:
        return f"{self.message} ({self.folder})"
