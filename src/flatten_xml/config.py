from __future__ import annotations

from enum import StrEnum, auto

from pydantic import BaseModel, ConfigDict, Field, computed_field, model_validator

BINARY_SNIFF_BYTES = 8192
"""Size of the prefix inspected for a zero byte when classifying a file."""

ROOT_ELEMENT = "repository"
FILE_ELEMENT = "file"
XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>'

VCS_METADATA_DIRS = frozenset({".git"})


class FileType(StrEnum):
    """Classification of a discovered file, decided once from its leading bytes."""

    TEXT = auto()
    BINARY = auto()


class FileRecord(BaseModel):
    """A classified file ready for serialization.

    Attributes:
        path: Path relative to the working directory, as discovered.
        file_type: Binary or text, from the bounded prefix.
        content: Decoded text for text files, None for binary files.
    """

    model_config = ConfigDict(frozen=True)

    path: str = Field(..., description="File path relative to the working directory")
    file_type: FileType = Field(..., description="Binary or text classification")
    content: str | None = Field(default=None, description="Decoded contents of a text file")

    @model_validator(mode="after")
    def check_content_matches_type(self) -> FileRecord:
        if self.file_type is FileType.BINARY and self.content is not None:
            msg = "binary records carry no content"
            raise ValueError(msg)
        if self.file_type is FileType.TEXT and self.content is None:
            msg = "text records need content"
            raise ValueError(msg)
        return self

    @computed_field
    @property
    def is_binary(self) -> bool:
        """Whether the file was classified as binary."""
        return self.file_type is FileType.BINARY

    @classmethod
    def binary(cls, path: str) -> FileRecord:
        return cls(path=path, file_type=FileType.BINARY)

    @classmethod
    def text(cls, path: str, content: str) -> FileRecord:
        return cls(path=path, file_type=FileType.TEXT, content=content)
