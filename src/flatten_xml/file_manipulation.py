from __future__ import annotations

import codecs
import os
import stat
from pathlib import Path
from typing import TYPE_CHECKING

from flatten_xml.config import BINARY_SNIFF_BYTES, FileRecord
from flatten_xml.exceptions import FileReadError
from flatten_xml.logging import get_logger

if TYPE_CHECKING:
    import structlog

_UTF16_BOMS = (codecs.BOM_UTF16_LE, codecs.BOM_UTF16_BE)


def relpath(path: str, root: Path) -> str:
    """Send the path of a glob match relative to `root`.

    Absolute paths under `root` are made relative, then any leading `./`
    components are stripped. Paths outside `root` keep their original form.

    Args:
        path (str): the path to "relativise"
        root (Path): the root to relativise from, usually the working directory

    Returns:
        str: the relative path with POSIX separators
    """
    rel = path.replace("\\", "/")
    if os.path.isabs(rel):
        try:
            rel = Path(rel).relative_to(root).as_posix()
        except ValueError:
            return rel
    while rel.startswith("./"):
        rel = rel[2:].lstrip("/")
    return rel


def display_path(path: str) -> str:
    """Render a path for output, replacing undecodable file name bytes with U+FFFD."""
    return os.fsencode(path).decode("utf-8", errors="replace")


def is_regular_file(path: str) -> bool:
    """Check if a path names a regular file, following symlinks.

    Args:
        path (str): path to test.

    Raises:
        OSError: if the path cannot be stat'ed (vanished, dangling symlink, permission).

    Returns:
        bool: True if the file is regular, False otherwise.
    """
    return stat.S_ISREG(os.stat(path).st_mode)


def is_binary_prefix(prefix: bytes) -> bool:
    """A file is binary when its leading bytes contain a zero byte."""
    return b"\0" in prefix


def sniff_encoding(prefix: bytes) -> str:
    """Pick the codec for a text file from its byte-order mark.

    UTF-8 is the default; its BOM is dropped while decoding. A UTF-16 BOM
    switches to UTF-16.
    """
    if prefix.startswith(_UTF16_BOMS):
        return "utf-16"
    return "utf-8-sig"


def read_file_record(path: str, *, logger: structlog.BoundLogger | None = None) -> FileRecord:
    """Classify a file and, for text files, decode its contents.

    The file is opened once. Only the first `BINARY_SNIFF_BYTES` bytes decide
    the classification: a zero byte there makes the file binary and nothing
    more is read. Otherwise that prefix and the rest of the file are decoded
    together, with malformed sequences replaced by U+FFFD.

    Args:
        path (str): path of the file, relative to the working directory
        logger (structlog.BoundLogger | None): diagnostics sink

    Raises:
        FileReadError: if the file cannot be opened or read.

    Returns:
        FileRecord: a binary record, or a text record holding the decoded contents
    """
    log = logger or get_logger()
    try:
        with open(path, "rb") as f:  # noqa: PTH123
            prefix = f.read(BINARY_SNIFF_BYTES)
            if is_binary_prefix(prefix):
                log.debug("classified_binary", path=path)
                return FileRecord.binary(display_path(path))
            data = prefix + f.read()
    except OSError as e:
        raise FileReadError(path=path, reason=e.strerror or str(e)) from e
    log.debug("classified_text", path=path, size=len(data))
    return FileRecord.text(display_path(path), data.decode(sniff_encoding(prefix), errors="replace"))
