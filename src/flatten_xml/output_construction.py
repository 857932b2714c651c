from __future__ import annotations

import io
import re
from typing import TYPE_CHECKING
from xml.sax.saxutils import escape

from flatten_xml.config import FILE_ELEMENT, ROOT_ELEMENT, XML_DECLARATION
from flatten_xml.exceptions import XmlSerializationError
from flatten_xml.file_manipulation import read_file_record
from flatten_xml.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable
    from typing import TextIO

    import structlog

    from flatten_xml.config import FileRecord

    RecordReader = Callable[[str], FileRecord]

# Characters outside the XML 1.0 `Char` production, lone surrogates included.
_INVALID_XML_CHARS = re.compile(r"[^\t\n\r\x20-\uD7FF\uE000-\uFFFD\U00010000-\U0010FFFF]")
_TEXT_ENTITIES = {"\r": "&#13;"}
_ATTR_ENTITIES = {'"': "&quot;", "\t": "&#9;", "\n": "&#10;", "\r": "&#13;"}


def xml_safe(value: str) -> str:
    """Replace characters XML 1.0 cannot carry with U+FFFD."""
    return _INVALID_XML_CHARS.sub("\ufffd", value)


def escape_text(value: str) -> str:
    """Escape character data so that a parser recovers `value` exactly.

    Args:
        value (str): raw text content

    Returns:
        str: text with `&`, `<`, `>` and carriage returns escaped
    """
    return escape(xml_safe(value), _TEXT_ENTITIES)


def quote_attr(value: str) -> str:
    """Escape and double-quote an attribute value.

    Whitespace other than spaces is written as character references, since
    parsers normalize literal tabs and line breaks in attributes to spaces.

    Args:
        value (str): raw attribute value

    Returns:
        str: the quoted attribute value
    """
    return '"' + escape(xml_safe(value), _ATTR_ENTITIES) + '"'


class XmlDocumentWriter:
    """Write the repository document to a text sink one file element at a time.

    Layout::

        <?xml version="1.0" encoding="UTF-8"?>
        <repository>
          <file path="a.txt">hello</file>
          <file path="b.bin" binary="true"/>
        </repository>
    """

    def __init__(self, sink: TextIO) -> None:
        self.sink = sink
        self.started = False
        self.closed = False
        self.count = 0

    def _write(self, data: str) -> None:
        try:
            self.sink.write(data)
        except (OSError, UnicodeError) as e:
            raise XmlSerializationError(reason=str(e)) from e

    def start_document(self) -> None:
        if self.started:
            raise XmlSerializationError(reason="document already started")
        self.started = True
        self._write(f"{XML_DECLARATION}\n<{ROOT_ELEMENT}>")

    def write_record(self, rec: FileRecord) -> None:
        """Emit one file element: empty with `binary="true"`, or wrapping the escaped text."""
        if not self.started or self.closed:
            raise XmlSerializationError(reason=f"no open <{ROOT_ELEMENT}> element for {rec.path}")
        tag = f"{FILE_ELEMENT} path={quote_attr(rec.path)}"
        if rec.is_binary:
            self._write(f'\n  <{tag} binary="true"/>')
        else:
            self._write(f"\n  <{tag}>{escape_text(rec.content or '')}</{FILE_ELEMENT}>")
        self.count += 1

    def end_document(self) -> None:
        if not self.started or self.closed:
            raise XmlSerializationError(reason=f"no open <{ROOT_ELEMENT}> element to close")
        self.closed = True
        self._write(f"\n</{ROOT_ELEMENT}>")


def write_document(
    paths: Iterable[str],
    sink: TextIO,
    *,
    reader: RecordReader = read_file_record,
    logger: structlog.BoundLogger | None = None,
) -> int:
    """Stream the document for `paths` into `sink`, reading each file just before its element.

    Only one file's contents are held in memory at a time. A read error aborts
    the document midway; callers that must not expose partial output write
    into a buffer.

    Args:
        paths (Iterable[str]): discovered paths, in discovery order
        sink (TextIO): destination for the document text
        reader (RecordReader): turns a path into a classified record
        logger (structlog.BoundLogger | None): diagnostics sink

    Raises:
        FileReadError: if a file cannot be read.
        XmlSerializationError: if the sink rejects the output.

    Returns:
        int: the number of file elements written
    """
    log = logger or get_logger()
    writer = XmlDocumentWriter(sink)
    writer.start_document()
    for path in paths:
        rec = reader(path)
        log.debug("writing_file", path=rec.path, binary=rec.is_binary)
        writer.write_record(rec)
    writer.end_document()
    return writer.count


def build_xml(
    paths: Iterable[str],
    *,
    reader: RecordReader = read_file_record,
    logger: structlog.BoundLogger | None = None,
) -> str:
    """Build the whole document as a string.

    Args:
        paths (Iterable[str]): discovered paths, in discovery order
        reader (RecordReader): turns a path into a classified record
        logger (structlog.BoundLogger | None): diagnostics sink

    Returns:
        str: the XML document, without a trailing newline
    """
    out = io.StringIO()
    write_document(paths, out, reader=reader, logger=logger)
    return out.getvalue()
