from __future__ import annotations

from functools import partial
from pathlib import Path
from typing import TYPE_CHECKING

from flatten_xml.discovery import discover_files
from flatten_xml.file_manipulation import read_file_record
from flatten_xml.logging import trace_logger
from flatten_xml.output_construction import build_xml
from flatten_xml.patterns import compile_patterns
from flatten_xml.vcs import detect_ignore_oracle

if TYPE_CHECKING:
    import structlog

    from flatten_xml.settings import Settings
    from flatten_xml.vcs import IgnoreOracle


class RepoFlattener:
    """Discover, filter, classify and serialize the files selected by `settings`.

    Exclusion patterns are compiled and the VCS oracle is detected once, at
    construction; both are reused by every `generate()` call.

    Args:
        settings (Settings): the run settings
        oracle (IgnoreOracle | None): VCS oracle; detected from `root` when omitted
        root (Path | None): working directory paths are relative to; defaults to the current one
        logger (structlog.BoundLogger | None): diagnostics sink; a stderr logger filtered by
            `settings.verbose` when omitted

    Raises:
        PatternError: if an exclusion pattern is malformed.
    """

    def __init__(
        self,
        settings: Settings,
        *,
        oracle: IgnoreOracle | None = None,
        root: Path | None = None,
        logger: structlog.BoundLogger | None = None,
    ) -> None:
        self.settings = settings
        self.root = root or Path.cwd()
        self.logger = logger or trace_logger(verbose=settings.verbose)
        self.patterns = compile_patterns(settings.ignore_patterns)
        self.oracle = oracle if oracle is not None else detect_ignore_oracle(self.root, logger=self.logger)

    def discover(self) -> list[str]:
        """Return the relative paths that will appear in the document, in order."""
        return discover_files(
            self.settings,
            self.patterns,
            self.oracle,
            root=self.root,
            logger=self.logger,
        )

    def generate(self) -> str:
        """Produce the XML document.

        Raises:
            GlobExpansionError: if a path argument is not a valid glob.
            FileReadError: if a discovered file cannot be read.
            XmlSerializationError: if the document cannot be written.

        Returns:
            str: the complete document, without a trailing newline
        """
        files = self.discover()
        self.logger.debug("discovery_done", files=len(files))
        reader = partial(read_file_record, logger=self.logger)
        return build_xml(files, reader=reader, logger=self.logger)
