"""Lint operations - run the DCI checks over files."""

from __future__ import annotations

import time
from collections.abc import Iterable
from pathlib import Path

from dcilint.config.constants import SOURCE_EXTENSIONS
from dcilint.config.models import DciConfig
from dcilint.core.errors import ParseError
from dcilint.core.logging import get_logger
from dcilint.dci.builder import ContextBuilder, ContextHandler
from dcilint.dci.conventions import NamingConvention
from dcilint.dci.diagnostics import DiagnosticCollector
from dcilint.dci.exporter import ContextExporter
from dcilint.dci.rules import RuleEngine
from dcilint.lint.models import FileResult, LintResult
from dcilint.parsing.php import PhpTokenizer

log = get_logger(__name__)


def discover_files(paths: Iterable[Path]) -> list[Path]:
    """Expand directories into source files, sorted and de-duplicated."""
    found: dict[Path, None] = {}
    for path in paths:
        if path.is_dir():
            for candidate in sorted(path.rglob("*")):
                if candidate.is_file() and candidate.suffix.lower() in SOURCE_EXTENSIONS:
                    found.setdefault(candidate, None)
        else:
            found.setdefault(path, None)
    return list(found)


class DciOps:
    """Check operations: tokens -> builder -> rule engine (-> exporter).

    Each file gets a fresh builder, so no model state survives between files.
    """

    def __init__(self, config: DciConfig | None = None, *, vis_data_dir: Path | None = None) -> None:
        self._config = config or DciConfig()
        self._conventions = NamingConvention.from_config(self._config)
        self._tokenizer = PhpTokenizer()
        if vis_data_dir is None and self._config.vis_data_dir:
            vis_data_dir = Path(self._config.vis_data_dir)
        self._vis_data_dir = vis_data_dir

    def check_source(self, source: bytes | str, path: str = "<source>") -> FileResult:
        """Check already-loaded source text."""
        stream = self._tokenizer.tokenize(source)
        sink = DiagnosticCollector(stream, path)

        handlers: list[ContextHandler] = [RuleEngine(sink, self._config).check]
        exporter: ContextExporter | None = None
        if self._vis_data_dir is not None:
            exporter = ContextExporter(self._vis_data_dir)
            handlers.append(exporter.export)

        builder = ContextBuilder(stream, sink, self._conventions, handlers)
        contexts = builder.run()

        return FileResult(
            path=path,
            status="dirty" if sink.diagnostics else "clean",
            diagnostics=sorted(sink.diagnostics, key=lambda d: (d.line, d.column or 0)),
            contexts_checked=contexts,
            exported=[str(p) for p in exporter.written] if exporter else [],
        )

    def check_file(self, path: Path) -> FileResult:
        try:
            source = path.read_bytes()
        except OSError as e:
            err = ParseError.unreadable_file(str(path), str(e))
            log.warning("file_unreadable", path=str(path), error=err.error_name)
            return FileResult(path=str(path), status="error", error_detail=err.message)
        return self.check_source(source, str(path))

    def check(self, paths: Iterable[Path]) -> LintResult:
        """Check files and directories.

        Raises:
            ParseError: If the PHP grammar is not installed.
        """
        start_time = time.time()
        result = LintResult()
        for path in discover_files(paths):
            result.files.append(self.check_file(path))

        result.duration_seconds = time.time() - start_time
        log.info(
            "check_complete",
            files=len(result.files),
            contexts=result.total_contexts,
            diagnostics=result.total_diagnostics,
        )
        return result
