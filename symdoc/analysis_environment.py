"""Access to the analysed sources: symbol dumps, host-language files, diagnostics."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from pathlib import Path
from types import TracebackType

import yaml

from symdoc.build_logger import BuildLogger
from symdoc.declaration import PACKAGE, Declaration, SourceLocation
from symdoc.declaration_loader import (
    SYMBOL_FILE_SUFFIX,
    SymbolFile,
    load_symbol_file,
)
from symdoc.errors import BuildConfigurationError, DocumentationBuildError
from symdoc.managed_reference_builder import MANAGED_REFERENCE_PREFIX

logger = logging.getLogger(__name__)

# Diagnostic severities reported by the front end
SEVERITY_EXCEPTION = "EXCEPTION"
SEVERITY_ERROR = "ERROR"
SEVERITY_WARNING = "WARNING"
SEVERITY_INFO = "INFO"

MessageCollector = Callable[[str, str, SourceLocation | None], None]


def render_message(
    severity: str, message: str, location: SourceLocation | None
) -> str:
    """Render a diagnostic as ``path:line:column: severity: message``."""
    prefix = f"{location}: " if location is not None else ""
    return f"{prefix}{severity.lower()}: {message}"


class BuildMessageCollector:
    """Forwards front-end diagnostics to the build logger."""

    def __init__(self, logger: BuildLogger) -> None:
        """Report through ``logger``."""
        self.logger = logger

    def __call__(
        self, severity: str, message: str, location: SourceLocation | None
    ) -> None:
        """Log one diagnostic at the level matching ``severity``."""
        text = render_message(severity, message, location)
        if severity in {SEVERITY_ERROR, SEVERITY_EXCEPTION}:
            self.logger.error(text)
        elif severity == SEVERITY_WARNING:
            self.logger.warn(text)
        else:
            self.logger.info(text)


@dataclass
class SourceFragment:
    """All documented declarations of one package."""

    package: str
    files: list[Path] = field(default_factory=list)
    declarations: list[Declaration] = field(default_factory=list)

    def as_declaration(self) -> Declaration:
        """Return a package declaration holding every member of the fragment."""
        location = SourceLocation(self.files[0]) if self.files else None
        return Declaration(
            kind=PACKAGE,
            name=self.package,
            fq_name=self.package,
            signature=self.package,
            package=self.package,
            location=location,
            members=list(self.declarations),
        )


def is_managed_reference(path: Path) -> bool:
    """Check if ``path`` is a DocFX ManagedReference YAML file."""
    try:
        with path.open(encoding="utf-8") as f:
            first = f.readline()
    except OSError:
        return False
    return first.startswith(MANAGED_REFERENCE_PREFIX)


class AnalysisEnvironment:
    """Scoped view over source roots and classpath.

    Use as a context manager; files are read lazily and cached until
    :meth:`dispose`.
    """

    def __init__(self, message_collector: MessageCollector) -> None:
        """Report diagnostics through ``message_collector``."""
        self.message_collector = message_collector
        self.sources: list[Path] = []
        self.classpath: list[Path] = []
        self.disposed = False
        self._symbol_files: dict[Path, SymbolFile | None] = {}

    def __enter__(self) -> AnalysisEnvironment:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.dispose()

    def add_sources(self, paths: Iterable[str | Path]) -> None:
        """Add source roots; a missing root is a fatal configuration error."""
        for p in paths:
            path = Path(p)
            if not path.exists():
                msg = f"Source root does not exist: {path}"
                raise BuildConfigurationError(msg)
            self.sources.append(path)

    def add_classpath(self, paths: Iterable[str | Path]) -> None:
        """Add classpath entries; missing entries are reported as warnings."""
        for p in paths:
            path = Path(p)
            if not path.exists():
                self.message_collector(
                    SEVERITY_WARNING, f"Classpath entry not found: {path}", None
                )
            self.classpath.append(path)

    def dispose(self) -> None:
        """Release cached analysis results."""
        self._symbol_files.clear()
        self.disposed = True
        logger.debug("Analysis environment disposed")

    def _check_alive(self) -> None:
        if self.disposed:
            msg = "Analysis environment was already disposed"
            raise DocumentationBuildError(msg)

    def _iter_files(self, pattern: str) -> list[Path]:
        found: list[Path] = []
        for root in self.sources:
            if root.is_file():
                candidates = [root]
            else:
                candidates = sorted(root.rglob(pattern))
            for f in candidates:
                if f not in found:
                    found.append(f)
        return found

    def source_files(self) -> list[Path]:
        """Symbol dumps of the primary language under the source roots."""
        self._check_alive()
        return [
            f
            for f in self._iter_files(f"*{SYMBOL_FILE_SUFFIX}")
            if f.name.endswith(SYMBOL_FILE_SUFFIX)
        ]

    def host_source_files(self) -> list[Path]:
        """Host-language ManagedReference files under the source roots."""
        self._check_alive()
        return [
            f
            for f in self._iter_files("*.yml")
            if not f.name.endswith(SYMBOL_FILE_SUFFIX) and is_managed_reference(f)
        ]

    def symbol_file(self, path: Path) -> SymbolFile | None:
        """Load ``path``; unreadable dumps are reported and yield None."""
        self._check_alive()
        if path not in self._symbol_files:
            try:
                self._symbol_files[path] = load_symbol_file(path)
            except (OSError, ValueError, yaml.YAMLError) as exc:
                self.message_collector(
                    SEVERITY_ERROR, f"Cannot load symbols: {exc}", SourceLocation(path)
                )
                self._symbol_files[path] = None
        return self._symbol_files[path]

    def package_fragments(
        self, file_filter: Callable[[Path], bool] = lambda _: True
    ) -> list[SourceFragment]:
        """Group the declarations of accepted files by package, in file order."""
        fragments: dict[str, SourceFragment] = {}
        for path in self.source_files():
            if not file_filter(path):
                continue
            symbols = self.symbol_file(path)
            if symbols is None:
                continue
            fragment = fragments.setdefault(
                symbols.package, SourceFragment(symbols.package)
            )
            fragment.files.append(path)
            fragment.declarations.extend(symbols.declarations)
        return list(fragments.values())
