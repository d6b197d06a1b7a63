"""Logic for reading module and package descriptions from include files."""

from __future__ import annotations

import re
from pathlib import Path

from symdoc.build_logger import BuildLogger
from symdoc.content import Content, parse_content

# "# Package a.b", "# Module name" or a bare "# a.b"
HEADING_RE = re.compile(
    r"^#[ \t]+(?:(?P<keyword>Package|Module)[ \t]+)?(?P<name>\S*)[ \t]*$"
)


class PackageDocs:
    """Accumulates module content and per-package content from include files.

    Text before the first heading belongs to the module. A ``Module``
    heading switches back to module content. Several files may describe the
    same package; their content is concatenated in parse order.
    """

    def __init__(self, link_scope: str | None, logger: BuildLogger) -> None:
        """``link_scope`` is the package bare ``[Name]`` links resolve against."""
        self.link_scope = link_scope
        self.logger = logger
        self.module_content = Content()
        self.package_content: dict[str, Content] = {}

    def parse(self, path: str | Path) -> None:
        """Parse one include file, logging a warning if it cannot be read."""
        p = Path(path)
        try:
            text = p.read_text(encoding="utf-8")
        except OSError as exc:
            self.logger.warn("Cannot read include file %s: %s", p, exc)
            return
        self.parse_text(text)

    def parse_text(self, text: str) -> None:
        """Split ``text`` at headings and merge each section."""
        target: str | None = None
        lines: list[str] = []
        for line in text.splitlines():
            m = HEADING_RE.match(line)
            if m is None:
                lines.append(line)
                continue
            self._merge(target, lines)
            lines = []
            if m.group("keyword") == "Module":
                target = None
            else:
                target = m.group("name")
        self._merge(target, lines)

    def _merge(self, package: str | None, lines: list[str]) -> None:
        content = parse_content("\n".join(lines), scope=self.link_scope)
        if package is None:
            self.module_content.extend(content)
            return
        existing = self.package_content.setdefault(package, Content())
        existing.extend(content)

    def unmatched_packages(self, documented: set[str]) -> list[str]:
        """Return package names from headings that no documented package has."""
        return [name for name in self.package_content if name not in documented]
