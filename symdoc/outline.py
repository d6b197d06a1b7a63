"""Logic for building the YAML outline (table of contents) of a module."""

from typing import Any

import yaml

from symdoc.documentation_node import (
    NODE_PACKAGE,
    DocumentationModule,
    DocumentationNode,
    is_classlike_kind,
)
from symdoc.page_location import page_path_for

OUTLINE_FILE = "outline.yml"


class YamlOutlineService:
    """Nested ``title``/``url``/``children`` entries for every page."""

    def __init__(self, extension: str = "md") -> None:
        self.extension = extension

    def outline(self, module: DocumentationModule) -> list[dict[str, Any]]:
        """Return the outline entries of ``module``: itself, then its packages."""
        entry = self._entry(module, module.name or "index")
        entry["children"] = [
            self._entry(package, package.name or "<root>")
            for package in module.children_of(NODE_PACKAGE)
        ]
        return [entry]

    def format_outline(self, module: DocumentationModule) -> str:
        """Render :meth:`outline` as YAML."""
        return yaml.safe_dump(
            self.outline(module), sort_keys=False, allow_unicode=True
        )

    def _entry(self, node: DocumentationNode, title: str) -> dict[str, Any]:
        entry: dict[str, Any] = {
            "title": title,
            "url": f"{page_path_for(node)}.{self.extension}",
        }
        classes = [c for c in node.children if is_classlike_kind(c.kind)]
        if classes:
            entry["children"] = [self._entry(c, c.name) for c in classes]
        return entry
