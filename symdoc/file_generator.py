"""Logic for writing the pages of a documentation module to disk."""

import logging
from pathlib import Path
from typing import Protocol

from symdoc.documentation_node import DocumentationModule, DocumentationNode
from symdoc.outline import OUTLINE_FILE, YamlOutlineService
from symdoc.page_location import has_own_page, page_path_for

logger = logging.getLogger(__name__)


class FormatService(Protocol):
    """Renders the page of one node."""

    extension: str

    def format_page(self, node: DocumentationNode) -> str:
        """Render the page of ``node``."""


def output_file_for_page(out_root: Path, page_path: str, extension: str) -> Path:
    """Determine the output file for a page path, creating its folder."""
    # p.q/C -> out_root/p.q/C.md
    p = out_root / f"{page_path}.{extension}"
    p.parent.mkdir(parents=True, exist_ok=True)
    return p


class FileGenerator:
    """Writes one file per page node, and optionally the outline."""

    def __init__(
        self,
        out_root: Path,
        format_service: FormatService,
        outline_service: YamlOutlineService | None = None,
    ) -> None:
        self.out_root = out_root
        self.format_service = format_service
        self.outline_service = outline_service

    def generate(self, module: DocumentationModule) -> list[Path]:
        """Write every page of ``module`` and return the written files."""
        self.out_root.mkdir(parents=True, exist_ok=True)
        written: list[Path] = []
        for node in module.walk():
            if not has_own_page(node):
                continue
            out_file = output_file_for_page(
                self.out_root, page_path_for(node), self.format_service.extension
            )
            out_file.write_text(self.format_service.format_page(node), encoding="utf-8")
            written.append(out_file)
        if self.outline_service is not None:
            out_file = self.out_root / OUTLINE_FILE
            out_file.write_text(
                self.outline_service.format_outline(module), encoding="utf-8"
            )
            written.append(out_file)
        logger.info("Wrote %d files into %s", len(written), self.out_root)
        return written
