"""Command-line entry point."""

from __future__ import annotations

import argparse
import logging
import os
from collections.abc import Iterable, Sequence
from typing import Any

from symdoc.build_logger import BuildLogger
from symdoc.deep_merge import deep_merge
from symdoc.errors import DocumentationBuildError
from symdoc.generator import FORMATS, DocumentationGenerator
from symdoc.load_config import load_config
from symdoc.source_link import SourceLinkDefinition, parse_source_link_definition


def split_paths(values: Iterable[str] | None) -> list[str]:
    """Flatten repeated and ``os.pathsep``-separated path arguments."""
    paths: list[str] = []
    for value in values or []:
        paths.extend(p for p in value.split(os.pathsep) if p)
    return paths


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    ap = argparse.ArgumentParser(
        prog="symdoc",
        description="Generate API documentation from resolved symbol dumps.",
    )
    ap.add_argument(
        "sources",
        nargs="*",
        help="Source roots holding *.symbols.yml and ManagedReference files",
    )
    ap.add_argument(
        "--src",
        action="append",
        help=f"Additional source roots, separated by '{os.pathsep}'",
    )
    ap.add_argument(
        "--src-link",
        action="append",
        help="Mapping between a source directory and a web site for browsing "
        "the code: <path>=<url>[#lineSuffix]",
    )
    ap.add_argument(
        "--include",
        action="append",
        help="Markdown files holding module and package documentation",
    )
    ap.add_argument(
        "--samples",
        action="append",
        help="Source roots of samples; analysed but not documented",
    )
    ap.add_argument("--output", help="Output directory (default: out/doc/)")
    ap.add_argument(
        "--format",
        help=f"Output format: {', '.join(FORMATS)} (default: markdown)",
    )
    ap.add_argument("--module", help="Name of the documentation module")
    ap.add_argument(
        "--classpath",
        action="append",
        help="Classpath entries of the analysed sources",
    )
    ap.add_argument(
        "--no-deprecated",
        action="store_true",
        help="Leave deprecated declarations out of the documentation",
    )
    ap.add_argument(
        "--include-non-public",
        action="store_true",
        help="Document internal and private declarations too",
    )
    ap.add_argument("--config", help="Path to a YAML configuration file")
    ap.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging"
    )
    return ap


def merge_arguments(
    config: dict[str, Any], args: argparse.Namespace
) -> dict[str, Any]:
    """Overlay command-line arguments on the loaded configuration."""
    overrides: dict[str, Any] = {
        "sources": split_paths([*args.sources, *(args.src or [])]),
        "samples": split_paths(args.samples),
        "includes": split_paths(args.include),
        "classpath": split_paths(args.classpath),
        "source_links": list(args.src_link or []),
        "options": {},
    }
    for key in ("module", "output", "format"):
        value = getattr(args, key)
        if value is not None:
            overrides[key] = value
    if args.no_deprecated:
        overrides["options"]["skip_deprecated"] = True
    if args.include_non_public:
        overrides["options"]["include_non_public"] = True
    return deep_merge(config, overrides)


def parse_source_links(
    texts: Iterable[str], build_logger: BuildLogger
) -> list[SourceLinkDefinition]:
    """Parse every mapping, dropping malformed ones."""
    links = []
    for text in texts:
        definition = parse_source_link_definition(text, build_logger)
        if definition is not None:
            links.append(definition)
    return links


def main(argv: Sequence[str] | None = None) -> int:
    """Run one documentation build; returns the process exit status."""
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )
    build_logger = BuildLogger()
    try:
        config = merge_arguments(load_config(args.config), args)
        generator = DocumentationGenerator(
            build_logger,
            sources=config["sources"],
            module_name=config["module"],
            output_dir=config["output"],
            output_format=config["format"],
            classpath=config["classpath"],
            samples=config["samples"],
            includes=config["includes"],
            source_links=parse_source_links(config["source_links"], build_logger),
            skip_deprecated=config["options"]["skip_deprecated"],
            include_non_public=config["options"]["include_non_public"],
        )
        generator.generate()
    except DocumentationBuildError as e:
        build_logger.error("%s", e)
        return 1
    build_logger.report()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
