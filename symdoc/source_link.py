"""Mapping of local source directories to web locations for "view source" links."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from symdoc.build_logger import BuildLogger
from symdoc.declaration import SourceLocation

SOURCE_LINK_SYNTAX = "<path>=<url>[#lineSuffix]"


@dataclass(frozen=True)
class SourceLinkDefinition:
    """Local path prefix, remote URL and optional line-number suffix."""

    path: str
    url: str
    line_suffix: str | None = None


def parse_source_link_definition(
    text: str, logger: BuildLogger
) -> SourceLinkDefinition | None:
    """Parse ``<path>=<url>[#lineSuffix]``.

    Only the first ``=`` separates the path, so URLs may carry query strings.
    Malformed input is reported as a warning and yields None; other mappings
    are unaffected.
    """
    path, sep, url_and_line = text.partition("=")
    if not sep or not path or not url_and_line:
        logger.warn(
            "Invalid source link syntax '%s'. Expected: %s. "
            "This mapping is ignored.",
            text,
            SOURCE_LINK_SYNTAX,
        )
        return None
    url, _, line = url_and_line.partition("#")
    return SourceLinkDefinition(
        path=str(Path(path).resolve()),
        url=url,
        line_suffix=f"#{line}" if line else None,
    )


def source_url_for(
    location: SourceLocation | None, source_links: list[SourceLinkDefinition]
) -> str | None:
    """Return the web URL of ``location`` using the first matching definition."""
    if location is None:
        return None
    local = Path(location.path).resolve()
    for definition in source_links:
        root = Path(definition.path)
        try:
            rel = local.relative_to(root)
        except ValueError:
            continue
        url = definition.url.rstrip("/") + "/" + rel.as_posix()
        if definition.line_suffix and location.line is not None:
            url += f"{definition.line_suffix}{location.line}"
        return url
    return None
