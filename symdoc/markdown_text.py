"""Small Markdown helpers: anchors, file-safe names and tables."""

import re

# Keep letters, digits, underscore, dash and dots; everything else collapses.
FILE_SAFE_RE = re.compile(r"[^A-Za-z0-9_.-]+")
ANCHOR_UNSAFE_RE = re.compile(r"[^A-Za-z0-9_]+")


def identity_anchor(identity: str, page_identity: str = "") -> str:
    """Anchor id for a member, built from its identity.

    The page's own identity is dropped so ``p.C.m(kotlin.Int)`` on the page
    of ``p.C`` becomes ``m-kotlin-Int``; overloads keep distinct anchors.
    """
    local = identity
    if page_identity and identity.startswith(page_identity + "."):
        local = identity[len(page_identity) + 1 :]
    return ANCHOR_UNSAFE_RE.sub("-", local).strip("-") or "member"


def file_safe(name: str) -> str:
    """Make a symbol name usable as a file or folder name.

    ``<init>`` style compiler names lose their brackets; an empty name (the
    root package) becomes ``root``.
    """
    name = name.replace("<", "").replace(">", "")
    name = FILE_SAFE_RE.sub("-", name).strip("-")
    return name or "root"


def md_escape_cell(text: str) -> str:
    """Keep a value on one table row."""
    return text.replace("|", "\\|").replace("\n", " ").strip()


def md_table(headers: list[str], rows: list[list[str]]) -> str:
    """Render a pipe table with escaped cells; empty when there are no rows."""
    if not rows:
        return ""

    def line(cells: list[str]) -> str:
        return "| " + " | ".join(cells) + " |"

    lines = [line(headers), line(["---" for _ in headers])]
    lines += [line([md_escape_cell(cell) for cell in row]) for row in rows]
    return "\n".join(lines)
