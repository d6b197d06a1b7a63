"""Parsed documentation text: blocks of inline content nodes."""

from __future__ import annotations

import re
from collections.abc import Iterator
from dataclasses import dataclass, field

PARAGRAPH_BREAK_RE = re.compile(r"\n[ \t]*\n")
INLINE_RE = re.compile(
    r"`(?P<code>[^`]+)`"
    r"|\*\*(?P<strong>[^*]+)\*\*"
    r"|\*(?P<em>[^*]+)\*"
    r"|\[(?P<link>[^\[\]]+)\]"
)


@dataclass
class ContentNode:
    """A node of parsed documentation text."""

    children: list[ContentNode] = field(default_factory=list)


@dataclass
class ContentText(ContentNode):
    """Plain text, kept verbatim."""

    text: str = ""


@dataclass
class ContentEmphasis(ContentNode):
    """Emphasised span (``*text*``)."""


@dataclass
class ContentStrong(ContentNode):
    """Strong span (``**text**``)."""


@dataclass
class ContentCode(ContentNode):
    """Inline code, kept verbatim."""

    text: str = ""


@dataclass
class ContentSymbolLink(ContentNode):
    """Link to another documented symbol by qualified identity."""

    target: str = ""


@dataclass
class ContentParagraph(ContentNode):
    """A block of inline nodes."""


@dataclass
class Content(ContentNode):
    """Documentation attached to a node; children are paragraphs."""

    @property
    def summary(self) -> ContentNode | None:
        """First block, or None when there is no content."""
        return self.children[0] if self.children else None

    @property
    def description(self) -> list[ContentNode]:
        """Blocks after the summary."""
        return self.children[1:]

    def is_empty(self) -> bool:
        """Check whether any block was parsed."""
        return not self.children

    def extend(self, other: Content) -> None:
        """Append the blocks of ``other`` after ours."""
        self.children.extend(other.children)

    def links(self) -> Iterator[ContentSymbolLink]:
        """Yield every symbol link, depth first."""
        yield from _iter_links(self)


def _iter_links(node: ContentNode) -> Iterator[ContentSymbolLink]:
    for child in node.children:
        if isinstance(child, ContentSymbolLink):
            yield child
        yield from _iter_links(child)


def qualify_link(name: str, scope: str | None) -> str:
    """Qualify a bare link name with ``scope``; dotted names are kept."""
    name = name.strip()
    if "." in name or not scope:
        return name
    return f"{scope}.{name}"


def parse_inline(text: str, scope: str | None = None) -> list[ContentNode]:
    """Split ``text`` into text, emphasis, strong, code and link nodes."""
    nodes: list[ContentNode] = []
    pos = 0
    for m in INLINE_RE.finditer(text):
        if m.start() > pos:
            nodes.append(ContentText(text=text[pos : m.start()]))
        if m.group("code") is not None:
            nodes.append(ContentCode(text=m.group("code")))
        elif m.group("strong") is not None:
            nodes.append(ContentStrong(children=parse_inline(m.group("strong"), scope)))
        elif m.group("em") is not None:
            nodes.append(ContentEmphasis(children=parse_inline(m.group("em"), scope)))
        else:
            label = m.group("link")
            nodes.append(
                ContentSymbolLink(
                    children=[ContentText(text=label)],
                    target=qualify_link(label, scope),
                )
            )
        pos = m.end()
    if pos < len(text):
        nodes.append(ContentText(text=text[pos:]))
    return nodes


def parse_content(text: str, scope: str | None = None) -> Content:
    """Parse free text into paragraphs separated by blank lines."""
    content = Content()
    text = text.strip("\n")
    if not text.strip():
        return content
    for block in PARAGRAPH_BREAK_RE.split(text):
        block = block.strip()
        if block:
            paragraph = ContentParagraph(children=parse_inline(block, scope))
            content.children.append(paragraph)
    return content


def to_test_string(node: ContentNode) -> str:
    """Serialize content for assertions; emphasis is wrapped in ``*``."""
    if isinstance(node, (ContentText, ContentCode)):
        return node.text
    if isinstance(node, ContentEmphasis):
        return "*" + _children_string(node) + "*"
    if isinstance(node, Content):
        return "\n".join(to_test_string(child) for child in node.children)
    return _children_string(node)


def _children_string(node: ContentNode) -> str:
    return "".join(to_test_string(child) for child in node.children)
