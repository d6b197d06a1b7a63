"""Markdown and Jekyll page rendering of a resolved documentation tree."""

from __future__ import annotations

from symdoc.content import (
    Content,
    ContentCode,
    ContentEmphasis,
    ContentNode,
    ContentStrong,
    ContentSymbolLink,
    ContentText,
)
from symdoc.documentation_node import (
    NODE_ACCESSOR,
    NODE_CONSTRUCTOR,
    NODE_FUNCTION,
    NODE_MODULE,
    NODE_PACKAGE,
    NODE_PARAMETER,
    NODE_PROPERTY,
    NODE_RECEIVER,
    NODE_TYPE_PARAMETER,
    NODE_VARIABLE,
    REF_INHERITOR,
    REF_INHERITS,
    REF_LINK,
    REF_OVERRIDES,
    DocumentationNode,
    is_classlike_kind,
)
from symdoc.markdown_text import md_table
from symdoc.page_location import anchor_for, link_for
from symdoc.source_link import SourceLinkDefinition, source_url_for

MEMBER_SECTIONS = [
    ("Constructors", (NODE_CONSTRUCTOR,)),
    ("Properties", (NODE_PROPERTY, NODE_VARIABLE)),
    ("Functions", (NODE_FUNCTION,)),
]


def signature_for(node: DocumentationNode) -> str:
    """One-line, language-neutral signature of a node."""
    type_params = node.children_of(NODE_TYPE_PARAMETER)
    generics = f"<{', '.join(t.name for t in type_params)}>" if type_params else ""
    if is_classlike_kind(node.kind):
        supers = [s.name for s in node.references_of(REF_INHERITS)]
        extends = f" : {', '.join(supers)}" if supers else ""
        return f"{node.kind} {node.name}{generics}{extends}"
    receivers = node.children_of(NODE_RECEIVER)
    prefix = f"{receivers[0].type}." if receivers and receivers[0].type else ""
    params = ", ".join(
        f"{p.name}: {p.type}" if p.type else p.name
        for p in node.children_of(NODE_PARAMETER)
    )
    result = f": {node.type}" if node.type else ""
    if node.kind in {NODE_PROPERTY, NODE_VARIABLE}:
        return f"{node.kind} {generics}{prefix}{node.name}{result}"
    if "(" in node.name:
        # host-language members carry their parameter list in the name
        return f"{generics}{prefix}{node.name}{result}"
    return f"{generics}{prefix}{node.name}({params}){result}"


class MarkdownFormatService:
    """Renders one Markdown page per module, package and class-like node."""

    extension = "md"

    def __init__(
        self, source_links: list[SourceLinkDefinition] | None = None
    ) -> None:
        """``source_links`` turn node locations into "view source" links."""
        self.source_links = source_links or []

    def format_page(self, node: DocumentationNode) -> str:
        """Render the page of ``node``."""
        out = [f"# {self._title(node)}", ""]
        if node.kind not in {NODE_MODULE, NODE_PACKAGE}:
            out += [f"`{signature_for(node)}`", ""]
        if node.deprecated:
            out += ["**Deprecated**", ""]
        out += self._content_lines(node, node, node.content)
        out += self._source_lines(node)
        out += self._hierarchy_lines(node)

        if node.kind == NODE_MODULE:
            packages = node.children_of(NODE_PACKAGE)
            out += self._index_section(node, "Packages", packages)
        types = [c for c in node.children if is_classlike_kind(c.kind)]
        out += self._index_section(node, "Types", types)
        for title, kinds in MEMBER_SECTIONS:
            out += self._index_section(node, title, node.children_of(*kinds))
        for member in node.members:
            if not is_classlike_kind(member.kind) and member.kind != NODE_PACKAGE:
                out += self._member_lines(node, member)
        return "\n".join(out).rstrip() + "\n"

    def _title(self, node: DocumentationNode) -> str:
        if node.kind == NODE_PACKAGE:
            return f"Package {node.name or '<root>'}"
        if node.kind == NODE_MODULE:
            return f"Module {node.name}"
        return node.name

    def _index_section(
        self, page: DocumentationNode, title: str, nodes: list[DocumentationNode]
    ) -> list[str]:
        rows = [
            [self._index_link(page, n), self._summary(page, n)] for n in nodes
        ]
        table = md_table(["Name", "Summary"], rows)
        return [f"## {title}", "", table, ""] if table else []

    def _index_link(self, page: DocumentationNode, node: DocumentationNode) -> str:
        return f"[{node.name or '<root>'}]({link_for(page, node, self.extension)})"

    def _member_lines(
        self, page: DocumentationNode, member: DocumentationNode
    ) -> list[str]:
        out = [
            f'<a id="{anchor_for(member)}"></a>',
            "",
            f"### {member.name}",
            "",
            f"`{signature_for(member)}`",
            "",
        ]
        if member.deprecated:
            out += ["**Deprecated**", ""]
        out += self._content_lines(page, member, member.content)
        params = [
            f"- `{p.name}` {self._summary(page, p)}".rstrip()
            for p in member.children_of(NODE_PARAMETER)
        ]
        if params:
            out += ["Parameters:", "", *params, ""]
        for overridden in member.references_of(REF_OVERRIDES):
            link = link_for(page, overridden, self.extension)
            out += [f"Overrides [{overridden.name}]({link})", ""]
        accessors = member.children_of(NODE_ACCESSOR)
        if accessors:
            out += ["Accessors: " + ", ".join(f"`{a.name}`" for a in accessors), ""]
        out += self._source_lines(member)
        return out

    def _hierarchy_lines(self, node: DocumentationNode) -> list[str]:
        out = []
        for label, kind in [("Inherits", REF_INHERITS), ("Inheritors", REF_INHERITOR)]:
            targets = node.references_of(kind)
            if targets:
                links = ", ".join(
                    f"[{t.name}]({link_for(node, t, self.extension)})" for t in targets
                )
                out += [f"{label}: {links}", ""]
        return out

    def _source_lines(self, node: DocumentationNode) -> list[str]:
        url = source_url_for(node.location, self.source_links)
        return [f"[View source]({url})", ""] if url else []

    def _summary(self, page: DocumentationNode, node: DocumentationNode) -> str:
        summary = node.content.summary
        return self._inline(page, node, summary) if summary is not None else ""

    def _content_lines(
        self, page: DocumentationNode, owner: DocumentationNode, content: Content
    ) -> list[str]:
        lines = []
        for block in content.children:
            lines += [self._inline(page, owner, block), ""]
        return lines

    def _inline(
        self, page: DocumentationNode, owner: DocumentationNode, node: ContentNode
    ) -> str:
        if isinstance(node, ContentText):
            return node.text
        if isinstance(node, ContentCode):
            return f"`{node.text}`"
        inner = "".join(self._inline(page, owner, c) for c in node.children)
        if isinstance(node, ContentEmphasis):
            return f"*{inner}*"
        if isinstance(node, ContentStrong):
            return f"**{inner}**"
        if isinstance(node, ContentSymbolLink):
            target = self._link_target(owner, node.target)
            if target is None:
                return f"`{inner}`"
            return f"[{inner}]({link_for(page, target, self.extension)})"
        return inner

    def _link_target(
        self, owner: DocumentationNode, identity: str
    ) -> DocumentationNode | None:
        # Walk up the owners: member docs are rendered on their owner's page.
        current: DocumentationNode | None = owner
        while current is not None:
            for target in current.references_of(REF_LINK):
                if target.identity == identity:
                    return target
            current = current.owner
        return None


class JekyllFormatService(MarkdownFormatService):
    """Markdown pages with Jekyll front matter."""

    def format_page(self, node: DocumentationNode) -> str:
        """Render the page with a ``title``/``layout`` front matter block."""
        title = self._title(node).replace('"', '\\"')
        front = ["---", f'title: "{title}"', "layout: api", "---", ""]
        return "\n".join(front) + super().format_page(node)
