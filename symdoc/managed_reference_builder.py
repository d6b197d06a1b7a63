"""Node construction for host-language sources described by DocFX YAML.

Host-language declarations arrive as DocFX ``ManagedReference`` files: a flat
list of items linked by ``uid``/``parent`` rather than a nested declaration
tree. They are appended to the same module and reference graph as the primary
declarations, so references between the two resolve.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Any

import yaml

from symdoc.build_logger import BuildLogger
from symdoc.content import Content, parse_content
from symdoc.declaration import SourceLocation
from symdoc.declaration_loader import strip_mime_header
from symdoc.documentation_builder import link_content
from symdoc.documentation_node import (
    NODE_CLASS,
    NODE_CONSTRUCTOR,
    NODE_ENUM,
    NODE_FUNCTION,
    NODE_INTERFACE,
    NODE_PACKAGE,
    NODE_PARAMETER,
    NODE_PROPERTY,
    NODE_TYPE_PARAMETER,
    REF_INHERITS,
    REF_OVERRIDES,
    REF_RETURNS_TYPE,
    REF_TYPE,
    DocumentationModule,
    DocumentationNode,
)
from symdoc.options import DocumentationOptions
from symdoc.reference_graph import NodeReferenceGraph

logger = logging.getLogger(__name__)

MANAGED_REFERENCE_PREFIX = "### YamlMime:ManagedReference"
XREF_TAG_RE = re.compile(r"<xref:([^?>#]+)(?:\?[^>#]*)?(?:#[^>]*)?>")
XREF_MD_LINK_RE = re.compile(
    r"\[([^\]]*)\]\(xref:([^)?#]+)(?:\?[^)#]*)?(?:#[^)]+)?\)"
)
OBSOLETE_ATTRIBUTE = "System.ObsoleteAttribute"

NODE_KIND_BY_ITEM_TYPE = {
    "namespace": NODE_PACKAGE,
    "class": NODE_CLASS,
    "struct": NODE_CLASS,
    "delegate": NODE_CLASS,
    "interface": NODE_INTERFACE,
    "enum": NODE_ENUM,
    "method": NODE_FUNCTION,
    "operator": NODE_FUNCTION,
    "constructor": NODE_CONSTRUCTOR,
    "property": NODE_PROPERTY,
    "field": NODE_PROPERTY,
    "event": NODE_PROPERTY,
}


def load_managed_reference(path: Path) -> dict[str, Any]:
    """Load a ManagedReference YAML file into a mapping."""
    text = path.read_text(encoding="utf-8")
    raw = strip_mime_header(text, MANAGED_REFERENCE_PREFIX)
    # VB operator names ("name.vb: =") are not valid plain YAML scalars
    raw = re.sub(r"^(\s*[\w\.]+\.vb:\s+)(=$)", r"\1'='", raw, flags=re.MULTILINE)
    doc = yaml.safe_load(raw)
    return doc if isinstance(doc, dict) else {}


def as_text(v: object) -> str:
    """Flatten a summary-like value (string, list or None) into text."""
    if v is None:
        return ""
    if isinstance(v, list):
        return "\n\n".join(t for t in (as_text(x) for x in v) if t)
    return str(v).strip()


def xrefs_to_links(text: str) -> str:
    """Turn DocFX ``<xref:UID>`` and ``[label](xref:UID)`` into ``[UID]`` links."""
    text = XREF_MD_LINK_RE.sub(lambda m: f"[{m.group(2)}]", text)
    return XREF_TAG_RE.sub(lambda m: f"[{m.group(1)}]", text)


def is_obsolete(item: dict[str, Any]) -> bool:
    """Check if the item carries ``[Obsolete]``."""
    for attr in item.get("attributes") or []:
        if isinstance(attr, dict) and attr.get("type") == OBSOLETE_ATTRIBUTE:
            return True
    return False


class ManagedReferenceBuilder:
    """Appends DocFX items to a documentation module."""

    def __init__(
        self,
        options: DocumentationOptions,
        ref_graph: NodeReferenceGraph,
        logger: BuildLogger,
    ) -> None:
        """Share ``ref_graph`` with the primary builder."""
        self.options = options
        self.ref_graph = ref_graph
        self.logger = logger

    def append_file(
        self,
        path: Path,
        module: DocumentationModule,
        package_content: dict[str, Content] | None = None,
    ) -> list[DocumentationNode]:
        """Append every documented item of ``path`` and return the new nodes."""
        doc = load_managed_reference(path)
        created: list[DocumentationNode] = []
        for item in doc.get("items") or []:
            if not isinstance(item, dict) or not item.get("uid"):
                continue
            node = self._append_item(item, path, module, package_content or {})
            if node is not None:
                created.append(node)
        return created

    def _append_item(
        self,
        item: dict[str, Any],
        path: Path,
        module: DocumentationModule,
        package_content: dict[str, Content],
    ) -> DocumentationNode | None:
        uid = str(item["uid"])
        item_type = str(item.get("type") or "").strip().lower()
        kind = NODE_KIND_BY_ITEM_TYPE.get(item_type)
        if kind is None:
            logger.debug("Skipping %s item %s", item_type or "untyped", uid)
            return None
        if self.options.skip_deprecated and is_obsolete(item):
            return None

        if kind == NODE_PACKAGE:
            existing = self.ref_graph.lookup(uid)
            if existing is not None:
                if existing.kind == NODE_PACKAGE:
                    self._merge_namespace_content(existing, self._content(item))
                return None
            return self._ensure_package(
                uid, module, package_content, self._content(item)
            )

        parent = self._parent_for(item, kind, module, package_content)
        if parent is None:
            logger.debug(
                "Skipping %s: parent %s not documented", uid, item.get("parent")
            )
            return None

        node = DocumentationNode(
            kind=kind,
            name=str(item.get("name") or uid),
            identity=uid,
            content=self._content(item),
            type=self._return_type(item),
            location=self._location(item, path),
            deprecated=is_obsolete(item),
        )
        if not self.ref_graph.register(uid, node):
            return None
        parent.append(node)
        self._append_details(node, item)
        self._link_references(node, item)
        return node

    def _ensure_package(
        self,
        name: str,
        module: DocumentationModule,
        package_content: dict[str, Content],
        content: Content | None = None,
    ) -> DocumentationNode:
        existing = self.ref_graph.lookup(name)
        if existing is not None:
            return existing
        node = DocumentationNode(
            kind=NODE_PACKAGE, name=name, identity=name, content=content or Content()
        )
        extra = package_content.get(name)
        if extra is not None:
            node.content.extend(extra)
        self.ref_graph.register(name, node)
        module.append(node)
        link_content(self.ref_graph, node, node.content)
        return node

    def _merge_namespace_content(
        self, package: DocumentationNode, content: Content
    ) -> None:
        # The namespace's own docs go before include-file text added earlier.
        package.content.children[:0] = content.children
        link_content(self.ref_graph, package, content)

    def _parent_for(
        self,
        item: dict[str, Any],
        kind: str,
        module: DocumentationModule,
        package_content: dict[str, Content],
    ) -> DocumentationNode | None:
        parent_uid = item.get("parent")
        if kind in {NODE_CLASS, NODE_INTERFACE, NODE_ENUM}:
            namespace = item.get("namespace") or parent_uid or ""
            owner = self.ref_graph.lookup(str(parent_uid)) if parent_uid else None
            if owner is not None and owner.kind != NODE_PACKAGE:
                return owner  # nested type
            return self._ensure_package(str(namespace), module, package_content)
        if not parent_uid:
            return None
        return self.ref_graph.lookup(str(parent_uid))

    def _content(self, item: dict[str, Any]) -> Content:
        scope = item.get("namespace")
        content = parse_content(xrefs_to_links(as_text(item.get("summary"))), scope)
        remarks = as_text(item.get("remarks"))
        if remarks:
            content.extend(parse_content(xrefs_to_links(remarks), scope))
        return content

    def _return_type(self, item: dict[str, Any]) -> str | None:
        syntax = item.get("syntax") or {}
        ret = syntax.get("return") or {}
        return ret.get("type")

    def _location(self, item: dict[str, Any], path: Path) -> SourceLocation:
        source = item.get("source") or {}
        line = source.get("startLine")
        return SourceLocation(
            Path(source["path"]) if source.get("path") else path,
            line + 1 if isinstance(line, int) else None,
        )

    def _append_details(
        self, node: DocumentationNode, item: dict[str, Any]
    ) -> None:
        syntax = item.get("syntax") or {}
        for tp in syntax.get("typeParameters") or []:
            name = str(tp.get("id") or "")
            child = DocumentationNode(
                kind=NODE_TYPE_PARAMETER,
                name=name,
                identity=f"{node.identity}<{name}>",
                content=parse_content(as_text(tp.get("description"))),
            )
            if self.ref_graph.register(child.identity, child):
                node.append(child)
        for param in syntax.get("parameters") or []:
            name = str(param.get("id") or "")
            child = DocumentationNode(
                kind=NODE_PARAMETER,
                name=name,
                identity=f"{node.identity}/{name}",
                content=parse_content(
                    xrefs_to_links(as_text(param.get("description")))
                ),
                type=param.get("type"),
            )
            if self.ref_graph.register(child.identity, child):
                node.append(child)
                if child.type:
                    self.ref_graph.link(child, str(child.type), REF_TYPE)

    def _link_references(
        self, node: DocumentationNode, item: dict[str, Any]
    ) -> None:
        inheritance = item.get("inheritance") or []
        if inheritance:
            # DocFX lists ancestors from the root down to the immediate base.
            self.ref_graph.link(node, str(inheritance[-1]), REF_INHERITS)
        for iface in item.get("implements") or []:
            self.ref_graph.link(node, str(iface), REF_INHERITS)
        if item.get("overridden"):
            self.ref_graph.link(node, str(item["overridden"]), REF_OVERRIDES)
        if node.type:
            self.ref_graph.link(node, str(node.type), REF_RETURNS_TYPE)
        link_content(self.ref_graph, node, node.content)
