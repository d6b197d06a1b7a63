"""Mapping of documentation nodes to output pages and anchors."""

import posixpath

from symdoc.documentation_node import (
    NODE_MODULE,
    NODE_PACKAGE,
    DocumentationNode,
    is_classlike_kind,
)
from symdoc.markdown_text import file_safe, identity_anchor


def has_own_page(node: DocumentationNode) -> bool:
    """Modules, packages and class-like nodes get a page; members do not."""
    return node.kind in {NODE_MODULE, NODE_PACKAGE} or is_classlike_kind(node.kind)


def page_node_for(node: DocumentationNode) -> DocumentationNode:
    """Return the nearest node (itself or an owner) that has a page."""
    current = node
    while not has_own_page(current) and current.owner is not None:
        current = current.owner
    return current


def page_path_for(node: DocumentationNode) -> str:
    """Return the page of ``node`` relative to the output root, without extension.

    ``p.q`` -> ``p.q/index``; class ``C`` in ``p.q`` -> ``p.q/C``; nested
    ``C.D`` -> ``p.q/C.D``.
    """
    page = page_node_for(node)
    if page.kind == NODE_MODULE:
        return "index"
    if page.kind == NODE_PACKAGE:
        return f"{file_safe(page.name)}/index"
    classes = []
    current: DocumentationNode | None = page
    while current is not None and current.kind not in {NODE_PACKAGE, NODE_MODULE}:
        if is_classlike_kind(current.kind):
            classes.append(file_safe(current.name))
        current = current.owner
    package = "root"
    if current is not None and current.kind == NODE_PACKAGE:
        package = file_safe(current.name)
    return f"{package}/{'.'.join(reversed(classes))}"


def anchor_for(node: DocumentationNode) -> str:
    """Anchor of a member on its page; empty for nodes with their own page."""
    if has_own_page(node):
        return ""
    return identity_anchor(node.identity, page_node_for(node).identity)


def link_for(
    from_node: DocumentationNode, to_node: DocumentationNode, extension: str
) -> str:
    """Relative link from the page of ``from_node`` to ``to_node``."""
    source = page_path_for(from_node) + f".{extension}"
    target = page_path_for(to_node) + f".{extension}"
    rel = posixpath.relpath(target, posixpath.dirname(source) or ".")
    anchor = anchor_for(to_node)
    return f"{rel}#{anchor}" if anchor else rel
