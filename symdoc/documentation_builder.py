"""Node construction for declarations coming from the primary front end."""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable

from symdoc.build_logger import BuildLogger
from symdoc.content import Content, parse_content
from symdoc.declaration import (
    CLASS,
    CLASS_KIND_ANNOTATION,
    CLASS_KIND_ENUM,
    CLASS_KIND_INTERFACE,
    CLASS_KIND_OBJECT,
    CONSTRUCTOR,
    FUNCTION,
    GETTER,
    MODULE,
    PACKAGE,
    PROPERTY,
    RECEIVER,
    SCRIPT,
    SETTER,
    TYPE_PARAMETER,
    VALUE_PARAMETER,
    VARIABLE,
    Declaration,
)
from symdoc.declaration_visitor import DocumentationBuildingVisitor
from symdoc.documentation_node import (
    NODE_ACCESSOR,
    NODE_ANNOTATION,
    NODE_CLASS,
    NODE_CONSTRUCTOR,
    NODE_ENUM,
    NODE_FUNCTION,
    NODE_INTERFACE,
    NODE_MODULE,
    NODE_OBJECT,
    NODE_PACKAGE,
    NODE_PARAMETER,
    NODE_PROPERTY,
    NODE_RECEIVER,
    NODE_TYPE_PARAMETER,
    NODE_VARIABLE,
    REF_INHERITS,
    REF_LINK,
    REF_OVERRIDES,
    REF_RETURNS_TYPE,
    REF_TYPE,
    DocumentationModule,
    DocumentationNode,
)
from symdoc.options import DocumentationOptions
from symdoc.reference_graph import NodeReferenceGraph
from symdoc.user_code import (
    make_configuration_predicate,
    make_user_code_predicate,
)

logger = logging.getLogger(__name__)

NODE_KIND_BY_DECLARATION = {
    PACKAGE: NODE_PACKAGE,
    MODULE: NODE_MODULE,
    FUNCTION: NODE_FUNCTION,
    CONSTRUCTOR: NODE_CONSTRUCTOR,
    PROPERTY: NODE_PROPERTY,
    VARIABLE: NODE_VARIABLE,
    GETTER: NODE_ACCESSOR,
    SETTER: NODE_ACCESSOR,
    VALUE_PARAMETER: NODE_PARAMETER,
    TYPE_PARAMETER: NODE_TYPE_PARAMETER,
    RECEIVER: NODE_RECEIVER,
}

NODE_KIND_BY_CLASS_KIND = {
    CLASS_KIND_INTERFACE: NODE_INTERFACE,
    CLASS_KIND_ENUM: NODE_ENUM,
    CLASS_KIND_ANNOTATION: NODE_ANNOTATION,
    CLASS_KIND_OBJECT: NODE_OBJECT,
}

GENERIC_ARGS_RE = re.compile(r"<.*>")


def node_kind_for(declaration: Declaration) -> str:
    """Map a declaration kind (and class kind) to a documentation node kind."""
    if declaration.kind in {CLASS, SCRIPT}:
        return NODE_KIND_BY_CLASS_KIND.get(declaration.class_kind or "", NODE_CLASS)
    return NODE_KIND_BY_DECLARATION[declaration.kind]


def type_identity(type_name: str | None) -> str | None:
    """Reduce a written type to the identity of its classifier.

    ``kotlin.collections.List<p.C>?`` becomes ``kotlin.collections.List``.
    Unqualified names (type parameters) return None.
    """
    if not type_name:
        return None
    base = GENERIC_ARGS_RE.sub("", type_name).rstrip("?").strip()
    if "." not in base:
        return None
    return base


class DocumentationBuilder:
    """Creates documentation nodes for declarations and records their references.

    The visitor calls :meth:`build` for every declaration it accepts. The
    builder registers each node in the shared reference graph; a duplicate
    identity is discarded so the tree keeps one node per identity.
    """

    def __init__(
        self,
        options: DocumentationOptions,
        ref_graph: NodeReferenceGraph,
        logger: BuildLogger,
    ) -> None:
        """Share ``ref_graph`` with every other builder of the module."""
        self.options = options
        self.ref_graph = ref_graph
        self.logger = logger
        self.package_content: dict[str, Content] = {}
        self.visitor = DocumentationBuildingVisitor(
            self,
            make_user_code_predicate(options),
            make_configuration_predicate(options),
        )

    def build(
        self, declaration: Declaration, parent: DocumentationNode
    ) -> DocumentationNode | None:
        """Create, register and attach the node for ``declaration``."""
        node = DocumentationNode(
            kind=node_kind_for(declaration),
            name=declaration.name,
            identity=declaration.signature,
            content=parse_content(declaration.doc, scope=declaration.package),
            type=declaration.return_type or declaration.type,
            location=declaration.location,
            deprecated=declaration.deprecated,
        )
        if declaration.kind == PACKAGE:
            extra = self.package_content.get(declaration.fq_name)
            if extra is not None:
                node.content.extend(extra)
        if not self.ref_graph.register(node.identity, node):
            return None
        parent.append(node)
        self._link_references(node, declaration)
        return node

    def _link_references(
        self, node: DocumentationNode, declaration: Declaration
    ) -> None:
        if declaration.kind == TYPE_PARAMETER:
            self._link_types(node, declaration.supertypes, REF_TYPE)
        else:
            self._link_types(node, declaration.supertypes, REF_INHERITS)
        for overridden in declaration.overrides:
            self.ref_graph.link(node, overridden, REF_OVERRIDES)
        if declaration.return_type:
            self._link_types(node, [declaration.return_type], REF_RETURNS_TYPE)
        elif declaration.type:
            self._link_types(node, [declaration.type], REF_TYPE)
        link_content(self.ref_graph, node, node.content)

    def _link_types(
        self, node: DocumentationNode, type_names: Iterable[str], kind: str
    ) -> None:
        for type_name in type_names:
            target = type_identity(type_name)
            if target is None:
                logger.debug(
                    "Not linking local type '%s' of %s", type_name, node.identity
                )
                continue
            self.ref_graph.link(node, target, kind)

    def append_fragments(
        self,
        module: DocumentationModule,
        fragments: Iterable[Declaration],
        package_content: dict[str, Content],
    ) -> list[DocumentationNode]:
        """Visit each package fragment under ``module``.

        ``package_content`` (from include files) is attached to the package
        node as it is built.
        """
        self.package_content = package_content
        nodes = []
        for fragment in fragments:
            node = self.visitor.visit(fragment, module)
            if node is not None:
                nodes.append(node)
        return nodes


def link_content(
    ref_graph: NodeReferenceGraph, node: DocumentationNode, content: Content
) -> None:
    """Record a ``link`` reference for every symbol link in ``content``."""
    for link in content.links():
        ref_graph.link(node, link.target, REF_LINK)
