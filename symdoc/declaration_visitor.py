"""Traversal of declaration trees into documentation nodes.

The visitor decides *what* to walk: which child slots each declaration kind
has, in which order, and which declarations are filtered out. Node
construction itself is delegated to a builder (see
:class:`symdoc.documentation_builder.DocumentationBuilder`), which returns
None when it declines a declaration.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import TYPE_CHECKING

from symdoc.declaration import (
    CLASS,
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
    is_callable_member,
    is_object_machinery,
)
from symdoc.errors import MissingDeclarationError, UnknownDeclarationKindError

if TYPE_CHECKING:
    from symdoc.documentation_builder import DocumentationBuilder
    from symdoc.documentation_node import DocumentationNode


class DocumentationBuildingVisitor:
    """Walks a declaration tree once, building one node per user-code symbol."""

    def __init__(
        self,
        builder: DocumentationBuilder,
        is_user_code: Callable[[Declaration], bool],
        is_configured: Callable[[Declaration], bool] | None = None,
    ) -> None:
        """Use ``builder`` for node construction and ``is_user_code`` to filter.

        ``is_configured`` filters nested types, which may be synthetic; by
        default they are all kept.
        """
        self.builder = builder
        self.is_user_code = is_user_code
        self.is_configured = is_configured or (lambda _: True)
        self._dispatch: dict[
            str, Callable[[Declaration, DocumentationNode], DocumentationNode | None]
        ] = {
            PACKAGE: self._visit_package,
            MODULE: self._visit_module,
            CLASS: self._visit_class,
            SCRIPT: self._visit_script,
            FUNCTION: self._visit_function,
            CONSTRUCTOR: self._visit_function,
            GETTER: self._visit_function,
            SETTER: self._visit_function,
            PROPERTY: self._visit_property,
            VARIABLE: self._visit_variable,
            VALUE_PARAMETER: self._visit_variable,
            TYPE_PARAMETER: self._visit_leaf,
            RECEIVER: self._visit_leaf,
        }

    def visit(
        self, declaration: Declaration, parent: DocumentationNode
    ) -> DocumentationNode | None:
        """Build the node for ``declaration`` under ``parent`` and walk its children."""
        handler = self._dispatch.get(declaration.kind)
        if handler is None:
            raise UnknownDeclarationKindError(declaration.signature, declaration.kind)
        return handler(declaration, parent)

    def visit_children(
        self, declarations: Iterable[Declaration], parent: DocumentationNode
    ) -> None:
        """Visit each user-code declaration in the order given."""
        for declaration in declarations:
            if self.is_user_code(declaration):
                self.visit(declaration, parent)

    def visit_child(
        self, declaration: Declaration | None, parent: DocumentationNode
    ) -> None:
        """Visit an optional declaration if present and user code."""
        if declaration is not None and self.is_user_code(declaration):
            self.visit(declaration, parent)

    def _create(
        self, declaration: Declaration, parent: DocumentationNode
    ) -> DocumentationNode | None:
        return self.builder.build(declaration, parent)

    def _process_callable(
        self, declaration: Declaration, parent: DocumentationNode
    ) -> DocumentationNode | None:
        node = self._create(declaration, parent)
        if node is None:
            return None
        self.visit_children(declaration.type_parameters, node)
        self.visit_child(declaration.receiver, node)
        self.visit_children(declaration.value_parameters, node)
        return node

    def _visit_package(
        self, declaration: Declaration, parent: DocumentationNode
    ) -> DocumentationNode | None:
        node = self._create(declaration, parent)
        if node is not None:
            self.visit_children(declaration.members, node)
        return node

    def _visit_module(
        self, declaration: Declaration, parent: DocumentationNode
    ) -> DocumentationNode | None:
        if declaration.root_package is None:
            raise MissingDeclarationError(
                declaration.signature or declaration.name, "root package"
            )
        node = self._create(declaration, parent)
        if node is not None:
            self.visit_child(declaration.root_package, node)
        return node

    def _visit_class(
        self, declaration: Declaration, parent: DocumentationNode
    ) -> DocumentationNode | None:
        node = self._create(declaration, parent)
        if node is None:
            return None
        if declaration.class_kind != CLASS_KIND_OBJECT:
            # Constructors and companions of objects are generated.
            self.visit_children(declaration.type_parameters, node)
            self.visit_children(declaration.constructors, node)
            self.visit_child(declaration.companion, node)
        for member in declaration.members:
            if member is declaration.companion:
                continue
            if is_callable_member(member):
                if self.is_user_code(member):
                    self.visit(member, node)
            elif not is_object_machinery(member) and self.is_configured(member):
                self.visit(member, node)
        return node

    def _visit_script(
        self, declaration: Declaration, parent: DocumentationNode
    ) -> DocumentationNode | None:
        if declaration.script_class is None:
            raise MissingDeclarationError(declaration.signature, "script class")
        return self._visit_class(declaration.script_class, parent)

    def _visit_function(
        self, declaration: Declaration, parent: DocumentationNode
    ) -> DocumentationNode | None:
        return self._process_callable(declaration, parent)

    def _visit_variable(
        self, declaration: Declaration, parent: DocumentationNode
    ) -> DocumentationNode | None:
        return self._process_callable(declaration, parent)

    def _visit_property(
        self, declaration: Declaration, parent: DocumentationNode
    ) -> DocumentationNode | None:
        node = self._process_callable(declaration, parent)
        if node is not None:
            self.visit_child(declaration.getter, node)
            self.visit_child(declaration.setter, node)
        return node

    def _visit_leaf(
        self, declaration: Declaration, parent: DocumentationNode
    ) -> DocumentationNode | None:
        return self._create(declaration, parent)


def visit_declaration(
    declaration: Declaration,
    parent: DocumentationNode,
    builder: DocumentationBuilder,
    is_user_code: Callable[[Declaration], bool],
    is_configured: Callable[[Declaration], bool] | None = None,
) -> DocumentationNode | None:
    """Walk ``declaration`` under ``parent`` with a fresh visitor."""
    visitor = DocumentationBuildingVisitor(builder, is_user_code, is_configured)
    return visitor.visit(declaration, parent)
