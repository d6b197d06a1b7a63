"""In-memory documentation tree: nodes, typed references and the module root."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field

from symdoc.content import Content
from symdoc.declaration import SourceLocation

# Node kinds
NODE_MODULE = "module"
NODE_PACKAGE = "package"
NODE_CLASS = "class"
NODE_INTERFACE = "interface"
NODE_ENUM = "enum"
NODE_ANNOTATION = "annotation"
NODE_OBJECT = "object"
NODE_CONSTRUCTOR = "constructor"
NODE_FUNCTION = "function"
NODE_PROPERTY = "property"
NODE_VARIABLE = "variable"
NODE_ACCESSOR = "accessor"
NODE_PARAMETER = "parameter"
NODE_TYPE_PARAMETER = "type_parameter"
NODE_RECEIVER = "receiver"

# Reference kinds
REF_INHERITS = "inherits"
REF_INHERITOR = "inheritor"
REF_OVERRIDES = "overrides"
REF_OVERRIDDEN_BY = "overridden-by"
REF_RETURNS_TYPE = "returns-type"
REF_TYPE = "type"
REF_LINK = "link"

INVERSE_REFERENCES = {
    REF_INHERITS: REF_INHERITOR,
    REF_OVERRIDES: REF_OVERRIDDEN_BY,
}


def is_classlike_kind(kind: str) -> bool:
    """Check if the node kind gets its own page."""
    return kind in {NODE_CLASS, NODE_INTERFACE, NODE_ENUM, NODE_ANNOTATION, NODE_OBJECT}


def is_detail_kind(kind: str) -> bool:
    """Check if the node kind is part of its owner's signature."""
    return kind in {NODE_PARAMETER, NODE_TYPE_PARAMETER, NODE_RECEIVER}


@dataclass(frozen=True)
class DocumentationReference:
    """A resolved, typed edge. The target is looked up, not owned."""

    kind: str
    to: DocumentationNode = field(repr=False)


@dataclass(eq=False)
class DocumentationNode:
    """One documented symbol."""

    kind: str
    name: str
    identity: str
    content: Content = field(default_factory=Content)
    type: str | None = None  # declared type or return type, as written
    location: SourceLocation | None = None
    deprecated: bool = False
    owner: DocumentationNode | None = field(default=None, repr=False)
    children: list[DocumentationNode] = field(default_factory=list, repr=False)
    references: list[DocumentationReference] = field(default_factory=list, repr=False)

    def append(self, child: DocumentationNode) -> DocumentationNode:
        """Attach ``child`` under this node and return it."""
        child.owner = self
        self.children.append(child)
        return child

    def add_reference(self, kind: str, to: DocumentationNode) -> None:
        """Add a typed edge unless an identical one exists."""
        for ref in self.references:
            if ref.kind == kind and ref.to is to:
                return
        self.references.append(DocumentationReference(kind, to))

    def references_of(self, kind: str) -> list[DocumentationNode]:
        """Return the targets of all edges of ``kind``."""
        return [ref.to for ref in self.references if ref.kind == kind]

    def child(self, name: str) -> DocumentationNode | None:
        """Return the first child named ``name``."""
        for c in self.children:
            if c.name == name:
                return c
        return None

    def children_of(self, *kinds: str) -> list[DocumentationNode]:
        """Return the children whose kind is one of ``kinds``."""
        return [c for c in self.children if c.kind in kinds]

    @property
    def members(self) -> list[DocumentationNode]:
        """Children that are not signature details."""
        return [c for c in self.children if not is_detail_kind(c.kind)]

    def walk(self) -> Iterator[DocumentationNode]:
        """Yield this node and all descendants, depth first."""
        yield self
        for c in self.children:
            yield from c.walk()


class DocumentationModule(DocumentationNode):
    """Root of the tree; owns one node per package."""

    def __init__(self, name: str, content: Content | None = None) -> None:
        """Create an empty module carrying the include-file module content."""
        super().__init__(
            kind=NODE_MODULE,
            name=name,
            identity="",
            content=content if content is not None else Content(),
        )

    @property
    def packages(self) -> list[DocumentationNode]:
        """Package nodes in the order they were appended."""
        return self.children_of(NODE_PACKAGE)

    def package(self, name: str) -> DocumentationNode | None:
        """Return the package node named ``name``."""
        for p in self.packages:
            if p.name == name:
                return p
        return None
