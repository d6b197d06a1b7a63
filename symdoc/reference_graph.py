"""Registry of documented identities and the references waiting on them."""

from __future__ import annotations

from dataclasses import dataclass

from symdoc.build_logger import BuildLogger
from symdoc.documentation_node import INVERSE_REFERENCES, DocumentationNode
from symdoc.errors import ReferenceGraphError


@dataclass(frozen=True)
class PendingReference:
    """A reference recorded during traversal, resolved after it."""

    from_node: DocumentationNode
    to_identity: str
    kind: str


class NodeReferenceGraph:
    """Maps qualified identities to nodes and links them once traversal ends.

    Node construction order does not matter: a reference may name an
    identity that is registered later. ``resolve_references`` is the single
    join point; after it the graph is frozen.
    """

    def __init__(self, logger: BuildLogger) -> None:
        """Create an empty graph reporting warnings to ``logger``."""
        self.logger = logger
        self.nodes: dict[str, DocumentationNode] = {}
        self.pending: list[PendingReference] = []
        self.resolved = False

    def __contains__(self, identity: str) -> bool:
        return identity in self.nodes

    def __len__(self) -> int:
        return len(self.nodes)

    def lookup(self, identity: str) -> DocumentationNode | None:
        """Return the node registered for ``identity``."""
        return self.nodes.get(identity)

    def register(self, identity: str, node: DocumentationNode) -> bool:
        """Record ``identity`` for ``node``. The first registration wins."""
        self._check_open("register")
        existing = self.nodes.get(identity)
        if existing is not None:
            if existing is not node:
                self.logger.warn(
                    "Duplicate qualified identity '%s' (%s); keeping the first",
                    identity,
                    node.kind,
                )
            return False
        self.nodes[identity] = node
        return True

    def link(self, from_node: DocumentationNode, to_identity: str, kind: str) -> None:
        """Record a reference from ``from_node`` to a possibly unknown identity."""
        self._check_open("link")
        self.pending.append(PendingReference(from_node, to_identity, kind))

    def resolve_references(self) -> int:
        """Attach every pending reference whose target is registered.

        Unresolvable references are dropped with a warning. Returns the
        number of edges added.
        """
        self._check_open("resolve references")
        resolved = 0
        for ref in self.pending:
            target = self.nodes.get(ref.to_identity)
            if target is None:
                self.logger.warn(
                    "Unresolved %s reference from '%s' to '%s'",
                    ref.kind,
                    ref.from_node.identity,
                    ref.to_identity,
                )
                continue
            ref.from_node.add_reference(ref.kind, target)
            inverse = INVERSE_REFERENCES.get(ref.kind)
            if inverse:
                target.add_reference(inverse, ref.from_node)
            resolved += 1
        self.pending = []
        self.resolved = True
        return resolved

    def _check_open(self, action: str) -> None:
        if self.resolved:
            msg = f"Cannot {action}: references were already resolved"
            raise ReferenceGraphError(msg)
