"""Tests for the node reference graph."""

import pytest

from symdoc.build_logger import BuildLogger
from symdoc.documentation_node import (
    NODE_CLASS,
    NODE_FUNCTION,
    REF_INHERITOR,
    REF_INHERITS,
    REF_LINK,
    REF_OVERRIDDEN_BY,
    REF_OVERRIDES,
    DocumentationNode,
)
from symdoc.errors import ReferenceGraphError
from symdoc.reference_graph import NodeReferenceGraph


def create_node(identity: str, kind: str = NODE_CLASS) -> DocumentationNode:
    """Create a bare node named after the last segment of its identity."""
    return DocumentationNode(kind=kind, name=identity.split(".")[-1], identity=identity)


def test_forward_reference_resolves_after_traversal() -> None:
    """Verify a reference to an identity registered later is resolved."""
    graph = NodeReferenceGraph(BuildLogger())
    derived = create_node("p.Derived")
    graph.register(derived.identity, derived)
    graph.link(derived, "p.Base", REF_INHERITS)

    base = create_node("p.Base")
    graph.register(base.identity, base)

    assert graph.resolve_references() == 1
    assert derived.references_of(REF_INHERITS) == [base]


def test_inverse_edges_are_added() -> None:
    """Verify inherits and overrides get their inverse edge on the target."""
    graph = NodeReferenceGraph(BuildLogger())
    base, derived = create_node("p.Base"), create_node("p.Derived")
    base_m = create_node("p.Base.m()", NODE_FUNCTION)
    derived_m = create_node("p.Derived.m()", NODE_FUNCTION)
    for node in (base, derived, base_m, derived_m):
        graph.register(node.identity, node)
    graph.link(derived, "p.Base", REF_INHERITS)
    graph.link(derived_m, "p.Base.m()", REF_OVERRIDES)

    graph.resolve_references()

    assert base.references_of(REF_INHERITOR) == [derived]
    assert base_m.references_of(REF_OVERRIDDEN_BY) == [derived_m]


def test_link_reference_has_no_inverse() -> None:
    """Verify plain links are one-directional."""
    graph = NodeReferenceGraph(BuildLogger())
    a, b = create_node("p.A"), create_node("p.B")
    graph.register(a.identity, a)
    graph.register(b.identity, b)
    graph.link(a, "p.B", REF_LINK)

    graph.resolve_references()

    assert a.references_of(REF_LINK) == [b]
    assert b.references == []


def test_unresolved_reference_is_dropped_with_warning() -> None:
    """Verify an unknown target adds no edge and counts one warning."""
    logger = BuildLogger()
    graph = NodeReferenceGraph(logger)
    a = create_node("p.A")
    graph.register(a.identity, a)
    graph.link(a, "kotlin.Any", REF_INHERITS)

    assert graph.resolve_references() == 0
    assert a.references == []
    assert logger.warning_count == 1


def test_duplicate_identity_keeps_first_registration() -> None:
    """Verify the first node registered for an identity wins."""
    logger = BuildLogger()
    graph = NodeReferenceGraph(logger)
    first, second = create_node("p.A"), create_node("p.A")

    assert graph.register("p.A", first) is True
    assert graph.register("p.A", second) is False
    assert graph.lookup("p.A") is first
    assert len(graph) == 1
    assert logger.warning_count == 1


def test_registering_same_node_twice_is_silent() -> None:
    """Verify re-registering the same node does not count as a duplicate."""
    logger = BuildLogger()
    graph = NodeReferenceGraph(logger)
    node = create_node("p.A")
    graph.register("p.A", node)

    assert graph.register("p.A", node) is False
    assert logger.warning_count == 0


def test_duplicate_edges_are_not_repeated() -> None:
    """Verify linking the same pair twice yields one edge."""
    graph = NodeReferenceGraph(BuildLogger())
    a, b = create_node("p.A"), create_node("p.B")
    graph.register(a.identity, a)
    graph.register(b.identity, b)
    graph.link(a, "p.B", REF_INHERITS)
    graph.link(a, "p.B", REF_INHERITS)

    graph.resolve_references()

    assert a.references_of(REF_INHERITS) == [b]
    assert b.references_of(REF_INHERITOR) == [a]


def test_resolving_twice_is_rejected() -> None:
    """Verify the graph is frozen after resolution."""
    graph = NodeReferenceGraph(BuildLogger())
    a = create_node("p.A")
    graph.register(a.identity, a)
    graph.resolve_references()

    with pytest.raises(ReferenceGraphError):
        graph.resolve_references()
    with pytest.raises(ReferenceGraphError):
        graph.register("p.B", create_node("p.B"))
    with pytest.raises(ReferenceGraphError):
        graph.link(a, "p.A", REF_LINK)


def test_resolution_does_not_change_identities() -> None:
    """Verify resolution only adds edges."""
    graph = NodeReferenceGraph(BuildLogger())
    a, b = create_node("p.A"), create_node("p.B")
    graph.register(a.identity, a)
    graph.register(b.identity, b)
    graph.link(a, "p.B", REF_INHERITS)

    graph.resolve_references()

    assert (a.identity, b.identity) == ("p.A", "p.B")
    assert graph.lookup("p.A") is a
    assert graph.lookup("p.B") is b
    assert "p.A" in graph
