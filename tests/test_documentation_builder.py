"""Tests for node construction from primary declarations."""

from symdoc.build_logger import BuildLogger
from symdoc.content import parse_content, to_test_string
from symdoc.declaration import (
    CLASS,
    CLASS_KIND_INTERFACE,
    CLASS_KIND_OBJECT,
    FUNCTION,
    PACKAGE,
    PROPERTY,
    TYPE_PARAMETER,
    Declaration,
)
from symdoc.documentation_builder import (
    DocumentationBuilder,
    node_kind_for,
    type_identity,
)
from symdoc.documentation_node import (
    NODE_CLASS,
    NODE_INTERFACE,
    NODE_OBJECT,
    NODE_PROPERTY,
    REF_INHERITOR,
    REF_INHERITS,
    REF_LINK,
    REF_OVERRIDDEN_BY,
    REF_OVERRIDES,
    REF_RETURNS_TYPE,
    REF_TYPE,
    DocumentationModule,
)
from symdoc.options import DocumentationOptions
from symdoc.reference_graph import NodeReferenceGraph


def decl(kind: str, signature: str, **kwargs: object) -> Declaration:
    """Create a declaration in package ``p``."""
    name = kwargs.pop("name", signature.split("(")[0].split(".")[-1])
    return Declaration(
        kind=kind,
        name=str(name),
        fq_name=signature.split("(")[0],
        signature=signature,
        package="p",
        **kwargs,  # type: ignore[arg-type]
    )


def create_builder() -> tuple[DocumentationBuilder, NodeReferenceGraph, BuildLogger]:
    """Create a builder over a fresh graph."""
    logger = BuildLogger()
    graph = NodeReferenceGraph(logger)
    return DocumentationBuilder(DocumentationOptions(), graph, logger), graph, logger


def test_node_kind_for_class_kinds() -> None:
    """Verify class kinds select the node kind."""
    assert node_kind_for(decl(CLASS, "p.C", class_kind="class")) == NODE_CLASS
    assert node_kind_for(decl(CLASS, "p.I", class_kind=CLASS_KIND_INTERFACE)) == (
        NODE_INTERFACE
    )
    assert node_kind_for(decl(CLASS, "p.O", class_kind=CLASS_KIND_OBJECT)) == (
        NODE_OBJECT
    )
    assert node_kind_for(decl(PROPERTY, "p.x")) == NODE_PROPERTY


def test_type_identity() -> None:
    """Verify generic arguments and nullability are dropped."""
    assert type_identity("kotlin.collections.List<p.C>?") == "kotlin.collections.List"
    assert type_identity("p.C?") == "p.C"
    assert type_identity("T") is None
    assert type_identity(None) is None


def test_build_attaches_and_registers() -> None:
    """Verify the node carries identity, content and location data."""
    builder, graph, _ = create_builder()
    module = DocumentationModule("core")
    c = decl(CLASS, "p.C", class_kind="class", doc="Summary.\n\nMore *details*.")

    node = builder.build(c, module)

    assert node is not None
    assert node.owner is module
    assert graph.lookup("p.C") is node
    assert to_test_string(node.content) == "Summary.\nMore *details*."


def test_references_resolve_between_built_nodes() -> None:
    """Verify supertypes, overrides, types and doc links become edges."""
    builder, graph, logger = create_builder()
    module = DocumentationModule("core")
    base = builder.build(decl(CLASS, "p.Base", class_kind="class"), module)
    derived = builder.build(
        decl(CLASS, "p.Derived", class_kind="class", supertypes=["p.Base<T>"]), module
    )
    base_m = builder.build(decl(FUNCTION, "p.Base.m()"), base)  # type: ignore[arg-type]
    derived_m = builder.build(
        decl(
            FUNCTION,
            "p.Derived.m()",
            overrides=["p.Base.m()"],
            return_type="p.Base",
            doc="See [Derived].",
        ),
        derived,  # type: ignore[arg-type]
    )

    graph.resolve_references()

    assert base is not None
    assert derived is not None
    assert base_m is not None
    assert derived_m is not None
    assert derived.references_of(REF_INHERITS) == [base]
    assert base.references_of(REF_INHERITOR) == [derived]
    assert derived_m.references_of(REF_OVERRIDES) == [base_m]
    assert base_m.references_of(REF_OVERRIDDEN_BY) == [derived_m]
    assert derived_m.references_of(REF_RETURNS_TYPE) == [base]
    assert derived_m.references_of(REF_LINK) == [derived]
    assert logger.warning_count == 0


def test_type_parameter_bounds_are_type_references() -> None:
    """Verify bounds link as ``type``, not ``inherits``."""
    builder, graph, _ = create_builder()
    module = DocumentationModule("core")
    bound = builder.build(decl(CLASS, "p.Bound", class_kind="class"), module)
    t = builder.build(
        decl(TYPE_PARAMETER, "p.f()<T>", name="T", supertypes=["p.Bound"]), module
    )

    graph.resolve_references()

    assert t.references_of(REF_TYPE) == [bound]  # type: ignore[union-attr]
    assert t.references_of(REF_INHERITS) == []  # type: ignore[union-attr]


def test_local_type_names_are_not_linked() -> None:
    """Verify unqualified types (type parameters) record no reference."""
    builder, graph, _ = create_builder()

    builder.build(decl(PROPERTY, "p.x", type="T"), DocumentationModule("core"))

    assert graph.pending == []


def test_duplicate_identity_is_not_attached() -> None:
    """Verify the second node for an identity is dropped from the tree."""
    builder, graph, logger = create_builder()
    module = DocumentationModule("core")

    first = builder.build(decl(FUNCTION, "p.f()"), module)
    second = builder.build(decl(FUNCTION, "p.f()"), module)

    assert first is not None
    assert second is None
    assert module.children == [first]
    assert logger.warning_count == 1


def test_append_fragments_attaches_package_content() -> None:
    """Verify include content is added after the package's own content."""
    builder, _, _ = create_builder()
    module = DocumentationModule("core")
    package = decl(PACKAGE, "p", members=[decl(FUNCTION, "p.f()")])

    nodes = builder.append_fragments(
        module, [package], {"p": parse_content("From the include.")}
    )

    assert [n.name for n in nodes] == ["p"]
    package_node = module.package("p")
    assert package_node is not None
    assert to_test_string(package_node.content) == "From the include."
