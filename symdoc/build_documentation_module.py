"""Assembly of a documentation module from every analysed source."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

from symdoc.analysis_environment import AnalysisEnvironment
from symdoc.build_logger import BuildLogger
from symdoc.documentation_builder import DocumentationBuilder, link_content
from symdoc.documentation_node import NODE_PACKAGE, DocumentationModule
from symdoc.managed_reference_builder import ManagedReferenceBuilder
from symdoc.options import DocumentationOptions
from symdoc.package_docs import PackageDocs
from symdoc.reference_graph import NodeReferenceGraph


def build_documentation_module(
    environment: AnalysisEnvironment,
    module_name: str,
    options: DocumentationOptions,
    logger: BuildLogger,
    includes: list[str] | None = None,
    file_filter: Callable[[Path], bool] = lambda _: True,
) -> DocumentationModule:
    """Build the fully resolved documentation tree for one module.

    Primary fragments and host-language files share one module and one
    reference graph; references are resolved once, after both are appended.
    """
    fragments = environment.package_fragments(file_filter)
    ref_graph = NodeReferenceGraph(logger)

    link_scope = fragments[0].package if fragments else None
    package_docs = PackageDocs(link_scope, logger)
    for include in includes or []:
        package_docs.parse(include)

    module = DocumentationModule(module_name, package_docs.module_content)
    link_content(ref_graph, module, module.content)

    builder = DocumentationBuilder(options, ref_graph, logger)
    builder.append_fragments(
        module,
        [fragment.as_declaration() for fragment in fragments],
        package_docs.package_content,
    )

    host_builder = ManagedReferenceBuilder(options, ref_graph, logger)
    for path in environment.host_source_files():
        if file_filter(path):
            host_builder.append_file(path, module, package_docs.package_content)

    documented = {n.identity for n in module.walk() if n.kind == NODE_PACKAGE}
    for name in package_docs.unmatched_packages(documented):
        logger.warn("Include files describe package '%s' which has no sources", name)

    ref_graph.resolve_references()
    return module
