"""Orchestration of one documentation run: analyse, build, write."""

from __future__ import annotations

import time
from collections.abc import Callable
from pathlib import Path

from symdoc.analysis_environment import AnalysisEnvironment, BuildMessageCollector
from symdoc.build_documentation_module import build_documentation_module
from symdoc.build_logger import BuildLogger
from symdoc.documentation_node import DocumentationModule
from symdoc.errors import BuildConfigurationError
from symdoc.file_generator import FileGenerator
from symdoc.markdown_format import JekyllFormatService, MarkdownFormatService
from symdoc.options import DocumentationOptions
from symdoc.outline import YamlOutlineService
from symdoc.source_link import SourceLinkDefinition
from symdoc.user_code import make_file_filter

OutputFactory = Callable[[Path, list[SourceLinkDefinition]], FileGenerator]

FORMATS: dict[str, OutputFactory] = {
    "markdown": lambda out, links: FileGenerator(out, MarkdownFormatService(links)),
    "jekyll": lambda out, links: FileGenerator(out, JekyllFormatService(links)),
    "markdown-site": lambda out, links: FileGenerator(
        out, MarkdownFormatService(links), YamlOutlineService()
    ),
}


class DocumentationGenerator:
    """Runs the analysis, builds the module and writes the selected format."""

    def __init__(
        self,
        logger: BuildLogger,
        sources: list[str],
        module_name: str,
        output_dir: str | Path,
        output_format: str = "markdown",
        classpath: list[str] | None = None,
        samples: list[str] | None = None,
        includes: list[str] | None = None,
        source_links: list[SourceLinkDefinition] | None = None,
        skip_deprecated: bool = False,
        include_non_public: bool = False,
    ) -> None:
        self.logger = logger
        self.sources = sources
        self.module_name = module_name
        self.output_dir = Path(output_dir)
        self.output_format = output_format
        self.classpath = classpath or []
        self.samples = samples or []
        self.includes = includes or []
        self.options = DocumentationOptions(
            include_non_public=include_non_public,
            skip_deprecated=skip_deprecated,
            source_links=source_links or [],
        )

    def configure_environment(self, environment: AnalysisEnvironment) -> None:
        """Point ``environment`` at the sources, samples and classpath."""
        environment.add_classpath(self.classpath)
        environment.add_sources(self.sources)
        environment.add_sources(self.samples)

    def generate(self) -> DocumentationModule:
        """Build the module and write it; the environment is always disposed."""
        environment = AnalysisEnvironment(BuildMessageCollector(self.logger))
        try:
            self.configure_environment(environment)
            self.logger.info("Module: %s", self.module_name)
            self.logger.info("Output: %s", self.output_dir)
            self.logger.info("Sources: %s", ", ".join(self.sources))
            self.logger.info("Classpath: %s", ", ".join(self.classpath))

            factory = FORMATS.get(self.output_format)
            if factory is None:
                msg = f"Unrecognized output format: {self.output_format}"
                raise BuildConfigurationError(msg)

            self.logger.info("Analysing sources and libraries...")
            start = time.monotonic()
            module = build_documentation_module(
                environment,
                self.module_name,
                self.options,
                self.logger,
                includes=self.includes,
                file_filter=make_file_filter(self.samples),
            )
            self.logger.info("done in %.2f secs", time.monotonic() - start)

            self.logger.info("Generating pages...")
            start = time.monotonic()
            factory(self.output_dir, self.options.source_links).generate(module)
            self.logger.info("done in %.2f secs", time.monotonic() - start)
            return module
        finally:
            environment.dispose()
