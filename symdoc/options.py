"""Options that shape which declarations end up in the documentation."""

from dataclasses import dataclass, field

from symdoc.source_link import SourceLinkDefinition


@dataclass
class DocumentationOptions:
    """Build options shared by the visitor, the builders and the formats."""

    include_non_public: bool = False
    skip_deprecated: bool = False
    source_links: list[SourceLinkDefinition] = field(default_factory=list)
