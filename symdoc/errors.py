"""Exceptions raised while building a documentation module."""


class DocumentationBuildError(Exception):
    """Base class for failures that terminate a documentation build."""


class BuildConfigurationError(DocumentationBuildError):
    """Raised for fatal configuration problems (unknown format, missing sources)."""


class MissingDeclarationError(DocumentationBuildError):
    """Raised when a declaration lacks a child its kind requires."""

    def __init__(self, declaration_name: str, missing: str) -> None:
        """Record the offending declaration and the absent child."""
        self.declaration_name = declaration_name
        self.missing = missing
        super().__init__(f"Declaration '{declaration_name}' has no {missing}")


class UnknownDeclarationKindError(DocumentationBuildError):
    """Raised when the front end hands over a declaration kind we cannot visit."""

    def __init__(self, declaration_name: str, kind: str) -> None:
        """Record the declaration and its unsupported kind."""
        self.declaration_name = declaration_name
        self.kind = kind
        super().__init__(f"Declaration '{declaration_name}' has unknown kind '{kind}'")


class ReferenceGraphError(DocumentationBuildError):
    """Raised when the reference graph is used after it has been resolved."""
