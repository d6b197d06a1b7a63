"""Predicates deciding which declarations and files are documented."""

from collections.abc import Callable
from pathlib import Path

from symdoc.declaration import (
    MODULE,
    PACKAGE,
    RECEIVER,
    TYPE_PARAMETER,
    VALUE_PARAMETER,
    Declaration,
)
from symdoc.options import DocumentationOptions

PUBLIC_VISIBILITIES = frozenset({"public", "protected"})

# Visibility has no meaning for these; their owner already passed the check.
_VISIBILITY_EXEMPT = {MODULE, PACKAGE, TYPE_PARAMETER, VALUE_PARAMETER, RECEIVER}


def make_configuration_predicate(
    options: DocumentationOptions,
) -> Callable[[Declaration], bool]:
    """Build a predicate applying only the deprecation and visibility options."""

    def is_configured(declaration: Declaration) -> bool:
        if options.skip_deprecated and declaration.deprecated:
            return False
        if options.include_non_public or declaration.kind in _VISIBILITY_EXEMPT:
            return True
        return declaration.visibility in PUBLIC_VISIBILITIES

    return is_configured


def make_user_code_predicate(
    options: DocumentationOptions,
) -> Callable[[Declaration], bool]:
    """Build ``is_user_code(declaration)`` for the given options."""
    is_configured = make_configuration_predicate(options)

    def is_user_code(declaration: Declaration) -> bool:
        return not declaration.synthetic and is_configured(declaration)

    return is_user_code


def make_file_filter(samples: list[str]) -> Callable[[Path], bool]:
    """Build ``include_file(path)`` rejecting files under any samples root."""
    sample_roots = [Path(s).resolve() for s in samples]

    def include_file(path: Path) -> bool:
        source = Path(path).resolve()
        return not any(
            source == root or root in source.parents for root in sample_roots
        )

    return include_file
