"""Data model for declarations handed over by the semantic-analysis front end."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

PACKAGE = "package"
MODULE = "module"
CLASS = "class"
FUNCTION = "function"
PROPERTY = "property"
VARIABLE = "variable"
CONSTRUCTOR = "constructor"
TYPE_PARAMETER = "type_parameter"
VALUE_PARAMETER = "value_parameter"
RECEIVER = "receiver"
GETTER = "getter"
SETTER = "setter"
SCRIPT = "script"

# Class kinds. Objects are singletons whose constructors are compiler-made.
CLASS_KIND_CLASS = "class"
CLASS_KIND_INTERFACE = "interface"
CLASS_KIND_ENUM = "enum"
CLASS_KIND_ANNOTATION = "annotation"
CLASS_KIND_OBJECT = "object"


@dataclass(frozen=True)
class SourceLocation:
    """Where a declaration lives in the analysed sources."""

    path: Path
    line: int | None = None
    column: int | None = None

    def __str__(self) -> str:
        """Render as ``path:line:column`` with the known parts."""
        text = str(self.path)
        if self.line is not None:
            text += f":{self.line}"
            if self.column is not None:
                text += f":{self.column}"
        return text


@dataclass(eq=False)
class Declaration:
    """A resolved symbol. ``kind`` selects which child slots are meaningful."""

    kind: str
    name: str
    fq_name: str
    signature: str  # qualified identity, unique within a module
    package: str = ""
    class_kind: str | None = None
    visibility: str = "public"
    synthetic: bool = False
    deprecated: bool = False
    is_companion: bool = False
    doc: str = ""
    type: str | None = None  # property/parameter/receiver type
    return_type: str | None = None
    supertypes: list[str] = field(default_factory=list)
    overrides: list[str] = field(default_factory=list)
    location: SourceLocation | None = None

    members: list[Declaration] = field(default_factory=list)
    type_parameters: list[Declaration] = field(default_factory=list)
    constructors: list[Declaration] = field(default_factory=list)
    value_parameters: list[Declaration] = field(default_factory=list)
    companion: Declaration | None = None
    receiver: Declaration | None = None
    getter: Declaration | None = None
    setter: Declaration | None = None
    script_class: Declaration | None = None
    root_package: Declaration | None = None

    def __repr__(self) -> str:
        """Keep reprs short; child slots can be large."""
        return f"Declaration({self.kind}, {self.signature!r})"


def is_callable_member(declaration: Declaration) -> bool:
    """Check if the declaration is a callable class member (not a parameter)."""
    return declaration.kind in {
        FUNCTION,
        PROPERTY,
        VARIABLE,
        CONSTRUCTOR,
        GETTER,
        SETTER,
    }


def is_object_machinery(declaration: Declaration) -> bool:
    """Check if the declaration is a compiler-made object or companion."""
    return (
        declaration.kind == CLASS
        and declaration.class_kind == CLASS_KIND_OBJECT
        and declaration.synthetic
    )
