"""Tests for reading symbol dumps into declaration trees."""

from pathlib import Path

import pytest
import yaml

from symdoc.declaration import (
    CLASS,
    CLASS_KIND_OBJECT,
    FUNCTION,
    GETTER,
    MODULE,
    PACKAGE,
    PROPERTY,
    SCRIPT,
    SETTER,
)
from symdoc.declaration_loader import (
    SYMBOL_MIME_PREFIX,
    DeclarationLoader,
    load_symbol_file,
    strip_mime_header,
)
from symdoc.errors import MissingDeclarationError

DUMP = """\
### YamlMime:SymbolFragment
package: p.q
file: src/p/q/C.kt
declarations:
  - kind: class
    name: C
    line: 3
    doc: "Summary."
    supertypes: [p.q.Base]
    typeParameters: [{name: T, bounds: [p.q.Bound]}]
    constructors:
      - valueParameters: [{name: x, type: kotlin.Int}]
    companion:
      members:
        - {kind: function, name: create, returnType: p.q.C}
    members:
      - {kind: function, name: m, returnType: kotlin.Unit, overrides: [p.q.Base.m()]}
      - kind: property
        name: x
        type: kotlin.Int
        getter: {}
        setter: {}
  - kind: function
    name: ext
    receiver: {type: p.q.C}
    valueParameters:
      - {name: a, type: kotlin.String}
      - {name: b, type: kotlin.Int}
    type: kotlin.Boolean
"""


def load(tmp_path: Path, text: str = DUMP) -> list:
    """Write ``text`` as a dump and load its declarations."""
    path = tmp_path / "C.symbols.yml"
    path.write_text(text, encoding="utf-8")
    return load_symbol_file(path).declarations


def test_strip_mime_header() -> None:
    """Verify only a matching first line is removed."""
    text = f"{SYMBOL_MIME_PREFIX}\npackage: p\n"
    assert strip_mime_header(text, SYMBOL_MIME_PREFIX) == "package: p"
    assert strip_mime_header("package: p\n", SYMBOL_MIME_PREFIX) == "package: p\n"


def test_symbol_file_package_and_location(tmp_path: Path) -> None:
    """Verify package, source path and line are read."""
    path = tmp_path / "C.symbols.yml"
    path.write_text(DUMP, encoding="utf-8")

    symbols = load_symbol_file(path)

    assert symbols.package == "p.q"
    c = symbols.declarations[0]
    assert c.location is not None
    assert c.location.path == Path("src/p/q/C.kt")
    assert c.location.line == 3
    assert str(c.location) == "src/p/q/C.kt:3"


def test_class_identities(tmp_path: Path) -> None:
    """Verify classes and their children get scoped identities."""
    c, _ = load(tmp_path)

    assert (c.kind, c.signature, c.class_kind) == (CLASS, "p.q.C", "class")
    assert c.supertypes == ["p.q.Base"]
    assert c.type_parameters[0].signature == "p.q.C<T>"
    assert c.type_parameters[0].supertypes == ["p.q.Bound"]
    ctor = c.constructors[0]
    assert ctor.signature == "p.q.C.<init>(kotlin.Int)"
    assert ctor.value_parameters[0].signature == "p.q.C.<init>(kotlin.Int)/x"


def test_companion_defaults(tmp_path: Path) -> None:
    """Verify an unnamed companion becomes the ``Companion`` object."""
    c, _ = load(tmp_path)

    companion = c.companion
    assert companion is not None
    assert companion.name == "Companion"
    assert companion.signature == "p.q.C.Companion"
    assert companion.class_kind == CLASS_KIND_OBJECT
    assert companion.is_companion is True
    assert companion.members[0].signature == "p.q.C.Companion.create()"


def test_function_members(tmp_path: Path) -> None:
    """Verify return types and overridden identities are kept."""
    c, _ = load(tmp_path)

    m = c.members[0]
    assert (m.kind, m.signature) == (FUNCTION, "p.q.C.m()")
    assert m.return_type == "kotlin.Unit"
    assert m.overrides == ["p.q.Base.m()"]


def test_property_accessors(tmp_path: Path) -> None:
    """Verify getter and setter names, identities and types."""
    c, _ = load(tmp_path)

    x = c.members[1]
    assert (x.kind, x.signature) == (PROPERTY, "p.q.C.x")
    assert x.getter is not None
    assert x.setter is not None
    assert (x.getter.kind, x.getter.name) == (GETTER, "<get-x>")
    assert x.getter.signature == "p.q.C.x.<get-x>()"
    assert x.getter.return_type == "kotlin.Int"
    assert (x.setter.kind, x.setter.name) == (SETTER, "<set-x>")
    assert x.setter.signature == "p.q.C.x.<set-x>(kotlin.Int)"
    assert x.setter.value_parameters[0].name == "value"


def test_extension_function(tmp_path: Path) -> None:
    """Verify the receiver type is part of the identity."""
    _, ext = load(tmp_path)

    assert ext.signature == "p.q.ext[p.q.C](kotlin.String,kotlin.Int)"
    assert ext.receiver is not None
    assert ext.receiver.signature == f"{ext.signature}/<this>"
    assert ext.receiver.type == "p.q.C"
    assert [p.name for p in ext.value_parameters] == ["a", "b"]
    assert ext.return_type == "kotlin.Boolean"


def test_receiver_type_is_bracketed_after_the_name(tmp_path: Path) -> None:
    """Verify extensions do not collide with same-named members of the receiver."""
    text = """\
package: p
declarations:
  - kind: class
    name: C
    members: [{kind: function, name: ext}]
  - {kind: function, name: ext, receiver: {type: p.C}}
  - {kind: property, name: size, receiver: {type: p.C}, type: kotlin.Int}
"""
    c, ext, size = load(tmp_path, text)

    assert c.members[0].signature == "p.C.ext()"
    assert ext.signature == "p.ext[p.C]()"
    assert size.signature == "p.size[p.C]"
    assert size.receiver is not None
    assert size.receiver.signature == "p.size[p.C]/<this>"


def test_flags_and_visibility(tmp_path: Path) -> None:
    """Verify synthetic, deprecated and visibility flags."""
    text = """\
package: p
declarations:
  - {kind: function, name: f, visibility: internal, deprecated: true}
  - {kind: function, name: g, synthetic: true}
"""
    f, g = load(tmp_path, text)

    assert f.visibility == "internal"
    assert f.deprecated is True
    assert g.synthetic is True
    assert g.visibility == "public"


def test_module_and_script(tmp_path: Path) -> None:
    """Verify module root packages and script classes are parsed."""
    text = """\
package: p
declarations:
  - kind: module
    name: core
    rootPackage:
      name: p
      members: [{kind: function, name: f}]
  - kind: script
    name: build
    class: {members: [{kind: function, name: run}]}
"""
    module, script = load(tmp_path, text)

    assert module.kind == MODULE
    assert module.root_package is not None
    assert module.root_package.kind == PACKAGE
    assert module.root_package.members[0].signature == "p.f()"
    assert script.kind == SCRIPT
    assert script.script_class is not None
    assert script.script_class.kind == CLASS
    assert script.script_class.members[0].signature == "p.build.run()"


def test_missing_name_is_an_input_error() -> None:
    """Verify a declaration without a name names its owner."""
    loader = DeclarationLoader(Path("C.kt"), "p")

    with pytest.raises(MissingDeclarationError, match="p.C.\\?"):
        loader.parse({"kind": "function"}, owner="p.C", owner_signature="p.C")


def test_missing_kind_is_an_input_error() -> None:
    """Verify a declaration without a kind is rejected."""
    loader = DeclarationLoader(Path("C.kt"), "p")

    with pytest.raises(MissingDeclarationError) as exc_info:
        loader.parse({"name": "f"}, owner="p", owner_signature="p")

    assert exc_info.value.declaration_name == "p.f"
    assert exc_info.value.missing == "kind"


def test_not_a_mapping(tmp_path: Path) -> None:
    """Verify a dump holding a list is rejected."""
    with pytest.raises(ValueError, match="mapping"):
        load(tmp_path, "- a\n- b\n")


def test_invalid_yaml(tmp_path: Path) -> None:
    """Verify YAML syntax errors propagate."""
    with pytest.raises(yaml.YAMLError):
        load(tmp_path, "package: [unclosed\n")
