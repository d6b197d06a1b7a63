"""Logic for reading symbol dumps into declaration trees."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from symdoc.declaration import (
    CLASS,
    CLASS_KIND_CLASS,
    CLASS_KIND_OBJECT,
    CONSTRUCTOR,
    FUNCTION,
    GETTER,
    MODULE,
    PACKAGE,
    PROPERTY,
    RECEIVER,
    SCRIPT,
    SETTER,
    TYPE_PARAMETER,
    VALUE_PARAMETER,
    VARIABLE,
    Declaration,
    SourceLocation,
)
from symdoc.errors import MissingDeclarationError

SYMBOL_MIME_PREFIX = "### YamlMime:SymbolFragment"
SYMBOL_FILE_SUFFIX = ".symbols.yml"


@dataclass
class SymbolFile:
    """Declarations of one compilation unit."""

    path: Path
    package: str
    declarations: list[Declaration] = field(default_factory=list)


def strip_mime_header(text: str, prefix: str) -> str:
    """Drop a leading ``### YamlMime:...`` line matching ``prefix``."""
    lines = text.splitlines()
    if lines and lines[0].startswith(prefix):
        return "\n".join(lines[1:]).lstrip("\n")
    return text


def load_symbol_file(path: Path) -> SymbolFile:
    """Parse a ``*.symbols.yml`` dump.

    Raises ``yaml.YAMLError`` for invalid YAML, ``ValueError`` when the
    document is not a mapping and ``MissingDeclarationError`` for
    declarations without a name.
    """
    raw = strip_mime_header(path.read_text(encoding="utf-8"), SYMBOL_MIME_PREFIX)
    doc = yaml.safe_load(raw) or {}
    if not isinstance(doc, dict):
        msg = f"Symbol dump {path} must contain a mapping"
        raise ValueError(msg)
    package = str(doc.get("package") or "")
    source_path = Path(doc["file"]) if doc.get("file") else path
    loader = DeclarationLoader(source_path, package)
    declarations = [
        loader.parse(item, owner=package, owner_signature=package)
        for item in doc.get("declarations") or []
    ]
    return SymbolFile(path=path, package=package, declarations=declarations)


def _qualify(owner: str, name: str) -> str:
    return f"{owner}.{name}" if owner else name


class DeclarationLoader:
    """Builds :class:`Declaration` trees from parsed dump mappings."""

    def __init__(self, source_path: Path, package: str) -> None:
        """Attribute every declaration to ``source_path`` and ``package``."""
        self.source_path = source_path
        self.package = package

    def parse(
        self,
        raw: dict[str, Any],
        owner: str,
        owner_signature: str,
        default_kind: str | None = None,
        default_name: str | None = None,
    ) -> Declaration:
        """Parse ``raw`` declared inside ``owner`` (a qualified name)."""
        kind = str(raw.get("kind") or default_kind or "")
        name = raw.get("name") or default_name
        if not name and kind != PACKAGE:
            raise MissingDeclarationError(_qualify(owner, "?"), "name")
        if not kind:
            raise MissingDeclarationError(_qualify(owner, str(name)), "kind")
        name = str(name or "")

        decl = Declaration(
            kind=kind,
            name=name,
            fq_name="",
            signature="",
            package=self.package,
            class_kind=raw.get("classKind"),
            visibility=str(raw.get("visibility") or "public"),
            synthetic=bool(raw.get("synthetic", False)),
            deprecated=bool(raw.get("deprecated", False)),
            is_companion=bool(raw.get("isCompanion", False)) and kind == CLASS,
            doc=str(raw.get("doc") or ""),
            type=raw.get("type"),
            return_type=raw.get("returnType"),
            supertypes=[
                str(s) for s in raw.get("supertypes") or raw.get("bounds") or []
            ],
            overrides=[str(s) for s in raw.get("overrides") or []],
            location=SourceLocation(
                self.source_path, raw.get("line"), raw.get("column")
            ),
        )

        if kind == PACKAGE:
            decl.fq_name = decl.signature = name or owner
            decl.members = self._parse_list(
                raw.get("members"), decl.fq_name, decl.fq_name
            )
        elif kind == MODULE:
            decl.fq_name = decl.signature = name
            if raw.get("rootPackage") is not None:
                decl.root_package = self.parse(
                    raw["rootPackage"], "", "", default_kind=PACKAGE, default_name=""
                )
        elif kind in {CLASS, SCRIPT}:
            self._fill_classlike(decl, raw, owner)
        elif kind in {TYPE_PARAMETER, RECEIVER, VALUE_PARAMETER}:
            self._fill_detail(decl, owner_signature)
        else:
            self._fill_callable(decl, raw, owner, owner_signature)
        return decl

    def _parse_list(
        self,
        items: list[dict[str, Any]] | None,
        owner: str,
        owner_signature: str,
        default_kind: str | None = None,
    ) -> list[Declaration]:
        return [
            self.parse(item, owner, owner_signature, default_kind=default_kind)
            for item in items or []
        ]

    def _fill_classlike(
        self, decl: Declaration, raw: dict[str, Any], owner: str
    ) -> None:
        decl.fq_name = decl.signature = _qualify(owner, decl.name)
        if decl.kind == SCRIPT:
            if raw.get("class") is not None:
                decl.script_class = self.parse(
                    raw["class"],
                    owner,
                    owner,
                    default_kind=CLASS,
                    default_name=decl.name,
                )
            return
        if decl.class_kind is None:
            decl.class_kind = (
                CLASS_KIND_OBJECT if decl.is_companion else CLASS_KIND_CLASS
            )
        fq = decl.fq_name
        decl.type_parameters = self._parse_list(
            raw.get("typeParameters"), fq, fq, TYPE_PARAMETER
        )
        decl.constructors = [
            self.parse(item, fq, fq, default_kind=CONSTRUCTOR, default_name="<init>")
            for item in raw.get("constructors") or []
        ]
        if raw.get("companion") is not None:
            companion_raw = dict(raw["companion"])
            companion_raw.setdefault("classKind", CLASS_KIND_OBJECT)
            companion_raw["isCompanion"] = True
            decl.companion = self.parse(
                companion_raw, fq, fq, default_kind=CLASS, default_name="Companion"
            )
        decl.members = self._parse_list(raw.get("members"), fq, fq)

    def _fill_detail(self, decl: Declaration, owner_signature: str) -> None:
        if decl.kind == TYPE_PARAMETER:
            decl.signature = f"{owner_signature}<{decl.name}>"
        elif decl.kind == RECEIVER:
            decl.signature = f"{owner_signature}/<this>"
        else:
            decl.signature = f"{owner_signature}/{decl.name}"
        decl.fq_name = decl.signature

    def _fill_callable(
        self,
        decl: Declaration,
        raw: dict[str, Any],
        owner: str,
        owner_signature: str,
    ) -> None:
        if decl.kind in {GETTER, SETTER}:
            # Accessors live under their property's identity.
            decl.fq_name = f"{owner_signature}.{decl.name}"
        else:
            decl.fq_name = _qualify(owner, decl.name)

        receiver_raw = raw.get("receiver")
        receiver_type = None
        if receiver_raw is not None:
            receiver_type = str(receiver_raw.get("type") or "")
        base = decl.fq_name + (f"[{receiver_type}]" if receiver_type else "")

        params_raw = raw.get("valueParameters")
        if decl.kind == SETTER and params_raw is None:
            params_raw = [{"name": "value", "type": raw.get("propertyType")}]
        if decl.kind in {PROPERTY, VARIABLE}:
            decl.signature = base
        else:
            types = ",".join(str(p.get("type") or "") for p in params_raw or [])
            decl.signature = f"{base}({types})"

        sig = decl.signature
        decl.type_parameters = self._parse_list(
            raw.get("typeParameters"), sig, sig, TYPE_PARAMETER
        )
        if receiver_raw is not None:
            decl.receiver = self.parse(
                receiver_raw, sig, sig, default_kind=RECEIVER, default_name="<this>"
            )
        decl.value_parameters = self._parse_list(params_raw, sig, sig, VALUE_PARAMETER)

        if decl.kind == PROPERTY:
            prop_type = decl.type
            if raw.get("getter") is not None:
                getter_raw = dict(raw["getter"])
                getter_raw.setdefault("returnType", prop_type)
                decl.getter = self.parse(
                    getter_raw,
                    sig,
                    sig,
                    default_kind=GETTER,
                    default_name=f"<get-{decl.name}>",
                )
            if raw.get("setter") is not None:
                setter_raw = dict(raw["setter"])
                setter_raw.setdefault("propertyType", prop_type)
                decl.setter = self.parse(
                    setter_raw,
                    sig,
                    sig,
                    default_kind=SETTER,
                    default_name=f"<set-{decl.name}>",
                )
        elif decl.kind == FUNCTION and decl.return_type is None:
            decl.return_type = raw.get("type")
