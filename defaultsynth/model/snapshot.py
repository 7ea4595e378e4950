"""Load a declaration snapshot (YAML or JSON) into an in-memory model.

A snapshot is the host's pre-built view of the program: declarations, their
members, the annotations on those members and each initializer expression with
the symbols it binds to. JSON documents are accepted because JSON is a YAML
subset.

Expression forms::

    "\"World\""                         raw literal text; plain numbers keep their spelling
    {literal: "42"}
    {ref: Demo.Color.Red}               field, property, constant or enum member
    {new: Demo.Point, args: [...]}      constructor call
    {call: Demo.Factory.Create, args: [...]}
    {opaque: "a + b", symbol: Demo.Math.Add}

Arguments are expressions, or ``{name: x, value: <expression>}`` for named ones.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import yaml

from ..models import (
    Annotation,
    Argument,
    Declaration,
    Expression,
    ExpressionKind,
    Member,
    Symbol,
    SymbolKind,
    TypeConstraint,
    TypeParameter,
    TypeRef,
)
from .memory import InMemoryDeclarationModel

_DECLARATION_KINDS = {"class", "struct", "interface", "record", "record struct", "record class"}
_ACCESSORS = ("get", "set", "init")
_DEFAULT_MARKER = "UseDefaultFrom"
_NUMERIC_TAGS = {"tag:yaml.org,2002:int", "tag:yaml.org,2002:float"}


class _SnapshotLoader(yaml.SafeLoader):
    """Safe loader that leaves plain numbers as the text the host wrote."""


_SnapshotLoader.yaml_implicit_resolvers = {
    first: [(tag, pattern) for tag, pattern in resolvers if tag not in _NUMERIC_TAGS]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}


class SnapshotError(RuntimeError):
    """Raised when a declaration snapshot is unreadable or inconsistent."""


def load_snapshot(path: Path) -> InMemoryDeclarationModel:
    """Read ``path`` and build the declaration model it describes."""
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise SnapshotError(f"Cannot read snapshot {path}: {exc}") from exc
    try:
        data = yaml.load(text, Loader=_SnapshotLoader)
    except yaml.YAMLError as exc:
        raise SnapshotError(f"Failed to parse {path.name}: {exc}") from exc
    return build_model(data)


def build_model(data: Any) -> InMemoryDeclarationModel:
    """Build a model from an already-parsed snapshot document."""
    if data is None:
        return InMemoryDeclarationModel()
    if not isinstance(data, dict):
        raise SnapshotError("Snapshot must contain a mapping at the root")
    raw_declarations = data.get("declarations")
    if raw_declarations is None:
        raw_declarations = []
    if not isinstance(raw_declarations, list):
        raise SnapshotError("'declarations' must be a list")

    model = InMemoryDeclarationModel()
    for index, raw in enumerate(raw_declarations):
        declaration = _parse_declaration(raw, f"declarations[{index}]")
        try:
            model.add(declaration)
        except ValueError as exc:
            raise SnapshotError(str(exc)) from exc
    return model


def _parse_declaration(raw: Any, where: str) -> Declaration:
    if not isinstance(raw, dict):
        raise SnapshotError(f"{where} must be a mapping")
    name = _require_str(raw, "name", where)
    kind = _as_str(raw.get("kind")) or "class"
    if kind not in _DECLARATION_KINDS:
        raise SnapshotError(f"{where}: unknown declaration kind '{kind}'")

    members = [
        _parse_member(item, f"{where}.members[{index}]")
        for index, item in enumerate(_as_list(raw.get("members"), f"{where}.members"))
    ]
    seen: set[str] = set()
    for member in members:
        if member.name in seen:
            raise SnapshotError(f"{where}: duplicate member '{member.name}'")
        seen.add(member.name)

    return Declaration(
        name=name,
        namespace=_as_str(raw.get("namespace")),
        kind=kind,
        members=members,
        base=_as_str(raw.get("base")),
        type_parameters=[
            _parse_type_parameter(item, where)
            for item in _as_list(raw.get("type_parameters"), f"{where}.type_parameters")
        ],
        constraints=[
            _parse_constraint(item, where)
            for item in _as_list(raw.get("constraints"), f"{where}.constraints")
        ],
        containing_types=[
            str(item) for item in _as_list(raw.get("containing_types"), f"{where}.containing_types")
        ],
    )


def _parse_member(raw: Any, where: str) -> Member:
    if not isinstance(raw, dict):
        raise SnapshotError(f"{where} must be a mapping")
    accessors = [str(item) for item in _as_list(raw.get("accessors", ["get", "set"]), f"{where}.accessors")]
    unknown = [item for item in accessors if item not in _ACCESSORS]
    if unknown:
        raise SnapshotError(f"{where}: unknown accessor(s) {', '.join(unknown)}")
    if not accessors:
        raise SnapshotError(f"{where}: a member needs at least one accessor")

    initializer = None
    if "initializer" in raw and raw["initializer"] is not None:
        initializer = _parse_expression(raw["initializer"], f"{where}.initializer")

    return Member(
        name=_require_str(raw, "name", where),
        type=_require_str(raw, "type", where),
        accessibility=_as_str(raw.get("accessibility")) or "public",
        modifiers=[str(item) for item in _as_list(raw.get("modifiers"), f"{where}.modifiers")],
        accessors=accessors,
        initializer=initializer,
        annotations=[
            _parse_annotation(item, f"{where}.annotations[{index}]")
            for index, item in enumerate(_as_list(raw.get("annotations"), f"{where}.annotations"))
        ],
        location=_as_str(raw.get("location")),
    )


def _parse_annotation(raw: Any, where: str) -> Annotation:
    if not isinstance(raw, dict):
        raise SnapshotError(f"{where} must be a mapping")
    marker = _as_str(raw.get("marker")) or _DEFAULT_MARKER
    if "source" in raw or "member" in raw:
        type_arguments: Tuple[TypeRef, ...] = (_parse_type_ref(raw.get("source"), where),)
        arguments: Tuple[str, ...] = (_require_str(raw, "member", where),)
    else:
        type_arguments = tuple(
            _parse_type_ref(item, where)
            for item in _as_list(raw.get("type_arguments"), f"{where}.type_arguments")
        )
        arguments = tuple(str(item) for item in _as_list(raw.get("arguments"), f"{where}.arguments"))
    return Annotation(marker=marker, type_arguments=type_arguments, arguments=arguments)


def _parse_type_ref(raw: Any, where: str) -> TypeRef:
    if isinstance(raw, str) and raw:
        return TypeRef(name=raw)
    if isinstance(raw, dict) and isinstance(raw.get("type_parameter"), str):
        return TypeRef(name=raw["type_parameter"], is_type_parameter=True)
    raise SnapshotError(f"{where}: expected a type name or {{type_parameter: name}}")


def _parse_type_parameter(raw: Any, where: str) -> TypeParameter:
    if isinstance(raw, str):
        return TypeParameter(name=raw)
    if isinstance(raw, dict):
        variance = _as_str(raw.get("variance"))
        if variance not in (None, "in", "out"):
            raise SnapshotError(f"{where}: variance must be 'in' or 'out'")
        return TypeParameter(name=_require_str(raw, "name", where), variance=variance)
    raise SnapshotError(f"{where}: invalid type parameter entry")


def _parse_constraint(raw: Any, where: str) -> TypeConstraint:
    if not isinstance(raw, dict):
        raise SnapshotError(f"{where}: constraints must be mappings")
    clauses = tuple(str(item) for item in _as_list(raw.get("clauses"), f"{where}.clauses"))
    if not clauses:
        raise SnapshotError(f"{where}: constraint needs at least one clause")
    return TypeConstraint(parameter=_require_str(raw, "parameter", where), clauses=clauses)


def _parse_expression(raw: Any, where: str) -> Expression:
    if isinstance(raw, bool):
        return Expression(kind=ExpressionKind.LITERAL, text="true" if raw else "false")
    if isinstance(raw, (int, float, str)):
        return Expression(kind=ExpressionKind.LITERAL, text=str(raw))
    if not isinstance(raw, dict):
        raise SnapshotError(f"{where}: invalid expression")

    if "literal" in raw:
        return Expression(kind=ExpressionKind.LITERAL, text=str(raw["literal"]))
    if "ref" in raw:
        symbol = _parse_symbol(raw["ref"], raw, _symbol_kind(raw, SymbolKind.FIELD, where), where)
        return Expression(
            kind=ExpressionKind.REFERENCE,
            text=_as_str(raw.get("text")) or _source_name(symbol),
            symbol=symbol,
        )
    if "new" in raw:
        symbol = _parse_symbol(raw["new"], raw, SymbolKind.TYPE, where)
        arguments = _parse_arguments(raw.get("args"), where)
        text = _as_str(raw.get("text")) or f"new {_source_name(symbol)}({_argument_text(arguments)})"
        return Expression(
            kind=ExpressionKind.CONSTRUCTOR_CALL, text=text, symbol=symbol, arguments=arguments
        )
    if "call" in raw:
        symbol = _parse_symbol(raw["call"], raw, SymbolKind.METHOD, where)
        arguments = _parse_arguments(raw.get("args"), where)
        text = _as_str(raw.get("text")) or f"{_source_name(symbol)}({_argument_text(arguments)})"
        return Expression(kind=ExpressionKind.INVOCATION, text=text, symbol=symbol, arguments=arguments)
    if "opaque" in raw:
        bound = None
        if raw.get("symbol"):
            bound = _parse_symbol(raw["symbol"], {}, _symbol_kind(raw, SymbolKind.METHOD, where), where)
        return Expression(kind=ExpressionKind.OPAQUE, text=str(raw["opaque"]), symbol=bound)
    raise SnapshotError(f"{where}: expression needs one of literal, ref, new, call or opaque")


def _parse_arguments(raw: Any, where: str) -> Tuple[Argument, ...]:
    arguments: List[Argument] = []
    for index, item in enumerate(_as_list(raw, f"{where}.args")):
        item_where = f"{where}.args[{index}]"
        if isinstance(item, dict) and "value" in item:
            name = _as_str(item.get("name"))
            arguments.append(Argument(expression=_parse_expression(item["value"], item_where), name=name))
        else:
            arguments.append(Argument(expression=_parse_expression(item, item_where)))
    return tuple(arguments)


def _parse_symbol(qualified: Any, raw: Dict[str, Any], kind: SymbolKind, where: str) -> Symbol:
    if not isinstance(qualified, str) or not qualified:
        raise SnapshotError(f"{where}: symbol must be a qualified name")
    container, _, name = qualified.rpartition(".")
    type_arguments = tuple(
        str(item) for item in _as_list(raw.get("type_arguments"), f"{where}.type_arguments")
    )
    return Symbol(kind=kind, name=name, container=container or None, type_arguments=type_arguments)


def _symbol_kind(raw: Dict[str, Any], default: SymbolKind, where: str) -> SymbolKind:
    value = raw.get("kind")
    if value is None:
        return default
    try:
        return SymbolKind(str(value))
    except ValueError as exc:
        raise SnapshotError(f"{where}: unknown symbol kind '{value}'") from exc


def _source_name(symbol: Symbol) -> str:
    """Approximate the unqualified spelling a user would have written."""
    name = symbol.name
    if symbol.kind in (SymbolKind.ENUM_MEMBER, SymbolKind.CONSTANT, SymbolKind.METHOD) and symbol.container:
        name = f"{symbol.container.rpartition('.')[2]}.{name}"
    if symbol.type_arguments:
        name += "<" + ", ".join(symbol.type_arguments) + ">"
    return name


def _argument_text(arguments: Tuple[Argument, ...]) -> str:
    parts = []
    for argument in arguments:
        prefix = f"{argument.name}: " if argument.name else ""
        parts.append(prefix + argument.expression.text)
    return ", ".join(parts)


def _require_str(raw: Dict[str, Any], key: str, where: str) -> str:
    value = raw.get(key)
    if not isinstance(value, str) or not value:
        raise SnapshotError(f"{where}: '{key}' must be a non-empty string")
    return value


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float)) and not isinstance(value, bool) else None


def _as_list(value: Any, where: str) -> List[Any]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise SnapshotError(f"{where} must be a list")
    return value


__all__ = ["SnapshotError", "build_model", "load_snapshot"]
