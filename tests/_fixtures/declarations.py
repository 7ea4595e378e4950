"""Shorthand constructors for declaration models used across the tests."""

from __future__ import annotations

import textwrap
from pathlib import Path
from typing import Optional

from defaultsynth.models import (
    Annotation,
    Argument,
    Declaration,
    Expression,
    ExpressionKind,
    Member,
    Symbol,
    SymbolKind,
    TypeRef,
    literal,
)


def declaration(name: str, *members: Member, namespace: Optional[str] = "Demo", **kwargs) -> Declaration:
    return Declaration(name=name, namespace=namespace, members=list(members), **kwargs)


def member(
    name: str,
    type: str = "string",
    *,
    initializer: Expression | str | None = None,
    annotations: tuple[Annotation, ...] = (),
    **kwargs,
) -> Member:
    if isinstance(initializer, str):
        initializer = literal(initializer)
    return Member(name=name, type=type, initializer=initializer, annotations=list(annotations), **kwargs)


def use_default_from(source: str, member_name: str) -> Annotation:
    return Annotation(marker="UseDefaultFrom", type_arguments=(TypeRef(source),), arguments=(member_name,))


def _symbol(qualified: str, kind: SymbolKind) -> Symbol:
    container, _, name = qualified.rpartition(".")
    return Symbol(kind=kind, name=name, container=container or None)


def ref(qualified: str, *, text: str | None = None, kind: SymbolKind = SymbolKind.FIELD) -> Expression:
    return Expression(
        kind=ExpressionKind.REFERENCE,
        text=text or qualified.rpartition(".")[2],
        symbol=_symbol(qualified, kind),
    )


def new(qualified: str, *arguments: Argument, text: str = "new(...)") -> Expression:
    return Expression(
        kind=ExpressionKind.CONSTRUCTOR_CALL,
        text=text,
        symbol=_symbol(qualified, SymbolKind.TYPE),
        arguments=tuple(arguments),
    )


def call(qualified: str, *arguments: Argument, text: str = "call(...)") -> Expression:
    return Expression(
        kind=ExpressionKind.INVOCATION,
        text=text,
        symbol=_symbol(qualified, SymbolKind.METHOD),
        arguments=tuple(arguments),
    )


def arg(expression: Expression | str, name: str | None = None) -> Argument:
    if isinstance(expression, str):
        expression = literal(expression)
    return Argument(expression=expression, name=name)


class SnapshotBuilder:
    """Writes snapshot documents into a temporary directory."""

    def __init__(self, tmp_path: Path) -> None:
        self.root = tmp_path / "project"
        self.root.mkdir()

    def write(self, content: str, name: str = "snapshot.yml") -> Path:
        path = self.root / name
        path.write_text(textwrap.dedent(content).lstrip("\n"), encoding="utf-8")
        return path


__all__ = [
    "SnapshotBuilder",
    "arg",
    "call",
    "declaration",
    "member",
    "new",
    "ref",
    "use_default_from",
]
