"""In-memory declaration model used by the CLI and the test suite."""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Sequence

from ..models import Annotation, Declaration, Expression, Member, Symbol


class InMemoryDeclarationModel:
    """Declaration graph held as plain dataclasses, keyed by qualified name."""

    def __init__(self, declarations: Sequence[Declaration] = ()) -> None:
        self._declarations: Dict[str, Declaration] = {}
        for declaration in declarations:
            self.add(declaration)

    def add(self, declaration: Declaration) -> None:
        key = declaration.qualified_name
        if key in self._declarations:
            raise ValueError(f"Duplicate declaration '{key}'")
        self._declarations[key] = declaration

    def declarations(self) -> Iterable[Declaration]:
        return list(self._declarations.values())

    def declaration_by_name(self, qualified_name: str) -> Optional[Declaration]:
        return self._declarations.get(_strip_type_arguments(qualified_name))

    def member_by_name(self, declaration: Declaration, name: str) -> Optional[Member]:
        for member in declaration.members:
            if member.name == name:
                return member
        return None

    def ancestor_of(self, declaration: Declaration) -> Optional[Declaration]:
        if not declaration.base:
            return None
        return self.declaration_by_name(declaration.base)

    def initializer_of(self, member: Member) -> Optional[Expression]:
        return member.initializer

    def symbol_denoted_by(self, expression: Expression) -> Optional[Symbol]:
        return expression.symbol

    def fully_qualified_name(self, symbol: Symbol) -> str:
        name = f"{symbol.container}.{symbol.name}" if symbol.container else symbol.name
        if symbol.type_arguments:
            name += "<" + ", ".join(symbol.type_arguments) + ">"
        return name

    def annotations_on(self, member: Member) -> List[Annotation]:
        return list(member.annotations)


def _strip_type_arguments(name: str) -> str:
    """Drop every type argument list, so ``Demo.Outer<int>.Inner`` maps to ``Demo.Outer.Inner``."""
    kept: List[str] = []
    depth = 0
    for char in name:
        if char == "<":
            depth += 1
        elif char == ">" and depth:
            depth -= 1
        elif not depth:
            kept.append(char)
    return "".join(kept)


__all__ = ["InMemoryDeclarationModel"]
