"""Resolve a (source type, member name) reference through the ancestor chain."""

from __future__ import annotations

from typing import Set, Tuple

from ..diagnostics import OpenGenericSourceTypeError, UnresolvedSourceMemberError
from ..model.adapter import DeclarationModel
from ..models import Declaration, Member, TypeRef


class MemberResolver:
    """Finds the member a marker refers to; the most-derived declaration wins."""

    def __init__(self, model: DeclarationModel) -> None:
        self._model = model

    def resolve(self, source_type: TypeRef, member_name: str) -> Tuple[Declaration, Member]:
        """Return the declaring type and member, raising when nothing matches."""
        if source_type.is_type_parameter:
            raise OpenGenericSourceTypeError(source_type.name)
        declaration = self._model.declaration_by_name(source_type.name)
        if declaration is None:
            raise UnresolvedSourceMemberError(member_name, source_type.name)
        return self.resolve_on(declaration, member_name)

    def resolve_on(self, declaration: Declaration, member_name: str) -> Tuple[Declaration, Member]:
        visited: Set[str] = set()
        current: Declaration | None = declaration
        while current is not None and current.qualified_name not in visited:
            visited.add(current.qualified_name)
            member = self._model.member_by_name(current, member_name)
            if member is not None:
                return current, member
            current = self._model.ancestor_of(current)
        raise UnresolvedSourceMemberError(member_name, declaration.name)


__all__ = ["MemberResolver"]
