"""Read-only queries the pipeline needs from the host's declaration model."""

from __future__ import annotations

from typing import Iterable, List, Optional, Protocol

from ..models import Annotation, Declaration, Expression, Member, Symbol


class DeclarationModel(Protocol):
    """Contract implemented by host adapters over a declaration/symbol graph."""

    def declarations(self) -> Iterable[Declaration]:
        """Return every declaration visible to the pass, in a stable order."""

    def declaration_by_name(self, qualified_name: str) -> Optional[Declaration]:
        """Return the declaration with the given qualified name, if known."""

    def member_by_name(self, declaration: Declaration, name: str) -> Optional[Member]:
        """Return the member declared directly on ``declaration`` named ``name``."""

    def ancestor_of(self, declaration: Declaration) -> Optional[Declaration]:
        """Return the direct ancestor of ``declaration``, if it is part of the model."""

    def initializer_of(self, member: Member) -> Optional[Expression]:
        """Return the initializer expression as originally written, if any."""

    def symbol_denoted_by(self, expression: Expression) -> Optional[Symbol]:
        """Return the symbol an expression binds to, or None for raw literals."""

    def fully_qualified_name(self, symbol: Symbol) -> str:
        """Return the display form of ``symbol`` valid from any namespace."""

    def annotations_on(self, member: Member) -> List[Annotation]:
        """Return the annotations attached to ``member``."""


__all__ = ["DeclarationModel"]
