"""Recover the default-value expression of a resolved member."""

from __future__ import annotations

from ..model.adapter import DeclarationModel
from ..models import IMPLICIT_DEFAULT, Expression, Member


class DefaultExtractor:
    def __init__(self, model: DeclarationModel) -> None:
        self._model = model

    def extract(self, member: Member) -> Expression:
        # No initializer means the type's zero value, whatever the target's type is.
        initializer = self._model.initializer_of(member)
        if initializer is None:
            return IMPLICIT_DEFAULT
        return initializer


__all__ = ["DefaultExtractor"]
