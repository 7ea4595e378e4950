"""Rewrite a default-value expression into text valid at the emission site.

Copying the initializer verbatim is not enough: the generated file does not
share the source file's usings, aliases or enclosing type, so every symbol the
expression mentions is re-anchored to its fully qualified name. Literals carry
no symbol and are copied as written. Calls are rebuilt argument by argument,
keeping argument order and ``name:`` prefixes.
"""

from __future__ import annotations

from typing import Callable, Dict, List

from ..diagnostics import MalformedDefaultExpressionError
from ..model.adapter import DeclarationModel
from ..models import Expression, ExpressionKind, ResolvedDefault, Symbol, SymbolKind

_GLOBAL_PREFIX = "global::"


class ExpressionReconstructor:
    """Structural recursion over the expression variants."""

    def __init__(
        self,
        model: DeclarationModel,
        *,
        implicit_default: str = "default",
        global_qualifier: bool = False,
    ) -> None:
        self._model = model
        self._implicit_default = implicit_default
        self._global_qualifier = global_qualifier
        self._handlers: Dict[ExpressionKind, Callable[[Expression, Symbol, List[str]], str]] = {
            ExpressionKind.REFERENCE: self._reference,
            ExpressionKind.CONSTRUCTOR_CALL: self._constructor_call,
            ExpressionKind.INVOCATION: self._invocation,
        }

    def reconstruct(self, expression: Expression) -> ResolvedDefault:
        symbols: List[str] = []
        text = self._rewrite(expression, symbols)
        return ResolvedDefault(text=text, symbols=tuple(dict.fromkeys(symbols)))

    def _rewrite(self, expression: Expression, symbols: List[str]) -> str:
        if expression.kind is ExpressionKind.IMPLICIT_DEFAULT:
            return self._implicit_default
        if expression.kind is ExpressionKind.LITERAL:
            return expression.text
        symbol = self._model.symbol_denoted_by(expression)
        if symbol is None:
            return expression.text
        handler = self._handlers.get(expression.kind)
        if handler is None:
            raise MalformedDefaultExpressionError(
                expression.text, f"{expression.kind.value} expressions are not supported"
            )
        return handler(expression, symbol, symbols)

    def _reference(self, expression: Expression, symbol: Symbol, symbols: List[str]) -> str:
        return self._qualify(symbol, symbols)

    def _constructor_call(self, expression: Expression, symbol: Symbol, symbols: List[str]) -> str:
        if symbol.kind is SymbolKind.CONSTRUCTOR:
            if not symbol.container:
                raise MalformedDefaultExpressionError(expression.text, "constructed type is unknown")
            type_name = self._prefixed(symbol.container)
            symbols.append(symbol.container)
        else:
            type_name = self._qualify(symbol, symbols)
        return f"new {type_name}({self._arguments(expression, symbols)})"

    def _invocation(self, expression: Expression, symbol: Symbol, symbols: List[str]) -> str:
        return f"{self._qualify(symbol, symbols)}({self._arguments(expression, symbols)})"

    def _arguments(self, expression: Expression, symbols: List[str]) -> str:
        parts: List[str] = []
        for argument in expression.arguments:
            text = self._rewrite(argument.expression, symbols)
            parts.append(f"{argument.name}: {text}" if argument.name else text)
        return ", ".join(parts)

    def _qualify(self, symbol: Symbol, symbols: List[str]) -> str:
        name = self._model.fully_qualified_name(symbol)
        symbols.append(name)
        if symbol.container is None:
            return name
        return self._prefixed(name)

    def _prefixed(self, name: str) -> str:
        return f"{_GLOBAL_PREFIX}{name}" if self._global_qualifier else name


__all__ = ["ExpressionReconstructor"]
