"""Synthesis errors and the diagnostics reported for them."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover - typing aid
    from defaultsynth.models import AnnotatedMember

UNRESOLVED_SOURCE_MEMBER = "UDF001"
OPEN_GENERIC_SOURCE_TYPE = "UDF002"
MALFORMED_DEFAULT_EXPRESSION = "UDF003"
DUPLICATE_ANNOTATION = "UDF004"
ANNOTATION_USAGE = "UDF005"


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"


@dataclass(frozen=True)
class Diagnostic:
    """Problem attributed to a single annotated member."""

    code: str
    severity: Severity
    message: str
    target: str
    member: str
    location: Optional[str] = None

    def format(self) -> str:
        site = self.location or f"{self.target}.{self.member}"
        return f"{site}: {self.severity.value} {self.code}: {self.message}"


class SynthesisError(RuntimeError):
    """Raised when one annotated member cannot be synthesized."""

    code = "UDF000"

    def to_diagnostic(self, request: "AnnotatedMember") -> Diagnostic:
        return Diagnostic(
            code=self.code,
            severity=Severity.ERROR,
            message=str(self),
            target=request.target.qualified_name,
            member=request.member.name,
            location=request.member.location,
        )


class UnresolvedSourceMemberError(SynthesisError):
    """The member name exists nowhere in the source type's ancestor chain."""

    code = UNRESOLVED_SOURCE_MEMBER

    def __init__(self, member_name: str, type_name: str) -> None:
        super().__init__(f"The property '{member_name}' does not exist on '{type_name}'.")
        self.member_name = member_name
        self.type_name = type_name


class OpenGenericSourceTypeError(SynthesisError):
    """The annotation names an unresolved type parameter as its source type."""

    code = OPEN_GENERIC_SOURCE_TYPE

    def __init__(self, parameter: str) -> None:
        super().__init__(
            f"Source type '{parameter}' is an open type parameter; a closed type is required."
        )
        self.parameter = parameter


class MalformedDefaultExpressionError(SynthesisError):
    """The default expression has a shape that cannot be reconstructed."""

    code = MALFORMED_DEFAULT_EXPRESSION

    def __init__(self, expression_text: str, reason: str = "unsupported expression") -> None:
        super().__init__(f"Cannot reconstruct default '{expression_text}': {reason}.")
        self.expression_text = expression_text


__all__ = [
    "ANNOTATION_USAGE",
    "DUPLICATE_ANNOTATION",
    "Diagnostic",
    "MALFORMED_DEFAULT_EXPRESSION",
    "MalformedDefaultExpressionError",
    "OPEN_GENERIC_SOURCE_TYPE",
    "OpenGenericSourceTypeError",
    "Severity",
    "SynthesisError",
    "UNRESOLVED_SOURCE_MEMBER",
    "UnresolvedSourceMemberError",
]
