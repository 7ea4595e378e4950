"""Core data models shared across defaultsynth components."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple


@dataclass(frozen=True)
class TypeRef:
    """Type argument of an annotation: a closed type or an open type parameter."""

    name: str
    is_type_parameter: bool = False


@dataclass(frozen=True)
class Annotation:
    """Attribute attached to a member, as seen by the host compiler."""

    marker: str
    type_arguments: Tuple[TypeRef, ...] = ()
    arguments: Tuple[str, ...] = ()


class SymbolKind(str, Enum):
    TYPE = "type"
    FIELD = "field"
    PROPERTY = "property"
    CONSTANT = "constant"
    ENUM_MEMBER = "enum_member"
    METHOD = "method"
    CONSTRUCTOR = "constructor"


@dataclass(frozen=True)
class Symbol:
    """Symbol bound to an expression by the host's semantic model."""

    kind: SymbolKind
    name: str
    container: Optional[str] = None
    type_arguments: Tuple[str, ...] = ()


class ExpressionKind(str, Enum):
    LITERAL = "literal"
    REFERENCE = "reference"
    CONSTRUCTOR_CALL = "constructor_call"
    INVOCATION = "invocation"
    IMPLICIT_DEFAULT = "implicit_default"
    OPAQUE = "opaque"


@dataclass(frozen=True)
class Argument:
    """Single call argument; ``name`` is set when passed as ``name: value``."""

    expression: "Expression"
    name: Optional[str] = None


@dataclass(frozen=True)
class Expression:
    """Initializer expression node.

    ``kind`` tags the variant. ``text`` is the expression as originally written.
    ``symbol`` is the binding for references, the constructed type for
    constructor calls and the callee for invocations.
    """

    kind: ExpressionKind
    text: str
    symbol: Optional[Symbol] = None
    arguments: Tuple[Argument, ...] = ()


def literal(text: str) -> Expression:
    return Expression(kind=ExpressionKind.LITERAL, text=text)


IMPLICIT_DEFAULT = Expression(kind=ExpressionKind.IMPLICIT_DEFAULT, text="default")


@dataclass(frozen=True)
class TypeParameter:
    name: str
    variance: Optional[str] = None


@dataclass(frozen=True)
class TypeConstraint:
    """``where <parameter> : <clauses>`` constraint on a generic declaration."""

    parameter: str
    clauses: Tuple[str, ...]


@dataclass
class Member:
    """Property-like member declared on a type."""

    name: str
    type: str
    accessibility: str = "public"
    modifiers: List[str] = field(default_factory=list)
    accessors: List[str] = field(default_factory=lambda: ["get", "set"])
    initializer: Optional[Expression] = None
    annotations: List[Annotation] = field(default_factory=list)
    location: Optional[str] = None


@dataclass
class Declaration:
    """Named type in the program under analysis."""

    name: str
    namespace: Optional[str] = None
    kind: str = "class"
    members: List[Member] = field(default_factory=list)
    base: Optional[str] = None
    type_parameters: List[TypeParameter] = field(default_factory=list)
    constraints: List[TypeConstraint] = field(default_factory=list)
    containing_types: List[str] = field(default_factory=list)

    @property
    def qualified_name(self) -> str:
        parts = [self.namespace] if self.namespace else []
        parts.extend(self.containing_types)
        parts.append(self.name)
        return ".".join(parts)


@dataclass(frozen=True)
class ResolvedDefault:
    """Reconstructed default text plus the qualified symbols it references."""

    text: str
    symbols: Tuple[str, ...] = ()


@dataclass
class AnnotatedMember:
    """A target member paired with the source reference its marker names."""

    target: Declaration
    member: Member
    source_type: TypeRef
    source_member_name: str
    annotation: Annotation


@dataclass
class ResolvedMember:
    """Annotated member whose source default has been reconstructed."""

    request: AnnotatedMember
    source_type: str
    default: ResolvedDefault


@dataclass
class GenerationUnit:
    """One synthesized partial declaration for a single target type."""

    target: str
    hint_name: str
    text: str
    fingerprint: str
    members: List[str] = field(default_factory=list)
