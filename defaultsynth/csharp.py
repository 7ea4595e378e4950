"""C# spelling helpers for the emitted partial declarations."""

from __future__ import annotations

from typing import List

from .models import Declaration, Member

KEYWORDS = frozenset(
    """
    abstract as base bool break byte case catch char checked class const continue
    decimal default delegate do double else enum event explicit extern false finally
    fixed float for foreach goto if implicit in int interface internal is lock long
    namespace new null object operator out override params private protected public
    readonly ref return sbyte sealed short sizeof stackalloc static string struct
    switch this throw true try typeof uint ulong unchecked unsafe ushort using
    virtual void volatile while
    """.split()
)


def escape_identifier(name: str) -> str:
    """Prefix reserved words with ``@`` so they can be used as identifiers."""
    return f"@{name}" if name in KEYWORDS else name


def type_parameter_list(declaration: Declaration) -> str:
    if not declaration.type_parameters:
        return ""
    parts = []
    for parameter in declaration.type_parameters:
        prefix = f"{parameter.variance} " if parameter.variance else ""
        parts.append(prefix + escape_identifier(parameter.name))
    return "<" + ", ".join(parts) + ">"


def partial_type_declaration(declaration: Declaration) -> str:
    """Header of the partial re-declaration, without accessibility or ``{``."""
    header = f"partial {declaration.kind} {escape_identifier(declaration.name)}{type_parameter_list(declaration)}"
    clauses = [
        f"where {escape_identifier(constraint.parameter)} : {', '.join(constraint.clauses)}"
        for constraint in declaration.constraints
    ]
    return " ".join([header, *clauses])


def partial_member_declaration(member: Member) -> str:
    """Modifiers, type and name of the partial member; no accessor body."""
    modifiers: List[str] = []
    if member.accessibility:
        modifiers.extend(member.accessibility.split())
    modifiers.extend(modifier for modifier in member.modifiers if modifier != "partial")
    modifiers.extend(["partial", member.type, escape_identifier(member.name)])
    return " ".join(modifiers)


def accessor_lines(member: Member, field_name: str) -> List[str]:
    lines = []
    for accessor in member.accessors:
        if accessor == "get":
            lines.append(f"get => {field_name};")
        else:
            lines.append(f"{accessor} => {field_name} = value;")
    return lines


__all__ = [
    "KEYWORDS",
    "accessor_lines",
    "escape_identifier",
    "partial_member_declaration",
    "partial_type_declaration",
    "type_parameter_list",
]
