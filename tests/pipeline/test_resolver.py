"""Tests for ancestor-chain member resolution."""

from __future__ import annotations

import pytest

from defaultsynth.diagnostics import OpenGenericSourceTypeError, UnresolvedSourceMemberError
from defaultsynth.model import InMemoryDeclarationModel
from defaultsynth.models import TypeParameter, TypeRef
from defaultsynth.pipeline import DefaultExtractor, MemberResolver
from tests._fixtures.declarations import declaration, member


def _model(parent_redeclares: bool = False) -> InMemoryDeclarationModel:
    parent_members = [member("X", "int", initializer="2")] if parent_redeclares else []
    return InMemoryDeclarationModel(
        [
            declaration("Grandparent", member("X", "int", initializer="1")),
            declaration("Parent", *parent_members, base="Demo.Grandparent"),
            declaration("Child", base="Demo.Parent"),
        ]
    )


def test_resolves_member_declared_on_ancestor() -> None:
    model = _model()
    resolver = MemberResolver(model)

    owner, found = resolver.resolve(TypeRef("Demo.Parent"), "X")

    assert owner.qualified_name == "Demo.Grandparent"
    assert DefaultExtractor(model).extract(found).text == "1"


def test_most_derived_declaration_shadows_ancestor() -> None:
    model = _model(parent_redeclares=True)

    owner, found = MemberResolver(model).resolve(TypeRef("Demo.Child"), "X")

    assert owner.qualified_name == "Demo.Parent"
    assert found.initializer is not None and found.initializer.text == "2"


def test_unresolved_member_reports_requested_type_only() -> None:
    resolver = MemberResolver(_model())

    with pytest.raises(UnresolvedSourceMemberError) as excinfo:
        resolver.resolve(TypeRef("Demo.Child"), "Missing")

    assert excinfo.value.type_name == "Child"
    assert str(excinfo.value) == "The property 'Missing' does not exist on 'Child'."
    assert "Grandparent" not in str(excinfo.value)


def test_unknown_source_type_is_unresolved() -> None:
    with pytest.raises(UnresolvedSourceMemberError):
        MemberResolver(_model()).resolve(TypeRef("Demo.Nowhere"), "X")


def test_open_type_parameter_is_rejected() -> None:
    with pytest.raises(OpenGenericSourceTypeError):
        MemberResolver(_model()).resolve(TypeRef("T", is_type_parameter=True), "X")


def test_closed_generic_reference_resolves_declaration() -> None:
    model = InMemoryDeclarationModel([declaration("Box", member("Value", "int", initializer="7"))])

    owner, found = MemberResolver(model).resolve(TypeRef("Demo.Box<int>"), "Value")

    assert owner.name == "Box"
    assert found.name == "Value"


def test_cyclic_ancestor_chain_terminates() -> None:
    model = InMemoryDeclarationModel(
        [declaration("A", base="Demo.B"), declaration("B", base="Demo.A")]
    )

    with pytest.raises(UnresolvedSourceMemberError):
        MemberResolver(model).resolve(TypeRef("Demo.A"), "X")


def test_missing_initializer_yields_implicit_default() -> None:
    model = InMemoryDeclarationModel([declaration("Foo", member("Count", "int"))])
    _, found = MemberResolver(model).resolve(TypeRef("Demo.Foo"), "Count")

    extracted = DefaultExtractor(model).extract(found)

    assert extracted.kind.value == "implicit_default"


def test_closed_generic_outer_type_resolves_nested_declaration() -> None:
    model = InMemoryDeclarationModel(
        [
            declaration("Outer", member("Hello", initializer='"outer"'), type_parameters=[TypeParameter("T")]),
            declaration("Inner", member("Hello", initializer='"inner"'), containing_types=["Outer"]),
        ]
    )

    owner, found = MemberResolver(model).resolve(TypeRef("Demo.Outer<int>.Inner"), "Hello")

    assert owner.qualified_name == "Demo.Outer.Inner"
    assert found.initializer is not None and found.initializer.text == '"inner"'
