"""Tests for loading declaration snapshots."""

from __future__ import annotations

import json

import pytest

from defaultsynth.engine import SynthesisEngine
from defaultsynth.model import SnapshotError, build_model, load_snapshot
from defaultsynth.models import ExpressionKind, SymbolKind
from tests._fixtures.declarations import SnapshotBuilder


def test_load_yaml_snapshot(snapshot_builder: SnapshotBuilder) -> None:
    path = snapshot_builder.write(
        """
        declarations:
          - name: Foo
            namespace: Demo
            members:
              - name: Hello
                type: string
                initializer: '"World"'
              - name: Origin
                type: Geometry.Point
                initializer:
                  new: Geometry.Point
                  args:
                    - {name: x, value: 1}
                    - {name: y, value: 2}
          - name: Bar
            namespace: Demo
            base: Demo.Foo
            members:
              - name: Hello
                type: string
                modifiers: [partial]
                location: Bar.cs:5
                annotations:
                  - source: Demo.Foo
                    member: Hello
        """
    )

    model = load_snapshot(path)

    foo = model.declaration_by_name("Demo.Foo")
    bar = model.declaration_by_name("Demo.Bar")
    assert foo is not None and bar is not None
    assert model.ancestor_of(bar) is foo
    origin = model.member_by_name(foo, "Origin")
    assert origin is not None and origin.initializer is not None
    assert origin.initializer.kind is ExpressionKind.CONSTRUCTOR_CALL
    assert origin.initializer.text == "new Point(x: 1, y: 2)"
    assert [a.name for a in origin.initializer.arguments] == ["x", "y"]
    hello = model.member_by_name(bar, "Hello")
    assert hello is not None
    assert hello.location == "Bar.cs:5"
    assert hello.annotations[0].type_arguments[0].name == "Demo.Foo"
    assert hello.annotations[0].arguments == ("Hello",)


def test_json_snapshot_drives_a_full_pass(snapshot_builder: SnapshotBuilder) -> None:
    document = {
        "declarations": [
            {
                "name": "Settings",
                "namespace": "Config",
                "members": [
                    {
                        "name": "Mode",
                        "type": "Config.Mode",
                        "initializer": {"ref": "Config.Mode.Fast", "kind": "enum_member"},
                    },
                    {
                        "name": "Timeout",
                        "type": "System.TimeSpan",
                        "initializer": {
                            "call": "System.TimeSpan.FromSeconds",
                            "args": [{"value": 30}],
                        },
                    },
                ],
            },
            {
                "name": "Client",
                "namespace": "App",
                "members": [
                    {
                        "name": "Mode",
                        "type": "Config.Mode",
                        "annotations": [
                            {"type_arguments": ["Config.Settings"], "arguments": ["Mode"]}
                        ],
                    },
                    {
                        "name": "Timeout",
                        "type": "System.TimeSpan",
                        "accessors": ["get"],
                        "annotations": [{"source": "Config.Settings", "member": "Timeout"}],
                    },
                ],
            },
        ]
    }
    path = snapshot_builder.write(json.dumps(document), name="snapshot.json")

    result = SynthesisEngine().run(load_snapshot(path))

    assert result.diagnostics == []
    text = result.units[0].text
    assert "private Config.Mode __Mode = Config.Mode.Fast;" in text
    assert "private System.TimeSpan __Timeout = System.TimeSpan.FromSeconds(30);" in text


def test_reference_text_defaults_to_source_spelling() -> None:
    model = build_model(
        {
            "declarations": [
                {
                    "name": "Foo",
                    "members": [
                        {
                            "name": "Color",
                            "type": "Demo.Color",
                            "initializer": {"ref": "Demo.Color.Red", "kind": "enum_member"},
                        }
                    ],
                }
            ]
        }
    )

    foo = model.declaration_by_name("Foo")
    initializer = foo.members[0].initializer
    assert initializer.text == "Color.Red"
    assert initializer.symbol.kind is SymbolKind.ENUM_MEMBER
    assert model.fully_qualified_name(initializer.symbol) == "Demo.Color.Red"


def test_open_generic_source_in_snapshot() -> None:
    model = build_model(
        {
            "declarations": [
                {
                    "name": "Bar",
                    "type_parameters": [{"name": "T", "variance": "out"}],
                    "members": [
                        {
                            "name": "Value",
                            "type": "int",
                            "annotations": [{"source": {"type_parameter": "T"}, "member": "Value"}],
                        }
                    ],
                }
            ]
        }
    )

    annotation = model.declaration_by_name("Bar").members[0].annotations[0]
    assert annotation.type_arguments[0].is_type_parameter


def test_empty_snapshot_is_an_empty_model(snapshot_builder: SnapshotBuilder) -> None:
    path = snapshot_builder.write("")

    assert list(load_snapshot(path).declarations()) == []


@pytest.mark.parametrize(
    "document, message",
    [
        ([], "mapping at the root"),
        ({"declarations": {}}, "'declarations' must be a list"),
        ({"declarations": [{"members": []}]}, "'name'"),
        ({"declarations": [{"name": "A", "kind": "enum"}]}, "unknown declaration kind"),
        ({"declarations": [{"name": "A"}, {"name": "A"}]}, "Duplicate declaration 'A'"),
        (
            {"declarations": [{"name": "A", "members": [{"name": "X", "type": "int", "accessors": ["add"]}]}]},
            "unknown accessor",
        ),
        (
            {"declarations": [{"name": "A", "members": [{"name": "X", "type": "int", "initializer": {"lambda": 1}}]}]},
            "expression needs one of",
        ),
        (
            {
                "declarations": [
                    {"name": "A", "members": [{"name": "X", "type": "int"}, {"name": "X", "type": "int"}]}
                ]
            },
            "duplicate member 'X'",
        ),
    ],
)
def test_invalid_snapshots_raise(document: object, message: str) -> None:
    with pytest.raises(SnapshotError) as excinfo:
        build_model(document)

    assert message in str(excinfo.value)


def test_unparsable_snapshot_raises(snapshot_builder: SnapshotBuilder) -> None:
    path = snapshot_builder.write("declarations: [unclosed")

    with pytest.raises(SnapshotError):
        load_snapshot(path)


def test_plain_numbers_keep_their_spelling(snapshot_builder: SnapshotBuilder) -> None:
    path = snapshot_builder.write(
        """
        declarations:
          - name: Numbers
            namespace: Demo
            members:
              - {name: Ratio, type: double, initializer: 1.10}
              - {name: Ten, type: int, initializer: 010}
              - {name: Big, type: double, initializer: 1e3}
              - {name: Mask, type: int, initializer: 0x1F}
              - {name: Flag, type: bool, initializer: true}
        """
    )

    numbers = load_snapshot(path).declaration_by_name("Demo.Numbers")

    texts = [item.initializer.text for item in numbers.members]
    assert texts == ["1.10", "010", "1e3", "0x1F", "true"]
    assert all(item.initializer.kind is ExpressionKind.LITERAL for item in numbers.members)
