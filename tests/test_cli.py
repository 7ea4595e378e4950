"""CLI behaviour tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from defaultsynth.cli import _build_parser, main
from tests._fixtures.declarations import SnapshotBuilder

_SNAPSHOT = """
declarations:
  - name: Foo
    namespace: Demo
    members:
      - name: Hello
        type: string
        initializer: '"World"'
  - name: Bar
    namespace: Demo
    members:
      - name: Hello
        type: string
        annotations:
          - source: Demo.Foo
            member: Hello
"""


def test_cli_accepts_verbose_before_and_after_command() -> None:
    parser = _build_parser()

    assert parser.parse_args(["--verbose", "check", "s.yml"]).verbose is True
    assert parser.parse_args(["generate", "s.yml", "--verbose"]).verbose is True


def test_cli_generate_flags() -> None:
    args = _build_parser().parse_args(["generate", "s.yml", "-o", "out", "--incremental", "--dry-run"])

    assert args.command == "generate"
    assert args.snapshot == "s.yml"
    assert args.output == "out"
    assert args.incremental is True
    assert args.dry_run is True


def test_generate_writes_units(snapshot_builder: SnapshotBuilder, capsys: pytest.CaptureFixture[str]) -> None:
    snapshot = snapshot_builder.write(_SNAPSHOT)
    out = snapshot_builder.root / "out"

    main(["generate", str(snapshot), "--output", str(out)])

    generated = out / "BarDefaults.g.cs"
    assert generated.exists()
    assert '__Hello = "World";' in generated.read_text(encoding="utf-8")
    assert "1 unit(s), 0 diagnostic(s)" in capsys.readouterr().out


def test_generate_uses_config_output_dir_and_cache(snapshot_builder: SnapshotBuilder) -> None:
    snapshot = snapshot_builder.write(_SNAPSHOT)
    snapshot_builder.write("output_dir: gen\ncache_path: .cache/units.json\n", name=".defaultsynth.yml")

    main(["generate", str(snapshot), "--incremental"])

    assert (snapshot_builder.root / "gen" / "BarDefaults.g.cs").exists()
    assert (snapshot_builder.root / ".cache" / "units.json").exists()


def test_check_exits_non_zero_on_errors(snapshot_builder: SnapshotBuilder) -> None:
    snapshot = snapshot_builder.write(_SNAPSHOT.replace("member: Hello", "member: Missing"))

    with pytest.raises(SystemExit) as excinfo:
        main(["check", str(snapshot)])

    assert excinfo.value.code == 1


def test_invalid_snapshot_reports_and_exits(tmp_path: Path) -> None:
    with pytest.raises(SystemExit) as excinfo:
        main(["check", str(tmp_path / "missing.yml")])

    assert excinfo.value.code == 1


def test_log_file_receives_diagnostics(snapshot_builder: SnapshotBuilder) -> None:
    snapshot = snapshot_builder.write(_SNAPSHOT.replace("member: Hello", "member: Missing"))
    log_file = snapshot_builder.root / "defaultsynth.log"

    with pytest.raises(SystemExit):
        main(["--log-file", str(log_file), "check", str(snapshot)])

    logged = log_file.read_text(encoding="utf-8")
    assert "ERROR defaultsynth.engine: " in logged
    assert "UDF001" in logged
    assert "The property 'Missing' does not exist on 'Foo'." in logged
