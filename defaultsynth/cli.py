"""CLI entrypoints for defaultsynth commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .config import ConfigError, SynthConfig, load_config
from .engine import SynthesisEngine
from .logging import configure_logging
from .model import SnapshotError, load_snapshot
from .output import write_units


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
    }
    if suppress_default:
        kwargs["default"] = argparse.SUPPRESS
    else:
        kwargs["default"] = False
    parser.add_argument(
        "-v",
        "--verbose",
        **kwargs,
    )


def _add_snapshot_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "snapshot",
        help="Declaration snapshot (YAML or JSON) exported by the host compiler.",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Path to .defaultsynth.yml or its directory (defaults to the snapshot's directory).",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="defaultsynth",
        description="Synthesize partial declarations that reuse another member's default value.",
    )
    _add_verbose_option(parser)
    parser.add_argument(
        "--log-file",
        default=None,
        help="Also write log records to this file.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    generate_parser = subparsers.add_parser(
        "generate",
        help="Resolve annotated members and write one generated file per target type.",
    )
    _add_verbose_option(generate_parser, suppress_default=True)
    _add_snapshot_options(generate_parser)
    generate_parser.add_argument(
        "-o",
        "--output",
        default=None,
        help="Directory for generated files (defaults to output_dir or ./generated).",
    )
    generate_parser.add_argument(
        "--incremental",
        action="store_true",
        help="Reuse cached units for targets whose inputs did not change.",
    )
    generate_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Report what would be written without touching the output directory.",
    )

    check_parser = subparsers.add_parser(
        "check",
        help="Report diagnostics without writing any files.",
    )
    _add_verbose_option(check_parser, suppress_default=True)
    _add_snapshot_options(check_parser)

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for defaultsynth commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    log_file = Path(args.log_file).expanduser() if args.log_file else None
    configure_logging(verbose=bool(args.verbose), log_file=log_file)

    snapshot_path = Path(args.snapshot).expanduser()
    try:
        config = _load_config(args.config, snapshot_path)
        model = load_snapshot(snapshot_path)
    except (ConfigError, SnapshotError) as exc:
        parser.exit(1, f"{exc}\n")

    if args.command == "generate":
        engine = SynthesisEngine.from_config(
            config, incremental=True if args.incremental else None
        )
        result = engine.run(model)
        output_dir = _output_dir(args.output, config)
        dry_run = bool(getattr(args, "dry_run", False))
        report = write_units(
            result.units, output_dir, hint_suffix=config.hint_suffix, dry_run=dry_run
        )
        prefix = "Would write" if dry_run else "Wrote"
        for path in report.written:
            print(f"{prefix} {_relativize(path)}")
        for path in report.removed:
            print(f"{'Would remove' if dry_run else 'Removed'} {_relativize(path)}")
        print(f"{len(result.units)} unit(s), {len(result.diagnostics)} diagnostic(s)")
    elif args.command == "check":
        result = SynthesisEngine(config).run(model)
        print(f"{len(result.units)} unit(s) would be generated, {len(result.diagnostics)} diagnostic(s)")
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")

    if result.has_errors:
        sys.exit(1)


def _load_config(config_arg: str | None, snapshot_path: Path) -> SynthConfig:
    if config_arg:
        return load_config(Path(config_arg))
    return load_config(snapshot_path.parent)


def _output_dir(output_arg: str | None, config: SynthConfig) -> Path:
    if output_arg:
        return Path(output_arg).expanduser()
    if config.output_dir is not None:
        return config.output_dir
    return config.root / "generated"


def _relativize(path: Path) -> str:
    try:
        return str(path.resolve().relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
