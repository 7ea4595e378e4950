"""Write generation units to disk, replacing earlier output wholesale."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Sequence

from .logging import get_logger
from .models import GenerationUnit

logger = get_logger("output")


@dataclass
class WriteReport:
    written: List[Path] = field(default_factory=list)
    unchanged: List[Path] = field(default_factory=list)
    removed: List[Path] = field(default_factory=list)


def write_units(
    units: Sequence[GenerationUnit],
    directory: Path,
    *,
    hint_suffix: str = "Defaults.g.cs",
    dry_run: bool = False,
) -> WriteReport:
    """Write each unit to ``directory`` and delete stale generated files."""
    report = WriteReport()
    expected = {unit.hint_name for unit in units}

    if not dry_run:
        directory.mkdir(parents=True, exist_ok=True)

    for unit in units:
        path = directory / unit.hint_name
        if path.exists() and path.read_text(encoding="utf-8") == unit.text:
            report.unchanged.append(path)
            continue
        if not dry_run:
            path.write_text(unit.text, encoding="utf-8")
        logger.debug("Wrote %s", path)
        report.written.append(path)

    if directory.is_dir():
        for stale in sorted(directory.glob(f"*{hint_suffix}")):
            if stale.name in expected:
                continue
            if not dry_run:
                stale.unlink()
            logger.debug("Removed stale unit %s", stale)
            report.removed.append(stale)

    return report


__all__ = ["WriteReport", "write_units"]
