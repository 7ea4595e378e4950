"""Incremental cache of generation units."""

from __future__ import annotations

from dataclasses import asdict
from datetime import UTC, datetime
import json
from pathlib import Path
from typing import Dict, Iterable, Optional

from ..models import GenerationUnit

_CACHE_VERSION = 1


class UnitCache:
    """Stores one unit per target type, keyed by render signature and content fingerprint."""

    def __init__(self, path: Path | None = None) -> None:
        self._path = path
        self._entries: Dict[str, Dict[str, object]] = {}
        self._dirty = False
        if self._path is not None:
            self._load(self._path)

    def __contains__(self, key: str) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, key: str, *, signature: str, fingerprint: str) -> Optional[GenerationUnit]:
        entry = self._entries.get(key)
        if not entry:
            return None
        if entry.get("signature") != signature:
            return None
        if entry.get("fingerprint") != fingerprint:
            return None
        return _unit_from_dict(entry.get("unit"))

    def store(self, key: str, *, signature: str, unit: GenerationUnit) -> None:
        # Entries are replaced whole; a unit is never patched in place.
        self._entries[key] = {
            "signature": signature,
            "fingerprint": unit.fingerprint,
            "unit": asdict(unit),
            "updated_at": datetime.now(UTC).isoformat().replace("+00:00", "Z"),
        }
        self._dirty = True

    def discard(self, key: str) -> None:
        if self._entries.pop(key, None) is not None:
            self._dirty = True

    def prune(self, keys_to_keep: Iterable[str]) -> None:
        keep = set(keys_to_keep)
        removed = [key for key in self._entries if key not in keep]
        for key in removed:
            self._entries.pop(key, None)
        if removed:
            self._dirty = True

    def persist(self) -> None:
        if not self._dirty or self._path is None:
            return
        payload = {
            "version": _CACHE_VERSION,
            "entries": self._entries,
        }
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(json.dumps(payload, indent=2, sort_keys=True), encoding="utf-8")
        self._dirty = False

    # ------------------------------------------------------------------
    # Internal helpers

    def _load(self, path: Path) -> None:
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return
        except (OSError, json.JSONDecodeError):
            return
        if not isinstance(data, dict) or data.get("version") != _CACHE_VERSION:
            return
        entries = data.get("entries")
        if not isinstance(entries, dict):
            return
        valid_entries: Dict[str, Dict[str, object]] = {}
        for key, raw in entries.items():
            if not isinstance(key, str) or not isinstance(raw, dict):
                continue
            if "signature" not in raw or "fingerprint" not in raw:
                continue
            if _unit_from_dict(raw.get("unit")) is None:
                continue
            valid_entries[key] = raw
        self._entries = valid_entries
        self._dirty = False


def _unit_from_dict(payload: object) -> Optional[GenerationUnit]:
    if not isinstance(payload, dict):
        return None
    target = payload.get("target")
    hint_name = payload.get("hint_name")
    text = payload.get("text")
    fingerprint = payload.get("fingerprint")
    members = payload.get("members", [])
    if not all(isinstance(value, str) for value in (target, hint_name, text, fingerprint)):
        return None
    if not isinstance(members, list):
        members = []
    return GenerationUnit(
        target=target,  # type: ignore[arg-type]
        hint_name=hint_name,  # type: ignore[arg-type]
        text=text,  # type: ignore[arg-type]
        fingerprint=fingerprint,  # type: ignore[arg-type]
        members=[str(member) for member in members],
    )


__all__ = ["UnitCache"]
