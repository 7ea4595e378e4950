from __future__ import annotations

from pathlib import Path

import pytest

from tests._fixtures.declarations import SnapshotBuilder


@pytest.fixture
def snapshot_builder(tmp_path: Path) -> SnapshotBuilder:
    """Provide a snapshot writer rooted at the pytest tmp_path."""
    return SnapshotBuilder(tmp_path)
