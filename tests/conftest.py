"""Shared pytest fixtures for audio inspection tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from audio_samples import StubIntrospector, WriteSample


@pytest.fixture
def write_sample(tmp_path: Path) -> WriteSample:
    """Write ``data`` to ``tmp_path / name`` and return the path."""

    def _write(name: str, data: bytes) -> Path:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        _ = path.write_bytes(data)
        return path

    return _write


@pytest.fixture
def stub_introspector() -> StubIntrospector:
    """Introspector reporting a playable MP3 track."""

    return StubIntrospector()
