"""Shared fixtures for swizzle tests."""

from __future__ import annotations

from pathlib import Path

import numpy as np
import pytest


@pytest.fixture()
def rng() -> np.random.Generator:
    return np.random.default_rng(1234)


@pytest.fixture()
def random_image(rng):
    """Return a factory producing reproducible random images."""

    def _make(size: int) -> bytes:
        return rng.integers(0, 256, size=size, dtype=np.uint8).tobytes()

    return _make


@pytest.fixture()
def write_image(tmp_path: Path):
    """Return a factory that writes *data* under ``tmp_path`` and returns its path."""

    def _write(data: bytes, name: str = "in.bin") -> Path:
        p = tmp_path / name
        p.write_bytes(data)
        return p

    return _write

