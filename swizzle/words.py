"""Word codec: raw bytes <-> unsigned word values."""

from __future__ import annotations

import numpy as np

_BYTE_MASK = np.uint64(0xFF)


def _byte_shifts(bytes_per_word: int, big_endian: bool) -> np.ndarray:
    shifts = np.arange(bytes_per_word, dtype=np.uint64) * np.uint64(8)
    return shifts[::-1] if big_endian else shifts


def words_from_bytes(buf, bytes_per_word: int, big_endian: bool = False) -> np.ndarray:
    """Assemble a whole buffer into an array of ``uint64`` word values.

    Args:
        buf: Bytes-like object or ``uint8`` array; its length must be a
            multiple of *bytes_per_word*.
        bytes_per_word: 1-4.
        big_endian: Most significant byte first when set.
    """
    raw = np.frombuffer(buf, dtype=np.uint8) if not isinstance(buf, np.ndarray) else buf
    if raw.size % bytes_per_word:
        raise ValueError(
            f"buffer length {raw.size} is not a multiple of {bytes_per_word} bytes"
        )
    columns = raw.reshape(-1, bytes_per_word).astype(np.uint64)
    shifted = columns << _byte_shifts(bytes_per_word, big_endian)
    return np.bitwise_or.reduce(shifted, axis=1)


def words_to_bytes(words: np.ndarray, bytes_per_word: int, big_endian: bool = False) -> np.ndarray:
    """Inverse of :func:`words_from_bytes`; returns a flat ``uint8`` array."""
    words = np.asarray(words, dtype=np.uint64)
    columns = (words[:, np.newaxis] >> _byte_shifts(bytes_per_word, big_endian)) & _BYTE_MASK
    return columns.astype(np.uint8).reshape(-1)
