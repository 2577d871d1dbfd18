"""Bit spec parsing and the bit-gather permutation engine.

A permutation table maps destination bit position ``i`` to the source bit
index ``table[i]``.  Bit specs list the table most significant position
first, so ``"0,1,2,3,4,5,6,7"`` reverses the bits of a byte.
"""

from __future__ import annotations

import logging
import warnings
from collections.abc import Sequence

import numpy as np

from swizzle.types import (
    Axis,
    DuplicateIndexWarning,
    InvalidBitSpecError,
    NonBijectiveTableError,
    OutOfRangeIndexError,
    TokenCountMismatchError,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------

def _tokenize(spec: str, axis: Axis) -> list[int]:
    indexes: list[int] = []
    for token in spec.split(","):
        token = token.strip()
        if not token:
            continue
        try:
            indexes.append(int(token, 10))
        except ValueError as exc:
            raise InvalidBitSpecError(
                f"invalid {axis.value} bit index {token!r} (not an integer)"
            ) from exc
    return indexes


def parse_bits(
    spec: str, count: int, axis: Axis | str, *, strict: bool = False,
) -> tuple[int, ...]:
    """Parse a comma-separated bit spec into a permutation table.

    Args:
        spec: Bit indexes, most significant destination bit first.
        count: Number of bits on this axis.
        axis: ``"address"`` or ``"data"``, used in diagnostics.
        strict: Reject repeated indexes instead of warning about them.

    Returns:
        Tuple of *count* source indexes, one per destination bit.

    Raises:
        InvalidBitSpecError: A token is not an integer.
        TokenCountMismatchError: The spec does not list exactly *count* bits.
        OutOfRangeIndexError: An index is outside ``[0, count)``.
        NonBijectiveTableError: *strict* is set and an index repeats.
    """
    axis = Axis(axis)
    indexes = _tokenize(spec, axis)
    if len(indexes) != count:
        raise TokenCountMismatchError(axis, count, len(indexes))

    table = [0] * count
    seen = 0
    pos = count
    for index in indexes:
        if index < 0 or index >= count:
            raise OutOfRangeIndexError(index, axis, count)
        if seen & (1 << index):
            msg = f"{axis.value} bit index {index} specified multiple times"
            if strict:
                raise NonBijectiveTableError(msg)
            warnings.warn(msg, DuplicateIndexWarning, stacklevel=2)
        seen |= 1 << index
        pos -= 1
        table[pos] = index

    logger.debug("%s bits: %s", axis.value, table)
    return tuple(table)


def format_bits(table: Sequence[int]) -> str:
    """Render *table* back into bit spec form (most significant first)."""
    return ",".join(str(index) for index in reversed(table))


# ---------------------------------------------------------------------------
# Table helpers
# ---------------------------------------------------------------------------

def is_bijective(table: Sequence[int]) -> bool:
    """Return ``True`` if *table* is a permutation of ``range(len(table))``."""
    return sorted(table) == list(range(len(table)))


def invert_table(table: Sequence[int]) -> tuple[int, ...]:
    """Return the table that undoes *table*.

    Raises:
        NonBijectiveTableError: *table* drops or repeats a bit.
    """
    if not is_bijective(table):
        raise NonBijectiveTableError(
            f"cannot invert a table that is not a permutation: {list(table)}"
        )
    inverse = [0] * len(table)
    for dest, src in enumerate(table):
        inverse[src] = dest
    return tuple(inverse)


# ---------------------------------------------------------------------------
# Engine
# ---------------------------------------------------------------------------

def permute_word(value: int, table: Sequence[int]) -> int:
    """Gather the bits of *value* according to *table*.

    Output bit ``i`` is input bit ``table[i]``.  Input bits at or above
    ``len(table)`` do not reach the output.
    """
    out = 0
    for dest, src in enumerate(table):
        bit = value & (1 << src)
        if src >= dest:
            out |= bit >> (src - dest)
        else:
            out |= bit << (dest - src)
    return out


def permute_words(values: np.ndarray, table: Sequence[int]) -> np.ndarray:
    """Vectorised :func:`permute_word` over an array of unsigned words."""
    values = np.asarray(values, dtype=np.uint64)
    out = np.zeros_like(values)
    one = np.uint64(1)
    for dest, src in enumerate(table):
        out |= ((values >> np.uint64(src)) & one) << np.uint64(dest)
    return out
