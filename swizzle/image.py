"""Image driver: geometry, buffers, the word-by-word transform and file I/O."""

from __future__ import annotations

import logging
import os
import warnings
from pathlib import Path

import numpy as np

from swizzle.bits import format_bits, invert_table, parse_bits, permute_words
from swizzle.types import (
    MAX_ADDR_BITS,
    AllocationError,
    Axis,
    Geometry,
    ImageIOError,
    InvalidAddressWidthError,
    NonPowerOfTwoSizeWarning,
    SwizzleConfig,
    SwizzleResult,
    UnalignedSizeWarning,
)
from swizzle.words import words_from_bytes, words_to_bytes

logger = logging.getLogger(__name__)

Table = tuple[int, ...]


# ---------------------------------------------------------------------------
# Geometry
# ---------------------------------------------------------------------------

def _is_pow2(n: int) -> bool:
    return n & (n - 1) == 0


def _next_pow2(n: int) -> int:
    return 1 << (n - 1).bit_length()


def compute_geometry(input_size: int, config: SwizzleConfig) -> Geometry:
    """Derive the working size and bit widths for an image of *input_size* bytes.

    Emits :class:`NonPowerOfTwoSizeWarning` / :class:`UnalignedSizeWarning`
    when padding is added.

    Raises:
        InvalidWordSizeError: ``config.bytes_per_word`` is outside 1-4.
        InvalidAddressWidthError: The address width is outside 1-32 bits.
    """
    config.validate()
    bpw = config.bytes_per_word
    working = input_size
    padded_pow2 = padded_align = False

    if config.addr_bits is not None and not _is_pow2(working):
        warnings.warn(
            f"non-power-of-two input size ({input_size} bytes)",
            NonPowerOfTwoSizeWarning, stacklevel=2,
        )
        working = _next_pow2(working)
        padded_pow2 = True

    if working % bpw:
        warnings.warn(
            f"input size is not a multiple of {bpw} bytes",
            UnalignedSizeWarning, stacklevel=2,
        )
        working += bpw - working % bpw
        padded_align = True

    addr_bit_count = (working // bpw).bit_length() - 1
    if not 1 <= addr_bit_count <= MAX_ADDR_BITS:
        raise InvalidAddressWidthError(addr_bit_count)

    geometry = Geometry(
        input_size=input_size,
        working_size=working,
        bytes_per_word=bpw,
        addr_bit_count=addr_bit_count,
        data_bit_count=8 * bpw,
        padded_pow2=padded_pow2,
        padded_align=padded_align,
    )
    logger.debug("geometry: %s", geometry)
    return geometry


def build_tables(config: SwizzleConfig, geometry: Geometry) -> tuple[Table | None, Table | None]:
    """Parse the address and data specs of *config* against *geometry*.

    An axis without a spec yields ``None`` (no reordering).
    """
    addr_table = data_table = None
    if config.addr_bits is not None:
        addr_table = parse_bits(
            config.addr_bits, geometry.addr_bit_count, Axis.ADDRESS, strict=config.strict,
        )
    if config.data_bits is not None:
        data_table = parse_bits(
            config.data_bits, geometry.data_bit_count, Axis.DATA, strict=config.strict,
        )

    if config.invert:
        addr_table = invert_table(addr_table) if addr_table is not None else None
        data_table = invert_table(data_table) if data_table is not None else None

    for axis, table in ((Axis.ADDRESS, addr_table), (Axis.DATA, data_table)):
        if table is not None:
            logger.debug("applying %s order %s", axis.value, format_bits(table))
    return addr_table, data_table


# ---------------------------------------------------------------------------
# Transform
# ---------------------------------------------------------------------------

def allocate_buffer(size: int) -> np.ndarray:
    """Return a zero-filled ``uint8`` buffer of *size* bytes."""
    try:
        return np.zeros(size, dtype=np.uint8)
    except MemoryError as exc:
        raise AllocationError(f"unable to allocate {size} bytes") from exc


def transform(
    in_buf: np.ndarray,
    geometry: Geometry,
    addr_table: Table | None = None,
    data_table: Table | None = None,
    big_endian: bool = False,
) -> np.ndarray:
    """Swizzle *in_buf* into a new output buffer.

    Each word moves to the slot given by gathering its index through
    *addr_table* and has its value gathered through *data_table*.  When two
    source words land on the same slot the later one wins.
    """
    bpw = geometry.bytes_per_word
    words = words_from_bytes(in_buf, bpw, big_endian)
    if data_table is not None:
        words = permute_words(words, data_table)

    if addr_table is None:
        out_words = words
    else:
        dest = permute_words(np.arange(geometry.word_count, dtype=np.uint64), addr_table)
        _, first_in_reversed = np.unique(dest[::-1], return_index=True)
        src = words.size - 1 - first_in_reversed
        out_words = np.zeros_like(words)
        out_words[dest[src]] = words[src]

    out_buf = allocate_buffer(geometry.working_size)
    out_buf[:] = words_to_bytes(out_words, bpw, big_endian)
    return out_buf


def swizzle_bytes(data: bytes, config: SwizzleConfig) -> SwizzleResult:
    """Swizzle an in-memory image."""
    geometry = compute_geometry(len(data), config)
    addr_table, data_table = build_tables(config, geometry)

    in_buf = allocate_buffer(geometry.working_size)
    in_buf[:len(data)] = np.frombuffer(data, dtype=np.uint8)
    out_buf = transform(in_buf, geometry, addr_table, data_table, config.big_endian)
    return SwizzleResult(out_buf.tobytes(), geometry, addr_table, data_table)


# ---------------------------------------------------------------------------
# File I/O
# ---------------------------------------------------------------------------

def swizzle_file(
    in_path: str | Path, out_path: str | Path, config: SwizzleConfig,
) -> SwizzleResult:
    """Swizzle the image at *in_path* and write the result to *out_path*.

    Raises:
        ImageIOError: The input cannot be opened, measured or fully read, or
            the output cannot be fully written.
    """
    in_path, out_path = Path(in_path), Path(out_path)

    try:
        fh = open(in_path, "rb")
    except OSError as exc:
        raise ImageIOError(f"unable to open {in_path} for reading: {exc}") from exc

    with fh:
        try:
            input_size = fh.seek(0, os.SEEK_END)
            fh.seek(0)
        except OSError as exc:
            raise ImageIOError(f"error getting size of {in_path}: {exc}") from exc

        geometry = compute_geometry(input_size, config)
        addr_table, data_table = build_tables(config, geometry)
        in_buf = allocate_buffer(geometry.working_size)

        try:
            n_read = fh.readinto(memoryview(in_buf)[:input_size])
        except OSError as exc:
            raise ImageIOError(f"unable to read {input_size} bytes from {in_path}: {exc}") from exc
        if n_read != input_size:
            raise ImageIOError(
                f"unable to read {input_size} bytes from {in_path} (got {n_read})"
            )

    out_buf = transform(in_buf, geometry, addr_table, data_table, config.big_endian)
    try:
        with open(out_path, "wb") as out:
            n_written = out.write(memoryview(out_buf))
    except OSError as exc:
        raise ImageIOError(f"unable to write {out_path}: {exc}") from exc
    if n_written != geometry.working_size:
        raise ImageIOError(
            f"unable to write {geometry.working_size} bytes to {out_path} (wrote {n_written})"
        )

    logger.info(
        "wrote %d bytes to %s (%d address bits, %d data bits)",
        geometry.working_size, out_path, geometry.addr_bit_count, geometry.data_bit_count,
    )
    return SwizzleResult(out_buf.tobytes(), geometry, addr_table, data_table)
