"""Data classes, warnings and exceptions for the swizzle package."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

MIN_BYTES_PER_WORD = 1
MAX_BYTES_PER_WORD = 4
MAX_ADDR_BITS = 32


class Axis(str, Enum):
    """Which side of the ROM a permutation table applies to."""

    ADDRESS = "address"
    DATA = "data"


# ---------------------------------------------------------------------------
# Configuration data classes
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class SwizzleConfig:
    """Options for one swizzle run.

    ``addr_bits`` / ``data_bits`` are raw bit specs (``"0,1,2,3"``, most
    significant first).  ``None`` means no reordering on that axis.
    """

    addr_bits: str | None = None
    data_bits: str | None = None
    bytes_per_word: int = 1
    big_endian: bool = False
    strict: bool = False
    invert: bool = False

    def validate(self) -> None:
        """Raise :class:`InvalidWordSizeError` for an unsupported word size."""
        bpw = self.bytes_per_word
        if (
            isinstance(bpw, bool)
            or not isinstance(bpw, int)
            or not MIN_BYTES_PER_WORD <= bpw <= MAX_BYTES_PER_WORD
        ):
            raise InvalidWordSizeError(bpw)


# ---------------------------------------------------------------------------
# Result data classes
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Geometry:
    """Image layout derived from the input size and the configuration."""

    input_size: int
    working_size: int
    bytes_per_word: int
    addr_bit_count: int
    data_bit_count: int
    padded_pow2: bool = False
    padded_align: bool = False

    @property
    def word_count(self) -> int:
        return self.working_size // self.bytes_per_word

    @property
    def padding(self) -> int:
        return self.working_size - self.input_size


@dataclass
class SwizzleResult:
    """Output of one swizzle run."""

    data: bytes
    geometry: Geometry
    addr_table: tuple[int, ...] | None = None
    data_table: tuple[int, ...] | None = None


# ---------------------------------------------------------------------------
# Warnings
# ---------------------------------------------------------------------------

class SwizzleWarning(UserWarning):
    """Base class for non-fatal swizzle advisories."""


class DuplicateIndexWarning(SwizzleWarning):
    """A bit index appears more than once in a bit spec."""


class NonPowerOfTwoSizeWarning(SwizzleWarning):
    """The image was padded to a power of two for address swizzling."""


class UnalignedSizeWarning(SwizzleWarning):
    """The image was padded to a whole number of words."""


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------

class SwizzleError(Exception):
    """Base exception for swizzle operations."""


class SwizzleConfigError(SwizzleError):
    """Raised when the configuration or an option file is invalid."""


class InvalidWordSizeError(SwizzleConfigError, ValueError):
    """Raised when bytes per word is outside 1-4."""

    def __init__(self, bytes_per_word: object) -> None:
        self.bytes_per_word = bytes_per_word
        super().__init__(
            f"bytes per word must be between {MIN_BYTES_PER_WORD}-{MAX_BYTES_PER_WORD}, "
            f"got {bytes_per_word!r}"
        )


class BitSpecError(SwizzleError, ValueError):
    """Base exception for malformed bit specs."""


class InvalidBitSpecError(BitSpecError):
    """Raised when a bit spec token is not an integer."""


class OutOfRangeIndexError(BitSpecError):
    """Raised when a bit index falls outside ``[0, count)``."""

    def __init__(self, index: int, axis: Axis | str, count: int) -> None:
        self.index = index
        self.axis = Axis(axis)
        self.count = count
        super().__init__(
            f"invalid {self.axis.value} bit index {index} "
            f"(must be between 0 and {count - 1})"
        )


class TokenCountMismatchError(BitSpecError):
    """Raised when a bit spec does not list exactly one index per bit."""

    def __init__(self, axis: Axis | str, expected: int, found: int) -> None:
        self.axis = Axis(axis)
        self.expected = expected
        self.found = found
        super().__init__(
            f"expected {expected} {self.axis.value} bits, but {found} were specified"
        )


class NonBijectiveTableError(BitSpecError):
    """Raised when a table must be a permutation but repeats an index."""


class InvalidAddressWidthError(SwizzleError, ValueError):
    """Raised when the derived address bus width is outside 1-32 bits."""

    def __init__(self, addr_bit_count: int) -> None:
        self.addr_bit_count = addr_bit_count
        super().__init__(
            f"address bus width must be between 1 and {MAX_ADDR_BITS} bits, "
            f"got {addr_bit_count}"
        )


class ImageIOError(SwizzleError):
    """Raised when the image cannot be opened, measured, read or written."""


class AllocationError(SwizzleError, MemoryError):
    """Raised when an image buffer cannot be allocated."""
