"""swizzle - reorder address and data bits in a ROM image.

Example::

    from swizzle import SwizzleConfig, swizzle_bytes

    result = swizzle_bytes(rom, SwizzleConfig(data_bits="0,1,2,3,4,5,6,7"))
    result.data  # every byte bit-reversed
"""

__version__ = "1.0.0"

from swizzle.bits import (
    format_bits,
    invert_table,
    is_bijective,
    parse_bits,
    permute_word,
    permute_words,
)
from swizzle.config import load_swizzle_config, merge_config, save_swizzle_config
from swizzle.image import compute_geometry, swizzle_bytes, swizzle_file
from swizzle.types import (
    AllocationError,
    Axis,
    BitSpecError,
    DuplicateIndexWarning,
    Geometry,
    ImageIOError,
    InvalidAddressWidthError,
    InvalidBitSpecError,
    InvalidWordSizeError,
    NonBijectiveTableError,
    NonPowerOfTwoSizeWarning,
    OutOfRangeIndexError,
    SwizzleConfig,
    SwizzleConfigError,
    SwizzleError,
    SwizzleResult,
    SwizzleWarning,
    TokenCountMismatchError,
    UnalignedSizeWarning,
)

__all__ = [
    "__version__",
    "AllocationError",
    "Axis",
    "BitSpecError",
    "DuplicateIndexWarning",
    "Geometry",
    "ImageIOError",
    "InvalidAddressWidthError",
    "InvalidBitSpecError",
    "InvalidWordSizeError",
    "NonBijectiveTableError",
    "NonPowerOfTwoSizeWarning",
    "OutOfRangeIndexError",
    "SwizzleConfig",
    "SwizzleConfigError",
    "SwizzleError",
    "SwizzleResult",
    "SwizzleWarning",
    "TokenCountMismatchError",
    "UnalignedSizeWarning",
    "compute_geometry",
    "format_bits",
    "invert_table",
    "is_bijective",
    "load_swizzle_config",
    "merge_config",
    "parse_bits",
    "permute_word",
    "permute_words",
    "save_swizzle_config",
    "swizzle_bytes",
    "swizzle_file",
]
