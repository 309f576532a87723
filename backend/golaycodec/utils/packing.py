from __future__ import annotations

from typing import Iterable, Sequence

import numpy as np

from golaycodec.errors import InvalidWidthError
from golaycodec.typing import NDArrayAny, NDArrayInt

CONTAINER_WIDTHS: tuple[int, ...] = (8, 16, 32, 64)


def check_width(name: str, value: int, width: int) -> int:
    """Return value as an int, rejecting anything outside 0..2^width-1."""
    try:
        int_value = int(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"{name} is not an int-like value") from exc
    if int_value < 0 or int_value >> width:
        raise InvalidWidthError(name, int_value, width)
    return int_value


def check_container_width(width: int) -> int:
    if width not in CONTAINER_WIDTHS:
        raise ValueError(f"container width must be one of {CONTAINER_WIDTHS} (got {width})")
    return width


def int_to_bits(value: int, width: int) -> list[int]:
    """Convert int to big-endian bit list of fixed width."""
    if width <= 0:
        raise ValueError("width must be positive")
    value = check_width("value", value, width)
    return [(value >> (width - 1 - i)) & 1 for i in range(width)]


def pad_bits(bits: NDArrayAny, block_size: int) -> NDArrayAny:
    """Zero-pad a bit array to a multiple of block_size."""
    if block_size <= 0:
        raise ValueError("block_size must be positive")
    remainder = len(bits) % block_size
    if not remainder:
        return bits
    return np.concatenate([bits, np.zeros(block_size - remainder, dtype=bits.dtype)])


def words_to_bits(
    words: Iterable[int] | bytes | bytearray,
    width: int,
    bits: int | None = None,
) -> NDArrayAny:
    """Expand container words into an MSB-first bit array.

    Args:
        words: Container values, each 0..2^width-1 (bytes for width 8)
        width: Container width (8, 16, 32 or 64)
        bits: Number of leading bits to keep (default: all)

    Returns:
        uint8 array of 0/1 values
    """
    check_container_width(width)
    values = [check_width(f"{width}-bit word", w, width) for w in words]
    total = len(values) * width
    if bits is None:
        bits = total
    if bits < 0 or bits > total:
        raise ValueError(f"cannot take {bits} bits from {len(values)} {width}-bit word(s)")

    arr = np.array(values, dtype=np.uint64)
    shifts = np.arange(width - 1, -1, -1, dtype=np.uint64)
    expanded = (arr[:, None] >> shifts) & np.uint64(1)
    return expanded.astype(np.uint8).reshape(-1)[:bits]


def bits_to_words(bits: Sequence[int] | NDArrayAny, width: int) -> list[int]:
    """Pack an MSB-first bit array into container words, zero-padding the tail."""
    check_container_width(width)
    arr = pad_bits(np.asarray(bits, dtype=np.uint8) & 1, width)
    if arr.size == 0:
        return []
    weights = np.left_shift(np.uint64(1), np.arange(width - 1, -1, -1, dtype=np.uint64))
    matrix = arr.reshape(-1, width).astype(np.uint64)
    values = (matrix * weights).sum(axis=1, dtype=np.uint64)
    return [int(v) for v in values]


def chunk_bits(bits: NDArrayAny, size: int) -> NDArrayInt:
    """Split a bit array into MSB-first values of size bits (tail zero-padded)."""
    if size <= 0 or size > 62:
        raise ValueError(f"chunk size must be 1-62 bits (got {size})")
    arr = pad_bits(np.asarray(bits, dtype=np.uint8) & 1, size)
    if arr.size == 0:
        return np.zeros(0, dtype=np.int64)
    weights = np.left_shift(1, np.arange(size - 1, -1, -1, dtype=np.int64))
    return arr.reshape(-1, size).astype(np.int64) @ weights


def values_to_bits(values: NDArrayInt | Sequence[int], size: int) -> NDArrayAny:
    """Expand size-bit values into a contiguous MSB-first bit array."""
    if size <= 0 or size > 62:
        raise ValueError(f"value size must be 1-62 bits (got {size})")
    arr = np.asarray(values, dtype=np.int64).reshape(-1)
    shifts = np.arange(size - 1, -1, -1, dtype=np.int64)
    return ((arr[:, None] >> shifts) & 1).astype(np.uint8).reshape(-1)


__all__ = [
    "CONTAINER_WIDTHS",
    "bits_to_words",
    "check_container_width",
    "check_width",
    "chunk_bits",
    "int_to_bits",
    "pad_bits",
    "values_to_bits",
    "words_to_bits",
]
