"""Golay(23,12) Forward Error Correction codec.

The binary Golay code G(23,12) encodes 12 data bits into a 23-bit
systematic codeword and can:
- Correct up to 3 bit errors
- Detect that a word is not a codeword (nonzero syndrome)

The code is perfect with minimum distance 7: the radius-3 spheres around
the 4096 codewords exactly tile the 2^23 received words, so every nonzero
syndrome maps to exactly one error pattern of weight 1-3.

The code structure:
- 12 data bits (d0-d11), MSB first
- 11 parity bits (p0-p10)
- Parity rows are x^(22-j) mod g(x) with g(x) = x^11+x^10+x^6+x^5+x^4+x^2+1

Positions are counted from the MSB: position p is integer bit 22 - p.
Positions 0-11 hold data bits, 12-22 parity bits.

A received word that lies 4 or more bit flips from the transmitted
codeword decodes to some other codeword (or passes as valid when it lands
on one). That is a limit of the code, not a decoder fault.
"""

from __future__ import annotations

import itertools
import logging
import threading
from collections.abc import Iterator
from dataclasses import dataclass
from typing import Literal

import numpy as np
from golaycodec.errors import GolayMatrixError, InvalidWidthError, UncorrectableError
from golaycodec.typing import NDArrayInt
from golaycodec.utils.packing import check_width, int_to_bits

logger = logging.getLogger(__name__)

DATA_BITS = 12
PARITY_BITS = 11
CODEWORD_BITS = DATA_BITS + PARITY_BITS
MAX_CORRECTABLE = 3

PARITY_MASK = (1 << PARITY_BITS) - 1

DecodeStrategy = Literal["table", "search"]
STRATEGIES: tuple[str, ...] = ("table", "search")


# Golay(23,12) generator matrix (parity portion)
# Each row is the parity contribution of a single data bit
GOLAY_23_12_GENERATOR = np.array(
    [
        [1, 1, 0, 0, 0, 1, 1, 1, 0, 1, 0],  # d0
        [0, 1, 1, 0, 0, 0, 1, 1, 1, 0, 1],  # d1
        [1, 1, 1, 1, 0, 1, 1, 0, 1, 0, 0],  # d2
        [0, 1, 1, 1, 1, 0, 1, 1, 0, 1, 0],  # d3
        [0, 0, 1, 1, 1, 1, 0, 1, 1, 0, 1],  # d4
        [1, 1, 0, 1, 1, 0, 0, 1, 1, 0, 0],  # d5
        [0, 1, 1, 0, 1, 1, 0, 0, 1, 1, 0],  # d6
        [0, 0, 1, 1, 0, 1, 1, 0, 0, 1, 1],  # d7
        [1, 1, 0, 1, 1, 1, 0, 0, 0, 1, 1],  # d8
        [1, 0, 1, 0, 1, 0, 0, 1, 0, 1, 1],  # d9
        [1, 0, 0, 1, 0, 0, 1, 1, 1, 1, 1],  # d10
        [1, 0, 0, 0, 1, 1, 1, 0, 1, 0, 1],  # d11
    ],
    dtype=np.uint8,
)
GOLAY_23_12_GENERATOR.setflags(write=False)

# Parity check matrix H = [G ; I_11] (23x11)
GOLAY_23_12_PARITY_CHECK = np.vstack(
    [GOLAY_23_12_GENERATOR, np.eye(PARITY_BITS, dtype=np.uint8)]
)
GOLAY_23_12_PARITY_CHECK.setflags(write=False)

# Same rows as 11-bit integers, column 0 in the MSB
GOLAY_23_12_GENERATOR_ROWS: tuple[int, ...] = (
    0x63A,
    0x31D,
    0x7B4,
    0x3DA,
    0x1ED,
    0x6CC,
    0x366,
    0x1B3,
    0x6E3,
    0x54B,
    0x49F,
    0x475,
)
GOLAY_23_12_PARITY_CHECK_ROWS: tuple[int, ...] = GOLAY_23_12_GENERATOR_ROWS + tuple(
    1 << (PARITY_BITS - 1 - i) for i in range(PARITY_BITS)
)

_GENERATOR_INT = GOLAY_23_12_GENERATOR.astype(np.int64)
_DATA_SHIFTS = np.arange(DATA_BITS - 1, -1, -1, dtype=np.int64)
_PARITY_WEIGHTS = np.left_shift(1, np.arange(PARITY_BITS - 1, -1, -1, dtype=np.int64))


def _row_value(row: NDArrayInt) -> int:
    value = 0
    for bit in row:
        value = (value << 1) | int(bit)
    return value


def verify_matrices() -> None:
    """Check the generator and parity-check tables against each other.

    Raises:
        GolayMatrixError: if H's first 12 rows differ from G, its last 11
            rows are not the identity, or the integer rows disagree with
            the bit matrices.
    """
    h = GOLAY_23_12_PARITY_CHECK
    if h.shape != (CODEWORD_BITS, PARITY_BITS):
        raise GolayMatrixError(f"parity check matrix has shape {h.shape}")
    if not np.array_equal(h[:DATA_BITS], GOLAY_23_12_GENERATOR):
        raise GolayMatrixError("parity check rows 0-11 must equal the generator")
    for i in range(PARITY_BITS):
        expected = np.zeros(PARITY_BITS, dtype=np.uint8)
        expected[i] = 1
        if not np.array_equal(h[DATA_BITS + i], expected):
            raise GolayMatrixError(f"parity check row {DATA_BITS + i} is not e_{i}")
    for pos, row in enumerate(h):
        if _row_value(row) != GOLAY_23_12_PARITY_CHECK_ROWS[pos]:
            raise GolayMatrixError(f"integer row {pos} disagrees with matrix")


verify_matrices()


def _check_strategy(strategy: str) -> None:
    if strategy not in STRATEGIES:
        raise ValueError(f"unknown decode strategy {strategy!r} (expected one of {STRATEGIES})")


def _pattern_mask(positions: tuple[int, ...]) -> int:
    mask = 0
    for pos in positions:
        mask |= 1 << (CODEWORD_BITS - 1 - pos)
    return mask


def _pattern_syndrome(positions: tuple[int, ...]) -> int:
    syndrome = 0
    for pos in positions:
        syndrome ^= GOLAY_23_12_PARITY_CHECK_ROWS[pos]
    return syndrome


def golay_encode(data: int) -> int:
    """Encode 12 bits of data using Golay(23,12).

    Args:
        data: 12-bit data value (0-4095)

    Returns:
        23-bit codeword with data in upper 12 bits, parity in lower 11

    Raises:
        InvalidWidthError: if data has bits set above bit 11 or is negative
    """
    data = check_width("data", data, DATA_BITS)

    # -bit is all ones or zero, so every row is visited without branching
    parity = 0
    for row, bit in zip(GOLAY_23_12_GENERATOR_ROWS, int_to_bits(data, DATA_BITS)):
        parity ^= row & -bit

    return (data << PARITY_BITS) | parity


def golay_syndrome(received: int) -> int:
    """Calculate syndrome for a received Golay(23,12) word.

    Zero syndrome means the word is a codeword (no errors, or an
    undetectable pattern of 7+ errors).

    Args:
        received: 23-bit received word

    Returns:
        11-bit syndrome
    """
    received = check_width("received word", received, CODEWORD_BITS)

    syndrome = 0
    for row, bit in zip(GOLAY_23_12_PARITY_CHECK_ROWS, int_to_bits(received, CODEWORD_BITS)):
        syndrome ^= row & -bit
    return syndrome


def iter_error_patterns() -> Iterator[tuple[int, ...]]:
    """Yield all error patterns of weight 1-3 in search order.

    Weight 1 first, then pairs, then triples; each weight in
    lexicographic order of positions.
    """
    for weight in range(1, MAX_CORRECTABLE + 1):
        yield from itertools.combinations(range(CODEWORD_BITS), weight)


def search_error_pattern(syndrome: int) -> tuple[int, ...] | None:
    """Brute-force search for the error pattern matching a syndrome.

    Examines at most 23 + 253 + 1771 = 2047 candidates.

    Args:
        syndrome: 11-bit nonzero syndrome

    Returns:
        Ascending tuple of flipped positions, or None if no pattern of
        weight <= 3 matches
    """
    syndrome = check_width("syndrome", syndrome, PARITY_BITS)
    for positions in iter_error_patterns():
        if _pattern_syndrome(positions) == syndrome:
            return positions
    return None


@dataclass(frozen=True)
class SyndromeTable:
    """Syndrome -> error pattern lookup, indexed by 11-bit syndrome.

    ``weights[s]`` is -1 when no pattern of weight <= 3 produces ``s``.
    """

    masks: tuple[int, ...]
    weights: tuple[int, ...]
    mask_array: NDArrayInt
    weight_array: NDArrayInt

    @property
    def correctable(self) -> int:
        return sum(1 for w in self.weights if w > 0)


def _build_syndrome_table() -> SyndromeTable:
    size = 1 << PARITY_BITS
    masks = [0] * size
    weights = [-1] * size
    weights[0] = 0
    for positions in iter_error_patterns():
        syndrome = _pattern_syndrome(positions)
        # First pattern in search order wins, same as search_error_pattern()
        if weights[syndrome] < 0:
            masks[syndrome] = _pattern_mask(positions)
            weights[syndrome] = len(positions)

    mask_array = np.array(masks, dtype=np.int64)
    weight_array = np.array(weights, dtype=np.int64)
    mask_array.setflags(write=False)
    weight_array.setflags(write=False)

    table = SyndromeTable(
        masks=tuple(masks),
        weights=tuple(weights),
        mask_array=mask_array,
        weight_array=weight_array,
    )
    logger.debug(
        "Built Golay(23,12) syndrome table: %d/%d nonzero syndromes correctable",
        table.correctable,
        size - 1,
    )
    return table


_syndrome_table: SyndromeTable | None = None
_syndrome_table_lock = threading.Lock()


def get_syndrome_table() -> SyndromeTable:
    """Get the shared syndrome table, building it on first use."""
    global _syndrome_table
    table = _syndrome_table
    if table is None:
        with _syndrome_table_lock:
            if _syndrome_table is None:
                _syndrome_table = _build_syndrome_table()
            table = _syndrome_table
    return table


def golay_correct(received: int, strategy: DecodeStrategy = "table") -> tuple[int, int]:
    """Correct up to 3 bit errors in a received Golay(23,12) word.

    Args:
        received: 23-bit received word
        strategy: "table" for the precomputed syndrome table, "search" for
            the brute-force pattern search. Both give identical results.

    Returns:
        Tuple of (corrected_codeword, bits_flipped)

    Raises:
        UncorrectableError: no error pattern of weight <= 3 matches the
            syndrome. The received word is left untouched.
    """
    _check_strategy(strategy)
    received = check_width("received word", received, CODEWORD_BITS)
    syndrome = golay_syndrome(received)
    if syndrome == 0:
        return received, 0

    if strategy == "table":
        table = get_syndrome_table()
        weight = table.weights[syndrome]
        if weight < 0:
            raise UncorrectableError(received, syndrome)
        return received ^ table.masks[syndrome], weight

    positions = search_error_pattern(syndrome)
    if positions is None:
        raise UncorrectableError(received, syndrome)
    return received ^ _pattern_mask(positions), len(positions)


@dataclass(frozen=True)
class GolayDecodeResult:
    """Outcome of decoding one received word."""

    data: int
    corrected: bool
    bits_flipped: int
    uncorrectable: bool
    codeword: int


def golay_decode(
    received: int,
    strategy: DecodeStrategy = "table",
    warn_uncorrectable: bool = True,
) -> GolayDecodeResult:
    """Decode a Golay(23,12) word with error correction.

    The data is taken from the upper 12 bits of the corrected codeword.
    When the word is uncorrectable the received word is used unchanged
    and the result is flagged.

    Args:
        received: 23-bit received word
        strategy: "table" or "search", see golay_correct()
        warn_uncorrectable: log a WARNING for an uncorrectable word; callers
            that report failures themselves pass False

    Returns:
        GolayDecodeResult
    """
    received = check_width("received word", received, CODEWORD_BITS)
    try:
        codeword, bits_flipped = golay_correct(received, strategy)
    except UncorrectableError as exc:
        if warn_uncorrectable:
            logger.warning(f"Golay decode: uncorrectable error, syndrome={exc.syndrome:03x}")
        else:
            logger.debug(f"Golay decode: uncorrectable error, syndrome={exc.syndrome:03x}")
        return GolayDecodeResult(
            data=received >> PARITY_BITS,
            corrected=False,
            bits_flipped=0,
            uncorrectable=True,
            codeword=received,
        )

    return GolayDecodeResult(
        data=codeword >> PARITY_BITS,
        corrected=bits_flipped > 0,
        bits_flipped=bits_flipped,
        uncorrectable=False,
        codeword=codeword,
    )


def _as_checked_array(name: str, values: NDArrayInt | list[int], width: int) -> NDArrayInt:
    arr = np.asarray(values)
    if arr.size == 0:
        return np.zeros(arr.shape, dtype=np.int64)
    if not np.issubdtype(arr.dtype, np.integer):
        raise TypeError(f"{name} must be an integer array (got {arr.dtype})")
    low = int(arr.min())
    high = int(arr.max())
    if low < 0:
        raise InvalidWidthError(name, low, width)
    if high >> width:
        raise InvalidWidthError(name, high, width)
    return arr.astype(np.int64)


def golay_encode_array(data: NDArrayInt | list[int]) -> NDArrayInt:
    """Encode an array of 12-bit data words.

    Args:
        data: integer array of data words (0-4095), any shape

    Returns:
        int64 array of 23-bit codewords with the same shape
    """
    words = _as_checked_array("data", data, DATA_BITS)
    flat = words.reshape(-1)

    data_bits = (flat[:, None] >> _DATA_SHIFTS) & 1
    parity_bits = np.mod(np.dot(data_bits, _GENERATOR_INT), 2)
    parity = parity_bits @ _PARITY_WEIGHTS

    return ((flat << PARITY_BITS) | parity).reshape(words.shape)


# Parity of every data word. Syndrome = parity(data) ^ received parity because H = [G ; I]
_PARITY_LOOKUP = golay_encode_array(np.arange(1 << DATA_BITS)) & PARITY_MASK
_PARITY_LOOKUP.setflags(write=False)


def golay_syndrome_array(received: NDArrayInt | list[int]) -> NDArrayInt:
    """Calculate syndromes for an array of 23-bit received words."""
    words = _as_checked_array("received word", received, CODEWORD_BITS)
    return _PARITY_LOOKUP[words >> PARITY_BITS] ^ (words & PARITY_MASK)


def golay_decode_array(received: NDArrayInt | list[int]) -> tuple[NDArrayInt, NDArrayInt]:
    """Decode an array of received words using the syndrome table.

    Args:
        received: integer array of 23-bit received words, any shape

    Returns:
        Tuple of (data, bits_flipped) int64 arrays with the input's shape.
        bits_flipped is -1 where the word is uncorrectable; data there is
        the upper 12 bits of the received word. Reporting those words is
        left to the caller.
    """
    words = _as_checked_array("received word", received, CODEWORD_BITS)
    syndromes = golay_syndrome_array(words)

    table = get_syndrome_table()
    bits_flipped = table.weight_array[syndromes]
    corrected = words ^ table.mask_array[syndromes]

    uncorrectable = int(np.count_nonzero(bits_flipped < 0))
    if uncorrectable:
        logger.debug(f"Golay decode: {uncorrectable} uncorrectable word(s)")

    return corrected >> PARITY_BITS, bits_flipped
