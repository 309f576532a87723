"""Golay(23,12) stream framing.

Splits an MSB-first bit stream into 12-bit data words, encodes each into a
23-bit codeword and repacks the codewords MSB-first into byte or word
containers. The decoder runs the reverse: it extracts 23-bit codewords
(dropping a trailing partial codeword), corrects and decodes them, and
serves the 12-bit data words back as bits or packed containers.

Each write call is framed on its own: a write whose bit count is not a
multiple of 12 has its last chunk zero-padded.

Example:
    >>> encode_words([0xFF, 0xF0], 8, 32)
    [4294966784, 0]
    >>> [hex(w) for w in decode_words([0xFFFFFE00, 0], 32, 16)]
    ['0xfff0', '0x0']
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Literal, Sequence

import numpy as np

from golaycodec.errors import UncorrectableError
from golaycodec.fec.golay import (
    CODEWORD_BITS,
    DATA_BITS,
    STRATEGIES,
    DecodeStrategy,
    golay_decode,
    golay_decode_array,
    golay_encode_array,
    golay_syndrome,
)
from golaycodec.typing import NDArrayAny, NDArrayInt
from golaycodec.utils.packing import (
    bits_to_words,
    check_width,
    chunk_bits,
    values_to_bits,
    words_to_bits,
)

logger = logging.getLogger(__name__)

UncorrectablePolicy = Literal["warn", "ignore", "raise"]
UNCORRECTABLE_POLICIES: tuple[str, ...] = ("warn", "ignore", "raise")


class GolayEncoder:
    """Encodes bit streams into Golay(23,12) codewords."""

    def __init__(self) -> None:
        self._blocks: list[int] = []

    def _encode_bits(self, bits: NDArrayAny) -> None:
        if len(bits) == 0:
            return
        codewords = golay_encode_array(chunk_bits(bits, DATA_BITS))
        self._blocks.extend(int(cw) for cw in codewords)

    def write_bytes(self, bits: int, data: bytes | bytearray) -> None:
        """Encode the first `bits` bits of a byte string."""
        self._encode_bits(words_to_bits(data, 8, bits))

    def write_words(self, bits: int, words: Iterable[int], width: int) -> None:
        """Encode the first `bits` bits of MSB-first container words.

        Example:
            enc.write_words(112, [0x123456789ABCDEF0, 0xFEDCBA9876543210], 64)
            # 112 bits -> 10 codewords (8 bits of padding)
        """
        self._encode_bits(words_to_bits(words, width, bits))

    def write_bools(self, bits: Sequence[bool]) -> None:
        """Encode one bit per boolean."""
        self._encode_bits(np.asarray(bits, dtype=bool).astype(np.uint8))

    def codewords(self) -> list[int]:
        """Encoded codewords, one 23-bit value each."""
        return list(self._blocks)

    def _codeword_bits(self) -> NDArrayAny:
        return values_to_bits(self._blocks, CODEWORD_BITS)

    def to_bytes(self) -> bytes:
        """Codewords packed MSB-first without gaps, last byte zero-padded."""
        return bytes(bits_to_words(self._codeword_bits(), 8))

    def to_words(self, width: int) -> list[int]:
        """Codewords packed MSB-first into width-bit words, last word zero-padded."""
        return bits_to_words(self._codeword_bits(), width)

    def to_bools(self) -> list[bool]:
        return [bool(b) for b in self._codeword_bits()]

    @property
    def bits(self) -> int:
        """Total number of encoded bits."""
        return len(self._blocks) * CODEWORD_BITS

    def reset(self) -> None:
        self._blocks.clear()


@dataclass
class DecodeStats:
    blocks: int = 0
    corrected_blocks: int = 0
    corrected_bits: int = 0
    uncorrectable_blocks: int = 0


class GolayDecoder:
    """Decodes Golay(23,12) codewords with error correction.

    Args:
        strategy: "table" or "search" (see golay_correct)
        on_uncorrectable: "warn" logs and keeps best-effort data, "ignore"
            only counts, "raise" raises UncorrectableError and stops at the
            failing block
    """

    def __init__(
        self,
        strategy: DecodeStrategy = "table",
        on_uncorrectable: UncorrectablePolicy = "warn",
    ) -> None:
        if strategy not in STRATEGIES:
            raise ValueError(f"strategy must be one of {STRATEGIES} (got {strategy!r})")
        if on_uncorrectable not in UNCORRECTABLE_POLICIES:
            raise ValueError(
                f"on_uncorrectable must be one of {UNCORRECTABLE_POLICIES} (got {on_uncorrectable!r})"
            )
        self.strategy = strategy
        self.on_uncorrectable = on_uncorrectable
        self.stats = DecodeStats()
        self._decoded: list[int] = []
        self._pos = 0

    def _record(self, codeword: int, data: int, bits_flipped: int) -> None:
        if bits_flipped < 0:
            if self.on_uncorrectable == "raise":
                raise UncorrectableError(codeword, golay_syndrome(codeword))
            if self.on_uncorrectable == "warn":
                logger.warning(
                    f"Golay stream: uncorrectable block {self.stats.blocks} ({codeword:06x})"
                )
            self.stats.uncorrectable_blocks += 1
        elif bits_flipped > 0:
            self.stats.corrected_blocks += 1
            self.stats.corrected_bits += bits_flipped
        self.stats.blocks += 1
        self._decoded.append(data)

    def _decode_codewords(self, codewords: NDArrayInt) -> None:
        if self.strategy == "table":
            data, flipped = golay_decode_array(codewords)
            for cw, d, f in zip(codewords, data, flipped):
                self._record(int(cw), int(d), int(f))
            return

        for cw in codewords:
            result = golay_decode(int(cw), self.strategy, warn_uncorrectable=False)
            flipped = -1 if result.uncorrectable else result.bits_flipped
            self._record(int(cw), result.data, flipped)

    def _decode_bits(self, bits: NDArrayAny) -> None:
        usable = len(bits) - len(bits) % CODEWORD_BITS
        if usable != len(bits):
            logger.debug(f"Golay stream: dropping {len(bits) - usable} trailing bit(s)")
        self._decode_codewords(chunk_bits(bits[:usable], CODEWORD_BITS))

    def write_codewords(self, *codewords: int) -> None:
        """Decode 23-bit codewords."""
        checked = [check_width("codeword", cw, CODEWORD_BITS) for cw in codewords]
        self._decode_codewords(np.array(checked, dtype=np.int64))

    def write_bytes(self, bits: int, data: bytes | bytearray) -> None:
        """Decode the first `bits` bits of MSB-aligned bytes (as from GolayEncoder.to_bytes)."""
        self._decode_bits(words_to_bits(data, 8, bits))

    def write_words(self, bits: int, words: Iterable[int], width: int) -> None:
        """Decode the first `bits` bits of MSB-aligned container words."""
        self._decode_bits(words_to_bits(words, width, bits))

    def write_bools(self, bits: Sequence[bool]) -> None:
        self._decode_bits(np.asarray(bits, dtype=bool).astype(np.uint8))

    def _read_bits(self, bits: int) -> NDArrayAny:
        if bits < 0:
            raise ValueError("bits must be non-negative")
        if bits > self.remaining:
            raise ValueError(f"cannot read {bits} bits ({self.remaining} remaining)")
        start = self._pos
        self._pos += bits
        # Expand only the data words covering [start, start + bits)
        first = start // DATA_BITS
        last = -(-(start + bits) // DATA_BITS)
        offset = start - first * DATA_BITS
        return values_to_bits(self._decoded[first:last], DATA_BITS)[offset : offset + bits]

    def read_bools(self, bits: int) -> list[bool]:
        """Read the next `bits` decoded bits."""
        return [bool(b) for b in self._read_bits(bits)]

    def read_words(self, bits: int, width: int) -> list[int]:
        """Read the next `bits` decoded bits packed MSB-first into width-bit words."""
        return bits_to_words(self._read_bits(bits), width)

    def read_all(self) -> list[int]:
        """All decoded 12-bit data words."""
        return list(self._decoded)

    @property
    def bits(self) -> int:
        """Total number of decoded bits."""
        return len(self._decoded) * DATA_BITS

    @property
    def remaining(self) -> int:
        """Number of unread bits."""
        return self.bits - self._pos

    def reset(self) -> None:
        self._decoded.clear()
        self._pos = 0
        self.stats = DecodeStats()


def encode_words(
    words: Sequence[int],
    width: int,
    out_width: int,
    bits: int | None = None,
) -> list[int]:
    """Encode container words and repack the codewords into out_width words."""
    encoder = GolayEncoder()
    encoder.write_words(len(words) * width if bits is None else bits, words, width)
    return encoder.to_words(out_width)


def decode_words(
    words: Sequence[int],
    width: int,
    out_width: int,
    bits: int | None = None,
    on_uncorrectable: UncorrectablePolicy = "warn",
) -> list[int]:
    """Decode container words holding packed codewords into out_width words."""
    decoder = GolayDecoder(on_uncorrectable=on_uncorrectable)
    decoder.write_words(len(words) * width if bits is None else bits, words, width)
    return decoder.read_words(decoder.bits, out_width)


__all__ = [
    "DecodeStats",
    "GolayDecoder",
    "GolayEncoder",
    "UNCORRECTABLE_POLICIES",
    "decode_words",
    "encode_words",
]
