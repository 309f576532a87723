"""Forward Error Correction (FEC) module.

Provides the binary Golay(23,12) codec:
- 12 data bits -> 23-bit systematic codeword (11 parity bits)
- Corrects up to 3 bit errors per codeword (perfect code, distance 7)

Decoding uses a syndrome lookup table built on first use; the
brute-force error-pattern search is kept as the reference strategy.
"""

from golaycodec.fec.golay import (
    CODEWORD_BITS,
    DATA_BITS,
    GOLAY_23_12_GENERATOR,
    GOLAY_23_12_PARITY_CHECK,
    PARITY_BITS,
    GolayDecodeResult,
    golay_correct,
    golay_decode,
    golay_decode_array,
    golay_encode,
    golay_encode_array,
    golay_syndrome,
    golay_syndrome_array,
    search_error_pattern,
    verify_matrices,
)

__all__ = [
    "CODEWORD_BITS",
    "DATA_BITS",
    "GOLAY_23_12_GENERATOR",
    "GOLAY_23_12_PARITY_CHECK",
    "GolayDecodeResult",
    "PARITY_BITS",
    "golay_correct",
    "golay_decode",
    "golay_decode_array",
    "golay_encode",
    "golay_encode_array",
    "golay_syndrome",
    "golay_syndrome_array",
    "search_error_pattern",
    "verify_matrices",
]
