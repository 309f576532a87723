"""Binary Golay(23,12) error-correcting codec."""

from golaycodec.errors import (
    GolayError,
    GolayMatrixError,
    InvalidWidthError,
    UncorrectableError,
)
from golaycodec.fec.golay import (
    GolayDecodeResult,
    golay_correct,
    golay_decode,
    golay_encode,
    golay_syndrome,
)
from golaycodec.stream import GolayDecoder, GolayEncoder, decode_words, encode_words

__all__ = [
    "__version__",
    "GolayDecodeResult",
    "GolayDecoder",
    "GolayEncoder",
    "GolayError",
    "GolayMatrixError",
    "InvalidWidthError",
    "UncorrectableError",
    "decode_words",
    "encode_words",
    "golay_correct",
    "golay_decode",
    "golay_encode",
    "golay_syndrome",
]

__version__ = "0.1.0"
