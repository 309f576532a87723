"""Utility modules for golaycodec."""

from golaycodec.utils.packing import (
    CONTAINER_WIDTHS,
    bits_to_words,
    check_container_width,
    check_width,
    chunk_bits,
    int_to_bits,
    pad_bits,
    values_to_bits,
    words_to_bits,
)

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
