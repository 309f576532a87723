"""Exceptions raised by the Golay codec and its framing layer."""

from __future__ import annotations


class GolayError(ValueError):
    """Base class for Golay codec errors."""


class InvalidWidthError(GolayError):
    """A value does not fit the bit width the codec expects."""

    def __init__(self, name: str, value: int, width: int) -> None:
        super().__init__(f"{name} {value:#x} does not fit in {width} bits")
        self.value = value
        self.width = width


class UncorrectableError(GolayError):
    """No error pattern of weight <= 3 reproduces the syndrome."""

    def __init__(self, received: int, syndrome: int) -> None:
        super().__init__(
            f"uncorrectable Golay word {received:06x} (syndrome={syndrome:03x})"
        )
        self.received = received
        self.syndrome = syndrome


class GolayMatrixError(GolayError):
    """Generator and parity-check tables disagree."""


__all__ = [
    "GolayError",
    "GolayMatrixError",
    "InvalidWidthError",
    "UncorrectableError",
]
