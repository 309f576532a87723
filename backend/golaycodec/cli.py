#!/usr/bin/env python3
"""golaycodec Command Line Interface.

Usage:
    python -m golaycodec encode --hex fff0 --bits 12
    python -m golaycodec decode --hex fffffe --bits 23
    python -m golaycodec selftest
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path

import numpy as np

from golaycodec.config import AppConfig, load_config
from golaycodec.errors import UncorrectableError
from golaycodec.fec.golay import (
    DATA_BITS,
    golay_decode_array,
    golay_encode_array,
    verify_matrices,
)
from golaycodec.stream import GolayDecoder, GolayEncoder

logger = logging.getLogger(__name__)


def _default_config_path() -> str:
    """Get default config path relative to module location."""
    module_dir = Path(__file__).resolve().parent
    return str(module_dir.parent / "config" / "golaycodec.yaml")


def _parse_hex(value: str) -> bytes:
    cleaned = value.strip().replace(" ", "").replace("_", "")
    if cleaned.lower().startswith("0x"):
        cleaned = cleaned[2:]
    if len(cleaned) % 2:
        cleaned += "0"
    try:
        return bytes.fromhex(cleaned)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid hex string: {value!r}") from exc


def cmd_encode(args: argparse.Namespace, cfg: AppConfig) -> int:
    """Encode hex input and print the packed codewords."""
    data: bytes = args.hex
    bits = len(data) * 8 if args.bits is None else args.bits

    encoder = GolayEncoder()
    encoder.write_bytes(bits, data)
    logger.info(f"Encoded {bits} bit(s) into {len(encoder.codewords())} codeword(s)")

    words = encoder.to_words(cfg.stream.output_width)
    digits = cfg.stream.output_width // 4
    print("".join(f"{w:0{digits}x}" for w in words))
    print(f"bits={encoder.bits}")
    return 0


def cmd_decode(args: argparse.Namespace, cfg: AppConfig) -> int:
    """Decode hex input holding packed codewords."""
    data: bytes = args.hex
    decoder = GolayDecoder(
        strategy=cfg.codec.strategy,  # type: ignore[arg-type]
        on_uncorrectable=cfg.stream.on_uncorrectable,  # type: ignore[arg-type]
    )
    try:
        decoder.write_bytes(args.bits, data)
    except UncorrectableError as exc:
        logger.error(str(exc))
        return 2

    stats = decoder.stats
    logger.info(
        f"Decoded {stats.blocks} block(s): {stats.corrected_blocks} corrected "
        f"({stats.corrected_bits} bit(s)), {stats.uncorrectable_blocks} uncorrectable"
    )

    words = decoder.read_words(decoder.bits, cfg.stream.output_width)
    digits = cfg.stream.output_width // 4
    print("".join(f"{w:0{digits}x}" for w in words))
    print(
        f"bits={decoder.bits} corrected={stats.corrected_blocks} "
        f"uncorrectable={stats.uncorrectable_blocks}"
    )
    return 0


def cmd_selftest(args: argparse.Namespace, cfg: AppConfig) -> int:
    """Check the matrices and round-trip every data word."""
    verify_matrices()
    data = np.arange(1 << DATA_BITS)
    decoded, flipped = golay_decode_array(golay_encode_array(data))
    if not np.array_equal(decoded, data) or np.any(flipped != 0):
        print("selftest FAILED: round trip mismatch")
        return 1
    print(f"selftest ok: {len(data)} words round-tripped")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="golaycodec",
        description="Golay(23,12) encoder/decoder",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose output")
    parser.add_argument(
        "-c",
        "--config",
        default=os.environ.get("GOLAYCODEC_CONFIG", _default_config_path()),
        help="Path to YAML config file",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    p_encode = subparsers.add_parser("encode", help="Encode hex data into packed codewords")
    p_encode.add_argument("--hex", type=_parse_hex, required=True, help="Input data as hex")
    p_encode.add_argument("--bits", type=int, help="Number of input bits (default: all)")
    p_encode.set_defaults(func=cmd_encode)

    p_decode = subparsers.add_parser("decode", help="Decode hex-packed codewords")
    p_decode.add_argument("--hex", type=_parse_hex, required=True, help="Packed codewords as hex")
    p_decode.add_argument("--bits", type=int, required=True, help="Number of encoded bits")
    p_decode.set_defaults(func=cmd_decode)

    p_selftest = subparsers.add_parser("selftest", help="Verify matrices and round-trip all words")
    p_selftest.set_defaults(func=cmd_selftest)

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    try:
        cfg = load_config(args.config)
    except ValueError as exc:
        print(f"Error: invalid config: {exc}", file=sys.stderr)
        return 1

    # Setup logging
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else cfg.logging.level_number,
        format="%(asctime)s %(levelname)s %(message)s",
    )

    try:
        result = args.func(args, cfg)
    except ValueError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    return 0 if result is None else int(result)


if __name__ == "__main__":
    sys.exit(main())
