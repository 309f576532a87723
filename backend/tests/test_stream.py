"""Tests for Golay(23,12) stream framing."""

from __future__ import annotations

import logging

import numpy as np
import pytest

from golaycodec import stream
from golaycodec.errors import InvalidWidthError, UncorrectableError
from golaycodec.fec import golay
from golaycodec.fec.golay import golay_encode, golay_syndrome
from golaycodec.stream import GolayDecoder, GolayEncoder, decode_words, encode_words
from golaycodec.utils.packing import bits_to_words, values_to_bits


class TestEncoder:
    def test_bytes_to_uint32(self):
        """16 bits -> 2 blocks -> 46 bits -> 2 uint32."""
        assert encode_words([0xFF, 0xF0], 8, 32) == [0xFFFFFE00, 0]

    def test_single_block_from_uint16(self, all_ones_codeword):
        enc = GolayEncoder()
        enc.write_words(12, [0xFFF0], 16)
        assert enc.bits == 23
        assert enc.codewords() == [all_ones_codeword]
        assert enc.to_words(32) == [0xFFFFFE00]

    def test_uint64_input_pads_last_chunk(self):
        enc = GolayEncoder()
        enc.write_words(112, [0x123456789ABCDEF0, 0xFEDCBA9876543210], 64)
        codewords = enc.codewords()
        assert len(codewords) == 10
        assert enc.bits == 230
        assert codewords[0] == golay_encode(0x123)
        # Chunk 5 straddles the two words
        assert codewords[5] == golay_encode(0x0FE)
        assert codewords[-2] == golay_encode(0x765)
        # Last chunk: bits 108-111 of the stream then 8 padding bits
        assert codewords[-1] == golay_encode(0x400)
        assert len(enc.to_words(64)) == 4

    def test_to_bytes_packs_without_gaps(self):
        enc = GolayEncoder()
        enc.write_bytes(24, b"\xff\xf0\x00")
        assert enc.codewords() == [0x7FFFFF, 0]
        # 46 bits -> 6 bytes
        assert enc.to_bytes() == b"\xff\xff\xfe\x00\x00\x00"

    def test_write_bools(self):
        enc = GolayEncoder()
        enc.write_bools([True] * 12)
        assert enc.codewords() == [0x7FFFFF]
        assert enc.to_bools() == [True] * 23

    def test_short_bool_input_is_padded(self):
        enc = GolayEncoder()
        enc.write_bools([True, False, True])
        assert enc.codewords() == [golay_encode(0xA00)]

    def test_each_write_is_framed_separately(self):
        enc = GolayEncoder()
        enc.write_bools([True] * 6)
        enc.write_bools([True] * 6)
        assert enc.codewords() == [golay_encode(0xFC0), golay_encode(0xFC0)]

    def test_empty_input(self):
        enc = GolayEncoder()
        enc.write_bytes(0, b"")
        assert enc.codewords() == []
        assert enc.to_bytes() == b""
        assert enc.bits == 0

    def test_reset(self):
        enc = GolayEncoder()
        enc.write_bytes(8, b"\x5a")
        enc.reset()
        assert enc.bits == 0

    def test_rejects_too_many_bits(self):
        with pytest.raises(ValueError):
            GolayEncoder().write_bytes(17, b"\x00\x00")

    def test_rejects_oversized_word(self):
        with pytest.raises(InvalidWidthError):
            GolayEncoder().write_words(16, [0x10000], 16)

    def test_rejects_unknown_container_width(self):
        with pytest.raises(ValueError):
            GolayEncoder().write_words(12, [0xFFF], 12)


class TestDecoder:
    def test_uint32_to_uint16(self):
        """64 bits -> 2 blocks (18 trailing bits dropped) -> 24 bits -> 2 uint16."""
        assert decode_words([0xFFFFFE00, 0], 32, 16) == [0xFFF0, 0]

    def test_single_block(self):
        dec = GolayDecoder()
        dec.write_words(23, [0xFFFFFE00, 0], 32)
        assert dec.bits == 12
        assert dec.read_words(12, 16) == [0xFFF0]

    def test_bits_argument(self):
        assert decode_words([0xFFFFFE00, 0], 32, 16, bits=23) == [0xFFF0]

    def test_write_codewords(self):
        dec = GolayDecoder()
        dec.write_codewords(golay_encode(0x123), golay_encode(0x456) ^ 0b101)
        assert dec.read_all() == [0x123, 0x456]
        assert dec.stats.blocks == 2
        assert dec.stats.corrected_blocks == 1
        assert dec.stats.corrected_bits == 2

    def test_write_codewords_rejects_wide_value(self):
        with pytest.raises(InvalidWidthError):
            GolayDecoder().write_codewords(1 << 23)

    def test_write_bools(self):
        bits = [bool((0x7FFFFF >> (22 - i)) & 1) for i in range(23)]
        dec = GolayDecoder()
        dec.write_bools(bits + [True] * 5)
        assert dec.read_all() == [0xFFF]

    def test_read_cursor(self):
        dec = GolayDecoder()
        dec.write_codewords(golay_encode(0xA5F))
        assert dec.remaining == 12
        assert dec.read_bools(4) == [True, False, True, False]
        assert dec.remaining == 8
        assert dec.read_words(8, 8) == [0x5F]
        assert dec.remaining == 0
        with pytest.raises(ValueError):
            dec.read_bools(1)

    def test_reads_across_word_boundaries(self):
        dec = GolayDecoder()
        dec.write_codewords(golay_encode(0xABC), golay_encode(0xDEF))
        assert dec.read_words(8, 8) == [0xAB]
        assert dec.read_words(8, 8) == [0xCD]
        assert dec.read_words(8, 8) == [0xEF]

    def test_small_reads_expand_only_covering_words(self, monkeypatch):
        dec = GolayDecoder()
        dec.write_codewords(*[golay_encode(i) for i in range(100)])

        expanded = []
        real_values_to_bits = stream.values_to_bits

        def counting_values_to_bits(values, size):
            expanded.append(len(values))
            return real_values_to_bits(values, size)

        monkeypatch.setattr(stream, "values_to_bits", counting_values_to_bits)
        words = [dec.read_words(8, 8)[0] for _ in range(150)]
        assert max(expanded) <= 2
        assert words == bits_to_words(values_to_bits(list(range(100)), 12), 8)

    def test_reset(self):
        dec = GolayDecoder()
        dec.write_codewords(golay_encode(1))
        dec.read_bools(3)
        dec.reset()
        assert dec.bits == 0
        assert dec.remaining == 0
        assert dec.stats.blocks == 0

    def test_invalid_options(self):
        with pytest.raises(ValueError):
            GolayDecoder(on_uncorrectable="drop")  # type: ignore[arg-type]
        with pytest.raises(ValueError):
            GolayDecoder(strategy="fast")  # type: ignore[arg-type]


class TestRoundTrip:
    @pytest.mark.parametrize("strategy", ["table", "search"])
    def test_bytes_round_trip_with_errors(self, strategy):
        rng = np.random.default_rng(42)
        payload = bytes(rng.integers(0, 256, size=60, dtype=np.uint8))

        enc = GolayEncoder()
        enc.write_bytes(len(payload) * 8, payload)

        corrupted = []
        flips = 0
        for cw in enc.codewords():
            weight = int(rng.integers(0, 4))
            for pos in rng.choice(23, size=weight, replace=False):
                cw ^= 1 << int(pos)
            flips += weight
            corrupted.append(cw)

        dec = GolayDecoder(strategy=strategy)
        dec.write_codewords(*corrupted)
        assert bytes(dec.read_words(len(payload) * 8, 8)) == payload
        assert dec.stats.corrected_bits == flips
        assert dec.stats.uncorrectable_blocks == 0

    @pytest.mark.parametrize(("width", "out_width"), [(8, 64), (16, 8), (32, 16), (64, 32)])
    def test_container_round_trip(self, width, out_width):
        rng = np.random.default_rng(width)
        words = [int(w) for w in rng.integers(0, 1 << min(width, 62), size=7)]

        enc = GolayEncoder()
        enc.write_words(len(words) * width, words, width)
        packed = enc.to_words(out_width)

        dec = GolayDecoder()
        dec.write_words(enc.bits, packed, out_width)
        assert dec.read_words(len(words) * width, width) == words

    def test_bytes_helpers_round_trip(self):
        payload = b"golay"
        enc = GolayEncoder()
        enc.write_bytes(40, payload)
        dec = GolayDecoder()
        dec.write_bytes(enc.bits, enc.to_bytes())
        assert bytes(dec.read_words(40, 8)) == payload


class TestUncorrectablePolicy:
    def _blocks(self) -> list[int]:
        return [golay_encode(5), golay_encode(6) ^ 1, golay_encode(7)]

    def test_raise_stops_at_failing_block(self, table_missing_syndrome):
        dec = GolayDecoder(on_uncorrectable="raise")
        with pytest.raises(UncorrectableError):
            dec.write_codewords(*self._blocks())
        assert dec.read_all() == [5]

    @staticmethod
    def _warnings(caplog) -> list[tuple[str, str]]:
        return [(r.name, r.getMessage()) for r in caplog.records if r.levelno >= logging.WARNING]

    def test_ignore_counts_without_logging(self, table_missing_syndrome, caplog):
        dec = GolayDecoder(on_uncorrectable="ignore")
        with caplog.at_level(logging.WARNING):
            dec.write_codewords(*self._blocks())
        assert dec.read_all() == [5, 6, 7]
        assert dec.stats.uncorrectable_blocks == 1
        assert self._warnings(caplog) == []

    def test_warn_logs_each_block_once(self, table_missing_syndrome, caplog):
        dec = GolayDecoder(on_uncorrectable="warn")
        with caplog.at_level(logging.WARNING):
            dec.write_codewords(*self._blocks())
        assert dec.stats.uncorrectable_blocks == 1
        warnings = self._warnings(caplog)
        assert len(warnings) == 1
        assert warnings[0][0] == "golaycodec.stream"
        assert "uncorrectable block 1" in warnings[0][1]

    @pytest.mark.parametrize(("policy", "expected"), [("ignore", 0), ("warn", 1)])
    def test_search_strategy_logging(self, monkeypatch, caplog, policy, expected):
        bad = golay_syndrome(golay_encode(6) ^ 1)
        real_search = golay.search_error_pattern
        monkeypatch.setattr(
            golay,
            "search_error_pattern",
            lambda syndrome: None if syndrome == bad else real_search(syndrome),
        )
        dec = GolayDecoder(strategy="search", on_uncorrectable=policy)
        with caplog.at_level(logging.WARNING):
            dec.write_codewords(*self._blocks())
        assert dec.read_all() == [5, 6, 7]
        assert dec.stats.uncorrectable_blocks == 1
        assert len(self._warnings(caplog)) == expected
