#!/usr/bin/env python3
"""Performance benchmark for golaycodec decoding strategies.

Tests the performance of:
1. Scalar decode via the syndrome table
2. Scalar decode via the brute-force error-pattern search
3. Vectorized array decode
4. Stream decoder over packed bytes

Run with: python benchmark_golay.py
"""

import time
import numpy as np


def _corrupted_words(n_words: int, seed: int = 0) -> np.ndarray:
    """Random codewords with 0-3 random bit errors each."""
    from golaycodec.fec.golay import golay_encode_array

    rng = np.random.default_rng(seed)
    codewords = golay_encode_array(rng.integers(0, 4096, size=n_words))
    for idx in range(n_words):
        for pos in rng.choice(23, size=int(rng.integers(0, 4)), replace=False):
            codewords[idx] ^= 1 << int(pos)
    return codewords


def benchmark_scalar(strategy: str, n_words: int, iterations: int = 3) -> dict:
    """Benchmark golay_decode() one word at a time."""
    from golaycodec.fec.golay import golay_decode

    words = [int(w) for w in _corrupted_words(n_words)]

    # Warmup (builds the syndrome table on first use)
    golay_decode(words[0], strategy)

    start = time.perf_counter()
    for _ in range(iterations):
        for w in words:
            golay_decode(w, strategy)
    elapsed = time.perf_counter() - start

    return {
        "component": f"Scalar decode ({strategy})",
        "words_per_sec": n_words * iterations / elapsed,
        "elapsed_sec": elapsed,
        "iterations": iterations,
    }


def benchmark_array(n_words: int = 1_000_000, iterations: int = 5) -> dict:
    """Benchmark golay_decode_array() on one large batch."""
    from golaycodec.fec.golay import golay_decode_array

    words = _corrupted_words(10_000)
    words = np.resize(words, n_words)
    golay_decode_array(words[:10])

    start = time.perf_counter()
    for _ in range(iterations):
        golay_decode_array(words)
    elapsed = time.perf_counter() - start

    return {
        "component": "Array decode (table)",
        "words_per_sec": n_words * iterations / elapsed,
        "elapsed_sec": elapsed,
        "iterations": iterations,
    }


def benchmark_stream(n_bytes: int = 100_000, iterations: int = 3) -> dict:
    """Benchmark bytes -> GolayEncoder -> GolayDecoder -> bytes."""
    from golaycodec.stream import GolayDecoder, GolayEncoder

    payload = bytes(np.random.default_rng(1).integers(0, 256, size=n_bytes, dtype=np.uint8))

    start = time.perf_counter()
    for _ in range(iterations):
        enc = GolayEncoder()
        enc.write_bytes(n_bytes * 8, payload)
        dec = GolayDecoder(on_uncorrectable="ignore")
        dec.write_bytes(enc.bits, enc.to_bytes())
        dec.read_words(n_bytes * 8, 8)
    elapsed = time.perf_counter() - start

    return {
        "component": "Stream round trip",
        "words_per_sec": (n_bytes * 8 / 12) * iterations / elapsed,
        "elapsed_sec": elapsed,
        "iterations": iterations,
    }


def main():
    print("=" * 60)
    print("golaycodec Decode Benchmark")
    print("=" * 60)
    print()

    results = []

    print("Running benchmarks...")
    print("-" * 60)

    print("Benchmarking scalar table decode...", flush=True)
    results.append(benchmark_scalar("table", 20_000))

    # Search examines up to 2047 candidates per word
    print("Benchmarking scalar search decode...", flush=True)
    results.append(benchmark_scalar("search", 500))

    print("Benchmarking array decode...", flush=True)
    results.append(benchmark_array())

    print("Benchmarking stream round trip...", flush=True)
    results.append(benchmark_stream())

    print()
    print("=" * 60)
    print("Results")
    print("=" * 60)
    print()

    for r in results:
        print(f"{r['component']}:")
        rate = r["words_per_sec"]
        if rate >= 1_000_000:
            print(f"  Throughput: {rate / 1_000_000:.2f} M words/sec")
        else:
            print(f"  Throughput: {rate / 1_000:.2f} K words/sec")
        print(f"  Elapsed: {r['elapsed_sec']:.3f}s ({r['iterations']} iterations)")
        print()

    table_rate = results[0]["words_per_sec"]
    search_rate = results[1]["words_per_sec"]
    print(f"Table speedup over search: {table_rate / search_rate:.0f}x")


if __name__ == "__main__":
    main()
