#!/usr/bin/env python3
"""
Benchmarks for the merkle tree data structure.

This script measures:
 1. Raw digest throughput for each registered digest
 2. Full tree build times for various payload counts
 3. Whole-tree verification times
 4. Tree statistics for a single large tree

Usage:
    python benchmarks.py [--digest NAME] [--sizes 100 1000 10000] [--trials T] [--payload-size B] [--seed S]
"""
import argparse
import time
import timeit
import gc
from pprint import pprint
from dataclasses import asdict
from statistics import mean, variance

import numpy as np
from tqdm import tqdm

from merkle_trees.factory import DIGESTS, get_digest, make_merkle_tree_classes
from merkle_trees.merkle_tree_base import MerkleTreeBase, tree_stats_
from merkle_trees.profiling import PerformanceTracker


def random_payloads(rng: np.random.Generator, n: int, payload_size: int) -> list[bytes]:
    """Draw `n` payloads of exactly `payload_size` random bytes."""
    block = rng.integers(0, 256, size=(n, payload_size), dtype=np.uint8)
    return [row.tobytes() for row in block]


def bench_digests(rng: np.random.Generator, num: int, payload_size: int, runs: int = 3) -> None:
    """Benchmark Digest.hash on random payloads for every registered digest."""
    payloads = random_payloads(rng, num, payload_size)
    for name in DIGESTS:
        digest = get_digest(name)
        def _inner():
            for payload in payloads:
                digest.hash(payload)
        t = timeit.timeit(_inner, number=runs) / runs
        print(f"[bench] {name:<8} hash:          {t:.4f}s for {num} calls")


def measure_build_and_verify(rng: np.random.Generator, n: int, digest_name: str,
                             payload_size: int, trials: int) -> tuple[float, float, float, float]:
    """
    Build and verify `trials` independent trees over `n` payloads each.
    Returns (build_avg, build_var, verify_avg, verify_var) in seconds.
    """
    _, TreeBuilderD = make_merkle_tree_classes(digest_name)
    builder = TreeBuilderD()
    inputs = [random_payloads(rng, n, payload_size) for _ in range(trials)]

    gc.collect()
    gc.disable()
    try:
        build_times, verify_times = [], []
        for payloads in tqdm(inputs, desc=f"n={n}", leave=False):
            t0 = time.perf_counter()
            tree = builder.build(payloads)
            build_times.append(time.perf_counter() - t0)

            t0 = time.perf_counter()
            mismatch = tree.verify()
            verify_times.append(time.perf_counter() - t0)
            if mismatch is not None:
                raise RuntimeError(f"freshly built tree failed verification: {mismatch}")
    finally:
        gc.enable()

    build_var = variance(build_times) if trials > 1 else 0.0
    verify_var = variance(verify_times) if trials > 1 else 0.0
    return mean(build_times), build_var, mean(verify_times), verify_var


def bench_build_and_verify(rng: np.random.Generator, sizes: list[int], digest_name: str,
                           payload_size: int, trials: int) -> None:
    """Run measure_build_and_verify for each size and print results."""
    for n in sizes:
        b_avg, b_var, v_avg, v_var = measure_build_and_verify(rng, n, digest_name, payload_size, trials)
        print(
            f"[bench] Build  size {n:<7} → avg {b_avg*1e3:8.3f} ms   σ²={b_var*1e6:8.3f} ms²"
        )
        print(
            f"[bench] Verify size {n:<7} → avg {v_avg*1e3:8.3f} ms   σ²={v_var*1e6:8.3f} ms²"
        )


def bench_tree_stats(rng: np.random.Generator, n: int, digest_name: str, payload_size: int) -> None:
    """Build a single tree and print its stats."""
    _, TreeBuilderD = make_merkle_tree_classes(digest_name)
    tree = TreeBuilderD().build(random_payloads(rng, n, payload_size))
    print(f"[bench] tree({n}, {digest_name}) stats:")
    pprint(asdict(tree_stats_(tree)))


def main():
    parser = argparse.ArgumentParser(description="Merkle tree benchmarks")
    parser.add_argument("--digest", choices=sorted(DIGESTS), default="blake3",
                        help="Digest used for build and verify benchmarks")
    parser.add_argument("--num", type=int, default=100_000,
                        help="Number of calls for digest benchmarks")
    parser.add_argument("--payload-size", type=int, default=64,
                        help="Size in bytes of each random payload")
    parser.add_argument("--sizes", nargs='+', type=int, default=[100, 1000, 10_000],
                        help="Payload counts for build/verify benchmarks")
    parser.add_argument("--trials", type=int, default=20,
                        help="Number of trees built per size")
    parser.add_argument("--seed", type=int, default=None,
                        help="Seed for the payload generator")
    args = parser.parse_args()

    rng = np.random.default_rng(args.seed)
    PerformanceTracker.get_instance().enable()

    print("\n=== Digest Benchmark ===")
    bench_digests(rng, args.num, args.payload_size)

    print("\n=== Build / Verify ===")
    bench_build_and_verify(rng, args.sizes, args.digest, args.payload_size, args.trials)

    print("\n=== Tree Stats ===")
    bench_tree_stats(rng, max(args.sizes), args.digest, args.payload_size)

    print("\n=== Method-Level Performance Breakdown ===")
    print(MerkleTreeBase.get_performance_report())
    MerkleTreeBase.reset_performance_metrics()

if __name__ == "__main__":
    main()
