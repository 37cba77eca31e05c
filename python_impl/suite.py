"""Bloom filter benchmark and report suite.

Builds a filter for ``n`` sequential integers and runs:

1. Membership test on inserted values (should be all present)
2. False positive rate on out-of-range probes vs. the configured rate
3. Merge of two half-filled filters vs. one filled filter
4. Serialize / deserialize round trip
5. Filter properties and memory usage
6. Insert / query throughput

Run with:

    python -m python_impl.suite [n ...]
"""
from __future__ import annotations

import random
import sys
import time
from typing import List

from bf_word import BloomFilter

SIZES = [1_000, 10_000, 1_000_000, 10_000_000]
DELTA = 0.03


def build(n: int, hasher: str = "murmur3") -> BloomFilter:
    bloom = BloomFilter(n, hasher=hasher)
    for i in range(n):
        bloom.add_long(i)
    return bloom


def out_of_range_probes(n: int, count: int, seed: int = 123) -> List[int]:
    rand = random.Random(seed)
    probes = []
    while len(probes) < count:
        probe = rand.randint(-(2**31), 2**31 - 1)
        if probe > n or probe < 0:
            probes.append(probe)
    return probes


def check_membership(bloom: BloomFilter, n: int) -> None:
    print("TEST A: Membership on inserted values")
    missing = [i for i in range(n) if not bloom.test_long(i)]
    print(f"  Inserted: {n}")
    print(f"  Missing after insertion: {len(missing)} (expected 0)")
    if missing:
        print(f"  Example missing: {missing[:5]}")
    print()


def check_false_positive_rate(bloom: BloomFilter, n: int) -> float:
    print("TEST B: False positive rate on out-of-range probes")
    probes = out_of_range_probes(n, n)
    false_positives = sum(1 for p in probes if bloom.test_long(p))
    fpr = false_positives / len(probes)
    expected = bloom.false_positive_rate

    print(f"  Probes: {len(probes)}")
    print(f"  False positives: {false_positives}")
    print(f"  Empirical FPR: {fpr:.6f} (configured {expected}, delta {fpr - expected:+.4f})")
    if abs(fpr - expected) > DELTA:
        print(f"  WARNING: outside tolerance of {DELTA}")
    print()
    return fpr


def check_merge(n: int) -> None:
    print("TEST C: Merge of two halves")
    left = BloomFilter(n)
    right = BloomFilter(n)
    for i in range(n):
        (left if i % 2 else right).add_long(i)

    if not left.is_compatible(right):
        print("  Filters are not compatible, skipping.")
        return
    left.merge(right)
    full = build(n)
    same = left.serialize() == full.serialize()
    print(f"  Merged equals single filter: {same}")
    print()


def check_round_trip(bloom: BloomFilter, n: int) -> None:
    print("TEST D: Serialize / deserialize round trip")
    serialized = bloom.serialize()
    restored = BloomFilter.from_serialized(serialized, hasher=bloom.hasher)
    sample = list(range(min(n, 10_000))) + out_of_range_probes(n, 10_000, seed=7)
    mismatches = sum(1 for v in sample if restored.test_long(v) != bloom.test_long(v))
    print(f"  Serialized length: {len(serialized)} longs")
    print(f"  Mismatched answers: {mismatches} (expected 0)")
    print()


def show_properties(bloom: BloomFilter, n: int) -> None:
    print("TEST E: Filter properties")
    bytes_len = bloom.size_in_bytes()
    mb = bytes_len / (1024 * 1024)

    print(f"  Filter size (bits): {bloom.bit_size}")
    print(f"  Filter size (bytes): {bytes_len}")
    print(f"  Filter size (MB): {mb:.2f}")
    print(f"  Number of hash functions: {bloom.num_hash_functions}")
    print(f"  Entries inserted: {n}")
    print(f"  Bytes per entry: {bytes_len / n:.4f}")
    print()


def measure_performance(n: int, hasher: str = "murmur3") -> dict:
    """Measure insertion and query throughput (Ops/Sec)."""
    print(f"TEST F: Performance Benchmarking ({hasher})")
    bench_filter = BloomFilter(n, hasher=hasher)

    start_time = time.perf_counter()
    for i in range(n):
        bench_filter.add_long(i)
    insert_time = time.perf_counter() - start_time
    insert_ops = n / insert_time if insert_time > 0 else float("inf")
    print(f"    - Inserted {n} items in {insert_time:.4f} sec")
    print(f"    - Insertion Throughput: {insert_ops:,.0f} ops/sec")

    probes = out_of_range_probes(n, n)
    start_time = time.perf_counter()
    for p in probes:
        bench_filter.test_long(p)
    query_time = time.perf_counter() - start_time
    query_ops = len(probes) / query_time if query_time > 0 else float("inf")
    print(f"    - Performed {len(probes)} queries in {query_time:.4f} sec")
    print(f"    - Query Throughput: {query_ops:,.0f} ops/sec")
    print()

    return {
        "insert_time": insert_time,
        "insert_ops_per_sec": insert_ops,
        "query_time": query_time,
        "query_ops_per_sec": query_ops,
    }


def run_all(sizes: List[int]) -> None:
    for n in sizes:
        print("=" * 60)
        print(f"Running Bloom Filter Suite (n={n})")
        print("=" * 60)
        print()

        bloom = build(n)
        check_membership(bloom, n)
        check_false_positive_rate(bloom, n)
        check_merge(n)
        check_round_trip(bloom, n)
        show_properties(bloom, n)
        measure_performance(n, "murmur3")
        measure_performance(n, "xxh64")

    print("=" * 60)
    print("Suite completed successfully!")
    print("=" * 60)


if __name__ == "__main__":
    run_all([int(arg) for arg in sys.argv[1:]] or SIZES)
