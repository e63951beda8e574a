#!/usr/bin/env python3
"""
BLAKE2b — Benchmark Suite

Compares the pure Python BLAKE2b against:
  Native:     libsodium binding, hashlib BLAKE2b
  Reference:  hashlib SHA-256, SHA-512
"""

import os
import sys
import time
import hashlib

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
from pyblake2b import Blake2b, blake2b
from pyblake2b import blake2b_c


def bench(name, func, data, iterations):
    for _ in range(min(2, iterations)):
        func(data)

    start = time.perf_counter()
    for _ in range(iterations):
        func(data)
    elapsed = time.perf_counter() - start

    ms_per_iter = (elapsed / iterations) * 1000
    bytes_per_sec = len(data) / (elapsed / iterations) if elapsed > 0 else 0
    mb_per_sec = bytes_per_sec / (1024 * 1024)

    return {
        'name': name,
        'ms_per_iter': ms_per_iter,
        'mb_per_sec': mb_per_sec,
        'total_time': elapsed,
        'iterations': iterations,
    }


def hash_sha256(data): return hashlib.sha256(data).digest()
def hash_sha512(data): return hashlib.sha512(data).digest()
def hash_blake2b(data): return hashlib.blake2b(data).digest()


def hash_streaming(data, chunk=4096):
    h = Blake2b()
    for i in range(0, len(data), chunk):
        h.update(data[i:i + chunk])
    return h.digest()


def run_benchmark(data_size_bytes, iterations, use_c):
    data = os.urandom(data_size_bytes)
    size_label = format_size(data_size_bytes)

    print(f"\n{'='*78}")
    print(f"  Benchmark: {size_label} input | {iterations} iterations")
    print(f"{'='*78}")
    print(f"  {'Algorithm':<28} {'Output':>8} {'ms/iter':>10} {'MB/s':>12}")
    print(f"  {'-'*28} {'-'*8} {'-'*10} {'-'*12}")

    algorithms = []

    if use_c:
        algorithms.append(('BLAKE2b-512 (libsodium)', blake2b_c.blake2b, 512))

    algorithms.append(('BLAKE2b-512 (Python)', blake2b, 512))
    algorithms.append(('BLAKE2b-512 (Python, 4K)', hash_streaming, 512))
    algorithms.append(('BLAKE2b-512 (hashlib)', hash_blake2b, 512))
    algorithms.append(('SHA-256', hash_sha256, 256))
    algorithms.append(('SHA-512', hash_sha512, 512))

    results = []
    for name, func, bits in algorithms:
        iters = max(1, iterations // 100) if 'Python' in name else iterations
        r = bench(name, func, data, iters)
        r['bits'] = bits
        results.append(r)
        marker = '***' if 'Python' in name else '   '
        print(f"  {marker} {name:<25} {bits:>5} bit {r['ms_per_iter']:>9.3f}ms {r['mb_per_sec']:>10.2f}")

    return results


def format_size(n):
    if n >= 1024 * 1024:
        return f"{n / (1024*1024):.0f} MB"
    elif n >= 1024:
        return f"{n / 1024:.0f} KB"
    else:
        return f"{n} B"


def print_ranking(all_results):
    print(f"\n{'='*78}")
    print("  RANKING (by throughput)")
    print(f"{'='*78}")

    for size_label, results in all_results:
        print(f"\n  [{size_label}]")
        python_tp = next((r['mb_per_sec'] for r in results if r['name'] == 'BLAKE2b-512 (Python)'), 1)
        if python_tp == 0:
            python_tp = 1

        for r in sorted(results, key=lambda x: x['mb_per_sec'], reverse=True):
            ratio = r['mb_per_sec'] / python_tp
            print(f"    {r['name']:<28} {r['mb_per_sec']:>10.2f} MB/s  {ratio:>9.1f}x")


if __name__ == '__main__':
    print("=" * 78)
    print("  BLAKE2b — Performance Benchmark")
    print("=" * 78)

    use_c = blake2b_c.is_using_c_library()
    if use_c:
        print("\n  [OK] libsodium loaded")
    else:
        print("\n  [WARN] libsodium not available")

    all_results = []

    configs = [
        (64, 20000),
        (1024, 10000),
        (65536, 1000),
        (1048576, 100),
    ]

    for data_size, iters in configs:
        results = run_benchmark(data_size, iters, use_c)
        all_results.append((format_size(data_size), results))

    print_ranking(all_results)

    print(f"\n{'='*78}")
    print("  Benchmark complete.")
    print(f"{'='*78}")
