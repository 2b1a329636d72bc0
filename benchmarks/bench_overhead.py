"""Microbenchmarks for time_elapsed overhead.

Goals:
- Measure the cost of a single log() call, which dominates tight loops.
- Measure the cost of a full start()/end() cycle.
- Separate formatting cost from console cost by also timing the unit
  helpers on their own.

Output goes to a throwaway console so terminal speed does not skew results.

Run locally:

  PYTHONPATH=src python benchmarks/bench_overhead.py

JSON output (for CI + tracking):

  PYTHONPATH=src python benchmarks/bench_overhead.py --json
"""

from __future__ import annotations

import argparse
import io
import json
import os
import sys
import time


def _empty() -> None:
    return None


def _measure(fn, n: int) -> float:
    """Return average nanoseconds per call over n iterations."""
    t0 = time.perf_counter_ns()
    for _ in range(n):
        fn()
    t1 = time.perf_counter_ns()
    return (t1 - t0) / n


def main(argv: list[str] | None = None) -> int:
    p = argparse.ArgumentParser()
    p.add_argument("--json", action="store_true", help="Emit JSON to stdout")
    p.add_argument("--n", type=int, default=200_000, help="Iterations for the unit helpers/baseline")
    args = p.parse_args(argv)

    # Ensure we can import from src when run from repo root.
    repo_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
    sys.path.insert(0, os.path.join(repo_root, "src"))

    from rich.console import Console

    import time_elapsed
    from time_elapsed.units import humanize, humanize_pair

    n_fast = int(args.n)
    n_console = max(2_000, n_fast // 50)  # console rendering is much slower

    sink = Console(file=io.StringIO(), color_system=None)

    def reset_sink() -> None:
        sink.file.seek(0)
        sink.file.truncate()

    # Baseline: empty Python function call overhead.
    baseline = _measure(_empty, n_fast)

    humanize_ns = _measure(lambda: humanize(202_271_000), n_fast)
    humanize_pair_ns = _measure(lambda: humanize_pair(202_271_000), n_fast)

    bench = time_elapsed.start("overhead", console=sink)

    def log_call():
        bench.log("tick")

    log_ns = _measure(log_call, n_console)
    reset_sink()

    def start_end():
        time_elapsed.start("cycle", console=sink).end()

    cycle_ns = _measure(start_end, n_console)
    reset_sink()

    payload = {
        "python": sys.version.split()[0],
        "version": time_elapsed.__version__,
        "iterations": {"fast": n_fast, "console": n_console},
        "ns_per_call": {
            "baseline_empty_call": baseline,
            "humanize": humanize_ns,
            "humanize_pair": humanize_pair_ns,
            "log": log_ns,
            "start_end": cycle_ns,
        },
        "ratios": {
            "log_over_baseline": log_ns / baseline,
            "log_over_humanize": log_ns / humanize_ns if humanize_ns else None,
            "start_end_over_log": cycle_ns / log_ns if log_ns else None,
        },
    }

    if args.json:
        print(json.dumps(payload, sort_keys=True))
        return 0

    print("time_elapsed overhead microbench")
    print(f"Python: {payload['python']}")
    print(f"Iterations: fast={n_fast:,} console={n_console:,}")
    print()
    print(f"baseline empty call: {baseline:.1f} ns")
    print(f"humanize(): {humanize_ns:.1f} ns")
    print(f"humanize_pair(): {humanize_pair_ns:.1f} ns")
    print(f"Benchmark.log(): {log_ns:,.0f} ns")
    print(f"start()/end(): {cycle_ns:,.0f} ns")
    print()
    print(f"log/humanize: {payload['ratios']['log_over_humanize']:.2f}x")
    print(f"start_end/log: {payload['ratios']['start_end_over_log']:.2f}x")

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
