"""Time sequential and concurrent unique-set generation into files.

Usage:
    python scripts/benchmark_generation.py --count 1000000 --output-dir ./out/
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

from taxid.core.logging import setup_logging
from taxid.generation.concurrent import generate_unique_set_concurrent
from taxid.generation.sequential import generate_unique_set
from taxid.persistence import FileSink

logger = logging.getLogger("benchmark")


def run(count: int, output_dir: Path, workers: int) -> None:
    output_dir.mkdir(parents=True, exist_ok=True)
    with FileSink(output_dir / f"{count}-sequential.txt") as sink:
        sequential = generate_unique_set(count, sink)
    with FileSink(output_dir / f"{count}-concurrent.txt") as sink:
        concurrent = generate_unique_set_concurrent(count, sink, worker_count=workers)
    for report in (sequential, concurrent):
        print(f"  {report.mode:<10} {report.written:>12,} ids  {report.elapsed_ms:>8,} ms"
              f"  draws={report.draws:,} duplicates={report.duplicates:,}")


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--count", type=int, default=10_000)
    parser.add_argument("--output-dir", type=Path, default=Path("benchmark-output"))
    parser.add_argument("--workers", type=int, default=9)
    args = parser.parse_args()
    setup_logging("WARNING")
    print(f"Creating {args.count:,} identifiers per variant...")
    run(args.count, args.output_dir, args.workers)


if __name__ == "__main__":
    main()
