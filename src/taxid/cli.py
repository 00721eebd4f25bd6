"""Command-line entry point.

Usage:
    taxid generate 10000 ids.txt [--sequential | --no-sequential] [--workers 9] [--seed 42]
    taxid validate 10374918258 10374918257
    taxid random [--count 5] [--seed 42]
"""

from __future__ import annotations

import argparse
import logging
import random
import sys
from typing import Sequence

from taxid.core.config import AppSettings
from taxid.core.exceptions import IdentifierValidationError, TaxIdError
from taxid.core.logging import setup_logging
from taxid.generation.concurrent import generate_unique_set_concurrent
from taxid.generation.sequential import generate_unique_set
from taxid.models.identifier import TaxIdentifier
from taxid.persistence import create_sink

logger = logging.getLogger(__name__)


def _non_negative(value: str) -> int:
    number = int(value)
    if number < 0:
        raise argparse.ArgumentTypeError(f"must be >= 0, got {number}")
    return number


def build_parser(settings: AppSettings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="taxid", description="Generate and validate tax identifiers.")
    parser.add_argument("--log-level", default=settings.log_level)
    commands = parser.add_subparsers(dest="command", required=True)

    generate = commands.add_parser("generate", help="write COUNT unique identifiers to OUTPUT")
    generate.add_argument("count", type=_non_negative)
    generate.add_argument("output", help='file path, or "-" for stdout')
    generate.add_argument("--sequential", action=argparse.BooleanOptionalAction,
                          default=not settings.generation.concurrent)
    generate.add_argument("--workers", type=int, default=settings.generation.worker_count)
    generate.add_argument("--queue-size", type=_non_negative, default=settings.generation.queue_maxsize)
    generate.add_argument("--seed", type=int, default=None)

    validate = commands.add_parser("validate", help="check one or more identifiers")
    validate.add_argument("values", nargs="+")

    rand = commands.add_parser("random", help="print random identifiers")
    rand.add_argument("--count", type=_non_negative, default=1)
    rand.add_argument("--seed", type=int, default=None)
    return parser


def _run_generate(args: argparse.Namespace) -> int:
    with create_sink(args.output) as sink:
        if args.sequential:
            report = generate_unique_set(args.count, sink, seed=args.seed)
        else:
            report = generate_unique_set_concurrent(
                args.count, sink,
                worker_count=args.workers,
                queue_maxsize=args.queue_size,
                seed=args.seed,
            )
    logger.info("Wrote %d identifiers to %s", report.written, args.output)
    return 0


def _run_validate(args: argparse.Namespace) -> int:
    failures = 0
    for value in args.values:
        try:
            TaxIdentifier.parse(value)
        except IdentifierValidationError as exc:
            failures += 1
            print(f"{value}: {exc.reason} ({exc})")
        else:
            print(f"{value}: OK")
    return 1 if failures else 0


def _run_random(args: argparse.Namespace) -> int:
    rng = random.Random(args.seed) if args.seed is not None else None
    for _ in range(args.count):
        print(TaxIdentifier.random(rng))
    return 0


_COMMANDS = {
    "generate": _run_generate,
    "validate": _run_validate,
    "random": _run_random,
}


def main(argv: Sequence[str] | None = None) -> int:
    settings = AppSettings()
    args = build_parser(settings).parse_args(argv)
    setup_logging(args.log_level)
    try:
        return _COMMANDS[args.command](args)
    except (TaxIdError, ValueError) as exc:
        logger.error("%s failed: %s", args.command, exc)
        return 2


if __name__ == "__main__":
    sys.exit(main())
