from __future__ import annotations

import argparse
import sys
from typing import Sequence

from photoreel.config import ASYNC_WORKERS, CACHE_CAPACITY


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="photoreel",
        description="Browse a folder of images one at a time.",
    )
    parser.add_argument(
        "paths",
        nargs="*",
        metavar="PATH",
        help="Image files and/or folders to open (defaults to the current directory).",
    )
    parser.add_argument(
        "--cache",
        type=int,
        default=CACHE_CAPACITY,
        help=f"Number of decoded images kept in memory (default: {CACHE_CAPACITY}).",
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=ASYNC_WORKERS,
        help=f"Background worker threads (default: {ASYNC_WORKERS}).",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Do not print log lines.",
    )
    parsed = parser.parse_args(list(argv if argv is not None else sys.argv[1:]))
    if parsed.cache < 1:
        parser.error("--cache must be at least 1")
    if parsed.workers < 1:
        parser.error("--workers must be at least 1")
    return parsed


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    from photoreel.app import Application
    from photoreel.logging import set_quiet
    from photoreel.session import GallerySession

    if args.quiet:
        set_quiet(True)

    session = GallerySession(workers=args.workers, cache_capacity=args.cache)
    app = Application(session=session)
    app.initialize(args.paths)
    app.run()
    return 0
