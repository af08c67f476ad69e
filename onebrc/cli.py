import argparse
import cProfile
import logging
import pstats
import sys
import time

from onebrc.config import BACKENDS, EngineConfig
from onebrc.engine import process_file_from_path
from onebrc.errors import BrcError


def build_parser():
    parser = argparse.ArgumentParser(
        prog="onebrc",
        description="Min/mean/max per weather station over a billion row measurements file.",
    )
    parser.add_argument("-f", "--file", required=True, help="Path to the measurement file")
    parser.add_argument("--workers", type=int, help="Number of workers (default: CPU count)")
    parser.add_argument("--block-size", type=int, help="Bytes read per block (default: 128 KiB)")
    parser.add_argument("--queue-capacity", type=int, help="Chunks in flight before reading blocks")
    parser.add_argument("--max-record-length", type=int, help="Longest record accepted, in bytes")
    parser.add_argument("--backend", choices=BACKENDS, help="Run workers as processes or threads")
    parser.add_argument("--profile", action="store_true", help="Print a cProfile report to stderr")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging on stderr")
    return parser


def _run_profiled(args, config):
    profiler = cProfile.Profile()
    profiler.enable()
    try:
        process_file_from_path(args.file, config)
    finally:
        profiler.disable()
        pstats.Stats(profiler, stream=sys.stderr).strip_dirs().sort_stats("tottime").print_stats(20)


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    t0 = time.time()
    try:
        config = EngineConfig.from_args(args)
        if args.profile:
            _run_profiled(args, config)
        else:
            process_file_from_path(args.file, config)
    except BrcError as exc:
        print(f"error: {exc.stage} failed: {exc}", file=sys.stderr)
        return 1
    t1 = time.time()
    print(f"\nProcessing took {t1 - t0:.2f} seconds", file=sys.stderr)
    return 0
