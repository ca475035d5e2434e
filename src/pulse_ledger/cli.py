#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
WhatPulse weekly pipeline CLI

Each stage reads the previous stage's file and writes its own:

  fetch   GET /v1/all-stats from the local WhatPulse client
          -> raw-data/whatpulse-raw.json
  build   find keys/clicks/scrolls/uptime in the raw capture
          -> api/whatpulse.json
  weekly  append a snapshot to raw-data/whatpulse-weekly-snapshots.json
          and write the last-two-snapshots delta -> api/whatpulse-weekly.json

`run` chains the three stages; `publish` wraps them in git pull/commit/push.
Stages exit 1 on any fatal condition and never retry.
"""

from __future__ import annotations
import argparse
import sys
from typing import Callable, Optional

from . import __version__
from .config import Paths, get_base_url
from .errors import PulseError
from .extractor import build
from .fetcher import StatsClient, fetch_raw
from .ledger import SnapshotLedger
from .publish import GitRunner, publish
from .utils import eprint, progress_print
from .weekly import build_weekly

# ── Stage handlers ───────────────────────────────────────────────────────────
def handle_fetch(args, quiet: bool=False):
    paths = Paths.at(args.root)
    client = StatsClient(get_base_url(), verbose=args.verbose)
    progress_print(f"Fetching {client.stats_url}...", quiet)
    fetch_raw(client, paths.raw)
    print(f"Wrote {paths.display(paths.raw)}")

def handle_build(args, quiet: bool=False):
    paths = Paths.at(args.root)
    report = build(paths.raw, paths.report, verbose=args.verbose)
    for key, path in report["debug"]["detectedPaths"].items():
        eprint(f"[Build] {key} <- {path}", args.verbose)
    print(f"Wrote {paths.display(paths.report)}")

def handle_weekly(args, quiet: bool=False):
    paths = Paths.at(args.root)
    output = build_weekly(paths.report, SnapshotLedger(paths.ledger, quiet=quiet), paths.weekly)
    if output["counters"] is None:
        print(f"Wrote {paths.display(paths.weekly)} (no delta yet; run again next week).")
    else:
        print(f"Wrote {paths.display(paths.weekly)}")

def handle_run(args, quiet: bool=False):
    for handler in (handle_fetch, handle_build, handle_weekly):
        handler(args, quiet=quiet)

def handle_publish(args, quiet: bool=False):
    paths = Paths.at(args.root)
    git = GitRunner(paths.root, verbose=args.verbose)
    outputs = [paths.display(p) for p in paths.outputs()]
    publish(git, lambda: handle_run(args, quiet=quiet), outputs, quiet=quiet)

# ── CLI Setup ────────────────────────────────────────────────────────────────
def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="WhatPulse weekly pipeline")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable verbose output for debugging.")
    parser.add_argument("--quiet", action="store_true", help="Suppress progress messages to stderr.")
    parser.add_argument("--root", type=str, default=".", help="Data repository root (default: current directory).")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    subs = parser.add_subparsers(dest="cmd", title="Commands", required=True)
    subs.add_parser("fetch", help="Fetch raw stats from the WhatPulse client API.").set_defaults(func=handle_fetch)
    subs.add_parser("build", help="Build the normalized counter report from the raw capture.").set_defaults(func=handle_build)
    subs.add_parser("weekly", help="Append a snapshot and write the weekly delta.").set_defaults(func=handle_weekly)
    subs.add_parser("run", help="Run fetch, build and weekly in order.").set_defaults(func=handle_run)
    subs.add_parser("publish", help="Pull, run all stages, then commit and push the outputs.").set_defaults(func=handle_publish)
    return parser

def main(argv: Optional[list]=None) -> int:
    args = build_parser().parse_args(argv)
    try:
        args.func(args, quiet=args.quiet)
    except PulseError as e:
        print(f"Fatal error: {e}", file=sys.stderr)
        return 1
    return 0

def _stage_main(cmd: str) -> Callable[[], int]:
    def entry() -> int:
        return main([cmd])
    return entry

fetch_main  = _stage_main("fetch")
build_main  = _stage_main("build")
weekly_main = _stage_main("weekly")

if __name__ == "__main__":
    sys.exit(main())
