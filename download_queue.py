#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
download_queue.py

Download every URL listed in a queue file using yt-dlp.

URLs are sorted into group directories (e.g. Knowledge, Music, Shorts,
General). In the default adaptive mode each URL gets a format chosen from
its published formats (360p or lower by default) and falls back through
safer selectors when a download fails. The queue file is emptied only when
every group succeeded.

Usage:
    python download_queue.py --queue-file urls.txt
    python download_queue.py --queue-file urls.txt --mode batch --format "18/worst"
    python download_queue.py --health-check
"""

from __future__ import annotations

import os
import sys
from typing import List, Optional

from vidqueue import (
    SetupError,
    apply_environment_defaults,
    ensure_tools,
    parse_args,
    run_health_check,
    run_queue,
    watch_queue_file,
)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    apply_environment_defaults(args)

    if args.health_check:
        return run_health_check(args)

    try:
        tools = ensure_tools(args)
    except SetupError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    for name, path in tools.items():
        print(f"Using {name}: {path}")

    if not args.watch and not os.path.exists(args.queue_file):
        print(f"Error: Queue file not found: {args.queue_file}", file=sys.stderr)
        return 1

    os.makedirs(args.output, exist_ok=True)

    if args.watch:
        try:
            watch_queue_file(args.queue_file, args, run_queue)
        except KeyboardInterrupt:
            print("\nStopping queue watcher.")
        return 0

    status = run_queue(args)
    print("\nAll done." if status == 0 else "\nFinished with failures.")
    return status


if __name__ == "__main__":
    sys.exit(main())
