"""Polling the queue file and re-running downloads when it changes."""

import os
import time
from typing import Callable, List, Optional

from .queue_file import pending_lines


def watch_queue_file(
    path: str,
    args,
    process_func: Callable[..., int],
    sleep: Callable[[float], None] = time.sleep,
    max_checks: Optional[int] = None,
) -> None:
    """Watch *path* and call ``process_func(args)`` when new URLs show up."""
    interval = args.watch_interval if args.watch_interval and args.watch_interval > 0 else 300.0
    last_mtime = None
    last_contents: Optional[List[str]] = None
    checks = 0

    print(f"Watching {path} for updates (checking every {interval} seconds)...")

    while max_checks is None or checks < max_checks:
        checks += 1
        try:
            mtime = os.path.getmtime(path)
        except FileNotFoundError:
            print(f"Queue file not found: {path}. Waiting for it to appear...")
            sleep(interval)
            continue

        if last_mtime is None or mtime != last_mtime:
            urls = pending_lines(path)
            if not urls:
                print(f"No URLs queued in {path}.")
            elif urls != last_contents:
                if last_contents is None:
                    print("Initial queue loaded. Starting downloads...")
                else:
                    print("Detected update to the queue. Running downloads...")
                process_func(args)
            else:
                print(f"{os.path.basename(path)} timestamp changed but content is the same; skipping downloads.")
            last_contents = urls

            # Reconciling may have rewritten the file; track its new timestamp
            try:
                last_mtime = os.path.getmtime(path)
            except FileNotFoundError:
                last_mtime = None

        sleep(interval)
