"""Deciding whether the URL queue can be cleared after a run."""

import sys
from typing import Sequence

from .models import RunResult
from .queue_file import clear_queue, pending_lines


def reconcile(queue_path: str, results: Sequence[RunResult]) -> bool:
    """Clear the queue file if every group succeeded.

    Success is only known per group, so a single failure keeps the whole
    queue for the next run. Returns True when the queue was cleared.
    """
    if not results:
        print("No groups were run; leaving the queue untouched.", file=sys.stderr)
        return False

    failed = [result for result in results if not result.succeeded]
    if not failed:
        clear_queue(queue_path)
        print(f"All {len(results)} group(s) succeeded; cleared {queue_path}.")
        return True

    print(
        f"{len(failed)} of {len(results)} group(s) failed: "
        + ", ".join(f"{result.group} (exit {result.exit_code})" for result in failed),
        file=sys.stderr,
    )
    remaining = pending_lines(queue_path)
    print(f"Keeping {len(remaining)} URL(s) in {queue_path} for the next run:", file=sys.stderr)
    for url in remaining:
        print(f"  {url}", file=sys.stderr)
    return False
