"""Running the whole queue: load, group, download, reconcile."""

import sys
from typing import List, Optional

from .config import MODE_BATCH
from .errors import ErrorAnalyzer, QueueFileError
from .groups import classify, run_group, run_group_adaptive
from .models import RunResult
from .queue_file import load_queue
from .reconcile import reconcile


def run_queue(args, error_analyzer: Optional[ErrorAnalyzer] = None) -> int:
    """Process every queued URL once. Returns the process exit status."""
    if error_analyzer is None:
        error_analyzer = ErrorAnalyzer()
        error_analyzer.set_error_log_path(getattr(args, "error_log", None))

    try:
        urls = load_queue(args.queue_file)
    except QueueFileError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    groups = classify(urls, args.group_rules, args.output, args.default_group)
    if not groups:
        print(f"Error: No URLs to download in {args.queue_file}", file=sys.stderr)
        reconcile(args.queue_file, [])
        return 1

    print(
        f"Mode: {args.mode}. Groups: "
        + ", ".join(f"{group.name} ({len(group.urls)})" for group in groups)
    )

    run = run_group if args.mode == MODE_BATCH else run_group_adaptive
    results: List[RunResult] = []
    for group in groups:
        results.append(run(group, args, error_analyzer=error_analyzer))

    print("\n" + "=" * 70)
    print("Run Summary")
    print("=" * 70)
    for result in results:
        status = "ok" if result.succeeded else f"failed (exit {result.exit_code})"
        print(f"{result.group}: {status}")
    print("=" * 70)

    error_analyzer.print_summary()

    try:
        cleared = reconcile(args.queue_file, results)
    except QueueFileError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    return 0 if cleared else 1
