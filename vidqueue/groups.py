"""Classifying queued URLs into groups and running each group."""

import contextlib
import os
import sys
import tempfile
from typing import Dict, Iterable, Iterator, List, Optional, Sequence

from yt_dlp.utils import read_batch_urls

from . import downloader
from .errors import ErrorAnalyzer
from .ladder import process_url
from .logger import DownloadLogger
from .models import (
    DEFAULT_GROUP,
    DEFAULT_GROUP_RULES,
    MISSING_TOOL_EXIT_CODE,
    Group,
    GroupRule,
    RunResult,
)
from .ytdlp_options import build_ydl_options


def classify_url(
    url: str,
    rules: Sequence[GroupRule] = DEFAULT_GROUP_RULES,
    default_group: str = DEFAULT_GROUP,
) -> str:
    """Name of the first rule matching *url*, else *default_group*."""
    for rule in rules:
        if rule.matches(url):
            return rule.name
    return default_group


def classify(
    urls: Iterable[str],
    rules: Sequence[GroupRule] = DEFAULT_GROUP_RULES,
    output_root: str = "downloads",
    default_group: str = DEFAULT_GROUP,
) -> List[Group]:
    """Partition *urls* into groups, keeping queue order inside each group."""
    buckets: Dict[str, List[str]] = {}
    for url in urls:
        buckets.setdefault(classify_url(url, rules, default_group), []).append(url)
    return [Group.under(output_root, name, members) for name, members in buckets.items()]


@contextlib.contextmanager
def scratch_url_list(urls: Iterable[str], directory: Optional[str] = None) -> Iterator[str]:
    """Write *urls* to a temporary batch file that is removed on exit."""
    fd, path = tempfile.mkstemp(prefix="vidqueue-", suffix=".txt", dir=directory)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            for url in urls:
                handle.write(f"{url}\n")
        yield path
    finally:
        with contextlib.suppress(OSError):
            os.remove(path)


def _ensure_output_dir(group: Group) -> Optional[RunResult]:
    try:
        os.makedirs(group.output_dir, exist_ok=True)
    except OSError as exc:
        return RunResult(group.name, 1, f"Failed to create {group.output_dir}: {exc}")
    return None


def run_group(group: Group, args, error_analyzer: Optional[ErrorAnalyzer] = None) -> RunResult:
    """Download a whole group with one yt-dlp invocation and a fixed format."""
    failed = _ensure_output_dir(group)
    if failed:
        return failed

    logger = DownloadLogger(error_analyzer=error_analyzer)
    logger.set_context(group.name, None)
    print(f"\n=== Group {group.name}: {len(group.urls)} URL(s) -> {group.output_dir} ===")

    with scratch_url_list(group.urls) as batch_path:
        with open(batch_path, "r", encoding="utf-8") as batch:
            urls = read_batch_urls(batch)
        ydl_opts = build_ydl_options(
            args,
            args.format,
            group.output_dir,
            logger,
            ignore_errors=True,
        )
        result = downloader.run_ytdlp(urls, ydl_opts, logger, group=group.name)

    if result.exit_code == MISSING_TOOL_EXIT_CODE:
        print(f"[group={group.name}] A required executable is missing; group failed.", file=sys.stderr)
    print(f"[group={group.name}] Finished with exit code {result.exit_code}")
    return result


def run_group_adaptive(group: Group, args, error_analyzer: Optional[ErrorAnalyzer] = None) -> RunResult:
    """Download a group URL by URL, each with its own fallback ladder."""
    failed = _ensure_output_dir(group)
    if failed:
        return failed

    print(f"\n=== Group {group.name}: {len(group.urls)} URL(s) -> {group.output_dir} ===")
    failures: List[str] = []
    total = len(group.urls)

    for idx, url in enumerate(group.urls, start=1):
        print(f"\n[{idx}/{total}] [group={group.name}] {url}")
        outcome = process_url(
            url,
            args,
            output_dir=group.output_dir,
            group=group.name,
            error_analyzer=error_analyzer,
        )
        if not outcome:
            failures.append(f"{url} ({outcome.failure_reason or 'unknown'})")

    summary = f"{total - len(failures)}/{total} downloaded"
    print(f"[group={group.name}] {summary}")
    log_lines = [summary] + [f"failed: {entry}" for entry in failures]
    return RunResult(group.name, 1 if failures else 0, "\n".join(log_lines))
