"""Per-URL download with a fixed ladder of fallback format selectors."""

import sys
from typing import List, Optional, Sequence

from . import downloader
from .errors import ErrorAnalyzer
from .formats import describe_format, select_format
from .logger import DownloadLogger
from .metadata import fetch_formats
from .models import METADATA_FALLBACK_SPEC, RETRY_LADDER, Attempt, DownloadOutcome
from .ytdlp_options import build_ydl_options


def download_with_fallback(
    initial_spec: str,
    url: str,
    args,
    output_dir: Optional[str] = None,
    group: Optional[str] = None,
    error_analyzer: Optional[ErrorAnalyzer] = None,
    ladder: Sequence[Attempt] = RETRY_LADDER,
) -> DownloadOutcome:
    """Walk the ladder for *url* until one rung exits cleanly.

    Every non-zero exit advances to the next rung; the captured output is
    only classified for reporting. Never raises.
    """
    output_dir = output_dir or args.output
    logger = DownloadLogger(error_analyzer=error_analyzer)
    categories: List[str] = []
    total = len(ladder)

    for idx, attempt in enumerate(ladder, start=1):
        format_spec = attempt.resolve(initial_spec)
        logger.set_context(group, url, attempt.label)
        print(
            f"[{attempt.label}] Attempt {idx}/{total} for {url} "
            f"with format {format_spec!r}"
            + (f" via client {args.alternate_client}" if attempt.use_alternate_client else "")
        )

        ydl_opts = build_ydl_options(
            args,
            format_spec,
            output_dir,
            logger,
            use_alternate_client=attempt.use_alternate_client,
            noplaylist=True,
        )
        result = downloader.run_ytdlp([url], ydl_opts, logger, group=group or "")

        if result.succeeded:
            print(f"[{attempt.label}] Downloaded {url} with format {format_spec!r}")
            logger.set_context(None, None)
            return DownloadOutcome(
                url=url,
                succeeded=True,
                attempts_made=idx,
                format_spec=format_spec,
                categories=tuple(categories),
            )

        category = logger.failure_category()
        categories.append(category)
        if idx < total:
            print(
                f"[{attempt.label}] Failed with exit code {result.exit_code} ({category}); "
                f"trying {ladder[idx].label} next...",
                file=sys.stderr,
            )
        else:
            print(
                f"[{attempt.label}] Failed with exit code {result.exit_code} ({category}); "
                f"no fallbacks left for {url}",
                file=sys.stderr,
            )

    logger.set_context(None, None)
    return DownloadOutcome(
        url=url,
        succeeded=False,
        attempts_made=total,
        failure_reason=categories[-1] if categories else None,
        categories=tuple(categories),
    )


def choose_initial_spec(url: str, args) -> str:
    """Pick the first format selector for *url* from its published formats."""
    formats = fetch_formats(url, args, use_alternate_client=True)
    if formats is None:
        print(f"No format metadata for {url}; starting with {METADATA_FALLBACK_SPEC!r}")
        return METADATA_FALLBACK_SPEC
    spec = select_format(formats, args.max_height)
    chosen = [describe_format(fmt) for fmt in formats if fmt.format_id in spec.split("+")]
    detail = f" [{'; '.join(chosen)}]" if chosen else ""
    print(f"Selected format {spec!r}{detail} for {url} (max height {args.max_height})")
    return spec


def process_url(
    url: str,
    args,
    output_dir: Optional[str] = None,
    group: Optional[str] = None,
    error_analyzer: Optional[ErrorAnalyzer] = None,
) -> DownloadOutcome:
    """Fetch metadata, choose a format and download one URL."""
    initial_spec = choose_initial_spec(url, args)
    return download_with_fallback(
        initial_spec,
        url,
        args,
        output_dir=output_dir,
        group=group,
        error_analyzer=error_analyzer,
    )
