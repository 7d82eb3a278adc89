"""yt-dlp options builder."""

import os
from typing import Dict, List

from yt_dlp.utils import parse_bytes

from .logger import DownloadLogger
from .models import DEFAULT_ALTERNATE_CLIENT, DEFAULT_OUTPUT_TEMPLATE


def build_accelerator_args(args) -> List[str]:
    """Command-line flags passed to aria2c for each download."""
    return [
        "-x", str(args.connections),
        "-s", str(args.splits),
        "-k", str(args.min_split_size),
        "-j", str(args.max_concurrent),
    ]


def build_extractor_args(args, use_alternate_client: bool) -> Dict[str, Dict[str, List[str]]]:
    if not use_alternate_client:
        return {}
    client = getattr(args, "alternate_client", None) or DEFAULT_ALTERNATE_CLIENT
    return {"youtube": {"player_client": [client]}}


def build_metadata_options(args, logger: DownloadLogger, use_alternate_client: bool) -> dict:
    """Options for a metadata-only lookup (no download)."""
    ydl_opts = {
        "skip_download": True,
        "noplaylist": True,
        "quiet": True,
        "no_warnings": True,
        "logger": logger,
    }
    if args.cookies_from_browser:
        ydl_opts["cookiesfrombrowser"] = (args.cookies_from_browser,)
    extractor_args = build_extractor_args(args, use_alternate_client)
    if extractor_args:
        ydl_opts["extractor_args"] = extractor_args
    return ydl_opts


def build_ydl_options(
    args,
    format_spec: str,
    output_dir: str,
    logger: DownloadLogger,
    use_alternate_client: bool = False,
    ignore_errors: bool = False,
    noplaylist: bool = False,
) -> dict:
    """Build the yt-dlp options dictionary for a download invocation."""
    ydl_opts = {
        "format": format_spec,
        "outtmpl": os.path.join(output_dir, DEFAULT_OUTPUT_TEMPLATE),
        "continuedl": True,
        "noplaylist": noplaylist,
        "ignoreerrors": "only_download" if ignore_errors else False,
        "retries": 5,
        "fragment_retries": 3,
        "quiet": False,
        "no_warnings": False,
        "logger": logger,
    }

    merge_format = getattr(args, "merge_output_format", None)
    if merge_format:
        ydl_opts["merge_output_format"] = merge_format

    if not getattr(args, "no_accelerator", False):
        ydl_opts["external_downloader"] = {"default": "aria2c"}
        ydl_opts["external_downloader_args"] = {"aria2c": build_accelerator_args(args)}

    if args.concurrent_fragments:
        ydl_opts["concurrent_fragment_downloads"] = args.concurrent_fragments
    chunk_size = parse_bytes(str(args.http_chunk_size)) if args.http_chunk_size else None
    if chunk_size:
        ydl_opts["http_chunk_size"] = chunk_size
    if args.cookies_from_browser:
        ydl_opts["cookiesfrombrowser"] = (args.cookies_from_browser,)
    if getattr(args, "archive", None):
        ydl_opts["download_archive"] = args.archive

    extractor_args = build_extractor_args(args, use_alternate_client)
    if extractor_args:
        ydl_opts["extractor_args"] = extractor_args

    debug_parts = [f"format={format_spec}", f"output={output_dir}"]
    if merge_format:
        debug_parts.append(f"merge_output_format={merge_format}")
    if "external_downloader" in ydl_opts:
        debug_parts.append("downloader=aria2c " + " ".join(build_accelerator_args(args)))
    else:
        debug_parts.append("downloader=native")
    if extractor_args:
        debug_parts.append(f"player_client={extractor_args['youtube']['player_client'][0]}")
    if args.cookies_from_browser:
        debug_parts.append(f"cookies={args.cookies_from_browser}")
    print("Constructed yt-dlp options: " + ", ".join(debug_parts))

    return ydl_opts

