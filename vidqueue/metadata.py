"""Format metadata lookup through yt-dlp's info extraction."""

import sys
from datetime import datetime
from typing import List, Optional

import yt_dlp
from yt_dlp.utils import DownloadError, ExtractorError

from .logger import DownloadLogger
from .models import FormatDescriptor
from .ytdlp_options import build_metadata_options


def _log_with_timestamp(message: str) -> None:
    timestamp = datetime.now().strftime("%H:%M:%S")
    print(f"[{timestamp}] {message}")
    sys.stdout.flush()


def parse_formats(info: object) -> Optional[List[FormatDescriptor]]:
    """Extract format descriptors from a yt-dlp info dict.

    Returns None when the info is not a dict or carries no usable formats.
    """
    if not isinstance(info, dict):
        return None

    raw_formats = info.get("formats")
    if not isinstance(raw_formats, list):
        return None

    formats: List[FormatDescriptor] = []
    for entry in raw_formats:
        descriptor = FormatDescriptor.from_info(entry)
        if descriptor is not None:
            formats.append(descriptor)

    return formats or None


def fetch_formats(
    url: str,
    args,
    use_alternate_client: bool = True,
) -> Optional[List[FormatDescriptor]]:
    """Fetch the published formats for *url* without downloading anything.

    Any failure (yt-dlp error, unexpected result shape, no formats) returns
    None so the caller can fall back to a conservative selector.
    """
    logger = DownloadLogger(quiet=True)
    ydl_opts = build_metadata_options(args, logger, use_alternate_client)

    client_label = args.alternate_client if use_alternate_client else "default"
    _log_with_timestamp(f"[metadata] Fetching formats for {url} (client={client_label})")

    try:
        with yt_dlp.YoutubeDL(ydl_opts) as ydl:
            info = ydl.extract_info(url, download=False)
            info = ydl.sanitize_info(info)
    except (DownloadError, ExtractorError) as exc:
        _log_with_timestamp(f"[metadata] Lookup failed for {url}: {exc}")
        return None
    except Exception as exc:  # pragma: no cover - network stack failures surface as many types
        _log_with_timestamp(f"[metadata] Lookup failed for {url}: {exc.__class__.__name__}: {exc}")
        return None

    formats = parse_formats(info)
    if formats is None:
        _log_with_timestamp(f"[metadata] No formats published for {url}")
        return None

    _log_with_timestamp(f"[metadata] {len(formats)} format{'s' if len(formats) != 1 else ''} available for {url}")
    return formats
