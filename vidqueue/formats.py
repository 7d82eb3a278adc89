"""Choosing a yt-dlp format selector from a video's published formats."""

from typing import Iterable, Optional

from .models import (
    DEFAULT_HEIGHT_CEILING,
    LEGACY_FORMAT_ID,
    WORST_SELECTOR,
    FormatDescriptor,
)


def _within_ceiling(fmt: FormatDescriptor, height_ceiling: int) -> bool:
    return fmt.height is not None and fmt.height <= height_ceiling


def _missing_last(value) -> tuple:
    # Sort key helper: known values first, then unknown ones.
    return (value is None, value if value is not None else 0)


def select_format(
    formats: Optional[Iterable[FormatDescriptor]],
    height_ceiling: int = DEFAULT_HEIGHT_CEILING,
) -> str:
    """Return the format selector to request for a video.

    Tried in order, first match wins:

    1. the tallest muxed format (video and audio) at or under the ceiling,
       smallest file first among equal heights;
    2. the tallest video-only format at or under the ceiling (higher total
       bitrate first) paired with the audio-only format with the highest
       audio bitrate, as ``"<video>+<audio>"``;
    3. the legacy ``"18"`` format when it is published;
    4. ``"worst"``.

    Never raises; ``None`` or an empty list yields ``"worst"``.
    """
    candidates = [fmt for fmt in (formats or []) if isinstance(fmt, FormatDescriptor)]
    if not candidates:
        return WORST_SELECTOR

    combined = [
        fmt for fmt in candidates
        if fmt.has_video and fmt.has_audio and _within_ceiling(fmt, height_ceiling)
    ]
    if combined:
        combined.sort(key=lambda fmt: (-fmt.height, _missing_last(fmt.filesize)))
        return combined[0].format_id

    video_only = [
        fmt for fmt in candidates
        if fmt.has_video and not fmt.has_audio and _within_ceiling(fmt, height_ceiling)
    ]
    audio_only = [fmt for fmt in candidates if fmt.has_audio and not fmt.has_video]
    if video_only and audio_only:
        video_only.sort(
            key=lambda fmt: (-fmt.height, _missing_last(-fmt.tbr if fmt.tbr is not None else None))
        )
        audio_only.sort(key=lambda fmt: _missing_last(-fmt.abr if fmt.abr is not None else None))
        return f"{video_only[0].format_id}+{audio_only[0].format_id}"

    if any(fmt.format_id == LEGACY_FORMAT_ID for fmt in candidates):
        return LEGACY_FORMAT_ID

    return WORST_SELECTOR


def describe_format(fmt: FormatDescriptor) -> str:
    """Short human-readable label such as ``18 360p avc1 mp4a``."""
    parts = [fmt.format_id]
    if fmt.height:
        parts.append(f"{fmt.height}p")
    if fmt.has_video:
        parts.append(fmt.vcodec)
    if fmt.has_audio:
        parts.append(fmt.acodec)
    if fmt.abr:
        parts.append(f"{fmt.abr:g}k")
    if fmt.filesize:
        parts.append(f"{fmt.filesize / (1024 * 1024):.1f}MiB")
    return " ".join(parts)
