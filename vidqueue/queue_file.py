"""Reading and clearing the persisted URL queue."""

import contextlib
import os
from typing import Iterable, List

from .errors import QueueFileError


def parse_queue_line(line: str) -> str:
    """Return the URL on *line*, or an empty string for blanks and comments."""
    stripped = line.strip()
    if not stripped or stripped.startswith("#"):
        return ""
    return stripped


def parse_queue_lines(lines: Iterable[str]) -> List[str]:
    """Return the URLs in *lines* in order, skipping blanks and comments."""
    urls: List[str] = []
    for line in lines:
        url = parse_queue_line(line)
        if url:
            urls.append(url)
    return urls


def _read_queue(path: str) -> List[str]:
    try:
        with open(path, "r", encoding="utf-8") as f:
            return parse_queue_lines(f)
    except FileNotFoundError as exc:
        raise QueueFileError(f"Queue file not found: {path}") from exc
    except (OSError, UnicodeDecodeError) as exc:
        raise QueueFileError(f"Failed to read queue file {path}: {exc}") from exc


def load_queue(path: str) -> List[str]:
    """Load pending URLs from the queue file."""
    urls = _read_queue(path)
    print(f"Loaded {len(urls)} URL{'s' if len(urls) != 1 else ''} from {path}")
    return urls


def pending_lines(path: str) -> List[str]:
    """URLs still listed in the queue file; empty if it cannot be read."""
    try:
        return _read_queue(path)
    except QueueFileError:
        return []


def clear_queue(path: str) -> None:
    """Empty the queue file, replacing it atomically."""
    temp_path = f"{path}.tmp"
    try:
        with open(temp_path, "w", encoding="utf-8"):
            pass
        os.replace(temp_path, path)
    except OSError as exc:
        with contextlib.suppress(OSError):
            os.remove(temp_path)
        raise QueueFileError(f"Failed to clear queue file {path}: {exc}") from exc
