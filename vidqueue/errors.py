"""Failure analysis and exception types for the batch downloader."""

import sys
import time
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional


class SetupError(Exception):
    """Raised when a required external tool is missing."""


class QueueFileError(Exception):
    """Raised when the URL queue file cannot be read or written."""


# Ordered: the first category with a matching fragment wins.
FAILURE_MARKERS = (
    ("format_unavailable", (
        "requested format is not available",
        "requested format not available",
        "no video formats found",
        "format is not available",
    )),
    ("media_type_mismatch", (
        "only images are available",
        "no video could be found",
        "is not a video",
        "this video is drm protected",
    )),
    ("client_skipped", (
        "skipping player response",
        "skipping unsupported client",
        "skipping client",
        "client has been skipped",
    )),
    ("rate_limit", ("http error 429", "too many requests", "http error 403", "forbidden")),
    ("video_unavailable", (
        "video unavailable",
        "this video is private",
        "has been removed",
        "content isn't available",
    )),
    ("auth_required", ("sign in to confirm", "login required", "members-only", "cookies")),
)

RECOVERABLE_CATEGORIES = frozenset({"format_unavailable", "media_type_mismatch", "client_skipped"})


def classify_failure_text(text: str) -> str:
    """Return the failure category for a chunk of yt-dlp output."""
    lowered = (text or "").lower()
    for category, fragments in FAILURE_MARKERS:
        if any(fragment in lowered for fragment in fragments):
            return category
    return "unknown"


@dataclass
class ErrorPattern:
    """Tracks occurrences of one failure category."""
    error_type: str
    count: int = 0
    urls: List[str] = field(default_factory=list)
    sample_messages: List[str] = field(default_factory=list)
    first_seen: Optional[float] = None
    last_seen: Optional[float] = None

    def record(self, url: Optional[str], message: str) -> None:
        self.count += 1
        timestamp = time.time()
        if self.first_seen is None:
            self.first_seen = timestamp
        self.last_seen = timestamp

        if url and url not in self.urls:
            self.urls.append(url)

        if len(self.sample_messages) < 5 and message not in self.sample_messages:
            self.sample_messages.append(message)


class ErrorAnalyzer:
    """Collects failed attempts per category and suggests what to try next."""

    def __init__(self) -> None:
        self.patterns: Dict[str, ErrorPattern] = {
            category: ErrorPattern(category) for category, _ in FAILURE_MARKERS
        }
        self.patterns["unknown"] = ErrorPattern("unknown")
        self.total_errors = 0
        self.error_log_path: Optional[str] = None

    def set_error_log_path(self, path: Optional[str]) -> None:
        self.error_log_path = path

    def categorize_and_record(self, url: Optional[str], error_message: str) -> str:
        """Categorize a failure and record it. Returns the category."""
        self.total_errors += 1
        category = classify_failure_text(error_message)
        self.patterns[category].record(url, error_message)

        if self.error_log_path:
            self._append_to_error_log(url, category, error_message)

        return category

    def _append_to_error_log(self, url: Optional[str], category: str, message: str) -> None:
        try:
            timestamp = datetime.now().isoformat()
            entry = f"[{timestamp}] [{category}] {url or 'unknown'}: {message}\n"
            with open(self.error_log_path, "a", encoding="utf-8") as f:
                f.write(entry)
        except OSError as e:
            # A broken error log must not fail the run
            print(f"Warning: Failed to write to error log: {e}", file=sys.stderr)

    def get_recommendations(self) -> List[str]:
        if self.total_errors == 0:
            return ["No errors detected - all downloads completed."]

        recommendations = []
        counts = {name: pattern.count for name, pattern in self.patterns.items()}

        if counts["format_unavailable"]:
            recommendations.append(
                f"Format unavailable ({counts['format_unavailable']} attempts): "
                "the fallback ladder already tried safer selectors. "
                "Try a higher --max-height if small formats are missing."
            )
        if counts["media_type_mismatch"]:
            recommendations.append(
                f"Media type mismatch ({counts['media_type_mismatch']} attempts): "
                "the URL may point at images, a live stream or DRM content."
            )
        if counts["client_skipped"]:
            recommendations.append(
                f"Client skipped ({counts['client_skipped']} attempts): "
                "the alternate client was refused. Try a different --alternate-client."
            )
        if counts["rate_limit"]:
            recommendations.append(
                f"Rate limiting ({counts['rate_limit']} attempts): "
                "wait before retrying or provide --cookies-from-browser."
            )
        if counts["video_unavailable"]:
            recommendations.append(
                f"Unavailable ({counts['video_unavailable']} attempts): "
                "the video is private, removed or region locked."
            )
        if counts["auth_required"]:
            recommendations.append(
                f"Authentication ({counts['auth_required']} attempts): "
                "sign in with your browser and pass --cookies-from-browser."
            )
        if counts["unknown"]:
            recommendations.append(
                f"Unknown errors ({counts['unknown']}): check the output above"
                + (f" or {self.error_log_path}" if self.error_log_path else "")
                + "."
            )
        return recommendations

    def print_summary(self) -> None:
        if self.total_errors == 0:
            return

        print("\n" + "=" * 70)
        print("Failure Analysis")
        print("=" * 70)
        print(f"Total failed attempts: {self.total_errors}\n")

        sorted_patterns = sorted(
            self.patterns.items(), key=lambda item: item[1].count, reverse=True
        )
        for name, pattern in sorted_patterns:
            if pattern.count:
                print(f"{name.replace('_', ' ').title()}: {pattern.count} occurrences")
                print(f"  Affected URLs: {len(pattern.urls)}")
                if pattern.sample_messages:
                    print(f"  Sample: {pattern.sample_messages[0][:80]}")
                print()

        print("Recommendations")
        print("-" * 70)
        for rec in self.get_recommendations():
            print(f"{rec}\n")

        if self.error_log_path:
            print(f"Detailed error log: {self.error_log_path}")
