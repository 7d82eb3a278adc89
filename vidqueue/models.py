"""Data models and constants for the batch downloader."""

import os
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Tuple


# Format selection
DEFAULT_HEIGHT_CEILING = 360
LEGACY_FORMAT_ID = "18"  # 360p progressive mp4, published for nearly every video
WORST_SELECTOR = "worst"
METADATA_FALLBACK_SPEC = f"{LEGACY_FORMAT_ID}/{WORST_SELECTOR}"
DEFAULT_BATCH_FORMAT = f"{LEGACY_FORMAT_ID}/best[height<={DEFAULT_HEIGHT_CEILING}]/{WORST_SELECTOR}"

# Download invocation
DEFAULT_ALTERNATE_CLIENT = "android"
DEFAULT_MERGE_OUTPUT_FORMAT = "mp4"
DEFAULT_OUTPUT_TEMPLATE = "%(title)s.%(ext)s"
MISSING_TOOL_EXIT_CODE = 127

# Environment variable names
ENV_COOKIES_FROM_BROWSER = "VIDQUEUE_COOKIES_FROM_BROWSER"
ENV_ALTERNATE_CLIENT = "VIDQUEUE_ALTERNATE_CLIENT"

DEFAULT_GROUP = "General"


def _optional_int(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _optional_float(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


@dataclass(frozen=True)
class FormatDescriptor:
    """One downloadable stream variant published for a video."""
    format_id: str
    vcodec: str = "none"
    acodec: str = "none"
    height: Optional[int] = None
    filesize: Optional[int] = None
    tbr: Optional[float] = None
    abr: Optional[float] = None

    @property
    def has_video(self) -> bool:
        return bool(self.vcodec) and self.vcodec != "none"

    @property
    def has_audio(self) -> bool:
        return bool(self.acodec) and self.acodec != "none"

    @classmethod
    def from_info(cls, entry: Dict[str, Any]) -> Optional["FormatDescriptor"]:
        """Build a descriptor from one entry of yt-dlp's ``formats`` list.

        Returns None for entries without a usable ``format_id``.
        """
        if not isinstance(entry, dict):
            return None
        format_id = entry.get("format_id")
        if format_id is None or str(format_id).strip() == "":
            return None

        filesize = _optional_int(entry.get("filesize"))
        if filesize is None:
            filesize = _optional_int(entry.get("filesize_approx"))

        return cls(
            format_id=str(format_id),
            vcodec=str(entry.get("vcodec") or "none"),
            acodec=str(entry.get("acodec") or "none"),
            height=_optional_int(entry.get("height")),
            filesize=filesize,
            tbr=_optional_float(entry.get("tbr")),
            abr=_optional_float(entry.get("abr")),
        )


@dataclass(frozen=True)
class Attempt:
    """One rung of the retry ladder.

    ``format_spec`` of None stands for the initial spec chosen for the URL.
    """
    format_spec: Optional[str]
    use_alternate_client: bool
    label: str

    def resolve(self, initial_spec: str) -> str:
        return self.format_spec if self.format_spec is not None else initial_spec


RETRY_LADDER: Tuple[Attempt, ...] = (
    Attempt(None, True, "initial+alternate-client"),
    Attempt(None, False, "initial"),
    Attempt(f"{LEGACY_FORMAT_ID}/best[height<={DEFAULT_HEIGHT_CEILING}]", False, "legacy-18"),
    Attempt(f"best[height<={DEFAULT_HEIGHT_CEILING}]", False, "best-360"),
    Attempt(WORST_SELECTOR, False, "worst"),
)


@dataclass(frozen=True)
class GroupRule:
    """Routes URLs containing any of ``patterns`` to the group ``name``."""
    name: str
    patterns: Tuple[str, ...]

    def matches(self, url: str) -> bool:
        return any(pattern and pattern in url for pattern in self.patterns)


# Checked top to bottom; the first matching rule wins.
DEFAULT_GROUP_RULES: Tuple[GroupRule, ...] = (
    GroupRule("Knowledge", ("list=PLknowledge",)),
    GroupRule("Music", ("music.youtube.com", "list=RD")),
    GroupRule("Shorts", ("/shorts/",)),
)


def parse_group_rules(raw: Iterable[Any]) -> Tuple[GroupRule, ...]:
    """Parse ``[{"name": ..., "patterns": [...]}, ...]`` from a config file."""
    rules: List[GroupRule] = []
    for idx, item in enumerate(raw):
        if not isinstance(item, dict):
            raise ValueError(f"group rule #{idx + 1} must be an object")
        name = str(item.get("name") or "").strip()
        if not name:
            raise ValueError(f"group rule #{idx + 1} is missing a name")
        patterns = item.get("patterns") or []
        if isinstance(patterns, str):
            patterns = [patterns]
        cleaned = tuple(str(p) for p in patterns if str(p).strip())
        if not cleaned:
            raise ValueError(f"group rule '{name}' has no patterns")
        rules.append(GroupRule(name, cleaned))
    return tuple(rules)


@dataclass(frozen=True)
class Group:
    """A named slice of the URL queue with its own output directory."""
    name: str
    urls: Tuple[str, ...]
    output_dir: str

    @classmethod
    def under(cls, output_root: str, name: str, urls: Iterable[str]) -> "Group":
        return cls(name=name, urls=tuple(urls), output_dir=os.path.join(output_root, name))


@dataclass(frozen=True)
class RunResult:
    """Outcome of one group run."""
    group: str
    exit_code: int
    output_log: str = ""

    @property
    def succeeded(self) -> bool:
        return self.exit_code == 0


@dataclass(frozen=True)
class DownloadOutcome:
    """Outcome of walking the retry ladder for a single URL."""
    url: str
    succeeded: bool
    attempts_made: int
    format_spec: Optional[str] = None
    failure_reason: Optional[str] = None
    categories: Tuple[str, ...] = field(default_factory=tuple)

    def __bool__(self) -> bool:
        return self.succeeded
