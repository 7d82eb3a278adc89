"""Batch video downloader package."""

# Import main components for easier access
from .config import (
    MODE_ADAPTIVE,
    MODE_BATCH,
    apply_environment_defaults,
    load_config_file,
    parse_args,
    positive_int,
)
from .downloader import run_ytdlp
from .errors import ErrorAnalyzer, QueueFileError, SetupError, classify_failure_text
from .formats import select_format
from .groups import classify, classify_url, run_group, run_group_adaptive, scratch_url_list
from .ladder import choose_initial_spec, download_with_fallback, process_url
from .logger import DownloadLogger
from .metadata import fetch_formats, parse_formats
from .models import (
    DEFAULT_GROUP,
    DEFAULT_GROUP_RULES,
    DEFAULT_HEIGHT_CEILING,
    METADATA_FALLBACK_SPEC,
    RETRY_LADDER,
    Attempt,
    DownloadOutcome,
    FormatDescriptor,
    Group,
    GroupRule,
    RunResult,
)
from .queue_file import clear_queue, load_queue, parse_queue_lines, pending_lines
from .reconcile import reconcile
from .runner import run_queue
from .tools import check_tools, ensure_tools, run_health_check
from .watcher import watch_queue_file
from .ytdlp_options import build_ydl_options

__all__ = [
    # Main entry points
    "parse_args",
    "apply_environment_defaults",
    "run_queue",
    "run_health_check",
    "watch_queue_file",
    # Queue handling
    "load_queue",
    "parse_queue_lines",
    "pending_lines",
    "clear_queue",
    "reconcile",
    # Format selection and downloads
    "fetch_formats",
    "parse_formats",
    "select_format",
    "choose_initial_spec",
    "download_with_fallback",
    "process_url",
    "run_ytdlp",
    "build_ydl_options",
    # Groups
    "classify",
    "classify_url",
    "run_group",
    "run_group_adaptive",
    "scratch_url_list",
    # Models and data structures
    "Attempt",
    "DownloadOutcome",
    "FormatDescriptor",
    "Group",
    "GroupRule",
    "RunResult",
    "DownloadLogger",
    "ErrorAnalyzer",
    "QueueFileError",
    "SetupError",
    "classify_failure_text",
    # Tools and configuration
    "check_tools",
    "ensure_tools",
    "load_config_file",
    "positive_int",
    # Constants
    "DEFAULT_GROUP",
    "DEFAULT_GROUP_RULES",
    "DEFAULT_HEIGHT_CEILING",
    "METADATA_FALLBACK_SPEC",
    "MODE_ADAPTIVE",
    "MODE_BATCH",
    "RETRY_LADDER",
]
