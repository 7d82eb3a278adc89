"""Configuration and argument parsing for the batch downloader."""

import argparse
import json
import os
import sys
from typing import Any, Dict, List, Optional

from .models import (
    DEFAULT_ALTERNATE_CLIENT,
    DEFAULT_BATCH_FORMAT,
    DEFAULT_GROUP,
    DEFAULT_GROUP_RULES,
    DEFAULT_HEIGHT_CEILING,
    DEFAULT_MERGE_OUTPUT_FORMAT,
    ENV_ALTERNATE_CLIENT,
    ENV_COOKIES_FROM_BROWSER,
    parse_group_rules,
)

MODE_ADAPTIVE = "adaptive"
MODE_BATCH = "batch"

VALID_CONFIG_KEYS = {
    "queue_file", "output", "mode", "max_height", "format", "merge_output_format",
    "cookies_from_browser", "alternate_client", "connections", "splits",
    "min_split_size", "max_concurrent", "concurrent_fragments", "http_chunk_size",
    "no_accelerator", "archive", "error_log", "watch_interval", "groups",
    "default_group",
}


def positive_int(value: str) -> int:
    """Return *value* parsed as a positive integer for argparse."""

    try:
        parsed = int(value)
    except (TypeError, ValueError) as exc:
        raise argparse.ArgumentTypeError("Expected a positive integer") from exc

    if parsed <= 0:
        raise argparse.ArgumentTypeError("Expected a positive integer")

    return parsed


def load_config_file(config_path: str) -> Dict[str, Any]:
    """Load configuration defaults from a JSON file.

    A missing or malformed file yields an empty dictionary; unknown keys are
    reported and dropped.
    """
    if not os.path.exists(config_path):
        return {}

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            config = json.load(f)
    except json.JSONDecodeError as exc:
        print(f"Warning: Failed to parse config file {config_path}: {exc}. Ignoring.", file=sys.stderr)
        return {}
    except OSError as exc:
        print(f"Warning: Failed to read config file {config_path}: {exc}. Ignoring.", file=sys.stderr)
        return {}

    if not isinstance(config, dict):
        print(f"Warning: Config file {config_path} must contain a JSON object. Ignoring.", file=sys.stderr)
        return {}

    invalid_keys = set(config.keys()) - VALID_CONFIG_KEYS
    if invalid_keys:
        print(f"Warning: Unknown config keys ignored: {', '.join(sorted(invalid_keys))}", file=sys.stderr)

    return {k: v for k, v in config.items() if k in VALID_CONFIG_KEYS}


def _config_path_from_argv(argv: List[str]) -> str:
    if "--config" in argv:
        idx = argv.index("--config")
        if idx + 1 < len(argv):
            return argv[idx + 1]
    for item in argv:
        if item.startswith("--config="):
            return item.split("=", 1)[1]
    return "config.json"


def build_parser(config: Dict[str, Any]) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description=(
            "Download every URL listed in a queue file with yt-dlp, sorted into group "
            "directories, falling back to safer formats when a download fails."
        )
    )
    parser.add_argument(
        "--config",
        default="config.json",
        help="Path to JSON configuration file (default: config.json)",
    )
    parser.add_argument(
        "--queue-file",
        default=config.get("queue_file", "urls.txt"),
        help="Text file with one URL per line; '#' starts a comment (default: urls.txt)",
    )
    parser.add_argument("--output", default=config.get("output", "./downloads"), help="Output root directory (default: ./downloads)")
    parser.add_argument(
        "--mode",
        choices=[MODE_ADAPTIVE, MODE_BATCH],
        default=config.get("mode", MODE_ADAPTIVE),
        help=(
            "'adaptive' picks a format per URL and walks the fallback ladder; "
            "'batch' runs one yt-dlp invocation per group with --format (default: adaptive)"
        ),
    )
    parser.add_argument(
        "--max-height",
        type=positive_int,
        default=config.get("max_height", DEFAULT_HEIGHT_CEILING),
        help=f"Resolution ceiling used when choosing formats (default: {DEFAULT_HEIGHT_CEILING})",
    )
    parser.add_argument(
        "--format",
        default=config.get("format", DEFAULT_BATCH_FORMAT),
        help=f"Format selector used in batch mode (default: {DEFAULT_BATCH_FORMAT})",
    )
    parser.add_argument(
        "--merge-output-format",
        default=config.get("merge_output_format", DEFAULT_MERGE_OUTPUT_FORMAT),
        help=f"Container for merged downloads (default: {DEFAULT_MERGE_OUTPUT_FORMAT})",
    )
    parser.add_argument(
        "--cookies-from-browser",
        default=config.get("cookies_from_browser"),
        help="Load cookies from this browser (chrome, firefox, edge, ...)",
    )
    parser.add_argument(
        "--alternate-client",
        default=config.get("alternate_client"),
        help=(
            "YouTube player client used for the first download attempt and metadata "
            f"lookups (default: {DEFAULT_ALTERNATE_CLIENT})"
        ),
    )
    parser.add_argument("--connections", type=positive_int, default=config.get("connections", 16), help="aria2c connections per server (default: 16)")
    parser.add_argument("--splits", type=positive_int, default=config.get("splits", 16), help="aria2c split count (default: 16)")
    parser.add_argument("--min-split-size", default=config.get("min_split_size", "1M"), help="aria2c minimum split size (default: 1M)")
    parser.add_argument("--max-concurrent", type=positive_int, default=config.get("max_concurrent", 16), help="aria2c concurrent downloads (default: 16)")
    parser.add_argument(
        "--concurrent-fragments",
        type=positive_int,
        default=config.get("concurrent_fragments", 4),
        help="Concurrent fragment downloads for HLS/DASH (default: 4)",
    )
    parser.add_argument("--http-chunk-size", default=config.get("http_chunk_size", "10M"), help="HTTP chunk size (default: 10M)")
    parser.add_argument(
        "--no-accelerator",
        action="store_true",
        default=config.get("no_accelerator", False),
        help="Use yt-dlp's native downloader instead of aria2c",
    )
    parser.add_argument("--archive", default=config.get("archive"), help="yt-dlp download archive file used to skip finished videos")
    parser.add_argument("--error-log", default=config.get("error_log"), help="Append categorized failures to this file")
    parser.add_argument("--watch", action="store_true", help="Keep running and process the queue whenever the file changes")
    parser.add_argument(
        "--watch-interval",
        type=float,
        default=config.get("watch_interval", 300.0),
        help="Seconds between queue file checks in --watch mode (default: 300)",
    )
    parser.add_argument(
        "--health-check",
        action="store_true",
        help="Check the external tools and a metadata lookup, then exit",
    )
    return parser


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments on top of config file defaults."""
    if argv is None:
        argv = sys.argv[1:]

    config_path = _config_path_from_argv(argv)
    config = load_config_file(config_path)
    if config:
        print(f"Loaded configuration from {config_path}")

    parser = build_parser(config)
    args = parser.parse_args(argv)

    try:
        args.group_rules = (
            parse_group_rules(config["groups"]) if "groups" in config else DEFAULT_GROUP_RULES
        )
    except ValueError as exc:
        parser.error(f"invalid 'groups' in {config_path}: {exc}")
    args.default_group = str(config.get("default_group") or DEFAULT_GROUP)
    return args


def _normalize_env_str(value: Optional[str]) -> Optional[str]:
    if not value:
        return None
    stripped = value.strip()
    return stripped if stripped else None


def apply_environment_defaults(args, environ: Optional[Dict[str, str]] = None) -> None:
    """Fill options left unset on the command line from the environment."""

    if environ is None:
        environ = os.environ

    if not getattr(args, "cookies_from_browser", None):
        env_cookie = _normalize_env_str(environ.get(ENV_COOKIES_FROM_BROWSER))
        if env_cookie:
            args.cookies_from_browser = env_cookie

    if not getattr(args, "alternate_client", None):
        env_client = _normalize_env_str(environ.get(ENV_ALTERNATE_CLIENT))
        args.alternate_client = env_client or DEFAULT_ALTERNATE_CLIENT
