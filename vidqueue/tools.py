"""External tool discovery and the health check."""

import shutil
import time
from typing import Dict, List, Optional

from yt_dlp.version import __version__ as YTDLP_VERSION

from .errors import SetupError
from .metadata import fetch_formats
from .formats import select_format

ACCELERATOR = "aria2c"
MUXER = "ffmpeg"

# A stable, long-lived video used to probe metadata access
PROBE_URL = "https://www.youtube.com/watch?v=jNQXAC9IVRw"


def find_tool(name: str) -> Optional[str]:
    """Absolute path of executable *name*, or None when it is not on PATH."""
    return shutil.which(name)


def required_tools(args) -> List[str]:
    tools = [MUXER]
    if not getattr(args, "no_accelerator", False):
        tools.append(ACCELERATOR)
    return tools


def check_tools(args) -> Dict[str, Optional[str]]:
    return {name: find_tool(name) for name in required_tools(args)}


def ensure_tools(args) -> Dict[str, str]:
    """Return tool paths, raising SetupError when any required one is missing."""
    found = check_tools(args)
    missing = [name for name, path in found.items() if not path]
    if missing:
        hint = ""
        if ACCELERATOR in missing:
            hint = f" Install {ACCELERATOR} or rerun with --no-accelerator."
        raise SetupError(f"Required tool(s) not found on PATH: {', '.join(missing)}.{hint}")
    return found


def run_health_check(args, probe_url: str = PROBE_URL) -> int:
    """Report tool availability and try one metadata lookup."""

    print("=" * 80)
    print("Batch Downloader Health Check".center(80))
    print("=" * 80)
    print()

    print(f"yt-dlp version: {YTDLP_VERSION}")
    healthy = True
    for name, path in check_tools(args).items():
        if path:
            print(f"✓ {name}: {path}")
        else:
            healthy = False
            print(f"✗ {name}: not found on PATH")
    print()

    print(f"Testing metadata lookup with: {probe_url}")
    print(f"Using alternate client: {args.alternate_client}")
    print(f"Using cookies: {args.cookies_from_browser or 'none'}")
    start_time = time.time()
    formats = fetch_formats(probe_url, args, use_alternate_client=True)
    elapsed = time.time() - start_time

    if formats:
        print(f"✓ {len(formats)} formats published ({elapsed:.2f}s)")
        print(f"✓ Selector at max height {args.max_height}: {select_format(formats, args.max_height)}")
    else:
        healthy = False
        print(f"✗ No format metadata returned ({elapsed:.2f}s)")
        print()
        print("Recommendations:")
        print("  1. Check your internet connection")
        print("  2. Try another --alternate-client")
        print("  3. Try using browser cookies: --cookies-from-browser chrome")

    print()
    print("=" * 80)
    print(f"Status: {'HEALTHY' if healthy else 'UNHEALTHY'}")
    return 0 if healthy else 1
