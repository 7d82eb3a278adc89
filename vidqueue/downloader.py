"""The single place where yt-dlp is invoked for downloads."""

from typing import List

import yt_dlp
from yt_dlp.utils import DownloadCancelled, DownloadError, ExtractorError

from .logger import DownloadLogger
from .models import MISSING_TOOL_EXIT_CODE, RunResult


def run_ytdlp(urls: List[str], ydl_opts: dict, logger: DownloadLogger, group: str = "") -> RunResult:
    """Download *urls* with yt-dlp and report the exit status and output.

    yt-dlp's own return code is used when it finishes; extraction errors map
    to 1 and a missing executable (ffmpeg, aria2c) maps to 127.
    """
    logger.reset()
    try:
        with yt_dlp.YoutubeDL(ydl_opts) as ydl:
            exit_code = ydl.download(urls)
    except (DownloadError, ExtractorError, DownloadCancelled) as exc:
        logger.record_exception(exc)
        exit_code = 1
    except FileNotFoundError as exc:
        logger.record_exception(exc)
        exit_code = MISSING_TOOL_EXIT_CODE
    except OSError as exc:
        logger.record_exception(exc)
        exit_code = 1
    except Exception as exc:  # pragma: no cover - yt-dlp postprocessor/plugin failures
        logger.record_exception(exc)
        exit_code = 1

    return RunResult(group=group, exit_code=int(exit_code or 0), output_log=logger.output_log)
