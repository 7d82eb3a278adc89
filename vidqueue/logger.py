"""yt-dlp logger adapter that captures output text for failure analysis."""

import sys
from typing import List, Optional

from .errors import RECOVERABLE_CATEGORIES, ErrorAnalyzer, classify_failure_text


class DownloadLogger:
    """Logger handed to yt-dlp.

    Every message yt-dlp emits is echoed with the current context and kept
    in ``lines`` so the caller can inspect the output of a failed run.
    """

    IGNORED_FRAGMENTS = (
        "does not have a shorts tab",
    )

    def __init__(
        self,
        error_analyzer: Optional[ErrorAnalyzer] = None,
        quiet: bool = False,
    ) -> None:
        self.lines: List[str] = []
        self.error_messages: List[str] = []
        self.current_group: Optional[str] = None
        self.current_url: Optional[str] = None
        self.current_attempt: Optional[str] = None
        self.quiet = quiet
        self._error_analyzer = error_analyzer

    def set_context(
        self,
        group: Optional[str],
        url: Optional[str],
        attempt: Optional[str] = None,
    ) -> None:
        self.current_group = group
        self.current_url = url
        self.current_attempt = attempt

    def reset(self) -> None:
        """Forget captured output before the next invocation."""
        self.lines = []
        self.error_messages = []

    @property
    def output_log(self) -> str:
        return "\n".join(self.lines)

    def failure_category(self) -> str:
        """Category of the most telling failure seen since the last reset."""
        categories = [classify_failure_text(text) for text in self.error_messages or self.lines]
        for category in categories:
            if category in RECOVERABLE_CATEGORIES:
                return category
        for category in categories:
            if category != "unknown":
                return category
        return "unknown"

    def _format_with_context(self, message: str) -> str:
        context_parts = []
        if self.current_group:
            context_parts.append(f"group={self.current_group}")
        if self.current_attempt:
            context_parts.append(f"attempt={self.current_attempt}")
        if self.current_url:
            context_parts.append(f"url={self.current_url}")
        if context_parts:
            return f"[{' '.join(context_parts)}] {message}"
        return message

    def _print(self, message: str, file=sys.stdout) -> None:
        print(self._format_with_context(message), file=file)

    def _is_ignored(self, text: str) -> bool:
        lowered = text.lower()
        return any(fragment in lowered for fragment in self.IGNORED_FRAGMENTS)

    @staticmethod
    def _ensure_text(message) -> str:
        if isinstance(message, bytes):
            return message.decode("utf-8", "ignore")
        return str(message)

    def debug(self, message) -> None:  # yt-dlp routes regular screen output here
        text = self._ensure_text(message)
        if text.startswith("[debug] "):
            return
        self.info(text)

    def info(self, message) -> None:
        text = self._ensure_text(message)
        self.lines.append(text)
        if not self.quiet:
            self._print(text)

    def warning(self, message) -> None:
        text = self._ensure_text(message)
        if self._is_ignored(text):
            return
        self.lines.append(text)
        if not self.quiet:
            self._print(text, file=sys.stderr)

    def error(self, message) -> None:
        text = self._ensure_text(message)
        if self._is_ignored(text):
            return
        self.lines.append(text)
        self.error_messages.append(text)
        if not self.quiet:
            self._print(text, file=sys.stderr)
        if self._error_analyzer:
            self._error_analyzer.categorize_and_record(self.current_url, text)

    def record_exception(self, exc: BaseException) -> None:
        text = self._ensure_text(str(exc)) or exc.__class__.__name__
        # yt-dlp reports through error() before raising; avoid counting twice
        if text in self.error_messages:
            return
        self.error(text)
