"""End-to-end tests for a queue run and the command-line entry point."""

from __future__ import annotations

import sys
from pathlib import Path
from types import SimpleNamespace

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

import download_queue
from vidqueue import downloader, groups, tools
from vidqueue.models import DEFAULT_GROUP_RULES, DownloadOutcome, RunResult
from vidqueue.runner import run_queue

QUEUE = """# videos to fetch
https://www.youtube.com/watch?v=one

https://www.youtube.com/watch?v=two&list=PLknowledge1
https://www.youtube.com/shorts/three
"""


def make_args(tmp_path, **overrides):
    queue = tmp_path / "urls.txt"
    if not queue.exists():
        queue.write_text(QUEUE, encoding="utf-8")
    defaults = {
        "queue_file": str(queue),
        "output": str(tmp_path / "downloads"),
        "mode": "batch",
        "max_height": 360,
        "format": "18/worst",
        "merge_output_format": "mp4",
        "cookies_from_browser": None,
        "alternate_client": "android",
        "connections": 16,
        "splits": 16,
        "min_split_size": "1M",
        "max_concurrent": 16,
        "concurrent_fragments": 4,
        "http_chunk_size": "10M",
        "no_accelerator": False,
        "archive": None,
        "error_log": None,
        "group_rules": DEFAULT_GROUP_RULES,
        "default_group": "General",
    }
    defaults.update(overrides)
    return SimpleNamespace(**defaults)


def test_batch_run_clears_queue_when_every_group_succeeds(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    invoked = []
    monkeypatch.setattr(
        downloader,
        "run_ytdlp",
        lambda urls, opts, logger, group="": invoked.append((group, list(urls))) or RunResult(group, 0),
    )
    args = make_args(tmp_path)

    assert run_queue(args) == 0
    assert invoked == [
        ("General", ["https://www.youtube.com/watch?v=one"]),
        ("Knowledge", ["https://www.youtube.com/watch?v=two&list=PLknowledge1"]),
        ("Shorts", ["https://www.youtube.com/shorts/three"]),
    ]
    assert Path(args.queue_file).read_text(encoding="utf-8") == ""
    for name in ("General", "Knowledge", "Shorts"):
        assert (tmp_path / "downloads" / name).is_dir()


def test_one_failing_group_keeps_queue(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    invoked = []

    def fake_run_ytdlp(urls, opts, logger, group=""):
        invoked.append(group)
        return RunResult(group, 127 if group == "Knowledge" else 0)

    monkeypatch.setattr(downloader, "run_ytdlp", fake_run_ytdlp)
    args = make_args(tmp_path)

    assert run_queue(args) == 1
    assert invoked == ["General", "Knowledge", "Shorts"]
    assert Path(args.queue_file).read_text(encoding="utf-8") == QUEUE


def test_adaptive_mode_walks_each_url(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    processed = []

    def fake_process_url(url, args, output_dir=None, group=None, error_analyzer=None):
        processed.append((group, url))
        return DownloadOutcome(url, True, 1, format_spec="18")

    monkeypatch.setattr(groups, "process_url", fake_process_url)
    args = make_args(tmp_path, mode="adaptive")

    assert run_queue(args) == 0
    assert [group for group, _ in processed] == ["General", "Knowledge", "Shorts"]


def test_empty_queue_fails_without_downloading(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    queue = tmp_path / "urls.txt"
    queue.write_text("# nothing yet\n\n", encoding="utf-8")
    monkeypatch.setattr(downloader, "run_ytdlp", lambda *a, **k: pytest.fail("should not download"))
    args = make_args(tmp_path)

    assert run_queue(args) == 1
    assert queue.read_text(encoding="utf-8") == "# nothing yet\n\n"


def test_missing_queue_file_fails(tmp_path) -> None:
    args = make_args(tmp_path, queue_file=str(tmp_path / "absent.txt"))
    assert run_queue(args) == 1


def test_main_reports_missing_tools(monkeypatch: pytest.MonkeyPatch, tmp_path, capsys) -> None:
    monkeypatch.setattr(tools, "find_tool", lambda name: None if name == "aria2c" else f"/usr/bin/{name}")
    queue = tmp_path / "urls.txt"
    queue.write_text(QUEUE, encoding="utf-8")

    status = download_queue.main(["--config", str(tmp_path / "none.json"), "--queue-file", str(queue)])

    assert status == 1
    assert "aria2c" in capsys.readouterr().err


def test_main_without_queue_file(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    monkeypatch.setattr(tools, "find_tool", lambda name: f"/usr/bin/{name}")

    status = download_queue.main(
        ["--config", str(tmp_path / "none.json"), "--queue-file", str(tmp_path / "absent.txt")]
    )

    assert status == 1


def test_main_runs_queue(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    monkeypatch.setattr(tools, "find_tool", lambda name: f"/usr/bin/{name}")
    monkeypatch.setattr(downloader, "run_ytdlp", lambda urls, opts, logger, group="": RunResult(group, 0))
    queue = tmp_path / "urls.txt"
    queue.write_text(QUEUE, encoding="utf-8")

    status = download_queue.main(
        [
            "--config", str(tmp_path / "none.json"),
            "--queue-file", str(queue),
            "--output", str(tmp_path / "out"),
            "--mode", "batch",
            "--no-accelerator",
        ]
    )

    assert status == 0
    assert queue.read_text(encoding="utf-8") == ""
