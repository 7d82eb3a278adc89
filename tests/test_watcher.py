"""Tests for queue file watching."""

from __future__ import annotations

import os
import sys
from pathlib import Path
from types import SimpleNamespace

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from vidqueue.watcher import watch_queue_file


def test_processes_new_urls_once(tmp_path):
    queue = tmp_path / "urls.txt"
    queue.write_text("https://youtu.be/a\n", encoding="utf-8")
    args = SimpleNamespace(watch_interval=1.0)
    runs = []
    sleeps = []

    def touch(_interval):
        sleeps.append(_interval)
        # Same content, new timestamp
        stat = os.stat(queue)
        os.utime(queue, (stat.st_atime, stat.st_mtime + 10))

    watch_queue_file(str(queue), args, lambda a: runs.append(a), sleep=touch, max_checks=3)

    assert runs == [args]
    assert sleeps == [1.0, 1.0, 1.0]


def test_reruns_after_queue_changes(tmp_path):
    queue = tmp_path / "urls.txt"
    queue.write_text("https://youtu.be/a\n", encoding="utf-8")
    args = SimpleNamespace(watch_interval=5.0)
    runs = []

    def add_url(_interval):
        if len(runs) == 1:
            queue.write_text("https://youtu.be/a\nhttps://youtu.be/b\n", encoding="utf-8")
            stat = os.stat(queue)
            os.utime(queue, (stat.st_atime, stat.st_mtime + 10))

    watch_queue_file(str(queue), args, lambda a: runs.append(a), sleep=add_url, max_checks=2)

    assert len(runs) == 2


def test_waits_for_missing_file(tmp_path, capsys):
    args = SimpleNamespace(watch_interval=0)
    runs = []

    watch_queue_file(str(tmp_path / "urls.txt"), args, lambda a: runs.append(a), sleep=lambda _: None, max_checks=2)

    assert runs == []
    assert "Waiting for it to appear" in capsys.readouterr().out
