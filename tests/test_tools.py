"""Tests for tool discovery and the health check."""

from __future__ import annotations

import sys
from pathlib import Path
from types import SimpleNamespace

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from vidqueue import tools
from vidqueue.errors import SetupError
from vidqueue.models import FormatDescriptor

FORMATS = [FormatDescriptor("18", vcodec="avc1", acodec="mp4a", height=360)]


def make_args(**overrides):
    defaults = {
        "no_accelerator": False,
        "alternate_client": "android",
        "cookies_from_browser": None,
        "max_height": 360,
    }
    defaults.update(overrides)
    return SimpleNamespace(**defaults)


def test_required_tools_follow_accelerator_flag():
    assert tools.required_tools(make_args()) == ["ffmpeg", "aria2c"]
    assert tools.required_tools(make_args(no_accelerator=True)) == ["ffmpeg"]


def test_ensure_tools_names_missing_accelerator(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(tools, "find_tool", lambda name: None if name == "aria2c" else f"/usr/bin/{name}")

    with pytest.raises(SetupError, match="--no-accelerator"):
        tools.ensure_tools(make_args())
    assert tools.ensure_tools(make_args(no_accelerator=True)) == {"ffmpeg": "/usr/bin/ffmpeg"}


def test_health_check_passes(monkeypatch: pytest.MonkeyPatch, capsys) -> None:
    monkeypatch.setattr(tools, "find_tool", lambda name: f"/usr/bin/{name}")
    monkeypatch.setattr(tools, "fetch_formats", lambda *a, **k: FORMATS)

    assert tools.run_health_check(make_args(), probe_url="https://youtu.be/abc") == 0
    out = capsys.readouterr().out
    assert "Selector at max height 360: 18" in out
    assert "Status: HEALTHY" in out


@pytest.mark.parametrize(
    "find_tool, formats",
    [
        (lambda name: None if name == "ffmpeg" else f"/usr/bin/{name}", FORMATS),
        (lambda name: f"/usr/bin/{name}", None),
    ],
)
def test_health_check_fails(monkeypatch: pytest.MonkeyPatch, capsys, find_tool, formats) -> None:
    monkeypatch.setattr(tools, "find_tool", find_tool)
    monkeypatch.setattr(tools, "fetch_formats", lambda *a, **k: formats)

    assert tools.run_health_check(make_args(), probe_url="https://youtu.be/abc") == 1
    assert "Status: UNHEALTHY" in capsys.readouterr().out
