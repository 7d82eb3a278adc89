"""Tests for config file loading, argument parsing and environment defaults."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from types import SimpleNamespace

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from vidqueue import config
from vidqueue.models import (
    DEFAULT_ALTERNATE_CLIENT,
    DEFAULT_BATCH_FORMAT,
    DEFAULT_GROUP_RULES,
    ENV_ALTERNATE_CLIENT,
    ENV_COOKIES_FROM_BROWSER,
    GroupRule,
)


def test_positive_int():
    assert config.positive_int("3") == 3
    for bad in ("0", "-1", "abc"):
        with pytest.raises(argparse.ArgumentTypeError):
            config.positive_int(bad)


def test_missing_config_file_is_empty(tmp_path):
    assert config.load_config_file(str(tmp_path / "nope.json")) == {}


def test_invalid_config_is_ignored(tmp_path, capsys):
    path = tmp_path / "config.json"
    path.write_text("{not json", encoding="utf-8")
    assert config.load_config_file(str(path)) == {}
    path.write_text("[1, 2]", encoding="utf-8")
    assert config.load_config_file(str(path)) == {}
    assert "Warning" in capsys.readouterr().err


def test_unknown_config_keys_are_dropped(tmp_path, capsys):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"output": "videos", "colour": "blue"}), encoding="utf-8")
    assert config.load_config_file(str(path)) == {"output": "videos"}
    assert "colour" in capsys.readouterr().err


def test_defaults_without_config(tmp_path):
    args = config.parse_args(["--config", str(tmp_path / "none.json")])

    assert args.queue_file == "urls.txt"
    assert args.mode == config.MODE_ADAPTIVE
    assert args.max_height == 360
    assert args.format == DEFAULT_BATCH_FORMAT
    assert args.merge_output_format == "mp4"
    assert args.no_accelerator is False
    assert args.group_rules == DEFAULT_GROUP_RULES
    assert args.default_group == "General"


def test_config_values_become_defaults_and_cli_overrides(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(
        json.dumps(
            {
                "queue_file": "list.txt",
                "max_height": 480,
                "mode": "batch",
                "groups": [
                    {"name": "Lectures", "patterns": ["list=PLlectures"]},
                    {"name": "Clips", "patterns": "/shorts/"},
                ],
                "default_group": "Misc",
            }
        ),
        encoding="utf-8",
    )

    args = config.parse_args([f"--config={path}", "--max-height", "240"])

    assert args.queue_file == "list.txt"
    assert args.mode == "batch"
    assert args.max_height == 240
    assert args.group_rules == (
        GroupRule("Lectures", ("list=PLlectures",)),
        GroupRule("Clips", ("/shorts/",)),
    )
    assert args.default_group == "Misc"


def test_invalid_group_rules_exit(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"groups": [{"name": "Empty", "patterns": []}]}), encoding="utf-8")
    with pytest.raises(SystemExit):
        config.parse_args(["--config", str(path)])


def test_environment_fills_missing_values():
    args = SimpleNamespace(cookies_from_browser=None, alternate_client=None)
    config.apply_environment_defaults(
        args, environ={ENV_COOKIES_FROM_BROWSER: " firefox ", ENV_ALTERNATE_CLIENT: "tv"}
    )
    assert args.cookies_from_browser == "firefox"
    assert args.alternate_client == "tv"


def test_cli_values_take_precedence_over_env():
    args = SimpleNamespace(cookies_from_browser="chrome", alternate_client="ios")
    config.apply_environment_defaults(
        args, environ={ENV_COOKIES_FROM_BROWSER: "firefox", ENV_ALTERNATE_CLIENT: "tv"}
    )
    assert args.cookies_from_browser == "chrome"
    assert args.alternate_client == "ios"


def test_alternate_client_default():
    args = SimpleNamespace(cookies_from_browser=None, alternate_client=None)
    config.apply_environment_defaults(args, environ={})
    assert args.cookies_from_browser is None
    assert args.alternate_client == DEFAULT_ALTERNATE_CLIENT
