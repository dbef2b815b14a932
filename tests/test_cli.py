"""Tests for the `arenalru` command line."""

from __future__ import annotations

import io
import json
import logging
from pathlib import Path

import pytest

import arenalru.cli
from arenalru.cache import LRUCache
from arenalru.errors import ScriptError
from arenalru.log import ROOT_LOGGER


@pytest.fixture(autouse=True)
def _isolate(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    # Keep config discovery away from any arenalru.toml above the test run.
    monkeypatch.chdir(tmp_path)
    logger = logging.getLogger(ROOT_LOGGER)
    handlers, level = list(logger.handlers), logger.level
    yield
    logger.handlers[:] = handlers
    logger.setLevel(level)


def _write(path: Path, content: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


def test_parse_replay_defaults() -> None:
    ns = arenalru.cli.parse_args(["replay", "ops.txt"])
    assert ns.command == "replay"
    assert ns.script == "ops.txt"
    assert ns.capacity is None
    assert ns.json_output is False
    assert ns.log_level is None


def test_parse_replay_flags() -> None:
    ns = arenalru.cli.parse_args(
        ["replay", "-", "--capacity", "4", "--json", "--root", "/tmp", "--log-level", "debug"]
    )
    assert ns.capacity == 4
    assert ns.json_output is True
    assert ns.root == "/tmp"
    assert ns.log_level == "DEBUG"
    assert arenalru.cli._is_json_mode(ns) is True


def test_main_dispatches(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(arenalru.cli, "cmd_replay", lambda args: 0)
    monkeypatch.setattr(arenalru.cli, "cmd_demo", lambda args: 7)
    assert arenalru.cli.main(["replay", "x"]) == 0
    assert arenalru.cli.main(["demo"]) == 7


def test_main_usage_error_returns_exit_code() -> None:
    assert arenalru.cli.main([]) == 2


def test_parse_script_skips_comments_and_keeps_value_spaces() -> None:
    ops = arenalru.cli.parse_script("# header\n\nset a hello world\nGET a\n")
    assert [(o.kind, o.key, o.value, o.lineno) for o in ops] == [
        ("set", "a", "hello world", 3),
        ("get", "a", None, 4),
    ]


@pytest.mark.parametrize("line", ["set a", "get", "get a b", "del a", "set"])
def test_parse_script_rejects_bad_lines(line: str) -> None:
    with pytest.raises(ScriptError, match="line 1"):
        arenalru.cli.parse_script(line + "\n")


def test_run_ops_collects_gets() -> None:
    cache: LRUCache[str, str] = LRUCache(1)
    ops = arenalru.cli.parse_script("set a 1\nget a\nset b 2\nget a\nget b\n")
    assert arenalru.cli.run_ops(cache, ops) == [("a", "1"), ("a", None), ("b", "2")]


def test_replay_text_output(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    script = _write(tmp_path / "ops.txt", "set a 1\nset b 2\nset c 3\nget a\nget c\n")

    rc = arenalru.cli.main(["replay", str(script), "--capacity", "2"])

    out = capsys.readouterr().out.splitlines()
    assert rc == 0
    assert out == ["a=<miss>", "c=3", "count=2/2 hits=1 misses=1 evictions=1"]


def test_replay_json_output(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    script = _write(tmp_path / "ops.txt", "set a 1\nset b 2\nget a\nget z\n")

    rc = arenalru.cli.main(["replay", str(script), "--capacity", "5", "--json"])

    doc = json.loads(capsys.readouterr().out)
    assert rc == 0
    assert doc["capacity"] == 5
    assert doc["count"] == 2
    assert doc["gets"] == [{"key": "a", "value": "1"}, {"key": "z", "value": None}]
    assert doc["keys"] == ["a", "b"]
    assert doc["stats"]["hits"] == 1
    assert doc["stats"]["misses"] == 1


def test_replay_reads_capacity_from_config(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    _write(tmp_path / "arenalru.toml", "version = 1\n[cache]\ncapacity = 1\n")
    script = _write(tmp_path / "ops.txt", "set a 1\nset b 2\nget a\n")

    rc = arenalru.cli.main(["replay", str(script)])

    out = capsys.readouterr().out.splitlines()
    assert rc == 0
    assert out[0] == "a=<miss>"
    assert out[-1].startswith("count=1/1")


def test_replay_defaults_without_config(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    script = _write(tmp_path / "ops.txt", "set a 1\n")

    assert arenalru.cli.main(["replay", str(script)]) == 0
    assert "count=1/128" in capsys.readouterr().out


def test_replay_bad_config_is_exit_2(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    _write(tmp_path / "arenalru.toml", "version = 3\n")
    script = _write(tmp_path / "ops.txt", "set a 1\n")

    assert arenalru.cli.main(["replay", str(script)]) == 2
    assert "error: Unsupported config version" in capsys.readouterr().err


def test_replay_negative_capacity_is_exit_2(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    script = _write(tmp_path / "ops.txt", "set a 1\n")

    assert arenalru.cli.main(["replay", str(script), "--capacity", "-1"]) == 2
    assert "capacity must be >= 0" in capsys.readouterr().err


def test_replay_bad_script_is_exit_3(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    script = _write(tmp_path / "ops.txt", "set a 1\nfrobnicate\n")

    assert arenalru.cli.main(["replay", str(script)]) == 3
    assert "line 2" in capsys.readouterr().err


def test_replay_missing_script_is_exit_3(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert arenalru.cli.main(["replay", str(tmp_path / "missing.txt")]) == 3
    assert "cannot read script" in capsys.readouterr().err


def test_replay_debug_logging_reports_evictions(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    script = _write(tmp_path / "ops.txt", "set a 1\nset b 2\n")

    rc = arenalru.cli.main(["replay", str(script), "--capacity", "1", "--log-level", "DEBUG"])

    assert rc == 0
    assert "evicted 'a'" in capsys.readouterr().err


def test_demo_runs_eviction_walkthrough(capsys: pytest.CaptureFixture[str]) -> None:
    rc = arenalru.cli.main(["demo"])

    out = capsys.readouterr().out.splitlines()
    assert rc == 0
    assert out[:8] == ["3=3", "2=2", "1=1", "2=2", "3=<miss>", "2=2", "1=1", "4=4"]
    assert out[-1] == "recency: 4, 1, 2"


def _stdin(monkeypatch: pytest.MonkeyPatch, data: bytes) -> None:
    monkeypatch.setattr("sys.stdin", io.TextIOWrapper(io.BytesIO(data), encoding="utf-8"))


def test_replay_reads_script_from_stdin(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    _stdin(monkeypatch, b"set a 1\nget a\n")

    assert arenalru.cli.main(["replay", "-", "--capacity", "2"]) == 0
    assert capsys.readouterr().out.splitlines()[0] == "a=1"


def test_replay_undecodable_stdin_is_exit_3(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    _stdin(monkeypatch, b"set a \xff\xfe\n")

    assert arenalru.cli.main(["replay", "-"]) == 3
    assert "cannot read script -" in capsys.readouterr().err
