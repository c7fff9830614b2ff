"""プロセス起動ユーティリティのテスト。"""

from __future__ import annotations

from pathlib import Path
import subprocess
import sys

import pytest

SRC_ROOT = Path(__file__).resolve().parents[2] / "src"
if str(SRC_ROOT) not in sys.path:
    sys.path.insert(0, str(SRC_ROOT))

from codetray.infrastructure import processes  # noqa: E402
from codetray.infrastructure.processes import (  # noqa: E402
    SubprocessProber,
    SubprocessSpawner,
    build_cmd_line,
    prepare_command,
)

VSCODE_CMD = "C:\\Program Files\\Microsoft VS Code\\bin\\code.cmd"


def _which_from(table):
    return lambda name: table.get(name)


def test_bare_name_is_resolved_through_path() -> None:
    command = prepare_command(
        ["code", "--new-window", "C:\\work\\a&b"],
        platform="win32",
        which=_which_from({"code": VSCODE_CMD}),
    )

    assert command == (
        'cmd.exe /d /v:off /s /c ""C:\\Program Files\\Microsoft VS Code\\bin\\code.cmd" '
        '"--new-window" "C:\\work\\a&b""'
    )


def test_batch_path_with_spaces_keeps_inner_quotes() -> None:
    command = prepare_command(
        [VSCODE_CMD, "--new-window", "C:\\my proj"],
        platform="win32",
        which=_which_from({}),
    )

    assert command.startswith('cmd.exe /d /v:off /s /c "')
    assert command.endswith('"C:\\my proj""')
    inner = command[len('cmd.exe /d /v:off /s /c "') : -1]
    assert inner == f'"{VSCODE_CMD}" "--new-window" "C:\\my proj"'


@pytest.mark.parametrize("argument", ["C:\\work\\a&b", "C:\\x|y", "C:\\<in>", "C:\\caret^dir"])
def test_cmd_metacharacters_stay_inside_quotes(argument) -> None:
    line = build_cmd_line(["code.cmd", argument])

    assert f' "{argument}""' in line


def test_percent_is_escaped_outside_quotes() -> None:
    line = build_cmd_line(["code.cmd", "C:\\%USERNAME%\\proj"])

    assert line.endswith('"C:\\\\"^%"USERNAME"^%"\\proj""')


def test_trailing_backslash_is_doubled_before_quote() -> None:
    line = build_cmd_line(["code.cmd", "C:\\work\\"])

    assert line.endswith(' "C:\\work\\\\""')


def test_quote_in_argument_is_rejected() -> None:
    with pytest.raises(ValueError):
        build_cmd_line(["code.cmd", 'C:\\bad"name'])


def test_executable_is_not_wrapped() -> None:
    argv = ["C:\\VS Code\\Code.exe", "--new-window", "C:\\work\\a&b"]

    assert prepare_command(argv, platform="win32", which=_which_from({})) == argv


def test_unresolvable_bare_name_is_left_for_spawn_error() -> None:
    argv = ["code", "--version"]

    assert prepare_command(argv, platform="win32", which=_which_from({})) == argv


def test_resolved_executable_is_passed_as_list() -> None:
    command = prepare_command(
        ["codium", "--version"],
        platform="win32",
        which=_which_from({"codium": "C:\\VSCodium\\VSCodium.exe"}),
    )

    assert command == ["C:\\VSCodium\\VSCodium.exe", "--version"]


def test_other_platforms_are_unchanged() -> None:
    assert prepare_command(["code", "--version"], platform="linux") == ["code", "--version"]
    assert prepare_command([], platform="win32") == []


def test_prober_path_exists(tmp_path: Path) -> None:
    target = tmp_path / "code"
    target.write_text("", encoding="utf-8")
    prober = SubprocessProber()

    assert prober.path_exists(target) is True
    assert prober.path_exists(tmp_path) is False
    assert prober.path_exists(tmp_path / "missing") is False


def test_prober_treats_timeout_and_missing_command_as_failure(monkeypatch) -> None:
    outcomes = [
        subprocess.TimeoutExpired(["code"], 1.0),
        FileNotFoundError("code"),
    ]

    def fake_run(command, **kwargs):
        assert kwargs["timeout"] == 1.0
        raise outcomes.pop(0)

    monkeypatch.setattr(processes.subprocess, "run", fake_run)
    prober = SubprocessProber()

    assert prober.runs_successfully(["code", "--version"], 1.0) is False
    assert prober.runs_successfully(["code", "--version"], 1.0) is False


def test_prober_checks_exit_code(monkeypatch) -> None:
    def fake_run(command, **kwargs):
        return subprocess.CompletedProcess(command, 0 if command[-1] == "--version" else 1)

    monkeypatch.setattr(processes.subprocess, "run", fake_run)

    assert SubprocessProber().runs_successfully(["code", "--version"], 2.0) is True


def test_spawner_detaches_from_parent(monkeypatch) -> None:
    captured = {}

    class DummyPopen:
        pid = 31337

        def __init__(self, command, **kwargs) -> None:
            captured["command"] = command
            captured.update(kwargs)

    monkeypatch.setattr(processes.subprocess, "Popen", DummyPopen)

    pid = SubprocessSpawner().spawn_detached(["code", "--new-window", "/work"])

    assert pid == 31337
    assert captured["stdout"] is subprocess.DEVNULL
    assert captured["stdin"] is subprocess.DEVNULL
    if processes.os.name == "nt":
        assert captured["creationflags"] & processes.DETACHED_PROCESS
    else:
        assert captured["start_new_session"] is True
        assert captured["command"] == ["code", "--new-window", "/work"]


def test_spawner_rejects_empty_command() -> None:
    with pytest.raises(OSError):
        SubprocessSpawner().spawn_detached([])


def test_spawner_reports_unquotable_argument_as_os_error(monkeypatch) -> None:
    def fake_prepare(argv):
        raise ValueError("quote")

    monkeypatch.setattr(processes, "prepare_command", fake_prepare)

    with pytest.raises(OSError):
        SubprocessSpawner().spawn_detached(["code.cmd", "x"])
