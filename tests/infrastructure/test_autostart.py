"""AutoStartRegistrar のテスト。"""

from __future__ import annotations

from pathlib import Path
import plistlib
import sys

import pytest

SRC_ROOT = Path(__file__).resolve().parents[2] / "src"
if str(SRC_ROOT) not in sys.path:
    sys.path.insert(0, str(SRC_ROOT))

from codetray.domain.errors import AutoStartError  # noqa: E402
from codetray.infrastructure.autostart import AutoStartRegistrar  # noqa: E402

COMMAND = ("/usr/bin/python3", "-m", "codetray.main")


def test_linux_desktop_entry(tmp_path: Path) -> None:
    registrar = AutoStartRegistrar(
        command=COMMAND,
        platform="linux",
        environ={"XDG_CONFIG_HOME": str(tmp_path / "xdg")},
        home=tmp_path,
    )

    target = registrar.apply(True)

    assert target == tmp_path / "xdg" / "autostart" / "codetray.desktop"
    content = target.read_text(encoding="utf-8")
    assert "[Desktop Entry]" in content
    assert "Exec=/usr/bin/python3 -m codetray.main" in content
    assert registrar.is_registered() is True

    registrar.apply(False)
    assert registrar.is_registered() is False


def test_disable_without_entry_is_noop(tmp_path: Path) -> None:
    registrar = AutoStartRegistrar(command=COMMAND, platform="linux", environ={}, home=tmp_path)

    registrar.apply(False)

    assert registrar.entry_path() == tmp_path / ".config" / "autostart" / "codetray.desktop"
    assert registrar.is_registered() is False


def test_macos_launch_agent(tmp_path: Path) -> None:
    registrar = AutoStartRegistrar(command=COMMAND, platform="darwin", environ={}, home=tmp_path)

    target = registrar.apply(True)

    assert target.parent == tmp_path / "Library" / "LaunchAgents"
    with target.open("rb") as handle:
        payload = plistlib.load(handle)
    assert payload["ProgramArguments"] == list(COMMAND)
    assert payload["RunAtLoad"] is True


def test_windows_startup_script(tmp_path: Path) -> None:
    registrar = AutoStartRegistrar(
        command=("C:\\Python\\pythonw.exe", "-m", "codetray.main"),
        platform="win32",
        environ={"APPDATA": str(tmp_path / "Roaming")},
        home=tmp_path,
    )

    target = registrar.apply(True)

    assert target.name == "codetray.cmd"
    assert target.parent.name == "Startup"
    assert "C:\\Python\\pythonw.exe -m codetray.main" in target.read_text(encoding="utf-8")


def test_write_failure_raises_autostart_error(tmp_path: Path) -> None:
    blocker = tmp_path / "xdg"
    blocker.write_text("", encoding="utf-8")
    registrar = AutoStartRegistrar(
        command=COMMAND,
        platform="linux",
        environ={"XDG_CONFIG_HOME": str(blocker)},
        home=tmp_path,
    )

    with pytest.raises(AutoStartError):
        registrar.apply(True)
