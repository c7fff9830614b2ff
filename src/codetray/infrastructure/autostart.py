"""ログイン時自動起動エントリの登録と解除。"""

from __future__ import annotations

import logging
import os
import plistlib
import shlex
import subprocess
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Sequence

from ..domain.errors import AutoStartError

LOGGER = logging.getLogger(__name__)

ENTRY_NAME = "codetray"
LAUNCH_AGENT_LABEL = "com.codetray.launcher"

__all__ = ["AutoStartRegistrar", "default_launch_command"]


def default_launch_command() -> tuple[str, ...]:
    """現在のインタプリタでアプリを起動するコマンドを返す。"""

    return (sys.executable, "-m", "codetray.main")


@dataclass(slots=True)
class AutoStartRegistrar:
    """プラットフォームごとのスタートアップ項目を書き換える。"""

    command: Sequence[str] = field(default_factory=default_launch_command)
    platform: str = field(default_factory=lambda: sys.platform)
    environ: Mapping[str, str] = field(default_factory=lambda: dict(os.environ))
    home: Path = field(default_factory=Path.home)

    def entry_path(self) -> Path:
        """自動起動エントリを配置するパスを返す。"""

        if self.platform == "win32":
            appdata = self.environ.get("APPDATA")
            base = Path(appdata) if appdata else self.home / "AppData" / "Roaming"
            return (
                base
                / "Microsoft"
                / "Windows"
                / "Start Menu"
                / "Programs"
                / "Startup"
                / f"{ENTRY_NAME}.cmd"
            )
        if self.platform == "darwin":
            return self.home / "Library" / "LaunchAgents" / f"{LAUNCH_AGENT_LABEL}.plist"
        xdg_config = self.environ.get("XDG_CONFIG_HOME")
        base = Path(xdg_config) if xdg_config else self.home / ".config"
        return base / "autostart" / f"{ENTRY_NAME}.desktop"

    def is_registered(self) -> bool:
        return self.entry_path().exists()

    def apply(self, enabled: bool) -> Path:
        """設定値に合わせてエントリを作成または削除する。"""

        target = self.entry_path()
        try:
            if enabled:
                target.parent.mkdir(parents=True, exist_ok=True)
                self._write_entry(target)
                LOGGER.info("自動起動エントリを登録しました: %s", target)
            else:
                target.unlink(missing_ok=True)
                LOGGER.info("自動起動エントリを解除しました: %s", target)
        except OSError as exc:
            raise AutoStartError(f"自動起動の設定に失敗しました ({target}): {exc}") from exc
        return target

    def _write_entry(self, target: Path) -> None:
        if self.platform == "win32":
            line = subprocess.list2cmdline(list(self.command))
            target.write_text(f"@echo off\r\nstart \"\" {line}\r\n", encoding="utf-8")
        elif self.platform == "darwin":
            payload = {
                "Label": LAUNCH_AGENT_LABEL,
                "ProgramArguments": list(self.command),
                "RunAtLoad": True,
            }
            with target.open("wb") as handle:
                plistlib.dump(payload, handle)
        else:
            exec_line = " ".join(shlex.quote(part) for part in self.command)
            lines = [
                "[Desktop Entry]",
                "Type=Application",
                "Name=CodeTray",
                "Comment=VS Code project launcher",
                f"Exec={exec_line}",
                "X-GNOME-Autostart-enabled=true",
                "",
            ]
            target.write_text("\n".join(lines), encoding="utf-8")
