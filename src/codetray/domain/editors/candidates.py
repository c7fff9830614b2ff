"""エディタ実行ファイル候補の定義。

候補は「パスの存在確認」か「コマンドを実行して終了コードを確認」の
いずれかの検査方法と制限時間を持つ。プラットフォームごとの既定の
インストール先はここで宣言的に列挙し、探索ロジックには分岐を持ち込まない。
"""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import List, Mapping, Optional

__all__ = [
    "DEFAULT_PROBE_TIMEOUT",
    "EDITOR_ENV_VAR",
    "EditorCandidate",
    "ProbeStrategy",
    "default_candidates",
]

DEFAULT_PROBE_TIMEOUT = 5.0
EDITOR_ENV_VAR = "CODETRAY_EDITOR"
VERSION_FLAG = "--version"

_VSCODE_DIR = "Microsoft VS Code"
_VSCODE_INSIDERS_DIR = "Microsoft VS Code Insiders"
_MAC_BUNDLE_BIN = Path("Contents") / "Resources" / "app" / "bin"
_FLATPAK_EXPORT = Path("flatpak") / "exports" / "bin" / "com.visualstudio.code"


class ProbeStrategy(Enum):
    """候補の検査方法。"""

    PATH_EXISTS = "path_exists"
    EXECUTE = "execute"


@dataclass(frozen=True, slots=True)
class EditorCandidate:
    """探索順に並べるエディタ候補。"""

    command: str
    strategy: ProbeStrategy = ProbeStrategy.EXECUTE
    timeout: float = DEFAULT_PROBE_TIMEOUT
    label: str = ""

    @classmethod
    def for_path(cls, path: Path, label: str = "") -> "EditorCandidate":
        return cls(str(path), ProbeStrategy.PATH_EXISTS, label=label or str(path))

    @classmethod
    def for_command(cls, command: str, label: str = "") -> "EditorCandidate":
        return cls(command, ProbeStrategy.EXECUTE, label=label or command)

    def probe_argv(self) -> tuple[str, ...]:
        return (self.command, VERSION_FLAG)


def _override_candidate(value: Optional[str]) -> Optional[EditorCandidate]:
    if not value or not value.strip():
        return None
    value = value.strip()
    path = Path(value).expanduser()
    if path.is_absolute():
        return EditorCandidate.for_path(path, label=f"{EDITOR_ENV_VAR}={value}")
    return EditorCandidate.for_command(value, label=f"{EDITOR_ENV_VAR}={value}")


def _windows_candidates(environ: Mapping[str, str]) -> List[EditorCandidate]:
    candidates = [
        EditorCandidate.for_command("code"),
        EditorCandidate.for_command("code.cmd"),
    ]
    roots = []
    local_appdata = environ.get("LOCALAPPDATA")
    if local_appdata:
        roots.append(Path(local_appdata) / "Programs")
    for env_name in ("PROGRAMFILES", "PROGRAMFILES(X86)"):
        value = environ.get(env_name)
        if value:
            roots.append(Path(value))
    for install_dir in (_VSCODE_DIR, _VSCODE_INSIDERS_DIR):
        script = "code-insiders.cmd" if install_dir == _VSCODE_INSIDERS_DIR else "code.cmd"
        for root in roots:
            candidates.append(EditorCandidate.for_path(root / install_dir / "bin" / script))
    return candidates


def _mac_candidates(home: Path) -> List[EditorCandidate]:
    candidates = [EditorCandidate.for_command("code")]
    for bundle, binary in (
        ("Visual Studio Code.app", "code"),
        ("Visual Studio Code - Insiders.app", "code-insiders"),
    ):
        for applications in (Path("/Applications"), home / "Applications"):
            candidates.append(
                EditorCandidate.for_path(applications / bundle / _MAC_BUNDLE_BIN / binary)
            )
    return candidates


def _linux_candidates(home: Path) -> List[EditorCandidate]:
    return [
        EditorCandidate.for_command("code"),
        EditorCandidate.for_path(Path("/usr/bin/code")),
        EditorCandidate.for_path(Path("/usr/local/bin/code")),
        EditorCandidate.for_path(Path("/snap/bin/code")),
        EditorCandidate.for_path(Path("/var/lib") / _FLATPAK_EXPORT),
        EditorCandidate.for_path(home / ".local" / "share" / _FLATPAK_EXPORT),
        EditorCandidate.for_command("code-insiders"),
        EditorCandidate.for_command("codium"),
    ]


def default_candidates(
    platform: Optional[str] = None,
    environ: Optional[Mapping[str, str]] = None,
    home: Optional[Path] = None,
) -> List[EditorCandidate]:
    """プラットフォームに応じた探索順の候補一覧を返す。"""

    platform = platform or sys.platform
    environ = os.environ if environ is None else environ
    home = home or Path.home()

    candidates: List[EditorCandidate] = []
    override = _override_candidate(environ.get(EDITOR_ENV_VAR))
    if override is not None:
        candidates.append(override)

    if platform == "win32":
        candidates.extend(_windows_candidates(environ))
    elif platform == "darwin":
        candidates.extend(_mac_candidates(home))
    else:
        candidates.extend(_linux_candidates(home))
    return candidates
