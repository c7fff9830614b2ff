"""外部プロセスの検査と独立起動。"""

from __future__ import annotations

import logging
import os
import re
import shutil
import subprocess
import sys
from pathlib import Path, PureWindowsPath
from typing import Callable, List, Optional, Protocol, Sequence, Union

LOGGER = logging.getLogger(__name__)

# Windows creation flags
DETACHED_PROCESS = 0x00000008
CREATE_NEW_PROCESS_GROUP = 0x00000200
CREATE_NO_WINDOW = 0x08000000

_WINDOWS_SCRIPT_SUFFIXES = (".cmd", ".bat")
_TRAILING_BACKSLASHES = re.compile(r"(\\+)$")

__all__ = [
    "CommandProber",
    "ProcessSpawner",
    "SubprocessProber",
    "SubprocessSpawner",
    "build_cmd_line",
    "prepare_command",
]


class CommandProber(Protocol):
    """実行ファイル候補を検査するインターフェース。"""

    def path_exists(self, path: Path) -> bool:
        """絶対パスの候補が存在するかを返す。"""

    def runs_successfully(self, argv: Sequence[str], timeout: float) -> bool:
        """コマンドを実行し、制限時間内に正常終了したかを返す。"""


class ProcessSpawner(Protocol):
    """子プロセスを独立起動するインターフェース。"""

    def spawn_detached(self, argv: Sequence[str]) -> int:
        """プロセスを起動して PID を返す。失敗時は :class:`OSError` を送出する。"""


def _quote_cmd_argument(argument: str) -> str:
    """``cmd.exe`` の行で 1 引数として解釈されるように引用する。

    引用符内では ``&|<>^`` はそのまま渡る。``%`` だけは引用符内でも展開される
    ため、引用符を閉じて ``^%`` で逃がす。
    """

    if '"' in argument:
        raise ValueError(f"引用符を含む引数は渡せません: {argument!r}")
    # 閉じ引用符の直前にある円記号は二重にする
    return "^%".join(
        '"' + _TRAILING_BACKSLASHES.sub(r"\1\1", segment) + '"'
        for segment in argument.split("%")
    )


def build_cmd_line(argv: Sequence[str]) -> str:
    """バッチファイルを ``cmd.exe /d /s /c`` で起動するコマンド行を組み立てる。

    ``/s`` により外側の引用符の組だけが取り除かれ、内側の引用は保たれる。
    """

    inner = " ".join(_quote_cmd_argument(argument) for argument in argv)
    return f'cmd.exe /d /v:off /s /c "{inner}"'


def prepare_command(
    argv: Sequence[str],
    *,
    platform: str | None = None,
    which: Callable[[str], Optional[str]] = shutil.which,
) -> Union[List[str], str]:
    """プラットフォームに合わせて起動コマンドを整える。

    Windows では相対名を ``PATH`` から解決し、解決先が ``.cmd``/``.bat`` なら
    :func:`build_cmd_line` の文字列を返す。それ以外は引数リストのまま返す。
    解決できない名前はそのまま残し、起動時の :class:`FileNotFoundError` に任せる。
    """

    command = list(argv)
    if not command:
        return command
    target = platform or sys.platform
    if target != "win32":
        return command

    executable = PureWindowsPath(command[0])
    if not executable.is_absolute():
        resolved = which(command[0])
        if resolved is None:
            return command
        command[0] = resolved
        executable = PureWindowsPath(resolved)
    if executable.suffix.lower() in _WINDOWS_SCRIPT_SUFFIXES:
        return build_cmd_line(command)
    return command


class SubprocessProber:
    """:mod:`subprocess` を利用した候補検査。"""

    def path_exists(self, path: Path) -> bool:
        try:
            return path.is_file()
        except OSError:
            LOGGER.debug("候補パスの確認に失敗しました: %s", path, exc_info=True)
            return False

    def runs_successfully(self, argv: Sequence[str], timeout: float) -> bool:
        try:
            command = prepare_command(argv)
        except ValueError:
            LOGGER.debug("候補コマンドを組み立てられません: %s", argv, exc_info=True)
            return False
        try:
            completed = subprocess.run(
                command,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                timeout=timeout,
                check=False,
            )
        except subprocess.TimeoutExpired:
            LOGGER.debug("候補コマンドが時間内に終了しませんでした: %s", command)
            return False
        except OSError:
            LOGGER.debug("候補コマンドを実行できませんでした: %s", command, exc_info=True)
            return False
        return completed.returncode == 0


class SubprocessSpawner:
    """親プロセスから独立した子プロセスを起動する。

    標準入出力は破棄し、親の終了後も子プロセスが動作し続けるように
    新しいセッション (Windows ではプロセスグループ) で起動する。
    """

    def spawn_detached(self, argv: Sequence[str]) -> int:
        try:
            command = prepare_command(argv)
        except ValueError as exc:
            raise OSError(str(exc)) from exc
        if not command:
            raise OSError("起動コマンドが空です。")

        options: dict[str, object] = {
            "stdin": subprocess.DEVNULL,
            "stdout": subprocess.DEVNULL,
            "stderr": subprocess.DEVNULL,
            "close_fds": True,
        }
        if os.name == "nt":
            options["creationflags"] = (
                DETACHED_PROCESS | CREATE_NEW_PROCESS_GROUP | CREATE_NO_WINDOW
            )
        else:
            options["start_new_session"] = True

        process = subprocess.Popen(command, **options)
        LOGGER.info("プロセスを起動しました: pid=%s command=%s", process.pid, command)
        return int(process.pid)
