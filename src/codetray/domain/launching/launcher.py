"""エディタでプロジェクトを開くランチャー。"""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

from ...infrastructure.processes import ProcessSpawner, SubprocessSpawner
from ..editors import EditorCommand, EditorLocator
from ..errors import CodeTrayError, EditorNotFoundError, SpawnFailedError

LOGGER = logging.getLogger(__name__)

NEW_WINDOW_FLAG = "--new-window"

__all__ = ["LaunchResult", "NEW_WINDOW_FLAG", "ProjectLauncher", "build_editor_command"]


@dataclass(slots=True, frozen=True)
class LaunchResult:
    """起動処理の結果。"""

    success: bool
    command: Tuple[str, ...] = ()
    error: Optional[CodeTrayError] = None
    process_id: int | None = None

    def message(self) -> str:
        if self.success:
            return "エディタでプロジェクトを開きました。"
        if self.error is not None:
            return str(self.error)
        return "エディタの起動に失敗しました。"


def build_editor_command(editor: EditorCommand, project_path: Path) -> Tuple[str, ...]:
    """常に新しいウィンドウで開く起動引数を組み立てる。"""

    return (editor.command, NEW_WINDOW_FLAG, str(project_path))


def _file_manager_command(path: Path, platform: str) -> Tuple[str, ...]:
    if platform == "win32":
        return ("explorer", str(path))
    if platform == "darwin":
        return ("open", str(path))
    return ("xdg-open", str(path))


class ProjectLauncher:
    """エディタ探索と独立プロセスの起動をまとめる。"""

    def __init__(
        self,
        locator: Optional[EditorLocator] = None,
        *,
        spawner: Optional[ProcessSpawner] = None,
        platform: Optional[str] = None,
    ) -> None:
        self._locator = locator or EditorLocator()
        self._spawner: ProcessSpawner = spawner or SubprocessSpawner()
        self._platform = platform or sys.platform

    @property
    def locator(self) -> EditorLocator:
        return self._locator

    def open(self, project_path: Path | str) -> LaunchResult:
        """プロジェクトをエディタの新しいウィンドウで開く。

        エディタが見つからない場合はプロセスを起動せずに失敗結果を返す。
        起動時の :class:`OSError` は送出せず、結果オブジェクトへ変換する。
        """

        path = Path(project_path)
        try:
            editor = self._locator.resolve()
        except EditorNotFoundError as exc:
            return LaunchResult(success=False, error=exc)

        command = build_editor_command(editor, path)
        try:
            process_id = self._spawner.spawn_detached(command)
        except OSError as exc:
            retried = self._retry_with_fresh_editor(editor, path, exc)
            if retried is not None:
                return retried
            LOGGER.error("エディタの起動に失敗しました: %s", command, exc_info=True)
            return LaunchResult(
                success=False,
                command=command,
                error=SpawnFailedError(command, str(exc)),
            )

        LOGGER.info("プロジェクトを開きました: %s", path)
        return LaunchResult(success=True, command=command, process_id=process_id)

    def open_folder(self, folder: Path | str) -> LaunchResult:
        """ファイルマネージャーでフォルダを表示する。"""

        command = _file_manager_command(Path(folder), self._platform)
        try:
            process_id = self._spawner.spawn_detached(command)
        except OSError as exc:
            LOGGER.error("フォルダを開けませんでした: %s", folder, exc_info=True)
            return LaunchResult(
                success=False,
                command=command,
                error=SpawnFailedError(command, str(exc)),
            )
        return LaunchResult(success=True, command=command, process_id=process_id)

    # 内部処理 ----------------------------------------------------------
    def _retry_with_fresh_editor(
        self,
        editor: EditorCommand,
        path: Path,
        error: OSError,
    ) -> Optional[LaunchResult]:
        """キャッシュ済みのエディタが消えていれば再探索して一度だけ再試行する。"""

        if self._locator.still_available() and not isinstance(error, FileNotFoundError):
            return None

        LOGGER.warning("キャッシュ済みのエディタが利用できません: %s", editor.command)
        self._locator.invalidate()
        try:
            fresh = self._locator.resolve(force=True)
        except EditorNotFoundError as exc:
            return LaunchResult(success=False, error=exc)
        if fresh.command == editor.command:
            return None

        command = build_editor_command(fresh, path)
        try:
            process_id = self._spawner.spawn_detached(command)
        except OSError as exc:
            LOGGER.error("再探索したエディタの起動にも失敗しました: %s", command, exc_info=True)
            return LaunchResult(
                success=False,
                command=command,
                error=SpawnFailedError(command, str(exc)),
            )
        return LaunchResult(success=True, command=command, process_id=process_id)
