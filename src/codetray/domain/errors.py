"""ドメイン層で扱う例外の定義。"""

from __future__ import annotations

from pathlib import Path

__all__ = [
    "AutoStartError",
    "CodeTrayError",
    "DuplicateProjectError",
    "EditorNotFoundError",
    "PersistenceError",
    "ProjectNotFoundError",
    "RegistryCorruptError",
    "SpawnFailedError",
]


class CodeTrayError(Exception):
    """アプリケーション固有の例外の基底クラス。"""


class DuplicateProjectError(CodeTrayError):
    """同じパスのプロジェクトが既に登録されている。"""

    def __init__(self, path: Path) -> None:
        super().__init__(f"プロジェクトは既に登録されています: {path}")
        self.path = path


class ProjectNotFoundError(CodeTrayError):
    """指定されたパスのプロジェクトが登録されていない。"""

    def __init__(self, path: Path) -> None:
        super().__init__(f"プロジェクトが見つかりません: {path}")
        self.path = path


class RegistryCorruptError(CodeTrayError):
    """レジストリファイルを解釈できない。"""

    def __init__(self, path: Path, detail: str, backup_path: Path | None = None) -> None:
        message = f"プロジェクト一覧を読み込めません ({path}): {detail}"
        if backup_path is not None:
            message += f" / 退避先: {backup_path}"
        super().__init__(message)
        self.path = path
        self.backup_path = backup_path


class PersistenceError(CodeTrayError):
    """設定やレジストリの書き込みに失敗した。"""

    def __init__(self, path: Path, detail: str) -> None:
        super().__init__(f"ファイルへの保存に失敗しました ({path}): {detail}")
        self.path = path


class EditorNotFoundError(CodeTrayError):
    """利用可能なエディタ実行ファイルが見つからない。"""

    def __init__(self, tried: tuple[str, ...] = ()) -> None:
        super().__init__(
            "VS Code が見つかりません。インストール後に 'code' コマンドを PATH へ追加するか、"
            "環境変数 CODETRAY_EDITOR で実行ファイルを指定してください。"
        )
        self.tried = tried


class SpawnFailedError(CodeTrayError):
    """OS がプロセスの生成を拒否した。"""

    def __init__(self, command: tuple[str, ...], detail: str) -> None:
        super().__init__(f"エディタの起動に失敗しました: {detail}")
        self.command = command


class AutoStartError(CodeTrayError):
    """ログイン時自動起動の登録または解除に失敗した。"""
