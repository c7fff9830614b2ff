"""トレイメニュー向けのドメイン調停ロジック。

Qt に依存せず、メニュー操作をレジストリ・ランチャー・設定へ振り分ける。
ドメイン例外はここで通知へ変換し、イベントループへは伝播させない。
"""

from __future__ import annotations

import logging
import platform
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Protocol

from .. import __version__
from ..domain.editors import EditorLocator
from ..domain.errors import (
    AutoStartError,
    CodeTrayError,
    DuplicateProjectError,
    EditorNotFoundError,
    PersistenceError,
    ProjectNotFoundError,
    RegistryCorruptError,
)
from ..domain.launching import LaunchResult, ProjectLauncher
from ..domain.projects import (
    REGISTRY_FILENAME,
    ListOrder,
    ProjectRecord,
    ProjectRegistry,
    ProjectRegistryService,
)
from ..domain.projects.labels import display_name, ecosystem_label, project_icon, type_icon
from ..domain.settings import AppSettingsManager
from ..infrastructure.autostart import AutoStartRegistrar
from ..infrastructure.paths import get_app_config_dir
from ..infrastructure.settings import SETTINGS_FILENAME, JsonFileSettingsStore

LOGGER = logging.getLogger(__name__)

MOST_USED_LIMIT = 5

__all__ = [
    "DirectoryPrompt",
    "MenuEntry",
    "MenuGroup",
    "Notifier",
    "TrayController",
    "TrayMenuModel",
]


class Notifier(Protocol):
    """ユーザーへの通知を表示する外部コンポーネント。"""

    def notify(self, title: str, message: str, *, error: bool = False) -> None:
        ...


class DirectoryPrompt(Protocol):
    """ディレクトリを一つ選択させる外部コンポーネント。"""

    def ask_directory(self) -> Optional[Path]:
        """選択された絶対パス、キャンセル時は ``None`` を返す。"""


class LoggingNotifier:
    """ログへ書き出すだけの通知先。"""

    def notify(self, title: str, message: str, *, error: bool = False) -> None:
        level = logging.ERROR if error else logging.INFO
        LOGGER.log(level, "%s: %s", title, message)


@dataclass(slots=True, frozen=True)
class MenuEntry:
    """メニューに並べるプロジェクト 1 件分の表示情報。"""

    label: str
    path: Path
    details: tuple[str, ...] = ()


@dataclass(slots=True)
class MenuGroup:
    label: str
    entries: List[MenuEntry] = field(default_factory=list)


@dataclass(slots=True)
class TrayMenuModel:
    """トレイメニューの構成。"""

    most_used: List[MenuEntry] = field(default_factory=list)
    groups: List[MenuGroup] = field(default_factory=list)
    auto_start_enabled: bool = False

    @property
    def is_empty(self) -> bool:
        return not self.groups


@dataclass(slots=True)
class TrayController:
    """トレイ UI からの要求をドメインサービスへ振り分ける。"""

    projects: ProjectRegistryService
    launcher: ProjectLauncher
    settings: AppSettingsManager
    autostart: AutoStartRegistrar
    notifier: Notifier = field(default_factory=LoggingNotifier)

    @classmethod
    def create_default(
        cls,
        config_dir: Optional[Path] = None,
        *,
        notifier: Optional[Notifier] = None,
    ) -> "TrayController":
        base = config_dir or get_app_config_dir()
        registry = ProjectRegistry(base / REGISTRY_FILENAME)
        settings = AppSettingsManager(JsonFileSettingsStore(base / SETTINGS_FILENAME))
        return cls(
            projects=ProjectRegistryService(registry),
            launcher=ProjectLauncher(EditorLocator()),
            settings=settings,
            autostart=AutoStartRegistrar(),
            notifier=notifier or LoggingNotifier(),
        )

    # 起動 --------------------------------------------------------------
    def startup(self) -> None:
        """設定を読み込み、起動時に判明している問題を通知する。"""

        try:
            self.settings.load()
        except PersistenceError as exc:
            self._report("設定の保存に失敗しました", exc)
        load_error = self.projects.registry.load_error
        if load_error is not None:
            self._report("プロジェクト一覧を読み込めません", load_error)

    # プロジェクト操作 ---------------------------------------------------
    def add_project(self, prompt: DirectoryPrompt) -> Optional[ProjectRecord]:
        directory = prompt.ask_directory()
        if directory is None:
            return None
        try:
            record = self.projects.add(directory)
        except DuplicateProjectError as exc:
            self._report("プロジェクトは登録済みです", exc, error=False)
            return None
        except PersistenceError as exc:
            self._report("プロジェクトを保存できません", exc)
            return self.projects.find(directory)
        self.notifier.notify("プロジェクトを追加しました", f"「{record.name}」を追加しました。")
        return record

    def remove_project(self, path: Path) -> Optional[ProjectRecord]:
        try:
            record = self.projects.remove(path)
        except ProjectNotFoundError as exc:
            self._report("プロジェクトが見つかりません", exc, error=False)
            return None
        except PersistenceError as exc:
            self._report("プロジェクト一覧を保存できません", exc)
            return None
        self.notifier.notify("プロジェクトを削除しました", f"「{record.name}」を一覧から削除しました。")
        return record

    def open_project(self, path: Path) -> Optional[LaunchResult]:
        if self.projects.find(path) is None:
            self._report("プロジェクトが見つかりません", ProjectNotFoundError(Path(path)), error=False)
            return None
        result = self.launcher.open(path)
        if not result.success:
            title = (
                "VS Code が見つかりません"
                if isinstance(result.error, EditorNotFoundError)
                else "プロジェクトを開けません"
            )
            self.notifier.notify(title, result.message(), error=True)
            return result
        try:
            self.projects.record_opened(path)
        except CodeTrayError as exc:
            self._report("利用統計を保存できません", exc)
        return result

    def open_folder(self, path: Path) -> LaunchResult:
        result = self.launcher.open_folder(path)
        if not result.success:
            self.notifier.notify("フォルダを開けません", result.message(), error=True)
        return result

    def reload(self) -> None:
        try:
            self.projects.reload()
        except RegistryCorruptError as exc:
            self._report("プロジェクト一覧を読み込めません", exc)

    def retry_editor_discovery(self) -> bool:
        """ユーザー操作でエディタを再探索する。"""

        try:
            editor = self.launcher.locator.resolve(force=True)
        except EditorNotFoundError as exc:
            self._report("VS Code が見つかりません", exc)
            return False
        self.notifier.notify("VS Code を検出しました", editor.command)
        return True

    # 設定 --------------------------------------------------------------
    def toggle_auto_start(self) -> bool:
        enabled = not self.settings.auto_start_enabled()
        try:
            self.autostart.apply(enabled)
        except AutoStartError as exc:
            self._report("自動起動を変更できません", exc)
            return not enabled
        try:
            self.settings.set_auto_start_enabled(enabled)
        except PersistenceError as exc:
            self._report("設定の保存に失敗しました", exc)
        return enabled

    # 表示 --------------------------------------------------------------
    def statistics_text(self) -> str:
        return self.projects.statistics().format_text()

    def about_text(self) -> str:
        """バージョン情報ダイアログ向けのテキスト。"""

        lines = [
            f"CodeTray v{__version__}",
            f"プラットフォーム: {sys.platform}",
            f"Python: {platform.python_version()}",
            f"プロジェクト一覧: {self.projects.registry.path}",
        ]
        return "\n".join(lines)

    def menu_model(self) -> TrayMenuModel:
        model = TrayMenuModel(auto_start_enabled=self.settings.auto_start_enabled())
        for record in self.projects.most_used(MOST_USED_LIMIT):
            model.most_used.append(
                MenuEntry(label=f"{project_icon(record)} {display_name(record)}", path=record.path)
            )

        grouped: dict[str, MenuGroup] = {}
        for record in self.projects.records(ListOrder.NAME):
            ecosystem = record.ecosystem_type or "generic"
            group = grouped.get(ecosystem)
            if group is None:
                group = MenuGroup(label=ecosystem)
                grouped[ecosystem] = group
            group.entries.append(
                MenuEntry(
                    label=display_name(record),
                    path=record.path,
                    details=(
                        str(record.path),
                        f"種類: {ecosystem_label(record.ecosystem_type)}",
                        f"起動回数: {record.open_count}",
                    ),
                )
            )
        for ecosystem, group in grouped.items():
            group.label = (
                f"{type_icon(ecosystem)} {ecosystem_label(ecosystem)} ({len(group.entries)})"
            )
            model.groups.append(group)
        return model

    # 内部処理 ----------------------------------------------------------
    def _report(self, title: str, exc: CodeTrayError, *, error: bool = True) -> None:
        if error:
            LOGGER.warning("%s: %s", title, exc)
        self.notifier.notify(title, str(exc), error=error)
