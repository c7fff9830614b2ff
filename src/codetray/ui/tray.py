"""Qt のシステムトレイへメニューを表示する薄いアダプタ。"""

from __future__ import annotations

import logging
from functools import partial
from pathlib import Path
from typing import Optional

from qtpy import QtGui, QtWidgets

from .controller import MenuEntry, TrayController

LOGGER = logging.getLogger(__name__)

APP_TITLE = "CodeTray"

__all__ = ["QtDirectoryPrompt", "QtTrayNotifier", "TrayIcon"]


class QtDirectoryPrompt:
    """:class:`QFileDialog` でディレクトリを一つ選ばせる。"""

    def __init__(self, parent: Optional[QtWidgets.QWidget] = None) -> None:
        self._parent = parent

    def ask_directory(self) -> Optional[Path]:
        selected = QtWidgets.QFileDialog.getExistingDirectory(
            self._parent,
            "プロジェクトのフォルダを選択",
        )
        if not selected:
            return None
        return Path(selected).resolve()


class QtTrayNotifier:
    """トレイのバルーン通知で結果を表示する。"""

    def __init__(self) -> None:
        self._tray: Optional[QtWidgets.QSystemTrayIcon] = None

    def attach(self, tray: QtWidgets.QSystemTrayIcon) -> None:
        self._tray = tray

    def notify(self, title: str, message: str, *, error: bool = False) -> None:
        if self._tray is None or not QtWidgets.QSystemTrayIcon.supportsMessages():
            level = logging.ERROR if error else logging.INFO
            LOGGER.log(level, "%s: %s", title, message)
            return
        icon = (
            QtWidgets.QSystemTrayIcon.MessageIcon.Critical
            if error
            else QtWidgets.QSystemTrayIcon.MessageIcon.Information
        )
        self._tray.showMessage(title, message, icon)


class TrayIcon:
    """トレイアイコンとコンテキストメニューを管理する。

    メニューは表示直前に :meth:`TrayController.menu_model` から組み立て直す。
    """

    def __init__(
        self,
        controller: TrayController,
        notifier: QtTrayNotifier,
        app: QtWidgets.QApplication,
    ) -> None:
        self._controller = controller
        self._app = app
        self._prompt = QtDirectoryPrompt()
        self._tray = QtWidgets.QSystemTrayIcon(app)
        icon = app.style().standardIcon(QtWidgets.QStyle.StandardPixmap.SP_DirIcon)
        self._tray.setIcon(icon)
        self._tray.setToolTip("VS Code Project Launcher")
        self._menu = QtWidgets.QMenu()
        self._menu.aboutToShow.connect(self.rebuild_menu)
        self._tray.setContextMenu(self._menu)
        self._tray.activated.connect(self._on_activated)
        notifier.attach(self._tray)
        self.rebuild_menu()

    @property
    def menu(self) -> QtWidgets.QMenu:
        return self._menu

    def show(self) -> bool:
        if not QtWidgets.QSystemTrayIcon.isSystemTrayAvailable():
            LOGGER.warning("システムトレイを利用できません")
            return False
        self._tray.show()
        return True

    def hide(self) -> None:
        self._tray.hide()

    def show_menu(self) -> None:
        """カーソル位置にメニューを開く。後続の起動要求から呼ばれる。"""

        self._menu.popup(QtGui.QCursor.pos())

    def rebuild_menu(self) -> None:
        menu = self._menu
        menu.clear()
        model = self._controller.menu_model()

        header = menu.addAction(f"🚀 {APP_TITLE}")
        header.setEnabled(False)
        menu.addSeparator()

        if model.most_used:
            title = menu.addAction("⭐ よく使うプロジェクト")
            title.setEnabled(False)
            for entry in model.most_used:
                action = menu.addAction(entry.label)
                action.triggered.connect(partial(self._open, entry.path))
            menu.addSeparator()

        if model.is_empty:
            empty = menu.addAction("プロジェクトが登録されていません")
            empty.setEnabled(False)
        else:
            all_menu = menu.addMenu("📂 すべてのプロジェクト")
            for group in model.groups:
                group_menu = all_menu.addMenu(group.label)
                for entry in group.entries:
                    self._add_project_menu(group_menu, entry)

        menu.addSeparator()
        menu.addAction("➕ プロジェクトを追加").triggered.connect(self._add)
        menu.addAction("📊 統計").triggered.connect(self._show_statistics)
        menu.addSeparator()
        menu.addAction("🔄 再読み込み").triggered.connect(self._reload)
        menu.addAction("🔍 VS Code を再検出").triggered.connect(self._retry_editor)
        auto_start = menu.addAction("ログイン時に起動")
        auto_start.setCheckable(True)
        auto_start.setChecked(model.auto_start_enabled)
        auto_start.triggered.connect(self._toggle_auto_start)
        menu.addSeparator()
        menu.addAction("ℹ️ CodeTray について").triggered.connect(self._show_about)
        menu.addSeparator()
        menu.addAction("❌ 終了").triggered.connect(self._quit)

    # メニュー構築 -------------------------------------------------------
    def _add_project_menu(self, parent: QtWidgets.QMenu, entry: MenuEntry) -> None:
        project_menu = parent.addMenu(entry.label)
        project_menu.addAction("🚀 VS Code で開く").triggered.connect(
            partial(self._open, entry.path)
        )
        project_menu.addAction("📁 フォルダを開く").triggered.connect(
            partial(self._open_folder, entry.path)
        )
        project_menu.addSeparator()
        for detail in entry.details:
            info = project_menu.addAction(detail)
            info.setEnabled(False)
        project_menu.addSeparator()
        project_menu.addAction("🗑️ 削除").triggered.connect(partial(self._remove, entry.path))

    # アクション ---------------------------------------------------------
    def _open(self, path: Path, *_args: object) -> None:
        self._controller.open_project(path)

    def _open_folder(self, path: Path, *_args: object) -> None:
        self._controller.open_folder(path)

    def _remove(self, path: Path, *_args: object) -> None:
        self._controller.remove_project(path)

    def _add(self, *_args: object) -> None:
        self._controller.add_project(self._prompt)

    def _reload(self, *_args: object) -> None:
        self._controller.reload()

    def _retry_editor(self, *_args: object) -> None:
        self._controller.retry_editor_discovery()

    def _toggle_auto_start(self, *_args: object) -> None:
        self._controller.toggle_auto_start()

    def _show_statistics(self, *_args: object) -> None:
        QtWidgets.QMessageBox.information(
            None, "プロジェクトの統計", self._controller.statistics_text()
        )

    def _show_about(self, *_args: object) -> None:
        QtWidgets.QMessageBox.about(None, f"{APP_TITLE} について", self._controller.about_text())

    def _on_activated(self, reason: object) -> None:
        if reason == QtWidgets.QSystemTrayIcon.ActivationReason.DoubleClick:
            self._add()

    def _quit(self, *_args: object) -> None:
        self._tray.hide()
        self._app.quit()
