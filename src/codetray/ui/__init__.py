"""UI 層のパッケージ。

Qt に依存するモジュール (:mod:`.tray`) は必要になった時点で読み込む。
"""

from __future__ import annotations

from .controller import (
    DirectoryPrompt,
    MenuEntry,
    MenuGroup,
    Notifier,
    TrayController,
    TrayMenuModel,
)

__all__ = [
    "DirectoryPrompt",
    "MenuEntry",
    "MenuGroup",
    "Notifier",
    "TrayController",
    "TrayMenuModel",
]
