"""アプリケーション設定を管理するためのユーティリティ。"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

from ...infrastructure.settings import SettingsStore, create_settings_store

__all__ = ["AUTO_START_KEY", "AppSettings", "AppSettingsManager", "DEFAULT_SETTINGS"]

AUTO_START_KEY = "autoStartEnabled"

DEFAULT_SETTINGS: Dict[str, Any] = {AUTO_START_KEY: False}


@dataclass(slots=True, frozen=True)
class AppSettings:
    """読み込み済みの設定値。"""

    auto_start_enabled: bool = False


class AppSettingsManager:
    """設定ストアを介してアプリ設定を永続化する。"""

    def __init__(self, store: Optional[SettingsStore] = None) -> None:
        self._store: SettingsStore = store or create_settings_store()

    def load(self) -> AppSettings:
        """設定を読み込む。保存先が無い場合は既定値で作成する。"""

        if not self._store.exists():
            for key, value in DEFAULT_SETTINGS.items():
                if not self._store.contains(key):
                    self._store.set_value(key, value)
            self._store.sync()
        return AppSettings(auto_start_enabled=self.auto_start_enabled())

    def get(self, key: str, default: object | None = None) -> object | None:
        return self._store.value(key, DEFAULT_SETTINGS.get(key, default))

    def set(self, key: str, value: object) -> None:
        """値を更新して即座に保存する。"""

        self._store.set_value(key, value)
        self._store.sync()

    def auto_start_enabled(self) -> bool:
        value = self._store.value(AUTO_START_KEY, False)
        return value if isinstance(value, bool) else False

    def set_auto_start_enabled(self, enabled: bool) -> None:
        self.set(AUTO_START_KEY, bool(enabled))
