"""設定ストアの実装と抽象。"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, MutableMapping, Optional, Protocol

from ...domain.errors import PersistenceError
from ..files import read_json, write_json_atomic
from ..paths import get_app_config_dir

LOGGER = logging.getLogger(__name__)

SETTINGS_FILENAME = "settings.json"


class SettingsStore(Protocol):
    """設定ストアに必要な最小インターフェース。"""

    def exists(self) -> bool:
        """永続化先に設定が保存済みかを返す。"""

    def value(self, key: str, default: object | None = None) -> object | None:
        """キーに紐づく値を取得する。"""

    def set_value(self, key: str, value: object) -> None:
        """キーへ値を書き込む。"""

    def contains(self, key: str) -> bool:
        """キーが存在するかを返す。"""

    def remove(self, key: str) -> None:
        """キーを削除する。"""

    def sync(self) -> None:
        """ストアへ変更を確定する。"""


@dataclass(slots=True)
class InMemorySettingsStore:
    """ファイルへ依存しないインメモリ設定ストア。"""

    _store: MutableMapping[str, Any] = field(default_factory=dict)
    sync_count: int = 0

    def exists(self) -> bool:
        return self.sync_count > 0

    def value(self, key: str, default: object | None = None) -> object | None:
        return self._store.get(key, default)

    def set_value(self, key: str, value: object) -> None:
        self._store[key] = value

    def contains(self, key: str) -> bool:
        return key in self._store

    def remove(self, key: str) -> None:
        self._store.pop(key, None)

    def sync(self) -> None:
        self.sync_count += 1


class JsonFileSettingsStore:
    """フラットな JSON オブジェクトとして設定を保存するストア。"""

    def __init__(self, path: Path) -> None:
        self._path = path
        self._values: Dict[str, Any] = {}
        self._load()

    @property
    def path(self) -> Path:
        return self._path

    def exists(self) -> bool:
        return self._path.exists()

    def value(self, key: str, default: object | None = None) -> object | None:
        return self._values.get(key, default)

    def set_value(self, key: str, value: object) -> None:
        self._values[key] = value

    def contains(self, key: str) -> bool:
        return key in self._values

    def remove(self, key: str) -> None:
        self._values.pop(key, None)

    def sync(self) -> None:
        try:
            write_json_atomic(self._path, dict(self._values))
        except OSError as exc:
            LOGGER.error("設定ファイルの保存に失敗しました: %s", self._path, exc_info=True)
            raise PersistenceError(self._path, str(exc)) from exc

    # 内部処理 ----------------------------------------------------------
    def _load(self) -> None:
        try:
            payload = read_json(self._path)
        except (OSError, json.JSONDecodeError):
            LOGGER.warning("設定ファイルを読み込めないため既定値を使用します: %s", self._path)
            return
        if payload is None:
            return
        if not isinstance(payload, dict):
            LOGGER.warning("設定ファイルの形式が不正です: %s", self._path)
            return
        self._values = {str(key): value for key, value in payload.items()}


def create_settings_store(path: Optional[Path] = None) -> SettingsStore:
    """既定の保存先を用いて設定ストアを生成する。"""

    target = path or get_app_config_dir() / SETTINGS_FILENAME
    return JsonFileSettingsStore(target)


__all__ = [
    "InMemorySettingsStore",
    "JsonFileSettingsStore",
    "SETTINGS_FILENAME",
    "SettingsStore",
    "create_settings_store",
]
