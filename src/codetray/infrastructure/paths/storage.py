"""設定ファイル配置のための共通関数。"""

from __future__ import annotations

import os
from pathlib import Path

__all__ = [
    "APP_DIR_NAME",
    "CONFIG_DIR_ENV_VAR",
    "ensure_app_config_dir",
    "get_app_config_dir",
]

APP_DIR_NAME = "CodeTray"
CONFIG_DIR_ENV_VAR = "CODETRAY_CONFIG_DIR"


def get_app_config_dir() -> Path:
    """ユーザーごとの設定ディレクトリを返す。"""

    override = os.environ.get(CONFIG_DIR_ENV_VAR)
    if override:
        return Path(override).expanduser()
    if os.name == "nt":
        base = os.environ.get("APPDATA")
        if base:
            return Path(base) / APP_DIR_NAME
        base = os.environ.get("LOCALAPPDATA")
        if base:
            return Path(base) / APP_DIR_NAME
    # POSIX 系
    xdg_config = os.environ.get("XDG_CONFIG_HOME")
    if xdg_config:
        return Path(xdg_config) / APP_DIR_NAME.lower()
    return Path.home() / ".config" / APP_DIR_NAME.lower()


def ensure_app_config_dir() -> Path:
    """設定ディレクトリを作成して返す。

    作成できない場合の :class:`OSError` は呼び出し側 (起動処理) へ伝播する。
    """

    config_dir = get_app_config_dir()
    config_dir.mkdir(parents=True, exist_ok=True)
    return config_dir
