"""設定ファイルの保存先など、パス関連のユーティリティ。"""

from __future__ import annotations

from .storage import (
    APP_DIR_NAME,
    CONFIG_DIR_ENV_VAR,
    ensure_app_config_dir,
    get_app_config_dir,
)

__all__ = [
    "APP_DIR_NAME",
    "CONFIG_DIR_ENV_VAR",
    "ensure_app_config_dir",
    "get_app_config_dir",
]
