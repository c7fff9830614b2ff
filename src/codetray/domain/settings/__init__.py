"""アプリケーション設定。"""

from .app_settings import AUTO_START_KEY, DEFAULT_SETTINGS, AppSettings, AppSettingsManager

__all__ = ["AUTO_START_KEY", "AppSettings", "AppSettingsManager", "DEFAULT_SETTINGS"]
