"""設定ストア抽象の公開 API。"""

from .stores import (
    SETTINGS_FILENAME,
    InMemorySettingsStore,
    JsonFileSettingsStore,
    SettingsStore,
    create_settings_store,
)

__all__ = [
    "InMemorySettingsStore",
    "JsonFileSettingsStore",
    "SETTINGS_FILENAME",
    "SettingsStore",
    "create_settings_store",
]
