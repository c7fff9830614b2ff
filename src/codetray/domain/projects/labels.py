"""メニュー表示用のラベルとアイコン。"""

from __future__ import annotations

from typing import Dict, Optional

from .registry.models import ProjectRecord

__all__ = ["display_name", "ecosystem_label", "framework_label", "project_icon", "type_icon"]

ECOSYSTEM_LABELS: Dict[str, str] = {
    "node": "Node.js",
    "python": "Python",
    ".NET": ".NET",
    "Java": "Java",
    "Go": "Go",
    "Rust": "Rust",
    "generic": "その他",
}

FRAMEWORK_LABELS: Dict[str, str] = {
    "react": "React",
    "Next.js": "Next.js",
    "vue": "Vue.js",
    "Nuxt.js": "Nuxt.js",
    "angular": "Angular",
    "svelte": "Svelte",
    "express": "Express",
    "electron": "Electron",
    "django": "Django",
    "flask": "Flask",
    "fastapi": "FastAPI",
    "Maven": "Maven",
    "Gradle": "Gradle",
}

TYPE_ICONS: Dict[str, str] = {
    "node": "💚",
    "python": "🐍",
    ".NET": "💙",
    "Java": "☕",
    "Go": "🐹",
    "Rust": "🦀",
    "generic": "📁",
}

FRAMEWORK_ICONS: Dict[str, str] = {
    "react": "⚛️",
    "Next.js": "▲",
    "vue": "💚",
    "Nuxt.js": "💚",
    "angular": "🅰️",
    "svelte": "🧡",
    "express": "🚂",
    "electron": "⚡",
    "django": "🐍",
    "flask": "🌶️",
    "fastapi": "⚡",
    "Maven": "☕",
    "Gradle": "🐘",
}

DEFAULT_ICON = "📁"


def ecosystem_label(ecosystem_type: Optional[str]) -> str:
    key = ecosystem_type or "generic"
    return ECOSYSTEM_LABELS.get(key, key)


def framework_label(framework: Optional[str]) -> Optional[str]:
    if not framework:
        return None
    return FRAMEWORK_LABELS.get(framework, framework)


def type_icon(ecosystem_type: Optional[str]) -> str:
    return TYPE_ICONS.get(ecosystem_type or "generic", DEFAULT_ICON)


def project_icon(record: ProjectRecord) -> str:
    """フレームワークのアイコンを優先し、なければ種類のアイコンを返す。"""

    if record.framework and record.framework in FRAMEWORK_ICONS:
        return FRAMEWORK_ICONS[record.framework]
    return type_icon(record.ecosystem_type)


def display_name(record: ProjectRecord) -> str:
    framework = framework_label(record.framework)
    if framework:
        return f"{record.name} ({framework})"
    return record.name
