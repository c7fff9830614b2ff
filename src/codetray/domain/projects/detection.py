"""マーカーファイルからプロジェクトの種類を推定する。"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Mapping, Optional, Tuple

LOGGER = logging.getLogger(__name__)

__all__ = [
    "GENERIC_TYPE",
    "ProjectMetadata",
    "ProjectMetadataDetector",
    "detect",
]

GENERIC_TYPE = "generic"

PYTHON_MARKERS: Tuple[str, ...] = (
    "requirements.txt",
    "setup.py",
    "pyproject.toml",
    "Pipfile",
)
DOTNET_SUFFIXES: Tuple[str, ...] = (".csproj", ".sln", ".fsproj", ".vbproj")

# (依存名, フレームワーク名, 上書きする依存名, 上書き後のフレームワーク名)
NODE_FRAMEWORK_RULES: Tuple[Tuple[str, str, Optional[str], Optional[str]], ...] = (
    ("react", "react", "next", "Next.js"),
    ("vue", "vue", "nuxt", "Nuxt.js"),
    ("@angular/core", "angular", None, None),
    ("svelte", "svelte", None, None),
    ("express", "express", None, None),
    ("electron", "electron", None, None),
)


@dataclass(frozen=True, slots=True)
class ProjectMetadata:
    """推定したエコシステムとフレームワーク。"""

    ecosystem_type: str = GENERIC_TYPE
    framework: Optional[str] = None


class ProjectMetadataDetector:
    """ディレクトリ直下のマーカーファイルを先勝ちで判定する。"""

    def detect(self, directory: Path) -> ProjectMetadata:
        try:
            return self._detect(Path(directory))
        except (OSError, ValueError):
            LOGGER.debug("プロジェクト種別の判定に失敗しました: %s", directory, exc_info=True)
            return ProjectMetadata()

    def _detect(self, directory: Path) -> ProjectMetadata:
        package_json = directory / "package.json"
        if package_json.exists():
            return ProjectMetadata("node", self._detect_node_framework(package_json))

        if any((directory / marker).exists() for marker in PYTHON_MARKERS):
            return ProjectMetadata("python", self._detect_python_framework(directory))

        if self._has_dotnet_project(directory):
            return ProjectMetadata(".NET")

        has_pom = (directory / "pom.xml").exists()
        has_gradle = (directory / "build.gradle").exists()
        if has_pom or has_gradle:
            framework = None
            if has_pom:
                framework = "Maven"
            if has_gradle:
                framework = "Gradle"
            return ProjectMetadata("Java", framework)

        if (directory / "go.mod").exists():
            return ProjectMetadata("Go")

        if (directory / "Cargo.toml").exists():
            return ProjectMetadata("Rust")

        return ProjectMetadata()

    # 個別判定 ----------------------------------------------------------
    @staticmethod
    def _detect_node_framework(package_json: Path) -> Optional[str]:
        with package_json.open("r", encoding="utf-8") as handle:
            payload = json.load(handle)
        if not isinstance(payload, dict):
            return None
        dependencies: Dict[str, object] = {}
        for key in ("dependencies", "devDependencies"):
            section = payload.get(key)
            if isinstance(section, Mapping):
                dependencies.update(section)

        for dependency, framework, override, override_framework in NODE_FRAMEWORK_RULES:
            if dependency not in dependencies:
                continue
            if override is not None and override in dependencies:
                return override_framework
            return framework
        return None

    @staticmethod
    def _detect_python_framework(directory: Path) -> Optional[str]:
        if (directory / "manage.py").exists():
            return "django"
        if not ((directory / "app.py").exists() or (directory / "main.py").exists()):
            return None
        requirements = directory / "requirements.txt"
        if not requirements.exists():
            return None
        content = requirements.read_text(encoding="utf-8", errors="replace")
        framework = None
        if "flask" in content:
            framework = "flask"
        if "fastapi" in content:
            framework = "fastapi"
        return framework

    @staticmethod
    def _has_dotnet_project(directory: Path) -> bool:
        return any(entry.name.endswith(DOTNET_SUFFIXES) for entry in directory.iterdir())


def detect(directory: Path) -> ProjectMetadata:
    """既定の判定器でディレクトリを分類する。"""

    return ProjectMetadataDetector().detect(directory)
