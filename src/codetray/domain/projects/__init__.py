"""プロジェクトジャンルのドメインモデルとサービス。"""

from __future__ import annotations

from .detection import GENERIC_TYPE, ProjectMetadata, ProjectMetadataDetector, detect
from .registry import (
    REGISTRY_FILENAME,
    ListOrder,
    ProjectListView,
    ProjectRecord,
    ProjectRegistry,
    ProjectRegistryService,
    normalize_path,
)
from .statistics import ProjectStatistics, collect_statistics, most_used

__all__ = [
    "GENERIC_TYPE",
    "ListOrder",
    "ProjectListView",
    "ProjectMetadata",
    "ProjectMetadataDetector",
    "ProjectRecord",
    "ProjectRegistry",
    "ProjectRegistryService",
    "ProjectStatistics",
    "REGISTRY_FILENAME",
    "collect_statistics",
    "detect",
    "most_used",
    "normalize_path",
]
