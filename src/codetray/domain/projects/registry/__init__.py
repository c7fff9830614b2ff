"""プロジェクトレジストリ関連のエクスポート。"""

from .models import ListOrder, ProjectRecord
from .service import ProjectRegistryService
from .store import REGISTRY_FILENAME, ProjectListView, ProjectRegistry, normalize_path

__all__ = [
    "ListOrder",
    "ProjectListView",
    "ProjectRecord",
    "ProjectRegistry",
    "ProjectRegistryService",
    "REGISTRY_FILENAME",
    "normalize_path",
]
