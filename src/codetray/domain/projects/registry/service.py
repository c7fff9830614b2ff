"""プロジェクトレジストリ操作の責務を分離したサービス。"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional

from ..statistics import ProjectStatistics, collect_statistics, most_used
from .models import ListOrder, ProjectRecord
from .store import ProjectListView, ProjectRegistry


@dataclass(slots=True)
class ProjectRegistryService:
    """プロジェクトレジストリの問い合わせと更新を提供する。"""

    registry: ProjectRegistry

    def records(self, order: ListOrder = ListOrder.INSERTION) -> ProjectListView:
        """現在登録されているプロジェクト一覧を返す。"""

        return self.registry.list(order)

    def find(self, path: Path | str) -> Optional[ProjectRecord]:
        return self.registry.find(path)

    def add(self, directory: Path | str) -> ProjectRecord:
        """ディレクトリを登録する。重複時は例外がそのまま伝播する。"""

        return self.registry.add(directory)

    def remove(self, path: Path | str) -> ProjectRecord:
        """指定パスのプロジェクト登録を解除する。"""

        return self.registry.remove(path)

    def record_opened(self, path: Path | str) -> ProjectRecord:
        return self.registry.record_opened(path)

    def reload(self) -> None:
        self.registry.reload()

    def most_used(self, limit: int = 5) -> List[ProjectRecord]:
        return most_used(self.registry.records(), limit)

    def grouped_by_type(self) -> Dict[str, List[ProjectRecord]]:
        """エコシステム別に登録順でまとめる。"""

        groups: Dict[str, List[ProjectRecord]] = {}
        for record in self.registry.records():
            groups.setdefault(record.ecosystem_type or "generic", []).append(record)
        return groups

    def statistics(self) -> ProjectStatistics:
        return collect_statistics(self.registry.records())
