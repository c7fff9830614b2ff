"""利用統計の集計。"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Tuple

from .registry.models import ProjectRecord

__all__ = ["ProjectStatistics", "collect_statistics", "most_used"]

MOST_USED_LIMIT = 5


def most_used(records: Iterable[ProjectRecord], limit: int = MOST_USED_LIMIT) -> List[ProjectRecord]:
    """一度以上開かれたプロジェクトを利用回数の多い順に返す。"""

    opened = [record for record in records if record.open_count > 0]
    # sorted は安定なので同数の場合は登録順を保つ
    opened.sort(key=lambda record: record.open_count, reverse=True)
    return opened[: max(limit, 0)]


def type_label(record: ProjectRecord) -> str:
    ecosystem = record.ecosystem_type or "generic"
    if record.framework:
        return f"{ecosystem} ({record.framework})"
    return ecosystem


@dataclass(slots=True)
class ProjectStatistics:
    """レジストリ全体の集計結果。"""

    total_projects: int = 0
    used_projects: int = 0
    total_opens: int = 0
    types: Dict[str, int] = field(default_factory=dict)
    top: List[Tuple[str, int]] = field(default_factory=list)

    def format_text(self) -> str:
        """通知やダイアログ向けの複数行テキストへ整形する。"""

        type_lines = [f"  • {label}: {count}" for label, count in self.types.items()]
        top_lines = [f"  • {name}: {count} 回" for name, count in self.top]
        lines = [
            f"登録プロジェクト数: {self.total_projects}",
            f"利用済みプロジェクト数: {self.used_projects}",
            f"累計起動回数: {self.total_opens}",
            "",
            "種類別:",
            *(type_lines or ["  なし"]),
            "",
            "よく使うプロジェクト:",
            *(top_lines or ["  まだ開かれたプロジェクトはありません"]),
        ]
        return "\n".join(lines)


def collect_statistics(records: Iterable[ProjectRecord], top_limit: int = 3) -> ProjectStatistics:
    items = list(records)
    types = Counter(type_label(record) for record in items)
    return ProjectStatistics(
        total_projects=len(items),
        used_projects=sum(1 for record in items if record.open_count > 0),
        total_opens=sum(record.open_count for record in items),
        types=dict(types),
        top=[(record.name, record.open_count) for record in most_used(items, top_limit)],
    )
