"""プロジェクトレジストリ用の値オブジェクト。"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

__all__ = ["ListOrder", "ProjectRecord", "utc_now"]

LOGGER = logging.getLogger(__name__)

EPOCH = datetime.fromtimestamp(0, timezone.utc)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _parse_timestamp(value: object) -> Optional[datetime]:
    if not isinstance(value, str) or not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        LOGGER.debug("日時を解釈できません: %r", value)
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _format_timestamp(value: Optional[datetime]) -> Optional[str]:
    if value is None:
        return None
    return value.isoformat()


def _optional_str(value: object) -> Optional[str]:
    if isinstance(value, str) and value:
        return value
    return None


class ListOrder(Enum):
    """一覧の並び順。"""

    INSERTION = "insertion"
    NAME = "name"


@dataclass(frozen=True, slots=True)
class ProjectRecord:
    """登録済みプロジェクトの表示名・パス・推定情報・利用統計を保持する。"""

    name: str
    path: Path
    ecosystem_type: Optional[str] = None
    framework: Optional[str] = None
    added_at: datetime = EPOCH
    last_opened: Optional[datetime] = None
    open_count: int = 0

    def opened(self, when: datetime) -> "ProjectRecord":
        """利用統計を更新したレコードを返す。"""

        return replace(self, last_opened=when, open_count=self.open_count + 1)

    def to_payload(self) -> Dict[str, Any]:
        """JSON 永続化用の辞書へ変換する。"""

        return {
            "name": self.name,
            "path": str(self.path),
            "ecosystemType": self.ecosystem_type,
            "framework": self.framework,
            "addedAt": _format_timestamp(self.added_at),
            "lastOpened": _format_timestamp(self.last_opened),
            "openCount": self.open_count,
        }

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> Optional["ProjectRecord"]:
        """辞書データから値オブジェクトを復元する。

        ``path`` を持たない項目は ``None`` を返す。未知のキーは無視し、
        欠けている任意項目は未設定またはゼロとして扱う。旧形式の ``type``
        キーは ``ecosystemType`` の代わりとして読み込む。
        """

        raw_path = payload.get("path")
        if not isinstance(raw_path, str) or not raw_path.strip():
            return None
        path = Path(raw_path)

        raw_name = payload.get("name")
        name = raw_name if isinstance(raw_name, str) and raw_name else path.name

        ecosystem_type = _optional_str(payload.get("ecosystemType"))
        if ecosystem_type is None:
            ecosystem_type = _optional_str(payload.get("type"))

        raw_count = payload.get("openCount")
        open_count = raw_count if isinstance(raw_count, int) and not isinstance(raw_count, bool) else 0

        added_at = _parse_timestamp(payload.get("addedAt"))
        return cls(
            name=name,
            path=path,
            ecosystem_type=ecosystem_type,
            framework=_optional_str(payload.get("framework")),
            added_at=added_at or EPOCH,
            last_opened=_parse_timestamp(payload.get("lastOpened")),
            open_count=max(open_count, 0),
        )
