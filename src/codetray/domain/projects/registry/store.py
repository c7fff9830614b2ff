"""プロジェクト一覧を管理するレジストリ。"""

from __future__ import annotations

import logging
import shutil
from dataclasses import replace
from datetime import datetime
from pathlib import Path
from typing import Callable, Dict, Iterator, List, Optional

from ....infrastructure.files import read_json, write_json_atomic
from ....infrastructure.paths import get_app_config_dir
from ...errors import (
    DuplicateProjectError,
    PersistenceError,
    ProjectNotFoundError,
    RegistryCorruptError,
)
from ..detection import ProjectMetadataDetector
from .models import ListOrder, ProjectRecord, utc_now

LOGGER = logging.getLogger(__name__)

REGISTRY_FILENAME = "projects.json"
CORRUPT_SUFFIX = ".corrupt"

__all__ = ["ProjectListView", "ProjectRegistry", "REGISTRY_FILENAME", "normalize_path"]


def normalize_path(path: Path | str) -> Path:
    """レジストリのキーとして使う絶対パスへ正規化する。"""

    candidate = Path(path)
    try:
        candidate = candidate.expanduser()
    except RuntimeError:
        pass
    return candidate.resolve(strict=False)


class ProjectListView:
    """レジストリの現在の内容を指定順で列挙するビュー。

    反復のたびに最新の状態からスナップショットを作るため、何度でも
    列挙し直せる。
    """

    def __init__(self, source: Callable[[], List[ProjectRecord]], order: ListOrder) -> None:
        self._source = source
        self._order = order

    @property
    def order(self) -> ListOrder:
        return self._order

    def __iter__(self) -> Iterator[ProjectRecord]:
        records = self._source()
        if self._order is ListOrder.NAME:
            records = sorted(records, key=lambda record: record.name.lower())
        return iter(records)

    def __len__(self) -> int:
        return len(self._source())


class ProjectRegistry:
    """プロジェクトの一覧を保持し、変更のたびに JSON へ書き出す。"""

    def __init__(
        self,
        registry_path: Optional[Path] = None,
        *,
        detector: Optional[ProjectMetadataDetector] = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._registry_path = registry_path or get_app_config_dir() / REGISTRY_FILENAME
        self._detector = detector or ProjectMetadataDetector()
        self._clock = clock
        self._records: Dict[Path, ProjectRecord] = {}
        self._dirty = False
        self.load_error: Optional[RegistryCorruptError] = None
        try:
            self.reload()
        except RegistryCorruptError:
            # 呼び出し側は load_error で確認する
            pass

    # 公開 API ----------------------------------------------------------
    @property
    def path(self) -> Path:
        return self._registry_path

    @property
    def dirty(self) -> bool:
        """最後の保存に失敗し、未保存の変更が残っているか。"""

        return self._dirty

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, path: object) -> bool:
        if not isinstance(path, (str, Path)):
            return False
        return normalize_path(path) in self._records

    def list(self, order: ListOrder = ListOrder.INSERTION) -> ProjectListView:
        return ProjectListView(self.records, order)

    def records(self) -> List[ProjectRecord]:
        return list(self._records.values())

    def find(self, path: Path | str) -> Optional[ProjectRecord]:
        return self._records.get(normalize_path(path))

    def add(self, directory: Path | str) -> ProjectRecord:
        """ディレクトリを登録し、追加したレコードを返す。

        同じパスが登録済みの場合は状態を変更せずに
        :class:`DuplicateProjectError` を送出する。
        """

        path = normalize_path(directory)
        if path in self._records:
            raise DuplicateProjectError(path)

        metadata = self._detector.detect(path)
        record = ProjectRecord(
            name=path.name or str(path),
            path=path,
            ecosystem_type=metadata.ecosystem_type,
            framework=metadata.framework,
            added_at=self._clock(),
        )
        self._records[path] = record
        LOGGER.info(
            "プロジェクトを追加しました: %s (%s/%s)",
            path,
            record.ecosystem_type,
            record.framework,
        )
        self.save()
        return record

    def remove(self, path: Path | str) -> ProjectRecord:
        key = normalize_path(path)
        record = self._records.pop(key, None)
        if record is None:
            raise ProjectNotFoundError(key)
        LOGGER.info("プロジェクトを削除しました: %s", key)
        self.save()
        return record

    def record_opened(self, path: Path | str) -> ProjectRecord:
        key = normalize_path(path)
        record = self._records.get(key)
        if record is None:
            raise ProjectNotFoundError(key)
        updated = record.opened(self._clock())
        self._records[key] = updated
        self.save()
        return updated

    def reload(self) -> None:
        """メモリ上の内容を破棄して保存先から読み直す。"""

        self._records = {}
        self._dirty = False
        self.load_error = None
        try:
            payload = self._load_payload()
        except RegistryCorruptError as exc:
            self.load_error = exc
            raise
        if payload is None:
            return
        for item in payload:
            if not isinstance(item, dict):
                LOGGER.warning("プロジェクト一覧の不正な項目を無視します: %r", item)
                continue
            record = ProjectRecord.from_payload(item)
            if record is None:
                LOGGER.warning("path を持たない項目を無視します: %r", item)
                continue
            key = normalize_path(record.path)
            if key in self._records:
                LOGGER.warning("重複したプロジェクトを無視します: %s", key)
                continue
            self._records[key] = record if record.path == key else replace(record, path=key)
        LOGGER.debug("%d 件のプロジェクトを読み込みました", len(self._records))

    def save(self) -> None:
        """現在の内容をすべて書き出す。

        失敗してもメモリ上の変更は保持し、:class:`PersistenceError` を送出する。
        """

        payload = [record.to_payload() for record in self._records.values()]
        try:
            write_json_atomic(self._registry_path, payload)
        except OSError as exc:
            self._dirty = True
            LOGGER.error("プロジェクト一覧の保存に失敗しました: %s", self._registry_path, exc_info=True)
            raise PersistenceError(self._registry_path, str(exc)) from exc
        self._dirty = False

    def flush(self) -> bool:
        """未保存の変更があれば保存を再試行する。"""

        if not self._dirty:
            return False
        self.save()
        return True

    # 内部処理 ----------------------------------------------------------
    def _load_payload(self) -> Optional[list]:
        try:
            payload = read_json(self._registry_path)
        except (OSError, ValueError) as exc:
            raise self._corrupt(str(exc)) from exc
        if payload is None:
            return None
        if not isinstance(payload, list):
            raise self._corrupt("JSON 配列ではありません")
        return payload

    def _corrupt(self, detail: str) -> RegistryCorruptError:
        backup = self._backup_corrupt_file()
        LOGGER.warning(
            "プロジェクト一覧が壊れているため空の状態で開始します: %s (%s)",
            self._registry_path,
            detail,
        )
        return RegistryCorruptError(self._registry_path, detail, backup)

    def _backup_corrupt_file(self) -> Optional[Path]:
        backup = self._registry_path.with_name(self._registry_path.name + CORRUPT_SUFFIX)
        try:
            shutil.copy2(self._registry_path, backup)
        except OSError:
            LOGGER.debug("破損ファイルの退避に失敗しました: %s", backup, exc_info=True)
            return None
        return backup
