"""エディタ実行ファイルの探索とキャッシュ。"""

from __future__ import annotations

import logging
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence

from ...infrastructure.processes import CommandProber, SubprocessProber
from ..errors import EditorNotFoundError
from .candidates import EditorCandidate, ProbeStrategy, default_candidates

LOGGER = logging.getLogger(__name__)

__all__ = ["EditorCommand", "EditorLocator"]


@dataclass(frozen=True, slots=True)
class EditorCommand:
    """探索で確定したエディタコマンド。"""

    command: str
    candidate: EditorCandidate

    @property
    def is_path(self) -> bool:
        return self.candidate.strategy is ProbeStrategy.PATH_EXISTS


class EditorLocator:
    """候補を優先順に検査し、最初に使えたコマンドをプロセス存続中キャッシュする。"""

    def __init__(
        self,
        candidates: Optional[Sequence[EditorCandidate]] = None,
        *,
        prober: Optional[CommandProber] = None,
        parallel: bool = False,
    ) -> None:
        self._candidates: List[EditorCandidate] = list(
            candidates if candidates is not None else default_candidates()
        )
        self._prober: CommandProber = prober or SubprocessProber()
        self._parallel = parallel
        self._cached: Optional[EditorCommand] = None

    @property
    def candidates(self) -> List[EditorCandidate]:
        return list(self._candidates)

    @property
    def resolved(self) -> bool:
        return self._cached is not None

    @property
    def cached(self) -> Optional[EditorCommand]:
        return self._cached

    def invalidate(self) -> None:
        """キャッシュを破棄し、次回の :meth:`resolve` で再探索させる。"""

        if self._cached is not None:
            LOGGER.info("エディタのキャッシュを破棄しました: %s", self._cached.command)
        self._cached = None

    def resolve(self, *, force: bool = False) -> EditorCommand:
        """利用可能なエディタを返す。見つからなければ :class:`EditorNotFoundError`。"""

        if self._cached is not None and not force:
            return self._cached

        self._cached = None
        if self._parallel:
            candidate = self._probe_parallel()
        else:
            candidate = self._probe_sequential()

        if candidate is None:
            tried = tuple(entry.command for entry in self._candidates)
            LOGGER.warning("エディタが見つかりませんでした。候補: %s", ", ".join(tried))
            raise EditorNotFoundError(tried)

        self._cached = EditorCommand(command=candidate.command, candidate=candidate)
        LOGGER.info("エディタを検出しました: %s", candidate.command)
        return self._cached

    def still_available(self) -> bool:
        """キャッシュ済みのパス候補がまだ存在するかを確認する。"""

        cached = self._cached
        if cached is None:
            return False
        if not cached.is_path:
            return True
        return self._prober.path_exists(Path(cached.command))

    # 内部処理 ----------------------------------------------------------
    def _probe(self, candidate: EditorCandidate) -> bool:
        if candidate.strategy is ProbeStrategy.PATH_EXISTS:
            found = self._prober.path_exists(Path(candidate.command))
        else:
            found = self._prober.runs_successfully(candidate.probe_argv(), candidate.timeout)
        LOGGER.debug("エディタ候補を検査しました: %s -> %s", candidate.label, found)
        return found

    def _probe_sequential(self) -> Optional[EditorCandidate]:
        for candidate in self._candidates:
            if self._probe(candidate):
                return candidate
        return None

    def _probe_parallel(self) -> Optional[EditorCandidate]:
        """全候補を並列に検査し、優先順位の最も高い成功候補を返す。

        上位の候補がすべて失敗した時点で確定し、残りの検査は取り消す。
        """

        if not self._candidates:
            return None
        executor = ThreadPoolExecutor(max_workers=len(self._candidates))
        futures: List[Future[bool]] = [
            executor.submit(self._probe, candidate) for candidate in self._candidates
        ]
        try:
            for candidate, future in zip(self._candidates, futures):
                if future.result():
                    return candidate
        finally:
            # 下位候補の完了は待たない
            executor.shutdown(wait=False, cancel_futures=True)
        return None
