"""JSON ドキュメントの読み書きユーティリティ。"""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Any

__all__ = ["read_json", "write_json_atomic"]


def read_json(path: Path) -> Any:
    """JSON ファイルを読み込む。

    ファイルが存在しない場合は ``None`` を返す。読み込みや解析の失敗は
    :class:`OSError` / :class:`json.JSONDecodeError` として呼び出し側へ送出する。
    """

    if not path.exists():
        return None
    with path.open("r", encoding="utf-8") as handle:
        return json.load(handle)


def write_json_atomic(path: Path, payload: Any) -> None:
    """同一ディレクトリの一時ファイルへ書き出してから置き換える。"""

    path.parent.mkdir(parents=True, exist_ok=True)
    fd, temp_name = tempfile.mkstemp(
        prefix=f".{path.name}.", suffix=".tmp", dir=str(path.parent)
    )
    temp_path = Path(temp_name)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            json.dump(payload, handle, ensure_ascii=False, indent=2)
            handle.write("\n")
            handle.flush()
            os.fsync(handle.fileno())
        os.replace(temp_path, path)
    except BaseException:
        # 置き換え前に失敗した場合は一時ファイルだけを片付ける
        temp_path.unlink(missing_ok=True)
        raise
