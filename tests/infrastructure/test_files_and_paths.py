"""JSON 入出力と設定ディレクトリ解決のテスト。"""

from __future__ import annotations

import json
import os
from pathlib import Path
import sys

import pytest

SRC_ROOT = Path(__file__).resolve().parents[2] / "src"
if str(SRC_ROOT) not in sys.path:
    sys.path.insert(0, str(SRC_ROOT))

from codetray.infrastructure import files as files_module  # noqa: E402
from codetray.infrastructure.files import read_json, write_json_atomic  # noqa: E402
from codetray.infrastructure.paths import (  # noqa: E402
    CONFIG_DIR_ENV_VAR,
    ensure_app_config_dir,
    get_app_config_dir,
)


def test_read_missing_file_returns_none(tmp_path: Path) -> None:
    assert read_json(tmp_path / "missing.json") is None


def test_write_creates_parent_and_leaves_no_temp_files(tmp_path: Path) -> None:
    target = tmp_path / "nested" / "data.json"

    write_json_atomic(target, [{"name": "日本語"}])

    assert json.loads(target.read_text(encoding="utf-8")) == [{"name": "日本語"}]
    assert "日本語" in target.read_text(encoding="utf-8")
    assert [entry.name for entry in target.parent.iterdir()] == ["data.json"]


def test_failed_replace_keeps_previous_content(tmp_path: Path, monkeypatch) -> None:
    target = tmp_path / "data.json"
    write_json_atomic(target, {"version": 1})

    def failing_replace(src, dst):
        raise OSError("replace failed")

    monkeypatch.setattr(files_module.os, "replace", failing_replace)

    with pytest.raises(OSError):
        write_json_atomic(target, {"version": 2})

    assert json.loads(target.read_text(encoding="utf-8")) == {"version": 1}
    assert [entry.name for entry in tmp_path.iterdir()] == ["data.json"]


def test_read_invalid_json_raises(tmp_path: Path) -> None:
    target = tmp_path / "broken.json"
    target.write_text("{", encoding="utf-8")

    with pytest.raises(ValueError):
        read_json(target)


def test_config_dir_override(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setenv(CONFIG_DIR_ENV_VAR, str(tmp_path / "custom"))

    assert get_app_config_dir() == tmp_path / "custom"
    created = ensure_app_config_dir()
    assert created.is_dir()


@pytest.mark.skipif(os.name == "nt", reason="POSIX の既定パスのみ確認する")
def test_config_dir_follows_xdg(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.delenv(CONFIG_DIR_ENV_VAR, raising=False)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))

    assert get_app_config_dir() == tmp_path / "xdg" / "codetray"


def test_ensure_config_dir_propagates_errors(tmp_path: Path, monkeypatch) -> None:
    blocker = tmp_path / "file"
    blocker.write_text("", encoding="utf-8")
    monkeypatch.setenv(CONFIG_DIR_ENV_VAR, str(blocker / "config"))

    with pytest.raises(OSError):
        ensure_app_config_dir()
