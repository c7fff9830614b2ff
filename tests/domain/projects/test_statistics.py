"""利用統計と表示ラベルのテスト。"""

from __future__ import annotations

from pathlib import Path
import sys

SRC_ROOT = Path(__file__).resolve().parents[3] / "src"
if str(SRC_ROOT) not in sys.path:
    sys.path.insert(0, str(SRC_ROOT))

from codetray.domain.projects import ProjectRecord, collect_statistics, most_used  # noqa: E402
from codetray.domain.projects.labels import (  # noqa: E402
    display_name,
    ecosystem_label,
    project_icon,
    type_icon,
)


def _record(name: str, ecosystem: str | None = None, framework: str | None = None, count: int = 0) -> ProjectRecord:
    return ProjectRecord(
        name=name,
        path=Path("/work") / name,
        ecosystem_type=ecosystem,
        framework=framework,
        open_count=count,
    )


def test_most_used_skips_unopened_and_keeps_ties_in_order() -> None:
    records = [
        _record("a", count=1),
        _record("b", count=0),
        _record("c", count=3),
        _record("d", count=1),
    ]

    assert [record.name for record in most_used(records)] == ["c", "a", "d"]
    assert [record.name for record in most_used(records, 1)] == ["c"]


def test_most_used_caps_at_five() -> None:
    records = [_record(f"p{i}", count=i + 1) for i in range(8)]

    assert [record.name for record in most_used(records)] == ["p7", "p6", "p5", "p4", "p3"]


def test_collect_statistics_totals() -> None:
    records = [
        _record("web", "node", "react", count=4),
        _record("api", "python", "fastapi", count=2),
        _record("notes", "generic"),
        _record("site", "node", "react", count=1),
    ]

    stats = collect_statistics(records)

    assert stats.total_projects == 4
    assert stats.used_projects == 3
    assert stats.total_opens == 7
    assert stats.types == {"node (react)": 2, "python (fastapi)": 1, "generic": 1}
    assert stats.top == [("web", 4), ("api", 2), ("site", 1)]

    text = stats.format_text()
    assert "登録プロジェクト数: 4" in text
    assert "web: 4 回" in text


def test_empty_statistics_text() -> None:
    text = collect_statistics([]).format_text()

    assert "登録プロジェクト数: 0" in text
    assert "まだ開かれたプロジェクトはありません" in text


def test_labels_and_icons() -> None:
    react = _record("web", "node", "react")
    plain = _record("notes")
    unknown = _record("odd", "Elixir", "Phoenix")

    assert display_name(react) == "web (React)"
    assert display_name(plain) == "notes"
    assert display_name(unknown) == "odd (Phoenix)"
    assert ecosystem_label("node") == "Node.js"
    assert ecosystem_label(None) == "その他"
    assert ecosystem_label("Elixir") == "Elixir"
    assert project_icon(react) == "⚛️"
    assert project_icon(plain) == "📁"
    assert type_icon("Rust") == "🦀"
    assert type_icon("Elixir") == "📁"
