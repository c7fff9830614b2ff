"""EditorLocator の探索とキャッシュのテスト。"""

from __future__ import annotations

from pathlib import Path
import sys
import threading
from typing import Iterable, Sequence

import pytest

SRC_ROOT = Path(__file__).resolve().parents[3] / "src"
if str(SRC_ROOT) not in sys.path:
    sys.path.insert(0, str(SRC_ROOT))

from codetray.domain.editors import (  # noqa: E402
    EditorCandidate,
    EditorLocator,
    ProbeStrategy,
)
from codetray.domain.errors import EditorNotFoundError  # noqa: E402


class RecordingProber:
    """検査結果を事前に決めておき、呼び出しを記録する。"""

    def __init__(self, available: Iterable[str] = ()) -> None:
        self.available = set(available)
        self.calls: list[tuple[str, str]] = []
        self._lock = threading.Lock()

    def path_exists(self, path: Path) -> bool:
        with self._lock:
            self.calls.append(("path", str(path)))
        return str(path) in self.available

    def runs_successfully(self, argv: Sequence[str], timeout: float) -> bool:
        with self._lock:
            self.calls.append(("run", argv[0]))
        assert list(argv[1:]) == ["--version"]
        assert timeout > 0
        return argv[0] in self.available


def _candidates() -> list[EditorCandidate]:
    return [
        EditorCandidate.for_command("code"),
        EditorCandidate.for_command("code.cmd"),
        EditorCandidate.for_path(Path("/opt/vscode/bin/code")),
        EditorCandidate.for_path(Path("/usr/bin/code")),
    ]


def test_third_candidate_is_selected() -> None:
    prober = RecordingProber({str(Path("/opt/vscode/bin/code")), str(Path("/usr/bin/code"))})
    locator = EditorLocator(_candidates(), prober=prober)

    editor = locator.resolve()

    assert editor.command == str(Path("/opt/vscode/bin/code"))
    assert editor.is_path is True
    assert prober.calls == [
        ("run", "code"),
        ("run", "code.cmd"),
        ("path", str(Path("/opt/vscode/bin/code"))),
    ]


def test_cached_result_skips_probing() -> None:
    prober = RecordingProber({"code.cmd"})
    locator = EditorLocator(_candidates(), prober=prober)

    first = locator.resolve()
    probes = len(prober.calls)
    second = locator.resolve()

    assert first == second
    assert len(prober.calls) == probes
    assert locator.resolved is True


def test_force_and_invalidate_probe_again() -> None:
    prober = RecordingProber({"code"})
    locator = EditorLocator(_candidates(), prober=prober)
    locator.resolve()

    prober.available = {str(Path("/usr/bin/code"))}
    refreshed = locator.resolve(force=True)
    assert refreshed.command == str(Path("/usr/bin/code"))

    locator.invalidate()
    assert locator.cached is None
    prober.available = {"code"}
    assert locator.resolve().command == "code"


def test_not_found_lists_tried_candidates() -> None:
    prober = RecordingProber()
    locator = EditorLocator(_candidates(), prober=prober)

    with pytest.raises(EditorNotFoundError) as excinfo:
        locator.resolve()

    assert excinfo.value.tried == tuple(candidate.command for candidate in _candidates())
    assert "CODETRAY_EDITOR" in str(excinfo.value)
    assert locator.resolved is False


def test_failed_force_drops_previous_cache() -> None:
    prober = RecordingProber({"code"})
    locator = EditorLocator(_candidates(), prober=prober)
    locator.resolve()

    prober.available = set()
    with pytest.raises(EditorNotFoundError):
        locator.resolve(force=True)

    assert locator.cached is None


def test_parallel_probing_respects_priority() -> None:
    prober = RecordingProber({"code.cmd", str(Path("/usr/bin/code"))})
    locator = EditorLocator(_candidates(), prober=prober, parallel=True)

    assert locator.resolve().command == "code.cmd"


def test_parallel_probing_without_match() -> None:
    locator = EditorLocator(_candidates(), prober=RecordingProber(), parallel=True)

    with pytest.raises(EditorNotFoundError):
        locator.resolve()


def test_still_available_checks_cached_path() -> None:
    target = str(Path("/usr/bin/code"))
    prober = RecordingProber({target})
    locator = EditorLocator(_candidates(), prober=prober)
    assert locator.still_available() is False

    locator.resolve()
    assert locator.still_available() is True

    prober.available = set()
    assert locator.still_available() is False


def test_command_candidates_are_assumed_available() -> None:
    prober = RecordingProber({"code"})
    locator = EditorLocator(_candidates(), prober=prober)
    locator.resolve()
    prober.available = set()

    assert locator.cached is not None
    assert locator.cached.candidate.strategy is ProbeStrategy.EXECUTE
    assert locator.still_available() is True
