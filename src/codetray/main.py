"""アプリケーションのエントリポイント。"""

from __future__ import annotations

import logging
import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Literal

from qtpy import QtWidgets

LOGGER = logging.getLogger(__name__)

ExitReason = Literal["manual", "auto_exit", "already_running", "error"]


@dataclass
class MainRunResult:
    """`main` 実行結果の概要。"""

    exit_code: int
    reason: ExitReason
    error_message: str | None = None


def _ensure_package_root() -> str:
    """スクリプト実行時にパッケージルートを ``sys.path`` に追加する。"""

    package_root = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
    if package_root not in sys.path:
        sys.path.insert(0, package_root)
    return package_root


def _configure_logging(level_name: str | None) -> None:
    level = logging.getLevelName((level_name or "INFO").upper())
    if not isinstance(level, int):
        level = logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _parse_auto_exit_delay(env_value: str | None) -> int | None:
    """環境変数から自動終了までの遅延時間をミリ秒で取得する。"""

    if not env_value:
        return None
    try:
        delay = int(env_value)
    except ValueError:
        return None
    return max(delay, 0)


def _write_exit_report(path: str, result: MainRunResult) -> None:
    """終了結果を JSON で出力する。"""

    if __package__:
        from .infrastructure.files import write_json_atomic
    else:
        _ensure_package_root()
        from codetray.infrastructure.files import write_json_atomic

    payload = {
        "exit_code": result.exit_code,
        "reason": result.reason,
        "error_message": result.error_message,
    }
    write_json_atomic(Path(path), payload)


def _finish(result: MainRunResult, exit_report_path: str | None) -> MainRunResult:
    if exit_report_path:
        _write_exit_report(exit_report_path, result)
    return result


def _run_application(
    *,
    headless: bool,
    auto_exit_ms: int | None,
    show_tray: bool,
    exit_report_path: str | None,
    config_dir: Path | None = None,
) -> MainRunResult:
    """Qt アプリケーションを起動し、終了理由を判別する。"""

    if __package__:
        from .infrastructure.paths import ensure_app_config_dir
        from .ui.single_instance import SingleInstanceGuard
        from .ui.controller import TrayController
        from .ui.tray import QtTrayNotifier, TrayIcon
    else:
        _ensure_package_root()
        from codetray.infrastructure.paths import ensure_app_config_dir
        from codetray.ui.single_instance import SingleInstanceGuard
        from codetray.ui.controller import TrayController
        from codetray.ui.tray import QtTrayNotifier, TrayIcon

    exit_reason: dict[str, ExitReason] = {"value": "manual"}

    if headless:
        os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

    try:
        if config_dir is None:
            config_dir = ensure_app_config_dir()
        else:
            config_dir.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        LOGGER.error("設定ディレクトリを作成できません: %s", exc)
        return _finish(
            MainRunResult(exit_code=1, reason="error", error_message=str(exc)),
            exit_report_path,
        )

    try:
        app = QtWidgets.QApplication.instance() or QtWidgets.QApplication(sys.argv)
    except Exception as exc:  # pragma: no cover - 環境依存エラーの保険
        return _finish(
            MainRunResult(exit_code=1, reason="error", error_message=str(exc)),
            exit_report_path,
        )
    app.setQuitOnLastWindowClosed(False)

    guard = SingleInstanceGuard(config_dir)
    if not guard.acquire():
        guard.notify_running_instance()
        return _finish(
            MainRunResult(
                exit_code=0,
                reason="already_running",
                error_message="CodeTray は既に起動しています。",
            ),
            exit_report_path,
        )

    try:
        notifier = QtTrayNotifier()
        tray = None
        if show_tray:
            try:
                controller = TrayController.create_default(config_dir, notifier=notifier)
                tray = TrayIcon(controller, notifier, app)
                if not tray.show():
                    return _finish(
                        MainRunResult(
                            exit_code=1,
                            reason="error",
                            error_message="システムトレイを利用できません。",
                        ),
                        exit_report_path,
                    )
                guard.listen(tray.show_menu)
                controller.startup()
            except Exception as exc:
                LOGGER.exception("トレイの初期化に失敗しました")
                return _finish(
                    MainRunResult(exit_code=1, reason="error", error_message=str(exc)),
                    exit_report_path,
                )

        if auto_exit_ms is not None:
            from qtpy import QtCore

            def _quit_application() -> None:
                exit_reason["value"] = "auto_exit"
                app.quit()

            QtCore.QTimer.singleShot(auto_exit_ms, _quit_application)

        try:
            exit_code = app.exec()
        except Exception as exc:  # pragma: no cover - イベントループ実行時の異常系
            result = MainRunResult(exit_code=1, reason="error", error_message=str(exc))
        else:
            reason = exit_reason["value"]
            if exit_code != 0 and reason == "manual":
                reason = "error"
            result = MainRunResult(exit_code=exit_code, reason=reason)

        if tray is not None:
            tray.hide()
        app.deleteLater()
    finally:
        guard.release()

    return _finish(result, exit_report_path)


def main() -> int:
    """トレイアイコンを表示してアプリケーションを起動する。"""

    _configure_logging(os.environ.get("CODETRAY_LOG_LEVEL"))
    headless = os.environ.get("CODETRAY_HEADLESS_TEST", "0") == "1"
    auto_exit_ms = _parse_auto_exit_delay(os.environ.get("CODETRAY_AUTO_EXIT_MS"))
    show_tray = os.environ.get("CODETRAY_SKIP_TRAY", "0") != "1"
    exit_report_path = os.environ.get("CODETRAY_EXIT_REPORT_PATH")

    result = _run_application(
        headless=headless,
        auto_exit_ms=auto_exit_ms,
        show_tray=show_tray,
        exit_report_path=exit_report_path,
    )
    return result.exit_code


if __name__ == "__main__":  # pragma: no cover - 直接実行時のみ
    sys.exit(main())
