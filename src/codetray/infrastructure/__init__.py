"""インフラ層のパッケージ。"""

from __future__ import annotations

__all__ = ["autostart", "files", "paths", "processes", "settings"]
