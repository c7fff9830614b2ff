"""ドメイン層のパッケージ。"""

from __future__ import annotations

__all__ = ["editors", "errors", "launching", "projects", "settings"]
