"""外部エディタの探索。"""

from .candidates import (
    DEFAULT_PROBE_TIMEOUT,
    EDITOR_ENV_VAR,
    EditorCandidate,
    ProbeStrategy,
    default_candidates,
)
from .locator import EditorCommand, EditorLocator

__all__ = [
    "DEFAULT_PROBE_TIMEOUT",
    "EDITOR_ENV_VAR",
    "EditorCandidate",
    "EditorCommand",
    "EditorLocator",
    "ProbeStrategy",
    "default_candidates",
]
