"""VS Code プロジェクトランチャー。"""

__version__ = "0.1.0"
