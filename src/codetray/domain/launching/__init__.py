"""エディタ起動処理。"""

from .launcher import NEW_WINDOW_FLAG, LaunchResult, ProjectLauncher, build_editor_command

__all__ = ["LaunchResult", "NEW_WINDOW_FLAG", "ProjectLauncher", "build_editor_command"]
