"""多重起動を防ぐガード。

設定ディレクトリごとに :class:`QLockFile` を一つ取り、取得できたプロセスだけが
トレイを持つ。後から起動したプロセスは :class:`QLocalSocket` で先行プロセスへ
知らせて終了する。
"""

from __future__ import annotations

import hashlib
import logging
from pathlib import Path
from typing import Callable, Optional

from qtpy import QtCore, QtNetwork

LOGGER = logging.getLogger(__name__)

LOCK_FILENAME = "codetray.lock"
ACTIVATE_MESSAGE = b"activate"
CONNECT_TIMEOUT_MS = 500

__all__ = ["SingleInstanceGuard", "server_name_for"]


def server_name_for(config_dir: Path) -> str:
    """設定ディレクトリに対応するローカルサーバー名を返す。"""

    digest = hashlib.sha1(str(config_dir.resolve()).encode("utf-8")).hexdigest()
    return f"codetray-{digest[:12]}"


class SingleInstanceGuard:
    """ロックファイルとローカルサーバーで一つのプロセスだけを通す。"""

    def __init__(self, config_dir: Path) -> None:
        self._lock_path = config_dir / LOCK_FILENAME
        self._lock = QtCore.QLockFile(str(self._lock_path))
        # 期限切れ扱いはプロセスが消えた場合のみ
        self._lock.setStaleLockTime(0)
        self._server_name = server_name_for(config_dir)
        self._server: Optional[QtNetwork.QLocalServer] = None
        self._on_activate: Optional[Callable[[], None]] = None

    @property
    def lock_path(self) -> Path:
        return self._lock_path

    @property
    def server_name(self) -> str:
        return self._server_name

    def acquire(self) -> bool:
        """ロックを取得する。既に他のプロセスが保持していれば ``False``。"""

        if self._lock.isLocked():
            return True
        if self._lock.tryLock(0):
            return True
        LOGGER.info("既に起動しているインスタンスがあります: %s", self._lock_path)
        return False

    def notify_running_instance(self) -> bool:
        """先行プロセスへメニュー表示を依頼する。"""

        socket = QtNetwork.QLocalSocket()
        socket.connectToServer(self._server_name)
        if not socket.waitForConnected(CONNECT_TIMEOUT_MS):
            LOGGER.debug("先行インスタンスへ接続できません: %s", socket.errorString())
            return False
        socket.write(ACTIVATE_MESSAGE)
        socket.waitForBytesWritten(CONNECT_TIMEOUT_MS)
        socket.disconnectFromServer()
        return True

    def listen(self, on_activate: Callable[[], None]) -> bool:
        """後続プロセスからの接続を待ち受ける。ロック取得後に呼び出す。"""

        self._on_activate = on_activate
        # ロックを保持しているので残っているソケットは前回の残骸
        QtNetwork.QLocalServer.removeServer(self._server_name)
        server = QtNetwork.QLocalServer()
        server.newConnection.connect(self._handle_connection)
        if not server.listen(self._server_name):
            LOGGER.warning("ローカルサーバーを開始できません: %s", server.errorString())
            return False
        self._server = server
        return True

    def release(self) -> None:
        if self._server is not None:
            self._server.close()
            self._server = None
        if self._lock.isLocked():
            self._lock.unlock()

    def _handle_connection(self) -> None:
        server = self._server
        if server is None:
            return
        socket = server.nextPendingConnection()
        while socket is not None:
            socket.disconnected.connect(socket.deleteLater)
            socket.disconnectFromServer()
            if self._on_activate is not None:
                self._on_activate()
            socket = server.nextPendingConnection()
