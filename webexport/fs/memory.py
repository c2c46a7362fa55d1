"""
内存文件系统 - IFileSystem 的虚拟实现

用于测试与浏览器侧的虚拟导出；行为与本地实现保持一致：
写文件前父目录必须存在，只读前缀下的写入抛出 DestinationNotWritableError
"""

from __future__ import annotations

import posixpath
import threading

from ..interfaces import (
    ContentDecodeError,
    DestinationNotWritableError,
    IFileSystem,
    SourceNotFoundError,
)


def _norm(path: str) -> str:
    return posixpath.normpath(path.replace("\\", "/"))


class MemoryFileSystem(IFileSystem):
    """内存文件系统（线程安全）"""

    def __init__(
        self,
        files: dict[str, str | bytes] | None = None,
        read_only: list[str] | None = None,
    ):
        self._files: dict[str, bytes] = {}
        self._dirs: set[str] = {"/"}
        self._read_only = [_norm(p) for p in (read_only or [])]
        self._lock = threading.Lock()
        for path, content in (files or {}).items():
            self.mkdir_all(posixpath.dirname(_norm(path)))
            data = content.encode("utf-8") if isinstance(content, str) else content
            self._files[_norm(path)] = data

    # === 测试辅助 ===

    def set_read_only(self, prefix: str) -> None:
        self._read_only.append(_norm(prefix))

    @property
    def files(self) -> dict[str, bytes]:
        with self._lock:
            return dict(self._files)

    def _check_writable(self, path: str) -> None:
        for prefix in self._read_only:
            if path == prefix or path.startswith(prefix.rstrip("/") + "/"):
                raise DestinationNotWritableError(f"目标只读: {path}", path=path)
        parent = posixpath.dirname(path)
        if parent and parent not in self._dirs:
            raise DestinationNotWritableError(f"目录不存在: {parent}", path=path)

    # === IFileSystem ===

    def exists(self, path: str) -> bool:
        path = _norm(path)
        with self._lock:
            return path in self._files or path in self._dirs

    def read_text(self, path: str) -> str:
        data = self.read_binary(path)
        try:
            return data.decode("utf-8")
        except UnicodeDecodeError as e:
            raise ContentDecodeError(f"文件不是 UTF-8 文本: {_norm(path)}", path=_norm(path)) from e

    def read_binary(self, path: str) -> bytes:
        path = _norm(path)
        with self._lock:
            if path not in self._files:
                raise SourceNotFoundError(f"无法读取文件: {path}", path=path)
            return self._files[path]

    def write_text(self, path: str, content: str) -> None:
        self.write_binary(path, content.encode("utf-8"))

    def write_binary(self, path: str, content: bytes) -> None:
        path = _norm(path)
        with self._lock:
            self._check_writable(path)
            self._files[path] = bytes(content)

    def copy(self, source: str, destination: str) -> None:
        data = self.read_binary(source)
        self.write_binary(destination, data)

    def mkdir_all(self, path: str) -> None:
        path = _norm(path)
        with self._lock:
            for prefix in self._read_only:
                if path == prefix or path.startswith(prefix.rstrip("/") + "/"):
                    if path not in self._dirs:
                        raise DestinationNotWritableError(f"目标只读: {path}", path=path)
            while path and path not in self._dirs:
                self._dirs.add(path)
                parent = posixpath.dirname(path)
                if parent == path:
                    break
                path = parent

    def is_absolute(self, path: str) -> bool:
        return path.startswith("/")

