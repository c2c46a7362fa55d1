"""
导出目录登记 - 记录每个导出相对路径的归属，检测路径冲突

冲突策略：同一路径被不同归属（资源/代码/库/数据/文档）占用时抛出
PathConflictError，不静默覆盖
"""

from __future__ import annotations

import posixpath
import threading
from enum import Enum

from ..interfaces import PathConflictError


class FileOwner(str, Enum):
    """导出文件归属"""
    RESOURCE = "resource"
    CODE = "code"
    LIBRARY = "library"
    DATA = "data"
    DOCUMENT = "document"


def normalize_relative(path: str) -> str:
    """导出相对路径归一化（去掉 ./ 与重复分隔符）"""
    return posixpath.normpath(path.replace("\\", "/")).lstrip("/")


class ExportTree:
    """单次导出的路径登记表"""

    def __init__(self, export_dir: str):
        self.export_dir = export_dir.rstrip("/") or "/"
        self._owners: dict[str, FileOwner] = {}
        self._lock = threading.Lock()

    def claim(self, relative_path: str, owner: FileOwner) -> str:
        """登记路径，返回归一化后的相对路径"""
        key = normalize_relative(relative_path)
        with self._lock:
            current = self._owners.get(key)
            if current is not None and current != owner:
                raise PathConflictError(
                    f"导出路径冲突: {key} 已被 {current.value} 占用，不能再写入 {owner.value}",
                    path=key,
                )
            self._owners[key] = owner
        return key

    def owner_of(self, relative_path: str) -> FileOwner | None:
        return self._owners.get(normalize_relative(relative_path))

    def absolute(self, relative_path: str) -> str:
        return posixpath.join(self.export_dir, normalize_relative(relative_path))

    def files(self) -> list[str]:
        """已登记的相对路径（排序）"""
        return sorted(self._owners)
