"""
加载文件列表 - 有序、去重的运行时加载文件集合

顺序有语义：后面的文件可能依赖前面文件定义的符号
（运行时核心 -> 渲染器 -> 生成的事件代码 -> 项目数据）
"""

from __future__ import annotations

import hashlib
from typing import Callable, Iterable, Iterator


def content_hash(data: bytes) -> str:
    """文件内容哈希（变更检测用）"""
    return hashlib.sha256(data).hexdigest()


class IncludeSet:
    """有序去重的加载文件列表，附带每个文件的内容哈希"""

    def __init__(self, files: Iterable[str] | None = None):
        self._files: list[str] = []
        self._hashes: dict[str, str] = {}
        if files:
            self.extend(files)

    def append(self, path: str) -> bool:
        """追加文件；已存在时保持原位置并返回 False"""
        if path in self._files:
            return False
        self._files.append(path)
        return True

    def extend(self, paths: Iterable[str]) -> None:
        for path in paths:
            self.append(path)

    def remove_if(self, predicate: Callable[[str], bool]) -> list[str]:
        """移除满足条件的文件，其余文件相对顺序不变"""
        removed = [path for path in self._files if predicate(path)]
        if removed:
            self._files = [path for path in self._files if not predicate(path)]
            for path in removed:
                self._hashes.pop(path, None)
        return removed

    def replace(self, old: str, new: str) -> None:
        """原位替换条目（新路径已在列表中时只保留靠前的一个）"""
        index = self._files.index(old)
        if new != old and new in self._files:
            del self._files[index]
        else:
            self._files[index] = new
        if old in self._hashes:
            self._hashes[new] = self._hashes.pop(old)

    def reset(self, paths: Iterable[str]) -> None:
        """整体替换列表"""
        self._files = []
        self._hashes = {}
        self.extend(paths)

    def set_hash(self, path: str, file_hash: str) -> None:
        self._hashes[path] = file_hash

    def get_hash(self, path: str) -> str | None:
        return self._hashes.get(path)

    def to_list(self) -> list[str]:
        return list(self._files)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._files))

    def __len__(self) -> int:
        return len(self._files)

    def __contains__(self, path: object) -> bool:
        return path in self._files

    def __repr__(self) -> str:
        return f"IncludeSet({self._files!r})"
