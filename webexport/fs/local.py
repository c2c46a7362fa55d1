"""
本地文件系统 - IFileSystem 的磁盘实现

职责：
- 将抽象文件操作映射到 pathlib/shutil
- 将 OSError 转换为 SourceNotFoundError / DestinationNotWritableError
- 非 UTF-8 文本转换为 ContentDecodeError
"""

from __future__ import annotations

import os
import shutil
from pathlib import Path

from ..interfaces import (
    ContentDecodeError,
    DestinationNotWritableError,
    IFileSystem,
    SourceNotFoundError,
)


class LocalFileSystem(IFileSystem):
    """本地磁盘文件系统"""

    def exists(self, path: str) -> bool:
        return Path(path).exists()

    def read_text(self, path: str) -> str:
        data = self.read_binary(path)
        try:
            return data.decode("utf-8")
        except UnicodeDecodeError as e:
            raise ContentDecodeError(f"文件不是 UTF-8 文本: {path}", path=path) from e

    def read_binary(self, path: str) -> bytes:
        try:
            return Path(path).read_bytes()
        except OSError as e:
            raise SourceNotFoundError(f"无法读取文件: {path}", path=path) from e

    def write_text(self, path: str, content: str) -> None:
        try:
            Path(path).write_text(content, encoding="utf-8")
        except OSError as e:
            raise DestinationNotWritableError(f"无法写入文件: {path}", path=path) from e

    def write_binary(self, path: str, content: bytes) -> None:
        try:
            Path(path).write_bytes(content)
        except OSError as e:
            raise DestinationNotWritableError(f"无法写入文件: {path}", path=path) from e

    def copy(self, source: str, destination: str) -> None:
        if not Path(source).is_file():
            raise SourceNotFoundError(f"源文件不存在: {source}", path=source)
        try:
            shutil.copyfile(source, destination)
        except OSError as e:
            raise DestinationNotWritableError(f"无法复制到: {destination}", path=destination) from e

    def mkdir_all(self, path: str) -> None:
        try:
            Path(path).mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise DestinationNotWritableError(f"无法创建目录: {path}", path=path) from e

    def is_absolute(self, path: str) -> bool:
        return os.path.isabs(path)

