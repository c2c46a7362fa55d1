"""
文件系统适配层 - IFileSystem 的本地与内存实现

子模块：
- local: 本地磁盘
- memory: 内存（虚拟导出/测试）
"""

from .local import LocalFileSystem
from .memory import MemoryFileSystem

__all__ = [
    "LocalFileSystem",
    "MemoryFileSystem",
]
