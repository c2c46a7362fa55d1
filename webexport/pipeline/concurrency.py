"""
并发工具 - 分叉/汇合执行与取消令牌

职责：
1. 场景代码生成、文件复制等互不依赖的任务并行执行
2. 结果按输入顺序收集（不按完成顺序），保证加载列表确定
3. 按输入顺序第一个失败的任务决定抛出的异常
4. 取消令牌在单个场景/文件粒度检查
5. 导出目录级别的锁

测试要点：
- test_run_ordered_keeps_input_order: 结果顺序
- test_run_ordered_first_failure_wins: 失败传播
- test_cancelled_token: 取消
"""

from __future__ import annotations

import posixpath
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Callable, Iterable, TypeVar

from ..interfaces import ExportCancelledError

T = TypeVar("T")
R = TypeVar("R")


class CancellationToken:
    """取消令牌（线程安全）"""

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def raise_if_cancelled(self, what: str = "") -> None:
        if self._event.is_set():
            suffix = f": {what}" if what else ""
            raise ExportCancelledError(f"导出已取消{suffix}")


def run_ordered(
    func: Callable[[T], R],
    items: Iterable[T],
    *,
    max_workers: int = 1,
    cancel_token: CancellationToken | None = None,
    describe: Callable[[T], str] = str,
) -> list[R]:
    """并行执行 func，按 items 顺序返回结果"""
    items = list(items)

    def _task(item: T) -> R:
        if cancel_token is not None:
            cancel_token.raise_if_cancelled(describe(item))
        return func(item)

    if max_workers <= 1 or len(items) <= 1:
        return [_task(item) for item in items]

    pool = ThreadPoolExecutor(max_workers=min(max_workers, len(items)))
    futures: list[Future] = [pool.submit(_task, item) for item in items]
    try:
        return [future.result() for future in futures]
    finally:
        # 失败时未开始的任务不再执行
        pool.shutdown(wait=True, cancel_futures=True)


_directory_locks: dict[str, threading.Lock] = {}
_directory_locks_guard = threading.Lock()


def directory_lock(path: str) -> threading.Lock:
    """同一导出目录共用一把锁（同一目录不允许并发导出）"""
    key = posixpath.normpath(path.replace("\\", "/"))
    with _directory_locks_guard:
        lock = _directory_locks.get(key)
        if lock is None:
            lock = _directory_locks[key] = threading.Lock()
        return lock
