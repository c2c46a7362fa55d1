"""
并发工具单元测试
"""

import threading
import time

import pytest

from webexport.interfaces import ExportCancelledError, GenerationError
from webexport.pipeline.concurrency import CancellationToken, directory_lock, run_ordered


class TestRunOrdered:
    """分叉/汇合执行测试"""

    def test_run_ordered_keeps_input_order(self):
        """测试结果按输入顺序，而不是完成顺序"""

        def _slow_first(i: int) -> int:
            time.sleep(0.02 * (5 - i))
            return i * 10

        assert run_ordered(_slow_first, range(5), max_workers=4) == [0, 10, 20, 30, 40]

    def test_run_ordered_first_failure_wins(self):
        """测试多个任务失败时按输入顺序第一个失败的异常被抛出"""

        def _fail(i: int) -> int:
            if i in (1, 3):
                time.sleep(0.05 if i == 1 else 0)
                raise GenerationError(f"任务 {i} 失败")
            return i

        with pytest.raises(GenerationError) as exc_info:
            run_ordered(_fail, range(4), max_workers=4)
        assert "任务 1" in str(exc_info.value)

    def test_sequential_when_single_worker(self):
        threads = set()

        def _record(i: int) -> int:
            threads.add(threading.get_ident())
            return i

        assert run_ordered(_record, [1, 2, 3], max_workers=1) == [1, 2, 3]
        assert threads == {threading.get_ident()}

    def test_empty(self):
        assert run_ordered(lambda x: x, [], max_workers=4) == []


class TestCancellation:
    """取消令牌测试"""

    def test_cancelled_token(self):
        token = CancellationToken()
        token.cancel()
        with pytest.raises(ExportCancelledError) as exc_info:
            run_ordered(lambda x: x, ["Scene1"], cancel_token=token, describe=lambda s: f"场景 {s}")
        assert "场景 Scene1" in str(exc_info.value)

    def test_uncancelled_token(self):
        token = CancellationToken()
        assert not token.cancelled
        token.raise_if_cancelled()
        assert run_ordered(lambda x: x + 1, [1, 2], max_workers=2, cancel_token=token) == [2, 3]


class TestDirectoryLock:
    def test_same_directory_same_lock(self):
        assert directory_lock("/out/game") is directory_lock("/out/game/")
        assert directory_lock("/out/game") is directory_lock("\\out\\game")

    def test_different_directories(self):
        assert directory_lock("/out/a") is not directory_lock("/out/b")
