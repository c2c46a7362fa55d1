"""
导出结果 - 每次导出返回的显式结果值

成功/失败 + 失败阶段 + 错误类型 + 诊断信息，代替共享的 lastError 字段
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field

from ..interfaces import WebExportError


class ExportState(str, Enum):
    """导出状态"""
    RUNNING = "running"
    SUCCESS = "success"
    FAILED = "failed"


class ExportResult(BaseModel):
    """导出结果"""
    state: ExportState = ExportState.RUNNING
    target: str = ""
    stage: str | None = Field(None, description="失败时为失败阶段，成功时为最后阶段")
    error_kind: str | None = None
    message: str = ""

    includes: list[str] = Field(default_factory=list, description="最终加载文件列表")
    claimed_files: list[str] = Field(default_factory=list, description="导出目录下已登记归属的文件（失败时可能尚未写出）")

    @property
    def success(self) -> bool:
        return self.state == ExportState.SUCCESS

    def __bool__(self) -> bool:
        return self.success

    def mark_succeeded(self) -> None:
        """标记为成功"""
        self.state = ExportState.SUCCESS
        self.error_kind = None
        self.message = ""

    def mark_failed(self, stage: str, error: WebExportError) -> None:
        """标记为失败（保留第一个失败阶段的信息）"""
        self.state = ExportState.FAILED
        self.stage = stage
        self.error_kind = error.kind
        self.message = str(error)
