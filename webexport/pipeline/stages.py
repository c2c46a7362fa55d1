"""
导出流水线阶段定义

职责：
1. 定义各阶段的名称与进度区间
2. 预览导出与完整导出共用同一组阶段，只是跳过的阶段不同

测试要点：
- test_stage_order: 阶段顺序
- test_stage_order: 预览阶段顺序
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ExportStage(str, Enum):
    """导出阶段枚举"""
    DATA_EXPORT = "DATA_EXPORT"
    RESOURCE_EXPORT = "RESOURCE_EXPORT"
    CODE_GENERATION = "CODE_GENERATION"
    INCLUDES = "INCLUDES"
    TEMPLATE_ASSEMBLY = "TEMPLATE_ASSEMBLY"
    PACKAGING = "PACKAGING"


@dataclass(frozen=True)
class PipelineStage:
    """流水线阶段"""
    name: ExportStage
    progress_start: int  # 进度起点（0-100）
    progress_end: int    # 进度终点


# 预览导出各阶段
PREVIEW_STAGES: list[PipelineStage] = [
    PipelineStage(ExportStage.DATA_EXPORT, 0, 10),
    PipelineStage(ExportStage.RESOURCE_EXPORT, 10, 40),
    PipelineStage(ExportStage.CODE_GENERATION, 40, 70),
    PipelineStage(ExportStage.INCLUDES, 70, 90),
    PipelineStage(ExportStage.TEMPLATE_ASSEMBLY, 90, 100),
]

# 完整导出各阶段（最后生成目标平台文件）
EXPORT_STAGES: list[PipelineStage] = [
    PipelineStage(ExportStage.DATA_EXPORT, 0, 5),
    PipelineStage(ExportStage.RESOURCE_EXPORT, 5, 35),
    PipelineStage(ExportStage.CODE_GENERATION, 35, 60),
    PipelineStage(ExportStage.INCLUDES, 60, 85),
    PipelineStage(ExportStage.TEMPLATE_ASSEMBLY, 85, 90),
    PipelineStage(ExportStage.PACKAGING, 90, 100),
]
