"""
流水线模块 - 导出编排与执行

子模块：
- includes: 运行时库文件解析
- events_code: 事件代码生成编排
- resources: 资源导出
- merger / minifier: 加载文件复制与合并压缩
- template: 外壳文档组装
- project_data: 项目数据文件
- stages / executor: 阶段定义与执行器
- preview / full_export: 预览导出与完整导出
- helper: 导出门面
"""

from .concurrency import CancellationToken, run_ordered
from .events_code import EventsCodeOrchestrator, PrecompiledCodeGenerator
from .executor import ExportContext, ExportExecutor
from .full_export import FullExporter
from .helper import ExporterHelper
from .includes import IncludeResolver
from .merger import IncludeMerger
from .minifier import Minifier
from .preview import PreviewOrchestrator
from .project_data import ProjectDataExporter
from .resources import ResourceCopy, ResourceExporter
from .stages import EXPORT_STAGES, PREVIEW_STAGES, ExportStage, PipelineStage
from .template import TemplateAssembler

__all__ = [
    "CancellationToken",
    "run_ordered",
    "IncludeResolver",
    "EventsCodeOrchestrator",
    "PrecompiledCodeGenerator",
    "ResourceExporter",
    "ResourceCopy",
    "IncludeMerger",
    "Minifier",
    "TemplateAssembler",
    "ProjectDataExporter",
    "ExportStage",
    "PipelineStage",
    "PREVIEW_STAGES",
    "EXPORT_STAGES",
    "ExportContext",
    "ExportExecutor",
    "PreviewOrchestrator",
    "FullExporter",
    "ExporterHelper",
]
