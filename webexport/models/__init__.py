"""
数据模型层 - 定义导出流水线核心数据结构

所有模块通过这些模型交互，实现解耦：
- Project: 项目描述（场景/资源/扩展/特效）
- BuildFlags / PreviewExportOptions: 构建开关与预览参数
- IncludeSet: 有序去重的加载文件列表
- ExportTree: 导出路径登记（冲突检测）
- ExportResult: 导出结果
"""

from .export_tree import ExportTree, FileOwner, normalize_relative
from .include_set import IncludeSet, content_hash
from .options import (
    BuildFlags,
    DebuggerEndpoint,
    PreviewExportOptions,
    RendererKind,
    TargetKind,
)
from .project import (
    CodeUnit,
    EffectUsage,
    ExtensionUsage,
    ExternalEvents,
    ExternalLayout,
    Layout,
    Project,
    ProjectObject,
    Resource,
    ResourceKind,
    SourceFile,
)
from .result import ExportResult, ExportState

__all__ = [
    "Project",
    "Layout",
    "ExternalLayout",
    "ExternalEvents",
    "ProjectObject",
    "Resource",
    "ResourceKind",
    "ExtensionUsage",
    "EffectUsage",
    "SourceFile",
    "CodeUnit",
    "BuildFlags",
    "DebuggerEndpoint",
    "PreviewExportOptions",
    "RendererKind",
    "TargetKind",
    "IncludeSet",
    "content_hash",
    "ExportTree",
    "FileOwner",
    "normalize_relative",
    "ExportResult",
    "ExportState",
]
