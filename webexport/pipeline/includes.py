"""
加载文件解析器 - 决定哪些运行时库文件进入加载列表

职责：
1. 按构建开关输出确定顺序的库文件（顺序表见 export_spec.yaml）
2. 移除不属于当前渲染器的文件（保持其余文件相对顺序）
3. 追加项目用到的扩展（对象/行为）与特效的运行时文件

测试要点：
- test_resolve_deterministic: 相同开关输出相同列表
- test_remove_after_add_restores: 添加后移除得到原列表
- test_strip_inactive_renderers: 去除非当前渲染器文件
"""

from __future__ import annotations

import logging
from typing import Iterable

from ..config import ExportSpec, load_spec
from ..models import BuildFlags, IncludeSet, Project, RendererKind

logger = logging.getLogger(__name__)


class IncludeResolver:
    """运行时库文件解析器"""

    def __init__(self, spec: ExportSpec | None = None):
        self.spec = spec or load_spec()

    def resolve_libs(self, flags: BuildFlags) -> list[str]:
        """按开关组合返回库文件顺序表"""
        order = self.spec.include_order
        files = list(order.core)
        files.extend(self.spec.get_renderer_includes(flags.renderer.value))
        if flags.websocket_debugger:
            files.extend(order.debugger)
        if flags.packaged:
            files.extend(order.packaged)
        return files

    def add_libs_include(self, flags: BuildFlags, includes: IncludeSet) -> None:
        """追加运行时库文件（已存在的保持原位置）"""
        includes.extend(self.resolve_libs(flags))

    def add_renderer_includes(self, renderer: RendererKind, includes: IncludeSet) -> None:
        """只追加某个渲染器的库文件"""
        includes.extend(self.spec.get_renderer_includes(renderer.value))

    def belongs_to_renderer(self, path: str, renderer: RendererKind) -> bool:
        return any(pattern in path for pattern in self.spec.get_renderer_patterns(renderer.value))

    def remove_includes(
        self,
        includes: IncludeSet,
        renderers: Iterable[RendererKind],
    ) -> list[str]:
        """移除属于指定渲染器的文件"""
        renderers = list(renderers)
        removed = includes.remove_if(
            lambda path: any(self.belongs_to_renderer(path, r) for r in renderers)
        )
        if removed:
            logger.debug(f"移除渲染器文件 {[r.value for r in renderers]}: {len(removed)} 个")
        return removed

    def strip_inactive_renderers(self, flags: BuildFlags, includes: IncludeSet) -> list[str]:
        """移除非当前渲染器的文件"""
        inactive = [r for r in RendererKind if r != flags.renderer]
        return self.remove_includes(includes, inactive)

    def add_object_and_behavior_includes(self, project: Project, includes: IncludeSet) -> None:
        """追加项目用到的扩展（对象/行为）的运行时文件"""
        for extension in project.extensions:
            includes.extend(extension.include_files)

    def add_effect_includes(self, project: Project, includes: IncludeSet) -> None:
        """追加特效文件（必须在引擎库之后，特效会向引擎注册自身）"""
        for effect in project.effects:
            includes.extend(effect.include_files)
