"""
资源导出器 - 将项目引用的资源文件复制到导出目录

职责：
1. 相对路径资源保持目录结构（相对项目目录解析源文件）
2. 绝对路径资源平铺为文件名（重名加数字后缀）
3. URL 资源不处理
4. 内容不同才复制（不是"存在即跳过"），以便拾取编辑
5. 改写导出副本中的资源路径
6. 旧版字体兼容：为直接声明字体文件名的文本对象补充字体资源

测试要点：
- test_plan_relative_and_absolute: 目标路径规划
- test_copy_if_different: 内容变化才复制
- test_missing_resource_names_resource: 缺失资源报错
- test_deprecated_fonts_never_overwrite: 不覆盖已有资源
"""

from __future__ import annotations

import logging
import posixpath
from dataclasses import dataclass

from ..config import RuntimeConfig, get_config
from ..interfaces import IFileSystem, SourceNotFoundError
from ..models import (
    ExportTree,
    FileOwner,
    Project,
    Resource,
    ResourceKind,
    normalize_relative,
)
from .concurrency import CancellationToken, run_ordered

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResourceCopy:
    """单个资源的复制计划"""
    name: str
    source: str         # 源文件路径
    destination: str    # 导出相对路径


class ResourceExporter:
    """资源导出器"""

    def __init__(self, fs: IFileSystem, config: RuntimeConfig | None = None):
        self.fs = fs
        self.config = config or get_config()

    def _source_path(self, project: Project, resource: Resource) -> str:
        if self.fs.is_absolute(resource.file):
            return resource.file
        return posixpath.join(project.project_dir, resource.file)

    def plan(self, project: Project) -> list[ResourceCopy]:
        """
        规划资源的导出相对路径（不访问存储，结果只由项目内容决定）

        Returns:
            按项目资源顺序排列的复制计划
        """
        used: dict[str, str] = {}  # 导出相对路径 -> 源文件
        destinations: dict[str, str] = {}  # 资源名 -> 导出相对路径
        resources = [r for r in project.iter_resources() if r.has_file]

        # 先登记保持目录结构的相对路径，平铺的文件再避让
        for resource in resources:
            if self.fs.is_absolute(resource.file):
                continue
            relative = normalize_relative(resource.file)
            if relative.startswith("../") or relative == "..":
                continue
            destinations[resource.name] = relative
            used.setdefault(relative, self._source_path(project, resource))

        for resource in resources:
            if resource.name in destinations:
                continue
            source = self._source_path(project, resource)
            destination = self._flatten(posixpath.basename(resource.file), source, used)
            destinations[resource.name] = destination
            used.setdefault(destination, source)

        return [
            ResourceCopy(r.name, self._source_path(project, r), destinations[r.name])
            for r in resources
        ]

    @staticmethod
    def _flatten(filename: str, source: str, used: dict[str, str]) -> str:
        """平铺到导出根目录，重名时加数字后缀"""
        candidate = filename
        stem, ext = posixpath.splitext(filename)
        n = 1
        while candidate in used and used[candidate] != source:
            candidate = f"{stem}_{n}{ext}"
            n += 1
        return candidate

    def export_resources(
        self,
        project: Project,
        export_dir: str,
        *,
        tree: ExportTree | None = None,
        cancel_token: CancellationToken | None = None,
    ) -> list[ResourceCopy]:
        """
        复制所有资源并改写项目中的资源路径

        Args:
            project: 项目（导出副本，资源路径会被改写）
            export_dir: 导出目录
            tree: 导出路径登记（冲突检测）
            cancel_token: 取消令牌

        Returns:
            执行的复制计划

        Raises:
            SourceNotFoundError: 资源文件不存在
            PathConflictError: 资源路径与其他导出文件冲突
        """
        plans = self.plan(project)
        if tree is not None:
            for plan in plans:
                tree.claim(plan.destination, FileOwner.RESOURCE)

        self.fs.mkdir_all(export_dir)

        # 同一目标只复制一次
        unique: dict[str, ResourceCopy] = {}
        for plan in plans:
            unique.setdefault(plan.destination, plan)

        copied = run_ordered(
            lambda plan: self._copy_if_different(plan, export_dir),
            list(unique.values()),
            max_workers=self.config.concurrency.max_workers,
            cancel_token=cancel_token,
            describe=lambda plan: f"资源 {plan.name}",
        )

        by_name = {plan.name: plan for plan in plans}
        for resource in project.iter_resources():
            plan = by_name.get(resource.name)
            if plan is not None:
                resource.file = plan.destination

        logger.info(f"资源导出完成: {len(plans)} 个资源，复制 {sum(copied)} 个文件")
        return plans

    def _copy_if_different(self, plan: ResourceCopy, export_dir: str) -> bool:
        try:
            data = self.fs.read_binary(plan.source)
        except SourceNotFoundError as e:
            raise SourceNotFoundError(
                f"资源 \"{plan.name}\" 的文件不存在: {plan.source}", path=plan.source
            ) from e

        destination = posixpath.join(export_dir, plan.destination)
        if self.fs.exists(destination) and self.fs.read_binary(destination) == data:
            logger.debug(f"资源未变化，跳过复制: {plan.destination}")
            return False

        self.fs.mkdir_all(posixpath.dirname(destination))
        self.fs.write_binary(destination, data)
        return True

    @staticmethod
    def add_deprecated_font_resources(project: Project, url_prefix: str = "") -> list[str]:
        """
        旧版兼容：文本对象直接声明字体文件名而没有对应字体资源时，补充同名字体资源

        已存在的同名资源不覆盖。

        Returns:
            新增的资源名
        """
        added = []
        for obj in project.iter_objects():
            if not obj.font or project.has_resource(obj.font):
                continue
            project.add_resource(
                Resource(name=obj.font, kind=ResourceKind.FONT, file=url_prefix + obj.font)
            )
            added.append(obj.font)
        if added:
            logger.info(f"补充旧版字体资源: {added}")
        return added
