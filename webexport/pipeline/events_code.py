"""
事件代码编排 - 为每个场景/外部事件表调用代码生成器并落盘

职责：
1. 场景 i 输出 code{i}.js，外部事件表 j 输出 external-code{j}.js
2. 按项目顺序追加到加载列表（不按完成顺序）
3. 仅导出项目数据时不生成，但调用方哈希表中登记过的代码文件仍然加入
4. 任一场景失败则整体失败（跨场景符号可能无法解析）
5. 复制项目的外部 JS 源文件（ext-code{i}.js）

测试要点：
- test_generate_scene_files: 生成文件命名与顺序
- test_generation_idempotent: 两次生成字节一致
- test_generation_failure_names_scene: 失败信息包含场景名
- test_project_data_only_uses_hashes: 仅数据导出
"""

from __future__ import annotations

import logging
import posixpath
from dataclasses import dataclass

from ..config import ExportSpec, RuntimeConfig, get_config, load_spec
from ..interfaces import (
    GenerationError,
    ICodeGenerator,
    IFileSystem,
    SourceNotFoundError,
)
from ..models import CodeUnit, IncludeSet, Layout, Project, content_hash
from .concurrency import CancellationToken, run_ordered

logger = logging.getLogger(__name__)


@dataclass
class _CodeTask:
    """单个生成任务"""
    label: str       # 场景 / 外部事件表
    unit: CodeUnit
    filename: str    # 导出相对文件名
    path: str        # 代码输出目录下的完整路径


class EventsCodeOrchestrator:
    """事件代码生成编排"""

    def __init__(
        self,
        fs: IFileSystem,
        generator: ICodeGenerator,
        spec: ExportSpec | None = None,
        config: RuntimeConfig | None = None,
    ):
        self.fs = fs
        self.generator = generator
        self.spec = spec or load_spec()
        self.config = config or get_config()

    def _tasks(self, project: Project, output_dir: str) -> list[_CodeTask]:
        tasks = []
        for i, layout in enumerate(project.layouts):
            filename = self.spec.scene_code_name(i)
            tasks.append(_CodeTask("场景", layout, filename, posixpath.join(output_dir, filename)))
        for j, sheet in enumerate(project.external_events):
            filename = self.spec.external_events_code_name(j)
            tasks.append(_CodeTask("外部事件表", sheet, filename, posixpath.join(output_dir, filename)))
        return tasks

    def export_events_code(
        self,
        project: Project,
        output_dir: str,
        includes: IncludeSet,
        *,
        project_data_only: bool = False,
        include_file_hashes: dict[str, str] | None = None,
        cancel_token: CancellationToken | None = None,
    ) -> list[str]:
        """
        生成事件代码并追加到加载列表

        Args:
            project: 项目（导出副本）
            output_dir: 代码输出目录（绝对路径）
            includes: 加载列表（原位修改）
            project_data_only: 仅导出项目数据（跳过生成）
            include_file_hashes: 调用方提供的文件哈希（键为导出相对路径）
            cancel_token: 取消令牌

        Returns:
            追加到加载列表的代码文件路径

        Raises:
            GenerationError: 任一场景/外部事件表生成失败
        """
        hashes = include_file_hashes or {}
        tasks = self._tasks(project, output_dir)

        if project_data_only:
            registered = [task.path for task in tasks if task.filename in hashes]
            includes.extend(registered)
            logger.info(f"仅导出项目数据，沿用已生成的代码文件 {len(registered)} 个")
            return registered

        self.fs.mkdir_all(output_dir)

        def _generate(task: _CodeTask) -> tuple[str, str]:
            code = self._generate_one(project, task)
            new_hash = content_hash(code.encode("utf-8"))
            if self._unchanged_on_disk(task.path, new_hash):
                logger.debug(f"代码未变化，跳过写入: {task.filename}")
            else:
                self.fs.write_text(task.path, code)
            if hashes.get(task.filename) not in (None, new_hash):
                logger.debug(f"代码已变化: {task.filename}")
            return task.path, new_hash

        results = run_ordered(
            _generate,
            tasks,
            max_workers=self.config.concurrency.max_workers,
            cancel_token=cancel_token,
            describe=lambda task: f"{task.label} {task.unit.name}",
        )

        for path, file_hash in results:
            includes.append(path)
            includes.set_hash(path, file_hash)

        logger.info(f"事件代码生成完成: {len(results)} 个文件")
        return [path for path, _ in results]

    def _generate_one(self, project: Project, task: _CodeTask) -> str:
        try:
            code = self.generator.generate(project, task.unit)
        except Exception as e:
            # 生成器是外部实现，任何异常都视为该场景生成失败
            raise GenerationError(f"{task.label} \"{task.unit.name}\" 代码生成失败: {e}") from e
        if not isinstance(code, str):
            raise GenerationError(f"{task.label} \"{task.unit.name}\" 代码生成器未返回文本")
        return code

    def _unchanged_on_disk(self, path: str, new_hash: str) -> bool:
        return self.fs.exists(path) and content_hash(self.fs.read_binary(path)) == new_hash

    def export_external_source_files(
        self,
        project: Project,
        output_dir: str,
        includes: IncludeSet,
    ) -> list[str]:
        """
        复制项目引用的外部 JS 源文件为 ext-code{i}.js 并追加到加载列表

        Raises:
            SourceNotFoundError: 源文件不存在
        """
        if not project.external_source_files:
            return []

        self.fs.mkdir_all(output_dir)
        exported = []
        for i, source_file in enumerate(project.external_source_files):
            source = source_file.filename
            if not self.fs.is_absolute(source):
                source = posixpath.join(project.project_dir, source)
            if not self.fs.exists(source):
                raise SourceNotFoundError(f"外部源文件不存在: {source_file.filename}", path=source)
            destination = posixpath.join(output_dir, self.spec.external_source_name(i))
            self.fs.copy(source, destination)
            includes.append(destination)
            exported.append(destination)
        return exported


class PrecompiledCodeGenerator(ICodeGenerator):
    """读取项目中预编译事件代码的生成器（CLI 与测试使用）"""

    def generate(self, project: Project, unit: CodeUnit) -> str:
        if unit.compiled_events is None:
            kind = "场景" if isinstance(unit, Layout) else "外部事件表"
            raise GenerationError(f"{kind} \"{unit.name}\" 没有预编译的事件代码")
        return unit.compiled_events
