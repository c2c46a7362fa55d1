"""
导出执行器 - 按阶段编排一次导出

职责：
1. 按顺序执行各阶段（后一阶段依赖前一阶段修改过的加载列表/资源路径）
2. 第一个失败的阶段决定结果，后续阶段全部跳过（不重试、不回滚）
3. 预览导出与完整导出共用阶段实现，只是阶段表与参数不同
4. 同一导出目录同一时间只允许一个导出

测试要点：
- test_two_scene_preview: 预览导出全流程
- test_generation_failure_no_index: 阶段失败后不再写外壳文档
- test_cancelled: 取消
"""

from __future__ import annotations

import json
import logging
import posixpath
from dataclasses import dataclass, field

from ..config import ExportSpec, RuntimeConfig, get_config, load_spec
from ..interfaces import ConfigError, ICodeGenerator, IFileSystem, WebExportError
from ..models import (
    BuildFlags,
    ExportResult,
    ExportTree,
    FileOwner,
    IncludeSet,
    PreviewExportOptions,
    Project,
    TargetKind,
)
from ..targets import PackageRequest, TargetPackager
from .concurrency import CancellationToken, directory_lock
from .events_code import EventsCodeOrchestrator
from .includes import IncludeResolver
from .merger import IncludeMerger
from .project_data import ProjectDataExporter, prepare_export_copy
from .resources import ResourceExporter
from .stages import ExportStage, PipelineStage
from .template import TemplateAssembler

logger = logging.getLogger(__name__)


@dataclass
class ExportContext:
    """单次导出的状态（由执行器独占）"""
    project: Project
    export_dir: str
    code_output_dir: str
    runtime_root: str
    target: TargetKind
    flags: BuildFlags
    preview: PreviewExportOptions | None = None
    packager: TargetPackager | None = None
    debug_mode: bool = False
    cancel_token: CancellationToken | None = None

    tree: ExportTree = field(init=False)
    includes: IncludeSet = field(default_factory=IncludeSet)
    code_includes: IncludeSet = field(default_factory=IncludeSet)
    export_copy: Project | None = None
    data_file: str = ""
    result: ExportResult = field(init=False)

    def __post_init__(self) -> None:
        self.tree = ExportTree(self.export_dir)
        self.result = ExportResult(target=self.target.value)

    @property
    def project_data_only(self) -> bool:
        return self.preview is not None and self.preview.project_data_only_export


class ExportExecutor:
    """导出执行器"""

    def __init__(
        self,
        fs: IFileSystem,
        generator: ICodeGenerator,
        spec: ExportSpec | None = None,
        config: RuntimeConfig | None = None,
    ):
        self.fs = fs
        self.spec = spec or load_spec()
        self.config = config or get_config()

        self.resolver = IncludeResolver(self.spec)
        self.events_code = EventsCodeOrchestrator(fs, generator, self.spec, self.config)
        self.resources = ResourceExporter(fs, self.config)
        self.merger = IncludeMerger(fs, self.spec, self.config)
        self.template = TemplateAssembler(fs, self.spec)
        self.data_exporter = ProjectDataExporter(fs, self.spec)

    def execute(self, ctx: ExportContext, stages: list[PipelineStage]) -> ExportResult:
        """执行导出，返回结果（领域异常不向外抛出）"""
        with directory_lock(ctx.export_dir):
            logger.info(f"[{ctx.target.value}] 导出开始: {ctx.export_dir}")
            for stage in stages:
                try:
                    if ctx.cancel_token is not None:
                        ctx.cancel_token.raise_if_cancelled(stage.name.value)
                    self._execute_stage(ctx, stage)
                except WebExportError as e:
                    logger.error(f"[{ctx.target.value}] 阶段失败 {stage.name.value}: {e}")
                    ctx.result.mark_failed(stage.name.value, e)
                    ctx.result.claimed_files = ctx.tree.files()
                    return ctx.result

            ctx.result.includes = ctx.includes.to_list()
            ctx.result.claimed_files = ctx.tree.files()
            ctx.result.mark_succeeded()
            logger.info(f"[{ctx.target.value}] 导出完成: {len(ctx.result.claimed_files)} 个文件")
            return ctx.result

    def _execute_stage(self, ctx: ExportContext, stage: PipelineStage) -> None:
        """执行单个阶段"""
        ctx.result.stage = stage.name.value
        logger.info(f"[{ctx.target.value}] 开始阶段: {stage.name.value} ({stage.progress_start}%)")

        if stage.name == ExportStage.DATA_EXPORT:
            self._stage_data_export(ctx)

        elif stage.name == ExportStage.RESOURCE_EXPORT:
            self._stage_resource_export(ctx)

        elif stage.name == ExportStage.CODE_GENERATION:
            self._stage_code_generation(ctx)

        elif stage.name == ExportStage.INCLUDES:
            self._stage_includes(ctx)

        elif stage.name == ExportStage.TEMPLATE_ASSEMBLY:
            self._stage_template(ctx)

        elif stage.name == ExportStage.PACKAGING:
            self._stage_packaging(ctx)

        logger.debug(f"[{ctx.target.value}] 完成阶段: {stage.name.value} ({stage.progress_end}%)")

    # === 各阶段 ===

    def _stage_data_export(self, ctx: ExportContext) -> None:
        """构造导出副本并写出项目数据文件（资源路径按规划结果写入）"""
        first_layout = None
        show_splash = None
        if ctx.preview is not None:
            if ctx.preview.layout_name:
                if ctx.project.get_layout(ctx.preview.layout_name) is None:
                    raise ConfigError(f"场景不存在: {ctx.preview.layout_name}")
                first_layout = ctx.preview.layout_name
            external = ctx.preview.external_layout_name
            if external and not ctx.project.has_external_layout(external):
                raise ConfigError(f"外部布局不存在: {external}")
            show_splash = False

        ctx.export_copy = prepare_export_copy(ctx.project, first_layout=first_layout, show_splash=show_splash)
        ResourceExporter.add_deprecated_font_resources(ctx.export_copy)

        destinations = {plan.name: plan.destination for plan in self.resources.plan(ctx.export_copy)}
        data_project = prepare_export_copy(ctx.export_copy, destinations)

        # 生成文件先于资源登记，资源占用同名路径时在复制前报错
        self._claim_code_files(ctx)
        data_name = self.spec.output_names.data_file
        ctx.tree.claim(data_name, FileOwner.DATA)
        ctx.data_file = posixpath.join(ctx.code_output_dir, data_name)
        self.data_exporter.export_project_data(
            data_project, ctx.data_file, self._runtime_game_options(ctx)
        )

    def _stage_resource_export(self, ctx: ExportContext) -> None:
        self.resources.export_resources(
            ctx.export_copy, ctx.export_dir, tree=ctx.tree, cancel_token=ctx.cancel_token
        )

    def _claim_code_files(self, ctx: ExportContext) -> None:
        project = ctx.export_copy
        names = [self.spec.scene_code_name(i) for i in range(len(project.layouts))]
        names += [self.spec.external_events_code_name(j) for j in range(len(project.external_events))]
        if ctx.project_data_only:
            names = [name for name in names if name in ctx.preview.include_file_hashes]
        names += [self.spec.external_source_name(i) for i in range(len(project.external_source_files))]
        for name in names:
            ctx.tree.claim(name, FileOwner.CODE)

    def _stage_code_generation(self, ctx: ExportContext) -> None:
        project = ctx.export_copy
        hashes = ctx.preview.include_file_hashes if ctx.preview is not None else None
        self.events_code.export_events_code(
            project,
            ctx.code_output_dir,
            ctx.code_includes,
            project_data_only=ctx.project_data_only,
            include_file_hashes=hashes,
            cancel_token=ctx.cancel_token,
        )
        self.events_code.export_external_source_files(project, ctx.code_output_dir, ctx.code_includes)

    def _stage_includes(self, ctx: ExportContext) -> None:
        """库文件 -> 扩展/特效文件 -> 生成代码 -> 项目数据，然后复制合并"""
        project = ctx.export_copy
        self.resolver.add_libs_include(ctx.flags, ctx.includes)
        self.resolver.add_object_and_behavior_includes(project, ctx.includes)
        self.resolver.add_effect_includes(project, ctx.includes)
        self.resolver.strip_inactive_renderers(ctx.flags, ctx.includes)
        ctx.includes.extend(ctx.code_includes)
        ctx.includes.append(ctx.data_file)

        self.merger.export_includes_and_libs(
            ctx.includes,
            ctx.export_dir,
            ctx.runtime_root,
            minify=ctx.flags.minify,
            tree=ctx.tree,
            cancel_token=ctx.cancel_token,
        )

    def _stage_template(self, ctx: ExportContext) -> None:
        if ctx.packager is not None:
            template_path = ctx.packager.index_template_path(ctx.runtime_root)
        else:
            template_path = posixpath.join(ctx.runtime_root, self.spec.templates.index)

        if ctx.preview is not None:
            payload = json.dumps(self._preview_payload(ctx), ensure_ascii=False, sort_keys=True)
        else:
            payload = "{}"

        self.template.export_index_file(
            template_path,
            ctx.export_dir,
            ctx.includes,
            payload,
            project_name=ctx.export_copy.name,
            tree=ctx.tree,
        )

    def _stage_packaging(self, ctx: ExportContext) -> None:
        if ctx.packager is None:
            return
        request = PackageRequest(
            project=ctx.export_copy,
            export_dir=ctx.export_dir,
            runtime_root=ctx.runtime_root,
            includes=ctx.includes.to_list(),
            flags=ctx.flags,
            tree=ctx.tree,
            debug_mode=ctx.debug_mode,
        )
        ctx.packager.validate(request)
        written = ctx.packager.package(request)
        logger.info(f"[{ctx.target.value}] 平台文件已生成: {len(written)} 个")

    # === 运行选项 ===

    def _runtime_game_options(self, ctx: ExportContext) -> dict | None:
        """写入项目数据文件的运行选项（仅预览）"""
        preview = ctx.preview
        if preview is None:
            return None
        options: dict = {
            "isPreview": True,
            "injectExternalLayout": preview.external_layout_name,
            "projectDataOnlyExport": preview.project_data_only_export,
        }
        if preview.debugger is not None:
            options["debuggerServerAddress"] = preview.debugger.host
            options["debuggerServerPort"] = preview.debugger.port
        return options

    def _preview_payload(self, ctx: ExportContext) -> dict:
        """外壳文档中的运行选项：附带每个加载文件的哈希，供预览对比后续增量导出"""
        payload = self._runtime_game_options(ctx) or {}
        baseline = ctx.preview.include_file_hashes
        script_files = []
        for path in ctx.includes:
            file_hash = ctx.includes.get_hash(path)
            script_files.append(
                {
                    "path": path,
                    "hash": file_hash,
                    "changed": baseline.get(path) != file_hash,
                }
            )
        payload["scriptFiles"] = script_files
        return payload
