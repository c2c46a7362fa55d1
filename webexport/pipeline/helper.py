"""
导出门面 - 面向编辑器/命令行的入口

职责：
1. 持有文件系统、运行时根目录与代码输出目录
2. 单个操作返回 True/False，失败信息保存在 last_error（成功时清空）
3. 预览与完整导出返回 ExportResult，并同步 last_error
4. 同一实例同一时间只执行一个导出

测试要点：
- test_last_error_cleared_on_success: 成功清空
- test_last_error_names_failure: 失败保留信息
"""

from __future__ import annotations

import logging
import threading
from typing import Callable

from ..config import ExportSpec, RuntimeConfig, get_config, load_spec
from ..interfaces import ICodeGenerator, IFileSystem, WebExportError
from ..models import (
    BuildFlags,
    ExportResult,
    IncludeSet,
    PreviewExportOptions,
    Project,
    RendererKind,
    TargetKind,
)
from ..targets import Cocos2dPackager, CordovaPackager, ElectronPackager, FacebookPackager, PackageRequest
from .events_code import EventsCodeOrchestrator, PrecompiledCodeGenerator
from .full_export import FullExporter
from .includes import IncludeResolver
from .merger import IncludeMerger
from .preview import PreviewOrchestrator
from .project_data import ProjectDataExporter
from .resources import ResourceExporter
from .template import TemplateAssembler

logger = logging.getLogger(__name__)


class ExporterHelper:
    """导出门面"""

    def __init__(
        self,
        fs: IFileSystem,
        runtime_root: str,
        code_output_dir: str | None = None,
        code_generator: ICodeGenerator | None = None,
        spec: ExportSpec | None = None,
        config: RuntimeConfig | None = None,
    ):
        self.fs = fs
        self.runtime_root = runtime_root
        self.code_output_dir = code_output_dir
        self.code_generator = code_generator or PrecompiledCodeGenerator()
        self.spec = spec or load_spec()
        self.config = config or get_config()
        self.last_error = ""
        self._lock = threading.Lock()

        self.resolver = IncludeResolver(self.spec)
        self.resources = ResourceExporter(fs, self.config)
        self.merger = IncludeMerger(fs, self.spec, self.config)
        self.template = TemplateAssembler(fs, self.spec)
        self.events_code = EventsCodeOrchestrator(fs, self.code_generator, self.spec, self.config)

    def set_code_output_directory(self, code_output_dir: str) -> None:
        self.code_output_dir = code_output_dir

    def _run(self, what: str, action: Callable[[], object]) -> bool:
        try:
            action()
        except WebExportError as e:
            self.last_error = str(e)
            logger.error(f"{what}失败: {e}")
            return False
        self.last_error = ""
        return True

    # === 单步操作 ===

    def export_project_data(
        self,
        project: Project,
        filename: str,
        runtime_game_options: dict | None = None,
    ) -> bool:
        exporter = ProjectDataExporter(self.fs, self.spec)
        return self._run(
            "导出项目数据",
            lambda: exporter.export_project_data(project, filename, runtime_game_options),
        )

    def export_resources(self, project: Project, export_dir: str) -> bool:
        return self._run("导出资源", lambda: self.resources.export_resources(project, export_dir))

    def add_deprecated_font_files_to_font_resources(self, project: Project, url_prefix: str = "") -> list[str]:
        return ResourceExporter.add_deprecated_font_resources(project, url_prefix)

    def add_libs_include(
        self,
        pixi_renderers: bool,
        cocos_renderers: bool,
        websocket_debugger_client: bool,
        includes: IncludeSet,
    ) -> bool:
        def _add() -> None:
            flags = BuildFlags.from_switches(
                pixi_renderers, cocos_renderers, websocket_debugger=websocket_debugger_client
            )
            self.resolver.add_libs_include(flags, includes)

        return self._run("添加运行时库", _add)

    def remove_includes(self, pixi_renderers: bool, cocos_renderers: bool, includes: IncludeSet) -> None:
        renderers = []
        if pixi_renderers:
            renderers.append(RendererKind.PIXI)
        if cocos_renderers:
            renderers.append(RendererKind.COCOS)
        self.resolver.remove_includes(includes, renderers)

    def export_includes_and_libs(self, includes: IncludeSet, export_dir: str, minify: bool) -> bool:
        return self._run(
            "导出加载文件",
            lambda: self.merger.export_includes_and_libs(
                includes, export_dir, self.runtime_root, minify=minify
            ),
        )

    def export_events_code(
        self,
        project: Project,
        output_dir: str,
        includes: IncludeSet,
        export_for_preview: bool = False,
    ) -> bool:
        # 生成器接口不区分预览，export_for_preview 只影响日志
        logger.debug(f"生成事件代码（预览: {export_for_preview}）")
        return self._run(
            "生成事件代码",
            lambda: self.events_code.export_events_code(project, output_dir, includes),
        )

    def export_effect_includes(self, project: Project, includes: IncludeSet) -> bool:
        return self._run("添加特效文件", lambda: self.resolver.add_effect_includes(project, includes))

    def export_object_and_behaviors_includes(self, project: Project, includes: IncludeSet) -> None:
        self.resolver.add_object_and_behavior_includes(project, includes)

    def export_external_source_files(self, project: Project, output_dir: str, includes: IncludeSet) -> bool:
        return self._run(
            "复制外部源文件",
            lambda: self.events_code.export_external_source_files(project, output_dir, includes),
        )

    def complete_index_file(self, content: str, includes: IncludeSet | list[str], additional_spec: str = "") -> str:
        return self.template.complete_index_file(content, includes, additional_spec)

    def export_index_file(
        self,
        project: Project,
        source: str,
        export_dir: str,
        includes: IncludeSet | list[str],
        additional_spec: str = "",
    ) -> bool:
        return self._run(
            "生成外壳文档",
            lambda: self.template.export_index_file(
                source, export_dir, includes, additional_spec, project_name=project.name
            ),
        )

    # === 平台文件 ===

    def _package_request(
        self,
        project: Project,
        export_dir: str,
        target: TargetKind,
        includes: list[str] | None = None,
        debug_mode: bool = False,
    ) -> PackageRequest:
        return PackageRequest(
            project=project,
            export_dir=export_dir,
            runtime_root=self.runtime_root,
            includes=list(includes or []),
            flags=BuildFlags.for_target(target),
            debug_mode=debug_mode,
        )

    def export_cordova_files(self, project: Project, export_dir: str) -> bool:
        packager = CordovaPackager(self.fs, self.spec)
        request = self._package_request(project, export_dir, TargetKind.CORDOVA)
        return self._run("生成 Cordova 文件", lambda: packager.package(request))

    def export_cocos2d_files(
        self,
        project: Project,
        export_dir: str,
        debug_mode: bool,
        includes: IncludeSet | list[str],
    ) -> bool:
        packager = Cocos2dPackager(self.fs, self.spec)
        request = self._package_request(project, export_dir, TargetKind.COCOS2D, list(includes), debug_mode)
        return self._run("生成 Cocos2d 文件", lambda: packager.package(request))

    def export_electron_files(
        self,
        project: Project,
        export_dir: str,
        includes: IncludeSet | list[str] | None = None,
    ) -> bool:
        packager = ElectronPackager(self.fs, self.spec)
        request = self._package_request(project, export_dir, TargetKind.ELECTRON, list(includes or []))
        return self._run("生成 Electron 文件", lambda: packager.package(request))

    def export_facebook_instant_games_files(self, project: Project, export_dir: str) -> bool:
        packager = FacebookPackager(self.fs, self.spec)
        request = self._package_request(project, export_dir, TargetKind.FACEBOOK)

        def _package() -> None:
            packager.validate(request)
            packager.package(request)

        return self._run("生成 Facebook Instant Games 文件", _package)

    # === 完整流程 ===

    def _finish(self, result: ExportResult) -> ExportResult:
        self.last_error = "" if result.success else result.message
        return result

    def export_project_for_preview(self, options: PreviewExportOptions) -> ExportResult:
        """导出预览（调用方负责打开浏览器）"""
        with self._lock:
            orchestrator = PreviewOrchestrator(
                self.fs,
                self.code_generator,
                self.runtime_root,
                self.code_output_dir,
                self.spec,
                self.config,
            )
            return self._finish(orchestrator.export(options))

    def export_whole_project(
        self,
        project: Project,
        export_dir: str,
        target: TargetKind,
        minify: bool = False,
        debug_mode: bool = False,
    ) -> ExportResult:
        """按目标完整导出"""
        with self._lock:
            exporter = FullExporter(
                self.fs,
                self.code_generator,
                self.runtime_root,
                self.code_output_dir,
                self.spec,
                self.config,
            )
            try:
                result = exporter.export(project, export_dir, target, minify=minify, debug_mode=debug_mode)
            except WebExportError as e:
                result = ExportResult(target=target.value)
                result.mark_failed("CONFIG", e)
            return self._finish(result)
