"""
预览导出编排 - 生成可直接在浏览器打开的预览目录

阶段：DATA_EXPORT -> RESOURCE_EXPORT -> CODE_GENERATION -> INCLUDES -> TEMPLATE_ASSEMBLY
- 预览固定使用 pixi 渲染器，不压缩（便于热重载）
- 提供调试服务器地址时嵌入调试客户端
- 仅导出项目数据时不生成代码，沿用调用方哈希表中登记的代码文件

测试要点：
- test_two_scene_preview: 两个场景的预览输出
- test_project_data_only: 仅数据导出
- test_generation_failure_no_index: 生成失败时不写外壳文档
"""

from __future__ import annotations

import logging

from ..config import ExportSpec, RuntimeConfig, get_config, load_spec
from ..interfaces import ICodeGenerator, IFileSystem
from ..models import BuildFlags, ExportResult, PreviewExportOptions, RendererKind, TargetKind
from .concurrency import CancellationToken
from .executor import ExportContext, ExportExecutor
from .stages import PREVIEW_STAGES

logger = logging.getLogger(__name__)


class PreviewOrchestrator:
    """预览导出"""

    def __init__(
        self,
        fs: IFileSystem,
        generator: ICodeGenerator,
        runtime_root: str,
        code_output_dir: str | None = None,
        spec: ExportSpec | None = None,
        config: RuntimeConfig | None = None,
    ):
        self.fs = fs
        self.runtime_root = runtime_root
        self.code_output_dir = code_output_dir
        self.spec = spec or load_spec()
        self.config = config or get_config()
        self.executor = ExportExecutor(fs, generator, self.spec, self.config)

    @staticmethod
    def build_flags(options: PreviewExportOptions) -> BuildFlags:
        return BuildFlags(
            renderer=RendererKind.PIXI,
            websocket_debugger=options.debugger is not None,
            minify=False,
            packaged=False,
        )

    def export(
        self,
        options: PreviewExportOptions,
        cancel_token: CancellationToken | None = None,
    ) -> ExportResult:
        """
        执行预览导出

        Args:
            options: 预览参数（导出期间不可变）
            cancel_token: 取消令牌

        Returns:
            导出结果（失败时包含失败阶段与信息）
        """
        logger.info(f"预览导出: {options.export_path}（场景: {options.layout_name or '默认'}）")
        ctx = ExportContext(
            project=options.project,
            export_dir=options.export_path,
            code_output_dir=self.code_output_dir or options.export_path,
            runtime_root=self.runtime_root,
            target=TargetKind.PREVIEW,
            flags=self.build_flags(options),
            preview=options,
            cancel_token=cancel_token,
        )
        return self.executor.execute(ctx, PREVIEW_STAGES)
