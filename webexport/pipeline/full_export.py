"""
完整导出 - 按目标平台导出可发布的游戏目录

与预览的区别：
- 渲染器与是否为安装包由目标决定
- 可以合并压缩
- 最后一个阶段生成平台文件（清单在所有被引用文件写出之后生成）
"""

from __future__ import annotations

from ..config import ExportSpec, RuntimeConfig, get_config, load_spec
from ..interfaces import ConfigError, ICodeGenerator, IFileSystem
from ..models import BuildFlags, ExportResult, Project, TargetKind
from ..targets import get_packager
from .concurrency import CancellationToken
from .executor import ExportContext, ExportExecutor
from .stages import EXPORT_STAGES


class FullExporter:
    """完整导出"""

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

    def export(
        self,
        project: Project,
        export_dir: str,
        target: TargetKind,
        *,
        minify: bool = False,
        debug_mode: bool = False,
        flags: BuildFlags | None = None,
        cancel_token: CancellationToken | None = None,
    ) -> ExportResult:
        """
        导出项目

        Args:
            project: 项目（不修改）
            export_dir: 导出目录（绝对路径）
            target: 目标平台（不能是 preview）
            minify: 合并压缩
            debug_mode: 调试版本（Cocos2d debugMode）
            flags: 显式构建开关（默认按目标推导）
            cancel_token: 取消令牌

        Raises:
            ConfigError: 目标为 preview 或开关与目标矛盾
        """
        if target == TargetKind.PREVIEW:
            raise ConfigError("预览请使用 PreviewOrchestrator")
        flags = flags or BuildFlags.for_target(target, minify=minify)
        expected = BuildFlags.for_target(target)
        if flags.renderer != expected.renderer:
            raise ConfigError(
                f"目标 {target.value} 使用 {expected.renderer.value} 渲染器，不能指定 {flags.renderer.value}"
            )
        if flags.packaged != expected.packaged:
            raise ConfigError(f"目标 {target.value} 的安装包开关不匹配")

        ctx = ExportContext(
            project=project,
            export_dir=export_dir,
            code_output_dir=self.code_output_dir or export_dir,
            runtime_root=self.runtime_root,
            target=target,
            flags=flags,
            packager=get_packager(target, self.fs, self.spec),
            debug_mode=debug_mode,
            cancel_token=cancel_token,
        )
        return self.executor.execute(ctx, EXPORT_STAGES)
