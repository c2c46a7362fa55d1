"""
加载文件合并器 - 将加载列表中的文件复制到导出目录并可选合并压缩

职责：
1. 相对路径条目：从 runtime_root 复制到导出目录同名相对路径
2. 绝对路径条目（生成代码/项目数据/外部源文件）：复制到导出根目录，条目改为文件名
3. 已在导出目录内的绝对路径：不复制，条目改为导出相对路径
4. 内容相同则跳过复制
5. 压缩：按加载顺序拼接压缩为 code.js，加载列表替换为单个条目
6. 全部成功才改写加载列表；失败时列表保持原样

测试要点：
- test_copy_runtime_and_generated: 相对/绝对条目处理
- test_minify_single_entry: 压缩后只剩一个条目
- test_missing_source_names_file: 缺失文件报错且列表不变
- test_path_conflict_with_resource: 与资源路径冲突
"""

from __future__ import annotations

import logging
import posixpath
from dataclasses import dataclass

from ..config import ExportSpec, RuntimeConfig, get_config, load_spec
from ..interfaces import IFileSystem, PathConflictError, SourceNotFoundError
from ..models import ExportTree, FileOwner, IncludeSet, content_hash, normalize_relative
from .concurrency import CancellationToken, run_ordered
from .minifier import Minifier

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _IncludeCopy:
    """单个加载文件的复制计划"""
    entry: str              # 原始条目
    source: str             # 源文件
    relative: str           # 导出相对路径
    owner: FileOwner
    in_tree: bool = False   # 已在导出目录内


class IncludeMerger:
    """加载文件复制与合并"""

    def __init__(
        self,
        fs: IFileSystem,
        spec: ExportSpec | None = None,
        config: RuntimeConfig | None = None,
        minifier: Minifier | None = None,
    ):
        self.fs = fs
        self.spec = spec or load_spec()
        self.config = config or get_config()
        self._minifier = minifier

    @property
    def minifier(self) -> Minifier:
        if self._minifier is None:
            self._minifier = Minifier(self.config.minifier)
        return self._minifier

    def _plan(self, entry: str, export_dir: str, runtime_root: str) -> _IncludeCopy:
        if not self.fs.is_absolute(entry):
            return _IncludeCopy(
                entry=entry,
                source=posixpath.join(runtime_root, entry),
                relative=normalize_relative(entry),
                owner=FileOwner.LIBRARY,
            )

        owner = FileOwner.CODE
        if posixpath.basename(entry) == self.spec.output_names.data_file:
            owner = FileOwner.DATA

        prefix = export_dir.rstrip("/") + "/"
        if entry.startswith(prefix):
            return _IncludeCopy(entry, entry, normalize_relative(entry[len(prefix):]), owner, in_tree=True)
        return _IncludeCopy(entry, entry, posixpath.basename(entry), owner)

    def export_includes_and_libs(
        self,
        includes: IncludeSet,
        export_dir: str,
        runtime_root: str,
        *,
        minify: bool = False,
        tree: ExportTree | None = None,
        cancel_token: CancellationToken | None = None,
    ) -> list[str]:
        """
        复制加载文件到导出目录，改写为导出相对路径，可选合并压缩

        Args:
            includes: 加载列表（成功时原位改写）
            export_dir: 导出目录
            runtime_root: 运行时库根目录（相对条目的来源）
            minify: 是否合并压缩为单个文件
            tree: 导出路径登记（冲突检测）
            cancel_token: 取消令牌

        Returns:
            改写后的加载列表

        Raises:
            SourceNotFoundError: 源文件不存在（信息包含条目）
            DestinationNotWritableError: 目标不可写
            PathConflictError: 与其他导出文件路径冲突
            MinifyError: 压缩失败
        """
        plans = [self._plan(entry, export_dir, runtime_root) for entry in includes]
        sources: dict[str, str] = {}
        for plan in plans:
            if sources.setdefault(plan.relative, plan.source) != plan.source:
                raise PathConflictError(
                    f"导出路径冲突: {plan.relative} 同时来自 {sources[plan.relative]} 和 {plan.source}",
                    path=plan.relative,
                )
        if tree is not None:
            for plan in plans:
                tree.claim(plan.relative, plan.owner)

        self.fs.mkdir_all(export_dir)

        hashes = run_ordered(
            lambda plan: self._copy_if_different(plan, export_dir),
            plans,
            max_workers=self.config.concurrency.max_workers,
            cancel_token=cancel_token,
            describe=lambda plan: plan.entry,
        )

        if minify:
            merged_name = self.spec.output_names.merged_file
            merged_hash = self._merge(plans, export_dir, merged_name, tree)
            includes.reset([merged_name])
            includes.set_hash(merged_name, merged_hash)
            logger.info(f"合并压缩 {len(plans)} 个文件为 {merged_name}")
            return includes.to_list()

        for plan, file_hash in zip(plans, hashes):
            includes.replace(plan.entry, plan.relative)
            includes.set_hash(plan.relative, file_hash)

        logger.info(f"加载文件导出完成: {len(plans)} 个")
        return includes.to_list()

    def _copy_if_different(self, plan: _IncludeCopy, export_dir: str) -> str:
        try:
            data = self.fs.read_binary(plan.source)
        except SourceNotFoundError as e:
            raise SourceNotFoundError(f"加载文件不存在: {plan.entry} ({plan.source})", path=plan.source) from e

        file_hash = content_hash(data)
        if plan.in_tree:
            return file_hash

        destination = posixpath.join(export_dir, plan.relative)
        if self.fs.exists(destination) and content_hash(self.fs.read_binary(destination)) == file_hash:
            logger.debug(f"加载文件未变化，跳过复制: {plan.relative}")
            return file_hash

        self.fs.mkdir_all(posixpath.dirname(destination))
        self.fs.write_binary(destination, data)
        return file_hash

    def _merge(
        self,
        plans: list[_IncludeCopy],
        export_dir: str,
        merged_name: str,
        tree: ExportTree | None,
    ) -> str:
        """按加载顺序读取导出目录中的文件，合并压缩后写出"""
        if tree is not None:
            tree.claim(merged_name, FileOwner.CODE)
        sources = []
        for plan in plans:
            path = posixpath.join(export_dir, plan.relative)
            try:
                sources.append((plan.relative, self.fs.read_text(path)))
            except SourceNotFoundError as e:
                raise SourceNotFoundError(f"合并时无法读取: {plan.relative}", path=path) from e

        merged = self.minifier.minify(sources)
        self.fs.write_text(posixpath.join(export_dir, merged_name), merged)
        return content_hash(merged.encode("utf-8"))
