"""
模板组装器 - 将加载列表与配置内容写入外壳文档（index.html）

职责：
1. 读取模板（路径可参数化，适用于不同渲染后端）
2. 加载列表占位符 -> 每个条目一个 <script> 标签（按列表顺序，原样输出）
3. 配置占位符 -> 调用方提供的字符串（通常是序列化的运行选项）
4. 占位符缺失不报错，只跳过对应替换

测试要点：
- test_complete_both_markers: 两个占位符都替换
- test_missing_marker_skipped: 缺少占位符时只替换存在的
- test_unreadable_template: 模板不可读抛出 TemplateError
"""

from __future__ import annotations

import html
import logging
import posixpath
from typing import Iterable

from ..config import ExportSpec, load_spec
from ..interfaces import IFileSystem, SourceNotFoundError, TemplateError
from ..models import ExportTree, FileOwner

logger = logging.getLogger(__name__)


class TemplateAssembler:
    """外壳文档组装"""

    def __init__(self, fs: IFileSystem, spec: ExportSpec | None = None):
        self.fs = fs
        self.spec = spec or load_spec()

    @staticmethod
    def render_script_tags(includes: Iterable[str]) -> str:
        return "".join(
            f'\t<script src="{include}" crossorigin="anonymous"></script>\n'
            for include in includes
        )

    def complete_index_file(
        self,
        content: str,
        includes: Iterable[str],
        additional_spec: str = "",
        project_name: str | None = None,
    ) -> str:
        """替换模板文本中的占位符"""
        markers = self.spec.markers
        if markers.include_files in content:
            content = content.replace(markers.include_files, self.render_script_tags(includes))
        else:
            logger.debug("模板中没有加载列表占位符，跳过")
        if markers.additional_spec in content:
            content = content.replace(markers.additional_spec, additional_spec)
        else:
            logger.debug("模板中没有配置占位符，跳过")
        if project_name is not None and markers.project_name in content:
            content = content.replace(markers.project_name, html.escape(project_name))
        return content

    def load_template(self, template_path: str) -> str:
        """
        读取模板

        Raises:
            TemplateError: 模板不存在或不可读
        """
        try:
            return self.fs.read_text(template_path)
        except SourceNotFoundError as e:
            raise TemplateError(f"无法读取模板: {template_path}") from e

    def export_index_file(
        self,
        template_path: str,
        export_dir: str,
        includes: Iterable[str],
        additional_spec: str = "",
        *,
        project_name: str | None = None,
        output_name: str | None = None,
        tree: ExportTree | None = None,
    ) -> str:
        """
        生成外壳文档并写入导出目录

        Args:
            template_path: 模板路径
            export_dir: 导出目录
            includes: 导出相对的加载列表（顺序即加载顺序）
            additional_spec: 替换配置占位符的内容
            project_name: 替换项目名占位符
            output_name: 输出文件名（默认 index.html）
            tree: 导出路径登记

        Returns:
            写出的文件路径
        """
        content = self.load_template(template_path)
        output_name = output_name or self.spec.output_names.index_file
        if tree is not None:
            tree.claim(output_name, FileOwner.DOCUMENT)

        content = self.complete_index_file(content, includes, additional_spec, project_name)

        self.fs.mkdir_all(export_dir)
        output_path = posixpath.join(export_dir, output_name)
        self.fs.write_text(output_path, content)
        logger.info(f"外壳文档已生成: {output_path}")
        return output_path
