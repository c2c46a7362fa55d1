"""
目标平台打包器基类

职责：
1. 定义打包请求（项目/导出目录/最终加载列表/构建开关）
2. 提供模板读取、占位符替换、文件登记写出等公共能力
3. 各平台子类只负责平台专属文件；清单文件在 package() 的最后写出
"""

from __future__ import annotations

import json
import logging
import posixpath
from dataclasses import dataclass
from typing import Any

from ..config import ExportSpec, load_spec
from ..interfaces import IFileSystem, ITargetPackager, SourceNotFoundError, TemplateError
from ..models import BuildFlags, ExportTree, FileOwner, Project, TargetKind

logger = logging.getLogger(__name__)


@dataclass
class PackageRequest:
    """打包请求"""
    project: Project
    export_dir: str
    runtime_root: str
    includes: list[str]
    flags: BuildFlags
    tree: ExportTree | None = None
    debug_mode: bool = False


class TargetPackager(ITargetPackager):
    """打包器公共实现（纯网页导出直接使用）"""

    target = TargetKind.WEB
    # export_spec.yaml templates 中的字段名
    index_template = "index"

    def __init__(self, fs: IFileSystem, spec: ExportSpec | None = None):
        self.fs = fs
        self.spec = spec or load_spec()

    def template_path(self, runtime_root: str, name: str) -> str:
        return posixpath.join(runtime_root, getattr(self.spec.templates, name))

    def index_template_path(self, runtime_root: str) -> str:
        return self.template_path(runtime_root, self.index_template)

    def validate(self, request: PackageRequest) -> None:
        return None

    def package(self, request: PackageRequest) -> list[str]:
        return []

    # === 公共能力 ===

    def load_template(self, request: PackageRequest, name: str) -> str:
        path = self.template_path(request.runtime_root, name)
        try:
            return self.fs.read_text(path)
        except SourceNotFoundError as e:
            raise TemplateError(f"无法读取模板: {path}") from e

    def load_json_template(self, request: PackageRequest, name: str) -> dict[str, Any]:
        text = self.load_template(request, name)
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise TemplateError(f"模板不是有效的 JSON: {name}: {e}") from e
        if not isinstance(data, dict):
            raise TemplateError(f"模板顶层必须是对象: {name}")
        return data

    @staticmethod
    def fill(content: str, replacements: dict[str, str]) -> str:
        for marker, value in replacements.items():
            content = content.replace(marker, value)
        return content

    def write_file(self, request: PackageRequest, relative_path: str, content: str) -> str:
        """写出平台文件并登记到导出目录"""
        if request.tree is not None:
            relative_path = request.tree.claim(relative_path, FileOwner.DOCUMENT)
        path = posixpath.join(request.export_dir, relative_path)
        self.fs.mkdir_all(posixpath.dirname(path))
        self.fs.write_text(path, content)
        logger.debug(f"[{self.target.value}] 写出 {relative_path}")
        return path

    def write_json(self, request: PackageRequest, relative_path: str, data: Any) -> str:
        return self.write_file(
            request, relative_path, json.dumps(data, ensure_ascii=False, indent=2) + "\n"
        )
