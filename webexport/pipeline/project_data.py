"""
项目数据导出 - 将导出副本序列化为运行时读取的数据文件（data.js）

输出格式：
    gdjs.projectData = {...};
    gdjs.runtimeGameOptions = {...};

键按字母排序，相同项目得到字节一致的文件
"""

from __future__ import annotations

import json
import logging
import posixpath
from typing import Any

from ..config import ExportSpec, load_spec
from ..interfaces import IFileSystem
from ..models import Project

logger = logging.getLogger(__name__)


class ProjectDataExporter:
    """项目数据文件导出"""

    def __init__(self, fs: IFileSystem, spec: ExportSpec | None = None):
        self.fs = fs
        self.spec = spec or load_spec()

    @staticmethod
    def _dumps(data: Any) -> str:
        return json.dumps(data, ensure_ascii=False, sort_keys=True, separators=(",", ":"))

    def render(self, project: Project, runtime_game_options: dict | None = None) -> str:
        variables = self.spec.data_file
        content = f"{variables.project_variable} = {self._dumps(project.to_data_dict())};\n"
        if runtime_game_options is not None:
            content += f"{variables.options_variable} = {self._dumps(runtime_game_options)};\n"
        return content

    def export_project_data(
        self,
        project: Project,
        filename: str,
        runtime_game_options: dict | None = None,
    ) -> str:
        """
        写出项目数据文件

        Args:
            project: 导出副本
            filename: 数据文件完整路径
            runtime_game_options: 写入 gdjs.runtimeGameOptions 的内容

        Returns:
            写出的文件路径

        Raises:
            DestinationNotWritableError: 目标不可写
        """
        self.fs.mkdir_all(posixpath.dirname(filename))
        self.fs.write_text(filename, self.render(project, runtime_game_options))
        logger.info(f"项目数据已导出: {filename}")
        return filename


def prepare_export_copy(
    project: Project,
    destinations: dict[str, str] | None = None,
    first_layout: str | None = None,
    show_splash: bool | None = None,
) -> Project:
    """
    构造导出副本（原项目不修改）

    Args:
        project: 原项目
        destinations: 资源名 -> 导出相对路径
        first_layout: 覆盖首个场景
        show_splash: 覆盖启动画面开关
    """
    copy = project.model_copy(deep=True)
    if first_layout:
        copy.first_layout = first_layout
    if show_splash is not None:
        copy.show_splash = show_splash
    for resource in copy.iter_resources():
        if destinations and resource.name in destinations:
            resource.file = destinations[resource.name]
    return copy
