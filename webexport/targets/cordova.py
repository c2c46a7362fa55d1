"""
Cordova 打包器 - 安装包外壳（移动端）

输出：
- config.xml: 包名/名称/版本/作者/屏幕方向/权限
- package.json: 基于模板更新名称与版本

测试要点：
- test_config_xml_identity: 标识字段写入并转义
- test_config_xml_permissions: 权限列表
"""

from __future__ import annotations

from xml.sax.saxutils import escape

from ..models import TargetKind
from .base import PackageRequest, TargetPackager

_ATTR_ENTITIES = {'"': "&quot;"}


def _xml(value: str) -> str:
    return escape(value, _ATTR_ENTITIES)


class CordovaPackager(TargetPackager):
    """Cordova 平台文件"""

    target = TargetKind.CORDOVA

    def render_config_xml(self, request: PackageRequest) -> str:
        project = request.project
        permissions = "".join(
            f'            <uses-permission android:name="{_xml(p)}" />\n'
            for p in project.permissions
        )
        orientation = project.orientation if project.orientation in ("landscape", "portrait") else "default"
        return self.fill(
            self.load_template(request, "cordova_config"),
            {
                "GDJS_PACKAGENAME": _xml(project.package_name),
                "GDJS_PROJECTVERSION": _xml(project.version),
                "GDJS_PROJECTAUTHOR": _xml(project.author),
                "GDJS_ORIENTATION": orientation,
                "<!-- GDJS_PERMISSIONS -->\n": permissions,
                self.spec.markers.project_name: _xml(project.name),
            },
        )

    def package(self, request: PackageRequest) -> list[str]:
        project = request.project
        manifest = self.load_json_template(request, "cordova_package")
        manifest.update(
            {
                "name": project.package_name,
                "displayName": project.name,
                "version": project.version,
                "author": project.author,
            }
        )
        config_xml = self.render_config_xml(request)
        return [
            self.write_json(request, "package.json", manifest),
            self.write_file(request, "config.xml", config_xml),
        ]
