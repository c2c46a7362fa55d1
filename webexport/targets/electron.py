"""
Electron 打包器 - 桌面外壳

输出：
- main.js: 入口脚本（窗口尺寸/标题）
- package.json: 打包清单，files 引用最终加载列表与 index.html
"""

from __future__ import annotations

import json

from ..models import FileOwner, TargetKind
from .base import PackageRequest, TargetPackager


class ElectronPackager(TargetPackager):
    """Electron 平台文件"""

    target = TargetKind.ELECTRON

    def render_main(self, request: PackageRequest) -> str:
        project = request.project
        return self.fill(
            self.load_template(request, "electron_main"),
            {
                "GDJS_WINDOW_WIDTH": str(project.window_width),
                "GDJS_WINDOW_HEIGHT": str(project.window_height),
                # 模板中标题位于 JS 字符串内
                self.spec.markers.project_name: json.dumps(project.name, ensure_ascii=False)[1:-1],
            },
        )

    def packaged_files(self, request: PackageRequest) -> list[str]:
        files = ["main.js", self.spec.output_names.index_file]
        files.extend(request.includes)
        if request.tree is not None:
            files.extend(
                path for path in request.tree.files()
                if request.tree.owner_of(path) == FileOwner.RESOURCE
            )
        return list(dict.fromkeys(files))

    def package(self, request: PackageRequest) -> list[str]:
        project = request.project
        main_js = self.render_main(request)
        manifest = self.load_json_template(request, "electron_package")
        manifest.update(
            {
                "name": project.package_name,
                "productName": project.name,
                "version": project.version,
                "author": project.author,
                "main": "main.js",
                "files": self.packaged_files(request),
            }
        )
        return [
            self.write_file(request, "main.js", main_js),
            self.write_json(request, "package.json", manifest),
        ]
