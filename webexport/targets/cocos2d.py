"""
Cocos2d 打包器 - 替代渲染后端

输出：
- index.html: 使用 Cocos2d 专用模板（可以没有加载列表占位符）
- main.js: 启动脚本
- project.json: jsList 为最终加载列表，debugMode 区分调试/发布

测试要点：
- test_project_json_debug_mode: 调试 1 / 发布 0
- test_project_json_js_list: jsList 顺序与加载列表一致
"""

from __future__ import annotations

import json

from ..models import TargetKind
from .base import PackageRequest, TargetPackager


class Cocos2dPackager(TargetPackager):
    """Cocos2d 平台文件"""

    target = TargetKind.COCOS2D
    index_template = "cocos2d_index"

    def project_json(self, request: PackageRequest) -> dict:
        return {
            "project_type": "javascript",
            "debugMode": 1 if request.debug_mode else 0,
            "showFPS": request.debug_mode,
            "frameRate": 60,
            "id": "gameCanvas",
            "renderMode": 0,
            "engineDir": "frameworks/cocos2d-html5",
            "modules": ["cocos2d"],
            "jsList": list(request.includes),
        }

    def package(self, request: PackageRequest) -> list[str]:
        main_js = self.fill(
            self.load_template(request, "cocos2d_main"),
            {self.spec.markers.project_name: json.dumps(request.project.name, ensure_ascii=False)[1:-1]},
        )
        return [
            self.write_file(request, "main.js", main_js),
            self.write_json(request, "project.json", self.project_json(request)),
        ]
