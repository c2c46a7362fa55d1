"""
导出选项 - 构建开关与预览导出参数

BuildFlags 取代原来的位置布尔参数（pixi/cocos/debugger/minify），
构造时即校验组合是否合法，矛盾组合抛出 ConfigError
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field, model_validator

from ..interfaces import ConfigError
from .project import Project


class RendererKind(str, Enum):
    """渲染后端"""
    PIXI = "pixi"
    COCOS = "cocos"


class TargetKind(str, Enum):
    """导出目标"""
    PREVIEW = "preview"
    WEB = "web"
    CORDOVA = "cordova"
    COCOS2D = "cocos2d"
    ELECTRON = "electron"
    FACEBOOK = "facebook"


# 各目标默认使用的渲染器与是否为安装包
_TARGET_DEFAULTS: dict[TargetKind, tuple[RendererKind, bool]] = {
    TargetKind.PREVIEW: (RendererKind.PIXI, False),
    TargetKind.WEB: (RendererKind.PIXI, False),
    TargetKind.CORDOVA: (RendererKind.PIXI, True),
    TargetKind.COCOS2D: (RendererKind.COCOS, False),
    TargetKind.ELECTRON: (RendererKind.PIXI, True),
    TargetKind.FACEBOOK: (RendererKind.PIXI, False),
}


class BuildFlags(BaseModel):
    """构建开关（不可变）"""
    renderer: RendererKind = RendererKind.PIXI
    websocket_debugger: bool = False
    minify: bool = False
    packaged: bool = False

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def _check_combination(self) -> BuildFlags:
        if self.packaged and self.websocket_debugger:
            raise ConfigError("安装包构建不能嵌入调试客户端")
        return self

    @classmethod
    def from_switches(
        cls,
        pixi: bool,
        cocos: bool,
        websocket_debugger: bool = False,
        minify: bool = False,
        packaged: bool = False,
    ) -> BuildFlags:
        """从旧式布尔开关构造（恰好一个渲染器）"""
        if pixi and cocos:
            raise ConfigError("不能同时启用 pixi 与 cocos 渲染器")
        if not pixi and not cocos:
            raise ConfigError("必须启用一个渲染器")
        return cls(
            renderer=RendererKind.PIXI if pixi else RendererKind.COCOS,
            websocket_debugger=websocket_debugger,
            minify=minify,
            packaged=packaged,
        )

    @classmethod
    def for_target(
        cls,
        target: TargetKind,
        minify: bool = False,
        websocket_debugger: bool = False,
    ) -> BuildFlags:
        """按目标的默认渲染器构造"""
        renderer, packaged = _TARGET_DEFAULTS[target]
        return cls(
            renderer=renderer,
            websocket_debugger=websocket_debugger,
            minify=minify,
            packaged=packaged,
        )


class DebuggerEndpoint(BaseModel):
    """调试服务器地址"""
    host: str
    port: str

    model_config = {"frozen": True}


class PreviewExportOptions(BaseModel):
    """预览导出参数（导出开始后不可变）"""
    project: Project
    export_path: str
    layout_name: str = ""
    external_layout_name: str = ""
    debugger: DebuggerEndpoint | None = None
    include_file_hashes: dict[str, str] = Field(default_factory=dict)
    project_data_only_export: bool = False

    model_config = {"frozen": True}

    def with_debugger_server(self, host: str, port: str | int) -> PreviewExportOptions:
        return self.model_copy(update={"debugger": DebuggerEndpoint(host=host, port=str(port))})

    def with_layout(self, layout_name: str) -> PreviewExportOptions:
        return self.model_copy(update={"layout_name": layout_name})

    def with_external_layout(self, external_layout_name: str) -> PreviewExportOptions:
        return self.model_copy(update={"external_layout_name": external_layout_name})

    def with_include_file_hash(self, include_file: str, file_hash: str) -> PreviewExportOptions:
        hashes = dict(self.include_file_hashes)
        hashes[include_file] = file_hash
        return self.model_copy(update={"include_file_hashes": hashes})

    def with_project_data_only(self, enable: bool = True) -> PreviewExportOptions:
        return self.model_copy(update={"project_data_only_export": enable})
