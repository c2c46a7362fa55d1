"""
规范加载器 - 读取 export_spec.yaml

职责：
- 解析YAML并提供类型安全访问
- 提供加载顺序表、渲染器文件归属、占位符、模板路径、托管平台限制
- 缓存加载结果（避免重复解析）

使用方式：
    spec = load_spec()
    core = spec.include_order.core
    template = spec.templates.cordova_config
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

import yaml
from pydantic import BaseModel, Field

DEFAULT_SPEC_PATH = Path(__file__).with_name("export_spec.yaml")


class Markers(BaseModel):
    """模板占位符"""
    include_files: str = "<!--GDJS_CODE_FILES -->"
    additional_spec: str = "/*GDJS_ADDITIONAL_SPEC*/"
    project_name: str = "GDJS_PROJECTNAME"


class OutputNames(BaseModel):
    """输出文件命名"""
    index_file: str = "index.html"
    data_file: str = "data.js"
    merged_file: str = "code.js"
    scene_code: str = "code{index}.js"
    external_events_code: str = "external-code{index}.js"
    external_source: str = "ext-code{index}.js"


class DataFileSpec(BaseModel):
    """项目数据文件中的全局变量名"""
    project_variable: str = "gdjs.projectData"
    options_variable: str = "gdjs.runtimeGameOptions"


class IncludeOrder(BaseModel):
    """运行时库文件加载顺序表"""
    core: list[str] = Field(default_factory=list)
    renderers: dict[str, list[str]] = Field(default_factory=dict)
    debugger: list[str] = Field(default_factory=list)
    packaged: list[str] = Field(default_factory=list)


class TemplatePaths(BaseModel):
    """模板路径（相对于 runtime_root）"""
    index: str = "index.html"
    cordova_config: str = "Cordova/config.xml"
    cordova_package: str = "Cordova/package.json"
    electron_main: str = "Electron/main.js"
    electron_package: str = "Electron/package.json"
    cocos2d_index: str = "Cocos2d/index.html"
    cocos2d_main: str = "Cocos2d/main.js"


class HostedPlatformSpec(BaseModel):
    """托管平台限制"""
    name: str = "facebook-instant-games"
    max_bundle_mb: float = 200
    max_file_count: int = 1000
    allowed_domains: list[str] = Field(default_factory=list)
    manifest_file: str = "fbapp-config.json"

    @property
    def max_bundle_bytes(self) -> int:
        return int(self.max_bundle_mb * 1024 * 1024)


class ExportSpec(BaseModel):
    """导出规范（export_spec.yaml 的结构化表示）"""
    schema_version: str

    markers: Markers = Field(default_factory=Markers)
    output_names: OutputNames = Field(default_factory=OutputNames)
    data_file: DataFileSpec = Field(default_factory=DataFileSpec)
    include_order: IncludeOrder = Field(default_factory=IncludeOrder)
    renderer_files: dict[str, list[str]] = Field(default_factory=dict)
    templates: TemplatePaths = Field(default_factory=TemplatePaths)
    hosted_platform: HostedPlatformSpec = Field(default_factory=HostedPlatformSpec)

    # === 便捷访问方法 ===

    def get_renderer_includes(self, renderer: str) -> list[str]:
        """获取渲染器的库文件"""
        return list(self.include_order.renderers.get(renderer, []))

    def get_renderer_patterns(self, renderer: str) -> list[str]:
        """获取判定文件归属渲染器的子串"""
        return list(self.renderer_files.get(renderer, []))

    def scene_code_name(self, index: int) -> str:
        return self.output_names.scene_code.format(index=index)

    def external_events_code_name(self, index: int) -> str:
        return self.output_names.external_events_code.format(index=index)

    def external_source_name(self, index: int) -> str:
        return self.output_names.external_source.format(index=index)


class SpecLoader:
    """规范加载器（缓存）"""

    @classmethod
    @lru_cache(maxsize=4)
    def load(cls, spec_path: str | Path = DEFAULT_SPEC_PATH) -> ExportSpec:
        """加载并缓存规范"""
        path = Path(spec_path)
        if not path.exists():
            raise FileNotFoundError(f"规范文件不存在: {path}")

        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)

        return ExportSpec(**data)

    @classmethod
    def reload(cls, spec_path: str | Path = DEFAULT_SPEC_PATH) -> ExportSpec:
        """强制重新加载（清除缓存）"""
        cls.load.cache_clear()
        return cls.load(spec_path)


# 便捷函数
def load_spec(spec_path: str | Path = DEFAULT_SPEC_PATH) -> ExportSpec:
    """加载导出规范"""
    return SpecLoader.load(spec_path)
