"""
项目模型 - 导出流水线消费的项目描述（场景/对象/资源/事件）

项目由编辑器侧校验后传入，流水线只读；导出副本中的资源路径会被改写
"""

from __future__ import annotations

from enum import Enum
from typing import Iterator, Union

from pydantic import BaseModel, Field


class ResourceKind(str, Enum):
    """资源类型"""
    IMAGE = "image"
    AUDIO = "audio"
    FONT = "font"
    VIDEO = "video"
    JSON = "json"
    OTHER = "other"


class Resource(BaseModel):
    """资源条目（图片/声音/字体等）"""
    name: str
    kind: ResourceKind = ResourceKind.IMAGE
    file: str = ""

    @property
    def is_url(self) -> bool:
        return self.file.startswith(("http://", "https://"))

    @property
    def has_file(self) -> bool:
        return bool(self.file) and not self.is_url


class ProjectObject(BaseModel):
    """对象（只保留导出需要的字段）"""
    name: str
    type: str = "Sprite"
    font: str | None = Field(None, description="旧版文本对象直接声明的字体文件名")
    behaviors: list[str] = Field(default_factory=list)


class Layout(BaseModel):
    """场景"""
    name: str
    objects: list[ProjectObject] = Field(default_factory=list)
    compiled_events: str | None = Field(None, description="预编译的事件代码（PrecompiledCodeGenerator 使用）")


class ExternalEvents(BaseModel):
    """外部事件表"""
    name: str
    associated_layout: str | None = None
    compiled_events: str | None = None


class ExternalLayout(BaseModel):
    """外部布局"""
    name: str
    associated_layout: str | None = None


class ExtensionUsage(BaseModel):
    """项目用到的扩展（对象/行为）及其运行时文件"""
    name: str
    include_files: list[str] = Field(default_factory=list)


class EffectUsage(BaseModel):
    """图层特效及其运行时文件"""
    name: str
    effect_type: str
    include_files: list[str] = Field(default_factory=list)


class SourceFile(BaseModel):
    """项目引用的外部 JS 源文件"""
    filename: str


CodeUnit = Union[Layout, ExternalEvents]

# 不写入项目数据文件的字段
_DATA_EXCLUDE = {
    "project_dir": True,
    "layouts": {"__all__": {"compiled_events"}},
    "external_events": {"__all__": {"compiled_events"}},
}


class Project(BaseModel):
    """项目实体"""
    name: str
    package_name: str = "com.example.game"
    version: str = "1.0.0"
    author: str = ""
    orientation: str = "landscape"  # landscape | portrait | default
    window_width: int = 800
    window_height: int = 600
    permissions: list[str] = Field(default_factory=list)
    show_splash: bool = True
    first_layout: str = ""

    # 资源相对路径的基准目录
    project_dir: str = ""

    layouts: list[Layout] = Field(default_factory=list)
    external_layouts: list[ExternalLayout] = Field(default_factory=list)
    external_events: list[ExternalEvents] = Field(default_factory=list)
    resources: list[Resource] = Field(default_factory=list)
    global_objects: list[ProjectObject] = Field(default_factory=list)
    extensions: list[ExtensionUsage] = Field(default_factory=list)
    effects: list[EffectUsage] = Field(default_factory=list)
    external_source_files: list[SourceFile] = Field(default_factory=list)

    # === 场景 ===

    def get_layout(self, name: str) -> Layout | None:
        for layout in self.layouts:
            if layout.name == name:
                return layout
        return None

    def has_external_layout(self, name: str) -> bool:
        return any(layout.name == name for layout in self.external_layouts)

    def iter_objects(self) -> Iterator[ProjectObject]:
        """遍历全局对象与各场景对象"""
        yield from self.global_objects
        for layout in self.layouts:
            yield from layout.objects

    # === 资源管理 ===

    def iter_resources(self) -> Iterator[Resource]:
        yield from self.resources

    def get_resource(self, name: str) -> Resource | None:
        for resource in self.resources:
            if resource.name == name:
                return resource
        return None

    def has_resource(self, name: str) -> bool:
        return self.get_resource(name) is not None

    def add_resource(self, resource: Resource) -> bool:
        """添加资源（同名已存在时不覆盖）"""
        if self.has_resource(resource.name):
            return False
        self.resources.append(resource)
        return True

    # === 导出 ===

    def to_data_dict(self) -> dict:
        """项目数据文件内容"""
        return self.model_dump(mode="json", exclude=_DATA_EXCLUDE)
