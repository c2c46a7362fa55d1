"""
模块接口契约 - 定义导出流水线依赖的外部能力接口

设计原则：
1. 流水线只通过接口访问存储与代码生成，不直接依赖具体实现
2. 每个接口定义清晰的输入输出类型
3. 便于单元测试和mock替换（MemoryFileSystem / PrecompiledCodeGenerator）

使用方式：
    from webexport.interfaces import ICodeGenerator

    class MyCodeGenerator(ICodeGenerator):
        def generate(self, project: Project, unit: CodeUnit) -> str:
            ...
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .models import CodeUnit, Project
    from .targets.base import PackageRequest


# ============================================================================
# 存储能力接口
# ============================================================================

class IFileSystem(ABC):
    """抽象文件系统 - 本地或虚拟存储

    路径统一使用 "/" 分隔的字符串。
    """

    @abstractmethod
    def exists(self, path: str) -> bool:
        """文件或目录是否存在"""
        ...

    @abstractmethod
    def read_text(self, path: str) -> str:
        """
        读取文本文件（UTF-8）

        Raises:
            SourceNotFoundError: 文件不存在或不可读
            ContentDecodeError: 内容不是有效的 UTF-8
        """
        ...

    @abstractmethod
    def read_binary(self, path: str) -> bytes:
        """
        读取二进制文件

        Raises:
            SourceNotFoundError: 文件不存在或不可读
        """
        ...

    @abstractmethod
    def write_text(self, path: str, content: str) -> None:
        """
        写入文本文件（UTF-8），父目录需已存在

        Raises:
            DestinationNotWritableError: 目标不可写
        """
        ...

    @abstractmethod
    def write_binary(self, path: str, content: bytes) -> None:
        """写入二进制文件"""
        ...

    @abstractmethod
    def copy(self, source: str, destination: str) -> None:
        """
        复制文件（覆盖目标）

        Raises:
            SourceNotFoundError: 源文件不存在
            DestinationNotWritableError: 目标不可写
        """
        ...

    @abstractmethod
    def mkdir_all(self, path: str) -> None:
        """递归创建目录（已存在时不报错）"""
        ...

    @abstractmethod
    def is_absolute(self, path: str) -> bool:
        """是否为绝对路径"""
        ...


# ============================================================================
# 代码生成接口
# ============================================================================

class ICodeGenerator(ABC):
    """事件代码生成器接口 - 将场景/外部事件表翻译为可执行代码"""

    @abstractmethod
    def generate(self, project: Project, unit: CodeUnit) -> str:
        """
        生成单个场景或外部事件表的代码

        Args:
            project: 导出中的项目
            unit: 场景（Layout）或外部事件表（ExternalEvents）

        Returns:
            生成的源代码文本（相同输入必须得到相同输出）

        Raises:
            GenerationError: 生成失败
        """
        ...


# ============================================================================
# 目标平台打包接口
# ============================================================================

class ITargetPackager(ABC):
    """目标平台打包器接口"""

    @abstractmethod
    def validate(self, request: PackageRequest) -> None:
        """
        检查目标平台限制（在写出任何平台文件之前调用）

        Raises:
            ConstraintError: 违反平台限制
        """
        ...

    @abstractmethod
    def package(self, request: PackageRequest) -> list[str]:
        """
        生成目标平台文件（清单最后写出）

        Args:
            request: 打包请求（项目/导出目录/最终加载列表）

        Returns:
            写出的文件路径
        """
        ...


# ============================================================================
# 异常定义
# ============================================================================

class WebExportError(Exception):
    """基础异常"""

    kind = "error"


class GenerationError(WebExportError):
    """代码生成错误（场景/外部事件表）"""

    kind = "generation"


class IoError(WebExportError):
    """文件读写错误"""

    kind = "io"

    def __init__(self, message: str, path: str | None = None):
        super().__init__(message)
        self.path = path


class SourceNotFoundError(IoError):
    """源文件不存在或不可读"""


class DestinationNotWritableError(IoError):
    """目标不可写"""


class ContentDecodeError(IoError):
    """文本文件不是有效的 UTF-8"""


class PathConflictError(IoError):
    """不同来源的文件落在同一个导出路径"""


class MinifyError(IoError):
    """压缩合并失败"""


class TemplateError(WebExportError):
    """模板文件不可读"""

    kind = "template"


class ConfigError(WebExportError):
    """调用方提供了矛盾的配置"""

    kind = "config"


class ConstraintError(WebExportError):
    """违反目标平台限制（包大小/文件数/域名）"""

    kind = "constraint"


class ExportCancelledError(WebExportError):
    """导出被取消"""

    kind = "cancelled"
