"""
配置层 - 加载导出规范与运行期配置

职责：
- 加载 export_spec.yaml（加载顺序表/占位符/模板/平台限制）
- 加载 webexport.yaml（运行期参数，可选）
- 提供类型安全的配置访问接口
"""

from .runtime_config import RuntimeConfig, get_config, reload_config
from .spec_loader import ExportSpec, SpecLoader, load_spec

__all__ = [
    "SpecLoader",
    "ExportSpec",
    "load_spec",
    "RuntimeConfig",
    "get_config",
    "reload_config",
]
