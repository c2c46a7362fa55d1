"""
运行期配置 - 读取 webexport.yaml（可选）

职责：
- 加载并发/压缩器/日志/路径等运行参数
- 环境变量覆盖（WEBEXPORT_ 前缀，嵌套字段用 __ 分隔）
- 配置文件中的相对路径按文件所在目录解析
"""

from __future__ import annotations

from pathlib import Path

import yaml
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings

from ..interfaces import ConfigError


class ConcurrencyConfig(BaseModel):
    """并发配置"""

    max_workers: int = 4


class MinifierConfig(BaseModel):
    """压缩器配置"""

    engine: str = "rjsmin"  # rjsmin | closure
    java_exe: str = "java"
    closure_jar: str = ""
    timeout_sec: int = 300


class PathsConfig(BaseModel):
    """路径配置"""

    runtime_root: str = ""
    code_output_dir: str | None = None  # 为空时直接写入导出目录


class LoggingConfig(BaseModel):
    """日志配置"""

    log_level: str = "INFO"
    log_format: str = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class RuntimeConfig(BaseSettings):
    """运行期配置（支持环境变量覆盖）"""

    concurrency: ConcurrencyConfig = Field(default_factory=ConcurrencyConfig)
    minifier: MinifierConfig = Field(default_factory=MinifierConfig)
    paths: PathsConfig = Field(default_factory=PathsConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = {
        "env_prefix": "WEBEXPORT_",
        "env_nested_delimiter": "__",
    }

    @classmethod
    def from_yaml(cls, yaml_path: str | Path) -> RuntimeConfig:
        """
        从 YAML 文件加载配置（文件不存在时使用默认值）

        文件格式：顶层 export 下按 concurrency / minifier / paths / logging 分节；
        文件中给出的值优先于环境变量
        """
        path = Path(yaml_path)
        if not path.exists():
            return cls()

        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

        sections = data.get("export") or {}
        unknown = set(sections) - set(cls.model_fields)
        if unknown:
            raise ConfigError(f"未知的配置节: {sorted(unknown)}")

        config = cls(**{name: values for name, values in sections.items() if values})
        config._resolve_paths(base_dir=path.parent)
        return config

    def _resolve_paths(self, base_dir: Path) -> None:
        """相对路径按配置文件所在目录解析"""
        for section, key in _PATH_FIELDS:
            owner = getattr(self, section)
            value = getattr(owner, key)
            if value and not Path(value).is_absolute():
                setattr(owner, key, (base_dir / value).resolve().as_posix())


# 按配置文件目录解析的路径字段
_PATH_FIELDS = (
    ("paths", "runtime_root"),
    ("paths", "code_output_dir"),
    ("minifier", "closure_jar"),
)

_config: RuntimeConfig | None = None

DEFAULT_CONFIG_PATH = Path("webexport.yaml")


def get_config() -> RuntimeConfig:
    """全局配置（首次调用时加载当前目录的 webexport.yaml）"""
    global _config
    if _config is None:
        _config = RuntimeConfig.from_yaml(DEFAULT_CONFIG_PATH)
    return _config


def reload_config(yaml_path: str | Path | None = None) -> RuntimeConfig:
    global _config
    _config = RuntimeConfig.from_yaml(yaml_path or DEFAULT_CONFIG_PATH)
    return _config
